"""Return posting.

Seller-direction returns bring goods back from a customer: stock goes up and a
return amount is recorded, which may optionally be posted to the seller's
ledger.  Buyer-direction returns send goods back to a supplier: stock goes down
and nothing is posted to any ledger.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Mapping

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..models import BuyerParty, Item, ReturnTransaction, SellerParty
from .errors import Conflict, InvalidArgument, NotFound
from .ledger import apply_seller_movement, to_money
from .reorder import refresh_reorder_entry
from .sales import lock_items, normalise_lines

__all__ = ["post_return"]

logger = logging.getLogger(__name__)

PARTY_MODELS = {
    ReturnTransaction.PARTY_SELLER: SellerParty,
    ReturnTransaction.PARTY_BUYER: BuyerParty,
}


def post_return(
    *,
    party_type: str,
    party_id: int,
    lines: Iterable[Mapping],
    reason: str = "",
    adjust_balance: bool = False,
    return_date=None,
    user=None,
) -> list[ReturnTransaction]:
    """Post one return row per line and return them in request order.

    Lines carry ``item_id``, ``quantity`` and optionally ``return_amount`` and
    ``reason``.  All lines succeed or none do.
    """

    party_model = PARTY_MODELS.get(party_type)
    if party_model is None:
        raise InvalidArgument("party_type must be either 'seller' or 'buyer'.")

    lines = normalise_lines(lines)
    for line in lines:
        amount = line.get("return_amount")
        if amount not in (None, "") and to_money(amount) < 0:
            raise InvalidArgument("Return amount cannot be negative.")

    is_seller = party_type == ReturnTransaction.PARTY_SELLER

    with transaction.atomic():
        try:
            party = party_model.objects.select_for_update().get(pk=party_id)
        except party_model.DoesNotExist:
            raise NotFound(f"{party_type.capitalize()} party {party_id} not found.")

        items = lock_items(line["item_id"] for line in lines)

        if not is_seller:
            for line in lines:
                item = items[line["item_id"]]
                if item.quantity < line["quantity"]:
                    logger.warning(
                        "Rejected buyer return to %s: item %s has %s in stock, %s requested",
                        party.pk,
                        item.pk,
                        item.quantity,
                        line["quantity"],
                    )
                    raise Conflict(
                        f"Insufficient stock for {item.product_name}. "
                        f"Available: {item.quantity}, Requested: {line['quantity']}"
                    )

        posted = []
        total_amount = Decimal("0.00")
        date = return_date or timezone.now()
        now = timezone.now()

        for line in lines:
            item = items[line["item_id"]]
            quantity = line["quantity"]

            if is_seller:
                amount = line.get("return_amount")
                if amount in (None, ""):
                    amount = item.sale_rate * quantity
                amount = to_money(amount)
                stock_change = F("quantity") + quantity
            else:
                amount = Decimal("0.00")
                stock_change = F("quantity") - quantity

            posted.append(
                ReturnTransaction.objects.create(
                    party_type=party_type,
                    seller_party=party if is_seller else None,
                    buyer_party=None if is_seller else party,
                    item=item,
                    quantity=quantity,
                    return_amount=amount,
                    reason=line.get("reason") or reason or "",
                    balance_adjusted=bool(is_seller and adjust_balance),
                    return_date=date,
                    created_by=user,
                )
            )
            total_amount += amount

            Item.objects.filter(pk=item.pk).update(quantity=stock_change, updated_at=now)
            item.refresh_from_db(fields=["quantity"])
            refresh_reorder_entry(item)

        if is_seller and adjust_balance:
            # Posted with the same sign as a sale's debit to the seller.
            apply_seller_movement(party.pk, total_amount)

    logger.info(
        "Posted %s return for party %s: %s line(s), amount %s%s",
        party_type,
        party.pk,
        len(posted),
        total_amount,
        " (ledger adjusted)" if is_seller and adjust_balance else "",
    )
    return posted
