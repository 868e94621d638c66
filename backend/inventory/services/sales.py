"""Sale posting.

``post_sale`` turns a seller, a list of lines and payment instructions into a
persisted sale.  Stock, the seller ledger and the order sheet are updated in
the same database transaction; when anything fails nothing is written.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..models import Item, SaleItem, SaleTransaction, SellerParty
from .errors import Conflict, InvalidArgument, NotFound
from .ledger import apply_seller_movement, to_money
from .pricing import price_line, summarize_invoice
from .reorder import refresh_reorder_entry

__all__ = ["next_bill_number", "normalise_lines", "post_sale"]

logger = logging.getLogger(__name__)


def normalise_lines(lines: Iterable[Mapping], *, quantity_field: str = "quantity") -> list[dict]:
    """Validate the shape of posted lines before any database access.

    Item ids must be unique within one request and quantities must be positive
    integers; callers merge repeated items themselves.
    """

    normalised = []
    seen = set()
    for index, line in enumerate(lines, start=1):
        try:
            item_id = int(line["item_id"])
        except (KeyError, TypeError, ValueError):
            raise InvalidArgument(f"Line {index} has no valid item_id.")
        try:
            quantity = int(line[quantity_field])
        except (KeyError, TypeError, ValueError):
            raise InvalidArgument(f"Line {index} has no valid quantity.")
        if quantity <= 0:
            raise InvalidArgument(f"Line {index} quantity must be greater than zero.")
        if item_id in seen:
            raise InvalidArgument(
                f"Item {item_id} appears more than once; merge the quantities into one line."
            )
        seen.add(item_id)
        normalised.append({**line, "item_id": item_id, "quantity": quantity})

    if not normalised:
        raise InvalidArgument("At least one line item is required.")
    return normalised


def lock_items(item_ids: Iterable[int]) -> dict[int, Item]:
    """Lock the referenced item rows, raising ``NotFound`` for unknown ids."""

    item_ids = list(item_ids)
    items = Item.objects.select_for_update().in_bulk(item_ids)
    missing = [item_id for item_id in item_ids if item_id not in items]
    if missing:
        raise NotFound(f"Item {missing[0]} not found.")
    return items


def next_bill_number(now=None) -> str:
    """Return an unused ``BILL-<epoch ms>-<n>`` number, ``n`` counting from 1 per millisecond."""

    stamp = int((now or timezone.now()).timestamp() * 1000)
    sequence = 1
    bill_number = f"BILL-{stamp}-{sequence}"
    while SaleTransaction.objects.filter(bill_number=bill_number).exists():
        sequence += 1
        bill_number = f"BILL-{stamp}-{sequence}"
    return bill_number


def post_sale(
    *,
    seller_party_id: int,
    lines: Iterable[Mapping],
    payment_status: str,
    paid_amount=None,
    with_gst: bool = False,
    previous_balance_paid=None,
    transaction_date=None,
    user=None,
) -> SaleTransaction:
    """Post a sale atomically and return the saved ``SaleTransaction``.

    Each line needs ``item_id`` and ``quantity``; ``sale_rate`` defaults to the
    item's catalog rate and ``tax_rate`` to the item's tax rate.  Optional
    ``discount`` (flat) and ``discount_percentage`` follow the pricing rules in
    :mod:`inventory.services.pricing`.
    """

    lines = normalise_lines(lines)

    with transaction.atomic():
        try:
            seller = SellerParty.objects.select_for_update().get(pk=seller_party_id)
        except SellerParty.DoesNotExist:
            raise NotFound(f"Seller party {seller_party_id} not found.")

        items = lock_items(line["item_id"] for line in lines)

        for line in lines:
            item = items[line["item_id"]]
            if item.quantity < line["quantity"]:
                logger.warning(
                    "Rejected sale for seller %s: item %s has %s in stock, %s requested",
                    seller.pk,
                    item.pk,
                    item.quantity,
                    line["quantity"],
                )
                raise Conflict(
                    f"Insufficient stock for {item.product_name}. "
                    f"Available: {item.quantity}, Requested: {line['quantity']}"
                )

        priced = []
        for line in lines:
            item = items[line["item_id"]]
            sale_rate = line.get("sale_rate")
            if sale_rate is None:
                sale_rate = item.sale_rate
            sale_rate = to_money(sale_rate)
            tax_rate = line.get("tax_rate")
            if tax_rate is None:
                tax_rate = item.tax_rate
            if sale_rate < 0:
                raise InvalidArgument(f"Sale rate for {item.product_name} cannot be negative.")
            pricing = price_line(
                line["quantity"],
                sale_rate,
                discount=line.get("discount"),
                discount_percentage=line.get("discount_percentage"),
                tax_rate=tax_rate,
                with_gst=with_gst,
            )
            priced.append((line, item, sale_rate, tax_rate, pricing))

        totals = summarize_invoice(
            [pricing for *_, pricing in priced],
            with_gst=with_gst,
            payment_status=payment_status,
            paid_amount=paid_amount,
            previous_balance_paid=previous_balance_paid,
        )

        sale = SaleTransaction.objects.create(
            bill_number=next_bill_number(),
            seller_party=seller,
            transaction_date=transaction_date or timezone.now(),
            with_gst=with_gst,
            subtotal=totals.subtotal,
            discount=totals.discount,
            tax_amount=totals.tax_amount,
            invoice_amount=totals.invoice_amount,
            previous_balance_paid=totals.previous_balance_paid,
            total_amount=totals.grand_total,
            paid_amount=totals.paid_amount,
            balance_amount=totals.outstanding,
            payment_status=payment_status,
            created_by=user,
        )

        now = timezone.now()
        for line, item, sale_rate, tax_rate, pricing in priced:
            has_percentage = line.get("discount_percentage") not in (None, "")
            SaleItem.objects.create(
                sale=sale,
                item=item,
                quantity=line["quantity"],
                sale_rate=sale_rate,
                discount_type=SaleItem.DISCOUNT_PERCENTAGE if has_percentage else SaleItem.DISCOUNT_AMOUNT,
                discount_percentage=line.get("discount_percentage") if has_percentage else None,
                discount=pricing.discount,
                tax_rate=tax_rate if with_gst else 0,
                taxable_value=pricing.taxable_value,
                tax_amount=pricing.tax_amount,
                total_amount=pricing.amount,
            )
            Item.objects.filter(pk=item.pk).update(
                quantity=F("quantity") - line["quantity"],
                updated_at=now,
            )
            item.refresh_from_db(fields=["quantity"])
            refresh_reorder_entry(item)

        apply_seller_movement(seller.pk, totals.seller_balance_delta, totals.paid_amount)

    logger.info(
        "Posted sale %s for seller %s: %s line(s), total %s, paid %s",
        sale.bill_number,
        seller.pk,
        len(priced),
        totals.grand_total,
        totals.paid_amount,
    )
    return sale
