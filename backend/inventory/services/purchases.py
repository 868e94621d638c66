"""Purchase posting: receive stock from a buyer party.

Lines either top up an existing item (``item_id`` set) or describe a new
catalog item.  Every line writes a ``PurchaseTransaction`` row and the whole
batch is atomic.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..models import BuyerParty, Item, ItemHistory, PurchaseTransaction
from .catalog import check_product_code, check_rates, find_duplicate_item, normalise_tax_rate
from .errors import InvalidArgument, NotFound
from .ledger import to_money
from .reorder import refresh_reorder_entry

__all__ = ["post_purchase"]

logger = logging.getLogger(__name__)

CATALOG_FIELDS = (
    "product_code",
    "brand",
    "hsn_number",
    "rack_number",
    "remarks",
    "alert_quantity",
)


def _clean_line(index: int, line: Mapping) -> dict:
    try:
        quantity = int(line.get("quantity"))
    except (TypeError, ValueError):
        raise InvalidArgument(f"Line {index} has no valid quantity.")
    if quantity <= 0:
        raise InvalidArgument(f"Line {index} quantity must be greater than zero.")

    if line.get("purchase_rate") in (None, ""):
        raise InvalidArgument(f"Line {index} needs a purchase rate.")
    purchase_rate = to_money(line["purchase_rate"])
    if purchase_rate < 0:
        raise InvalidArgument(f"Line {index} purchase rate cannot be negative.")

    item_id = line.get("item_id")
    if item_id in (None, ""):
        if not (line.get("product_name") or "").strip():
            raise InvalidArgument(f"Line {index} needs either an item_id or a product_name.")
        item_id = None
    else:
        try:
            item_id = int(item_id)
        except (TypeError, ValueError):
            raise InvalidArgument(f"Line {index} has no valid item_id.")

    sale_rate = line.get("sale_rate")
    sale_rate = None if sale_rate in (None, "") else to_money(sale_rate)

    return {**line, "item_id": item_id, "quantity": quantity, "purchase_rate": purchase_rate, "sale_rate": sale_rate}


def post_purchase(
    *,
    buyer_party_id: int,
    lines: Iterable[Mapping],
    transaction_date=None,
    user=None,
) -> list[PurchaseTransaction]:
    lines = [_clean_line(index, line) for index, line in enumerate(lines, start=1)]
    if not lines:
        raise InvalidArgument("Buyer party and items are required.")

    item_ids = [line["item_id"] for line in lines if line["item_id"] is not None]
    if len(item_ids) != len(set(item_ids)):
        raise InvalidArgument("Each existing item may appear only once per purchase.")

    with transaction.atomic():
        try:
            buyer = BuyerParty.objects.get(pk=buyer_party_id)
        except BuyerParty.DoesNotExist:
            raise NotFound(f"Buyer party {buyer_party_id} not found.")

        items = Item.objects.select_for_update().in_bulk(item_ids)
        for item_id in item_ids:
            if item_id not in items:
                raise NotFound(f"Item {item_id} not found.")

        posted = []
        date = transaction_date or timezone.now()

        for line in lines:
            if line["item_id"] is not None:
                item = items[line["item_id"]]
                sale_rate = line["sale_rate"] if line["sale_rate"] is not None else item.sale_rate
                check_rates(sale_rate, line["purchase_rate"], item.product_name)
                check_product_code(line.get("product_code"), exclude_pk=item.pk)

                for field in CATALOG_FIELDS:
                    if line.get(field) not in (None, ""):
                        setattr(item, field, line[field])
                if "tax_rate" in line:
                    item.tax_rate = normalise_tax_rate(line["tax_rate"])
                item.sale_rate = sale_rate
                item.purchase_rate = line["purchase_rate"]
                item.updated_by = user
                item.save()
                Item.objects.filter(pk=item.pk).update(quantity=F("quantity") + line["quantity"])
                item.refresh_from_db(fields=["quantity"])
                ItemHistory.record(item, "updated", user)
            else:
                name = line["product_name"].strip()
                if line["sale_rate"] is None:
                    raise InvalidArgument(f"A sale rate is required for new item {name}.")
                check_rates(line["sale_rate"], line["purchase_rate"], name)
                if find_duplicate_item(name, line.get("product_code"), line.get("brand")):
                    raise InvalidArgument(
                        f"A product with the same Product Name, Product Code, and Brand already exists: {name}."
                    )
                check_product_code(line.get("product_code"))
                item = Item.objects.create(
                    product_name=name,
                    product_code=line.get("product_code") or None,
                    brand=line.get("brand") or None,
                    hsn_number=line.get("hsn_number") or None,
                    tax_rate=normalise_tax_rate(line.get("tax_rate")),
                    sale_rate=line["sale_rate"],
                    purchase_rate=line["purchase_rate"],
                    quantity=line["quantity"],
                    alert_quantity=int(line.get("alert_quantity") or 0),
                    rack_number=line.get("rack_number") or None,
                    remarks=line.get("remarks") or None,
                    created_by=user,
                    updated_by=user,
                )
                ItemHistory.record(item, "created", user)

            posted.append(
                PurchaseTransaction.objects.create(
                    buyer_party=buyer,
                    item=item,
                    quantity=line["quantity"],
                    purchase_rate=line["purchase_rate"],
                    total_amount=to_money(line["purchase_rate"] * line["quantity"]),
                    transaction_date=date,
                    created_by=user,
                )
            )
            refresh_reorder_entry(item)

    logger.info("Posted purchase from buyer %s: %s line(s)", buyer.pk, len(posted))
    return posted
