"""Keep the order sheet in step with item stock levels.

An item whose quantity is at or below its alert threshold (with a threshold
above zero) has exactly one pending order-sheet entry asking for
``max(1, alert_quantity - quantity)`` units.  Items above the threshold have
no entry at all.  Recomputing an entry that already matches is a no-op.
"""

from __future__ import annotations

import logging

from django.apps import apps
from django.db import transaction

__all__ = [
    "refresh_reorder_entry",
    "required_quantity_for",
    "sync_order_sheet",
]

logger = logging.getLogger(__name__)


def required_quantity_for(quantity: int, alert_quantity: int) -> int:
    return max(1, alert_quantity - quantity)


def refresh_reorder_entry(item) -> str:
    """Bring the order-sheet entry for ``item`` in line with its stock.

    ``item`` must carry current ``quantity`` and ``alert_quantity`` values.
    Returns ``"created"``, ``"updated"``, ``"removed"`` or ``"unchanged"``.
    """

    entry_model = apps.get_model("inventory", "OrderSheetEntry")

    if not (item.alert_quantity > 0 and item.quantity <= item.alert_quantity):
        removed, _ = entry_model.objects.filter(item_id=item.pk).delete()
        if removed:
            logger.debug("Removed order sheet entry for item %s", item.pk)
            return "removed"
        return "unchanged"

    required = required_quantity_for(item.quantity, item.alert_quantity)
    entry = entry_model.objects.filter(item_id=item.pk).first()

    if entry is None:
        entry_model.objects.create(
            item_id=item.pk,
            required_quantity=required,
            current_quantity=item.quantity,
            status=entry_model.STATUS_PENDING,
        )
        logger.info(
            "Item %s is low on stock (%s <= %s); queued %s for reorder",
            item.pk,
            item.quantity,
            item.alert_quantity,
            required,
        )
        return "created"

    if (
        entry.required_quantity == required
        and entry.current_quantity == item.quantity
        and entry.status == entry_model.STATUS_PENDING
    ):
        return "unchanged"

    entry.required_quantity = required
    entry.current_quantity = item.quantity
    entry.status = entry_model.STATUS_PENDING
    entry.save(update_fields=["required_quantity", "current_quantity", "status", "updated_at"])
    return "updated"


def sync_order_sheet() -> dict[str, int]:
    """Recompute the order-sheet entry of every item in the catalog."""

    item_model = apps.get_model("inventory", "Item")
    counts = {"created": 0, "updated": 0, "removed": 0, "unchanged": 0}

    with transaction.atomic():
        for item in item_model.objects.only("id", "quantity", "alert_quantity").iterator():
            counts[refresh_reorder_entry(item)] += 1

    if counts["created"] or counts["updated"] or counts["removed"]:
        logger.info("Order sheet synchronised: %s", counts)
    return counts
