from .errors import Conflict, Internal, InvalidArgument, InventoryError, NotFound
from .purchases import post_purchase
from .reorder import refresh_reorder_entry, sync_order_sheet
from .returns import post_return
from .sales import post_sale

__all__ = [
    "Conflict",
    "Internal",
    "InvalidArgument",
    "InventoryError",
    "NotFound",
    "post_purchase",
    "post_return",
    "post_sale",
    "refresh_reorder_entry",
    "sync_order_sheet",
]
