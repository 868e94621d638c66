"""Error taxonomy raised by the posting services.

Every error is a DRF ``APIException`` so views can let them propagate and the
project exception handler renders them with the matching status code.
"""

from rest_framework import status
from rest_framework.exceptions import APIException

__all__ = [
    "Conflict",
    "Internal",
    "InvalidArgument",
    "InventoryError",
    "NotFound",
]


class InventoryError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "An internal error occurred."
    default_code = "internal"


class InvalidArgument(InventoryError):
    """Malformed or out-of-range input; nothing was written."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid argument."
    default_code = "invalid_argument"


class NotFound(InventoryError):
    """A referenced item or party does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class Conflict(InventoryError):
    """The request is valid but clashes with current state, e.g. stock levels."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict with current state."
    default_code = "conflict"


class Internal(InventoryError):
    """Storage or connectivity failure."""
