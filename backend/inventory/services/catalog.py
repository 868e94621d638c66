"""Catalog rules shared by the item API and purchase posting."""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Q

from ..models import ALLOWED_TAX_RATES, DEFAULT_TAX_RATE, Item
from .errors import InvalidArgument

__all__ = [
    "check_product_code",
    "check_rates",
    "find_duplicate_item",
    "normalise_tax_rate",
]


def normalise_tax_rate(value) -> Decimal:
    """Return ``value`` as one of the supported GST slabs, else the default."""

    if value in (None, ""):
        return DEFAULT_TAX_RATE
    try:
        rate = Decimal(str(value))
    except ArithmeticError:
        return DEFAULT_TAX_RATE
    if rate in ALLOWED_TAX_RATES:
        return rate
    return DEFAULT_TAX_RATE


def check_rates(sale_rate, purchase_rate, label: str = "item") -> None:
    if sale_rate is None or purchase_rate is None:
        return
    if Decimal(str(sale_rate)) < Decimal(str(purchase_rate)):
        raise InvalidArgument(
            f"Sale rate must be greater than or equal to purchase rate for {label}."
        )


def find_duplicate_item(product_name, product_code=None, brand=None, exclude_pk=None):
    """Return an item with the same name, code and brand, if any.

    Blank codes and brands are treated as missing, and two missing values
    count as equal.
    """

    queryset = Item.objects.filter(product_name__iexact=(product_name or "").strip())
    if product_code:
        queryset = queryset.filter(product_code=product_code)
    else:
        queryset = queryset.filter(Q(product_code__isnull=True) | Q(product_code=""))
    if brand:
        queryset = queryset.filter(brand__iexact=brand)
    else:
        queryset = queryset.filter(Q(brand__isnull=True) | Q(brand=""))
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return queryset.first()


def check_product_code(product_code, exclude_pk=None) -> None:
    """Reject a product code that already belongs to another item."""

    if not product_code:
        return
    clash = Item.objects.filter(product_code=product_code)
    if exclude_pk is not None:
        clash = clash.exclude(pk=exclude_pk)
    owner = clash.first()
    if owner is not None:
        raise InvalidArgument(
            f"Product code {product_code} is already used by {owner.product_name}."
        )
