"""Shared helpers for posting party ledger movements.

These helpers take explicit row-level locks before mutating a party's running
balance and use consistent rounding rules.  Amounts are expressed in the
system's base precision (two decimal places) and may be positive or negative
so callers can express debits and credits explicitly.  They are meant to run
inside the caller's ``transaction.atomic()`` block so a failed post rolls the
movement back together with everything else.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.apps import apps
from django.db import transaction

__all__ = [
    "MONEY_QUANTIZER",
    "apply_seller_movement",
    "to_money",
]

MONEY_QUANTIZER = Decimal("0.01")

Amount = Optional[Decimal | int | float | str]


def to_money(amount: Amount) -> Decimal:
    """Normalise *amount* to a Decimal with the project's rounding rules."""

    if amount in (None, ""):
        return Decimal("0.00")
    if isinstance(amount, Decimal):
        value = amount
    else:
        value = Decimal(str(amount))
    return value.quantize(MONEY_QUANTIZER, rounding=ROUND_HALF_UP)


def _adjust_party(
    model_name: str,
    pk: Optional[int],
    balance_delta: Decimal,
    paid_delta: Decimal = Decimal("0.00"),
):
    """Shift ``balance_amount`` and ``paid_amount`` on a party row.

    Returns the updated party, or ``None`` when there was nothing to do.
    """

    if not pk:
        return None

    if not balance_delta and not paid_delta:
        return None

    model = apps.get_model("inventory", model_name)

    with transaction.atomic():
        party = model.objects.select_for_update().get(pk=pk)
        update_fields = []
        if balance_delta:
            current = Decimal(party.balance_amount or 0)
            party.balance_amount = (current + balance_delta).quantize(
                MONEY_QUANTIZER, rounding=ROUND_HALF_UP
            )
            update_fields.append("balance_amount")
        if paid_delta:
            current = Decimal(party.paid_amount or 0)
            party.paid_amount = (current + paid_delta).quantize(
                MONEY_QUANTIZER, rounding=ROUND_HALF_UP
            )
            update_fields.append("paid_amount")
        update_fields.append("updated_at")
        party.save(update_fields=update_fields)
        return party


def apply_seller_movement(seller_id: Optional[int], amount: Amount, paid: Amount = None):
    """Apply a seller balance movement and, optionally, a payment received."""

    return _adjust_party("SellerParty", seller_id, to_money(amount), to_money(paid))

