"""Pure money arithmetic for sale invoices.

Nothing in here touches the database: the sale posting service feeds plain
values in and persists what comes out, which keeps the rounding rules in one
place and easy to test.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from .errors import InvalidArgument
from .ledger import MONEY_QUANTIZER, to_money

__all__ = [
    "InvoiceTotals",
    "LinePricing",
    "price_line",
    "summarize_invoice",
]

HUNDRED = Decimal("100")
ZERO = Decimal("0.00")

PAYMENT_FULLY_PAID = "fully_paid"
PAYMENT_PARTIALLY_PAID = "partially_paid"


@dataclass(frozen=True)
class LinePricing:
    gross: Decimal
    discount: Decimal
    amount: Decimal
    taxable_value: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    discount: Decimal
    tax_amount: Decimal
    invoice_amount: Decimal
    previous_balance_paid: Decimal
    grand_total: Decimal
    paid_amount: Decimal
    outstanding: Decimal
    applied_to_invoice: Decimal
    invoice_residual: Decimal

    @property
    def seller_balance_delta(self) -> Decimal:
        """Net change to the seller's running balance for this invoice."""

        return self.invoice_residual - self.previous_balance_paid


def _to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def price_line(
    quantity: int,
    sale_rate,
    *,
    discount=None,
    discount_percentage=None,
    tax_rate=None,
    with_gst: bool = False,
) -> LinePricing:
    """Price a single sale line.

    A non-null ``discount_percentage`` wins over a flat ``discount``.  The
    discount is clamped to ``[0, gross]``.  In GST mode the after-discount
    amount is treated as tax inclusive and split into taxable value and tax.
    """

    gross = to_money(Decimal(quantity) * _to_decimal(sale_rate))

    if discount_percentage is not None and discount_percentage != "":
        line_discount = to_money(gross * _to_decimal(discount_percentage) / HUNDRED)
    else:
        line_discount = to_money(discount)
    line_discount = min(max(line_discount, ZERO), gross)

    amount = gross - line_discount

    rate = _to_decimal(tax_rate)
    if with_gst and rate > 0:
        taxable_value = (amount / (Decimal("1") + rate / HUNDRED)).quantize(
            MONEY_QUANTIZER, rounding=ROUND_HALF_UP
        )
        tax_amount = amount - taxable_value
    else:
        taxable_value = amount
        tax_amount = ZERO

    return LinePricing(
        gross=gross,
        discount=line_discount,
        amount=amount,
        taxable_value=taxable_value,
        tax_amount=tax_amount,
    )


def summarize_invoice(
    lines: Sequence[LinePricing],
    *,
    with_gst: bool,
    payment_status: str,
    paid_amount=None,
    previous_balance_paid=None,
) -> InvoiceTotals:
    """Aggregate priced lines into invoice totals and split the payment."""

    if payment_status not in (PAYMENT_FULLY_PAID, PAYMENT_PARTIALLY_PAID):
        raise InvalidArgument(f"Unknown payment status '{payment_status}'.")

    previous = to_money(previous_balance_paid)
    if previous < 0:
        raise InvalidArgument("Previous balance paid cannot be negative.")

    subtotal = sum((line.taxable_value for line in lines), ZERO)
    discount = sum((line.discount for line in lines), ZERO)
    tax_amount = sum((line.tax_amount for line in lines), ZERO) if with_gst else ZERO
    invoice_amount = subtotal + tax_amount
    grand_total = invoice_amount + previous

    if payment_status == PAYMENT_FULLY_PAID:
        paid = grand_total
    else:
        if paid_amount is None or paid_amount == "":
            raise InvalidArgument("Paid amount is required for a partially paid sale.")
        paid = to_money(paid_amount)
        if paid < 0:
            raise InvalidArgument("Paid amount cannot be negative.")
        if paid > grand_total:
            raise InvalidArgument(
                f"Paid amount {paid} exceeds the grand total {grand_total}."
            )

    applied = max(ZERO, paid - previous)
    residual = max(ZERO, invoice_amount - applied)

    return InvoiceTotals(
        subtotal=subtotal,
        discount=discount,
        tax_amount=tax_amount,
        invoice_amount=invoice_amount,
        previous_balance_paid=previous,
        grand_total=grand_total,
        paid_amount=paid,
        outstanding=grand_total - paid,
        applied_to_invoice=applied,
        invoice_residual=residual,
    )
