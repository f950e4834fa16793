"""
Invoice aggregation and reconciliation.

The server recomputes subtotal, tax and total from the line items and only
accepts an invoice whose client-submitted totals agree on all three. The
computed values are the ones persisted; the submitted ones exist only to be
checked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..errors import TotalsMismatch
from .line_item_service import LineItem
from .money import round2, to_number, within_tolerance


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    tax: float
    total: float

    def as_dict(self) -> dict:
        return {"sub_total": self.subtotal, "tax_amount": self.tax, "total_amount": self.total}


def aggregate(items: Iterable[LineItem], discount: float) -> InvoiceTotals:
    """
    subtotal = sum(unit_price * qty)
    tax      = sum(unit_price * qty * tax / 100)
    total    = (subtotal + tax) - discount% of (subtotal + tax)

    All three are rounded to cents.
    """
    subtotal = 0.0
    tax = 0.0
    for item in items:
        amount = item.line_amount
        subtotal += amount
        tax += amount * (item.tax / 100)

    gross = subtotal + tax
    total = gross - (discount / 100) * gross

    return InvoiceTotals(subtotal=round2(subtotal), tax=round2(tax), total=round2(total))


def submitted_totals(payload: dict) -> InvoiceTotals:
    return InvoiceTotals(
        subtotal=round2(to_number(payload.get("sub_total"))),
        tax=round2(to_number(payload.get("tax_amount"))),
        total=round2(to_number(payload.get("total_amount"))),
    )


def mismatched_fields(computed: InvoiceTotals, submitted: InvoiceTotals) -> list[str]:
    pairs = (
        ("sub_total", computed.subtotal, submitted.subtotal),
        ("tax_amount", computed.tax, submitted.tax),
        ("total_amount", computed.total, submitted.total),
    )
    return [name for name, ours, theirs in pairs if not within_tolerance(ours, theirs)]


def totals_agree(computed: InvoiceTotals, submitted: InvoiceTotals) -> bool:
    """All three pairs are within tolerance."""
    return not mismatched_fields(computed, submitted)


def totals_disagree(computed: InvoiceTotals, submitted: InvoiceTotals) -> bool:
    """At least one pair is out of tolerance."""
    return not totals_agree(computed, submitted)


def reconcile(computed: InvoiceTotals, submitted: InvoiceTotals) -> None:
    if totals_disagree(computed, submitted):
        raise TotalsMismatch(
            "Totals don't match calculated values. Please check your calculations.",
            details={
                "mismatched": mismatched_fields(computed, submitted),
                "calculated": computed.as_dict(),
                "submitted": submitted.as_dict(),
            },
        )
