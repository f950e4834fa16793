# Overview: Pytest coverage for invoice aggregation and total reconciliation.

import pytest

from cloudbill.errors import TotalsMismatch
from cloudbill.services.invoice_totals import (
    InvoiceTotals,
    aggregate,
    submitted_totals,
    mismatched_fields,
    totals_agree,
    totals_disagree,
    reconcile,
)
from cloudbill.services.line_item_service import LineItem


def _items():
    return [
        LineItem(sr_no=1, product_name="basmati rice", unit="kg", qty=2, unit_price=10, tax=10, total_price=20),
        LineItem(sr_no=2, product_name="sugar", unit="kg", qty=1, unit_price=5, tax=0, total_price=5),
    ]


class TestAggregate:
    def test_subtotal_tax_and_total(self):
        totals = aggregate(_items(), discount=0)
        assert totals == InvoiceTotals(subtotal=25.0, tax=2.0, total=27.0)

    def test_discount_applies_to_taxed_amount(self):
        totals = aggregate(_items(), discount=10)
        assert totals.subtotal == 25.0
        assert totals.tax == 2.0
        assert totals.total == 24.3

    def test_full_discount(self):
        assert aggregate(_items(), discount=100).total == 0.0

    def test_results_are_rounded_to_cents(self):
        items = [LineItem(sr_no=1, product_name="tea", unit=None, qty=3, unit_price=3.333, tax=18, total_price=10)]
        totals = aggregate(items, discount=0)
        assert totals.subtotal == 10.0
        assert totals.tax == 1.8
        assert totals.total == 11.8


class TestSubmittedTotals:
    def test_rounds_and_coerces(self):
        totals = submitted_totals({"sub_total": "25.004", "tax_amount": 1.999, "total_amount": None})
        assert totals == InvoiceTotals(subtotal=25.0, tax=2.0, total=0.0)


class TestReconcile:
    computed = InvoiceTotals(subtotal=25.0, tax=2.0, total=27.0)

    def test_all_three_agree(self):
        submitted = InvoiceTotals(subtotal=25.0, tax=2.0, total=27.0)
        assert totals_agree(self.computed, submitted)
        assert not totals_disagree(self.computed, submitted)
        reconcile(self.computed, submitted)

    @pytest.mark.parametrize("submitted, field", [
        (InvoiceTotals(subtotal=26.0, tax=2.0, total=27.0), "sub_total"),
        (InvoiceTotals(subtotal=25.0, tax=2.5, total=27.0), "tax_amount"),
        (InvoiceTotals(subtotal=25.0, tax=2.0, total=100.0), "total_amount"),
    ])
    def test_any_single_mismatch_disagrees(self, submitted, field):
        assert totals_disagree(self.computed, submitted)
        assert not totals_agree(self.computed, submitted)
        assert mismatched_fields(self.computed, submitted) == [field]

        with pytest.raises(TotalsMismatch) as exc:
            reconcile(self.computed, submitted)
        assert exc.value.details["mismatched"] == [field]

    def test_every_mismatch_is_reported(self):
        submitted = InvoiceTotals(subtotal=1.0, tax=1.0, total=1.0)
        assert mismatched_fields(self.computed, submitted) == ["sub_total", "tax_amount", "total_amount"]

    def test_drift_below_a_cent_agrees(self):
        submitted = InvoiceTotals(subtotal=25.001, tax=1.999, total=27.0)
        assert totals_agree(self.computed, submitted)
