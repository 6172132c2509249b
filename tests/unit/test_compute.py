"""Unit tests for invoice computation.

Tests cover:
- Line amounts, subtotal, tax and total
- Left-to-right summation invariants
- Recomputation after line item changes
- Standalone totals for previews
"""

import random
from functools import reduce
from operator import add

import pytest

from invoicing.engine.compute import compute_invoice, compute_totals, recompute_invoice
from invoicing.engine.schema import (
    Business,
    Client,
    ComputedTotals,
    InvoiceDraft,
    InvoiceHeader,
    LineItem,
)


def make_draft(items: list[tuple[float, float]], tax_rate: float | None = None) -> InvoiceDraft:
    return InvoiceDraft(
        business=Business(name="Test Business", address="123 Test St", email="test@example.com"),
        client=Client(name="Test Client", address="456 Client St"),
        header=InvoiceHeader(
            invoice_number="INV-001",
            issue_date="2025-01-15",
            currency="EUR",
            tax_rate=tax_rate,
        ),
        line_items=tuple(
            LineItem(description=f"Item {n}", quantity=qty, unit_price=price)
            for n, (qty, price) in enumerate(items)
        ),
    )


@pytest.fixture
def scenario_draft() -> InvoiceDraft:
    """EUR invoice with 19% tax and three items."""
    return make_draft([(10, 150), (25, 120), (1, 234.50)], tax_rate=0.19)


def test_compute_scenario_totals(scenario_draft: InvoiceDraft) -> None:
    """Test amounts and totals for a typical invoice."""
    result = compute_invoice(scenario_draft)

    assert result.computed.line_item_amounts == (1500, 3000, 234.50)
    assert result.computed.subtotal == 4734.50
    assert result.computed.tax_amount == pytest.approx(899.555)
    assert result.computed.total == pytest.approx(5634.055)


def test_compute_keeps_draft_fields(scenario_draft: InvoiceDraft) -> None:
    """Test that the computed invoice carries the draft unchanged."""
    result = compute_invoice(scenario_draft)

    assert result.business == scenario_draft.business
    assert result.header == scenario_draft.header
    assert result.line_items == scenario_draft.line_items
    assert result.to_draft() == scenario_draft


def test_compute_without_tax_rate() -> None:
    """Test that no tax rate means zero tax and total equal to subtotal."""
    result = compute_invoice(make_draft([(2, 100)]))

    assert result.computed.tax_amount == 0
    assert result.computed.total == result.computed.subtotal == 200


def test_compute_with_zero_tax_rate() -> None:
    """Test an explicit zero tax rate."""
    result = compute_invoice(make_draft([(3, 33.33)], tax_rate=0))

    assert result.computed.tax_amount == 0
    assert result.computed.total == result.computed.subtotal


def test_compute_does_not_round() -> None:
    """Test that full floating-point precision is kept."""
    result = compute_invoice(make_draft([(3, 0.1)], tax_rate=0.07))

    assert result.computed.line_item_amounts == (3 * 0.1,)
    assert result.computed.subtotal == 0.30000000000000004
    assert result.computed.tax_amount == 0.30000000000000004 * 0.07


def test_compute_is_deterministic(scenario_draft: InvoiceDraft) -> None:
    """Test that repeated computation yields identical totals."""
    first = compute_invoice(scenario_draft)
    second = compute_invoice(scenario_draft)

    assert first.computed == second.computed
    assert first.computed.total.hex() == second.computed.total.hex()


@pytest.mark.parametrize("count", [1, 2, 7, 50, 100])
def test_subtotal_is_left_to_right_sum(count: int) -> None:
    """Test subtotal == running sum of amounts, and total == subtotal + tax."""
    rng = random.Random(count)
    items = [(rng.uniform(0.01, 50), rng.uniform(0, 999.99)) for _ in range(count)]

    result = compute_invoice(make_draft(items, tax_rate=0.19))
    totals = result.computed

    assert len(totals.line_item_amounts) == count
    assert totals.subtotal == reduce(add, totals.line_item_amounts, 0.0)
    assert totals.tax_amount == totals.subtotal * 0.19
    assert totals.total == totals.subtotal + totals.tax_amount


def test_subtotal_follows_item_order() -> None:
    """Test that summation order is the line item order."""
    result = compute_invoice(make_draft([(1, 1e16), (1, 1.0), (1, -1e16 + 2)]))

    expected = 0.0
    for amount in result.computed.line_item_amounts:
        expected += amount
    assert result.computed.subtotal == expected


def test_recompute_after_line_item_change(scenario_draft: InvoiceDraft) -> None:
    """Test that totals are regenerated after replacing line items."""
    computed = compute_invoice(scenario_draft)
    edited = computed.model_copy(
        update={"line_items": (LineItem(description="Only item", quantity=2, unit_price=50),)}
    )

    result = recompute_invoice(edited)

    assert result.computed.line_item_amounts == (100,)
    assert result.computed.subtotal == 100
    assert result.computed.tax_amount == pytest.approx(19)
    assert result.computed.total == pytest.approx(119)


def test_recompute_unchanged_invoice(scenario_draft: InvoiceDraft) -> None:
    """Test that recomputing an untouched invoice gives the same totals."""
    computed = compute_invoice(scenario_draft)

    assert recompute_invoice(computed).computed == computed.computed


def test_compute_totals_from_mappings() -> None:
    """Test preview totals from bare quantity/unitPrice mappings."""
    totals = compute_totals([{"quantity": 2, "unitPrice": 10}, {"quantity": 1, "unitPrice": 5}], 0.1)

    assert isinstance(totals, ComputedTotals)
    assert totals.line_item_amounts == (20, 5)
    assert totals.subtotal == 25
    assert totals.tax_amount == pytest.approx(2.5)
    assert totals.total == pytest.approx(27.5)


def test_compute_totals_from_line_items() -> None:
    """Test preview totals from LineItem models with default tax rate."""
    totals = compute_totals([LineItem(description="A", quantity=4, unit_price=2.5)])

    assert totals.subtotal == 10
    assert totals.tax_amount == 0
    assert totals.total == 10


def test_compute_totals_empty() -> None:
    """Test preview totals with no items."""
    totals = compute_totals([])

    assert totals.line_item_amounts == ()
    assert totals.subtotal == 0
    assert totals.total == 0
