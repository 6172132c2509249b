"""Unit tests for the validate -> compute -> format pipeline.

Tests cover:
- Successful processing with formatted and computed views
- Short-circuit on validation failure
- Processing pre-validated drafts
- End-to-end invoice scenarios
"""

from typing import Any

import pytest

from invoicing.engine.compute import compute_invoice
from invoicing.engine.pipeline import process_draft, process_invoice
from invoicing.engine.schema import FormatOptions, InvoiceDraft, IssueCode, ProcessResult
from invoicing.engine.validate import validate_draft


@pytest.fixture
def raw_invoice() -> dict[str, Any]:
    """Raw EUR invoice as it would arrive from JSON."""
    return {
        "business": {"name": "Test Business", "address": "123 Test St", "email": "test@example.com"},
        "client": {"name": "Test Client", "address": "456 Client St"},
        "header": {
            "invoiceNumber": "INV-001",
            "issueDate": "2025-01-15",
            "dueDate": "2025-02-15",
            "currency": "EUR",
            "taxRate": 0.19,
        },
        "lineItems": [
            {"description": "Consulting", "quantity": 10, "unitPrice": 150},
            {"description": "Development", "quantity": 25, "unitPrice": 120},
            {"description": "Expenses", "quantity": 1, "unitPrice": 234.50},
        ],
    }


def test_process_invoice_success(raw_invoice: dict[str, Any]) -> None:
    """Test that valid input yields both formatted and computed views."""
    result = process_invoice(raw_invoice)

    assert result.ok is True
    assert result.issues == ()
    assert result.invoice is not None
    assert result.computed is not None
    assert result.invoice.header.invoice_number == "INV-001"
    assert len(result.invoice.line_items) == 3


def test_process_invoice_applies_options(raw_invoice: dict[str, Any]) -> None:
    """Test that formatting options reach the formatter."""
    result = process_invoice(raw_invoice, FormatOptions(locale="en-US", date_format="long"))

    assert result.invoice is not None
    assert result.invoice.header.issue_date == "January 15, 2025"
    assert result.invoice.totals.subtotal == "€4,734.50"


def test_process_invoice_short_circuits(raw_invoice: dict[str, Any]) -> None:
    """Test that invalid input returns issues only."""
    raw_invoice["header"]["currency"] = "ABC"

    result = process_invoice(raw_invoice)

    assert result.ok is False
    assert result.invoice is None
    assert result.computed is None
    assert [issue.path for issue in result.issues] == ["header.currency"]


def test_process_invoice_non_object() -> None:
    """Test that non-object input is reported, not raised."""
    result = process_invoice(["not", "an", "invoice"])

    assert result == ProcessResult(ok=False, issues=result.issues)
    assert result.issues[0].code == IssueCode.INVALID_TYPE
    assert result.issues[0].path == ""


def test_process_invoice_line_item_cap(raw_invoice: dict[str, Any]) -> None:
    """Test that the optional cap is forwarded to validation."""
    assert process_invoice(raw_invoice, max_line_items=3).ok is True

    result = process_invoice(raw_invoice, max_line_items=2)

    assert result.ok is False
    assert result.issues[0].code == IssueCode.INVALID_VALUE
    assert result.issues[0].path == "lineItems"


def test_process_draft_matches_process_invoice(raw_invoice: dict[str, Any]) -> None:
    """Test that processing a validated draft gives the same views."""
    draft = validate_draft(raw_invoice).draft
    assert draft is not None

    processed = process_draft(draft)
    full = process_invoice(raw_invoice)

    assert processed.computed == full.computed
    assert processed.invoice == full.invoice


def test_process_draft_skips_validation() -> None:
    """Test that a draft is processed as given, without re-validation."""
    draft = InvoiceDraft.model_validate(
        {
            "business": {"name": "B", "address": "A", "email": "b@example.com"},
            "client": {"name": "C", "address": "A"},
            "header": {"invoiceNumber": "1", "issueDate": "2025-01-15", "currency": "USD"},
            "lineItems": [],
        }
    )

    processed = process_draft(draft)

    assert processed.computed == compute_invoice(draft)
    assert processed.invoice.totals.total == "$0.00"


# --- Scenarios ---


def test_scenario_totals(raw_invoice: dict[str, Any]) -> None:
    """Test amounts, subtotal, tax and total for a three-item EUR invoice."""
    result = process_invoice(raw_invoice)

    assert result.computed is not None
    totals = result.computed.computed
    assert totals.line_item_amounts == (1500, 3000, 234.50)
    assert totals.subtotal == 4734.50
    assert totals.tax_amount == pytest.approx(899.555)
    assert totals.total == pytest.approx(5634.055)


def test_scenario_empty_line_items(raw_invoice: dict[str, Any]) -> None:
    """Test that an empty line item list is a single issue."""
    raw_invoice["lineItems"] = []

    result = process_invoice(raw_invoice)

    assert result.ok is False
    assert len(result.issues) == 1
    assert result.issues[0].code == IssueCode.EMPTY_ARRAY
    assert result.issues[0].path == "lineItems"


def test_scenario_lowercase_currency(raw_invoice: dict[str, Any]) -> None:
    """Test that the currency code is normalized to upper case."""
    raw_invoice["header"]["currency"] = "eur"

    result = process_invoice(raw_invoice)

    assert result.computed is not None
    assert result.computed.header.currency == "EUR"
    assert result.invoice is not None
    assert result.invoice.header.currency == "EUR"


def test_scenario_impossible_date(raw_invoice: dict[str, Any]) -> None:
    """Test that February 30th is rejected."""
    raw_invoice["header"]["issueDate"] = "2025-02-30"

    result = process_invoice(raw_invoice)

    assert result.ok is False
    assert any(
        issue.code == IssueCode.INVALID_DATE and issue.path == "header.issueDate"
        for issue in result.issues
    )


def test_scenario_issues_accumulate(raw_invoice: dict[str, Any]) -> None:
    """Test that a negative price does not hide other issues."""
    raw_invoice["lineItems"][1]["unitPrice"] = -5
    raw_invoice["lineItems"][2]["description"] = ""
    raw_invoice["business"]["email"] = None
    raw_invoice["header"]["taxRate"] = 2

    result = process_invoice(raw_invoice)

    found = {(issue.code, issue.path) for issue in result.issues}
    assert (IssueCode.NEGATIVE_NUMBER, "lineItems[1].unitPrice") in found
    assert (IssueCode.MISSING_REQUIRED, "lineItems[2].description") in found
    assert (IssueCode.MISSING_REQUIRED, "business.email") in found
    assert (IssueCode.INVALID_VALUE, "header.taxRate") in found
