"""Computation of invoice totals.

Derives line amounts and totals from a validated InvoiceDraft. All values keep
full floating-point precision; rounding happens only when formatting.

Calculation rules:
- line amount = quantity * unit_price
- subtotal = sum of line amounts, accumulated left to right in item order
- tax amount = subtotal * tax_rate (0 without a rate)
- total = subtotal + tax amount
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from invoicing.engine.schema import ComputedTotals, InvoiceComputed, InvoiceDraft, LineItem

logger = logging.getLogger(__name__)


def _running_sum(amounts: Iterable[float]) -> float:
    # Not sum(): it is compensated on 3.12+
    subtotal = 0.0
    for amount in amounts:
        subtotal += amount
    return subtotal


def _totals(amounts: tuple[float, ...], tax_rate: float) -> ComputedTotals:
    subtotal = _running_sum(amounts)
    tax_amount = subtotal * tax_rate
    return ComputedTotals(
        line_item_amounts=amounts,
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=subtotal + tax_amount,
    )


def compute_invoice(draft: InvoiceDraft) -> InvoiceComputed:
    """Compute all derived values for an invoice.

    Args:
        draft: Validated invoice draft

    Returns:
        Invoice with computed totals
    """
    amounts = tuple(item.quantity * item.unit_price for item in draft.line_items)
    totals = _totals(amounts, draft.header.tax_rate or 0.0)

    logger.debug(
        f"Computed invoice {draft.header.invoice_number}: "
        f"subtotal={totals.subtotal} tax={totals.tax_amount} total={totals.total}"
    )

    return InvoiceComputed(
        business=draft.business,
        client=draft.client,
        header=draft.header,
        line_items=draft.line_items,
        computed=totals,
    )


def recompute_invoice(invoice: InvoiceComputed) -> InvoiceComputed:
    """Recompute totals from scratch, discarding the existing ones.

    Use after replacing line items (e.g. ``invoice.model_copy(update=...)``);
    totals are never patched incrementally.
    """
    return compute_invoice(invoice.to_draft())


def compute_totals(
    line_items: Iterable[LineItem | Mapping[str, Any]],
    tax_rate: float = 0.0,
) -> ComputedTotals:
    """Compute totals without a full invoice, e.g. for a live preview.

    Args:
        line_items: LineItem models or mappings with "quantity" and "unitPrice"
        tax_rate: Tax rate as a decimal fraction (0.19 for 19%)

    Returns:
        Computed totals
    """
    amounts: list[float] = []
    for item in line_items:
        if isinstance(item, LineItem):
            amounts.append(item.quantity * item.unit_price)
        else:
            amounts.append(item["quantity"] * item["unitPrice"])
    return _totals(tuple(amounts), tax_rate)
