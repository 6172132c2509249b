"""Invoice pipeline: validate -> compute -> format.

Main entry point for adapters (CLI, template renderers, spreadsheet merges):

    result = process_invoice(data)
    if result.ok:
        ...  # result.invoice for rendering, result.computed for raw numbers
    else:
        ...  # result.issues for the user

Every call is independent and stateless.
"""

import logging
from typing import Any

from invoicing.engine.compute import compute_invoice
from invoicing.engine.formatting import format_invoice
from invoicing.engine.schema import FormatOptions, InvoiceDraft, ProcessedDraft, ProcessResult
from invoicing.engine.validate import validate_draft

logger = logging.getLogger(__name__)


def process_invoice(
    data: Any,
    options: FormatOptions | None = None,
    *,
    max_line_items: int | None = None,
) -> ProcessResult:
    """Run raw input through the full pipeline.

    Stops after validation when there are issues; compute and format never
    see invalid data.

    Args:
        data: Raw invoice data (typically parsed JSON)
        options: Formatting options
        max_line_items: Optional line-item cap passed to the validator

    Returns:
        ProcessResult with the formatted and computed invoice, or the issues
    """
    validation = validate_draft(data, max_line_items=max_line_items)
    if not validation.ok or validation.draft is None:
        return ProcessResult(ok=False, issues=validation.issues)

    processed = process_draft(validation.draft, options)
    return ProcessResult(ok=True, invoice=processed.invoice, computed=processed.computed)


def process_draft(draft: InvoiceDraft, options: FormatOptions | None = None) -> ProcessedDraft:
    """Compute and format an already-validated draft, skipping validation.

    Args:
        draft: Validated invoice draft
        options: Formatting options

    Returns:
        ProcessedDraft with computed and formatted invoice
    """
    computed = compute_invoice(draft)
    invoice = format_invoice(computed, options)
    return ProcessedDraft(computed=computed, invoice=invoice)
