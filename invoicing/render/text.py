"""Plain-text invoice preview for terminals."""

from invoicing.engine.schema import FormattedInvoice

WIDTH = 60
DESCRIPTION_WIDTH = 35
NUMBER_WIDTH = 10
_LABEL_WIDTH = DESCRIPTION_WIDTH + NUMBER_WIDTH * 2
_INDENT = " " * 6


def _indent_lines(text: str) -> str:
    return text.replace("\n", "\n" + _INDENT)


def _truncate(text: str, width: int) -> str:
    if len(text) > width - 2:
        return text[: width - 5] + "..."
    return text


def _total_row(label: str, value: str) -> str:
    return label.rjust(_LABEL_WIDTH) + value.rjust(NUMBER_WIDTH)


def render_text_preview(invoice: FormattedInvoice) -> str:
    """Render a fixed-width preview of a formatted invoice.

    Args:
        invoice: Formatted invoice

    Returns:
        Multi-line preview text
    """
    lines = ["", "=" * WIDTH, "INVOICE PREVIEW", "=" * WIDTH]

    business = invoice.business
    lines.append(f"\nFrom: {business.name}")
    lines.append(f"{_INDENT}{_indent_lines(business.address)}")
    lines.append(f"{_INDENT}{business.email}")
    if business.phone:
        lines.append(f"{_INDENT}{business.phone}")

    client = invoice.client
    lines.append(f"\nTo:   {client.name}")
    lines.append(f"{_INDENT}{_indent_lines(client.address)}")
    if client.email:
        lines.append(f"{_INDENT}{client.email}")

    header = invoice.header
    lines.append("\n" + "-" * WIDTH)
    lines.append(f"Invoice #:  {header.invoice_number}")
    lines.append(f"Date:       {header.issue_date}")
    if header.due_date:
        lines.append(f"Due:        {header.due_date}")
    lines.append("-" * WIDTH)

    lines.append("\nLine Items:")
    lines.append("-" * WIDTH)
    lines.append(
        "Description".ljust(DESCRIPTION_WIDTH)
        + "Qty".rjust(NUMBER_WIDTH)
        + "Price".rjust(NUMBER_WIDTH)
        + "Amount".rjust(NUMBER_WIDTH)
    )
    lines.append("-" * WIDTH)
    for item in invoice.line_items:
        lines.append(
            _truncate(item.description, DESCRIPTION_WIDTH).ljust(DESCRIPTION_WIDTH)
            + item.quantity.rjust(NUMBER_WIDTH)
            + item.unit_price.rjust(NUMBER_WIDTH)
            + item.amount.rjust(NUMBER_WIDTH)
        )

    lines.append("-" * WIDTH)
    lines.append(_total_row("Subtotal:", invoice.totals.subtotal))
    if header.tax_rate_display:
        lines.append(_total_row(f"Tax ({header.tax_rate_display}%):", invoice.totals.tax_amount))
    lines.append("=" * WIDTH)
    lines.append(_total_row("TOTAL:", invoice.totals.total))
    lines.append("=" * WIDTH)

    if header.notes:
        lines.append("\nNotes:")
        lines.append(header.notes)

    lines.append("")
    return "\n".join(lines)
