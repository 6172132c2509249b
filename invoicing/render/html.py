"""HTML rendering of formatted invoices with Jinja2 templates.

Templates live in ``invoicing/render/templates`` and receive the
FormattedInvoice as ``invoice``. Autoescaping is on; use the ``nl2br`` filter
for multi-line values such as addresses.
"""

import logging
import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from invoicing.engine.schema import FormattedInvoice

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def nl2br(value: str) -> Markup:
    """Escape a value and turn newlines into <br> tags."""
    return Markup("<br>\n").join(escape(line) for line in value.split("\n"))


def create_environment() -> Environment:
    """Create the Jinja2 environment for invoice templates."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["nl2br"] = nl2br
    return env


def render_invoice_html(
    invoice: FormattedInvoice,
    template_name: str = "invoice.html",
    env: Environment | None = None,
) -> str:
    """Render a formatted invoice to an HTML document.

    Args:
        invoice: Formatted invoice
        template_name: Template file inside the templates directory
        env: Jinja2 environment (a default one is created if omitted)

    Returns:
        HTML document

    Raises:
        jinja2.TemplateNotFound: If the template does not exist
    """
    env = env or create_environment()
    template = env.get_template(template_name)
    logger.debug(f"Rendering invoice {invoice.header.invoice_number} with {template_name}")
    return template.render(invoice=invoice)


def output_filename(invoice: FormattedInvoice, suffix: str = ".html") -> str:
    """Build a filesystem-safe file name from invoice number and client name.

    Example:
        "INV-2025/001" for "Acme Corp." -> "Invoice_INV-2025_001_Acme_Corp_.html"
    """
    number = _UNSAFE_FILENAME_CHARS.sub("_", invoice.header.invoice_number)
    client = _UNSAFE_FILENAME_CHARS.sub("_", invoice.client.name)[:30]
    return f"Invoice_{number}_{client}{suffix}"
