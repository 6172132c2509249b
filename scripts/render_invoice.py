#!/usr/bin/env python3
"""Render an invoice from a JSON file.

Validates the input, computes totals and writes a formatted HTML invoice, or
prints a plain-text preview. Validation issues are listed with their field
paths and the script exits with status 1.

Usage:
    python scripts/render_invoice.py --input data/samples/invoice.json
    python scripts/render_invoice.py --input my-invoice.json --out ./invoices/
    python scripts/render_invoice.py --input my-invoice.json --print

Settings (INVOICE_* environment variables) provide defaults for the locale,
date style, currency display, line-item cap and output directory.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from invoicing.engine.pipeline import process_invoice
from invoicing.engine.schema import FormatOptions, Issue
from invoicing.render.html import output_filename, render_invoice_html
from invoicing.render.text import render_text_preview
from invoicing.shared.config import Settings, get_settings
from invoicing.shared.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def load_invoice_json(path: Path) -> Any:
    """Load raw invoice data from a JSON file.

    Args:
        path: JSON file path

    Returns:
        Parsed JSON data (not yet validated)

    Raises:
        ValueError: If the file does not exist or is not valid JSON
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ValueError(f"Input file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in input file: {e}") from e


def format_issues(issues: tuple[Issue, ...]) -> str:
    """Render validation issues as an indented list."""
    lines = []
    for issue in issues:
        lines.append(f"  - [{issue.code}] {issue.path}: {issue.message}")
        if issue.hint:
            lines.append(f"    Hint: {issue.hint}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an invoice from a JSON file")
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Input JSON invoice file",
    )
    parser.add_argument(
        "-o",
        "--out",
        type=Path,
        default=None,
        help="Output directory (default: settings output_dir)",
    )
    parser.add_argument(
        "-p",
        "--print",
        dest="print_preview",
        action="store_true",
        help="Print a text preview instead of writing HTML",
    )
    parser.add_argument("--locale", default=None, help="Locale override, e.g. en-US")
    parser.add_argument(
        "--date-format",
        choices=["short", "medium", "long"],
        default=None,
        help="Date style",
    )
    parser.add_argument(
        "--currency-display",
        choices=["symbol", "code", "name"],
        default=None,
        help="Currency display",
    )
    return parser


def resolve_options(args: argparse.Namespace, settings: Settings) -> FormatOptions:
    """Merge command-line overrides over settings defaults."""
    defaults = settings.format_options()
    return FormatOptions(
        locale=args.locale or defaults.locale,
        date_format=args.date_format or defaults.date_format,
        currency_display=args.currency_display or defaults.currency_display,
    )


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        settings: Settings to use (defaults to environment-based settings)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()

    try:
        data = load_invoice_json(args.input)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Processing invoice from {args.input}")
    try:
        result = process_invoice(
            data,
            resolve_options(args, settings),
            max_line_items=settings.max_line_items,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.ok or result.invoice is None:
        print("Validation failed:", file=sys.stderr)
        print(format_issues(result.issues), file=sys.stderr)
        return 1

    invoice = result.invoice

    if args.print_preview:
        print(render_text_preview(invoice))
        return 0

    out_dir = args.out or settings.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    output_path = out_dir / output_filename(invoice)
    output_path.write_text(render_invoice_html(invoice), encoding="utf-8")

    logger.info(f"Invoice {invoice.header.invoice_number} saved to {output_path}")
    print(f"Saved {output_path} (total {invoice.totals.total})")
    return 0


if __name__ == "__main__":
    configure_logging(get_settings())
    sys.exit(main())
