"""Validation of raw invoice input.

Turns untyped data (parsed JSON, spreadsheet cell values, form fields) into a
typed InvoiceDraft, or returns every issue found. Validation never stops at the
first problem: all groups and all line items are checked so a caller can fix
everything in one pass. Issues are returned as data, never raised.
"""

import logging
import math
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from invoicing.engine.currencies import SUPPORTED_CURRENCIES
from invoicing.engine.schema import (
    Business,
    Client,
    InvoiceDraft,
    InvoiceHeader,
    Issue,
    IssueCode,
    LineItem,
    ValidationResult,
)

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

# Leading numeric prefix, as accepted from spreadsheet-style string cells ("12.5", "3 hrs")
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")

_MISSING = object()


def _issue(code: IssueCode, path: str, message: str, hint: str | None = None) -> Issue:
    return Issue(code=code, path=path, message=message, hint=hint)


def _is_blank(value: Any) -> bool:
    return value is _MISSING or value is None or value == ""


def _as_number(value: Any) -> float | None:
    """Coerce a native number or numeric string to float.

    Returns:
        The number, or None if the value is not numeric
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return None if value.is_nan() else float(value)
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            # Integers beyond float range (e.g. 10**400 from JSON)
            return math.inf if value > 0 else -math.inf
        return None if math.isnan(number) else number
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.lstrip())
        if match is None:
            return None
        return float(match.group().replace("Infinity", "inf"))
    return None


# --- Field validators ---


def _required_string(obj: Mapping[str, Any], field: str, path: str, issues: list[Issue]) -> str | None:
    value = obj.get(field, _MISSING)

    if value is _MISSING or value is None:
        issues.append(_issue(IssueCode.MISSING_REQUIRED, path, f"{field} is required"))
        return None

    if not isinstance(value, str):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, f"{field} must be a string"))
        return None

    trimmed = value.strip()
    if not trimmed:
        issues.append(_issue(IssueCode.MISSING_REQUIRED, path, f"{field} cannot be empty"))
        return None

    return trimmed


def _optional_string(obj: Mapping[str, Any], field: str, path: str, issues: list[Issue]) -> str | None:
    value = obj.get(field, _MISSING)

    if _is_blank(value):
        return None

    if not isinstance(value, str):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, f"{field} must be a string"))
        return None

    return value.strip() or None


def _required_number(
    obj: Mapping[str, Any],
    field: str,
    path: str,
    issues: list[Issue],
    *,
    allow_zero: bool = True,
) -> float | None:
    value = obj.get(field, _MISSING)

    if value is _MISSING or value is None:
        issues.append(_issue(IssueCode.MISSING_REQUIRED, path, f"{field} is required"))
        return None

    number = _as_number(value)
    if number is None:
        issues.append(_issue(IssueCode.INVALID_TYPE, path, f"{field} must be a number"))
        return None

    if number < 0:
        issues.append(
            _issue(
                IssueCode.NEGATIVE_NUMBER,
                path,
                f"{field} cannot be negative",
                "Use a positive number",
            )
        )
        return None

    if not allow_zero and number == 0:
        issues.append(_issue(IssueCode.INVALID_VALUE, path, f"{field} cannot be zero"))
        return None

    return number


def _optional_number(
    obj: Mapping[str, Any],
    field: str,
    path: str,
    issues: list[Issue],
    *,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float | None:
    value = obj.get(field, _MISSING)

    if _is_blank(value):
        return None

    number = _as_number(value)
    if number is None:
        issues.append(_issue(IssueCode.INVALID_TYPE, path, f"{field} must be a number"))
        return None

    if number < 0:
        issues.append(_issue(IssueCode.NEGATIVE_NUMBER, path, f"{field} cannot be negative"))
        return None

    if minimum is not None and number < minimum:
        issues.append(_issue(IssueCode.INVALID_VALUE, path, f"{field} must be at least {minimum:g}"))
        return None

    if maximum is not None and number > maximum:
        issues.append(_issue(IssueCode.INVALID_VALUE, path, f"{field} must be at most {maximum:g}"))
        return None

    return number


def _iso_date(
    obj: Mapping[str, Any],
    field: str,
    path: str,
    issues: list[Issue],
    *,
    required: bool,
) -> str | None:
    """Validate a calendar date and return it as "YYYY-MM-DD".

    Native date/datetime values are accepted (aware datetimes are read in UTC).
    Strings must match YYYY-MM-DD exactly and name a real calendar day:
    "2025-02-30" is rejected rather than rolled over into March.
    """
    value = obj.get(field, _MISSING)

    if _is_blank(value):
        if required:
            issues.append(_issue(IssueCode.MISSING_REQUIRED, path, f"{field} is required"))
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date().isoformat()

    if isinstance(value, date):
        return value.isoformat()

    if not isinstance(value, str):
        issues.append(
            _issue(IssueCode.INVALID_TYPE, path, f"{field} must be a date string (YYYY-MM-DD)")
        )
        return None

    trimmed = value.strip()

    if not ISO_DATE_PATTERN.match(trimmed):
        issues.append(
            _issue(
                IssueCode.INVALID_FORMAT,
                path,
                f"{field} must be in YYYY-MM-DD format",
                "Example: 2025-01-15",
            )
        )
        return None

    year, month, day = (int(part) for part in trimmed.split("-"))
    try:
        date(year, month, day)
    except ValueError:
        issues.append(_issue(IssueCode.INVALID_DATE, path, f"{field} is not a valid calendar date"))
        return None

    return trimmed


def _currency(obj: Mapping[str, Any], field: str, path: str, issues: list[Issue]) -> str | None:
    value = _required_string(obj, field, path, issues)
    if value is None:
        return None

    code = value.upper()
    if code not in SUPPORTED_CURRENCIES:
        issues.append(
            _issue(
                IssueCode.INVALID_VALUE,
                path,
                f'{field} "{value}" is not a recognized currency code',
                "Use ISO 4217 codes like EUR, USD, GBP",
            )
        )
        return None

    return code


# --- Group validators ---


def _business(data: Any, path: str, issues: list[Issue]) -> Business | None:
    if not isinstance(data, Mapping):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, "business must be an object"))
        return None

    name = _required_string(data, "name", f"{path}.name", issues)
    address = _required_string(data, "address", f"{path}.address", issues)
    email = _required_string(data, "email", f"{path}.email", issues)
    phone = _optional_string(data, "phone", f"{path}.phone", issues)
    logo_url = _optional_string(data, "logoUrl", f"{path}.logoUrl", issues)
    tax_id = _optional_string(data, "taxId", f"{path}.taxId", issues)

    if name is None or address is None or email is None:
        return None

    return Business(
        name=name, address=address, email=email, phone=phone, logo_url=logo_url, tax_id=tax_id
    )


def _client(data: Any, path: str, issues: list[Issue]) -> Client | None:
    if not isinstance(data, Mapping):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, "client must be an object"))
        return None

    name = _required_string(data, "name", f"{path}.name", issues)
    address = _required_string(data, "address", f"{path}.address", issues)
    email = _optional_string(data, "email", f"{path}.email", issues)

    if name is None or address is None:
        return None

    return Client(name=name, address=address, email=email)


def _header(data: Any, path: str, issues: list[Issue]) -> InvoiceHeader | None:
    if not isinstance(data, Mapping):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, "header must be an object"))
        return None

    invoice_number = _required_string(data, "invoiceNumber", f"{path}.invoiceNumber", issues)
    issue_date = _iso_date(data, "issueDate", f"{path}.issueDate", issues, required=True)
    due_date = _iso_date(data, "dueDate", f"{path}.dueDate", issues, required=False)
    currency = _currency(data, "currency", f"{path}.currency", issues)
    tax_rate = _optional_number(data, "taxRate", f"{path}.taxRate", issues, minimum=0, maximum=1)
    notes = _optional_string(data, "notes", f"{path}.notes", issues)

    # ISO dates are zero-padded, so string order is calendar order
    if issue_date and due_date and due_date < issue_date:
        issues.append(
            _issue(
                IssueCode.DATE_ORDER,
                f"{path}.dueDate",
                "Due date cannot be before issue date",
                "Set due date on or after the issue date",
            )
        )

    if invoice_number is None or issue_date is None or currency is None:
        return None

    return InvoiceHeader(
        invoice_number=invoice_number,
        issue_date=issue_date,
        due_date=due_date,
        currency=currency,
        tax_rate=tax_rate,
        notes=notes,
    )


def _line_item(data: Any, path: str, issues: list[Issue]) -> LineItem | None:
    if not isinstance(data, Mapping):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, "line item must be an object"))
        return None

    description = _required_string(data, "description", f"{path}.description", issues)
    quantity = _required_number(data, "quantity", f"{path}.quantity", issues, allow_zero=False)
    unit_price = _required_number(data, "unitPrice", f"{path}.unitPrice", issues)
    unit = _optional_string(data, "unit", f"{path}.unit", issues)

    if description is None or quantity is None or unit_price is None:
        return None

    return LineItem(description=description, quantity=quantity, unit_price=unit_price, unit=unit)


def _line_items(
    data: Any,
    path: str,
    issues: list[Issue],
    max_items: int | None = None,
) -> tuple[LineItem, ...] | None:
    if not isinstance(data, list | tuple):
        issues.append(_issue(IssueCode.INVALID_TYPE, path, "lineItems must be an array"))
        return None

    if not data:
        issues.append(
            _issue(
                IssueCode.EMPTY_ARRAY,
                path,
                "At least one line item is required",
                "Add at least one item to the invoice",
            )
        )
        return None

    failed = False
    if max_items is not None and len(data) > max_items:
        issues.append(
            _issue(
                IssueCode.INVALID_VALUE,
                path,
                f"At most {max_items} line items are allowed, got {len(data)}",
                "Split the work across several invoices",
            )
        )
        failed = True

    items: list[LineItem] = []
    for index, raw in enumerate(data):
        item = _line_item(raw, f"{path}[{index}]", issues)
        if item is None:
            failed = True
        else:
            items.append(item)

    return None if failed else tuple(items)


# --- Entry point ---


def validate_draft(data: Any, *, max_line_items: int | None = None) -> ValidationResult:
    """Validate raw input into an InvoiceDraft.

    Args:
        data: Raw input, typically parsed JSON or values read from a spreadsheet
        max_line_items: Optional cap on the number of line items. None leaves
            the cap to the input source.

    Returns:
        ValidationResult with the draft when ok, otherwise every issue found

    Example:
        >>> result = validate_draft({"lineItems": []})
        >>> result.ok
        False
    """
    if not isinstance(data, Mapping):
        return ValidationResult(
            ok=False,
            issues=(_issue(IssueCode.INVALID_TYPE, "", "Input must be an object"),),
        )

    issues: list[Issue] = []

    business = _business(data.get("business"), "business", issues)
    client = _client(data.get("client"), "client", issues)
    header = _header(data.get("header"), "header", issues)
    line_items = _line_items(data.get("lineItems"), "lineItems", issues, max_line_items)

    if issues or business is None or client is None or header is None or line_items is None:
        logger.debug(f"Invoice validation failed with {len(issues)} issue(s)")
        return ValidationResult(ok=False, issues=tuple(issues))

    logger.debug(f"Invoice {header.invoice_number} validated with {len(line_items)} line item(s)")
    return ValidationResult(
        ok=True,
        draft=InvoiceDraft(business=business, client=client, header=header, line_items=line_items),
    )
