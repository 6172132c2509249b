"""Formatting of computed invoices for display.

Renders every numeric and date value as a locale-aware string using CLDR data
(Babel). Unless overridden, the locale is derived from the invoice currency:
an EUR invoice is formatted the way a German reader expects, a USD invoice the
way a US reader expects.

Rounding to the displayed precision is half-up on the shortest decimal
representation of each value. Formatted output is for display only.
"""

import logging
import re
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from babel import Locale, UnknownLocaleError
from babel.dates import format_date, format_skeleton
from babel.numbers import NumberPattern, parse_pattern
from babel.numbers import format_currency as babel_format_currency

from invoicing.engine.currencies import DEFAULT_LOCALE, get_locale
from invoicing.engine.schema import (
    Business,
    Client,
    ComputedTotals,
    CurrencyDisplay,
    DateStyle,
    FormatOptions,
    FormattedBusiness,
    FormattedClient,
    FormattedHeader,
    FormattedInvoice,
    FormattedLineItem,
    FormattedTotals,
    InvoiceComputed,
    InvoiceHeader,
    LineItem,
)

logger = logging.getLogger(__name__)

DEFAULT_DATE_STYLE: DateStyle = "medium"
DEFAULT_CURRENCY_DISPLAY: CurrencyDisplay = "symbol"

# CLDR skeletons: numeric, abbreviated month. "long" uses the locale's full-month date pattern.
_DATE_SKELETONS: dict[str, str] = {
    "short": "yMd",
    "medium": "yMMMd",
}

# CLDR currencySpacing insertBetween
_CURRENCY_SPACING = "\xa0"


# --- Formatter construction ---


def _parse_locale(tag: str) -> Locale:
    """Parse a BCP 47 tag ("de-DE"; "de_DE" is accepted too).

    Raises:
        ValueError: If the locale is malformed or unknown
    """
    try:
        return Locale.parse(tag.replace("_", "-"), sep="-")
    except (UnknownLocaleError, ValueError) as e:
        raise ValueError(f"Unknown locale: '{tag}'") from e


def _with_fraction_digits(source: str, minimum: int, maximum: int) -> NumberPattern:
    pattern = parse_pattern(source)
    pattern.frac_prec = (minimum, maximum)
    return pattern


def _space_currency_code(text: str, code: str) -> str:
    """Separate an ISO code from an adjacent digit ("USD1.00" -> "USD\u00a01.00")."""
    text = re.sub(rf"{code}(?=\d)", code + _CURRENCY_SPACING, text)
    return re.sub(rf"(?<=\d){code}", _CURRENCY_SPACING + code, text)


class _CurrencyFormatter:
    """Currency formatter with exactly two fraction digits."""

    def __init__(self, currency: str, locale: Locale, display: CurrencyDisplay) -> None:
        self.currency = currency
        self.locale = locale
        self.display = display

        if display == "name":
            # Long names wrap a plain number ("1,234.56 US dollars")
            source = locale.decimal_formats[None].pattern
        else:
            source = locale.currency_formats["standard"].pattern
            if display == "code":
                source = source.replace("¤", "¤¤")
        self.pattern = _with_fraction_digits(source, 2, 2)

    def format(self, amount: float) -> str:
        with localcontext() as ctx:
            ctx.rounding = ROUND_HALF_UP
            if self.display == "name":
                return babel_format_currency(
                    amount,
                    self.currency,
                    format=self.pattern,
                    locale=self.locale,
                    currency_digits=False,
                    format_type="name",
                )
            text = self.pattern.apply(
                amount, self.locale, currency=self.currency, currency_digits=False
            )
        if self.display == "code":
            return _space_currency_code(text, self.currency)
        return text


class _NumberFormatter:
    """Plain number formatter with zero to two fraction digits."""

    def __init__(self, locale: Locale) -> None:
        self.locale = locale
        self.pattern = _with_fraction_digits(locale.decimal_formats[None].pattern, 0, 2)

    def format(self, value: float) -> str:
        with localcontext() as ctx:
            ctx.rounding = ROUND_HALF_UP
            return self.pattern.apply(value, self.locale)


class _DateFormatter:
    """Calendar date formatter. Dates are read and rendered in UTC."""

    def __init__(self, locale: Locale, style: DateStyle = DEFAULT_DATE_STYLE) -> None:
        self.locale = locale
        self.style = style

    def format(self, iso_date: str) -> str:
        value = _parse_iso_date(iso_date)
        if self.style == "long":
            return format_date(value.date(), format="long", locale=self.locale)
        return format_skeleton(_DATE_SKELETONS[self.style], value, tzinfo=UTC, locale=self.locale)


def _parse_iso_date(iso_date: str) -> datetime:
    # Midnight UTC: no timezone shift can move the calendar day
    return datetime.strptime(iso_date, "%Y-%m-%d").replace(tzinfo=UTC)


def _tax_rate_display(tax_rate: float | None) -> str:
    if tax_rate is None:
        return ""
    percent = Decimal(tax_rate * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return str(int(percent))


# --- Section formatters ---


def _format_business(business: Business) -> FormattedBusiness:
    return FormattedBusiness(
        name=business.name,
        address=business.address,
        email=business.email,
        phone=business.phone or "",
        logo_url=business.logo_url or "",
        tax_id=business.tax_id or "",
    )


def _format_client(client: Client) -> FormattedClient:
    return FormattedClient(name=client.name, address=client.address, email=client.email or "")


def _format_header(header: InvoiceHeader, dates: _DateFormatter) -> FormattedHeader:
    return FormattedHeader(
        invoice_number=header.invoice_number,
        issue_date=dates.format(header.issue_date),
        due_date=dates.format(header.due_date) if header.due_date else "",
        currency=header.currency,
        tax_rate_display=_tax_rate_display(header.tax_rate),
        notes=header.notes or "",
    )


def _format_line_items(
    line_items: tuple[LineItem, ...],
    amounts: tuple[float, ...],
    money: _CurrencyFormatter,
    numbers: _NumberFormatter,
) -> tuple[FormattedLineItem, ...]:
    return tuple(
        FormattedLineItem(
            description=item.description,
            quantity=numbers.format(item.quantity),
            unit_price=money.format(item.unit_price),
            amount=money.format(amount),
            unit=item.unit or "",
        )
        for item, amount in zip(line_items, amounts, strict=True)
    )


def _format_totals(totals: ComputedTotals, money: _CurrencyFormatter) -> FormattedTotals:
    return FormattedTotals(
        subtotal=money.format(totals.subtotal),
        tax_amount=money.format(totals.tax_amount),
        total=money.format(totals.total),
    )


# --- Entry point ---


def format_invoice(invoice: InvoiceComputed, options: FormatOptions | None = None) -> FormattedInvoice:
    """Format a computed invoice for rendering.

    Args:
        invoice: Invoice with computed totals
        options: Locale, date style and currency display overrides

    Returns:
        Fully formatted invoice with all values as strings

    Raises:
        ValueError: If options.locale is not a known locale
    """
    options = options or FormatOptions()
    currency = invoice.header.currency
    locale_tag = options.locale or get_locale(currency)
    locale = _parse_locale(locale_tag)

    money = _CurrencyFormatter(
        currency, locale, options.currency_display or DEFAULT_CURRENCY_DISPLAY
    )
    numbers = _NumberFormatter(locale)
    dates = _DateFormatter(locale, options.date_format or DEFAULT_DATE_STYLE)

    logger.debug(f"Formatting invoice {invoice.header.invoice_number} with locale {locale_tag}")

    return FormattedInvoice(
        business=_format_business(invoice.business),
        client=_format_client(invoice.client),
        header=_format_header(invoice.header, dates),
        line_items=_format_line_items(
            invoice.line_items, invoice.computed.line_item_amounts, money, numbers
        ),
        totals=_format_totals(invoice.computed, money),
    )


# --- Standalone utilities ---


def format_currency(
    amount: float,
    currency: str,
    locale: str | None = None,
    display: CurrencyDisplay = DEFAULT_CURRENCY_DISPLAY,
) -> str:
    """Format a single currency amount with two fraction digits.

    Args:
        amount: Amount in major currency units
        currency: ISO 4217 code
        locale: Locale override (defaults to the currency's locale)
        display: symbol, code or name

    Returns:
        Formatted amount, e.g. "$1,234.56"
    """
    code = currency.upper()
    resolved = _parse_locale(locale or get_locale(code))
    return _CurrencyFormatter(code, resolved, display).format(amount)


def format_quantity(value: float, locale: str = DEFAULT_LOCALE) -> str:
    """Format a quantity with up to two fraction digits and no currency."""
    return _NumberFormatter(_parse_locale(locale)).format(value)


def format_iso_date(
    iso_date: str,
    locale: str = DEFAULT_LOCALE,
    style: DateStyle = DEFAULT_DATE_STYLE,
) -> str:
    """Format an ISO "YYYY-MM-DD" date.

    Args:
        iso_date: Calendar date string
        locale: Locale tag
        style: short (numeric), medium (abbreviated month) or long (full month)

    Returns:
        Localized date, e.g. "Jan 15, 2025"
    """
    return _DateFormatter(_parse_locale(locale), style).format(iso_date)


__all__ = [
    "DEFAULT_CURRENCY_DISPLAY",
    "DEFAULT_DATE_STYLE",
    "format_currency",
    "format_invoice",
    "format_iso_date",
    "format_quantity",
    "get_locale",
]
