"""Invoice data models shared by every stage of the engine.

Three shapes flow through the pipeline:

- InvoiceDraft: validated, typed input (produced only by the validator)
- InvoiceComputed: draft plus derived totals (produced only by the calculator)
- FormattedInvoice: every value rendered as a display string

Models are frozen. Attributes are snake_case; the camelCase aliases match the
external input shape, so ``model_dump(by_alias=True, exclude_none=True)``
yields data the validator accepts again.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DateStyle = Literal["short", "medium", "long"]
CurrencyDisplay = Literal["symbol", "code", "name"]


class EngineModel(BaseModel):
    """Base for all engine models: immutable, camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# --- Draft (validated input) ---


class Business(EngineModel):
    """Business issuing the invoice.

    Attributes:
        name: Legal business name
        address: Full address, newline-separated for multi-line display
        email: Contact email
        phone: Contact phone
        logo_url: URL to a logo image
        tax_id: VAT, EIN, ABN or similar identifier
    """

    name: str
    address: str
    email: str
    phone: str | None = None
    logo_url: str | None = None
    tax_id: str | None = None


class Client(EngineModel):
    """Invoice recipient."""

    name: str
    address: str
    email: str | None = None


class InvoiceHeader(EngineModel):
    """Invoice metadata.

    Attributes:
        invoice_number: User-managed identifier (e.g. "INV-2025-0042")
        issue_date: ISO calendar date "YYYY-MM-DD"
        due_date: ISO calendar date, never before issue_date
        currency: Upper-case ISO 4217 code
        tax_rate: Decimal fraction in [0, 1] (0.19 for 19%)
        notes: Payment terms or a closing message
    """

    invoice_number: str
    issue_date: str
    due_date: str | None = None
    currency: str
    tax_rate: float | None = None
    notes: str | None = None


class LineItem(EngineModel):
    """Single billable item. Prices are in major currency units."""

    description: str
    quantity: float
    unit_price: float
    unit: str | None = None


class InvoiceDraft(EngineModel):
    """Validated invoice input. Only the validator constructs these from raw data."""

    business: Business
    client: Client
    header: InvoiceHeader
    line_items: tuple[LineItem, ...]


# --- Computed ---


class ComputedTotals(EngineModel):
    """Totals derived from a draft, at full floating-point precision.

    Attributes:
        line_item_amounts: quantity * unit_price per item, same order as line_items
        subtotal: Sum of line_item_amounts
        tax_amount: subtotal * tax_rate (0 without a rate)
        total: subtotal + tax_amount
    """

    line_item_amounts: tuple[float, ...]
    subtotal: float
    tax_amount: float
    total: float


class InvoiceComputed(InvoiceDraft):
    """Draft with its computed totals."""

    computed: ComputedTotals

    def to_draft(self) -> InvoiceDraft:
        """Return the draft portion, dropping the totals."""
        return InvoiceDraft(
            business=self.business,
            client=self.client,
            header=self.header,
            line_items=self.line_items,
        )


# --- Formatted (display only) ---


class FormattedBusiness(EngineModel):
    name: str
    address: str
    email: str
    phone: str
    logo_url: str
    tax_id: str


class FormattedClient(EngineModel):
    name: str
    address: str
    email: str


class FormattedHeader(EngineModel):
    invoice_number: str
    issue_date: str
    due_date: str
    currency: str
    tax_rate_display: str  # "19" for 0.19, no percent sign
    notes: str


class FormattedLineItem(EngineModel):
    description: str
    quantity: str
    unit_price: str
    amount: str
    unit: str


class FormattedTotals(EngineModel):
    subtotal: str
    tax_amount: str
    total: str


class FormattedInvoice(EngineModel):
    """Render-ready invoice.

    Every value is a string suitable for direct template interpolation; absent
    optional fields are empty strings. Never feed this back into validation.
    """

    business: FormattedBusiness
    client: FormattedClient
    header: FormattedHeader
    line_items: tuple[FormattedLineItem, ...]
    totals: FormattedTotals


class FormatOptions(EngineModel):
    """Formatting overrides. Unset fields fall back to currency-derived defaults.

    Attributes:
        locale: BCP 47 tag overriding the currency's locale (e.g. "en-US")
        date_format: Date verbosity (short, medium, long)
        currency_display: Currency rendering (symbol, code, name)
    """

    locale: str | None = None
    date_format: DateStyle | None = None
    currency_display: CurrencyDisplay | None = None


# --- Validation ---


class IssueCode(StrEnum):
    """Closed set of machine-readable validation codes."""

    MISSING_REQUIRED = "MISSING_REQUIRED"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_VALUE = "INVALID_VALUE"
    INVALID_DATE = "INVALID_DATE"
    DATE_ORDER = "DATE_ORDER"
    EMPTY_ARRAY = "EMPTY_ARRAY"
    NEGATIVE_NUMBER = "NEGATIVE_NUMBER"
    UNKNOWN = "UNKNOWN"  # Reserved catch-all


class Issue(EngineModel):
    """Single validation failure.

    Attributes:
        code: Machine-readable issue code
        path: Dot/bracket path into the draft schema (e.g. "lineItems[2].unitPrice")
        message: Human-readable description
        hint: Optional suggestion for fixing the value
    """

    code: IssueCode
    path: str
    message: str
    hint: str | None = None


class ValidationResult(EngineModel):
    """Outcome of validation: a draft when ``ok``, otherwise the full issue list."""

    ok: bool
    draft: InvoiceDraft | None = None
    issues: tuple[Issue, ...] = ()


class ProcessResult(EngineModel):
    """Outcome of the full validate -> compute -> format pipeline."""

    ok: bool
    invoice: FormattedInvoice | None = None
    computed: InvoiceComputed | None = None
    issues: tuple[Issue, ...] = ()


class ProcessedDraft(EngineModel):
    """Computed and formatted views of an already-validated draft."""

    computed: InvoiceComputed
    invoice: FormattedInvoice
