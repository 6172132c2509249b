"""Currency lookup tables.

Read-only, process-wide constants shared by the validator and the formatter.
"""

from types import MappingProxyType

# Supported ISO 4217 codes (common subset)
SUPPORTED_CURRENCIES: frozenset[str] = frozenset(
    {
        "EUR", "USD", "GBP", "CHF", "CAD", "AUD", "JPY", "CNY", "INR", "BRL",
        "MXN", "KRW", "SEK", "NOK", "DKK", "PLN", "CZK", "HUF", "RON", "BGN",
        "HRK", "RUB", "TRY", "ZAR", "NZD", "SGD", "HKD", "THB", "MYR", "PHP",
    }
)  # fmt: skip

# Locale of each currency's primary market. Drives number and date conventions.
CURRENCY_LOCALE_MAP: MappingProxyType[str, str] = MappingProxyType(
    {
        "EUR": "de-DE",
        "USD": "en-US",
        "GBP": "en-GB",
        "CHF": "de-CH",
        "CAD": "en-CA",
        "AUD": "en-AU",
        "JPY": "ja-JP",
        "CNY": "zh-CN",
        "INR": "en-IN",
        "BRL": "pt-BR",
        "MXN": "es-MX",
        "KRW": "ko-KR",
        "SEK": "sv-SE",
        "NOK": "nb-NO",
        "DKK": "da-DK",
        "PLN": "pl-PL",
        "CZK": "cs-CZ",
        "HUF": "hu-HU",
        "RON": "ro-RO",
        "BGN": "bg-BG",
        "RUB": "ru-RU",
        "TRY": "tr-TR",
        "ZAR": "en-ZA",
        "NZD": "en-NZ",
        "SGD": "en-SG",
        "HKD": "zh-HK",
        "THB": "th-TH",
        "MYR": "ms-MY",
        "PHP": "en-PH",
    }
)

DEFAULT_LOCALE = "en-US"


def is_supported_currency(code: str) -> bool:
    """Check a currency code against the allow-list (case-insensitive)."""
    return code.upper() in SUPPORTED_CURRENCIES


def get_locale(currency: str) -> str:
    """Get the formatting locale for a currency code.

    Args:
        currency: ISO 4217 code, any case

    Returns:
        BCP 47 locale tag, DEFAULT_LOCALE for unmapped currencies
    """
    return CURRENCY_LOCALE_MAP.get(currency.upper(), DEFAULT_LOCALE)
