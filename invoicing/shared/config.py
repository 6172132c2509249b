"""Shared configuration for the invoice engine and its adapters.

Based on Pydantic Settings v2:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from invoicing.engine.schema import CurrencyDisplay, DateStyle, FormatOptions


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'INVOICE_'.
    Example: INVOICE_DATE_FORMAT=long
    """

    model_config = SettingsConfigDict(
        env_prefix="INVOICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Formatting defaults
    locale: str | None = Field(
        default=None,
        description="Locale override (e.g. en-US). Unset: derived from the invoice currency",
    )
    date_format: DateStyle = Field(
        default="medium",
        description="Date style: short (numeric), medium (abbreviated month), long (full month)",
    )
    currency_display: CurrencyDisplay = Field(
        default="symbol",
        description="Currency display: symbol ($), code (USD), name (US dollars)",
    )

    # Input limits
    max_line_items: int | None = Field(
        default=100,
        ge=1,
        description="Maximum line items accepted by adapters (None disables the cap)",
    )

    # Rendering output
    output_dir: Path = Field(
        default=Path("./out"),
        description="Directory for rendered invoice files",
    )

    def format_options(self) -> FormatOptions:
        """Build formatting options from these settings."""
        return FormatOptions(
            locale=self.locale,
            date_format=self.date_format,
            currency_display=self.currency_display,
        )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
