"""
Configuration Management for the P&L report engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Target percentages, currency and page geometry are the only knobs the
report engine exposes; everything else is business constant data that
lives next to the rules that use it.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TargetSettings(BaseSettings):
    """
    Default target percentages.

    Applied whenever a caller does not supply its own target, so the
    "Target: N%" annotation always prints.
    """

    model_config = SettingsConfigDict(
        env_prefix="PNL_TARGET_",
        extra="ignore"
    )

    cost_of_sales: float = Field(
        default=30.0,
        ge=0.0,
        le=100.0,
        description="Cost of Sales target, as % of income"
    )
    payroll: float = Field(
        default=25.0,
        ge=0.0,
        le=100.0,
        description="Payroll target, as % of income"
    )
    profit: float = Field(
        default=15.0,
        ge=-100.0,
        le=100.0,
        description="Profit target, as % of income"
    )


class RenderSettings(BaseSettings):
    """PDF rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PNL_RENDER_",
        extra="ignore"
    )

    default_currency: str = Field(
        default="CAD",
        min_length=1,
        max_length=8,
        description="Currency code used when the report header carries none"
    )
    page_size: str = Field(
        default="A4",
        description="Page size (A4 or LETTER)"
    )
    show_gross_profit: bool = Field(
        default=False,
        description="Draw the Gross Profit line between Cost of Sales and Expenses"
    )

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        """Only the two page sizes the layout constants are tuned for."""
        upper = v.strip().upper()
        if upper not in {"A4", "LETTER"}:
            raise ValueError(f"Unsupported page size: {v}. Allowed: A4, LETTER")
        return upper

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.strip().upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return upper

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def targets(self) -> TargetSettings:
        return TargetSettings()

    @property
    def render(self) -> RenderSettings:
        return RenderSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "{setting_name}_error" entry for each failure.
    """
    results = {}

    settings = get_settings()

    for name in ("targets", "render", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
