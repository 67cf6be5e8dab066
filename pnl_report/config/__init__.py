"""Configuration package."""

from pnl_report.config.settings import (
    AppSettings,
    RenderSettings,
    Settings,
    TargetSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "RenderSettings",
    "Settings",
    "TargetSettings",
    "get_settings",
    "validate_all_settings",
]
