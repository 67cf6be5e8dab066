"""Tests for configuration."""

import pytest
from pydantic import ValidationError

from pnl_report.config.settings import (
    AppSettings,
    RenderSettings,
    TargetSettings,
    get_settings,
    validate_all_settings,
)


class TestTargetSettings:
    """Tests for default target percentages."""

    def test_defaults(self):
        """Test the built-in targets."""
        targets = TargetSettings()
        assert (targets.cost_of_sales, targets.payroll, targets.profit) == (30.0, 25.0, 15.0)

    def test_environment_override(self, monkeypatch):
        """Test that PNL_TARGET_ variables override defaults."""
        monkeypatch.setenv("PNL_TARGET_PAYROLL", "22")
        assert TargetSettings().payroll == 22.0

    def test_out_of_range_rejected(self, monkeypatch):
        """Test that a target above 100% is rejected."""
        monkeypatch.setenv("PNL_TARGET_COST_OF_SALES", "150")
        with pytest.raises(ValidationError):
            TargetSettings()


class TestRenderSettings:
    """Tests for rendering configuration."""

    def test_defaults(self):
        """Test the default rendering settings."""
        settings = RenderSettings()
        assert settings.default_currency == "CAD"
        assert settings.page_size == "A4"
        assert settings.show_gross_profit is False

    def test_page_size_normalized(self):
        """Test that page size is case-insensitive."""
        assert RenderSettings(page_size="letter").page_size == "LETTER"

    def test_unknown_page_size_rejected(self):
        """Test that unsupported page sizes fail validation."""
        with pytest.raises(ValidationError):
            RenderSettings(page_size="A3")

    def test_currency_normalized(self):
        """Test that the currency code is upper-cased."""
        assert RenderSettings(default_currency=" usd ").default_currency == "USD"


class TestAppSettings:
    """Tests for application settings."""

    def test_log_level_normalized(self):
        """Test that log level is upper-cased."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test that an unknown log level fails validation."""
        with pytest.raises(ValidationError):
            AppSettings(log_level="LOUD")

    def test_debug_mode_forces_debug_level(self):
        """Test that debug mode overrides the configured log level."""
        assert AppSettings(debug_mode=True, log_level="WARNING").effective_log_level == "DEBUG"

    def test_effective_level_defaults_to_log_level(self):
        """Test the effective level without debug mode."""
        assert AppSettings().effective_log_level == "INFO"
        assert AppSettings(log_level="error").effective_log_level == "ERROR"


class TestSettingsAccess:
    """Tests for the cached settings accessor."""

    def test_cached(self):
        """Test that get_settings returns the same instance."""
        assert get_settings() is get_settings()

    def test_validate_all_settings(self):
        """Test that default configuration validates."""
        results = validate_all_settings()
        assert results == {"targets": True, "render": True, "app": True}

    def test_validate_reports_errors(self, monkeypatch):
        """Test that a broken sub-setting is reported, not raised."""
        monkeypatch.setenv("PNL_RENDER_PAGE_SIZE", "A3")
        results = validate_all_settings()
        assert results["render"] is False
        assert "render_error" in results
