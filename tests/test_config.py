"""
Tests for environment-driven engine settings.
"""

import logging

import pytest
from pydantic import ValidationError

from dealcalc.calculations.defaults import EngineConfig
from dealcalc.config import Settings, configure_logging, get_env_file, get_settings


class TestSettings:
    """Test Settings loading and normalization."""

    def test_defaults_match_engine_tables(self):
        """Test default settings build the canonical engine config."""
        assert EngineConfig.from_settings(Settings()) == EngineConfig()

    def test_percent_rate_normalized(self, monkeypatch):
        """Test rates given as percents are stored as decimals."""
        monkeypatch.setenv("DEALCALC_DSCR_RATE", "7.5")
        monkeypatch.setenv("DEALCALC_APPRECIATION_RATE", "3%")
        settings = Settings()
        assert settings.dscr_rate == pytest.approx(0.075)
        assert settings.appreciation_rate == pytest.approx(0.03)

    def test_decimal_rate_kept(self, monkeypatch):
        """Test decimal rates pass through unchanged."""
        monkeypatch.setenv("DEALCALC_TARGET_COCR", "0.2")
        assert Settings().target_cocr == pytest.approx(0.2)

    def test_refi_ltv_percent_scale(self, monkeypatch):
        """Test refinance LTV is stored on a 0-100 scale."""
        monkeypatch.setenv("DEALCALC_REFI_LTV_PERCENT", "0.8")
        assert Settings().refi_ltv_percent == pytest.approx(80.0)

    def test_percent_scale_boundary(self, monkeypatch):
        """Test 1 is a whole fraction while values above 1 are percents."""
        monkeypatch.setenv("DEALCALC_REFI_LTV_PERCENT", "1")
        monkeypatch.setenv("DEALCALC_MAX_ESTIMATED_CAP_RATE", "1.5")
        settings = Settings()
        assert settings.refi_ltv_percent == pytest.approx(100.0)
        assert settings.max_estimated_cap_rate == pytest.approx(1.5)

    def test_negative_rate_rejected(self, monkeypatch):
        """Test negative rates fail validation."""
        monkeypatch.setenv("DEALCALC_DSCR_RATE", "-1")
        with pytest.raises(ValidationError):
            Settings()

    def test_non_numeric_rate_rejected(self, monkeypatch):
        """Test garbage rates fail validation."""
        monkeypatch.setenv("DEALCALC_SELLER_FI_RATE", "lots")
        with pytest.raises(ValidationError):
            Settings()

    def test_non_positive_term_rejected(self, monkeypatch):
        """Test zero amortization years fail validation."""
        monkeypatch.setenv("DEALCALC_DSCR_AMORTIZATION_YEARS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_from_settings(self, monkeypatch):
        """Test overrides flow into the engine tables."""
        monkeypatch.setenv("DEALCALC_DSCR_RATE", "6")
        monkeypatch.setenv("DEALCALC_MAX_ITERATIONS", "100")
        config = EngineConfig.from_settings(Settings())
        assert config.financing.dscr_rate == pytest.approx(0.06)
        assert config.solver.max_iterations == 100

    def test_env_file_selection(self, monkeypatch):
        """Test env file follows DEALCALC_ENV."""
        monkeypatch.setenv("DEALCALC_ENV", "production")
        assert get_env_file() == ".env.production"
        monkeypatch.delenv("DEALCALC_ENV")
        assert get_env_file() == ".env.development"

    def test_get_settings_cached(self):
        """Test settings are built once."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()


class TestLogging:
    """Test package logger configuration."""

    def test_configure_logging(self, monkeypatch):
        """Test log level is applied to the package logger."""
        monkeypatch.setenv("DEALCALC_LOG_LEVEL", "debug")
        logger = configure_logging(Settings())
        assert logger.name == "dealcalc"
        assert logger.level == logging.DEBUG
        logger.setLevel(logging.NOTSET)
