"""Tests for the configuration system."""

import pytest
import structlog

from recablix_core.config import RecablixConfig, configure_logging, load_config
from recablix_core.exceptions import ConfigurationError
from recablix_core.models import ClientActivity


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "RECABLIX_ENV",
        "RECABLIX_LOG_LEVEL",
        "RECABLIX_DEFAULT_ACTIVITY",
        "RECABLIX_DEFAULT_PROVINCE_CODE",
        "RECABLIX_CURRENCY_SYMBOL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestRecablixConfig:
    """Test suite for RecablixConfig."""

    def test_default_values(self):
        """RecablixConfig should have sensible defaults."""
        config = RecablixConfig(_env_file=None)

        assert config.env == "development"
        assert config.log_level == "INFO"
        assert config.default_activity == ClientActivity.SERVICES
        assert config.default_province_code == "901"
        assert config.currency_symbol == "$"
        assert config.is_development is True
        assert config.is_production is False
        assert config.is_debug is False

    def test_from_environment(self, monkeypatch):
        """RecablixConfig should load from environment variables."""
        monkeypatch.setenv("RECABLIX_ENV", "production")
        monkeypatch.setenv("RECABLIX_LOG_LEVEL", "debug")
        monkeypatch.setenv("RECABLIX_DEFAULT_ACTIVITY", "BIENES")
        monkeypatch.setenv("RECABLIX_DEFAULT_PROVINCE_CODE", "904")

        config = RecablixConfig(_env_file=None)

        assert config.is_production is True
        assert config.log_level == "DEBUG"
        assert config.is_debug is True
        assert config.default_activity == ClientActivity.GOODS
        assert config.default_province_code == "904"

    def test_env_validation(self):
        with pytest.raises(ValueError):
            RecablixConfig(env="qa")

    def test_log_level_validation(self):
        with pytest.raises(ValueError):
            RecablixConfig(log_level="verbose")

    def test_province_validation(self):
        """Default province must be one of 901-924."""
        with pytest.raises(ValueError):
            RecablixConfig(default_province_code="999")


class TestLoadConfig:
    def test_overrides(self):
        config = load_config(env="test", default_province_code=" 902 ")
        assert config.env == "test"
        assert config.default_province_code == "902"

    def test_invalid_value_raises_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc:
            load_config(default_province_code="999")

        assert exc.value.config_key == "RECABLIX_DEFAULT_PROVINCE_CODE"
        assert exc.value.actual == "999"

    def test_invalid_environment_variable(self, monkeypatch):
        monkeypatch.setenv("RECABLIX_LOG_LEVEL", "loud")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config()


class TestConfigureLogging:
    def test_configures_structlog(self):
        configure_logging(RecablixConfig(env="test", log_level="WARNING"))
        try:
            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()
