"""Settings and logging configuration tests."""

import pytest
import structlog
from pydantic import ValidationError

from contract_registry.core.config import Settings, configure_logging


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("CONTRACT_REGISTRY_WITHOUT_DEFAULT_ABIS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.app_env == "development"
    assert settings.log_level == "INFO"
    assert settings.without_default_abis is False


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CONTRACT_REGISTRY_WITHOUT_DEFAULT_ABIS", "true")

    settings = Settings(_env_file=None)

    assert settings.app_env == "production"
    assert settings.log_level == "DEBUG"
    assert settings.without_default_abis is True


def test_settings_reject_unknown_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError, match="Unknown log level"):
        Settings(_env_file=None)


@pytest.mark.parametrize("app_env", ["production", "development"])
def test_configure_logging_writes_to_stderr(monkeypatch, capsys, app_env):
    monkeypatch.setenv("APP_ENV", app_env)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    configure_logging(Settings(_env_file=None))

    structlog.get_logger().info("registry.test_event", chain_id=1)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "registry.test_event" in captured.err


def test_configure_logging_filters_below_level(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    configure_logging(Settings(_env_file=None))

    structlog.get_logger().info("registry.hidden")

    assert "registry.hidden" not in capsys.readouterr().err
