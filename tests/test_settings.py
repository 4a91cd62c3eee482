from pathlib import Path

import pytest

from checkout_pricing.config.settings import DEFAULT_RULES_CSV, Settings, refresh_settings


def test_defaults(monkeypatch):
    for name in ("CHECKOUT_RULES_CSV", "CHECKOUT_LOG_LEVEL", "CHECKOUT_API_PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.load(project_root=Path("/srv/checkout"))

    assert settings.rules_csv == DEFAULT_RULES_CSV
    assert settings.api_port == 8000
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CHECKOUT_RULES_CSV", "store/rules.csv")
    monkeypatch.setenv("CHECKOUT_LOG_LEVEL", "debug")
    monkeypatch.setenv("CHECKOUT_API_PORT", "9001")
    settings = Settings.load(project_root=tmp_path)

    assert settings.rules_csv == tmp_path / "store" / "rules.csv"
    assert settings.log_level == "DEBUG"
    assert settings.api_port == 9001


def test_invalid_port(monkeypatch, tmp_path):
    monkeypatch.setenv("CHECKOUT_API_PORT", "eighty")
    with pytest.raises(ValueError, match="CHECKOUT_API_PORT"):
        Settings.load(project_root=tmp_path)


def test_refresh_settings_reloads(monkeypatch, tmp_path):
    monkeypatch.setenv("CHECKOUT_RULES_CSV", str(tmp_path / "custom.csv"))
    assert refresh_settings().rules_csv == tmp_path / "custom.csv"
    monkeypatch.delenv("CHECKOUT_RULES_CSV")
    assert refresh_settings().rules_csv == DEFAULT_RULES_CSV
