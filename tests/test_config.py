# tests/test_config.py
from pathlib import Path

import pytest

from productstore.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for var in ("APP_ENV", "PRODUCTS_FILE", "LOG_LEVEL", "DOCS_ENABLED", "CORS_ORIGINS", "PORT"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    s = get_settings()
    assert s.app_env == "dev"
    assert s.products_file == tmp_path / "Data Source" / "products.json"
    assert s.docs_enabled is True
    assert s.cors_origins == ("*",)
    assert s.port == 8085


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("PRODUCTS_FILE", str(tmp_path / "p.json"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("PORT", "9001")
    s = get_settings()
    assert s.app_env == "production"
    assert s.products_file == Path(tmp_path / "p.json")
    assert s.log_level == "DEBUG"
    assert s.docs_enabled is False
    assert s.cors_origins == ("http://a.test", "http://b.test")
    assert s.port == 9001


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("DOCS_ENABLED", "nope")
    s = get_settings()
    assert s.port == 8085
    assert s.docs_enabled is False


def test_settings_are_cached():
    assert get_settings() is get_settings()
