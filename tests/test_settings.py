from __future__ import annotations

from pathlib import Path

from client.settings import DEFAULT_API_BASE_URL, Settings


def test_defaults_when_environment_is_empty(monkeypatch):
    for name in ("AFYA_API_BASE_URL", "AFYA_STORE_PATH", "AFYA_HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.http_timeout is None


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AFYA_API_BASE_URL", "http://localhost:8000/")
    monkeypatch.setenv("AFYA_STORE_PATH", str(tmp_path / "s.db"))
    monkeypatch.setenv("AFYA_HTTP_TIMEOUT", "12.5")

    settings = Settings.from_env()

    assert settings.api_base_url == "http://localhost:8000"
    assert settings.store_path == Path(tmp_path / "s.db")
    assert settings.http_timeout == 12.5


def test_bad_timeout_is_ignored(monkeypatch):
    monkeypatch.setenv("AFYA_HTTP_TIMEOUT", "soon")
    assert Settings.from_env().http_timeout is None
