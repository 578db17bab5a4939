"""Unit tests for settings-driven wiring (composition root and factories)."""
from __future__ import annotations

import pytest

from linkpreview.app.composition import create_app_dependencies
from linkpreview.app.config.settings import Settings
from linkpreview.app.infrastructure.browser.factory import create_browser_renderer
from linkpreview.app.infrastructure.browser.playwright_renderer import PlaywrightBrowserRenderer
from linkpreview.app.infrastructure.http.factory import create_http_client
from linkpreview.app.infrastructure.http.httpx_client import HttpxHttpClient


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("FETCH_DELAY_MIN_SECONDS", "0.5")
    monkeypatch.setenv("BROWSER_FALLBACK_ENABLED", "false")
    monkeypatch.setenv("MAX_TITLE_LENGTH", "80")
    settings = Settings()
    assert settings.fetch_delay_min_seconds == 0.5
    assert settings.browser_fallback_enabled is False
    assert settings.max_title_length == 80
    assert settings.browser_locale == "ko-KR"


def test_browser_factory_respects_toggle_and_backend(monkeypatch):
    monkeypatch.setenv("BROWSER_FALLBACK_ENABLED", "false")
    assert create_browser_renderer(Settings()) is None

    monkeypatch.setenv("BROWSER_FALLBACK_ENABLED", "true")
    assert isinstance(create_browser_renderer(Settings()), PlaywrightBrowserRenderer)

    monkeypatch.setenv("BROWSER_BACKEND", "selenium")
    with pytest.raises(ValueError):
        create_browser_renderer(Settings())


@pytest.mark.asyncio
async def test_http_factory_rejects_unknown_backend(monkeypatch):
    client = create_http_client(Settings())
    assert isinstance(client, HttpxHttpClient)
    await client.close()

    monkeypatch.setenv("HTTP_CLIENT_BACKEND", "requests")
    with pytest.raises(ValueError):
        create_http_client(Settings())


@pytest.mark.asyncio
async def test_connect_and_close_lifecycle(monkeypatch):
    monkeypatch.setenv("BROWSER_FALLBACK_ENABLED", "false")
    deps = create_app_dependencies()

    with pytest.raises(RuntimeError):
        deps.metadata_resolver

    await deps.connect()
    assert deps.metadata_resolver is not None
    assert deps.resolution_queue.pending == 0

    await deps.close()
    with pytest.raises(RuntimeError):
        deps.resolution_queue
