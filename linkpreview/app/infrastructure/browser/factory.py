"""Browser renderer factory: selects implementation from config."""
from __future__ import annotations

from linkpreview.app.config.settings import Settings
from linkpreview.app.infrastructure.browser.playwright_renderer import PlaywrightBrowserRenderer
from linkpreview.app.ports.browser import BrowserRenderer


def create_browser_renderer(settings: Settings) -> BrowserRenderer | None:
    """Return the configured renderer, or None when the browser fallback is disabled."""
    if not settings.browser_fallback_enabled:
        return None

    backend = settings.browser_backend.strip().lower()

    if backend == "playwright":
        return PlaywrightBrowserRenderer(
            user_agent=settings.browser_user_agent,
            locale=settings.browser_locale,
            viewport_width=settings.browser_viewport_width,
            viewport_height=settings.browser_viewport_height,
            navigation_timeout_seconds=settings.browser_navigation_timeout_seconds,
            settle_seconds=settings.browser_settle_seconds,
            challenge_wait_seconds=settings.browser_challenge_wait_seconds,
            title_wait_timeout_seconds=settings.browser_title_wait_timeout_seconds,
        )

    raise ValueError(f"Unsupported browser backend: {backend}")
