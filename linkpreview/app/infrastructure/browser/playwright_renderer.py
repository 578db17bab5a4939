"""Headless Chromium renderer (Playwright) implementing the BrowserRenderer port.

A browser process is launched per call and closed on every exit path.
"""
from __future__ import annotations

from typing import Any

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from linkpreview.app.constants import BOT_CHALLENGE_TITLE_PATTERN
from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.models import RenderedPage
from linkpreview.app.ports.browser import BrowserRenderError

DEFAULT_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
)

HIDE_AUTOMATION_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
window.chrome = { runtime: {} };
"""

CHALLENGE_CLEARED_PREDICATE = (
    "() => !/" + BOT_CHALLENGE_TITLE_PATTERN.pattern + "/i.test(document.title)"
)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def is_bot_challenge_title(title: str | None) -> bool:
    return bool(title) and BOT_CHALLENGE_TITLE_PATTERN.search(title) is not None


class PlaywrightBrowserRenderer:
    def __init__(
        self,
        *,
        user_agent: str,
        locale: str = "ko-KR",
        viewport_width: int = 1920,
        viewport_height: int = 1080,
        navigation_timeout_seconds: float = 30.0,
        settle_seconds: float = 3.0,
        challenge_wait_seconds: float = 5.0,
        title_wait_timeout_seconds: float = 10.0,
        launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS,
    ) -> None:
        self._user_agent = user_agent
        self._locale = locale
        self._viewport = {"width": viewport_width, "height": viewport_height}
        self._navigation_timeout_ms = navigation_timeout_seconds * 1000
        self._settle_ms = settle_seconds * 1000
        self._challenge_wait_ms = challenge_wait_seconds * 1000
        self._title_wait_timeout_ms = title_wait_timeout_seconds * 1000
        self._launch_args = list(launch_args)

    async def render(self, url: str) -> RenderedPage:
        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=True, args=self._launch_args)
                try:
                    return await self._capture(browser, url)
                finally:
                    try:
                        await browser.close()
                    except PlaywrightError as exc:
                        logger.warning("browser close failed: {}", exc)
        except PlaywrightError as exc:
            raise BrowserRenderError(f"browser render failed for {url}: {exc}") from exc

    async def _capture(self, browser: Any, url: str) -> RenderedPage:
        context = await browser.new_context(
            user_agent=self._user_agent,
            locale=self._locale,
            viewport=self._viewport,
        )
        await context.add_init_script(HIDE_AUTOMATION_SCRIPT)
        page = await context.new_page()
        await page.goto(url, wait_until="domcontentloaded", timeout=self._navigation_timeout_ms)
        await page.wait_for_timeout(self._settle_ms)

        title = await page.title()
        if is_bot_challenge_title(title):
            _log("bot_challenge_detected", url=url, title=title)
            await page.wait_for_timeout(self._challenge_wait_ms)
            if is_bot_challenge_title(await page.title()):
                _log("bot_challenge_persisting", url=url)

        try:
            await page.wait_for_function(
                CHALLENGE_CLEARED_PREDICATE,
                timeout=self._title_wait_timeout_ms,
            )
        except PlaywrightTimeoutError as exc:
            raise BrowserRenderError(f"bot challenge did not clear for {url}") from exc

        title = await page.title()
        html = await page.content()
        _log("browser_page_captured", url=url, final_url=page.url, title=title)
        return RenderedPage(html=html, final_url=page.url, title=title)
