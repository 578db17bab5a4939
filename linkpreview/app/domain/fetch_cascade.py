"""Fetch cascade: serial GET attempts under rotating client identities.

Uses the HTTP port (AbstractHttpClient) and, when every identity has been
rejected, the BrowserRenderer port. Attempts are strictly sequential with a
random pause between them; the first 2xx response wins.
"""
from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, Sequence

from loguru import logger

from linkpreview.app.constants import BROWSER_STRATEGY
from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.client_identities import DEFAULT_CLIENT_IDENTITIES, build_headers
from linkpreview.app.domain.models import ClientIdentity, FetchResult
from linkpreview.app.ports.browser import BrowserRenderError, BrowserRenderer
from linkpreview.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    RequestTimeout,
)


class PageFetchError(Exception):
    """Raised when every client identity and the browser fallback failed."""


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class FetchCascade:
    """Fetches page HTML, trying each ClientIdentity in order, then the browser."""

    def __init__(
        self,
        client: AbstractHttpClient,
        connect_timeout_seconds: float,
        read_timeout_seconds: float,
        *,
        identities: Sequence[ClientIdentity] = DEFAULT_CLIENT_IDENTITIES,
        browser: BrowserRenderer | None = None,
        delay_range: tuple[float, float] = (2.0, 3.0),
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if not identities:
            raise ValueError("at least one client identity is required")
        self._client = client
        self._timeout = RequestTimeout(
            connect_seconds=connect_timeout_seconds,
            read_seconds=read_timeout_seconds,
        )
        self._identities = tuple(identities)
        self._browser = browser
        low, high = delay_range
        self._delay_range = (min(low, high), max(low, high))
        self._sleep = sleep

    def _next_delay(self) -> float:
        low, high = self._delay_range
        return random.uniform(low, high)

    async def fetch(self, url: str) -> FetchResult:
        last_failure = "no attempt made"
        for index, identity in enumerate(self._identities):
            if index > 0:
                await self._sleep(self._next_delay())
            try:
                response = await self._client.get(
                    url,
                    timeout=self._timeout,
                    follow_redirects=True,
                    headers=build_headers(identity),
                )
            except HttpClientTimeoutError as exc:
                last_failure = f"timeout ({identity.name})"
                _log("fetch_attempt_failed", url=url, identity=identity.name, error=str(exc))
                continue
            except HttpClientError as exc:
                last_failure = f"{exc} ({identity.name})"
                _log("fetch_attempt_failed", url=url, identity=identity.name, error=str(exc))
                continue

            if response.is_success:
                _log("fetch_succeeded", url=url, identity=identity.name, status=response.status_code)
                return FetchResult(
                    page_source=response.text,
                    status_code=response.status_code,
                    final_url=str(response.url) or url,
                    strategy=identity.name,
                )
            last_failure = f"http status {response.status_code} ({identity.name})"
            _log("fetch_attempt_rejected", url=url, identity=identity.name, status=response.status_code)

        if self._browser is None:
            raise PageFetchError(f"all client identities failed for {url}: {last_failure}")
        return await self._render_in_browser(url, last_failure)

    async def _render_in_browser(self, url: str, last_failure: str) -> FetchResult:
        _log("browser_fallback_started", url=url, last_failure=last_failure)
        try:
            page = await self._browser.render(url)
        except BrowserRenderError as exc:
            raise PageFetchError(f"browser fallback failed for {url}: {exc}") from exc
        _log("fetch_succeeded", url=url, identity=BROWSER_STRATEGY, status=200)
        return FetchResult(
            page_source=page.html,
            status_code=200,
            final_url=page.final_url or url,
            strategy=BROWSER_STRATEGY,
        )
