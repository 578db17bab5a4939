from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI

from linkpreview.app.domain.models import MetadataResult, RenderedPage
from linkpreview.app.domain.urls import hostname_of
from linkpreview.app.ports.http_client import RequestTimeout
from linkpreview.app.routers.health import health_router
from linkpreview.app.routers.metadata import metadata_router


class FakeResponse:
    """Implements the HttpResponse protocol. An empty ``url`` echoes the requested URL."""

    def __init__(
        self,
        status_code: int = 200,
        text: str = "",
        *,
        url: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.url = url
        self.headers = headers or {}

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def for_url(self, requested_url: str) -> FakeResponse:
        if self.url:
            return self
        return FakeResponse(self.status_code, self.text, url=requested_url, headers=self.headers)


class FakeHttpClient:
    """Implements AbstractHttpClient with scripted outcomes, consumed one per call.

    When a script runs out the ``default_*`` outcome is used. Exceptions in a
    script are raised instead of returned.
    """

    def __init__(
        self,
        *,
        get_outcomes: list[Any] | None = None,
        head_outcomes: list[Any] | None = None,
        default_get: Any = None,
        default_head: Any = None,
    ) -> None:
        self._get_outcomes = list(get_outcomes or [])
        self._head_outcomes = list(head_outcomes or [])
        self._default_get = default_get if default_get is not None else FakeResponse(404)
        self._default_head = default_head if default_head is not None else FakeResponse(200)
        self.get_calls: list[tuple[str, dict[str, str], RequestTimeout]] = []
        self.head_calls: list[tuple[str, dict[str, str], RequestTimeout]] = []
        self.closed = False

    @staticmethod
    def _next(script: list[Any], default: Any, url: str) -> FakeResponse:
        outcome = script.pop(0) if script else default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome.for_url(url)

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> FakeResponse:
        self.get_calls.append((url, dict(headers or {}), timeout))
        return self._next(self._get_outcomes, self._default_get, url)

    async def head(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> FakeResponse:
        self.head_calls.append((url, dict(headers or {}), timeout))
        return self._next(self._head_outcomes, self._default_head, url)

    async def close(self) -> None:
        self.closed = True


class FakeBrowserRenderer:
    """Implements BrowserRenderer; returns ``page`` or raises ``error``."""

    def __init__(self, page: RenderedPage | None = None, *, error: Exception | None = None) -> None:
        self._page = page
        self._error = error
        self.rendered: list[str] = []

    async def render(self, url: str) -> RenderedPage:
        self.rendered.append(url)
        if self._error is not None:
            raise self._error
        return self._page or RenderedPage(html="<html></html>", final_url=url)


class FakeMetadataResolver:
    """Implements the resolver surface routers use: ``resolve(url)``."""

    def __init__(
        self,
        results_by_url: dict[str, MetadataResult] | None = None,
        *,
        raise_on_resolve: Exception | None = None,
    ) -> None:
        self._results_by_url = results_by_url or {}
        self._raise_on_resolve = raise_on_resolve
        self.resolved: list[str] = []

    async def resolve(self, url: str) -> MetadataResult:
        self.resolved.append(url)
        if self._raise_on_resolve is not None:
            raise self._raise_on_resolve
        result = self._results_by_url.get(url)
        if result is None:
            result = MetadataResult(domain=hostname_of(url))
        return result

    def set_result(self, url: str, result: MetadataResult) -> None:
        self._results_by_url[url] = result


class RecordingSleep:
    """Stands in for asyncio.sleep; records requested delays and returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def test_app() -> FastAPI:
    resolver = FakeMetadataResolver()
    app = FastAPI()
    app.state.metadata_resolver = resolver
    # Routers only await .resolve(url); the fake resolver is a valid queue stand-in.
    app.state.resolution_queue = resolver
    app.include_router(health_router)
    app.include_router(metadata_router)
    return app
