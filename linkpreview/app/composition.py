"""Composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle. No DI container library; explicit wiring only.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from linkpreview.app.application.resolution_queue import SerialResolutionQueue
from linkpreview.app.config.settings import Settings
from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.fetch_cascade import FetchCascade
from linkpreview.app.domain.metadata_extractor import MetadataExtractor
from linkpreview.app.domain.metadata_resolver import MetadataResolver
from linkpreview.app.domain.redirect_resolver import RedirectResolver
from linkpreview.app.infrastructure.browser.factory import create_browser_renderer
from linkpreview.app.infrastructure.http.factory import create_http_client
from linkpreview.app.ports.http_client import AbstractHttpClient


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class AppDependencies:
    """Holds wired dependencies and their lifecycle."""

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._http_client: AbstractHttpClient | None = None
        self._metadata_resolver: MetadataResolver | None = None
        self._resolution_queue: SerialResolutionQueue | None = None
        self._connected = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def metadata_resolver(self) -> MetadataResolver:
        if self._metadata_resolver is None:
            raise RuntimeError("metadata_resolver is not initialized")
        return self._metadata_resolver

    @property
    def resolution_queue(self) -> SerialResolutionQueue:
        if self._resolution_queue is None:
            raise RuntimeError("resolution_queue is not initialized")
        return self._resolution_queue

    async def connect(self) -> None:
        settings = self._settings
        self._http_client = create_http_client(settings)
        browser = create_browser_renderer(settings)

        cascade = FetchCascade(
            self._http_client,
            connect_timeout_seconds=settings.fetch_connect_timeout_seconds,
            read_timeout_seconds=settings.fetch_read_timeout_seconds,
            browser=browser,
            delay_range=(settings.fetch_delay_min_seconds, settings.fetch_delay_max_seconds),
        )
        self._metadata_resolver = MetadataResolver(
            RedirectResolver(self._http_client, settings.redirect_timeout_seconds),
            cascade,
            extractor=MetadataExtractor(
                max_title_length=settings.max_title_length,
                max_description_length=settings.max_description_length,
            ),
        )
        self._resolution_queue = SerialResolutionQueue(
            self._metadata_resolver,
            interval_seconds=settings.resolution_queue_interval_seconds,
        )
        self._connected = True
        _log("dependencies_connected", browser_fallback=browser is not None)

    async def close(self) -> None:
        if self._http_client is not None:
            try:
                await self._http_client.close()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._http_client = None

        self._metadata_resolver = None
        self._resolution_queue = None
        self._connected = False


def create_app_dependencies(settings: Settings | None = None) -> AppDependencies:
    return AppDependencies(settings=settings or Settings())
