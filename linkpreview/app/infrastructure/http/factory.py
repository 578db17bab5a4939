"""HTTP client factory: builds AbstractHttpClient from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from linkpreview.app.config.settings import Settings
from linkpreview.app.infrastructure.http.httpx_client import HttpxHttpClient
from linkpreview.app.ports.http_client import AbstractHttpClient


def create_http_client(settings: Settings) -> AbstractHttpClient:
    """Build an HTTP client from settings. Timeouts are applied per-request by the adapter."""
    backend = settings.http_client_backend.strip().lower()

    if backend == "httpx":
        return HttpxHttpClient(httpx.AsyncClient())

    raise ValueError(f"Unsupported http client backend: {backend}")
