"""httpx implementation of the HTTP port, shared by the redirect probe and the fetch cascade."""
from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from linkpreview.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
    RequestTimeout,
)


@dataclass(frozen=True)
class _ResponseSnapshot:
    """Body, status and post-redirect URL copied out of an httpx.Response."""

    status_code: int
    url: str
    text: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def of(cls, response: httpx.Response) -> "_ResponseSnapshot":
        return cls(
            status_code=response.status_code,
            url=str(response.url),
            text=response.text,
            headers=dict(response.headers),
        )


def _httpx_timeout(timeout: RequestTimeout) -> httpx.Timeout:
    return httpx.Timeout(
        connect=timeout.connect_seconds,
        read=timeout.read_seconds,
        write=timeout.read_seconds,
        pool=timeout.connect_seconds,
    )


class HttpxHttpClient(AbstractHttpClient):
    """One pooled httpx.AsyncClient for every outbound request of the service."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        return await self._send("GET", url, timeout, follow_redirects, headers)

    async def head(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        return await self._send("HEAD", url, timeout, follow_redirects, headers)

    async def _send(
        self,
        method: str,
        url: str,
        timeout: RequestTimeout,
        follow_redirects: bool,
        headers: dict[str, str] | None,
    ) -> HttpResponse:
        try:
            response = await self._client.request(
                method,
                url,
                timeout=_httpx_timeout(timeout),
                follow_redirects=follow_redirects,
                headers=headers or {},
            )
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"{method} {url} timed out") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HttpClientError(f"{method} {url} failed: {exc}") from exc
        return _ResponseSnapshot.of(response)

    async def close(self) -> None:
        await self._client.aclose()
