"""Redirect resolver: expands marketplace short/affiliate links.

Best-effort: every failure degrades to the original URL; nothing is raised.
"""
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse

from loguru import logger

from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.models import RedirectResolution
from linkpreview.app.domain.urls import DEFAULT_PRODUCT_CODE_PARAM, product_code_from_url
from linkpreview.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    RequestTimeout,
)

# Redirector hostname -> query parameter that carries the product code on the target.
KNOWN_REDIRECTORS: dict[str, str] = {
    "link.gmarket.co.kr": "goodscode",
}

PROBE_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
    "Accept": "*/*",
    "Accept-Language": "ko-KR,ko;q=0.9",
}

RECOVERY_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
}


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class RedirectResolver:
    def __init__(
        self,
        client: AbstractHttpClient,
        timeout_seconds: float,
        *,
        redirectors: Mapping[str, str] | None = None,
    ) -> None:
        self._client = client
        self._timeout = RequestTimeout(connect_seconds=timeout_seconds, read_seconds=timeout_seconds)
        self._redirectors = dict(KNOWN_REDIRECTORS if redirectors is None else redirectors)

    def _code_param(self, url: str) -> str | None:
        """Product-code parameter for a redirector URL, None for any other host."""
        return self._redirectors.get((urlparse(url).hostname or "").lower())

    async def resolve(self, url: str) -> RedirectResolution:
        param = self._code_param(url)
        if param is None:
            return RedirectResolution(final_url=url, product_code=product_code_from_url(url))

        final_url = await self._probe(url, PROBE_HEADERS)
        if final_url is None or final_url == url:
            return RedirectResolution(final_url=url, product_code=None)

        product_code = product_code_from_url(final_url, param)
        _log("redirect_resolved", url=url, final_url=final_url, product_code=product_code)
        return RedirectResolution(final_url=final_url, product_code=product_code)

    async def recover_product_code(self, url: str) -> str | None:
        """Second chance at a product code for the placeholder card."""
        param = self._code_param(url)
        code = product_code_from_url(url, param or DEFAULT_PRODUCT_CODE_PARAM)
        if code or param is None:
            return code
        final_url = await self._probe(url, RECOVERY_HEADERS)
        code = product_code_from_url(final_url, param)
        if code:
            _log("product_code_recovered", url=url, product_code=code)
        return code

    async def _probe(self, url: str, headers: dict[str, str]) -> str | None:
        try:
            response = await self._client.head(
                url,
                timeout=self._timeout,
                follow_redirects=True,
                headers=headers,
            )
        except HttpClientError as exc:
            _log("redirect_probe_failed", url=url, error=str(exc))
            return None
        return str(response.url) if response.url else None
