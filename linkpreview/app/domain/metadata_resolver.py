"""Metadata resolver: URL in, preview card out.

Stages run sequentially: redirect -> fetch cascade -> extract -> normalize price.
Only a structurally invalid URL is raised to the caller (InvalidUrlError); every
other failure is logged and answered with a placeholder card.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.fallback_provider import FallbackProvider
from linkpreview.app.domain.fetch_cascade import FetchCascade
from linkpreview.app.domain.metadata_extractor import MetadataExtractor
from linkpreview.app.domain.models import MetadataResult
from linkpreview.app.domain.price_normalizer import PriceNormalizer
from linkpreview.app.domain.redirect_resolver import RedirectResolver
from linkpreview.app.domain.urls import hostname_of, is_minimally_valid_url, product_code_from_url


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class MetadataResolver:
    def __init__(
        self,
        redirect_resolver: RedirectResolver,
        fetch_cascade: FetchCascade,
        *,
        extractor: MetadataExtractor | None = None,
        price_normalizer: PriceNormalizer | None = None,
        fallback_provider: FallbackProvider | None = None,
    ) -> None:
        self._redirects = redirect_resolver
        self._cascade = fetch_cascade
        self._extractor = extractor or MetadataExtractor()
        self._prices = price_normalizer or PriceNormalizer()
        self._fallback = fallback_provider or FallbackProvider()

    async def resolve(self, url: str) -> MetadataResult:
        domain = hostname_of(url)
        url = url.strip()
        product_code: str | None = None
        try:
            redirect = await self._redirects.resolve(url)
            product_code = redirect.product_code

            fetched = await self._cascade.fetch(redirect.final_url)
            final_url = fetched.final_url
            if not is_minimally_valid_url(final_url):
                final_url = redirect.final_url
            final_domain = hostname_of(final_url)
            product_code = product_code or product_code_from_url(final_url)

            extracted = self._extractor.extract(
                fetched.page_source,
                final_url,
                product_code=product_code,
            )
            price = self._prices.normalize(extracted.price, final_domain)
        except Exception as exc:
            _log("metadata_fallback_used", url=url, domain=domain, error=str(exc))
            return await self._fallback_result(url, domain, product_code)

        _log(
            "metadata_resolved",
            url=url,
            domain=final_domain,
            strategy=fetched.strategy,
            has_title=extracted.title is not None,
            has_image=extracted.image is not None,
            price=price,
        )
        return MetadataResult(
            domain=final_domain,
            title=extracted.title,
            description=extracted.description,
            image=extracted.image,
            price=price,
        )

    async def _fallback_result(self, url: str, domain: str, product_code: str | None) -> MetadataResult:
        if product_code is None:
            product_code = await self._redirects.recover_product_code(url)
        return self._fallback.build(url, domain, product_code=product_code)
