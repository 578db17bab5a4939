"""Metadata extractor: pure parse of a fetched document into preview fields.

Price goes through a prioritized, domain-aware chain:

1. product price meta tags;
2. site-specific rules for the domain (see ``SITE_PRICE_RULES``);
3. marketplace selectors shared by most Korean shops;
4. JSON-LD ``Product.offers.price``;
5. generic ``.price``-style selectors.

The extractor never raises for missing fields; absence is ``None``.
"""
from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup
from loguru import logger

from linkpreview.app.constants import MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH
from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain import extraction_rules as rules
from linkpreview.app.domain.models import ExtractedMetadata
from linkpreview.app.domain.urls import absolutize, hostname_of


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).debug("")


def _clip(value: str | None, limit: int) -> str | None:
    if not value:
        return None
    return value.strip()[:limit] or None


class MetadataExtractor:
    def __init__(
        self,
        *,
        max_title_length: int = MAX_TITLE_LENGTH,
        max_description_length: int = MAX_DESCRIPTION_LENGTH,
        site_price_rules: dict[str, tuple[rules.Rule, ...]] | None = None,
    ) -> None:
        self._max_title_length = max_title_length
        self._max_description_length = max_description_length
        self._site_price_rules = dict(
            rules.SITE_PRICE_RULES if site_price_rules is None else site_price_rules
        )

    def extract(self, html: str, final_url: str, *, product_code: str | None = None) -> ExtractedMetadata:
        domain = hostname_of(final_url)
        soup = BeautifulSoup(html or "", "lxml")
        _log("document_parsed", domain=domain, meta_count=len(soup.find_all("meta")))

        title = _clip(rules.first_match(rules.TITLE_RULES, soup), self._max_title_length)
        description = _clip(
            rules.first_match(rules.DESCRIPTION_RULES, soup),
            self._max_description_length,
        )
        image = self._extract_image(soup, final_url, domain, product_code)
        price = rules.first_match(self.price_rules_for(domain), soup)
        _log("price_candidate", domain=domain, price=price)

        return ExtractedMetadata(
            title=title,
            description=description,
            image=image,
            price=price.strip() if price else None,
        )

    def price_rules_for(self, domain: str) -> tuple[rules.Rule, ...]:
        site_rules: tuple[rules.Rule, ...] = ()
        for needle, site in self._site_price_rules.items():
            if needle in domain:
                site_rules += site
        return (
            rules.PRICE_META_RULES
            + site_rules
            + rules.MARKETPLACE_PRICE_RULES
            + rules.STRUCTURED_PRICE_RULES
            + rules.GENERIC_PRICE_RULES
        )

    def _extract_image(
        self,
        soup: BeautifulSoup,
        final_url: str,
        domain: str,
        product_code: str | None,
    ) -> str | None:
        image = rules.first_match(rules.IMAGE_RULES, soup)
        if not image:
            image = rules.product_image_url(domain, product_code)
        return absolutize(image, final_url)
