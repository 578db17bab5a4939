"""Price normalizer: turns a raw price candidate into ``"19,900원"`` or None.

Pure and deterministic given (raw text, domain). Scraped "prices" are often
inventory counters or review labels picked up by loose selectors; those are
rejected through a denylist unless the text carries the currency marker.
"""
from __future__ import annotations

import re
from typing import Callable, Optional

from loguru import logger

from linkpreview.app.constants import CURRENCY_MARKER

INVALID_PRICE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"총\s*\d+\s*개"),
    re.compile(r"총\s*이미지\s*수"),
    re.compile(r"총\s*리뷰"),
    re.compile(r"총\s*\d+"),
    re.compile(r"^\d+\s*개$"),
    re.compile(r"재고"),
    re.compile(r"수량"),
    re.compile(r"품절"),
    re.compile(r"이미지\s*수"),
    re.compile(r"리뷰\s*보기"),
    re.compile(r"^[\s\-+=]+$"),
    re.compile(r"^[가-힣\s]*\d+[가-힣\s]*$"),
)

_NON_PRICE_CHARS = re.compile(rf"[^\d,{CURRENCY_MARKER}]")
_NUMERIC_WITH_SEPARATORS = re.compile(r"^\d+[,\d]*$")
_DISCOUNT_THEN_PRICE = re.compile(rf"(\d+)%([0-9,]+{CURRENCY_MARKER})")

PriceQuirk = Callable[[str], Optional[str]]


def _discount_prefixed_price(text: str) -> str | None:
    """``"23%15,900원"`` -> ``"15,900원"``; None when the shape does not match."""
    if "%" not in text:
        return None
    match = _DISCOUNT_THEN_PRICE.search(text)
    return match.group(2) if match else None


# Domain substring -> transform tried before generic cleaning.
DOMAIN_PRICE_QUIRKS: dict[str, PriceQuirk] = {
    "jnmall.kr": _discount_prefixed_price,
}


def is_denylisted(text: str) -> bool:
    stripped = text.strip()
    for pattern in INVALID_PRICE_PATTERNS:
        if pattern.search(stripped):
            logger.debug("price candidate {!r} matched denylist pattern {}", text, pattern.pattern)
            return True
    return False


def clean_price_text(text: str) -> str:
    cleaned = _NON_PRICE_CHARS.sub("", text).strip()
    if CURRENCY_MARKER not in cleaned and _NUMERIC_WITH_SEPARATORS.match(cleaned):
        cleaned += CURRENCY_MARKER
    return cleaned


class PriceNormalizer:
    """Cleans raw price candidates. Stateless; one instance is shared per resolver."""

    def __init__(self, quirks: dict[str, PriceQuirk] | None = None) -> None:
        self._quirks = dict(DOMAIN_PRICE_QUIRKS if quirks is None else quirks)

    def normalize(self, raw: str | None, domain: str) -> str | None:
        if raw is None or not raw.strip():
            return None

        if is_denylisted(raw) and CURRENCY_MARKER not in raw:
            logger.debug("discarding non-price candidate {!r} for {}", raw, domain)
            return None

        price: str | None = None
        for needle, quirk in self._quirks.items():
            if needle in domain:
                price = quirk(raw)
                if price is not None:
                    break
        if price is None:
            price = clean_price_text(raw)

        price = price.strip()
        if not price or not any(ch.isdigit() for ch in price):
            return None
        return price
