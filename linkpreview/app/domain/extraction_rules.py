"""Extraction rules: ordered strategy lists per field.

A rule is a pure function ``(soup) -> str | None``. Lists are evaluated left to
right and the first non-empty value wins. Site-specific lists are keyed by a
domain substring and tried before the generic lists, so supporting a new shop is
a table entry, not a new branch in the extractor.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Iterable, Iterator, Optional

from bs4 import BeautifulSoup

from linkpreview.app.constants import CURRENCY_MARKER

Rule = Callable[[BeautifulSoup], Optional[str]]


def first_match(rules: Iterable[Rule], soup: BeautifulSoup) -> str | None:
    for rule in rules:
        value = rule(soup)
        if value:
            return value
    return None


def _meta_selector(key: str) -> str:
    attr = "property" if key.startswith(("og:", "product:")) else "name"
    return f'meta[{attr}="{key}"]'


def meta_content(key: str) -> Rule:
    """``<meta property="og:*">`` / ``<meta name="*">`` content attribute."""
    selector = _meta_selector(key)

    def rule(soup: BeautifulSoup) -> str | None:
        tag = soup.select_one(selector)
        if tag is None:
            return None
        return tag.get("content") or None

    rule.__name__ = f"meta_content[{key}]"
    return rule


def link_href(rel: str) -> Rule:
    selector = f'link[rel="{rel}"]'

    def rule(soup: BeautifulSoup) -> str | None:
        tag = soup.select_one(selector)
        if tag is None:
            return None
        return tag.get("href") or None

    rule.__name__ = f"link_href[{rel}]"
    return rule


def element_text(selector: str) -> Rule:
    """Trimmed text of the first element matching ``selector``."""

    def rule(soup: BeautifulSoup) -> str | None:
        tag = soup.select_one(selector)
        if tag is None:
            return None
        return tag.get_text().strip() or None

    rule.__name__ = f"element_text[{selector}]"
    return rule


def meta_text_pattern(patterns: Iterable[str], keys: Iterable[str]) -> Rule:
    """First capture group of any pattern found in the given meta tags' content.

    Patterns are the outer loop: a stronger pattern in a later tag beats a weaker
    pattern in an earlier one.
    """
    compiled = tuple(re.compile(p) for p in patterns)
    sources = tuple(meta_content(key) for key in keys)

    def rule(soup: BeautifulSoup) -> str | None:
        texts = [source(soup) or "" for source in sources]
        for pattern in compiled:
            for text in texts:
                match = pattern.search(text)
                if match:
                    return match.group(1)
        return None

    rule.__name__ = "meta_text_pattern"
    return rule


def _format_structured_price(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            value = str(value).strip()
            return value if CURRENCY_MARKER in value else f"{value}{CURRENCY_MARKER}"
    # Won has no minor unit.
    return f"{round(number):,}{CURRENCY_MARKER}"


def structured_meta_price(key: str) -> Rule:
    """Machine-readable price meta tag (``product:price:amount``), formatted like JSON-LD prices."""
    source = meta_content(key)

    def rule(soup: BeautifulSoup) -> str | None:
        return _format_structured_price(source(soup))

    rule.__name__ = f"structured_meta_price[{key}]"
    return rule


def _iter_jsonld_nodes(data: Any) -> Iterator[dict[str, Any]]:
    if isinstance(data, list):
        for item in data:
            yield from _iter_jsonld_nodes(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get("@graph")
        if isinstance(graph, list):
            yield from _iter_jsonld_nodes(graph)


def _is_product(node: dict[str, Any]) -> bool:
    node_type = node.get("@type")
    if isinstance(node_type, list):
        return "Product" in node_type
    return node_type == "Product"


def _offer_price(offers: Any) -> Any:
    if isinstance(offers, list):
        for offer in offers:
            price = _offer_price(offer)
            if price not in (None, ""):
                return price
        return None
    if isinstance(offers, dict):
        price = offers.get("price")
        if price in (None, ""):
            price = offers.get("lowPrice")
        return price
    return None


def jsonld_product_price(soup: BeautifulSoup) -> str | None:
    """``Product.offers.price`` from JSON-LD blocks; broken blocks are skipped."""
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except ValueError:
            continue
        for node in _iter_jsonld_nodes(data):
            if not _is_product(node):
                continue
            price = _format_structured_price(_offer_price(node.get("offers")))
            if price:
                return price
    return None


def css_texts(selectors: Iterable[str]) -> tuple[Rule, ...]:
    return tuple(element_text(selector) for selector in selectors)


TITLE_RULES: tuple[Rule, ...] = (
    meta_content("og:title"),
    meta_content("twitter:title"),
    meta_content("title"),
    element_text("title"),
    element_text("h1"),
)

DESCRIPTION_RULES: tuple[Rule, ...] = (
    meta_content("og:description"),
    meta_content("twitter:description"),
    meta_content("description"),
    meta_content("summary"),
)

IMAGE_RULES: tuple[Rule, ...] = (
    meta_content("og:image"),
    meta_content("twitter:image"),
    meta_content("twitter:image:src"),
    link_href("apple-touch-icon"),
    link_href("icon"),
)

# Structured meta values are formatted like JSON-LD prices, so a bare "19900"
# becomes "19,900원" here and never reaches the normalizer's digits-only denylist.
PRICE_META_RULES: tuple[Rule, ...] = (
    structured_meta_price("product:price:amount"),
    structured_meta_price("product:price"),
)

# 11st puts the sale price into the description text ("가격 : 19,900원").
ELEVENST_PRICE_RULES: tuple[Rule, ...] = (
    meta_text_pattern(
        (r"가격\s*:\s*([0-9,]+원)", r"할인모음가:\s*([0-9,]+원)"),
        ("og:description", "description"),
    ),
) + css_texts(
    (
        ".prc_t .prc",
        ".sale_price",
        ".price_real",
        ".prd_price .price",
        ".total_price .price",
        ".selling_price",
        ".current_price",
        ".prc_price",
        ".c_prd_price .sale",
        ".price_innfo .sale_price",
        ".price_wrap .price",
        ".price_info .sale_price",
    )
)

# Domain substring -> price rules tried before the generic marketplace list.
SITE_PRICE_RULES: dict[str, tuple[Rule, ...]] = {
    "11st.co.kr": ELEVENST_PRICE_RULES,
}

# Gmarket-family markup; common enough across Korean shops to try everywhere.
MARKETPLACE_PRICE_RULES: tuple[Rule, ...] = css_texts(
    (
        ".item_price .price_innerwrap .price_real .price",
        ".item_price .discount_price",
        ".price_real .price",
        ".item_price .price",
        ".product-price .price",
        ".prc_t .prc",
        ".real_price",
        ".sale_price",
        "#__itemDetailForm .prc_t .prc",
        ".box_item_price .price",
        '[data-montelena="item_price"]',
        "._price",
        ".price_num",
        ".price_value",
    )
)

STRUCTURED_PRICE_RULES: tuple[Rule, ...] = (jsonld_product_price,)

GENERIC_PRICE_RULES: tuple[Rule, ...] = css_texts(
    (
        ".price",
        ".cost",
        ".sale-price",
        ".current-price",
        '[class*="price"]',
    )
)

# Domain substring -> product image CDN template, filled with the product code.
PRODUCT_IMAGE_CDN: dict[str, str] = {
    "gmarket": "https://gdimg.gmarket.co.kr/{code}/still/300",
}


def product_image_url(domain: str, product_code: str | None) -> str | None:
    if not product_code:
        return None
    for needle, template in PRODUCT_IMAGE_CDN.items():
        if needle in domain:
            return template.format(code=product_code)
    return None
