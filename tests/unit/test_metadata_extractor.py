"""Unit tests for MetadataExtractor field chains and the domain-aware price chain."""
from __future__ import annotations

import pytest

from linkpreview.app.domain.metadata_extractor import MetadataExtractor
from linkpreview.app.domain.models import ExtractedMetadata
from tests.test_data import (
    COST_HTML,
    ELEVENST_COLLECTED_DISCOUNT_HTML,
    ELEVENST_HTML,
    ELEVENST_SELECTOR_HTML,
    ELEVENST_URL,
    EMPTY_HTML,
    GMARKET_HTML,
    GMARKET_ITEM_URL,
    HEADING_ONLY_HTML,
    JSONLD_GRAPH_HTML,
    JSONLD_HTML,
    META_AND_JSONLD_HTML,
    OG_PRODUCT_HTML,
    PLAIN_DOCUMENT_HTML,
    PRICE_SUBSTRING_CLASS_HTML,
    SHOP_ITEM_URL,
    TWITTER_ONLY_HTML,
)


@pytest.fixture()
def extractor() -> MetadataExtractor:
    return MetadataExtractor()


def test_opengraph_page_yields_all_fields(extractor):
    result = extractor.extract(OG_PRODUCT_HTML, SHOP_ITEM_URL)
    assert result == ExtractedMetadata(
        title="Widget",
        description="A useful widget",
        image="https://shop.example.com/img/w.png",
        price="19,900원",
    )


def test_twitter_tags_used_when_opengraph_missing(extractor):
    result = extractor.extract(TWITTER_ONLY_HTML, SHOP_ITEM_URL)
    assert result.title == "Twitter title"
    assert result.description == "Twitter description"
    assert result.image == "https://cdn.example.com/t.jpg"


def test_document_title_description_and_touch_icon(extractor):
    result = extractor.extract(PLAIN_DOCUMENT_HTML, SHOP_ITEM_URL)
    assert result.title == "Plain document"
    assert result.description == "Plain description"
    assert result.image == "https://static.example.com/touch.png"


def test_heading_is_last_title_source(extractor):
    result = extractor.extract(HEADING_ONLY_HTML, SHOP_ITEM_URL)
    assert result.title == "Only a heading"
    assert result.description is None
    assert result.image is None


def test_title_and_description_are_truncated():
    html = (
        f'<html><head><meta property="og:title" content="{"T" * 250}">'
        f'<meta property="og:description" content="{"D" * 400}"></head></html>'
    )
    result = MetadataExtractor().extract(html, SHOP_ITEM_URL)
    assert result.title == "T" * 200
    assert result.description == "D" * 300


def test_custom_length_limits():
    html = '<html><head><meta property="og:title" content="abcdef"></head></html>'
    result = MetadataExtractor(max_title_length=3).extract(html, SHOP_ITEM_URL)
    assert result.title == "abc"


def test_empty_document_yields_all_none(extractor):
    assert extractor.extract(EMPTY_HTML, SHOP_ITEM_URL) == ExtractedMetadata()
    assert extractor.extract("", SHOP_ITEM_URL) == ExtractedMetadata()


def test_non_http_image_is_dropped(extractor):
    html = '<html><head><meta property="og:image" content="data:image/png;base64,AAAA"></head></html>'
    assert extractor.extract(html, SHOP_ITEM_URL).image is None


def test_gmarket_image_synthesized_from_product_code(extractor):
    result = extractor.extract(GMARKET_HTML, GMARKET_ITEM_URL, product_code="12345")
    assert result.image == "https://gdimg.gmarket.co.kr/12345/still/300"


def test_page_image_wins_over_synthesized_cdn_image(extractor):
    html = '<html><head><meta property="og:image" content="https://img.gmarket.co.kr/a.jpg"></head></html>'
    result = extractor.extract(html, GMARKET_ITEM_URL, product_code="12345")
    assert result.image == "https://img.gmarket.co.kr/a.jpg"


def test_product_code_ignored_outside_cdn_domains(extractor):
    assert extractor.extract(EMPTY_HTML, SHOP_ITEM_URL, product_code="12345").image is None


def test_gmarket_price_follows_selector_order(extractor):
    assert extractor.extract(GMARKET_HTML, GMARKET_ITEM_URL).price == "8,000원"


def test_elevenst_price_from_description_text(extractor):
    assert extractor.extract(ELEVENST_HTML, ELEVENST_URL).price == "19,900원"


def test_elevenst_rules_only_apply_on_elevenst(extractor):
    # Elsewhere the marketplace ".sale_price" selector is reached first.
    assert extractor.extract(ELEVENST_HTML, SHOP_ITEM_URL).price == "1"


def test_elevenst_collected_discount_price(extractor):
    assert extractor.extract(ELEVENST_COLLECTED_DISCOUNT_HTML, ELEVENST_URL).price == "15,000원"


def test_elevenst_selector_fallback(extractor):
    assert extractor.extract(ELEVENST_SELECTOR_HTML, ELEVENST_URL).price == "21,500원"


def test_jsonld_skips_malformed_and_non_product_blocks(extractor):
    assert extractor.extract(JSONLD_HTML, SHOP_ITEM_URL).price == "25,000원"


def test_jsonld_graph_and_offer_list(extractor):
    assert extractor.extract(JSONLD_GRAPH_HTML, SHOP_ITEM_URL).price == "1,234원"


def test_price_meta_beats_jsonld(extractor):
    assert extractor.extract(META_AND_JSONLD_HTML, SHOP_ITEM_URL).price == "11,000원"


def test_generic_selectors_return_trimmed_text(extractor):
    assert extractor.extract(COST_HTML, SHOP_ITEM_URL).price == "3,000원"
    assert extractor.extract(PRICE_SUBSTRING_CLASS_HTML, SHOP_ITEM_URL).price == "7,700원"


def test_site_price_rules_are_injectable():
    extractor = MetadataExtractor(site_price_rules={})
    assert extractor.extract(ELEVENST_HTML, ELEVENST_URL).price == "1"


def test_extract_is_idempotent(extractor):
    first = extractor.extract(OG_PRODUCT_HTML, SHOP_ITEM_URL)
    second = extractor.extract(OG_PRODUCT_HTML, SHOP_ITEM_URL)
    assert first == second
