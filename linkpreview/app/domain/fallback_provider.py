"""Placeholder metadata for links whose pages could not be fetched or parsed."""
from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.extraction_rules import product_image_url
from linkpreview.app.domain.models import MetadataResult

_STOCK_PHOTO = "https://images.unsplash.com/{photo}?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=450"

SHOPPING_BAGS_PHOTO = _STOCK_PHOTO.format(photo="photo-1472851294608-062f824d29cc")
STOREFRONT_PHOTO = _STOCK_PHOTO.format(photo="photo-1441986300917-64674bd600d8")
GENERIC_PAGE_PHOTO = _STOCK_PHOTO.format(photo="photo-1488590528505-98d2b5aba04b")


@dataclass(frozen=True)
class PlaceholderCard:
    title: str
    description: str
    image: str


# Domain substring -> canned card, checked in order.
KNOWN_MARKETPLACES: dict[str, PlaceholderCard] = {
    "naver": PlaceholderCard("네이버 쇼핑 상품", "네이버 쇼핑에서 판매하는 상품입니다.", SHOPPING_BAGS_PHOTO),
    "kakao": PlaceholderCard("카카오 쇼핑 상품", "카카오 쇼핑에서 판매하는 상품입니다.", STOREFRONT_PHOTO),
    "gmarket": PlaceholderCard("G마켓 상품", "G마켓에서 판매하는 상품입니다.", SHOPPING_BAGS_PHOTO),
}


def generic_card(domain: str) -> PlaceholderCard:
    return PlaceholderCard(f"{domain} 페이지", f"{domain}의 페이지입니다.", GENERIC_PAGE_PHOTO)


class FallbackProvider:
    def __init__(self, marketplaces: dict[str, PlaceholderCard] | None = None) -> None:
        self._marketplaces = dict(KNOWN_MARKETPLACES if marketplaces is None else marketplaces)

    def card_for(self, domain: str) -> PlaceholderCard:
        for needle, card in self._marketplaces.items():
            if needle in domain:
                return card
        return generic_card(domain)

    def build(self, url: str, domain: str, *, product_code: str | None = None) -> MetadataResult:
        """Placeholder result for ``domain``; the price is never guessed."""
        card = self.card_for(domain)
        image = product_image_url(domain, product_code)
        logger.bind(service_name=SERVICE_NAME, event="placeholder_card", url=url, domain=domain).debug("")
        return MetadataResult(
            domain=domain,
            title=card.title,
            description=card.description,
            image=image or card.image,
            price=None,
        )
