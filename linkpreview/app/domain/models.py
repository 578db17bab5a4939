"""Domain models."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ClientIdentity:
    """Browser impersonation profile used for one fetch attempt."""

    name: str
    user_agent: str
    accept: str


@dataclass(frozen=True)
class RedirectResolution:
    """Outcome of following a redirector link."""

    final_url: str
    product_code: str | None = None


@dataclass(frozen=True)
class FetchResult:
    """Raw page retrieved by the fetch cascade (value object)."""

    page_source: str
    status_code: int
    final_url: str
    strategy: str


@dataclass(frozen=True)
class RenderedPage:
    """Page captured from the headless browser after it settled."""

    html: str
    final_url: str
    title: str = ""


@dataclass(frozen=True)
class ExtractedMetadata:
    """Fields pulled out of a document; ``price`` is the raw candidate text."""

    title: str | None = None
    description: str | None = None
    image: str | None = None
    price: str | None = None


@dataclass(frozen=True)
class MetadataResult:
    """Preview card payload returned to the link-management layer."""

    domain: str
    title: str | None = None
    description: str | None = None
    image: str | None = None
    price: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.domain, str) or not self.domain:
            raise TypeError("metadata.domain must be a non-empty str")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
