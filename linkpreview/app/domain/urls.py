"""URL helpers shared by the resolver stages."""
from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

# Query parameter carrying the marketplace product identifier.
DEFAULT_PRODUCT_CODE_PARAM = "goodscode"


def _product_code_pattern(param: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(param)}=(\d+)", re.IGNORECASE)


class InvalidUrlError(ValueError):
    """Raised when the input is not an absolute http(s) URL."""


def is_minimally_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.hostname)
    except (TypeError, ValueError):
        return False


def hostname_of(url: str) -> str:
    """Return the lowercase hostname of ``url`` or raise InvalidUrlError."""
    if not isinstance(url, str) or not is_minimally_valid_url(url.strip()):
        raise InvalidUrlError(f"not an absolute http(s) url: {url!r}")
    return urlparse(url.strip()).hostname or ""


def product_code_from_url(url: str | None, param: str = DEFAULT_PRODUCT_CODE_PARAM) -> str | None:
    if not url:
        return None
    match = _product_code_pattern(param).search(url)
    return match.group(1) if match else None


def absolutize(candidate: str | None, base_url: str) -> str | None:
    """Resolve ``candidate`` against ``base_url``; anything not ending up http(s) is dropped."""
    if not candidate:
        return None
    candidate = candidate.strip()
    if not candidate.startswith("http"):
        try:
            candidate = urljoin(base_url, candidate)
        except ValueError:
            return None
    return candidate if candidate.startswith(("http://", "https://")) else None
