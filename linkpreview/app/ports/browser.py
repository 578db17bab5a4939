"""Port: headless browser rendering used as the last fetch strategy."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from linkpreview.app.domain.models import RenderedPage


class BrowserRenderError(Exception):
    """Raised when the browser could not produce a usable page."""


@runtime_checkable
class BrowserRenderer(Protocol):
    """Renders a URL in a real browser and returns the final DOM as HTML.

    Implementations own the browser process for the duration of one call and
    must release it on every exit path.
    """

    async def render(self, url: str) -> RenderedPage: ...
