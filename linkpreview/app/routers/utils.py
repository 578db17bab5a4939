from __future__ import annotations

from typing import Any

from fastapi import Request, Response
from loguru import logger

from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.domain.urls import is_minimally_valid_url


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def validate_url_param(url: str | None) -> Response | None:
    """Return a 400 response for a missing or non-http(s) url, else None."""
    if not url:
        return Response(status_code=400, content="Missing required query parameter: url")
    if not is_minimally_valid_url(url.strip()):
        return Response(status_code=400, content="Invalid URL")
    return None


def state_component(request: Request, name: str) -> Any | None:
    component = getattr(request.app.state, name, None)
    if component is None:
        _log("component_not_initialized", component=name)
    return component


__all__ = [
    "validate_url_param",
    "state_component",
]
