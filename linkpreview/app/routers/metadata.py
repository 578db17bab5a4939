from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from linkpreview.app.domain.urls import InvalidUrlError
from linkpreview.app.routers.utils import state_component, validate_url_param
from linkpreview.app.schemas.metadata import MetadataResponse, PriceResponse


def _log(event: str, **kwargs: Any) -> None:
    logger.info(f"{event}: {kwargs}")


metadata_router = APIRouter(tags=["Preview"])


@metadata_router.get(
    "/metadata",
    summary="Resolve link preview metadata",
    description="Fetches the page behind the URL and returns title, description, image, price and domain. Pages that cannot be fetched or parsed yield a placeholder card instead of an error.",
    responses={
        200: {"description": "Preview card (extracted or placeholder)."},
        400: {"description": "Missing or invalid URL query parameter."},
        503: {"description": "Resolver not initialized."},
    },
)
async def get_metadata(request: Request, url: str | None = None) -> Response:
    invalid = validate_url_param(url)
    if invalid is not None:
        return invalid

    resolver = state_component(request, "metadata_resolver")
    if resolver is None:
        return Response(status_code=503, content="Resolver not available")

    try:
        result = await resolver.resolve(url)
    except InvalidUrlError:
        return Response(status_code=400, content="Invalid URL")

    _log("metadata_served", url=url, domain=result.domain)
    return Response(
        status_code=200,
        media_type="application/json",
        content=MetadataResponse.from_result(result).model_dump_json(),
    )


@metadata_router.get(
    "/price",
    summary="Real-time price lookup",
    description="Re-resolves the URL through the serial resolution queue and returns only the current price. Requests are processed one at a time.",
    responses={
        200: {"description": "Current price (null when none could be extracted)."},
        400: {"description": "Missing or invalid URL query parameter."},
        503: {"description": "Resolution queue not initialized."},
    },
)
async def get_price(request: Request, url: str | None = None) -> Response:
    invalid = validate_url_param(url)
    if invalid is not None:
        return invalid

    queue = state_component(request, "resolution_queue")
    if queue is None:
        return Response(status_code=503, content="Resolution queue not available")

    try:
        result = await queue.resolve(url)
    except InvalidUrlError:
        return Response(status_code=400, content="Invalid URL")

    return Response(
        status_code=200,
        media_type="application/json",
        content=PriceResponse(url=url, domain=result.domain, price=result.price).model_dump_json(),
    )
