from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from linkpreview.app.core import SERVICE_NAME

health_router = APIRouter(tags=["Health"])


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


@health_router.get(
    "/health/live",
    summary="Liveness probe",
    description="Returns 200 if the API process is running.",
    responses={200: {"description": "Service is alive."}},
)
async def live() -> dict:
    return {"status": "ok"}


@health_router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Returns 200 only when the metadata resolver and the resolution queue are wired. The resolver degrades to placeholder cards on upstream failures, so shop availability is not part of readiness.",
    responses={
        200: {"description": "Resolver and queue are ready."},
        503: {"description": "Resolver or queue not initialized."},
    },
)
async def ready(request: Request) -> Response:
    resolver = getattr(request.app.state, "metadata_resolver", None)
    queue = getattr(request.app.state, "resolution_queue", None)
    if resolver is None or queue is None:
        _log("components_not_initialized")
        return Response(status_code=503, content="Not ready")
    return Response(status_code=200, content="OK")
