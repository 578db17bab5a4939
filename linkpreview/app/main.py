from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from linkpreview.app.composition import create_app_dependencies
from linkpreview.app.core import SERVICE_NAME
from linkpreview.app.routers.health import health_router
from linkpreview.app.routers.metadata import metadata_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.bind(service_name=SERVICE_NAME, event="api_starting").info("")
    deps = create_app_dependencies()
    try:
        await deps.connect()
        app.state.settings = deps.settings
        app.state.metadata_resolver = deps.metadata_resolver
        app.state.resolution_queue = deps.resolution_queue
        yield
    finally:
        logger.bind(service_name=SERVICE_NAME, event="api_stopping").info("")
        # close() is safe on a partially connected instance.
        await deps.close()


app = FastAPI(
    title="Link Preview API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(metadata_router)
