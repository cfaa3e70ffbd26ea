from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse

from shortlink_app.config import settings
from shortlink_app.api.v1 import links, redirect
from shortlink_app.dependencies import get_store
from shortlink_app.errors import ShortlinkError
from shortlink_app.logging import configure_logging
from shortlink_app.schemas.store import HealthResponse
from shortlink_app.storage.factory import StoreFactory
from shortlink_app.storage.store import RedirectStore

logger = configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load the store once before serving; handlers share this instance
    store = StoreFactory.create()
    logger.info("Serving %d redirects (%s symbols)", len(store.table), settings.symbol_strategy)
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener storing its redirects in a JSON file",
    # Two path segments, so framework pages never shadow a symbol
    docs_url="/_/docs",
    redoc_url="/_/redoc",
    openapi_url="/_/openapi.json",
    lifespan=lifespan
)


@app.exception_handler(ShortlinkError)
async def shortlink_error_handler(request: Request, exc: ShortlinkError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


@app.get("/_/health", response_model=HealthResponse)
def health_check(store: RedirectStore = Depends(get_store)):
    """Health check endpoint (two path segments, so it never shadows a symbol)"""
    return HealthResponse(
        status="healthy",
        redirects=len(store.table),
        strategy=settings.symbol_strategy
    )


######## Include routers
app.include_router(links.router)
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
