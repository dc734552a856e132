"""Anime aggregation gateway over a video catalog and AniList."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.app_state import AppState, build_app_state
from gateway.config import HTTP_NOT_FOUND, ROUTE_METHODS
from gateway.docs_page import DOCS_PAGE
from gateway.pipeline import request_pipeline
from gateway.routes import router
from gateway.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def create_app(app_state: Optional[AppState] = None) -> FastAPI:
    """
    Build the gateway application.

    Args:
        app_state: Pre-built state to serve from. When omitted, the state is
            built from settings at startup and its clients closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app_state is None
        state = build_app_state(settings) if owned else app_state
        app.state.app_state = state
        logger.info("Startup complete")

        yield

        logger.info("Shutting down")
        if owned:
            await state.aclose()

    app = FastAPI(
        title="AB Anime Gateway",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )

    @app.exception_handler(StarletteHTTPException)
    async def plain_http_error(request: Request, exc: StarletteHTTPException):
        """Unknown routes answer in plain text. Unsupported methods are unknown routes too."""
        if exc.status_code == 405:
            return PlainTextResponse("Not Found", status_code=HTTP_NOT_FOUND)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.api_route("/", methods=ROUTE_METHODS, response_class=HTMLResponse)
    async def root():
        """Static page describing the routes."""
        return DOCS_PAGE

    app.include_router(router)
    app.middleware("http")(request_pipeline)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("gateway.main:app", host="0.0.0.0", port=8000)
