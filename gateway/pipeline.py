"""Request pipeline: preflight, analytics, error boundary and CORS decoration."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Mapping, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from gateway.app_state import AppState
from gateway.config import (
    CORS_HEADERS,
    HTTP_INTERNAL_ERROR,
    HTTP_NOT_FOUND,
    INTERNAL_ERROR_MESSAGE,
)
from gateway.outcome import NotFound, Ok, Outcome, UpstreamFailure
from gateway.routing import match_route
from gateway.upstream.base import AnalyticsSink, ErrorSink

logger = logging.getLogger(__name__)

# Strong references to in-flight analytics tasks so they are not collected early.
_background_tasks: set[asyncio.Task] = set()


def preflight_response() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def not_found_response(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=HTTP_NOT_FOUND)


def internal_error_response(errors: ErrorSink, error: BaseException, path: Optional[str] = None) -> JSONResponse:
    """Forward error to the error sink and build the generic 500 envelope."""
    try:
        errors.record_error(error, path)
    except Exception:
        logger.exception("Error sink failed")
    return JSONResponse({"error": INTERNAL_ERROR_MESSAGE}, status_code=HTTP_INTERNAL_ERROR)


def render(outcome: Outcome, errors: ErrorSink, path: Optional[str] = None) -> JSONResponse:
    """Turn a route outcome into its JSON response."""
    if isinstance(outcome, Ok):
        return JSONResponse({"results": outcome.value})
    if isinstance(outcome, NotFound):
        return not_found_response(outcome.message)
    if isinstance(outcome, UpstreamFailure):
        return internal_error_response(errors, outcome.error, path)
    raise TypeError(f"Unknown outcome: {outcome!r}")


def _view_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.warning(f"Failed to record view: {error}")


def dispatch_view(views: AnalyticsSink, headers: Mapping[str, str]) -> asyncio.Task:
    """Record a view without waiting for it. Failures are logged and dropped."""
    task = asyncio.create_task(views.record_view(headers))
    _background_tasks.add(task)
    task.add_done_callback(_view_done)
    return task


def decorate(response: Response) -> Response:
    response.headers.update(CORS_HEADERS)
    return response


async def request_pipeline(request: Request, call_next: Any) -> Response:
    """HTTP middleware wrapping every request."""
    if request.method == "OPTIONS":
        return preflight_response()

    app_state: AppState = request.app.state.app_state
    path = request.url.path
    start_time = time.time()

    dispatch_view(app_state.views, dict(request.headers))

    try:
        response = await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error for {request.method} {path}")
        response = internal_error_response(app_state.errors, e, path)

    duration = time.time() - start_time
    if path != "/":
        spec = match_route(path)
        route = spec.name if spec else "-"
        logger.info(f"{request.method} {path} | Route: {route} | Status: {response.status_code} | Duration: {duration:.3f}s")

    return decorate(response)
