"""FastAPI application factory for kubewatchdiff.

Usage::

    from kubewatchdiff.api.app import create_app

    app = create_app(lister=lister, config=config)

The factory is used by both ``kubewatchdiff serve`` and unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from kubewatchdiff.api.routes import router
from kubewatchdiff.api.schemas import ErrorResponse

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def create_app(lister: Any = None, config: Any = None) -> FastAPI:
    """Create and configure the kubewatchdiff FastAPI application.

    Args:
        lister: ResourceLister used by ``/watch``.  ``None`` disables watching;
                ``/diff`` still works.
        config: KubeWatchDiffConfig, kept on ``app.state`` for route handlers.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from kubewatchdiff import __version__

    app = FastAPI(
        title="kubewatchdiff",
        summary="Watch Kubernetes resources and render structural diffs",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.lister = lister
    app.state.config = config

    app.include_router(router, prefix=_API_PREFIX)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Map Pydantic validation errors to the error envelope."""
        errors = exc.errors()
        first_field = ""
        first_msg = ""
        if errors:
            locs = errors[0].get("loc", ())
            first_field = ".".join(str(loc) for loc in locs[1:]) if len(locs) > 1 else ""
            first_msg = str(errors[0].get("msg", ""))

        detail = f"{first_field}: {first_msg}" if first_field else first_msg
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REQUEST", detail=detail).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
