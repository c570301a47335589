"""REST API routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from kubewatchdiff.api.schemas import (
    DiffRequest,
    DiffResponse,
    ErrorResponse,
    HealthResponse,
    WatchRequest,
    WatchResponse,
)
from kubewatchdiff.diff.compare import NO_DIFFERENCES_MESSAGE, diff_resources
from kubewatchdiff.errors import ListingError
from kubewatchdiff.models.resources import DEFAULT_DIFF_SCOPE, FilterConfig
from kubewatchdiff.watch.driver import PollDriver, WatchOptions

_log = structlog.get_logger(component="api.routes")

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    from kubewatchdiff import __version__

    return HealthResponse(version=__version__, lister_configured=request.app.state.lister is not None)


@router.post("/diff", response_model=DiffResponse)
async def diff(body: DiffRequest) -> DiffResponse:
    """Compare two versions of a resource and return a git-style diff."""
    text = diff_resources(
        body.resource1,
        body.resource2,
        filters=FilterConfig(ignore_status=body.ignore_status, ignore_meta=body.ignore_meta),
        scope=body.scope or DEFAULT_DIFF_SCOPE,
    )
    return DiffResponse(diff=text, changed=text != NO_DIFFERENCES_MESSAGE)


@router.post(
    "/watch",
    response_model=WatchResponse,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def watch(request: Request, body: WatchRequest) -> WatchResponse | JSONResponse:
    """Run a bounded watch and return the aggregated diffs.

    The request is held open for the whole run (up to iterations x interval).
    """
    lister = request.app.state.lister
    if lister is None:
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="LISTER_UNAVAILABLE", detail="No resource lister is configured.").model_dump(),
        )

    driver = PollDriver(
        lister,
        WatchOptions(
            ignore_status=body.ignore_status,
            ignore_meta=body.ignore_meta,
            interval_seconds=body.interval_seconds,
            iterations=body.iterations,
            show_timestamp=body.show_timestamp,
        ),
    )
    try:
        output = await driver.run(body.kind, body.namespace, body.label_selector, body.field_selector)
    except ListingError as exc:
        _log.warning("watch_request_failed", kind=exc.kind, error=str(exc))
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(error="LISTING_FAILED", detail=str(exc)).model_dump(),
        )

    return WatchResponse(
        output=output,
        iterations=driver.options.iterations,
        interval_seconds=driver.options.interval_seconds,
    )
