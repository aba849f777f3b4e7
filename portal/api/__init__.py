"""API assembly helpers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .routers import ALL_ROUTERS

log = logging.getLogger(__name__)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def validation_error_message(exc: RequestValidationError) -> str:
    errs = exc.errors()
    if not errs:
        return "Invalid request."
    first = errs[0]
    loc = [str(part) for part in first.get("loc") or () if part not in ("body", "query", "path")]
    msg = first.get("msg") or "Invalid value"
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning(
        "Request validation error (422): path=%s method=%s detail=%s",
        request.url.path,
        request.method,
        exc.errors(),
    )
    return JSONResponse({"error": validation_error_message(exc)}, status_code=422)


def register_routes(app: FastAPI) -> None:
    """Attach all application routers and error rendering to the given app."""

    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    for router in ALL_ROUTERS:
        app.include_router(router)


__all__ = ["register_routes", "validation_error_message"]
