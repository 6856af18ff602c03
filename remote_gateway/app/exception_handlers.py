"""Global exception handlers for FastAPI application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from remote_gateway.core.exceptions import AppException

logger = logging.getLogger(__name__)


def problem_detail(exc: AppException) -> dict[str, Any]:
    """Build an RFC 7807 Problem Details body for an application exception."""
    problem: dict[str, Any] = {
        "type": exc.type,
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
    }
    if exc.instance:
        problem["instance"] = exc.instance
    problem.update(exc.extra)
    return problem


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException instances into RFC 7807 Problem Details responses."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Application error: {exc.detail}",
        extra={"path": request.url.path, "status_code": exc.status_code, "error_type": exc.type},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem_detail(exc),
        media_type="application/problem+json",
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the application's exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
