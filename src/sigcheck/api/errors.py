from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

AVAILABLE_ENDPOINTS = ["/health", "/verify-signature"]
INTERNAL_ERROR_MESSAGE = "Internal server error during signature verification"

log = logging.getLogger("sigcheck.api")


def iso_timestamp() -> str:
    """UTC timestamp with millisecond precision and a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(eq=False)
class ApiError(Exception):
    """Error rendered as a JSON verdict body by `api_error_handler`."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    @staticmethod
    def bad_request(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(400, code, message, details or {})

    @staticmethod
    def not_found(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(404, code, message, details or {})

    @staticmethod
    def too_large(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(413, code, message, details or {})

    @staticmethod
    def internal(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(500, code, message, details or {})

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"isValid": False, "error": self.message}
        out.update(self.details)
        return out


def route_not_found_body() -> Dict[str, Any]:
    return {"error": "Route not found", "availableEndpoints": list(AVAILABLE_ENDPOINTS)}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_json())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and wrong methods on known paths both read as "no such route".
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content=route_not_found_body())
    return JSONResponse(
        status_code=exc.status_code,
        content={"isValid": False, "error": str(exc.detail), "timestamp": iso_timestamp()},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled error method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    body: Dict[str, Any] = {
        "isValid": False,
        "error": INTERNAL_ERROR_MESSAGE,
        "timestamp": iso_timestamp(),
    }
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is not None and not cfg.is_prod:
        body["errorType"] = type(exc).__name__
        body["path"] = request.url.path
        body["method"] = request.method
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=body)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
