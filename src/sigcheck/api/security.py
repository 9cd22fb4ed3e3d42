from __future__ import annotations

from typing import Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from sigcheck.api.config import DEFAULT_MAX_REQUEST_BYTES


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Fail-fast request size limiter.

    - Enforces Content-Length when present.
    - Also caps buffered body size by reading body once when needed.
    """

    def __init__(
        self,
        app,
        *,
        max_bytes: int = DEFAULT_MAX_REQUEST_BYTES,
        exempt_prefixes: Tuple[str, ...] = ("/docs", "/openapi.json", "/health"),
    ):
        super().__init__(app)
        self._max_bytes = int(max_bytes)
        self._exempt_prefixes = exempt_prefixes

    def _too_large(self) -> JSONResponse:
        return JSONResponse(
            status_code=413,
            content={"isValid": False, "error": "Request body too large"},
        )

    async def dispatch(self, request: Request, call_next):
        if self._max_bytes <= 0:
            return await call_next(request)

        path = request.url.path or ""
        for ex in self._exempt_prefixes:
            if path.startswith(ex):
                return await call_next(request)

        # First gate using Content-Length if present (cheap).
        cl = request.headers.get("content-length")
        if cl:
            try:
                if int(cl) > self._max_bytes:
                    return self._too_large()
            except ValueError:
                # Malformed header; fall back to buffered body cap.
                pass

        # Chunked bodies carry no Content-Length.
        if (request.method or "").upper() in {"POST", "PUT", "PATCH"}:
            body = await request.body()
            if len(body) > self._max_bytes:
                return self._too_large()

        return await call_next(request)


def security_headers(*, hsts: bool) -> Dict[str, str]:
    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "no-referrer",
        "Cross-Origin-Resource-Policy": "same-origin",
        "X-DNS-Prefetch-Control": "off",
    }
    if hsts:
        headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach baseline hardening headers to every response.

    Headers already set by a route are left alone.
    """

    def __init__(self, app, *, hsts: bool = True) -> None:
        super().__init__(app)
        self._headers = security_headers(hsts=hsts)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for k, v in self._headers.items():
            response.headers.setdefault(k, v)
        return response
