from __future__ import annotations

from fastapi import APIRouter, Request

from sigcheck.api.errors import iso_timestamp
from sigcheck.api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Liveness only: no dependency checks."""
    return HealthResponse(
        status="OK",
        timestamp=iso_timestamp(),
        service=request.app.state.cfg.service_name,
    )
