# src/sigcheck/api/routes_public.py
from __future__ import annotations

from fastapi import APIRouter

from sigcheck.api.routes_public_parts.health import router as health_router
from sigcheck.api.routes_public_parts.verify import router as verify_router

public_router = APIRouter()

# Unversioned paths: browser clients already call these.
public_router.include_router(health_router, prefix="", tags=["health"])
public_router.include_router(verify_router, prefix="", tags=["verify"])
