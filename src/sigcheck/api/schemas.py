from __future__ import annotations

"""Pydantic response schemas for the public API.

Field names are camelCase on the wire to match what browser clients
already consume.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(default="OK", description="Always OK while the process serves requests")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the probe")
    service: str = Field(..., description="Service name")


class VerifySignatureResponse(BaseModel):
    isValid: bool
    signer: Optional[str] = Field(default=None, description="Checksummed signer address when valid")
    originalMessage: Optional[str] = Field(default=None, description="Message exactly as received")
    timestamp: Optional[str] = None
    error: Optional[str] = Field(default=None, description="Human-readable failure reason")
    errorKind: Optional[str] = Field(default=None, description="Machine-checkable failure kind")
    details: Optional[Dict[str, str]] = Field(default=None, description="Per-field input problems")
