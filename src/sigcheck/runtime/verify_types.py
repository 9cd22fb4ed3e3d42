from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional


class ErrorKind(str, Enum):
    """Machine-checkable failure kinds for signature verification."""

    MISSING_FIELD = "missing_field"
    NOT_A_STRING = "not_a_string"
    MALFORMED_SIGNATURE = "malformed_signature"
    INVALID_HEX = "invalid_hex"
    RECOVERY_FAILED = "recovery_failed"
    INTERNAL_FAULT = "internal_fault"


@dataclass(frozen=True)
class VerifyFailure:
    kind: ErrorKind
    message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class Recovery:
    """Outcome of public-key recovery: exactly one of address/failure is set."""

    address: Optional[str] = None
    failure: Optional[VerifyFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __iter__(self) -> Iterator[Any]:
        """Allow `address, failure = recover(...)` unpacking."""
        yield self.address
        yield self.failure

    @staticmethod
    def recovered(address: str) -> "Recovery":
        return Recovery(address=address, failure=None)

    @staticmethod
    def failed(kind: ErrorKind, message: str) -> "Recovery":
        return Recovery(address=None, failure=VerifyFailure(kind, message, "signature"))


@dataclass(frozen=True)
class VerificationResult:
    is_valid: bool
    signer: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    field: Optional[str] = None

    @staticmethod
    def valid(signer: str) -> "VerificationResult":
        return VerificationResult(True, signer, None, None, None)

    @staticmethod
    def invalid(failure: VerifyFailure) -> "VerificationResult":
        return VerificationResult(False, None, failure.kind, failure.message, failure.field)

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"isValid": self.is_valid}
        if self.signer is not None:
            out["signer"] = self.signer
        if self.error_kind is not None:
            out["errorKind"] = self.error_kind.value
        if self.error is not None:
            out["error"] = self.error
        return out
