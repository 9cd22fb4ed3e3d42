# src/sigcheck/runtime/verifier.py
from __future__ import annotations

import logging
from typing import Any, Optional

from eth_utils import is_hex_address, to_checksum_address

from sigcheck.crypto.personal_sign import recover
from sigcheck.runtime.input_validator import validate
from sigcheck.runtime.verify_types import ErrorKind, VerificationResult, VerifyFailure

log = logging.getLogger("sigcheck.verify")

INTERNAL_FAULT_MESSAGE = "Internal error during signature verification"


def verify(message: Any, signature: Any) -> VerificationResult:
    """Validate, then recover the signer of a personal-message signature.

    Total over its inputs: every outcome, including unexpected faults inside
    validation or recovery, comes back as a VerificationResult.
    """
    try:
        failure = validate(message, signature)
        if failure is not None:
            return VerificationResult.invalid(failure)

        address, failure = recover(message, signature)
        if failure is not None:
            return VerificationResult.invalid(failure)
        return VerificationResult.valid(str(address))
    except Exception:
        log.exception("signature verification fault")
        return VerificationResult.invalid(VerifyFailure(ErrorKind.INTERNAL_FAULT, INTERNAL_FAULT_MESSAGE))


def _check_expected(expected: Any) -> Optional[VerifyFailure]:
    field = "expectedSigner"
    if expected is None or expected == "":
        return VerifyFailure(ErrorKind.MISSING_FIELD, "Missing expectedSigner field", field)
    if not isinstance(expected, str):
        return VerifyFailure(ErrorKind.NOT_A_STRING, "ExpectedSigner must be a string", field)
    if not is_hex_address(expected):
        return VerifyFailure(ErrorKind.INVALID_HEX, "ExpectedSigner must be a 40 hex digit address", field)
    return None


def verify_signed_by(message: Any, signature: Any, expected: Any) -> VerificationResult:
    """`verify`, then require the recovered signer to equal `expected`.

    Address comparison is case-insensitive; the returned signer is always
    checksummed.
    """
    failure = _check_expected(expected)
    if failure is not None:
        return VerificationResult.invalid(failure)

    result = verify(message, signature)
    if not result.is_valid:
        return result

    want = to_checksum_address(expected)
    if result.signer != want:
        return VerificationResult.invalid(
            VerifyFailure(
                ErrorKind.RECOVERY_FAILED,
                f"Signature was made by {result.signer}, not {want}",
                "signature",
            )
        )
    return result
