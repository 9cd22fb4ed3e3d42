# src/sigcheck/runtime/input_validator.py
from __future__ import annotations

import string
from typing import Any, Optional

from sigcheck.runtime.verify_types import ErrorKind, VerifyFailure

SIGNATURE_PREFIX = "0x"
SIGNATURE_HEX_CHARS = 130
SIGNATURE_TEXT_LEN = len(SIGNATURE_PREFIX) + SIGNATURE_HEX_CHARS

MALFORMED_SIGNATURE_MESSAGE = "Invalid signature format. Expected 0x-prefixed hex string of 130 characters."

_HEX_DIGITS = frozenset(string.hexdigits)


def is_hex_signature(value: str) -> bool:
    """True if every character after the 0x prefix is a hex digit."""
    body = value[len(SIGNATURE_PREFIX) :]
    return bool(body) and all(c in _HEX_DIGITS for c in body)


def check_field(value: Any, field: str) -> Optional[VerifyFailure]:
    label = field.capitalize()
    if value is None or value == "":
        return VerifyFailure(ErrorKind.MISSING_FIELD, f"Missing {field} field", field)
    if not isinstance(value, str):
        return VerifyFailure(ErrorKind.NOT_A_STRING, f"{label} must be a string", field)
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return VerifyFailure(ErrorKind.NOT_A_STRING, f"{label} must be valid UTF-8 text", field)
    return None


def validate(message: Any, signature: Any) -> Optional[VerifyFailure]:
    """Reject malformed (message, signature) pairs before any cryptography runs.

    Returns None when the pair is acceptable, otherwise the first failure in
    this order:
      1) message present and a str       -> missing_field / not_a_string
      2) signature present and a str     -> missing_field / not_a_string
      3) "0x" prefix and 132 characters  -> malformed_signature
      4) 130 hex digits after the prefix -> invalid_hex
    """
    failure = check_field(message, "message")
    if failure is not None:
        return failure

    failure = check_field(signature, "signature")
    if failure is not None:
        return failure

    if not signature.startswith(SIGNATURE_PREFIX) or len(signature) != SIGNATURE_TEXT_LEN:
        return VerifyFailure(ErrorKind.MALFORMED_SIGNATURE, MALFORMED_SIGNATURE_MESSAGE, "signature")

    if not is_hex_signature(signature):
        return VerifyFailure(ErrorKind.INVALID_HEX, "Signature must be a valid hex string", "signature")

    return None
