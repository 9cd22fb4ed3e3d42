from __future__ import annotations

import pytest

from sigcheck.runtime.input_validator import (
    MALFORMED_SIGNATURE_MESSAGE,
    is_hex_signature,
    validate,
)
from sigcheck.runtime.verify_types import ErrorKind

GOOD_SIG = "0x" + "ab" * 65


def test_accepts_well_formed_pair() -> None:
    assert validate("hello", GOOD_SIG) is None


def test_accepts_uppercase_hex() -> None:
    assert validate("hello", "0x" + "AB" * 65) is None


@pytest.mark.parametrize("message", [None, ""])
def test_missing_message(message) -> None:
    f = validate(message, GOOD_SIG)
    assert f is not None
    assert f.kind == ErrorKind.MISSING_FIELD
    assert f.field == "message"


@pytest.mark.parametrize("signature", [None, ""])
def test_missing_signature(signature) -> None:
    f = validate("hello", signature)
    assert f is not None
    assert f.kind == ErrorKind.MISSING_FIELD
    assert f.field == "signature"


def test_message_checked_before_signature() -> None:
    f = validate("", 123)
    assert f is not None
    assert f.field == "message"
    assert f.kind == ErrorKind.MISSING_FIELD


@pytest.mark.parametrize("value", [123, 1.5, ["a"], {"a": 1}, True])
def test_non_string_inputs(value) -> None:
    f = validate(value, GOOD_SIG)
    assert f is not None and f.kind == ErrorKind.NOT_A_STRING and f.field == "message"

    f = validate("hello", value)
    assert f is not None and f.kind == ErrorKind.NOT_A_STRING and f.field == "signature"


def test_lone_surrogate_message_is_rejected() -> None:
    f = validate("bad \ud800 text", GOOD_SIG)
    assert f is not None
    assert f.kind == ErrorKind.NOT_A_STRING


@pytest.mark.parametrize(
    "signature",
    [
        "ab" * 66,  # right length, no prefix
        "0X" + "ab" * 65,  # prefix is case-sensitive
        "0x" + "ab" * 64,
        "0x" + "0" * 128,
        "0x" + "ab" * 66,
        "not-hex",
    ],
)
def test_bad_prefix_or_length(signature: str) -> None:
    f = validate("x", signature)
    assert f is not None
    assert f.kind == ErrorKind.MALFORMED_SIGNATURE
    assert f.message == MALFORMED_SIGNATURE_MESSAGE


def test_non_hex_body() -> None:
    f = validate("x", "0x" + "zz" + "ab" * 64)
    assert f is not None
    assert f.kind == ErrorKind.INVALID_HEX


def test_is_hex_signature() -> None:
    assert is_hex_signature("0x" + "0123456789abcdefABCDEF")
    assert not is_hex_signature("0x")
    assert not is_hex_signature("0x12g4")
