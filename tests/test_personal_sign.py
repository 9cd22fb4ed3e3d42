from __future__ import annotations

import pytest
from eth_account import Account
from eth_account.messages import defunct_hash_message, encode_defunct
from eth_keys.constants import SECPK1_N
from eth_utils import is_checksum_address, keccak

from sigcheck.crypto.personal_sign import (
    address_from_public_key,
    personal_message_hash,
    personal_message_payload,
    recover,
    split_signature,
)
from sigcheck.runtime.verify_types import ErrorKind
from sigcheck.testing.sigtools import account_for, personal_sign

# Well-known development key (hardhat/anvil account #0).
DEV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def _eth_account_sign(message: str, key: str = DEV_KEY) -> str:
    signed = Account.sign_message(encode_defunct(text=message), private_key=key)
    return "0x" + bytes(signed.signature).hex()


def _sig(r: int, s: int, v: int) -> str:
    return "0x" + (r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])).hex()


def test_payload_is_length_prefixed() -> None:
    assert personal_message_payload("hello world") == b"\x19Ethereum Signed Message:\n11hello world"


def test_payload_length_counts_utf8_bytes() -> None:
    # 2 characters, 6 bytes
    assert personal_message_payload("日本") == b"\x19Ethereum Signed Message:\n6" + "日本".encode("utf-8")


def test_hash_matches_eth_account() -> None:
    for text in ["hello world", "hello world ", "multi\nline", "ünïcödé ✓"]:
        assert personal_message_hash(text) == bytes(defunct_hash_message(text=text))
        assert personal_message_hash(text) == keccak(personal_message_payload(text))


def test_recovers_known_dev_account() -> None:
    address, failure = recover("hello world", _eth_account_sign("hello world"))
    assert failure is None
    assert address == DEV_ADDRESS


def test_recover_agrees_with_eth_account() -> None:
    sig = _eth_account_sign("agree?")
    expected = Account.recover_message(encode_defunct(text="agree?"), signature=sig)
    assert recover("agree?", sig).address == expected


@pytest.mark.parametrize("legacy_v", [True, False])
def test_accepts_both_recovery_id_encodings(legacy_v: bool) -> None:
    addr, sk = account_for(label="alice")
    sig = personal_sign("gm", sk, legacy_v=legacy_v)
    rec = recover("gm", sig)
    assert rec.ok
    assert rec.address == addr


def test_uppercase_hex_signature_recovers_same_signer() -> None:
    addr, sk = account_for(label="bob")
    sig = personal_sign("case", sk)
    assert recover("case", "0x" + sig[2:].upper()).address == addr


def test_other_message_recovers_other_address() -> None:
    addr, sk = account_for(label="carol")
    sig = personal_sign("hello world", sk)
    rec = recover("hello world ", sig)
    # Wrong-but-well-formed recovers *someone*, just not carol.
    if rec.ok:
        assert rec.address != addr
    else:
        assert rec.failure is not None and rec.failure.kind == ErrorKind.RECOVERY_FAILED


def test_split_signature_normalizes_v() -> None:
    assert split_signature(bytes(64) + b"\x1b")[2] == 0
    assert split_signature(bytes(64) + b"\x1c")[2] == 1
    assert split_signature(bytes(64) + b"\x01")[2] == 1


@pytest.mark.parametrize("v", [2, 26, 29, 35, 255])
def test_unknown_recovery_id_fails(v: int) -> None:
    with pytest.raises(ValueError):
        split_signature(bytes(64) + bytes([v]))

    rec = recover("x", _sig(1, 1, v))
    assert rec.failure is not None
    assert rec.failure.kind == ErrorKind.RECOVERY_FAILED


@pytest.mark.parametrize(
    "r,s",
    [
        (0, 1),
        (1, 0),
        (0, 0),
        (SECPK1_N, 1),
        (1, SECPK1_N),
        (2**256 - 1, 1),
    ],
)
def test_out_of_range_scalars_fail(r: int, s: int) -> None:
    rec = recover("x", _sig(r, s, 27))
    assert rec.address is None
    assert rec.failure is not None
    assert rec.failure.kind == ErrorKind.RECOVERY_FAILED


def test_all_zero_signature_fails() -> None:
    rec = recover("x", "0x" + "0" * 130)
    assert rec.failure is not None
    assert rec.failure.kind == ErrorKind.RECOVERY_FAILED


def test_undecodable_hex_is_malformed() -> None:
    rec = recover("x", "0x" + "zz" * 65)
    assert rec.failure is not None
    assert rec.failure.kind == ErrorKind.MALFORMED_SIGNATURE


def test_wrong_byte_length_is_malformed() -> None:
    rec = recover("x", "0x" + "11" * 64)
    assert rec.failure is not None
    assert rec.failure.kind == ErrorKind.MALFORMED_SIGNATURE


def test_address_from_public_key() -> None:
    addr, sk = account_for(label="dave")
    pub = sk.public_key.to_bytes()
    assert address_from_public_key(pub) == addr
    assert address_from_public_key(b"\x04" + pub) == addr
    assert is_checksum_address(addr)
    with pytest.raises(ValueError):
        address_from_public_key(pub[:-1])
