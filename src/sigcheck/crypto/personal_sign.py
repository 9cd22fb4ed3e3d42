# src/sigcheck/crypto/personal_sign.py
from __future__ import annotations

"""Personal-message (EIP-191 version 0x45) signer recovery over secp256k1.

The signed digest is

    keccak256(b"\\x19Ethereum Signed Message:\\n" + str(len(msg)) + msg)

so a personal-message signature can never be replayed as a transaction or
any other structured payload.

Expected bad input never raises out of `recover`; it is translated into a
tagged `ErrorKind` failure instead of leaking library exceptions.
"""

from typing import Tuple

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import is_checksum_address, keccak, to_checksum_address

from sigcheck.runtime.verify_types import ErrorKind, Recovery

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"

SIGNATURE_BYTES = 65
_LEGACY_V_OFFSET = 27


def personal_message_payload(message: str) -> bytes:
    """Length-prefixed, domain-separated payload that actually gets hashed."""
    body = message.encode("utf-8")
    return PERSONAL_MESSAGE_PREFIX + str(len(body)).encode("ascii") + body


def personal_message_hash(message: str) -> bytes:
    return keccak(personal_message_payload(message))


def decode_signature_hex(signature: str) -> bytes:
    s = signature.strip()
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    return bytes.fromhex(s)


def split_signature(sig: bytes) -> Tuple[int, int, int]:
    """Split r || s || v and normalize v to {0, 1}.

    Raises ValueError for a wrong length or an unknown recovery id.
    """
    if len(sig) != SIGNATURE_BYTES:
        raise ValueError(f"signature must be {SIGNATURE_BYTES} bytes, got {len(sig)}")
    r = int.from_bytes(sig[0:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    v = sig[64]
    if v in (27, 28):
        v -= _LEGACY_V_OFFSET
    if v not in (0, 1):
        raise ValueError(f"recovery id must be 0, 1, 27 or 28, got {sig[64]}")
    return r, s, v


def _scalar_in_range(x: int) -> bool:
    return 1 <= x <= SECPK1_N - 1


def address_from_public_key(public_key: bytes) -> str:
    """Checksummed account address for a 64-byte uncompressed public key."""
    if len(public_key) == 65 and public_key[0] == 0x04:
        public_key = public_key[1:]
    if len(public_key) != 64:
        raise ValueError(f"public key must be 64 bytes, got {len(public_key)}")
    return to_checksum_address(keccak(public_key)[-20:])


def recover(message: str, signature: str) -> Recovery:
    """Recover the checksummed address that produced `signature` over `message`.

    A well-formed signature by some other key is not an error here: it
    recovers that key's address. Whether the signer is the expected one is
    the caller's decision.
    """
    try:
        sig_bytes = decode_signature_hex(signature)
    except ValueError:
        return Recovery.failed(ErrorKind.MALFORMED_SIGNATURE, "Signature must be a valid hex string")

    if len(sig_bytes) != SIGNATURE_BYTES:
        return Recovery.failed(
            ErrorKind.MALFORMED_SIGNATURE,
            f"Signature must be {SIGNATURE_BYTES} bytes, got {len(sig_bytes)}",
        )

    try:
        r, s, v = split_signature(sig_bytes)
    except ValueError as e:
        return Recovery.failed(ErrorKind.RECOVERY_FAILED, f"Malformed signature data: {e}")

    if not _scalar_in_range(r):
        return Recovery.failed(ErrorKind.RECOVERY_FAILED, "Malformed signature data: r out of range")
    if not _scalar_in_range(s):
        return Recovery.failed(ErrorKind.RECOVERY_FAILED, "Malformed signature data: s out of range")

    msg_hash = personal_message_hash(message)
    try:
        public_key = keys.Signature(vrs=(v, r, s)).recover_public_key_from_msg_hash(msg_hash)
    except (BadSignature, ValidationError) as e:
        return Recovery.failed(ErrorKind.RECOVERY_FAILED, f"Failed to recover signer: {e}")

    pub = public_key.to_bytes()
    if not any(pub):
        # point at infinity
        return Recovery.failed(ErrorKind.RECOVERY_FAILED, "Failed to recover signer: invalid curve point")

    address = address_from_public_key(pub)
    if not is_checksum_address(address):
        return Recovery.failed(ErrorKind.RECOVERY_FAILED, "Failed to recover valid signer address")
    return Recovery.recovered(address)
