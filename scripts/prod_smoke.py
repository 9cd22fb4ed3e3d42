#!/usr/bin/env python3

"""Production-ish smoke test for sigcheck.

This is intentionally simple and dependency-light.

It verifies:
  - the FastAPI app boots with the current SIGCHECK_* environment
  - /health answers 200
  - a freshly signed personal message round-trips through /verify-signature
  - a signature with a corrupted recovery id is rejected with 400

Usage:
  python3 scripts/prod_smoke.py

Optional env overrides:
  SIGCHECK_SMOKE_LABEL=smoke     (label for the throwaway test key)
  SIGCHECK_SMOKE_MESSAGE="..."   (message to sign)
"""

from __future__ import annotations

import os

from fastapi.testclient import TestClient

from sigcheck.api.app import create_app
from sigcheck.testing.sigtools import account_for, flip_bit, personal_sign


def main() -> int:
    label = os.environ.get("SIGCHECK_SMOKE_LABEL", "smoke")
    message = os.environ.get("SIGCHECK_SMOKE_MESSAGE", "sigcheck smoke test")

    addr, sk = account_for(label=label)
    sig = personal_sign(message, sk)

    c = TestClient(create_app())

    r = c.get("/health")
    assert r.status_code == 200, r.text
    assert r.json().get("status") == "OK"

    r2 = c.post("/verify-signature", json={"message": message, "signature": sig})
    assert r2.status_code == 200, r2.text
    j2 = r2.json()
    if j2.get("signer") != addr:
        raise RuntimeError(f"recovered {j2.get('signer')!r}, expected {addr!r}")

    r3 = c.post("/verify-signature", json={"message": message, "signature": flip_bit(sig, 64 * 8 + 7)})
    assert r3.status_code == 400, r3.text

    print("OK: health + verify-signature round trip", {"signer": addr})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
