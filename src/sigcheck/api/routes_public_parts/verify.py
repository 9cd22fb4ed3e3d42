# src/sigcheck/api/routes_public_parts/verify.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from sigcheck.api.errors import INTERNAL_ERROR_MESSAGE, ApiError, iso_timestamp
from sigcheck.api.schemas import VerifySignatureResponse
from sigcheck.api.structured_logging import log_event
from sigcheck.runtime.input_validator import check_field
from sigcheck.runtime.verifier import verify
from sigcheck.runtime.verify_types import ErrorKind, VerificationResult

router = APIRouter()

log = logging.getLogger("sigcheck.verify")

Json = Dict[str, Any]

_INPUT_ERRORS = {
    ErrorKind.MISSING_FIELD: "Both message and signature are required",
    ErrorKind.NOT_A_STRING: "Message and signature must be strings",
}


_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _media_type(request: Request) -> str:
    return (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()


async def _read_body_fields(request: Request) -> Json:
    if _media_type(request) in _FORM_TYPES:
        form = await request.form()
        return {k: form.get(k) for k in form.keys()}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (ValueError, RecursionError):
        raise ApiError.bad_request(
            "invalid_json",
            "Request body must be valid JSON",
            {"timestamp": iso_timestamp()},
        )
    # Anything but an object carries neither field.
    return body if isinstance(body, dict) else {}


def _field_details(message: Any, signature: Any) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for name, value in (("message", message), ("signature", signature)):
        failure = check_field(value, name)
        if failure is not None:
            out[name] = failure.message
    return out


def _rejection(result: VerificationResult, message: Any, signature: Any) -> ApiError:
    kind = result.error_kind or ErrorKind.INTERNAL_FAULT
    extra: Json = {"errorKind": kind.value}

    if kind == ErrorKind.INTERNAL_FAULT:
        extra["timestamp"] = iso_timestamp()
        return ApiError.internal(kind.value, INTERNAL_ERROR_MESSAGE, extra)

    if kind in _INPUT_ERRORS:
        extra["details"] = _field_details(message, signature)
        return ApiError.bad_request(kind.value, _INPUT_ERRORS[kind], extra)

    if kind == ErrorKind.MALFORMED_SIGNATURE:
        return ApiError.bad_request(kind.value, result.error or "Invalid signature format", extra)

    extra["originalMessage"] = message
    extra["timestamp"] = iso_timestamp()
    return ApiError.bad_request(kind.value, result.error or "Invalid signature", extra)


@router.post(
    "/verify-signature",
    response_model=VerifySignatureResponse,
    response_model_exclude_none=True,
)
async def verify_signature(request: Request) -> VerifySignatureResponse:
    """Recover the signer of a personal-message signature.

    Body: {"message": str, "signature": "0x" + 130 hex digits}, as JSON or
    as a urlencoded/multipart form.
    """
    body = await _read_body_fields(request)
    message = body.get("message")
    signature = body.get("signature")

    try:
        # Recovery is pure-Python curve math; keep it off the event loop.
        result = await run_in_threadpool(verify, message, signature)
    except Exception:
        log.exception("verify-signature handler fault")
        raise ApiError.internal("internal_fault", INTERNAL_ERROR_MESSAGE, {"timestamp": iso_timestamp()})

    if not result.is_valid:
        log_event(
            log,
            "signature_rejected",
            kind=result.error_kind.value if result.error_kind else None,
            field=result.field,
            request_id=getattr(request.state, "request_id", None),
        )
        raise _rejection(result, message, signature)

    log_event(
        log,
        "signature_verified",
        signer=result.signer,
        message_bytes=len(message.encode("utf-8")),
        request_id=getattr(request.state, "request_id", None),
    )
    return VerifySignatureResponse(
        isValid=True,
        signer=result.signer,
        originalMessage=message,
        timestamp=iso_timestamp(),
    )
