"""
Helpers for constructing and reading the JSON payloads exchanged with the
wallet signing service.
"""

from __future__ import annotations

import json
import math
from datetime import datetime
from numbers import Real
from typing import Any, Dict

from .errors import MalformedSigningResponse
from .models import Identity, PaymentAuthorization, RequestSpec

__all__ = [
    "SIGN_PAYMENT_PATH",
    "build_signing_headers",
    "build_signing_request",
    "parse_signing_response",
]

SIGN_PAYMENT_PATH = "/api/sign-payment"


def build_signing_request(
    payment_requirements: Any,
    original: RequestSpec,
) -> Dict[str, Any]:
    """
    Build the ``/api/sign-payment`` body.

    ``requestData`` binds the authorization to the original target and payload.
    """
    return {
        "paymentRequirements": payment_requirements,
        "requestData": original.request_data(),
    }


def build_signing_headers(identity: Identity) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    headers.update(identity.auth_headers())
    return headers


def parse_signing_response(text: str, *, obtained_at: datetime) -> PaymentAuthorization:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedSigningResponse(text, f"invalid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise MalformedSigningResponse(text, "expected a JSON object")

    payment_header = payload.get("paymentHeader")
    if not isinstance(payment_header, str) or not payment_header:
        raise MalformedSigningResponse(text, "paymentHeader must be a non-empty string")

    amount_paid = payload.get("amountPaid")
    # bool is a Real subclass
    if isinstance(amount_paid, bool) or not isinstance(amount_paid, Real):
        raise MalformedSigningResponse(text, "amountPaid must be a number")
    if not math.isfinite(amount_paid):
        raise MalformedSigningResponse(text, "amountPaid must be finite")
    if amount_paid < 0:
        raise MalformedSigningResponse(text, "amountPaid must not be negative")

    return PaymentAuthorization(
        payment_header=payment_header,
        amount_paid=amount_paid,
        obtained_at=obtained_at,
        proof=payload.get("paymentProof"),
    )
