"""
Turn a 402 response into a payment authorization from the wallet signing service.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import requests

from .errors import (
    PHASE_SIGNING,
    MalformedPaymentRequirements,
    NetworkError,
    PaymentSigningFailed,
)
from .executor import response_text
from .models import Identity, PaymentAuthorization, RequestSpec
from .payloads import (
    SIGN_PAYMENT_PATH,
    build_signing_headers,
    build_signing_request,
    parse_signing_response,
)

__all__ = ["negotiate", "utc_now"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def negotiate(
    session: requests.Session,
    raw_requirements: str,
    identity: Identity,
    original: RequestSpec,
    *,
    wallet_url: str,
    timeout: Optional[float] = None,
    clock: Callable[[], datetime] = utc_now,
) -> PaymentAuthorization:
    """
    Exchange the payment requirements for a signed authorization.

    Exactly one signing attempt is made. Any failure raises and nothing is
    retried.
    """
    try:
        requirements = json.loads(raw_requirements)
    except json.JSONDecodeError as exc:
        raise MalformedPaymentRequirements(raw_requirements, str(exc)) from exc

    logging.info("Payment required: %s", json.dumps(requirements))

    sign_url = f"{wallet_url.rstrip('/')}{SIGN_PAYMENT_PATH}"
    logging.info("Requesting payment signature from %s", sign_url)
    try:
        response = session.post(
            sign_url,
            json=build_signing_request(requirements, original),
            headers=build_signing_headers(identity),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logging.error("Signing service unreachable: %s", exc)
        raise NetworkError(exc, url=sign_url, phase=PHASE_SIGNING) from exc

    text = response_text(response)
    if not 200 <= response.status_code < 300:
        logging.error("Payment signing failed (%s): %s", response.status_code, text)
        raise PaymentSigningFailed(response.status_code, text)

    authorization = parse_signing_response(text, obtained_at=clock())
    logging.info("Payment signed successfully: %s", authorization.amount_paid)
    logging.debug("Payment header: %s", authorization.payment_header)
    return authorization
