"""
Perform a single outbound HTTP call and classify its response.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import requests

from .errors import PHASE_REQUEST, NetworkError
from .models import (
    HttpErrorOutcome,
    Outcome,
    PaymentRequiredOutcome,
    RequestSpec,
    SuccessOutcome,
)

__all__ = ["execute", "parse_success_body", "response_text"]


def response_text(response: requests.Response) -> str:
    """
    Decode a response body, honouring an explicit charset and falling back to UTF-8.

    ``response.text`` is avoided because requests assumes ISO-8859-1 for
    ``text/*`` bodies without a charset.
    """
    encoding = "utf-8"
    if "charset=" in response.headers.get("Content-Type", "").lower():
        encoding = requests.utils.get_encoding_from_headers(response.headers) or encoding
    try:
        return response.content.decode(encoding, errors="replace")
    except LookupError:
        return response.content.decode("utf-8", errors="replace")


def parse_success_body(text: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logging.warning("Response is not JSON: %s", text)
        return {"data": text}


def execute(
    session: requests.Session,
    spec: RequestSpec,
    *,
    timeout: Optional[float] = None,
    phase: str = PHASE_REQUEST,
) -> Outcome:
    """
    Send ``spec`` over ``session`` and return the classified outcome.

    Transport failures raise :class:`NetworkError`. A 402 body is returned
    unparsed so payment-requirement errors belong to the negotiation step.
    """
    data = json.dumps(spec.body) if spec.body is not None else None
    try:
        response = session.request(
            spec.method,
            spec.url,
            headers=dict(spec.headers),
            data=data,
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logging.error("Request to %s failed: %s", spec.url, exc)
        raise NetworkError(exc, url=spec.url, phase=phase) from exc

    status = response.status_code
    logging.info("Response status from %s: %s", spec.url, status)

    if status == 402:
        return PaymentRequiredOutcome(raw_body=response_text(response))
    if not 200 <= status < 300:
        return HttpErrorOutcome(
            status=status, raw_body=response_text(response), reason=response.reason or ""
        )
    return SuccessOutcome(status=status, body=parse_success_body(response_text(response)))
