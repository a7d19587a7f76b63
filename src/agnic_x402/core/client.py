"""
Payment-aware request protocol: request, negotiate on 402, retry once.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

import requests

from .config import ClientConfig, DEFAULT_WALLET_URL
from .errors import PHASE_RETRY, HttpError, PostPaymentRequestFailed
from .executor import execute
from .models import (
    PAYMENT_HEADER,
    HttpErrorOutcome,
    Identity,
    PaymentInfo,
    PaymentRequiredOutcome,
    RequestResult,
    RequestSpec,
    SuccessOutcome,
)
from .negotiator import negotiate, utc_now

__all__ = [
    "PaymentAwareClient",
    "perform_payment_aware_request",
]


def perform_payment_aware_request(
    session: requests.Session,
    spec: RequestSpec,
    identity: Identity,
    *,
    wallet_url: str = DEFAULT_WALLET_URL,
    timeout: Optional[float] = None,
    clock: Callable[[], datetime] = utc_now,
) -> RequestResult:
    """
    Run one invocation of the protocol.

    At most one payment is negotiated. A paid retry that fails, including a
    second 402, raises :class:`PostPaymentRequestFailed`.
    """
    logging.info("Making initial request to: %s", spec.url)
    outcome = execute(session, spec, timeout=timeout)

    if isinstance(outcome, SuccessOutcome):
        return RequestResult(body=outcome.body)

    if isinstance(outcome, HttpErrorOutcome):
        raise HttpError(outcome.status, outcome.raw_body, reason=outcome.reason)

    logging.info("402 Payment Required from %s, negotiating payment", spec.url)
    authorization = negotiate(
        session,
        outcome.raw_body,
        identity,
        spec,
        wallet_url=wallet_url,
        timeout=timeout,
        clock=clock,
    )

    logging.info("Retrying request with %s header", PAYMENT_HEADER)
    retry_spec = spec.with_header(PAYMENT_HEADER, authorization.payment_header)
    retry_outcome = execute(session, retry_spec, timeout=timeout, phase=PHASE_RETRY)

    if isinstance(retry_outcome, (HttpErrorOutcome, PaymentRequiredOutcome)):
        logging.error(
            "Request to %s failed after payment with status %s",
            spec.url,
            retry_outcome.status,
        )
        raise PostPaymentRequestFailed(retry_outcome.status, retry_outcome.raw_body)

    return RequestResult(
        body=retry_outcome.body,
        payment=PaymentInfo(
            amount_paid=authorization.amount_paid,
            timestamp=authorization.obtained_at,
        ),
    )


class PaymentAwareClient:
    """
    Convenience wrapper that binds a session, identity and signing service.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.identity = config.identity()
        self._clock = clock

    def request(self, spec: RequestSpec) -> RequestResult:
        return perform_payment_aware_request(
            self.session,
            spec,
            self.identity,
            wallet_url=self.config.wallet_url,
            timeout=self.config.timeout_seconds,
            clock=self._clock,
        )

    def get(self, url: str, *, headers=None) -> RequestResult:
        return self.request(RequestSpec.create("GET", url, headers))

    def post(self, url: str, body=None, *, headers=None) -> RequestResult:
        return self.request(RequestSpec.create("POST", url, headers, body))

    def put(self, url: str, body=None, *, headers=None) -> RequestResult:
        return self.request(RequestSpec.create("PUT", url, headers, body))

    def delete(self, url: str, *, headers=None) -> RequestResult:
        return self.request(RequestSpec.create("DELETE", url, headers))
