"""
Exceptions raised by the payment-aware request protocol.

Every failure is terminal for the invocation that raised it. The ``phase``
attribute tells callers which step of the protocol failed.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "HttpError",
    "MalformedPaymentRequirements",
    "MalformedSigningResponse",
    "NetworkError",
    "PaymentSigningFailed",
    "PostPaymentRequestFailed",
    "X402RequestError",
]

PHASE_REQUEST = "request"
PHASE_NEGOTIATION = "negotiation"
PHASE_SIGNING = "signing"
PHASE_RETRY = "retry"


class X402RequestError(Exception):
    """Base class for protocol failures."""

    phase: str = PHASE_REQUEST

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "phase": self.phase,
            "message": self.message,
            "status": self.status,
            "body": self.body,
        }


class NetworkError(X402RequestError):
    """The transport failed before any HTTP response was received."""

    def __init__(self, cause: Exception, *, url: str, phase: str = PHASE_REQUEST) -> None:
        super().__init__(f"Network error calling {url}: {cause}")
        self.cause = cause
        self.url = url
        self.phase = phase


class HttpError(X402RequestError):
    def __init__(self, status: int, body: str, *, reason: str = "") -> None:
        label = f"{status} {reason}".strip()
        super().__init__(f"Request failed ({label}): {body}", status=status, body=body)


class MalformedPaymentRequirements(X402RequestError):
    """The 402 response body was not valid JSON."""

    phase = PHASE_NEGOTIATION

    def __init__(self, raw_body: str, detail: str = "") -> None:
        reason = detail or "invalid JSON"
        super().__init__(
            f"Failed to parse payment requirements: {reason}. Response: {raw_body}",
            body=raw_body,
        )
        self.raw_body = raw_body


class PaymentSigningFailed(X402RequestError):
    """The wallet signing service rejected the signing request."""

    phase = PHASE_SIGNING

    def __init__(self, status: int, body: str) -> None:
        super().__init__(
            f"Payment signing failed ({status}): {body}", status=status, body=body
        )


class MalformedSigningResponse(X402RequestError):
    """The signing service answered 2xx with a payload that cannot be used."""

    phase = PHASE_SIGNING

    def __init__(self, body: str, detail: str) -> None:
        super().__init__(f"Unusable signing response ({detail}): {body}", body=body)
        self.detail = detail


class PostPaymentRequestFailed(X402RequestError):
    phase = PHASE_RETRY

    def __init__(self, status: int, body: str) -> None:
        super().__init__(
            f"Request failed after payment ({status}): {body}", status=status, body=body
        )
