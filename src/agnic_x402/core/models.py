"""
Value types shared by the request executor, payment negotiator and client.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

__all__ = [
    "ApiKeyIdentity",
    "HttpErrorOutcome",
    "Identity",
    "OAuth2Identity",
    "Outcome",
    "PAYMENT_HEADER",
    "PaymentAuthorization",
    "PaymentInfo",
    "PaymentRequiredOutcome",
    "RequestResult",
    "RequestSpec",
    "SUPPORTED_METHODS",
    "SuccessOutcome",
]

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
BODY_METHODS = ("POST", "PUT")
PAYMENT_HEADER = "X-PAYMENT"
DEFAULT_HEADERS = {"Content-Type": "application/json"}


def _validate_url(url: str) -> None:
    if not isinstance(url, str):
        raise ValueError(f"Request URL must be a string, got {type(url).__name__}")
    if not url.strip():
        raise ValueError("Request URL must not be empty")
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"Request URL must be an absolute http(s) URL, got '{url}'")


def _validate_headers(headers: Any) -> Dict[str, str]:
    if not isinstance(headers, Mapping):
        raise ValueError(f"Headers must be a mapping of name to value, got {type(headers).__name__}")
    for name, value in headers.items():
        if not isinstance(name, str) or not isinstance(value, str):
            raise ValueError(f"Header {name!r} must map a string name to a string value")
    return dict(headers)


@dataclass(frozen=True)
class RequestSpec:
    """
    Immutable description of one outbound call.

    Use :meth:`create` to build a spec from loosely-typed input; the
    constructor only validates.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    def __post_init__(self) -> None:
        if self.method not in SUPPORTED_METHODS:
            raise ValueError(
                f"Unsupported HTTP method '{self.method}', expected one of {', '.join(SUPPORTED_METHODS)}"
            )
        _validate_url(self.url)
        if self.method in BODY_METHODS and self.body is None:
            raise ValueError(f"{self.method} requests require a JSON body")
        if self.method not in BODY_METHODS and self.body is not None:
            raise ValueError(f"{self.method} requests must not carry a body")
        object.__setattr__(self, "headers", _validate_headers(self.headers))

    @classmethod
    def create(
        cls,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> "RequestSpec":
        """
        Build a spec with the usual defaults applied.

        ``Content-Type: application/json`` is sent unless the caller sets it.
        POST and PUT default to an empty JSON object, and a body given as a
        string is parsed as JSON. GET and DELETE never carry a body.
        """
        if not isinstance(method, str):
            raise ValueError(f"HTTP method must be a string, got {type(method).__name__}")
        if not isinstance(url, str):
            raise ValueError(f"Request URL must be a string, got {type(url).__name__}")
        verb = method.strip().upper()
        merged: Dict[str, str] = dict(DEFAULT_HEADERS)
        for name, value in _validate_headers(headers or {}).items():
            for existing in [key for key in merged if key.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value

        if verb in BODY_METHODS:
            if body is None:
                body = {}
            elif isinstance(body, str):
                try:
                    body = json.loads(body) if body.strip() else {}
                except json.JSONDecodeError as exc:
                    raise ValueError(f"Request body is not valid JSON: {exc}") from exc
        else:
            body = None

        return cls(method=verb, url=url.strip(), headers=merged, body=body)

    def with_header(self, name: str, value: str) -> "RequestSpec":
        """Return a copy with ``name`` set to ``value``, replacing any existing spelling."""
        headers = {
            key: val for key, val in self.headers.items() if key.lower() != name.lower()
        }
        headers[name] = value
        return replace(self, headers=headers)

    def request_data(self) -> Dict[str, Any]:
        return {"url": self.url, "method": self.method, "body": self.body}


class Identity:
    """
    Credential used to authenticate against the wallet signing service.

    Concrete variants are :class:`OAuth2Identity` and :class:`ApiKeyIdentity`.
    """

    scheme: str = ""

    def __init__(self, credential: str) -> None:
        if not credential or not credential.strip():
            raise ValueError(f"{self.scheme} credential must not be empty")
        self._credential = credential.strip()

    @property
    def credential(self) -> str:
        return self._credential

    def auth_headers(self) -> Dict[str, str]:
        raise NotImplementedError

    @staticmethod
    def variant(scheme: str) -> type:
        """Map a scheme tag such as ``oauth2``, ``apiKey`` or ``api-key`` to its class."""
        normalized = scheme.strip().replace("_", "").replace("-", "").lower()
        if normalized == "oauth2":
            return OAuth2Identity
        if normalized == "apikey":
            return ApiKeyIdentity
        raise ValueError(f"Unknown authentication scheme '{scheme}' (expected oauth2 or apiKey)")

    @staticmethod
    def from_scheme(scheme: str, credential: str) -> "Identity":
        return Identity.variant(scheme)(credential)

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.credential == self.credential

    def __hash__(self) -> int:
        return hash((self.scheme, self._credential))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(credential='***')"


class OAuth2Identity(Identity):
    scheme = "oauth2"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.credential}"}


class ApiKeyIdentity(Identity):
    scheme = "apiKey"

    def auth_headers(self) -> Dict[str, str]:
        return {"X-Agnic-Token": self.credential}


@dataclass(frozen=True)
class SuccessOutcome:
    status: int
    body: Any


@dataclass(frozen=True)
class PaymentRequiredOutcome:
    raw_body: str
    status: int = 402


@dataclass(frozen=True)
class HttpErrorOutcome:
    status: int
    raw_body: str
    reason: str = ""


Outcome = Union[SuccessOutcome, PaymentRequiredOutcome, HttpErrorOutcome]


@dataclass(frozen=True)
class PaymentAuthorization:
    payment_header: str
    amount_paid: Union[int, float]
    obtained_at: datetime
    proof: Any = None


@dataclass(frozen=True)
class PaymentInfo:
    amount_paid: Union[int, float]
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {"amountPaid": self.amount_paid, "timestamp": self.timestamp.isoformat()}


@dataclass(frozen=True)
class RequestResult:
    body: Any
    payment: Optional[PaymentInfo] = None

    @property
    def paid(self) -> bool:
        return self.payment is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "body": self.body,
            "payment": self.payment.to_dict() if self.payment is not None else None,
        }

    def to_item(self) -> Dict[str, Any]:
        """
        Flatten the result into a single workflow item.

        Unpaid results return the body unchanged. Paid results merge an
        ``_agnicWallet`` summary into the body (non-object bodies are dropped).
        """
        if self.payment is None:
            return self.body
        item = dict(self.body) if isinstance(self.body, dict) else {}
        item["_agnicWallet"] = {
            "paymentMade": True,
            "amountPaid": self.payment.amount_paid,
            "timestamp": self.payment.timestamp.isoformat(),
        }
        return item
