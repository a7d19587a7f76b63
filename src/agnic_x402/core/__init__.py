"""
Core primitives that implement the payment-aware request protocol.
"""

from .client import PaymentAwareClient, perform_payment_aware_request
from .config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    DEFAULT_WALLET_URL,
    load_client_config,
)
from .environment import ClientEnvironment, build_environment
from .errors import (
    HttpError,
    MalformedPaymentRequirements,
    MalformedSigningResponse,
    NetworkError,
    PaymentSigningFailed,
    PostPaymentRequestFailed,
    X402RequestError,
)
from .executor import execute
from .models import (
    ApiKeyIdentity,
    HttpErrorOutcome,
    Identity,
    OAuth2Identity,
    Outcome,
    PAYMENT_HEADER,
    PaymentAuthorization,
    PaymentInfo,
    PaymentRequiredOutcome,
    RequestResult,
    RequestSpec,
    SuccessOutcome,
)
from .negotiator import negotiate
from .payloads import build_signing_headers, build_signing_request

__all__ = [
    "ApiKeyIdentity",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "DEFAULT_WALLET_URL",
    "HttpError",
    "HttpErrorOutcome",
    "Identity",
    "MalformedPaymentRequirements",
    "MalformedSigningResponse",
    "NetworkError",
    "OAuth2Identity",
    "Outcome",
    "PAYMENT_HEADER",
    "PaymentAuthorization",
    "PaymentAwareClient",
    "PaymentInfo",
    "PaymentRequiredOutcome",
    "PaymentSigningFailed",
    "PostPaymentRequestFailed",
    "RequestResult",
    "RequestSpec",
    "SuccessOutcome",
    "X402RequestError",
    "build_environment",
    "build_signing_headers",
    "build_signing_request",
    "execute",
    "load_client_config",
    "negotiate",
    "perform_payment_aware_request",
]
