"""
Public facade for the AgnicWallet x402 request client.

Integrators can ``from agnic_x402 import ...`` without navigating the package.
"""

from .api import create_client, perform_batch, perform_request
from .core import (
    ApiKeyIdentity,
    ClientConfig,
    ClientEnvironment,
    ClientParameters,
    ConfigError,
    HttpError,
    Identity,
    MalformedPaymentRequirements,
    MalformedSigningResponse,
    NetworkError,
    OAuth2Identity,
    PaymentAuthorization,
    PaymentAwareClient,
    PaymentInfo,
    PaymentSigningFailed,
    PostPaymentRequestFailed,
    RequestResult,
    RequestSpec,
    X402RequestError,
    build_environment,
    execute,
    load_client_config,
    negotiate,
    perform_payment_aware_request,
)

__all__ = (
    "ApiKeyIdentity",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "HttpError",
    "Identity",
    "MalformedPaymentRequirements",
    "MalformedSigningResponse",
    "NetworkError",
    "OAuth2Identity",
    "PaymentAuthorization",
    "PaymentAwareClient",
    "PaymentInfo",
    "PaymentSigningFailed",
    "PostPaymentRequestFailed",
    "RequestResult",
    "RequestSpec",
    "X402RequestError",
    "build_environment",
    "create_client",
    "execute",
    "load_client_config",
    "negotiate",
    "perform_batch",
    "perform_payment_aware_request",
    "perform_request",
)
