"""
Public, high-level helpers for making payment-aware requests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

from .core.client import PaymentAwareClient, perform_payment_aware_request
from .core.config import (
    ClientConfig,
    ClientParameters,
    ConfigError,
    load_client_config,
)
from .core.environment import ClientEnvironment, build_environment
from .core.errors import X402RequestError
from .core.models import RequestResult, RequestSpec

__all__ = [
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "PaymentAwareClient",
    "RequestResult",
    "RequestSpec",
    "build_environment",
    "create_client",
    "load_client_config",
    "perform_batch",
    "perform_payment_aware_request",
    "perform_request",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    wallet_url: Optional[str] = None,
    auth_scheme: Optional[str] = None,
    access_token: Optional[str] = None,
    api_token: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> PaymentAwareClient:
    """
    Construct a :class:`PaymentAwareClient`.

    Callers either supply a ready-made :class:`ClientConfig` or let the helper
    assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            parameters,
            wallet_url,
            auth_scheme,
            access_token,
            api_token,
            timeout_seconds,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            wallet_url=wallet_url,
            auth_scheme=auth_scheme,
            access_token=access_token,
            api_token=api_token,
            timeout_seconds=timeout_seconds,
        )
    return PaymentAwareClient(cfg, session=session)


def perform_request(
    method: str,
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    body: Any = None,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
) -> RequestResult:
    """
    One-shot helper: build the spec and client, then run the protocol once.
    """
    client = create_client(config=config, session=session, env_file=env_file)
    return client.request(RequestSpec.create(method, url, headers, body))


def perform_batch(
    client: PaymentAwareClient,
    specs: Iterable[RequestSpec],
    *,
    continue_on_fail: bool = False,
) -> List[Dict[str, Any]]:
    """
    Run one independent invocation per spec and collect workflow items.

    With ``continue_on_fail`` a failed invocation contributes
    ``{"error": message}`` and the batch carries on; otherwise the first
    failure propagates.
    """
    items: List[Dict[str, Any]] = []
    for index, spec in enumerate(specs):
        try:
            result = client.request(spec)
        except X402RequestError as exc:
            if not continue_on_fail:
                raise
            logging.warning("Item %s failed: %s", index, exc.message)
            items.append({"error": exc.message})
            continue
        items.append(result.to_item())
    return items
