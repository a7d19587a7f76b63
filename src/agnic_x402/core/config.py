"""
Configuration objects and helpers for the payment-aware client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from .environment import build_environment
from .models import ApiKeyIdentity, Identity, OAuth2Identity

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "DEFAULT_WALLET_URL",
    "load_client_config",
]

DEFAULT_WALLET_URL = "https://api.agnicpay.xyz"

_PARAMETER_TO_ENV_KEY = {
    "wallet_url": "AGNIC_WALLET_URL",
    "auth_scheme": "AGNIC_AUTH_SCHEME",
    "access_token": "AGNIC_ACCESS_TOKEN",
    "api_token": "AGNIC_API_TOKEN",
    "timeout_seconds": "AGNIC_TIMEOUT_SECONDS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for :func:`load_client_config`.

    Every field maps onto one ``AGNIC_*`` variable and wins over the
    environment when set.
    """

    wallet_url: Optional[str] = None
    auth_scheme: Optional[str] = None
    access_token: Optional[str] = None
    api_token: Optional[str] = None
    timeout_seconds: Optional[float | int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


class ConfigError(Exception):
    """Raised when the supplied configuration is invalid."""


def _normalize_wallet_url(raw_url: str) -> str:
    value = raw_url.strip().rstrip("/")
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"AGNIC_WALLET_URL must be an absolute http(s) URL, got '{raw_url}'")
    return value


def _normalize_scheme(raw_scheme: str) -> str:
    try:
        return Identity.variant(raw_scheme).scheme
    except ValueError as exc:
        raise ConfigError(
            f"AGNIC_AUTH_SCHEME must be 'oauth2' or 'apiKey', got '{raw_scheme}'"
        ) from exc


def _parse_timeout(raw_timeout: Optional[str]) -> Optional[float]:
    if raw_timeout is None or not raw_timeout.strip():
        return None
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"AGNIC_TIMEOUT_SECONDS must be a number, got '{raw_timeout}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("AGNIC_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    credential: str
    auth_scheme: str = OAuth2Identity.scheme
    wallet_url: str = DEFAULT_WALLET_URL
    timeout_seconds: Optional[float] = None

    def identity(self) -> Identity:
        return Identity.from_scheme(self.auth_scheme, self.credential)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(auth_scheme={self.auth_scheme!r}, wallet_url={self.wallet_url!r}, "
            f"timeout_seconds={self.timeout_seconds!r}, credential='***')"
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        wallet_url = _normalize_wallet_url(values.get("AGNIC_WALLET_URL", DEFAULT_WALLET_URL))
        auth_scheme = _normalize_scheme(values.get("AGNIC_AUTH_SCHEME", "oauth2"))

        token_key = (
            "AGNIC_API_TOKEN" if auth_scheme == ApiKeyIdentity.scheme else "AGNIC_ACCESS_TOKEN"
        )
        credential = (values.get(token_key) or "").strip()
        if not credential:
            raise ConfigError(f"{token_key} must be provided for {auth_scheme} authentication")

        return cls(
            credential=credential,
            auth_scheme=auth_scheme,
            wallet_url=wallet_url,
            timeout_seconds=_parse_timeout(values.get("AGNIC_TIMEOUT_SECONDS")),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        wallet_url: Optional[str] = None,
        auth_scheme: Optional[str] = None,
        access_token: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout_seconds: Optional[float | int | str] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "wallet_url": wallet_url,
                "auth_scheme": auth_scheme,
                "access_token": access_token,
                "api_token": api_token,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    wallet_url: Optional[str] = None,
    auth_scheme: Optional[str] = None,
    access_token: Optional[str] = None,
    api_token: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Settings may come from environment variables, a ``.env`` file, keyword
    arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
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
