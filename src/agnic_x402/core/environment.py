"""
Utilities for assembling the environment that configures the client.

Values are layered: the process environment first, then a ``.env`` file for
keys the environment does not define, then explicit overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = _unquote(value.strip())
    return values


@dataclass(frozen=True)
class ClientEnvironment:
    """Resolved variables used to configure :class:`~agnic_x402.core.config.ClientConfig`."""

    variables: Mapping[str, str]


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> ClientEnvironment:
    """
    Assemble a :class:`ClientEnvironment`.

    ``base`` defaults to :data:`os.environ`; pass ``env_file=None`` to skip the
    file. ``overrides`` always win.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in _parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return ClientEnvironment(variables=merged)
