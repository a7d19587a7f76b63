"""
Pytest fixtures for the payment-aware client tests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import pytest
import requests

WALLET_URL = "https://wallet.test"
SIGN_URL = f"{WALLET_URL}/api/sign-payment"
FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_response(
    status_code: int,
    *,
    json_body: Any = None,
    text: Optional[str] = None,
    content: Optional[bytes] = None,
    headers: Optional[Dict[str, str]] = None,
    reason: str = "",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.headers.update(headers or {})
    if content is None:
        payload = text if text is not None else json.dumps(json_body)
        content = payload.encode("utf-8")
    response._content = content
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def headers(self) -> Dict[str, str]:
        return self.kwargs.get("headers") or {}


class FakeSession:
    """Stand-in for :class:`requests.Session` that replays queued responses."""

    def __init__(self) -> None:
        self._queue: List[Union[requests.Response, Exception]] = []
        self.calls: List[RecordedCall] = []

    def queue(self, *items: Union[requests.Response, Exception]) -> "FakeSession":
        self._queue.extend(items)
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append(RecordedCall(method=method, url=url, kwargs=kwargs))
        if not self._queue:
            raise AssertionError(f"No queued response for {method} {url}")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("POST", url, **kwargs)

    def calls_to(self, url: str) -> List[RecordedCall]:
        return [call for call in self.calls if call.url == url]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME
