"""Tests for the payment negotiator and signing payload helpers."""

from __future__ import annotations

import pytest
import requests

from agnic_x402.core.errors import (
    MalformedPaymentRequirements,
    MalformedSigningResponse,
    NetworkError,
    PaymentSigningFailed,
)
from agnic_x402.core.models import ApiKeyIdentity, OAuth2Identity, RequestSpec
from agnic_x402.core.negotiator import negotiate
from agnic_x402.core.payloads import parse_signing_response

from conftest import FIXED_TIME, SIGN_URL, WALLET_URL, make_response

REQUIREMENTS = '{"amount":"0.01","asset":"USDC"}'
SIGNED = {"paymentHeader": "b64token", "paymentProof": {"tx": "0xabc"}, "amountPaid": 0.01}


def _negotiate(session, identity=None, raw=REQUIREMENTS, spec=None, clock=None):
    return negotiate(
        session,
        raw,
        identity or OAuth2Identity("access"),
        spec or RequestSpec.create("GET", "https://api.example.com/data"),
        wallet_url=WALLET_URL,
        clock=clock or (lambda: FIXED_TIME),
    )


def test_returns_authorization(session):
    session.queue(make_response(200, json_body=SIGNED))

    auth = _negotiate(session)

    assert auth.payment_header == "b64token"
    assert auth.amount_paid == 0.01
    assert auth.proof == {"tx": "0xabc"}
    assert auth.obtained_at == FIXED_TIME


def test_forwards_requirements_and_request_data(session):
    session.queue(make_response(200, json_body=SIGNED))
    spec = RequestSpec.create("POST", "https://api.example.com/search", body={"q": "x"})

    _negotiate(session, spec=spec)

    call = session.calls[0]
    assert call.method == "POST"
    assert call.url == SIGN_URL
    assert call.kwargs["json"] == {
        "paymentRequirements": {"amount": "0.01", "asset": "USDC"},
        "requestData": {
            "url": "https://api.example.com/search",
            "method": "POST",
            "body": {"q": "x"},
        },
    }


def test_oauth2_identity_sends_bearer(session):
    session.queue(make_response(200, json_body=SIGNED))

    _negotiate(session, identity=OAuth2Identity("access"))

    headers = session.calls[0].headers
    assert headers["Authorization"] == "Bearer access"
    assert "X-Agnic-Token" not in headers


def test_api_key_identity_sends_agnic_token(session):
    session.queue(make_response(200, json_body=SIGNED))

    _negotiate(session, identity=ApiKeyIdentity("agnic_tok_sk"))

    headers = session.calls[0].headers
    assert headers["X-Agnic-Token"] == "agnic_tok_sk"
    assert "Authorization" not in headers


def test_wallet_url_trailing_slash(session):
    session.queue(make_response(200, json_body=SIGNED))

    negotiate(
        session,
        REQUIREMENTS,
        OAuth2Identity("access"),
        RequestSpec.create("GET", "https://api.example.com"),
        wallet_url=WALLET_URL + "/",
    )

    assert session.calls[0].url == SIGN_URL


def test_malformed_requirements_never_call_signer(session):
    with pytest.raises(MalformedPaymentRequirements) as info:
        _negotiate(session, raw="<html>pay me</html>")

    assert info.value.raw_body == "<html>pay me</html>"
    assert info.value.phase == "negotiation"
    assert session.calls == []


def test_signing_rejection(session):
    session.queue(make_response(403, text="insufficient funds"))

    with pytest.raises(PaymentSigningFailed) as info:
        _negotiate(session)

    assert info.value.status == 403
    assert info.value.body == "insufficient funds"
    assert len(session.calls) == 1


def test_signing_service_unreachable(session):
    session.queue(requests.ConnectionError("refused"))

    with pytest.raises(NetworkError) as info:
        _negotiate(session)

    assert info.value.phase == "signing"
    assert info.value.url == SIGN_URL


@pytest.mark.parametrize(
    "text, detail",
    [
        ("not json", "invalid JSON"),
        ("[1, 2]", "expected a JSON object"),
        ('{"amountPaid": 1}', "paymentHeader"),
        ('{"paymentHeader": 5, "amountPaid": 1}', "paymentHeader"),
        ('{"paymentHeader": "h"}', "amountPaid"),
        ('{"paymentHeader": "h", "amountPaid": "0.01"}', "amountPaid"),
        ('{"paymentHeader": "h", "amountPaid": true}', "amountPaid"),
        ('{"paymentHeader": "h", "amountPaid": -1}', "negative"),
        ('{"paymentHeader": "h", "amountPaid": NaN}', "finite"),
        ('{"paymentHeader": "h", "amountPaid": Infinity}', "finite"),
        ('{"paymentHeader": "h", "amountPaid": -Infinity}', "finite"),
    ],
)
def test_malformed_signing_response(session, text, detail):
    session.queue(make_response(200, text=text))

    with pytest.raises(MalformedSigningResponse) as info:
        _negotiate(session)

    assert detail in info.value.detail
    assert info.value.body == text


def test_parse_signing_response_without_proof():
    auth = parse_signing_response(
        '{"paymentHeader": "h", "amountPaid": 0}', obtained_at=FIXED_TIME
    )
    assert auth.amount_paid == 0
    assert auth.proof is None
