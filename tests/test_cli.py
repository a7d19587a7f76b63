"""Tests for the agnic-x402 command-line interface."""

from __future__ import annotations

import json

import pytest

from agnic_x402 import cli

from conftest import WALLET_URL, FakeSession, make_response

SIGNED = {"paymentHeader": "b64token", "paymentProof": {}, "amountPaid": 0.01}


@pytest.fixture
def fake_session(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr(cli.requests, "Session", lambda: session)
    return session


@pytest.fixture
def base_args(tmp_path, monkeypatch):
    for key in ("AGNIC_ACCESS_TOKEN", "AGNIC_API_TOKEN", "AGNIC_AUTH_SCHEME", "AGNIC_WALLET_URL"):
        monkeypatch.delenv(key, raising=False)
    return [
        "--env-file",
        str(tmp_path / "missing.env"),
        "--set",
        "AGNIC_ACCESS_TOKEN=access",
        "--set",
        f"AGNIC_WALLET_URL={WALLET_URL}",
    ]


def test_paid_request_prints_result(fake_session, base_args, capsys):
    fake_session.queue(
        make_response(402, json_body={"amount": "0.01"}),
        make_response(200, json_body=SIGNED),
        make_response(200, json_body={"result": 42}),
    )

    code = cli.run_cli(
        base_args
        + ["--url", "https://api.example.com/data", "--header", "X-Trace=abc"]
    )

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["body"] == {"result": 42}
    assert output["payment"]["amountPaid"] == 0.01
    assert fake_session.calls[0].headers["X-Trace"] == "abc"
    assert fake_session.calls[2].headers["X-PAYMENT"] == "b64token"


def test_item_output(fake_session, base_args, capsys):
    fake_session.queue(make_response(200, json_body={"free": True}))

    code = cli.run_cli(
        base_args
        + ["--method", "post", "--url", "https://api.example.com", "--body", '{"q": 1}', "--item-output"]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"free": True}
    assert json.loads(fake_session.calls[0].kwargs["data"]) == {"q": 1}


def test_protocol_error_exits_nonzero(fake_session, base_args, capsys):
    fake_session.queue(make_response(403, text="forbidden"))

    code = cli.run_cli(base_args + ["--url", "https://api.example.com"])

    assert code == 1
    assert capsys.readouterr().out == ""


def test_missing_credential_exits_nonzero(fake_session, tmp_path, monkeypatch):
    monkeypatch.delenv("AGNIC_ACCESS_TOKEN", raising=False)

    code = cli.run_cli(
        ["--env-file", str(tmp_path / "missing.env"), "--url", "https://api.example.com"]
    )

    assert code == 1
    assert fake_session.calls == []


def test_invalid_body_exits_nonzero(fake_session, base_args):
    code = cli.run_cli(
        base_args + ["--method", "PUT", "--url", "https://api.example.com", "--body", "{bad"]
    )

    assert code == 1
    assert fake_session.calls == []


def test_batch_continue_on_fail(fake_session, base_args, tmp_path, capsys):
    batch = tmp_path / "batch.json"
    batch.write_text(
        json.dumps(
            [
                {"url": "https://api.example.com/a"},
                {"method": "DELETE", "url": "https://api.example.com/b"},
            ]
        )
    )
    fake_session.queue(
        make_response(404, text="gone"),
        make_response(200, json_body={"deleted": True}),
    )

    code = cli.run_cli(base_args + ["--batch", str(batch), "--continue-on-fail"])

    assert code == 0
    items = json.loads(capsys.readouterr().out)
    assert items[0]["error"].startswith("Request failed (404")
    assert items[1] == {"deleted": True}


def test_requires_url_or_batch(base_args):
    with pytest.raises(SystemExit):
        cli.run_cli(base_args)


def test_rejects_malformed_set():
    with pytest.raises(SystemExit):
        cli.run_cli(["--set", "novalue", "--url", "https://api.example.com"])


@pytest.mark.parametrize(
    "entry",
    [
        {"url": "https://api.example.com", "headers": ["X-A"]},
        {"url": "https://api.example.com", "headers": {"X-A": 1}},
        {"method": None, "url": "https://api.example.com"},
        {"url": 42},
        {"url": None},
    ],
)
def test_batch_entry_with_wrong_types_exits_nonzero(fake_session, base_args, tmp_path, entry):
    batch = tmp_path / "batch.json"
    batch.write_text(json.dumps([entry]))

    code = cli.run_cli(base_args + ["--batch", str(batch)])

    assert code == 1
    assert fake_session.calls == []
