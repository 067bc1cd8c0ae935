from __future__ import annotations

from typing import Any, Dict, List

import pytest
from requests import exceptions as req_exc

from bankbridge.adapters.api_errors import ApiError, ApiTimeoutError
from bankbridge.adapters.http_client import HttpConfig, PartnerSession
from bankbridge.tests.unit.helpers import ResponseStub, make_config


class _RequestsSessionStub:
    def __init__(self, outcomes: List[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _session(outcomes: List[Any], *, get_retries: int = 0) -> PartnerSession:
    session = PartnerSession(
        "https://partner.test/v1", "secret-token", HttpConfig(request_timeout_s=5, get_retries=get_retries)
    )
    session.session = _RequestsSessionStub(outcomes)
    return session


def test_request_sends_bearer_token_and_json_body() -> None:
    session = _session([ResponseStub({"payouts": []})])

    resp = session.request("post", "payouts", json_body={"amount": "10.00"})

    call = session.session.calls[0]
    assert resp.status_code == 200
    assert call["method"] == "POST"
    assert call["url"] == "https://partner.test/v1/payouts"
    assert call["json"] == {"amount": "10.00"}
    assert call["params"] is None
    assert call["timeout"] == 5
    assert call["headers"]["Authorization"] == "Bearer secret-token"
    assert call["headers"]["Content-Type"] == "application/json"


def test_get_without_body_has_no_content_type() -> None:
    session = _session([ResponseStub({"wallets": []})])

    session.request("GET", "/wallets/9001", params={"origin": "OPERATOR"})

    call = session.session.calls[0]
    assert call["url"] == "https://partner.test/v1/wallets/9001"
    assert call["params"] == {"origin": "OPERATOR"}
    assert "Content-Type" not in call["headers"]


def test_get_is_retried_after_timeout() -> None:
    session = _session([req_exc.Timeout("slow"), ResponseStub({"cards": []})], get_retries=1)

    resp = session.request("GET", "cards/7001")

    assert resp.status_code == 200
    assert len(session.session.calls) == 2


def test_post_is_never_retried() -> None:
    session = _session([req_exc.ConnectionError("reset"), ResponseStub({})], get_retries=3)

    with pytest.raises(ApiTimeoutError) as excinfo:
        session.request("POST", "payouts", json_body={})

    assert len(session.session.calls) == 1
    assert excinfo.value.context == "POST payouts"


def test_other_request_failures_raise_api_error() -> None:
    session = _session([req_exc.InvalidURL("bad url")])

    with pytest.raises(ApiError) as excinfo:
        session.request("GET", "users/1")

    assert not isinstance(excinfo.value, ApiTimeoutError)


def test_from_config_uses_timeout_and_retries() -> None:
    session = PartnerSession.from_config(make_config(request_timeout_s=12.5, get_retries=2))

    assert session.base_url == "https://partner.test/v1/"
    assert session.cfg.request_timeout_s == 12.5
    assert session.cfg.get_retries == 2
    assert session.make_url("/users") == "https://partner.test/v1/users"
