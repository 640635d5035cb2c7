# tests/test_domain.py
from datetime import datetime

import pytest

from pkg_soulnet.domain.constants import DEFAULT_TIMEOUT_SECONDS, HttpMethod
from pkg_soulnet.domain.entities import ChatMessage, LoginResponse, RegisterResponse, TokenClaims
from pkg_soulnet.domain.exceptions import (
    ApiError,
    HttpError,
    InvalidURLError,
    NetworkError,
    NoDataError,
    ParseError,
    RequestTimeoutError,
    SoulNetError,
)
from pkg_soulnet.domain.value_objects import Failure, RequestSpec, Success


def test_error_messages_and_kinds():
    assert str(ApiError("not found", 404)) == "API error (404): not found"
    assert str(ApiError("boom")) == "API error: boom"
    assert str(HttpError(502)) == "HTTP error (502)"
    assert HttpError(502).status_code == 502
    assert "not a url" in str(InvalidURLError("not a url"))
    assert NoDataError().kind == "no_data"

    cause = ValueError("bad json")
    err = ParseError(cause)
    assert err.cause is cause
    assert "bad json" in str(err)


def test_timeout_is_a_network_error():
    err = RequestTimeoutError(TimeoutError("slow"))
    assert isinstance(err, NetworkError)
    assert isinstance(err, SoulNetError)
    assert err.kind == "timeout"
    assert str(err) == "Request timed out"


def test_request_spec_defaults():
    spec = RequestSpec(url="https://example.com/api")
    assert spec.api_url() == "https://example.com/api"
    assert spec.http_method() == HttpMethod.POST.value
    assert dict(spec.http_headers()) == {}
    assert dict(spec.parameters()) == {}
    assert spec.http_body() is None
    assert spec.timeout_seconds() == DEFAULT_TIMEOUT_SECONDS == 30.0

    with pytest.raises(ValueError):
        RequestSpec(url="https://example.com", timeout=0)


def test_outcome_variants():
    ok = Success({"a": 1})
    assert ok.ok
    assert ok.unwrap() == {"a": 1}
    assert ok.map(lambda p: p["a"]) == Success(1)

    err = HttpError(500)
    failed = Failure(err)
    assert not failed.ok
    assert failed.map(lambda p: p) is failed
    with pytest.raises(HttpError):
        failed.unwrap()


def test_token_claims_from_mapping():
    claims = TokenClaims.from_mapping({"exp": 100, "iat": 50, "sub": "42", "username": "ann", "extra": True})
    assert claims.exp == 100.0
    assert claims.iat == 50.0
    assert claims.sub == "42"
    assert claims.username == "ann"
    assert claims.raw["extra"] is True

    assert TokenClaims.from_mapping({"exp": 1.5}) == TokenClaims(exp=1.5)

    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"sub": "42"})
    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"exp": "tomorrow"})
    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"exp": True})
    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"exp": float("inf")})
    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"exp": float("nan")})
    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"exp": 10 ** 400})
    with pytest.raises(ValueError):
        TokenClaims.from_mapping({"exp": 1, "username": 7})


def test_api_envelope_from_payload():
    login = LoginResponse.from_payload({"code": 200, "data": "tok", "msg": "ok"})
    assert isinstance(login, LoginResponse)
    assert (login.code, login.data, login.msg) == (200, "tok", "ok")

    reg = RegisterResponse.from_payload({"code": 200})
    assert reg.data is None and reg.msg is None

    with pytest.raises(KeyError):
        LoginResponse.from_payload({"data": "tok"})
    with pytest.raises(TypeError):
        LoginResponse.from_payload(["not", "an", "object"])
    with pytest.raises(TypeError):
        LoginResponse.from_payload({"code": "200"})


def test_chat_message_role():
    ts = datetime(2025, 1, 1)
    assert ChatMessage("1", "hi", True, ts).role == "user"
    assert ChatMessage("2", "hello", False, ts).role == "assistant"
