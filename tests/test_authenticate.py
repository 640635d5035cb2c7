import asyncio
import json

import httpx
import pytest

from pkg_soulnet.adapters.http.dispatcher import HttpxDispatcher
from pkg_soulnet.adapters.storage.memory import MemoryStore
from pkg_soulnet.application.use_cases.authenticate import AuthenticateUserUseCase
from pkg_soulnet.domain.constants import TOKEN_STORAGE_KEY, USERNAME_STORAGE_KEY, SessionEvent
from pkg_soulnet.domain.entities import LoginResponse, RegisterResponse
from pkg_soulnet.domain.exceptions import ApiError, DecodingError, NetworkError

BASE_URL = "http://community.test/community"


class UnusedDispatcher:
    async def dispatch(self, descriptor, decode=None):
        raise AssertionError("sign_out must not touch the network")


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)


def _run(handler, action):
    seen = []

    def _handle(request):
        seen.append(request)
        return handler(request)

    store = MemoryStore()
    events = RecordingPublisher()

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_handle)) as client:
            use_case = AuthenticateUserUseCase(
                dispatcher=HttpxDispatcher(client),
                store=store,
                events=events,
                base_url=BASE_URL,
            )
            return await action(use_case)

    return asyncio.run(run()), seen, store, events


def test_login_stores_token_and_announces_session():
    handler = lambda r: httpx.Response(200, json={"code": 200, "data": "jwt-token", "msg": "ok"})
    result, seen, store, events = _run(handler, lambda uc: uc.login("ann", "secret"))

    assert result == LoginResponse(code=200, data="jwt-token", msg="ok")
    assert store.get(TOKEN_STORAGE_KEY) == "jwt-token"
    assert store.get(USERNAME_STORAGE_KEY) == "ann"
    assert events.events == [SessionEvent.SESSION_STARTED]

    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/user/login"
    assert request.headers["Accept"] == "application/json"
    assert json.loads(request.content) == {"username": "ann", "password": "secret"}


def test_login_without_token_is_rejected():
    handler = lambda r: httpx.Response(200, json={"code": 401, "data": None, "msg": "wrong password"})
    with pytest.raises(ApiError) as info:
        _run(handler, lambda uc: uc.login("ann", "bad"))
    assert info.value.message == "wrong password"
    assert info.value.code == 401


def test_login_with_unexpected_shape_is_decoding_error():
    handler = lambda r: httpx.Response(200, json={"token": "x"})
    with pytest.raises(DecodingError):
        _run(handler, lambda uc: uc.login("ann", "pw"))


def test_login_api_rejection_leaves_store_untouched():
    store_snapshot = {}

    def handler(request):
        return httpx.Response(403, json={"message": "account locked", "code": 4031})

    async def action(uc):
        try:
            await uc.login("ann", "pw")
        except ApiError as exc:
            store_snapshot["token"] = uc.store.get(TOKEN_STORAGE_KEY)
            return exc
        return None

    exc, _, _, events = _run(handler, action)
    assert isinstance(exc, ApiError)
    assert exc.code == 4031
    assert store_snapshot["token"] is None
    assert events.events == []


def test_login_network_failure():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(NetworkError):
        _run(handler, lambda uc: uc.login("ann", "pw"))


def test_register_sends_user_entity_body():
    handler = lambda r: httpx.Response(200, json={"code": 200, "data": None, "msg": "registered"})
    result, seen, store, events = _run(handler, lambda uc: uc.register("ann", "pw", "Annie"))

    assert result == RegisterResponse(code=200, data=None, msg="registered")
    (request,) = seen
    assert str(request.url) == f"{BASE_URL}/user/register"
    assert json.loads(request.content) == {"nickname": "Annie", "password": "pw", "username": "ann"}
    assert store.get(TOKEN_STORAGE_KEY) is None
    assert events.events == []


def test_sign_out_clears_session():
    store = MemoryStore({TOKEN_STORAGE_KEY: "t", USERNAME_STORAGE_KEY: "ann"})
    events = RecordingPublisher()
    use_case = AuthenticateUserUseCase(
        dispatcher=UnusedDispatcher(),
        store=store,
        events=events,
        base_url=BASE_URL,
    )
    use_case.sign_out()

    assert store.get(TOKEN_STORAGE_KEY) is None
    assert store.get(USERNAME_STORAGE_KEY) is None
    assert events.events == [SessionEvent.SESSION_ENDED]
