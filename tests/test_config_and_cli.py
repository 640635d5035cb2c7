import json
import time

import pytest

from pkg_soulnet.adapters.storage.file import JsonFileStore
from pkg_soulnet.adapters.storage.memory import MemoryStore
from pkg_soulnet.cli import main
from pkg_soulnet.config.env import settings_from_env
from pkg_soulnet.config.settings import SoulNetSettings
from pkg_soulnet.domain.constants import TOKEN_STORAGE_KEY, USERNAME_STORAGE_KEY
from pkg_soulnet.integrations.common.client_factory import create_soulnet_client

ENV_KEYS = (
    "SOULNET_API_BASE_URL",
    "ARK_BASE_URL",
    "ARK_API_KEY",
    "ARK_CHAT_MODEL",
    "ARK_IMAGE_MODEL",
    "VERIFY_SSL",
    "SOULNET_TOKEN_STORE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


# --- settings ---------------------------------------------------------------


def test_settings_defaults(clean_env):
    settings = settings_from_env()
    assert settings == SoulNetSettings()
    assert settings.verify_ssl is True
    assert settings.has_ark_credentials is False


def test_settings_from_env(clean_env):
    clean_env.setenv("SOULNET_API_BASE_URL", "https://community.test/api")
    clean_env.setenv("ARK_API_KEY", "ark-key")
    clean_env.setenv("ARK_CHAT_MODEL", "chat-x")
    clean_env.setenv("VERIFY_SSL", "off")
    clean_env.setenv("SOULNET_TOKEN_STORE", "/tmp/session.json")

    settings = settings_from_env()
    assert settings.community_base_url == "https://community.test/api"
    assert settings.ark_api_key == "ark-key"
    assert settings.chat_model == "chat-x"
    assert settings.verify_ssl is False
    assert settings.token_store_path == "/tmp/session.json"
    assert settings.has_ark_credentials is True


# --- client factory ---------------------------------------------------------


def test_factory_without_ark_key_has_no_ai_use_cases():
    client = create_soulnet_client(SoulNetSettings())
    assert client.chat is None
    assert client.images is None
    assert isinstance(client.session.store, MemoryStore)
    with pytest.raises(RuntimeError, match="ARK_API_KEY"):
        client.require_chat()
    with pytest.raises(RuntimeError, match="ARK_API_KEY"):
        client.require_images()


def test_factory_wires_shared_store_and_dispatcher(tmp_path):
    settings = SoulNetSettings(
        ark_api_key="ark-key",
        token_store_path=str(tmp_path / "session.json"),
    )
    client = create_soulnet_client(settings)

    assert isinstance(client.session.store, JsonFileStore)
    assert client.auth.store is client.session.store
    assert client.auth.events is client.session.events
    assert client.chat.dispatcher is client.dispatcher
    assert client.images.dispatcher is client.dispatcher
    assert client.chat.model == settings.chat_model
    assert client.images.model == settings.image_model


# --- CLI --------------------------------------------------------------------


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


def test_cli_token_without_session(clean_env, tmp_path, capsys):
    main(["--store", str(tmp_path / "session.json"), "token"])
    assert _stdout_json(capsys) == {"ok": True, "token": None, "valid": False}


def test_cli_token_reports_stored_token(clean_env, tmp_path, capsys, make_token):
    path = tmp_path / "session.json"
    token = make_token({"exp": int(time.time()) + 7200, "sub": "42"})
    JsonFileStore(path).set(TOKEN_STORAGE_KEY, token)

    main(["--store", str(path), "token", "--within-minutes", "5"])
    report = _stdout_json(capsys)
    assert report["ok"] is True
    assert report["valid"] is True
    assert report["expiring_soon"] is False
    assert report["claims"]["sub"] == "42"
    assert 7000 < report["remaining_seconds"] <= 7200


def test_cli_token_argument_wins_over_store(clean_env, tmp_path, capsys, make_token):
    expired = make_token({"exp": 1000})
    main(["--store", str(tmp_path / "session.json"), "token", expired])
    report = _stdout_json(capsys)
    assert report["valid"] is False
    assert report["remaining_seconds"] == 0
    assert report["expiring_soon"] is True


def test_cli_logout_clears_store(clean_env, tmp_path, capsys, make_token):
    path = tmp_path / "session.json"
    store = JsonFileStore(path)
    store.set(TOKEN_STORAGE_KEY, make_token({"exp": 1}))
    store.set(USERNAME_STORAGE_KEY, "ann")

    main(["--store", str(path), "logout"])
    assert _stdout_json(capsys) == {"ok": True}
    assert store.get(TOKEN_STORAGE_KEY) is None
    assert store.get(USERNAME_STORAGE_KEY) is None


def test_cli_reports_errors_as_json(clean_env, tmp_path, capsys):
    with pytest.raises(SystemExit) as info:
        main(["--store", str(tmp_path / "session.json"), "chat", "hello"])
    assert info.value.code == 1
    report = _stdout_json(capsys)
    assert report["ok"] is False
    assert "ARK_API_KEY" in report["error"]
    assert report["kind"] == "RuntimeError"
