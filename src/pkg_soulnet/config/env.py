from __future__ import annotations

import os

from .settings import (
    DEFAULT_ARK_BASE_URL,
    DEFAULT_CHAT_MODEL,
    DEFAULT_COMMUNITY_BASE_URL,
    DEFAULT_IMAGE_MODEL,
    SoulNetSettings,
)


def settings_from_env() -> SoulNetSettings:
    def _bool(key: str, default: bool = True) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    return SoulNetSettings(
        community_base_url=os.getenv("SOULNET_API_BASE_URL") or DEFAULT_COMMUNITY_BASE_URL,
        ark_base_url=os.getenv("ARK_BASE_URL") or DEFAULT_ARK_BASE_URL,
        ark_api_key=os.getenv("ARK_API_KEY") or None,
        chat_model=os.getenv("ARK_CHAT_MODEL") or DEFAULT_CHAT_MODEL,
        image_model=os.getenv("ARK_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
        verify_ssl=_bool("VERIFY_SSL", True),
        token_store_path=os.getenv("SOULNET_TOKEN_STORE") or None,
    )
