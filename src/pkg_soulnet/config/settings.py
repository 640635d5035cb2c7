from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_COMMUNITY_BASE_URL = "http://localhost:8080/community"
DEFAULT_ARK_BASE_URL = "https://ark.cn-beijing.volces.com/api/v3"
DEFAULT_CHAT_MODEL = "doubao-seed-1-6-250615"
DEFAULT_IMAGE_MODEL = "doubao-seedream-3-0-t2i-250415"


@dataclass(slots=True)
class SoulNetSettings:
    """
    Endpoints, credentials and transport options for the client.

    Host code decides how to construct this (env, config file, etc.).
    """
    community_base_url: str = DEFAULT_COMMUNITY_BASE_URL
    ark_base_url: str = DEFAULT_ARK_BASE_URL
    ark_api_key: Optional[str] = None
    chat_model: str = DEFAULT_CHAT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL

    verify_ssl: bool = True

    # Where the token and username survive restarts; None keeps them in memory
    token_store_path: Optional[str] = None

    @property
    def has_ark_credentials(self) -> bool:
        return bool(self.ark_api_key and self.ark_api_key.strip())
