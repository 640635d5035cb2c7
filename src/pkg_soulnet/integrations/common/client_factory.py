from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from ...adapters.events.bus import EventBus
from ...adapters.http.dispatcher import HttpxDispatcher
from ...adapters.jwt.claims_decoder import UnverifiedClaimsDecoder
from ...adapters.storage.file import JsonFileStore
from ...adapters.storage.memory import MemoryStore
from ...application.use_cases.authenticate import AuthenticateUserUseCase
from ...application.use_cases.chat import ChatCompletionUseCase
from ...application.use_cases.images import ImageGenerationUseCase
from ...application.use_cases.validate_session import SessionValidator
from ...config.settings import SoulNetSettings
from ...domain.ports import EventPublisher, KeyValueStore


@dataclass(slots=True)
class SoulNetClient:
    """
    Composition root holding one dispatcher and the use cases wired to it.

    `chat` and `images` are None when no Ark API key is configured.
    """

    dispatcher: HttpxDispatcher
    session: SessionValidator
    auth: AuthenticateUserUseCase
    chat: Optional[ChatCompletionUseCase] = None
    images: Optional[ImageGenerationUseCase] = None

    async def close(self) -> None:
        await self.dispatcher.close()

    async def __aenter__(self) -> "SoulNetClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def require_chat(self) -> ChatCompletionUseCase:
        if self.chat is None:
            raise RuntimeError("Missing Ark settings: ARK_API_KEY")
        return self.chat

    def require_images(self) -> ImageGenerationUseCase:
        if self.images is None:
            raise RuntimeError("Missing Ark settings: ARK_API_KEY")
        return self.images


def create_soulnet_client(
        settings: SoulNetSettings,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        store: Optional[KeyValueStore] = None,
        events: Optional[EventPublisher] = None,
        clock: Callable[[], float] = time.time,
) -> SoulNetClient:
    """
    High-level factory: settings -> SoulNetClient.

    - one HttpxDispatcher shared by every use case
    - a JsonFileStore when `settings.token_store_path` is set, else memory
    - an EventBus unless the host brings its own publisher
    """
    dispatcher = HttpxDispatcher(http_client, verify_ssl=settings.verify_ssl)

    if store is None:
        if settings.token_store_path:
            store = JsonFileStore(settings.token_store_path)
        else:
            store = MemoryStore()
    if events is None:
        events = EventBus()

    session = SessionValidator(
        token_decoder=UnverifiedClaimsDecoder(),
        store=store,
        events=events,
        clock=clock,
    )
    auth = AuthenticateUserUseCase(
        dispatcher=dispatcher,
        store=store,
        events=events,
        base_url=settings.community_base_url,
    )

    chat: Optional[ChatCompletionUseCase] = None
    images: Optional[ImageGenerationUseCase] = None
    if settings.has_ark_credentials:
        chat = ChatCompletionUseCase(
            dispatcher=dispatcher,
            base_url=settings.ark_base_url,
            api_key=settings.ark_api_key or "",
            model=settings.chat_model,
        )
        images = ImageGenerationUseCase(
            dispatcher=dispatcher,
            base_url=settings.ark_base_url,
            api_key=settings.ark_api_key or "",
            model=settings.image_model,
        )

    return SoulNetClient(
        dispatcher=dispatcher,
        session=session,
        auth=auth,
        chat=chat,
        images=images,
    )
