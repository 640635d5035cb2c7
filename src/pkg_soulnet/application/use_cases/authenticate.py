from __future__ import annotations

import logging
from dataclasses import dataclass

from ...domain.constants import TOKEN_STORAGE_KEY, USERNAME_STORAGE_KEY, SessionEvent
from ...domain.entities import LoginResponse, RegisterResponse
from ...domain.exceptions import ApiError
from ...domain.ports import Dispatcher, EventPublisher, KeyValueStore
from ...endpoints.community import UserLoginRequest, UserRegisterRequest

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AuthenticateUserUseCase:
    """
    Application use case:
    - log a user in against the community backend and keep the issued token
    - register new users
    - sign out

    The token and username live in `store`; session changes are announced
    through `events`.
    """

    dispatcher: Dispatcher
    store: KeyValueStore
    events: EventPublisher
    base_url: str

    async def login(self, username: str, password: str) -> LoginResponse:
        """
        Raises:
            SoulNetError subclasses from the dispatch
            ApiError when the backend answers without a token
        """
        descriptor = UserLoginRequest(
            base_url=self.base_url,
            username=username,
            password=password,
        )
        outcome = await self.dispatcher.dispatch(descriptor, LoginResponse.from_payload)
        response: LoginResponse = outcome.unwrap()

        if not response.data:
            raise ApiError(response.msg or "Login response carried no token", response.code)

        self.store.set(TOKEN_STORAGE_KEY, response.data)
        self.store.set(USERNAME_STORAGE_KEY, username)
        logger.info("user %s logged in", username)
        self.events.publish(SessionEvent.SESSION_STARTED)
        return response

    async def register(self, username: str, password: str, nickname: str) -> RegisterResponse:
        descriptor = UserRegisterRequest(
            base_url=self.base_url,
            username=username,
            password=password,
            nickname=nickname,
        )
        outcome = await self.dispatcher.dispatch(descriptor, RegisterResponse.from_payload)
        return outcome.unwrap()

    def sign_out(self) -> None:
        self.store.set(TOKEN_STORAGE_KEY, None)
        self.store.set(USERNAME_STORAGE_KEY, None)
        logger.info("user signed out")
        self.events.publish(SessionEvent.SESSION_ENDED)
