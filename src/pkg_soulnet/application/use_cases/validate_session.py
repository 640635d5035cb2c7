from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from ...domain.constants import (
    DEFAULT_EXPIRY_WARNING_MINUTES,
    TOKEN_STORAGE_KEY,
    USERNAME_STORAGE_KEY,
    SessionEvent,
)
from ...domain.entities import TokenClaims
from ...domain.exceptions import MalformedTokenError, SessionExpiredError
from ...domain.ports import EventPublisher, KeyValueStore, TokenDecoder
from ...domain.value_objects import ValidityResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionValidator:
    """
    Application use case:
    - decode the stored (or a given) bearer token via TokenDecoder
    - answer validity / remaining-time questions against `clock`
    - clear the session and notify subscribers once the token has expired

    Nothing is cached: every query reads the store and the clock again.
    """

    token_decoder: TokenDecoder
    store: KeyValueStore
    events: EventPublisher
    clock: Callable[[], float] = field(default=time.time)

    # ------------------------------------------------------------------ #
    # stored session
    # ------------------------------------------------------------------ #

    @property
    def current_token(self) -> Optional[str]:
        return self.store.get(TOKEN_STORAGE_KEY)

    @property
    def current_username(self) -> Optional[str]:
        return self.store.get(USERNAME_STORAGE_KEY)

    @property
    def authorization_header(self) -> Optional[str]:
        token = self.current_token
        return f"Bearer {token}" if token else None

    @property
    def is_authenticated(self) -> bool:
        token = self.current_token
        return token is not None and self.is_valid(token)

    # ------------------------------------------------------------------ #
    # decoding
    # ------------------------------------------------------------------ #

    def decode(self, token: str) -> TokenClaims:
        """
        Raises:
            MalformedTokenError
        """
        claims = self.token_decoder.decode(token)
        try:
            return TokenClaims.from_mapping(claims)
        except ValueError as exc:
            raise MalformedTokenError(f"Invalid token claims: {exc}") from exc

    def try_decode(self, token: str) -> Optional[TokenClaims]:
        try:
            return self.decode(token)
        except MalformedTokenError as exc:
            logger.warning("could not decode bearer token: %s", exc)
            return None

    # ------------------------------------------------------------------ #
    # validity queries
    # ------------------------------------------------------------------ #

    def is_valid(self, token: str) -> bool:
        claims = self.try_decode(token)
        if claims is None:
            return False
        return claims.exp > self.clock()

    def remaining_seconds(self, token: Optional[str] = None) -> Optional[float]:
        """
        Seconds until `token` (default: the stored one) expires, never
        negative. None when there is no token or it cannot be decoded.
        """
        if token is None:
            token = self.current_token
            if token is None:
                return None
        claims = self.try_decode(token)
        if claims is None:
            return None
        return max(0.0, claims.exp - self.clock())

    def is_expiring_soon(
        self,
        token: Optional[str] = None,
        within_minutes: int = DEFAULT_EXPIRY_WARNING_MINUTES,
    ) -> bool:
        remaining = self.remaining_seconds(token)
        if remaining is None:
            # undecodable counts as about to expire
            return True
        return remaining <= within_minutes * 60

    def validity(self, token: Optional[str] = None) -> ValidityResult:
        if token is None:
            token = self.current_token
        if token is None:
            return ValidityResult(is_valid=False, remaining_seconds=None)
        claims = self.try_decode(token)
        if claims is None:
            return ValidityResult(is_valid=False, remaining_seconds=None)
        now = self.clock()
        return ValidityResult(
            is_valid=claims.exp > now,
            remaining_seconds=max(0.0, claims.exp - now),
        )

    # ------------------------------------------------------------------ #
    # expiry handling
    # ------------------------------------------------------------------ #

    def handle_expiry(self) -> None:
        """
        Clear the stored token and username, then publish
        CREDENTIAL_EXPIRED followed by SESSION_ENDED.
        """
        logger.info("bearer token expired, ending session")
        self.store.set(TOKEN_STORAGE_KEY, None)
        self.store.set(USERNAME_STORAGE_KEY, None)
        self.events.publish(SessionEvent.CREDENTIAL_EXPIRED)
        self.events.publish(SessionEvent.SESSION_ENDED)

    def validate_current(self) -> bool:
        """
        Check the stored token before an action that needs a session.
        An invalid token triggers `handle_expiry`.
        """
        token = self.current_token
        if token is None:
            return False
        if self.is_valid(token):
            return True
        self.handle_expiry()
        return False

    def require_session(self) -> str:
        """
        Return the stored token if it is still valid.

        Raises:
            SessionExpiredError
        """
        if not self.validate_current():
            raise SessionExpiredError("No valid session; please log in again")
        token = self.current_token
        if token is None:
            raise SessionExpiredError("Session ended while it was being checked")
        return token
