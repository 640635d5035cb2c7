from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Protocol

from .constants import DEFAULT_TIMEOUT_SECONDS, HttpMethod, SessionEvent

if TYPE_CHECKING:
    from .value_objects import DispatchOutcome


class RequestDescriptor(Protocol):
    """
    Port describing one logical API call.

    Only `api_url` has no default. Endpoint descriptors subclass this
    protocol explicitly and override whatever differs from a JSON POST
    with a 30 second timeout.

    If both `http_body` and `parameters` are supplied the body is sent and
    the parameters are ignored.
    """

    def api_url(self) -> str:
        ...

    def http_method(self) -> str:
        return HttpMethod.POST.value

    def http_headers(self) -> Mapping[str, Optional[str]]:
        """Header overlay; a None value removes the header."""
        return {}

    def parameters(self) -> Mapping[str, Any]:
        return {}

    def http_body(self) -> Optional[bytes]:
        return None

    def timeout_seconds(self) -> float:
        return DEFAULT_TIMEOUT_SECONDS


class TokenDecoder(Protocol):
    """
    Port for turning a bearer token into its claims.

    Implementations live in the adapters layer.
    """

    def decode(self, token: str) -> Mapping[str, Any]:
        """
        Decode the token's payload segment.

        Raises:
          - MalformedTokenError
        """
        ...


class KeyValueStore(Protocol):
    """Persistent string storage for the token and the last username."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: Optional[str]) -> None:
        """Store `value`; None removes the key."""
        ...


class EventPublisher(Protocol):
    """Fire-and-forget notification of session events."""

    def publish(self, event: SessionEvent) -> None:
        ...


class Dispatcher(Protocol):
    """Port for executing a RequestDescriptor and classifying its result."""

    async def dispatch(
        self,
        descriptor: RequestDescriptor,
        decode: Optional[Callable[[Any], Any]] = None,
    ) -> "DispatchOutcome[Any]":
        """
        Never raises for network/HTTP/API failures; those come back as
        Failure(SoulNetError).
        """
        ...
