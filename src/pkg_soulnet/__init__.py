"""
pkg_soulnet

Async client-side network layer: one dispatcher and error taxonomy for
every remote call, plus bearer-token session validation.
"""

__version__ = "0.1.0"

from .domain.constants import HttpMethod, SessionEvent
from .domain.entities import TokenClaims, LoginResponse, RegisterResponse, ChatMessage
from .domain.exceptions import (
    SoulNetError,
    InvalidURLError,
    EncodingError,
    NetworkError,
    RequestTimeoutError,
    InvalidResponseError,
    HttpError,
    ApiError,
    NoDataError,
    DecodingError,
    ParseError,
    AuthenticationError,
    MalformedTokenError,
    SessionExpiredError,
)
from .domain.value_objects import (
    JsonValue,
    Success,
    Failure,
    DispatchOutcome,
    RequestSpec,
    ValidityResult,
)
from .domain.ports import RequestDescriptor, Dispatcher, TokenDecoder, KeyValueStore, EventPublisher

from .application.use_cases.validate_session import SessionValidator
from .application.use_cases.authenticate import AuthenticateUserUseCase
from .application.use_cases.chat import ChatCompletionUseCase
from .application.use_cases.images import ImageGenerationUseCase

from .adapters.http.classifier import classify_response
from .adapters.http.dispatcher import HttpxDispatcher
from .adapters.jwt.claims_decoder import UnverifiedClaimsDecoder
from .adapters.storage.memory import MemoryStore
from .adapters.storage.file import JsonFileStore
from .adapters.events.bus import EventBus

from .config.settings import SoulNetSettings
from .config.env import settings_from_env
from .integrations.common.client_factory import SoulNetClient, create_soulnet_client

__all__ = [
    "__version__",
    # domain core
    "HttpMethod",
    "SessionEvent",
    "TokenClaims",
    "LoginResponse",
    "RegisterResponse",
    "ChatMessage",
    "JsonValue",
    "Success",
    "Failure",
    "DispatchOutcome",
    "RequestSpec",
    "ValidityResult",
    "RequestDescriptor",
    "Dispatcher",
    "TokenDecoder",
    "KeyValueStore",
    "EventPublisher",
    # exceptions
    "SoulNetError",
    "InvalidURLError",
    "EncodingError",
    "NetworkError",
    "RequestTimeoutError",
    "InvalidResponseError",
    "HttpError",
    "ApiError",
    "NoDataError",
    "DecodingError",
    "ParseError",
    "AuthenticationError",
    "MalformedTokenError",
    "SessionExpiredError",
    # use cases
    "SessionValidator",
    "AuthenticateUserUseCase",
    "ChatCompletionUseCase",
    "ImageGenerationUseCase",
    # adapters
    "classify_response",
    "HttpxDispatcher",
    "UnverifiedClaimsDecoder",
    "MemoryStore",
    "JsonFileStore",
    "EventBus",
    # wiring
    "SoulNetSettings",
    "settings_from_env",
    "SoulNetClient",
    "create_soulnet_client",
]
