from enum import Enum


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class SessionEvent(Enum):
    CREDENTIAL_EXPIRED = "token_did_expire"
    SESSION_STARTED = "user_did_login"
    SESSION_ENDED = "user_did_logout"


DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_EXPIRY_WARNING_MINUTES = 30

TOKEN_STORAGE_KEY = "soulnet.jwt_token"
USERNAME_STORAGE_KEY = "soulnet.username"
