from __future__ import annotations

from typing import Optional


class SoulNetError(Exception):
    """Base class for every failure a dispatch can produce."""

    kind: str = "soulnet_error"

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message or self._default_message())

    def _default_message(self) -> str:
        return self.kind.replace("_", " ")


class InvalidURLError(SoulNetError):
    """Raised when the descriptor's URL cannot be parsed into an absolute http(s) URL."""
    kind = "invalid_url"

    def __init__(self, url: str = "") -> None:
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class EncodingError(SoulNetError):
    """Raised when request parameters cannot be serialized to JSON."""
    kind = "encoding_error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Encoding error: {cause}", cause=cause)


class NetworkError(SoulNetError):
    """Raised when the transport fails before an HTTP response is available."""
    kind = "network_error"

    def __init__(self, cause: BaseException, message: str | None = None) -> None:
        super().__init__(message or f"Network error: {cause}", cause=cause)


class RequestTimeoutError(NetworkError):
    """Raised when the transport gives up after the descriptor's timeout."""
    kind = "timeout"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause, message="Request timed out")


class InvalidResponseError(SoulNetError):
    """Raised when no structured HTTP response could be obtained."""
    kind = "invalid_response"

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__("Invalid response", cause=cause)


class HttpError(SoulNetError):
    """Non-2xx status whose body carried no readable API error."""
    kind = "http_error"

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"HTTP error ({status_code})")


class ApiError(SoulNetError):
    """The server rejected the call and said why."""
    kind = "api_error"

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        self.message = message
        self.code = code
        if code is not None:
            text = f"API error ({code}): {message}"
        else:
            text = f"API error: {message}"
        super().__init__(text)


class NoDataError(SoulNetError):
    """Raised when a successful response carries nothing to read."""
    kind = "no_data"

    def __init__(self, detail: str = "No data received") -> None:
        super().__init__(detail)


class DecodingError(SoulNetError):
    """Raised when a parsed payload does not fit the shape the caller asked for."""
    kind = "decoding_error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Decoding error: {cause}", cause=cause)


class ParseError(SoulNetError):
    """Raised when a successful response body is not valid JSON."""
    kind = "parse_error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Parse error: {cause}", cause=cause)


class AuthenticationError(Exception):
    """Raised when the local session cannot be used."""
    pass


class MalformedTokenError(AuthenticationError):
    """Raised when a bearer token cannot be decoded into claims."""
    pass


class SessionExpiredError(AuthenticationError):
    """Raised when an action needs a session but the stored token is gone or expired."""
    pass
