import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


def _number(claims: Mapping[str, Any], key: str, *, required: bool = False) -> Optional[float]:
    value = claims.get(key)
    if value is None:
        if required:
            raise ValueError(f"missing '{key}' claim")
        return None
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' claim must be a number, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise ValueError(f"'{key}' claim must be a finite number")
    return number


def _text(claims: Mapping[str, Any], key: str) -> Optional[str]:
    value = claims.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' claim must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claims carried in a bearer token's payload segment.
    Only `exp` is required.
    """
    exp: float
    iat: Optional[float] = None
    sub: Optional[str] = None
    username: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, claims: Mapping[str, Any]) -> "TokenClaims":
        """Raises ValueError when a claim is missing or has the wrong type."""
        return cls(
            exp=_number(claims, "exp", required=True),
            iat=_number(claims, "iat"),
            sub=_text(claims, "sub"),
            username=_text(claims, "username"),
            raw=dict(claims),
        )


@dataclass(frozen=True, slots=True)
class ApiEnvelope:
    """
    `{"code", "data", "msg"}` body returned by the community backend
    for login and registration.
    """
    code: int
    data: Optional[str] = None
    msg: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ApiEnvelope":
        if not isinstance(payload, Mapping):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        code = payload["code"]
        if isinstance(code, bool) or not isinstance(code, int):
            raise TypeError("'code' must be an integer")
        data = payload.get("data")
        msg = payload.get("msg")
        if data is not None and not isinstance(data, str):
            raise TypeError("'data' must be a string")
        if msg is not None and not isinstance(msg, str):
            raise TypeError("'msg' must be a string")
        return cls(code=code, data=data, msg=msg)


class LoginResponse(ApiEnvelope):
    """`data` holds the issued bearer token."""
    __slots__ = ()


class RegisterResponse(ApiEnvelope):
    __slots__ = ()


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One message of a conversation as shown to the user."""
    id: str
    content: str
    is_from_user: bool
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def role(self) -> str:
        return "user" if self.is_from_user else "assistant"
