"""
Descriptors for the community backend's user endpoints.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..domain.ports import RequestDescriptor

JSON_HEADERS: Mapping[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass(frozen=True, slots=True)
class UserLoginRequest(RequestDescriptor):
    """POST <base>/user/login with username and password as JSON parameters."""
    base_url: str
    username: str
    password: str = field(repr=False)

    def api_url(self) -> str:
        return _join(self.base_url, "user/login")

    def http_headers(self) -> Mapping[str, Optional[str]]:
        return JSON_HEADERS

    def parameters(self) -> Mapping[str, Any]:
        return {"username": self.username, "password": self.password}


@dataclass(frozen=True, slots=True)
class UserRegisterRequest(RequestDescriptor):
    """
    POST <base>/user/register.

    Sends a serialized user entity as the body rather than parameters;
    the backend expects the full entity shape.
    """
    base_url: str
    username: str
    password: str = field(repr=False)
    nickname: str

    def api_url(self) -> str:
        return _join(self.base_url, "user/register")

    def http_headers(self) -> Mapping[str, Optional[str]]:
        return JSON_HEADERS

    def http_body(self) -> Optional[bytes]:
        user = {
            "nickname": self.nickname,
            "password": self.password,
            "username": self.username,
        }
        return json.dumps(user).encode("utf-8")
