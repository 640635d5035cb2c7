# src/pkg_soulnet/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from .constants import DEFAULT_TIMEOUT_SECONDS, HttpMethod
from .exceptions import SoulNetError

# A parsed JSON document: what the dispatcher hands back on success.
JsonValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

T = TypeVar("T")
U = TypeVar("U")


# --- Dispatch outcome ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    payload: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.payload

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.payload))


@dataclass(frozen=True, slots=True)
class Failure:
    error: SoulNetError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self


DispatchOutcome = Union[Success[T], Failure]


# --- Request description -------------------------------------------------


@dataclass(frozen=True, slots=True)
class RequestSpec:
    """
    Plain-data request descriptor for ad-hoc calls.

    Endpoint-specific descriptors implement the same capability set
    (see `domain.ports.RequestDescriptor`); this one just carries the
    answers as fields.
    """
    url: str
    method: str = HttpMethod.POST.value
    headers: Mapping[str, Optional[str]] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout!r}")

    def api_url(self) -> str:
        return self.url

    def http_method(self) -> str:
        return self.method

    def http_headers(self) -> Mapping[str, Optional[str]]:
        return self.headers

    def parameters(self) -> Mapping[str, Any]:
        return self.params

    def http_body(self) -> Optional[bytes]:
        return self.body

    def timeout_seconds(self) -> float:
        return self.timeout


# --- Session validity ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class ValidityResult:
    """
    Snapshot of a token's validity at the moment it was computed.

    `remaining_seconds` is None when the token could not be decoded.
    """
    is_valid: bool
    remaining_seconds: Optional[float]
