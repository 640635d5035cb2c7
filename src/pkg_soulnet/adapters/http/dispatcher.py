from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import httpx

from ...domain.constants import HttpMethod
from ...domain.exceptions import DecodingError, EncodingError, InvalidURLError
from ...domain.ports import Dispatcher, RequestDescriptor
from ...domain.value_objects import DispatchOutcome, Failure, JsonValue, Success
from .classifier import classify_response

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}

_BODY_METHODS = {HttpMethod.POST.value, HttpMethod.PUT.value}


class HttpxDispatcher(Dispatcher):
    """
    Executes RequestDescriptors over a shared httpx.AsyncClient.

    - one transport call per dispatch, never retried
    - every failure comes back as Failure(SoulNetError), nothing is raised
    - holds no per-request state, so concurrent dispatches are independent
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, *, verify_ssl: bool = True):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(verify=verify_ssl)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxDispatcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    # public API
    # ------------------------------------------------------------------ #

    async def dispatch(
        self,
        descriptor: RequestDescriptor,
        decode: Optional[Callable[[JsonValue], T]] = None,
    ) -> DispatchOutcome[Any]:
        """
        Send the request `descriptor` describes and classify the result.

        When `decode` is given, a successful payload is passed through it;
        any exception it raises becomes Failure(DecodingError).
        """
        try:
            request = self.build_request(descriptor)
        except (InvalidURLError, EncodingError) as exc:
            logger.debug("request not sent: %s", exc)
            return Failure(exc)

        logger.debug("-> %s %s", request.method, request.url)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            logger.debug("<- %s %s failed: %r", request.method, request.url, exc)
            return classify_response(error=exc)

        logger.debug("<- %s %s %s", request.method, request.url, response.status_code)
        outcome = classify_response(status_code=response.status_code, body=response.content)

        if decode is None or not isinstance(outcome, Success):
            return outcome
        try:
            return Success(decode(outcome.payload))
        except Exception as exc:  # noqa: BLE001 - caller-supplied narrowing
            return Failure(DecodingError(exc))

    def submit(
        self,
        descriptor: RequestDescriptor,
        decode: Optional[Callable[[JsonValue], T]] = None,
    ) -> "asyncio.Task[DispatchOutcome[Any]]":
        """Schedule a dispatch on the running loop and return its task."""
        return asyncio.ensure_future(self.dispatch(descriptor, decode))

    # ------------------------------------------------------------------ #
    # request building
    # ------------------------------------------------------------------ #

    def build_request(self, descriptor: RequestDescriptor) -> httpx.Request:
        """
        Raises:
            InvalidURLError
            EncodingError
        """
        url = _parse_url(descriptor.api_url())
        method = _method_name(descriptor.http_method())
        try:
            headers = _merge_headers(descriptor.http_headers())
        except (AttributeError, TypeError) as exc:
            raise EncodingError(exc) from exc
        params = descriptor.parameters() or {}

        content: Optional[bytes] = descriptor.http_body()
        if content is None and params:
            if method in _BODY_METHODS:
                try:
                    content = json.dumps(dict(params), allow_nan=False).encode("utf-8")
                except (TypeError, ValueError) as exc:
                    raise EncodingError(exc) from exc
            elif method == HttpMethod.GET.value:
                url = url.copy_merge_params(
                    {key: _stringify(value) for key, value in params.items()}
                )

        timeout = _timeout(descriptor.timeout_seconds())
        try:
            return self._client.build_request(
                method,
                url,
                headers=headers,
                content=content,
                timeout=timeout,
            )
        except (UnicodeEncodeError, TypeError, ValueError) as exc:
            # header names and values must be ASCII-encodable strings
            raise EncodingError(exc) from exc


def _parse_url(raw: str) -> httpx.URL:
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidURLError(str(raw)) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(str(raw))
    return url


def _merge_headers(overlay: Optional[Mapping[str, Optional[str]]]) -> Dict[str, str]:
    headers: Dict[str, str] = dict(DEFAULT_HEADERS)
    for key, value in (overlay or {}).items():
        # header names are case-insensitive on the wire; the later spelling wins
        for existing in [k for k in headers if k.lower() == key.lower()]:
            del headers[existing]
        if value is not None:
            headers[key] = value
    return headers


def _timeout(seconds: Any) -> httpx.Timeout:
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)) or not seconds > 0:
        raise EncodingError(ValueError(f"timeout must be a positive number of seconds, got {seconds!r}"))
    return httpx.Timeout(seconds)


def _method_name(method: Any) -> str:
    # HttpMethod members and plain strings are both accepted
    return str(getattr(method, "value", method)).upper()


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
