from __future__ import annotations

import json
from typing import Any, Optional, Tuple

import httpx

from ...domain.exceptions import (
    ApiError,
    HttpError,
    InvalidResponseError,
    NetworkError,
    NoDataError,
    ParseError,
    RequestTimeoutError,
)
from ...domain.value_objects import DispatchOutcome, Failure, JsonValue, Success


def classify_response(
    *,
    error: Optional[BaseException] = None,
    status_code: Optional[int] = None,
    body: Optional[bytes] = None,
) -> DispatchOutcome[JsonValue]:
    """
    Map the raw result of one transport call onto a DispatchOutcome.

    Checked in order: transport error, missing response, non-2xx status,
    empty body, unparsable body. A 2xx body that is not JSON is a
    ParseError, never an empty success.
    """
    if error is not None:
        return Failure(_transport_failure(error))

    if status_code is None:
        return Failure(InvalidResponseError())

    if not 200 <= status_code <= 299:
        api_error = _extract_api_error(body)
        if api_error is not None:
            message, code = api_error
            return Failure(ApiError(message, code))
        return Failure(HttpError(status_code))

    if not body:
        return Failure(NoDataError())

    try:
        payload = json.loads(body)
    except ValueError as exc:
        return Failure(ParseError(exc))
    return Success(payload)


def _transport_failure(error: BaseException) -> NetworkError | InvalidResponseError:
    if isinstance(error, httpx.TimeoutException):
        return RequestTimeoutError(error)
    # body arrived but its content-encoding could not be undone
    if isinstance(error, httpx.DecodingError):
        return InvalidResponseError(error)
    return NetworkError(error)


def _extract_api_error(body: Optional[bytes]) -> Optional[Tuple[str, Optional[int]]]:
    """
    Best-effort read of an error body.

    Accepts `{"message": ..., "code": ...}` and the AI gateway's
    `{"error": {"message": ..., "code": ...}}`. Only integer codes are kept.
    """
    if not body:
        return None
    try:
        doc: Any = json.loads(body)
    except ValueError:
        return None
    if not isinstance(doc, dict):
        return None

    if not isinstance(doc.get("message"), str) and isinstance(doc.get("error"), dict):
        doc = doc["error"]

    message = doc.get("message")
    if not isinstance(message, str):
        return None

    code = doc.get("code")
    if isinstance(code, bool) or not isinstance(code, int):
        code = None
    return message, code
