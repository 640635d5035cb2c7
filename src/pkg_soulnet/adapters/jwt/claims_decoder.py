import binascii
import json
import re
from typing import Any, Mapping, NoReturn

from jwt.utils import base64url_decode

from ...domain.exceptions import MalformedTokenError
from ...domain.ports import TokenDecoder

# urlsafe_b64decode silently drops characters outside the alphabet
_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"non-standard JSON constant {name!r}")


class UnverifiedClaimsDecoder(TokenDecoder):
    """
    Adapter implementing TokenDecoder by reading a JWT's payload segment.

    - Checks structure only: three dot-separated segments.
    - Does NOT verify the signature or look at the header segment.
    - Expiry is interpreted by the caller, not here.
    """

    def decode(self, token: str) -> Mapping[str, Any]:
        """
        Returns:
            Mapping of token claims.

        Raises:
            MalformedTokenError
        """
        segments = token.split(".")
        if len(segments) != 3:
            raise MalformedTokenError(
                f"Token must have 3 segments, got {len(segments)}"
            )

        payload = segments[1]
        if not _SEGMENT_RE.fullmatch(payload):
            raise MalformedTokenError("Token payload is not base64url")

        try:
            # base64url_decode pads to a multiple of 4 and maps -/_ to +//
            raw = base64url_decode(payload.encode("ascii"))
            claims = json.loads(raw, parse_constant=_reject_constant)
        except (UnicodeError, binascii.Error, ValueError) as exc:
            raise MalformedTokenError(f"Invalid token payload: {exc}") from exc

        if not isinstance(claims, dict):
            raise MalformedTokenError("Token payload is not a JSON object")
        return claims
