import base64
import json

import pytest

NOW = 1_700_000_000.0


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def encode_token(claims, header=None) -> str:
    header = header or {"alg": "HS256", "typ": "JWT"}
    return ".".join(
        [
            _b64url(json.dumps(header).encode()),
            _b64url(json.dumps(claims).encode()),
            _b64url(b"signature"),
        ]
    )


@pytest.fixture
def make_token():
    return encode_token


@pytest.fixture
def clock():
    return lambda: NOW
