"""Unit tests for JWT decoding."""

import jwt
import pytest

from mds_core.domain.exceptions import InvalidJwtError
from mds_core.infrastructure.auth import decode_jwt


def test_decode_returns_header_payload_and_signature():
    token = jwt.encode({"nonce": "123", "iat": 1516239022}, "secret", algorithm="HS256")

    decoded = decode_jwt(token)

    assert decoded.header == {"alg": "HS256", "typ": "JWT"}
    assert decoded.payload == {"nonce": "123", "iat": 1516239022}
    assert decoded.signature == token.split(".")[2]


def test_decode_does_not_verify_signature():
    token = jwt.encode({"sub": "user"}, "secret", algorithm="HS256")
    assert decode_jwt(token).payload == {"sub": "user"}


def test_decode_ignores_expiry():
    token = jwt.encode({"nonce": "n", "exp": 1}, "secret", algorithm="HS256")
    assert decode_jwt(token).payload["nonce"] == "n"


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c", "a.b"])
def test_decode_malformed_token_raises(token):
    with pytest.raises(InvalidJwtError):
        decode_jwt(token)
