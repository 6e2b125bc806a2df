"""JWT decoding for ID tokens received from identity providers.

Tokens are decoded without verifying the signature: only claims such as
``nonce`` are read, and the token came directly from the provider.
"""

from dataclasses import dataclass
from typing import Any

import jwt

from mds_core.domain.exceptions import InvalidJwtError


@dataclass(frozen=True)
class DecodedJwt:
    header: dict[str, Any]
    payload: dict[str, Any]
    signature: str


def decode_jwt(token: str) -> DecodedJwt:
    """Split a compact JWT into its decoded header, payload and raw signature.

    Raises:
        InvalidJwtError: If the token is not a well-formed JWT.
    """
    if not isinstance(token, str) or token.count(".") != 2:
        raise InvalidJwtError("Token is not a JWT: expected three dot-separated parts")
    try:
        header = jwt.get_unverified_header(token)
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise InvalidJwtError(f"Token could not be decoded: {e}") from e
    return DecodedJwt(header=header, payload=payload, signature=token.rsplit(".", 1)[1])
