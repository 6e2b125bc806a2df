from .jwt_decoder import DecodedJwt, decode_jwt

__all__ = [
    "DecodedJwt",
    "decode_jwt",
]
