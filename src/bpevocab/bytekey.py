"""
Byte-Key codec: canonical hash keys for token byte sequences.

A token is a non-empty sequence of byte values. Its key packs every value into
exactly one byte of a ``bytes`` object. The packing is fixed width, so two
different tokens can never produce the same key and equal tokens always do.
"""

from collections.abc import Sequence

from .exceptions import InvalidTokenError
from .types import ByteKey, Token


def encode(token: Token) -> ByteKey:
    """
    Pack a token into its Byte-Key.

    :param token: Non-empty ``bytes``-like object or sequence of ints in 0-255.
    :return: Key usable in hash maps.
    :raises InvalidTokenError: If the token is empty, not a sequence of ints,
                               or holds values outside 0-255.
    """
    if isinstance(token, bytes):
        key = token
    elif isinstance(token, (bytearray, memoryview)):
        key = bytes(token)
    elif isinstance(token, Sequence) and not isinstance(token, str):
        try:
            key = bytes(token)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError(
                "token values must be ints in range 0-255", token=token
            ) from e
    else:
        raise InvalidTokenError("unsupported token type", token=token)

    if not key:
        raise InvalidTokenError("token must not be empty", token=token)
    return key


def decode(text: str | bytes) -> list[int]:
    """
    Split text into byte values, one per byte of its UTF-8 representation.

    ``bytes`` input is taken as already encoded.
    """
    if isinstance(text, str):
        text = text.encode("utf-8")
    return list(text)


__all__ = ["encode", "decode"]
