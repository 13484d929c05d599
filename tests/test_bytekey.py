"""Unit tests for the Byte-Key codec."""

import pytest

from bpevocab import InvalidTokenError, bytekey


def test_encode_is_deterministic():
    """Equal tokens in any form pack to the same key."""
    assert bytekey.encode([104, 105]) == bytekey.encode([104, 105])
    assert bytekey.encode([104, 105]) == bytekey.encode(b"hi")
    assert bytekey.encode(bytearray(b"hi")) == bytekey.encode(memoryview(b"hi"))


def test_encode_keys_are_hashable():
    """Keys are bytes and usable as dict keys."""
    key = bytekey.encode([0, 255])
    assert isinstance(key, bytes)
    assert {key: 1}[b"\x00\xff"] == 1


@pytest.mark.parametrize(
    ("a", "b"),
    [
        ([1, 23], [12, 3]),  # equal when joined as digits
        ([44], [44, 44]),  # 44 is ","
        ([32, 32], [32]),  # 32 is " "
        ([0], [0, 0]),
        ([255, 1], [1, 255]),
    ],
)
def test_distinct_tokens_never_collide(a, b):
    """Fixed-width packing keeps distinct tokens apart."""
    assert bytekey.encode(a) != bytekey.encode(b)


def test_all_single_bytes_distinct():
    """Every single-byte token has its own key."""
    keys = {bytekey.encode([b]) for b in range(256)}
    assert len(keys) == 256


@pytest.mark.parametrize("token", [b"", [], [256], [-1], [1.5], "hi", 7, None])
def test_encode_rejects_bad_shapes(token):
    """Empty tokens, non-byte values and non-sequences are rejected."""
    with pytest.raises(InvalidTokenError):
        bytekey.encode(token)


def test_decode_text():
    """Text splits into the byte values of its UTF-8 form."""
    assert bytekey.decode("hello") == [104, 101, 108, 108, 111]
    assert bytekey.decode("日") == [0xE6, 0x97, 0xA5]
    assert bytekey.decode(b"\x00\xff") == [0, 255]


def test_decode_then_encode_matches_utf8():
    """Decoded text packs to the same key as its UTF-8 bytes."""
    text = "café 👋"
    assert bytekey.encode(bytekey.decode(text)) == text.encode("utf-8")
