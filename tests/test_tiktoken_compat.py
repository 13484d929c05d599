"""Integration tests handing a loaded vocabulary to tiktoken."""

import base64
import io

import pytest

tiktoken = pytest.importorskip("tiktoken")

from bpevocab import Vocab, VocabIntegrityError  # noqa: E402
from bpevocab.tiktoken_compat import to_encoding  # noqa: E402

PAT_STR = r"\S+|\s+"


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def vocab():
    """Return a byte-complete vocabulary with merges building up ``hello``."""
    ranks = {bytes([b]): b for b in range(256)}
    ranks.update({b"he": 256, b"ll": 257, b"hell": 258, b"hello": 259})
    data = b"".join(
        base64.b64encode(tok) + b" " + str(rank).encode() + b"\n"
        for tok, rank in ranks.items()
    )
    return Vocab.from_stream(io.BytesIO(data))


# Encoding
# ---------------------------------------------------------------------------


def test_encode_uses_vocab_ranks(vocab):
    """tiktoken merges according to the loaded ranks."""
    enc = to_encoding(vocab, "toy", pat_str=PAT_STR)
    assert enc.name == "toy"
    assert enc.encode("hello world") == [259, 32, 119, 111, 114, 108, 100]


def test_decode_uses_get_token_bytes(vocab):
    """Decoded ids match the store's token bytes."""
    enc = to_encoding(vocab, "toy", pat_str=PAT_STR)
    ids = enc.encode("hello hello")
    assert enc.decode(ids) == "hello hello"
    assert b"".join(vocab.get_token(i) for i in ids) == b"hello hello"


def test_special_tokens(vocab):
    """Special tokens above the vocabulary ranks are passed through."""
    enc = to_encoding(
        vocab, "toy", pat_str=PAT_STR, special_tokens={"<|endoftext|>": 1000}
    )
    assert enc.encode("hello<|endoftext|>", allowed_special="all") == [259, 1000]


def test_special_token_rank_clash(vocab):
    """Special token ids may not reuse a vocabulary rank."""
    with pytest.raises(VocabIntegrityError, match="overlap with vocabulary ranks"):
        to_encoding(vocab, "toy", pat_str=PAT_STR, special_tokens={"<|endoftext|>": 259})
