"""
Hand a loaded vocabulary to tiktoken for encoding and decoding.

tiktoken is an optional dependency (``pip install bpevocab[tiktoken]``); this
module is not imported by the package itself.
"""

import logging

import tiktoken

from .exceptions import VocabIntegrityError
from .vocab import Vocab

log = logging.getLogger(__name__)


def to_encoding(
    vocab: Vocab,
    name: str,
    *,
    pat_str: str,
    special_tokens: dict[str, int] | None = None,
) -> tiktoken.Encoding:
    """
    Build a ``tiktoken.Encoding`` over the ranks of ``vocab``.

    :param vocab: Loaded vocabulary; every single byte a text may contain must
                  be present for tiktoken to encode it.
    :param name: Encoding name reported by tiktoken.
    :param pat_str: Pre-tokenization regex used by tiktoken to split text.
    :param special_tokens: Special token string -> id, ids disjoint from ranks.
    :raises VocabIntegrityError: If a special token id is also a vocabulary rank.

    .. code-block:: python

        enc = to_encoding(vocab, "cl100k_base", pat_str=CL100K_PATTERN)
        enc.encode("hello world")
    """
    special_tokens = dict(special_tokens or {})

    clashes = sorted(seq for seq, tok in special_tokens.items() if vocab.has_rank(tok))
    if clashes:
        raise VocabIntegrityError(
            f"special token ids overlap with vocabulary ranks (found: {', '.join(clashes)})"
        )

    log.debug(
        f"building tiktoken encoding {name!r}: {len(vocab)} ranks, {len(special_tokens)} special tokens"
    )
    return tiktoken.Encoding(
        name,
        pat_str=pat_str,
        mergeable_ranks=vocab.mergeable_ranks(),
        special_tokens=special_tokens,
    )


__all__ = ["to_encoding"]
