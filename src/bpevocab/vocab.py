"""
Vocabulary store for byte-level BPE rank files.

A rank file holds one record per line, ``<base64 token> <decimal rank>``, for
example ``aGVsbG8= 100``. Loading builds the token -> rank map first and derives
the rank -> token map from it afterwards, so uniqueness of ranks is checked with
a single size comparison instead of inside the insertion loop.
"""

import base64
import binascii
import logging
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Final, IO

import regex as re

from . import bytekey
from ._decorators import log_elapsed
from .exceptions import (
    DuplicateRankError,
    DuplicateTokenError,
    InvalidTokenError,
    RankFileParseError,
    RankNotFoundError,
    TokenNotFoundError,
    VocabIntegrityError,
    VocabLoadError,
    VocabNotFoundError,
)
from .types import ByteKey, Rank, RankMap, Token, TokenBytes

log = logging.getLogger(__name__)

SEPARATOR: Final[bytes] = b" "
_STANDARD_B64: Final = re.compile(rb"[A-Za-z0-9+/]*={0,2}")
_URLSAFE_B64: Final = re.compile(rb"[A-Za-z0-9_-]*={0,2}")
_DECIMAL: Final = re.compile(rb"[0-9]+")


def _segment_text(segment: bytes) -> str:
    return segment.decode("ascii", errors="backslashreplace")


def _decode_token(segment: bytes, line_no: int) -> TokenBytes:
    """Decode a standard or URL-safe base64 token segment."""
    try:
        if _STANDARD_B64.fullmatch(segment):
            token = base64.b64decode(segment, validate=True)
        elif _URLSAFE_B64.fullmatch(segment):
            token = base64.urlsafe_b64decode(segment)
        else:
            raise RankFileParseError(
                "token is not base64",
                line_no=line_no,
                segment=_segment_text(segment),
            )
    except binascii.Error as e:
        raise RankFileParseError(
            f"could not decode token: {e}",
            line_no=line_no,
            segment=_segment_text(segment),
        ) from e

    if not token:
        raise RankFileParseError(
            "token decodes to an empty byte sequence",
            line_no=line_no,
            segment=_segment_text(segment),
        )
    return token


def _parse_rank(segment: bytes, line_no: int) -> Rank:
    """Parse a decimal rank; signs, whitespace and underscores are rejected."""
    if not _DECIMAL.fullmatch(segment):
        raise RankFileParseError(
            "rank is not a non-negative decimal integer",
            line_no=line_no,
            segment=_segment_text(segment),
        )
    return int(segment)


class Vocab:
    """
    Immutable bidirectional index between token bytes and ranks.

    Build one with :meth:`from_file` or :meth:`from_stream`, or directly from a
    mapping of tokens to ranks. Once built there is no mutation API, so a
    single instance can be shared by any number of threads.

    .. code-block:: python

        vocab = Vocab.from_file("cl100k_base.tiktoken")
        vocab.try_get_rank(b"hello")  # -> int | None
        vocab.get_token(15339)  # -> b"hello"
    """

    def __init__(self, ranks: Mapping[Token, Rank]) -> None:
        """
        Build a vocabulary from a token -> rank mapping.

        :raises InvalidTokenError: If a token is empty or not made of byte values.
        :raises VocabIntegrityError: If a rank is not a non-negative int, two keys
                                     pack to the same token bytes, or two tokens
                                     share a rank.
        """
        token_to_rank: RankMap = {}
        for token, rank in ranks.items():
            if isinstance(rank, bool) or not isinstance(rank, int) or rank < 0:
                raise VocabIntegrityError(
                    f"rank must be a non-negative int (got {rank!r})"
                )
            token_to_rank[self._key(token)] = rank

        # e.g. b"a" and [97] given as separate keys
        if len(token_to_rank) != len(ranks):
            raise DuplicateTokenError(
                "token given more than once",
                n_duplicates=len(ranks) - len(token_to_rank),
            )
        self._index(token_to_rank)

    @classmethod
    def _from_rank_map(cls, token_to_rank: RankMap) -> "Vocab":
        """Index an already validated map without re-packing every key."""
        vocab = cls.__new__(cls)
        vocab._index(token_to_rank)
        return vocab

    def _index(self, token_to_rank: RankMap) -> None:
        rank_to_token = {rank: token for token, rank in token_to_rank.items()}

        if len(rank_to_token) != len(token_to_rank):
            counts = Counter(token_to_rank.values())
            shared = sorted(rank for rank, n in counts.items() if n > 1)
            raise DuplicateRankError("distinct tokens share a rank", ranks=shared)

        self._token_to_rank: RankMap = token_to_rank
        self._rank_to_token: dict[Rank, TokenBytes] = rank_to_token

    # Construction
    # ===================================================================================

    @classmethod
    def from_file(cls, path: str | Path) -> "Vocab":
        """
        Load a vocabulary from a rank file on disk.

        The file handle is closed on every exit path.

        :param path: Path to the rank file.
        :raises VocabNotFoundError: If the file does not exist.
        :raises VocabLoadError: If the file cannot be opened or read.
        :raises RankFileParseError: If a record is malformed.
        :raises VocabIntegrityError: If tokens or ranks repeat.
        """
        path = Path(path)

        try:
            f = path.open("rb")
        except FileNotFoundError as e:
            raise VocabNotFoundError("rank file does not exist", path=str(path)) from e
        except OSError as e:
            raise VocabLoadError("could not open rank file", path=str(path)) from e

        log.info(f"loading rank file from {path}")
        with f:
            vocab = cls.from_stream(f)

        log.info(f"rank file loaded successfully: {len(vocab)} tokens from {path}")
        return vocab

    @classmethod
    @log_elapsed("rank file parse")
    def from_stream(cls, source: IO[bytes] | IO[str] | Iterable[bytes]) -> "Vocab":
        """
        Parse a rank file from an open stream.

        Seekable streams are rewound first, so the caller's cursor position does
        not matter. Blank lines are skipped but still counted for line numbers.

        :param source: Binary stream, or any iterable of lines. Text lines must be ASCII.
        :raises VocabLoadError: If reading from the stream fails.
        :raises RankFileParseError: If a record is malformed.
        :raises VocabIntegrityError: If tokens or ranks repeat.
        """
        seekable = getattr(source, "seekable", None)
        try:
            if seekable is not None and seekable():
                log.debug("rewinding rank stream")
                source.seek(0)
        # closed streams raise ValueError
        except (OSError, ValueError) as e:
            raise VocabLoadError("could not rewind rank stream") from e

        token_to_rank: RankMap = {}
        n_records = 0
        n_blank = 0
        line_no = 0

        try:
            for line_no, line in enumerate(source, start=1):
                if isinstance(line, str):
                    try:
                        line = line.encode("ascii")
                    except UnicodeEncodeError as e:
                        raise RankFileParseError(
                            "record is not ascii", line_no=line_no, segment=line
                        ) from e

                record = line.rstrip(b"\r\n")
                if not record:
                    n_blank += 1
                    continue

                # split on the first space only
                encoded_tok, sep, rank_seg = record.partition(SEPARATOR)
                if not sep:
                    raise RankFileParseError(
                        "record must be '<base64 token> <rank>'",
                        line_no=line_no,
                        segment=_segment_text(record),
                    )

                token = _decode_token(encoded_tok, line_no)
                token_to_rank[token] = _parse_rank(rank_seg, line_no)
                n_records += 1
        except UnicodeDecodeError as e:
            # text streams decode ahead in chunks, so the bad byte is at or after this line
            raise RankFileParseError(
                f"stream is not decodable at or after this line: {e.reason}",
                line_no=line_no + 1,
            ) from e
        except OSError as e:
            raise VocabLoadError("failed to read rank stream") from e

        if n_blank:
            log.warning(f"skipped {n_blank} blank lines in rank file")

        if len(token_to_rank) != n_records:
            raise DuplicateTokenError(
                "token appears on more than one line",
                n_duplicates=n_records - len(token_to_rank),
            )

        log.debug(f"parsed {n_records} rank records")
        return cls._from_rank_map(token_to_rank)

    # Queries
    # ===================================================================================

    @staticmethod
    def _key(token: Token | str) -> ByteKey:
        if isinstance(token, str):
            return bytekey.encode(bytekey.decode(token))
        return bytekey.encode(token)

    def try_get_rank(self, token: Token | str) -> Rank | None:
        """
        Return the rank of ``token``, or None when it is not in the vocabulary.

        ``str`` pieces are looked up by their UTF-8 bytes.

        :raises InvalidTokenError: If ``token`` is empty or not made of byte values.
        """
        # fast path for the merge loop
        if type(token) is bytes and token:
            return self._token_to_rank.get(token)
        return self._token_to_rank.get(self._key(token))

    def get_rank(self, token: Token | str) -> Rank:
        """
        Return the rank of ``token``.

        :raises TokenNotFoundError: If the token is not in the vocabulary.
        :raises InvalidTokenError: If ``token`` is empty or not made of byte values.
        """
        key = self._key(token)
        try:
            return self._token_to_rank[key]
        except KeyError:
            raise TokenNotFoundError("no rank for token", token=key) from None

    def get_token(self, rank: Rank) -> TokenBytes:
        """
        Return the token bytes assigned to ``rank``.

        :raises RankNotFoundError: If no token has this rank.
        """
        if isinstance(rank, bool) or not isinstance(rank, int):
            raise RankNotFoundError("rank must be an int", rank=rank)
        try:
            return self._rank_to_token[rank]
        except KeyError:
            raise RankNotFoundError("no token for rank", rank=rank) from None

    def has_rank(self, rank: Rank) -> bool:
        if isinstance(rank, bool) or not isinstance(rank, int):
            return False
        return rank in self._rank_to_token

    def count(self) -> int:
        """Return the number of distinct (token, rank) entries."""
        return len(self._token_to_rank)

    @property
    def max_rank(self) -> Rank | None:
        """Highest rank in the vocabulary, None when empty."""
        return max(self._rank_to_token, default=None)

    def items(self) -> Iterator[tuple[TokenBytes, Rank]]:
        """Yield ``(token, rank)`` pairs in ascending rank order."""
        for rank in sorted(self._rank_to_token):
            yield self._rank_to_token[rank], rank

    def mergeable_ranks(self) -> RankMap:
        """Return a fresh ``bytes -> rank`` dict, the shape tiktoken consumes."""
        return dict(self._token_to_rank)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, token: object) -> bool:
        try:
            return self._key(token) in self._token_to_rank
        except InvalidTokenError:
            return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)}, max_rank={self.max_rank})"


__all__ = ["Vocab", "SEPARATOR"]
