"""bpevocab: rank-file vocabulary store for byte-level BPE tokenizers."""

from . import bytekey
from .cache import RANK_FILE_SUFFIX, VocabCache
from .exceptions import (
    BpeVocabError,
    DuplicateRankError,
    DuplicateTokenError,
    EncodingNameError,
    InvalidTokenError,
    RankFileParseError,
    RankNotFoundError,
    TokenNotFoundError,
    VocabIntegrityError,
    VocabLoadError,
    VocabLookupError,
    VocabNotFoundError,
)
from .vocab import Vocab

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bpevocab")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Vocab",
    "VocabCache",
    "RANK_FILE_SUFFIX",
    "bytekey",
    "BpeVocabError",
    "VocabLoadError",
    "VocabNotFoundError",
    "RankFileParseError",
    "VocabIntegrityError",
    "DuplicateRankError",
    "DuplicateTokenError",
    "InvalidTokenError",
    "VocabLookupError",
    "TokenNotFoundError",
    "RankNotFoundError",
    "EncodingNameError",
]
