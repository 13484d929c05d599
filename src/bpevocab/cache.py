"""Caller-owned cache of loaded vocabularies keyed by encoding name."""

import logging
import threading
from pathlib import Path
from typing import Final

import regex as re

from .exceptions import EncodingNameError
from .vocab import Vocab

log = logging.getLogger(__name__)

RANK_FILE_SUFFIX: Final[str] = ".tiktoken"
_ENCODING_NAME: Final = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


class VocabCache:
    """
    Loads rank files from ``cache_dir`` on first use and keeps them in memory.

    Each encoding name maps to ``<cache_dir>/<name>.tiktoken``. Nothing is
    downloaded; the directory must already hold the files. The cache is an
    ordinary object, so separate instances never share state.

    .. code-block:: python

        with VocabCache("~/.cache/vocab") as cache:
            vocab = cache.get("cl100k_base")
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir).expanduser()
        self._vocabs: dict[str, Vocab] = {}
        # guards _vocabs and _load_locks only, never held during a load
        self._lock = threading.Lock()
        # one lock per name so concurrent misses build one store
        self._load_locks: dict[str, threading.Lock] = {}

    def path_for(self, name: str) -> Path:
        """
        Return the rank file path for an encoding name.

        :raises EncodingNameError: If ``name`` is not a plain file name stem.
        """
        if not _ENCODING_NAME.fullmatch(name):
            raise EncodingNameError(
                "invalid encoding name",
                invalid_name=name,
                available=self.list_encodings(),
            )
        return self.cache_dir / f"{name}{RANK_FILE_SUFFIX}"

    def get(self, name: str) -> Vocab:
        """
        Return the vocabulary for ``name``, loading it on a miss.

        :raises EncodingNameError: If ``name`` is invalid.
        :raises VocabNotFoundError: If no rank file exists for ``name``.
        """
        path = self.path_for(name)
        with self._lock:
            vocab = self._vocabs.get(name)
            if vocab is not None:
                log.debug(f"cache hit for {name!r}")
                return vocab
            load_lock = self._load_locks.setdefault(name, threading.Lock())

        with load_lock:
            # another thread may have loaded it while we waited
            with self._lock:
                vocab = self._vocabs.get(name)
            if vocab is not None:
                log.debug(f"cache hit for {name!r} after waiting on load")
                return vocab

            log.debug(f"cache miss for {name!r}")
            vocab = Vocab.from_file(path)
            with self._lock:
                self._vocabs[name] = vocab
            return vocab

    def list_encodings(self) -> list[str]:
        """Return encoding names with a rank file in ``cache_dir``."""
        if not self.cache_dir.is_dir():
            return []
        return sorted(
            p.stem
            for p in self.cache_dir.glob(f"*{RANK_FILE_SUFFIX}")
            if p.is_file() and _ENCODING_NAME.fullmatch(p.stem)
        )

    def loaded(self) -> list[str]:
        """Return names currently held in memory."""
        with self._lock:
            return sorted(self._vocabs)

    def evict(self, name: str) -> bool:
        """Drop one cached vocabulary. Returns whether it was cached."""
        with self._lock:
            return self._vocabs.pop(name, None) is not None

    def clear(self) -> None:
        with self._lock:
            n = len(self._vocabs)
            self._vocabs.clear()
        log.debug(f"cleared {n} cached vocabularies")

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._vocabs

    def __len__(self) -> int:
        with self._lock:
            return len(self._vocabs)

    def __enter__(self) -> "VocabCache":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()


__all__ = ["VocabCache", "RANK_FILE_SUFFIX"]
