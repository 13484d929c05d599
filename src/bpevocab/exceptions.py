"""Custom exception hierarchy for bpevocab loading and lookup errors."""

from ._sanitise import render_token


class BpeVocabError(Exception):
    """Base exception for all bpevocab errors."""


class VocabLoadError(BpeVocabError, OSError):
    """Raised when a rank file cannot be opened or read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        extra = " "
        if path:
            extra += f"(path: {path}) "
        super().__init__(message + extra)
        self.path = path


class VocabNotFoundError(VocabLoadError, FileNotFoundError):
    """Raised when a rank file does not exist."""


class RankFileParseError(BpeVocabError, ValueError):
    """Raised when a rank file record is malformed."""

    def __init__(
        self,
        message: str,
        *,
        line_no: int,
        segment: str | bytes | None = None,
    ) -> None:
        """Initialize with the 1-based line number and offending segment appended to the message."""
        extra = f" (line: {line_no}) "
        if segment is not None:
            extra += f"(segment: {segment!r}) "
        super().__init__(message + extra)
        self.line_no = line_no
        self.segment = segment


class VocabIntegrityError(BpeVocabError, ValueError):
    """Raised when rank file records violate a vocabulary invariant."""


class DuplicateRankError(VocabIntegrityError):
    """Raised when distinct tokens share a rank."""

    def __init__(self, message: str, *, ranks: list[int] | None = None) -> None:
        extra = " "
        if ranks:
            extra += f"(ranks: {ranks}) "
        super().__init__(message + extra)
        self.ranks = ranks


class DuplicateTokenError(VocabIntegrityError):
    """Raised when the same token bytes appear on more than one line."""

    def __init__(self, message: str, *, n_duplicates: int) -> None:
        super().__init__(f"{message} (duplicates: {n_duplicates}) ")
        self.n_duplicates = n_duplicates


class InvalidTokenError(BpeVocabError, ValueError):
    """Raised when a token is empty or holds values outside 0-255."""

    def __init__(self, message: str, *, token: object = None) -> None:
        extra = " "
        if token is not None:
            extra += f"(token: {token!r}) "
        super().__init__(message + extra)
        self.token = token


class VocabLookupError(BpeVocabError, LookupError):
    """Raised when a query misses the vocabulary."""


class TokenNotFoundError(VocabLookupError):
    """Raised when a token has no rank."""

    def __init__(self, message: str, *, token: bytes) -> None:
        """Initialize with the byte values and a printable rendering appended to the message."""
        extra = f" (bytes: [{', '.join(str(b) for b in token)}]) (text: {render_token(token)}) "
        super().__init__(message + extra)
        self.token = token


class RankNotFoundError(VocabLookupError):
    """Raised when a rank has no token."""

    def __init__(self, message: str, *, rank: int) -> None:
        super().__init__(f"{message} (rank: {rank}) ")
        self.rank = rank


class EncodingNameError(BpeVocabError, ValueError):
    """Raised when a cache is asked for an unusable encoding name."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name is not None:
            extra += f"(available: {available}) (got {invalid_name!r}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available
