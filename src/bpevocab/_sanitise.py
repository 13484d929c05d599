"""
Printable rendering of raw token bytes for diagnostics.
"""

import unicodedata


def render_token(token: bytes) -> str:
    """
    Render token bytes as a quoted, printable string.

    Tokens are frequently partial UTF-8 sequences, so invalid bytes become the
    replacement character. Control, format and unassigned characters are shown
    as ``\\uXXXX`` escapes so one token always renders on one line.
    """
    text = bytes(token).decode("utf-8", errors="replace")
    return repr(
        "".join(
            f"\\u{ord(c):04x}" if unicodedata.category(c).startswith("C") else c
            for c in text
        )
    )
