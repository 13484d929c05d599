"""
Core types for the vocabulary store.
"""

from collections.abc import Sequence
from typing import TypeAlias

Rank: TypeAlias = int
TokenBytes: TypeAlias = bytes
ByteKey: TypeAlias = bytes
Token: TypeAlias = bytes | bytearray | memoryview | Sequence[int]
RankMap: TypeAlias = dict[TokenBytes, Rank]
