"""
Helpers for splitting long text values across spreadsheet cells.

Google Sheets caps a single cell at 50,000 characters. Records whose text
fields can exceed that are stored as a repeating group of columns: one
column per field, repeated for as many chunks as the longest field needs.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from notebank.errors import InvalidArgument

CELL_CHAR_LIMIT = 50000


def chunk(text: str, max_len: int = CELL_CHAR_LIMIT) -> List[str]:
    """Split text into pieces of at most max_len characters. Empty text has no chunks."""
    if max_len < 1:
        raise InvalidArgument(f"Chunk size must be at least 1, got {max_len}")
    if not text:
        return []
    return [text[i : i + max_len] for i in range(0, len(text), max_len)]


def dechunk(cells: Iterable[Optional[object]]) -> str:
    return "".join("" if cell is None else str(cell) for cell in cells)


def build_chunk_group(
    fields: Sequence[str], max_len: int = CELL_CHAR_LIMIT
) -> List[str]:
    """
    Interleave the chunks of each field into one flat list of cells.

    For fields (a, b, c) the result is [a0, b0, c0, a1, b1, c1, ...]; shorter
    fields are padded with empty strings within each group.
    """
    chunked = [chunk(value or "", max_len) for value in fields]
    group_count = max((len(parts) for parts in chunked), default=0)
    cells: List[str] = []
    for i in range(group_count):
        for parts in chunked:
            cells.append(parts[i] if i < len(parts) else "")
    return cells


def split_chunk_group(cells: Sequence[Optional[object]], width: int) -> List[str]:
    """Reassemble the fields of an interleaved group of the given width."""
    if width < 1:
        raise InvalidArgument(f"Chunk group width must be at least 1, got {width}")
    return [dechunk(cells[offset::width]) for offset in range(width)]


def column_letter(index: int) -> str:
    """Convert a 0-based column index to A1 letters (0 -> A, 25 -> Z, 26 -> AA)."""
    if index < 0:
        raise InvalidArgument(f"Column index must be non-negative, got {index}")
    letters = ""
    num = index
    while num >= 0:
        letters = chr(65 + num % 26) + letters
        num = num // 26 - 1
    return letters


def column_index(letters: str) -> int:
    """Inverse of column_letter."""
    if not letters or not letters.isalpha():
        raise InvalidArgument(f"Invalid column letters: {letters!r}")
    value = 0
    for char in letters.upper():
        value = value * 26 + (ord(char) - 64)
    return value - 1
