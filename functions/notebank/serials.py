"""
Rewrites the "No." column so ordinals stay a dense 1..N sequence.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from notebank.accessor import FIRST_DATA_ROW, SheetAccessor

logger = logging.getLogger(__name__)


def renumber(
    accessor: SheetAccessor,
    title: str,
    count: int,
    start_row: int = FIRST_DATA_ROW,
    first_ordinal: int = 1,
) -> None:
    """
    Write ordinals first_ordinal.. into column A for ``count`` rows from start_row.

    Needed after deletes and moves. Appends and in-place updates already write
    the right ordinal.
    """
    if count <= 0:
        return
    values = [[first_ordinal + offset] for offset in range(count)]
    accessor.write_range(title, start_row, values)
    logger.debug(
        "Renumbered %s rows %d-%d in %s",
        title,
        start_row,
        start_row + count - 1,
        accessor.label,
    )


def renumber_table(accessor: SheetAccessor, title: str) -> int:
    """Renumber every data row of a table. Returns the number of rows written."""
    sheet = accessor.resolve_table(title)
    count = accessor.count_rows(sheet.title)
    renumber(accessor, sheet.title, count)
    return count


def renumber_tables(
    accessor: SheetAccessor, titles: Optional[Sequence[str]] = None
) -> Dict[str, int]:
    """
    Renumber the given tables, or every table in the spreadsheet.

    Used to repair ordinals left stale by an interrupted insert or delete.
    """
    if titles is None:
        titles = [sheet.title for sheet in accessor.list_tables()]
    repaired: Dict[str, int] = {}
    for title in titles:
        repaired[title] = renumber_table(accessor, title)
        logger.info("Renumbered %d rows in %s", repaired[title], title)
    return repaired
