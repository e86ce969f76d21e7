"""
Shared CRUD logic for tables stored as ``[No, <chunk group>...]`` rows.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from notebank.accessor import SheetAccessor, grid_index, physical_row
from notebank.cell_chunks import CELL_CHAR_LIMIT, build_chunk_group, split_chunk_group
from notebank.errors import NotConfigured, NotFound, StoreError
from notebank.records import ListResult, Page, RecordList
from notebank.serials import renumber

logger = logging.getLogger(__name__)


def parse_ordinal(value: Any, fallback: int) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return fallback


class ChunkedTableMapper:
    """
    Maps one record type onto a sheet whose rows are an ordinal followed by
    an interleaved chunk group of the record's text fields.

    Subclasses set ``headers`` (the first entry is the ordinal column) and
    implement ``_encode`` / ``_decode``.
    """

    headers: Tuple[str, ...] = ("No",)
    id_prefix = "row"
    entity = "record"

    def __init__(self, accessor: SheetAccessor, max_len: int = CELL_CHAR_LIMIT):
        self.accessor = accessor
        self.max_len = max_len

    @property
    def width(self) -> int:
        return len(self.headers) - 1

    def _encode(self, fields: Any) -> List[str]:
        raise NotImplementedError

    def _decode(self, record_id: str, ordinal: int, values: List[str]) -> Any:
        raise NotImplementedError

    def _build_row(self, ordinal: int, fields: Any) -> List[Any]:
        cells = build_chunk_group(self._encode(fields), self.max_len)
        return [ordinal] + cells

    def _decode_row(self, index: int, row: Sequence[Any]) -> Any:
        ordinal = parse_ordinal(row[0] if row else None, index + 1)
        values = split_chunk_group(list(row[1:]), self.width)
        return self._decode(f"{self.id_prefix}-{index}", ordinal, values)

    def _guard(self, action: str, table: str, call: Callable[[], bool]) -> bool:
        try:
            return call()
        except NotConfigured:
            raise
        except StoreError:
            logger.exception("Failed to %s %s in %s", action, self.entity, table)
            return False

    # Reads ------------------------------------------------------------------

    def read_all(self, table: str) -> List[Any]:
        sheet = self.accessor.resolve_table(table)
        rows = self.accessor.read_rows(sheet.title)
        return [self._decode_row(index, row) for index, row in enumerate(rows)]

    def list(
        self, table: str, page: Optional[int] = None, limit: Optional[int] = None
    ) -> ListResult:
        """
        Return every record in storage order, or one page of them when both
        ``page`` and ``limit`` are given. A table that does not exist yet
        reads as empty.
        """
        paginate = page is not None and limit is not None
        if paginate and (page < 1 or limit < 1):
            logger.warning("Invalid pagination page=%s limit=%s for %s", page, limit, table)
            return Page.empty(page, limit)
        try:
            records = self.read_all(table)
        except NotFound:
            logger.info("Table %s not found in %s, returning no %s records", table, self.accessor.label, self.entity)
            return Page.empty(page, limit) if paginate else RecordList()
        if paginate:
            return Page.slice(records, page, limit)
        return RecordList(records)

    # Writes -----------------------------------------------------------------

    def add(self, table: str, fields: Any) -> bool:
        return self._guard("add", table, lambda: self._add(table, fields))

    def _add(self, table: str, fields: Any) -> bool:
        sheet = self.accessor.ensure_table(table, self.headers)
        count = self.accessor.count_rows(sheet.title)
        row = self._build_row(count + 1, fields)
        self.accessor.write_range(sheet.title, physical_row(count), [row])
        return True

    def update(self, table: str, index: int, fields: Any) -> bool:
        return self._guard("update", table, lambda: self._update(table, index, fields))

    def _update(self, table: str, index: int, fields: Any) -> bool:
        sheet = self.accessor.resolve_table(table)
        if not self._in_range(sheet.title, index):
            return False
        row_number = physical_row(index)
        existing = self.accessor.read_row(sheet.title, row_number)
        row = self._build_row(index + 1, fields)
        # Blank out chunk columns left over from a longer previous value.
        if len(existing) > len(row):
            row.extend([""] * (len(existing) - len(row)))
        self.accessor.write_range(sheet.title, row_number, [row])
        return True

    def delete(self, table: str, index: int) -> bool:
        return self._guard("delete", table, lambda: self._delete(table, index))

    def _delete(self, table: str, index: int) -> bool:
        sheet = self.accessor.resolve_table(table)
        count = self.accessor.count_rows(sheet.title)
        if not 0 <= index < count:
            logger.warning("Refusing to delete %s %d from %s: %d rows", self.entity, index, table, count)
            return False
        start = grid_index(index)
        self.accessor.delete_rows(sheet.sheet_id, start, start + 1)
        renumber(self.accessor, sheet.title, count - 1)
        self.accessor.invalidate()
        return True

    def reorder(self, table: str, old_index: int, new_index: int) -> bool:
        if old_index == new_index:
            return True
        return self._guard(
            "reorder", table, lambda: self._reorder(table, old_index, new_index)
        )

    def _reorder(self, table: str, old_index: int, new_index: int) -> bool:
        sheet = self.accessor.resolve_table(table)
        count = self.accessor.count_rows(sheet.title)
        if not (0 <= old_index < count and 0 <= new_index < count):
            logger.warning(
                "Refusing to move %s %d to %d in %s: %d rows",
                self.entity,
                old_index,
                new_index,
                table,
                count,
            )
            return False
        start = grid_index(old_index)
        # Removing the row first shifts everything below it up by one.
        destination = new_index + 2 if new_index > old_index else new_index + 1
        self.accessor.move_rows(sheet.sheet_id, start, start + 1, destination)
        renumber(self.accessor, sheet.title, count)
        self.accessor.invalidate()
        return True

    def _in_range(self, title: str, index: int) -> bool:
        count = self.accessor.count_rows(title)
        if 0 <= index < count:
            return True
        logger.warning("Index %d out of range for %s (%d rows)", index, title, count)
        return False
