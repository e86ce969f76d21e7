"""
Sheet-level access for one spreadsheet: table lookup, values and row structure.

Row numbering conventions used throughout the store:

* Physical row 1 is always the header; data starts at physical row 2.
* Value operations (A1 ranges) take 1-based physical row numbers.
* Structural operations (insert/delete/move) take 0-based grid indices, the
  way the batchUpdate API does, so logical record index ``i`` is physical
  row ``i + 2`` and grid index ``i + 1``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from notebank.cell_chunks import column_letter
from notebank.errors import NotConfigured, NotFound, RemoteFailure
from notebank.grid import GridClient, a1_range
from notebank.sheet_cache import SheetMetadataCache

logger = logging.getLogger(__name__)

HEADER_ROW = 1
FIRST_DATA_ROW = 2
LAST_COLUMN = "ZZ"


def physical_row(index: int) -> int:
    """Physical (1-based) row number of the record at a 0-based index."""
    return index + FIRST_DATA_ROW


def grid_index(index: int) -> int:
    """0-based grid row index of the record at a 0-based index."""
    return index + FIRST_DATA_ROW - 1


@dataclass(frozen=True)
class SheetInfo:
    title: str
    sheet_id: int
    index: int = 0
    row_count: int = 0
    column_count: int = 0

    @classmethod
    def from_properties(cls, props: dict) -> "SheetInfo":
        grid = props.get("gridProperties", {})
        return cls(
            title=props.get("title", ""),
            sheet_id=props.get("sheetId", 0),
            index=props.get("index", 0),
            row_count=grid.get("rowCount", 0),
            column_count=grid.get("columnCount", 0),
        )


def _normalize_title(value: str) -> str:
    return (value or "").strip().lower()


def _cell_value(value: Any) -> dict:
    if isinstance(value, bool):
        return {"userEnteredValue": {"boolValue": value}}
    if isinstance(value, (int, float)):
        return {"userEnteredValue": {"numberValue": value}}
    return {"userEnteredValue": {"stringValue": "" if value is None else str(value)}}


class SheetAccessor:
    """
    Grid operations bound to a single spreadsheet.

    Sheet metadata is read through the shared SheetMetadataCache; every call
    that changes sheet structure invalidates this spreadsheet's entry.
    """

    def __init__(
        self,
        grid: GridClient,
        cache: SheetMetadataCache,
        spreadsheet_id: Optional[str],
        label: str = "spreadsheet",
    ):
        self.grid = grid
        self.cache = cache
        self.spreadsheet_id = spreadsheet_id
        self.label = label

    @property
    def configured_id(self) -> str:
        if not self.spreadsheet_id or not self.spreadsheet_id.strip():
            raise NotConfigured(f"{self.label} spreadsheet id is not configured")
        return self.spreadsheet_id

    # Sheet metadata ---------------------------------------------------------

    def list_tables(self) -> List[SheetInfo]:
        spreadsheet_id = self.configured_id
        return self.cache.get_or_populate(spreadsheet_id, self._fetch_tables)

    def _fetch_tables(self) -> List[SheetInfo]:
        response = self.grid.get_spreadsheet(self.configured_id)
        return [
            SheetInfo.from_properties(sheet.get("properties", {}))
            for sheet in response.get("sheets", [])
        ]

    def invalidate(self) -> None:
        self.cache.invalidate(self.configured_id)

    def find_table(self, name: str) -> Optional[SheetInfo]:
        wanted = _normalize_title(name)
        for sheet in self.list_tables():
            if _normalize_title(sheet.title) == wanted:
                return sheet
        return None

    def resolve_table(self, name: str) -> SheetInfo:
        sheet = self.find_table(name)
        if sheet is None:
            raise NotFound(f"Table {name!r} does not exist in the {self.label} spreadsheet")
        return sheet

    def ensure_table(self, name: str, headers: Sequence[str]) -> SheetInfo:
        """Create the table if it is missing and write its header row if empty."""
        sheet = self.find_table(name)
        if sheet is None:
            sheet = self.create_table(name)
        if headers:
            self._ensure_header_row(sheet.title, headers)
        return sheet

    def _ensure_header_row(self, title: str, headers: Sequence[str]) -> None:
        end = f"{column_letter(len(headers) - 1)}{HEADER_ROW}"
        range_ref = a1_range(title, f"A{HEADER_ROW}", end)
        existing = self.grid.get_values(self.configured_id, range_ref)
        if existing and any(existing[0]):
            return
        logger.info("Writing header row for %s in %s", title, self.label)
        self.grid.update_values(self.configured_id, range_ref, [list(headers)])

    def create_table(self, name: str, index: Optional[int] = None) -> SheetInfo:
        properties: dict = {"title": name}
        if index is not None:
            properties["index"] = index
        logger.info("Creating sheet %s in %s", name, self.label)
        try:
            response = self.grid.batch_update(
                self.configured_id, [{"addSheet": {"properties": properties}}]
            )
        except RemoteFailure as exc:
            if "already exists" not in exc.message:
                raise
            # Another caller created it after our sheet list was read.
            logger.info("Sheet %s already exists in %s, reloading sheets", name, self.label)
            self.invalidate()
            sheet = self.find_table(name)
            if sheet is None:
                raise
            return sheet
        self.invalidate()
        replies = response.get("replies") or [{}]
        created = replies[0].get("addSheet", {}).get("properties")
        if created:
            return SheetInfo.from_properties(created)
        return self.resolve_table(name)

    def rename_table(self, sheet_id: int, title: str) -> None:
        self.grid.batch_update(
            self.configured_id,
            [
                {
                    "updateSheetProperties": {
                        "properties": {"sheetId": sheet_id, "title": title},
                        "fields": "title",
                    }
                }
            ],
        )
        self.invalidate()

    def delete_table(self, sheet_id: int) -> None:
        self.grid.batch_update(
            self.configured_id, [{"deleteSheet": {"sheetId": sheet_id}}]
        )
        self.invalidate()

    def reorder_tables(self, sheet_ids: Sequence[int]) -> None:
        """Place the given sheets at positions 0..n-1 in one batch request."""
        if not sheet_ids:
            return
        requests = [
            {
                "updateSheetProperties": {
                    "properties": {"sheetId": sheet_id, "index": index},
                    "fields": "index",
                }
            }
            for index, sheet_id in enumerate(sheet_ids)
        ]
        self.grid.batch_update(self.configured_id, requests)
        self.invalidate()

    # Values -----------------------------------------------------------------

    def read_range(self, title: str, start: str, end: Optional[str] = None) -> List[List[str]]:
        return self.grid.get_values(self.configured_id, a1_range(title, start, end))

    def read_rows(self, title: str, first_row: int = FIRST_DATA_ROW) -> List[List[str]]:
        """All rows from first_row to the end of the data."""
        return self.read_range(title, f"A{first_row}", LAST_COLUMN)

    def read_row(self, title: str, row: int) -> List[str]:
        values = self.read_range(title, f"A{row}", f"{LAST_COLUMN}{row}")
        return values[0] if values else []

    def count_rows(self, title: str) -> int:
        """Number of data rows, judged by column A."""
        return len(self.read_range(title, f"A{FIRST_DATA_ROW}", "A"))

    def write_range(
        self, title: str, start_row: int, rows: List[List[Any]], start_col: int = 0
    ) -> None:
        if not rows:
            return
        width = max(len(row) for row in rows) or 1
        start = f"{column_letter(start_col)}{start_row}"
        end = f"{column_letter(start_col + width - 1)}{start_row + len(rows) - 1}"
        self.grid.update_values(self.configured_id, a1_range(title, start, end), rows)

    def append_row(self, title: str, values: List[Any]) -> None:
        self.grid.append_values(
            self.configured_id, a1_range(title, f"A{HEADER_ROW}"), [values]
        )

    def clear_range(self, title: str, start: str, end: Optional[str] = None) -> None:
        self.grid.clear_values(self.configured_id, a1_range(title, start, end))

    # Row structure ------------------------------------------------------------

    def insert_rows(
        self,
        sheet_id: int,
        at: int,
        count: int = 1,
        values: Optional[List[List[Any]]] = None,
    ) -> None:
        """Insert empty rows at grid index ``at``, optionally filling them in the same batch."""
        requests: List[dict] = [
            {
                "insertDimension": {
                    "range": {
                        "sheetId": sheet_id,
                        "dimension": "ROWS",
                        "startIndex": at,
                        "endIndex": at + count,
                    },
                    "inheritFromBefore": False,
                }
            }
        ]
        if values:
            width = max(len(row) for row in values)
            requests.append(
                {
                    "updateCells": {
                        "range": {
                            "sheetId": sheet_id,
                            "startRowIndex": at,
                            "endRowIndex": at + len(values),
                            "startColumnIndex": 0,
                            "endColumnIndex": width,
                        },
                        "rows": [
                            {"values": [_cell_value(value) for value in row]}
                            for row in values
                        ],
                        "fields": "userEnteredValue",
                    }
                }
            )
        self.grid.batch_update(self.configured_id, requests)

    def delete_rows(self, sheet_id: int, start: int, end: int) -> None:
        self.grid.batch_update(
            self.configured_id,
            [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": start,
                            "endIndex": end,
                        }
                    }
                }
            ],
        )

    def move_rows(self, sheet_id: int, start: int, end: int, destination: int) -> None:
        """Move grid rows [start, end) so they begin at ``destination`` (pre-move coordinates)."""
        self.grid.batch_update(
            self.configured_id,
            [
                {
                    "moveDimension": {
                        "source": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": start,
                            "endIndex": end,
                        },
                        "destinationIndex": destination,
                    }
                }
            ],
        )
