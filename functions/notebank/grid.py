"""
Transport abstraction for the Google Sheets API and an in-memory test double.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import google.auth
from google.auth import exceptions as auth_exceptions
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from notebank.cell_chunks import column_index
from notebank.errors import (
    NotConfigured,
    NotFound,
    RangeNotFound,
    RemoteFailure,
)

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
VALUE_INPUT_OPTION = "RAW"


class GridClient(Protocol):
    """The subset of the Sheets v4 API the record store relies on."""

    def get_spreadsheet(self, spreadsheet_id: str) -> dict:
        ...

    def get_values(self, spreadsheet_id: str, range_ref: str) -> List[List[str]]:
        ...

    def update_values(
        self, spreadsheet_id: str, range_ref: str, values: List[List[Any]]
    ) -> None:
        ...

    def append_values(
        self, spreadsheet_id: str, range_ref: str, values: List[List[Any]]
    ) -> None:
        ...

    def clear_values(self, spreadsheet_id: str, range_ref: str) -> None:
        ...

    def batch_update(self, spreadsheet_id: str, requests: List[dict]) -> dict:
        ...


def quote_title(title: str) -> str:
    return "'" + title.replace("'", "''") + "'"


def a1_range(title: str, start: str, end: Optional[str] = None) -> str:
    """Build ``'Title'!A2:ZZ`` style ranges."""
    cells = f"{start}:{end}" if end else start
    return f"{quote_title(title)}!{cells}"


_CELL_PATTERN = re.compile(r"^([A-Za-z]*)(\d*)$")


def parse_a1(range_ref: str) -> Tuple[str, int, int, Optional[int], Optional[int]]:
    """
    Parse an A1 range into (title, start_row, start_col, end_row, end_col).

    Rows and columns are 0-based; ends are exclusive and None means unbounded.
    """
    if "!" in range_ref:
        sheet_part, cells = range_ref.rsplit("!", 1)
    else:
        sheet_part, cells = range_ref, ""
    if len(sheet_part) >= 2 and sheet_part[0] == "'" and sheet_part[-1] == "'":
        title = sheet_part[1:-1].replace("''", "'")
    else:
        title = sheet_part
    if not cells:
        return title, 0, 0, None, None

    start_ref, _, end_ref = cells.partition(":")
    start_match = _CELL_PATTERN.match(start_ref)
    end_match = _CELL_PATTERN.match(end_ref) if end_ref else start_match
    if not start_match or not end_match:
        raise RangeNotFound(f"Unable to parse range: {range_ref}")

    start_letters, start_digits = start_match.groups()
    end_letters, end_digits = end_match.groups()
    start_col = column_index(start_letters) if start_letters else 0
    start_row = int(start_digits) - 1 if start_digits else 0
    end_col = column_index(end_letters) + 1 if end_letters else None
    end_row = int(end_digits) if end_digits else None
    return title, start_row, start_col, end_row, end_col


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _trim(cells: List[str]) -> List[str]:
    end = len(cells)
    while end and cells[end - 1] == "":
        end -= 1
    return cells[:end]


@dataclass
class _MemorySheet:
    sheet_id: int
    title: str
    rows: List[List[Any]] = field(default_factory=list)

    def ensure_size(self, row_count: int, col_count: int = 0) -> None:
        while len(self.rows) < row_count:
            self.rows.append([])
        for i in range(row_count):
            row = self.rows[i]
            if len(row) < col_count:
                row.extend([""] * (col_count - len(row)))

    def set_cell(self, row: int, col: int, value: Any) -> None:
        self.ensure_size(row + 1)
        cells = self.rows[row]
        if len(cells) <= col:
            cells.extend([""] * (col + 1 - len(cells)))
        cells[col] = value

    def last_filled_row(self) -> int:
        for i in range(len(self.rows) - 1, -1, -1):
            if any(_format_cell(cell) for cell in self.rows[i]):
                return i
        return -1


class InMemoryGridClient:
    """
    Test double that behaves like a small Google Sheets backend.

    Unknown spreadsheets are created on first use with a single "Sheet1" tab,
    values read back as formatted strings, and trailing empty cells and rows
    are trimmed the way the real API trims them.
    """

    def __init__(self):
        self.books: Dict[str, List[_MemorySheet]] = {}
        self.calls: List[Tuple[str, str]] = []
        self._next_sheet_id = 1000

    def add_sheet(self, spreadsheet_id: str, title: str, rows: Sequence[Sequence[Any]] = ()) -> int:
        """Seed a tab directly (test setup helper)."""
        sheets = self._book(spreadsheet_id)
        sheet = _MemorySheet(self._allocate_sheet_id(), title, [list(r) for r in rows])
        sheets.append(sheet)
        return sheet.sheet_id

    def sheet_rows(self, spreadsheet_id: str, title: str) -> List[List[str]]:
        """Formatted, trimmed contents of a tab including the header (test helper)."""
        sheet = self._sheet_by_title(spreadsheet_id, title, title)
        rows = [_trim([_format_cell(c) for c in row]) for row in sheet.rows]
        while rows and not rows[-1]:
            rows.pop()
        return rows

    def _allocate_sheet_id(self) -> int:
        self._next_sheet_id += 1
        return self._next_sheet_id

    def _book(self, spreadsheet_id: str) -> List[_MemorySheet]:
        if spreadsheet_id not in self.books:
            self.books[spreadsheet_id] = [_MemorySheet(0, "Sheet1")]
        return self.books[spreadsheet_id]

    def _sheet_by_title(self, spreadsheet_id: str, title: str, range_ref: str) -> _MemorySheet:
        for sheet in self._book(spreadsheet_id):
            if sheet.title.lower() == title.lower():
                return sheet
        raise RangeNotFound(f"Unable to parse range: {range_ref}")

    def _sheet_by_id(self, spreadsheet_id: str, sheet_id: int) -> _MemorySheet:
        for sheet in self._book(spreadsheet_id):
            if sheet.sheet_id == sheet_id:
                return sheet
        raise RemoteFailure(f"No grid with id: {sheet_id}", status=400)

    def get_spreadsheet(self, spreadsheet_id: str) -> dict:
        self.calls.append(("get_spreadsheet", spreadsheet_id))
        sheets = []
        for index, sheet in enumerate(self._book(spreadsheet_id)):
            width = max((len(row) for row in sheet.rows), default=0)
            sheets.append(
                {
                    "properties": {
                        "sheetId": sheet.sheet_id,
                        "title": sheet.title,
                        "index": index,
                        "gridProperties": {
                            "rowCount": max(1000, len(sheet.rows)),
                            "columnCount": max(26, width),
                        },
                    }
                }
            )
        return {"spreadsheetId": spreadsheet_id, "sheets": sheets}

    def get_values(self, spreadsheet_id: str, range_ref: str) -> List[List[str]]:
        self.calls.append(("get_values", range_ref))
        title, start_row, start_col, end_row, end_col = parse_a1(range_ref)
        sheet = self._sheet_by_title(spreadsheet_id, title, range_ref)
        values = [
            _trim([_format_cell(cell) for cell in row[start_col:end_col]])
            for row in sheet.rows[start_row:end_row]
        ]
        while values and not values[-1]:
            values.pop()
        return values

    def update_values(
        self, spreadsheet_id: str, range_ref: str, values: List[List[Any]]
    ) -> None:
        self.calls.append(("update_values", range_ref))
        title, start_row, start_col, _, _ = parse_a1(range_ref)
        sheet = self._sheet_by_title(spreadsheet_id, title, range_ref)
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                sheet.set_cell(start_row + r, start_col + c, value)

    def append_values(
        self, spreadsheet_id: str, range_ref: str, values: List[List[Any]]
    ) -> None:
        self.calls.append(("append_values", range_ref))
        title, _, start_col, _, _ = parse_a1(range_ref)
        sheet = self._sheet_by_title(spreadsheet_id, title, range_ref)
        first_row = sheet.last_filled_row() + 1
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                sheet.set_cell(first_row + r, start_col + c, value)

    def clear_values(self, spreadsheet_id: str, range_ref: str) -> None:
        self.calls.append(("clear_values", range_ref))
        title, start_row, start_col, end_row, end_col = parse_a1(range_ref)
        sheet = self._sheet_by_title(spreadsheet_id, title, range_ref)
        for row in sheet.rows[start_row:end_row]:
            stop = len(row) if end_col is None else min(end_col, len(row))
            for c in range(start_col, stop):
                row[c] = ""

    def batch_update(self, spreadsheet_id: str, requests: List[dict]) -> dict:
        self.calls.append(("batch_update", spreadsheet_id))
        replies = []
        for position, request in enumerate(requests):
            kind, body = next(iter(request.items()))
            handler = getattr(self, f"_apply_{kind}", None)
            if handler is None:
                raise RemoteFailure(
                    f"Invalid requests[{position}]: unsupported request {kind}", status=400
                )
            replies.append(handler(spreadsheet_id, body, position) or {})
        return {"spreadsheetId": spreadsheet_id, "replies": replies}

    def _apply_addSheet(self, spreadsheet_id: str, body: dict, position: int) -> dict:
        props = body.get("properties", {})
        title = props.get("title") or f"Sheet{len(self._book(spreadsheet_id)) + 1}"
        sheets = self._book(spreadsheet_id)
        if any(s.title.lower() == title.lower() for s in sheets):
            raise RemoteFailure(
                f'Invalid requests[{position}].addSheet: A sheet with the name "{title}" already exists.',
                status=400,
            )
        sheet = _MemorySheet(props.get("sheetId", self._allocate_sheet_id()), title)
        index = props.get("index", len(sheets))
        sheets.insert(index, sheet)
        return {
            "addSheet": {
                "properties": {
                    "sheetId": sheet.sheet_id,
                    "title": sheet.title,
                    "index": sheets.index(sheet),
                }
            }
        }

    def _apply_deleteSheet(self, spreadsheet_id: str, body: dict, position: int) -> None:
        sheets = self._book(spreadsheet_id)
        sheet = self._sheet_by_id(spreadsheet_id, body["sheetId"])
        if len(sheets) <= 1:
            raise RemoteFailure(
                f"Invalid requests[{position}].deleteSheet: You can't remove all the sheets in a document.",
                status=400,
            )
        sheets.remove(sheet)

    def _apply_updateSheetProperties(self, spreadsheet_id: str, body: dict, position: int) -> None:
        props = body["properties"]
        fields = {f.strip() for f in body.get("fields", "").split(",")}
        sheet = self._sheet_by_id(spreadsheet_id, props["sheetId"])
        if "title" in fields:
            sheet.title = props["title"]
        if "index" in fields:
            sheets = self._book(spreadsheet_id)
            sheets.remove(sheet)
            sheets.insert(min(props["index"], len(sheets)), sheet)

    def _rows_range(self, spreadsheet_id: str, dim_range: dict, position: int) -> Tuple[_MemorySheet, int, int]:
        if dim_range.get("dimension", "ROWS") != "ROWS":
            raise RemoteFailure(
                f"Invalid requests[{position}]: only ROWS dimension is supported", status=400
            )
        sheet = self._sheet_by_id(spreadsheet_id, dim_range["sheetId"])
        return sheet, dim_range["startIndex"], dim_range["endIndex"]

    def _apply_insertDimension(self, spreadsheet_id: str, body: dict, position: int) -> None:
        sheet, start, end = self._rows_range(spreadsheet_id, body["range"], position)
        sheet.ensure_size(start)
        sheet.rows[start:start] = [[] for _ in range(end - start)]

    def _apply_deleteDimension(self, spreadsheet_id: str, body: dict, position: int) -> None:
        sheet, start, end = self._rows_range(spreadsheet_id, body["range"], position)
        del sheet.rows[start:end]

    def _apply_moveDimension(self, spreadsheet_id: str, body: dict, position: int) -> None:
        sheet, start, end = self._rows_range(spreadsheet_id, body["source"], position)
        destination = body["destinationIndex"]
        sheet.ensure_size(max(end, destination))
        block = sheet.rows[start:end]
        del sheet.rows[start:end]
        # destinationIndex is expressed in coordinates from before the removal.
        target = destination - len(block) if destination > start else destination
        sheet.rows[target:target] = block

    def _apply_updateCells(self, spreadsheet_id: str, body: dict, position: int) -> None:
        grid_range = body["range"]
        sheet = self._sheet_by_id(spreadsheet_id, grid_range["sheetId"])
        row_start = grid_range.get("startRowIndex", 0)
        col_start = grid_range.get("startColumnIndex", 0)
        for r, row in enumerate(body.get("rows", [])):
            for c, cell in enumerate(row.get("values", [])):
                entered = cell.get("userEnteredValue", {})
                if "numberValue" in entered:
                    value = entered["numberValue"]
                    if isinstance(value, float) and value.is_integer():
                        value = int(value)
                elif "boolValue" in entered:
                    value = entered["boolValue"]
                else:
                    value = entered.get("stringValue", entered.get("formulaValue", ""))
                sheet.set_cell(row_start + r, col_start + c, value)


@dataclass
class GoogleSheetsGridClient:
    """
    Sheets v4 client backed by google-api-python-client.

    Credentials come from an inline service-account JSON string, a key file,
    or application default credentials, in that order.
    """

    service_account_json: Optional[str] = None
    service_account_file: Optional[str] = None
    service: Any = None

    def _get_service(self):
        if self.service is None:
            credentials = self._load_credentials()
            self.service = build(
                "sheets", "v4", credentials=credentials, cache_discovery=False
            )
        return self.service

    def _load_credentials(self):
        try:
            if self.service_account_json:
                info = json.loads(self.service_account_json)
                return service_account.Credentials.from_service_account_info(
                    info, scopes=SCOPES
                )
            if self.service_account_file:
                return service_account.Credentials.from_service_account_file(
                    self.service_account_file, scopes=SCOPES
                )
            credentials, _ = google.auth.default(scopes=SCOPES)
            return credentials
        except (ValueError, OSError, auth_exceptions.DefaultCredentialsError) as exc:
            raise NotConfigured(
                "Google service account credentials are missing or invalid", exc
            ) from exc

    def _execute(self, request, action: str):
        try:
            return request.execute()
        except HttpError as exc:
            raise _translate_http_error(exc, action) from exc
        except (auth_exceptions.GoogleAuthError, OSError) as exc:
            logger.warning("Sheets API %s failed: %s", action, exc)
            raise RemoteFailure(f"Sheets API {action} failed: {exc}", exc) from exc

    def get_spreadsheet(self, spreadsheet_id: str) -> dict:
        request = self._get_service().spreadsheets().get(
            spreadsheetId=spreadsheet_id, fields="spreadsheetId,sheets.properties"
        )
        return self._execute(request, "get_spreadsheet")

    def get_values(self, spreadsheet_id: str, range_ref: str) -> List[List[str]]:
        request = (
            self._get_service()
            .spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=range_ref)
        )
        response = self._execute(request, "get_values")
        return response.get("values", [])

    def update_values(
        self, spreadsheet_id: str, range_ref: str, values: List[List[Any]]
    ) -> None:
        request = (
            self._get_service()
            .spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=range_ref,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": values},
            )
        )
        self._execute(request, "update_values")

    def append_values(
        self, spreadsheet_id: str, range_ref: str, values: List[List[Any]]
    ) -> None:
        request = (
            self._get_service()
            .spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=range_ref,
                valueInputOption=VALUE_INPUT_OPTION,
                insertDataOption="INSERT_ROWS",
                body={"values": values},
            )
        )
        self._execute(request, "append_values")

    def clear_values(self, spreadsheet_id: str, range_ref: str) -> None:
        request = (
            self._get_service()
            .spreadsheets()
            .values()
            .clear(spreadsheetId=spreadsheet_id, range=range_ref, body={})
        )
        self._execute(request, "clear_values")

    def batch_update(self, spreadsheet_id: str, requests: List[dict]) -> dict:
        request = self._get_service().spreadsheets().batchUpdate(
            spreadsheetId=spreadsheet_id, body={"requests": requests}
        )
        return self._execute(request, "batch_update")


def _translate_http_error(exc: HttpError, action: str) -> Exception:
    status = getattr(exc.resp, "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None
    message = str(exc)
    logger.warning("Sheets API %s failed with status %s: %s", action, status, message)
    if status == 400 and "Unable to parse range" in message:
        return RangeNotFound(f"Sheets API {action}: range not found", exc)
    if status == 404:
        return NotFound(f"Sheets API {action}: spreadsheet not found", exc)
    return RemoteFailure(f"Sheets API {action} failed: {message}", exc, status=status)
