"""
Read-only notes stored in the notes spreadsheet.

The "Tabs" sheet lists note tabs (ID, Tab Name). Each tab is its own sheet
whose row 1 holds column headings and whose cells below are the notes. The
"All Notes" sheet keeps one note per row with its tab id.

Like the kanban board, failures are raised rather than folded into booleans.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from notebank.accessor import HEADER_ROW, LAST_COLUMN, SheetAccessor
from notebank.cell_chunks import column_letter
from notebank.records import Note, NotesTab

logger = logging.getLogger(__name__)

TABS_SHEET = "Tabs"
ALL_NOTES_SHEET = "All Notes"
TABS_HEADERS = ("ID", "Tab Name")
ALL_NOTES_HEADERS = ("ID", "Title", "Description1", "Description2", "Description3")

IMAGE_START = "|||IMAGE_START|||"
IMAGE_END = "|||IMAGE_END|||"
IMAGE_SEPARATOR = "|||"


def _cell(row: List[str], column: int) -> str:
    return str(row[column]).strip() if column < len(row) else ""


def split_note_images(content: str) -> Tuple[str, List[str]]:
    """Split ``text|||IMAGE_START|||url|||url|||IMAGE_END|||`` into text and urls."""
    start = content.find(IMAGE_START)
    end = content.find(IMAGE_END)
    if start < 0 or end < 0:
        return content, []
    section = content[start + len(IMAGE_START):end]
    urls = [url for url in section.split(IMAGE_SEPARATOR) if url]
    return content[:start].strip(), urls


class NotesStore:
    def __init__(self, accessor: SheetAccessor):
        self.accessor = accessor

    def get_tabs(self) -> List[NotesTab]:
        """Tabs listed on the Tabs sheet, joined to their sheet ids by title."""
        sheet = self.accessor.ensure_table(TABS_SHEET, TABS_HEADERS)
        rows = self.accessor.read_range(sheet.title, "A2", column_letter(len(TABS_HEADERS) - 1))
        sheet_ids = {
            table.title.lower(): table.sheet_id for table in self.accessor.list_tables()
        }
        tabs = []
        for row in rows:
            tab_id, name = _cell(row, 0), _cell(row, 1)
            if not tab_id or not name:
                continue
            tabs.append(NotesTab(id=tab_id, name=name, sheet_id=sheet_ids.get(name.lower())))
        return tabs

    def get_all_notes(self) -> List[Note]:
        sheet = self.accessor.ensure_table(ALL_NOTES_SHEET, ALL_NOTES_HEADERS)
        rows = self.accessor.read_range(
            sheet.title, "A2", column_letter(len(ALL_NOTES_HEADERS) - 1)
        )
        notes = []
        for index, row in enumerate(rows):
            tab_id, title = _cell(row, 0), _cell(row, 1)
            if not tab_id or not title:
                continue
            description = _cell(row, 2)
            notes.append(
                Note(
                    id=f"note-{index + 1}",
                    column_index=0,
                    column_letter="A",
                    heading=title,
                    content=description,
                    row_index=index,
                    tab_id=tab_id,
                    title=title,
                    description=description,
                    description2=_cell(row, 3),
                    description3=_cell(row, 4),
                )
            )
        return notes

    def _read_tab(self, tab_name: str) -> List[List[str]]:
        sheet = self.accessor.resolve_table(tab_name)
        return self.accessor.read_range(sheet.title, f"A{HEADER_ROW}", LAST_COLUMN)

    def get_tab_headings(self, tab_name: str) -> List[str]:
        sheet = self.accessor.resolve_table(tab_name)
        row = self.accessor.read_row(sheet.title, HEADER_ROW)
        return [str(value) for value in row]

    @staticmethod
    def _notes_from_rows(rows: List[List[str]]) -> List[Note]:
        if not rows:
            return []
        headings = rows[0]
        notes = []
        # Column by column, top to bottom.
        for column, heading in enumerate(headings):
            letter = column_letter(column)
            for index, row in enumerate(rows[1:]):
                content = str(row[column]) if column < len(row) else ""
                if not content.strip():
                    continue
                text, urls = split_note_images(content)
                notes.append(
                    Note(
                        id=f"{column}-{index + 1}",
                        column_index=column,
                        column_letter=letter,
                        heading=str(heading),
                        content=text,
                        row_index=index,
                        image_urls=urls or None,
                    )
                )
        return notes

    def get_notes_by_tab(self, tab_name: str) -> List[Note]:
        return self._notes_from_rows(self._read_tab(tab_name))

    def get_notes_by_column(self, tab_name: str) -> Dict[str, List[Note]]:
        """Notes keyed by column letter. Every headed column is present, even when empty."""
        rows = self._read_tab(tab_name)
        grouped: Dict[str, List[Note]] = {}
        headings = rows[0] if rows else []
        for column, heading in enumerate(headings):
            if str(heading).strip():
                grouped[column_letter(column)] = []
        for note in self._notes_from_rows(rows):
            grouped.setdefault(note.column_letter, []).append(note)
        logger.debug("Read %d note columns from %s", len(grouped), tab_name)
        return grouped

