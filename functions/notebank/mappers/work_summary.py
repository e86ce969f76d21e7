"""
Work log: one sheet per month ("January 2024"), rows kept in ascending date order.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from notebank.accessor import grid_index, physical_row
from notebank.cell_chunks import split_chunk_group
from notebank.errors import InvalidArgument, NotConfigured, StoreError
from notebank.formatting import (
    display_date,
    format_sheet_date,
    html_to_text,
    month_name_from_date,
    parse_month_name,
    parse_sheet_date,
)
from notebank.mappers.base import ChunkedTableMapper
from notebank.mappers.projects import PROJECT_LIST_SHEET
from notebank.records import WorkSummaryEntry, WorkSummaryInput
from notebank.serials import renumber

logger = logging.getLogger(__name__)

DEFAULT_SHEET = "Sheet1"
_NON_MONTH_SHEETS = {DEFAULT_SHEET.lower(), PROJECT_LIST_SHEET.lower()}


def find_insert_index(existing_dates: Sequence[object], new_date: date) -> int:
    """
    Index of the first row dated on or after ``new_date``.

    Blank or unparseable dates never stop the scan. With no later row the
    entry goes at the end.
    """
    for index, value in enumerate(existing_dates):
        parsed = parse_sheet_date(value)
        if parsed is None:
            continue
        if parsed >= new_date:
            return index
    return len(existing_dates)


class WorkSummaryMapper(ChunkedTableMapper):
    headers = ("No", "ProjectName", "WorkSummary", "Date")
    id_prefix = "ws"
    entity = "work summary entry"

    def _encode(self, fields: WorkSummaryInput) -> List[str]:
        return [
            fields.project_name or "",
            html_to_text(fields.work_summary or ""),
            format_sheet_date(fields.date),
        ]

    def _decode(self, record_id: str, ordinal: int, values: List[str]) -> WorkSummaryEntry:
        return WorkSummaryEntry(
            id=record_id,
            no=ordinal,
            project_name=values[0],
            work_summary=values[1],
            date=display_date(values[2]),
        )

    def _add(self, table: str, fields: WorkSummaryInput) -> bool:
        new_date = parse_sheet_date(fields.date)
        if new_date is None:
            raise InvalidArgument(f"Unrecognised work summary date {fields.date!r}")

        sheet = self.accessor.ensure_table(table, self.headers)
        rows = self.accessor.read_rows(sheet.title)
        dates = [self._date_cell(row) for row in rows]
        insert_index = find_insert_index(dates, new_date)

        row = self._build_row(insert_index + 1, fields)
        self.accessor.insert_rows(sheet.sheet_id, grid_index(insert_index), 1, [row])
        # Rows above the new one keep their ordinals.
        renumber(
            self.accessor,
            sheet.title,
            len(rows) - insert_index,
            start_row=physical_row(insert_index + 1),
            first_ordinal=insert_index + 2,
        )
        self.accessor.invalidate()
        logger.info("Inserted work summary entry for %s at row %d of %s", new_date, insert_index, sheet.title)
        return True

    def _date_cell(self, row: Sequence[object]) -> str:
        return split_chunk_group(list(row[1:]), self.width)[2]

    # Month sheets -------------------------------------------------------------

    @staticmethod
    def month_name(value: object) -> Optional[str]:
        return month_name_from_date(value)

    def list_months(self) -> List[str]:
        return [
            sheet.title
            for sheet in self.accessor.list_tables()
            if sheet.title.strip().lower() not in _NON_MONTH_SHEETS
        ]

    def create_month(self, name: str) -> bool:
        return self._guard("create month sheet", name, lambda: self._create_month(name))

    def _create_month(self, name: str) -> bool:
        self.accessor.ensure_table(name, self.headers)
        self._reorder_month_sheets()
        return True

    def _reorder_month_sheets(self) -> None:
        """Project List first, then months newest first, then everything else."""
        project_list = []
        months = []
        others = []
        for sheet in self.accessor.list_tables():
            if sheet.title.strip().lower() == PROJECT_LIST_SHEET.lower():
                project_list.append(sheet)
                continue
            month = parse_month_name(sheet.title)
            if month is None:
                others.append(sheet)
            else:
                months.append((month, sheet))
        months.sort(key=lambda item: item[0], reverse=True)
        ordered = project_list + [sheet for _, sheet in months] + others
        self.accessor.reorder_tables([sheet.sheet_id for sheet in ordered])

    def add_entry(self, fields: WorkSummaryInput) -> bool:
        """Add an entry to the month sheet its date belongs to, creating the sheet if needed."""
        month = self.month_name(fields.date)
        if month is None:
            logger.warning("Cannot pick a month sheet for date %r", fields.date)
            return False
        try:
            exists = self.accessor.find_table(month) is not None
        except NotConfigured:
            raise
        except StoreError:
            logger.exception("Failed to look up month sheet %s", month)
            return False
        if not exists and not self.create_month(month):
            return False
        return self.add(month, fields)
