"""
Kanban board stored on the "Board" sheet.

Unlike the other tables, column A holds the task id rather than an ordinal
and the columns are fixed, so there is no chunking and no renumbering.
Errors are raised rather than folded into booleans.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from notebank.accessor import SheetAccessor, SheetInfo, grid_index, physical_row
from notebank.cell_chunks import CELL_CHAR_LIMIT, column_letter
from notebank.errors import InvalidArgument, NotFound
from notebank.inline_tags import DEFAULT_PRIORITY, PRIORITIES, normalize_priority
from notebank.records import KANBAN_COLUMNS, KanbanTask, KanbanTaskInput

logger = logging.getLogger(__name__)

BOARD_SHEET = "Board"
BOARD_HEADERS = ("ID", "Title", "Description", "CreatedDate", "ColumnId", "Tags", "Priority")
_LAST_COLUMN = column_letter(len(BOARD_HEADERS) - 1)
_MIN_CELLS = 4


def _parse_tags(value: str) -> Optional[List[str]]:
    tags = [tag.strip() for tag in (value or "").split(",") if tag.strip()]
    return tags or None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class KanbanBoard:
    def __init__(self, accessor: SheetAccessor, max_len: int = CELL_CHAR_LIMIT):
        self.accessor = accessor
        self.max_len = max_len

    def _sheet(self) -> SheetInfo:
        return self.accessor.ensure_table(BOARD_SHEET, BOARD_HEADERS)

    def _to_row(self, task: KanbanTask) -> List[str]:
        if task.column_id not in KANBAN_COLUMNS:
            raise InvalidArgument(f"Unknown kanban column {task.column_id!r}")
        if task.priority not in PRIORITIES:
            raise InvalidArgument(f"Unknown priority {task.priority!r}")
        row = [
            task.id,
            task.title or "",
            task.description or "",
            task.created_date,
            task.column_id,
            ",".join(task.tags) if task.tags else "",
            task.priority,
        ]
        for header, value in zip(BOARD_HEADERS, row):
            if len(value) > self.max_len:
                raise InvalidArgument(
                    f"Kanban {header} is {len(value)} characters, the cell limit is {self.max_len}"
                )
        return row

    @staticmethod
    def _from_row(row: Sequence[str]) -> KanbanTask:
        cells = list(row) + [""] * (len(BOARD_HEADERS) - len(row))
        return KanbanTask(
            id=cells[0],
            title=cells[1],
            description=cells[2],
            created_date=cells[3] or _now(),
            column_id=cells[4] or "todo",
            tags=_parse_tags(cells[5]),
            priority=normalize_priority(cells[6]),
        )

    def _read(self) -> Tuple[SheetInfo, List[KanbanTask]]:
        sheet = self._sheet()
        rows = self.accessor.read_range(sheet.title, "A2", _LAST_COLUMN)
        # Rows with fewer than four cells are partial writes or stray notes.
        return sheet, [self._from_row(row) for row in rows if len(row) >= _MIN_CELLS]

    def list_tasks(self) -> List[KanbanTask]:
        return self._read()[1]

    def get_tasks(self) -> Dict[str, List[KanbanTask]]:
        grouped: Dict[str, List[KanbanTask]] = {column: [] for column in KANBAN_COLUMNS}
        for task in self.list_tasks():
            if task.column_id in grouped:
                grouped[task.column_id].append(task)
            else:
                logger.warning("Skipping kanban task %s in unknown column %s", task.id, task.column_id)
        return grouped

    def save_tasks(self, tasks: Sequence[KanbanTask]) -> bool:
        """Replace the whole board with ``tasks`` in the given order."""
        rows = [self._to_row(task) for task in tasks]
        sheet = self._sheet()
        self.accessor.clear_range(sheet.title, "A2", _LAST_COLUMN)
        self.accessor.write_range(sheet.title, physical_row(0), rows)
        logger.info("Saved %d kanban tasks", len(rows))
        return True

    def add_task(self, fields: KanbanTaskInput) -> KanbanTask:
        task = KanbanTask(
            id=uuid.uuid4().hex,
            title=fields.title,
            description=fields.description or "",
            created_date=_now(),
            column_id=fields.column_id or "todo",
            tags=list(fields.tags) if fields.tags else None,
            priority=fields.priority or DEFAULT_PRIORITY,
        )
        row = self._to_row(task)
        sheet = self._sheet()
        self.accessor.append_row(sheet.title, row)
        return task

    def _locate(self, task_id: str) -> Tuple[SheetInfo, int]:
        sheet = self._sheet()
        ids = self.accessor.read_range(sheet.title, "A2", "A")
        for index, row in enumerate(ids):
            if row and row[0] == task_id:
                return sheet, index
        raise NotFound(f"Kanban task {task_id!r} not found")

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> bool:
        """
        Apply ``changes`` (title, description, column_id, tags, priority) to
        one task. Returns False when no task has that id.
        """
        unknown = set(changes) - {"title", "description", "column_id", "tags", "priority"}
        if unknown:
            raise InvalidArgument(f"Cannot update kanban fields: {', '.join(sorted(unknown))}")
        try:
            sheet, index = self._locate(task_id)
        except NotFound:
            logger.warning("Kanban task %s not found for update", task_id)
            return False
        row_number = physical_row(index)
        current = self._from_row(self.accessor.read_row(sheet.title, row_number))
        updated = dataclasses.replace(current, **changes)
        self.accessor.write_range(sheet.title, row_number, [self._to_row(updated)])
        return True

    def delete_task(self, task_id: str) -> bool:
        try:
            sheet, index = self._locate(task_id)
        except NotFound:
            logger.warning("Kanban task %s not found for delete", task_id)
            return False
        start = grid_index(index)
        self.accessor.delete_rows(sheet.sheet_id, start, start + 1)
        self.accessor.invalidate()
        return True
