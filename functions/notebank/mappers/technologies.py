"""
Technology catalog: the sheets of the question-bank and practical-task
spreadsheets, one per technology.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from notebank.accessor import SheetAccessor
from notebank.errors import NotConfigured, RemoteFailure, StoreError
from notebank.records import OperationResult, Technology

logger = logging.getLogger(__name__)

LAST_SHEET_ERROR = "Cannot delete the last sheet. A spreadsheet must have at least one sheet."


class TableCatalog:
    def __init__(self, accessor: SheetAccessor, headers: Sequence[str], id_prefix: str = "tech"):
        self.accessor = accessor
        self.headers = tuple(headers)
        self.id_prefix = id_prefix

    def list(self) -> List[Technology]:
        return [
            Technology(id=f"{self.id_prefix}-{sheet.sheet_id}", name=sheet.title, sheet_id=sheet.sheet_id)
            for sheet in self.accessor.list_tables()
        ]

    def create(self, name: str) -> bool:
        name = (name or "").strip()
        if not name:
            logger.warning("Refusing to create a table with an empty name")
            return False
        try:
            if self.accessor.find_table(name) is not None:
                logger.warning("Table %s already exists in %s", name, self.accessor.label)
                return False
            self.accessor.ensure_table(name, self.headers)
        except NotConfigured:
            raise
        except StoreError:
            logger.exception("Failed to create table %s in %s", name, self.accessor.label)
            return False
        return True

    def rename(self, sheet_id: int, new_name: str) -> bool:
        new_name = (new_name or "").strip()
        if not new_name:
            return False
        try:
            self.accessor.rename_table(sheet_id, new_name)
        except NotConfigured:
            raise
        except StoreError:
            logger.exception("Failed to rename sheet %s in %s", sheet_id, self.accessor.label)
            return False
        return True

    def delete(self, sheet_id: int) -> OperationResult:
        try:
            if len(self.accessor.list_tables()) <= 1:
                return OperationResult(success=False, error=LAST_SHEET_ERROR)
            self.accessor.delete_table(sheet_id)
        except NotConfigured:
            raise
        except RemoteFailure as exc:
            logger.exception("Failed to delete sheet %s in %s", sheet_id, self.accessor.label)
            if "remove all the sheets" in exc.message:
                return OperationResult(success=False, error=LAST_SHEET_ERROR)
            return OperationResult(success=False, error=exc.message)
        except StoreError as exc:
            logger.exception("Failed to delete sheet %s in %s", sheet_id, self.accessor.label)
            return OperationResult(success=False, error=exc.message)
        return OperationResult(success=True)

    def reorder(self, sheet_ids: Sequence[int]) -> bool:
        try:
            self.accessor.reorder_tables(list(sheet_ids))
        except NotConfigured:
            raise
        except StoreError:
            logger.exception("Failed to reorder sheets in %s", self.accessor.label)
            return False
        return True
