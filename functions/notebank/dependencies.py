"""
Dependency wiring for callers of the record store.
"""

from __future__ import annotations

import logging
from typing import Optional

from notebank.accessor import SheetAccessor
from notebank.config import get_settings
from notebank.grid import GoogleSheetsGridClient, GridClient, InMemoryGridClient
from notebank.mappers.kanban import KanbanBoard
from notebank.mappers.notes import NotesStore
from notebank.mappers.practical_tasks import PracticalTaskMapper
from notebank.mappers.projects import ProjectMapper
from notebank.mappers.questions import QuestionMapper
from notebank.mappers.tags import TagMapper
from notebank.mappers.technologies import TableCatalog
from notebank.mappers.work_summary import WorkSummaryMapper
from notebank.sheet_cache import SheetMetadataCache

logger = logging.getLogger(__name__)

_grid_client: GridClient | None = None
_sheet_cache: SheetMetadataCache | None = None


def get_grid_client() -> GridClient:
    """
    Return a singleton grid client. Without credentials (or with in-memory
    backends requested) data lives in process memory only.
    """
    global _grid_client
    if _grid_client:
        return _grid_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.has_google_credentials:
        if not settings.use_in_memory_backends:
            logger.warning("No Google service account configured, using in-memory sheets")
        _grid_client = InMemoryGridClient()
    else:
        _grid_client = GoogleSheetsGridClient(
            service_account_json=settings.google_service_account_json,
            service_account_file=settings.google_service_account_file,
        )
    return _grid_client


def get_sheet_cache() -> SheetMetadataCache:
    global _sheet_cache
    if _sheet_cache is None:
        _sheet_cache = SheetMetadataCache()
    return _sheet_cache


def get_accessor(spreadsheet_id: Optional[str], label: str = "spreadsheet") -> SheetAccessor:
    return SheetAccessor(get_grid_client(), get_sheet_cache(), spreadsheet_id, label)


def get_question_mapper() -> QuestionMapper:
    settings = get_settings()
    accessor = get_accessor(settings.question_bank_spreadsheet_id, "question bank")
    return QuestionMapper(accessor, settings.cell_char_limit)


def get_practical_task_mapper() -> PracticalTaskMapper:
    settings = get_settings()
    accessor = get_accessor(settings.practical_tasks_spreadsheet_id, "practical tasks")
    return PracticalTaskMapper(accessor, settings.cell_char_limit)


def get_project_mapper() -> ProjectMapper:
    settings = get_settings()
    accessor = get_accessor(settings.work_summary_spreadsheet_id, "work summary")
    return ProjectMapper(accessor, settings.cell_char_limit)


def get_work_summary_mapper() -> WorkSummaryMapper:
    settings = get_settings()
    accessor = get_accessor(settings.work_summary_spreadsheet_id, "work summary")
    return WorkSummaryMapper(accessor, settings.cell_char_limit)


def get_tag_mapper() -> TagMapper:
    settings = get_settings()
    accessor = get_accessor(settings.resolved_tags_spreadsheet_id, "tags")
    return TagMapper(accessor, settings.cell_char_limit)


def get_kanban_board() -> KanbanBoard:
    settings = get_settings()
    accessor = get_accessor(settings.kanban_board_spreadsheet_id, "kanban board")
    return KanbanBoard(accessor, settings.cell_char_limit)


def get_notes_store() -> NotesStore:
    settings = get_settings()
    return NotesStore(get_accessor(settings.notes_spreadsheet_id, "notes"))


def get_technology_catalog() -> TableCatalog:
    settings = get_settings()
    accessor = get_accessor(settings.question_bank_spreadsheet_id, "question bank")
    return TableCatalog(accessor, QuestionMapper.headers)


def get_practical_task_technology_catalog() -> TableCatalog:
    settings = get_settings()
    accessor = get_accessor(settings.practical_tasks_spreadsheet_id, "practical tasks")
    return TableCatalog(accessor, PracticalTaskMapper.headers)


def reset_dependencies() -> None:
    """Drop the singletons (tests and settings reloads)."""
    global _grid_client, _sheet_cache
    _grid_client = None
    _sheet_cache = None
    get_settings.cache_clear()
