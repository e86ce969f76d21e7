"""
Record types returned by the grid store mappers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar, Union

from notebank.inline_tags import DEFAULT_PRIORITY

T = TypeVar("T")

KANBAN_COLUMNS = ("todo", "in-progress", "done", "close")


def _to_plain(value: Any) -> Any:
    return value.as_dict() if hasattr(value, "as_dict") else value


@dataclass
class Question:
    id: str
    no: int
    question: str
    answer: str
    image_urls: List[str] = field(default_factory=list)
    priority: str = DEFAULT_PRIORITY

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "no": str(self.no),
            "question": self.question,
            "answer": self.answer,
            "imageUrls": list(self.image_urls),
            "priority": self.priority,
        }


@dataclass
class QuestionInput:
    question: str
    answer: str = ""
    image_urls: List[str] = field(default_factory=list)
    priority: str = DEFAULT_PRIORITY


@dataclass
class PracticalTask:
    id: str
    no: int
    question: str
    answer: str
    example: str = ""
    priority: str = DEFAULT_PRIORITY

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "no": str(self.no),
            "question": self.question,
            "answer": self.answer,
            "example": self.example,
            "priority": self.priority,
        }


@dataclass
class PracticalTaskInput:
    question: str
    answer: str = ""
    example: str = ""
    priority: str = DEFAULT_PRIORITY


@dataclass
class Project:
    id: str
    no: int
    project: str
    project_id: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "no": str(self.no),
            "project": self.project,
            "projectId": self.project_id,
        }


@dataclass
class ProjectInput:
    project: str
    project_id: str = ""


@dataclass
class Tag:
    id: str
    no: int
    name: str

    def as_dict(self) -> dict:
        return {"id": self.id, "no": str(self.no), "name": self.name}


@dataclass
class TagInput:
    name: str


@dataclass
class WorkSummaryEntry:
    id: str
    no: int
    project_name: str
    work_summary: str
    date: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "no": str(self.no),
            "projectName": self.project_name,
            "workSummary": self.work_summary,
            "date": self.date,
        }


@dataclass
class WorkSummaryInput:
    project_name: str
    work_summary: str
    date: str


@dataclass
class KanbanTask:
    id: str
    title: str
    description: str = ""
    created_date: str = ""
    column_id: str = "todo"
    tags: Optional[List[str]] = None
    priority: str = DEFAULT_PRIORITY

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdDate": self.created_date,
            "columnId": self.column_id,
            "tags": list(self.tags) if self.tags is not None else None,
            "priority": self.priority,
        }


@dataclass
class KanbanTaskInput:
    title: str
    description: str = ""
    column_id: str = "todo"
    tags: Optional[List[str]] = None
    priority: str = DEFAULT_PRIORITY


@dataclass
class NotesTab:
    id: str
    name: str
    sheet_id: Optional[int] = None

    def as_dict(self) -> dict:
        payload: dict = {"id": self.id, "name": self.name}
        if self.sheet_id is not None:
            payload["sheetId"] = self.sheet_id
        return payload


@dataclass
class Note:
    """
    One note. Notes read from a tab sheet are single cells under a column
    heading; notes from the "All Notes" sheet are whole rows and also carry
    the tab id, title and descriptions.
    """

    id: str
    column_index: int
    column_letter: str
    heading: str
    content: str
    row_index: int
    image_urls: Optional[List[str]] = None
    tab_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    description2: Optional[str] = None
    description3: Optional[str] = None

    def as_dict(self) -> dict:
        payload: dict = {
            "id": self.id,
            "columnIndex": self.column_index,
            "columnLetter": self.column_letter,
            "heading": self.heading,
            "content": self.content,
            "rowIndex": self.row_index,
        }
        optional = {
            "imageUrls": list(self.image_urls) if self.image_urls else None,
            "tabId": self.tab_id,
            "title": self.title,
            "description": self.description,
            "description2": self.description2,
            "description3": self.description3,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


@dataclass
class Technology:
    id: str
    name: str
    sheet_id: int

    def as_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "sheetId": self.sheet_id}


@dataclass
class OperationResult:
    success: bool
    error: Optional[str] = None

    def as_dict(self) -> dict:
        payload: dict = {"success": self.success}
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class RecordList(Generic[T]):
    """A full, unpaginated list of records in storage order."""

    items: List[T] = field(default_factory=list)

    def as_dict(self) -> list:
        return [_to_plain(item) for item in self.items]


@dataclass
class Page(Generic[T]):
    """One page of records plus the totals the UI needs."""

    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def empty(cls, page: int, limit: int) -> "Page[T]":
        return cls(data=[], total=0, page=page, limit=limit, total_pages=0)

    @classmethod
    def slice(cls, records: List[T], page: int, limit: int) -> "Page[T]":
        start = (page - 1) * limit
        return cls(
            data=records[start : start + limit],
            total=len(records),
            page=page,
            limit=limit,
            total_pages=math.ceil(len(records) / limit),
        )

    def as_dict(self) -> dict:
        return {
            "data": [_to_plain(item) for item in self.data],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


ListResult = Union[RecordList[T], Page[T]]
