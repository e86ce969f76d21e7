"""
Practical tasks: one sheet per technology, tagged with a priority like questions.
"""

from __future__ import annotations

import logging
from typing import List

from notebank import inline_tags
from notebank.errors import StoreError
from notebank.mappers.base import ChunkedTableMapper
from notebank.records import PracticalTask, PracticalTaskInput

logger = logging.getLogger(__name__)


class PracticalTaskMapper(ChunkedTableMapper):
    headers = ("No", "Question", "Answer", "Example")
    id_prefix = "pt"
    entity = "practical task"

    def add(self, table: str, fields: PracticalTaskInput) -> bool:
        """
        Append a task. Unlike the other mappers, failures are raised so the
        caller can report the reason.
        """
        try:
            return self._add(table, fields)
        except StoreError:
            logger.exception("Failed to add practical task to %s", table)
            raise

    def _encode(self, fields: PracticalTaskInput) -> List[str]:
        return [
            inline_tags.encode(fields.question or "", fields.priority),
            fields.answer or "",
            fields.example or "",
        ]

    def _decode(self, record_id: str, ordinal: int, values: List[str]) -> PracticalTask:
        question, priority = inline_tags.decode(values[0])
        return PracticalTask(
            id=record_id,
            no=ordinal,
            question=question,
            answer=values[1],
            example=values[2],
            priority=priority,
        )
