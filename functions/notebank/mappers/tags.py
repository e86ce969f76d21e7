"""
Kanban tags. The table always carries a default "Daily" tag.
"""

from __future__ import annotations

import logging
from typing import List

from notebank.accessor import physical_row
from notebank.errors import NotConfigured, StoreError
from notebank.mappers.base import ChunkedTableMapper
from notebank.records import Tag, TagInput

logger = logging.getLogger(__name__)

TAGS_SHEET = "Tags"
DEFAULT_TAG = "Daily"


class TagMapper(ChunkedTableMapper):
    headers = ("No", "Name")
    id_prefix = "tag"
    entity = "tag"

    def _encode(self, fields: TagInput) -> List[str]:
        return [(fields.name or "").strip()]

    def _decode(self, record_id: str, ordinal: int, values: List[str]) -> Tag:
        return Tag(id=record_id, no=ordinal, name=values[0])

    def ensure_tags_table(self) -> None:
        """Create the Tags sheet and the default tag if either is missing."""
        sheet = self.accessor.ensure_table(TAGS_SHEET, self.headers)
        tags = self.read_all(sheet.title)
        if any(tag.name.strip().lower() == DEFAULT_TAG.lower() for tag in tags):
            return
        logger.info("Adding default %s tag to %s", DEFAULT_TAG, self.accessor.label)
        count = self.accessor.count_rows(sheet.title)
        row = self._build_row(count + 1, TagInput(name=DEFAULT_TAG))
        self.accessor.write_range(sheet.title, physical_row(count), [row])

    def _ensure_defaults(self) -> None:
        try:
            self.ensure_tags_table()
        except NotConfigured:
            raise
        except StoreError:
            logger.warning("Could not ensure default tags in %s", self.accessor.label, exc_info=True)

    def get_tags(self) -> List[Tag]:
        self._ensure_defaults()
        return self.list(TAGS_SHEET).items

    def add_tag(self, fields: TagInput) -> bool:
        if not (fields.name or "").strip():
            logger.warning("Refusing to add a tag with an empty name")
            return False
        self._ensure_defaults()
        return self.add(TAGS_SHEET, fields)

    def update_tag(self, index: int, fields: TagInput) -> bool:
        return self.update(TAGS_SHEET, index, fields)

    def delete_tag(self, index: int) -> bool:
        return self.delete(TAGS_SHEET, index)

    def reorder_tags(self, old_index: int, new_index: int) -> bool:
        return self.reorder(TAGS_SHEET, old_index, new_index)
