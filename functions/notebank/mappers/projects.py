"""
Project list kept on the work-summary spreadsheet.
"""

from __future__ import annotations

from typing import List

from notebank.mappers.base import ChunkedTableMapper
from notebank.records import Project, ProjectInput

PROJECT_LIST_SHEET = "Project List"


class ProjectMapper(ChunkedTableMapper):
    headers = ("No", "Project", "ProjectId")
    id_prefix = "project"
    entity = "project"

    def _encode(self, fields: ProjectInput) -> List[str]:
        return [fields.project or "", fields.project_id or ""]

    def _decode(self, record_id: str, ordinal: int, values: List[str]) -> Project:
        return Project(id=record_id, no=ordinal, project=values[0], project_id=values[1])

    def get_projects(self) -> List[Project]:
        return self.list(PROJECT_LIST_SHEET).items

    def add_project(self, fields: ProjectInput) -> bool:
        return self.add(PROJECT_LIST_SHEET, fields)

    def update_project(self, index: int, fields: ProjectInput) -> bool:
        return self.update(PROJECT_LIST_SHEET, index, fields)

    def delete_project(self, index: int) -> bool:
        return self.delete(PROJECT_LIST_SHEET, index)

    def reorder_projects(self, old_index: int, new_index: int) -> bool:
        return self.reorder(PROJECT_LIST_SHEET, old_index, new_index)
