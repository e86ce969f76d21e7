import unittest

from notebank.accessor import SheetAccessor
from notebank.grid import InMemoryGridClient
from notebank.mappers.projects import PROJECT_LIST_SHEET, ProjectMapper
from notebank.records import ProjectInput
from notebank.sheet_cache import SheetMetadataCache

SID = "work"


class ProjectMapperTests(unittest.TestCase):
    def setUp(self):
        self.grid = InMemoryGridClient()
        self.mapper = ProjectMapper(SheetAccessor(self.grid, SheetMetadataCache(), SID, "work summary"))

    def test_empty_before_first_project(self):
        self.assertEqual(self.mapper.get_projects(), [])

    def test_crud(self):
        self.assertTrue(self.mapper.add_project(ProjectInput(project="Alpha", project_id="A-1")))
        self.assertTrue(self.mapper.add_project(ProjectInput(project="Beta", project_id="B-2")))
        self.assertTrue(self.mapper.add_project(ProjectInput(project="Gamma")))
        self.assertTrue(self.mapper.update_project(1, ProjectInput(project="Beta 2", project_id="B-3")))
        self.assertTrue(self.mapper.reorder_projects(2, 0))
        self.assertTrue(self.mapper.delete_project(1))

        projects = self.mapper.get_projects()
        self.assertEqual([(p.no, p.project, p.project_id) for p in projects], [(1, "Gamma", ""), (2, "Beta 2", "B-3")])
        self.assertEqual(
            projects[1].as_dict(), {"id": "project-1", "no": "2", "project": "Beta 2", "projectId": "B-3"}
        )
        self.assertEqual(self.grid.sheet_rows(SID, PROJECT_LIST_SHEET)[0], ["No", "Project", "ProjectId"])


if __name__ == "__main__":
    unittest.main()
