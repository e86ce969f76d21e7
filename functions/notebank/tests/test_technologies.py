import unittest

from notebank.accessor import SheetAccessor
from notebank.grid import InMemoryGridClient
from notebank.mappers.questions import QuestionMapper
from notebank.mappers.technologies import LAST_SHEET_ERROR, TableCatalog
from notebank.sheet_cache import SheetMetadataCache

SID = "questions"


class TableCatalogTests(unittest.TestCase):
    def setUp(self):
        self.grid = InMemoryGridClient()
        self.cache = SheetMetadataCache()
        self.catalog = TableCatalog(SheetAccessor(self.grid, self.cache, SID, "question bank"), QuestionMapper.headers)

    def _names(self):
        return [tech.name for tech in self.catalog.list()]

    def test_list_uses_sheet_ids(self):
        sheet_id = self.grid.add_sheet(SID, "React")
        techs = self.catalog.list()
        self.assertEqual(techs[1].id, f"tech-{sheet_id}")
        self.assertEqual(techs[1].as_dict(), {"id": f"tech-{sheet_id}", "name": "React", "sheetId": sheet_id})

    def test_create_writes_headers(self):
        self.assertTrue(self.catalog.create("Vue"))
        self.assertEqual(self._names(), ["Sheet1", "Vue"])
        self.assertEqual(self.grid.sheet_rows(SID, "Vue"), [list(QuestionMapper.headers)])

    def test_create_duplicate_or_blank(self):
        self.assertTrue(self.catalog.create("Vue"))
        self.assertFalse(self.catalog.create("vue"))
        self.assertFalse(self.catalog.create(" "))

    def test_rename(self):
        sheet_id = self.grid.add_sheet(SID, "React")
        self.catalog.list()
        self.assertTrue(self.catalog.rename(sheet_id, "React 19"))
        self.assertEqual(self._names(), ["Sheet1", "React 19"])
        self.assertFalse(self.catalog.rename(4242, "Nope"))

    def test_delete(self):
        sheet_id = self.grid.add_sheet(SID, "React")
        result = self.catalog.delete(sheet_id)
        self.assertTrue(result.success)
        self.assertEqual(result.as_dict(), {"success": True})
        self.assertEqual(self._names(), ["Sheet1"])

    def test_delete_last_sheet(self):
        result = self.catalog.delete(0)
        self.assertFalse(result.success)
        self.assertEqual(result.error, LAST_SHEET_ERROR)

    def test_delete_unknown_sheet(self):
        self.grid.add_sheet(SID, "React")
        result = self.catalog.delete(4242)
        self.assertFalse(result.success)
        self.assertIn("4242", result.error)

    def test_reorder(self):
        react = self.grid.add_sheet(SID, "React")
        vue = self.grid.add_sheet(SID, "Vue")
        self.assertTrue(self.catalog.reorder([vue, react, 0]))
        self.assertEqual(self._names(), ["Vue", "React", "Sheet1"])


if __name__ == "__main__":
    unittest.main()
