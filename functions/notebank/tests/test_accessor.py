import unittest
from unittest.mock import patch

from notebank.accessor import SheetAccessor, grid_index, physical_row
from notebank.errors import NotConfigured, NotFound, RemoteFailure
from notebank.grid import InMemoryGridClient
from notebank.sheet_cache import SheetMetadataCache

SID = "book"


class SheetAccessorTests(unittest.TestCase):
    def setUp(self):
        self.grid = InMemoryGridClient()
        self.cache = SheetMetadataCache()
        self.accessor = SheetAccessor(self.grid, self.cache, SID, "test")
        self.grid.add_sheet(SID, "React", [["No", "Question"], [1, "a"], [2, "b"]])

    def _calls(self, op):
        return [call for call in self.grid.calls if call[0] == op]

    def test_row_mapping(self):
        self.assertEqual(physical_row(0), 2)
        self.assertEqual(grid_index(0), 1)

    def test_resolve_is_case_insensitive_and_trimmed(self):
        sheet = self.accessor.resolve_table("  react ")
        self.assertEqual(sheet.title, "React")

    def test_resolve_missing_table(self):
        with self.assertRaises(NotFound):
            self.accessor.resolve_table("Vue")

    def test_missing_spreadsheet_id(self):
        accessor = SheetAccessor(self.grid, self.cache, " ", "test")
        with self.assertRaises(NotConfigured):
            accessor.list_tables()
        self.assertEqual(self.grid.calls, [])

    def test_sheet_list_is_cached(self):
        self.accessor.resolve_table("React")
        self.accessor.resolve_table("React")
        self.assertEqual(len(self._calls("get_spreadsheet")), 1)
        self.assertIn(SID, self.cache)

    def test_create_invalidates_cache(self):
        self.accessor.list_tables()
        self.accessor.create_table("Vue")
        self.assertNotIn(SID, self.cache)
        self.assertIsNotNone(self.accessor.find_table("vue"))

    def test_sheet_created_during_load_is_not_cached_stale(self):
        other = SheetAccessor(self.grid, self.cache, SID, "other")
        fetch = self.grid.get_spreadsheet

        def racing_fetch(spreadsheet_id):
            snapshot = fetch(spreadsheet_id)
            other.create_table("Vue")
            return snapshot

        with patch.object(self.grid, "get_spreadsheet", side_effect=racing_fetch):
            titles = [sheet.title for sheet in self.accessor.list_tables()]
        self.assertNotIn("Vue", titles)
        self.assertNotIn(SID, self.cache)
        self.assertIsNotNone(self.accessor.find_table("vue"))

    def test_ensure_table_recovers_from_stale_sheet_list(self):
        self.accessor.list_tables()
        self.grid.add_sheet(SID, "Vue")
        sheet = self.accessor.ensure_table("Vue", ["No", "Question"])
        self.assertEqual(sheet.title, "Vue")
        self.assertEqual(self.grid.sheet_rows(SID, "Vue"), [["No", "Question"]])
        self.assertIsNotNone(self.accessor.find_table("Vue"))

    def test_create_table_propagates_other_failures(self):
        failure = RemoteFailure("Quota exceeded", status=429)
        with patch.object(self.grid, "batch_update", side_effect=failure):
            with self.assertRaises(RemoteFailure):
                self.accessor.create_table("Vue")
        self.assertIsNone(self.accessor.find_table("Vue"))

    def test_ensure_table_creates_with_headers(self):
        sheet = self.accessor.ensure_table("Vue", ["No", "Question"])
        self.assertEqual(sheet.title, "Vue")
        self.assertEqual(self.grid.sheet_rows(SID, "Vue"), [["No", "Question"]])

    def test_ensure_table_is_idempotent(self):
        self.accessor.ensure_table("React", ["No", "Question"])
        self.accessor.ensure_table("react", ["No", "Question"])
        self.assertEqual(len(self._calls("batch_update")), 0)
        self.assertEqual(len(self._calls("update_values")), 0)

    def test_ensure_table_writes_missing_header(self):
        self.grid.add_sheet(SID, "Blank")
        self.accessor.ensure_table("Blank", ["No", "Name"])
        self.assertEqual(self.grid.sheet_rows(SID, "Blank"), [["No", "Name"]])

    def test_count_and_read(self):
        self.assertEqual(self.accessor.count_rows("React"), 2)
        self.assertEqual(self.accessor.read_rows("React"), [["1", "a"], ["2", "b"]])
        self.assertEqual(self.accessor.read_row("React", 3), ["2", "b"])
        self.assertEqual(self.accessor.read_row("React", 9), [])

    def test_write_range_builds_a1_span(self):
        self.accessor.write_range("React", 4, [[3, "c", "d"]])
        self.assertIn(("update_values", "'React'!A4:C4"), self.grid.calls)
        self.assertEqual(self.accessor.read_row("React", 4), ["3", "c", "d"])

    def test_insert_rows_with_values(self):
        sheet = self.accessor.resolve_table("React")
        self.accessor.insert_rows(sheet.sheet_id, grid_index(0), 1, [[1, "new"]])
        self.assertEqual(
            self.accessor.read_rows("React"), [["1", "new"], ["1", "a"], ["2", "b"]]
        )
        self.assertEqual(len(self._calls("batch_update")), 1)

    def test_delete_and_move_rows(self):
        sheet = self.accessor.resolve_table("React")
        self.accessor.move_rows(sheet.sheet_id, 1, 2, 3)
        self.assertEqual(self.accessor.read_rows("React"), [["2", "b"], ["1", "a"]])
        self.accessor.delete_rows(sheet.sheet_id, 1, 2)
        self.assertEqual(self.accessor.read_rows("React"), [["1", "a"]])

    def test_rename_and_reorder_tables(self):
        react = self.accessor.resolve_table("React")
        self.accessor.rename_table(react.sheet_id, "React 18")
        self.assertIsNone(self.accessor.find_table("React"))
        self.accessor.reorder_tables([react.sheet_id, 0])
        titles = [sheet.title for sheet in self.accessor.list_tables()]
        self.assertEqual(titles, ["React 18", "Sheet1"])

    def test_delete_table(self):
        react = self.accessor.resolve_table("React")
        self.accessor.delete_table(react.sheet_id)
        self.assertEqual([s.title for s in self.accessor.list_tables()], ["Sheet1"])


if __name__ == "__main__":
    unittest.main()
