import unittest

from notebank.accessor import SheetAccessor
from notebank.errors import NotConfigured, NotFound
from notebank.grid import InMemoryGridClient
from notebank.mappers.notes import (
    ALL_NOTES_SHEET,
    TABS_SHEET,
    NotesStore,
    split_note_images,
)
from notebank.records import NotesTab
from notebank.sheet_cache import SheetMetadataCache

SID = "notes"


class NotesStoreTests(unittest.TestCase):
    def setUp(self):
        self.grid = InMemoryGridClient()
        self.store = NotesStore(SheetAccessor(self.grid, SheetMetadataCache(), SID, "notes"))

    def test_tabs_sheet_created_with_headers(self):
        self.assertEqual(self.store.get_tabs(), [])
        self.assertEqual(self.grid.sheet_rows(SID, TABS_SHEET), [["ID", "Tab Name"]])

    def test_tabs_joined_to_sheet_ids(self):
        python_id = self.grid.add_sheet(SID, "Python", [["Basics"]])
        self.grid.add_sheet(
            SID,
            TABS_SHEET,
            [["ID", "Tab Name"], ["t1", "python"], ["t2", "Missing"], ["", "Blank"], ["t3"]],
        )
        self.assertEqual(
            self.store.get_tabs(),
            [NotesTab(id="t1", name="python", sheet_id=python_id), NotesTab(id="t2", name="Missing")],
        )
        self.assertEqual(self.store.get_tabs()[1].as_dict(), {"id": "t2", "name": "Missing"})

    def test_all_notes_skip_rows_without_tab_or_title(self):
        self.grid.add_sheet(
            SID,
            ALL_NOTES_SHEET,
            [
                ["ID", "Title", "Description1", "Description2", "Description3"],
                ["t1", "Lists", " ordered ", "mutable"],
                ["", "No tab"],
                ["t2", "Dicts", "hashed"],
            ],
        )
        notes = self.store.get_all_notes()
        self.assertEqual([note.id for note in notes], ["note-1", "note-3"])
        self.assertEqual([note.row_index for note in notes], [0, 2])
        first = notes[0].as_dict()
        self.assertEqual(first["tabId"], "t1")
        self.assertEqual(first["heading"], "Lists")
        self.assertEqual(first["content"], "ordered")
        self.assertEqual(first["description2"], "mutable")
        self.assertEqual(first["columnLetter"], "A")

    def test_all_notes_sheet_created_when_missing(self):
        self.assertEqual(self.store.get_all_notes(), [])
        self.assertEqual(self.grid.sheet_rows(SID, ALL_NOTES_SHEET)[0][0], "ID")

    def test_notes_by_tab_walk_columns(self):
        self.grid.add_sheet(
            SID,
            "Python",
            [
                ["Basics", "Advanced"],
                ["int", "decorators |||IMAGE_START|||http://a/1.png|||http://a/2.png|||IMAGE_END|||"],
                ["", "generators"],
                ["str"],
            ],
        )
        notes = self.store.get_notes_by_tab("python")
        self.assertEqual(
            [(note.id, note.column_letter, note.heading, note.content, note.row_index) for note in notes],
            [
                ("0-1", "A", "Basics", "int", 0),
                ("0-3", "A", "Basics", "str", 2),
                ("1-1", "B", "Advanced", "decorators", 0),
                ("1-2", "B", "Advanced", "generators", 1),
            ],
        )
        self.assertEqual(notes[2].image_urls, ["http://a/1.png", "http://a/2.png"])
        self.assertIsNone(notes[0].image_urls)
        self.assertNotIn("imageUrls", notes[0].as_dict())

    def test_tab_headings(self):
        self.grid.add_sheet(SID, "Python", [["Basics", "Advanced"], ["int"]])
        self.assertEqual(self.store.get_tab_headings("Python"), ["Basics", "Advanced"])

    def test_notes_by_column_keeps_empty_columns(self):
        self.grid.add_sheet(SID, "Python", [["Basics", "Empty"], ["int"]])
        grouped = self.store.get_notes_by_column("Python")
        self.assertEqual(list(grouped), ["A", "B"])
        self.assertEqual([note.content for note in grouped["A"]], ["int"])
        self.assertEqual(grouped["B"], [])

    def test_empty_tab(self):
        self.grid.add_sheet(SID, "Python")
        self.assertEqual(self.store.get_notes_by_tab("Python"), [])
        self.assertEqual(self.store.get_notes_by_column("Python"), {})

    def test_missing_tab(self):
        with self.assertRaises(NotFound):
            self.store.get_notes_by_tab("Rust")

    def test_missing_spreadsheet_id(self):
        store = NotesStore(SheetAccessor(self.grid, SheetMetadataCache(), None, "notes"))
        with self.assertRaises(NotConfigured):
            store.get_all_notes()
        self.assertEqual(self.grid.calls, [])

    def test_split_note_images_without_markers(self):
        self.assertEqual(split_note_images(" plain "), (" plain ", []))
        self.assertEqual(split_note_images("x |||IMAGE_START|||u"), ("x |||IMAGE_START|||u", []))


if __name__ == "__main__":
    unittest.main()
