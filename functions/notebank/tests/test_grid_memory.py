import unittest

from notebank.errors import RangeNotFound, RemoteFailure
from notebank.grid import InMemoryGridClient, a1_range, parse_a1

SID = "book"


class A1Tests(unittest.TestCase):
    def test_quotes_titles(self):
        self.assertEqual(a1_range("React", "A2", "ZZ"), "'React'!A2:ZZ")
        self.assertEqual(a1_range("Bob's", "A1"), "'Bob''s'!A1")

    def test_parse(self):
        self.assertEqual(parse_a1("'React'!A2:ZZ"), ("React", 1, 0, None, 702))
        self.assertEqual(parse_a1("'Bob''s'!B3:D5"), ("Bob's", 2, 1, 5, 4))
        self.assertEqual(parse_a1("'Tags'!A2:A"), ("Tags", 1, 0, None, 1))


class InMemoryGridTests(unittest.TestCase):
    def setUp(self):
        self.grid = InMemoryGridClient()
        self.sheet_id = self.grid.add_sheet(SID, "Data", [["No", "Name"], [1, "a"], [2, "b"]])

    def test_values_are_formatted_and_trimmed(self):
        self.grid.update_values(SID, "'Data'!C2:D2", [["", ""]])
        self.assertEqual(
            self.grid.get_values(SID, "'Data'!A2:ZZ"), [["1", "a"], ["2", "b"]]
        )

    def test_missing_sheet_is_range_not_found(self):
        with self.assertRaises(RangeNotFound):
            self.grid.get_values(SID, "'Nope'!A2:ZZ")

    def test_titles_match_case_insensitively(self):
        self.assertEqual(self.grid.get_values(SID, "'data'!B2:B2"), [["a"]])

    def test_append_after_last_filled_row(self):
        self.grid.append_values(SID, "'Data'!A1", [[3, "c"]])
        self.assertEqual(self.grid.sheet_rows(SID, "Data")[-1], ["3", "c"])

    def test_clear_values(self):
        self.grid.clear_values(SID, "'Data'!A2:B")
        self.assertEqual(self.grid.sheet_rows(SID, "Data"), [["No", "Name"]])

    def test_spreadsheet_lists_sheets_in_order(self):
        props = [s["properties"]["title"] for s in self.grid.get_spreadsheet(SID)["sheets"]]
        self.assertEqual(props, ["Sheet1", "Data"])

    def test_move_dimension_uses_pre_move_destination(self):
        self.grid.add_sheet(SID, "Five", [["No"], ["a"], ["b"], ["c"], ["d"], ["e"]])
        sheet_id = self._sheet_id("Five")
        self.grid.batch_update(
            SID,
            [
                {
                    "moveDimension": {
                        "source": {"sheetId": sheet_id, "dimension": "ROWS", "startIndex": 2, "endIndex": 3},
                        "destinationIndex": 5,
                    }
                }
            ],
        )
        self.assertEqual(
            [row[0] for row in self.grid.sheet_rows(SID, "Five")],
            ["No", "a", "c", "d", "b", "e"],
        )

    def test_insert_and_update_cells(self):
        self.grid.batch_update(
            SID,
            [
                {
                    "insertDimension": {
                        "range": {"sheetId": self.sheet_id, "dimension": "ROWS", "startIndex": 1, "endIndex": 2}
                    }
                },
                {
                    "updateCells": {
                        "range": {"sheetId": self.sheet_id, "startRowIndex": 1, "endRowIndex": 2},
                        "rows": [
                            {
                                "values": [
                                    {"userEnteredValue": {"numberValue": 1.0}},
                                    {"userEnteredValue": {"stringValue": "new"}},
                                ]
                            }
                        ],
                        "fields": "userEnteredValue",
                    }
                },
            ],
        )
        self.assertEqual(
            self.grid.sheet_rows(SID, "Data"),
            [["No", "Name"], ["1", "new"], ["1", "a"], ["2", "b"]],
        )

    def test_delete_dimension(self):
        self.grid.batch_update(
            SID,
            [
                {
                    "deleteDimension": {
                        "range": {"sheetId": self.sheet_id, "dimension": "ROWS", "startIndex": 1, "endIndex": 2}
                    }
                }
            ],
        )
        self.assertEqual(self.grid.sheet_rows(SID, "Data"), [["No", "Name"], ["2", "b"]])

    def test_add_sheet_reply_and_duplicate(self):
        reply = self.grid.batch_update(SID, [{"addSheet": {"properties": {"title": "New"}}}])
        props = reply["replies"][0]["addSheet"]["properties"]
        self.assertEqual(props["title"], "New")
        self.assertEqual(props["index"], 2)
        with self.assertRaises(RemoteFailure) as ctx:
            self.grid.batch_update(SID, [{"addSheet": {"properties": {"title": "new"}}}])
        self.assertEqual(ctx.exception.status, 400)

    def test_cannot_delete_last_sheet(self):
        grid = InMemoryGridClient()
        with self.assertRaises(RemoteFailure) as ctx:
            grid.batch_update("other", [{"deleteSheet": {"sheetId": 0}}])
        self.assertIn("remove all the sheets", ctx.exception.message)

    def test_unknown_sheet_id(self):
        with self.assertRaises(RemoteFailure):
            self.grid.batch_update(SID, [{"deleteSheet": {"sheetId": 4242}}])

    def test_update_sheet_properties(self):
        self.grid.batch_update(
            SID,
            [
                {
                    "updateSheetProperties": {
                        "properties": {"sheetId": self.sheet_id, "title": "Renamed", "index": 0},
                        "fields": "title,index",
                    }
                }
            ],
        )
        titles = [s["properties"]["title"] for s in self.grid.get_spreadsheet(SID)["sheets"]]
        self.assertEqual(titles, ["Renamed", "Sheet1"])

    def _sheet_id(self, title):
        for sheet in self.grid.get_spreadsheet(SID)["sheets"]:
            if sheet["properties"]["title"] == title:
                return sheet["properties"]["sheetId"]
        raise AssertionError(title)


if __name__ == "__main__":
    unittest.main()
