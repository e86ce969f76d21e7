import unittest
from datetime import date

from notebank.formatting import (
    format_sheet_date,
    html_to_text,
    month_name_from_date,
    parse_month_name,
    parse_sheet_date,
)


class DateTests(unittest.TestCase):
    def test_parse_known_layouts(self):
        for value in ["2024-01-15", "2024-01-15T10:00:00.000Z", "01/15/2024", "15 January 2024", "January 15, 2024"]:
            self.assertEqual(parse_sheet_date(value), date(2024, 1, 15), value)

    def test_parse_garbage(self):
        for value in ["", "   ", "soon", None, 42]:
            self.assertIsNone(parse_sheet_date(value))

    def test_format(self):
        self.assertEqual(format_sheet_date("01/15/2024"), "2024-01-15")
        self.assertEqual(format_sheet_date(" later "), "later")

    def test_month_names(self):
        self.assertEqual(month_name_from_date("2024-12-01"), "December 2024")
        self.assertEqual(parse_month_name("March 2024"), date(2024, 3, 1))
        self.assertEqual(parse_month_name("mar 2024"), date(2024, 3, 1))
        self.assertIsNone(parse_month_name("Project List"))
        self.assertIsNone(parse_month_name("Sheet1"))


class HtmlToTextTests(unittest.TestCase):
    def test_breaks_and_entities(self):
        self.assertEqual(html_to_text("a<br>b<br/>c &amp; d"), "a\nb\nc & d")

    def test_collapses_blank_lines(self):
        self.assertEqual(html_to_text("<p>a</p><p></p><p></p><p>b</p>"), "a\n\nb")

    def test_plain_text_unchanged(self):
        self.assertEqual(html_to_text("just text"), "just text")
        self.assertEqual(html_to_text(""), "")


if __name__ == "__main__":
    unittest.main()
