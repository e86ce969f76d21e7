"""
Date and text helpers for work-log rows.

Dates are stored as ISO ``YYYY-MM-DD`` strings. Older rows entered by hand
may use other layouts, so parsing accepts a few common ones and returns None
for anything else.
"""

from __future__ import annotations

import html
import re
from datetime import date, datetime
from typing import Optional

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d %B %Y", "%B %d, %Y", "%d-%m-%Y")
_ISO_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]")


def parse_sheet_date(value: object) -> Optional[date]:
    """Parse a stored date cell, or None if it is blank or unrecognised."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    # ISO timestamps such as 2024-01-15T09:30:00.000Z
    if _ISO_TIMESTAMP.match(text):
        text = text[:10]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_sheet_date(value: object) -> str:
    """Normalise a date for storage. Unparseable input is stored as given."""
    parsed = parse_sheet_date(value)
    if parsed is None:
        return "" if value is None else str(value).strip()
    return parsed.isoformat()


def display_date(value: object) -> str:
    parsed = parse_sheet_date(value)
    return parsed.isoformat() if parsed else ("" if value is None else str(value))


def month_name_from_date(value: object) -> Optional[str]:
    """``2024-01-15`` -> ``January 2024``."""
    parsed = parse_sheet_date(value)
    if parsed is None:
        return None
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.year}"


def parse_month_name(title: str) -> Optional[date]:
    """``January 2024`` -> date(2024, 1, 1); None for non-month titles."""
    parts = (title or "").split()
    if len(parts) != 2 or not parts[1].isdigit():
        return None
    wanted = parts[0].lower()
    for number, name in enumerate(MONTH_NAMES, start=1):
        if name.lower() == wanted or name[:3].lower() == wanted:
            return date(int(parts[1]), number, 1)
    return None


_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_CLOSE = re.compile(r"</(p|div|h[1-6]|ul|ol|blockquote|pre)\s*>", re.IGNORECASE)
_LIST_ITEM = re.compile(r"<li[^>]*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_BLANK_LINES = re.compile(r"\n{3,}")


def html_to_text(value: str) -> str:
    """Flatten rich-text editor HTML into plain text with line breaks and bullets."""
    if not value:
        return ""
    text = _BREAK.sub("\n", value)
    text = _BLOCK_CLOSE.sub("\n", text)
    text = _LIST_ITEM.sub("\n• ", text)
    text = _TAG.sub("", text)
    text = html.unescape(text).replace("\xa0", " ")
    text = "\n".join(line.rstrip() for line in text.splitlines())
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()
