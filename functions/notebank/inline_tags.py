"""
Inline priority tags embedded at the end of a text field.

Stored format: ``<text>|PRIORITY:<value>|``. The default priority is never
written, so untagged text always reads back as the default.
"""

from __future__ import annotations

import re
from typing import Tuple

from notebank.errors import InvalidArgument

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "low"

# User text that happens to end with this marker is indistinguishable from a
# tag; the stored format has no escaping.
_TAG_PATTERN = re.compile(r"\|PRIORITY:(low|medium|high)\|$")


def strip_tag(text: str) -> str:
    return _TAG_PATTERN.sub("", text or "", count=1)


def encode(text: str, tag: str = DEFAULT_PRIORITY) -> str:
    tag = tag or DEFAULT_PRIORITY
    if tag not in PRIORITIES:
        raise InvalidArgument(f"Unknown priority {tag!r}")
    clean = strip_tag(text)
    if tag == DEFAULT_PRIORITY:
        return clean
    return f"{clean}|PRIORITY:{tag}|"


def decode(text: str) -> Tuple[str, str]:
    """Return (text without the tag, tag)."""
    # No whitespace trimming, so decode(encode(text, tag)) gives back text exactly.
    text = text or ""
    match = _TAG_PATTERN.search(text)
    if not match:
        return text, DEFAULT_PRIORITY
    return text[: match.start()], match.group(1)


def normalize_priority(value: object) -> str:
    """Map any stored value to a known priority, falling back to the default."""
    if isinstance(value, str) and value.strip().lower() in PRIORITIES:
        return value.strip().lower()
    return DEFAULT_PRIORITY
