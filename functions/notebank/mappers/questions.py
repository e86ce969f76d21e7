"""
Question bank: one sheet per technology.
"""

from __future__ import annotations

from typing import List

from notebank import inline_tags
from notebank.mappers.base import ChunkedTableMapper
from notebank.records import Question, QuestionInput

IMAGE_SEPARATOR = "|||"
_URL_PREFIXES = ("data:", "http://", "https://")


def join_image_urls(urls: List[str]) -> str:
    return IMAGE_SEPARATOR.join(url for url in urls if url)


def parse_image_urls(value: str) -> List[str]:
    """
    Split a stored image list.

    Rows written before the ``|||`` separator used commas, which also appear
    inside base64 data URLs, so comma-joined values are reassembled on URL
    prefixes.
    """
    if not value:
        return []
    if IMAGE_SEPARATOR in value:
        return [url.strip() for url in value.split(IMAGE_SEPARATOR) if url.strip()]

    parts = value.split(",")
    if len(parts) == 2 and "base64" in parts[0] and "data:" not in parts[1]:
        return [value]

    urls: List[str] = []
    current = ""
    for part in parts:
        part = part.strip()
        if not part:
            continue
        if part.startswith(_URL_PREFIXES):
            if current:
                urls.append(current)
            current = part
        elif current:
            current += "," + part
    if current:
        urls.append(current)
    return urls or [part for part in parts if part]


class QuestionMapper(ChunkedTableMapper):
    headers = ("No", "Question", "Answer", "Images", "FirstImage")
    id_prefix = "q"
    entity = "question"

    def _encode(self, fields: QuestionInput) -> List[str]:
        urls = list(fields.image_urls or [])
        return [
            inline_tags.encode(fields.question or "", fields.priority),
            fields.answer or "",
            join_image_urls(urls),
            urls[0] if urls else "",
        ]

    def _decode(self, record_id: str, ordinal: int, values: List[str]) -> Question:
        question, priority = inline_tags.decode(values[0])
        return Question(
            id=record_id,
            no=ordinal,
            question=question,
            answer=values[1],
            image_urls=parse_image_urls(values[2]),
            priority=priority,
        )
