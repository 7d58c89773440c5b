"""Classify fetched file content as JSON or plain text."""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


class ContentKind(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class ClassifiedContent:
    kind: ContentKind
    payload: Any
    raw: bytes

    @property
    def media_type(self) -> str:
        return JSON_MEDIA_TYPE if self.kind is ContentKind.JSON else TEXT_MEDIA_TYPE


def classify_content(raw: bytes) -> ClassifiedContent:
    """
    JSON when the trimmed text starts with ``{`` or ``[`` and parses;
    plain text otherwise. ``raw`` is kept untouched for the response body.
    """
    text = raw.decode("utf-8", errors="replace")
    if text.strip().startswith(("{", "[")):
        try:
            return ClassifiedContent(ContentKind.JSON, json.loads(text), raw)
        except json.JSONDecodeError:
            # Looks like JSON but is not; served as text.
            pass
    return ClassifiedContent(ContentKind.TEXT, text, raw)
