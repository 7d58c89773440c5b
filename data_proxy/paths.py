"""Resolve the requested file path from an inbound request."""
from collections.abc import Sequence
from urllib.parse import unquote, urlsplit

from .errors import InvalidPath

ROUTE_PREFIX = "/api/data"


def _split(values: Sequence[str]) -> list[str]:
    # A value may carry its own separators (``?path=en/x.json`` or ``%2F``)
    return [part for value in values for part in value.split("/") if part]


def _from_structured(structured: str | Sequence[str] | None) -> list[str]:
    if structured is None:
        return []
    if isinstance(structured, str):
        structured = [structured]
    return _split(structured)


def _from_raw_url(raw_url: str | None) -> list[str]:
    if not raw_url:
        return []
    path = urlsplit(raw_url).path
    if path != ROUTE_PREFIX and not path.startswith(ROUTE_PREFIX + "/"):
        return []
    remainder = path[len(ROUTE_PREFIX):]
    return _split([unquote(part) for part in remainder.split("/")])


def _check_segment(segment: str) -> None:
    if not segment.isprintable():
        raise InvalidPath(f"Path segment contains non-printable characters: {segment!r}")
    if segment in (".", ".."):
        raise InvalidPath(f"Relative path segment not allowed: {segment!r}")
    if "\\" in segment:
        raise InvalidPath(f"Backslash not allowed in path segment: {segment!r}")


def resolve_path(structured: str | Sequence[str] | None, raw_url: str | None) -> list[str]:
    """
    Return the ordered path segments of the requested file.

    The structured source (e.g. a repeated ``path`` query parameter) wins;
    otherwise the raw URL is stripped of the ``/api/data`` prefix and split
    on ``/``. Values are decoded first and split again, so an embedded
    ``/`` never hides a ``..`` component. Empty components are discarded.

    Raises:
        InvalidPath: when neither source yields a segment, or a segment is
            non-printable or a relative reference.
    """
    segments = _from_structured(structured) or _from_raw_url(raw_url)
    if not segments:
        raise InvalidPath("No file path provided")
    for segment in segments:
        _check_segment(segment)
    return segments


def join_segments(segments: Sequence[str]) -> str:
    return "/".join(segments)
