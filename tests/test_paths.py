"""Tests for request path resolution."""

import pytest

from data_proxy.errors import InvalidPath
from data_proxy.paths import join_segments, resolve_path


# ============================================================================
# Structured source
# ============================================================================

def test_structured_segments_are_kept_in_order():
    assert resolve_path(["en", "version.json"], None) == ["en", "version.json"]


def test_structured_single_string_becomes_one_segment():
    assert resolve_path("version.json", None) == ["version.json"]


def test_structured_drops_empty_segments():
    assert resolve_path(["", "en", "", "firstReadings.json"], None) == [
        "en",
        "firstReadings.json",
    ]


def test_structured_source_wins_over_raw_url():
    segments = resolve_path(["en", "version.json"], "/api/data/fr/other.json")
    assert segments == ["en", "version.json"]


# ============================================================================
# Raw URL fallback
# ============================================================================

def test_raw_url_prefix_is_stripped():
    assert resolve_path(None, "/api/data/en/version.json") == ["en", "version.json"]


def test_raw_url_full_url_with_query():
    url = "https://proxy.example.com/api/data/en/version.json?cache=1#top"
    assert resolve_path(None, url) == ["en", "version.json"]


def test_raw_url_discards_empty_components():
    assert resolve_path(None, "/api/data//en///version.json/") == ["en", "version.json"]


def test_raw_url_segments_are_unquoted():
    assert resolve_path(None, "/api/data/en/first%20readings.json") == [
        "en",
        "first readings.json",
    ]


def test_empty_structured_falls_back_to_raw_url():
    assert resolve_path([], "/api/data/version.json") == ["version.json"]


# ============================================================================
# Rejections
# ============================================================================

@pytest.mark.parametrize(
    "structured, raw_url",
    [
        (None, None),
        ([], ""),
        ("", "/api/data"),
        (None, "/api/data/"),
        (None, "/other/en/version.json"),
        (None, "/api/database/version.json"),
    ],
)
def test_missing_path_is_invalid(structured, raw_url):
    with pytest.raises(InvalidPath) as exc_info:
        resolve_path(structured, raw_url)
    assert exc_info.value.status_code == 400
    assert exc_info.value.error == "Invalid path parameter"


def test_non_printable_segment_is_invalid():
    with pytest.raises(InvalidPath):
        resolve_path(["en", "version\n.json"], None)


@pytest.mark.parametrize("segment", [".", ".."])
def test_relative_segment_is_invalid(segment):
    with pytest.raises(InvalidPath):
        resolve_path(["en", segment, "secrets.json"], None)


def test_join_segments_preserves_order():
    assert join_segments(["a", "b", "c.json"]) == "a/b/c.json"


@pytest.mark.parametrize(
    "structured",
    [
        "../../../../user",
        ["en", "../../../../user"],
        ["en/../..", "x.json"],
        ["./version.json"],
    ],
)
def test_embedded_relative_component_is_invalid(structured):
    with pytest.raises(InvalidPath):
        resolve_path(structured, None)


@pytest.mark.parametrize(
    "raw_url",
    [
        "/api/data/..%2F..%2F..%2F..%2Fuser",
        "/api/data/en/%2E%2E%2F%2E%2E%2Fuser",
        "/api/data/en%2F..%2F..%2Fsecrets.json",
    ],
)
def test_encoded_relative_component_is_invalid(raw_url):
    with pytest.raises(InvalidPath):
        resolve_path(None, raw_url)


def test_encoded_separator_splits_segments():
    assert resolve_path(None, "/api/data/en%2Fversion.json") == ["en", "version.json"]


def test_structured_value_with_separator_is_split():
    assert resolve_path("en/version.json", None) == ["en", "version.json"]


def test_backslash_is_invalid():
    with pytest.raises(InvalidPath):
        resolve_path(["en\\..\\..", "user"], None)
