"""Unit tests for release_notifier.scrapers.base — parse_chapter_number."""

from __future__ import annotations

import pytest

from release_notifier.domain.exceptions import ReleaseParseError
from release_notifier.scrapers.base import parse_chapter_number


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Chapter 181", (181, 0)),
        ("chapter 12.5", (12, 5)),
        ("CHAPTER 7,1", (7, 1)),
        ("Ch.40", (40, 0)),
        ("Ch. 40.2 - The Return", (40, 2)),
        ("Solo Leveling Chapter 200 [END]", (200, 0)),
    ],
)
def test_default_pattern(text: str, expected: tuple[int, int]) -> None:
    assert parse_chapter_number(text) == expected


def test_site_pattern_with_minor_group() -> None:
    assert parse_chapter_number("#1090.1", r"#(\d+)(?:\.(\d+))?") == (1090, 1)


def test_site_pattern_without_minor_group() -> None:
    assert parse_chapter_number("Episode 33", r"episode\s+(\d+)") == (33, 0)


@pytest.mark.parametrize("text", ["", "Prologue", "Season finale"])
def test_no_number_raises(text: str) -> None:
    with pytest.raises(ReleaseParseError):
        parse_chapter_number(text)
