"""Scraper strategy contract and shared parsing helpers."""

from __future__ import annotations

import re
from typing import Protocol

from release_notifier.domain.exceptions import ReleaseParseError
from release_notifier.domain.models import CandidateRelease
from release_notifier.domain.results import Result

#: Matches "Chapter 181", "chapter 12.5", "Ch.40", "CHAPTER 7,1".
DEFAULT_CHAPTER_PATTERN: str = r"ch(?:apter)?\.?\s*(\d+)(?:[.,](\d+))?"


class ReleaseScraper(Protocol):
    """Fetch-and-parse strategy for one website's markup.

    Implementations never raise for a fetch or parse problem: every such
    failure is returned as a ``ScrapeFailed`` Result.
    """

    async def fetch_latest(self, url: str) -> Result[CandidateRelease]: ...


def parse_chapter_number(text: str, pattern: str = DEFAULT_CHAPTER_PATTERN) -> tuple[int, int]:
    """Extract ``(major, minor)`` from a chapter label.

    Raises:
        ReleaseParseError: ``text`` contains no chapter number.
    """
    match = re.search(pattern, text, flags=re.IGNORECASE)
    if match is None:
        raise ReleaseParseError(f"no chapter number in {text!r}")
    major = int(match.group(1))
    # Site patterns may omit the minor group entirely.
    minor_text = match.group(2) if match.re.groups >= 2 else None
    return major, int(minor_text) if minor_text else 0
