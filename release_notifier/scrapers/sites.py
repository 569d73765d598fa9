"""Per-website markup configuration.

Each supported website is described by CSS selectors for the newest chapter
link and (optionally) the series title, plus the pattern that pulls the
chapter number out of the link text. Keys are website names as stored in the
``websites`` table; lookup is case-insensitive.

Sites that need more than selectors get their own ``ReleaseScraper``
implementation registered next to these in ``build_default_registry``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from release_notifier.scrapers.base import DEFAULT_CHAPTER_PATTERN


class SiteSelectors(BaseModel):
    model_config = ConfigDict(frozen=True)

    chapter_selector: str = Field(description="Anchor of the newest chapter; its href is the release URL.")
    title_selector: Optional[str] = Field(
        default=None,
        description="Element holding the series title. None when the site exposes no usable title.",
    )
    chapter_pattern: str = DEFAULT_CHAPTER_PATTERN


# WordPress "Madara" manga theme, used by many scanlation sites.
_MADARA = SiteSelectors(
    chapter_selector="ul.main.version-chap li.wp-manga-chapter:first-child > a",
    title_selector="div.post-title h1",
)

# WordPress "MangaReader" theme.
_MANGAREADER = SiteSelectors(
    chapter_selector="#chapterlist li:first-child a",
    title_selector="h1.entry-title",
)

DEFAULT_SITES: dict[str, SiteSelectors] = {
    "AsuraScans": _MANGAREADER,
    "FlameScans": _MANGAREADER,
    "ReaperScans": _MADARA,
    "MangaBuddy": SiteSelectors(
        chapter_selector="#chapter-list li:first-child a",
        title_selector="div.name.box h1",
    ),
    "MangaPlus": SiteSelectors(
        chapter_selector="a.ChapterListItem-module_chapterListItem:last-of-type",
        title_selector="h1.TitleDetailHeader-module_title",
        chapter_pattern=r"#(\d+)(?:\.(\d+))?",
    ),
}
