"""List entries and their Watching / Completed / Planning buckets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

WATCHING = "Watching"
COMPLETED = "Completed"
PLANNING = "Planning"

# Render order, and the upstream list names each bucket accepts
CATEGORIES = (WATCHING, COMPLETED, PLANNING)
CATEGORY_SYNONYMS = {
    WATCHING: ("Watching", "Current"),
    COMPLETED: ("Completed",),
    PLANNING: ("Planning",),
}

POSTER_FALLBACK_URL = "https://img.anili.st/media/{media_id}"


@dataclass(frozen=True)
class MediaTitle:
    romaji: str = ""
    english: str = ""
    native: str = ""

    @property
    def preferred(self) -> str:
        """Romaji, then English, then native; the first non-empty one wins."""
        return self.romaji or self.english or self.native or ""


@dataclass(frozen=True)
class MediaEntry:
    media_id: int
    title: MediaTitle
    poster_url: str = ""
    format: str = ""
    score: float = 0
    progress: int = 0
    status: str = ""

    @classmethod
    def from_api(cls, entry: dict) -> Optional["MediaEntry"]:
        """Build an entry from an AniList list entry. Returns None without a media id."""
        media = entry.get("media") or {}
        media_id = media.get("id")
        if media_id is None:
            return None
        title = media.get("title") or {}
        cover = media.get("coverImage") or {}
        return cls(
            media_id=int(media_id),
            title=MediaTitle(
                romaji=title.get("romaji") or "",
                english=title.get("english") or "",
                native=title.get("native") or "",
            ),
            poster_url=cover.get("large") or "",
            format=media.get("format") or "",
            score=entry.get("score") or 0,
            progress=entry.get("progress") or 0,
            status=entry.get("status") or "",
        )

    @property
    def display_title(self) -> str:
        return self.title.preferred

    @property
    def image_url(self) -> str:
        return self.poster_url or POSTER_FALLBACK_URL.format(media_id=self.media_id)


CategorizedLists = Dict[str, List[MediaEntry]]


def _find_list(lists: Iterable[dict], names) -> Optional[dict]:
    return next((lst for lst in lists if lst.get("name") in names), None)


def categorize_lists(lists: Iterable[dict], require_poster: bool = False) -> CategorizedLists:
    """
    Partition upstream lists into the three buckets.

    Every bucket is present, possibly empty, and keeps upstream entry order.
    Entries without a media id are dropped; ``require_poster`` also drops
    entries without a cover image URL.
    """
    lists = list(lists or [])
    categorized: CategorizedLists = {}
    for category in CATEGORIES:
        found = _find_list(lists, CATEGORY_SYNONYMS[category])
        entries = []
        for raw in (found or {}).get("entries") or []:
            entry = MediaEntry.from_api(raw)
            if entry is None:
                continue
            if require_poster and not entry.poster_url:
                continue
            entries.append(entry)
        categorized[category] = entries
    return categorized


__all__ = [
    "CATEGORIES",
    "COMPLETED",
    "CategorizedLists",
    "MediaEntry",
    "MediaTitle",
    "PLANNING",
    "WATCHING",
    "categorize_lists",
]
