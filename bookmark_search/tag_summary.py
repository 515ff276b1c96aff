"""Tag counts across a bookmark collection."""
from dataclasses import dataclass
from typing import Dict, List, Sequence

from bookmark_search.models import Bookmark


@dataclass(frozen=True)
class TagInfo:
    tag: str
    count: int


def extract_tag_summary(bookmarks: Sequence[Bookmark]) -> List[TagInfo]:
    """Count tag usage, normalizing tags to trimmed lowercase.

    Returns:
        TagInfo list sorted by count (descending), then alphabetically
    """
    counts: Dict[str, int] = {}
    for bookmark in bookmarks:
        for tag in bookmark.tags:
            normalized = tag.strip().lower()
            if normalized:
                counts[normalized] = counts.get(normalized, 0) + 1

    summary = [TagInfo(tag=tag, count=count) for tag, count in counts.items()]
    summary.sort(key=lambda info: (-info.count, info.tag))
    return summary


def filter_tags(summary: Sequence[TagInfo], search_text: str) -> List[TagInfo]:
    """Keep tags containing ``search_text`` (case-insensitive)."""
    if not search_text or not search_text.strip():
        return list(summary)
    needle = search_text.strip().lower()
    return [info for info in summary if needle in info.tag]


def bookmarks_with_any_tag(bookmarks: Sequence[Bookmark], tags: Sequence[str]) -> List[Bookmark]:
    """Bookmarks carrying at least one of ``tags`` (exact, case-insensitive).

    An empty tag list returns every bookmark.
    """
    if not tags:
        return list(bookmarks)
    wanted = {tag.lower() for tag in tags}
    return [b for b in bookmarks if any(tag.lower() in wanted for tag in b.tags)]
