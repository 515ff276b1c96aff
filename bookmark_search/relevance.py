"""Usage-based relevance: click counts and visit recency with time decay.

This ordering is independent of the query engine's free-text scores; it is
used to surface bookmarks that are worth revisiting.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from bookmark_search.evaluator import days_between
from bookmark_search.models import Bookmark


MAX_REASONABLE_CLICKS = 100
STALE_AFTER_DAYS = 90


@dataclass
class RelevanceConfig:
    """Weights and decay settings for usage relevance."""
    click_weight: float = 0.7
    recency_weight: float = 0.3
    decay_threshold_days: float = 30
    decay_rate: float = 0.02
    min_relevance_score: float = 0.1
    new_item_boost: float = 0.2
    new_item_threshold_days: float = 7


@dataclass
class RelevanceStats:
    average_score: float = 0.0
    median_score: float = 0.0
    high_relevance_count: int = 0  # score > 0.7
    medium_relevance_count: int = 0  # 0.3 <= score <= 0.7
    low_relevance_count: int = 0  # score < 0.3
    stale_count: int = 0  # last visit 90+ days ago
    never_clicked_count: int = 0


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _new_item_bonus(bookmark: Bookmark, config: RelevanceConfig, now: datetime) -> float:
    if bookmark.clicked != 0 or bookmark.added is None or config.new_item_threshold_days <= 0:
        return 0.0
    days_since_added = days_between(bookmark.added, now)
    if days_since_added > config.new_item_threshold_days:
        return 0.0
    return config.new_item_boost * (1 - days_since_added / config.new_item_threshold_days)


def calculate_relevance_score(
    bookmark: Bookmark,
    config: Optional[RelevanceConfig] = None,
    now: Optional[datetime] = None,
) -> float:
    """Score a bookmark by how often and how recently it was used.

    Args:
        bookmark: Bookmark to score
        config: Relevance settings (defaults to RelevanceConfig())
        now: Reference time (defaults to current UTC time)

    Returns:
        Score of at least ``min_relevance_score``; recently added, never
        clicked bookmarks can exceed 1.
    """
    config = config or RelevanceConfig()
    now = _now(now)

    click_score = min(bookmark.clicked / MAX_REASONABLE_CLICKS, 1)

    recency_score = 0.0
    if bookmark.last is not None:
        days_since_visit = days_between(bookmark.last, now)
        if days_since_visit <= config.decay_threshold_days:
            recency_score = math.exp(-config.decay_rate * days_since_visit)
        else:
            # Visits past the threshold decay twice as fast
            excess_days = days_since_visit - config.decay_threshold_days
            recency_score = (
                math.exp(-config.decay_rate * config.decay_threshold_days)
                * math.exp(-config.decay_rate * 2 * excess_days)
            )
    elif bookmark.clicked == 0:
        recency_score = _new_item_bonus(bookmark, config, now)

    base_score = click_score * config.click_weight + recency_score * config.recency_weight
    return max(base_score, config.min_relevance_score) + _new_item_bonus(bookmark, config, now)


def sort_by_relevance(
    bookmarks: Sequence[Bookmark],
    config: Optional[RelevanceConfig] = None,
    now: Optional[datetime] = None,
) -> List[Bookmark]:
    """Return bookmarks ordered by usage relevance, most relevant first.

    Ties are broken by click count, then most recent visit, then most
    recently added. The input is not modified.
    """
    now = _now(now)
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)

    def sort_key(bookmark: Bookmark):
        last = days_between(epoch, bookmark.last) if bookmark.last else 0.0
        added = days_between(epoch, bookmark.added) if bookmark.added else 0.0
        return (
            calculate_relevance_score(bookmark, config, now),
            bookmark.clicked,
            last,
            added,
        )

    return sorted(bookmarks, key=sort_key, reverse=True)


def explain_relevance_score(
    bookmark: Bookmark,
    config: Optional[RelevanceConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """Describe the factors behind a bookmark's relevance score.

    Returns:
        e.g. ``"Score: 0.412 (5 clicks, visited 2 weeks ago)"``
    """
    config = config or RelevanceConfig()
    now = _now(now)
    score = calculate_relevance_score(bookmark, config, now)

    factors = []
    if bookmark.clicked > 0:
        factors.append(f"{bookmark.clicked} clicks")
    else:
        factors.append("never clicked")

    if bookmark.last is not None:
        days = days_between(bookmark.last, now)
        if days < 1:
            factors.append("visited today")
        elif days < 7:
            factors.append(f"visited {math.floor(days)} days ago")
        elif days < 30:
            factors.append(f"visited {math.floor(days / 7)} weeks ago")
        else:
            factors.append(f"visited {math.floor(days / 30)} months ago")

    if (
        bookmark.clicked == 0
        and bookmark.added is not None
        and days_between(bookmark.added, now) <= config.new_item_threshold_days
    ):
        factors.append("recently added")

    return f"Score: {score:.3f} ({', '.join(factors)})"


def analyze_relevance_distribution(
    bookmarks: Sequence[Bookmark],
    config: Optional[RelevanceConfig] = None,
    now: Optional[datetime] = None,
) -> RelevanceStats:
    """Summarize relevance scores across a collection."""
    if not bookmarks:
        return RelevanceStats()

    now = _now(now)
    scores = [calculate_relevance_score(b, config, now) for b in bookmarks]
    sorted_scores = sorted(scores)

    stats = RelevanceStats(
        average_score=sum(scores) / len(scores),
        median_score=sorted_scores[len(sorted_scores) // 2],
    )

    for bookmark, score in zip(bookmarks, scores):
        if score > 0.7:
            stats.high_relevance_count += 1
        elif score >= 0.3:
            stats.medium_relevance_count += 1
        else:
            stats.low_relevance_count += 1

        if bookmark.clicked == 0:
            stats.never_clicked_count += 1
        elif bookmark.last is not None and days_between(bookmark.last, now) >= STALE_AFTER_DAYS:
            stats.stale_count += 1

    return stats
