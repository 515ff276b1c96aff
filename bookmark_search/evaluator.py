"""Per-record evaluation of a parsed query."""
from datetime import datetime, timezone
from typing import Dict, Optional

from bookmark_search.models import (
    AddedPredicate,
    Bookmark,
    BrowserPredicate,
    ClickedPredicate,
    DevicePredicate,
    FilterSpec,
    OsPredicate,
    StructuredPredicate,
    TagPredicate,
)


SECONDS_PER_DAY = 86400

AND_WEIGHT = 2
OR_WEIGHT = 1


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_between(earlier: datetime, now: datetime) -> float:
    """Fractional days elapsed from ``earlier`` to ``now``.

    Naive datetimes are taken to be UTC.
    """
    delta = _as_utc(now) - _as_utc(earlier)
    return delta.total_seconds() / SECONDS_PER_DAY


def compare_days(actual_days: float, operator: str, target_days: float) -> bool:
    """Compare elapsed days against a target.

    ``=`` is a same-day match: true when the two differ by less than a day.
    """
    if operator == ">":
        return actual_days > target_days
    if operator == "<":
        return actual_days < target_days
    if operator == ">=":
        return actual_days >= target_days
    if operator == "<=":
        return actual_days <= target_days
    if operator == "=":
        return abs(actual_days - target_days) < 1
    return False


def searchable_text(bookmark: Bookmark) -> str:
    """Build the lowercase text that free-text terms are matched against.

    Tags appear twice, once bare and once as ``#tag``, so either form of a
    tag can be searched for.
    """
    tags = [tag for tag in bookmark.tags if tag]
    parts = [
        bookmark.url or "",
        bookmark.title or "",
        bookmark.description or "",
        bookmark.notes or "",
        " ".join(tags),
        " ".join(f"#{tag}" for tag in tags),
    ]
    return " ".join(parts).lower()


class SearchTextCache:
    """Side table of searchable text for one filter pass, keyed by record identity."""

    def __init__(self):
        self._texts: Dict[int, str] = {}

    def get(self, bookmark: Bookmark) -> str:
        key = id(bookmark)
        text = self._texts.get(key)
        if text is None:
            text = searchable_text(bookmark)
            self._texts[key] = text
        return text

    def __len__(self) -> int:
        return len(self._texts)


def _field_contains(field_value: Optional[str], value: Optional[str]) -> bool:
    if not field_value or not value:
        return False
    return value.lower() in field_value.lower()


def _added_holds(predicate: AddedPredicate, bookmark: Bookmark, now: datetime) -> bool:
    # Incomplete age filters hold rather than excluding everything
    if predicate.operator is None or predicate.duration is None or bookmark.added is None:
        return True
    return compare_days(days_between(bookmark.added, now), predicate.operator, predicate.duration)


def _clicked_holds(predicate: ClickedPredicate, bookmark: Bookmark, now: datetime) -> bool:
    if predicate.operator is None or predicate.duration is None:
        return True

    never_clicked_filter = predicate.operator == "=" and predicate.duration == 0
    if bookmark.clicked == 0:
        return never_clicked_filter
    if never_clicked_filter:
        return False

    reference = bookmark.last or bookmark.added
    if reference is None:
        return True
    return compare_days(days_between(reference, now), predicate.operator, predicate.duration)


def predicate_holds(predicate: StructuredPredicate, bookmark: Bookmark, now: datetime) -> bool:
    """Decide whether a single structured predicate holds for a bookmark.

    Args:
        predicate: One of the six structured predicate types
        bookmark: Record to test
        now: Reference time for the age filters

    Returns:
        True if the predicate holds
    """
    if isinstance(predicate, DevicePredicate):
        return _field_contains(bookmark.device, predicate.value)
    if isinstance(predicate, OsPredicate):
        return _field_contains(bookmark.os, predicate.value)
    if isinstance(predicate, BrowserPredicate):
        return _field_contains(bookmark.browser, predicate.value)
    if isinstance(predicate, TagPredicate):
        if not predicate.value:
            return False
        value = predicate.value.lower()
        return any(value in tag.lower() for tag in bookmark.tags)
    if isinstance(predicate, AddedPredicate):
        return _added_holds(predicate, bookmark, now)
    if isinstance(predicate, ClickedPredicate):
        return _clicked_holds(predicate, bookmark, now)
    return False


def evaluate(
    spec: FilterSpec,
    bookmark: Bookmark,
    now: Optional[datetime] = None,
    cache: Optional[SearchTextCache] = None,
) -> Optional[int]:
    """Evaluate a parsed query against one bookmark.

    Structured predicates are checked first, then free-text terms. Positive
    and negated structured predicates are evaluated independently, so a
    bookmark tagged both ``a`` and ``b`` is excluded by ``tag:a -tag:b``.

    Args:
        spec: Parsed query
        bookmark: Record to test
        now: Reference time for age filters (defaults to current UTC time)
        cache: Optional searchable-text cache shared across one pass

    Returns:
        The relevance score if the bookmark survives, otherwise None.
        The score is 0 when the query had no free-text terms.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    for predicate in spec.special:
        if not predicate_holds(predicate, bookmark, now):
            return None

    for predicate in spec.not_special:
        if predicate_holds(predicate, bookmark, now):
            return None

    if not spec.has_text_terms:
        return 0

    text = cache.get(bookmark) if cache is not None else searchable_text(bookmark)

    for term in spec.not_terms:
        if term.lower() in text:
            return None

    score = 0
    for term in spec.and_terms:
        if term.lower() not in text:
            return None
        score += AND_WEIGHT

    or_matched = False
    for term in spec.or_terms:
        if term.lower() in text:
            score += OR_WEIGHT
            or_matched = True

    # OR terms only gate inclusion when there are no AND terms
    if spec.or_terms and not spec.and_terms and not or_matched:
        return None

    return score
