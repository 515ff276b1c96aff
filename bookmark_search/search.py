"""Search engine module for bookmarks."""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Sequence

from bookmark_search.evaluator import SearchTextCache, evaluate
from bookmark_search.models import Bookmark, FilterResult, FilterSpec
from bookmark_search.query_parser import parse_query


class SearchEngine(Protocol):
    """Protocol for search engines to allow extensibility."""

    def search(self, query: str, bookmarks: Sequence[Bookmark], limit: int = 10) -> List[Bookmark]:
        """Search bookmarks based on query.

        Args:
            query: Search query string
            bookmarks: Bookmarks to search
            limit: Maximum number of results to return

        Returns:
            List of matching bookmarks, sorted by relevance
        """
        ...


def rank(bookmarks: List[Bookmark], scores: Dict[Bookmark, int]) -> List[Bookmark]:
    """Order bookmarks by descending score.

    The sort is stable, so equal scores keep their input order. With no
    scores at all the input order is returned unchanged.
    """
    if not scores:
        return list(bookmarks)
    return sorted(bookmarks, key=lambda bookmark: scores.get(bookmark, 0), reverse=True)


def filter_bookmarks(
    bookmarks: Sequence[Bookmark],
    spec: FilterSpec,
    now: Optional[datetime] = None,
) -> FilterResult:
    """Apply an already parsed query to a collection.

    Args:
        bookmarks: Collection to filter (not modified)
        spec: Parsed query
        now: Reference time for age filters

    Returns:
        FilterResult with ranked survivors; the query string is left empty
    """
    if not bookmarks:
        return FilterResult(data=[], options=spec, query="")

    if spec.is_empty:
        return FilterResult(data=list(bookmarks), options=spec, query="")

    if now is None:
        now = datetime.now(timezone.utc)

    cache = SearchTextCache()
    survivors = []
    scores: Dict[Bookmark, int] = {}

    for bookmark in bookmarks:
        score = evaluate(spec, bookmark, now=now, cache=cache)
        if score is None:
            continue
        survivors.append(bookmark)
        if spec.has_text_terms:
            scores[bookmark] = score

    return FilterResult(data=rank(survivors, scores), options=spec, query="", scores=scores)


def apply_filter(
    bookmarks: Sequence[Bookmark],
    query: str,
    now: Optional[datetime] = None,
) -> FilterResult:
    """Parse ``query`` and filter ``bookmarks`` with it.

    Never raises for any query string. An empty query returns every
    bookmark in its original order with no scores.

    Args:
        bookmarks: Collection to filter (not modified)
        query: Raw query string
        now: Reference time for age filters (defaults to current UTC time)

    Returns:
        FilterResult with the ranked survivors, parsed options and scores
    """
    spec = parse_query(query)
    result = filter_bookmarks(bookmarks, spec, now=now)
    result.query = query or ""
    return result


class QuerySearchEngine:
    """Search engine backed by the query grammar."""

    def filter(
        self,
        query: str,
        bookmarks: Sequence[Bookmark],
        now: Optional[datetime] = None,
    ) -> FilterResult:
        return apply_filter(bookmarks, query, now=now)

    def search(self, query: str, bookmarks: Sequence[Bookmark], limit: int = 10) -> List[Bookmark]:
        """Search bookmarks using the query grammar.

        Args:
            query: Search query string
            bookmarks: Bookmarks to search
            limit: Maximum number of results to return

        Returns:
            Matching bookmarks, highest score first
        """
        return self.filter(query, bookmarks).data[:limit]
