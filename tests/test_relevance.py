"""Tests for relevance module."""
import math
import pytest

from bookmark_search.models import Bookmark
from bookmark_search.relevance import (
    RelevanceConfig,
    analyze_relevance_distribution,
    calculate_relevance_score,
    explain_relevance_score,
    sort_by_relevance,
)

from tests.helpers import NOW, days_ago


@pytest.fixture
def collection():
    return [
        Bookmark(url="https://frequent.com", clicked=25, added=days_ago(60), last=days_ago(1)),
        Bookmark(url="https://new.com", clicked=0, added=days_ago(1)),
        Bookmark(url="https://moderate.com", clicked=10, added=days_ago(90), last=days_ago(10)),
        Bookmark(url="https://old.com", clicked=0, added=days_ago(100)),
        Bookmark(url="https://stale.com", clicked=50, added=days_ago(400), last=days_ago(120)),
    ]


class TestCalculateRelevanceScore:
    def test_recent_frequent_click(self):
        b = Bookmark(url="https://a.com", clicked=50, added=days_ago(60), last=days_ago(0))
        score = calculate_relevance_score(b, now=NOW)
        assert score == pytest.approx(0.5 * 0.7 + 1.0 * 0.3)

    def test_never_clicked_old_item_gets_minimum(self):
        b = Bookmark(url="https://a.com", clicked=0, added=days_ago(100))
        assert calculate_relevance_score(b, now=NOW) == pytest.approx(0.1)

    def test_new_item_boost(self):
        b = Bookmark(url="https://a.com", clicked=0, added=days_ago(0))
        # Recency bonus 0.2 * 0.3 is under the 0.1 floor, then the 0.2 boost is added
        assert calculate_relevance_score(b, now=NOW) == pytest.approx(0.3)

    def test_zero_new_item_window(self):
        config = RelevanceConfig(new_item_threshold_days=0)
        b = Bookmark(url="https://a.com", clicked=0, added=days_ago(0))
        assert calculate_relevance_score(b, config, now=NOW) == pytest.approx(0.1)

    def test_decay_past_threshold(self):
        config = RelevanceConfig()
        b = Bookmark(url="https://a.com", clicked=100, added=days_ago(200), last=days_ago(40))
        recency = math.exp(-0.02 * 30) * math.exp(-0.02 * 2 * 10)
        expected = 1.0 * config.click_weight + recency * config.recency_weight
        assert calculate_relevance_score(b, config, now=NOW) == pytest.approx(expected)

    def test_clicks_capped(self):
        many = Bookmark(url="https://a.com", clicked=1000, added=days_ago(500))
        hundred = Bookmark(url="https://b.com", clicked=100, added=days_ago(500))
        assert calculate_relevance_score(many, now=NOW) == calculate_relevance_score(hundred, now=NOW)

    def test_custom_config(self):
        config = RelevanceConfig(click_weight=1.0, recency_weight=0.0)
        b = Bookmark(url="https://a.com", clicked=50, added=days_ago(10), last=days_ago(1))
        assert calculate_relevance_score(b, config, now=NOW) == pytest.approx(0.5)


class TestSortByRelevance:
    def test_most_relevant_first(self, collection):
        ranked = sort_by_relevance(collection, now=NOW)
        assert ranked[0].url == "https://frequent.com"
        assert ranked[-1].url == "https://old.com"

    def test_does_not_mutate(self, collection):
        before = list(collection)
        sort_by_relevance(collection, now=NOW)
        assert collection == before

    def test_tie_broken_by_clicks_then_added(self):
        a = Bookmark(url="https://a.com", clicked=0, added=days_ago(200))
        b = Bookmark(url="https://b.com", clicked=0, added=days_ago(100))
        assert [x.url for x in sort_by_relevance([a, b], now=NOW)] == ["https://b.com", "https://a.com"]


class TestExplain:
    def test_never_clicked_recent(self):
        b = Bookmark(url="https://a.com", clicked=0, added=days_ago(2))
        text = explain_relevance_score(b, now=NOW)
        assert text.startswith("Score: ")
        assert "never clicked" in text
        assert "recently added" in text

    @pytest.mark.parametrize("days, phrase", [
        (0.5, "visited today"),
        (3, "visited 3 days ago"),
        (15, "visited 2 weeks ago"),
        (95, "visited 3 months ago"),
    ])
    def test_visit_phrases(self, days, phrase):
        b = Bookmark(url="https://a.com", clicked=4, added=days_ago(200), last=days_ago(days))
        text = explain_relevance_score(b, now=NOW)
        assert "4 clicks" in text
        assert phrase in text


class TestDistribution:
    def test_empty(self):
        stats = analyze_relevance_distribution([])
        assert stats.average_score == 0
        assert stats.never_clicked_count == 0

    def test_counts(self, collection):
        stats = analyze_relevance_distribution(collection, now=NOW)
        assert stats.never_clicked_count == 2
        assert stats.stale_count == 1
        total = stats.high_relevance_count + stats.medium_relevance_count + stats.low_relevance_count
        assert total == len(collection)
        assert stats.average_score > 0
