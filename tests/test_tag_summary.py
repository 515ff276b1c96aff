"""Tests for tag_summary module."""
from bookmark_search.models import Bookmark
from bookmark_search.tag_summary import (
    TagInfo,
    bookmarks_with_any_tag,
    extract_tag_summary,
    filter_tags,
)


class TestExtractTagSummary:
    def test_counts_and_order(self, tagged_bookmarks):
        summary = extract_tag_summary(tagged_bookmarks)
        assert summary[0] == TagInfo("capitec", 3)
        assert summary[1] == TagInfo("finance", 2)
        assert summary[2] == TagInfo("npr", 2)
        assert [info.tag for info in summary[3:]] == ["bank", "news"]

    def test_normalizes_case_and_whitespace(self):
        bookmarks = [
            Bookmark(url="https://a.com", tags=("Python", " python ")),
            Bookmark(url="https://b.com", tags=("PYTHON", "  ")),
        ]
        assert extract_tag_summary(bookmarks) == [TagInfo("python", 3)]

    def test_no_tags(self):
        assert extract_tag_summary([Bookmark(url="https://a.com")]) == []


class TestFilterTags:
    def test_substring(self, tagged_bookmarks):
        summary = extract_tag_summary(tagged_bookmarks)
        assert [info.tag for info in filter_tags(summary, "N")] == ["finance", "npr", "bank", "news"]

    def test_blank_returns_all(self, tagged_bookmarks):
        summary = extract_tag_summary(tagged_bookmarks)
        assert filter_tags(summary, "  ") == summary


class TestBookmarksWithAnyTag:
    def test_any_match(self, tagged_bookmarks):
        result = bookmarks_with_any_tag(tagged_bookmarks, ["BANK", "news"])
        assert [b.url for b in result] == ["https://capitec1.com", "https://npr1.com"]

    def test_exact_not_substring(self, tagged_bookmarks):
        assert bookmarks_with_any_tag(tagged_bookmarks, ["cap"]) == []

    def test_empty_tags_returns_all(self, tagged_bookmarks):
        assert bookmarks_with_any_tag(tagged_bookmarks, []) == tagged_bookmarks
