"""Tests for pagination module."""
import pytest

from bookmark_search.pagination import go_to_page, paginate


class TestPaginate:
    def test_first_page(self):
        page = paginate(list(range(45)), 1, 20)
        assert page.items == list(range(20))
        assert page.total_pages == 3
        assert (page.start_index, page.end_index) == (1, 20)
        assert page.has_next and not page.has_prev

    def test_last_partial_page(self):
        page = paginate(list(range(45)), 3, 20)
        assert page.items == list(range(40, 45))
        assert (page.start_index, page.end_index) == (41, 45)
        assert not page.has_next

    def test_page_past_end_clamped(self):
        page = paginate(list(range(45)), 9, 20)
        assert page.page == 3

    def test_page_below_one_clamped(self):
        assert paginate(list(range(5)), 0, 2).page == 1

    def test_empty_list(self):
        page = paginate([], 1, 20)
        assert page.items == []
        assert page.total_pages == 1
        assert (page.start_index, page.end_index) == (0, 0)

    def test_exact_multiple(self):
        assert paginate(list(range(40)), 1, 20).total_pages == 2

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            paginate([1, 2, 3], 1, 0)


class TestNavigation:
    def test_go_to_page(self):
        assert go_to_page(2, 5) == 2
        assert go_to_page(-1, 5) == 1
        assert go_to_page(8, 5) == 5
