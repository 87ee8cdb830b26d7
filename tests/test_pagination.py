"""Unit tests for collection paging"""
import math

import pytest
from starlette.datastructures import URL

from plugin_endpoints.core.pagination import compute_window, format_link_header, pagination_links


class TestComputeWindow:

    def test_first_page(self):
        window = compute_window(total=25, page=1, per_page=10)
        assert (window.offset, window.length, window.page) == (0, 10, 1)

    def test_partial_last_page(self):
        window = compute_window(total=25, page=3, per_page=10)
        assert window.offset == 20
        assert window.length == 5
        assert window.slice(list(range(25))) == [20, 21, 22, 23, 24]

    def test_small_collection_fits_first_page(self):
        window = compute_window(total=3, page=1, per_page=10)
        assert window.length == 3
        assert window.max_pages == 1

    def test_offset_overrides_page(self):
        window = compute_window(total=25, page=1, per_page=10, offset=18)
        assert window.offset == 18
        assert window.length == 7
        assert window.page == 3

    def test_zero_offset_falls_back_to_page(self):
        window = compute_window(total=25, page=2, per_page=10, offset=0)
        assert window.offset == 10

    def test_page_past_the_end_is_empty(self):
        window = compute_window(total=25, page=5, per_page=10)
        assert window.length == 0
        assert window.slice(list(range(25))) == []

    @pytest.mark.parametrize("total,per_page", [(0, 10), (1, 10), (10, 10), (11, 10), (25, 7), (100, 1)])
    def test_max_pages_is_ceiling(self, total, per_page):
        assert compute_window(total, 1, per_page).max_pages == math.ceil(total / per_page)

    def test_per_page_must_be_positive(self):
        with pytest.raises(ValueError):
            compute_window(total=5, page=1, per_page=0)


class TestPaginationLinks:

    base = URL("http://testserver/wp-json/zao/v1/plugins?per_page=10&page=2")

    def test_middle_page_has_both_links(self):
        links = pagination_links(self.base, compute_window(25, 2, 10))
        assert links["prev"] == "http://testserver/wp-json/zao/v1/plugins?per_page=10&page=1"
        assert links["next"] == "http://testserver/wp-json/zao/v1/plugins?per_page=10&page=3"

    def test_first_page_has_no_prev(self):
        links = pagination_links(self.base, compute_window(25, 1, 10))
        assert "prev" not in links
        assert "next" in links

    def test_last_page_has_no_next(self):
        links = pagination_links(self.base, compute_window(25, 3, 10))
        assert "next" not in links
        assert "prev" in links

    def test_prev_is_clamped_to_max_pages(self):
        links = pagination_links(self.base, compute_window(25, 9, 10))
        assert links["prev"].endswith("page=3")
        assert "next" not in links

    def test_offset_is_dropped_from_links(self):
        url = URL("http://testserver/plugins?offset=10&per_page=10")
        links = pagination_links(url, compute_window(25, 1, 10, offset=10))
        assert "offset" not in links["next"]
        assert links["next"].endswith("page=3")

    def test_link_header_format(self):
        header = format_link_header({"prev": "http://a/?page=1", "next": "http://a/?page=3"})
        assert header == '<http://a/?page=1>; rel="prev", <http://a/?page=3>; rel="next"'
