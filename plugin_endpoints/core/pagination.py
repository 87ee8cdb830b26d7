"""Offset/page arithmetic and Link headers for collection responses"""
import math
from dataclasses import dataclass
from typing import Dict, Optional

from starlette.datastructures import URL


@dataclass(frozen=True)
class PageWindow:
    total: int
    per_page: int
    offset: int
    length: int
    page: int
    max_pages: int

    def slice(self, items: list) -> list:
        return items[self.offset:self.offset + self.length]


def compute_window(total: int, page: int, per_page: int, offset: Optional[int] = None) -> PageWindow:
    """
    Work out which slice of a collection a request asks for.

    An explicit non-zero ``offset`` wins over ``page``; the effective page is
    then derived from the offset.
    """
    if per_page < 1:
        raise ValueError("per_page must be positive")

    if offset:
        offset = int(offset)
    else:
        offset = (page - 1) * per_page

    max_pages = math.ceil(total / per_page)
    effective_page = math.ceil(offset / per_page + 1)

    if effective_page > 1:
        length = min(per_page, total - offset)
    else:
        length = min(per_page, total)

    return PageWindow(
        total=total,
        per_page=per_page,
        offset=offset,
        length=max(length, 0),
        page=effective_page,
        max_pages=max_pages,
    )


def pagination_links(base_url: URL, window: PageWindow) -> Dict[str, str]:
    """Build the prev/next links for a window, keeping the caller's other query params"""
    base = base_url.remove_query_params("offset")
    links = {}

    prev_page = min(window.page - 1, window.max_pages)
    if window.page > 1 and prev_page >= 1:
        links["prev"] = str(base.include_query_params(page=prev_page))

    if window.max_pages > window.page:
        links["next"] = str(base.include_query_params(page=window.page + 1))

    return links


def format_link_header(links: Dict[str, str]) -> str:
    return ", ".join(f'<{url}>; rel="{rel}"' for rel, url in links.items())
