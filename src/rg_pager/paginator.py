"""Two independent pagination axes: files, and matches within each file."""

import math
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TypeVar

from rg_pager.models import FileMatches, Pagination

T = TypeVar("T")


def total_pages(total: int, per_page: int) -> int:
    return math.ceil(total / per_page)


def paginate(
    items: Sequence[T], per_page: int, page: int
) -> tuple[Sequence[T], Pagination | None]:
    """Slice one page out of ``items``.

    The Pagination is returned only when the items do not fit on one page. A
    page past the end gives an empty slice; ``has_more`` is then False.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be at least 1, got {per_page}")
    page = max(page, 1)
    start = (page - 1) * per_page
    selected = items[start : start + per_page]
    if len(items) <= per_page:
        return selected, None
    return selected, Pagination(
        current_page=page,
        total_pages=total_pages(len(items), per_page),
        per_page=per_page,
        total=len(items),
    )


def paginate_files(
    files: list[FileMatches],
    files_per_page: int,
    file_page_number: int,
    matches_per_page: int,
    match_page_for: Callable[[str], int],
    files_only: bool = False,
) -> tuple[list[FileMatches], Pagination | None]:
    """Select a page of files, then a page of matches inside each of them.

    The file slice is fixed before any match slicing happens, so the match
    page chosen for one file can never change which files are on the page.
    With ``files_only`` each file keeps its count but no matches.
    """
    page_files, file_pagination = paginate(files, files_per_page, file_page_number)

    if files_only:
        return [replace(f, matches=(), pagination=None) for f in page_files], file_pagination

    sliced = []
    for f in page_files:
        matches, match_pagination = paginate(f.matches, matches_per_page, match_page_for(f.path))
        sliced.append(replace(f, matches=matches, pagination=match_pagination))
    return sliced, file_pagination
