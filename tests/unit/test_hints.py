"""Tests for the hints module."""

from rg_pager.config import SearchQuery
from rg_pager.errors import ErrorCode
from rg_pager.grouper import LimitReport
from rg_pager.hints import build_hints, error_hints
from rg_pager.models import FileMatches, Location, MatchEntry, Pagination


def file_with(path: str, shown: int, pagination: Pagination | None = None, approximate=False):
    matches = [
        MatchEntry(line=i, column=0, value="x", location=Location(i, i, 1, approximate))
        for i in range(1, shown + 1)
    ]
    return FileMatches(path=path, match_count=shown, matches=matches, pagination=pagination)


def test_next_file_page_hint():
    """Test more file pages point at the next filePageNumber."""
    pagination = Pagination(current_page=1, total_pages=3, per_page=10, total=25)

    hints = build_hints(
        [file_with("a.py", 1)], pagination, SearchQuery(), LimitReport(), 25, 25
    )

    assert hints[0] == "File page 1/3 (showing 1 of 25)"
    assert hints[1] == "Next: filePageNumber=2"
    assert "Total: 25 matches across 25 files" in hints


def test_final_file_page_hint():
    """Test the last file page says so."""
    pagination = Pagination(current_page=3, total_pages=3, per_page=10, total=25)
    query = SearchQuery(file_page_number=3)

    hints = build_hints([file_with("a.py", 1)], pagination, query, LimitReport(), 25, 25)

    assert "Final page" in hints
    assert not any("Next:" in h for h in hints)


def test_single_page_is_final():
    """Test a result that fits on one page reports all files shown."""
    hints = build_hints([file_with("a.py", 2)], None, SearchQuery(), LimitReport(), 1, 2)

    assert hints[0] == "Final page: all 1 file(s) shown"


def test_file_page_past_end():
    """Test an out-of-range file page points back at the last page."""
    pagination = Pagination(current_page=9, total_pages=3, per_page=10, total=25)
    query = SearchQuery(file_page_number=9)

    hints = build_hints([], pagination, query, LimitReport(), 25, 25)

    assert "use filePageNumber=3" in hints[0]


def test_more_matches_hint_names_parameters():
    """Test files with more matches mention matchPageNumber and matchesPerPage."""
    pagination = Pagination(current_page=1, total_pages=3, per_page=10, total=25)
    files = [file_with("a.py", 10, pagination)]

    hints = build_hints(files, None, SearchQuery(), LimitReport(), 1, 25)

    assert any("matchPageNumber" in h and "matchesPerPage" in h for h in hints)
    assert "a.py: match page 1/3, next: matchPageNumber=2" in hints


def test_limit_hints():
    """Test ceiling drops name maxFiles and maxMatchesPerFile."""
    report = LimitReport(
        files_found=40,
        files_kept=10,
        max_files=10,
        max_matches_per_file=5,
        capped_files={"a.py": 12},
    )

    hints = build_hints([file_with("a.py", 5)], None, SearchQuery(), report, 10, 50)

    assert any("maxFiles" in h and "found 40" in h for h in hints)
    assert any("maxMatchesPerFile=5" in h and "7 matches dropped" in h for h in hints)


def test_approximate_offsets_are_flagged():
    """Test approximate locations produce a hint."""
    files = [file_with("a.py", 1, approximate=True)]

    hints = build_hints(files, None, SearchQuery(), LimitReport(), 1, 1)

    assert any("approximate" in h for h in hints)


def test_truncation_hint():
    """Test truncated values mention matchContentLength."""
    hints = build_hints(
        [file_with("a.py", 1)], None, SearchQuery(), LimitReport(), 1, 1, truncated=True
    )

    assert any("matchContentLength" in h for h in hints)


def test_error_hints():
    """Test each surfaced error code has its own guidance."""
    assert error_hints(ErrorCode.OUTPUT_TOO_LARGE)
    assert error_hints(ErrorCode.PATH_VALIDATION_FAILED)
    assert error_hints(None)
