"""Navigation hints built from the final pagination state.

Every hint that asks the client to change something names the query
parameter exactly as the client sends it.
"""

from rg_pager.config import MAX_MATCHES_PER_PAGE, SearchQuery
from rg_pager.errors import ErrorCode
from rg_pager.grouper import LimitReport
from rg_pager.models import FileMatches, Pagination

EMPTY_HINTS = (
    "No matches. Broaden the pattern or search a wider path.",
    "Check the search root and any include/exclude filters.",
)

ERROR_HINTS = {
    ErrorCode.OUTPUT_TOO_LARGE: (
        "Output exceeded limits - your pattern matched too broadly.",
        "Is the pattern too generic? Make it specific to target what you actually need.",
        "Searching everything? Add type filters or path restrictions to focus scope.",
        "Strategy: list matching files first, then narrow before reading content.",
    ),
    ErrorCode.PATH_VALIDATION_FAILED: (
        "The search path was rejected. Check that it exists and is allowed.",
    ),
}


def error_hints(code: ErrorCode | None) -> list[str]:
    if code is None:
        return ["Search failed. Retry with a narrower path or pattern."]
    return list(ERROR_HINTS.get(code, ()))


def _file_page_hints(
    pagination: Pagination | None, query: SearchQuery, shown: int, total_files: int
) -> list[str]:
    page = query.file_page_number
    if pagination is None:
        if page > 1:
            return [f"filePageNumber={page} is past the last page; use filePageNumber=1"]
        return [f"Final page: all {total_files} file(s) shown"]

    if page > pagination.total_pages:
        return [
            f"filePageNumber={page} is past the last page; "
            f"use filePageNumber={pagination.total_pages} for the final page"
        ]
    hints = [f"File page {page}/{pagination.total_pages} (showing {shown} of {total_files})"]
    if pagination.has_more:
        hints.append(f"Next: filePageNumber={page + 1}")
    else:
        hints.append("Final page")
    return hints


def _match_page_hints(files: list[FileMatches], query: SearchQuery) -> list[str]:
    hints = []
    with_more = []
    for f in files:
        page = query.match_page_for(f.path)
        last = f.pagination.total_pages if f.pagination else 1
        if page > last:
            hints.append(
                f"{f.path}: matchPageNumber={page} is past the last page; "
                f"use matchPageNumber={last}"
            )
        elif f.pagination is not None and f.pagination.has_more:
            with_more.append(f)
            hints.append(
                f"{f.path}: match page {page}/{last}, next: matchPageNumber={page + 1}"
            )

    if with_more:
        note = f"Note: {len(with_more)} file(s) have more matches - use matchPageNumber"
        if query.matches_per_page < MAX_MATCHES_PER_PAGE:
            note += f" or raise matchesPerPage (max {MAX_MATCHES_PER_PAGE})"
        hints.insert(0, note)
    return hints


def _limit_hints(report: LimitReport) -> list[str]:
    hints = []
    if report.files_limited:
        hints.append(
            f"Results limited to {report.max_files} files (found {report.files_found} matching)"
            " - raise maxFiles to see more"
        )
    if report.capped_files:
        hints.append(
            f"{len(report.capped_files)} file(s) capped at maxMatchesPerFile="
            f"{report.max_matches_per_file} ({report.matches_dropped} matches dropped)"
        )
    return hints


def build_hints(
    files: list[FileMatches],
    pagination: Pagination | None,
    query: SearchQuery,
    report: LimitReport,
    total_files: int,
    total_matches: int,
    truncated: bool = False,
) -> list[str]:
    """Hints for a result with matches, most important first."""
    hints = _file_page_hints(pagination, query, len(files), total_files)
    if query.files_only:
        hints.append(f"Total: {total_files} matching files (filesOnly: matches omitted)")
    else:
        hints.append(f"Total: {total_matches} matches across {total_files} files")
        hints.extend(_match_page_hints(files, query))
    hints.extend(_limit_hints(report))

    if any(m.location.approximate for f in files for m in f.matches):
        hints.append(
            "Some locations are approximate: charOffset/charLength fall back to byte "
            "offsets where file content could not be read"
        )
    if truncated:
        hints.append(
            f"Match values truncated to {query.match_content_length} chars "
            "(configurable via matchContentLength: 1-800)"
        )
    return hints
