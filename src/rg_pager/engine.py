"""Run the full pipeline for one query, or for many queries concurrently."""

import asyncio
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from rg_pager.config import SearchQuery, SortOrder
from rg_pager.context import AssembledFile, ContextAssembler
from rg_pager.enricher import StatProvider, enrich_files
from rg_pager.errors import SearchError, classify_upstream_error
from rg_pager.grouper import LimitReport, cap_matches, group_matches, limit_files, sort_files
from rg_pager.hints import EMPTY_HINTS, build_hints, error_hints
from rg_pager.models import Lookup, MatchEntry, ResultStatus, SearchResult
from rg_pager.offsets import (
    Reader,
    approximate_location,
    map_file_spans,
    read_prefix,
    resolve_path,
)
from rg_pager.paginator import paginate_files
from rg_pager.parser import EngineOutput, iter_events
from rg_pager.truncate import truncate_content

logger = logging.getLogger(__name__)

OutputSource = EngineOutput | Callable[[], EngineOutput]


def build_entries(
    assembled: AssembledFile, query: SearchQuery, reader: Reader = read_prefix
) -> tuple[list[MatchEntry], bool]:
    """Map offsets and truncate windows for one finalized file.

    Returns the entries and whether any rendered value was truncated. In
    files-only mode the entries only count matches, so no file is read.
    """
    spans = [m.span for m in assembled.matches]
    if query.files_only:
        lookups = [Lookup.approximate(approximate_location(span)) for span in spans]
    else:
        lookups = map_file_spans(resolve_path(query.root, assembled.path), spans, reader)
    entries = []
    truncated = False
    for match, window, lookup in zip(assembled.matches, assembled.windows, lookups, strict=True):
        value = truncate_content(window, query.match_content_length)
        truncated = truncated or (value != window and not query.files_only)
        entries.append(
            MatchEntry(line=match.line_number, column=match.column, value=value, location=lookup.value)
        )
    return entries, truncated


def build_result(
    output: EngineOutput,
    query: SearchQuery,
    stat: StatProvider = os.stat,
    reader: Reader = read_prefix,
) -> SearchResult:
    """Turn captured engine output into a paginated SearchResult."""
    assembler = ContextAssembler(before=query.before, after=query.after)
    items = []
    truncated = False
    for assembled in assembler.assemble(iter_events(output)):
        entries, was_truncated = build_entries(assembled, query, reader)
        truncated = truncated or was_truncated
        items.append((assembled.path, entries))

    stats = assembler.summary.stats if assembler.summary else None
    warnings = tuple(assembler.warnings)
    files = group_matches(items)
    if not files:
        return SearchResult(
            status=ResultStatus.EMPTY, hints=EMPTY_HINTS, warnings=warnings, stats=stats
        )

    report = LimitReport()
    files = cap_matches(files, query.max_matches_per_file, report)

    order = query.sort_order
    if order is SortOrder.MODIFIED:
        files = enrich_files(files, query.root, stat)
    files = limit_files(sort_files(files, order), query.max_files, report)

    total_files = len(files)
    total_matches = 0 if query.files_only else sum(f.match_count for f in files)

    page_files, pagination = paginate_files(
        files,
        query.files_per_page,
        query.file_page_number,
        query.matches_per_page,
        query.match_page_for,
        files_only=query.files_only,
    )
    if query.show_file_last_modified:
        page_files = enrich_files(page_files, query.root, stat)
    else:
        page_files = [replace(f, modified=None) for f in page_files]

    hints = build_hints(
        page_files, pagination, query, report, total_files, total_matches, truncated=truncated
    )
    logger.info(
        "Found %d matches across %d files (showing %d files)",
        total_matches,
        total_files,
        len(page_files),
    )
    return SearchResult(
        status=ResultStatus.HAS_RESULTS,
        files=tuple(page_files),
        total_files=total_files,
        total_matches=total_matches,
        pagination=pagination,
        hints=tuple(hints) + warnings,
        warnings=warnings,
        stats=stats,
    )


def error_result(error: SearchError) -> SearchResult:
    return SearchResult(
        status=ResultStatus.ERROR,
        hints=tuple(error_hints(error.code)),
        error=error.message,
        error_code=error.code.value,
    )


def run_search(
    source: OutputSource,
    query: SearchQuery,
    stat: StatProvider = os.stat,
    reader: Reader = read_prefix,
) -> SearchResult:
    """Fetch engine output and build the result, reporting known failures.

    ``source`` is either the output itself or a callable producing it. Path
    validation and output-size failures become ``status: error`` results;
    anything else propagates.
    """
    try:
        output = source() if callable(source) else source
        return build_result(output, query, stat=stat, reader=reader)
    except Exception as e:
        error = classify_upstream_error(e)
        if error is None:
            raise
        logger.info("Query failed with %s: %s", error.code.value, error.message)
        return error_result(error)


async def run_search_async(
    source: OutputSource,
    query: SearchQuery,
    stat: StatProvider = os.stat,
    reader: Reader = read_prefix,
) -> SearchResult:
    return await asyncio.to_thread(run_search, source, query, stat, reader)


async def run_bulk_async(
    requests: Sequence[tuple[OutputSource, SearchQuery]],
    stat: StatProvider = os.stat,
    reader: Reader = read_prefix,
) -> list[SearchResult]:
    """Run every query as its own task; one failure never touches the others.

    Results come back in request order, whatever order the tasks finish in.
    """
    outcomes = await asyncio.gather(
        *(run_search_async(source, query, stat, reader) for source, query in requests),
        return_exceptions=True,
    )
    results = []
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, BaseException):
            logger.error("Bulk query %d failed: %s", index, outcome, exc_info=outcome)
            outcome = SearchResult(
                status=ResultStatus.ERROR, hints=tuple(error_hints(None)), error=str(outcome)
            )
        results.append(outcome)
    return results


def run_bulk(
    requests: Sequence[tuple[OutputSource, SearchQuery]],
    stat: StatProvider = os.stat,
    reader: Reader = read_prefix,
) -> list[SearchResult]:
    return asyncio.run(run_bulk_async(requests, stat, reader))


def bulk_response(results: Sequence[SearchResult]) -> dict[str, Any]:
    """Merge per-query results into one response, preserving their order."""
    counts = {status: 0 for status in ResultStatus}
    for r in results:
        counts[r.status] += 1
    return {
        "results": [r.to_dict() for r in results],
        "summary": {
            "total": len(results),
            "hasResults": counts[ResultStatus.HAS_RESULTS],
            "empty": counts[ResultStatus.EMPTY],
            "errors": counts[ResultStatus.ERROR],
        },
    }
