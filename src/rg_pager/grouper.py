"""Group match entries by file, order the files and apply hard ceilings."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from rg_pager.config import SortOrder
from rg_pager.models import FileMatches, MatchEntry

logger = logging.getLogger(__name__)


@dataclass
class LimitReport:
    """What the ceilings dropped, for hints."""

    files_found: int = 0
    files_kept: int = 0
    max_files: int | None = None
    max_matches_per_file: int | None = None
    capped_files: dict[str, int] = field(default_factory=dict)  # path -> matches found

    @property
    def files_limited(self) -> bool:
        return self.files_kept < self.files_found

    @property
    def matches_dropped(self) -> int:
        if self.max_matches_per_file is None:
            return 0
        return sum(found - self.max_matches_per_file for found in self.capped_files.values())


def match_sort_key(entry: MatchEntry) -> tuple[int, int]:
    return (entry.line, entry.location.byte_offset)


def group_matches(items: Iterable[tuple[str, list[MatchEntry]]]) -> list[FileMatches]:
    """Merge entries into one FileMatches per distinct path, in first-seen order."""
    by_path: dict[str, list[MatchEntry]] = {}
    for path, entries in items:
        by_path.setdefault(path, []).extend(entries)

    files = []
    for path, entries in by_path.items():
        entries.sort(key=match_sort_key)
        files.append(FileMatches(path=path, match_count=len(entries), matches=tuple(entries)))
    return files


def cap_matches(
    files: list[FileMatches], max_matches_per_file: int | None, report: LimitReport
) -> list[FileMatches]:
    """Keep only the first ``max_matches_per_file`` matches of every file."""
    report.max_matches_per_file = max_matches_per_file
    if max_matches_per_file is None:
        return files
    capped = []
    for f in files:
        if f.match_count > max_matches_per_file:
            report.capped_files[f.path] = f.match_count
            f = replace(
                f,
                matches=f.matches[:max_matches_per_file],
                match_count=max_matches_per_file,
            )
        capped.append(f)
    if report.capped_files:
        logger.warning(
            "Capped %d file(s) at %d matches", len(report.capped_files), max_matches_per_file
        )
    return capped


def _modified_key(f: FileMatches) -> tuple[int, float, str]:
    if f.modified is None:
        return (1, 0.0, f.path)
    try:
        ts = datetime.fromisoformat(f.modified).timestamp()
    except ValueError:
        return (1, 0.0, f.path)
    return (0, -ts, f.path)


def sort_files(files: list[FileMatches], order: SortOrder = SortOrder.PATH) -> list[FileMatches]:
    """Order files by path, or newest first with undated files last by path."""
    if order is SortOrder.MODIFIED:
        return sorted(files, key=_modified_key)
    return sorted(files, key=lambda f: f.path)


def limit_files(
    files: list[FileMatches], max_files: int | None, report: LimitReport
) -> list[FileMatches]:
    report.files_found = len(files)
    report.max_files = max_files
    kept = files if max_files is None else files[:max_files]
    report.files_kept = len(kept)
    if report.files_limited:
        logger.warning("Limited results to %d of %d files", len(kept), len(files))
    return kept
