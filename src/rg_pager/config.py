"""Limits, defaults and the query model."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

# Pagination
DEFAULT_FILES_PER_PAGE = 10
MAX_FILES_PER_PAGE = 20
DEFAULT_MATCHES_PER_PAGE = 10
MAX_MATCHES_PER_PAGE = 100

# Rendered match text
DEFAULT_MATCH_CONTENT_LENGTH = 200
MAX_MATCH_CONTENT_LENGTH = 800
ELLIPSIS = "..."

# Engine output ceilings
MAX_OUTPUT_BYTES = 10 * 1024 * 1024  # 10MB
MAX_TRACKED_FILES = 2000


class SortOrder(str, Enum):
    PATH = "path"
    MODIFIED = "modified"


def _clamp(value: int, low: int, high: int | None = None) -> int:
    if value < low:
        return low
    if high is not None and value > high:
        return high
    return value


def _as_int(params: dict[str, Any], key: str, default: int | None) -> int | None:
    value = params.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be an integer, got {value!r}") from e


def _as_bool(params: dict[str, Any], key: str) -> bool:
    value = params.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


@dataclass
class SearchQuery:
    """Control parameters for one query.

    Page numbers and sizes are clamped into range on construction, so every
    later stage can trust them.
    """

    root: Path = field(default_factory=Path.cwd)
    files_per_page: int = DEFAULT_FILES_PER_PAGE
    file_page_number: int = 1
    matches_per_page: int = DEFAULT_MATCHES_PER_PAGE
    match_page_number: int = 1
    match_pages: dict[str, int] = field(default_factory=dict)
    match_content_length: int = DEFAULT_MATCH_CONTENT_LENGTH
    context_lines: int | None = None
    before_context: int | None = None
    after_context: int | None = None
    max_files: int | None = None
    max_matches_per_file: int | None = None
    show_file_last_modified: bool = False
    sort_by: SortOrder | None = None
    files_only: bool = False  # page files only; no match bodies

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.files_per_page = _clamp(self.files_per_page, 1, MAX_FILES_PER_PAGE)
        self.file_page_number = _clamp(self.file_page_number, 1)
        self.matches_per_page = _clamp(self.matches_per_page, 1, MAX_MATCHES_PER_PAGE)
        self.match_page_number = _clamp(self.match_page_number, 1)
        self.match_pages = {p: _clamp(int(n), 1) for p, n in self.match_pages.items()}
        self.match_content_length = _clamp(
            self.match_content_length, 1, MAX_MATCH_CONTENT_LENGTH
        )
        if self.max_files is not None:
            self.max_files = _clamp(self.max_files, 1)
        if self.max_matches_per_file is not None:
            self.max_matches_per_file = _clamp(self.max_matches_per_file, 1)
        if self.sort_by is not None:
            self.sort_by = SortOrder(self.sort_by)

    @property
    def before(self) -> int:
        """Lines of context before each match; the specific setting wins."""
        if self.before_context is not None:
            return max(self.before_context, 0)
        return max(self.context_lines or 0, 0)

    @property
    def after(self) -> int:
        if self.after_context is not None:
            return max(self.after_context, 0)
        return max(self.context_lines or 0, 0)

    @property
    def sort_order(self) -> SortOrder:
        if self.sort_by is not None:
            return self.sort_by
        return SortOrder.MODIFIED if self.show_file_last_modified else SortOrder.PATH

    @property
    def needs_enrichment(self) -> bool:
        return self.show_file_last_modified or self.sort_order is SortOrder.MODIFIED

    def match_page_for(self, path: str) -> int:
        return self.match_pages.get(path, self.match_page_number)

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "SearchQuery":
        """Build a query from the camelCase parameters a client sends."""
        match_pages = params.get("matchPages") or {}
        if not isinstance(match_pages, dict):
            raise ValueError(f"matchPages must be an object, got {match_pages!r}")
        sort_by = params.get("sortBy")
        if sort_by is not None and sort_by not in {s.value for s in SortOrder}:
            raise ValueError(f"sortBy must be 'path' or 'modified', got {sort_by!r}")

        return cls(
            root=Path(params.get("path") or Path.cwd()),
            files_per_page=_as_int(params, "filesPerPage", DEFAULT_FILES_PER_PAGE),
            file_page_number=_as_int(params, "filePageNumber", 1),
            matches_per_page=_as_int(params, "matchesPerPage", DEFAULT_MATCHES_PER_PAGE),
            match_page_number=_as_int(params, "matchPageNumber", 1),
            match_pages={
                str(path): _as_int(match_pages, path, 1) for path in match_pages
            },
            match_content_length=_as_int(
                params, "matchContentLength", DEFAULT_MATCH_CONTENT_LENGTH
            ),
            context_lines=_as_int(params, "contextLines", None),
            before_context=_as_int(params, "beforeContext", None),
            after_context=_as_int(params, "afterContext", None),
            max_files=_as_int(params, "maxFiles", None),
            max_matches_per_file=_as_int(params, "maxMatchesPerFile", None),
            show_file_last_modified=_as_bool(params, "showFileLastModified"),
            sort_by=SortOrder(sort_by) if sort_by is not None else None,
            files_only=_as_bool(params, "filesOnly"),
        )
