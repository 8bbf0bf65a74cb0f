"""Data models for rg-pager."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


# Engine events


@dataclass(frozen=True)
class Submatch:
    """A byte range within a line where the pattern matched."""

    start: int
    end: int
    text: str = ""


@dataclass(frozen=True)
class BeginEvent:
    path: str


@dataclass(frozen=True)
class MatchEvent:
    """A matching line. Offsets are bytes; ``line_number`` is 1-based."""

    path: str
    line_number: int
    absolute_offset: int
    text: str
    submatches: tuple[Submatch, ...] = ()


@dataclass(frozen=True)
class ContextEvent:
    path: str
    line_number: int
    absolute_offset: int
    text: str


@dataclass(frozen=True)
class EndEvent:
    path: str
    stats: dict[str, Any] | None = None


@dataclass(frozen=True)
class SummaryEvent:
    """End-of-search statistics, kept exactly as the engine reported them."""

    stats: dict[str, Any]
    elapsed_total: dict[str, Any] | None = None


SearchEvent = Union[BeginEvent, MatchEvent, ContextEvent, EndEvent, SummaryEvent]


# Best-effort lookups


class LookupState(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    APPROXIMATE = "approximate"


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Outcome of an optional I/O step that must not fail the result.

    ``value`` is set for AVAILABLE and APPROXIMATE, and None for UNAVAILABLE.
    """

    state: LookupState
    value: T | None = None

    @classmethod
    def available(cls, value: T) -> "Lookup[T]":
        return cls(LookupState.AVAILABLE, value)

    @classmethod
    def approximate(cls, value: T) -> "Lookup[T]":
        return cls(LookupState.APPROXIMATE, value)

    @classmethod
    def unavailable(cls) -> "Lookup[T]":
        return cls(LookupState.UNAVAILABLE)

    @property
    def is_available(self) -> bool:
        return self.state is LookupState.AVAILABLE


# Result records


@dataclass(frozen=True)
class Location:
    """Where a match starts, in bytes and in code points."""

    byte_offset: int
    char_offset: int
    char_length: int
    approximate: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "byteOffset": self.byte_offset,
            "charOffset": self.char_offset,
            "charLength": self.char_length,
            "approximate": self.approximate,
        }


@dataclass(frozen=True)
class MatchEntry:
    line: int
    column: int
    value: str
    location: Location

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "value": self.value,
            "location": self.location.to_dict(),
        }


@dataclass(frozen=True)
class Pagination:
    """Position on one pagination axis (files, or matches within a file)."""

    current_page: int
    total_pages: int
    per_page: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages

    def to_dict(self, per_page_key: str, total_key: str) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            per_page_key: self.per_page,
            total_key: self.total,
            "hasMore": self.has_more,
        }


@dataclass(frozen=True)
class FileMatches:
    """All matches found in one file.

    ``match_count`` is the total before match pagination (after the
    maxMatchesPerFile ceiling); ``matches`` holds only the selected page.
    Stages derive new instances with ``dataclasses.replace``.
    """

    path: str
    match_count: int
    matches: tuple[MatchEntry, ...] = ()
    pagination: Pagination | None = None
    modified: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "matchCount": self.match_count,
            "matches": [m.to_dict() for m in self.matches],
        }
        if self.modified is not None:
            data["modified"] = self.modified
        if self.pagination is not None:
            data["pagination"] = self.pagination.to_dict("matchesPerPage", "totalMatches")
        return data


class ResultStatus(str, Enum):
    HAS_RESULTS = "hasResults"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class SearchResult:
    """The assembled answer to one query."""

    status: ResultStatus
    files: tuple[FileMatches, ...] = ()
    total_files: int = 0
    total_matches: int = 0
    pagination: Pagination | None = None
    hints: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    stats: dict[str, Any] | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "files": [f.to_dict() for f in self.files],
            "totalFiles": self.total_files,
            "totalMatches": self.total_matches,
        }
        if self.pagination is not None:
            data["pagination"] = self.pagination.to_dict("filesPerPage", "totalFiles")
        data["hints"] = list(self.hints)
        if self.warnings:
            data["warnings"] = list(self.warnings)
        if self.stats is not None:
            data["stats"] = self.stats
        if self.error is not None:
            data["error"] = self.error
        if self.error_code is not None:
            data["errorCode"] = self.error_code
        return data
