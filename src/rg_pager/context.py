"""Correlate context lines with their matches, one arena per file."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from rg_pager.config import MAX_TRACKED_FILES
from rg_pager.models import (
    ContextEvent,
    EndEvent,
    MatchEvent,
    SearchEvent,
    SummaryEvent,
)
from rg_pager.offsets import ByteSpan

logger = logging.getLogger(__name__)


def strip_line_terminator(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


@dataclass(frozen=True)
class RawMatch:
    """A match line before offset mapping and truncation."""

    line_number: int
    absolute_offset: int
    text: str
    column: int
    match_length: int

    @property
    def span(self) -> ByteSpan:
        return ByteSpan(offset=self.absolute_offset + self.column, length=self.match_length)

    @classmethod
    def from_event(cls, event: MatchEvent) -> "RawMatch":
        if event.submatches:
            first = event.submatches[0]
            column, length = first.start, first.end - first.start
        else:
            column, length = 0, len(strip_line_terminator(event.text).encode("utf-8"))
        return cls(
            line_number=event.line_number,
            absolute_offset=event.absolute_offset,
            text=event.text,
            column=column,
            match_length=length,
        )


@dataclass
class AssembledFile:
    """A finalized file: its matches in order, each with its rendered window."""

    path: str
    matches: list[RawMatch]
    windows: list[str]


@dataclass
class FileArena:
    """Per-file state that lives from the first event for a path to its end.

    ``lines`` holds every line seen for the file, context and match alike,
    since a match line can sit inside another match's window.
    """

    path: str
    lines: dict[int, str] = field(default_factory=dict)
    matches: list[RawMatch] = field(default_factory=list)

    def add_context(self, event: ContextEvent) -> None:
        self.lines[event.line_number] = strip_line_terminator(event.text)

    def add_match(self, event: MatchEvent) -> None:
        self.lines[event.line_number] = strip_line_terminator(event.text)
        self.matches.append(RawMatch.from_event(event))

    def window(self, match: RawMatch, before: int, after: int) -> str:
        """Join the lines around a match that the engine actually sent."""
        present = []
        for n in range(max(match.line_number - before, 1), match.line_number + after + 1):
            if n == match.line_number:
                present.append(strip_line_terminator(match.text))
            elif n in self.lines:
                present.append(self.lines[n])
        return "\n".join(present)

    def finalize(self, before: int, after: int) -> AssembledFile:
        ordered = sorted(self.matches, key=lambda m: (m.line_number, m.absolute_offset))
        return AssembledFile(
            path=self.path,
            matches=ordered,
            windows=[self.window(m, before, after) for m in ordered],
        )


class ContextAssembler:
    """Turn an event stream into finalized per-file match windows.

    Files are finalized on their ``end`` event; files whose events were never
    closed are finalized when the stream runs out, in first-seen order.
    """

    def __init__(self, before: int = 0, after: int = 0, max_files: int = MAX_TRACKED_FILES) -> None:
        self.before = before
        self.after = after
        self.max_files = max_files
        self.summary: SummaryEvent | None = None
        self.warnings: list[str] = []
        self._open: dict[str, FileArena] = {}
        self._seen = 0

    def _arena(self, path: str) -> FileArena | None:
        arena = self._open.get(path)
        if arena is None:
            if self._seen >= self.max_files:
                return None
            arena = FileArena(path)
            self._open[path] = arena
            self._seen += 1
        return arena

    def _close(self, path: str) -> AssembledFile | None:
        arena = self._open.pop(path, None)
        if arena is None or not arena.matches:
            return None
        return arena.finalize(self.before, self.after)

    def assemble(self, events: Iterable[SearchEvent]) -> Iterator[AssembledFile]:
        for event in events:
            if isinstance(event, SummaryEvent):
                self.summary = event
                continue
            if isinstance(event, EndEvent):
                done = self._close(event.path)
                if done is not None:
                    yield done
                continue

            arena = self._arena(event.path)
            if arena is None:
                message = f"Search stopped early: Too many matching files (>{self.max_files})"
                logger.warning(message)
                self.warnings.append(message)
                break
            if isinstance(event, MatchEvent):
                arena.add_match(event)
            elif isinstance(event, ContextEvent):
                arena.add_context(event)

        for path in list(self._open):
            done = self._close(path)
            if done is not None:
                yield done
