"""Parse ripgrep ``--json`` output into typed events."""

import base64
import binascii
import json
import logging
from collections.abc import Iterable, Iterator
from typing import IO, Any

from rg_pager.config import MAX_OUTPUT_BYTES
from rg_pager.errors import OutputTooLargeError
from rg_pager.models import (
    BeginEvent,
    ContextEvent,
    EndEvent,
    MatchEvent,
    SearchEvent,
    Submatch,
    SummaryEvent,
)

logger = logging.getLogger(__name__)

EngineOutput = str | bytes | IO[str] | IO[bytes] | Iterable[str] | Iterable[bytes]


def read_engine_output(stream: IO[bytes] | IO[str], max_bytes: int = MAX_OUTPUT_BYTES) -> bytes:
    """Read a whole engine output stream, refusing anything over ``max_bytes``.

    Raises:
        OutputTooLargeError: If the stream holds more than ``max_bytes``.
    """
    data = stream.read(max_bytes + 1)
    if isinstance(data, str):
        data = data.encode("utf-8")
    if len(data) > max_bytes:
        raise OutputTooLargeError(max_bytes)
    return data


def _iter_lines(source: EngineOutput) -> Iterator[str]:
    if isinstance(source, bytes):
        source = source.decode("utf-8", errors="replace")
    if isinstance(source, str):
        # Only "\n" ends a record; rg leaves U+2028, U+0085 and friends raw
        # inside JSON strings.
        yield from source.split("\n")
        return
    for line in source:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        yield line


def _text_of(value: Any) -> str | None:
    """Extract ripgrep's ``{"text": ...}`` or ``{"bytes": <base64>}`` value."""
    if not isinstance(value, dict):
        return None
    text = value.get("text")
    if isinstance(text, str):
        return text
    raw = value.get("bytes")
    if isinstance(raw, str):
        try:
            return base64.b64decode(raw).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            return None
    return None


def _parse_submatches(raw: Any) -> tuple[Submatch, ...] | None:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        return None
    submatches = []
    for item in raw:
        if not isinstance(item, dict):
            return None
        start, end = item.get("start"), item.get("end")
        if not isinstance(start, int) or not isinstance(end, int) or end < start:
            return None
        submatches.append(Submatch(start=start, end=end, text=_text_of(item.get("match")) or ""))
    return tuple(submatches)


def _parse_line_event(kind: str, data: dict[str, Any]) -> SearchEvent | None:
    path = _text_of(data.get("path"))
    text = _text_of(data.get("lines"))
    line_number = data.get("line_number")
    offset = data.get("absolute_offset")
    if path is None or text is None:
        return None
    if not isinstance(line_number, int) or not isinstance(offset, int):
        return None

    if kind == "context":
        return ContextEvent(path=path, line_number=line_number, absolute_offset=offset, text=text)

    submatches = _parse_submatches(data.get("submatches"))
    if submatches is None:
        return None
    return MatchEvent(
        path=path,
        line_number=line_number,
        absolute_offset=offset,
        text=text,
        submatches=submatches,
    )


def parse_event(line: str) -> SearchEvent | None:
    """Parse one line of engine output.

    Returns None for anything that is not a well-formed ripgrep event:
    blank lines, diagnostics, invalid JSON, and unknown event types.
    """
    line = line.strip()
    if not line or not line.startswith("{"):
        return None

    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        return None

    if not isinstance(record, dict):
        return None
    kind = record.get("type")
    data = record.get("data")
    if not isinstance(data, dict):
        return None

    if kind in ("match", "context"):
        return _parse_line_event(kind, data)

    if kind == "begin":
        path = _text_of(data.get("path"))
        return BeginEvent(path=path) if path is not None else None

    if kind == "end":
        path = _text_of(data.get("path"))
        if path is None:
            return None
        stats = data.get("stats")
        return EndEvent(path=path, stats=stats if isinstance(stats, dict) else None)

    if kind == "summary":
        stats = data.get("stats")
        if not isinstance(stats, dict):
            return None
        elapsed = data.get("elapsed_total")
        return SummaryEvent(stats=stats, elapsed_total=elapsed if isinstance(elapsed, dict) else None)

    return None


def iter_events(source: EngineOutput) -> Iterator[SearchEvent]:
    """Lazily yield events from engine output, skipping malformed lines."""
    for line_num, line in enumerate(_iter_lines(source), 1):
        event = parse_event(line)
        if event is None:
            if line.strip():
                logger.debug("Skipping unparsable engine output line %d", line_num)
            continue
        yield event
