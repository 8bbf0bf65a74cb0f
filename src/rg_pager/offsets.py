"""Translate ripgrep byte offsets into code-point offsets."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rg_pager.models import Location, Lookup

logger = logging.getLogger(__name__)

Reader = Callable[[Path, int], bytes]


@dataclass(frozen=True)
class ByteSpan:
    """A match position as the engine reported it."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def read_prefix(path: Path, size: int) -> bytes:
    """Read at most ``size`` bytes from the start of ``path``."""
    with open(path, "rb") as f:
        return f.read(size)


def resolve_path(root: Path, path: str) -> Path:
    """Engine paths are relative to the directory the engine ran in."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return root / candidate


def approximate_location(span: ByteSpan) -> Location:
    return Location(
        byte_offset=span.offset,
        char_offset=span.offset,
        char_length=span.length,
        approximate=True,
    )


def map_span(content: bytes, span: ByteSpan) -> Lookup[Location]:
    """Map one byte span onto code points using the file's leading bytes.

    Strict decoding fails whenever an offset lands inside a multi-byte
    sequence or the bytes are not UTF-8, which yields an approximate result.
    """
    if span.end > len(content):
        return Lookup.approximate(approximate_location(span))
    try:
        char_offset = len(content[: span.offset].decode("utf-8"))
        char_length = len(content[span.offset : span.end].decode("utf-8"))
    except UnicodeDecodeError:
        return Lookup.approximate(approximate_location(span))
    return Lookup.available(
        Location(byte_offset=span.offset, char_offset=char_offset, char_length=char_length)
    )


def map_file_spans(
    path: Path,
    spans: list[ByteSpan],
    reader: Reader = read_prefix,
) -> list[Lookup[Location]]:
    """Map every span in one file, reading the file at most once.

    A failed read does not fail any match; each span keeps its byte offset
    and is flagged approximate.
    """
    if not spans:
        return []
    needed = max(span.end for span in spans)
    try:
        content = reader(path, needed)
    except OSError as e:
        logger.debug("Content unavailable for %s, using byte offsets: %s", path, e)
        return [Lookup.approximate(approximate_location(span)) for span in spans]
    return [map_span(content, span) for span in spans]
