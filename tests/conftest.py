"""Pytest fixtures for rg-pager tests."""

import json
import tempfile
from pathlib import Path

import pytest


def rg_begin(path: str) -> str:
    return json.dumps({"type": "begin", "data": {"path": {"text": path}}})


def rg_end(path: str) -> str:
    return json.dumps({"type": "end", "data": {"path": {"text": path}, "stats": {"matches": 1}}})


def rg_match(path: str, line_number: int, text: str, pattern: str, absolute_offset: int = 0) -> str:
    """A match event with submatches at every occurrence of ``pattern``.

    Submatch offsets are bytes, the way ripgrep reports them.
    """
    line_bytes = text.encode("utf-8")
    needle = pattern.encode("utf-8")
    submatches = []
    start = line_bytes.find(needle)
    while start != -1:
        submatches.append(
            {"match": {"text": pattern}, "start": start, "end": start + len(needle)}
        )
        start = line_bytes.find(needle, start + len(needle))
    return json.dumps(
        {
            "type": "match",
            "data": {
                "path": {"text": path},
                "lines": {"text": text + "\n"},
                "line_number": line_number,
                "absolute_offset": absolute_offset,
                "submatches": submatches,
            },
        }
    )


def rg_context(path: str, line_number: int, text: str, absolute_offset: int = 0) -> str:
    return json.dumps(
        {
            "type": "context",
            "data": {
                "path": {"text": path},
                "lines": {"text": text + "\n"},
                "line_number": line_number,
                "absolute_offset": absolute_offset,
                "submatches": [],
            },
        }
    )


def rg_summary(matches: int) -> str:
    return json.dumps(
        {
            "type": "summary",
            "data": {
                "elapsed_total": {"human": "0.01s", "secs": 0, "nanos": 10},
                "stats": {"matches": matches, "matched_lines": matches, "searches": 1},
            },
        }
    )


def rg_file_output(root: Path, name: str, lines: list[str], pattern: str) -> list[str]:
    """Write ``lines`` to ``root/name`` and return ripgrep events for ``pattern``.

    Offsets are computed from the real file bytes.
    """
    content = "".join(line + "\n" for line in lines)
    (root / name).write_text(content, encoding="utf-8")

    events = [rg_begin(name)]
    offset = 0
    for number, line in enumerate(lines, 1):
        if pattern in line:
            events.append(rg_match(name, number, line, pattern, absolute_offset=offset))
        offset += len(line.encode("utf-8")) + 1
    events.append(rg_end(name))
    return events


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def many_files_output():
    """Engine output for 25 files with 3 matches each, no files on disk."""
    events = []
    for i in range(25):
        path = f"src/file_{i:02d}.py"
        events.append(rg_begin(path))
        for line in (3, 7, 12):
            events.append(rg_match(path, line, f"value = find_me({line})", "find_me"))
        events.append(rg_end(path))
    events.append(rg_summary(75))
    return "\n".join(events) + "\n"
