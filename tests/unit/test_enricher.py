"""Tests for the enricher module."""

import os
from datetime import datetime, timezone

from rg_pager.enricher import enrich_files, modified_time
from rg_pager.models import FileMatches, LookupState


def test_modified_time_available(temp_dir):
    """Test a readable file yields an ISO-8601 UTC timestamp."""
    path = temp_dir / "a.txt"
    path.write_text("x")
    os.utime(path, (1_700_000_000, 1_700_000_000))

    result = modified_time(path)

    assert result.state is LookupState.AVAILABLE
    assert datetime.fromisoformat(result.value) == datetime.fromtimestamp(
        1_700_000_000, tz=timezone.utc
    )


def test_modified_time_unavailable(temp_dir):
    """Test a missing file is reported unavailable, not raised."""
    result = modified_time(temp_dir / "missing.txt")

    assert result.state is LookupState.UNAVAILABLE
    assert result.value is None


def test_enrich_files_skips_failures(temp_dir):
    """Test only files that can be stat-ed get a timestamp."""
    (temp_dir / "here.txt").write_text("x")
    files = [FileMatches("here.txt", 1), FileMatches("gone.txt", 1)]

    enriched = enrich_files(files, temp_dir)

    assert enriched[0].modified is not None
    assert enriched[1].modified is None
    assert files[0].modified is None


def test_enrich_files_uses_stat_provider(temp_dir):
    """Test a custom stat collaborator is used and its errors are absorbed."""
    calls = []

    def stat(path):
        calls.append(path)
        raise PermissionError("denied")

    files = [FileMatches("a.txt", 1)]
    enriched = enrich_files(files, temp_dir, stat=stat)

    assert calls == [temp_dir / "a.txt"]
    assert enriched[0].modified is None
