"""Best-effort last-modified timestamps for result files."""

import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from rg_pager.models import FileMatches, Lookup
from rg_pager.offsets import resolve_path

logger = logging.getLogger(__name__)

StatProvider = Callable[[Path], os.stat_result]


def modified_time(path: Path, stat: StatProvider = os.stat) -> Lookup[str]:
    """Return the file's mtime as an ISO-8601 UTC string, if it can be stat-ed."""
    try:
        st = stat(path)
    except OSError as e:
        logger.debug("Stat failed for %s: %s", path, e)
        return Lookup.unavailable()
    return Lookup.available(
        datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).isoformat()
    )


def enrich_files(
    files: Iterable[FileMatches], root: Path, stat: StatProvider = os.stat
) -> list[FileMatches]:
    """Return the files with ``modified`` attached wherever a stat succeeds."""
    enriched = []
    for f in files:
        if f.modified is None:
            result = modified_time(resolve_path(root, f.path), stat)
            if result.is_available:
                f = replace(f, modified=result.value)
        enriched.append(f)
    return enriched
