"""CLI for rg-pager."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from rg_pager import __version__
from rg_pager.config import MAX_OUTPUT_BYTES, SearchQuery, SortOrder
from rg_pager.errors import PathValidationError

app = typer.Typer(
    name="rg-pager",
    help="Aggregate and paginate ripgrep --json output.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    if value:
        console.print(f"rg-pager {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Aggregate and paginate ripgrep --json output."""
    pass


def events_source(events: Path, root: Path):
    """Build the callable that validates the root and reads captured output."""
    from rg_pager.parser import read_engine_output

    def source() -> bytes:
        if not root.is_dir():
            raise PathValidationError(f"Search path is not a directory: {root}")
        if str(events) == "-":
            return read_engine_output(sys.stdin.buffer, MAX_OUTPUT_BYTES)
        with open(events, "rb") as f:
            return read_engine_output(f, MAX_OUTPUT_BYTES)

    return source


@app.command()
def page(
    events: Annotated[
        Path, typer.Argument(help="File with rg --json output ('-' for stdin)")
    ] = Path("-"),
    path: Annotated[
        Path, typer.Option("--path", "-p", help="Directory ripgrep searched from")
    ] = Path("."),
    files_per_page: Annotated[int, typer.Option("--files-per-page", help="filesPerPage")] = 10,
    file_page: Annotated[int, typer.Option("--file-page", help="filePageNumber")] = 1,
    matches_per_page: Annotated[
        int, typer.Option("--matches-per-page", help="matchesPerPage")
    ] = 10,
    match_page: Annotated[int, typer.Option("--match-page", help="matchPageNumber")] = 1,
    content_length: Annotated[
        int, typer.Option("--content-length", help="matchContentLength (1-800)")
    ] = 200,
    context: Annotated[
        int | None, typer.Option("--context", "-C", help="Lines before and after each match")
    ] = None,
    before: Annotated[int | None, typer.Option("--before", "-B", help="Lines before")] = None,
    after: Annotated[int | None, typer.Option("--after", "-A", help="Lines after")] = None,
    max_files: Annotated[int | None, typer.Option("--max-files", help="maxFiles")] = None,
    max_matches_per_file: Annotated[
        int | None, typer.Option("--max-matches-per-file", help="maxMatchesPerFile")
    ] = None,
    modified: Annotated[
        bool, typer.Option("--modified", "-m", help="Show file last-modified times")
    ] = False,
    sort_by: Annotated[
        SortOrder | None, typer.Option("--sort-by", help="Order files by path or modified")
    ] = None,
    files_only: Annotated[
        bool, typer.Option("--files-only", help="List matching files without match bodies")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Debug logging")] = False,
) -> None:
    """Paginate one captured ripgrep run."""
    setup_logging(verbose)
    from rg_pager.engine import run_search
    from rg_pager.render import format_human_output, format_json_output

    query = SearchQuery(
        root=path,
        files_per_page=files_per_page,
        file_page_number=file_page,
        matches_per_page=matches_per_page,
        match_page_number=match_page,
        match_content_length=content_length,
        context_lines=context,
        before_context=before,
        after_context=after,
        max_files=max_files,
        max_matches_per_file=max_matches_per_file,
        show_file_last_modified=modified,
        sort_by=sort_by,
        files_only=files_only,
    )
    try:
        result = run_search(events_source(events, path), query)
    except OSError as e:
        err_console.print(f"[red]Error: cannot read events: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    if json_output:
        format_json_output(result.to_dict())
    else:
        format_human_output(result)
    if result.error_code:
        raise typer.Exit(1)


def load_bulk_queries(queries_file: Path) -> list[dict[str, Any]]:
    with open(queries_file, encoding="utf-8") as f:
        entries = json.load(f)
    if isinstance(entries, dict):
        entries = entries.get("queries", [])
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError("Expected a list of query objects")
    return entries


@app.command()
def bulk(
    queries_file: Annotated[
        Path, typer.Argument(help="JSON list of queries, each with an 'events' file")
    ],
    verbose: Annotated[bool, typer.Option("--verbose", help="Debug logging")] = False,
) -> None:
    """Run several queries concurrently and print one merged JSON response."""
    setup_logging(verbose)
    from rg_pager.engine import bulk_response, run_bulk
    from rg_pager.render import format_json_output

    try:
        entries = load_bulk_queries(queries_file)
        requests = []
        for entry in entries:
            query = SearchQuery.from_params(entry)
            requests.append((events_source(Path(entry.get("events", "-")), query.root), query))
    except (OSError, ValueError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    format_json_output(bulk_response(run_bulk(requests)))


if __name__ == "__main__":
    app()
