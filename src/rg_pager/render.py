"""Console output for search results."""

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from rg_pager.models import FileMatches, ResultStatus, SearchResult

console = Console()


def format_json_output(data: dict[str, Any]) -> None:
    """Print a result (or bulk response) as JSON for programmatic use."""
    console.print_json(data=data)


def _file_panel(f: FileMatches) -> Panel:
    body = Text()
    for i, match in enumerate(f.matches):
        if i:
            body.append("\n")
        body.append(f"{match.line}:{match.column} ", style="bold cyan")
        body.append(match.value)
        if match.location.approximate:
            body.append("  (approximate offset)", style="dim")

    header = Text()
    header.append(f.path, style="green")
    header.append(f" | {f.match_count} matches", style="dim")
    if f.modified:
        header.append(f" | {f.modified}", style="dim")

    subtitle = None
    if f.pagination is not None:
        subtitle = f"match page {f.pagination.current_page}/{f.pagination.total_pages}"
    return Panel(body, title=header, subtitle=subtitle, subtitle_align="left")


def format_human_output(result: SearchResult) -> None:
    """Format a result for human-readable output."""
    if result.status is ResultStatus.ERROR:
        console.print(f"[red]Error ({result.error_code or 'UNKNOWN'}): {result.error}[/red]")
    elif result.status is ResultStatus.EMPTY:
        console.print("[yellow]No matches found.[/yellow]")

    for f in result.files:
        console.print(_file_panel(f))
        console.print()

    if result.status is ResultStatus.HAS_RESULTS:
        console.print("─" * 50)
        console.print(f"{result.total_matches} matches across {result.total_files} files")

    for hint in result.hints:
        console.print(f"[dim]{hint}[/dim]")
