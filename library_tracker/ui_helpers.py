import json
import os
from typing import Any, Dict, List, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from library_tracker.book import Book
from library_tracker.config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()


def print_list_result(books: Sequence[Book], empty_message: str = "No books in library.") -> None:
    """Print books in the current output mode.
    - plain: 'ISBN | Title | Author | Year | Status' lines
    - json: JSON array of book records
    - rich: Rich table
    """
    if not books:
        print(empty_message)
        return

    mode = get_output_mode()
    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Status")
        for b in books:
            status = escape(b.status)
            status = f"[green]{status}[/]" if b.available else f"[yellow]{status}[/]"
            table.add_row(escape(b.isbn), escape(b.title), escape(b.author), str(b.year), status)
        _console.print(table)
    else:
        for b in books:
            print(b.summary_line())


def print_scored_result(scored: List[Tuple[Book, int]]) -> None:
    """Print scored search results, best match first."""
    if not scored:
        print("No matching books.")
        return

    mode = get_output_mode()
    if mode == "json":
        payload = [dict(book.to_dict(), score=score) for book, score in scored]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="🔎 Search Results", header_style="bold cyan")
        table.add_column("Score", justify="right", style="bold")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title")
        table.add_column("Author")
        table.add_column("Status")
        for book, score in scored:
            table.add_row(str(score), escape(book.isbn), escape(book.title), escape(book.author),
                          escape(book.status))
        _console.print(table)
    else:
        for book, score in scored:
            print(f"Score: {score} | {book.summary_line()}")


def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics in the current output mode."""
    if not stats:
        print("No statistics available.")
        return

    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {stats['total_books']}\n"
            f"[bold]Available:[/] {stats['available_books']}\n"
            f"[bold]Borrowed:[/] {stats['borrowed_books']}\n"
            f"[bold]Unique Authors:[/] {stats['unique_authors']}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {stats['total_books']}")
        print(f"Available: {stats['available_books']}")
        print(f"Borrowed: {stats['borrowed_books']}")
        print(f"Unique Authors: {stats['unique_authors']}")
