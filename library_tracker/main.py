import logging
from typing import Callable, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from library_tracker.config import settings
from library_tracker.library import Library
from library_tracker.results import Result
from library_tracker.ui_helpers import (
    print_list_result,
    print_scored_result,
    print_stats_result,
    set_output_mode,
)
from library_tracker.validators import MENU_CHOICES, InputParser

console = Console()

# --- Typer CLI Application ---
app = typer.Typer(help="Library catalog CLI")


def _get_library(ctx: typer.Context) -> Library:
    return ctx.obj["library"]


def _report(result: Result, success_message: str) -> None:
    """Print the outcome of a catalog operation."""
    if not result.ok:
        console.print(f"[red]Error:[/] {escape(result.message)}")
        return
    print(success_message)
    if result.warning:
        console.print(f"[yellow]Warning:[/] {escape(result.warning)}")


def _parse_year(raw: str) -> Optional[int]:
    parsed = InputParser.parse_year(raw)
    if not parsed.ok:
        console.print(f"[red]Error:[/] {escape(parsed.message)}")
        return None
    return parsed.value


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    data_file: Optional[str] = typer.Option(
        None,
        "--data-file",
        help="Catalog data file (default: LIBRARY_DATA_FILE or library_data.json)",
    ),
):
    """Global options for the CLI (output mode, data file)."""
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.WARNING))
    if output:
        set_output_mode(output)
    library = Library.open(data_file)
    if library.load_warning:
        console.print(f"[yellow]Warning:[/] {escape(library.load_warning)}")
    ctx.obj = {"library": library}


@app.command("add")
def cli_add(ctx: typer.Context, isbn: str, title: str, author: str, year: str):
    """Add a new book to the catalog."""
    parsed_year = _parse_year(year)
    if parsed_year is None:
        return
    result = _get_library(ctx).add(isbn, title, author, parsed_year)
    _report(result, "Book added successfully!")


@app.command("remove")
def cli_remove(ctx: typer.Context, isbn: str):
    """Remove a book by ISBN."""
    result = _get_library(ctx).remove(isbn)
    _report(result, "Book removed successfully!")


@app.command("update")
def cli_update(ctx: typer.Context, isbn: str, title: str, author: str, year: str):
    """Update title, author and publication year of a book."""
    parsed_year = _parse_year(year)
    if parsed_year is None:
        return
    result = _get_library(ctx).update(isbn, title, author, parsed_year)
    _report(result, "Book updated successfully!")


@app.command("borrow")
def cli_borrow(ctx: typer.Context, isbn: str, borrower: str):
    """Lend a book to a borrower."""
    result = _get_library(ctx).borrow(isbn, borrower)
    _report(result, "Book borrowed successfully!")


@app.command("return")
def cli_return(ctx: typer.Context, isbn: str):
    """Return a borrowed book."""
    result = _get_library(ctx).return_book(isbn)
    _report(result, "Book returned successfully!")


@app.command("find")
def cli_find(ctx: typer.Context, isbn: str):
    """Find a book by ISBN and show its details."""
    result = _get_library(ctx).find(isbn)
    if not result.ok:
        console.print(f"[red]Error:[/] {escape(result.message)}")
        return
    print(str(result.value))


@app.command("list")
def cli_list(ctx: typer.Context):
    """List all books in insertion order."""
    print_list_result(_get_library(ctx).list_all())


@app.command("search")
def cli_search(ctx: typer.Context, term: str):
    """Search books by title and by author."""
    lib = _get_library(ctx)
    print("Matching by Title:")
    print_list_result(lib.search_by_title(term), empty_message="No matching books.")
    print("Matching by Author:")
    print_list_result(lib.search_by_author(term), empty_message="No matching books.")


@app.command("score")
def cli_score(ctx: typer.Context, query: str):
    """Keyword search ranked by relevance score."""
    print_scored_result(_get_library(ctx).search_with_scoring(query))


@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show library statistics."""
    print_stats_result(_get_library(ctx).statistics())


# ------------------------- Interactive menu ------------------------- #
MENU_TEXT = f"""
===== {settings.app_name} =====
1. Add New Book
2. Search Books
3. Update Book Details
4. Remove Book
5. Borrow Book
6. Return Book
7. List All Books
8. Advanced Search
9. Exit"""


def _menu_add(lib: Library) -> None:
    console.print("\n--- Add New Book ---")
    isbn = Prompt.ask("Enter ISBN")
    title = Prompt.ask("Enter Title")
    author = Prompt.ask("Enter Author")
    year = _parse_year(Prompt.ask("Enter Publication Year"))
    if year is None:
        return
    _report(lib.add(isbn, title, author, year), "Book added successfully!")


def _menu_search(lib: Library) -> None:
    console.print("\n--- Search Books ---")
    term = Prompt.ask("Enter search term", default="", show_default=False)
    print("\nMatching by Title:")
    print_list_result(lib.search_by_title(term), empty_message="No matching books.")
    print("\nMatching by Author:")
    print_list_result(lib.search_by_author(term), empty_message="No matching books.")


def _menu_update(lib: Library) -> None:
    console.print("\n--- Update Book ---")
    isbn = Prompt.ask("Enter ISBN of book to update")
    title = Prompt.ask("Enter new title")
    author = Prompt.ask("Enter new author")
    year = _parse_year(Prompt.ask("Enter new publication year"))
    if year is None:
        return
    _report(lib.update(isbn, title, author, year), "Book updated successfully!")


def _menu_remove(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN of book to remove")
    _report(lib.remove(isbn), "Book removed successfully!")


def _menu_borrow(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN of book to borrow")
    borrower = Prompt.ask("Enter borrower name")
    _report(lib.borrow(isbn, borrower), "Book borrowed successfully!")


def _menu_return(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN of book to return")
    _report(lib.return_book(isbn), "Book returned successfully!")


def _menu_list(lib: Library) -> None:
    console.print("\n--- All Books ---")
    print_list_result(lib.list_all())


def _menu_advanced_search(lib: Library) -> None:
    console.print("\n--- Advanced Search ---")
    query = Prompt.ask("Enter search keywords", default="", show_default=False)
    print_scored_result(lib.search_with_scoring(query))


MENU_ACTIONS: Dict[int, Callable[[Library], None]] = {
    1: _menu_add,
    2: _menu_search,
    3: _menu_update,
    4: _menu_remove,
    5: _menu_borrow,
    6: _menu_return,
    7: _menu_list,
    8: _menu_advanced_search,
}


def run_menu(lib: Library) -> None:
    """Line-based menu loop; returns on choice 9 or end of input."""
    while True:
        console.print(MENU_TEXT)
        try:
            raw = Prompt.ask("Enter choice")
        except EOFError:
            break

        choice = InputParser.parse_menu_choice(raw)
        if not choice.ok:
            console.print(f"[red]{escape(choice.message)}[/]")
            continue
        if choice.value == 9:
            print("Exiting system...")
            break
        if choice.value not in MENU_CHOICES:
            print("Invalid choice!")
            continue
        try:
            MENU_ACTIONS[choice.value](lib)
        except EOFError:
            break


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(_get_library(ctx))


if __name__ == "__main__":
    app()
