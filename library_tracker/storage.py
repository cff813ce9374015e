import json
import logging
import os
import stat
import tempfile
from typing import Any, Dict, List, Optional, Tuple

from library_tracker.book import Book
from library_tracker.results import StorageError

logger = logging.getLogger(__name__)

FORMAT_NAME = "library-tracker"
FORMAT_VERSION = 1
DEFAULT_FILE_MODE = 0o644


class CorruptDataError(ValueError):
    """The data file exists but does not hold a valid catalog document."""


def encode_books(books: List[Book]) -> Dict[str, Any]:
    """Build the versioned document written to disk."""
    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "books": [book.to_dict() for book in books],
    }


def decode_books(document: Any) -> List[Book]:
    """Turn a parsed document back into books, rejecting anything inconsistent."""
    if not isinstance(document, dict):
        raise CorruptDataError("top-level value is not an object")
    if document.get("format") != FORMAT_NAME:
        raise CorruptDataError(f"unknown format {document.get('format')!r}")
    if document.get("version") != FORMAT_VERSION:
        raise CorruptDataError(f"unsupported version {document.get('version')!r}")

    records = document.get("books")
    if not isinstance(records, list):
        raise CorruptDataError("'books' is not a list")

    books: List[Book] = []
    seen = set()
    for index, item in enumerate(records):
        if not isinstance(item, dict):
            raise CorruptDataError(f"record {index} is not an object")
        isbn = item.get("isbn")
        title = item.get("title")
        author = item.get("author")
        year = item.get("year")
        available = item.get("available")
        borrower = item.get("borrower")

        if not all(isinstance(v, str) for v in (isbn, title, author)):
            raise CorruptDataError(f"record {index} has non-text isbn/title/author")
        # bool is an int subclass
        if not isinstance(year, int) or isinstance(year, bool):
            raise CorruptDataError(f"record {index} has a non-integer year")
        if not isinstance(available, bool):
            raise CorruptDataError(f"record {index} has a non-boolean availability")
        if available and borrower is not None:
            raise CorruptDataError(f"record {index} is available but has a borrower")
        if not available and not (isinstance(borrower, str) and borrower):
            raise CorruptDataError(f"record {index} is borrowed without a borrower")
        book = Book.from_dict(item)
        # compare on the stripped key the catalog will use
        if book.isbn in seen:
            raise CorruptDataError(f"duplicate ISBN {book.isbn}")
        seen.add(book.isbn)
        books.append(book)
    return books


def load(path: str) -> Tuple[List[Book], Optional[str]]:
    """Read the full record set from ``path``.

    Returns the books and an optional warning. A missing file is a fresh
    catalog; an unreadable or corrupt one is reported and treated as empty.
    """
    if not os.path.exists(path):
        logger.info(f"No existing data file at {path}. Starting fresh library.")
        return [], None

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
        books = decode_books(document)
    # ValueError covers JSONDecodeError, CorruptDataError and oversized integers
    except (OSError, ValueError, RecursionError) as e:
        warning = f"Error loading data from {path}: {e}. Starting with an empty library."
        logger.warning(warning)
        return [], warning

    logger.info(f"Library data loaded successfully ({len(books)} books).")
    return books, None


def _file_mode(path: str) -> int:
    """Permissions for the data file: keep the existing ones, else 0644."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE


def save(path: str, books: List[Book]) -> None:
    """Overwrite ``path`` with the complete record set.

    The document goes to a temporary file in the same directory which then
    replaces ``path``, so a failed write leaves the previous file intact.
    """
    directory = os.path.dirname(os.path.abspath(path))
    payload = json.dumps(encode_books(books), indent=2, ensure_ascii=False)

    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".library_", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _file_mode(path))
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise StorageError(f"Error saving data to {path}: {e}") from e
    finally:
        if tmp_path and os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError as e:
                logger.warning(f"Could not remove temporary file {tmp_path}: {e}")

    logger.info(f"Library data saved successfully ({len(books)} books).")
