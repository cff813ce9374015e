import logging
from typing import Any, Dict, List, Optional, Tuple

from library_tracker import storage
from library_tracker.book import Book
from library_tracker.config import settings
from library_tracker.results import ErrorKind, Result, StorageError
from library_tracker.validators import InputParser

logger = logging.getLogger(__name__)


class Library:
    """Manages the collection of books and data persistence."""

    def __init__(self, data_file: str) -> None:
        self.data_file = data_file
        books, self.load_warning = storage.load(data_file)
        # Insertion order of the dict is the listing order.
        self._books: Dict[str, Book] = {book.isbn: book for book in books}

    @classmethod
    def open(cls, data_file: Optional[str] = None) -> "Library":
        """Build a library backed by ``data_file`` or the configured default."""
        return cls(data_file or settings.data_file)

    def __len__(self) -> int:
        return len(self._books)

    # ------------------------- Core operations ------------------------- #
    def add(self, isbn: str, title: str, author: str, year: int) -> Result:
        """Add a new, available book. Prevent duplicates by ISBN."""
        checked = InputParser.require_year(year)
        if not checked.ok:
            return checked
        book = Book(isbn=isbn, title=title, author=author, year=year)
        if book.isbn in self._books:
            return Result.failure(ErrorKind.DUPLICATE_KEY,
                                  f"Book with ISBN {book.isbn} already exists!")
        self._books[book.isbn] = book
        return self._flush(book.copy())

    def remove(self, isbn: str) -> Result:
        book = self._books.pop(isbn.strip(), None)
        if book is None:
            return self._not_found(isbn)
        return self._flush(book)

    def update(self, isbn: str, title: str, author: str, year: int) -> Result:
        """Overwrite title, author and year. Availability is left alone."""
        book = self._books.get(isbn.strip())
        if book is None:
            return self._not_found(isbn)
        checked = InputParser.require_year(year)
        if not checked.ok:
            return checked
        book.title = title.strip()
        book.author = author.strip()
        book.year = year
        return self._flush(book.copy())

    def borrow(self, isbn: str, borrower: str) -> Result:
        book = self._books.get(isbn.strip())
        if book is None:
            return self._not_found(isbn)
        if not book.available:
            return Result.failure(ErrorKind.UNAVAILABLE, "Book is already borrowed!")
        name = InputParser.require_text(borrower, "Borrower name")
        if not name.ok:
            return name
        book.borrow(name.value)
        return self._flush(book.copy())

    def return_book(self, isbn: str) -> Result:
        """Mark a book available again. Returning an available book is allowed."""
        book = self._books.get(isbn.strip())
        if book is None:
            return self._not_found(isbn)
        book.give_back()
        return self._flush(book.copy())

    def find(self, isbn: str) -> Result:
        book = self._books.get(isbn.strip())
        if book is None:
            return self._not_found(isbn)
        return Result.success(book.copy())

    def list_all(self) -> Tuple[Book, ...]:
        """All books in insertion order, as copies."""
        return tuple(book.copy() for book in self._books.values())

    # ------------------------- Search ------------------------- #
    def search_by_title(self, keyword: str) -> List[Book]:
        keyword = keyword.lower()
        return [b.copy() for b in self._books.values() if keyword in b.title.lower()]

    def search_by_author(self, keyword: str) -> List[Book]:
        keyword = keyword.lower()
        return [b.copy() for b in self._books.values() if keyword in b.author.lower()]

    def search_with_scoring(self, query: str) -> List[Tuple[Book, int]]:
        """Rank books by keyword overlap.

        Each query token found in the title, author or ISBN is worth 3 points,
        plus 2 more when it is in the title. Books scoring 0 are dropped; equal
        scores keep catalog order.
        """
        keywords = query.lower().split()
        scored: List[Tuple[Book, int]] = []
        for book in self._books.values():
            title = book.title.lower()
            book_text = f"{book.title} {book.author} {book.isbn}".lower()
            score = 0
            for keyword in keywords:
                if keyword in book_text:
                    score += 3
                    if keyword in title:
                        score += 2
            if score > 0:
                scored.append((book.copy(), score))
        # sorted() is stable
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def statistics(self) -> Dict[str, Any]:
        """Get library statistics."""
        books = list(self._books.values())
        borrowed = sum(1 for b in books if not b.available)
        return {
            "total_books": len(books),
            "available_books": len(books) - borrowed,
            "borrowed_books": borrowed,
            "unique_authors": len({b.author.lower() for b in books}),
        }

    # ------------------------- Persistence ------------------------- #
    def _flush(self, value: Any) -> Result:
        try:
            storage.save(self.data_file, list(self._books.values()))
        except StorageError as e:
            logger.warning(f"{e}. Changes are kept in memory only.")
            return Result.success(value, warning=str(e))
        return Result.success(value)

    @staticmethod
    def _not_found(isbn: str) -> Result:
        return Result.failure(ErrorKind.NOT_FOUND, f"Book with ISBN {isbn.strip()} not found!")
