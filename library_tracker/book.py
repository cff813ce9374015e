from __future__ import annotations


class Book:
    """Represents a single book item in the catalog."""

    def __init__(self, isbn: str, title: str, author: str, year: int,
                 available: bool = True, borrower: str | None = None) -> None:
        self.isbn = isbn.strip()
        self.title = title.strip()
        self.author = author.strip()
        self.year = year
        self.available = available
        self.borrower = borrower if not available else None

    def __str__(self) -> str:
        return self.summary_line()

    def __repr__(self) -> str:
        return (f"Book(isbn={self.isbn!r}, title={self.title!r}, author={self.author!r}, "
                f"year={self.year!r}, available={self.available!r}, borrower={self.borrower!r})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # mutable record

    @property
    def status(self) -> str:
        return "Available" if self.available else f"Borrowed by: {self.borrower}"

    def summary_line(self) -> str:
        return f"{self.isbn} | {self.title} | {self.author} | {self.year} | {self.status}"

    def borrow(self, borrower: str) -> None:
        self.available = False
        self.borrower = borrower

    def give_back(self) -> None:
        self.available = True
        self.borrower = None

    def copy(self) -> "Book":
        return Book.from_dict(self.to_dict())

    def to_dict(self) -> dict:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "year": self.year,
            "available": self.available,
            "borrower": self.borrower,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            isbn=data["isbn"],
            title=data["title"],
            author=data["author"],
            year=data["year"],
            available=data.get("available", True),
            borrower=data.get("borrower"),
        )
