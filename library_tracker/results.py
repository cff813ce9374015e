from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Expected failure conditions reported by catalog operations."""

    DUPLICATE_KEY = "duplicate_key"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    MALFORMED_INPUT = "malformed_input"


@dataclass(frozen=True)
class Result:
    """Outcome of a catalog operation.

    ``ok`` results carry ``value``; failed ones carry ``error`` and a
    human-readable ``message``. ``warning`` is set on a successful mutation
    whose flush to disk did not go through.
    """

    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""
    warning: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None, warning: Optional[str] = None) -> "Result":
        return cls(ok=True, value=value, warning=warning)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "Result":
        return cls(ok=False, error=error, message=message)


class StorageError(Exception):
    """Raised by the persistence layer when the data file cannot be written."""
