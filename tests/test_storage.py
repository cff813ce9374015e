import json
import os
import stat

import pytest

from library_tracker import storage
from library_tracker.book import Book
from library_tracker.library import Library
from library_tracker.results import StorageError


def _sample_books():
    borrowed = Book("2", "Dune", "Frank Herbert", 1965)
    borrowed.borrow("Paul")
    return [Book("1", "Emma", "Jane Austen", 1815), borrowed]


def test_load_missing_file_is_empty(tmp_path):
    books, warning = storage.load(str(tmp_path / "missing.json"))
    assert books == []
    assert warning is None


def test_save_then_load(tmp_path):
    path = str(tmp_path / "library_data.json")
    storage.save(path, _sample_books())

    books, warning = storage.load(path)
    assert warning is None
    assert books == _sample_books()


def test_saved_document_is_versioned(tmp_path):
    path = str(tmp_path / "library_data.json")
    storage.save(path, _sample_books())

    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    assert document["format"] == "library-tracker"
    assert document["version"] == 1
    assert document["books"][1] == {
        "isbn": "2",
        "title": "Dune",
        "author": "Frank Herbert",
        "year": 1965,
        "available": False,
        "borrower": "Paul",
    }


def test_save_leaves_no_temp_files(tmp_path):
    path = str(tmp_path / "library_data.json")
    storage.save(path, _sample_books())
    storage.save(path, _sample_books()[:1])
    assert os.listdir(tmp_path) == ["library_data.json"]


def test_failed_replace_keeps_previous_file(tmp_path, monkeypatch):
    path = str(tmp_path / "library_data.json")
    storage.save(path, _sample_books())

    def broken_replace(src, dst):
        raise OSError("simulated crash")

    monkeypatch.setattr(storage.os, "replace", broken_replace)
    with pytest.raises(StorageError, match="simulated crash"):
        storage.save(path, [])

    monkeypatch.undo()
    books, warning = storage.load(path)
    assert books == _sample_books()
    assert os.listdir(tmp_path) == ["library_data.json"]


@pytest.mark.parametrize("content", [
    "not json at all",
    "[]",
    '{"format": "library-tracker", "version": 99, "books": []}',
    '{"format": "something-else", "version": 1, "books": []}',
    '{"format": "library-tracker", "version": 1, "books": {}}',
    '{"format": "library-tracker", "version": 1, "books": '
    '[{"isbn": "1", "title": "T", "author": "A", "year": "1999", "available": true, "borrower": null}]}',
    '{"format": "library-tracker", "version": 1, "books": '
    '[{"isbn": "1", "title": "T", "author": "A", "year": 1999, "available": false, "borrower": null}]}',
    '{"format": "library-tracker", "version": 1, "books": '
    '[{"isbn": "1", "title": "T", "author": "A", "year": 1999, "available": true, "borrower": "X"}]}',
    '{"format": "library-tracker", "version": 1, "books": ['
    '{"isbn": "1", "title": "T", "author": "A", "year": 1999, "available": true, "borrower": null},'
    '{"isbn": "1", "title": "U", "author": "B", "year": 2000, "available": true, "borrower": null}]}',
    '{"format": "library-tracker", "version": 1, "books": ['
    '{"isbn": "1", "title": "T", "author": "A", "year": 1999, "available": true, "borrower": null},'
    '{"isbn": " 1 ", "title": "U", "author": "B", "year": 2000, "available": true, "borrower": null}]}',
    pytest.param("1" * 5000, id="oversized-integer"),
    pytest.param("[" * 200000 + "]" * 200000, id="deeply-nested"),
])
def test_corrupt_file_starts_empty_with_warning(tmp_path, caplog, content):
    path = tmp_path / "library_data.json"
    path.write_text(content, encoding="utf-8")

    with caplog.at_level("WARNING"):
        books, warning = storage.load(str(path))
    assert books == []
    assert warning is not None
    assert "Error loading data" in caplog.text


def test_library_survives_corrupt_file(tmp_path):
    path = tmp_path / "library_data.json"
    path.write_text("{broken", encoding="utf-8")

    lib = Library(str(path))
    assert lib.list_all() == ()
    assert lib.load_warning is not None

    # The next mutation rewrites the file with valid content
    assert lib.add("1", "Fresh", "Start", 2024).ok
    assert Library(str(path)).load_warning is None


def test_unwritable_location_raises_storage_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(StorageError):
        storage.save(str(blocker / "library_data.json"), [])


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_save_keeps_file_permissions(tmp_path):
    path = tmp_path / "library_data.json"
    storage.save(str(path), _sample_books())
    assert stat.S_IMODE(path.stat().st_mode) == 0o644

    os.chmod(path, 0o640)
    storage.save(str(path), [])
    assert stat.S_IMODE(path.stat().st_mode) == 0o640
