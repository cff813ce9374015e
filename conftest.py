import pytest

from library_tracker.library import Library


@pytest.fixture
def data_file(tmp_path):
    # Each test gets its own catalog file
    return str(tmp_path / "library_data.json")


@pytest.fixture
def lib(data_file):
    return Library(data_file)
