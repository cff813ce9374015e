import pytest

from library_tracker.results import ErrorKind
from library_tracker.validators import InputParser


@pytest.mark.parametrize("raw, expected", [("2020", 2020), (" 1999 ", 1999), ("-50", -50)])
def test_parse_year_valid(raw, expected):
    result = InputParser.parse_year(raw)
    assert result.ok
    assert result.value == expected


@pytest.mark.parametrize("raw", ["", "abc", "20.5", None])
def test_parse_year_malformed(raw):
    result = InputParser.parse_year(raw)
    assert not result.ok
    assert result.error is ErrorKind.MALFORMED_INPUT


def test_parse_menu_choice():
    assert InputParser.parse_menu_choice("3").value == 3
    bad = InputParser.parse_menu_choice("three")
    assert bad.error is ErrorKind.MALFORMED_INPUT
    assert bad.message == "Please enter a valid number!"


def test_require_text():
    assert InputParser.require_text("  Bob ", "Borrower").value == "Bob"
    assert InputParser.require_text("   ", "Borrower").error is ErrorKind.MALFORMED_INPUT


@pytest.mark.parametrize("value", ["1999", True, 1999.0, None])
def test_require_year_rejects_non_integers(value):
    assert InputParser.require_year(value).error is ErrorKind.MALFORMED_INPUT


def test_require_year_accepts_int():
    assert InputParser.require_year(1999).value == 1999
