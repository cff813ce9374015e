from typing import Optional

from library_tracker.results import ErrorKind, Result

MENU_CHOICES = range(1, 10)


class InputParser:
    """Turns line-based text input into typed values for catalog operations."""

    @staticmethod
    def parse_int(raw: Optional[str], field: str) -> Result:
        text = (raw or "").strip()
        try:
            return Result.success(int(text))
        except ValueError:
            return Result.failure(ErrorKind.MALFORMED_INPUT, f"{field} must be a whole number, got {text!r}.")

    @staticmethod
    def parse_year(raw: Optional[str]) -> Result:
        return InputParser.parse_int(raw, "Publication year")

    @staticmethod
    def parse_menu_choice(raw: Optional[str]) -> Result:
        """Menu choices are integers; range checking is left to the menu."""
        result = InputParser.parse_int(raw, "Menu choice")
        if not result.ok:
            return Result.failure(ErrorKind.MALFORMED_INPUT, "Please enter a valid number!")
        return result

    @staticmethod
    def require_text(raw: Optional[str], field: str) -> Result:
        text = (raw or "").strip()
        if not text:
            return Result.failure(ErrorKind.MALFORMED_INPUT, f"{field} cannot be empty.")
        return Result.success(text)

    @staticmethod
    def require_year(value: object) -> Result:
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            return Result.failure(ErrorKind.MALFORMED_INPUT,
                                  f"Publication year must be a whole number, got {value!r}.")
        return Result.success(value)
