"""Package-specific exception types."""

from __future__ import annotations


class WrapError(ValueError):
    """Base class for wrapping-related errors.

    The Markdown classifier itself never raises; these come from the wrapper
    that consumes it.
    """


class LineTooLongError(WrapError):
    """Raised when an input line exceeds the configured maximum length.

    Args:
        line_number: One-based index of the offending line.
        max_line_length: Maximum allowed line length in characters.
    """

    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Line {self.line_number} exceeds maximum allowed length "
            f"of {self.max_line_length} characters"
        )


class WidthTooSmallError(WrapError):
    """Raised when indentation leaves too little room for text.

    Args:
        width: Columns left for text.
        minimum: Smallest acceptable width.
    """

    def __init__(self, width: int, minimum: int):
        self.width = width
        self.minimum = minimum
        super().__init__(f"line-width ({self.width}) is too small (<{self.minimum})")
