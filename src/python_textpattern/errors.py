"""
Custom exception classes for python_textpattern package.

Every error is raised synchronously and before any range mutation, so a
failed call leaves the range exactly as it was. Clamping at the store edges
during movement is never an error; it shows up as a smaller moved count.
"""

from typing import Any


class TextPatternError(Exception):
    """Base exception for all python_textpattern errors."""

    pass


class InvalidRangeError(TextPatternError, ValueError):
    """Raised when a range is built or mutated with impossible offsets.

    Attributes:
        start: The requested start offset
        end: The requested end offset
    """

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message naming the offending offsets."""
        if self.start < 0:
            return f"Invalid text range offset: start {self.start} is negative"
        return f"Invalid text range offset: end {self.end} is before start {self.start}"


class OutOfStoreError(TextPatternError):
    """Raised when a range endpoint lies beyond the store's current length.

    This is how stale ranges are detected after the underlying text shrinks.

    Attributes:
        start: Range start offset
        end: Range end offset
        length: Current length of the store
    """

    def __init__(self, start: int, end: int, length: int) -> None:
        self.start = start
        self.end = end
        self.length = length
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message with the stale endpoints."""
        return (
            f"Range [{self.start}, {self.end}) is out of the store "
            f"(current length {self.length})\n\n"
            "The text changed after this range was created; "
            "request a fresh range from the provider."
        )


class UnsupportedUnitError(TextPatternError, ValueError):
    """Raised when a text unit value is not recognized.

    Attributes:
        unit: The unit value that was rejected
    """

    def __init__(self, unit: Any) -> None:
        self.unit = unit
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message listing the accepted units."""
        from .types import TextUnit

        valid = ", ".join(u.value for u in TextUnit)
        return f"Unsupported text unit: {self.unit!r}\n\nValid units: {valid}"


class InvalidArgumentError(TextPatternError, ValueError):
    """Raised for missing search text or ranges from another store."""

    pass


class UnsupportedOperationError(TextPatternError):
    """Raised for operations outside the single-range selection model.

    Attributes:
        operation: Name of the rejected operation
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"{operation} is not supported: text ranges expose a single-range selection"
        )


class SettingsError(TextPatternError):
    """Raised when a settings file cannot be read or has the wrong shape."""

    pass


class DocumentLoadError(TextPatternError):
    """Raised when a document cannot be loaded into a text store."""

    pass
