"""Base classes and errors for fretlab.

This module provides the error taxonomy shared by the theory modules and the
range check and match failure helper used throughout the package.
"""

from __future__ import annotations

from typing import Any


class FretlabError(Exception):
    """Base class for all errors raised by fretlab."""


class InvalidRangeError(FretlabError, ValueError):
    """Raised when a MIDI number, octave, string or fret index is out of bounds."""

    def __init__(self, what: str, value: int, low: int, high: int) -> None:
        """Initialize the error with the offending value and the valid range.

        Args:
            what: Human-readable name of the quantity (e.g. "MIDI note").
            value: The value that was out of range.
            low: The lowest valid value (inclusive).
            high: The highest valid value (inclusive).
        """
        super().__init__(f"{what} {value} outside of range [{low}, {high}]")
        self.what = what
        self.value = value
        self.low = low
        self.high = high


class UnknownCatalogEntryError(FretlabError, KeyError):
    """Raised when a name is missing from one of the static catalogs."""

    catalog = "catalog"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown {self.catalog} entry: {name}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownScaleError(UnknownCatalogEntryError):
    """Raised when a scale name is not in the scale catalog."""

    catalog = "scale"


class UnknownChordTypeError(UnknownCatalogEntryError):
    """Raised when a chord type is not in the chord catalog."""

    catalog = "chord type"


class MatchException(Exception):
    """Exception raised when pattern matching fails."""

    def __init__(self, value: Any) -> None:
        """Initialize a MatchException with the unmatched value.

        Args:
            value: The value that failed to match any pattern.
        """
        super().__init__(f"Failed to match value: {value}")


def check_range(what: str, value: int, low: int, high: int) -> int:
    """Return the value if it lies in [low, high], else raise.

    Raises:
        InvalidRangeError: If the value is out of range.
    """
    if value < low or value > high:
        raise InvalidRangeError(what, value, low, high)
    return value
