"""Constants shared by the fretlab theory modules.

MIDI bounds, octave limits, note name tables and the shipped tunings.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Tuple, Type, TypeVar

E = TypeVar("E", bound=Enum)
"""Type variable for enum types."""


def make_enum_value_lookup(enum_type: Type[E]) -> Dict[int, E]:
    """Create a reverse lookup dictionary from enum values to enum instances.

    Args:
        enum_type: The enum class to create a lookup for.

    Returns:
        A dictionary mapping enum values to enum instances.
    """
    lookup: Dict[int, E] = {}
    for enum_val in enum_type.__members__.values():
        lookup[enum_val.value] = enum_val
    return lookup


MAX_NOTES = 12
"""Number of pitch classes in an octave."""

MIDI_MIN = 0
"""Lowest supported MIDI note number."""
MIDI_MAX = 127
"""Highest supported MIDI note number."""

MIN_OCTAVE = 0
"""Lowest octave offered for selection."""
MAX_OCTAVE = 8
"""Highest octave offered for selection."""
DEFAULT_OCTAVE = 3
"""Octave used when a selection is empty or a name has no octave."""

A440_HZ = 440.0
"""Reference frequency of A4."""
A440_MIDI = 69
"""MIDI number of A4."""

DEFAULT_FRET_COUNT = 12
MAX_FRETS = 24
DEFAULT_ROOT = "C"
DEFAULT_SCALE = "Major"
DEFAULT_CHORD = "major"
MAX_CHORD_INVERSIONS = 6
MAX_EXTENDED_INTERVAL = 48
"""Extended intervals (semitones above the root) selectable in interval mode."""

SHARP_NOTE_NAMES: Tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)
"""Pitch class names spelled with sharps."""

FLAT_NOTE_NAMES: Tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)
"""Pitch class names spelled with flats."""

FLAT_ROOTS: FrozenSet[str] = frozenset(["F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"])
"""Key roots whose signatures are written with flats."""

INTERVAL_LABELS: Tuple[str, ...] = (
    "R", "b2", "2", "b3", "3", "4", "b5", "5", "b6", "6", "b7", "7",
)
"""Short labels for the simple intervals above a root."""

INTERVAL_NAMES: Tuple[str, ...] = (
    "Unison",
    "Minor 2nd",
    "Major 2nd",
    "Minor 3rd",
    "Major 3rd",
    "Perfect 4th",
    "Tritone",
    "Perfect 5th",
    "Minor 6th",
    "Major 6th",
    "Minor 7th",
    "Major 7th",
)
"""Long names for the simple intervals above a root."""

STANDARD_TUNINGS: Dict[str, List[str]] = {
    "Guitar (6-string)": ["E2", "A2", "D3", "G3", "B3", "E4"],
    "Guitar (7-string)": ["B1", "E2", "A2", "D3", "G3", "B3", "E4"],
    "Guitar (8-string)": ["F#1", "B1", "E2", "A2", "D3", "G3", "B3", "E4"],
    "Bass (4-string)": ["E1", "A1", "D2", "G2"],
    "Bass (5-string)": ["B0", "E1", "A1", "D2", "G2"],
    "Bass (6-string)": ["B0", "E1", "A1", "D2", "G2", "C3"],
    "Ukulele": ["G4", "C4", "E4", "A4"],
    "Mandolin": ["G3", "D4", "A4", "E5"],
    "Banjo (5-string)": ["G4", "D3", "G3", "B3", "D4"],
    "Drop D": ["D2", "A2", "D3", "G3", "B3", "E4"],
    "Drop C": ["C2", "G2", "C3", "F3", "A3", "D4"],
    "Drop B": ["B1", "F#2", "B2", "E3", "G#3", "C#4"],
    "Open G": ["D2", "G2", "D3", "G3", "B3", "D4"],
    "Open D": ["D2", "A2", "D3", "F#3", "A3", "D4"],
    "Open E": ["E2", "B2", "E3", "G#3", "B3", "E4"],
    "DADGAD": ["D2", "A2", "D3", "G3", "A3", "D4"],
    "Nashville": ["E3", "A3", "D4", "G3", "B3", "E4"],
}
"""Open-string note names for each shipped tuning, reference string first."""

STANDARD_TUNING_NAME = "Guitar (6-string)"
"""Name of the default tuning."""
