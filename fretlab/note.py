"""Pitch representation for fretlab.

This module provides the twelve pitch-class names, the spelling preference
used to display accidentals, and the immutable ``Note`` type with its
conversions to and from MIDI numbers and textual names.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Dict, Optional

from fretlab import constants
from fretlab.base import MatchException, check_range


@unique
class NoteName(Enum):
    """Enumeration of the twelve chromatic note names.

    Values correspond to semitone offsets from C within an octave.
    Uses flat notation for accidentals (Db, Eb, Gb, Ab, Bb).
    """

    C = 0
    Db = 1
    D = 2
    Eb = 3
    E = 4
    F = 5
    Gb = 6
    G = 7
    Ab = 8
    A = 9
    Bb = 10
    B = 11

    def add_steps(self, steps: int) -> NoteName:
        """Add semitone steps to this note name.

        Args:
            steps: Number of semitones to add (can be negative).

        Returns:
            The resulting note name after adding the steps.
        """
        return NOTE_LOOKUP[(self.value + steps) % constants.MAX_NOTES]


NOTE_LOOKUP: Dict[int, NoteName] = constants.make_enum_value_lookup(NoteName)
"""Lookup table from semitone offset (0-11) to NoteName."""


@unique
class Spelling(Enum):
    """Preferred accidental used when displaying a pitch class."""

    Sharp = "#"
    Flat = "b"
    Natural = ""

    @property
    def offset(self) -> int:
        """Semitone offset of this accidental when applied to a letter."""
        if self == Spelling.Sharp:
            return 1
        elif self == Spelling.Flat:
            return -1
        elif self == Spelling.Natural:
            return 0
        else:
            raise MatchException(self)

    @property
    def flipped(self) -> Spelling:
        """The opposite accidental preference (naturals display as sharps)."""
        return Spelling.Sharp if self == Spelling.Flat else Spelling.Flat

    @classmethod
    def parse(cls, accidental: str) -> Spelling:
        """Parse an accidental string such as ``"#"``, ``"b"``, ``"♭"`` or ``""``.

        Raises:
            ValueError: If the accidental is not recognized.
        """
        normalized = accidental.replace("♯", "#").replace("♭", "b")
        for spelling in cls:
            if spelling.value == normalized:
                return spelling
        raise ValueError(f"Invalid accidental: {accidental!r}")


LETTER_SEMITONES: Dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}
"""Semitone offset of each natural letter above C."""

_NAME_PATTERN = re.compile(r"^([A-Ga-g])([#b♯♭]?)(-?\d+)?$")


def spelling_for_root(root: str) -> Spelling:
    """Choose the accidental preference for a key rooted at the given name.

    Args:
        root: A root name such as ``"Bb"`` or ``"F#"``.

    Returns:
        Flat spelling for flat-key roots, sharp spelling otherwise.
    """
    normalized = root.strip().replace("♭", "b").replace("♯", "#")
    return Spelling.Flat if normalized in constants.FLAT_ROOTS else Spelling.Sharp


def pitch_class_name(pitch_class: int, spelling: Spelling = Spelling.Sharp) -> str:
    """Name a pitch class using the given accidental preference."""
    names = (
        constants.FLAT_NOTE_NAMES
        if spelling == Spelling.Flat
        else constants.SHARP_NOTE_NAMES
    )
    return names[pitch_class % constants.MAX_NOTES]


def pitch_class_of(name: str) -> int:
    """Resolve a note name without octave (``"C#"``, ``"Cb"``, ``"E♭"``) to a pitch class.

    Raises:
        ValueError: If the name cannot be parsed.
    """
    return Note.parse(name).pitch_class


@dataclass(frozen=True)
class Note:
    """A single pitch: pitch class plus octave, with a display spelling.

    The MIDI number is ``(octave + 1) * 12 + pitch_class`` so that middle C
    (MIDI 60) is C4. Equality and hashing only consider the pitch, never the
    spelling: C#4 and Db4 are equal notes that display differently.
    """

    pitch_class: int
    """Pitch class (0-11, where 0 is C)."""
    octave: int
    """Octave in scientific pitch notation (middle C is octave 4)."""
    spelling: Spelling = field(default=Spelling.Sharp, compare=False)
    """Accidental preference used for display only."""

    def __post_init__(self) -> None:
        assert 0 <= self.pitch_class < constants.MAX_NOTES

    @classmethod
    def from_midi(cls, midi: int, spelling: Spelling = Spelling.Sharp) -> Note:
        """Create a note from a MIDI number.

        Args:
            midi: MIDI note number (0-127).
            spelling: Accidental preference for display.

        Returns:
            The corresponding Note.

        Raises:
            InvalidRangeError: If the MIDI number is outside 0-127.
        """
        check_range("MIDI note", midi, constants.MIDI_MIN, constants.MIDI_MAX)
        return cls(
            pitch_class=midi % constants.MAX_NOTES,
            octave=midi // constants.MAX_NOTES - 1,
            spelling=spelling,
        )

    @classmethod
    def from_name(cls, letter: str, accidental: str, octave: int) -> Note:
        """Create a note from a letter, an accidental and an octave.

        The accidental may carry the note across an octave boundary, in which
        case the octave is normalized: B#3 is C4 and Cb4 is B3.

        Args:
            letter: Natural letter name, A through G.
            accidental: ``"#"``, ``"b"`` (or the unicode signs) or ``""``.
            octave: Octave number of the written letter.

        Returns:
            The resolved Note, spelled with the given accidental.

        Raises:
            ValueError: If the letter or accidental is not recognized.
            InvalidRangeError: If the resolved pitch lies outside MIDI 0-127.
        """
        upper = letter.upper()
        if upper not in LETTER_SEMITONES:
            raise ValueError(f"Invalid note letter: {letter!r}")
        spelling = Spelling.parse(accidental)
        midi = (
            LETTER_SEMITONES[upper]
            + spelling.offset
            + (octave + 1) * constants.MAX_NOTES
        )
        return cls.from_midi(midi, spelling)

    @classmethod
    def parse(cls, text: str, default_octave: int = constants.DEFAULT_OCTAVE) -> Note:
        """Parse a note name such as ``"C4"``, ``"Bb3"``, ``"F♯2"`` or ``"E"``.

        Args:
            text: The note name, optionally followed by an octave number.
            default_octave: Octave used when the name has none.

        Returns:
            The parsed Note.

        Raises:
            ValueError: If the text is not a valid note name.
            InvalidRangeError: If the note lies outside MIDI 0-127.
        """
        match = _NAME_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid note format: {text!r}")
        letter, accidental, octave_text = match.groups()
        octave = default_octave if octave_text is None else int(octave_text)
        return cls.from_name(letter, accidental, octave)

    @classmethod
    def in_octave(cls, name: str, octave: int) -> Note:
        """Place the pitch class of a name in the given octave.

        Unlike ``parse``, the octave is kept as given even when the
        accidental crosses an octave boundary: Cb in octave 3 is B3 and B# in
        octave 3 is C3.

        Raises:
            ValueError: If the name cannot be parsed.
            InvalidRangeError: If the note lies outside MIDI 0-127.
        """
        named = cls.parse(name)
        midi = (octave + 1) * constants.MAX_NOTES + named.pitch_class
        return cls.from_midi(midi, named.spelling)

    @property
    def midi(self) -> int:
        """The MIDI note number of this pitch."""
        return (self.octave + 1) * constants.MAX_NOTES + self.pitch_class

    @property
    def note_name(self) -> NoteName:
        """The pitch class as a NoteName."""
        return NOTE_LOOKUP[self.pitch_class]

    @property
    def name(self) -> str:
        """The note name without octave, e.g. ``"C#"`` or ``"Db"``."""
        return pitch_class_name(self.pitch_class, self.spelling)

    @property
    def full_name(self) -> str:
        """The note name with octave, e.g. ``"C#4"``."""
        return f"{self.name}{self.octave}"

    @property
    def frequency(self) -> float:
        """Frequency in Hz, with A4 tuned to 440 Hz."""
        return constants.A440_HZ * math.pow(
            2.0, (self.midi - constants.A440_MIDI) / constants.MAX_NOTES
        )

    @property
    def enharmonic(self) -> Note:
        """The same pitch with the opposite accidental preference."""
        return Note(self.pitch_class, self.octave, self.spelling.flipped)

    def transpose(self, semitones: int, spelling: Optional[Spelling] = None) -> Note:
        """Transpose this note by a number of semitones.

        Args:
            semitones: Semitones to move (negative moves down).
            spelling: Accidental preference of the result; sharps if omitted.

        Returns:
            A new Note at ``midi + semitones``.

        Raises:
            InvalidRangeError: If the result lies outside MIDI 0-127.
        """
        return Note.from_midi(
            self.midi + semitones, spelling if spelling is not None else Spelling.Sharp
        )

    def interval_to(self, other: Note) -> int:
        """Absolute distance to another note in semitones."""
        return abs(other.midi - self.midi)

    def __str__(self) -> str:
        return self.full_name
