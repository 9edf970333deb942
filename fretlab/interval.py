"""Musical intervals measured in semitones."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum, unique

from fretlab import constants
from fretlab.note import Note

_LABEL_PATTERN = re.compile(r"^(b?)(\d+)$")


@unique
class IntervalQuality(Enum):
    """Quality of a simple interval, with its chord-symbol abbreviation."""

    Perfect = "P"
    Major = "M"
    Minor = "m"
    Augmented = "+"
    Diminished = "°"


_QUALITIES = (
    IntervalQuality.Perfect,
    IntervalQuality.Minor,
    IntervalQuality.Major,
    IntervalQuality.Minor,
    IntervalQuality.Major,
    IntervalQuality.Perfect,
    IntervalQuality.Diminished,
    IntervalQuality.Perfect,
    IntervalQuality.Minor,
    IntervalQuality.Major,
    IntervalQuality.Minor,
    IntervalQuality.Major,
)

_CONSONANT = frozenset([0, 3, 4, 5, 7, 8, 9])
_PERFECT = frozenset([0, 5, 7])


def interval_label(semitones: int) -> str:
    """Label an extended interval above a root for display.

    Simple intervals use the short labels (``R``, ``b3``, ``5``...). Compound
    intervals add seven scale steps per octave (14 semitones is ``9``, 20 is
    ``b13``) and whole octaves become octave markers (``O1``, ``O2``).

    Args:
        semitones: Semitones above the root.

    Returns:
        The display label. Negative input is labeled as the root.
    """
    if semitones < 0:
        logging.warning("Negative interval %d labeled as root", semitones)
        return constants.INTERVAL_LABELS[0]
    octaves, step = divmod(semitones, constants.MAX_NOTES)
    raw = constants.INTERVAL_LABELS[step]
    if octaves == 0:
        return raw
    if step == 0:
        return f"O{octaves}"
    match = _LABEL_PATTERN.match(raw)
    assert match is not None
    accidental, number = match.groups()
    return f"{accidental}{int(number) + octaves * 7}"


@dataclass(frozen=True, order=True)
class Interval:
    """A distance between two pitches in semitones.

    Compound intervals (more than an octave) are allowed; the simple part is
    ``semitones % 12``.
    """

    semitones: int

    @classmethod
    def between(cls, low: Note, high: Note) -> Interval:
        """The interval between two notes, regardless of their order."""
        return cls(low.interval_to(high))

    @property
    def simple(self) -> int:
        """Semitones reduced to within one octave."""
        return self.semitones % constants.MAX_NOTES

    @property
    def octaves(self) -> int:
        """Number of whole octaves spanned."""
        return self.semitones // constants.MAX_NOTES

    @property
    def name(self) -> str:
        """Long name, e.g. ``"Minor 3rd"`` or ``"Major 2nd + 1 oct"``."""
        base = constants.INTERVAL_NAMES[self.simple]
        if self.octaves == 0:
            return base
        elif self.octaves == 1 and self.simple == 0:
            return "Octave"
        else:
            return f"{base} + {self.octaves} oct"

    @property
    def label(self) -> str:
        """Short display label, see ``interval_label``."""
        return interval_label(self.semitones)

    @property
    def quality(self) -> IntervalQuality:
        """Quality of the simple interval (the tritone counts as diminished)."""
        return _QUALITIES[self.simple]

    @property
    def is_consonant(self) -> bool:
        return self.simple in _CONSONANT

    @property
    def is_perfect(self) -> bool:
        return self.simple in _PERFECT

    @property
    def inverted(self) -> Interval:
        """The complement of the simple interval within an octave.

        The inversion of a unison is an octave.
        """
        return Interval(constants.MAX_NOTES - self.simple)

    def __add__(self, other: Interval) -> Interval:
        return Interval(self.semitones + other.semitones)

    def __sub__(self, other: Interval) -> Interval:
        return Interval(abs(self.semitones - other.semitones))

    def __str__(self) -> str:
        return f"{self.name} ({self.semitones} semitones)"


UNISON = Interval(0)
MINOR_SECOND = Interval(1)
MAJOR_SECOND = Interval(2)
MINOR_THIRD = Interval(3)
MAJOR_THIRD = Interval(4)
PERFECT_FOURTH = Interval(5)
TRITONE = Interval(6)
PERFECT_FIFTH = Interval(7)
MINOR_SIXTH = Interval(8)
MAJOR_SIXTH = Interval(9)
MINOR_SEVENTH = Interval(10)
MAJOR_SEVENTH = Interval(11)
OCTAVE = Interval(12)
