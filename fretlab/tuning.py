"""Instrument tunings and fretboard positions.

A tuning is an ordered list of open-string notes. String index 0 is the
reference string, which is the lowest string for every shipped tuning
except re-entrant ones such as ukulele and banjo.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType
from typing import Generator, Iterable, List, Mapping, Optional, Tuple

from fretlab import constants
from fretlab.base import check_range
from fretlab.interval import Interval
from fretlab.note import Note


@unique
class Instrument(Enum):
    """Families of fretted instruments, valued by display name."""

    Guitar = "Guitar"
    Bass = "Bass"
    Ukulele = "Ukulele"
    Mandolin = "Mandolin"
    Banjo = "Banjo"

    @classmethod
    def infer(cls, tuning_name: str) -> Instrument:
        """Guess the instrument from a tuning name, defaulting to guitar.

        Args:
            tuning_name: A tuning name such as ``"Bass (4-string)"``.

        Returns:
            The first instrument whose name occurs in the tuning name.
        """
        lowered = tuning_name.lower()
        for instrument in cls:
            if instrument != cls.Guitar and instrument.value.lower() in lowered:
                return instrument
        return cls.Guitar


@dataclass(frozen=True)
class StringPos:
    """A position on the fretboard as a string and fret combination."""

    str_index: int
    """The string number (0-based index into the tuning)."""
    fret: int
    """The fret number; 0 is the open string."""


@dataclass(frozen=True)
class StringBounds:
    """A rectangular region of the fretboard, inclusive on both corners.

    Iterating yields every position in string-major order.
    """

    low: StringPos
    """The minimum string position."""
    high: StringPos
    """The maximum string position."""

    def __iter__(self) -> Generator[StringPos, None, None]:
        for str_index in range(self.low.str_index, self.high.str_index + 1):
            for fret in range(self.low.fret, self.high.fret + 1):
                yield StringPos(str_index=str_index, fret=fret)

    def __contains__(self, cand: StringPos) -> bool:
        return (
            cand.str_index >= self.low.str_index
            and cand.str_index <= self.high.str_index
            and cand.fret >= self.low.fret
            and cand.fret <= self.high.fret
        )


@dataclass(frozen=True)
class Tuning:
    """A named tuning: the open-string notes of an instrument."""

    name: str
    """Display name, e.g. ``"Drop D"``."""
    strings: Tuple[Note, ...]
    """Open-string notes, reference string first."""
    instrument: Instrument
    """Instrument family this tuning belongs to."""

    @classmethod
    def from_names(
        cls,
        name: str,
        names: Iterable[str],
        instrument: Optional[Instrument] = None,
    ) -> Tuning:
        """Build a tuning from note names such as ``["E2", "A2", ...]``.

        Args:
            name: Display name of the tuning.
            names: Open-string note names, reference string first.
            instrument: Instrument family; inferred from the name if omitted.

        Raises:
            ValueError: If a note name cannot be parsed.
        """
        return cls(
            name=name,
            strings=tuple(Note.parse(n) for n in names),
            instrument=instrument if instrument is not None else Instrument.infer(name),
        )

    @property
    def string_count(self) -> int:
        return len(self.strings)

    @property
    def midis(self) -> List[int]:
        """MIDI numbers of the open strings."""
        return [note.midi for note in self.strings]

    @property
    def names(self) -> List[str]:
        """Full names of the open strings, e.g. ``["E2", "A2", ...]``."""
        return [note.full_name for note in self.strings]

    @property
    def lowest(self) -> Note:
        return min(self.strings, key=lambda note: note.midi)

    @property
    def highest(self) -> Note:
        return max(self.strings, key=lambda note: note.midi)

    @property
    def range(self) -> Interval:
        """Interval between the lowest and the highest open string."""
        return Interval.between(self.lowest, self.highest)

    def note_at(self, str_pos: StringPos) -> Note:
        """The note sounding at a fretboard position.

        Args:
            str_pos: String index and fret.

        Returns:
            The open-string note raised by the fret number.

        Raises:
            InvalidRangeError: If the string is not part of the tuning, the
                fret is outside 0 to the maximum fret, or the pitch leaves
                the MIDI range.
        """
        check_range("String", str_pos.str_index, 0, self.string_count - 1)
        check_range("Fret", str_pos.fret, 0, constants.MAX_FRETS)
        return self.strings[str_pos.str_index].transpose(str_pos.fret)

    def midi_at(self, str_pos: StringPos) -> int:
        """MIDI number at a fretboard position, see ``note_at``."""
        return self.note_at(str_pos).midi

    def find_positions(self, note: Note, max_frets: int) -> List[StringPos]:
        """Every position producing a note within ``0..max_frets``, by string."""
        positions: List[StringPos] = []
        for str_index, open_note in enumerate(self.strings):
            fret = note.midi - open_note.midi
            if 0 <= fret <= max_frets:
                positions.append(StringPos(str_index=str_index, fret=fret))
        return positions

    def can_play(self, note: Note, max_frets: int) -> bool:
        """Check if some string reaches the note within ``0..max_frets``."""
        return len(self.find_positions(note, max_frets)) > 0

    def transpose(self, semitones: int) -> Tuning:
        """Shift every string by the same amount, e.g. ``"Drop D (-2)"``.

        Raises:
            InvalidRangeError: If a string leaves the MIDI range.
        """
        sign = "+" if semitones > 0 else ""
        return Tuning(
            name=f"{self.name} ({sign}{semitones})",
            strings=tuple(note.transpose(semitones) for note in self.strings),
            instrument=self.instrument,
        )

    def __str__(self) -> str:
        return self.name


TUNINGS: Mapping[str, Tuning] = MappingProxyType(
    {
        name: Tuning.from_names(name, names)
        for name, names in constants.STANDARD_TUNINGS.items()
    }
)
"""Read-only lookup from tuning name to Tuning."""

STANDARD_TUNING: Tuning = TUNINGS[constants.STANDARD_TUNING_NAME]
"""Six-string guitar in standard tuning."""


def get_tuning(name: str) -> Optional[Tuning]:
    """Look up a tuning by name, returning None when it is not in the catalog."""
    return TUNINGS.get(name)


def tunings_for(instrument: Instrument) -> List[Tuning]:
    """All shipped tunings of an instrument family, in catalog order."""
    return [t for t in TUNINGS.values() if t.instrument == instrument]


def find_tuning(names: Iterable[str]) -> Optional[Tuning]:
    """Find the catalog tuning whose open strings match the given names."""
    wanted = [Note.parse(n) for n in names]
    for tuning in TUNINGS.values():
        if list(tuning.strings) == wanted:
            return tuning
    return None
