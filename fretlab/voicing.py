"""Placement of chord voicings on a fretboard.

Given a voicing built by ``fretlab.chord``, this module finds where each of
its notes can be played, picks one playable position per note, judges how
hard the resulting shape is, and renders it as tablature.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, List, Optional, Sequence

from fretlab import constants
from fretlab.chord import InversionLike, get_chord, inversion_index, require_chord
from fretlab.interval import interval_label
from fretlab.note import Note, spelling_for_root
from fretlab.tuning import StringPos


@dataclass(frozen=True)
class ChordTone:
    """One fretboard position of one note of a chord voicing."""

    position: StringPos
    """Where the note is played."""
    note: Note
    """The note played there."""
    interval: int
    """Simple interval of the note above the chord root (0-11)."""
    chord_tone_index: int
    """Index of the chord interval this note realizes."""
    voicing_position: int
    """Index of the note in the voicing, 0 for the bass."""

    @property
    def str_index(self) -> int:
        return self.position.str_index

    @property
    def fret(self) -> int:
        return self.position.fret

    @property
    def midi(self) -> int:
        return self.note.midi

    @property
    def is_root(self) -> bool:
        return self.interval == 0

    @property
    def interval_label(self) -> str:
        return interval_label(self.interval)


def chord_tones(
    root: str,
    octave: int,
    chord_type: str,
    inversion: InversionLike,
    strings: Sequence[Note],
    max_frets: int,
    min_fret: int = 0,
) -> List[ChordTone]:
    """Find every position of every note of a chord voicing.

    Args:
        root: Root name, e.g. ``"C"``.
        octave: Octave of the root the voicing is built from.
        chord_type: Catalog key of the chord.
        inversion: Which chord tone is in the bass.
        strings: Open-string notes, reference string first.
        max_frets: Highest usable fret.
        min_fret: Lowest usable fret.

    Returns:
        Chord tones ordered by voicing position, then by string.

    Raises:
        UnknownChordTypeError: If the chord type is not in the catalog.
        InvalidRangeError: If the voicing leaves the MIDI range.
    """
    chord = require_chord(chord_type)
    root_note = Note.in_octave(root, octave)
    spelling = spelling_for_root(root)
    voicing = chord.build_voicing(root_note, inversion)
    if len(voicing) == 0:
        logging.warning("No voicing notes for %s %s", root, chord_type)
        return []
    logging.debug(
        "Placing %s voicing %s on %d strings",
        chord.symbol_for(root),
        voicing,
        len(strings),
    )
    tone_count = len(chord.intervals)
    shift = inversion_index(inversion) % tone_count
    tones: List[ChordTone] = []
    for voicing_position, midi in enumerate(voicing):
        note = Note.from_midi(midi, spelling)
        interval = (note.pitch_class - root_note.pitch_class) % constants.MAX_NOTES
        chord_tone_index = (voicing_position + shift) % tone_count
        for str_index, open_note in enumerate(strings):
            fret = midi - open_note.midi
            if min_fret <= fret <= max_frets:
                tones.append(
                    ChordTone(
                        position=StringPos(str_index=str_index, fret=fret),
                        note=note,
                        interval=interval,
                        chord_tone_index=chord_tone_index,
                        voicing_position=voicing_position,
                    )
                )
    logging.debug("Found %d positions for %s", len(tones), chord.symbol_for(root))
    return tones


def optimal_fingering(tones: Sequence[ChordTone]) -> List[ChordTone]:
    """Choose one position per voicing note.

    Voicing notes are visited bass first. For each, the lowest fret wins;
    ties go to the string nearest the previous pick, or to the lowest string
    index for the first note.

    Returns:
        At most one tone per voicing position, in voicing order.
    """
    by_position: Dict[int, List[ChordTone]] = {}
    for tone in tones:
        by_position.setdefault(tone.voicing_position, []).append(tone)
    selected: List[ChordTone] = []
    last_string: Optional[int] = None
    for voicing_position in sorted(by_position):
        options = by_position[voicing_position]
        if last_string is None:
            best = min(options, key=lambda t: (t.fret, t.str_index))
        else:
            anchor = last_string
            best = min(options, key=lambda t: (t.fret, abs(t.str_index - anchor)))
        selected.append(best)
        last_string = best.str_index
    return selected


@unique
class Difficulty(Enum):
    """How hard a fingering is to fret, by the area it spans."""

    Easy = "easy"
    Medium = "medium"
    Hard = "hard"
    VeryHard = "very_hard"
    Impossible = "impossible"


@dataclass(frozen=True)
class FingeringAnalysis:
    """Spans and difficulty of a fingering."""

    difficulty: Difficulty
    reason: Optional[str]
    string_span: int
    fret_span: int
    strings: List[int]
    frets: List[int]

    @property
    def playable(self) -> bool:
        return self.difficulty not in (Difficulty.VeryHard, Difficulty.Impossible)


def _span(values: List[int]) -> int:
    return max(values) - min(values) + 1 if values else 0


def analyze_fingering(fingering: Sequence[ChordTone]) -> FingeringAnalysis:
    """Judge a fingering by its string span and its fretted span.

    Open strings do not count towards the fret span. A shape within 3x3 is
    easy, 4x4 medium and 5x5 hard; anything larger is very hard.
    """
    if len(fingering) == 0:
        return FingeringAnalysis(
            Difficulty.Impossible, "No valid fingering found", 0, 0, [], []
        )
    strings = sorted({t.str_index for t in fingering})
    frets = sorted({t.fret for t in fingering if t.fret > 0})
    string_span = _span(strings)
    fret_span = _span(frets)
    reason: Optional[str] = None
    if string_span <= 3 and fret_span <= 3:
        difficulty = Difficulty.Easy
    elif string_span <= 4 and fret_span <= 4:
        difficulty = Difficulty.Medium
        if fret_span > 3:
            reason = "Requires moderate finger stretch"
    elif string_span <= 5 and fret_span <= 5:
        difficulty = Difficulty.Hard
        reason = "Requires significant finger stretch"
    else:
        difficulty = Difficulty.VeryHard
        reason = "May not be physically playable"
    return FingeringAnalysis(difficulty, reason, string_span, fret_span, strings, frets)


def tablature(fingering: Sequence[ChordTone], string_count: int) -> List[str]:
    """Fret number per string, ``"x"`` for strings not played."""
    tab = ["x"] * string_count
    for tone in fingering:
        tab[tone.str_index] = str(tone.fret)
    return tab


@dataclass(frozen=True)
class ChordDiagram:
    """What a chord box needs to draw a fingering."""

    tablature: List[str]
    start_fret: int
    show_position_marker: bool
    fret_span: int
    muted_strings: List[int]
    open_strings: List[int]


def chord_diagram(fingering: Sequence[ChordTone], string_count: int) -> ChordDiagram:
    """Lay out a fingering as a chord box.

    Shapes starting above the third fret are drawn from their lowest fret
    with a position marker; others are drawn from the nut.
    """
    tab = tablature(fingering, string_count)
    fretted = [t.fret for t in fingering if t.fret > 0]
    lowest = min(fretted) if fretted else 0
    highest = max(fretted) if fretted else 0
    show_marker = lowest > 3
    return ChordDiagram(
        tablature=tab,
        start_fret=lowest if show_marker else 1,
        show_position_marker=show_marker,
        fret_span=highest - lowest,
        muted_strings=[i for i, t in enumerate(tab) if t == "x"],
        open_strings=[i for i, t in enumerate(tab) if t == "0"],
    )


def is_voicing_complete(voicing: Sequence[ChordTone], chord_type: str) -> bool:
    """Check that every chord interval is played somewhere in the voicing.

    Unknown chord types are never complete.
    """
    chord = get_chord(chord_type)
    if chord is None:
        return False
    present = {t.chord_tone_index for t in voicing}
    return all(i in present for i in range(len(chord.intervals)))


def missing_chord_tones(
    voicing: Sequence[ChordTone], root: str, chord_type: str
) -> List[str]:
    """Names of the chord tones the voicing leaves out, in interval order.

    Unknown chord types have no missing tones.
    """
    chord = get_chord(chord_type)
    if chord is None:
        return []
    present = {t.chord_tone_index for t in voicing}
    root_note = Note.parse(root)
    spelling = spelling_for_root(root)
    return [
        root_note.transpose(offset, spelling).name
        for index, offset in enumerate(chord.intervals)
        if index not in present
    ]
