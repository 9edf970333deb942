"""Chord definitions, voicings and naming for fretlab.

A chord is a named set of semitone offsets from a root. This module builds
concrete voicings for a requested inversion, formats chord names with slash
notation, identifies chords from notes, and holds the read-only chord
catalog.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from fretlab import constants
from fretlab.base import InvalidRangeError, UnknownChordTypeError
from fretlab.note import Note, pitch_class_name, pitch_class_of, spelling_for_root


@unique
class ChordInversion(Enum):
    """Which chord tone sounds lowest in a voicing.

    The value is the number of chord tones rotated from the bottom to the
    top: inversion *k* brings the *k*-th chord tone to the bass.
    """

    Root = 0
    First = 1
    Second = 2
    Third = 3
    Fourth = 4
    Fifth = 5

    @property
    def index(self) -> int:
        return self.value

    @property
    def display_name(self) -> str:
        if self == ChordInversion.Root:
            return "Root Position"
        return f"{self.name} Inversion"


InversionLike = Union[ChordInversion, int]
"""An inversion given either as the enum or as its index."""


def inversion_index(inversion: InversionLike) -> int:
    """Rotation count of an inversion given as enum or index."""
    return inversion.index if isinstance(inversion, ChordInversion) else inversion


@dataclass(frozen=True)
class Chord:
    """Represents a chord type and its structure.

    The intervals are semitone offsets from the root in ascending order,
    always starting with 0. Compound offsets (a 9th is 14) are allowed.
    """

    type: str
    """Catalog key, e.g. ``"minor7"``."""
    symbol: str
    """Suffix appended to the root in chord symbols, e.g. ``"m7"``."""
    display_name: str
    """Human-readable name, e.g. ``"Minor 7th"``."""
    intervals: Tuple[int, ...]
    """Semitone offsets of each chord tone from the root."""
    category: str
    """Menu category, e.g. ``"Seventh Chords"``."""

    def tones(self, root: int) -> List[int]:
        """Chord-tone pitch classes in interval order, starting at the root."""
        return [(root + offset) % constants.MAX_NOTES for offset in self.intervals]

    def pitch_class_set(self, root: int) -> FrozenSet[int]:
        """The set of chord-tone pitch classes built on a root.

        Chords that repeat a pitch class (e.g. a power chord with octave)
        collapse to fewer members.
        """
        return frozenset(self.tones(root))

    def symbol_for(self, root: str) -> str:
        """Full chord symbol for a root name, e.g. ``"Cm7"``."""
        return f"{root}{self.symbol}"

    @property
    def available_inversions(self) -> List[ChordInversion]:
        """Inversions that bring a distinct chord tone to the bass."""
        count = max(1, min(len(self.intervals), constants.MAX_CHORD_INVERSIONS))
        return list(ChordInversion)[:count]

    def bass_pitch_class(self, root: int, inversion: InversionLike) -> Optional[int]:
        """Pitch class that sounds lowest for the given inversion.

        Returns None for a chord without tones.
        """
        tones = self.tones(root)
        if not tones:
            return None
        return tones[inversion_index(inversion) % len(tones)]

    def build_voicing(self, root: Note, inversion: InversionLike) -> List[int]:
        """Build a compact, strictly ascending voicing of this chord.

        The chord tones are rotated left by the inversion index (taken modulo
        the number of tones). The first rotated tone is placed at or above the
        root note; each following tone is placed at the lowest MIDI number
        strictly above the previous one that has the right pitch class.

        Args:
            root: The root note; its octave anchors the voicing.
            inversion: Which chord tone goes to the bass.

        Returns:
            Ascending MIDI note numbers, one per chord tone. Empty when the
            chord has no intervals.

        Raises:
            InvalidRangeError: If a voicing tone would exceed MIDI 127.
        """
        tones = self.tones(root.pitch_class)
        if not tones:
            return []
        shift = inversion_index(inversion) % len(tones)
        rotated = tones[shift:] + tones[:shift]
        voicing: List[int] = []
        floor = root.midi
        for pitch_class in rotated:
            midi = floor + (pitch_class - floor) % constants.MAX_NOTES
            if midi > constants.MIDI_MAX:
                raise InvalidRangeError(
                    "MIDI note", midi, constants.MIDI_MIN, constants.MIDI_MAX
                )
            voicing.append(midi)
            floor = midi + 1
        logging.debug(
            "Voicing of %s%s inversion %d from %s: %s",
            root.name,
            self.symbol,
            shift,
            root.full_name,
            voicing,
        )
        return voicing

    def __str__(self) -> str:
        return self.display_name


def _chord(
    type: str, symbol: str, display_name: str, intervals: Iterable[int], category: str
) -> Chord:
    return Chord(type, symbol, display_name, tuple(intervals), category)


CHORDS: Tuple[Chord, ...] = (
    # Basic triads
    _chord("major", "", "Major", [0, 4, 7], "Basic Triads"),
    _chord("minor", "m", "Minor", [0, 3, 7], "Basic Triads"),
    _chord("diminished", "°", "Diminished", [0, 3, 6], "Basic Triads"),
    _chord("augmented", "+", "Augmented", [0, 4, 8], "Basic Triads"),
    # Suspended
    _chord("sus2", "sus2", "Suspended 2nd", [0, 2, 7], "Suspended"),
    _chord("sus4", "sus4", "Suspended 4th", [0, 5, 7], "Suspended"),
    _chord("7sus2", "7sus2", "7 Suspended 2nd", [0, 2, 7, 10], "Suspended"),
    _chord("7sus4", "7sus4", "7 Suspended 4th", [0, 5, 7, 10], "Suspended"),
    # Sevenths
    _chord("major7", "maj7", "Major 7th", [0, 4, 7, 11], "Seventh Chords"),
    _chord("minor7", "m7", "Minor 7th", [0, 3, 7, 10], "Seventh Chords"),
    _chord("dominant7", "7", "Dominant 7th", [0, 4, 7, 10], "Seventh Chords"),
    _chord("diminished7", "°7", "Diminished 7th", [0, 3, 6, 9], "Seventh Chords"),
    _chord(
        "half-diminished7",
        "ø7",
        "Half Diminished 7th",
        [0, 3, 6, 10],
        "Seventh Chords",
    ),
    _chord("augmented7", "+7", "Augmented 7th", [0, 4, 8, 10], "Seventh Chords"),
    _chord(
        "augmented-major7",
        "+maj7",
        "Augmented Major 7th",
        [0, 4, 8, 11],
        "Seventh Chords",
    ),
    _chord(
        "minor-major7", "m(maj7)", "Minor Major 7th", [0, 3, 7, 11], "Seventh Chords"
    ),
    # Sixths
    _chord("major6", "6", "Major 6th", [0, 4, 7, 9], "Sixth Chords"),
    _chord("minor6", "m6", "Minor 6th", [0, 3, 7, 9], "Sixth Chords"),
    _chord("6/9", "6/9", "6/9", [0, 4, 7, 9, 14], "Sixth Chords"),
    _chord("m6/9", "m6/9", "Minor 6/9", [0, 3, 7, 9, 14], "Sixth Chords"),
    # Added tones
    _chord("add9", "add9", "Add 9th", [0, 4, 7, 14], "Add Chords"),
    _chord("add11", "add11", "Add 11th", [0, 4, 7, 17], "Add Chords"),
    _chord("add13", "add13", "Add 13th", [0, 4, 7, 21], "Add Chords"),
    _chord("madd9", "m(add9)", "Minor Add 9th", [0, 3, 7, 14], "Add Chords"),
    _chord("madd11", "m(add11)", "Minor Add 11th", [0, 3, 7, 17], "Add Chords"),
    _chord("add4", "add4", "Add 4th", [0, 4, 5, 7], "Add Chords"),
    # Ninths
    _chord("major9", "maj9", "Major 9th", [0, 4, 7, 11, 14], "Extended (9ths)"),
    _chord("minor9", "m9", "Minor 9th", [0, 3, 7, 10, 14], "Extended (9ths)"),
    _chord("dominant9", "9", "Dominant 9th", [0, 4, 7, 10, 14], "Extended (9ths)"),
    _chord(
        "9sus4", "9sus4", "9 Suspended 4th", [0, 5, 7, 10, 14], "Extended (9ths)"
    ),
    _chord("7b9", "7b9", "7 Flat 9", [0, 4, 7, 10, 13], "Extended (9ths)"),
    _chord("7#9", "7#9", "7 Sharp 9", [0, 4, 7, 10, 15], "Extended (9ths)"),
    _chord(
        "maj7#9", "maj7#9", "Major 7 Sharp 9", [0, 4, 7, 11, 15], "Extended (9ths)"
    ),
    # Elevenths
    _chord(
        "major11", "maj11", "Major 11th", [0, 4, 7, 11, 14, 17], "Extended (11ths)"
    ),
    _chord(
        "minor11", "m11", "Minor 11th", [0, 3, 7, 10, 14, 17], "Extended (11ths)"
    ),
    _chord(
        "dominant11", "11", "Dominant 11th", [0, 4, 7, 10, 14, 17], "Extended (11ths)"
    ),
    _chord("7#11", "7#11", "7 Sharp 11", [0, 4, 7, 10, 18], "Extended (11ths)"),
    _chord(
        "maj7#11", "maj7#11", "Major 7 Sharp 11", [0, 4, 7, 11, 18], "Extended (11ths)"
    ),
    _chord(
        "m7b5add11",
        "m7b5(add11)",
        "Minor 7 Flat 5 Add 11",
        [0, 3, 6, 10, 17],
        "Extended (11ths)",
    ),
    # Thirteenths
    _chord(
        "major13",
        "maj13",
        "Major 13th",
        [0, 4, 7, 11, 14, 17, 21],
        "Extended (13ths)",
    ),
    _chord(
        "minor13", "m13", "Minor 13th", [0, 3, 7, 10, 14, 17, 21], "Extended (13ths)"
    ),
    _chord(
        "dominant13",
        "13",
        "Dominant 13th",
        [0, 4, 7, 10, 14, 17, 21],
        "Extended (13ths)",
    ),
    _chord("7b13", "7b13", "7 Flat 13", [0, 4, 7, 10, 20], "Extended (13ths)"),
    _chord("7#13", "7#13", "7 Sharp 13", [0, 4, 7, 10, 22], "Extended (13ths)"),
    # Power chords
    _chord("power-chord", "5", "Power Chord (5th)", [0, 7], "Power Chords"),
    _chord(
        "power-chord-octave",
        "5(8)",
        "Power Chord + Octave",
        [0, 7, 12],
        "Power Chords",
    ),
    _chord("power-sus2", "sus2(no5)", "Power Sus2", [0, 2], "Power Chords"),
    _chord("power-sus4", "5sus4", "Power Sus4", [0, 5, 7], "Power Chords"),
    # Altered
    _chord("7alt", "7alt", "7 Altered", [0, 4, 7, 10, 13, 15], "Altered Chords"),
    _chord("7b5", "7b5", "7 Flat 5", [0, 4, 6, 10], "Altered Chords"),
    _chord("7#5", "7#5", "7 Sharp 5", [0, 4, 8, 10], "Altered Chords"),
    _chord("maj7b5", "maj7b5", "Major 7 Flat 5", [0, 4, 6, 11], "Altered Chords"),
    _chord("maj7#5", "maj7#5", "Major 7 Sharp 5", [0, 4, 8, 11], "Altered Chords"),
    _chord(
        "7b9b13", "7b9b13", "7 Flat 9 Flat 13", [0, 4, 7, 10, 13, 20], "Altered Chords"
    ),
    _chord(
        "7#9b13",
        "7#9b13",
        "7 Sharp 9 Flat 13",
        [0, 4, 7, 10, 15, 20],
        "Altered Chords",
    ),
    # Jazz
    _chord(
        "maj7#5#11",
        "maj7#5#11",
        "Major 7 Sharp 5 Sharp 11",
        [0, 4, 8, 11, 18],
        "Jazz Chords",
    ),
    _chord("m7b9", "m7b9", "Minor 7 Flat 9", [0, 3, 7, 10, 13], "Jazz Chords"),
    _chord(
        "dim7add9", "°7(add9)", "Diminished 7 Add 9", [0, 3, 6, 9, 14], "Jazz Chords"
    ),
    _chord(
        "maj9#11", "maj9#11", "Major 9 Sharp 11", [0, 4, 7, 11, 14, 18], "Jazz Chords"
    ),
    _chord(
        "m11b5", "m11b5", "Minor 11 Flat 5", [0, 3, 6, 10, 14, 17], "Jazz Chords"
    ),
    _chord(
        "13sus4",
        "13sus4",
        "13 Suspended 4th",
        [0, 5, 7, 10, 14, 17, 21],
        "Jazz Chords",
    ),
    # Quartal
    _chord("quartal3", "Q3", "Quartal Triad", [0, 5, 10], "Quartal Chords"),
    _chord("quartal4", "Q4", "Quartal 4-note", [0, 5, 10, 15], "Quartal Chords"),
    _chord(
        "quartal5", "Q5", "Quartal 5-note", [0, 5, 10, 15, 20], "Quartal Chords"
    ),
    _chord("so-what", "SW", "So What Chord", [0, 5, 10, 15, 19], "Quartal Chords"),
    # Clusters
    _chord("cluster-maj", "CMaj", "Major Cluster", [0, 2, 4], "Cluster Chords"),
    _chord("cluster-min", "Cmin", "Minor Cluster", [0, 1, 3], "Cluster Chords"),
    _chord(
        "cluster-chromatic", "CChr", "Chromatic Cluster", [0, 1, 2], "Cluster Chords"
    ),
    # Polychords
    _chord(
        "major-over-major",
        "|Maj",
        "Major over Major",
        [0, 4, 7, 14, 18, 21],
        "Polychords",
    ),
    _chord(
        "minor-over-major",
        "m|Maj",
        "Minor over Major",
        [0, 4, 7, 15, 18, 22],
        "Polychords",
    ),
    # Special
    _chord("mystic", "Mys", "Mystic Chord", [0, 6, 10, 16, 21, 26], "Special/Exotic"),
    _chord("elektra", "Elek", "Elektra Chord", [0, 7, 9, 13, 16], "Special/Exotic"),
    _chord("dream", "Dream", "Dream Chord", [0, 5, 6, 7], "Special/Exotic"),
    _chord("farben", "Farb", "Farben Chord", [0, 8, 11, 16, 21], "Special/Exotic"),
    _chord("tristan", "Trist", "Tristan Chord", [0, 3, 6, 10], "Special/Exotic"),
    _chord(
        "petrushka",
        "Petr",
        "Petrushka Chord",
        [0, 1, 4, 6, 7, 10],
        "Special/Exotic",
    ),
    _chord(
        "viennese-trichord", "VT", "Viennese Trichord", [0, 1, 6], "Special/Exotic"
    ),
    # Omissions
    _chord("major-no3", "(no3)", "Major (no 3rd)", [0, 7], "Omit Chords"),
    _chord("major7-no3", "maj7(no3)", "Major 7 (no 3rd)", [0, 7, 11], "Omit Chords"),
    _chord("major7-no5", "maj7(no5)", "Major 7 (no 5th)", [0, 4, 11], "Omit Chords"),
    _chord("7-no3", "7(no3)", "7 (no 3rd)", [0, 7, 10], "Omit Chords"),
    _chord("9-no3", "9(no3)", "9 (no 3rd)", [0, 7, 10, 14], "Omit Chords"),
    _chord("11-no5", "11(no5)", "11 (no 5th)", [0, 4, 10, 14, 17], "Omit Chords"),
    # Slash chords
    _chord("major-b3-bass", "/b3", "Major/b3 Bass", [0, 3, 4, 7], "Slash Chords"),
    _chord("major-5-bass", "/5", "Major/5 Bass", [0, 4, 7, 7], "Slash Chords"),
    _chord("minor-b7-bass", "m/b7", "Minor/b7 Bass", [0, 3, 7, 10], "Slash Chords"),
)
"""All shipped chords, grouped by category in menu order."""

CHORD_LOOKUP: Mapping[str, Chord] = MappingProxyType({c.type: c for c in CHORDS})
"""Read-only lookup from chord type to Chord."""

COMMON_CHORDS: Tuple[Chord, ...] = tuple(
    CHORD_LOOKUP[t]
    for t in [
        "major",
        "minor",
        "major7",
        "minor7",
        "dominant7",
        "sus2",
        "sus4",
        "add9",
        "power-chord",
    ]
)
"""Chords offered for quick access."""


def get_chord(chord_type: str) -> Optional[Chord]:
    """Look up a chord by type, returning None when it is not in the catalog."""
    return CHORD_LOOKUP.get(chord_type)


def require_chord(chord_type: str) -> Chord:
    """Look up a chord by type.

    Raises:
        UnknownChordTypeError: If the chord type is not in the catalog.
    """
    chord = CHORD_LOOKUP.get(chord_type)
    if chord is None:
        raise UnknownChordTypeError(chord_type)
    return chord


def chords_by_category() -> Dict[str, List[Chord]]:
    """Group the catalog by category, preserving menu order."""
    result: Dict[str, List[Chord]] = OrderedDict()
    for chord in CHORDS:
        result.setdefault(chord.category, []).append(chord)
    return result


def build_voicing(chord_type: str, root: Note, inversion: InversionLike) -> List[int]:
    """Build the voicing of a catalog chord, see ``Chord.build_voicing``.

    Raises:
        UnknownChordTypeError: If the chord type is not in the catalog.
        InvalidRangeError: If a voicing tone would exceed MIDI 127.
    """
    return require_chord(chord_type).build_voicing(root, inversion)


def display_name(root: str, chord_type: str, inversion: InversionLike) -> str:
    """Format a chord symbol with slash notation for inversions.

    Args:
        root: Root name, e.g. ``"C"`` or ``"Bb"``.
        chord_type: Catalog key of the chord.
        inversion: Which chord tone is in the bass.

    Returns:
        ``"C"`` in root position, ``"C/E"`` in first inversion; the bass note
        follows the key's spelling. Unknown chord types yield the bare root.
    """
    chord = CHORD_LOOKUP.get(chord_type)
    if chord is None:
        return root
    symbol = chord.symbol_for(root)
    bass = chord.bass_pitch_class(pitch_class_of(root), inversion)
    if bass is None or bass == pitch_class_of(root):
        return symbol
    return f"{symbol}/{pitch_class_name(bass, spelling_for_root(root))}"


def identify_chord(notes: Iterable[Note]) -> Optional[str]:
    """Name the catalog chord formed by a collection of notes.

    Each sounding pitch class is tried as the root, lowest pitch class first;
    the first chord whose pitch-class content matches exactly wins.

    Returns:
        A chord symbol such as ``"Am7"``, or None if nothing matches.
    """
    pitch_classes = sorted({note.pitch_class for note in notes})
    if not pitch_classes:
        return None
    for root in pitch_classes:
        shape = frozenset((pc - root) % constants.MAX_NOTES for pc in pitch_classes)
        for chord in CHORDS:
            if chord.pitch_class_set(0) == shape:
                return chord.symbol_for(pitch_class_name(root))
    return None
