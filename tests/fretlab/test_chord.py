"""Tests for chord voicings, naming and the chord catalog."""

from collections import Counter
from typing import List

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fretlab.base import InvalidRangeError, UnknownChordTypeError
from fretlab.chord import (
    CHORD_LOOKUP,
    CHORDS,
    COMMON_CHORDS,
    Chord,
    ChordInversion,
    build_voicing,
    chords_by_category,
    display_name,
    get_chord,
    identify_chord,
    require_chord,
)
from fretlab.note import Note
from tests.fretlab.hypo import configure_hypo

configure_hypo()

C3 = Note.parse("C3")


@pytest.mark.parametrize(
    "chord_type, inversion, voicing",
    [
        ("major", ChordInversion.Root, [48, 52, 55]),
        ("major", ChordInversion.First, [52, 55, 60]),
        ("major", ChordInversion.Second, [55, 60, 64]),
        ("major", ChordInversion.Fourth, [52, 55, 60]),
        ("minor7", ChordInversion.Third, [58, 60, 63, 67]),
        ("add9", ChordInversion.Root, [48, 52, 55, 62]),
        ("power-chord-octave", ChordInversion.Root, [48, 55, 60]),
        ("power-chord-octave", ChordInversion.Second, [48, 60, 67]),
    ],
)
def test_build_voicing(
    chord_type: str, inversion: ChordInversion, voicing: List[int]
) -> None:
    """Voicings are compact, ascending and start on the bass tone."""
    assert build_voicing(chord_type, C3, inversion) == voicing


def test_build_voicing_accepts_index() -> None:
    """Inversions may be given as plain indices."""
    assert build_voicing("major", C3, 1) == [52, 55, 60]


def test_build_voicing_above_root() -> None:
    """The bass tone sits at or above the root note."""
    assert build_voicing("major", Note.parse("A3"), ChordInversion.First) == [
        61,
        64,
        69,
    ]


def test_build_voicing_overflow() -> None:
    """Voicings that would leave the MIDI range raise."""
    with pytest.raises(InvalidRangeError):
        build_voicing("major", Note.parse("G9"), ChordInversion.Root)


def test_build_voicing_empty_chord() -> None:
    empty = Chord("empty", "", "Empty", (), "Test")
    assert empty.build_voicing(C3, ChordInversion.First) == []
    assert empty.bass_pitch_class(0, ChordInversion.First) is None


def test_build_voicing_unknown_chord() -> None:
    with pytest.raises(UnknownChordTypeError):
        build_voicing("nope", C3, ChordInversion.Root)


@given(
    st.sampled_from(CHORDS),
    st.integers(min_value=0, max_value=40),
    st.integers(min_value=0, max_value=5),
)
def test_voicing_properties(chord: Chord, midi: int, inversion: int) -> None:
    """Every voicing is strictly ascending and holds each chord tone once."""
    root = Note.from_midi(midi)
    voicing = chord.build_voicing(root, inversion)
    assert len(voicing) == len(chord.intervals)
    assert all(a < b for a, b in zip(voicing, voicing[1:]))
    assert voicing[0] >= root.midi
    assert voicing[0] % 12 == chord.bass_pitch_class(root.pitch_class, inversion)
    assert Counter(m % 12 for m in voicing) == Counter(chord.tones(root.pitch_class))


@pytest.mark.parametrize(
    "root, chord_type, inversion, name",
    [
        ("C", "major", ChordInversion.Root, "C"),
        ("C", "major", ChordInversion.First, "C/E"),
        ("C", "major", ChordInversion.Second, "C/G"),
        ("C", "minor7", ChordInversion.Third, "Cm7/A#"),
        ("F", "minor7", ChordInversion.Third, "Fm7/Eb"),
        ("Bb", "major7", ChordInversion.First, "Bbmaj7/D"),
        ("C", "power-chord-octave", ChordInversion.Second, "C5(8)"),
        ("C", "nope", ChordInversion.First, "C"),
    ],
)
def test_display_name(
    root: str, chord_type: str, inversion: ChordInversion, name: str
) -> None:
    """Inversions are named with slash notation in the key's spelling."""
    assert display_name(root, chord_type, inversion) == name


@pytest.mark.parametrize(
    "names, symbol",
    [
        (["C4", "E4", "G4"], "C"),
        (["E3", "G3", "C4"], "C"),
        (["A3", "C4", "E4"], "Am"),
        (["G2", "B2", "D3", "F3"], "G7"),
        (["C4", "C#4", "D4", "D#4", "E4"], None),
        ([], None),
    ],
)
def test_identify_chord(names: List[str], symbol: str) -> None:
    assert identify_chord(Note.parse(n) for n in names) == symbol


def test_identify_prefers_lowest_pitch_class_root() -> None:
    """Ambiguous sets are named from the lowest pitch class first."""
    notes = [Note.parse(n) for n in ["A3", "C4", "E4", "G4"]]
    assert identify_chord(notes) == "C6"


def test_available_inversions() -> None:
    """One inversion per chord tone, capped at six."""
    assert CHORD_LOOKUP["major"].available_inversions == [
        ChordInversion.Root,
        ChordInversion.First,
        ChordInversion.Second,
    ]
    assert len(CHORD_LOOKUP["power-chord"].available_inversions) == 2
    assert len(CHORD_LOOKUP["major13"].available_inversions) == 6


def test_inversion_names() -> None:
    assert ChordInversion.Root.display_name == "Root Position"
    assert ChordInversion.First.display_name == "First Inversion"
    assert ChordInversion.Third.index == 3


def test_catalog() -> None:
    """Chord types are unique and every chord starts on its root."""
    assert len(CHORD_LOOKUP) == len(CHORDS)
    for chord in CHORDS:
        assert chord.intervals[0] == 0
        assert list(chord.intervals) == sorted(chord.intervals)
    assert COMMON_CHORDS[0] is CHORD_LOOKUP["major"]
    assert CHORD_LOOKUP["minor7"].symbol_for("A") == "Am7"
    assert str(CHORD_LOOKUP["minor7"]) == "Minor 7th"


def test_chords_by_category() -> None:
    """Categories keep menu order and cover the whole catalog."""
    categories = chords_by_category()
    assert list(categories)[0] == "Basic Triads"
    assert categories["Basic Triads"][0].type == "major"
    assert "Power Chords" in categories
    assert sum(len(chords) for chords in categories.values()) == len(CHORDS)


def test_lookup() -> None:
    assert get_chord("minor") is CHORD_LOOKUP["minor"]
    assert get_chord("nope") is None
    with pytest.raises(UnknownChordTypeError) as info:
        require_chord("nope")
    assert str(info.value) == "Unknown chord type entry: nope"


def test_pitch_class_set_collapses_duplicates() -> None:
    chord = CHORD_LOOKUP["power-chord-octave"]
    assert chord.tones(2) == [2, 9, 2]
    assert chord.pitch_class_set(2) == frozenset([2, 9])
