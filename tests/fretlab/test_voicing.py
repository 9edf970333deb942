"""Tests for placing chord voicings on the fretboard."""

from typing import List

import pytest

from fretlab.base import UnknownChordTypeError
from fretlab.chord import ChordInversion
from fretlab.note import Note
from fretlab.tuning import STANDARD_TUNING, StringPos
from fretlab.voicing import (
    ChordTone,
    Difficulty,
    analyze_fingering,
    chord_diagram,
    chord_tones,
    is_voicing_complete,
    missing_chord_tones,
    optimal_fingering,
    tablature,
)

STRINGS = list(STANDARD_TUNING.strings)


def first_inversion() -> List[ChordTone]:
    return chord_tones("C", 3, "major", ChordInversion.First, STRINGS, max_frets=12)


def shape(*positions: StringPos) -> List[ChordTone]:
    """Fake fingering at the given positions; only the positions matter."""
    return [
        ChordTone(
            position=pos,
            note=Note.from_midi(STRINGS[pos.str_index].midi + pos.fret),
            interval=0,
            chord_tone_index=i,
            voicing_position=i,
        )
        for i, pos in enumerate(positions)
    ]


def test_chord_tones() -> None:
    """Every playable position is listed, bass note first."""
    tones = first_inversion()
    assert [t.position for t in tones] == [
        StringPos(0, 12),
        StringPos(1, 7),
        StringPos(2, 2),
        StringPos(1, 10),
        StringPos(2, 5),
        StringPos(3, 0),
        StringPos(2, 10),
        StringPos(3, 5),
        StringPos(4, 1),
    ]
    assert [t.voicing_position for t in tones[::3]] == [0, 1, 2]
    assert [t.chord_tone_index for t in tones[::3]] == [1, 2, 0]
    bass = tones[0]
    assert bass.midi == 52
    assert bass.interval == 4
    assert bass.interval_label == "3"
    assert not bass.is_root
    assert tones[-1].is_root


def test_chord_tones_fret_limits() -> None:
    tones = chord_tones(
        "C", 3, "major", ChordInversion.First, STRINGS, max_frets=12, min_fret=5
    )
    assert all(5 <= t.fret <= 12 for t in tones)
    assert len(tones) == 6
    assert chord_tones("C", 3, "major", 0, STRINGS, max_frets=0, min_fret=0) == [
        tone for tone in chord_tones("C", 3, "major", 0, STRINGS, 12) if tone.fret == 0
    ]


def test_chord_tones_enharmonic_root() -> None:
    """B# voices from C3 and Cb from B3, never from a neighboring octave."""
    b_sharp = chord_tones("B#", 3, "major", 0, STRINGS, max_frets=12)
    plain = chord_tones("C", 3, "major", 0, STRINGS, max_frets=12)
    assert [t.position for t in b_sharp] == [t.position for t in plain]
    c_flat = chord_tones("Cb", 3, "major", 0, STRINGS, max_frets=12)
    assert c_flat[0].midi == 59
    assert c_flat[0].is_root


def test_chord_tones_unknown_chord() -> None:
    with pytest.raises(UnknownChordTypeError):
        chord_tones("C", 3, "nope", 0, STRINGS, max_frets=12)


def test_chord_tone_index_with_repeated_pitch_class() -> None:
    """Repeated pitch classes keep their own chord tone index."""
    tones = chord_tones("C", 3, "power-chord-octave", 0, STRINGS, max_frets=12)
    fingering = optimal_fingering(tones)
    assert [t.midi for t in fingering] == [48, 55, 60]
    assert [t.chord_tone_index for t in fingering] == [0, 1, 2]
    assert is_voicing_complete(fingering, "power-chord-octave")


def test_optimal_fingering() -> None:
    """The lowest fret wins for every voicing note."""
    fingering = optimal_fingering(first_inversion())
    assert [t.position for t in fingering] == [
        StringPos(2, 2),
        StringPos(3, 0),
        StringPos(4, 1),
    ]
    assert tablature(fingering, 6) == ["x", "x", "2", "0", "1", "x"]
    assert optimal_fingering([]) == []


def test_optimal_fingering_prefers_nearby_strings() -> None:
    """Ties on fret go to the string closest to the previous pick."""
    tones = [
        ChordTone(StringPos(4, 2), Note.parse("C#4"), 0, 0, 0),
        ChordTone(StringPos(0, 5), Note.parse("A2"), 7, 1, 1),
        ChordTone(StringPos(3, 5), Note.parse("C4"), 7, 1, 1),
    ]
    assert [t.position for t in optimal_fingering(tones)] == [
        StringPos(4, 2),
        StringPos(3, 5),
    ]


@pytest.mark.parametrize(
    "positions, difficulty, reason",
    [
        ([StringPos(2, 2), StringPos(3, 0), StringPos(4, 1)], Difficulty.Easy, None),
        (
            [StringPos(0, 1), StringPos(1, 2), StringPos(2, 3), StringPos(3, 4)],
            Difficulty.Medium,
            "Requires moderate finger stretch",
        ),
        (
            [StringPos(0, 1), StringPos(4, 5)],
            Difficulty.Hard,
            "Requires significant finger stretch",
        ),
        (
            [StringPos(0, 1), StringPos(5, 1)],
            Difficulty.VeryHard,
            "May not be physically playable",
        ),
    ],
)
def test_analyze_fingering(
    positions: List[StringPos], difficulty: Difficulty, reason: str
) -> None:
    analysis = analyze_fingering(shape(*positions))
    assert analysis.difficulty == difficulty
    assert analysis.reason == reason
    assert analysis.playable == (difficulty != Difficulty.VeryHard)


def test_analyze_empty_fingering() -> None:
    analysis = analyze_fingering([])
    assert analysis.difficulty == Difficulty.Impossible
    assert analysis.reason == "No valid fingering found"
    assert not analysis.playable


def test_open_strings_do_not_stretch() -> None:
    """Open strings count towards the string span only."""
    analysis = analyze_fingering(shape(StringPos(0, 0), StringPos(1, 3)))
    assert analysis.fret_span == 1
    assert analysis.string_span == 2
    assert analysis.frets == [3]


def test_chord_diagram() -> None:
    diagram = chord_diagram(optimal_fingering(first_inversion()), 6)
    assert diagram.start_fret == 1
    assert not diagram.show_position_marker
    assert diagram.fret_span == 1
    assert diagram.muted_strings == [0, 1, 5]
    assert diagram.open_strings == [3]
    high = chord_diagram(shape(StringPos(0, 5), StringPos(1, 7)), 6)
    assert high.show_position_marker
    assert high.start_fret == 5
    assert high.fret_span == 2


def test_completeness() -> None:
    """Voicings are complete when every chord interval is played."""
    fingering = optimal_fingering(first_inversion())
    assert is_voicing_complete(fingering, "major")
    assert missing_chord_tones(fingering, "C", "major") == []
    assert not is_voicing_complete(fingering[:2], "major")
    assert missing_chord_tones(fingering[:2], "C", "major") == ["C"]
    assert missing_chord_tones([], "F", "minor") == ["F", "Ab", "C"]
    assert not is_voicing_complete(fingering, "nope")
    assert missing_chord_tones(fingering, "C", "nope") == []
