"""Tests for scales, modes and the scale catalog."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fretlab.base import UnknownScaleError
from fretlab.note import Note, Spelling
from fretlab.scale import (
    SCALE_LOOKUP,
    SCALES,
    Scale,
    available_modes,
    get_scale,
    require_scale,
)
from tests.fretlab.hypo import configure_hypo

configure_hypo()

MAJOR = SCALE_LOOKUP["Major"]


def test_major_pitch_classes() -> None:
    """C major contains the white keys."""
    assert MAJOR.pitch_class_set(0) == frozenset([0, 2, 4, 5, 7, 9, 11])
    assert MAJOR.intervals == [0, 2, 4, 5, 7, 9, 11]


def test_chromatic_covers_all_pitch_classes() -> None:
    assert SCALE_LOOKUP["Chromatic"].pitch_class_set(0) == frozenset(range(12))


@given(st.sampled_from(SCALES), st.integers(min_value=0, max_value=11))
def test_pitch_class_set_size(scale: Scale, root: int) -> None:
    """Every scale yields one distinct pitch class per step."""
    assert len(scale.pitch_class_set(root)) == len(scale.step_pattern)


@given(st.sampled_from(SCALES), st.integers(min_value=0, max_value=11))
def test_mode_roots_distinct(scale: Scale, root: int) -> None:
    """The roots of all modes of a scale are distinct pitch classes."""
    roots = {scale.mode_root(root, i) for i in range(len(scale))}
    assert len(roots) == len(scale)


def test_catalog_invariants() -> None:
    """Every shipped scale spans exactly one octave."""
    assert len(SCALES) == len(SCALE_LOOKUP)
    for scale in SCALES:
        assert sum(scale.step_pattern) == 12
        assert all(step > 0 for step in scale.step_pattern)


@pytest.mark.parametrize(
    "pattern",
    [(), (1, 2), (0, 12), (6, 6, 1)],
)
def test_invalid_step_pattern(pattern: tuple[int, ...]) -> None:
    """Patterns that do not span one octave are rejected."""
    with pytest.raises(AssertionError):
        Scale("Bad", pattern)


@pytest.mark.parametrize(
    "text, degree",
    [("C4", 1), ("E4", 3), ("B2", 7), ("F#4", None), ("Bb4", None)],
)
def test_degree_of(text: str, degree: int) -> None:
    """Degrees are 1-based and notes outside the scale have none."""
    assert MAJOR.degree_of(Note.parse(text), 0) == degree


def test_mode_root() -> None:
    """Mode roots walk the parent scale and wrap around."""
    assert MAJOR.mode_root(0, 0) == 0
    assert MAJOR.mode_root(0, 1) == 2
    assert MAJOR.mode_root(0, 5) == 9
    assert MAJOR.mode_root(0, 8) == 2
    assert MAJOR.mode_root_name(5, 3, Spelling.Flat) == "Bb"
    assert MAJOR.mode_root_name(5, 3) == "A#"


def test_modes() -> None:
    """Modes rotate the step pattern and carry their names."""
    dorian = MAJOR.mode(1)
    assert dorian.name == "Dorian"
    assert dorian.step_pattern == SCALE_LOOKUP["Dorian"].step_pattern
    assert dorian.mode_names[0] == "Dorian"
    assert MAJOR.mode_intervals(5) == SCALE_LOOKUP["Natural Minor"].intervals
    assert MAJOR.mode(7).step_pattern == MAJOR.step_pattern
    assert MAJOR.mode(7).name == "Ionian"


def test_degree_labels() -> None:
    assert MAJOR.degree_labels == ["1", "2", "3", "4", "5", "6", "7"]
    assert SCALE_LOOKUP["Natural Minor"].degree_labels == [
        "1",
        "2",
        "b3",
        "4",
        "5",
        "b6",
        "b7",
    ]


def test_available_modes() -> None:
    """Named modes are listed; other scales fall back to numbered modes."""
    assert available_modes("Major")[:3] == ["Ionian", "Dorian", "Phrygian"]
    assert len(available_modes("Harmonic Minor")) == 7
    assert available_modes("Blues") == []
    assert available_modes("Nope") == []
    blues = SCALE_LOOKUP["Blues"]
    assert blues.mode_name(2) == "Mode 3"


def test_lookup() -> None:
    """Missing scales are None from get and an error from require."""
    assert get_scale("Major") is MAJOR
    assert get_scale("Nope") is None
    assert require_scale("Blues").name == "Blues"
    with pytest.raises(UnknownScaleError) as info:
        require_scale("Nope")
    assert str(info.value) == "Unknown scale entry: Nope"
    with pytest.raises(KeyError):
        require_scale("Nope")


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        SCALE_LOOKUP["Mine"] = MAJOR  # type: ignore[index]


def test_classifier() -> None:
    classifier = MAJOR.to_classifier(7)
    assert classifier.root == 7
    assert classifier.is_root(19)
    assert classifier.is_member(6)
    assert not classifier.is_member(5)
    assert classifier.degree(2) == 5
    assert len(classifier.members) == 7
