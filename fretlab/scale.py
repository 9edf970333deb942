"""Musical scale definitions and note classification for fretlab.

This module provides the Scale type, defined by a step pattern that sums to
one octave, along with mode derivation and a read-only catalog of scales
from various musical traditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from fretlab import constants
from fretlab.base import UnknownScaleError
from fretlab.note import Note, Spelling, pitch_class_name

_DEGREE_LABELS = (
    "1", "b2", "2", "b3", "3", "4", "b5", "5", "b6", "6", "b7", "7",
)


class ScaleClassifier:
    """Classifies pitch classes relative to a specific scale and root.

    Determines whether a pitch class is the root of the scale, a member of
    the scale, and which degree it occupies. Used by the fretboard mapper to
    assign highlight roles.
    """

    def __init__(self, root: int, degrees: Dict[int, int]) -> None:
        """Initialize the classifier with a root and its degree table.

        Args:
            root: The root pitch class of the scale.
            degrees: Mapping from member pitch class to 1-based degree.
        """
        self._root = root
        self._degrees = degrees

    @property
    def root(self) -> int:
        return self._root

    @property
    def members(self) -> FrozenSet[int]:
        return frozenset(self._degrees)

    def is_root(self, pitch_class: int) -> bool:
        """Check if a pitch class is the root of this scale."""
        return self._root == pitch_class % constants.MAX_NOTES

    def is_member(self, pitch_class: int) -> bool:
        """Check if a pitch class is a member of this scale."""
        return pitch_class % constants.MAX_NOTES in self._degrees

    def degree(self, pitch_class: int) -> Optional[int]:
        """The 1-based degree of a pitch class, or None if not a member."""
        return self._degrees.get(pitch_class % constants.MAX_NOTES)


@dataclass(frozen=True)
class Scale:
    """Represents a musical scale with its name and step pattern.

    The step pattern lists the semitone steps between consecutive degrees,
    wrapping back to the root: the major scale is ``(2, 2, 1, 2, 2, 2, 1)``.
    Steps are positive and always sum to exactly one octave.
    """

    name: str
    """The human-readable name of this scale."""
    step_pattern: Tuple[int, ...]
    """Semitone steps between consecutive degrees, summing to 12."""
    mode_names: Tuple[str, ...] = ()
    """Display names of the modes, in rotation order, if the scale has them."""

    def __post_init__(self) -> None:
        assert len(self.step_pattern) > 0
        assert all(step > 0 for step in self.step_pattern)
        assert sum(self.step_pattern) == constants.MAX_NOTES
        assert len(self.mode_names) in (0, len(self.step_pattern))

    def __len__(self) -> int:
        return len(self.step_pattern)

    @property
    def intervals(self) -> List[int]:
        """Semitone offsets of each degree from the root, starting with 0.

        For example, the major scale yields ``[0, 2, 4, 5, 7, 9, 11]``.
        """
        return [0] + list(accumulate(self.step_pattern[:-1]))

    def pitch_classes(self, root: int) -> List[int]:
        """The pitch classes of each degree in order, starting at the root."""
        return [(root + offset) % constants.MAX_NOTES for offset in self.intervals]

    def pitch_class_set(self, root: int) -> FrozenSet[int]:
        """The set of pitch classes of this scale built on the given root.

        Args:
            root: Root pitch class (0-11).

        Returns:
            A set with exactly one entry per degree of the scale.
        """
        members = frozenset(self.pitch_classes(root))
        assert len(members) == len(self.step_pattern)
        return members

    def contains_pitch_class(self, root: int, pitch_class: int) -> bool:
        """Check if a pitch class belongs to this scale built on root."""
        return (pitch_class - root) % constants.MAX_NOTES in self.intervals

    def degree_of(self, note: Note, root: int) -> Optional[int]:
        """The 1-based scale degree of a note, or None if it is not in the scale.

        Args:
            note: The note to classify.
            root: Root pitch class of the scale.

        Returns:
            The degree (1 for the root), or None for notes outside the scale.
        """
        return self.to_classifier(root).degree(note.pitch_class)

    def mode_root(self, root: int, mode_index: int) -> int:
        """The root pitch class of a mode of this scale.

        Args:
            root: Root pitch class of the parent scale.
            mode_index: Index of the mode; taken modulo the number of degrees.

        Returns:
            The pitch class of the degree the mode starts on.
        """
        return self.pitch_classes(root)[mode_index % len(self.step_pattern)]

    def mode_step_pattern(self, mode_index: int) -> Tuple[int, ...]:
        """The step pattern rotated to start at the given mode."""
        shift = mode_index % len(self.step_pattern)
        return self.step_pattern[shift:] + self.step_pattern[:shift]

    def mode_intervals(self, mode_index: int) -> List[int]:
        """Semitone offsets of each degree from the mode's own root."""
        return [0] + list(accumulate(self.mode_step_pattern(mode_index)[:-1]))

    def mode(self, mode_index: int) -> Scale:
        """The mode as a scale in its own right, named after the mode."""
        shift = mode_index % len(self.step_pattern)
        return Scale(
            name=self.mode_name(shift),
            step_pattern=self.mode_step_pattern(shift),
            mode_names=self.mode_names[shift:] + self.mode_names[:shift],
        )

    def mode_name(self, mode_index: int) -> str:
        """Display name of a mode, falling back to ``"Mode N"``."""
        if mode_index < len(self.mode_names):
            return self.mode_names[mode_index]
        return f"Mode {mode_index + 1}"

    def mode_root_name(
        self, root: int, mode_index: int, spelling: Spelling = Spelling.Sharp
    ) -> str:
        """Name of the mode root pitch class, spelled with the given preference."""
        return pitch_class_name(self.mode_root(root, mode_index), spelling)

    @property
    def degree_labels(self) -> List[str]:
        """Degree labels relative to the major scale, e.g. ``["1", "2", "b3", ...]``."""
        return [_DEGREE_LABELS[offset] for offset in self.intervals]

    def to_classifier(self, root: int) -> ScaleClassifier:
        """Create a scale classifier for this scale with the given root.

        Args:
            root: The root pitch class for this scale instance.

        Returns:
            A ScaleClassifier that can determine pitch relationships
            to this scale.
        """
        degrees: Dict[int, int] = {}
        for index, pitch_class in enumerate(self.pitch_classes(root)):
            assert pitch_class not in degrees
            degrees[pitch_class] = index + 1
        return ScaleClassifier(root % constants.MAX_NOTES, degrees)

    def __str__(self) -> str:
        return self.name


_DIATONIC_MODES = (
    "Ionian",
    "Dorian",
    "Phrygian",
    "Lydian",
    "Mixolydian",
    "Aeolian",
    "Locrian",
)

SCALES: Tuple[Scale, ...] = (
    Scale("Chromatic", (1,) * 12),
    Scale("Major", (2, 2, 1, 2, 2, 2, 1), _DIATONIC_MODES),
    Scale(
        "Natural Minor",
        (2, 1, 2, 2, 1, 2, 2),
        _DIATONIC_MODES[5:] + _DIATONIC_MODES[:5],
    ),
    Scale(
        "Harmonic Minor",
        (2, 1, 2, 2, 1, 3, 1),
        (
            "Harmonic Minor",
            "Locrian #6",
            "Ionian #5",
            "Dorian #4",
            "Phrygian Dominant",
            "Lydian #9",
            "Altered Dominant",
        ),
    ),
    Scale(
        "Melodic Minor",
        (2, 1, 2, 2, 2, 2, 1),
        (
            "Melodic Minor",
            "Dorian b2",
            "Lydian Augmented",
            "Lydian Dominant",
            "Mixolydian b6",
            "Locrian #2",
            "Altered",
        ),
    ),
    # Pentatonic and blues
    Scale("Major Pentatonic", (2, 2, 3, 2, 3)),
    Scale("Minor Pentatonic", (3, 2, 2, 3, 2)),
    Scale("Blues", (3, 2, 1, 1, 3, 2)),
    # Church modes
    Scale("Dorian", (2, 1, 2, 2, 2, 1, 2)),
    Scale("Phrygian", (1, 2, 2, 2, 1, 2, 2)),
    Scale("Lydian", (2, 2, 2, 1, 2, 2, 1)),
    Scale("Mixolydian", (2, 2, 1, 2, 2, 1, 2)),
    Scale("Aeolian", (2, 1, 2, 2, 1, 2, 2)),
    Scale("Locrian", (1, 2, 2, 1, 2, 2, 2)),
    # Jazz
    Scale("Bebop Dominant", (2, 2, 1, 2, 2, 1, 1, 1)),
    Scale("Bebop Major", (2, 2, 1, 2, 1, 1, 2, 1)),
    Scale("Altered", (1, 2, 1, 2, 2, 2, 2)),
    Scale("Whole Tone", (2, 2, 2, 2, 2, 2)),
    Scale("Diminished", (2, 1, 2, 1, 2, 1, 2, 1)),
    # World
    Scale("Hungarian Minor", (2, 1, 3, 1, 1, 3, 1)),
    Scale("Japanese", (1, 4, 2, 1, 4)),
    Scale("Arabic", (1, 3, 1, 2, 1, 3, 1)),
    Scale("Gypsy", (1, 3, 1, 2, 1, 2, 2)),
    # Exotic
    Scale("Enigmatic", (1, 3, 2, 2, 2, 1, 1)),
    Scale("Double Harmonic", (1, 3, 1, 2, 1, 3, 1)),
    Scale("Neapolitan Major", (1, 2, 2, 2, 2, 2, 1)),
    Scale("Neapolitan Minor", (1, 2, 2, 2, 1, 3, 1)),
)
"""All shipped scales, in menu order."""

SCALE_LOOKUP: Mapping[str, Scale] = MappingProxyType({s.name: s for s in SCALES})
"""Read-only lookup from scale name to Scale."""


def get_scale(name: str) -> Optional[Scale]:
    """Look up a scale by name, returning None when it is not in the catalog."""
    return SCALE_LOOKUP.get(name)


def require_scale(name: str) -> Scale:
    """Look up a scale by name.

    Raises:
        UnknownScaleError: If the scale is not in the catalog.
    """
    scale = SCALE_LOOKUP.get(name)
    if scale is None:
        raise UnknownScaleError(name)
    return scale


def available_modes(scale_name: str) -> List[str]:
    """Ordered mode names of a scale.

    Returns an empty list for scales without named modes and for unknown
    scales; callers fall back to ``"Mode N"``.
    """
    scale = SCALE_LOOKUP.get(scale_name)
    return [] if scale is None else list(scale.mode_names)
