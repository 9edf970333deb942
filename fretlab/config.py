"""Configuration module for fretlab.

This module defines the immutable fretboard configuration, the view modes
and layouts it selects between, and pure helpers that return updated
configurations. Nothing here computes highlights; see ``fretlab.fretboard``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto, unique
from typing import FrozenSet, List, Optional, Tuple

from fretlab import constants
from fretlab.base import InvalidRangeError, MatchException, check_range
from fretlab.chord import ChordInversion, display_name
from fretlab.note import Note, Spelling, pitch_class_of, spelling_for_root
from fretlab.scale import available_modes, get_scale
from fretlab.tuning import STANDARD_TUNING, Tuning


@unique
class ViewMode(Enum):
    """What the fretboard highlights."""

    Intervals = auto()  # Selected intervals above the root
    Scales = auto()  # Members of the selected scale or mode
    ChordInversions = auto()  # A chord voicing in a chosen inversion
    OpenChords = auto()  # Chord voicings near the nut
    BarreChords = auto()  # Chord voicings as barre shapes
    AdvancedChords = auto()  # Extended and altered chord voicings

    @property
    def display_name(self) -> str:
        """Get user-friendly display name for the view mode."""
        names = {
            ViewMode.Intervals: "Intervals",
            ViewMode.Scales: "Scales",
            ViewMode.ChordInversions: "Chord Inversions",
            ViewMode.OpenChords: "Open Chords",
            ViewMode.BarreChords: "Barre Chords",
            ViewMode.AdvancedChords: "Advanced Chords",
        }
        return names[self]

    @property
    def is_chord_mode(self) -> bool:
        return self in (
            ViewMode.ChordInversions,
            ViewMode.OpenChords,
            ViewMode.BarreChords,
            ViewMode.AdvancedChords,
        )


@unique
class Layout(Enum):
    """Screen orientation of the fretboard: handedness times string order.

    Highlights are computed in (string, fret) coordinates; a layout only maps
    those to (row, column) screen coordinates. Every layout is a product of
    at most one horizontal and one vertical reflection, so each one is its
    own inverse.
    """

    RightHandedBassTop = auto()  # Nut on the left, reference string on top
    RightHandedBassBottom = auto()  # Nut on the left, reference string at the bottom
    LeftHandedBassTop = auto()  # Nut on the right, reference string on top
    LeftHandedBassBottom = auto()  # Nut on the right, reference string at the bottom

    @property
    def display_name(self) -> str:
        """Get user-friendly display name for the layout."""
        hand = "LH" if self.is_left_handed else "RH"
        bass = "Bass Top" if self.is_bass_top else "Bass Bottom"
        return f"{hand} / {bass}"

    @property
    def is_left_handed(self) -> bool:
        return self in (Layout.LeftHandedBassTop, Layout.LeftHandedBassBottom)

    @property
    def is_bass_top(self) -> bool:
        return self in (Layout.RightHandedBassTop, Layout.LeftHandedBassTop)

    def apply_to_coords(
        self, row: int, col: int, max_row: int, max_col: int
    ) -> Tuple[int, int]:
        """Apply this layout to logical coordinates.

        Args:
            row: The string index (0-based).
            col: The fret offset from the start of the visible window.
            max_row: Highest string index.
            max_col: Highest fret offset in the window.

        Returns:
            Tuple of (screen_row, screen_col) after transformation.
        """
        if self == Layout.RightHandedBassTop:
            return (row, col)
        elif self == Layout.RightHandedBassBottom:
            return (max_row - row, col)
        elif self == Layout.LeftHandedBassTop:
            return (row, max_col - col)
        elif self == Layout.LeftHandedBassBottom:
            return (max_row - row, max_col - col)
        else:
            raise MatchException(self)

    def inverse(self) -> Layout:
        """Get the inverse transformation (every layout is self-inverse)."""
        return self


@dataclass(frozen=True)
class FretboardConfig:
    """Immutable parameter set for one fretboard.

    Update with ``dataclasses.replace`` or the helper functions below; the
    highlight map is always computed from a config, never stored on it.
    """

    root: str  # Root pitch-class name, e.g. "C" or "Bb"
    view_mode: ViewMode  # What to highlight
    scale: str  # Scale name from the scale catalog
    mode_index: int  # Mode of the scale, taken modulo its length
    chord_type: str  # Chord type from the chord catalog
    chord_inversion: ChordInversion  # Inversion of the chord voicing
    tuning: Tuple[str, ...]  # Open-string note names, reference string first
    string_count: int  # Number of strings shown
    fret_count: int  # Number of frets (not counting the open string)
    selected_octaves: FrozenSet[int]  # Octaves to highlight; empty means {3}
    selected_intervals: FrozenSet[int]  # Extended intervals shown in interval mode
    show_additional_octaves: bool  # Mark chord tones in unselected octaves
    show_all_positions: bool  # Show every position of each voicing note
    visible_fret_start: int  # First visible fret (inclusive)
    visible_fret_end: Optional[int]  # Last visible fret (exclusive); None is fret_count + 1
    layout: Layout  # Screen orientation

    @property
    def is_scale_mode(self) -> bool:
        return self.view_mode == ViewMode.Scales

    @property
    def is_interval_mode(self) -> bool:
        return self.view_mode == ViewMode.Intervals

    @property
    def is_chord_mode(self) -> bool:
        return self.view_mode.is_chord_mode

    @property
    def octave_count(self) -> int:
        """Exactly the number of selected octaves, at least 1."""
        return max(1, len(self.selected_octaves))

    @property
    def effective_octaves(self) -> FrozenSet[int]:
        """The selected octaves, or the default octave when none are selected."""
        if len(self.selected_octaves) == 0:
            return frozenset([constants.DEFAULT_OCTAVE])
        return self.selected_octaves

    @property
    def min_selected_octave(self) -> int:
        return min(self.effective_octaves)

    @property
    def max_selected_octave(self) -> int:
        return max(self.effective_octaves)

    @property
    def selected_chord_octave(self) -> int:
        """Octave the chord voicing is built in: the lowest selected one."""
        return self.min_selected_octave

    @property
    def fret_window(self) -> Tuple[int, int]:
        """The visible frets as a half-open range ``(start, end)``.

        Raises:
            InvalidRangeError: If the window leaves ``0..fret_count + 1`` or
                ends before it starts.
        """
        limit = self.fret_count + 1
        end = limit if self.visible_fret_end is None else self.visible_fret_end
        check_range("Visible fret end", end, 0, limit)
        check_range("Visible fret start", self.visible_fret_start, 0, end)
        return (self.visible_fret_start, end)

    @property
    def visible_fret_count(self) -> int:
        start, end = self.fret_window
        return end - start

    @property
    def spelling(self) -> Spelling:
        """Accidental preference of the configured key."""
        return spelling_for_root(self.root)

    @property
    def root_pitch_class(self) -> int:
        return pitch_class_of(self.root)

    @property
    def effective_root(self) -> str:
        """The root the highlights are built from.

        In scale mode this is the root of the selected mode; otherwise it is
        the configured root. Unknown scales fall back to the configured root.
        """
        if self.is_scale_mode:
            scale = get_scale(self.scale)
            if scale is not None:
                return scale.mode_root_name(
                    self.root_pitch_class, self.mode_index, self.spelling
                )
        return self.root

    @property
    def effective_root_pitch_class(self) -> int:
        return pitch_class_of(self.effective_root)

    @property
    def available_modes(self) -> List[str]:
        return available_modes(self.scale)

    @property
    def current_mode_name(self) -> str:
        modes = self.available_modes
        if len(modes) > 0:
            return modes[self.mode_index % len(modes)]
        return f"Mode {self.mode_index + 1}"

    @property
    def current_chord_name(self) -> str:
        return display_name(self.root, self.chord_type, self.chord_inversion)

    @property
    def open_strings(self) -> List[Note]:
        """Open-string notes of the strings shown, reference string first.

        When the tuning and the string count disagree only the strings present
        in both are used.
        """
        if len(self.tuning) != self.string_count:
            logging.warning(
                "Tuning has %d strings but string count is %d",
                len(self.tuning),
                self.string_count,
            )
        count = min(len(self.tuning), self.string_count)
        return [Note.parse(name) for name in self.tuning[:count]]


def init_config(tuning: Tuning = STANDARD_TUNING) -> FretboardConfig:
    """Initialize a default configuration.

    Creates a configuration for a right-handed fretboard with 12 frets showing
    the root interval of C in octave 3.

    Args:
        tuning: The tuning to start with; six-string standard by default.

    Returns:
        A FretboardConfig with default settings.
    """
    return FretboardConfig(
        root=constants.DEFAULT_ROOT,
        view_mode=ViewMode.Intervals,
        scale=constants.DEFAULT_SCALE,
        mode_index=0,
        chord_type=constants.DEFAULT_CHORD,
        chord_inversion=ChordInversion.Root,
        tuning=tuple(tuning.names),
        string_count=tuning.string_count,
        fret_count=constants.DEFAULT_FRET_COUNT,
        selected_octaves=frozenset([constants.DEFAULT_OCTAVE]),
        selected_intervals=frozenset([0]),
        show_additional_octaves=False,
        show_all_positions=False,
        visible_fret_start=0,
        visible_fret_end=None,
        layout=Layout.RightHandedBassTop,
    )


def with_tuning(config: FretboardConfig, tuning: Tuning) -> FretboardConfig:
    """Switch tuning, keeping the string count in sync with it."""
    return replace(config, tuning=tuple(tuning.names), string_count=tuning.string_count)


def with_scale(config: FretboardConfig, scale: str) -> FretboardConfig:
    """Select a scale and restart from its first mode."""
    return replace(config, scale=scale, mode_index=0)


def with_chord(
    config: FretboardConfig,
    chord_type: str,
    inversion: ChordInversion = ChordInversion.Root,
) -> FretboardConfig:
    """Select a chord type and inversion."""
    return replace(config, chord_type=chord_type, chord_inversion=inversion)


def with_fret_window(
    config: FretboardConfig, start: int, end: Optional[int]
) -> FretboardConfig:
    """Set the visible fret window; ``end`` is exclusive.

    Raises:
        InvalidRangeError: If the window does not fit the fretboard.
    """
    updated = replace(config, visible_fret_start=start, visible_fret_end=end)
    low, high = updated.fret_window
    logging.debug("Visible frets set to [%d, %d)", low, high)
    return updated


def toggle_octave(config: FretboardConfig, octave: int) -> FretboardConfig:
    """Add an octave to the selection, or remove it if already selected.

    Raises:
        InvalidRangeError: If the octave is outside the selectable range.
    """
    check_range("Octave", octave, constants.MIN_OCTAVE, constants.MAX_OCTAVE)
    return replace(
        config, selected_octaves=config.selected_octaves.symmetric_difference([octave])
    )


def toggle_interval(config: FretboardConfig, interval: int) -> FretboardConfig:
    """Add an extended interval to the selection, or remove it.

    The root interval is kept when it is the only one selected, so interval
    mode always shows at least the root.

    Raises:
        InvalidRangeError: If the interval is outside ``0..47``.
    """
    if interval < 0 or interval >= constants.MAX_EXTENDED_INTERVAL:
        raise InvalidRangeError(
            "Interval", interval, 0, constants.MAX_EXTENDED_INTERVAL - 1
        )
    selected = config.selected_intervals
    if interval in selected:
        if len(selected) > 1 or interval != 0:
            selected = selected - {interval}
    else:
        selected = selected | {interval}
    return replace(config, selected_intervals=selected)
