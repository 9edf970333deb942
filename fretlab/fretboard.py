"""Fretboard highlight mapping for fretlab.

This module projects scale, interval and chord membership onto the string
by fret grid of a configured fretboard. The result is a ``HighlightMap``: a
pure value computed fresh from a ``FretboardConfig`` that the presentation
layer places on screen according to the configured layout.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import Dict, FrozenSet, List, Optional, Set, Tuple, override

from fretlab import constants
from fretlab.base import InvalidRangeError, MatchException, check_range
from fretlab.chord import get_chord
from fretlab.color import WHITE, Color, color_for_degree
from fretlab.config import FretboardConfig, ViewMode, toggle_interval
from fretlab.interval import interval_label
from fretlab.note import Note, Spelling, pitch_class_name
from fretlab.scale import ScaleClassifier, get_scale
from fretlab.tuning import StringBounds, StringPos
from fretlab.voicing import chord_tones, optimal_fingering


def octave_of(midi: int) -> int:
    """Octave of a MIDI note in scientific pitch notation (MIDI 60 is octave 4)."""
    return midi // constants.MAX_NOTES - 1


@unique
class HighlightKind(Enum):
    """How strongly a cell is highlighted."""

    Primary = auto()  # Part of the selected scale, intervals or voicing
    AdditionalOctave = auto()  # A chord tone outside the selected octaves


@unique
class HighlightRole(Enum):
    """What a highlighted cell means musically."""

    Root = auto()  # The root pitch class, whatever the kind
    ScaleDegree = auto()  # A scale member or selected interval
    ChordTone = auto()  # A note of the chord voicing
    AdditionalOctave = auto()  # A chord tone in an unselected octave


@dataclass(frozen=True)
class HighlightInfo:
    """Rendering instruction for one highlighted note."""

    midi: int
    """The MIDI note number of the cell."""
    kind: HighlightKind
    """Primary or additional-octave highlight."""
    role: HighlightRole
    """Musical role, used for visual anchoring of roots."""
    color_key: int
    """Extended interval above the anchor root, fed to ``color_for_degree``."""
    interval_label: str
    """Short interval label, e.g. ``"R"`` or ``"b3"``."""
    note_name: str
    """Note name spelled for the key, e.g. ``"Bb"``."""

    @property
    def is_primary(self) -> bool:
        return self.kind == HighlightKind.Primary

    @property
    def is_root(self) -> bool:
        return self.role == HighlightRole.Root

    @property
    def color(self) -> Color:
        """Interval color for primary highlights, white for additional ones."""
        if self.kind == HighlightKind.Primary:
            return color_for_degree(self.color_key)
        elif self.kind == HighlightKind.AdditionalOctave:
            return WHITE
        else:
            raise MatchException(self.kind)


@dataclass(frozen=True)
class HighlightMap:
    """Highlights of every visible cell, plus the octaves being rendered.

    Cells without a highlight are absent. ``notes`` holds one entry per MIDI
    number, preferring a primary highlight when the same pitch is primary on
    one string and additional on another.
    """

    notes: Dict[int, HighlightInfo]
    """Highlight per MIDI note number."""
    cells: Dict[StringPos, HighlightInfo]
    """Highlight per fretboard position."""
    octaves: FrozenSet[int]
    """Octaves the presentation layer renders."""

    @classmethod
    def empty(cls, octaves: FrozenSet[int]) -> HighlightMap:
        return cls({}, {}, octaves)

    def is_empty(self) -> bool:
        return len(self.cells) == 0

    def get(self, str_pos: StringPos) -> Optional[HighlightInfo]:
        return self.cells.get(str_pos)

    def is_highlighted(self, midi: int) -> bool:
        return midi in self.notes

    @property
    def primary_cells(self) -> List[StringPos]:
        return [pos for pos, info in self.cells.items() if info.is_primary]

    @property
    def additional_cells(self) -> List[StringPos]:
        return [pos for pos, info in self.cells.items() if not info.is_primary]

    def placed(self, config: FretboardConfig) -> Dict[Tuple[int, int], HighlightInfo]:
        """Screen placement of the highlighted cells under the config's layout.

        Args:
            config: The config this map was computed from.

        Returns:
            Mapping from (row, column) to highlight, where column 0 is the
            first visible fret for right-handed layouts.
        """
        start, end = config.fret_window
        max_row = len(config.open_strings) - 1
        max_col = end - start - 1
        placed: Dict[Tuple[int, int], HighlightInfo] = {}
        for str_pos, info in self.cells.items():
            coords = config.layout.apply_to_coords(
                str_pos.str_index, str_pos.fret - start, max_row, max_col
            )
            placed[coords] = info
        return placed


class HighlightPredicate(metaclass=ABCMeta):
    """Decides, cell by cell, whether and how a position is highlighted.

    One subclass exists per family of view modes.
    """

    def __init__(
        self, root: Note, octaves: FrozenSet[int], spelling: Spelling
    ) -> None:
        """Initialize the predicate.

        Args:
            root: The anchor root in the lowest selected octave.
            octaves: The effective octave selection.
            spelling: Accidental preference for note names.
        """
        self._root = root
        self._octaves = octaves
        self._spelling = spelling

    @property
    def octaves(self) -> FrozenSet[int]:
        """Octaves to render; the selection unless a subclass widens it."""
        return self._octaves

    def _role(self, midi: int, otherwise: HighlightRole) -> HighlightRole:
        if midi % constants.MAX_NOTES == self._root.pitch_class:
            return HighlightRole.Root
        return otherwise

    def _info(
        self, midi: int, kind: HighlightKind, role: HighlightRole, color_key: int
    ) -> HighlightInfo:
        return HighlightInfo(
            midi=midi,
            kind=kind,
            role=self._role(midi, role),
            color_key=color_key,
            interval_label=interval_label(color_key),
            note_name=pitch_class_name(midi, self._spelling),
        )

    @abstractmethod
    def classify(self, str_pos: StringPos, midi: int) -> Optional[HighlightInfo]:
        """Highlight for the note sounding at a position.

        Args:
            str_pos: The fretboard position.
            midi: The MIDI note number sounding there.

        Returns:
            The highlight, or None if the cell is not highlighted.
        """
        raise NotImplementedError()


class ScalePredicate(HighlightPredicate):
    """Highlights members of a scale or mode in the selected octaves."""

    def __init__(
        self,
        classifier: ScaleClassifier,
        root: Note,
        octaves: FrozenSet[int],
        spelling: Spelling,
    ) -> None:
        super().__init__(root, octaves, spelling)
        self._classifier = classifier
        self._min_octave = min(octaves)

    @override
    def classify(self, str_pos: StringPos, midi: int) -> Optional[HighlightInfo]:
        octave = octave_of(midi)
        if not self._classifier.is_member(midi) or octave not in self._octaves:
            return None
        step = (midi - self._classifier.root) % constants.MAX_NOTES
        color_key = step + constants.MAX_NOTES * (octave - self._min_octave)
        return self._info(
            midi, HighlightKind.Primary, HighlightRole.ScaleDegree, color_key
        )


class IntervalPredicate(HighlightPredicate):
    """Highlights selected extended intervals above the root."""

    def __init__(
        self,
        intervals: FrozenSet[int],
        root: Note,
        octaves: FrozenSet[int],
        spelling: Spelling,
    ) -> None:
        super().__init__(root, octaves, spelling)
        self._intervals = intervals

    @override
    def classify(self, str_pos: StringPos, midi: int) -> Optional[HighlightInfo]:
        extended = midi - self._root.midi
        if extended not in self._intervals or octave_of(midi) not in self._octaves:
            return None
        return self._info(
            midi, HighlightKind.Primary, HighlightRole.ScaleDegree, extended
        )


class ChordPredicate(HighlightPredicate):
    """Highlights the notes of a chord voicing.

    Primary cells are the chosen positions of the voicing notes. With
    additional octaves enabled, other positions of chord-tone pitch classes
    outside the selected octaves are marked as well.
    """

    def __init__(
        self,
        voicing: List[int],
        primary_cells: Optional[FrozenSet[StringPos]],
        show_additional_octaves: bool,
        root: Note,
        octaves: FrozenSet[int],
        spelling: Spelling,
    ) -> None:
        """Initialize the predicate.

        Args:
            voicing: Ascending MIDI notes of the voicing.
            primary_cells: Positions chosen for the voicing notes, or None to
                treat every position of a voicing note as primary.
            show_additional_octaves: Whether to mark chord tones in
                unselected octaves.
            root: The chord root the voicing was built from.
            octaves: The effective octave selection.
            spelling: Accidental preference for note names.
        """
        super().__init__(root, octaves, spelling)
        self._voicing = frozenset(voicing)
        self._pitch_classes = frozenset(m % constants.MAX_NOTES for m in voicing)
        self._primary_cells = primary_cells
        self._show_additional_octaves = show_additional_octaves
        self._rendered = self._render_octaves(voicing, octaves)

    @staticmethod
    def _render_octaves(voicing: List[int], octaves: FrozenSet[int]) -> FrozenSet[int]:
        # Compact voicings step by less than an octave, so their octaves are
        # contiguous: the union is the selection plus the full natural span.
        natural = frozenset(octave_of(m) for m in voicing)
        if not natural <= octaves:
            logging.debug(
                "Voicing spans octaves %s beyond selection %s",
                sorted(natural),
                sorted(octaves),
            )
        return octaves | natural

    @property
    @override
    def octaves(self) -> FrozenSet[int]:
        return self._rendered

    def _is_primary(self, str_pos: StringPos, midi: int) -> bool:
        if self._primary_cells is None:
            return midi in self._voicing
        return str_pos in self._primary_cells

    @override
    def classify(self, str_pos: StringPos, midi: int) -> Optional[HighlightInfo]:
        if self._is_primary(str_pos, midi):
            return self._info(
                midi,
                HighlightKind.Primary,
                HighlightRole.ChordTone,
                midi - self._root.midi,
            )
        if (
            self._show_additional_octaves
            and midi % constants.MAX_NOTES in self._pitch_classes
            and octave_of(midi) not in self._octaves
        ):
            return self._info(
                midi,
                HighlightKind.AdditionalOctave,
                HighlightRole.AdditionalOctave,
                (midi - self._root.midi) % constants.MAX_NOTES,
            )
        return None


def _anchor_root(config: FretboardConfig, root: str) -> Optional[Note]:
    try:
        return Note.in_octave(root, config.min_selected_octave)
    except InvalidRangeError as e:
        logging.warning("Cannot place root %s: %s", root, e)
        return None


def make_predicate(
    config: FretboardConfig, strings: List[Note], window: Tuple[int, int]
) -> Optional[HighlightPredicate]:
    """Build the highlight predicate for the config's view mode.

    Args:
        config: The fretboard configuration.
        strings: Open-string notes of the strings shown.
        window: Visible frets as a half-open range.

    Returns:
        The predicate, or None when nothing can be shown: an unknown scale
        or chord, or a root or voicing outside the MIDI range.
    """
    octaves = config.effective_octaves
    spelling = config.spelling
    mode = config.view_mode
    if mode == ViewMode.Scales:
        scale = get_scale(config.scale)
        if scale is None:
            logging.warning("Unknown scale %r, nothing to highlight", config.scale)
            return None
        root = _anchor_root(config, config.effective_root)
        if root is None:
            return None
        classifier = scale.mode(config.mode_index).to_classifier(root.pitch_class)
        return ScalePredicate(classifier, root, octaves, spelling)
    elif mode == ViewMode.Intervals:
        root = _anchor_root(config, config.root)
        if root is None:
            return None
        return IntervalPredicate(config.selected_intervals, root, octaves, spelling)
    elif mode in (
        ViewMode.ChordInversions,
        ViewMode.OpenChords,
        ViewMode.BarreChords,
        ViewMode.AdvancedChords,
    ):
        return _make_chord_predicate(config, strings, window)
    else:
        raise MatchException(mode)


def _make_chord_predicate(
    config: FretboardConfig, strings: List[Note], window: Tuple[int, int]
) -> Optional[HighlightPredicate]:
    chord = get_chord(config.chord_type)
    if chord is None:
        logging.warning(
            "Unknown chord type %r, nothing to highlight", config.chord_type
        )
        return None
    octave = config.selected_chord_octave
    try:
        root = Note.in_octave(config.root, octave)
        voicing = chord.build_voicing(root, config.chord_inversion)
    except InvalidRangeError as e:
        logging.warning("Cannot voice %s: %s", config.current_chord_name, e)
        return None
    if len(voicing) == 0:
        logging.warning("Chord %r has no tones", config.chord_type)
        return None
    primary_cells: Optional[FrozenSet[StringPos]] = None
    if not config.show_all_positions:
        start, end = window
        tones = chord_tones(
            config.root,
            octave,
            config.chord_type,
            config.chord_inversion,
            strings,
            max_frets=end - 1,
            min_fret=start,
        )
        primary_cells = frozenset(t.position for t in optimal_fingering(tones))
    logging.debug(
        "Chord %s voiced as %s", config.current_chord_name, voicing
    )
    return ChordPredicate(
        voicing,
        primary_cells,
        config.show_additional_octaves,
        root,
        config.effective_octaves,
        config.spelling,
    )


def compute_highlight_map(config: FretboardConfig) -> HighlightMap:
    """Compute the highlights of every visible cell for a configuration.

    For string ``s`` and fret ``f`` in the visible window the cell sounds
    ``tuning[s].midi + f``; the view mode's predicate decides its highlight.
    The result depends only on the config, never on the layout.

    Args:
        config: The fretboard configuration.

    Returns:
        The highlight map. Unknown scales or chords yield an empty map.

    Raises:
        InvalidRangeError: If the visible fret window does not fit the
            fretboard.
    """
    window = config.fret_window
    strings = config.open_strings
    predicate = make_predicate(config, strings, window)
    if predicate is None:
        return HighlightMap.empty(config.effective_octaves)
    notes: Dict[int, HighlightInfo] = {}
    cells: Dict[StringPos, HighlightInfo] = {}
    start, end = window
    bounds = StringBounds(
        low=StringPos(str_index=0, fret=start),
        high=StringPos(str_index=len(strings) - 1, fret=end - 1),
    )
    for str_pos in bounds:
        midi = strings[str_pos.str_index].midi + str_pos.fret
        if midi > constants.MIDI_MAX:
            continue
        info = predicate.classify(str_pos, midi)
        if info is not None:
            cells[str_pos] = info
            existing = notes.get(midi)
            if existing is None or (info.is_primary and not existing.is_primary):
                notes[midi] = info
    logging.debug(
        "Highlighted %d cells (%d notes) in %s mode",
        len(cells),
        len(notes),
        config.view_mode.display_name,
    )
    return HighlightMap(notes, cells, predicate.octaves)


def toggle_interval_at(config: FretboardConfig, str_pos: StringPos) -> FretboardConfig:
    """Toggle the extended interval sounding at a tapped position.

    The interval is measured from the root in the lowest selected octave.
    Taps below the root or four or more octaves above it leave the config
    unchanged.

    Raises:
        InvalidRangeError: If the string or fret is not on the fretboard.
    """
    strings = config.open_strings
    check_range("String", str_pos.str_index, 0, len(strings) - 1)
    check_range("Fret", str_pos.fret, 0, config.fret_count)
    midi = strings[str_pos.str_index].midi + str_pos.fret
    extended = midi - _anchor_root(config, config.root).midi
    if extended < 0 or extended >= constants.MAX_EXTENDED_INTERVAL:
        logging.debug("Tap at %s is %d semitones from the root", str_pos, extended)
        return config
    return toggle_interval(config, extended)


def highlighted_pitch_classes(highlight_map: HighlightMap) -> Set[int]:
    """Pitch classes with at least one primary highlight."""
    return {
        midi % constants.MAX_NOTES
        for midi, info in highlight_map.notes.items()
        if info.is_primary
    }
