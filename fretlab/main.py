"""Command-line entry point for fretlab.

Sub-commands print scales and chord voicings, draw a highlighted fretboard
as text, and render voicings to MIDI files.
"""

import logging
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from typing import Dict, List, Optional

from fretlab import constants
from fretlab.base import FretlabError, MatchException
from fretlab.chord import ChordInversion, build_voicing, display_name, require_chord
from fretlab.config import FretboardConfig, Layout, ViewMode, init_config, toggle_octave
from fretlab.fretboard import HighlightMap, compute_highlight_map
from fretlab.midi import PlayStyle, render_voicing_file
from fretlab.note import Note, pitch_class_name, spelling_for_root
from fretlab.scale import require_scale
from fretlab.tuning import TUNINGS, Tuning
from fretlab.voicing import analyze_fingering, chord_tones, optimal_fingering, tablature

VIEW_MODES: Dict[str, ViewMode] = {
    "intervals": ViewMode.Intervals,
    "scales": ViewMode.Scales,
    "chord-inversions": ViewMode.ChordInversions,
    "open-chords": ViewMode.OpenChords,
    "barre-chords": ViewMode.BarreChords,
    "advanced-chords": ViewMode.AdvancedChords,
}

LAYOUTS: Dict[str, Layout] = {
    "rh-bass-top": Layout.RightHandedBassTop,
    "rh-bass-bottom": Layout.RightHandedBassBottom,
    "lh-bass-top": Layout.LeftHandedBassTop,
    "lh-bass-bottom": Layout.LeftHandedBassBottom,
}

PLAY_STYLES: Dict[str, PlayStyle] = {style.value: style for style in PlayStyle}


def _require_tuning(name: str) -> Tuning:
    tuning = TUNINGS.get(name)
    if tuning is None:
        raise ValueError(f"Unknown tuning: {name}")
    return tuning


def render_scale(args: Namespace) -> str:
    """Describe a scale or mode: its name, notes and degree labels."""
    scale = require_scale(args.scale)
    mode = scale.mode(args.mode)
    root_pc = Note.parse(args.root).pitch_class
    spelling = spelling_for_root(args.root)
    mode_root = scale.mode_root(root_pc, args.mode)
    names = [pitch_class_name(pc, spelling) for pc in mode.pitch_classes(mode_root)]
    lines = [
        f"{pitch_class_name(mode_root, spelling)} {mode.name}",
        " ".join(f"{n:>3}" for n in names),
        " ".join(f"{d:>3}" for d in mode.degree_labels),
    ]
    return "\n".join(lines)


def render_chord(args: Namespace) -> str:
    """Describe a chord voicing and a fingering for it on the chosen tuning."""
    chord = require_chord(args.chord)
    tuning = _require_tuning(args.tuning)
    root = Note.in_octave(args.root, args.octave)
    voicing = build_voicing(args.chord, root, args.inversion)
    spelling = spelling_for_root(args.root)
    tones = chord_tones(
        args.root,
        args.octave,
        args.chord,
        args.inversion,
        list(tuning.strings),
        max_frets=args.frets,
    )
    fingering = optimal_fingering(tones)
    analysis = analyze_fingering(fingering)
    lines = [
        f"{display_name(args.root, args.chord, args.inversion)} ({chord.display_name})",
        " ".join(Note.from_midi(m, spelling).full_name for m in voicing),
        f"{tuning.name}: {' '.join(tablature(fingering, tuning.string_count))}",
        f"Difficulty: {analysis.difficulty.value}",
    ]
    if analysis.reason is not None:
        lines.append(analysis.reason)
    return "\n".join(lines)


def render_fretboard(config: FretboardConfig, highlight_map: HighlightMap) -> str:
    """Draw the highlighted fretboard as text, one line per string.

    Each cell shows the interval label of its highlight, lower-cased for
    additional-octave highlights, or ``-`` when the cell is not highlighted.
    The layout decides string order and fret direction.
    """
    start, end = config.fret_window
    strings = config.open_strings
    max_row = len(strings) - 1
    max_col = end - start - 1
    placed = highlight_map.placed(config)
    header = [""] * (max_col + 1)
    labels = [""] * (max_row + 1)
    for col in range(max_col + 1):
        _, screen_col = config.layout.apply_to_coords(0, col, max_row, max_col)
        header[screen_col] = str(start + col)
    for row, note in enumerate(strings):
        screen_row, _ = config.layout.apply_to_coords(row, 0, max_row, max_col)
        labels[screen_row] = note.full_name
    lines = ["     " + "".join(f"{h:>4}" for h in header)]
    for row in range(max_row + 1):
        cells: List[str] = []
        for col in range(max_col + 1):
            info = placed.get((row, col))
            if info is None:
                cells.append("-")
            elif info.is_primary:
                cells.append(info.interval_label)
            else:
                cells.append(info.interval_label.lower())
        lines.append(f"{labels[row]:<5}" + "".join(f"{c:>4}" for c in cells))
    octaves = ", ".join(str(o) for o in sorted(highlight_map.octaves))
    lines.append(f"Octaves: {octaves}")
    return "\n".join(lines)


def config_from_args(args: Namespace) -> FretboardConfig:
    """Build a fretboard configuration from parsed ``fretboard`` arguments.

    Raises:
        InvalidRangeError: If an octave is outside the selectable range.
        ValueError: If the tuning is unknown.
    """
    config = replace(
        init_config(_require_tuning(args.tuning)),
        root=args.root,
        view_mode=VIEW_MODES[args.view],
        scale=args.scale,
        mode_index=args.mode,
        chord_type=args.chord,
        chord_inversion=ChordInversion(args.inversion),
        fret_count=args.frets,
        selected_octaves=frozenset(),
        selected_intervals=frozenset(args.intervals),
        show_additional_octaves=args.additional_octaves,
        show_all_positions=args.all_positions,
        layout=LAYOUTS[args.layout],
    )
    for octave in sorted(set(args.octaves)):
        config = toggle_octave(config, octave)
    return config


def write_voicing_midi(args: Namespace) -> str:
    """Render a chord voicing to a MIDI file and report what was written."""
    root = Note.in_octave(args.root, args.octave)
    voicing = build_voicing(args.chord, root, args.inversion)
    render_voicing_file(
        voicing, args.output, style=PLAY_STYLES[args.style], bpm=args.bpm
    )
    name = display_name(args.root, args.chord, args.inversion)
    return f"{name}: {voicing} -> {args.output}"


def _add_chord_args(parser: ArgumentParser) -> None:
    parser.add_argument("--chord", default=constants.DEFAULT_CHORD)
    parser.add_argument(
        "--inversion",
        type=int,
        choices=range(constants.MAX_CHORD_INVERSIONS),
        default=0,
    )


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser with the ``scale``, ``chord``, ``fretboard`` and
        ``voicing-midi`` sub-commands.
    """
    parser = ArgumentParser(prog="fretlab")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--root", default=constants.DEFAULT_ROOT)
    commands = parser.add_subparsers(dest="command", required=True)

    scale = commands.add_parser("scale", help="show the notes of a scale or mode")
    scale.add_argument("--scale", default=constants.DEFAULT_SCALE)
    scale.add_argument("--mode", type=int, default=0)

    chord = commands.add_parser("chord", help="show a chord voicing and fingering")
    _add_chord_args(chord)
    chord.add_argument("--octave", type=int, default=constants.DEFAULT_OCTAVE)
    chord.add_argument("--tuning", default=constants.STANDARD_TUNING_NAME)
    chord.add_argument("--frets", type=int, default=constants.DEFAULT_FRET_COUNT)

    fretboard = commands.add_parser("fretboard", help="draw a highlighted fretboard")
    fretboard.add_argument("--view", choices=list(VIEW_MODES), default="intervals")
    fretboard.add_argument("--scale", default=constants.DEFAULT_SCALE)
    fretboard.add_argument("--mode", type=int, default=0)
    _add_chord_args(fretboard)
    fretboard.add_argument("--tuning", default=constants.STANDARD_TUNING_NAME)
    fretboard.add_argument("--frets", type=int, default=constants.DEFAULT_FRET_COUNT)
    fretboard.add_argument(
        "--octaves", type=int, nargs="*", default=[constants.DEFAULT_OCTAVE]
    )
    fretboard.add_argument("--intervals", type=int, nargs="*", default=[0])
    fretboard.add_argument("--layout", choices=list(LAYOUTS), default="rh-bass-top")
    fretboard.add_argument("--additional-octaves", action="store_true")
    fretboard.add_argument("--all-positions", action="store_true")

    midi = commands.add_parser("voicing-midi", help="write a chord voicing to MIDI")
    _add_chord_args(midi)
    midi.add_argument("--octave", type=int, default=constants.DEFAULT_OCTAVE)
    midi.add_argument("--style", choices=list(PLAY_STYLES), default="block")
    midi.add_argument("--bpm", type=int, default=120)
    midi.add_argument("output")
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def run(args: Namespace) -> str:
    """Execute a parsed command and return its output."""
    if args.command == "scale":
        return render_scale(args)
    elif args.command == "chord":
        return render_chord(args)
    elif args.command == "fretboard":
        config = config_from_args(args)
        return render_fretboard(config, compute_highlight_map(config))
    elif args.command == "voicing-midi":
        return write_voicing_midi(args)
    else:
        raise MatchException(args.command)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the fretlab command.

    Parses command-line arguments, configures logging, and prints the
    output of the chosen sub-command. Invalid input is reported through the
    parser and exits with status 2.
    """
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        output = run(args)
    except (FretlabError, ValueError) as e:
        parser.error(str(e))
    print(output)
    logging.info("done")


if __name__ == "__main__":
    main()
