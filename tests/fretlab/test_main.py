"""Tests for the fretlab command line."""

from argparse import Namespace
from pathlib import Path

import mido
import pytest

from fretlab.base import MatchException
from fretlab.main import main, make_parser, run


def run_main(capsys: pytest.CaptureFixture[str], *argv: str) -> list[str]:
    main(list(argv))
    return capsys.readouterr().out.splitlines()


def test_scale(capsys: pytest.CaptureFixture[str]) -> None:
    lines = run_main(capsys, "scale")
    assert lines[0] == "C Ionian"
    assert lines[1].split() == ["C", "D", "E", "F", "G", "A", "B"]
    assert lines[2].split() == ["1", "2", "3", "4", "5", "6", "7"]


def test_scale_mode_in_flat_key(capsys: pytest.CaptureFixture[str]) -> None:
    """Modes are named after their own root, spelled for the key."""
    lines = run_main(capsys, "--root", "F", "scale", "--mode", "3")
    assert lines[0] == "Bb Lydian"
    assert lines[1].split() == ["Bb", "C", "D", "E", "F", "G", "A"]
    assert lines[2].split()[3] == "b5"


def test_chord(capsys: pytest.CaptureFixture[str]) -> None:
    lines = run_main(capsys, "chord", "--inversion", "1")
    assert lines == [
        "C/E (Major)",
        "E3 G3 C4",
        "Guitar (6-string): x x 2 0 1 x",
        "Difficulty: easy",
    ]


def test_fretboard(capsys: pytest.CaptureFixture[str]) -> None:
    """The default board marks the root in octave 3."""
    lines = run_main(capsys, "fretboard")
    assert lines[0].split() == [str(f) for f in range(13)]
    assert lines[1].split() == ["E2"] + ["-"] * 8 + ["R"] + ["-"] * 4
    assert lines[2].split() == ["A2"] + ["-"] * 3 + ["R"] + ["-"] * 9
    assert lines[-1] == "Octaves: 3"
    assert len(lines) == 8


def test_fretboard_left_handed(capsys: pytest.CaptureFixture[str]) -> None:
    """Left-handed layouts mirror the frets, bass-bottom ones the strings."""
    lines = run_main(capsys, "fretboard", "--layout", "lh-bass-bottom")
    assert lines[0].split() == [str(f) for f in reversed(range(13))]
    assert lines[6].split() == ["E2"] + ["-"] * 4 + ["R"] + ["-"] * 8
    assert lines[1].split()[0] == "E4"


def test_fretboard_scale(capsys: pytest.CaptureFixture[str]) -> None:
    lines = run_main(
        capsys,
        "fretboard",
        "--view",
        "scales",
        "--octaves",
        "3",
        "4",
        "--frets",
        "5",
    )
    assert lines[0].split() == [str(f) for f in range(6)]
    assert lines[3].split() == ["D3", "2", "-", "3", "4", "-", "5"]
    assert lines[-1] == "Octaves: 3, 4"


def test_fretboard_chord_additional(capsys: pytest.CaptureFixture[str]) -> None:
    """Additional-octave chord tones are shown in lower case."""
    lines = run_main(
        capsys,
        "fretboard",
        "--view",
        "chord-inversions",
        "--inversion",
        "1",
        "--additional-octaves",
    )
    low_e = lines[1].split()
    assert low_e[1] == "3"
    assert "r" in lines[6].split()
    assert lines[-1] == "Octaves: 3, 4"


def test_voicing_midi(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    path = tmp_path / "chord.mid"
    lines = run_main(capsys, "voicing-midi", "--inversion", "1", str(path))
    assert lines == [f"C/E: [52, 55, 60] -> {path}"]
    track = mido.MidiFile(str(path)).tracks[0]
    assert [m.note for m in track if m.type == "note_on"] == [52, 55, 60]


@pytest.mark.parametrize(
    "argv, message",
    [
        (["scale", "--scale", "Nope"], "Unknown scale entry: Nope"),
        (["chord", "--chord", "nope"], "Unknown chord type entry: nope"),
        (["chord", "--tuning", "Lute"], "Unknown tuning: Lute"),
        (["fretboard", "--octaves", "9"], "Octave 9 outside of range [0, 8]"),
        (["--root", "H", "chord"], "Invalid note format: 'H'"),
    ],
)
def test_errors(
    capsys: pytest.CaptureFixture[str], argv: list[str], message: str
) -> None:
    """Invalid input is reported through the parser."""
    with pytest.raises(SystemExit) as info:
        main(argv)
    assert info.value.code == 2
    assert message in capsys.readouterr().err


def test_parser_defaults() -> None:
    args = make_parser().parse_args(["fretboard"])
    assert args.root == "C"
    assert args.view == "intervals"
    assert args.octaves == [3]
    assert args.intervals == [0]
    assert not args.additional_octaves


def test_voicing_midi_enharmonic_root(
    capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    """B# in octave 3 voices from C3, not C4."""
    path = tmp_path / "bsharp.mid"
    run_main(capsys, "--root", "B#", "voicing-midi", str(path))
    track = mido.MidiFile(str(path)).tracks[0]
    assert [m.note for m in track if m.type == "note_on"] == [48, 52, 55]


def test_run_unknown_command() -> None:
    with pytest.raises(MatchException):
        run(Namespace(command="nope"))
