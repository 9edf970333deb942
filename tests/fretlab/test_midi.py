"""Tests for MIDI rendering of voicings."""

from pathlib import Path

import mido
import pytest

from fretlab.base import InvalidRangeError
from fretlab.chord import ChordInversion, build_voicing
from fretlab.midi import (
    TICKS_PER_BEAT,
    PlayStyle,
    build_voicing_file,
    is_note_off_msg,
    is_note_on_msg,
    render_voicing_file,
    voicing_messages,
)
from fretlab.note import Note

VOICING = [52, 55, 60]


def test_voicing_messages() -> None:
    """Note-ons come first, then note-offs in the same order."""
    msgs = voicing_messages(VOICING, velocity=90, channel=3)
    assert len(msgs) == 6
    assert all(is_note_on_msg(m) for m in msgs[:3])
    assert all(is_note_off_msg(m) for m in msgs[3:])
    assert [m.note for m in msgs] == VOICING + VOICING
    assert {m.channel for m in msgs} == {3}
    assert msgs[0].velocity == 90
    assert voicing_messages([]) == []


@pytest.mark.parametrize(
    "midis, velocity, channel",
    [([128], 100, 0), ([60], 128, 0), ([60], 100, 16), ([-1], 100, 0)],
)
def test_voicing_messages_out_of_range(
    midis: list[int], velocity: int, channel: int
) -> None:
    with pytest.raises(InvalidRangeError):
        voicing_messages(midis, velocity, channel)


def test_note_predicates() -> None:
    """A note-on with zero velocity counts as a note-off."""
    silent = mido.Message("note_on", note=60, velocity=0)
    assert not is_note_on_msg(silent)
    assert is_note_off_msg(silent)
    assert not is_note_off_msg(mido.Message("control_change"))


def test_block_file() -> None:
    midi_file = build_voicing_file(VOICING)
    assert midi_file.type == 0
    assert midi_file.ticks_per_beat == TICKS_PER_BEAT
    assert len(midi_file.tracks) == 1
    track = midi_file.tracks[0]
    assert track[0].type == "set_tempo"
    assert track[0].tempo == mido.bpm2tempo(120)
    assert track[-1].type == "end_of_track"
    ons = [m for m in track if m.type == "note_on"]
    offs = [m for m in track if m.type == "note_off"]
    assert [m.note for m in ons] == VOICING
    assert [m.time for m in ons] == [0, 0, 0]
    assert [m.time for m in offs] == [4 * TICKS_PER_BEAT, 0, 0]
    assert midi_file.length == pytest.approx(2.0)


def test_arpeggio_file() -> None:
    """Arpeggios strike one note per beat before holding the chord."""
    midi_file = build_voicing_file(VOICING, PlayStyle.Arpeggio, bpm=60, beats=2)
    ons = [m for m in midi_file.tracks[0] if m.type == "note_on"]
    assert [m.time for m in ons] == [0, TICKS_PER_BEAT, TICKS_PER_BEAT]
    assert midi_file.length == pytest.approx(4.0)


def test_render_voicing_file(tmp_path: Path) -> None:
    """Rendered files read back with the same notes."""
    voicing = build_voicing("minor7", Note.parse("A2"), ChordInversion.First)
    path = tmp_path / "am7.mid"
    written = render_voicing_file(voicing, str(path), style=PlayStyle.Arpeggio)
    assert path.exists()
    loaded = mido.MidiFile(str(path))
    notes = [m.note for m in loaded.tracks[0] if m.type == "note_on"]
    assert notes == voicing
    assert loaded.length == pytest.approx(written.length)
