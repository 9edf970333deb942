"""MIDI rendering of chord voicings.

Voicings are plain lists of MIDI note numbers; this module turns them into
``mido`` messages and single-track Standard MIDI Files so they can be
auditioned in any player.
"""

from __future__ import annotations

import logging
from enum import Enum, unique
from typing import List, Sequence, cast

import mido
from mido.frozen import FrozenMessage

from fretlab import constants
from fretlab.base import MatchException, check_range

TICKS_PER_BEAT = 480
"""Resolution of rendered files."""
DEFAULT_VELOCITY = 100
DEFAULT_BPM = 120
MIDI_MAX_CHANNEL = 15


@unique
class PlayStyle(Enum):
    """How a voicing is sounded."""

    Block = "block"  # All notes struck together
    Arpeggio = "arpeggio"  # Notes struck one after another, bass first


def is_note_on_msg(msg: FrozenMessage) -> bool:
    """Check if a message is a true note-on message (velocity above 0)."""
    return cast(bool, msg.type == "note_on" and msg.velocity > 0)


def is_note_off_msg(msg: FrozenMessage) -> bool:
    """Check if a message is note_off or note_on with velocity 0."""
    return cast(
        bool, (msg.type == "note_on" and msg.velocity == 0) or msg.type == "note_off"
    )


def _check_args(midis: Sequence[int], velocity: int, channel: int) -> None:
    for midi in midis:
        check_range("MIDI note", midi, constants.MIDI_MIN, constants.MIDI_MAX)
    check_range("Velocity", velocity, 0, constants.MIDI_MAX)
    check_range("Channel", channel, 0, MIDI_MAX_CHANNEL)


def voicing_messages(
    midis: Sequence[int],
    velocity: int = DEFAULT_VELOCITY,
    channel: int = 0,
) -> List[FrozenMessage]:
    """Note-on messages for every voicing note followed by their note-offs.

    Args:
        midis: MIDI note numbers, bass first.
        velocity: Strike velocity (0-127).
        channel: MIDI channel (0-15, as used by mido).

    Returns:
        Untimed messages: all note-ons in voicing order, then all note-offs
        in the same order.

    Raises:
        InvalidRangeError: If a note, the velocity or the channel is out of
            range.
    """
    _check_args(midis, velocity, channel)
    ons = [
        FrozenMessage("note_on", channel=channel, note=m, velocity=velocity)
        for m in midis
    ]
    offs = [FrozenMessage("note_off", channel=channel, note=m, velocity=0) for m in midis]
    return ons + offs


def build_voicing_file(
    midis: Sequence[int],
    style: PlayStyle = PlayStyle.Block,
    velocity: int = DEFAULT_VELOCITY,
    channel: int = 0,
    bpm: int = DEFAULT_BPM,
    beats: int = 4,
) -> mido.MidiFile:
    """Build a single-track MIDI file sounding a voicing.

    Block voicings sound all notes for ``beats`` beats. Arpeggios strike one
    note per beat and then hold the whole chord for ``beats`` beats.

    Raises:
        InvalidRangeError: If a note, the velocity or the channel is out of
            range.
    """
    _check_args(midis, velocity, channel)
    midi_file = mido.MidiFile(type=0, ticks_per_beat=TICKS_PER_BEAT)
    track = mido.MidiTrack()
    midi_file.tracks.append(track)
    track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))

    if style == PlayStyle.Block:
        step = 0
    elif style == PlayStyle.Arpeggio:
        step = TICKS_PER_BEAT
    else:
        raise MatchException(style)

    for index, midi in enumerate(midis):
        delta = 0 if index == 0 else step
        track.append(
            mido.Message(
                "note_on", channel=channel, note=midi, velocity=velocity, time=delta
            )
        )
    hold = beats * TICKS_PER_BEAT
    for index, midi in enumerate(midis):
        delta = hold if index == 0 else 0
        track.append(
            mido.Message("note_off", channel=channel, note=midi, velocity=0, time=delta)
        )
    track.append(mido.MetaMessage("end_of_track", time=0))
    return midi_file


def render_voicing_file(
    midis: Sequence[int],
    path: str,
    style: PlayStyle = PlayStyle.Block,
    velocity: int = DEFAULT_VELOCITY,
    channel: int = 0,
    bpm: int = DEFAULT_BPM,
    beats: int = 4,
) -> mido.MidiFile:
    """Write a voicing to a Standard MIDI File, see ``build_voicing_file``.

    Returns:
        The MIDI file that was saved.
    """
    midi_file = build_voicing_file(midis, style, velocity, channel, bpm, beats)
    midi_file.save(path)
    logging.info("Wrote %d-note %s voicing to %s", len(midis), style.value, path)
    return midi_file
