#!/usr/bin/env python3
"""
MIDI file decoding.

Reads a Standard MIDI File into a flat list of NoteMessages with absolute
tick positions, plus the single tempo value written into the text header.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Tuple, Union

import mido
import numpy as np

from .config import DEFAULT_TEMPO, TempoMode
from .events import NoteCommand, NoteMessage
from .exceptions import MidiDecodeError

logger = logging.getLogger(__name__)

MESSAGE_COMMANDS = {
    'note_on': NoteCommand.START,
    'note_off': NoteCommand.STOP,
}


@dataclass
class Performance:
    """
    Decoded contents of a MIDI file.

    Attributes:
        messages: Note messages from every track, in track order
        tempo: Microseconds per quarter note
        end_tick: Tick of the last message in the file
    """
    messages: List[NoteMessage] = field(default_factory=list)
    tempo: float = DEFAULT_TEMPO
    end_tick: int = 0


def absolute_ticks(track: mido.MidiTrack) -> Iterator[Tuple[int, mido.Message]]:
    """Yield (tick, message) pairs, turning delta times into absolute ticks."""
    tick = 0
    for msg in track:
        tick += msg.time
        yield tick, msg


def extract_messages(mid: mido.MidiFile) -> List[NoteMessage]:
    """Convert every note message of every track to a NoteMessage."""
    messages = []
    for track in mid.tracks:
        for tick, msg in absolute_ticks(track):
            command = MESSAGE_COMMANDS.get(msg.type)
            if command is None:
                continue
            messages.append(NoteMessage(time=tick,
                                        channel=msg.channel,
                                        pitch=msg.note,
                                        loudness=msg.velocity,
                                        command=command))
    return messages


def tempo_map(mid: mido.MidiFile) -> List[Tuple[int, int]]:
    """
    Tempo changes from every track as (tick, tempo) pairs, ascending.

    The map always starts at tick 0 with the default tempo unless the file
    sets one there. When several tracks set a tempo on the same tick, the
    one from the later track wins.
    """
    changes = []
    for track in mid.tracks:
        for tick, msg in absolute_ticks(track):
            if msg.type == 'set_tempo':
                changes.append((tick, msg.tempo))

    tempos = [(0, DEFAULT_TEMPO)]
    for tick, tempo in sorted(changes, key=lambda change: change[0]):
        if tick == tempos[-1][0]:
            tempos[-1] = (tick, tempo)
        else:
            tempos.append((tick, tempo))
    return tempos


def last_tick(mid: mido.MidiFile) -> int:
    return max((sum(msg.time for msg in track) for track in mid.tracks),
               default=0)


def initial_tempo(tempos: List[Tuple[int, int]]) -> int:
    """The tempo in effect at tick 0, in microseconds per quarter note."""
    return tempos[0][1]


def average_tempo(tempos: List[Tuple[int, int]], end_tick: int) -> float:
    """
    Mean tempo over the file, weighted by how many ticks each tempo lasts.

    This equals the file's length in microseconds divided by its length in
    quarter notes.
    """
    ticks = np.array([tick for tick, _ in tempos])
    values = np.array([tempo for _, tempo in tempos], dtype=float)
    spans = np.diff(np.append(ticks, max(end_tick, ticks[-1])))
    if spans.sum() == 0:
        return initial_tempo(tempos)
    return float(np.average(values, weights=spans))


def read_performance(midi_file_path: Union[str, Path],
                     tempo_mode=TempoMode.INITIAL) -> Performance:
    """
    Decode a MIDI file.

    Args:
        midi_file_path: Path to the MIDI file
        tempo_mode: How to reduce the tempo map to a single value

    Returns:
        Performance: Messages and tempo of the file

    Raises:
        MidiDecodeError: If the file is missing, unreadable or not valid MIDI
    """
    tempo_mode = TempoMode(tempo_mode)
    try:
        data = Path(midi_file_path).read_bytes()
    except OSError as e:
        raise MidiDecodeError(f"Could not read MIDI file: {e}") from e

    try:
        mid = mido.MidiFile(file=io.BytesIO(data))
    except Exception as e:
        raise MidiDecodeError(
            f"Could not load MIDI file '{midi_file_path}': {e}") from e

    end_tick = last_tick(mid)
    tempos = tempo_map(mid)
    if tempo_mode is TempoMode.AVERAGE:
        tempo = average_tempo(tempos, end_tick)
    else:
        tempo = initial_tempo(tempos)

    messages = extract_messages(mid)
    logger.debug("Decoded %d note message(s) from %d track(s), %d ticks, "
                 "%d tempo change(s), tempo %s", len(messages), len(mid.tracks),
                 end_tick, len(tempos), tempo)

    return Performance(messages=messages, tempo=tempo, end_tick=end_tick)
