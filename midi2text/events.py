#!/usr/bin/env python3
"""
Note events and their classification.

An Event is one half of a note: the moment a key on some channel starts or
stops sounding. Decoded messages are sorted into two EventTables, one for
starts and one for stops, which the matcher then pairs up into tones.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class NoteCommand(Enum):
    """Command tag of a decoded message."""
    START = "start"
    STOP = "stop"
    OTHER = "other"


@dataclass(frozen=True)
class NoteMessage:
    """
    A decoded message as delivered by an event source.

    Attributes:
        time: Absolute position in ticks
        channel: 0-based channel number
        pitch: MIDI note number
        loudness: Velocity
        command: Whether the message starts or stops a note
    """
    time: int
    channel: int
    pitch: int
    loudness: int
    command: NoteCommand = NoteCommand.OTHER


@total_ordering
@dataclass(frozen=True, eq=False)
class Event:
    """
    One note-state change.

    Events are identified and ordered by (time, pitch, instrument). Loudness
    is carried along but ignored when comparing, so two events that differ
    only in loudness are the same event.
    """
    time: int
    instrument: int
    pitch: int
    loudness: int = 0

    @property
    def key(self) -> Tuple[int, int, int]:
        return (self.time, self.pitch, self.instrument)

    @property
    def voice(self) -> Tuple[int, int]:
        """The (instrument, pitch) pair a start and its stop must share."""
        return (self.instrument, self.pitch)

    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return self.key < other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return (f"Event(@{self.time} instrument={self.instrument} "
                f"pitch={self.pitch} loudness={self.loudness})")


class EventTable:
    """
    Events grouped by time, ordered by (time, pitch, instrument).

    Keys are unique: the first event added for a key is kept and any later
    event with the same key is ignored.
    """

    def __init__(self, events: Iterable[Event] = ()):
        self._buckets: Dict[int, Dict[Tuple[int, int], Event]] = defaultdict(dict)
        self._count = 0
        for event in events:
            self.add(event)

    def add(self, event: Event) -> bool:
        """
        Insert an event.

        Returns:
            bool: False if an event with the same key was already present
        """
        bucket = self._buckets[event.time]
        slot = (event.pitch, event.instrument)
        if slot in bucket:
            return False
        bucket[slot] = event
        self._count += 1
        return True

    def times(self) -> List[int]:
        """Distinct event times, ascending."""
        return sorted(time for time, bucket in self._buckets.items() if bucket)

    def bucket(self, time: int) -> List[Event]:
        """Events at one time, ordered by (pitch, instrument)."""
        bucket = self._buckets.get(time, {})
        return [bucket[slot] for slot in sorted(bucket)]

    def max_time(self) -> Optional[int]:
        times = self.times()
        return times[-1] if times else None

    def __iter__(self) -> Iterator[Event]:
        for time in self.times():
            yield from self.bucket(time)

    def __len__(self):
        return self._count

    def __contains__(self, event):
        if not isinstance(event, Event):
            return False
        return (event.pitch, event.instrument) in self._buckets.get(event.time, {})

    def __repr__(self):
        return f"EventTable({self._count} events)"


def classify_message(message: NoteMessage) -> Optional[bool]:
    """
    Decide whether a message starts or stops a note.

    A start with zero loudness is the usual running-status way of writing
    a note off, so it counts as a stop.

    Returns:
        True for a start, False for a stop, None for anything else
    """
    if message.command is NoteCommand.STOP:
        return False
    if message.command is NoteCommand.START:
        return message.loudness != 0
    return None


def classify_messages(messages: Iterable[NoteMessage]) -> Tuple[EventTable, EventTable]:
    """
    Split a message stream into start and stop events.

    Args:
        messages: Decoded messages in any order

    Returns:
        tuple: (starts, stops) EventTables
    """
    starts, stops = EventTable(), EventTable()
    ignored = duplicates = 0

    for message in messages:
        is_start = classify_message(message)
        if is_start is None:
            ignored += 1
            continue

        event = Event(time=message.time,
                      instrument=message.channel,
                      pitch=message.pitch,
                      loudness=message.loudness)
        table = starts if is_start else stops
        if not table.add(event):
            duplicates += 1

    logger.debug("Classified %d starts and %d stops (%d non-note messages, "
                 "%d duplicates ignored)", len(starts), len(stops), ignored,
                 duplicates)
    return starts, stops
