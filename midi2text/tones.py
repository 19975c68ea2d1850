#!/usr/bin/env python3
"""
Tone data structure.

A Tone is a fully resolved note: a start event paired with the stop event
that ends it.
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import Tuple

from .events import Event


@total_ordering
@dataclass(frozen=True, eq=False)
class Tone:
    """
    A note spanning two ticks.

    Attributes:
        start: Tick the note starts on
        end: Tick the note stops on
        instrument: 0-based channel number
        pitch: MIDI note number
        loudness: Velocity of the starting event

    Tones are ordered by (start, end, pitch, instrument); loudness does not
    take part in comparisons.
    """
    start: int
    end: int
    instrument: int
    pitch: int
    loudness: int

    @classmethod
    def from_events(cls, on: Event, off: Event) -> 'Tone':
        """Build a tone from a start event and the stop event that ends it."""
        return cls(start=on.time,
                   end=off.time,
                   instrument=on.instrument,
                   pitch=on.pitch,
                   loudness=on.loudness)

    @property
    def key(self) -> Tuple[int, int, int, int]:
        return (self.start, self.end, self.pitch, self.instrument)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def to_line(self) -> str:
        """
        Format the tone as a text notation line.

        Channels are written 1-based: "note <start> <end> <channel> <pitch> <loudness>"
        """
        return (f"note {self.start} {self.end} {self.instrument + 1} "
                f"{self.pitch} {self.loudness}")

    def __str__(self):
        return self.to_line()

    def __eq__(self, other):
        if not isinstance(other, Tone):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other):
        if not isinstance(other, Tone):
            return NotImplemented
        return self.key < other.key

    def __hash__(self):
        return hash(self.key)
