#!/usr/bin/env python3
"""
Conversion settings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TempoMode(Enum):
    """How the single tempo value is taken from a file's tempo map."""
    INITIAL = "initial"  # first tempo in effect
    AVERAGE = "average"  # tick-weighted mean over the whole file


class UnmatchedPolicy(Enum):
    """What to do with a note start that never finds its stop."""
    DROP = "drop"    # emit nothing for it
    CLOSE = "close"  # close it at the end of the performance
    ERROR = "error"  # abort the conversion


DEFAULT_TEMPO = 500000  # microseconds per quarter note (120 BPM)


@dataclass
class ConversionConfig:
    """
    Options for a MIDI to text conversion.

    Attributes:
        tempo_mode: How to reduce the file's tempo map to one value
        unmatched: Policy for note starts without a matching stop
        tempo_override: Emit this tempo (microseconds per quarter note)
            instead of the one read from the file
    """
    tempo_mode: TempoMode = TempoMode.INITIAL
    unmatched: UnmatchedPolicy = UnmatchedPolicy.DROP
    tempo_override: Optional[int] = None

    def __post_init__(self):
        """Accept plain strings for the enum fields."""
        self.tempo_mode = TempoMode(self.tempo_mode)
        self.unmatched = UnmatchedPolicy(self.unmatched)
        if self.tempo_override is not None and self.tempo_override <= 0:
            raise ValueError(
                f"Invalid tempo_override: {self.tempo_override}. Must be > 0.")
