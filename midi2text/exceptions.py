#!/usr/bin/env python3
"""
Exception types raised by the midi2text package.

Every failure that aborts a conversion derives from ConversionError, so
callers can catch the whole family in one place.
"""


class ConversionError(Exception):
    """Base class for conversion failures."""


class MidiDecodeError(ConversionError, ValueError):
    """The input could not be read or decoded as a MIDI file."""


class OutputWriteError(ConversionError, OSError):
    """Writing the text output failed; no output file was produced."""


class UnmatchedStartError(ConversionError):
    """A note start has no matching stop and the policy forbids dropping it."""

    def __init__(self, event, count=1):
        self.event = event
        self.count = count
        super().__init__(
            f"No stop event found for note start {event!r} "
            f"({count} unmatched start(s) in total)")
