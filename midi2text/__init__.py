#!/usr/bin/env python3
"""
midi2text - Convert MIDI files to a flat tempo/note text notation.

Every note of the file becomes one line giving its start and end tick,
channel, pitch and velocity, after a single tempo header line.

Basic Usage:
    import midi2text

    # MIDI file to text file
    midi2text.convert_midi_to_text("input.mid", "output.txt")

    # Tones in memory
    tempo, tones = midi2text.midi_to_tones("input.mid")
    print(midi2text.render_text(tempo, tones))
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .config import ConversionConfig, TempoMode, UnmatchedPolicy, DEFAULT_TEMPO
from .converter import (
    ConversionResult,
    convert_midi_to_text,
    convert_midi_to_tones,
    convert_performance,
)
from .events import (
    Event,
    EventTable,
    NoteCommand,
    NoteMessage,
    classify_message,
    classify_messages,
)
from .exceptions import (
    ConversionError,
    MidiDecodeError,
    OutputWriteError,
    UnmatchedStartError,
)
from .matcher import Pairing, generate_tones, pair_events
from .serializer import format_tempo, iter_lines, render_text, save_text, write_tones
from .source import Performance, read_performance
from .tones import Tone


# Convenient aliases for common operations
def midi_to_tones(midi_file_path, unmatched=UnmatchedPolicy.DROP,
                  tempo_mode=TempoMode.INITIAL):
    """
    Read a MIDI file into its tempo and sorted tones.

    Args:
        midi_file_path (str): Path to MIDI file
        unmatched (str): 'drop', 'close' or 'error'
        tempo_mode (str): 'initial' or 'average'

    Returns:
        tuple: (tempo, list of Tone)

    Example:
        >>> tempo, tones = midi2text.midi_to_tones('song.mid')
        >>> tones[0].to_line()
        'note 0 480 1 60 100'
    """
    config = ConversionConfig(tempo_mode=tempo_mode, unmatched=unmatched)
    return convert_midi_to_tones(midi_file_path, config)


def midi_to_text(midi_file_path, unmatched=UnmatchedPolicy.DROP,
                 tempo_mode=TempoMode.INITIAL):
    """
    Read a MIDI file and return the text notation as a string.

    Example:
        >>> print(midi2text.midi_to_text('song.mid'))
        tempo 500000
        note 0 480 1 60 100
    """
    return render_text(*midi_to_tones(midi_file_path, unmatched, tempo_mode))


__all__ = [
    # Main conversion functions
    'midi_to_tones',
    'midi_to_text',
    'convert_midi_to_text',
    'convert_midi_to_tones',
    'convert_performance',
    'ConversionResult',

    # Configuration
    'ConversionConfig',
    'TempoMode',
    'UnmatchedPolicy',
    'DEFAULT_TEMPO',

    # Events and tones
    'Event',
    'EventTable',
    'NoteCommand',
    'NoteMessage',
    'classify_message',
    'classify_messages',
    'Tone',
    'Pairing',
    'pair_events',
    'generate_tones',

    # Input and output
    'Performance',
    'read_performance',
    'format_tempo',
    'iter_lines',
    'render_text',
    'write_tones',
    'save_text',

    # Errors
    'ConversionError',
    'MidiDecodeError',
    'OutputWriteError',
    'UnmatchedStartError',

    # Package info
    '__version__',
    '__license__',
]
