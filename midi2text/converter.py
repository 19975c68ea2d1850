#!/usr/bin/env python3
"""
Core conversion functions for the midi2text package.

Ties the pipeline together: decode the MIDI file, classify its messages
into start and stop events, pair them into tones and write the text
notation.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import ConversionConfig
from .events import classify_messages
from .matcher import generate_tones
from .serializer import save_text
from .source import Performance, read_performance
from .tones import Tone

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Summary of a finished conversion."""
    tempo: int
    tone_count: int
    start_count: int
    output_path: Optional[Path] = None

    @property
    def dropped_count(self) -> int:
        return self.start_count - self.tone_count


class _Timer:
    """Logs how long a pipeline step took."""

    def __init__(self, step):
        self.step = step

    def __enter__(self):
        self.started = time.perf_counter()
        return self

    def __exit__(self, *exc):
        logger.debug("%s took %.3f seconds", self.step,
                     time.perf_counter() - self.started)
        return False


def _resolve_tempo(performance: Performance, config: ConversionConfig) -> int:
    if config.tempo_override is not None:
        return int(config.tempo_override)
    return int(performance.tempo)


def convert_performance(performance: Performance,
                        config: Optional[ConversionConfig] = None
                        ) -> Tuple[int, List[Tone], int]:
    """
    Turn decoded messages into tones.

    Args:
        performance: Decoded MIDI contents
        config: Conversion options

    Returns:
        tuple: (tempo, tones, start_count) with tones in output order
    """
    config = config or ConversionConfig()

    with _Timer("Classifying messages"):
        starts, stops = classify_messages(performance.messages)

    end_time = performance.end_tick if performance.end_tick > 0 else None
    with _Timer("Generating tones"):
        tones = generate_tones(starts, stops,
                               unmatched=config.unmatched,
                               end_time=end_time)

    return _resolve_tempo(performance, config), tones, len(starts)


def convert_midi_to_tones(midi_file_path: Union[str, Path],
                          config: Optional[ConversionConfig] = None
                          ) -> Tuple[int, List[Tone]]:
    """
    Read a MIDI file and return its tempo and tones.

    Args:
        midi_file_path: Path to MIDI file
        config: Conversion options

    Returns:
        tuple: (tempo, tones)
    """
    config = config or ConversionConfig()
    with _Timer("Loading the file"):
        performance = read_performance(midi_file_path, config.tempo_mode)
    tempo, tones, _ = convert_performance(performance, config)
    return tempo, tones


def convert_midi_to_text(midi_file_path: Union[str, Path],
                         output_path: Union[str, Path],
                         config: Optional[ConversionConfig] = None
                         ) -> ConversionResult:
    """
    Convert a MIDI file to a text notation file.

    Nothing is written when decoding or matching fails, and a failed write
    leaves no output file behind.

    Args:
        midi_file_path: Path to MIDI file
        output_path: Path of the text file to write
        config: Conversion options

    Returns:
        ConversionResult: Tempo and counts of the written file

    Raises:
        MidiDecodeError: If the MIDI file cannot be decoded
        UnmatchedStartError: If a start is unmatched under the error policy
        OutputWriteError: If the output cannot be written
    """
    config = config or ConversionConfig()
    started = time.perf_counter()

    with _Timer("Loading the file"):
        performance = read_performance(midi_file_path, config.tempo_mode)

    tempo, tones, start_count = convert_performance(performance, config)

    with _Timer("Writing the file"):
        save_text(tempo, tones, output_path)

    logger.info("Converted '%s' to '%s': %d tones in %.3f seconds",
                midi_file_path, output_path, len(tones),
                time.perf_counter() - started)

    return ConversionResult(tempo=tempo,
                            tone_count=len(tones),
                            start_count=start_count,
                            output_path=Path(output_path))
