#!/usr/bin/env python3
"""
Text notation output.

The format is one "tempo" header line followed by one "note" line per tone:

    tempo 500000
    note 0 10 1 60 100
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, TextIO, Union

from .exceptions import OutputWriteError
from .tones import Tone

logger = logging.getLogger(__name__)


def _file_mode(path: Path) -> int:
    """Mode for the output: the existing file's, or 0o666 minus the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def format_tempo(tempo) -> str:
    """Header line; the tempo is truncated to whole microseconds."""
    return f"tempo {int(tempo)}"


def iter_lines(tempo, tones: Iterable[Tone]) -> Iterator[str]:
    """Yield the header and the tone lines in ascending tone order."""
    yield format_tempo(tempo)
    for tone in sorted(tones):
        yield tone.to_line()


def write_tones(tempo, tones: Iterable[Tone], stream: TextIO) -> int:
    """
    Write the notation to an open text stream.

    Each line is written whole; an error from the stream propagates and
    nothing after the failing line is written.

    Returns:
        int: Number of note lines written
    """
    count = -1
    for count, line in enumerate(iter_lines(tempo, tones)):
        stream.write(line + "\n")
    return count


def render_text(tempo, tones: Iterable[Tone]) -> str:
    """Return the whole notation as one string."""
    return "".join(line + "\n" for line in iter_lines(tempo, tones))


def save_text(tempo, tones: Iterable[Tone], output_path: Union[str, Path]) -> int:
    """
    Write the notation to a file.

    The text goes to a temporary file next to the destination, which is
    renamed over it only once everything has been written.

    Returns:
        int: Number of note lines written

    Raises:
        OutputWriteError: If the file could not be written
    """
    output_path = Path(output_path)
    temp_path = None

    try:
        with tempfile.NamedTemporaryFile('w',
                                         encoding='utf-8',
                                         newline='\n',
                                         dir=output_path.parent,
                                         prefix=f".{output_path.name}.",
                                         suffix='.tmp',
                                         delete=False) as f:
            temp_path = f.name
            count = write_tones(tempo, tones, f)
        os.chmod(temp_path, _file_mode(output_path))
        os.replace(temp_path, output_path)
    except OSError as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.remove(temp_path)
        raise OutputWriteError(
            f"Could not write '{output_path}': {e}") from e

    logger.debug("Wrote %d note line(s) to %s", count, output_path)
    return count
