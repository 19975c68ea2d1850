#!/usr/bin/env python3
"""
Command-line interface for the midi2text package.

Exit codes:
    0  success
    1  the input file could not be read or decoded
    2  invalid arguments
    3  the output file could not be written
    4  a note start had no stop and --unmatched error was given
"""

import argparse
import logging
import sys

from .config import ConversionConfig, TempoMode, UnmatchedPolicy
from .converter import convert_midi_to_text
from .exceptions import MidiDecodeError, OutputWriteError, UnmatchedStartError

EXIT_OK = 0
EXIT_DECODE_ERROR = 1
EXIT_WRITE_ERROR = 3
EXIT_UNMATCHED = 4


def build_parser():
    parser = argparse.ArgumentParser(
        prog='midi2text',
        description='Convert a MIDI file to tempo/note text notation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    midi2text song.mid song.txt
    midi2text song.mid song.txt --tempo-mode average
    midi2text song.mid song.txt --unmatched close --verbose
        """)
    parser.add_argument('input', help='Input MIDI file')
    parser.add_argument('output', help='Output text file')
    parser.add_argument('--tempo-mode',
                        choices=[mode.value for mode in TempoMode],
                        default=TempoMode.INITIAL.value,
                        help='Use the first tempo or the average tempo '
                        '(default: %(default)s)')
    parser.add_argument('--tempo',
                        type=int,
                        help='Override the tempo (microseconds per quarter note)')
    parser.add_argument('--unmatched',
                        choices=[policy.value for policy in UnmatchedPolicy],
                        default=UnmatchedPolicy.DROP.value,
                        help='What to do with notes that never stop '
                        '(default: %(default)s)')
    parser.add_argument('--verbose',
                        '-v',
                        action='store_true',
                        help='Verbose output (step timings and counts)')
    return parser


def main(argv=None):
    """Main command line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s')

    try:
        config = ConversionConfig(tempo_mode=args.tempo_mode,
                                  unmatched=args.unmatched,
                                  tempo_override=args.tempo)
    except ValueError as e:
        parser.error(str(e))

    try:
        result = convert_midi_to_text(args.input, args.output, config)
    except MidiDecodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except UnmatchedStartError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_UNMATCHED
    except OutputWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_WRITE_ERROR

    print(f"Successfully converted '{args.input}' to '{args.output}' "
          f"({result.tone_count} notes, tempo {result.tempo})")
    if result.dropped_count:
        print(f"Skipped {result.dropped_count} note(s) without an end")
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
