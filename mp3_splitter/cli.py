#!/usr/bin/env python3
"""
Command line entry point for the MP3 splitter

Usage:
    split-mp3 [input_file] [chunk_minutes] [output_prefix] [--output-dir DIR]

Omitted positional arguments fall back to the configured defaults
(audiofile.mp3, 10 minutes, audiofile_part, written to mp3_chunks/).
"""
import argparse
import json
import math
import sys

from .base import InvalidArgumentError, SplitOptions, SplitterError, minutes_to_seconds
from .config import get_config
from .logging_setup import setup_logging
from .splitter import split_mp3


def parse_args(argv=None, config=None) -> argparse.Namespace:
    config = config or get_config()
    parser = argparse.ArgumentParser(
        description="Split an MP3 file into fixed-length chunks without re-encoding.",
        epilog="Each chunk keeps the source ID3 tag with a 'Part N' title and track number."
    )
    parser.add_argument('input_file', nargs='?', default=None,
                        help=f'Path to input MP3 file (default: {config.default_input})')
    parser.add_argument('chunk_minutes', nargs='?', type=float, default=None,
                        help=f'Chunk duration in minutes (default: {config.default_chunk_minutes:g})')
    parser.add_argument('output_prefix', nargs='?', default=None,
                        help=f'Prefix for output filenames (default: {config.default_prefix})')
    parser.add_argument('--output-dir', default=config.output_dir,
                        help=f'Output directory (default: {config.output_dir})')
    parser.add_argument('--output-json', action='store_true',
                        help='Print the split summary as JSON')
    parser.add_argument('--verbose', action='store_true', help='Show detailed processing information')
    parser.add_argument('--no-log', action='store_true', help='Disable logging to file')
    parser.add_argument('--log-level', default=config.log_level,
                        help=f'Log file level (default: {config.log_level})')
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace, config=None) -> SplitOptions:
    """Translate parsed arguments into SplitOptions, filling in defaults"""
    config = config or get_config()
    using_defaults = args.input_file is None

    input_file = args.input_file or config.default_input
    chunk_minutes = args.chunk_minutes if args.chunk_minutes is not None else config.default_chunk_minutes
    prefix = args.output_prefix or config.default_prefix

    if not math.isfinite(chunk_minutes):
        raise InvalidArgumentError(f"Chunk duration must be a finite number of minutes, got {chunk_minutes}")

    if using_defaults:
        print("Using default parameters:")
        print(f"  Input file: {input_file}")
        print(f"  Chunk duration: {chunk_minutes:g} minutes")
        print(f"  Output prefix: {prefix}")
        print(f"  Output folder: {args.output_dir}")
        print()
        print("To specify custom parameters, use: split-mp3 <input_file> <chunk_minutes> <output_prefix>")

    return SplitOptions(
        input_path=input_file,
        chunk_duration=minutes_to_seconds(chunk_minutes),
        output_dir=args.output_dir,
        prefix=prefix,
    )


def main(argv=None) -> int:
    try:
        config = get_config()
    except SplitterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    args = parse_args(argv, config)
    logger, log_file = setup_logging(config.log_dir, args.log_level,
                                     file_logging=not args.no_log, verbose=args.verbose)

    logger.info("=" * 60)
    logger.info("MP3 splitter started")
    if log_file:
        logger.info(f"Log file: {log_file}")
    logger.info(f"Command line arguments: {vars(args)}")

    try:
        options = build_options(args, config)
        result = split_mp3(options)
    except SplitterError as e:
        logger.error(f"Split failed: {e}", exc_info=args.verbose)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        logger.info("MP3 splitter finished")
        logger.info("=" * 60)

    if args.output_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for path in result.output_files:
            print(f"Exporting {path}")
        print(f"Split {options.input_path} into {result.chunk_count} chunks "
              f"({float(result.total_duration) / 60:.2f} minutes) in {options.output_dir}")
        print("Done.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
