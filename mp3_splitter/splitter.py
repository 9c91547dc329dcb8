"""
Split an MP3 file into chunks of a target duration without re-encoding.

The split runs in three passes over immutable intermediate values:

1. scan the source into packets (timing plus raw frame bytes),
2. plan contiguous chunk boundaries at packet edges,
3. write every chunk verbatim with a derived ID3 tag.

Example:
    options = SplitOptions(
        input_path="input.mp3",
        chunk_duration=minutes_to_seconds(10),
        output_dir="chunks",
        prefix="track",
    )
    result = split_mp3(options)
    print(f"Split into {result.chunk_count} chunks")
"""
import logging
import math
import os
from datetime import datetime
from fractions import Fraction
from numbers import Real

from .base import EmptyInputError, InvalidArgumentError, SplitOptions, SplitResult
from .planner import plan_chunks
from .scanner import scan_packets
from .tags import read_source_tag
from .writer import write_chunk

logger = logging.getLogger(__name__)


def validate_options(options: SplitOptions) -> Fraction:
    """
    Check the options before any file is touched

    Returns:
        The chunk duration as exact seconds

    Raises:
        InvalidArgumentError: For a non-positive duration or malformed paths
    """
    duration = options.chunk_duration
    if isinstance(duration, bool) or not isinstance(duration, Real):
        raise InvalidArgumentError(f"Chunk duration must be a number of seconds, got {duration!r}")
    if not math.isfinite(duration) or duration <= 0:
        raise InvalidArgumentError(f"Chunk duration must be positive, got {duration}")

    if not options.input_path or not str(options.input_path).strip():
        raise InvalidArgumentError("Input path must not be empty")
    if not options.output_dir or not str(options.output_dir).strip():
        raise InvalidArgumentError("Output directory must not be empty")
    if not options.prefix:
        raise InvalidArgumentError("Output prefix must not be empty")
    separators = {os.sep, os.altsep} - {None}
    if any(sep in options.prefix for sep in separators):
        raise InvalidArgumentError(f"Output prefix must not contain path separators: {options.prefix!r}")

    return Fraction(duration)


def split_mp3(options: SplitOptions) -> SplitResult:
    """
    Split an MP3 file into chunks of `options.chunk_duration` seconds

    Raises:
        InvalidArgumentError: Invalid options; raised before any I/O
        AudioIOError: Source or output I/O failure
        DecodeError: Malformed or non-MP3 source
        EmptyInputError: Source without audio packets
    """
    split_start_time = datetime.now()
    chunk_duration = validate_options(options)

    logger.info(f"Processing file: {options.input_path}")
    logger.info(f"Target chunk duration: {float(chunk_duration):.2f} seconds "
                f"({float(chunk_duration) / 60:.2f} minutes)")

    logger.info("First pass: reading packets and calculating timestamps...")
    packets = scan_packets(options.input_path)
    if not packets:
        raise EmptyInputError(f"No audio packets found in {options.input_path}")

    source_tag = read_source_tag(options.input_path)

    logger.info("Second pass: determining chunk boundaries...")
    plans = plan_chunks(packets, chunk_duration)

    logger.info("Third pass: writing chunks...")
    chunks = [
        write_chunk(plan, packets, options, source_tag, len(plans))
        for plan in plans
    ]

    total_duration = sum((plan.duration for plan in plans), Fraction(0))
    total_time = (datetime.now() - split_start_time).total_seconds()
    logger.info(f"[SUMMARY] Split into {len(chunks)} chunks in {options.output_dir} "
                f"({float(total_duration):.2f}s of audio, {total_time:.2f}s elapsed)")

    return SplitResult(
        chunk_count=len(chunks),
        total_duration=total_duration,
        output_files=[chunk.output_path for chunk in chunks],
        chunks=chunks,
    )
