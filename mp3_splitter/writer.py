"""
Third pass: write one chunk's packets verbatim and tag the new file
"""
import logging
import os
from typing import Sequence

from .base import AudioIOError, ChunkInfo, ChunkPlan, PacketRecord, SourceTag, SplitOptions
from .tags import derive_chunk_tag, write_chunk_tag

logger = logging.getLogger(__name__)


def chunk_output_path(options: SplitOptions, chunk_index: int) -> str:
    """`{output_dir}/{prefix}_{NNN}.mp3` with a 1-based, 3-digit index"""
    return os.path.join(options.output_dir, f"{options.prefix}_{chunk_index:03d}.mp3")


def write_chunk(plan: ChunkPlan, packets: Sequence[PacketRecord], options: SplitOptions,
                source_tag: SourceTag, chunk_count: int) -> ChunkInfo:
    """
    Write the packets of `plan` to a new file and attach the chunk's ID3 tag

    Files written for earlier chunks are left in place if this one fails.

    Raises:
        AudioIOError: If the directory or file cannot be created or written
    """
    output_path = chunk_output_path(options, plan.chunk_index)
    logger.info(f"[CHUNK {plan.chunk_index}/{chunk_count}] Writing {output_path} "
                f"(duration: {float(plan.duration) / 60:.2f} minutes, {plan.packet_count} packets)")

    try:
        os.makedirs(options.output_dir, exist_ok=True)
        with open(output_path, 'wb') as output:
            for packet in packets[plan.start_packet_index:plan.end_packet_index]:
                output.write(packet.payload)
    except OSError as e:
        raise AudioIOError(f"Failed to write chunk {plan.chunk_index} to {output_path}: {e}") from e

    chunk = ChunkInfo(
        index=plan.chunk_index,
        output_path=output_path,
        start_time=plan.start_time,
        end_time=plan.end_time,
    )
    write_chunk_tag(output_path, derive_chunk_tag(source_tag, plan.chunk_index, chunk_count, chunk))

    file_size = os.path.getsize(output_path) / (1024 * 1024)
    logger.info(f"[CHUNK {plan.chunk_index}/{chunk_count}] SUCCESS: {file_size:.1f} MB")
    return chunk
