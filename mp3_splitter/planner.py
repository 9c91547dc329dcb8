"""
Second pass: choose chunk boundaries at packet edges
"""
import logging
from fractions import Fraction
from typing import List, Sequence

from .base import ChunkPlan, InvalidArgumentError, PacketRecord

logger = logging.getLogger(__name__)


def plan_chunks(packets: Sequence[PacketRecord], chunk_duration) -> List[ChunkPlan]:
    """
    Group packets into contiguous chunks of at least `chunk_duration` seconds

    Each packet is attached before the threshold is tested, so a chunk closes on
    the first packet that brings it to `chunk_duration` or beyond and never ends
    up empty. The last chunk takes whatever is left.

    Args:
        packets: Packet sequence from the scanner
        chunk_duration: Target chunk length in seconds (> 0)

    Returns:
        Ordered, contiguous ChunkPlan list covering every packet once
    """
    target = Fraction(chunk_duration)
    if target <= 0:
        raise InvalidArgumentError(f"Chunk duration must be positive, got {chunk_duration}")

    plans: List[ChunkPlan] = []
    chunk_start_index = 0
    chunk_start_time = Fraction(0)
    accumulated = Fraction(0)

    for index, packet in enumerate(packets):
        accumulated += packet.duration
        if accumulated >= target:
            plans.append(ChunkPlan(
                chunk_index=len(plans) + 1,
                start_packet_index=chunk_start_index,
                end_packet_index=index + 1,
                start_time=chunk_start_time,
                duration=accumulated,
            ))
            chunk_start_index = index + 1
            chunk_start_time += accumulated
            accumulated = Fraction(0)

    if chunk_start_index < len(packets):
        plans.append(ChunkPlan(
            chunk_index=len(plans) + 1,
            start_packet_index=chunk_start_index,
            end_packet_index=len(packets),
            start_time=chunk_start_time,
            duration=accumulated,
        ))

    logger.info(f"[PLAN] Splitting into {len(plans)} chunks (target {float(target):.2f}s)")
    for plan in plans:
        logger.debug(f"[PLAN] Chunk {plan.chunk_index} duration: {float(plan.duration) / 60:.2f} minutes "
                     f"({float(plan.duration):.2f} seconds), packets: {plan.packet_count}")
    return plans
