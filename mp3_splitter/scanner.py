"""
First pass: scan an MP3 file into an ordered sequence of timed packets.

ffprobe (through ffmpeg-python) does the demuxing and reports the timing and
byte layout of every frame. The frame bytes themselves are then copied
straight out of the source file, so nothing is ever decoded.
"""
import logging
import os
from fractions import Fraction
from typing import Any, Dict, List, Tuple

import ffmpeg

from .base import AudioIOError, DecodeError, PacketRecord

logger = logging.getLogger(__name__)

SUPPORTED_CODECS = {'mp3'}


def validate_input_file(filepath) -> None:
    """
    Check that the input exists and is a readable regular file

    Raises:
        AudioIOError: If the file is missing, not a file, or unreadable
    """
    if not os.path.exists(filepath):
        raise AudioIOError(f"Input file not found: {filepath}")
    if not os.path.isfile(filepath):
        raise AudioIOError(f"Input path is not a file: {filepath}")
    if not os.access(filepath, os.R_OK):
        raise AudioIOError(f"Input file is not readable: {filepath}")


def read_packet_listing(filepath) -> Dict[str, Any]:
    """
    Run ffprobe over the first audio stream, including per-packet records
    """
    try:
        return ffmpeg.probe(str(filepath), select_streams='a:0', show_packets=None)
    except ffmpeg.Error as e:
        stderr = e.stderr.decode('utf-8', errors='replace').strip() if e.stderr else ''
        raise DecodeError(f"ffprobe could not read {filepath}: {stderr or e}") from e
    except FileNotFoundError as e:
        raise DecodeError("ffprobe executable not found in PATH") from e


def parse_time_base(value) -> Fraction:
    """Parse an ffprobe time base such as '1/14112000'"""
    try:
        time_base = Fraction(value)
    except (TypeError, ValueError, ZeroDivisionError) as e:
        raise DecodeError(f"Invalid stream time base: {value!r}") from e
    if time_base <= 0:
        raise DecodeError(f"Invalid stream time base: {value!r}")
    return time_base


def get_audio_stream(listing: Dict[str, Any]) -> Dict[str, Any]:
    """Return the audio stream ffprobe reported, rejecting anything but MP3"""
    audio_stream = next((stream for stream in listing.get('streams', [])
                         if stream.get('codec_type') == 'audio'), None)
    if not audio_stream:
        raise DecodeError("No audio stream found in the file")

    codec_name = audio_stream.get('codec_name')
    if codec_name not in SUPPORTED_CODECS:
        raise DecodeError(f"Unsupported audio codec: {codec_name}")
    return audio_stream


def _packet_int(packet: Dict[str, Any], key: str, index: int) -> int:
    try:
        return int(packet[key])
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Packet {index} has no valid '{key}'") from e


def scan_packets(input_path) -> Tuple[PacketRecord, ...]:
    """
    Scan every elementary packet of the input in stream order

    Args:
        input_path: Path to the source MP3 file

    Returns:
        Tuple of PacketRecord, indexed by sequence position, with strictly
        increasing timestamps. Empty if the stream holds no packets.

    Raises:
        AudioIOError: If the file cannot be opened or read
        DecodeError: If the container is malformed or not MP3
    """
    validate_input_file(input_path)

    listing = read_packet_listing(input_path)
    audio_stream = get_audio_stream(listing)
    time_base = parse_time_base(audio_stream.get('time_base'))
    stream_index = audio_stream.get('index')

    raw_packets: List[Dict[str, Any]] = [
        packet for packet in listing.get('packets', [])
        if stream_index is None or packet.get('stream_index', stream_index) == stream_index
    ]
    logger.info(f"[SCAN] {input_path}: codec={audio_stream['codec_name']}, "
                f"time_base={time_base}, packets={len(raw_packets)}")

    packets: List[PacketRecord] = []
    next_timestamp = Fraction(0)
    try:
        with open(input_path, 'rb') as source:
            for index, packet in enumerate(raw_packets):
                position = _packet_int(packet, 'pos', index)
                size = _packet_int(packet, 'size', index)
                duration = _packet_int(packet, 'duration', index) * time_base

                # A packet without pts continues where the previous one ended
                if packet.get('pts') is not None:
                    timestamp = _packet_int(packet, 'pts', index) * time_base
                else:
                    timestamp = next_timestamp

                if packets and timestamp <= packets[-1].timestamp:
                    raise DecodeError(
                        f"Packet {index} timestamp {float(timestamp):.6f}s does not "
                        f"follow {float(packets[-1].timestamp):.6f}s"
                    )

                source.seek(position)
                payload = source.read(size)
                if len(payload) != size:
                    raise DecodeError(
                        f"Packet {index} truncated: expected {size} bytes at offset "
                        f"{position}, got {len(payload)}"
                    )

                packets.append(PacketRecord(
                    sequence_index=index,
                    timestamp=timestamp,
                    duration=duration,
                    payload=payload,
                ))
                next_timestamp = timestamp + duration
    except OSError as e:
        raise AudioIOError(f"Failed to read {input_path}: {e}") from e

    total_duration = sum((packet.duration for packet in packets), Fraction(0))
    logger.info(f"[SCAN] Found {len(packets)} packets, total duration: "
                f"{float(total_duration):.2f}s ({float(total_duration) / 60:.2f} minutes)")
    return tuple(packets)
