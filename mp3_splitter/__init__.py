# MP3 Splitter Module
from .base import (
    SplitterError,
    InvalidArgumentError,
    AudioIOError,
    DecodeError,
    EmptyInputError,
    ConfigError,
    PacketRecord,
    SourceTag,
    ChunkTag,
    ChunkPlan,
    SplitOptions,
    ChunkInfo,
    SplitResult,
    minutes_to_seconds,
)
from .scanner import scan_packets
from .tags import read_source_tag, derive_chunk_tag, write_chunk_tag
from .planner import plan_chunks
from .writer import write_chunk
from .splitter import split_mp3

__version__ = '1.0.0'

__all__ = [
    'SplitterError',
    'InvalidArgumentError',
    'AudioIOError',
    'DecodeError',
    'EmptyInputError',
    'ConfigError',
    'PacketRecord',
    'SourceTag',
    'ChunkTag',
    'ChunkPlan',
    'SplitOptions',
    'ChunkInfo',
    'SplitResult',
    'minutes_to_seconds',
    'scan_packets',
    'read_source_tag',
    'derive_chunk_tag',
    'write_chunk_tag',
    'plan_chunks',
    'write_chunk',
    'split_mp3',
]
