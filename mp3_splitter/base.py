"""
Data model and error types shared by the scan, plan and write passes
"""
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, List, Tuple


class SplitterError(Exception):
    """Base exception for MP3 splitting errors"""
    pass


class InvalidArgumentError(SplitterError, ValueError):
    """Raised for a non-positive chunk duration or malformed paths"""
    pass


class AudioIOError(SplitterError, IOError):
    """Raised when the source or an output file cannot be opened, read or written"""
    pass


class DecodeError(SplitterError):
    """Raised when the source container is malformed or not MP3"""
    pass


class EmptyInputError(SplitterError):
    """Raised when the source holds no audio packets"""
    pass


class ConfigError(SplitterError):
    """Raised when a configuration file cannot be loaded"""
    pass


@dataclass(frozen=True)
class PacketRecord:
    """One MP3 frame exactly as stored in the source"""
    sequence_index: int
    timestamp: Fraction  # Presentation time in seconds
    duration: Fraction  # Seconds
    payload: bytes = field(repr=False)


@dataclass(frozen=True)
class SourceTag:
    """Descriptive metadata read once from the source file"""
    title: str = ""
    track: int = 0
    comment: str = ""
    frames: Tuple[Any, ...] = ()  # Other preserved ID3 frames


@dataclass(frozen=True)
class ChunkTag:
    """Metadata written into a single output chunk"""
    title: str
    track: int
    comment: str
    frames: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ChunkPlan:
    """A contiguous slice [start_packet_index, end_packet_index) of the packet sequence"""
    chunk_index: int  # 1-based
    start_packet_index: int
    end_packet_index: int  # Exclusive
    start_time: Fraction
    duration: Fraction

    @property
    def end_time(self) -> Fraction:
        return self.start_time + self.duration

    @property
    def packet_count(self) -> int:
        return self.end_packet_index - self.start_packet_index


@dataclass(frozen=True)
class SplitOptions:
    """Caller-supplied configuration for one split operation"""
    input_path: str
    chunk_duration: Any  # Seconds; int, float or Fraction
    output_dir: str
    prefix: str


@dataclass(frozen=True)
class ChunkInfo:
    """Result for a single written chunk"""
    index: int
    output_path: str
    start_time: Fraction
    end_time: Fraction

    @property
    def duration(self) -> Fraction:
        return self.end_time - self.start_time


@dataclass
class SplitResult:
    """Final report of a split operation"""
    chunk_count: int
    total_duration: Fraction
    output_files: List[str]
    chunks: List[ChunkInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Render a JSON-friendly summary"""
        return {
            'status': 'success',
            'chunk_count': self.chunk_count,
            'total_duration': round(float(self.total_duration), 3),
            'output_files': list(self.output_files),
            'chunks': [
                {
                    'index': chunk.index,
                    'output_path': chunk.output_path,
                    'start_time': round(float(chunk.start_time), 3),
                    'end_time': round(float(chunk.end_time), 3),
                    'duration': round(float(chunk.duration), 3),
                }
                for chunk in self.chunks
            ],
        }


def minutes_to_seconds(minutes) -> Fraction:
    """Convert a minute count to exact seconds"""
    return Fraction(str(minutes)) * 60


def format_timestamp(seconds) -> str:
    """Format seconds as HH:MM:SS.mmm"""
    total_ms = int(round(Fraction(seconds) * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"
