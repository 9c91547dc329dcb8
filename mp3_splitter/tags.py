"""
ID3 metadata: read the source tag once, derive a tag per chunk, write it out
"""
import logging
from typing import Any, List, Optional

from mutagen import MutagenError
from mutagen.id3 import ID3, COMM, TIT2, TRCK, ID3NoHeaderError

from .base import AudioIOError, ChunkInfo, ChunkTag, SourceTag, format_timestamp

logger = logging.getLogger(__name__)

# Frames rebuilt for every chunk
REPLACED_FRAMES = {'TIT2', 'TRCK', 'COMM'}

# Frames holding source-relative lengths or times; never copied into a chunk
SOURCE_TIMED_FRAMES = {'TLEN', 'CHAP', 'CTOC', 'SYLT', 'ETCO'}


def _frame_text(frame: Optional[Any]) -> str:
    if frame is None or not getattr(frame, 'text', None):
        return ""
    return str(frame.text[0]).strip()


def parse_track_number(value: str) -> int:
    """Parse a TRCK value such as '3' or '3/12'; anything else is 0"""
    number = value.split('/', 1)[0].strip()
    try:
        return max(int(number), 0)
    except ValueError:
        return 0


def _pick_comment(comments: List[Any]) -> str:
    # Prefer the plain comment over tool-specific ones such as iTunNORM
    for frame in comments:
        if not getattr(frame, 'desc', ''):
            return _frame_text(frame)
    return _frame_text(comments[0]) if comments else ""


def read_source_tag(input_path) -> SourceTag:
    """
    Read the ID3 tag of the source file

    Never fails: a missing or unreadable tag gives the default SourceTag
    (empty title, track 0).
    """
    try:
        tags = ID3(str(input_path))
    except ID3NoHeaderError:
        logger.info(f"[TAG] No ID3 tag in {input_path}, using defaults")
        return SourceTag()
    except (MutagenError, OSError, ValueError) as e:
        logger.warning(f"[TAG] Could not read ID3 tag from {input_path}: {e}")
        return SourceTag()

    preserved = tuple(frame for frame in tags.values()
                      if frame.FrameID not in REPLACED_FRAMES | SOURCE_TIMED_FRAMES)
    source_tag = SourceTag(
        title=_frame_text(tags.get('TIT2')),
        track=parse_track_number(_frame_text(tags.get('TRCK'))),
        comment=_pick_comment(tags.getall('COMM')),
        frames=preserved,
    )
    logger.info(f"[TAG] Source tag: title={source_tag.title!r}, track={source_tag.track}, "
                f"preserved_frames={len(preserved)}")
    return source_tag


def derive_chunk_tag(source_tag: SourceTag, chunk_index: int, chunk_count: int,
                     chunk: ChunkInfo) -> ChunkTag:
    """Build the tag for chunk `chunk_index` of `chunk_count`"""
    if source_tag.title:
        title = f"{source_tag.title} (Part {chunk_index})"
    else:
        title = f"Part {chunk_index}"

    comment = (f"Part {chunk_index} of {chunk_count} "
               f"({format_timestamp(chunk.start_time)} - {format_timestamp(chunk.end_time)})")

    return ChunkTag(
        title=title,
        track=chunk_index,
        comment=comment,
        frames=source_tag.frames,
    )


def write_chunk_tag(output_path, chunk_tag: ChunkTag) -> None:
    """
    Write `chunk_tag` into the output file as an ID3v2.4 tag

    Raises:
        AudioIOError: If the tag cannot be written
    """
    tag = ID3()
    for frame in chunk_tag.frames:
        tag.add(frame)
    tag.add(TIT2(encoding=3, text=[chunk_tag.title]))
    tag.add(TRCK(encoding=3, text=[str(chunk_tag.track)]))
    tag.add(COMM(encoding=3, lang='eng', desc='', text=[chunk_tag.comment]))

    try:
        tag.save(str(output_path), v2_version=4)
    except (MutagenError, OSError) as e:
        raise AudioIOError(f"Failed to write ID3 tag to {output_path}: {e}") from e
