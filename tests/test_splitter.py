import os
import tempfile
import unittest
from fractions import Fraction
from pathlib import Path
from unittest import mock
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from mutagen.id3 import ID3, TIT2, TPE1

from mp3_splitter.base import (
    AudioIOError,
    ChunkPlan,
    EmptyInputError,
    InvalidArgumentError,
    PacketRecord,
    SourceTag,
    SplitOptions,
    minutes_to_seconds,
)
from mp3_splitter.splitter import split_mp3, validate_options
from mp3_splitter.writer import chunk_output_path, write_chunk

FRAME = Fraction(1152, 44100)


def make_packets(count, duration=FRAME):
    return tuple(
        PacketRecord(
            sequence_index=i,
            timestamp=i * duration,
            duration=duration,
            payload=b"\xff\xfb" + i.to_bytes(4, "big"),
        )
        for i in range(count)
    )


def read_audio(path):
    """Return the bytes after the ID3 tag"""
    with open(path, "rb") as f:
        data = f.read()
    return data[ID3(path).size:]


class TestWriteChunk(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.output_dir = os.path.join(self._tmp.name, "nested", "chunks")
        self.options = SplitOptions(input_path="in.mp3", chunk_duration=10,
                                    output_dir=self.output_dir, prefix="show")

    def test_output_path_is_zero_padded(self) -> None:
        self.assertEqual(chunk_output_path(self.options, 7), os.path.join(self.output_dir, "show_007.mp3"))
        self.assertEqual(chunk_output_path(self.options, 123), os.path.join(self.output_dir, "show_123.mp3"))

    def test_writes_packet_slice_verbatim_and_creates_directory(self) -> None:
        packets = make_packets(10)
        plan = ChunkPlan(chunk_index=2, start_packet_index=3, end_packet_index=7,
                         start_time=3 * FRAME, duration=4 * FRAME)

        chunk = write_chunk(plan, packets, self.options, SourceTag(title="Show"), chunk_count=3)

        self.assertEqual(chunk.index, 2)
        self.assertEqual(chunk.output_path, os.path.join(self.output_dir, "show_002.mp3"))
        self.assertEqual(chunk.start_time, 3 * FRAME)
        self.assertEqual(chunk.end_time, 7 * FRAME)
        self.assertEqual(read_audio(chunk.output_path), b"".join(p.payload for p in packets[3:7]))
        self.assertEqual(ID3(chunk.output_path)["TIT2"].text, ["Show (Part 2)"])

    def test_unwritable_output_is_io_error(self) -> None:
        blocker = os.path.join(self._tmp.name, "blocker")
        with open(blocker, "w") as f:
            f.write("not a directory")
        options = SplitOptions(input_path="in.mp3", chunk_duration=10,
                               output_dir=os.path.join(blocker, "chunks"), prefix="show")
        plan = ChunkPlan(chunk_index=1, start_packet_index=0, end_packet_index=1,
                         start_time=Fraction(0), duration=FRAME)

        with self.assertRaises(AudioIOError):
            write_chunk(plan, make_packets(1), options, SourceTag(), chunk_count=1)


class TestValidateOptions(unittest.TestCase):
    def _options(self, **overrides):
        values = dict(input_path="in.mp3", chunk_duration=600, output_dir="out", prefix="part")
        values.update(overrides)
        return SplitOptions(**values)

    def test_returns_exact_duration(self) -> None:
        self.assertEqual(validate_options(self._options(chunk_duration=0.5)), Fraction(1, 2))

    def test_rejects_bad_values(self) -> None:
        for overrides in (
            {"chunk_duration": 0},
            {"chunk_duration": -60},
            {"chunk_duration": float("nan")},
            {"chunk_duration": float("inf")},
            {"chunk_duration": "600"},
            {"chunk_duration": True},
            {"input_path": ""},
            {"output_dir": ""},
            {"prefix": ""},
            {"prefix": os.path.join("a", "b")},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(InvalidArgumentError):
                    validate_options(self._options(**overrides))


class TestSplitMp3(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.input_path = os.path.join(self._tmp.name, "podcast.mp3")
        with open(self.input_path, "wb") as f:
            f.write(b"\xff\xfb\x90\x00" * 16)
        tags = ID3()
        tags.add(TIT2(encoding=3, text=["Weekly Podcast"]))
        tags.add(TPE1(encoding=3, text=["The Hosts"]))
        tags.save(self.input_path)
        self.output_dir = os.path.join(self._tmp.name, "chunks")

    def _options(self, chunk_duration):
        return SplitOptions(input_path=self.input_path, chunk_duration=chunk_duration,
                            output_dir=self.output_dir, prefix="podcast")

    def test_twenty_five_minutes_into_ten_minute_chunks(self) -> None:
        # 25 minutes of one-second packets
        packets = make_packets(25 * 60, duration=Fraction(1))
        with mock.patch("mp3_splitter.splitter.scan_packets", return_value=packets):
            result = split_mp3(self._options(minutes_to_seconds(10)))

        self.assertEqual(result.chunk_count, 3)
        self.assertEqual(result.total_duration, 1500)
        self.assertEqual(
            [os.path.basename(path) for path in result.output_files],
            ["podcast_001.mp3", "podcast_002.mp3", "podcast_003.mp3"],
        )
        self.assertEqual(
            [(chunk.start_time, chunk.end_time) for chunk in result.chunks],
            [(0, 600), (600, 1200), (1200, 1500)],
        )

        for i, path in enumerate(result.output_files, start=1):
            tags = ID3(path)
            self.assertIn(f"Part {i}", tags["TIT2"].text[0])
            self.assertEqual(tags["TRCK"].text, [str(i)])
            self.assertEqual(tags["TPE1"].text, ["The Hosts"])

        joined = b"".join(read_audio(path) for path in result.output_files)
        self.assertEqual(joined, b"".join(p.payload for p in packets))

    def test_duration_is_conserved(self) -> None:
        packets = make_packets(5000)
        with mock.patch("mp3_splitter.splitter.scan_packets", return_value=packets):
            result = split_mp3(self._options(37))

        self.assertEqual(result.total_duration, sum(p.duration for p in packets))
        self.assertEqual(sum(chunk.duration for chunk in result.chunks), result.total_duration)

    def test_long_target_gives_single_chunk(self) -> None:
        packets = make_packets(100)
        with mock.patch("mp3_splitter.splitter.scan_packets", return_value=packets):
            result = split_mp3(self._options(3600))

        self.assertEqual(result.chunk_count, 1)
        self.assertEqual(read_audio(result.output_files[0]), b"".join(p.payload for p in packets))
        self.assertEqual(ID3(result.output_files[0])["TIT2"].text, ["Weekly Podcast (Part 1)"])

    def test_empty_input_writes_nothing(self) -> None:
        with mock.patch("mp3_splitter.splitter.scan_packets", return_value=()):
            with self.assertRaises(EmptyInputError):
                split_mp3(self._options(600))
        self.assertFalse(os.path.exists(self.output_dir))

    def test_invalid_duration_fails_before_any_io(self) -> None:
        with mock.patch("mp3_splitter.splitter.scan_packets") as scan, \
                mock.patch("mp3_splitter.splitter.read_source_tag") as read_tag:
            for bad in (0, -1):
                with self.assertRaises(InvalidArgumentError):
                    split_mp3(self._options(bad))
        scan.assert_not_called()
        read_tag.assert_not_called()
        self.assertFalse(os.path.exists(self.output_dir))

    def test_source_tag_is_read_once(self) -> None:
        packets = make_packets(100)
        with mock.patch("mp3_splitter.splitter.scan_packets", return_value=packets), \
                mock.patch("mp3_splitter.splitter.read_source_tag", return_value=SourceTag()) as read_tag:
            result = split_mp3(self._options(FRAME * 10))

        self.assertEqual(result.chunk_count, 10)
        read_tag.assert_called_once_with(self.input_path)

    def test_write_failure_keeps_earlier_chunks(self) -> None:
        packets = make_packets(30)
        real_open = open

        def failing_open(path, mode="r", *args, **kwargs):
            if "wb" in mode and str(path).endswith("_002.mp3"):
                raise PermissionError("read-only")
            return real_open(path, mode, *args, **kwargs)

        with mock.patch("mp3_splitter.splitter.scan_packets", return_value=packets), \
                mock.patch("mp3_splitter.writer.open", failing_open, create=True):
            with self.assertRaises(AudioIOError):
                split_mp3(self._options(FRAME * 10))

        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "podcast_001.mp3")))
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, "podcast_003.mp3")))


if __name__ == "__main__":
    unittest.main()
