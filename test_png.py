from __future__ import annotations

import os
import stat
import struct
import tempfile
import unittest
from pathlib import Path

from pngstash.chunk import Chunk
from pngstash.chunk_type import ChunkType
from pngstash.constants import PNG_SIGNATURE
from pngstash.errors import BadSignature, ChecksumMismatch, ChunkNotFound, Truncated
from pngstash.png import Png, read_png, write_png


def _chunk(ctype: str, data: bytes) -> Chunk:
    return Chunk(ChunkType.from_str(ctype), data)


def _testing_chunks():
    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0)
    return [
        _chunk("IHDR", ihdr),
        _chunk("FrSt", b"I am the first chunk"),
        _chunk("miDl", b"I am another chunk"),
        _chunk("LASt", b"I am the last chunk"),
    ]


def _testing_png() -> Png:
    return Png.from_chunks(_testing_chunks())


class PngTests(unittest.TestCase):
    def test_from_chunks(self):
        png = _testing_png()
        self.assertEqual(len(png.chunks), 4)
        self.assertEqual(png.header, PNG_SIGNATURE)
        self.assertEqual(Png.STANDARD_HEADER, PNG_SIGNATURE)

    def test_parse_roundtrip_bytes(self):
        raw = _testing_png().serialize()
        png = Png.parse(raw)
        self.assertEqual(png.chunks, _testing_chunks())
        self.assertEqual(png.as_bytes(), raw)
        self.assertEqual(bytes(png), raw)

    def test_bad_signature(self):
        raw = bytearray(_testing_png().serialize())
        raw[1] = ord("Q")
        with self.assertRaises(BadSignature):
            Png.parse(bytes(raw))
        with self.assertRaises(BadSignature):
            Png.parse(b"")

    def test_signature_only(self):
        self.assertEqual(len(Png.parse(PNG_SIGNATURE)), 0)

    def test_corrupt_chunk_rejected(self):
        raw = bytearray(_testing_png().serialize())
        raw[-1] ^= 0xFF
        with self.assertRaises(ChecksumMismatch):
            Png.parse(bytes(raw))

    def test_truncated_file_rejected(self):
        raw = _testing_png().serialize()
        with self.assertRaises(Truncated):
            Png.parse(raw[:-2])

    def test_chunk_by_type(self):
        png = _testing_png()
        chunk = png.chunk_by_type("FrSt")
        self.assertIsNotNone(chunk)
        self.assertEqual(chunk.data_as_string(), "I am the first chunk")
        self.assertEqual(png.chunk_by_type(ChunkType.from_str("miDl")).data, b"I am another chunk")
        self.assertIsNone(png.chunk_by_type("NoPe"))

    def test_append_chunk(self):
        png = _testing_png()
        png.append_chunk(_chunk("TeSt", b"Message"))
        self.assertEqual(png.chunk_by_type("TeSt").data_as_string(), "Message")
        self.assertEqual(str(png.chunks[-1].chunk_type), "TeSt")

    def test_append_goes_before_iend(self):
        png = Png.from_chunks(_testing_chunks() + [_chunk("IEND", b"")])
        png.append_chunk(_chunk("TeSt", b"Message"))
        self.assertEqual([str(c.chunk_type) for c in png.chunks][-2:], ["TeSt", "IEND"])

    def test_remove_first_chunk(self):
        png = _testing_png()
        png.append_chunk(_chunk("TeSt", b"one"))
        png.append_chunk(_chunk("TeSt", b"two"))
        removed = png.remove_first_chunk("TeSt")
        self.assertEqual(removed.data, b"one")
        self.assertEqual(png.chunk_by_type("TeSt").data, b"two")
        png.remove_first_chunk(ChunkType.from_str("TeSt"))
        self.assertIsNone(png.chunk_by_type("TeSt"))
        with self.assertRaises(ChunkNotFound):
            png.remove_first_chunk("TeSt")

    def test_chunks_is_a_copy(self):
        png = _testing_png()
        png.chunks.clear()
        self.assertEqual(len(png), 4)

    def test_str(self):
        text = str(_testing_png())
        self.assertIn("4 chunk(s)", text)
        self.assertIn("miDl", text)


class PngFileTests(unittest.TestCase):
    def run_with_tmpdir(self, func):
        with tempfile.TemporaryDirectory() as tmp:
            func(Path(tmp))

    def test_write_then_read(self):
        def scenario(tmp_path: Path):
            p = tmp_path / "a.png"
            write_png(p, _testing_png())
            self.assertEqual(p.read_bytes(), _testing_png().serialize())
            self.assertEqual(read_png(str(p)).chunks, _testing_chunks())
            # no temporary files left behind
            self.assertEqual([x.name for x in tmp_path.iterdir()], ["a.png"])

        self.run_with_tmpdir(scenario)

    def test_rewrite_keeps_file_mode(self):
        def scenario(tmp_path: Path):
            p = tmp_path / "a.png"
            write_png(p, _testing_png())
            for mode in (0o644, 0o640):
                os.chmod(p, mode)
                png = read_png(p)
                png.append_chunk(Chunk(ChunkType.from_str("TeSt"), b"Message"))
                write_png(p, png)
                self.assertEqual(stat.S_IMODE(p.stat().st_mode), mode)

        self.run_with_tmpdir(scenario)

    def test_new_file_is_not_private(self):
        def scenario(tmp_path: Path):
            p = tmp_path / "new.png"
            old = os.umask(0o022)
            try:
                write_png(p, _testing_png())
            finally:
                os.umask(old)
            self.assertEqual(stat.S_IMODE(p.stat().st_mode), 0o644)

        self.run_with_tmpdir(scenario)

    def test_size_limit(self):
        def scenario(tmp_path: Path):
            p = tmp_path / "a.png"
            write_png(p, _testing_png())
            with self.assertRaises(ValueError):
                read_png(p, max_size=16)

        self.run_with_tmpdir(scenario)

    def test_missing_file(self):
        def scenario(tmp_path: Path):
            with self.assertRaises(FileNotFoundError):
                read_png(tmp_path / "missing.png")

        self.run_with_tmpdir(scenario)


if __name__ == "__main__":
    unittest.main()
