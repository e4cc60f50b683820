from __future__ import annotations

import unittest

from pngstash.chunk_type import ChunkType, is_valid_byte
from pngstash.errors import InvalidByte, ValidationError, WrongLength


class ChunkTypeTests(unittest.TestCase):
    def test_from_bytes(self):
        ct = ChunkType.from_bytes([82, 117, 83, 116])
        self.assertEqual(ct.bytes(), bytes([82, 117, 83, 116]))
        self.assertEqual(bytes(ct), b"RuSt")

    def test_from_str_equals_from_bytes(self):
        self.assertEqual(ChunkType.from_bytes(b"RuSt"), ChunkType.from_str("RuSt"))
        self.assertEqual(hash(ChunkType.from_bytes(b"RuSt")), hash(ChunkType.from_str("RuSt")))
        self.assertNotEqual(ChunkType.from_str("RuSt"), ChunkType.from_str("RUSt"))

    def test_classification(self):
        ct = ChunkType.from_str("RuSt")
        self.assertTrue(ct.is_critical())
        self.assertFalse(ct.is_public())
        self.assertTrue(ct.is_reserved_bit_valid())
        self.assertTrue(ct.is_valid())
        self.assertTrue(ct.is_safe_to_copy())

        self.assertFalse(ChunkType.from_str("ruSt").is_critical())
        self.assertTrue(ChunkType.from_str("RUSt").is_public())
        self.assertFalse(ChunkType.from_str("Rust").is_reserved_bit_valid())
        self.assertFalse(ChunkType.from_str("Rust").is_valid())
        self.assertFalse(ChunkType.from_str("RuST").is_safe_to_copy())

    def test_standard_types(self):
        for name, critical in (("IHDR", True), ("IDAT", True), ("IEND", True), ("tEXt", False), ("gAMA", False)):
            ct = ChunkType.from_str(name)
            self.assertEqual(ct.is_critical(), critical, name)
            self.assertTrue(ct.is_valid(), name)

    def test_invalid_byte(self):
        with self.assertRaises(InvalidByte) as cm:
            ChunkType.from_str("Ru1t")
        self.assertEqual(cm.exception.position, 2)
        self.assertEqual(cm.exception.value, ord("1"))
        for bad in (b"Ru@t", b"Ru[t", b"Ru`t", b"Ru{t", b"\x00uSt", b"RuS\xff"):
            with self.assertRaises(InvalidByte):
                ChunkType.from_bytes(bad)

    def test_first_invalid_byte_reported(self):
        with self.assertRaises(InvalidByte) as cm:
            ChunkType.from_bytes(b"R12t")
        self.assertEqual(cm.exception.position, 1)

    def test_out_of_range_ints_rejected(self):
        with self.assertRaises(InvalidByte) as cm:
            ChunkType.from_bytes([82, 117, 300, 116])
        self.assertEqual(cm.exception.position, 2)
        self.assertEqual(cm.exception.value, 300)
        with self.assertRaises(InvalidByte):
            ChunkType.from_bytes([-1, 117, 83, 116])
        with self.assertRaises(WrongLength):
            ChunkType.from_bytes([82, 117, 300])

    def test_non_bytes_input_rejected(self):
        with self.assertRaises(TypeError):
            ChunkType.from_bytes([82, 117, "S", 116])
        with self.assertRaises(TypeError):
            ChunkType(3)
        with self.assertRaises(TypeError):
            ChunkType("RuSt")

    def test_wrong_length(self):
        for bad in ("", "Rus", "RuStx"):
            with self.assertRaises(WrongLength):
                ChunkType.from_str(bad)
        with self.assertRaises(WrongLength):
            ChunkType.from_bytes(b"RuStRuSt")

    def test_non_ascii_string_rejected(self):
        with self.assertRaises(ValidationError):
            ChunkType.from_str("Ruät")
        with self.assertRaises(ValidationError):
            ChunkType.from_str("Rué")

    def test_validation_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            ChunkType.from_str("Ru1t")

    def test_string(self):
        ct = ChunkType.from_str("RuSt")
        self.assertEqual(str(ct), "RuSt")
        self.assertEqual(repr(ct), "ChunkType('RuSt')")

    def test_immutable(self):
        ct = ChunkType.from_str("RuSt")
        with self.assertRaises(AttributeError):
            ct.raw = b"Rust"

    def test_bytes_is_a_copy_of_input(self):
        src = bytearray(b"RuSt")
        ct = ChunkType.from_bytes(src)
        src[0] = ord("r")
        self.assertEqual(ct.bytes(), b"RuSt")
        self.assertTrue(ct.is_critical())

    def test_is_valid_byte(self):
        self.assertTrue(all(is_valid_byte(b) for b in range(65, 91)))
        self.assertTrue(all(is_valid_byte(b) for b in range(97, 123)))
        self.assertFalse(any(is_valid_byte(b) for b in (0, 64, 91, 96, 123, 255)))


if __name__ == "__main__":
    unittest.main()
