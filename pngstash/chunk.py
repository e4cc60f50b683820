from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Tuple

from .chunk_type import ChunkType
from .constants import (
    CHUNK_CRC_SIZE,
    CHUNK_LENGTH_SIZE,
    CHUNK_OVERHEAD,
    CHUNK_TYPE_SIZE,
    MAX_CHUNK_LENGTH,
)
from .crc32 import crc32
from .errors import ChecksumMismatch, InvalidTag, TrailingData, Truncated, ValidationError


# Chunk framing (big-endian):
#  - length u32 (payload bytes only)
#  - type[4]
#  - payload[length]
#  - crc u32 over type + payload
_LEN_STRUCT = struct.Struct(">I")
_CRC_STRUCT = struct.Struct(">I")


@dataclass(frozen=True)
class Chunk:
    chunk_type: ChunkType
    data: bytes = field(repr=False)
    crc: int = field(init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise TypeError(f"chunk payload must be bytes-like, got {type(self.data).__name__}")
        data = bytes(self.data)
        if len(data) > MAX_CHUNK_LENGTH:
            raise ValueError(f"chunk payload too large: {len(data)} bytes")
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "crc", crc32(data, crc32(self.chunk_type.bytes())))

    @property
    def length(self) -> int:
        return len(self.data)

    @classmethod
    def parse(cls, data: bytes) -> "Chunk":
        """Parse exactly one serialized chunk.

        Raises Truncated, InvalidTag or ChecksumMismatch when the bytes do not
        hold a valid chunk, and TrailingData when bytes follow it.
        """
        chunk, end = cls.parse_from(data)
        if end != len(data):
            raise TrailingData(f"{len(data) - end} unexpected byte(s) after chunk")
        return chunk

    @classmethod
    def parse_from(cls, data: bytes, offset: int = 0) -> Tuple["Chunk", int]:
        """Parse one chunk starting at ``offset``.

        Returns (chunk, end) where ``end`` is the offset just past the crc field.
        """
        view = memoryview(data)
        n = len(view)
        if offset < 0 or n - offset < CHUNK_LENGTH_SIZE:
            raise Truncated("not enough bytes for chunk length")
        (length,) = _LEN_STRUCT.unpack_from(view, offset)
        pos = offset + CHUNK_LENGTH_SIZE
        if n - pos < length + CHUNK_TYPE_SIZE + CHUNK_CRC_SIZE:
            raise Truncated(
                f"chunk declares {length} payload byte(s) but only {n - offset} byte(s) remain "
                f"(need {length + CHUNK_OVERHEAD})"
            )
        try:
            chunk_type = ChunkType.from_bytes(view[pos : pos + CHUNK_TYPE_SIZE])
        except ValidationError as e:
            raise InvalidTag(e) from e
        pos += CHUNK_TYPE_SIZE
        chunk = cls(chunk_type, view[pos : pos + length])
        pos += length
        (stored_crc,) = _CRC_STRUCT.unpack_from(view, pos)
        if stored_crc != chunk.crc:
            raise ChecksumMismatch(stored_crc, chunk.crc)
        return chunk, pos + CHUNK_CRC_SIZE

    def serialize(self) -> bytes:
        return b"".join(
            (
                _LEN_STRUCT.pack(self.length),
                self.chunk_type.bytes(),
                self.data,
                _CRC_STRUCT.pack(self.crc),
            )
        )

    def __bytes__(self) -> bytes:
        return self.serialize()

    def data_as_string(self) -> str:
        # Display only; invalid UTF-8 becomes U+FFFD
        return self.data.decode("utf-8", errors="replace")

    def as_bytes(self) -> bytes:
        return bytes(self.data)

    def __str__(self) -> str:
        return self.data_as_string()
