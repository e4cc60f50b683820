from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .constants import CHUNK_TYPE_SIZE
from .errors import InvalidByte, WrongLength


_BYTES_LIKE = (bytes, bytearray, memoryview)


def is_valid_byte(b: int) -> bool:
    return 65 <= b <= 90 or 97 <= b <= 122


def _is_upper(b: int) -> bool:
    return 65 <= b <= 90


@dataclass(frozen=True)
class ChunkType:
    """Four-letter chunk type code.

    The case of each letter carries one property bit:

    - byte 0 uppercase: critical (decoders must understand the chunk)
    - byte 1 uppercase: public (registered type)
    - byte 2 uppercase: reserved bit valid
    - byte 3 lowercase: safe to copy by editors that do not recognise it

    Construction validates the bytes, so every instance holds exactly four
    ASCII letters.
    """

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, _BYTES_LIKE):
            raise TypeError(f"chunk type must be bytes-like, got {type(self.raw).__name__}")
        raw = bytes(self.raw)
        if len(raw) != CHUNK_TYPE_SIZE:
            raise WrongLength(len(raw))
        for pos, b in enumerate(raw):
            if not is_valid_byte(b):
                raise InvalidByte(pos, b)
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, Iterable[int]]) -> "ChunkType":
        if isinstance(data, _BYTES_LIKE):
            return cls(data)
        values = list(data)
        if len(values) != CHUNK_TYPE_SIZE:
            raise WrongLength(len(values))
        for pos, v in enumerate(values):
            if not isinstance(v, int):
                raise TypeError(f"chunk type byte at position {pos} is not an int")
            if not 0 <= v <= 255:
                raise InvalidByte(pos, v)
        return cls(bytes(values))

    @classmethod
    def from_str(cls, s: str) -> "ChunkType":
        return cls(s.encode("utf-8"))

    def bytes(self) -> bytes:
        return self.raw

    def __bytes__(self) -> bytes:
        return self.raw

    def is_critical(self) -> bool:
        return _is_upper(self.raw[0])

    def is_public(self) -> bool:
        return _is_upper(self.raw[1])

    def is_reserved_bit_valid(self) -> bool:
        return _is_upper(self.raw[2])

    # The reserved bit is the only validity flag the format defines
    is_valid = is_reserved_bit_valid

    def is_safe_to_copy(self) -> bool:
        return not _is_upper(self.raw[3])

    def __str__(self) -> str:
        return self.raw.decode("ascii")

    def __repr__(self) -> str:
        return f"ChunkType({str(self)!r})"
