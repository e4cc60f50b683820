from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .chunk import Chunk
from .chunk_type import ChunkType
from .constants import IEND, MAX_FILE_SIZE, PNG_SIGNATURE
from .errors import BadSignature, ChunkNotFound


class Png:
    """PNG container: the 8-byte signature followed by chunks back to back.

    Chunk contents are not interpreted; only framing and CRCs are checked.
    """

    STANDARD_HEADER = PNG_SIGNATURE

    def __init__(self, chunks: Optional[Iterable[Chunk]] = None):
        self._chunks: List[Chunk] = list(chunks or [])

    @classmethod
    def from_chunks(cls, chunks: Iterable[Chunk]) -> "Png":
        return cls(chunks)

    @classmethod
    def parse(cls, data: bytes) -> "Png":
        sig_len = len(PNG_SIGNATURE)
        if bytes(data[:sig_len]) != PNG_SIGNATURE:
            raise BadSignature("missing PNG signature")
        chunks: List[Chunk] = []
        pos = sig_len
        while pos < len(data):
            chunk, pos = Chunk.parse_from(data, pos)
            chunks.append(chunk)
        return cls(chunks)

    @property
    def header(self) -> bytes:
        return PNG_SIGNATURE

    @property
    def chunks(self) -> List[Chunk]:
        return list(self._chunks)

    def append_chunk(self, chunk: Chunk) -> None:
        # Readers stop at IEND, so new chunks go in front of it
        if self._chunks and str(self._chunks[-1].chunk_type) == IEND:
            self._chunks.insert(len(self._chunks) - 1, chunk)
        else:
            self._chunks.append(chunk)

    def remove_first_chunk(self, chunk_type: Union[str, ChunkType]) -> Chunk:
        wanted = str(chunk_type)
        for i, c in enumerate(self._chunks):
            if str(c.chunk_type) == wanted:
                return self._chunks.pop(i)
        raise ChunkNotFound(f"no chunk of type {wanted!r}")

    def chunk_by_type(self, chunk_type: Union[str, ChunkType]) -> Optional[Chunk]:
        wanted = str(chunk_type)
        return next((c for c in self._chunks if str(c.chunk_type) == wanted), None)

    def serialize(self) -> bytes:
        return PNG_SIGNATURE + b"".join(c.serialize() for c in self._chunks)

    as_bytes = serialize

    def __bytes__(self) -> bytes:
        return self.serialize()

    def __len__(self) -> int:
        return len(self._chunks)

    def __str__(self) -> str:
        lines = [f"Png: {len(self._chunks)} chunk(s)"]
        for c in self._chunks:
            lines.append(f"  {c.chunk_type}\t{c.length}\t{c.crc:08x}")
        return "\n".join(lines)


def read_png(path: Union[str, Path], max_size: int = MAX_FILE_SIZE) -> Png:
    path = Path(path)
    size = path.stat().st_size
    if size > max_size:
        raise ValueError(f"File size {size} exceeds maximum {max_size} bytes")
    return Png.parse(path.read_bytes())


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_png(path: Union[str, Path], png: Png) -> None:
    """Write ``png`` to ``path`` via a temporary sibling and an atomic swap."""
    path = Path(path)
    data = png.serialize()
    fd, tmp = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        # mkstemp creates 0600; keep the target's mode, or the umask default for a new file
        if path.exists():
            shutil.copymode(str(path), tmp)
        else:
            os.chmod(tmp, 0o666 & ~_current_umask())
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise
