from __future__ import annotations

import argparse
import os
import random
import struct
import sys
from typing import List, Optional, Tuple

from pngstash.constants import CHUNK_LENGTH_SIZE, CHUNK_TYPE_SIZE, PNG_SIGNATURE
from pngstash.errors import PngStashError


# (type, start offset, length field value); walks framing only, no CRC check
def _walk_chunks(data: bytes) -> List[Tuple[bytes, int, int]]:
    out = []
    pos = len(PNG_SIGNATURE)
    while pos + CHUNK_LENGTH_SIZE + CHUNK_TYPE_SIZE <= len(data):
        (length,) = struct.unpack_from(">I", data, pos)
        ctype = data[pos + CHUNK_LENGTH_SIZE : pos + CHUNK_LENGTH_SIZE + CHUNK_TYPE_SIZE]
        out.append((ctype, pos, length))
        pos += length + 12
    return out


def _flip_byte(path: str, offset: int, xor_val: int = 0xFF) -> None:
    if offset < 0:
        raise ValueError("Offset must be non-negative")
    with open(path, "r+b") as f:
        f.seek(offset)
        b = f.read(1)
        if not b:
            raise ValueError("Offset beyond end of file")
        f.seek(offset)
        f.write(bytes([b[0] ^ (xor_val & 0xFF)]))
        f.flush()
        os.fsync(f.fileno())


def cmd_by_offset(args: argparse.Namespace) -> None:
    _flip_byte(args.file, args.offset, xor_val=args.xor)
    print(f"Flipped 1 byte at offset {args.offset}")


def cmd_chunk(args: argparse.Namespace) -> None:
    with open(args.file, "rb") as f:
        data = f.read()
    wanted = args.type.encode("ascii")
    found = [c for c in _walk_chunks(data) if c[0] == wanted]
    if not found:
        raise ValueError(f"No chunk of type {args.type!r} found")
    _, start, length = found[0]
    # field -> (offset of field, field size)
    fields = {
        "length": (start, 4),
        "type": (start + 4, 4),
        "data": (start + 8, length),
        "crc": (start + 8 + length, 4),
    }
    base, size = fields[args.field]
    if args.within < 0 or args.within >= size:
        raise ValueError(f"--within must be within the {args.field} field (0..{size - 1})")
    off = base + args.within
    _flip_byte(args.file, off, xor_val=args.xor)
    print(f"Flipped 1 byte in {args.type} {args.field} at file offset {off}")


def cmd_random(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    flips = 0
    size = os.path.getsize(args.file)
    with open(args.file, "r+b") as f:
        for _ in range(args.count):
            # Leave the signature alone so the damage lands in chunks
            pos = rng.randrange(len(PNG_SIGNATURE), size)
            f.seek(pos)
            b = f.read(1)
            if not b:
                continue
            f.seek(pos)
            f.write(bytes([b[0] ^ (args.xor & 0xFF)]))
            flips += 1
        f.flush()
        os.fsync(f.fileno())
    print(f"Flipped {flips} byte(s) at random offsets")


def main(argv: Optional[list[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="pngstash.corrupt", description="Corrupt PNG files for testing")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_off = sub.add_parser("by-offset", help="Flip one byte at an absolute file offset")
    p_off.add_argument("file", help="Path to PNG file")
    p_off.add_argument("--offset", type=int, required=True, help="Absolute byte offset in file")
    p_off.add_argument("--xor", type=lambda x: int(x, 0), default=0xFF, help="XOR mask to apply (default 0xFF)")
    p_off.set_defaults(func=cmd_by_offset)

    p_chunk = sub.add_parser("chunk", help="Flip a byte inside the first chunk of a type")
    p_chunk.add_argument("file", help="Path to PNG file")
    p_chunk.add_argument("--type", required=True, help="Four-letter chunk type")
    p_chunk.add_argument(
        "--field",
        choices=["length", "type", "data", "crc"],
        default="crc",
        help="Chunk field to damage (default crc)",
    )
    p_chunk.add_argument("--within", type=int, default=0, help="Byte offset within the field (default 0)")
    p_chunk.add_argument("--xor", type=lambda x: int(x, 0), default=0xFF, help="XOR mask to apply (default 0xFF)")
    p_chunk.set_defaults(func=cmd_chunk)

    p_rand = sub.add_parser("random", help="Flip N random bytes after the signature")
    p_rand.add_argument("file", help="Path to PNG file")
    p_rand.add_argument("--count", type=int, default=1, help="Number of random byte flips (default 1)")
    p_rand.add_argument("--seed", type=int, default=None, help="PRNG seed for reproducibility")
    p_rand.add_argument("--xor", type=lambda x: int(x, 0), default=0xFF, help="XOR mask to apply (default 0xFF)")
    p_rand.set_defaults(func=cmd_random)

    args = ap.parse_args(argv)
    try:
        args.func(args)
    except (PngStashError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
