from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from pngstash.chunk import Chunk
from pngstash.chunk_type import ChunkType
from pngstash.encryption import is_sealed, open_message, seal_message
from pngstash.errors import ChunkNotFound, PngStashError
from pngstash.png import read_png, write_png


def _flags(ct: ChunkType) -> str:
    return ",".join(
        name
        for name, on in (
            ("critical", ct.is_critical()),
            ("public", ct.is_public()),
            ("reserved-ok", ct.is_reserved_bit_valid()),
            ("safe-to-copy", ct.is_safe_to_copy()),
        )
        if on
    ) or "-"


def cmd_encode(
    path: str,
    chunk_type: str,
    message: str,
    *,
    output: Optional[str] = None,
    password: Optional[str] = None,
) -> bool:
    """Hide ``message`` in a new chunk of type ``chunk_type``.

    Args:
        path: PNG file to read.
        chunk_type: Four-letter chunk type for the message chunk.
        message: Text to store.
        output: Where to write the result; defaults to ``path``.
        password: Seal the message with this password when given.
    """
    ct = ChunkType.from_str(chunk_type)
    png = read_png(path)
    payload = message.encode("utf-8")
    if password is not None:
        if not password:
            raise ValueError("password must not be empty")
        payload = seal_message(payload, password)
    chunk = Chunk(ct, payload)
    png.append_chunk(chunk)
    dest = output or path
    write_png(dest, png)
    sealed = " (sealed)" if password is not None else ""
    print(f"Encoded {chunk.length} byte(s) into {ct} chunk{sealed} -> {dest}")
    return True


def cmd_decode(path: str, chunk_type: str, *, password: Optional[str] = None) -> bool:
    """Print the message stored in the first chunk of type ``chunk_type``."""
    ct = ChunkType.from_str(chunk_type)
    png = read_png(path)
    chunk = png.chunk_by_type(ct)
    if chunk is None:
        raise ChunkNotFound(f"no chunk of type {str(ct)!r} in {path}")
    if is_sealed(chunk.data):
        if password is None:
            raise ValueError("password required: message is sealed")
        print(open_message(chunk.data, password).decode("utf-8", errors="replace"))
    else:
        if password is not None:
            print("Warning: message is not sealed; ignoring --password", file=sys.stderr)
        print(chunk.data_as_string())
    return True


def cmd_remove(path: str, chunk_type: str) -> bool:
    """Remove the first chunk of type ``chunk_type`` and rewrite the file."""
    ct = ChunkType.from_str(chunk_type)
    png = read_png(path)
    removed = png.remove_first_chunk(ct)
    write_png(path, png)
    print(f"Removed {removed.chunk_type} chunk ({removed.length} byte(s), crc {removed.crc:08x})")
    return True


def cmd_print(path: str) -> bool:
    png = read_png(path)
    print(f"{path}: {len(png)} chunk(s)")
    for c in png.chunks:
        print(f"{c.chunk_type}\t{c.length}\t{c.crc:08x}\t{_flags(c.chunk_type)}")
    return True


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="pngstash",
        description="Hide messages in PNG chunks",
        epilog="Every chunk is CRC-checked on read; a corrupted file is rejected.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_encode = sub.add_parser("encode", help="Store a message in a new chunk")
    ap_encode.add_argument("file", help="PNG file")
    ap_encode.add_argument("chunk_type", help="Four-letter chunk type, e.g. ruSt")
    ap_encode.add_argument("message", help="Message text")
    ap_encode.add_argument("output", nargs="?", help="Output path (default: overwrite FILE)")
    ap_encode.add_argument("--password", help="Seal the message with a password")

    ap_decode = sub.add_parser("decode", help="Print the message from a chunk")
    ap_decode.add_argument("file", help="PNG file")
    ap_decode.add_argument("chunk_type", help="Four-letter chunk type")
    ap_decode.add_argument("--password", help="Password for a sealed message")

    ap_remove = sub.add_parser("remove", help="Remove the first chunk of a type")
    ap_remove.add_argument("file", help="PNG file")
    ap_remove.add_argument("chunk_type", help="Four-letter chunk type")

    ap_print = sub.add_parser("print", help="List the chunks of a file")
    ap_print.add_argument("file", help="PNG file")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "encode":
            cmd_encode(args.file, args.chunk_type, args.message, output=args.output, password=args.password)
        elif args.cmd == "decode":
            cmd_decode(args.file, args.chunk_type, password=args.password)
        elif args.cmd == "remove":
            cmd_remove(args.file, args.chunk_type)
        elif args.cmd == "print":
            cmd_print(args.file)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except ValueError as e:
        msg = str(e)
        if "password required" in msg.lower():
            print("Error: Message is sealed. Provide --password.", file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)
        sys.exit(2)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (PngStashError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
