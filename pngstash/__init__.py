"""
pngstash — hide messages in PNG chunks.

A PNG file is an 8-byte signature followed by chunks, each framed as
length u32 | type[4] | payload | crc32 (big-endian). This package provides:

- ChunkType: validated four-letter type code with its case-bit properties
- Chunk: parse/serialize with CRC-32 verification
- Png: signature check, chunk traversal, append/remove/lookup
- Optional password sealing of messages (Argon2id + XChaCha20-Poly1305)
- CLI: encode, decode, remove and print
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "chunk_type",
    "chunk",
    "png",
    "encryption",
]

# Programmatic API lives in pngstash.chunk/pngstash.png; the CLI functions in
# pngstash.cli (cmd_encode/cmd_decode/...) take normal parameters.
