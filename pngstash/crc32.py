"""
CRC-32 (ISO-HDLC, the PNG/zlib variant) over arbitrary bytes.

Parameters: poly 0x04C11DB7 reflected, init 0xFFFFFFFF, refin/refout,
xorout 0xFFFFFFFF. zlib implements exactly this variant.
"""

import zlib


def crc32(data: bytes, crc: int = 0) -> int:
    return zlib.crc32(data, crc) & 0xFFFFFFFF
