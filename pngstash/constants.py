# PNG file signature: "\x89PNG\r\n\x1a\n"
PNG_SIGNATURE = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])

# Chunk layout (all integers big-endian):
#   length u32 | type[4] | payload[length] | crc u32
CHUNK_LENGTH_SIZE = 4
CHUNK_TYPE_SIZE = 4
CHUNK_CRC_SIZE = 4
CHUNK_OVERHEAD = CHUNK_LENGTH_SIZE + CHUNK_TYPE_SIZE + CHUNK_CRC_SIZE

MAX_CHUNK_LENGTH = 0xFFFFFFFF
MAX_FILE_SIZE = 256 * 1024 * 1024  # 256 MiB

# CRC-32 (ISO-HDLC) check value over b"123456789"
CRC32_CHECK = 0xCBF43926

IEND = "IEND"

# Sealed message envelope
SEAL_MAGIC = b"PSTSEAL\x00"  # 8 bytes: "PSTSEAL\0"

# Argon2id defaults for sealing messages
ARGON_TIME_COST = 3
ARGON_MEMORY_COST_KIB = 64 * 1024  # 64 MiB
ARGON_PARALLELISM = 4

# Accepted bounds when opening a sealed message
ARGON_MAX_TIME_COST = 16
ARGON_MAX_MEMORY_COST_KIB = 1024 * 1024  # 1 GiB
ARGON_MAX_PARALLELISM = 16
