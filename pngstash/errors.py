class PngStashError(Exception):
    """Base class for pngstash-specific errors."""


# Chunk type validation
class ValidationError(PngStashError, ValueError):
    pass


class WrongLength(ValidationError):
    def __init__(self, length: int):
        super().__init__(f"chunk type must be 4 bytes, got {length}")
        self.length = length


class InvalidByte(ValidationError):
    def __init__(self, position: int, value: int):
        super().__init__(f"invalid chunk type byte 0x{value:02x} at position {position}")
        self.position = position
        self.value = value


# Chunk/container parsing
class FormatError(PngStashError, ValueError):
    pass


class Truncated(FormatError):
    pass


class InvalidTag(FormatError):
    def __init__(self, cause: ValidationError):
        super().__init__(f"invalid chunk type: {cause}")
        self.cause = cause


class ChecksumMismatch(FormatError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"chunk CRC mismatch: stored 0x{expected:08x}, computed 0x{actual:08x}")
        self.expected = expected
        self.actual = actual


class TrailingData(FormatError):
    pass


class BadSignature(FormatError):
    pass


# Lookup
class ChunkNotFound(PngStashError, LookupError):
    pass


# Sealed messages
class DecryptionError(PngStashError):
    pass
