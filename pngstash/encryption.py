from __future__ import annotations

import os
import struct
from dataclasses import dataclass

from argon2.low_level import Type as ArgonType, hash_secret_raw

from .constants import (
    ARGON_MAX_MEMORY_COST_KIB,
    ARGON_MAX_PARALLELISM,
    ARGON_MAX_TIME_COST,
    ARGON_MEMORY_COST_KIB,
    ARGON_PARALLELISM,
    ARGON_TIME_COST,
    SEAL_MAGIC,
)
from .errors import DecryptionError
from .xchacha import KEY_SIZE, NONCE_SIZE, TAG_SIZE, XChaCha20Poly1305


SALT_SIZE = 16

# Sealed envelope header (little-endian), also the AEAD associated data:
#  - magic[8]
#  - time_cost u32
#  - memory_cost_kib u32
#  - parallelism u32
#  - salt[16]
# followed by nonce[24] || ciphertext || tag[16]
_SEAL_HDR_STRUCT = struct.Struct("<8sIII16s")


@dataclass
class EncryptionParams:
    salt: bytes
    time_cost: int
    memory_cost_kib: int
    parallelism: int

    def pack(self) -> bytes:
        return _SEAL_HDR_STRUCT.pack(SEAL_MAGIC, self.time_cost, self.memory_cost_kib, self.parallelism, self.salt)

    def check(self) -> None:
        if not (1 <= self.time_cost <= ARGON_MAX_TIME_COST):
            raise ValueError(f"Unsupported Argon2 time cost: {self.time_cost}")
        if not (1 <= self.parallelism <= ARGON_MAX_PARALLELISM):
            raise ValueError(f"Unsupported Argon2 parallelism: {self.parallelism}")
        if not (8 * self.parallelism <= self.memory_cost_kib <= ARGON_MAX_MEMORY_COST_KIB):
            raise ValueError(f"Unsupported Argon2 memory cost: {self.memory_cost_kib} KiB")


class EncryptionContext:
    def __init__(self, key: bytes, params: EncryptionParams):
        self.key = key
        self.params = params
        self._cipher = XChaCha20Poly1305(key)

    @classmethod
    def create(
        cls,
        password: str,
        *,
        time_cost: int = ARGON_TIME_COST,
        memory_cost_kib: int = ARGON_MEMORY_COST_KIB,
        parallelism: int = ARGON_PARALLELISM,
    ) -> "EncryptionContext":
        params = EncryptionParams(
            salt=os.urandom(SALT_SIZE),
            time_cost=time_cost,
            memory_cost_kib=memory_cost_kib,
            parallelism=parallelism,
        )
        return cls.from_params(password, params)

    @classmethod
    def from_params(cls, password: str, params: EncryptionParams) -> "EncryptionContext":
        params.check()
        key = hash_secret_raw(
            password.encode("utf-8"),
            params.salt,
            time_cost=params.time_cost,
            memory_cost=params.memory_cost_kib,
            parallelism=params.parallelism,
            hash_len=KEY_SIZE,
            type=ArgonType.ID,
        )
        return cls(key, params)

    def encrypt(self, aad: bytes, plaintext: bytes) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext, tag = self._cipher.encrypt(nonce, plaintext, associated_data=aad)
        return nonce + ciphertext + tag

    def decrypt(self, aad: bytes, payload: bytes) -> bytes:
        if len(payload) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionError("Sealed payload too short")
        nonce = payload[:NONCE_SIZE]
        tag = payload[-TAG_SIZE:]
        ciphertext = payload[NONCE_SIZE:-TAG_SIZE]
        try:
            return self._cipher.decrypt(nonce, ciphertext, tag, associated_data=aad)
        except ValueError as e:
            raise DecryptionError("Wrong password or corrupted message") from e


def is_sealed(payload: bytes) -> bool:
    return payload[: len(SEAL_MAGIC)] == SEAL_MAGIC


def seal_message(plaintext: bytes, password: str, **argon_params) -> bytes:
    """Encrypt ``plaintext`` under a key derived from ``password``.

    ``argon_params`` may override time_cost, memory_cost_kib and parallelism.
    """
    ctx = EncryptionContext.create(password, **argon_params)
    header = ctx.params.pack()
    return header + ctx.encrypt(header, plaintext)


def open_message(envelope: bytes, password: str) -> bytes:
    if len(envelope) < _SEAL_HDR_STRUCT.size:
        raise DecryptionError("Sealed payload too short")
    header = envelope[: _SEAL_HDR_STRUCT.size]
    magic, time_cost, memory_cost_kib, parallelism, salt = _SEAL_HDR_STRUCT.unpack(header)
    if magic != SEAL_MAGIC:
        raise DecryptionError("Payload is not a sealed message")
    params = EncryptionParams(
        salt=salt,
        time_cost=time_cost,
        memory_cost_kib=memory_cost_kib,
        parallelism=parallelism,
    )
    ctx = EncryptionContext.from_params(password, params)
    return ctx.decrypt(header, envelope[_SEAL_HDR_STRUCT.size :])
