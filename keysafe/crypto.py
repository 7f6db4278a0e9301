"""
Cryptographic operations for the vault.

Key derivation uses Argon2id (argon2-cffi) and the vault payload is sealed
with ChaCha20-Poly1305 (cryptography). Secret buffers are wiped on scope exit.

MEMORY HYGIENE:
Wiping is best effort. Python str and bytes objects are immutable and cannot
be overwritten, and both argon2-cffi and cryptography copy their inputs into
buffers they own. secret_buffer() only guarantees that the bytearray it hands
out is zeroed; copies made by the interpreter or the libraries are outside
its reach.
"""

import contextlib
import logging
import secrets
from dataclasses import dataclass
from typing import Iterator, Union

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from keysafe import config
from keysafe.errors import (
    AuthenticationFailure,
    DerivationFailure,
    InvalidParameters,
)

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class CostParameters:
    """Argon2id cost parameters as stored in the vault header."""
    memory_cost: int  # KiB
    time_cost: int
    parallelism: int

    @classmethod
    def default(cls) -> 'CostParameters':
        """Cost parameters used for new saves."""
        return cls(
            memory_cost=config.ARGON2_MEMORY_COST,
            time_cost=config.ARGON2_TIME_COST,
            parallelism=config.ARGON2_PARALLELISM,
        )

    def validate(self) -> None:
        """
        Check the parameters against Argon2's own constraints.

        Raises:
            InvalidParameters: If any value is outside what Argon2id accepts
                or what the header can hold.
        """
        for field_name in ("memory_cost", "time_cost", "parallelism"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidParameters(f"{field_name} must be an integer")
            if not 0 <= value <= config.UINT32_MAX:
                raise InvalidParameters(f"{field_name} must fit in 32 bits, got {value}")
        if self.time_cost < 1:
            raise InvalidParameters("time_cost must be at least 1")
        if not 1 <= self.parallelism <= config.ARGON2_MAX_PARALLELISM:
            raise InvalidParameters(
                f"parallelism must be between 1 and {config.ARGON2_MAX_PARALLELISM}, "
                f"got {self.parallelism}"
            )
        floor = config.ARGON2_MIN_MEMORY_PER_LANE * self.parallelism
        if self.memory_cost < floor:
            raise InvalidParameters(
                f"memory_cost must be at least {floor} KiB for parallelism "
                f"{self.parallelism}, got {self.memory_cost}"
            )


@contextlib.contextmanager
def secret_buffer(data: Union[str, BytesLike]) -> Iterator[bytearray]:
    """
    Copy *data* into a bytearray and zero it when the block exits.

    Strings are encoded as UTF-8. The zeroing runs on normal exit, early
    return and exceptions alike.
    """
    if isinstance(data, str):
        buf = bytearray(data, "utf-8")
    else:
        buf = bytearray(data)
    try:
        yield buf
    finally:
        clear_bytes(buf)


def clear_bytes(data: bytearray) -> None:
    """Overwrite a mutable buffer with zeros in place."""
    for i in range(len(data)):
        data[i] = 0


class CryptoManager:
    """Key derivation and authenticated encryption for the vault payload."""

    def generate_salt(self) -> bytes:
        """Generate a fresh random salt from the OS CSPRNG."""
        return secrets.token_bytes(config.SALT_SIZE)

    def generate_nonce(self) -> bytes:
        """Generate a fresh random 96-bit nonce from the OS CSPRNG."""
        return secrets.token_bytes(config.NONCE_SIZE)

    def derive_key(self, password: BytesLike, salt: BytesLike, params: CostParameters) -> bytes:
        """
        Derive a 32-byte key from the master password with Argon2id.

        Deterministic: the same (password, salt, params) always yields the
        same key.

        Args:
            password: UTF-8 master password bytes
            salt: 16-byte salt
            params: Argon2id cost parameters

        Returns:
            32-byte key

        Raises:
            InvalidParameters: If *params* or the salt size are invalid
            DerivationFailure: If Argon2 fails while computing, e.g. it cannot
                allocate the requested memory
        """
        if len(salt) != config.SALT_SIZE:
            raise InvalidParameters(f"salt must be {config.SALT_SIZE} bytes, got {len(salt)}")
        params.validate()

        logger.debug(
            f"Deriving key with Argon2id m={params.memory_cost} KiB, "
            f"t={params.time_cost}, p={params.parallelism}"
        )
        try:
            return hash_secret_raw(
                secret=bytes(password),
                salt=bytes(salt),
                time_cost=params.time_cost,
                memory_cost=params.memory_cost,
                parallelism=params.parallelism,
                hash_len=config.KEY_SIZE,
                type=Type.ID,
            )
        except (HashingError, MemoryError) as e:
            logger.error(f"Argon2id derivation failed: {e}")
            raise DerivationFailure(f"key derivation failed: {e}") from e

    def encrypt(self, plaintext: bytes, key: BytesLike, nonce: bytes) -> bytes:
        """
        Seal *plaintext* with ChaCha20-Poly1305.

        Returns:
            Ciphertext with the 16-byte Poly1305 tag appended
        """
        return ChaCha20Poly1305(key).encrypt(nonce, plaintext, None)

    def decrypt(self, ciphertext: bytes, key: BytesLike, nonce: bytes) -> bytes:
        """
        Open a ChaCha20-Poly1305 ciphertext (tag included).

        Fails closed: no plaintext is returned unless the tag verifies.

        Raises:
            AuthenticationFailure: On any mismatch, whatever the cause
        """
        try:
            return ChaCha20Poly1305(key).decrypt(nonce, ciphertext, None)
        except InvalidTag:
            raise AuthenticationFailure() from None
