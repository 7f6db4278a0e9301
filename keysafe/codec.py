"""
Binary framing for vault files.

Layout (integers little-endian):

    offset  size  field
    0       4     magic tag (b"RPSS")
    4       1     format version
    5       4     Argon2id memory cost (KiB)
    9       4     Argon2id time cost
    13      4     Argon2id parallelism
    17      16    salt
    33      12    nonce
    45      ...   ChaCha20-Poly1305 ciphertext, tag appended

Every encode draws a fresh salt and a fresh nonce, so a key/nonce pair is
never reused across saves.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from keysafe import config
from keysafe.crypto import CostParameters, CryptoManager, secret_buffer
from keysafe.errors import (
    BadMagic,
    TruncatedFile,
    UnsupportedVersion,
)
from keysafe.vault import Vault

logger = logging.getLogger(__name__)

Password = Union[str, bytes, bytearray]

# magic, version, memory cost, time cost, parallelism, salt, nonce
_HEADER = struct.Struct(f"<{len(config.VAULT_MAGIC)}sBIII{config.SALT_SIZE}s{config.NONCE_SIZE}s")
HEADER_SIZE = _HEADER.size  # 45


@dataclass(frozen=True)
class VaultHeader:
    """Parsed fixed-size header of a vault file."""
    version: int
    params: CostParameters
    salt: bytes
    nonce: bytes

    def pack(self) -> bytes:
        return _HEADER.pack(
            config.VAULT_MAGIC,
            self.version,
            self.params.memory_cost,
            self.params.time_cost,
            self.params.parallelism,
            self.salt,
            self.nonce,
        )


class VaultCodec:
    """Turns a vault plus master password into file bytes and back."""

    MAGIC_BYTES = config.VAULT_MAGIC
    VERSION = config.VAULT_FORMAT_VERSION

    def __init__(self, crypto: Optional[CryptoManager] = None):
        self.crypto = crypto or CryptoManager()

    def encode(self, vault: Vault, password: Password,
               params: Optional[CostParameters] = None) -> bytes:
        """
        Encrypt *vault* under *password* and frame it.

        Args:
            vault: Records to store
            password: Master password
            params: Argon2id cost parameters, defaults to CostParameters.default()

        Returns:
            Complete vault file contents

        Raises:
            InvalidParameters: If *params* are rejected by Argon2id
            DerivationFailure: If key derivation fails
        """
        params = params or CostParameters.default()
        params.validate()

        header = VaultHeader(
            version=self.VERSION,
            params=params,
            salt=self.crypto.generate_salt(),
            nonce=self.crypto.generate_nonce(),
        )
        plaintext = vault.to_bytes()

        with secret_buffer(password) as pw:
            with secret_buffer(self.crypto.derive_key(pw, header.salt, params)) as key:
                ciphertext = self.crypto.encrypt(plaintext, key, header.nonce)

        logger.debug(f"Encoded vault with {len(vault.entries)} record(s), {len(ciphertext)} ciphertext bytes")
        return header.pack() + ciphertext

    def decode(self, data: bytes, password: Password) -> Vault:
        """
        Parse, authenticate and decrypt vault file contents.

        Checks run in a fixed order: length, magic, version, cost parameters,
        then key derivation and authentication, then payload structure.

        Raises:
            TruncatedFile: If *data* is shorter than the header
            BadMagic: If the magic tag does not match
            UnsupportedVersion: If the format version is unknown
            InvalidParameters: If the stored cost parameters are invalid
            DerivationFailure: If key derivation fails
            AuthenticationFailure: Wrong password or corrupted file
            MalformedPayload: If the decrypted payload is not a vault
        """
        header, ciphertext = self.read_header(data)

        with secret_buffer(password) as pw:
            with secret_buffer(self.crypto.derive_key(pw, header.salt, header.params)) as key:
                plaintext = self.crypto.decrypt(ciphertext, key, header.nonce)

        vault = Vault.from_bytes(plaintext)
        logger.debug(f"Decoded vault with {len(vault.entries)} record(s)")
        return vault

    def read_header(self, data: bytes) -> Tuple[VaultHeader, bytes]:
        """
        Validate and parse the fixed header without touching the ciphertext.

        Returns:
            Tuple of (header, ciphertext)
        """
        if len(data) < HEADER_SIZE:
            raise TruncatedFile(f"vault file is {len(data)} bytes, header needs {HEADER_SIZE}")

        magic = bytes(data[:len(self.MAGIC_BYTES)])
        if magic != self.MAGIC_BYTES:
            logger.warning(f"Magic bytes mismatch. Expected {self.MAGIC_BYTES}, got {magic}")
            raise BadMagic("not a vault file (magic tag mismatch)")
        version = data[len(self.MAGIC_BYTES)]
        if version not in config.SUPPORTED_FORMAT_VERSIONS:
            logger.warning(f"Version mismatch. Supported {sorted(config.SUPPORTED_FORMAT_VERSIONS)}, got {version}")
            raise UnsupportedVersion(version)

        _, _, memory_cost, time_cost, parallelism, salt, nonce = _HEADER.unpack_from(data)
        params = CostParameters(memory_cost=memory_cost, time_cost=time_cost, parallelism=parallelism)
        params.validate()

        header = VaultHeader(version=version, params=params, salt=salt, nonce=nonce)
        return header, bytes(data[HEADER_SIZE:])
