"""
Persistence of the encrypted vault file.

The file is always rewritten whole: new bytes go to a scratch file that is
then moved over the vault. A single process is assumed to own the file at a
time; there is no locking between processes.
"""

import logging
import os
from typing import Optional

from keysafe import config
from keysafe.codec import Password, VaultCodec
from keysafe.crypto import CostParameters
from keysafe.errors import AlreadyExists, IoError
from keysafe.utils import restrict_to_owner
from keysafe.vault import Vault

logger = logging.getLogger(__name__)


class StorageManager:
    """Reads and writes one vault file."""

    def __init__(self, filepath: str, codec: Optional[VaultCodec] = None):
        """
        Args:
            filepath: Path to the encrypted vault file
            codec: Codec to use, a default VaultCodec if omitted
        """
        self.filepath = filepath
        self.codec = codec or VaultCodec()
        # Cost parameters read from the file by load(), reused by save()
        self.params: Optional[CostParameters] = None

    def exists(self) -> bool:
        return os.path.exists(self.filepath)

    def initialize(self, master_password: Password,
                   params: Optional[CostParameters] = None) -> None:
        """
        Create a new empty vault.

        Raises:
            AlreadyExists: If a file is already present at the path
        """
        if self.exists():
            raise AlreadyExists(self.filepath)
        self.save(Vault(), master_password, params)
        logger.info(f"Created new vault at {self.filepath}")

    def load(self, master_password: Password) -> Vault:
        """
        Decrypt the vault file.

        A missing file yields an empty vault.

        Raises:
            IoError: If the file cannot be read
            FormatError, CryptoError: As raised by VaultCodec.decode
        """
        if not self.exists():
            logger.info(f"No vault at {self.filepath}; starting empty")
            return Vault()

        try:
            with open(self.filepath, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise IoError(f"cannot read vault file {self.filepath}: {e}") from e

        header, _ = self.codec.read_header(data)
        vault = self.codec.decode(data, master_password)
        self.params = header.params
        return vault

    def save(self, vault: Vault, master_password: Password,
             params: Optional[CostParameters] = None) -> None:
        """
        Encrypt *vault* with a fresh salt and nonce and replace the file.

        Cost parameters default to those the vault was loaded with, then to
        CostParameters.default().

        Raises:
            IoError: If the file cannot be written
        """
        params = params or self.params or CostParameters.default()
        data = self.codec.encode(vault, master_password, params)

        tmp_path = self.filepath + config.TEMP_FILE_SUFFIX
        try:
            directory = os.path.dirname(self.filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(tmp_path, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if not restrict_to_owner(tmp_path):
                logger.warning(f"Failed to set secure file permissions for vault: {self.filepath}")

            # os.replace is atomic on POSIX and Windows
            os.replace(tmp_path, self.filepath)
        except OSError as e:
            logger.error(f"Error saving vault file {self.filepath}: {e}", exc_info=True)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise IoError(f"cannot write vault file {self.filepath}: {e}") from e

        self.params = params
        logger.info(f"Saved {len(vault.entries)} record(s) to {self.filepath}")
