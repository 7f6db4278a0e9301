"""
Exception hierarchy for the keysafe vault.

Every error raised by the core derives from VaultError so the CLI can catch
one type at the top of the call chain. Nothing in the core retries on error.
"""


class VaultError(Exception):
    """Base class for all vault errors."""


# Input errors

class InputError(VaultError):
    """A caller-supplied value is out of range."""


class InvalidLength(InputError):
    """Requested password length is below the generator minimum."""


# Crypto errors

class CryptoError(VaultError):
    """Key derivation or authenticated encryption failed."""


class InvalidParameters(CryptoError):
    """Argon2id cost parameters violate the algorithm's constraints."""


class DerivationFailure(CryptoError):
    """Argon2id failed while computing the key (e.g. allocation failure)."""


class AuthenticationFailure(CryptoError):
    """
    The ciphertext did not authenticate.

    Raised for a wrong master password and for a corrupted or tampered file
    alike. The two causes are deliberately indistinguishable.
    """

    MESSAGE = "authentication failed: wrong master password or corrupted vault file"

    def __init__(self, message: str = MESSAGE):
        super().__init__(message)


# Format errors

class FormatError(VaultError):
    """The vault file is not a well-formed vault."""


class TruncatedFile(FormatError):
    """The file is shorter than the fixed header."""


class BadMagic(FormatError):
    """The file does not start with the vault magic tag."""


class UnsupportedVersion(FormatError):
    """The file format version is not one this build can read."""

    def __init__(self, version: int):
        super().__init__(f"unsupported vault format version: {version}")
        self.version = version


class MalformedPayload(FormatError):
    """The decrypted payload is not a valid record collection."""


# Generator, store and storage errors

class EmptyPool(VaultError):
    """A requested character category has no characters left to draw from."""


class NotFound(VaultError):
    """No record with the requested name exists."""

    def __init__(self, name: str):
        super().__init__(f"no record named {name!r}")
        self.name = name


class AlreadyExists(VaultError):
    """A vault file already exists at the target path."""

    def __init__(self, path: str):
        super().__init__(f"vault already exists at {path}")
        self.path = path


class IoError(VaultError):
    """Reading or writing the vault file failed."""
