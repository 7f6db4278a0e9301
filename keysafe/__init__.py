"""
keysafe - local-only encrypted password vault.

THREAT MODEL:
The vault protects stored credentials at rest. The file is sealed with
ChaCha20-Poly1305 under a key derived from the master password with Argon2id.
It does not protect against an attacker who can run code on the host while
the vault is open, and a forgotten master password cannot be recovered.
"""

from keysafe.config import APP_VERSION as __version__
