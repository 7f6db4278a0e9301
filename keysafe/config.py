"""
Configuration constants for the keysafe vault.
"""

# Application Metadata
APP_VERSION = "1.0.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "keysafe"  # Use: Name of the application, also used for the per-user data directory. Type: str. Range: Any valid directory-safe string.
APP_DESCRIPTION = "Local-only encrypted password vault"  # Use: One-line description shown in CLI help. Type: str. Range: Any valid string.

# File Format Settings
VAULT_MAGIC = b"RPSS"  # Use: 4-byte tag at offset 0 identifying a vault file. Type: bytes. Range: Exactly 4 bytes. Changing it makes existing vaults unreadable.
VAULT_FORMAT_VERSION = 1  # Use: Format version written into new vault files. Type: int. Range: 0 to 255 (stored as a single byte).
SUPPORTED_FORMAT_VERSIONS = frozenset({1})  # Use: Format versions this build can read. Type: frozenset[int]. Range: Subset of 0..255.

# Security Settings
SALT_SIZE = 16  # Use: Size of the Argon2id salt in bytes. Type: int. Range: Fixed at 16 by the file format.
NONCE_SIZE = 12  # Use: Size of the ChaCha20-Poly1305 nonce in bytes. Type: int. Range: Fixed at 12 (96 bits).
KEY_SIZE = 32  # Use: Size of the derived encryption key in bytes. Type: int. Range: Fixed at 32 (256-bit ChaCha20 key).
TAG_SIZE = 16  # Use: Size of the Poly1305 authentication tag appended to the ciphertext. Type: int. Range: Fixed at 16.
ARGON2_MEMORY_COST = 64 * 1024  # Use: Argon2id memory cost in KiB for new saves. Type: int. Range: At least 8 * ARGON2_PARALLELISM; 65536 (64 MiB) or more recommended.
ARGON2_TIME_COST = 3  # Use: Argon2id time cost (iterations) for new saves. Type: int. Range: 1 or more. Higher values slow brute force linearly.
ARGON2_PARALLELISM = 1  # Use: Argon2id parallelism (lanes) for new saves. Type: int. Range: 1 to 2**24 - 1.
ARGON2_MIN_MEMORY_PER_LANE = 8  # Use: Argon2 floor on memory cost, in KiB per lane. Type: int. Range: Fixed at 8 by RFC 9106.
ARGON2_MAX_PARALLELISM = 2 ** 24 - 1  # Use: Argon2 ceiling on the number of lanes. Type: int. Range: Fixed by RFC 9106.
UINT32_MAX = 2 ** 32 - 1  # Use: Largest value a cost parameter can hold in the file header. Type: int. Range: Fixed.

# Password Generator Settings
PASSWORD_GENERATOR_DEFAULT_LENGTH = 20  # Use: Default length for generated passwords. Type: int. Range: PASSWORD_GENERATOR_MIN_LENGTH or more.
PASSWORD_GENERATOR_MIN_LENGTH = 4  # Use: Minimum allowed length for generated passwords; one slot per possible category. Type: int. Range: Fixed at 4.
PASSWORD_GENERATOR_LOWERCASE = "abcdefghijklmnopqrstuvwxyz"  # Use: Lowercase letter pool. Type: str. Range: Any non-empty string.
PASSWORD_GENERATOR_UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"  # Use: Uppercase letter pool. Type: str. Range: Any non-empty string.
PASSWORD_GENERATOR_DIGITS = "0123456789"  # Use: Digit pool. Type: str. Range: Any non-empty string.
PASSWORD_GENERATOR_SYMBOLS = "!@#$%^&*()-_=+[]{};:,.<>/?~"  # Use: Default symbol pool used when symbols are requested. Type: str. Range: Any string; may be overridden per call.
PASSWORD_GENERATOR_AMBIGUOUS_CHARS = "O0o1lI|`'\"{}[]()/\\;:.,<>"  # Use: Visually confusable characters removed from every pool unless ambiguous characters are allowed. Type: str. Range: Any string of characters.

# File and Directory Names
DEFAULT_VAULT_FILE = "vault.bin"  # Use: Default filename for the encrypted vault inside the user data directory. Type: str. Range: Any valid filename.
TEMP_FILE_SUFFIX = ".tmp"  # Use: Suffix of the scratch file written before atomically replacing the vault. Type: str. Range: Any valid filename suffix.
VAULT_PATH_ENV = "KEYSAFE_VAULT"  # Use: Environment variable that overrides the default vault location. Type: str. Range: Any valid environment variable name.

# Logging Settings
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"  # Use: Format string passed to logging.basicConfig by the CLI. Type: str. Range: Any valid logging format string.

# CLI Settings
PASSWORD_MASK = "******"  # Use: Placeholder printed instead of a record password unless --show is given. Type: str. Range: Any string.
MASTER_PASSWORD_PROMPT = "Master password: "  # Use: Hidden-input prompt for the master password. Type: str. Range: Any string.
RECORD_PASSWORD_PROMPT = "Password (hidden): "  # Use: Hidden-input prompt for a record password when not generated. Type: str. Range: Any string.
USERNAME_PROMPT = "Username: "  # Use: Prompt for the record username when --user is not given. Type: str. Range: Any string.
