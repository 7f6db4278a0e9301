import os
from typing import Mapping, Optional

import appdirs

from . import config


def default_vault_dir() -> str:
    """Per-user local data directory for the vault (platform specific)."""
    return appdirs.user_data_dir(config.APP_NAME, appauthor=False)


def resolve_vault_path(explicit: Optional[str] = None,
                       environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Work out which vault file to use.

    Precedence: *explicit* path (the --vault option), then the KEYSAFE_VAULT
    environment variable, then vault.bin in the user data directory.
    The result is absolute. Directories are not created here.
    """
    environ = os.environ if environ is None else environ
    path = explicit or environ.get(config.VAULT_PATH_ENV)
    if not path:
        path = os.path.join(default_vault_dir(), config.DEFAULT_VAULT_FILE)
    return os.path.abspath(os.path.expanduser(path))
