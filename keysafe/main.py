"""
Command-line entry point for the keysafe vault.

The master password is only ever read through a hidden-input prompt, never
from the command line.
"""

import argparse
import getpass
import logging
import sys
from typing import Callable, List, Optional, TextIO

from keysafe import config
from keysafe.errors import VaultError
from keysafe.generator import generate_password
from keysafe.storage import StorageManager
from keysafe.vault import Record
from keysafe.vault_manager import resolve_vault_path

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=config.APP_NAME, description=config.APP_DESCRIPTION)
    parser.add_argument(
        "--vault",
        metavar="PATH",
        help=f"Vault file (default: ${config.VAULT_PATH_ENV} or the user data directory)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"{config.APP_NAME} {config.APP_VERSION}")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    sub.add_parser("init", help="Create a new empty vault")

    add = sub.add_parser("add", help="Add or replace a record (--gen to generate the password)")
    add.add_argument("name")
    add.add_argument("-u", "--user", help="Username (prompted if omitted)")
    add.add_argument("--url")
    add.add_argument("--notes")
    add.add_argument("--gen", action="store_true", help="Generate a random password")
    _add_generator_options(add)

    sub.add_parser("list", help="List records")

    get = sub.add_parser("get", help="Show a record")
    get.add_argument("name")
    get.add_argument("--show", action="store_true", help="Reveal the password")

    gen = sub.add_parser("gen", help="Generate a random password only")
    _add_generator_options(gen)

    return parser


def _add_generator_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--len",
        dest="length",
        type=int,
        default=config.PASSWORD_GENERATOR_DEFAULT_LENGTH,
        help=f"Generated password length (default: {config.PASSWORD_GENERATOR_DEFAULT_LENGTH})"
    )
    parser.add_argument("--symbols", action="store_true", help="Include symbols")
    parser.add_argument("--allow-ambiguous", action="store_true", help="Allow visually confusable characters")


class VaultCli:
    """Runs one CLI command against one vault file."""

    def __init__(self, storage: StorageManager,
                 prompt_secret: Optional[Callable[[str], str]] = None,
                 prompt_text: Optional[Callable[[str], str]] = None,
                 out: Optional[TextIO] = None):
        self.storage = storage
        self.prompt_secret = prompt_secret or getpass.getpass
        self.prompt_text = prompt_text or input
        self.out = out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _master_password(self) -> str:
        return self.prompt_secret(config.MASTER_PASSWORD_PROMPT)

    def init(self, args: argparse.Namespace) -> None:
        self.storage.initialize(self._master_password())
        self._print(f"Created new vault at {self.storage.filepath}")

    def add(self, args: argparse.Namespace) -> None:
        master = self._master_password()
        vault = self.storage.load(master)

        username = args.user if args.user is not None else self.prompt_text(config.USERNAME_PROMPT).strip()
        if args.gen:
            password = generate_password(args.length, args.symbols, args.allow_ambiguous)
            self._print(f"Generated password (len={args.length}): {password}")
        else:
            password = self.prompt_secret(config.RECORD_PASSWORD_PROMPT)

        vault.upsert(Record.create(args.name, username, password, url=args.url, notes=args.notes))
        self.storage.save(vault, master)
        self._print("Saved.")

    def list(self, args: argparse.Namespace) -> None:
        vault = self.storage.load(self._master_password())
        for record in vault.list():
            self._print(f"{record.name}  ({record.username})  updated {record.updated_at}")

    def get(self, args: argparse.Namespace) -> None:
        record = self.storage.load(self._master_password()).find(args.name)
        self._print(f"username: {record.username}")
        if record.url:
            self._print(f"url: {record.url}")
        if record.notes:
            self._print(f"notes: {record.notes}")
        if args.show:
            self._print(f"password: {record.password}")
        else:
            self._print(f"password: {config.PASSWORD_MASK}  (use --show to reveal)")

    def gen(self, args: argparse.Namespace) -> None:
        self._master_password()
        self._print(generate_password(args.length, args.symbols, args.allow_ambiguous))

    def run(self, args: argparse.Namespace) -> None:
        getattr(self, args.command)(args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=config.LOG_FORMAT,
    )

    cli = VaultCli(StorageManager(resolve_vault_path(args.vault)))
    try:
        cli.run(args)
    except VaultError as e:
        logger.debug(f"Command {args.command!r} failed: {type(e).__name__}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print(file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
