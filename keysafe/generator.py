"""
Random password generation with guaranteed character-category coverage.

All randomness comes from the secrets module (OS CSPRNG).
"""

import logging
import secrets
from typing import List, Tuple

from keysafe import config
from keysafe.errors import EmptyPool, InvalidLength

logger = logging.getLogger(__name__)

_rng = secrets.SystemRandom()


def build_pools(include_symbols: bool = False, allow_ambiguous: bool = False,
                symbols: str = config.PASSWORD_GENERATOR_SYMBOLS) -> Tuple[str, ...]:
    """
    Return the active character pools, ambiguous characters removed unless allowed.

    Pools are lowercase, uppercase and digits, plus *symbols* when
    *include_symbols* is set. Each pool is a new string; the configured
    pools are never modified.
    """
    pools = [
        config.PASSWORD_GENERATOR_LOWERCASE,
        config.PASSWORD_GENERATOR_UPPERCASE,
        config.PASSWORD_GENERATOR_DIGITS,
    ]
    if include_symbols:
        pools.append(symbols)
    if not allow_ambiguous:
        ambiguous = frozenset(config.PASSWORD_GENERATOR_AMBIGUOUS_CHARS)
        pools = [''.join(c for c in pool if c not in ambiguous) for pool in pools]
    return tuple(pools)


def generate_password(length: int = config.PASSWORD_GENERATOR_DEFAULT_LENGTH,
                      include_symbols: bool = False,
                      allow_ambiguous: bool = False,
                      symbols: str = config.PASSWORD_GENERATOR_SYMBOLS) -> str:
    """
    Generate a random password.

    One character is drawn from every active pool, the remaining positions
    are drawn from the union of the pools, and the result is shuffled.

    Args:
        length: Total length, at least PASSWORD_GENERATOR_MIN_LENGTH
        include_symbols: Add the symbol pool
        allow_ambiguous: Keep visually confusable characters
        symbols: Symbol pool to use when include_symbols is set

    Raises:
        InvalidLength: If *length* is below the minimum
        EmptyPool: If an active pool has no characters left after stripping
    """
    if length < config.PASSWORD_GENERATOR_MIN_LENGTH:
        raise InvalidLength(
            f"password length must be at least {config.PASSWORD_GENERATOR_MIN_LENGTH}, got {length}"
        )

    pools = build_pools(include_symbols, allow_ambiguous, symbols)
    if any(not pool for pool in pools):
        raise EmptyPool("character pool empty; allow ambiguous characters or disable symbols")

    combined = ''.join(pools)
    chars: List[str] = [secrets.choice(pool) for pool in pools]
    chars.extend(secrets.choice(combined) for _ in range(length - len(chars)))
    _rng.shuffle(chars)

    logger.debug(f"Generated password of length {length} from {len(pools)} pools")
    return ''.join(chars)
