"""Shortcode generation utility

This module provides helpers for drawing random base62 shortcodes and for
finding one that is not already reserved.

Functions:
    generate_shortcode(rng=None, length=6) -> str:
        Draw a uniformly random shortcode from the base62 alphabet.

    generate_unique_shortcode(is_reserved, rng=None, length=6, max_attempts=5000) -> str:
        Rejection-sample shortcodes until one is not reserved.

Example:
    >>> import random
    >>> from urlshortener.utils import generate_shortcode
    >>> code = generate_shortcode(random.Random(42))
    >>> len(code), code.isalnum()
    (6, True)
"""

import random
import secrets
from collections.abc import Callable

from urlshortener.dao.exceptions import GenerationExhaustedError
from urlshortener.utils.constants import SHORTCODE_ALPHABET, DEFAULT_SHORTCODE_LENGTH, MAX_GENERATION_ATTEMPTS


# Process-wide cryptographically strong source, used when no rng is injected
_system_random = secrets.SystemRandom()


def generate_shortcode(rng: random.Random | None = None, length: int = DEFAULT_SHORTCODE_LENGTH) -> str:
    """Draw a random shortcode

    Every position is drawn independently and uniformly from the 62-symbol
    alphabet [0-9A-Za-z], so the code space holds 62**length values
    (about 56.8 billion for the default length of 6).

    Args:
        rng (random.Random, optional):
            Source of randomness. Inject a seeded instance for deterministic
            output. Defaults to a process-wide SystemRandom.

        length (int, optional):
            Number of characters. Defaults to 6.

    Returns:
        str: random alphanumeric shortcode.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    rng = rng or _system_random
    return ''.join(rng.choice(SHORTCODE_ALPHABET) for _ in range(length))


def generate_unique_shortcode(
    is_reserved: Callable[[str], bool],
    rng: random.Random | None = None,
    length: int = DEFAULT_SHORTCODE_LENGTH,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
) -> str:
    """Generate a shortcode that is not reserved yet

    Uses rejection sampling: draw a candidate, keep it if `is_reserved`
    rejects it, otherwise draw again. While the reserved set is sparse relative
    to the code space the expected number of draws is close to 1.

    NOTE:
        The loop is capped at `max_attempts` draws. Hitting the cap means the
        code space is (nearly) saturated for this length; the caller gets
        GenerationExhaustedError instead of an endless loop.

    Args:
        is_reserved (Callable[[str], bool]):
            Predicate answering whether a candidate is already taken.
            Must be evaluated under the same lock as the later insertion.

        rng (random.Random, optional):
            Source of randomness.

        length (int, optional):
            Number of characters. Defaults to 6.

        max_attempts (int, optional):
            Number of draws before giving up. Defaults to 5000.

    Returns:
        str: a shortcode for which `is_reserved` returned False.

    Raises:
        GenerationExhaustedError:
            If no free shortcode was drawn within `max_attempts`.
    """
    if max_attempts < 1:
        raise ValueError(f'Max attempts must be a positive integer (given value: {max_attempts}).')

    for _ in range(max_attempts):
        candidate = generate_shortcode(rng, length=length)
        if not is_reserved(candidate):
            return candidate

    raise GenerationExhaustedError(max_attempts)
