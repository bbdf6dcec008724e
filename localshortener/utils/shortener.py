"""Shortcode generation utility

This module provides a helper function for drawing random, fixed-length,
Base62 shortcodes. Uniqueness is not guaranteed here: the registry redraws
on collision (see ShortURLRegistry).

Functions:
    generate_shortcode(length=7, rng=None):
        Draw a random shortcode suitable for use as a URL slug.

Example:
    >>> import random
    >>> from localshortener.utils import generate_shortcode
    >>> len(generate_shortcode(rng=random.Random(42)))
    7
"""

import random
import string

from localshortener.constants import Shortcode


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

_system_random = random.SystemRandom()


def generate_shortcode(length: int = Shortcode.GENERATED_LENGTH, rng: random.Random | None = None) -> str:
    """Draw a random Base62 shortcode.

    Args:
        length (int, optional):
            Length of the resulting shortcode. Defaults to 7.

        rng (random.Random, optional):
            Random source. Defaults to the OS entropy source. Pass a seeded
            `random.Random` for deterministic output.

    Returns:
        str: A random alphanumeric shortcode of exactly `length` characters.

    Raises:
        TypeError: If `length` isn't an integer.
        ValueError: If `length` falls outside the valid shortcode length range.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if not Shortcode.MIN_LENGTH <= length <= Shortcode.MAX_LENGTH:
        raise ValueError(f'Length must be between {Shortcode.MIN_LENGTH} and {Shortcode.MAX_LENGTH} (given value: {length}).')

    rng = rng or _system_random
    return ''.join(rng.choice(ALPHABET) for _ in range(length))
