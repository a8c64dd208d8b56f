"""Shortcode generation utility

This module provides a helper function for generating short, random
Base62 identifiers for links which are not given a custom shortcode.

Functions:
    generate_shortcode(length=6):
        Generate a random shortcode suitable for use as a URL slug.

Example:
    >>> from urlshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q7ZtB2'
"""

import secrets
import string

from urlshortener.constants import Defaults


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = Defaults.SHORTCODE_LENGTH) -> str:
    """Generate a random, fixed-length Base62 shortcode.

    Characters are drawn from the `secrets` CSPRNG, so codes are not
    predictable from previously issued ones. They are NOT unique by
    construction: with 62^6 (~5.7e10) possible 6-character codes collisions
    are rare but possible, and callers must check the link namespace before
    using a code.

    Args:
        length (int, optional):
            Number of characters in the shortcode. Defaults to 6.

    Returns:
        str: A random alphanumeric shortcode.

    Example:
        >>> len(generate_shortcode(length=6))
        6
    """
    if not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
