"""Validation utilities for shorten requests

Functions:
    is_valid_url(url) -> bool
        True for absolute http/https URLs with a host.
    is_valid_shortcode(shortcode) -> bool
        True for 3-15 character ASCII alphanumeric shortcodes.
    parse_validity(validity) -> int | None
        Normalize a validity period in minutes, None when not provided.
"""

import re
from typing import Any
from urllib.parse import urlparse

from localshortener.constants import TTL, Limits, Shortcode


SHORTCODE_PATTERN = re.compile(rf'^[A-Za-z0-9]{{{Shortcode.MIN_LENGTH},{Shortcode.MAX_LENGTH}}}$')
VALIDITY_PATTERN = re.compile(r'^[0-9]+$')


def is_valid_url(url: Any) -> bool:
    if not url or not isinstance(url, str) or len(url) > Limits.MAX_URL_LENGTH:
        return False

    try:
        result = urlparse(url)
        # Accessing .port validates it (raises ValueError on e.g. 'host:99999')
        result.port
    except ValueError:
        return False

    if result.scheme not in ('http', 'https') or not result.hostname:
        return False
    return not any(char.isspace() for char in result.netloc)


def is_valid_shortcode(shortcode: Any) -> bool:
    return isinstance(shortcode, str) and SHORTCODE_PATTERN.fullmatch(shortcode) is not None


def is_provided(value: Any) -> bool:
    """Form fields left blank arrive as None or an empty string."""
    return value is not None and value != ''


def parse_validity(validity: Any) -> int | None:
    """Normalize a validity period given in minutes

    Accepts positive integers and strings of decimal digits (form input),
    up to TTL.MAX_VALIDITY_MINUTES. Booleans, floats and anything else are
    rejected.

    Returns:
        int | None: minutes, or None when no validity was provided.

    Raises:
        ValueError: If the value is provided but isn't a positive integer,
            or exceeds the maximum validity.

    Example:
        >>> parse_validity('15')
        15
        >>> parse_validity(None) is None
        True
        >>> parse_validity(0)
        Traceback (most recent call last):
            ...
        ValueError: Validity must be a positive integer number of minutes (given value: 0).
    """
    if not is_provided(validity):
        return None

    minutes = None
    if isinstance(validity, int) and not isinstance(validity, bool):
        minutes = validity
    elif isinstance(validity, str) and VALIDITY_PATTERN.fullmatch(validity.strip()):
        minutes = int(validity.strip())

    if minutes is None or minutes <= 0:
        raise ValueError(f'Validity must be a positive integer number of minutes (given value: {validity!r}).')
    if minutes > TTL.MAX_VALIDITY_MINUTES:
        raise ValueError(f'Validity must not exceed {TTL.MAX_VALIDITY_MINUTES} minutes (given value: {validity!r}).')
    return minutes
