"""
URL validation utilities for configured service endpoints.

An assistant endpoint is only usable when it is an absolute http(s) URL
with a host, for example "https://my-resource.openai.azure.com/".
Anything else (relative paths, bare words such as "not a url", other
schemes) is rejected so the caller can fall back instead of failing on
the first request.

Usage:
    from aiassistant.utils.url_validation import is_absolute_url

    if not is_absolute_url(endpoint):
        ...
"""

import logging
from urllib.parse import urlparse

LOGGER = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({'http', 'https'})


def is_absolute_url(url: str) -> bool:
    """
    Check that a URL is absolute.

    A URL is considered absolute if:
    - It is non-empty and its host part contains no whitespace
    - It has an http or https scheme
    - It has a hostname

    Args:
        url: The URL to validate

    Returns:
        True if the URL is absolute, False otherwise
    """
    if not url:
        return False

    try:
        parsed = urlparse(url.strip())

        if not parsed.scheme or not parsed.netloc:
            return False

        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            LOGGER.warning(f"Rejected endpoint URL with invalid scheme: {parsed.scheme}")
            return False

        if not parsed.hostname or any(c.isspace() for c in parsed.netloc):
            return False

        # raises ValueError on an out of range port
        parsed.port
        return True

    except ValueError as e:
        LOGGER.error(
            "Error validating endpoint URL: %s: %s",
            type(e).__name__,
            e,
        )
        return False
