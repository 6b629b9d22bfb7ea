"""URL helpers shared by the unfurler and the note layer."""

from urllib.parse import urlparse

FAVICON_SERVICE_URL = "https://www.google.com/s2/favicons"


def domain_of(url: str) -> str:
    """
    Return the hostname of a URL without a leading ``www.``.

    Never raises: anything that does not parse to a hostname is returned unchanged.

    Args:
        url: URL to inspect

    Returns:
        Bare domain, or the original string
    """
    try:
        hostname = urlparse(url).hostname
    except (TypeError, ValueError):
        return url
    if not hostname:
        return url
    return hostname.removeprefix("www.")


def is_valid_url(url: str) -> bool:
    """Check that a string is an absolute http(s) URL."""
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def favicon_url(url: str, size: int = 32) -> str:
    """Favicon lookup URL for the site hosting ``url``, or "" if it has no hostname."""
    try:
        hostname = urlparse(url).hostname
    except (TypeError, ValueError):
        return ""
    if not hostname:
        return ""
    return f"{FAVICON_SERVICE_URL}?domain={hostname}&sz={size}"
