"""Query-string encoding and URL construction."""

from collections.abc import Mapping

import httpx


def encode_query(params: Mapping[str, str] | None) -> str:
    """Encode parameters as ``key=value&`` pairs in insertion order.

    Every pair is followed by ``&``, including the last one. Values are not
    percent-encoded; callers pre-encode reserved characters.

    Args:
        params: Mapping of query keys to values. ``None`` encodes as "".

    Returns:
        The encoded query fragment.
    """
    if not params:
        return ""
    return "".join(f"{key}={value}&" for key, value in params.items())


def append_query(url: str, params: Mapping[str, str] | None) -> str:
    """Append encoded parameters to a URL.

    Uses ``&`` when the URL already carries a query marker and ``?`` otherwise.
    The separator is written even when ``params`` is empty.
    """
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encode_query(params)}"


def is_absolute_url(url: str) -> bool:
    """Check whether a URL carries its own scheme and host."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return False
    return parsed.is_absolute_url and bool(parsed.host)


def build_url(base_address: str | None, path: str) -> str:
    """Resolve a request path against the base address.

    Absolute URLs are returned unchanged, as is any path when no base address
    is configured. Otherwise the two are joined with exactly one slash.
    """
    if base_address is None or is_absolute_url(path):
        return path
    if not path:
        return base_address
    return f"{base_address.rstrip('/')}/{path.lstrip('/')}"
