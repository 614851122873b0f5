"""Shared HTTP client configuration."""

import httpx

from avva_net._version import __version__

DEFAULT_TIMEOUT = 30.0


def create_http_client(*, timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create the pooled transport handle used by NetworkManager.

    No ``base_url`` is configured on the transport itself: the base address is
    mutable dispatcher state and is applied per request. Redirects are
    followed, so callers only ever see the final response.

    Args:
        timeout: Request timeout in seconds.

    Returns:
        Configured httpx.AsyncClient instance.
    """
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": f"avva-net/{__version__}"},
    )
