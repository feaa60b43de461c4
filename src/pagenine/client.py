"""HTTP client factory for pagenine.

One ``httpx.AsyncClient`` is shared by the catalog source and the Pushover
notifier and is closed explicitly when the poll loop ends.
"""

from __future__ import annotations

import logging

import httpx

from pagenine import __version__

USER_AGENT = f"pagenine/{__version__}"
DEFAULT_TIMEOUT_SECONDS = 20.0


def build_http_client(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    """Create the shared async HTTP client.

    The timeout bounds every fetch and push call, so a stalled request delays
    at most one tick.
    """

    logging.getLogger(__name__).debug("Initializing HTTP client")
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )
