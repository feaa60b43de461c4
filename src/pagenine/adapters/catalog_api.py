"""4chan catalog adapter.

Fetches ``catalog.json`` for a board and maps it onto core catalog models,
keeping the API's JSON shape out of the core.
"""

from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, List, Optional

import httpx

from pagenine.core.models import CatalogPage, CatalogThread
from pagenine.core.ports import CatalogFetchError, CatalogNotModified

LOGGER = logging.getLogger(__name__)

CATALOG_URL = "https://a.4cdn.org/{board}/catalog.json"


def format_http_date(value: datetime) -> str:
    """Format a datetime for the If-Modified-Since header.

    Naive values are taken as UTC. The result is always the English RFC 7231
    form, independent of the process locale.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _parse_thread(raw: Any) -> CatalogThread:
    # Threads without a subject simply have no "sub" key.
    return CatalogThread(
        thread_id=int(raw["no"]),
        title=html.unescape(raw.get("sub") or ""),
        bump_limit_reached=bool(raw.get("bumplimit", 0)),
    )


def parse_catalog(payload: Any) -> List[CatalogPage]:
    """Map the decoded catalog JSON onto catalog pages.

    Raises ``CatalogFetchError`` when the payload does not have the expected
    shape.
    """

    if not isinstance(payload, list):
        raise CatalogFetchError("catalog payload is not a list of pages")

    try:
        return [
            CatalogPage(
                page_number=int(raw_page["page"]),
                threads=[_parse_thread(raw) for raw in raw_page.get("threads", [])],
            )
            for raw_page in payload
        ]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CatalogFetchError(f"malformed catalog: {e!r}") from e


class FourChanCatalogSource:
    """Catalog source adapter backed by the read-only 4chan JSON API."""

    def __init__(self, http_client: httpx.AsyncClient, url_template: str = CATALOG_URL) -> None:
        self._http = http_client
        self._url_template = url_template

    def _endpoint(self, board: str) -> str:
        return self._url_template.format(board=board)

    async def fetch_catalog(
        self, board: str, if_modified_since: Optional[datetime] = None
    ) -> List[CatalogPage]:
        """Download and parse the current catalog for ``board``."""

        headers = {}
        if if_modified_since is not None:
            headers["If-Modified-Since"] = format_http_date(if_modified_since)

        url = self._endpoint(board)
        LOGGER.debug("Fetching %s", url)
        try:
            response = await self._http.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise CatalogFetchError(f"request to {url} failed: {e}") from e

        if response.status_code == httpx.codes.NOT_MODIFIED:
            raise CatalogNotModified(f"{url} not modified")
        if response.is_error:
            raise CatalogFetchError(f"catalog API error {response.status_code} for {url}")

        try:
            payload = response.json()
        except ValueError as e:
            raise CatalogFetchError(f"invalid JSON from {url}: {e}") from e
        return parse_catalog(payload)
