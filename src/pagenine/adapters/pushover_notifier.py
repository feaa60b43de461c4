"""Pushover notification adapter.

Sends alerts as push messages through the Pushover messages API.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from pagenine.core.ports import NotificationError

LOGGER = logging.getLogger(__name__)

PUSHOVER_API_URL = "https://api.pushover.net/1/messages.json"


class PushoverNotifier:
    """Notifier adapter that posts messages to Pushover."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token: str,
        user: str,
        endpoint: str = PUSHOVER_API_URL,
    ) -> None:
        self._http = http_client
        self._token = token
        self._user = user
        self._endpoint = endpoint

    async def notify(self, message: str, title: Optional[str] = None) -> None:
        """Send one push message, raising NotificationError on failure."""

        data = {
            "token": self._token,
            "user": self._user,
            "message": message,
        }
        if title:
            data["title"] = title

        try:
            response = await self._http.post(self._endpoint, data=data)
        except httpx.HTTPError as e:
            raise NotificationError(f"Pushover request failed: {e}") from e

        if response.is_error:
            raise NotificationError(
                f"Pushover API error {response.status_code}: {response.text[:200]}"
            )
        LOGGER.debug("Pushover accepted message %r", title or message)
