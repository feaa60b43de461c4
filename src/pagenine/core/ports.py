"""Ports (interfaces) used by the core tracker.

Ports define the minimal contracts for the catalog source and notification
adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from pagenine.core.models import CatalogPage


class CatalogFetchError(Exception):
    """The catalog could not be fetched or decoded this tick."""


class CatalogNotModified(CatalogFetchError):
    """The upstream reported no change since the given timestamp."""


class NotificationError(Exception):
    """A notifier failed to deliver an alert."""


class CatalogSourcePort(Protocol):
    """Catalog retrieval required by the tracker."""

    async def fetch_catalog(
        self, board: str, if_modified_since: Optional[datetime] = None
    ) -> List[CatalogPage]:
        ...


class NotifierPort(Protocol):
    """Notification delivery required by the tracker."""

    async def notify(self, message: str, title: Optional[str] = None) -> None:
        ...
