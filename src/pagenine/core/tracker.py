"""Core tracking pipeline.

This module is integration-agnostic. It only relies on ports for the catalog
and notifications, and threads ``TrackingState`` through each tick by value:
every call returns a new state and never touches the one it was given.
"""

from __future__ import annotations

import logging
from datetime import datetime

from pagenine.core.config import TrackerConfig
from pagenine.core.matcher import find_thread
from pagenine.core.models import ThreadObservation, TrackingState
from pagenine.core.notification import ALERT_PAGE, build_alert, decide
from pagenine.core.ports import (
    CatalogFetchError,
    CatalogNotModified,
    CatalogSourcePort,
    NotificationError,
    NotifierPort,
)
from pagenine.core.refresh import needs_refresh

LOGGER = logging.getLogger(__name__)


def describe(observation: ThreadObservation) -> str:
    """One-line summary used for operator logs."""

    line = (
        f'"{observation.title}", page {observation.page} '
        f"({observation.position}/{observation.page_length})"
    )
    if observation.bump_limit_reached:
        line += ", over bump limit"
    return line


class ThreadTracker:
    """Orchestrates refresh, matching, and notification for one thread."""

    def __init__(
        self,
        config: TrackerConfig,
        source: CatalogSourcePort,
        notifier: NotifierPort,
    ) -> None:
        self._config = config
        self._source = source
        self._notifier = notifier

    async def tick(self, state: TrackingState, now: datetime) -> TrackingState:
        """Run one poll tick and return the state for the next one."""

        previous = state.last_observation
        if not needs_refresh(previous, now):
            return await self._notify(state, previous)

        since = previous.observed_at if previous is not None else None
        try:
            catalog = await self._source.fetch_catalog(self._config.board, since)
        except CatalogNotModified:
            LOGGER.debug("Catalog for /%s/ not modified since %s", self._config.board, since)
            return state
        except CatalogFetchError as exc:
            # Transient; the next tick tries again with the same state.
            LOGGER.warning("Error fetching catalog for /%s/: %s", self._config.board, exc)
            return state

        observation = find_thread(catalog, self._config.title, now)
        if observation is None:
            LOGGER.info('No thread matching "%s" on /%s/', self._config.title, self._config.board)
            return TrackingState()

        LOGGER.info("%s", describe(observation))
        return await self._notify(state, observation)

    async def _notify(self, state: TrackingState, observation: ThreadObservation) -> TrackingState:
        decision = decide(state, observation, self._config.suppress_on_bump_limit)
        if not decision.should_notify:
            if observation.page >= ALERT_PAGE:
                LOGGER.info("Not notifying for page %s: %s", observation.page, decision.reason)
            else:
                LOGGER.debug("Not notifying for page %s: %s", observation.page, decision.reason)
            return TrackingState(
                last_observation=observation,
                last_notified_page=decision.next_notified_page,
            )

        alert = build_alert(observation)
        try:
            await self._notifier.notify(alert.message, alert.title)
        except NotificationError as exc:
            LOGGER.warning("Notification for page %s failed: %s", observation.page, exc)
            return TrackingState(
                last_observation=observation,
                last_notified_page=decision.next_notified_page,
            )

        LOGGER.info("Notified: %s", describe(observation))
        return TrackingState(last_observation=observation, last_notified_page=observation.page)
