"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the catalog API's JSON shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class CatalogThread:
    """Partial view of one thread as listed in the catalog."""

    thread_id: int
    title: str
    bump_limit_reached: bool = False


@dataclass(frozen=True)
class CatalogPage:
    """One catalog page, threads in bump order."""

    page_number: int
    threads: List[CatalogThread] = field(default_factory=list)


@dataclass(frozen=True)
class ThreadObservation:
    """Latest known facts about the tracked thread."""

    page: int
    thread_id: int
    title: str
    observed_at: datetime
    position: int
    page_length: int
    bump_limit_reached: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.position <= self.page_length:
            raise ValueError(
                f"position {self.position} outside page of length {self.page_length}"
            )


class TrackingPhase(Enum):
    NO_OBSERVATION = "no_observation"
    TRACKING = "tracking"
    ALERTED = "alerted"


@dataclass(frozen=True)
class TrackingState:
    """State carried from one poll tick to the next.

    ``last_notified_page`` is 0 while no notification is active, otherwise the
    page a notification was last delivered for.
    """

    last_observation: Optional[ThreadObservation] = None
    last_notified_page: int = 0

    @property
    def phase(self) -> TrackingPhase:
        observation = self.last_observation
        if observation is None:
            return TrackingPhase.NO_OBSERVATION
        if self.last_notified_page and observation.page == self.last_notified_page:
            return TrackingPhase.ALERTED
        return TrackingPhase.TRACKING


@dataclass(frozen=True)
class NotificationDecision:
    """Outcome of the notification state machine for one observation."""

    should_notify: bool
    next_notified_page: int
    reason: str


@dataclass(frozen=True)
class Alert:
    """Rendered notification handed to a notifier adapter."""

    message: str
    title: Optional[str] = None
