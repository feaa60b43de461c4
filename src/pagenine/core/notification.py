"""Notification de-duplication state machine (core domain)."""

from __future__ import annotations

from pagenine.core.models import Alert, NotificationDecision, ThreadObservation, TrackingState

# Threads reaching this page are about to be archived.
ALERT_PAGE = 9


def decide(
    state: TrackingState,
    observation: ThreadObservation,
    suppress_on_bump_limit: bool,
) -> NotificationDecision:
    """Decide whether ``observation`` warrants a notification.

    Rules, in order:
    - Below the alert page nothing fires and any previous lock is released.
    - A page that was already notified is never notified again.
    - Bump-limited threads are skipped when the caller opted out of them.
    - Otherwise a notification should be attempted. ``next_notified_page``
      keeps the previous value; the caller records the page only once the
      notifier reports success, so a failed delivery is retried next tick.
    """

    previous = state.last_notified_page

    if observation.page < ALERT_PAGE:
        return NotificationDecision(False, 0, "below alert page")

    if observation.page == previous:
        return NotificationDecision(False, previous, "already notified for this page")

    if suppress_on_bump_limit and observation.bump_limit_reached:
        return NotificationDecision(False, previous, "bump limit reached")

    return NotificationDecision(True, previous, "page crossing")


def build_alert(observation: ThreadObservation) -> Alert:
    """Render the alert sent for ``observation``."""

    message = (
        f"{observation.title} ({observation.position}/{observation.page_length})"
    )
    return Alert(message=message, title=f">page {observation.page}")
