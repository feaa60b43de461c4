"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so the app layer can build it safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackerConfig:
    """What to track and how to treat bump-limited threads."""

    board: str
    title: str
    suppress_on_bump_limit: bool = False


@dataclass(frozen=True)
class PollConfig:
    """Poll loop timing."""

    interval_seconds: float = 30.0
