"""Runtime configuration for pagenine.

Every option can be given on the command line or through a ``PAGENINE_*``
environment variable; a local ``.env`` file is loaded first so secrets such as
the Pushover keys stay out of shell history.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv

from pagenine.core.config import PollConfig, TrackerConfig

ENV_PREFIX = "PAGENINE_"
DEFAULT_INTERVAL_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    board: str
    title: str
    no_bump_limit: bool = False
    pushover_application_api_token: Optional[str] = None
    pushover_user_key: Optional[str] = None
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None

    @property
    def pushover_enabled(self) -> bool:
        # Both keys are needed; with either one missing we fall back to desktop.
        return bool(self.pushover_application_api_token and self.pushover_user_key)

    @property
    def secrets(self) -> list[str]:
        return [
            value
            for value in (self.pushover_application_api_token, self.pushover_user_key)
            if value
        ]

    def tracker_config(self) -> TrackerConfig:
        return TrackerConfig(
            board=self.board,
            title=self.title,
            suppress_on_bump_limit=self.no_bump_limit,
        )

    def poll_config(self) -> PollConfig:
        return PollConfig(interval_seconds=self.interval_seconds)


def validate_board(value: str) -> str:
    """Accept ``vg`` as well as ``/vg/``."""

    board = value.strip().strip("/")
    if not board:
        raise argparse.ArgumentTypeError("board must not be empty")
    return board


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("interval must be positive")
    return number


def _env_flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in _TRUTHY


def build_parser(env: Mapping[str, str]) -> argparse.ArgumentParser:
    """Build the CLI parser with defaults taken from ``env``."""

    def from_env(name: str, default=None):
        return env.get(f"{ENV_PREFIX}{name}", default)

    parser = argparse.ArgumentParser(
        prog="pagenine",
        description="Watch a catalog thread and get notified when it reaches page 9.",
    )
    board_default = from_env("BOARD")
    parser.add_argument(
        "board",
        type=validate_board,
        nargs="?" if board_default else None,
        default=board_default,
        help="Name of the board to scan (env PAGENINE_BOARD).",
    )
    title_default = from_env("TITLE")
    parser.add_argument(
        "title",
        nargs="?" if title_default else None,
        default=title_default,
        help="Title of the thread to scan (env PAGENINE_TITLE).",
    )
    parser.add_argument(
        "--no-bump-limit",
        action="store_true",
        default=_env_flag(from_env("NO_BUMP_LIMIT")),
        help="Ignore threads that have reached bump limit.",
    )
    parser.add_argument(
        "--pushover-application-api-token",
        default=from_env("PUSHOVER_APPLICATION_API_TOKEN"),
        help="Pushover application API key.",
    )
    parser.add_argument(
        "--pushover-user-key",
        default=from_env("PUSHOVER_USER_KEY"),
        help="Pushover user key.",
    )
    parser.add_argument(
        "--interval",
        type=_positive_float,
        default=from_env("INTERVAL", str(DEFAULT_INTERVAL_SECONDS)),
        help="Seconds between poll ticks (default: 30).",
    )
    parser.add_argument(
        "--log-level",
        default=from_env("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        help="Logging level (default: INFO).",
    )
    parser.add_argument(
        "--log-file",
        default=from_env("LOG_FILE"),
        help="Optional path of a rotating log file.",
    )
    return parser


def load_settings(
    argv: Optional[Sequence[str]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Parse ``argv`` into Settings, reading defaults from the environment."""

    if env is None:
        load_dotenv()
        env = os.environ

    parser = build_parser(env)
    args = parser.parse_args(argv)

    if not args.title:
        parser.error("title must not be empty")

    return Settings(
        board=args.board,
        title=args.title,
        no_bump_limit=args.no_bump_limit,
        pushover_application_api_token=args.pushover_application_api_token or None,
        pushover_user_key=args.pushover_user_key or None,
        interval_seconds=float(args.interval),
        log_level=str(args.log_level).upper(),
        log_file=args.log_file or None,
    )
