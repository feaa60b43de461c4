"""Application entry point for the pagenine watcher."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional, Sequence

import httpx
from art import tprint

from pagenine.adapters.catalog_api import FourChanCatalogSource
from pagenine.adapters.desktop_notifier import DesktopNotifier
from pagenine.adapters.pushover_notifier import PushoverNotifier
from pagenine.client import build_http_client
from pagenine.core.poller import run_poll_loop
from pagenine.core.ports import NotifierPort
from pagenine.core.tracker import ThreadTracker
from pagenine.settings import Settings, load_settings

NAME = "PAGENINE"
FONT = "tarty-1"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 5


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: Sequence[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def resolve_log_level(name: str) -> int:
    """Map a level name to its number, falling back to INFO for unknown names."""

    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings) -> None:
    level = resolve_log_level(settings.log_level)
    formatter = RedactingFormatter(settings.secrets, fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if settings.log_file:
        path = settings.log_file
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    # httpx logs every request at INFO, which drowns the per-tick lines.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_notifier(settings: Settings, http_client: httpx.AsyncClient) -> NotifierPort:
    """Select the notification adapter from the configured credentials."""

    if settings.pushover_enabled:
        return PushoverNotifier(
            http_client,
            token=settings.pushover_application_api_token,
            user=settings.pushover_user_key,
        )
    return DesktopNotifier()


def install_signal_handlers(loop: asyncio.AbstractEventLoop, stop: asyncio.Event) -> None:
    """Set ``stop`` on SIGINT/SIGTERM so the poll loop exits at a tick boundary."""

    logger = logging.getLogger(__name__)

    def _request_stop(signame: str) -> None:
        logger.debug("Received %s", signame)
        stop.set()

    for signame in ("SIGINT", "SIGTERM"):
        signum = getattr(signal, signame, None)
        if signum is None:
            continue
        try:
            loop.add_signal_handler(signum, _request_stop, signame)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler.
            signal.signal(
                signum,
                lambda *_args, name=signame: loop.call_soon_threadsafe(_request_stop, name),
            )


async def _run(settings: Settings) -> None:
    logger = logging.getLogger(__name__)
    stop = asyncio.Event()
    install_signal_handlers(asyncio.get_running_loop(), stop)

    async with build_http_client() as http_client:
        notifier = build_notifier(settings, http_client)
        logger.info("Selected notification method - %s", type(notifier).__name__)
        tracker = ThreadTracker(
            settings.tracker_config(),
            source=FourChanCatalogSource(http_client),
            notifier=notifier,
        )
        logger.info('Watching /%s/ for "%s"', settings.board, settings.title)
        await run_poll_loop(tracker, settings.poll_config().interval_seconds, stop)


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = load_settings(argv)
    _print_banner()
    configure_logging(settings)
    logging.getLogger(__name__).info("Starting pagenine")
    asyncio.run(_run(settings))


if __name__ == "__main__":
    main()
