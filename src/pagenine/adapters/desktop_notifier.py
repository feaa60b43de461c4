"""Local desktop notification adapter.

Shells out to the platform's notification helper: ``osascript`` on macOS and
``notify-send`` everywhere else.
"""

from __future__ import annotations

import asyncio
import sys
from typing import List, Optional

from pagenine.core.ports import NotificationError

APP_NAME = "pagenine"


def _applescript_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_command(message: str, title: Optional[str], platform: str = sys.platform) -> List[str]:
    """Return the argv used to display a notification on ``platform``."""

    if platform == "darwin":
        script = f'display notification "{_applescript_escape(message)}"'
        if title:
            script += f' with title "{_applescript_escape(title)}"'
        return ["/usr/bin/osascript", "-e", script]

    # notify-send takes the summary first and the body second.
    return ["notify-send", "--app-name", APP_NAME, title or APP_NAME, message]


class DesktopNotifier:
    """Notifier adapter that shows an operating system notification."""

    def __init__(self, platform: str = sys.platform) -> None:
        self._platform = platform

    async def notify(self, message: str, title: Optional[str] = None) -> None:
        """Display the notification, raising NotificationError on failure."""

        command = build_command(message, title, self._platform)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise NotificationError(f"could not run {command[0]}: {e}") from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise NotificationError(f"{command[0]} exited with {process.returncode}: {detail}")
