"""Progress notices shown while a summary is being generated."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Protocol, Set

from rich.console import Console

logger = logging.getLogger(__name__)

SUMMARIZING_MESSAGE = "Summarizing conversation history..."
SUMMARIZED_MESSAGE = "Summarized conversation history"


class ProgressReporter(Protocol):
    def report(self, message: str, pending: Awaitable[object], done_message: str) -> None: ...


class NullProgress:
    def report(self, message: str, pending: Awaitable[object], done_message: str) -> None:
        return None


class ConsoleProgress:
    """Print a start notice, then a completion notice once *pending* settles.

    The watcher runs as a detached task; callers never wait on it.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)
        self._watchers: Set[asyncio.Task] = set()

    def report(self, message: str, pending: Awaitable[object], done_message: str) -> None:
        self.console.print(f"[dim]{message}[/dim]")
        task = asyncio.ensure_future(self._settle(pending, done_message))
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)

    async def _settle(self, pending: Awaitable[object], done_message: str) -> None:
        try:
            await pending
        except asyncio.CancelledError:
            return
        except Exception as exc:
            logger.debug("Progress watcher saw failed request: %s", exc)
            return
        self.console.print(f"[green]✓[/green] {done_message}")

    async def drain(self) -> None:
        if self._watchers:
            await asyncio.gather(*self._watchers, return_exceptions=True)


__all__ = [
    "ConsoleProgress",
    "NullProgress",
    "ProgressReporter",
    "SUMMARIZED_MESSAGE",
    "SUMMARIZING_MESSAGE",
]
