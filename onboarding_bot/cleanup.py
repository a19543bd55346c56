from __future__ import annotations

import asyncio
import logging
from typing import Any

import discord

from .errors import TRANSPORT_ERRORS

log = logging.getLogger(__name__)


class CleanupScheduler:
    """Delete transient messages after a fixed delay.

    Each ``schedule`` call owns one task. Tasks still sleeping when
    :meth:`cancel_all` runs never delete anything.
    """

    def __init__(self, delay: float = 1.0) -> None:
        self._delay = delay
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def schedule(self, *messages: Any) -> asyncio.Task[None]:
        task = asyncio.create_task(self._delete_later(messages), name="message-cleanup")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel_all(self) -> int:
        cancelled = 0
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
                cancelled += 1
        return cancelled

    async def _delete_later(self, messages: tuple[Any, ...]) -> None:
        await asyncio.sleep(self._delay)
        for message in messages:
            if message is None:
                continue
            try:
                await message.delete()
            except discord.NotFound:
                log.debug("Message %s already deleted", getattr(message, "id", "?"))
            except discord.HTTPException as exc:
                log.warning(
                    "Failed to delete message %s: %s", getattr(message, "id", "?"), exc
                )
            except TRANSPORT_ERRORS as exc:
                log.warning(
                    "Connection error deleting message %s: %r", getattr(message, "id", "?"), exc
                )
            except Exception as exc:  # pylint: disable=broad-except
                log.exception(
                    "Unexpected error deleting message %s: %s", getattr(message, "id", "?"), exc
                )
