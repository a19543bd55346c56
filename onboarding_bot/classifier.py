"""Decide which notification a membership event deserves.

Discord fires the same ``on_member_remove`` event for a voluntary leave and a
kick. The only way to tell them apart is the guild audit log, so a removal is
treated as a kick when the newest kick entry targets the removed member.
Anything else, including a kick that has since been pushed down by another
kick, counts as a leave.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

import discord

from .errors import TRANSPORT_ERRORS, ClassificationLookupError
from .models import MemberEvent, MemberEventKind, ModerationLogEntry
from .templates import TemplateCategory

log = logging.getLogger(__name__)

KickLookup = Callable[[], Awaitable[ModerationLogEntry | None]]


class RemovalKind(str, Enum):
    KICKED = "kicked"
    LEFT = "left"


async def latest_kick_entry(guild: discord.Guild) -> ModerationLogEntry | None:
    """Return the most recent kick entry of ``guild``'s audit log, if any."""
    try:
        async for entry in guild.audit_logs(
            action=discord.AuditLogAction.kick, limit=1
        ):
            target = entry.target
            return ModerationLogEntry(
                action=ModerationLogEntry.KICK,
                target_id=getattr(target, "id", None),
                rank=0,
            )
    except discord.Forbidden as exc:
        raise ClassificationLookupError(
            f"Missing View Audit Log permission in guild {guild.id}"
        ) from exc
    except discord.HTTPException as exc:
        raise ClassificationLookupError(
            f"Audit log fetch failed in guild {guild.id}: {exc}"
        ) from exc
    except TRANSPORT_ERRORS as exc:
        raise ClassificationLookupError(
            f"Audit log unreachable in guild {guild.id}: {exc!r}"
        ) from exc
    return None


async def classify_removal(member_id: int, lookup: KickLookup) -> RemovalKind:
    try:
        entry = await lookup()
    except ClassificationLookupError as exc:
        log.warning("Kick lookup failed for member %s, assuming leave: %s", member_id, exc)
        return RemovalKind.LEFT
    except Exception as exc:  # pylint: disable=broad-except
        log.exception(
            "Unexpected kick lookup error for member %s, assuming leave: %s", member_id, exc
        )
        return RemovalKind.LEFT

    if (
        entry is not None
        and entry.action == ModerationLogEntry.KICK
        and entry.rank == 0
        and entry.target_id == member_id
    ):
        return RemovalKind.KICKED
    return RemovalKind.LEFT


_DIRECT_CATEGORIES = {
    MemberEventKind.JOINED: TemplateCategory.JOINED,
    MemberEventKind.BANNED: TemplateCategory.BANNED,
    MemberEventKind.UNBANNED: TemplateCategory.UNBANNED,
}


async def categorize(event: MemberEvent, lookup: KickLookup) -> TemplateCategory:
    """Map a membership event to its notification category.

    ``lookup`` is only awaited for removals.
    """
    if event.kind is MemberEventKind.REMOVED:
        kind = await classify_removal(event.member_id, lookup)
        if kind is RemovalKind.KICKED:
            return TemplateCategory.KICKED
        return TemplateCategory.LEFT
    return _DIRECT_CATEGORIES[event.kind]
