"""Join/leave/kick/ban/unban notifications."""

from __future__ import annotations

import logging
import random
from collections.abc import Awaitable, Callable

import discord

from onboarding_bot.channels import resolve_text_channel
from onboarding_bot.classifier import categorize, latest_kick_entry
from onboarding_bot.errors import TRANSPORT_ERRORS
from onboarding_bot.models import (
    MemberEvent,
    MemberEventKind,
    ModerationLogEntry,
    OnboardingSettings,
)
from onboarding_bot.templates import RenderedNotification, render

from .shadow import ShadowReporter

log = logging.getLogger(__name__)

GuildKickLookup = Callable[[discord.Guild], Awaitable[ModerationLogEntry | None]]


def build_embed(notification: RenderedNotification) -> discord.Embed:
    return discord.Embed(
        title=notification.title,
        description=notification.message,
        color=notification.color,
        timestamp=discord.utils.utcnow(),
    )


class MembershipNotifier:
    def __init__(
        self,
        settings: OnboardingSettings,
        *,
        rng: random.Random | None = None,
        shadow: ShadowReporter | None = None,
        lookup: GuildKickLookup = latest_kick_entry,
    ) -> None:
        self.settings = settings
        self.rng = rng or random.Random()
        self.shadow = shadow
        self.lookup = lookup

    async def on_member_join(self, member: discord.Member) -> discord.Message | None:
        event = MemberEvent.from_member(MemberEventKind.JOINED, member)
        return await self.notify(member.guild, event)

    async def on_member_remove(self, member: discord.Member) -> discord.Message | None:
        event = MemberEvent.from_member(MemberEventKind.REMOVED, member)
        return await self.notify(member.guild, event)

    async def on_member_ban(
        self, guild: discord.Guild, user: discord.User
    ) -> discord.Message | None:
        return await self.notify(guild, MemberEvent.from_user(MemberEventKind.BANNED, user))

    async def on_member_unban(
        self, guild: discord.Guild, user: discord.User
    ) -> discord.Message | None:
        return await self.notify(guild, MemberEvent.from_user(MemberEventKind.UNBANNED, user))

    async def notify(self, guild: discord.Guild, event: MemberEvent) -> discord.Message | None:
        channel = resolve_text_channel(guild, self.settings.notification_channel)
        if channel is None:
            log.debug(
                "Dropping %s event for %s: no notification channel",
                event.kind.value,
                event.member_id,
            )
            return None

        category = await categorize(event, lambda: self.lookup(guild))
        name = (
            event.username
            if event.kind in (MemberEventKind.BANNED, MemberEventKind.UNBANNED)
            else event.display_name
        )
        notification = render(category, name, self.rng)
        embed = build_embed(notification)

        if self.shadow is not None and self.shadow.enabled:
            await self.shadow.report_membership(guild, notification, embed)
            return None

        try:
            return await channel.send(embed=embed)
        except discord.Forbidden:
            log.warning("No send permission in notification channel %s", channel.id)
        except discord.HTTPException as exc:
            log.exception("Failed to send %s notification: %s", category.value, exc)
        except TRANSPORT_ERRORS as exc:
            log.exception("Connection error sending %s notification: %r", category.value, exc)
        return None
