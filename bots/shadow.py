"""Shadow-mode reporting for the onboarding bot.

With ``SHADOW_MODE`` on, the bot posts what it *would* have done to a
private channel (or the log) instead of announcing members or touching
nicknames and roles.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable

import discord

from onboarding_bot.errors import TRANSPORT_ERRORS
from onboarding_bot.models import NormalizedIdentity, RoleGrantPlan
from onboarding_bot.templates import RenderedNotification

from .config import ShadowConfig

log = logging.getLogger(__name__)

MEMBERSHIP_PREFIX = "[membership]"
VERIFY_PREFIX = "[verify]"


def verification_embed(
    member: discord.abc.User, identity: NormalizedIdentity, plan: RoleGrantPlan
) -> discord.Embed:
    embed = discord.Embed(
        title="Shadow Verification",
        description=f"{member.mention} would be verified.",
        color=discord.Color.orange(),
    )
    embed.add_field(name="Nickname", value=identity.nickname, inline=True)
    embed.add_field(name="Roles", value=plan.summary(), inline=True)
    return embed


class ShadowReporter:
    def __init__(self, bot: discord.Client, config: ShadowConfig) -> None:
        self._bot = bot
        self._config = config
        self.suppressed: Counter[str] = Counter()

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def channel_id(self) -> int | None:
        return self._config.channel_id

    async def report_membership(
        self,
        guild: discord.Guild | None,
        notification: RenderedNotification,
        embed: discord.Embed,
    ) -> None:
        """Stand in for a join/leave/kick/ban/unban announcement."""
        self.suppressed["membership"] += 1
        await self.report(
            guild,
            f"{MEMBERSHIP_PREFIX} {notification.title}: {notification.message}",
            embeds=[embed],
        )

    async def report_verification(
        self,
        guild: discord.Guild | None,
        member: discord.abc.User,
        identity: NormalizedIdentity,
        plan: RoleGrantPlan,
    ) -> None:
        """Stand in for the nickname and role changes of a Verify."""
        self.suppressed["verify"] += 1
        await self.report(
            guild,
            f"{VERIFY_PREFIX} simulated verification",
            embeds=[verification_embed(member, identity, plan)],
        )

    async def report(
        self,
        guild: discord.Guild | None,
        message: str,
        *,
        embeds: Iterable[discord.Embed] | None = None,
    ) -> None:
        if not self.enabled:
            return

        channel = await self._shadow_channel(guild)
        if channel is None:
            log.info("[SHADOW] %s", message)
            return

        kwargs = {"content": message}
        if embeds is not None:
            kwargs["embeds"] = list(embeds)
        try:
            await channel.send(**kwargs)
        except discord.DiscordException as exc:
            log.warning("Failed to send shadow report to channel %s: %s", self.channel_id, exc)
        except TRANSPORT_ERRORS as exc:
            log.warning("Shadow channel %s unreachable: %r", self.channel_id, exc)

    async def _shadow_channel(
        self, guild: discord.Guild | None
    ) -> discord.abc.Messageable | None:
        if self.channel_id is None:
            return None

        # Guild cache, then client cache, then the API.
        channel = guild.get_channel(self.channel_id) if guild is not None else None
        if channel is None:
            channel = self._bot.get_channel(self.channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(self.channel_id)
            except discord.DiscordException as exc:
                log.warning("Unable to fetch shadow channel %s: %s", self.channel_id, exc)
                return None
        if not isinstance(channel, discord.abc.Messageable):
            log.warning("Shadow channel %s cannot receive messages", self.channel_id)
            return None
        return channel
