from __future__ import annotations

import logging

import discord

log = logging.getLogger(__name__)


def resolve_text_channel(guild: discord.Guild | None, name: str) -> discord.TextChannel | None:
    """Return the guild's text channel called exactly ``name``, or None.

    Lookup is by name only; a renamed channel is treated as missing.
    """
    if guild is None or not name:
        return None

    channel = discord.utils.get(guild.text_channels, name=name)
    if channel is None:
        log.debug("Channel #%s not found in guild %s", name, guild.id)
        return None
    return channel
