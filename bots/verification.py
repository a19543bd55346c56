"""Registration of the Verify message context-menu command."""

from __future__ import annotations

import logging

import discord
from discord import app_commands

from onboarding_bot.workflow import VerificationWorkflow

log = logging.getLogger(__name__)

COMMAND_NAME = "Verify"


def register_verify_command(
    tree: app_commands.CommandTree,
    workflow: VerificationWorkflow,
    guild_id: int,
) -> app_commands.ContextMenu:
    """Add the admin-only Verify command, scoped to a single guild."""

    @app_commands.default_permissions(administrator=True)
    @app_commands.guild_only()
    async def verify(interaction: discord.Interaction, message: discord.Message) -> None:
        result = await workflow.run(interaction, message)
        log.debug("Verify on message %s finished: %s", message.id, result.outcome.value)

    menu = app_commands.ContextMenu(name=COMMAND_NAME, callback=verify)
    tree.add_command(menu, guild=discord.Object(id=guild_id))
    return menu
