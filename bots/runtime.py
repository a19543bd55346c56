"""Onboarding bot runtime: client bootstrap and event wiring."""

from __future__ import annotations

import logging

import discord
from discord import app_commands

from onboarding_bot.cleanup import CleanupScheduler
from onboarding_bot.workflow import VerificationWorkflow

from .config import BotConfig
from .membership import MembershipNotifier
from .shadow import ShadowReporter
from .verification import register_verify_command

log = logging.getLogger("onboarding-bot")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.moderation = True
    intents.guild_messages = True
    intents.message_content = True
    return intents


class OnboardingRuntime:
    def __init__(self, config: BotConfig) -> None:
        self.config = config
        self.bot = discord.Client(
            intents=build_intents(), application_id=config.application_id
        )
        self.tree = app_commands.CommandTree(self.bot)
        self.shadow_reporter = ShadowReporter(self.bot, config.shadow)
        self.cleanup = CleanupScheduler(delay=config.settings.cleanup_delay)
        self.notifier = MembershipNotifier(config.settings, shadow=self.shadow_reporter)
        self.workflow = VerificationWorkflow(
            config.settings, self.cleanup, shadow=self.shadow_reporter
        )
        self._synced = False

    @property
    def guild(self) -> discord.Object:
        return discord.Object(id=self.config.guild_id)

    def configure_features(self) -> None:
        register_verify_command(self.tree, self.workflow, self.config.guild_id)

        bot = self.bot
        notifier = self.notifier

        @bot.event
        async def on_ready() -> None:
            await self.sync_commands()
            if self.shadow_reporter.enabled:
                await self.shadow_reporter.report(None, "[onboarding] shadow mode active")
            log.info("Bot ready as %s (%s)", bot.user, bot.user.id)

        @bot.event
        async def on_member_join(member: discord.Member) -> None:
            await notifier.on_member_join(member)

        @bot.event
        async def on_member_remove(member: discord.Member) -> None:
            await notifier.on_member_remove(member)

        @bot.event
        async def on_member_ban(guild: discord.Guild, user: discord.User) -> None:
            await notifier.on_member_ban(guild, user)

        @bot.event
        async def on_member_unban(guild: discord.Guild, user: discord.User) -> None:
            await notifier.on_member_unban(guild, user)

    async def sync_commands(self) -> bool:
        """Publish the guild's commands once per process."""
        if self._synced:
            return True
        try:
            commands = await self.tree.sync(guild=self.guild)
        except discord.HTTPException as exc:
            log.exception("Failed to register commands for guild %s: %s", self.config.guild_id, exc)
            return False
        self._synced = True
        log.info("Registered %d command(s) for guild %s", len(commands), self.config.guild_id)
        return True

    async def run(self) -> None:
        self.configure_features()
        if self.shadow_reporter.enabled:
            log.info("Onboarding bot running in SHADOW mode")
        try:
            async with self.bot:
                await self.bot.start(self.config.token)
        finally:
            cancelled = self.cleanup.cancel_all()
            if cancelled:
                log.info("Cancelled %d pending message cleanup(s)", cancelled)


async def main() -> None:
    config = BotConfig.load()
    configure_logging(config.log_level)
    runtime = OnboardingRuntime(config)
    await runtime.run()


__all__ = ["OnboardingRuntime", "configure_logging", "main"]
