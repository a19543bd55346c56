"""The Verify context-menu workflow.

An administrator right-clicks a member's message in the verification channel.
The message is parsed as ``Full Name`` / ``class/division``, the author gets
a nickname and roles, and both the message and the confirmation disappear a
moment later. Every failure along the way ends the attempt with exactly one
response to the administrator.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import Counter
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import discord

from .cleanup import CleanupScheduler
from .errors import (
    TRANSPORT_ERRORS,
    ApplyError,
    FormatError,
    TargetResolutionError,
    VerificationError,
    WrongChannelError,
)
from .identity import normalize
from .models import (
    NormalizedIdentity,
    OnboardingSettings,
    RoleGrantPlan,
    VerificationOutcome,
)
from .parsing import FORMAT_HINT, parse
from .roles import resolve_plan
from .templates import GREEN, RED

log = logging.getLogger(__name__)

APPLY_ERROR_MESSAGE = "❌ Error verifying user."
NO_MESSAGE_MESSAGE = "❌ Could not fetch the target message."
NO_MEMBER_MESSAGE = "❌ Could not find the target member in this guild."
SHADOW_MESSAGE = "✅ Verification recorded in shadow mode. No nickname or roles were changed."


@dataclass(slots=True)
class VerificationResult:
    outcome: VerificationOutcome
    nickname: str | None = None
    granted_roles: list[str] = field(default_factory=list)
    detail: str | None = None
    cleanup: asyncio.Task[None] | None = None

    @property
    def ok(self) -> bool:
        return self.outcome in (VerificationOutcome.SUCCESS, VerificationOutcome.SHADOW)


class MemberLocks:
    """Serialize verification attempts that target the same member."""

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._holders: Counter[int] = Counter()

    def __len__(self) -> int:
        return len(self._locks)

    @contextlib.asynccontextmanager
    async def hold(self, member_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(member_id, asyncio.Lock())
        self._holders[member_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[member_id] -= 1
            if self._holders[member_id] <= 0:
                del self._holders[member_id]
                self._locks.pop(member_id, None)


class VerificationWorkflow:
    def __init__(
        self,
        settings: OnboardingSettings,
        cleanup: CleanupScheduler,
        *,
        locks: MemberLocks | None = None,
        shadow: Any | None = None,
    ) -> None:
        self.settings = settings
        self.cleanup = cleanup
        self.locks = locks or MemberLocks()
        self.shadow = shadow

    async def run(
        self, interaction: discord.Interaction, message: discord.Message | None
    ) -> VerificationResult:
        try:
            return await self._verify(interaction, message)
        except VerificationError as exc:
            log.info(
                "Verification by %s ended with %s: %s",
                getattr(interaction.user, "id", None),
                exc.outcome.value,
                exc,
            )
            await self._reject(interaction, exc)
            return VerificationResult(outcome=exc.outcome, detail=str(exc))
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Verification crashed: %s", exc)
            await self._respond(interaction, content=APPLY_ERROR_MESSAGE, ephemeral=True)
            return VerificationResult(
                outcome=VerificationOutcome.APPLY_ERROR, detail=repr(exc)
            )

    # ---------- steps ----------
    def check_channel(self, interaction: discord.Interaction) -> None:
        channel_name = getattr(interaction.channel, "name", None)
        if channel_name != self.settings.verification_channel:
            raise WrongChannelError(
                f"This command can only be used in #{self.settings.verification_channel}."
            )

    async def resolve_target(
        self, interaction: discord.Interaction, message: discord.Message | None
    ) -> discord.Member:
        if message is None:
            raise TargetResolutionError(NO_MESSAGE_MESSAGE)
        author = getattr(message, "author", None)
        guild = interaction.guild
        if author is None or guild is None:
            raise TargetResolutionError(NO_MEMBER_MESSAGE)
        try:
            return await guild.fetch_member(author.id)
        except discord.HTTPException as exc:
            raise TargetResolutionError(NO_MEMBER_MESSAGE) from exc
        except TRANSPORT_ERRORS as exc:
            log.warning("Member lookup for %s failed: %r", author.id, exc)
            raise TargetResolutionError(NO_MEMBER_MESSAGE) from exc

    def plan(
        self, guild: discord.Guild, raw_text: str | None
    ) -> tuple[NormalizedIdentity, RoleGrantPlan]:
        identity = normalize(parse(raw_text))
        plan = resolve_plan(
            identity.class_id,
            guild.roles,
            verified_role_name=self.settings.verified_role_name,
            grade_role_template=self.settings.grade_role_template,
        )
        return identity, plan

    async def apply(
        self, member: discord.Member, identity: NormalizedIdentity, plan: RoleGrantPlan
    ) -> list[str]:
        """Set the nickname, then grant each resolved role.

        A failure part-way leaves earlier changes in place.
        """
        granted: list[str] = []
        try:
            await member.edit(nick=identity.nickname, reason="Verified by an administrator")
            for role in plan.roles:
                await member.add_roles(role, reason="Verified by an administrator")
                granted.append(role.name)
        except discord.Forbidden as exc:
            log.warning("Forbidden while verifying %s (granted so far: %s)", member, granted)
            raise ApplyError(APPLY_ERROR_MESSAGE) from exc
        except discord.HTTPException as exc:
            log.exception("HTTPException while verifying %s: %s", member, exc)
            raise ApplyError(APPLY_ERROR_MESSAGE) from exc
        except TRANSPORT_ERRORS as exc:
            log.exception("Connection error while verifying %s: %r", member, exc)
            raise ApplyError(APPLY_ERROR_MESSAGE) from exc
        return granted

    # ---------- orchestration ----------
    async def _verify(
        self, interaction: discord.Interaction, message: discord.Message | None
    ) -> VerificationResult:
        self.check_channel(interaction)
        member = await self.resolve_target(interaction, message)
        identity, plan = self.plan(interaction.guild, message.content)

        if self.shadow is not None and self.shadow.enabled:
            return await self._shadow(interaction, member, identity, plan)

        async with self.locks.hold(member.id):
            granted = await self.apply(member, identity, plan)
            log.info(
                "Verified %s as %r with roles %s", member.id, identity.nickname, granted
            )
            reply = await self._confirm(interaction, member, identity, plan)

        task = self.cleanup.schedule(message, reply)
        return VerificationResult(
            outcome=VerificationOutcome.SUCCESS,
            nickname=identity.nickname,
            granted_roles=granted,
            cleanup=task,
        )

    async def _confirm(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        identity: NormalizedIdentity,
        plan: RoleGrantPlan,
    ) -> discord.Message | None:
        """Post the public confirmation and return it for cleanup.

        If the confirmation never reaches the channel the attempt fails and
        nothing gets deleted. If only fetching it back fails, the student's
        message is still cleaned up on its own.
        """
        embed = discord.Embed(
            title="Verification Successful",
            description=(
                f"✅ {member.mention} has been verified!\n"
                f"**Nickname set to:** {identity.nickname}\n"
                f"**Roles added:** {plan.summary()}"
            ),
            color=GREEN,
        )
        try:
            await interaction.response.send_message(embed=embed)
        except discord.HTTPException as exc:
            log.exception("Failed to send verification confirmation: %s", exc)
            raise ApplyError(APPLY_ERROR_MESSAGE) from exc
        except TRANSPORT_ERRORS as exc:
            log.exception("Connection error sending verification confirmation: %r", exc)
            raise ApplyError(APPLY_ERROR_MESSAGE) from exc

        try:
            return await interaction.original_response()
        except discord.HTTPException as exc:
            log.warning("Confirmation sent but could not be fetched for cleanup: %s", exc)
        except TRANSPORT_ERRORS as exc:
            log.warning("Confirmation sent but could not be fetched for cleanup: %r", exc)
        return None

    async def _shadow(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        identity: NormalizedIdentity,
        plan: RoleGrantPlan,
    ) -> VerificationResult:
        await self._respond(interaction, content=SHADOW_MESSAGE, ephemeral=True)
        await self.shadow.report_verification(interaction.guild, member, identity, plan)
        return VerificationResult(
            outcome=VerificationOutcome.SHADOW,
            nickname=identity.nickname,
            granted_roles=[role.name for role in plan.roles],
        )

    async def _reject(self, interaction: discord.Interaction, exc: VerificationError) -> None:
        if isinstance(exc, FormatError):
            embed = discord.Embed(
                title="Verification Failed", description=FORMAT_HINT, color=RED
            )
            embed.add_field(name="Problem", value=str(exc), inline=False)
            await self._respond(interaction, embed=embed, ephemeral=True)
            return
        if isinstance(exc, WrongChannelError):
            await self._respond(interaction, content=f"❌ {exc}", ephemeral=True)
            return
        await self._respond(interaction, content=str(exc), ephemeral=True)

    async def _respond(self, interaction: discord.Interaction, **kwargs: Any) -> None:
        try:
            await interaction.response.send_message(**kwargs)
        except discord.InteractionResponded:
            log.warning("Verification interaction %s was already answered", interaction.id)
        except discord.HTTPException as exc:
            log.exception("Failed to respond to verification interaction: %s", exc)
        except TRANSPORT_ERRORS as exc:
            log.exception("Connection error responding to verification interaction: %r", exc)
