"""Domain-focused tests for onboarding business rules.

These scenarios drive the real workflow and notifier end to end through
discord.py doubles and assert on outcomes a moderator would notice: what
was posted, what changed on the member, and what got cleaned up.
"""

import random
from unittest import mock

import pytest

from bots.membership import MembershipNotifier
from onboarding_bot.cleanup import CleanupScheduler
from onboarding_bot.identity import normalize
from onboarding_bot.models import ModerationLogEntry, OnboardingSettings, VerificationOutcome
from onboarding_bot.parsing import parse
from onboarding_bot.workflow import VerificationWorkflow

from ..factories import (
    NOTIFICATION_CHANNEL,
    make_guild,
    make_interaction,
    make_member,
    make_message,
    make_role,
)


class School:
    """A guild with the standard roles and one student waiting to be verified."""

    def __init__(self, roles=("verified", "7th grader", "8th grader")):
        self.roles = [make_role(name) for name in roles]
        self.student = make_member(member_id=42, display_name="newkid")
        self.guild = make_guild(self.roles, self.student)
        self.cleanup = CleanupScheduler(delay=0)
        self.workflow = VerificationWorkflow(OnboardingSettings(cleanup_delay=0), self.cleanup)

    async def verify(self, text, channel_name="🟢｜verification-here"):
        self.message = make_message(text, author_id=self.student.id)
        self.interaction = make_interaction(self.guild, channel_name=channel_name)
        result = await self.workflow.run(self.interaction, self.message)
        if result.cleanup is not None:
            await result.cleanup
        return result

    def granted(self):
        return [call.args[0].name for call in self.student.add_roles.await_args_list]


class TestVerificationBusinessRules:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "text, nickname",
        [
            ("john smith\n7/a", "John Smith - 7/A"),
            ("MARIA DEL CARMEN\n8/b", "Maria Del Carmen - 8/B"),
            ("  li wei \n 7 / SCIENCE ", "Li Wei - 7/Science"),
        ],
    )
    async def test_should_set_canonical_nickname_for_well_formed_text(self, text, nickname):
        """
        GIVEN a student posts their name and class/division
        WHEN an admin verifies the message in the verification channel
        THEN the student's nickname is the title-cased name with class/division
        """
        school = School()

        result = await school.verify(text)

        assert result.outcome is VerificationOutcome.SUCCESS
        school.student.edit.assert_awaited_once_with(nick=nickname, reason=mock.ANY)
        assert normalize(parse(text)).nickname == nickname

    @pytest.mark.asyncio
    async def test_should_grant_verified_and_grade_roles(self):
        """
        GIVEN the server has "verified" and "7th grader" roles
        WHEN a 7th grader is verified
        THEN both roles are granted and named in the confirmation
        """
        school = School()

        await school.verify("john smith\n7/a")

        assert school.granted() == ["verified", "7th grader"]
        embed = school.interaction.response.send_message.await_args.kwargs["embed"]
        assert "verified, 7th grader" in embed.description

    @pytest.mark.asyncio
    async def test_should_succeed_without_matching_roles(self):
        """
        GIVEN the server has neither the verified nor the grade role
        WHEN a student is verified
        THEN the nickname is still set and the confirmation marks both roles N/A
        """
        school = School(roles=())

        result = await school.verify("john smith\n9/c")

        assert result.outcome is VerificationOutcome.SUCCESS
        assert school.granted() == []
        embed = school.interaction.response.send_message.await_args.kwargs["embed"]
        assert "**Roles added:** N/A, N/A" in embed.description

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["john smith\n7/a", "", "not even close"])
    async def test_should_reject_outside_verification_channel(self, text):
        """
        GIVEN any message content
        WHEN Verify is used outside the verification channel
        THEN the admin gets a wrong-channel rejection and nothing changes
        """
        school = School()

        result = await school.verify(text, channel_name="general")

        assert result.outcome is VerificationOutcome.WRONG_CHANNEL
        school.student.edit.assert_not_awaited()
        school.message.delete.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "text",
        ["john smith", "john\nsmith\n7/a", "john smith\n7a", "john smith\n7/a/b"],
    )
    async def test_should_reject_malformed_text_without_mutation(self, text):
        """
        GIVEN a message that is not exactly "name" then "class/division"
        WHEN an admin verifies it
        THEN the admin sees a format error and the member is untouched
        """
        school = School()

        result = await school.verify(text)

        assert result.outcome is VerificationOutcome.BAD_FORMAT
        assert school.interaction.response.send_message.await_args.kwargs["ephemeral"] is True
        school.student.edit.assert_not_awaited()
        school.student.add_roles.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_should_clean_up_exactly_two_messages(self):
        """
        GIVEN a successful verification
        WHEN the cleanup delay elapses
        THEN the student's message and the confirmation are deleted
        """
        school = School()

        await school.verify("john smith\n7/a")

        school.message.delete.assert_awaited_once()
        reply = await school.interaction.original_response()
        reply.delete.assert_awaited_once()
        assert school.cleanup.pending == 0


class TestMembershipNotificationRules:
    def notifier(self, entry=None):
        return MembershipNotifier(
            OnboardingSettings(),
            rng=random.Random(3),
            lookup=mock.AsyncMock(return_value=entry),
        )

    def guild(self):
        channel = mock.Mock()
        channel.name = NOTIFICATION_CHANNEL
        channel.send = mock.AsyncMock()
        guild = mock.Mock()
        guild.text_channels = [channel]
        return guild, channel

    @pytest.mark.asyncio
    async def test_should_announce_kick_when_latest_kick_targets_member(self):
        """
        GIVEN the newest kick in the audit log targets the departing member
        WHEN the member is removed
        THEN the channel announces a kick
        """
        guild, channel = self.guild()
        member = make_member(member_id=42, display_name="Ana")
        member.guild = guild

        await self.notifier(ModerationLogEntry(action="kick", target_id=42)).on_member_remove(member)

        assert channel.send.await_args.kwargs["embed"].title == "Member Kicked"

    @pytest.mark.asyncio
    async def test_should_announce_leave_when_kick_targets_someone_else(self):
        """
        GIVEN the newest kick targets another member
        WHEN a member is removed
        THEN the removal is announced as a voluntary leave
        """
        guild, channel = self.guild()
        member = make_member(member_id=42, display_name="Ana")
        member.guild = guild

        await self.notifier(ModerationLogEntry(action="kick", target_id=1)).on_member_remove(member)

        embed = channel.send.await_args.kwargs["embed"]
        assert embed.title == "Member Left"
        assert "**Ana**" in embed.description
