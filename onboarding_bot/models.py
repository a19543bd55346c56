from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

NONE_MARKER = "N/A"


class VerificationOutcome(str, Enum):
    SUCCESS = "success"
    SHADOW = "shadow"
    WRONG_CHANNEL = "wrong_channel"
    NO_TARGET_MEMBER = "no_target_member"
    BAD_FORMAT = "bad_format"
    APPLY_ERROR = "apply_error"


class MemberEventKind(str, Enum):
    JOINED = "joined"
    REMOVED = "removed"
    BANNED = "banned"
    UNBANNED = "unbanned"


@dataclass(frozen=True, slots=True)
class MemberEvent:
    kind: MemberEventKind
    member_id: int
    display_name: str
    username: str

    @classmethod
    def from_member(cls, kind: MemberEventKind, member: Any) -> MemberEvent:
        return cls(
            kind=kind,
            member_id=member.id,
            display_name=member.display_name,
            username=member.name,
        )

    @classmethod
    def from_user(cls, kind: MemberEventKind, user: Any) -> MemberEvent:
        # Ban payloads carry a plain user; the global name stands in for the display name.
        return cls(
            kind=kind,
            member_id=user.id,
            display_name=getattr(user, "display_name", user.name),
            username=user.name,
        )


@dataclass(frozen=True, slots=True)
class ModerationLogEntry:
    action: str
    target_id: int | None
    rank: int = 0

    KICK: ClassVar[str] = "kick"


@dataclass(frozen=True, slots=True)
class ParsedIdentity:
    full_name: str
    class_id: str
    division: str


@dataclass(frozen=True, slots=True)
class NormalizedIdentity:
    display_name: str
    class_id: str
    division: str

    @property
    def nickname(self) -> str:
        return f"{self.display_name} - {self.class_id}/{self.division}"


@dataclass(frozen=True, slots=True)
class RoleGrantPlan:
    verified_role_name: str
    grade_role_name: str
    verified_role: Any | None = None
    grade_role: Any | None = None

    @property
    def roles(self) -> list[Any]:
        """Resolved roles in grant order; missing roles are left out."""
        return [r for r in (self.verified_role, self.grade_role) if r is not None]

    def summary(self) -> str:
        names = [
            role.name if role is not None else NONE_MARKER
            for role in (self.verified_role, self.grade_role)
        ]
        return ", ".join(names)


@dataclass(frozen=True, slots=True)
class NotificationTemplate:
    category: str
    title: str
    messages: Sequence[str]
    color: int


@dataclass(frozen=True, slots=True)
class OnboardingSettings:
    """Names and timings the core matches against.

    Channel and role names are compared by exact string, so renaming a channel
    on the server without updating these values silently disables the feature.
    """

    notification_channel: str = "👋｜joins-and-leaves"
    verification_channel: str = "🟢｜verification-here"
    verified_role_name: str = "verified"
    grade_role_template: str = "{class_id}th grader"
    cleanup_delay: float = 1.0
