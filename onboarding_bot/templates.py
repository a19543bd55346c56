"""Notification templates for membership lifecycle events."""

from __future__ import annotations

import random
from enum import Enum
from types import MappingProxyType
from typing import Final, NamedTuple

from .models import NotificationTemplate

GREEN: Final[int] = 0x57F287
RED: Final[int] = 0xED4245


class TemplateCategory(str, Enum):
    JOINED = "joined"
    LEFT = "left"
    KICKED = "kicked"
    BANNED = "banned"
    UNBANNED = "unbanned"


class RenderedNotification(NamedTuple):
    title: str
    message: str
    color: int


def _template(
    category: TemplateCategory, title: str, color: int, *messages: str
) -> NotificationTemplate:
    return NotificationTemplate(
        category=category.value, title=title, messages=tuple(messages), color=color
    )


TEMPLATES: Final = MappingProxyType(
    {
        TemplateCategory.JOINED: _template(
            TemplateCategory.JOINED,
            "New Member Joined",
            GREEN,
            "🎉 Welcome aboard, **{name}**!",
            "👋 Hey **{name}**, glad you joined us!",
            "🌟 **{name}** just landed — say hi!",
            "🥳 **{name}** has entered the chat!",
            "🚀 **{name}** joined — let’s go!",
        ),
        TemplateCategory.LEFT: _template(
            TemplateCategory.LEFT,
            "Member Left",
            RED,
            "😢 **{name}** has left us...",
            "👋 Goodbye **{name}**, hope to see you again!",
            "🚪 **{name}** walked out the door.",
        ),
        TemplateCategory.KICKED: _template(
            TemplateCategory.KICKED,
            "Member Kicked",
            RED,
            "👢 **{name}** was kicked out.",
        ),
        TemplateCategory.BANNED: _template(
            TemplateCategory.BANNED,
            "Member Banned",
            RED,
            "⛔ **{name}** has been banned.",
            "🔨 **{name}** got the hammer.",
            "🚫 **{name}** is no longer welcome here.",
        ),
        TemplateCategory.UNBANNED: _template(
            TemplateCategory.UNBANNED,
            "Member Unbanned",
            GREEN,
            "✅ **{name}** has been unbanned.",
        ),
    }
)

_default_rng = random.Random()


def render(
    category: TemplateCategory,
    name: str,
    rng: random.Random | None = None,
) -> RenderedNotification:
    """Pick one of the category's messages uniformly and fill in ``name``."""
    template = TEMPLATES[category]
    chosen = (rng or _default_rng).choice(template.messages)
    return RenderedNotification(
        title=template.title,
        message=chosen.format(name=name),
        color=template.color,
    )
