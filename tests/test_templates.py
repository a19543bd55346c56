"""Tests for onboarding_bot.templates."""

import random

import pytest

from onboarding_bot.templates import (
    GREEN,
    RED,
    TEMPLATES,
    TemplateCategory,
    render,
)


def test_every_category_has_a_template():
    assert set(TEMPLATES) == set(TemplateCategory)
    for category, template in TEMPLATES.items():
        assert template.category == category.value
        assert template.messages
        assert all("{name}" in message for message in template.messages)


def test_templates_are_read_only():
    with pytest.raises(TypeError):
        TEMPLATES[TemplateCategory.JOINED] = None


@pytest.mark.parametrize(
    "category, title, color",
    [
        (TemplateCategory.JOINED, "New Member Joined", GREEN),
        (TemplateCategory.LEFT, "Member Left", RED),
        (TemplateCategory.KICKED, "Member Kicked", RED),
        (TemplateCategory.BANNED, "Member Banned", RED),
        (TemplateCategory.UNBANNED, "Member Unbanned", GREEN),
    ],
)
def test_render_title_and_color(category, title, color):
    result = render(category, "Alex", random.Random(0))
    assert result.title == title
    assert result.color == color
    assert "**Alex**" in result.message


def test_render_is_deterministic_for_a_seed():
    first = [render(TemplateCategory.JOINED, "Alex", random.Random(123)) for _ in range(3)]
    assert len(set(first)) == 1


def test_render_uses_injected_rng():
    rng = random.Random()
    rng.choice = lambda seq: seq[-1]
    result = render(TemplateCategory.LEFT, "Sam", rng)
    assert result.message == "🚪 **Sam** walked out the door."


def test_render_covers_the_whole_pool():
    rng = random.Random(7)
    seen = {render(TemplateCategory.JOINED, "Kim", rng).message for _ in range(200)}
    assert len(seen) == len(TEMPLATES[TemplateCategory.JOINED].messages)


def test_name_with_braces_is_not_reformatted():
    result = render(TemplateCategory.KICKED, "{weird}", random.Random(1))
    assert result.message == "👢 **{weird}** was kicked out."


def test_render_without_rng_still_picks_from_pool():
    result = render(TemplateCategory.BANNED, "Bo")
    expected = {m.format(name="Bo") for m in TEMPLATES[TemplateCategory.BANNED].messages}
    assert result.message in expected
