"""Tests for onboarding_bot.roles."""

from onboarding_bot.roles import grade_role_name, resolve_plan

from .factories import make_role


def test_grade_role_name_default_template():
    assert grade_role_name("7") == "7th grader"


def test_grade_role_name_custom_template():
    assert grade_role_name("7", "Grade {class_id}") == "Grade 7"


def test_both_roles_resolved():
    verified = make_role("verified")
    seventh = make_role("7th grader")
    plan = resolve_plan("7", [make_role("@everyone"), seventh, verified])

    assert plan.verified_role is verified
    assert plan.grade_role is seventh
    assert plan.roles == [verified, seventh]
    assert plan.summary() == "verified, 7th grader"


def test_missing_roles_are_none():
    plan = resolve_plan("7", [make_role("@everyone")])

    assert plan.verified_role is None
    assert plan.grade_role is None
    assert plan.roles == []
    assert plan.summary() == "N/A, N/A"
    assert plan.grade_role_name == "7th grader"


def test_match_is_case_sensitive():
    plan = resolve_plan("7", [make_role("Verified"), make_role("7TH GRADER")])
    assert plan.verified_role is None
    assert plan.grade_role is None


def test_lookups_are_independent():
    eighth = make_role("8th grader")
    plan = resolve_plan("8", [eighth])
    assert plan.verified_role is None
    assert plan.grade_role is eighth
    assert plan.summary() == "N/A, 8th grader"


def test_custom_role_names():
    member_role = make_role("member")
    grade = make_role("Class 5")
    plan = resolve_plan(
        "5",
        [member_role, grade],
        verified_role_name="member",
        grade_role_template="Class {class_id}",
    )
    assert plan.roles == [member_role, grade]


def test_accepts_any_iterable():
    roles = (r for r in [make_role("verified")])
    assert resolve_plan("1", roles).verified_role is not None
