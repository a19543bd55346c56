from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final

from .models import RoleGrantPlan

VERIFIED_ROLE_NAME: Final[str] = "verified"
GRADE_ROLE_TEMPLATE: Final[str] = "{class_id}th grader"


def grade_role_name(class_id: str, template: str = GRADE_ROLE_TEMPLATE) -> str:
    return template.format(class_id=class_id)


def _find_role(roles: Iterable[Any], name: str) -> Any | None:
    return next((role for role in roles if role.name == name), None)


def resolve_plan(
    class_id: str,
    existing_roles: Iterable[Any],
    *,
    verified_role_name: str = VERIFIED_ROLE_NAME,
    grade_role_template: str = GRADE_ROLE_TEMPLATE,
) -> RoleGrantPlan:
    """Match the verified and grade roles against the guild's roles by exact name.

    Either role may be missing; the plan then simply carries ``None`` for it.
    """
    roles = list(existing_roles)
    grade_name = grade_role_name(class_id, grade_role_template)
    return RoleGrantPlan(
        verified_role_name=verified_role_name,
        grade_role_name=grade_name,
        verified_role=_find_role(roles, verified_role_name),
        grade_role=_find_role(roles, grade_name),
    )
