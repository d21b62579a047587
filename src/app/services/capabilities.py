# src/app/services/capabilities.py
"""
Which recipe actions a viewer may take.

All checks are pure functions of (viewer, record) and are meant to be
evaluated on every request.
"""
from __future__ import annotations

from typing import Optional, Union

from src.app.domain.models import (
    ROLE_LEVELS,
    Capabilities,
    RecipeRecord,
    Role,
    Viewer,
    parse_role,
    role_level,
)


def has_permission(viewer: Optional[Viewer], required_role: Union[Role, str]) -> bool:
    """True if the viewer's role ranks at or above required_role."""
    if viewer is None:
        return False
    required = parse_role(required_role)
    if required is None:
        return False
    level = role_level(viewer.role)
    return level > 0 and level >= ROLE_LEVELS[required]


def is_admin(viewer: Optional[Viewer]) -> bool:
    return viewer is not None and parse_role(viewer.role) is Role.ADMIN


def can_directly_edit(viewer: Optional[Viewer], record: Optional[RecipeRecord]) -> bool:
    if viewer is None or record is None:
        return False
    if is_admin(viewer):
        return True
    return viewer.id is not None and record.author_id == viewer.id


def can_create_version(viewer: Optional[Viewer]) -> bool:
    return has_permission(viewer, Role.EDIT)


def can_delete(viewer: Optional[Viewer], record: Optional[RecipeRecord]) -> bool:
    # authorship never grants delete
    if record is None:
        return False
    return is_admin(viewer)


def capabilities_for(viewer: Optional[Viewer], record: Optional[RecipeRecord]) -> Capabilities:
    return Capabilities(
        can_edit=can_directly_edit(viewer, record),
        can_create_version=can_create_version(viewer),
        can_delete=can_delete(viewer, record),
    )
