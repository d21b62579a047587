# src/app/domain/models.py
"""
Domain models for recipe versioning, ranking and permissions.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union


class Role(str, Enum):
    """Fixed viewer roles, lowest to highest."""
    GUEST = "guest"
    READ = "read"
    COMMENT = "comment"
    EDIT = "edit"
    ADMIN = "admin"


ROLE_LEVELS: dict[Role, int] = {
    Role.GUEST: 1,
    Role.READ: 2,
    Role.COMMENT: 3,
    Role.EDIT: 4,
    Role.ADMIN: 5,
}


def parse_role(value: Union[Role, str, None]) -> Optional[Role]:
    """Return the Role for a raw value, or None if it is not a known role."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value.strip().lower())
    except ValueError:
        return None


def role_level(value: Union[Role, str, None]) -> int:
    """Numeric rank of a role; unknown or missing roles rank 0."""
    role = parse_role(value)
    return ROLE_LEVELS[role] if role is not None else 0


# Columns that map onto RecipeRecord attributes; everything else lands in `data`.
ROW_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "recipe_id"),
    "parent_id": ("parent_id", "parent_recipe_id", "parentRecipeId"),
    "author_id": ("author_id", "authorId"),
    "created_at": ("created_at", "createdAt"),
    "title": ("title",),
    "version_created_from": ("version_created_from", "versionCreatedFrom"),
}


@dataclass(frozen=True)
class RecipeRecord:
    """
    A recipe as seen by the versioning core.

    Only id, parent_id, author_id and created_at are interpreted;
    title and data are carried through untouched.
    """
    id: Optional[str]
    author_id: Optional[str] = None
    parent_id: Optional[str] = None
    created_at: Any = None
    title: str = ""
    version_created_from: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_original(self) -> bool:
        return not self.parent_id

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "RecipeRecord":
        values: dict[str, Any] = {}
        consumed: set[str] = set()
        for attr, keys in ROW_ALIASES.items():
            for key in keys:
                if key in row:
                    consumed.add(key)
                    if attr not in values and row[key] is not None:
                        values[attr] = row[key]

        def _opt_str(value: Any) -> Optional[str]:
            return str(value) if value not in (None, "") else None

        payload = {k: v for k, v in row.items() if k not in consumed}
        return cls(
            id=_opt_str(values.get("id")),
            author_id=_opt_str(values.get("author_id")),
            parent_id=_opt_str(values.get("parent_id")),
            created_at=values.get("created_at"),
            title=str(values.get("title") or ""),
            version_created_from=_opt_str(values.get("version_created_from")),
            data=payload,
        )

    def to_row(self) -> dict[str, Any]:
        created_at = self.created_at
        if isinstance(created_at, datetime):
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
            created_at = created_at.isoformat()
        row: dict[str, Any] = dict(self.data)
        row.update(
            {
                "parent_id": self.parent_id,
                "author_id": self.author_id,
                "created_at": created_at,
                "title": self.title,
                "version_created_from": self.version_created_from,
            }
        )
        if self.id is not None:
            row["id"] = self.id
        return row


@dataclass
class Viewer:
    """The user looking at recipes, as supplied by the auth layer."""
    id: Optional[str]
    role: Union[Role, str, None] = None

    @property
    def level(self) -> int:
        return role_level(self.role)


@dataclass
class RecipeGroup:
    """An original recipe together with all of its direct versions."""
    original: RecipeRecord
    members: list[RecipeRecord]

    @property
    def version_count(self) -> int:
        return len(self.members)


@dataclass
class KitchenEntry:
    """One group of the kitchen listing with its per-viewer order."""
    group: RecipeGroup
    ranked: list[RecipeRecord]

    @property
    def top(self) -> RecipeRecord:
        return self.ranked[0] if self.ranked else self.group.original


@dataclass(frozen=True)
class Capabilities:
    """Actions a viewer may take on one recipe."""
    can_edit: bool
    can_create_version: bool
    can_delete: bool


@dataclass
class UserProfile:
    """A registered user and their role."""
    id: str
    role: Union[Role, str, None]
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return parse_role(self.role) is Role.ADMIN
