# src/app/services/user_service.py
"""
User role administration.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from src.app.domain.errors import LastAdminError, PermissionDeniedError, UserNotFoundError
from src.app.domain.models import Role, UserProfile, Viewer, parse_role
from src.app.infra.db.base import UserRepository
from src.app.services.capabilities import is_admin

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repository: UserRepository, default_role: Union[Role, str] = Role.EDIT):
        self._repo = repository
        self.default_role = parse_role(default_role) or Role.EDIT

    def list_users(self, actor: Viewer) -> list[UserProfile]:
        if not is_admin(actor):
            raise PermissionDeniedError("list users", actor.id)
        return self._repo.list_users()

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self._repo.get_user(user_id)

    def admin_count(self) -> int:
        return sum(1 for user in self._repo.list_users() if user.is_admin)

    def initial_role(self, existing_user_count: int) -> Role:
        """Role for a newly registered user: the very first one administers."""
        return Role.ADMIN if existing_user_count == 0 else self.default_role

    def register_user(
        self, user_id: str, email: Optional[str] = None, name: Optional[str] = None
    ) -> UserProfile:
        """Create the profile of a user seen for the first time."""
        role = self.initial_role(len(self._repo.list_users()))
        profile = self._repo.create_user(
            UserProfile(id=user_id, role=role, email=email, name=name)
        )
        logger.info("User registered: user=%s, role=%s", user_id, role.value)
        return profile

    def update_role(self, actor: Viewer, user_id: str, role: Union[Role, str]) -> UserProfile:
        """
        Change a user's role.

        Raises:
            PermissionDeniedError: If the actor is not an admin
            ValueError: If role is not a known role
            UserNotFoundError: If the user does not exist
            LastAdminError: If this would leave no administrator
        """
        if not is_admin(actor):
            raise PermissionDeniedError("change roles", actor.id)

        new_role = parse_role(role)
        if new_role is None:
            raise ValueError(f"Unknown role: {role}")

        target = self._repo.get_user(user_id)
        if target is None:
            raise UserNotFoundError(user_id)

        if target.is_admin and new_role is not Role.ADMIN and self.admin_count() <= 1:
            raise LastAdminError()

        updated = self._repo.set_role(user_id, new_role)
        logger.info(
            "Role changed: user=%s, role=%s, by=%s",
            user_id,
            new_role.value,
            actor.id,
        )
        return updated
