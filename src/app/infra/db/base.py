# src/app/infra/db/base.py
"""
Abstract base classes for the recipe, favorites and user stores.
These interfaces keep the versioning core independent of the backend.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.app.domain.models import RecipeRecord, Role, UserProfile


class RecipeRepository(ABC):
    """
    Source of the flat recipe collection.

    Implementations:
    - SupabaseRecipeRepository: `recipes` table in Supabase
    """

    @abstractmethod
    def list_recipes(self) -> list[RecipeRecord]:
        """
        Snapshot of every recipe visible to the workspace.

        Returns:
            All records, originals and versions alike
        """
        pass

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Optional[RecipeRecord]:
        """
        Get a single recipe by id.

        Args:
            recipe_id: The recipe ID

        Returns:
            The record, or None if not found
        """
        pass

    @abstractmethod
    def insert_recipe(self, record: RecipeRecord) -> RecipeRecord:
        """
        Persist a new recipe and return it with its generated id.

        Args:
            record: Unsaved record (id is None)

        Returns:
            The stored record
        """
        pass

    @abstractmethod
    def update_recipe(self, recipe_id: str, changes: dict[str, Any]) -> RecipeRecord:
        """
        Apply a partial update to a recipe.

        Args:
            recipe_id: The recipe to update
            changes: Column values to set

        Returns:
            The updated record

        Raises:
            RecipeNotFoundError: If the recipe does not exist
        """
        pass

    @abstractmethod
    def delete_recipe(self, recipe_id: str) -> None:
        pass


class FavoritesRepository(ABC):
    """
    Per-user set of favorited recipe ids.
    """

    @abstractmethod
    def list_favorite_ids(self, user_id: str) -> list[str]:
        """
        Get the recipe ids a user has favorited, oldest first.

        Args:
            user_id: The user

        Returns:
            List of recipe ids
        """
        pass

    @abstractmethod
    def add(self, user_id: str, recipe_id: str) -> None:
        pass

    @abstractmethod
    def remove(self, user_id: str, recipe_id: str) -> None:
        pass


class UserRepository(ABC):
    """
    Registered users and their roles.
    """

    @abstractmethod
    def list_users(self) -> list[UserProfile]:
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def set_role(self, user_id: str, role: Role) -> UserProfile:
        """
        Change a user's role.

        Args:
            user_id: The user to update
            role: The new role

        Returns:
            The updated profile

        Raises:
            UserNotFoundError: If the user does not exist
        """
        pass

    @abstractmethod
    def create_user(self, profile: UserProfile) -> UserProfile:
        """
        Store a profile for a newly registered user.

        Args:
            profile: The profile to store, role included

        Returns:
            The stored profile
        """
        pass
