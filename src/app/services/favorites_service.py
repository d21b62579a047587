# src/app/services/favorites_service.py
"""
Favorites service.
Holds each user's set of favorited recipes and feeds the ranking predicate.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from src.app.domain.models import RecipeRecord
from src.app.infra.db.base import FavoritesRepository
from src.app.services.ranking import FavoritePredicate, favorite_predicate

logger = logging.getLogger(__name__)


def _legacy_favorite(record: RecipeRecord) -> bool:
    flag = record.data.get("is_favorite", record.data.get("isFavorite"))
    return flag is True


class FavoritesService:
    """
    Service for per-user recipe favorites.

    Responsibilities:
    - Read and change a user's favorites
    - Bind an is_favorite predicate for the ranking engine
    - Move legacy record-level favorite flags into the per-user set
    """

    def __init__(self, repository: FavoritesRepository):
        self._repo = repository

    def get_favorite_ids(self, user_id: Optional[str]) -> list[str]:
        if not user_id:
            return []
        return self._repo.list_favorite_ids(user_id)

    def is_favorite(self, user_id: Optional[str], recipe_id: Optional[str]) -> bool:
        if not user_id or not recipe_id:
            return False
        return recipe_id in self.get_favorite_ids(user_id)

    def add_favorite(self, user_id: Optional[str], recipe_id: Optional[str]) -> bool:
        """
        Add a recipe to a user's favorites.

        Returns:
            False if either id is missing, True otherwise (including when
            the recipe was already a favorite)
        """
        if not user_id or not recipe_id:
            return False
        if recipe_id in self.get_favorite_ids(user_id):
            return True
        self._repo.add(user_id, recipe_id)
        return True

    def remove_favorite(self, user_id: Optional[str], recipe_id: Optional[str]) -> bool:
        if not user_id or not recipe_id:
            return False
        self._repo.remove(user_id, recipe_id)
        return True

    def toggle_favorite(self, user_id: Optional[str], recipe_id: Optional[str]) -> bool:
        """
        Flip a recipe's favorite status.

        Returns:
            The new status: True if the recipe is now a favorite
        """
        if not user_id or not recipe_id:
            return False
        if self.is_favorite(user_id, recipe_id):
            self._repo.remove(user_id, recipe_id)
            return False
        self._repo.add(user_id, recipe_id)
        return True

    def favorite_recipes(
        self, user_id: Optional[str], records: Iterable[RecipeRecord]
    ) -> list[RecipeRecord]:
        if not user_id:
            return []
        favorite_ids = set(self.get_favorite_ids(user_id))
        return [record for record in records if record.id in favorite_ids]

    def predicate_for(self, user_id: Optional[str]) -> FavoritePredicate:
        """Fetch the user's favorites once and bind them for ranking."""
        return favorite_predicate(self.get_favorite_ids(user_id))

    def migrate_global_favorites(
        self, user_id: Optional[str], records: Iterable[RecipeRecord]
    ) -> int:
        """
        Copy records flagged as favorite into the user's set.

        Runs only while the user has no favorites of their own.

        Returns:
            Number of favorites migrated
        """
        if not user_id:
            return 0
        if self.get_favorite_ids(user_id):
            return 0

        migrated = 0
        for record in records:
            if record.id and _legacy_favorite(record):
                self._repo.add(user_id, record.id)
                migrated += 1

        if migrated:
            logger.info("Migrated legacy favorites: user=%s, count=%d", user_id, migrated)
        return migrated
