from __future__ import annotations

from typing import Any

from src.app.domain.errors import RecipeNotFoundError, RepositoryError, UserNotFoundError
from src.app.domain.models import RecipeRecord, Role, UserProfile
from src.app.infra.db.base import FavoritesRepository, RecipeRepository, UserRepository


class RecipeRepositoryStub(RecipeRepository):
    def __init__(self, records: list[RecipeRecord]) -> None:
        self.records = list(records)
        self.deleted: list[str] = []
        self.fail = False

    def list_recipes(self) -> list[RecipeRecord]:
        if self.fail:
            raise RepositoryError("list_recipes", "connection reset")
        return list(self.records)

    def get_recipe(self, recipe_id: str) -> RecipeRecord | None:
        return next((r for r in self.records if r.id == recipe_id), None)

    def insert_recipe(self, record: RecipeRecord) -> RecipeRecord:
        row = record.to_row()
        row["id"] = f"new-{len(self.records)}"
        stored = RecipeRecord.from_row(row)
        self.records.append(stored)
        return stored

    def update_recipe(self, recipe_id: str, changes: dict[str, Any]) -> RecipeRecord:
        current = self.get_recipe(recipe_id)
        if current is None:
            raise RecipeNotFoundError(recipe_id)
        row = current.to_row()
        row.update(changes)
        updated = RecipeRecord.from_row(row)
        self.records = [updated if r.id == recipe_id else r for r in self.records]
        return updated

    def delete_recipe(self, recipe_id: str) -> None:
        self.deleted.append(recipe_id)
        self.records = [r for r in self.records if r.id != recipe_id]


class FavoritesRepositoryStub(FavoritesRepository):
    def __init__(self) -> None:
        self.favorites: dict[str, list[str]] = {}
        self.list_calls = 0
        self.added: list[tuple[str, str]] = []
        self.removed: list[tuple[str, str]] = []

    def list_favorite_ids(self, user_id: str) -> list[str]:
        self.list_calls += 1
        return list(self.favorites.get(user_id, []))

    def add(self, user_id: str, recipe_id: str) -> None:
        self.added.append((user_id, recipe_id))
        ids = self.favorites.setdefault(user_id, [])
        if recipe_id not in ids:
            ids.append(recipe_id)

    def remove(self, user_id: str, recipe_id: str) -> None:
        self.removed.append((user_id, recipe_id))
        self.favorites[user_id] = [r for r in self.favorites.get(user_id, []) if r != recipe_id]


class UserRepositoryStub(UserRepository):
    def __init__(self, users: list[UserProfile]) -> None:
        self.users = {user.id: user for user in users}
        self.role_updates: list[tuple[str, Role]] = []
        self.created: list[UserProfile] = []

    def list_users(self) -> list[UserProfile]:
        return list(self.users.values())

    def get_user(self, user_id: str) -> UserProfile | None:
        return self.users.get(user_id)

    def set_role(self, user_id: str, role: Role) -> UserProfile:
        if user_id not in self.users:
            raise UserNotFoundError(user_id)
        self.role_updates.append((user_id, role))
        self.users[user_id].role = role
        return self.users[user_id]

    def create_user(self, profile: UserProfile) -> UserProfile:
        self.created.append(profile)
        self.users[profile.id] = profile
        return profile
