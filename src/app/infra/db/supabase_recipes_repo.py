from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any

from supabase import Client, create_client

from src.app.domain.errors import RecipeNotFoundError, RepositoryError, UserNotFoundError
from src.app.domain.models import RecipeRecord, Role, UserProfile, parse_role
from src.app.infra.db.base import FavoritesRepository, RecipeRepository, UserRepository

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _row_to_profile(row: dict[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(row["id"]),
        role=_safe_str(row.get("role")),
        email=_safe_str(row.get("email")),
        name=_safe_str(row.get("name")),
        created_at=_parse_datetime(row.get("created_at")),
    )


def _create_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


class SupabaseRecipeRepository(RecipeRepository):
    TABLE_NAME = "recipes"

    def __init__(self, client: Client | None = None, table_name: str | None = None):
        self._client = client or _create_supabase_client()
        self._table = table_name or self.TABLE_NAME
        logger.info("SupabaseRecipeRepository initialized: table=%s", self._table)

    def list_recipes(self) -> list[RecipeRecord]:
        try:
            result = (
                self._client.table(self._table)
                .select("*")
                .order("created_at")
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error listing recipes: %s", error)
            raise RepositoryError("list_recipes", str(error)) from error

        return [RecipeRecord.from_row(row) for row in result.data or []]

    def get_recipe(self, recipe_id: str) -> RecipeRecord | None:
        try:
            result = (
                self._client.table(self._table)
                .select("*")
                .eq("id", recipe_id)
                .limit(1)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error fetching recipe %s: %s", recipe_id, error)
            raise RepositoryError("get_recipe", str(error)) from error

        rows = result.data or []
        return RecipeRecord.from_row(rows[0]) if rows else None

    def insert_recipe(self, record: RecipeRecord) -> RecipeRecord:
        payload = record.to_row()
        payload.pop("id", None)

        try:
            result = self._client.table(self._table).insert(payload).execute()
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error inserting recipe: %s", error)
            raise RepositoryError("insert_recipe", str(error)) from error

        if not result.data:
            raise RepositoryError("insert_recipe", "no row returned")

        stored = RecipeRecord.from_row(result.data[0])
        logger.info(
            "Created recipe: id=%s, parent=%s, author=%s",
            stored.id,
            stored.parent_id,
            stored.author_id,
        )
        return stored

    def update_recipe(self, recipe_id: str, changes: dict[str, Any]) -> RecipeRecord:
        update_data = dict(changes)
        update_data["updated_at"] = _now_utc().isoformat()

        try:
            result = (
                self._client.table(self._table)
                .update(update_data)
                .eq("id", recipe_id)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error updating recipe %s: %s", recipe_id, error)
            raise RepositoryError("update_recipe", str(error)) from error

        if not result.data:
            raise RecipeNotFoundError(recipe_id)

        logger.info("Updated recipe: id=%s, fields=%s", recipe_id, sorted(changes))
        return RecipeRecord.from_row(result.data[0])

    def delete_recipe(self, recipe_id: str) -> None:
        try:
            self._client.table(self._table).delete().eq("id", recipe_id).execute()
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error deleting recipe %s: %s", recipe_id, error)
            raise RepositoryError("delete_recipe", str(error)) from error

        logger.info("Deleted recipe: id=%s", recipe_id)


class SupabaseFavoritesRepository(FavoritesRepository):
    TABLE_NAME = "user_favorites"

    def __init__(self, client: Client | None = None, table_name: str | None = None):
        self._client = client or _create_supabase_client()
        self._table = table_name or self.TABLE_NAME
        logger.info("SupabaseFavoritesRepository initialized: table=%s", self._table)

    def list_favorite_ids(self, user_id: str) -> list[str]:
        try:
            result = (
                self._client.table(self._table)
                .select("recipe_id")
                .eq("user_id", user_id)
                .order("created_at")
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error fetching favorites for %s: %s", user_id, error)
            raise RepositoryError("list_favorite_ids", str(error)) from error

        return [str(row["recipe_id"]) for row in result.data or [] if row.get("recipe_id")]

    def add(self, user_id: str, recipe_id: str) -> None:
        payload = {
            "user_id": user_id,
            "recipe_id": recipe_id,
            "created_at": _now_utc().isoformat(),
        }
        try:
            (
                self._client.table(self._table)
                .upsert(payload, on_conflict="user_id,recipe_id", ignore_duplicates=True)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error adding favorite: %s", error)
            raise RepositoryError("add_favorite", str(error)) from error

        logger.info("Favorite added: user=%s, recipe=%s", user_id, recipe_id)

    def remove(self, user_id: str, recipe_id: str) -> None:
        try:
            (
                self._client.table(self._table)
                .delete()
                .eq("user_id", user_id)
                .eq("recipe_id", recipe_id)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error removing favorite: %s", error)
            raise RepositoryError("remove_favorite", str(error)) from error

        logger.info("Favorite removed: user=%s, recipe=%s", user_id, recipe_id)


class SupabaseUserRepository(UserRepository):
    TABLE_NAME = "profiles"

    def __init__(self, client: Client | None = None, table_name: str | None = None):
        self._client = client or _create_supabase_client()
        self._table = table_name or self.TABLE_NAME
        logger.info("SupabaseUserRepository initialized: table=%s", self._table)

    def list_users(self) -> list[UserProfile]:
        try:
            result = (
                self._client.table(self._table)
                .select("id,email,name,role,created_at")
                .order("created_at")
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error listing users: %s", error)
            raise RepositoryError("list_users", str(error)) from error

        return [_row_to_profile(row) for row in result.data or []]

    def get_user(self, user_id: str) -> UserProfile | None:
        try:
            result = (
                self._client.table(self._table)
                .select("id,email,name,role,created_at")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error fetching user %s: %s", user_id, error)
            raise RepositoryError("get_user", str(error)) from error

        rows = result.data or []
        return _row_to_profile(rows[0]) if rows else None

    def set_role(self, user_id: str, role: Role) -> UserProfile:
        try:
            result = (
                self._client.table(self._table)
                .update({"role": role.value})
                .eq("id", user_id)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error updating role for %s: %s", user_id, error)
            raise RepositoryError("set_role", str(error)) from error

        if not result.data:
            raise UserNotFoundError(user_id)

        logger.info("Role updated: user=%s, role=%s", user_id, role.value)
        return _row_to_profile(result.data[0])

    def create_user(self, profile: UserProfile) -> UserProfile:
        role = parse_role(profile.role)
        payload = {
            "id": profile.id,
            "email": profile.email,
            "name": profile.name,
            "role": role.value if role else None,
            "created_at": (profile.created_at or _now_utc()).isoformat(),
        }
        try:
            result = (
                self._client.table(self._table)
                .upsert(payload, on_conflict="id", ignore_duplicates=True)
                .execute()
            )
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error creating profile for %s: %s", profile.id, error)
            raise RepositoryError("create_user", str(error)) from error

        logger.info("Profile created: user=%s, role=%s", profile.id, payload["role"])
        if result.data:
            return _row_to_profile(result.data[0])
        return self.get_user(profile.id) or profile
