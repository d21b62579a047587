from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from src.app.domain.errors import RecipeNotFoundError, RepositoryError, UserNotFoundError
from src.app.domain.models import RecipeRecord, Role, UserProfile
from src.app.infra.db.supabase_recipes_repo import (
    SupabaseFavoritesRepository,
    SupabaseRecipeRepository,
    SupabaseUserRepository,
)


def _client_returning(data: list[dict]) -> MagicMock:
    client = MagicMock()
    query = client.table.return_value
    for method in ("select", "eq", "order", "limit", "insert", "update", "upsert", "delete"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data)
    return client


def _client_raising(error: Exception) -> MagicMock:
    client = _client_returning([])
    client.table.return_value.execute.side_effect = error
    return client


class TestSupabaseRecipeRepository:
    def test_list_recipes_maps_rows(self) -> None:
        client = _client_returning(
            [
                {"id": "o", "author_id": "u1", "title": "Soup", "created_at": "2024-01-01T00:00:00Z"},
                {"id": "v1", "parent_id": "o", "author_id": "u2", "title": "Soup"},
            ]
        )
        repo = SupabaseRecipeRepository(client)

        records = repo.list_recipes()

        client.table.assert_called_with("recipes")
        assert [r.id for r in records] == ["o", "v1"]
        assert records[1].parent_id == "o"

    def test_custom_table_name(self) -> None:
        client = _client_returning([])
        SupabaseRecipeRepository(client, table_name="household_recipes").list_recipes()

        client.table.assert_called_with("household_recipes")

    def test_network_error_becomes_repository_error(self) -> None:
        repo = SupabaseRecipeRepository(_client_raising(ConnectionError("reset")))

        with pytest.raises(RepositoryError) as exc_info:
            repo.list_recipes()

        assert exc_info.value.operation == "list_recipes"

    def test_get_recipe_missing(self) -> None:
        assert SupabaseRecipeRepository(_client_returning([])).get_recipe("x") is None

    def test_insert_strips_id(self) -> None:
        client = _client_returning([{"id": "new", "parent_id": "o", "author_id": "u3", "title": "Soup"}])
        repo = SupabaseRecipeRepository(client)

        stored = repo.insert_recipe(RecipeRecord(id=None, parent_id="o", author_id="u3", title="Soup"))

        payload = client.table.return_value.insert.call_args.args[0]
        assert "id" not in payload
        assert payload["parent_id"] == "o"
        assert stored.id == "new"

    def test_insert_without_rows(self) -> None:
        repo = SupabaseRecipeRepository(_client_returning([]))

        with pytest.raises(RepositoryError):
            repo.insert_recipe(RecipeRecord(id=None, title="Soup"))

    def test_update_missing_recipe(self) -> None:
        repo = SupabaseRecipeRepository(_client_returning([]))

        with pytest.raises(RecipeNotFoundError):
            repo.update_recipe("x", {"title": "New"})


class TestSupabaseFavoritesRepository:
    def test_list_favorite_ids(self) -> None:
        client = _client_returning([{"recipe_id": "a"}, {"recipe_id": None}, {"recipe_id": "b"}])

        assert SupabaseFavoritesRepository(client).list_favorite_ids("u1") == ["a", "b"]
        client.table.assert_called_with("user_favorites")

    def test_add_upserts_pair(self) -> None:
        client = _client_returning([])

        SupabaseFavoritesRepository(client).add("u1", "r1")

        upsert = client.table.return_value.upsert
        payload = upsert.call_args.args[0]
        assert (payload["user_id"], payload["recipe_id"]) == ("u1", "r1")
        assert upsert.call_args.kwargs["on_conflict"] == "user_id,recipe_id"

    def test_remove_network_error(self) -> None:
        repo = SupabaseFavoritesRepository(_client_raising(TimeoutError("slow")))

        with pytest.raises(RepositoryError):
            repo.remove("u1", "r1")


class TestSupabaseUserRepository:
    def test_set_role(self) -> None:
        client = _client_returning([{"id": "u1", "role": "admin", "created_at": "2024-01-01T00:00:00Z"}])

        profile = SupabaseUserRepository(client).set_role("u1", Role.ADMIN)

        client.table.return_value.update.assert_called_with({"role": "admin"})
        assert profile.is_admin is True
        assert profile.created_at is not None

    def test_set_role_unknown_user(self) -> None:
        with pytest.raises(UserNotFoundError):
            SupabaseUserRepository(_client_returning([])).set_role("ghost", Role.READ)

    def test_create_user_upserts_profile(self) -> None:
        client = _client_returning([{"id": "u1", "role": "admin", "email": "a@example.com"}])

        profile = SupabaseUserRepository(client).create_user(UserProfile(id="u1", role=Role.ADMIN, email="a@example.com"))

        payload = client.table.return_value.upsert.call_args.args[0]
        assert payload["role"] == "admin"
        assert client.table.return_value.upsert.call_args.kwargs == {"on_conflict": "id", "ignore_duplicates": True}
        assert profile.is_admin is True

    def test_create_user_network_error(self) -> None:
        with pytest.raises(RepositoryError):
            SupabaseUserRepository(_client_raising(TimeoutError("slow"))).create_user(UserProfile(id="u1", role=Role.EDIT))
