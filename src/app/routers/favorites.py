# src/app/routers/favorites.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.app.deps import get_favorites_service, get_recipe_repository, get_viewer
from src.app.domain.models import Viewer
from src.app.infra.db.base import RecipeRepository
from src.app.schemas.favorites import FavoritesResponse, FavoriteStatus
from src.app.services.favorites_service import FavoritesService

router = APIRouter(prefix="/favorites", tags=["favorites"])


def _ensure_recipe(repo: RecipeRepository, recipe_id: str) -> None:
    if repo.get_recipe(recipe_id) is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")


@router.get("/", response_model=FavoritesResponse)
async def list_favorites(
    viewer: Viewer = Depends(get_viewer),
    favorites: FavoritesService = Depends(get_favorites_service),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> FavoritesResponse:
    favorites.migrate_global_favorites(viewer.id, repo.list_recipes())
    return FavoritesResponse(recipeIds=favorites.get_favorite_ids(viewer.id))


@router.put("/{recipe_id}", response_model=FavoriteStatus)
async def add_favorite(
    recipe_id: str,
    viewer: Viewer = Depends(get_viewer),
    favorites: FavoritesService = Depends(get_favorites_service),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> FavoriteStatus:
    _ensure_recipe(repo, recipe_id)
    favorites.add_favorite(viewer.id, recipe_id)
    return FavoriteStatus(recipeId=recipe_id, isFavorite=True)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    recipe_id: str,
    viewer: Viewer = Depends(get_viewer),
    favorites: FavoritesService = Depends(get_favorites_service),
) -> Response:
    favorites.remove_favorite(viewer.id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{recipe_id}/toggle", response_model=FavoriteStatus)
async def toggle_favorite(
    recipe_id: str,
    viewer: Viewer = Depends(get_viewer),
    favorites: FavoritesService = Depends(get_favorites_service),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> FavoriteStatus:
    _ensure_recipe(repo, recipe_id)
    now_favorite = favorites.toggle_favorite(viewer.id, recipe_id)
    return FavoriteStatus(recipeId=recipe_id, isFavorite=now_favorite)
