from __future__ import annotations

from pydantic import BaseModel, Field


class FavoritesResponse(BaseModel):
    recipeIds: list[str] = Field(default_factory=list)


class FavoriteStatus(BaseModel):
    recipeId: str
    isFavorite: bool
