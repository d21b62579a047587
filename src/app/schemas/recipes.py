from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class CapabilitiesResponse(BaseModel):
    canEdit: bool
    canCreateVersion: bool
    canDelete: bool


class RecipeResponse(BaseModel):
    id: str
    title: str
    parentId: Optional[str] = None
    authorId: Optional[str] = None
    createdAt: Optional[str] = None
    versionCreatedFrom: Optional[str] = None
    versionNumber: int = 0
    data: dict[str, Any] = Field(default_factory=dict)


class RankedRecipe(RecipeResponse):
    isFavorite: bool = False
    capabilities: CapabilitiesResponse


class KitchenItem(BaseModel):
    groupId: str
    recipe: RecipeResponse
    versionCount: int
    isFavorite: bool = False


class VersionGroupResponse(BaseModel):
    originalId: str
    versionCount: int
    items: list[RankedRecipe] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    data: Optional[dict[str, Any]] = None
