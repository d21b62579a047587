# src/app/routers/recipes.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.app.deps import get_favorites_service, get_recipe_repository, get_viewer
from src.app.domain.errors import RecipeNotFoundError
from src.app.domain.models import ROW_ALIASES, RecipeRecord, Viewer
from src.app.infra.db.base import RecipeRepository
from src.app.schemas.recipes import (
    CapabilitiesResponse,
    KitchenItem,
    RankedRecipe,
    RecipeResponse,
    RecipeUpdate,
    VersionGroupResponse,
)
from src.app.services.capabilities import (
    can_create_version,
    can_delete,
    can_directly_edit,
    capabilities_for,
)
from src.app.services.favorites_service import FavoritesService
from src.app.services.kitchen import build_kitchen
from src.app.services.ranking import favorite_predicate, rank_group
from src.app.services.versioning import create_recipe_version, find_group, version_ordinals

router = APIRouter(prefix="/recipes", tags=["recipes"])

# Every row key that maps onto a versioning column; edits may not touch them.
_PROTECTED_FIELDS = frozenset(
    key
    for attr in ("id", "parent_id", "author_id", "created_at", "version_created_from")
    for key in ROW_ALIASES[attr]
)


def _format_timestamp(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    return str(value)


def _recipe_response(record: RecipeRecord, version_number: int = 0) -> RecipeResponse:
    return RecipeResponse(
        id=record.id or "",
        title=record.title,
        parentId=record.parent_id,
        authorId=record.author_id,
        createdAt=_format_timestamp(record.created_at),
        versionCreatedFrom=record.version_created_from,
        versionNumber=version_number,
        data=record.data,
    )


def _ordinal_in(repo: RecipeRepository, record: RecipeRecord) -> int:
    if record.is_original or record.id is None:
        return 0
    return version_ordinals(repo.list_recipes()).get(record.id, 0)


def _load_recipe(repo: RecipeRepository, recipe_id: str) -> RecipeRecord:
    record = repo.get_recipe(recipe_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
    return record


@router.get("/kitchen", response_model=list[KitchenItem])
async def get_kitchen(
    favorites_only: bool = Query(default=False, alias="favoritesOnly"),
    q: Optional[str] = Query(default=None, max_length=200),
    viewer: Viewer = Depends(get_viewer),
    repo: RecipeRepository = Depends(get_recipe_repository),
    favorites: FavoritesService = Depends(get_favorites_service),
) -> list[KitchenItem]:
    records = repo.list_recipes()
    favorites.migrate_global_favorites(viewer.id, records)
    favorite_ids = set(favorites.get_favorite_ids(viewer.id))
    ordinals = version_ordinals(records)

    entries = build_kitchen(
        records,
        viewer.id,
        favorite_ids,
        favorites_only=favorites_only,
        search_term=q,
    )
    return [
        KitchenItem(
            groupId=entry.group.original.id or "",
            recipe=_recipe_response(entry.top, ordinals.get(entry.top.id or "", 0)),
            versionCount=entry.group.version_count,
            isFavorite=entry.top.id in favorite_ids,
        )
        for entry in entries
    ]


@router.get("/{recipe_id}/versions", response_model=VersionGroupResponse)
async def get_recipe_versions(
    recipe_id: str,
    viewer: Viewer = Depends(get_viewer),
    repo: RecipeRepository = Depends(get_recipe_repository),
    favorites: FavoritesService = Depends(get_favorites_service),
) -> VersionGroupResponse:
    records = repo.list_recipes()
    group = find_group(records, recipe_id)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")

    favorite_ids = favorites.get_favorite_ids(viewer.id)
    is_favorite = favorite_predicate(favorite_ids)
    ordinals = version_ordinals(records)
    ranked = rank_group(group.members, viewer.id, is_favorite, records)

    items: list[RankedRecipe] = []
    for record in ranked:
        caps = capabilities_for(viewer, record)
        base = _recipe_response(record, ordinals.get(record.id or "", 0))
        items.append(
            RankedRecipe(
                **base.model_dump(),
                isFavorite=is_favorite(viewer.id, record.id),
                capabilities=CapabilitiesResponse(
                    canEdit=caps.can_edit,
                    canCreateVersion=caps.can_create_version,
                    canDelete=caps.can_delete,
                ),
            )
        )
    return VersionGroupResponse(
        originalId=group.original.id or "",
        versionCount=group.version_count,
        items=items,
    )


@router.post(
    "/{recipe_id}/versions",
    response_model=RecipeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_version(
    recipe_id: str,
    viewer: Viewer = Depends(get_viewer),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeResponse:
    if not can_create_version(viewer):
        raise HTTPException(status_code=403, detail="Not allowed to create versions")

    source = _load_recipe(repo, recipe_id)
    draft = create_recipe_version(source, str(viewer.id))
    stored = repo.insert_recipe(draft)

    return _recipe_response(stored, _ordinal_in(repo, stored))


@router.patch("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    payload: RecipeUpdate,
    viewer: Viewer = Depends(get_viewer),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeResponse:
    record = _load_recipe(repo, recipe_id)
    if not can_directly_edit(viewer, record):
        raise HTTPException(status_code=403, detail="Not allowed to edit this recipe")

    changes: dict[str, Any] = {}
    if payload.data:
        changes.update({k: v for k, v in payload.data.items() if k not in _PROTECTED_FIELDS})
    if payload.title is not None:
        changes["title"] = payload.title.strip()
    if not changes:
        return _recipe_response(record, _ordinal_in(repo, record))

    try:
        updated = repo.update_recipe(recipe_id, changes)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return _recipe_response(updated, _ordinal_in(repo, updated))


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    viewer: Viewer = Depends(get_viewer),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> Response:
    record = _load_recipe(repo, recipe_id)
    if not can_delete(viewer, record):
        raise HTTPException(status_code=403, detail="Only administrators can delete recipes")
    repo.delete_recipe(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
