# src/app/services/ranking.py
"""
Per-viewer ordering of the members of one version group.

Tiers, highest priority first:
1. favorited by the viewer
2. authored by the viewer
3. lower version ordinal

Ties that survive every tier keep their input order.
"""
from __future__ import annotations

from functools import cmp_to_key
from typing import Callable, Iterable, Optional, Sequence

from src.app.domain.models import RecipeRecord
from src.app.services.versioning import version_ordinals

FavoritePredicate = Callable[[str, Optional[str]], bool]


def favorite_predicate(favorite_ids: Iterable[str]) -> FavoritePredicate:
    """Bind an is_favorite(viewer_id, recipe_id) check over an already-fetched id set."""
    ids = frozenset(str(rid) for rid in favorite_ids if rid)

    def is_favorite(viewer_id: str, recipe_id: Optional[str]) -> bool:
        return bool(viewer_id) and recipe_id is not None and recipe_id in ids

    return is_favorite


def rank_group(
    members: Sequence[RecipeRecord],
    viewer_id: Optional[str] = None,
    is_favorite: Optional[FavoritePredicate] = None,
    all_records: Optional[Sequence[RecipeRecord]] = None,
) -> list[RecipeRecord]:
    """
    Return a new list with the members in display order for viewer_id.

    The favorite tier needs both a viewer and a predicate, the ownership tier
    needs a viewer, and the ordinal tier needs all_records; a tier whose
    inputs are missing counts as a tie.
    """
    if len(members) < 2:
        return list(members)

    favorites_enabled = bool(viewer_id) and is_favorite is not None
    ownership_enabled = bool(viewer_id)
    ordinals = version_ordinals(all_records) if all_records is not None else None

    def favored(record: RecipeRecord) -> bool:
        return bool(is_favorite(viewer_id, record.id))  # type: ignore[misc, arg-type]

    def ordinal(record: RecipeRecord) -> int:
        if ordinals is None or record.id is None:
            return 0
        return ordinals.get(record.id, 0)

    def compare(a: RecipeRecord, b: RecipeRecord) -> int:
        if favorites_enabled:
            a_fav, b_fav = favored(a), favored(b)
            if a_fav != b_fav:
                return -1 if a_fav else 1

        if ownership_enabled:
            a_own = a.author_id == viewer_id
            b_own = b.author_id == viewer_id
            if a_own != b_own:
                return -1 if a_own else 1

        return ordinal(a) - ordinal(b)

    return sorted(members, key=cmp_to_key(compare))


def top_recipe(
    members: Sequence[RecipeRecord],
    viewer_id: Optional[str] = None,
    is_favorite: Optional[FavoritePredicate] = None,
    all_records: Optional[Sequence[RecipeRecord]] = None,
) -> Optional[RecipeRecord]:
    ranked = rank_group(members, viewer_id, is_favorite, all_records)
    return ranked[0] if ranked else None
