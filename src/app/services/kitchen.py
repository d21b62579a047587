# src/app/services/kitchen.py
"""
The kitchen listing: one entry per recipe group, showing the version the
viewer should see first.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from src.app.domain.models import KitchenEntry, RecipeGroup, RecipeRecord
from src.app.services.ranking import favorite_predicate, rank_group
from src.app.services.versioning import group_by_original


def _matches(group: RecipeGroup, needle: str) -> bool:
    return any(needle in (member.title or "").lower() for member in group.members)


def build_kitchen(
    all_records: Sequence[RecipeRecord],
    viewer_id: Optional[str],
    favorite_ids: Iterable[str] = (),
    *,
    favorites_only: bool = False,
    search_term: Optional[str] = None,
) -> list[KitchenEntry]:
    favorites = {str(rid) for rid in favorite_ids if rid}
    groups = group_by_original(all_records)

    if favorites_only:
        groups = [g for g in groups if any(m.id in favorites for m in g.members)]

    # the trimmed term is both the filter switch and the match
    needle = (search_term or "").strip().lower()
    if needle:
        groups = [g for g in groups if _matches(g, needle)]

    groups.sort(key=lambda g: (g.original.title or "").lower())

    is_favorite = favorite_predicate(favorites)
    return [
        KitchenEntry(
            group=group,
            ranked=rank_group(group.members, viewer_id, is_favorite, all_records),
        )
        for group in groups
    ]
