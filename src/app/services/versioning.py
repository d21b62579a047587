# src/app/services/versioning.py
"""
Recipe version graph.

Groups are derived on every read from the flat record list: a record with
no parent_id is an original, and every record whose parent_id names it is
one of its versions. Nothing here mutates its inputs.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from src.app.domain.models import RecipeGroup, RecipeRecord

logger = logging.getLogger(__name__)


def timestamp_of(value: Any) -> float:
    """
    Sort key for a created_at value, in seconds since the epoch.

    Accepts datetimes, ISO-8601 strings and epoch numbers in milliseconds.
    Missing or unparseable values sort as the epoch itself.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, (int, float)):
        return float(value) / 1000.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
            return timestamp_of(datetime.fromisoformat(normalized))
        except ValueError:
            return 0.0
    return 0.0


def is_recipe_version(record: RecipeRecord) -> bool:
    return bool(record.parent_id)


def get_recipe_versions(
    all_records: Iterable[RecipeRecord], recipe_id: Optional[str]
) -> list[RecipeRecord]:
    if not recipe_id:
        return []
    return [r for r in all_records if r.parent_id == recipe_id]


def has_versions(all_records: Iterable[RecipeRecord], recipe_id: Optional[str]) -> bool:
    if not recipe_id:
        return False
    return any(r.parent_id == recipe_id for r in all_records)


def get_parent_recipe(
    all_records: Iterable[RecipeRecord], record: RecipeRecord
) -> Optional[RecipeRecord]:
    if not record.parent_id:
        return None
    for candidate in all_records:
        if candidate.id == record.parent_id:
            return candidate
    return None


def compute_version_ordinal(
    all_records: Sequence[RecipeRecord], record: RecipeRecord
) -> int:
    """
    Position of a record within its group.

    Originals are 0. Versions are numbered from 1 by ascending created_at
    among all records sharing the same parent_id. A record that cannot be
    found among its siblings gets 0.
    """
    if not record.parent_id:
        return 0

    siblings = sorted(
        get_recipe_versions(all_records, record.parent_id),
        key=lambda r: timestamp_of(r.created_at),
    )
    for index, sibling in enumerate(siblings):
        if sibling.id is not None and sibling.id == record.id:
            return index + 1
    return 0


def version_ordinals(all_records: Sequence[RecipeRecord]) -> dict[str, int]:
    """Ordinal of every identified record, computed in one pass over the siblings."""
    by_parent: dict[str, list[RecipeRecord]] = {}
    ordinals: dict[str, int] = {}
    for record in all_records:
        if record.parent_id:
            by_parent.setdefault(record.parent_id, []).append(record)
        elif record.id is not None:
            ordinals.setdefault(record.id, 0)

    # id-less siblings still take a position; a version outranks an original sharing its id
    numbered: set[str] = set()
    for siblings in by_parent.values():
        siblings.sort(key=lambda r: timestamp_of(r.created_at))
        for index, sibling in enumerate(siblings):
            if sibling.id is None or sibling.id in numbered:
                continue
            numbered.add(sibling.id)
            ordinals[sibling.id] = index + 1
    return ordinals


def group_by_original(all_records: Sequence[RecipeRecord]) -> list[RecipeGroup]:
    """
    Partition the records into one group per original.

    Each group holds the original first, followed by its versions in input
    order. Groups appear in the order their first member was encountered.
    Versions whose parent is missing, or is itself a version, belong to no
    group.
    """
    originals: dict[str, RecipeRecord] = {}
    for record in all_records:
        if record.is_original and record.id is not None and record.id not in originals:
            originals[record.id] = record

    versions: dict[str, list[RecipeRecord]] = {}
    order: list[str] = []
    orphans = 0

    for record in all_records:
        root_id = record.id if record.is_original else record.parent_id
        if root_id is None or root_id not in originals:
            orphans += 1
            continue
        if record.is_original and originals[root_id] is not record:
            # duplicate id: the first original with this id owns the group
            orphans += 1
            continue
        if root_id not in versions:
            versions[root_id] = []
            order.append(root_id)
        if not record.is_original:
            versions[root_id].append(record)

    if orphans:
        logger.debug("Skipped %d record(s) without a resolvable original", orphans)

    return [
        RecipeGroup(original=originals[root_id], members=[originals[root_id], *versions[root_id]])
        for root_id in order
    ]


def find_orphans(all_records: Sequence[RecipeRecord]) -> list[RecipeRecord]:
    """Versions whose parent_id does not name an original in the collection."""
    original_ids = {r.id for r in all_records if r.is_original and r.id is not None}
    return [r for r in all_records if r.parent_id and r.parent_id not in original_ids]


def find_group(
    all_records: Sequence[RecipeRecord], recipe_id: str
) -> Optional[RecipeGroup]:
    """The group containing the given record id, if it belongs to one."""
    for group in group_by_original(all_records):
        if any(member.id == recipe_id for member in group.members):
            return group
    return None


def create_recipe_version(
    record: RecipeRecord,
    new_author_id: str,
    *,
    root_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RecipeRecord:
    """
    Build an unsaved fork of a recipe owned by new_author_id.

    The fork points at the root original: forking a version links the new
    record to that version's parent. Callers pass root_id when they already
    resolved it.
    """
    created = (now or datetime.now(timezone.utc)).isoformat()
    parent_id = root_id or record.parent_id or record.id
    data = dict(record.data)
    data.pop("is_favorite", None)
    data.pop("isFavorite", None)
    return replace(
        record,
        id=None,
        parent_id=parent_id,
        author_id=new_author_id,
        created_at=created,
        version_created_from=record.title,
        data=data,
    )
