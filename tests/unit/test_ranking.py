from __future__ import annotations

from src.app.domain.models import RecipeRecord
from src.app.services.ranking import favorite_predicate, rank_group, top_recipe


ORIGINAL = RecipeRecord(id="o", author_id="U1", created_at="2024-01-01T00:00:00Z", title="Stew")
V1 = RecipeRecord(id="v1", parent_id="o", author_id="U2", created_at="2024-02-01T00:00:00Z", title="Stew")
V2 = RecipeRecord(id="v2", parent_id="o", author_id="U1", created_at="2024-03-01T00:00:00Z", title="Stew")
ALL = [ORIGINAL, V1, V2]


def _only_v1(viewer_id: str, recipe_id: str | None) -> bool:
    return viewer_id == "U1" and recipe_id == "v1"


class CountingPredicate:
    def __init__(self, favorite_ids: set[str]) -> None:
        self.favorite_ids = favorite_ids
        self.calls = 0

    def __call__(self, viewer_id: str, recipe_id: str | None) -> bool:
        self.calls += 1
        return recipe_id in self.favorite_ids


class TestRankGroupTiers:
    def test_favorite_then_owned_then_ordinal(self) -> None:
        ranked = rank_group([ORIGINAL, V1, V2], "U1", _only_v1, ALL)

        assert [r.id for r in ranked] == ["v1", "o", "v2"]

    def test_tier_order_independent_of_input_order(self) -> None:
        ranked = rank_group([V2, V1, ORIGINAL], "U1", _only_v1, ALL)

        assert [r.id for r in ranked] == ["v1", "o", "v2"]

    def test_no_viewer_falls_back_to_ordinal(self) -> None:
        ranked = rank_group([V2, ORIGINAL, V1], None, _only_v1, ALL)

        assert [r.id for r in ranked] == ["o", "v1", "v2"]

    def test_without_predicate_ownership_decides(self) -> None:
        ranked = rank_group([V1, V2, ORIGINAL], "U2", None, ALL)

        assert [r.id for r in ranked] == ["v1", "o", "v2"]

    def test_predicate_ignored_without_viewer(self) -> None:
        predicate = CountingPredicate({"v2"})

        ranked = rank_group([ORIGINAL, V1, V2], None, predicate, ALL)

        assert [r.id for r in ranked] == ["o", "v1", "v2"]
        assert predicate.calls == 0

    def test_without_all_records_keeps_input_order_on_ties(self) -> None:
        ranked = rank_group([V2, V1, ORIGINAL], None, None, None)

        assert [r.id for r in ranked] == ["v2", "v1", "o"]

    def test_favorites_bound_from_ids(self) -> None:
        is_favorite = favorite_predicate(["v2"])

        ranked = rank_group([ORIGINAL, V1, V2], "U2", is_favorite, ALL)

        assert [r.id for r in ranked] == ["v2", "v1", "o"]


class TestRankGroupStability:
    def test_equal_records_keep_each_input_order(self) -> None:
        # Unfavorited, not owned by the viewer, all ordinal 0.
        a = RecipeRecord(id="a", author_id="U3")
        b = RecipeRecord(id="b", author_id="U3")
        c = RecipeRecord(id="c", author_id="U3")

        first = rank_group([a, b, c], "U1", _only_v1, [a, b, c])
        second = rank_group([c, a, b], "U1", _only_v1, [a, b, c])

        assert [r.id for r in first] == ["a", "b", "c"]
        assert [r.id for r in second] == ["c", "a", "b"]

    def test_input_is_not_mutated(self) -> None:
        members = [V2, V1, ORIGINAL]

        ranked = rank_group(members, "U1", _only_v1, ALL)

        assert members == [V2, V1, ORIGINAL]
        assert ranked is not members


class TestRankGroupEdges:
    def test_empty_group(self) -> None:
        assert rank_group([], "U1", _only_v1, ALL) == []

    def test_single_member_skips_comparisons(self) -> None:
        predicate = CountingPredicate({"o"})

        assert rank_group([ORIGINAL], "U1", predicate, ALL) == [ORIGINAL]
        assert predicate.calls == 0

    def test_top_recipe(self) -> None:
        assert top_recipe([ORIGINAL, V1, V2], "U1", _only_v1, ALL) is V1
        assert top_recipe([], "U1") is None


class TestFavoritePredicate:
    def test_requires_viewer_and_recipe(self) -> None:
        is_favorite = favorite_predicate({"r1", ""})

        assert is_favorite("U1", "r1") is True
        assert is_favorite("U1", "r2") is False
        assert is_favorite("", "r1") is False
        assert is_favorite("U1", None) is False
