"""Unit tests for the recipe search pipeline."""

import pytest

from recipe_ideas.clients.mealdb import MealDBError
from recipe_ideas.models.models import FilterConfig
from recipe_ideas.pipeline.search import (
    SearchPipelineError,
    cap_ids,
    intersect_candidates,
    search_recipes,
)


class TestIntersectAndCap:
    def test_intersection(self):
        assert intersect_candidates([{"A", "B", "C"}, {"B", "C", "D"}]) == {"B", "C"}

    def test_no_sets(self):
        assert intersect_candidates([]) == set()

    def test_cap_sorts_numerically(self):
        assert cap_ids(["100", "9", "52772", "10"], limit=3) == ["9", "10", "100"]

    def test_cap_default_limit(self):
        assert cap_ids(str(i) for i in range(1, 31)) == [str(i) for i in range(1, 21)]


class TestSearchRecipes:
    """Test the ingredients -> recipes pipeline against an in-memory client."""

    @pytest.mark.asyncio
    async def test_no_ingredients_makes_no_requests(self, make_client) -> None:
        client = make_client()
        assert await search_recipes(client, []) == []
        assert client.filter_calls == []
        assert client.lookup_calls == []

    @pytest.mark.asyncio
    async def test_single_ingredient(self, make_client, make_recipe) -> None:
        client = make_client(
            candidates={"garlic": ["52772", "52795"]},
            details={"52772": make_recipe("52772"), "52795": make_recipe("52795")},
        )

        results = await search_recipes(client, ["garlic"])

        assert [r.id for r in results] == ["52772", "52795"]
        assert client.filter_calls == ["garlic"]

    @pytest.mark.asyncio
    async def test_only_common_recipes_looked_up(self, make_client, make_recipe) -> None:
        client = make_client(
            candidates={"chicken": ["A", "B", "C"], "garlic": ["B", "C", "D"]},
            details={i: make_recipe(i) for i in "ABCD"},
        )

        results = await search_recipes(client, ["chicken", "garlic"])

        assert [r.id for r in results] == ["B", "C"]
        assert sorted(client.filter_calls) == ["chicken", "garlic"]
        assert sorted(client.lookup_calls) == ["B", "C"]

    @pytest.mark.asyncio
    async def test_disjoint_ingredients_give_no_results(self, make_client, make_recipe) -> None:
        client = make_client(candidates={"chocolate": ["1"], "salmon": ["2"]}, details={"1": make_recipe("1")})

        assert await search_recipes(client, ["chocolate", "salmon"]) == []
        assert client.lookup_calls == []

    @pytest.mark.asyncio
    async def test_failed_candidate_fetch_fails_run(self, make_client) -> None:
        client = make_client(candidates={"chicken": ["1"]}, failing=("garlic",))

        with pytest.raises(SearchPipelineError):
            await search_recipes(client, ["chicken", "garlic"])

    @pytest.mark.asyncio
    async def test_failed_or_missing_lookups_dropped(self, make_client, make_recipe) -> None:
        client = make_client(
            candidates={"rice": ["1", "2", "3"]},
            details={"1": make_recipe("1"), "2": MealDBError("timeout"), "3": None},
        )

        results = await search_recipes(client, ["rice"])

        assert [r.id for r in results] == ["1"]
        assert sorted(client.lookup_calls) == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_lookups_capped_to_lowest_ids(self, make_client, make_recipe) -> None:
        ids = [str(i) for i in range(30, 0, -1)]
        client = make_client(candidates={"egg": ids}, details={i: make_recipe(i) for i in ids})

        results = await search_recipes(client, ["egg"])

        assert [r.id for r in results] == [str(i) for i in range(1, 21)]
        assert sorted(client.lookup_calls, key=int) == [str(i) for i in range(1, 21)]

    @pytest.mark.asyncio
    async def test_explicit_max_results(self, make_client, make_recipe) -> None:
        client = make_client(candidates={"egg": ["3", "1", "2"]}, details={i: make_recipe(i) for i in "123"})
        results = await search_recipes(client, ["egg"], max_results=2)
        assert [r.id for r in results] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_filters_applied_to_details(self, make_client, make_recipe) -> None:
        client = make_client(
            candidates={"onion": ["1", "2", "3"]},
            details={
                "1": make_recipe("1", category="Vegetarian", ingredients=("Onion", "Tomato")),
                "2": make_recipe("2", category="Beef", ingredients=("Onion", "Beef")),
                "3": make_recipe("3", category="Seafood", ingredients=("Onion", "Salmon")),
            },
        )

        veg = await search_recipes(client, ["onion"], FilterConfig(diets=["Veg"]))
        seafood = await search_recipes(client, ["onion"], FilterConfig(diets=["Sea-food"]))
        non_veg = await search_recipes(client, ["onion"], FilterConfig(diets=["Non-Veg"]))

        assert [r.id for r in veg] == ["1"]
        assert [r.id for r in seafood] == ["3"]
        assert [r.id for r in non_veg] == ["2", "3"]

    @pytest.mark.asyncio
    async def test_results_are_subset_of_intersection(self, make_client, make_recipe) -> None:
        candidates = {"a": ["1", "2", "3", "4"], "b": ["2", "4", "6"], "c": ["4", "2", "8"]}
        client = make_client(candidates=candidates, details={str(i): make_recipe(str(i)) for i in range(1, 9)})

        results = await search_recipes(client, ["a", "b", "c"])

        common = set(candidates["a"]) & set(candidates["b"]) & set(candidates["c"])
        assert {r.id for r in results} <= common
        assert [r.id for r in results] == ["2", "4"]

    @pytest.mark.asyncio
    async def test_identical_inputs_give_identical_output(self, make_client, make_recipe) -> None:
        client = make_client(candidates={"x": ["7", "3", "5"]}, details={i: make_recipe(i) for i in "357"})

        first = await search_recipes(client, ["x"])
        second = await search_recipes(client, ["x"])

        assert [r.id for r in first] == [r.id for r in second] == ["3", "5", "7"]
