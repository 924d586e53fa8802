"""Shared fixtures for unit tests: recipe builders and an in-memory MealDB client."""

import asyncio
from typing import Optional, Union

import pytest

from recipe_ideas.clients.mealdb import MealDBError
from recipe_ideas.models.models import IngredientLine, RecipeDetail, RecipeSummary


def _recipe(
    recipe_id: str,
    name: str = "Dish",
    category: str = "",
    area: str = "",
    ingredients: tuple = (),
    instructions: str = "",
    tags: Optional[str] = None,
) -> RecipeDetail:
    return RecipeDetail(
        id=recipe_id,
        name=name,
        category=category,
        area=area,
        instructions=instructions,
        ingredients=[IngredientLine(ingredient=i) for i in ingredients],
        tags=tags,
    )


class FakeMealDBClient:
    """MealDBClient stand-in backed by dicts.

    Args:
        candidates: ingredient -> list of recipe ids returned by filter_by_ingredient.
        details: recipe id -> RecipeDetail, None (missing) or an exception to raise.
        catalog: names returned by list_ingredients, or an exception to raise.
        failing: ingredients whose filter request raises MealDBError.
        gates: ingredient -> asyncio.Event the filter request waits on.
    """

    def __init__(
        self,
        candidates: Optional[dict] = None,
        details: Optional[dict] = None,
        catalog: Union[list, Exception, None] = None,
        failing: tuple = (),
        gates: Optional[dict] = None,
    ) -> None:
        self.candidates = candidates or {}
        self.details = details or {}
        self.catalog = catalog if catalog is not None else []
        self.failing = failing
        self.gates = gates or {}
        self.filter_calls: list[str] = []
        self.lookup_calls: list[str] = []
        self.list_calls = 0

    async def list_ingredients(self) -> list:
        self.list_calls += 1
        if isinstance(self.catalog, Exception):
            raise self.catalog
        return list(self.catalog)

    async def filter_by_ingredient(self, ingredient: str) -> list[RecipeSummary]:
        self.filter_calls.append(ingredient)
        if ingredient in self.gates:
            await self.gates[ingredient].wait()
        if ingredient in self.failing:
            raise MealDBError(f"filter failed for {ingredient}")
        return [RecipeSummary(id=i, name=f"Recipe {i}") for i in self.candidates.get(ingredient, [])]

    async def lookup_by_id(self, recipe_id: str) -> Optional[RecipeDetail]:
        self.lookup_calls.append(recipe_id)
        await asyncio.sleep(0)
        value = self.details.get(recipe_id)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def make_recipe():
    """Factory for RecipeDetail objects with sensible defaults."""
    return _recipe


@pytest.fixture
def make_client():
    """Factory for FakeMealDBClient instances."""
    return FakeMealDBClient
