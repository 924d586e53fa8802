"""Live tests against the public TheMealDB API.

Run with:
    RUN_LIVE_TESTS=true pytest tests/integration -v
"""

import pytest

from recipe_ideas.catalog.catalog import load_catalog
from recipe_ideas.session.session import RecipeSession

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_catalog_contains_common_ingredients(live_client) -> None:
    catalog = await load_catalog(live_client)
    folded = {name.casefold() for name in catalog}
    assert "chicken" in folded
    assert "garlic" in folded


@pytest.mark.asyncio
async def test_lookup_known_recipe(live_client) -> None:
    recipe = await live_client.lookup_by_id("52772")
    assert recipe is not None
    assert recipe.name == "Teriyaki Chicken Casserole"
    assert 0 < len(recipe.ingredients) <= 20


@pytest.mark.asyncio
async def test_unknown_ingredient_has_no_candidates(live_client) -> None:
    assert await live_client.filter_by_ingredient("definitely-not-an-ingredient") == []


@pytest.mark.asyncio
async def test_session_search_chicken_garlic(live_client) -> None:
    session = RecipeSession(live_client)

    chicken = {s.id for s in await live_client.filter_by_ingredient("chicken")}
    garlic = {s.id for s in await live_client.filter_by_ingredient("garlic")}
    await session.set_ingredients(["chicken", "garlic"])
    await session.set_max_minutes(70)

    assert session.state.error is None
    assert len(session.state.recipes) <= 20
    assert {r.id for r in session.state.recipes} <= chicken & garlic
