"""Recipe search pipeline: ingredients + filters -> matching recipes.

**Pipeline Steps:**
1. Fetch candidate recipe ids for every ingredient, in parallel. Any failure
   fails the run: an intersection needs every candidate set.
2. Intersect the candidate sets.
3. Cap to the lowest MAX_RESULTS ids (sorted by id, numeric ids numerically).
4. Look up each surviving id, in parallel. A failed or missing lookup is
   dropped and logged.
5. Keep recipes passing the cuisine, time, diet and meal-time filters.

Results keep the order of step 3, so identical inputs give identical output.
"""

import asyncio
from typing import Iterable, Optional, Sequence

from recipe_ideas.clients.mealdb import MealDBClient
from recipe_ideas.models.models import FilterConfig, RecipeDetail
from recipe_ideas.pipeline.classify import DEFAULT_KEYWORDS, KeywordTables, recipe_matches
from recipe_ideas.utils.config import config
from recipe_ideas.utils.logger import logger
from recipe_ideas.utils.safe import safe_execute_async

SEARCH_ERROR_MESSAGE = "Could not load recipes. Please try again."


class SearchPipelineError(RuntimeError):
    """A candidate fetch failed; the run produced no usable result."""


def _id_sort_key(recipe_id: str) -> tuple:
    # Numeric ids sort numerically, before any non-numeric ones
    if recipe_id.isdigit():
        return (0, int(recipe_id), recipe_id)
    return (1, 0, recipe_id)


def intersect_candidates(candidate_sets: Sequence[set[str]]) -> set[str]:
    """Ids present in every candidate set. No sets -> empty set."""
    if not candidate_sets:
        return set()
    return set(candidate_sets[0]).intersection(*candidate_sets[1:])


def cap_ids(ids: Iterable[str], limit: Optional[int] = None) -> list[str]:
    """Sorted ids truncated to ``limit`` (default MAX_RESULTS)."""
    limit = config.MAX_RESULTS if limit is None else limit
    return sorted(set(ids), key=_id_sort_key)[:limit]


async def fetch_candidate_ids(client: MealDBClient, ingredients: Sequence[str]) -> list[set[str]]:
    """One filter-by-ingredient request per ingredient, all in flight together.

    Raises:
        SearchPipelineError: If any request fails.
    """
    try:
        summaries = await asyncio.gather(*(client.filter_by_ingredient(name) for name in ingredients))
    except Exception as e:
        raise SearchPipelineError(f"Candidate fetch failed: {e}") from e

    candidate_sets = [{summary.id for summary in found} for found in summaries]
    for name, ids in zip(ingredients, candidate_sets):
        logger.debug(f"Ingredient {name!r}: {len(ids)} candidates")
    return candidate_sets


async def fetch_details(
    client: MealDBClient,
    ids: Sequence[str],
    generation: Optional[int] = None,
) -> list[RecipeDetail]:
    """Look up every id in parallel; failed or empty lookups are dropped."""
    extra = {"generation": generation} if generation is not None else None
    details = await asyncio.gather(
        *(
            safe_execute_async(
                client.lookup_by_id(recipe_id),
                f"Lookup recipe {recipe_id}",
                log_level="warning",
                default_return=None,
                extra=extra,
            )
            for recipe_id in ids
        )
    )
    found: list[RecipeDetail] = []
    seen: set[str] = set()
    for detail in details:
        if detail is not None and detail.id not in seen:
            seen.add(detail.id)
            found.append(detail)
    if len(found) < len(ids):
        logger.info(f"Dropped {len(ids) - len(found)} of {len(ids)} recipe lookups", extra=extra)
    return found


async def search_recipes(
    client: MealDBClient,
    ingredients: Sequence[str],
    filters: Optional[FilterConfig] = None,
    keywords: KeywordTables = DEFAULT_KEYWORDS,
    max_results: Optional[int] = None,
    no_limit_minutes: Optional[int] = None,
    generation: Optional[int] = None,
) -> list[RecipeDetail]:
    """Run the full pipeline.

    Args:
        client: MealDB client used for both fan-outs.
        ingredients: Chosen ingredient names. Empty -> [] without any request.
        filters: Active filters. Defaults to FilterConfig() (only the default time limit applies).
        keywords: Diet keyword tables.
        max_results: Cap on looked-up ids. Defaults to MAX_RESULTS.
        no_limit_minutes: Cooking-time sentinel. Defaults to NO_LIMIT_MINUTES.
        generation: Run number, attached to log records.

    Returns:
        Matching recipes in capped-id order.

    Raises:
        SearchPipelineError: On any failure other than a single detail lookup.
    """
    if not ingredients:
        return []
    filters = filters if filters is not None else FilterConfig()
    extra = {"generation": generation} if generation is not None else None

    logger.info(f"Searching recipes for {list(ingredients)}", extra=extra)
    candidate_sets = await fetch_candidate_ids(client, ingredients)
    common = intersect_candidates(candidate_sets)
    ids = cap_ids(common, max_results)
    logger.info(f"Intersection: {len(common)} recipes, looking up {len(ids)}", extra=extra)
    if not ids:
        return []

    details = await fetch_details(client, ids, generation)
    try:
        retained = [
            recipe for recipe in details if recipe_matches(recipe, filters, keywords, no_limit_minutes)
        ]
    except Exception as e:
        raise SearchPipelineError(f"Classification failed: {e}") from e

    logger.info(f"Filters kept {len(retained)} of {len(details)} recipes", extra=extra)
    return retained
