"""Session state and orchestration for recipe discovery.

RecipeSession owns one SessionState: chosen ingredients, filters, current
results and selection, favourites, and the run generation counter. Every
ingredient or filter change triggers a fresh pipeline run. Runs may overlap;
only the most recently triggered run is allowed to write its result.

Nothing here is persisted; favourites live as long as the session object.
"""

import json
import uuid
from typing import Callable, Optional, Union

from recipe_ideas.catalog.autosuggest import suggest
from recipe_ideas.catalog.catalog import load_catalog
from recipe_ideas.clients.mealdb import MealDBClient
from recipe_ideas.models.models import (
    CUISINE_OPTIONS,
    CuisineOption,
    Favourite,
    FilterConfig,
    RecipeDetail,
    SearchResult,
    SessionState,
)
from recipe_ideas.pipeline.classify import DEFAULT_KEYWORDS, KeywordTables
from recipe_ideas.pipeline.search import SEARCH_ERROR_MESSAGE, SearchPipelineError, search_recipes
from recipe_ideas.utils.logger import logger

Observer = Callable[[SessionState], None]


def _toggle(items: list, item) -> list:
    return [x for x in items if x != item] if item in items else [*items, item]


class RecipeSession:
    """In-memory recipe discovery session.

    Args:
        client: MealDB client shared by catalog loading and searches.
        keywords: Diet keyword tables passed to the pipeline.
        max_results: Cap on looked-up ids per run (default MAX_RESULTS).
        no_limit_minutes: Cooking-time sentinel (default NO_LIMIT_MINUTES).
        session_id: Identifier attached to log records. Random if omitted.
    """

    def __init__(
        self,
        client: MealDBClient,
        keywords: KeywordTables = DEFAULT_KEYWORDS,
        max_results: Optional[int] = None,
        no_limit_minutes: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.client = client
        self.keywords = keywords
        self.max_results = max_results
        self.no_limit_minutes = no_limit_minutes
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.state = SessionState()
        self.catalog: list[str] = []
        self._catalog_loaded = False
        self._observers: list[Observer] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self.state)

    # ------------------------------------------------------------------
    # Catalog & suggestions
    # ------------------------------------------------------------------

    async def load_catalog(self) -> list[str]:
        """Fetch the ingredient catalog once; later calls return the cached list."""
        if not self._catalog_loaded:
            self.catalog = await load_catalog(self.client)
            self._catalog_loaded = True
        return self.catalog

    def suggestions(self, query: str, limit: Optional[int] = None) -> list[str]:
        """Autosuggest against the catalog, excluding ingredients already chosen."""
        return suggest(query, self.catalog, self.state.ingredients, limit)

    # ------------------------------------------------------------------
    # Ingredients & filters (each change re-runs the search)
    # ------------------------------------------------------------------

    async def add_ingredient(self, name: str) -> Optional[SearchResult]:
        """Add a trimmed ingredient. Empty names and duplicates are ignored (returns None)."""
        name = (name or "").strip()
        if not name or name.casefold() in {n.casefold() for n in self.state.ingredients}:
            return None
        self.state.ingredients = [*self.state.ingredients, name]
        return await self.refresh()

    async def set_ingredients(self, names: list[str]) -> SearchResult:
        """Replace the chosen ingredients in one step (trimmed, deduplicated, order kept)."""
        chosen: list[str] = []
        for name in names:
            name = (name or "").strip()
            if name and name.casefold() not in {n.casefold() for n in chosen}:
                chosen.append(name)
        self.state.ingredients = chosen
        return await self.refresh()

    async def remove_ingredient(self, name: str) -> Optional[SearchResult]:
        if name not in self.state.ingredients:
            return None
        self.state.ingredients = [n for n in self.state.ingredients if n != name]
        return await self.refresh()

    async def set_filters(self, filters: FilterConfig) -> SearchResult:
        self.state.filters = filters
        return await self.refresh()

    def _updated_filters(self, **changes) -> FilterConfig:
        # Rebuild instead of model_copy so labels are validated
        return FilterConfig(**{**self.state.filters.model_dump(), **changes})

    async def toggle_cuisine(self, option: Union[CuisineOption, str]) -> SearchResult:
        """Toggle a cuisine token, given as an option or one of the CUISINE_OPTIONS labels.

        Raises:
            ValueError: If a label is not a known cuisine option.
        """
        if isinstance(option, str):
            matches = [o for o in CUISINE_OPTIONS if o.label.casefold() == option.strip().casefold()]
            if not matches:
                raise ValueError(f"Unknown cuisine: {option}")
            option = matches[0]
        chosen = self.state.filters.cuisines
        if any(c.label == option.label for c in chosen):
            cuisines = [c for c in chosen if c.label != option.label]
        else:
            cuisines = [*chosen, option]
        return await self.set_filters(self._updated_filters(cuisines=[c.model_dump() for c in cuisines]))

    async def set_max_minutes(self, minutes: int) -> SearchResult:
        return await self.set_filters(self._updated_filters(max_minutes=minutes))

    async def toggle_meal_time(self, label: str) -> SearchResult:
        return await self.set_filters(
            self._updated_filters(meal_times=_toggle(list(self.state.filters.meal_times), label))
        )

    async def toggle_diet(self, label: str) -> SearchResult:
        return await self.set_filters(self._updated_filters(diets=_toggle(list(self.state.filters.diets), label)))

    # ------------------------------------------------------------------
    # Pipeline runs
    # ------------------------------------------------------------------

    async def refresh(self) -> SearchResult:
        """Run the pipeline for the current ingredients and filters.

        The run takes the next generation number. When it finishes, its result
        is applied only if no newer run was triggered meanwhile; otherwise it
        is returned with ``applied=False`` and state is left alone.
        """
        self.state.generation += 1
        generation = self.state.generation
        extra = {"generation": generation, "session_id": self.session_id}
        ingredients = list(self.state.ingredients)
        filters = self.state.filters.model_copy(deep=True)

        self.state.error = None
        self.state.recipes = []
        self.state.selected = None
        self.state.loading = bool(ingredients)
        self._notify()

        try:
            recipes = await search_recipes(
                self.client,
                ingredients,
                filters,
                keywords=self.keywords,
                max_results=self.max_results,
                no_limit_minutes=self.no_limit_minutes,
                generation=generation,
            )
            result = SearchResult(
                recipes=recipes,
                selected=recipes[0] if recipes else None,
                generation=generation,
            )
        except SearchPipelineError as e:
            logger.error(f"Recipe search failed: {e}", exc_info=True, extra=extra)
            result = SearchResult(error=SEARCH_ERROR_MESSAGE, generation=generation)

        if generation != self.state.generation:
            logger.info(
                f"Discarding stale result (latest run is {self.state.generation})",
                extra=extra,
            )
            return result

        self.state.recipes = result.recipes
        self.state.selected = result.selected
        self.state.error = result.error
        self.state.loading = False
        result.applied = True
        self._notify()
        return result

    # ------------------------------------------------------------------
    # Selection & favourites
    # ------------------------------------------------------------------

    def select(self, recipe: Optional[RecipeDetail]) -> None:
        self.state.selected = recipe
        self._notify()

    def select_by_id(self, recipe_id: str) -> Optional[RecipeDetail]:
        """Select a recipe from the current results; unknown ids leave the selection unchanged."""
        for recipe in self.state.recipes:
            if recipe.id == recipe_id:
                self.select(recipe)
                return recipe
        return None

    def is_favourite(self, recipe_id: str) -> bool:
        return any(f.id == recipe_id for f in self.state.favourites)

    def toggle_favourite(self, recipe: RecipeDetail) -> bool:
        """Add the recipe to favourites, or remove it if already there.

        Returns:
            True if the recipe is a favourite after the call.
        """
        if self.is_favourite(recipe.id):
            self.state.favourites = [f for f in self.state.favourites if f.id != recipe.id]
            added = False
        else:
            self.state.favourites = [*self.state.favourites, Favourite(id=recipe.id, name=recipe.name)]
            added = True
        self._notify()
        return added

    def favourites_json(self) -> str:
        """Favourites as indented JSON (id and name per entry)."""
        return json.dumps([f.model_dump() for f in self.state.favourites], indent=2)
