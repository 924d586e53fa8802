"""Data models for recipe discovery.

Defines Pydantic models for upstream TheMealDB records, filter selection,
search results and the in-memory session state.
All models use Pydantic v2 for validation and JSON serialization.
"""

from typing import Any, List, Literal, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recipe_ideas.utils.config import config

# Upstream records carry at most this many ingredient/measure slots
MAX_INGREDIENT_SLOTS = 20

MealTime = Literal["Breakfast", "Lunch", "Snack", "Dinner"]
Diet = Literal["Veg", "Non-Veg", "Sea-food", "Drinks"]

MEAL_TIMES: tuple[str, ...] = ("Breakfast", "Lunch", "Snack", "Dinner")
DIETS: tuple[str, ...] = ("Veg", "Non-Veg", "Sea-food", "Drinks")


def _text(value: Any) -> str:
    """Upstream text field as a trimmed string ("" for null)."""
    if value is None:
        return ""
    return str(value).strip()


class IngredientLine(BaseModel):
    """One populated ingredient slot of a recipe."""

    model_config = ConfigDict(str_strip_whitespace=True)

    ingredient: Annotated[str, Field(min_length=1, description="Ingredient name")]
    measure: Annotated[str, Field(description="Free-text measure, may be empty")] = ""


class RecipeSummary(BaseModel):
    """Minimal record returned by the filter-by-ingredient endpoint."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: Annotated[str, Field(min_length=1, description="TheMealDB idMeal")]
    name: Annotated[str, Field(description="Recipe name")] = ""
    thumbnail: Annotated[Optional[str], Field(description="Thumbnail image URL")] = None

    @classmethod
    def from_api(cls, meal: dict) -> "RecipeSummary":
        """Build from an upstream ``{idMeal, strMeal, strMealThumb}`` record."""
        return cls(
            id=_text(meal.get("idMeal")),
            name=_text(meal.get("strMeal")),
            thumbnail=_text(meal.get("strMealThumb")) or None,
        )


class RecipeDetail(BaseModel):
    """Full recipe record returned by the lookup endpoint.

    ``ingredients`` keeps slot order and only holds populated slots; a slot
    whose ingredient is empty or null is skipped together with its measure.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: Annotated[str, Field(min_length=1, description="TheMealDB idMeal")]
    name: Annotated[str, Field(description="Recipe name")] = ""
    category: Annotated[str, Field(description="Category, e.g. Seafood, Dessert")] = ""
    area: Annotated[str, Field(description="Cuisine region, e.g. Indian")] = ""
    instructions: Annotated[str, Field(description="Free-text cooking instructions")] = ""
    thumbnail: Annotated[Optional[str], Field(description="Thumbnail image URL")] = None
    ingredients: Annotated[
        List[IngredientLine],
        Field(default_factory=list, max_length=MAX_INGREDIENT_SLOTS, description="Populated ingredient slots"),
    ]
    tags: Annotated[Optional[str], Field(description="Comma-separated free-text tags")] = None
    youtube: Annotated[Optional[str], Field(description="Video URL")] = None
    source: Annotated[Optional[str], Field(description="Original recipe URL")] = None

    @classmethod
    def from_api(cls, meal: dict) -> "RecipeDetail":
        """Build from an upstream lookup record (``strIngredient1..20`` / ``strMeasure1..20``)."""
        lines = []
        for slot in range(1, MAX_INGREDIENT_SLOTS + 1):
            ingredient = _text(meal.get(f"strIngredient{slot}"))
            if ingredient:
                lines.append(IngredientLine(ingredient=ingredient, measure=_text(meal.get(f"strMeasure{slot}"))))

        return cls(
            id=_text(meal.get("idMeal")),
            name=_text(meal.get("strMeal")),
            category=_text(meal.get("strCategory")),
            area=_text(meal.get("strArea")),
            instructions=_text(meal.get("strInstructions")),
            thumbnail=_text(meal.get("strMealThumb")) or None,
            ingredients=lines,
            tags=_text(meal.get("strTags")) or None,
            youtube=_text(meal.get("strYoutube")) or None,
            source=_text(meal.get("strSource")) or None,
        )

    @property
    def ingredient_names(self) -> list[str]:
        return [line.ingredient for line in self.ingredients]


class CuisineOption(BaseModel):
    """Cuisine token: display label plus the value matched against area/category."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    label: Annotated[str, Field(min_length=1)]
    value: Annotated[str, Field(min_length=1)]


CUISINE_OPTIONS: tuple[CuisineOption, ...] = (
    CuisineOption(label="North Indian", value="Indian"),
    CuisineOption(label="South Indian", value="Indian"),
    CuisineOption(label="Chinese", value="Chinese"),
    CuisineOption(label="Americans", value="American"),
    CuisineOption(label="Russians", value="Russian"),
)


def _dedupe(items: list, key=lambda item: item) -> list:
    seen = set()
    unique = []
    for item in items:
        k = key(item)
        if k not in seen:
            seen.add(k)
            unique.append(item)
    return unique


class FilterConfig(BaseModel):
    """Active selection criteria. An empty category means no restriction."""

    cuisines: Annotated[List[CuisineOption], Field(default_factory=list, description="Chosen cuisine tokens")]
    max_minutes: Annotated[
        int,
        Field(
            default_factory=lambda: config.DEFAULT_MAX_MINUTES,
            ge=0,
            description="Maximum estimated cooking time; values >= NO_LIMIT_MINUTES mean unbounded",
        ),
    ]
    meal_times: Annotated[List[MealTime], Field(default_factory=list, description="Chosen meal-time labels")]
    diets: Annotated[List[Diet], Field(default_factory=list, description="Chosen diet labels")]

    @field_validator("cuisines")
    @classmethod
    def unique_cuisines(cls, cuisines: list[CuisineOption]) -> list[CuisineOption]:
        """Cuisine tokens are unique by label."""
        return _dedupe(cuisines, key=lambda option: option.label)

    @field_validator("meal_times", "diets")
    @classmethod
    def unique_labels(cls, labels: list[str]) -> list[str]:
        return _dedupe(labels)


class Favourite(BaseModel):
    """Favourited recipe, kept for the lifetime of the session."""

    id: Annotated[str, Field(min_length=1)]
    name: str = ""


class SearchResult(BaseModel):
    """Outcome of one pipeline run as seen by the session."""

    recipes: Annotated[List[RecipeDetail], Field(default_factory=list)]
    selected: Optional[RecipeDetail] = None
    error: Annotated[Optional[str], Field(description="User-facing error message")] = None
    generation: Annotated[int, Field(ge=0, description="Run number this result belongs to")] = 0
    applied: Annotated[bool, Field(description="Whether the result reached session state")] = False


class SessionState(BaseModel):
    """Everything the rendering layer needs, owned by a single session."""

    ingredients: Annotated[List[str], Field(default_factory=list, description="Chosen ingredients, insertion order")]
    filters: Annotated[FilterConfig, Field(default_factory=FilterConfig)]
    recipes: Annotated[List[RecipeDetail], Field(default_factory=list)]
    selected: Optional[RecipeDetail] = None
    favourites: Annotated[List[Favourite], Field(default_factory=list)]
    loading: bool = False
    error: Optional[str] = None
    generation: Annotated[int, Field(ge=0, description="Latest triggered run number")] = 0
