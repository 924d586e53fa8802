"""Heuristic recipe classification.

TheMealDB has no cooking time, diet or meal-time fields, so they are
estimated from ingredient names, instructions, category, name and tags.
Keyword lists live in KeywordTables so tests (or callers) can swap them.

Classification is best effort:
- A seafood dish is also "Non-Veg"; "Non-Veg" only excludes drinks.
- Meal times only match when the label appears in the name or tags.
"""

import re
from typing import Annotated, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from recipe_ideas.models.models import FilterConfig, RecipeDetail
from recipe_ideas.utils.config import config

BASE_MINUTES = 10
MINUTES_PER_INGREDIENT = 2
MINUTES_PER_STEP = 2
MAX_ESTIMATED_MINUTES = 120
# Instruction segments of this length or shorter are not counted as steps
MIN_STEP_LENGTH = 6

_STEP_SPLIT = re.compile(r"\n|\.|\r")


def _compile(words: tuple[str, ...]) -> Optional[re.Pattern]:
    if not words:
        return None
    return re.compile("|".join(re.escape(w) for w in words), re.IGNORECASE)


class KeywordTables(BaseModel):
    """Keyword lists used for diet classification."""

    model_config = ConfigDict(frozen=True)

    meat: Annotated[tuple[str, ...], Field(description="Land-animal meat keywords")] = (
        "chicken", "beef", "pork", "mutton", "lamb", "bacon",
    )
    seafood: Annotated[tuple[str, ...], Field(description="Fish and shellfish keywords")] = (
        "fish", "shrimp", "prawn", "crab", "clam", "oyster", "tuna", "salmon",
    )
    drink: Annotated[tuple[str, ...], Field(description="Matched against category and recipe name")] = (
        "drink", "beverage", "shake", "smoothie", "cocktail", "juice",
    )
    seafood_category: str = "seafood"

    def non_veg_pattern(self) -> Optional[re.Pattern]:
        return _compile(self.meat + self.seafood)

    def seafood_pattern(self) -> Optional[re.Pattern]:
        return _compile(self.seafood)

    def drink_pattern(self) -> Optional[re.Pattern]:
        return _compile(self.drink)


DEFAULT_KEYWORDS = KeywordTables()


class DietFacts(NamedTuple):
    is_veg: bool
    is_seafood: bool
    is_drink: bool


def _search(pattern: Optional[re.Pattern], text: str) -> bool:
    return bool(pattern and pattern.search(text))


def count_steps(instructions: str) -> int:
    """Number of instruction segments (split on newline, period, CR) longer than MIN_STEP_LENGTH."""
    return sum(1 for segment in _STEP_SPLIT.split(instructions or "") if len(segment.strip()) > MIN_STEP_LENGTH)


def estimate_cook_time(recipe: RecipeDetail) -> int:
    """Crude cooking-time estimate in minutes, always within [10, 120].

    10 minutes base, plus 2 per ingredient, plus 2 per instruction step.
    """
    total = BASE_MINUTES + MINUTES_PER_INGREDIENT * len(recipe.ingredients) + MINUTES_PER_STEP * count_steps(
        recipe.instructions
    )
    return min(MAX_ESTIMATED_MINUTES, round(total))


def format_minutes(minutes: Optional[int]) -> str:
    """Display bucket for an estimated cooking time."""
    if not minutes:
        return "-"
    if minutes > 60:
        return "> 1 hr"
    if minutes == 60:
        return "1 hr"
    for low in (50, 40, 30, 20, 10):
        if minutes >= low:
            return f"{low}-{low + 10} mins"
    return "< 10 mins"


def classify_diet(recipe: RecipeDetail, keywords: KeywordTables = DEFAULT_KEYWORDS) -> DietFacts:
    ingredients = " ".join(name.lower() for name in recipe.ingredient_names)
    category = recipe.category.lower()

    is_veg = not _search(keywords.non_veg_pattern(), ingredients)
    is_seafood = _search(keywords.seafood_pattern(), ingredients) or keywords.seafood_category in category
    is_drink = _search(keywords.drink_pattern(), f"{category} {recipe.name}")
    return DietFacts(is_veg=is_veg, is_seafood=is_seafood, is_drink=is_drink)


def cuisine_matches(recipe: RecipeDetail, filters: FilterConfig) -> bool:
    if not filters.cuisines:
        return True
    area = recipe.area.lower()
    category = recipe.category.lower()
    return any(c.value.lower() in area or c.value.lower() in category for c in filters.cuisines)


def time_matches(minutes: int, filters: FilterConfig, no_limit_minutes: Optional[int] = None) -> bool:
    """True when within max_minutes, or when max_minutes is at/above the no-limit sentinel."""
    sentinel = config.NO_LIMIT_MINUTES if no_limit_minutes is None else no_limit_minutes
    return minutes <= filters.max_minutes or filters.max_minutes >= sentinel


def diet_matches(facts: DietFacts, filters: FilterConfig) -> bool:
    if not filters.diets:
        return True
    for diet in filters.diets:
        if diet == "Veg" and facts.is_veg:
            return True
        if diet == "Non-Veg" and not facts.is_veg and not facts.is_drink:
            return True
        if diet == "Sea-food" and facts.is_seafood:
            return True
        if diet == "Drinks" and facts.is_drink:
            return True
    return False


def meal_time_matches(recipe: RecipeDetail, filters: FilterConfig) -> bool:
    if not filters.meal_times:
        return True
    haystacks = (recipe.name.lower(), (recipe.tags or "").lower())
    return any(label.lower() in text for label in filters.meal_times for text in haystacks)


def recipe_matches(
    recipe: RecipeDetail,
    filters: FilterConfig,
    keywords: KeywordTables = DEFAULT_KEYWORDS,
    no_limit_minutes: Optional[int] = None,
) -> bool:
    """Whether ``recipe`` passes all four filters (cuisine, time, diet, meal time)."""
    return (
        cuisine_matches(recipe, filters)
        and time_matches(estimate_cook_time(recipe), filters, no_limit_minutes)
        and diet_matches(classify_diet(recipe, keywords), filters)
        and meal_time_matches(recipe, filters)
    )
