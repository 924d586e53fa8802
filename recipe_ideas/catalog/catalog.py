"""Ingredient catalog loading.

The catalog is fetched once per session and never changes afterwards. Any
failure yields an empty catalog so autosuggest degrades to "no suggestions".
"""

from typing import Iterable, Optional

from recipe_ideas.clients.mealdb import MealDBClient
from recipe_ideas.utils.logger import logger
from recipe_ideas.utils.safe import safe_execute_async


def normalize_catalog(names: Iterable[Optional[str]]) -> list[str]:
    """Trim, drop empty and duplicate names, then sort case-insensitively.

    Args:
        names: Raw names as returned upstream; may contain None or blanks.

    Returns:
        Sorted list of unique names, original casing preserved.
    """
    seen: set[str] = set()
    cleaned: list[str] = []
    for name in names:
        if not isinstance(name, str):
            continue
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            cleaned.append(name)
    return sorted(cleaned, key=lambda n: (n.casefold(), n))


async def load_catalog(client: MealDBClient) -> list[str]:
    """Fetch the full ingredient list once.

    Returns:
        Sorted ingredient names, or [] if the request or payload failed.
    """
    raw = await safe_execute_async(
        client.list_ingredients(),
        "Load ingredient catalog",
        log_level="warning",
        default_return=[],
    )
    catalog = normalize_catalog(raw)
    logger.info(f"Ingredient catalog loaded: {len(catalog)} names")
    return catalog
