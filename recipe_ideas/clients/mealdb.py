"""Async TheMealDB client.

This module provides the MealDBClient class wrapping the three read-only
endpoints used for recipe discovery:

- list.php?i=list   -> every known ingredient
- filter.php?i=NAME -> recipe summaries containing one ingredient
- lookup.php?i=ID   -> one full recipe record

Transport failures, non-2xx responses and payloads that are not JSON objects
raise MealDBError. There is no retry; callers decide whether a failure is
fatal (ingredient candidates) or can be dropped (single detail lookups).
"""

import asyncio
from typing import Any, Optional

import aiohttp

from recipe_ideas.models.models import RecipeDetail, RecipeSummary
from recipe_ideas.utils.config import config
from recipe_ideas.utils.logger import logger


class MealDBError(ConnectionError):
    """Upstream request failed or returned an unusable payload."""


class MealDBClient:
    """Thin async wrapper over TheMealDB JSON API.

    Owns one aiohttp.ClientSession, created lazily on first request unless one
    is passed in. Use as an async context manager or call close() when done.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """Initialize MealDBClient with configuration.

        Args:
            base_url: API root including the key segment. Defaults to config.api_root.
            timeout_seconds: Total timeout per request. Defaults to REQUEST_TIMEOUT_SECONDS
                (None keeps the aiohttp default).
            session: Existing session to reuse. The client does not close sessions it did not create.
        """
        self.base_url = (base_url or config.api_root).rstrip("/")
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else config.REQUEST_TIMEOUT_SECONDS
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "MealDBClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            kwargs: dict[str, Any] = {}
            if self.timeout_seconds is not None:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get_json(self, endpoint: str, params: dict[str, str]) -> dict:
        """GET ``endpoint`` and return the decoded JSON object.

        Raises:
            MealDBError: On transport errors, HTTP errors or a non-object payload.
        """
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"GET {url} params={params}")
        try:
            session = self._get_session()
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                # TheMealDB does not always send application/json
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise MealDBError(f"Request to {endpoint} failed: {e}") from e
        except ValueError as e:
            raise MealDBError(f"Invalid JSON from {endpoint}: {e}") from e

        if not isinstance(payload, dict):
            raise MealDBError(f"Unexpected payload from {endpoint}: {type(payload).__name__}")
        return payload

    @staticmethod
    def _meals(payload: dict) -> list[dict]:
        """The ``meals`` list of a payload; null or a placeholder string means no matches."""
        meals = payload.get("meals")
        if not isinstance(meals, list):
            return []
        return [meal for meal in meals if isinstance(meal, dict)]

    async def list_ingredients(self) -> list[str]:
        """Return every ingredient name, as returned upstream (unsorted, untrimmed)."""
        payload = await self._get_json("list.php", {"i": "list"})
        return [meal.get("strIngredient") for meal in self._meals(payload)]

    async def filter_by_ingredient(self, ingredient: str) -> list[RecipeSummary]:
        """Return summaries of recipes containing ``ingredient`` (empty list for no match)."""
        payload = await self._get_json("filter.php", {"i": ingredient})
        return [RecipeSummary.from_api(meal) for meal in self._meals(payload) if meal.get("idMeal")]

    async def lookup_by_id(self, recipe_id: str) -> Optional[RecipeDetail]:
        """Return the full record for ``recipe_id``, or None when upstream has no such recipe."""
        payload = await self._get_json("lookup.php", {"i": recipe_id})
        meals = self._meals(payload)
        if not meals or not meals[0].get("idMeal"):
            return None
        return RecipeDetail.from_api(meals[0])
