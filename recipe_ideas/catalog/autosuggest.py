"""Ingredient autosuggest.

suggest() is a pure function over the catalog. Debouncer delays applying a
query until typing pauses, so suggestions are not recomputed per keystroke.
"""

import asyncio
import inspect
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from recipe_ideas.utils.config import config
from recipe_ideas.utils.logger import logger

T = TypeVar("T")


def suggest(
    query: str,
    catalog: Iterable[str],
    excluded: Iterable[str] = (),
    limit: Optional[int] = None,
) -> list[str]:
    """Return catalog names containing ``query``, case-insensitively.

    Args:
        query: Partial text typed by the user. Empty -> no suggestions.
        catalog: Names in display order (load_catalog sorts them).
        excluded: Names already chosen; compared case-insensitively.
        limit: Maximum number of results. Defaults to MAX_SUGGESTIONS.

    Returns:
        At most ``limit`` names, in catalog order.
    """
    if not query:
        return []
    limit = config.MAX_SUGGESTIONS if limit is None else limit
    needle = query.casefold()
    skip = {name.casefold() for name in excluded}

    matches: list[str] = []
    for name in catalog:
        if len(matches) >= limit:
            break
        folded = name.casefold()
        if needle in folded and folded not in skip:
            matches.append(name)
    return matches


class Debouncer(Generic[T]):
    """Apply only the latest pushed value once it has been stable for ``delay_ms``.

    Every push() cancels the pending application. The callback may be a plain
    function or a coroutine function. push() must be called from a running
    event loop.
    """

    def __init__(self, callback: Callable[[T], Any], delay_ms: Optional[int] = None) -> None:
        self.callback = callback
        self.delay_ms = config.SUGGEST_DEBOUNCE_MS if delay_ms is None else delay_ms
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: T) -> None:
        """Schedule ``value``; supersedes anything pushed earlier and not yet applied."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._apply_later(value))

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None

    async def _apply_later(self, value: T) -> None:
        await asyncio.sleep(self.delay_ms / 1000)
        logger.debug(f"Debounced value applied: {value!r}")
        result = self.callback(value)
        if inspect.isawaitable(result):
            await result
