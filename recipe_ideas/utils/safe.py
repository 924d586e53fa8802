"""Error handling helpers for operations that degrade instead of failing.

Used where a failure has a sensible fallback:
- Catalog loading: empty catalog means "no suggestions"
- Single recipe lookups: a failed id is dropped from the result list
"""

from typing import Any, Awaitable, Optional

from recipe_ideas.utils.logger import logger


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning", extra: Optional[dict] = None) -> None:
    """Log error with appropriate level.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        extra: Optional record extras (e.g. {"generation": 3}).
    """
    msg = f"{operation_name}: {exception}"
    if log_level == "debug":
        logger.debug(msg, extra=extra)
    elif log_level == "error":
        logger.error(msg, extra=extra)
    else:
        logger.warning(msg, extra=extra)


async def safe_execute_async(
    coro: Awaitable,
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
    extra: Optional[dict] = None,
) -> Any:
    """Safely execute async operation with consistent error logging.

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Lookup recipe 52772").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.
        extra: Optional log record extras.

    Returns:
        Result of coroutine if successful, otherwise default_return (unless reraise=True).

    Raises:
        Exception: Original exception if reraise=True.

    Example:
        names = await safe_execute_async(client.list_ingredients(), "Load catalog", default_return=[])
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level, extra)
        if reraise:
            raise
        return default_return
