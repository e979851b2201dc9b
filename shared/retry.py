"""
Retry logic with exponential backoff and jitter.

Every external generation/storage call goes through `with_retry`, either directly
or via the `retry_with_backoff` decorator.
"""

import asyncio
import functools
import random
from typing import Awaitable, Callable, Type, Tuple, Any, TypeVar

from shared.logging import get_logger

T = TypeVar("T")
logger = get_logger("retry")

# Upper bound of the random jitter added on top of the exponential delay
MAX_JITTER_SECONDS = 2.0

# Retry policies used by the provider adapters
SUBMISSION_MAX_RETRIES = 5     # image / video submission
LIGHT_MAX_RETRIES = 1          # customization, music
DEFAULT_BASE_DELAY = 1.0


def compute_delay(attempt: int, base_delay: float) -> float:
    """Backoff delay for a zero-based attempt index: base * 2^attempt + U(0, 2s)."""
    return base_delay * (2 ** attempt) + random.uniform(0, MAX_JITTER_SECONDS)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = DEFAULT_BASE_DELAY,
    retryable_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    name: str = None
) -> T:
    """
    Run an async operation, retrying on failure with exponential backoff.

    The operation is called at most ``max_retries + 1`` times. Once retries are
    exhausted the last exception is re-raised unchanged.

    Args:
        operation: Zero-argument coroutine factory
        max_retries: Number of retries after the initial call
        base_delay: Base delay in seconds
        retryable_exceptions: Exception types that trigger a retry. Defaults to
            every Exception; anything else propagates immediately.
        name: Name used in log messages (defaults to the operation's __name__)

    Returns:
        The operation's result
    """
    op_name = name or getattr(operation, "__name__", "operation")
    attempt = 0

    while True:
        try:
            return await operation()
        except retryable_exceptions as e:
            if attempt >= max_retries:
                logger.error(
                    f"All {max_retries + 1} attempts failed for {op_name}",
                    extra={"error": str(e), "attempts": attempt + 1}
                )
                raise
            delay = compute_delay(attempt, base_delay)
            logger.warning(
                f"Retry attempt {attempt + 1}/{max_retries} for {op_name} "
                f"after {delay:.2f}s delay",
                extra={"error": str(e), "attempt": attempt + 1, "delay": delay}
            )
            await asyncio.sleep(delay)
            attempt += 1


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = DEFAULT_BASE_DELAY,
    retryable_exceptions: Tuple[Type[BaseException], ...] = (Exception,)
):
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_retries: Retries after the initial call (default: 3)
        base_delay: Base delay in seconds for exponential backoff (default: 1)
        retryable_exceptions: Exception types to retry on (default: all)

    Example:
        @retry_with_backoff(max_retries=5, base_delay=1)
        async def submit_job():
            return await client.submit(...)
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"retry_with_backoff requires an async function, got {func.__name__}")

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            return await with_retry(
                lambda: func(*args, **kwargs),
                max_retries=max_retries,
                base_delay=base_delay,
                retryable_exceptions=retryable_exceptions,
                name=func.__name__
            )

        return async_wrapper

    return decorator
