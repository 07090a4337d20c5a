"""
Async retry with capped exponential backoff and full jitter.

Used by `rpc.http.RestClient.get` to ride out transient REST failures. Each
sleep is drawn from U(0, min(base * 2**(attempt-1), max_delay)).

    from thorchain_client.errors import TransportError
    from thorchain_client.utils.retry import aretry_call

    resp = await aretry_call(rest._send_once, "GET", url, retries=3, exceptions=TransportError)

Exceptions outside `exceptions` propagate on the first attempt. When attempts
run out, `RetryError` wraps the last one.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple, Type, TypeVar, Union

__all__ = ["RetryError", "backoff_delay", "aretry_call"]

T = TypeVar("T")


class RetryError(RuntimeError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, last_exception: BaseException, attempts: int) -> None:
        super().__init__(f"exhausted after {attempts} attempts: {last_exception!r}")
        self.last_exception = last_exception
        self.attempts = attempts


def backoff_delay(attempt: int, *, base: float, max_delay: float) -> float:
    """Full-jitter delay in seconds for a 1-based `attempt`."""
    cap = min(base * (2 ** (max(attempt, 1) - 1)), max_delay)
    return max(0.0, random.uniform(0.0, cap))


async def aretry_call(
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    retries: int = 3,
    base: float = 0.2,
    max_delay: float = 3.0,
    exceptions: Union[Type[BaseException], Sequence[Type[BaseException]]] = Exception,
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    **kwargs: Any,
) -> T:
    """
    Await `fn(*args, **kwargs)`, retrying up to `retries` extra times.

    `on_retry` receives (attempt, exception, sleep_seconds) before each sleep.
    """
    exc_types: Tuple[Type[BaseException], ...] = (
        (exceptions,) if isinstance(exceptions, type) else tuple(exceptions)
    )

    attempt = 0
    while True:
        attempt += 1
        try:
            return await fn(*args, **kwargs)
        except exc_types as exc:
            if attempt > retries:
                raise RetryError(exc, attempts=attempt) from exc
            delay = backoff_delay(attempt, base=base, max_delay=max_delay)
            if on_retry is not None:
                on_retry(attempt, exc, delay)
            await asyncio.sleep(delay)
