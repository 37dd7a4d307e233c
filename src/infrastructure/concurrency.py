"""Helpers for throttled fan-out, per-user gating and superseded-request detection."""

import asyncio
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, Sequence, TypeVar

from loguru import logger

from domain.exceptions import ImportInProgressError

T = TypeVar("T")
R = TypeVar("R")


async def batch_requests(
    items: Sequence[T],
    batch_size: int,
    fn: Callable[[T], Awaitable[R]],
    delay: float = 1.0,
) -> list[R | BaseException]:
    """
    Run ``fn`` over items in fixed-size groups. Calls within a group run
    concurrently; groups are separated by ``delay`` seconds. Results keep
    item order; failures are returned in place of results.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be positive")

    results: list[R | BaseException] = []
    for start in range(0, len(items), batch_size):
        batch = items[start : start + batch_size]
        logger.debug(f"Running batch {start // batch_size + 1} ({len(batch)} item(s))")
        results.extend(await asyncio.gather(*(fn(item) for item in batch), return_exceptions=True))
        if start + batch_size < len(items):
            await asyncio.sleep(delay)
    return results


class RequestGeneration:
    """
    Per-key generation counter. A token stays current until a newer
    request for the same key begins.
    """

    def __init__(self) -> None:
        self._current: dict[str, int] = {}

    def begin(self, key: str) -> int:
        token = self._current.get(key, 0) + 1
        self._current[key] = token
        return token

    def is_current(self, key: str, token: int) -> bool:
        return self._current.get(key) == token


class ImportGate:
    """
    One in-flight collection write per user, shared by every service that
    rewrites a user's problems.
    """

    def __init__(self) -> None:
        self._active: set[str] = set()

    def is_active(self, user_id: str) -> bool:
        return user_id in self._active

    def enter(self, user_id: str) -> None:
        if user_id in self._active:
            raise ImportInProgressError(user_id)
        self._active.add(user_id)

    def leave(self, user_id: str) -> None:
        self._active.discard(user_id)

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        self.enter(user_id)
        try:
            yield
        finally:
            self.leave(user_id)
