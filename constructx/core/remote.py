"""Request lifecycle of a collection endpoint tied to a changing dependency key."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

from constructx.core.notifications import ToastCenter
from constructx.infrastructure.api import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ERROR = "Failed to load data. Please try again."


async def fetch_all(**requests: Awaitable[Any]) -> dict[str, Any]:
    """Await several requests in parallel; any failure fails the whole batch.

    The remaining requests are cancelled when one fails, so callers never see
    a partially populated result.
    """

    names = list(requests)
    tasks = [asyncio.ensure_future(requests[name]) for name in names]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    return dict(zip(names, results))


class RemoteCollectionStore(Generic[T]):
    """Holds the last successful payload of ``fetch(key)`` plus loading/error flags.

    Every load is tagged with a generation number. Changing the key, starting
    another load or closing the store bumps the generation, and a response
    that arrives for an older generation is dropped without touching state.
    A failed load keeps the previous payload visible and records ``error``.
    """

    def __init__(
        self,
        fetch: Callable[[Any], Awaitable[T]],
        *,
        key: Any = None,
        initial: T | None = None,
        toasts: ToastCenter | None = None,
        error_message: str = DEFAULT_ERROR,
    ) -> None:
        self._fetch = fetch
        self._toasts = toasts
        self._error_message = error_message
        self._generation = 0
        self._closed = False
        self.key = key
        self.data: T | None = initial
        self.is_loading = False
        self.error: str | None = None
        self.loaded = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    async def load(self) -> bool:
        """Fetch for the current key; returns True when the payload was applied."""

        if self._closed:
            return False
        self._generation += 1
        generation = self._generation
        key = self.key
        self.is_loading = True
        try:
            payload = await self._fetch(key)
        except ApiError as exc:
            if generation != self._generation:
                logger.debug("dropping stale failure for key %r: %s", key, exc)
                return False
            logger.warning("load failed for key %r: %s", key, exc)
            self.error = self._error_message
            if self._toasts is not None:
                self._toasts.error(self._error_message)
            return False
        finally:
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.debug("dropping stale response for key %r", key)
            return False
        self.data = payload
        self.error = None
        self.loaded = True
        return True

    async def mount(self) -> bool:
        return await self.load()

    async def set_key(self, key: Any) -> bool:
        """Reload when the dependency key changes; an unchanged key is a no-op."""

        if key == self.key and self.loaded:
            return False
        self.key = key
        return await self.load()

    async def refresh(self) -> bool:
        return await self.load()

    def close(self) -> None:
        self._closed = True
        self._generation += 1
        self.is_loading = False


__all__ = ["DEFAULT_ERROR", "RemoteCollectionStore", "fetch_all"]
