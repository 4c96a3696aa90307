"""Debounced user search.

Each submitted query bumps a generation counter and (re)starts a delay
timer. Queries shorter than min_length reset the results at once without
calling upstream. Once the timer fires the fetch runs to completion, but its
response is delivered only if no newer query was submitted meanwhile, so a
slow stale response can never overwrite newer results.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from linc_admin.errors import LincAdminError
from linc_admin.schemas.user import User

log = logging.getLogger(__name__)


class SearchResult(BaseModel):
    generation: int
    query: str
    users: list[User] = []
    searched: bool = False
    error: str | None = None


Fetch = Callable[[str], Awaitable[list[User]]]
Deliver = Callable[[SearchResult], Awaitable[None]]


class DebouncedSearch:
    def __init__(
        self,
        fetch: Fetch,
        on_results: Deliver,
        delay: float = 0.5,
        min_length: int = 2,
    ) -> None:
        self._fetch = fetch
        self._on_results = on_results
        self.delay = delay
        self.min_length = min_length
        self.generation = 0
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()

    async def submit(self, query: str) -> int:
        self.generation += 1
        generation = self.generation
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

        if len(query.strip()) < self.min_length:
            await self._on_results(SearchResult(generation=generation, query=query))
            return generation

        task = asyncio.create_task(self._run(generation, query))
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return generation

    async def _run(self, generation: int, query: str) -> None:
        await asyncio.sleep(self.delay)
        # Past the timer; a newer submit must no longer cancel this fetch.
        if self._timer is asyncio.current_task():
            self._timer = None

        try:
            users = await self._fetch(query.strip())
            result = SearchResult(generation=generation, query=query, users=users, searched=True)
        except LincAdminError as exc:
            log.warning("User search for %r failed: %s", query, exc.message)
            result = SearchResult(
                generation=generation,
                query=query,
                searched=True,
                error=exc.message or "Failed to search users",
            )

        if generation != self.generation:
            log.warning("Discarding stale search response for %r (generation %d)", query, generation)
            return
        await self._on_results(result)

    async def drain(self) -> None:
        """Wait for every pending timer and in-flight fetch to finish."""
        while pending := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*pending, return_exceptions=True)

    async def aclose(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()
        self._timer = None
