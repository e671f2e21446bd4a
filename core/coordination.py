import asyncio
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Dict, Hashable, Set


class MutationInFlight(Exception):
    """Another save for the same form is still running."""


class Superseded(Exception):
    """A newer request for the same panel replaced this one."""


class MutationGate:
    """At most one create/edit per key (user, resource) at a time."""

    def __init__(self):
        self._busy: Set[Hashable] = set()

    def is_busy(self, key: Hashable) -> bool:
        return key in self._busy

    @asynccontextmanager
    async def hold(self, key: Hashable):
        # Single event loop: check-and-add needs no lock
        if key in self._busy:
            raise MutationInFlight(key)
        self._busy.add(key)
        try:
            yield
        finally:
            self._busy.discard(key)


class Supersession:
    """Latest request per key wins; earlier in-flight work is cancelled."""

    def __init__(self):
        self._tasks: Dict[Hashable, asyncio.Task] = {}

    async def run(self, key: Hashable, work: Awaitable[Any]) -> Any:
        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.ensure_future(work)
        self._tasks[key] = task
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled() and self._tasks.get(key) is not task:
                raise Superseded(key)
            raise
        finally:
            if self._tasks.get(key) is task:
                del self._tasks[key]


mutation_gate = MutationGate()
supersession = Supersession()
