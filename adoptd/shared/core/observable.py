"""
Observable state primitives for per-session state services.

Each state service owns one snapshot and lets callers subscribe to it.
Dependent services wait on the session readiness gate before their first
fetch, and fire-and-forget remote work runs as tracked background tasks
whose failures are logged rather than lost.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Generic, List, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar('S')

Listener = Callable[[Any], Any]


class Readiness:
    """
    One-shot gate that opens when the session has resolved.

    Resolved means the initial session lookup finished, successfully or not;
    ``authenticated`` tells which.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.authenticated = False

    @property
    def resolved(self) -> bool:
        return self._event.is_set()

    def resolve(self, authenticated: bool):
        self.authenticated = authenticated
        self._event.set()

    async def wait(self) -> bool:
        await self._event.wait()
        return self.authenticated


class BackgroundTasks:
    """
    Tracked set of fire-and-forget tasks.

    Holding a reference keeps tasks from being garbage collected mid-flight;
    the done callback logs any failure.
    """

    def __init__(self, owner: str = "scope"):
        self.owner = owner
        self._tasks: Set[asyncio.Task] = set()
        self._stats = {"spawned": 0, "failed": 0}

    def spawn(self, coro: Awaitable, name: str) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        task.set_name(f"{self.owner}:{name}")
        self._tasks.add(task)
        self._stats["spawned"] += 1
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._stats["failed"] += 1
            logger.error(
                f"Background task {task.get_name()} failed: {error}",
                exc_info=(type(error), error, error.__traceback__),
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def get_stats(self) -> dict:
        return {**self._stats, "pending": self.pending}

    async def drain(self):
        """Wait for every in-flight task; failures were already logged."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self):
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()


class FreshnessToken:
    """Monotonic request counter; only the latest issued token may apply results."""

    def __init__(self):
        self._current = 0

    def issue(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current


class StateService(ABC, Generic[S]):
    """
    Base class for an observable state service.

    Subclasses implement ``snapshot`` and ``refresh`` and call ``broadcast``
    after every change.
    """

    name: str = "state"

    def __init__(self, readiness: Optional[Readiness] = None,
                 tasks: Optional[BackgroundTasks] = None):
        self.readiness = readiness or Readiness()
        self.tasks = tasks or BackgroundTasks(self.name)
        self._listeners: List[Listener] = []
        self._freshness = FreshnessToken()
        self.loading = False

    @property
    @abstractmethod
    def snapshot(self) -> S:
        """Current immutable view of the state."""

    @abstractmethod
    async def refresh(self) -> S:
        """Re-read authoritative state from the remote gateway."""

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with each new snapshot.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)
        logger.debug(f"Listener subscribed to {self.name}")

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def broadcast(self):
        snapshot = self.snapshot
        for listener in list(self._listeners):
            try:
                result = listener(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Listener on {self.name} failed: {e}", exc_info=True)

    async def start(self):
        """Wait for the session gate, then load when a user is signed in."""
        if await self.readiness.wait():
            await self.refresh()
