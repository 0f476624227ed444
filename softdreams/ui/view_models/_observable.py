"""Observable base class for view-models.

Published fields notify subscribers when assigned, and background work
started by a view-model lives exactly as long as the view-model does.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, ClassVar, TypeAlias

logger = logging.getLogger(__name__)

ChangeCallback: TypeAlias = Callable[[str, Any], None]


class ObservableObject:
    """Base class for observable view state.

    Subclasses list their published attribute names in ``PUBLISHED``;
    assigning one of them calls every subscriber with ``(name, value)``.
    Views can also bind directly to the attributes (NiceGUI ``bind_*``).
    """

    PUBLISHED: ClassVar[tuple[str, ...]] = ()

    def __init__(self) -> None:
        object.__setattr__(self, "_subscribers", [])
        object.__setattr__(self, "_tasks", set())

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in self.PUBLISHED:
            self._publish(name, value)

    def _publish(self, name: str, value: Any) -> None:
        for callback in list(self._subscribers):
            try:
                callback(name, value)
            except Exception:
                # A broken view must not break state updates
                logger.exception("Subscriber failed for %s.%s", type(self).__name__, name)

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register *callback* for published changes.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        """Run *coro* as a detached background task owned by this view-model.

        Without a running event loop (CLI, scripts) the coroutine runs to
        completion before returning.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, running %s inline", name)
            asyncio.run(coro)
            return
        task = loop.create_task(coro, name=f"{type(self).__name__}.{name}")
        self._tasks.add(task)
        task.add_done_callback(self._task_finished)
        logger.debug("Background task started: %s (active: %d)", name, len(self._tasks))

    def _task_finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Background task %s failed", task.get_name(), exc_info=error)

    @property
    def has_background_tasks(self) -> bool:
        """True while background tasks are still running."""
        return any(not task.done() for task in self._tasks)

    async def wait_for_background_tasks(self) -> None:
        """Wait until every background task started so far has finished.

        Tasks started while waiting are awaited as well.
        """
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Cancel background tasks and drop subscribers."""
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._subscribers.clear()
        logger.debug("%s closed", type(self).__name__)
