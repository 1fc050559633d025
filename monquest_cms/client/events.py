"""In-process broadcast channel between client components."""

import asyncio
import logging
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger("monquest.client.events")

PERMISSIONS_UPDATED = "permissionsUpdated"
NOTIFICATION_CREATED = "notificationCreated"


class EventBus:
    """Payload-less named events.

    Callbacks may be plain functions or coroutine functions; coroutines are
    scheduled on the running loop. One failing subscriber never stops the
    others from being notified.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = defaultdict(list)

    def subscribe(self, name: str, callback: Callable) -> Callable[[], None]:
        self._subscribers[name].append(callback)

        def unsubscribe():
            try:
                self._subscribers[name].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def subscriber_count(self, name: str) -> int:
        return len(self._subscribers.get(name, ()))

    def emit(self, name: str) -> None:
        for callback in list(self._subscribers.get(name, ())):
            try:
                result = callback()
                if asyncio.iscoroutine(result):
                    task = asyncio.get_running_loop().create_task(result)
                    task.add_done_callback(_log_task_failure)
            except Exception:
                logger.exception("Subscriber for %s failed", name)


def _log_task_failure(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Async subscriber failed", exc_info=task.exception())
