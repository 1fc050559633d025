"""Unread notification badge counter."""

import logging
from typing import Callable, Optional

from monquest_cms.client.events import NOTIFICATION_CREATED, EventBus

logger = logging.getLogger("monquest.client.notifications")


class UnreadCounter:
    def __init__(self, api, bus: EventBus):
        self.api = api
        self.bus = bus
        self.count = 0
        self._unsubscribe: Optional[Callable[[], None]] = None

    def increment(self) -> int:
        self.count += 1
        return self.count

    def decrement(self) -> int:
        self.count = max(0, self.count - 1)
        return self.count

    def set(self, value: int) -> int:
        self.count = max(0, int(value))
        return self.count

    async def refresh(self) -> int:
        """Reload the count from the server; keep the old value on failure."""
        try:
            self.set(await self.api.unread_count())
        except Exception as e:
            logger.warning("Could not refresh unread count: %s", e)
        return self.count

    def mount(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.bus.subscribe(NOTIFICATION_CREATED, self.refresh)

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
