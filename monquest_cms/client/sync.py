"""Background reconciliation of the cached session with the server."""

import asyncio
import enum
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx

from monquest_cms.client.auth import AuthContext
from monquest_cms.client.errors import ApiError
from monquest_cms.client.events import PERMISSIONS_UPDATED, EventBus
from monquest_cms.client.session_store import Session
from monquest_cms.core.config import settings

logger = logging.getLogger("monquest.client.sync")

PERMISSIONS_UPDATED_TOAST = "Permissions updated"
INVALID_SESSION_STATUSES = (401, 404)


class SyncOutcome(str, enum.Enum):
    UNCHANGED = "unchanged"
    UPDATED = "updated"
    STALE = "stale"
    FAILED = "failed"
    INVALIDATED = "invalidated"
    SKIPPED = "skipped"


def permissions_changed(old: Optional[Session], new: Session) -> bool:
    """Role swap or a different permission set, ignoring order."""
    if old is None:
        return True
    if old.role.id != new.role.id:
        return True
    return sorted(old.role.permissions) != sorted(new.role.permissions)


class AuthSynchronizer:
    """Polls ``/api/auth/me`` while the admin area is open.

    Responses are applied in request order: a reply older than the last
    applied one is dropped. Transport errors and 5xx leave the cached
    session alone; 401/404 or an inactive account log the user out.
    """

    def __init__(
        self,
        auth: AuthContext,
        api,
        bus: Optional[EventBus] = None,
        interval: Optional[float] = None,
        on_toast: Optional[Callable[[str], None]] = None,
    ):
        self.auth = auth
        self.api = api
        self.bus = bus or auth.bus
        self.interval = settings.SYNC_INTERVAL_SECONDS if interval is None else interval
        self.on_toast = on_toast
        self._task: Optional[asyncio.Task] = None
        self._issued = 0
        self._applied = 0
        self._depth = 0
        if hasattr(api, "refresh_callback") and api.refresh_callback is None:
            api.refresh_callback = self.force_refresh

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        if self.running or not self.auth.is_authenticated:
            return False
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Session sync started (every %ss)", self.interval)
        return True

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug("Session sync stopped")

    def enter_protected_area(self) -> None:
        self._depth += 1
        self.start()

    def leave_protected_area(self) -> None:
        self._depth = max(0, self._depth - 1)
        if self._depth == 0:
            self.stop()

    @asynccontextmanager
    async def protected_area(self):
        self.enter_protected_area()
        try:
            yield self
        finally:
            self.leave_protected_area()

    async def _run(self) -> None:
        while self.auth.is_authenticated:
            await self.sync()
            if not self.auth.is_authenticated:
                break
            await asyncio.sleep(self.interval)
        self._task = None

    async def force_refresh(self) -> SyncOutcome:
        return await self.sync()

    def _superseded(self, requested: Session) -> bool:
        """The signed-in user changed while a request was in flight."""
        active = self.auth.session
        return active is None or active.id != requested.id

    async def sync(self) -> SyncOutcome:
        current = self.auth.session
        if current is None:
            return SyncOutcome.SKIPPED

        self._issued += 1
        seq = self._issued
        try:
            fresh = await self.api.fetch_me(current.id)
        except ApiError as e:
            if seq < self._applied or self._superseded(current):
                return SyncOutcome.STALE
            if e.status in INVALID_SESSION_STATUSES:
                logger.info("Session rejected by server (%s), logging out", e.status)
                self._applied = seq
                await self.auth.logout()
                return SyncOutcome.INVALIDATED
            logger.warning("Session sync failed: %s", e)
            return SyncOutcome.FAILED
        except (httpx.HTTPError, OSError) as e:
            logger.warning("Session sync failed: %s", e)
            return SyncOutcome.FAILED

        if seq < self._applied:
            logger.debug("Dropping stale sync response %s (applied %s)", seq, self._applied)
            return SyncOutcome.STALE
        if self._superseded(current) or fresh.id != current.id:
            logger.debug("Dropping sync response for %s, session changed meanwhile", current.id)
            return SyncOutcome.STALE
        self._applied = seq

        if fresh.status != "ACTIVE":
            logger.info("Account %s is %s, logging out", fresh.id, fresh.status)
            await self.auth.logout()
            return SyncOutcome.INVALIDATED

        if not permissions_changed(self.auth.session, fresh):
            return SyncOutcome.UNCHANGED
        self.auth.replace_session(fresh)

        logger.info("Permissions changed for %s (role %s)", fresh.id, fresh.role.slug)
        self.bus.emit(PERMISSIONS_UPDATED)
        if self.on_toast is not None:
            self.on_toast(PERMISSIONS_UPDATED_TOAST)
        return SyncOutcome.UPDATED
