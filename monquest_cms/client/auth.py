"""Client-side auth context holding the active admin session."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from monquest_cms.client.errors import ApiError, DebugDisabledError
from monquest_cms.client.events import EventBus
from monquest_cms.client.session_store import Session, SessionStore
from monquest_cms.core import permissions as perms
from monquest_cms.core.config import settings

logger = logging.getLogger("monquest.client.auth")


@dataclass
class LoginResult:
    success: bool
    error: Optional[str] = None


class AuthContext:
    """Owns the session and mirrors every change into the store."""

    def __init__(self, store: SessionStore, api=None, bus: Optional[EventBus] = None):
        self.store = store
        self.api = api
        self.bus = bus or EventBus()
        self.session: Optional[Session] = None
        self.is_loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def initialize(self) -> Optional[Session]:
        """Adopt the cached session; the synchronizer verifies it later."""
        self.session = self.store.load()
        self.is_loading = False
        return self.session

    async def login(self, email: str, password: str) -> LoginResult:
        try:
            session = await self.api.login(email, password)
        except ApiError as e:
            return LoginResult(success=False, error=e.message)
        except Exception as e:
            logger.error("Login request failed: %s", e)
            return LoginResult(success=False, error="An error occurred during login")
        self.replace_session(session)
        return LoginResult(success=True)

    async def logout(self) -> None:
        if self.api is not None and self.session is not None:
            try:
                await self.api.logout()
            except Exception as e:
                logger.warning("Server logout failed, clearing local session anyway: %s", e)
        self.session = None
        self.store.clear()

    def replace_session(self, session: Session) -> None:
        """Swap the whole session object and persist it."""
        self.session = session
        self.store.save(session)

    def has_permission(self, permission: str) -> bool:
        return perms.has_permission(self.session, permission)

    def has_any_permission(self, permissions: Iterable[str]) -> bool:
        return perms.has_any_permission(self.session, permissions)

    def has_all_permissions(self, permissions: Iterable[str]) -> bool:
        return perms.has_all_permissions(self.session, permissions)

    def is_super_admin(self) -> bool:
        return perms.is_super_admin(self.session)

    def debug_snapshot(self) -> dict:
        if not settings.DEBUG:
            raise DebugDisabledError("debug_snapshot requires DEBUG=true")
        cached = self.store.load()
        return {
            "isLoading": self.is_loading,
            "isAuthenticated": self.is_authenticated,
            "session": self.session.model_dump(by_alias=True) if self.session else None,
            "cached": cached.model_dump(by_alias=True) if cached else None,
            "storePath": str(self.store.path),
        }
