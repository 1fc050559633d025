"""Route guard for admin pages."""

import enum
import logging
from typing import Any, Callable, Iterable, Optional

from monquest_cms.client.auth import AuthContext
from monquest_cms.client.events import PERMISSIONS_UPDATED, EventBus
from monquest_cms.core.permissions import PANEL_ACCESS

logger = logging.getLogger("monquest.client.gate")


class GateState(str, enum.Enum):
    PENDING = "pending"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_UNAUTHORIZED = "redirect_unauthorized"
    REDIRECT_FORBIDDEN = "redirect_forbidden"
    GRANTED = "granted"


class PermissionGate:
    """Decides whether a page renders, or where to send the user instead.

    Navigation happens at most once until the latch is reset by a
    ``permissionsUpdated`` broadcast.
    """

    def __init__(
        self,
        auth: AuthContext,
        bus: EventBus,
        permissions: Iterable[str] = (),
        require_all: bool = False,
        fallback_url: str = "/admin/forbidden",
        navigate: Optional[Callable[[str], None]] = None,
        login_url: str = "/admin/login",
        unauthorized_url: str = "/admin/unauthorized",
    ):
        self.auth = auth
        self.bus = bus
        self.permissions = list(permissions)
        self.require_all = require_all
        self.fallback_url = fallback_url
        self.navigate = navigate
        self.login_url = login_url
        self.unauthorized_url = unauthorized_url
        self.state = GateState.PENDING
        self._redirected = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    def _decide(self) -> GateState:
        if self.auth.is_loading:
            return GateState.PENDING
        if not self.auth.is_authenticated:
            return GateState.REDIRECT_LOGIN
        if not self.auth.has_permission(PANEL_ACCESS):
            return GateState.REDIRECT_UNAUTHORIZED
        if self.permissions:
            if self.require_all:
                allowed = self.auth.has_all_permissions(self.permissions)
            else:
                allowed = self.auth.has_any_permission(self.permissions)
            if not allowed:
                return GateState.REDIRECT_FORBIDDEN
        return GateState.GRANTED

    def _target(self, state: GateState) -> Optional[str]:
        return {
            GateState.REDIRECT_LOGIN: self.login_url,
            GateState.REDIRECT_UNAUTHORIZED: self.unauthorized_url,
            GateState.REDIRECT_FORBIDDEN: self.fallback_url,
        }.get(state)

    def evaluate(self) -> GateState:
        self.state = self._decide()
        target = self._target(self.state)
        if target is not None and not self._redirected:
            self._redirected = True
            logger.debug("Gate redirect to %s (%s)", target, self.state.value)
            if self.navigate is not None:
                self.navigate(target)
        return self.state

    def render(self, children: Any) -> Any:
        return children if self.state == GateState.GRANTED else None

    def _on_permissions_updated(self) -> None:
        self._redirected = False
        self.evaluate()

    def mount(self) -> GateState:
        self._redirected = False
        if self._unsubscribe is None:
            self._unsubscribe = self.bus.subscribe(PERMISSIONS_UPDATED, self._on_permissions_updated)
        return self.evaluate()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
