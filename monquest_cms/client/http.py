"""Async HTTP client for the admin API."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from monquest_cms.client.errors import ApiError, NotAuthenticatedError, PermissionDeniedError
from monquest_cms.client.events import NOTIFICATION_CREATED, EventBus
from monquest_cms.client.session_store import Session

logger = logging.getLogger("monquest.client.http")

NOTIFICATION_HEADER = "X-Notification-Created"
USER_HEADER = "x-user-id"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail") or body.get("message")
        if isinstance(message, str):
            return message
        if message is not None:
            return str(message)
    return response.reason_phrase


class AdminApiClient:
    """Wraps ``httpx.AsyncClient`` with session identity and 403 recovery.

    ``refresh_callback`` is wired by the synchronizer to its
    ``force_refresh``; a 403 triggers at most one refresh and one retry.
    """

    def __init__(
        self,
        base_url: str,
        session_provider: Callable[[], Optional[Session]],
        bus: Optional[EventBus] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.session_provider = session_provider
        self.bus = bus
        self.refresh_callback: Optional[Callable[[], Awaitable[Any]]] = None
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _identity(self) -> Dict[str, str]:
        session = self.session_provider()
        if session is None:
            raise NotAuthenticatedError("No active session")
        return {USER_HEADER: session.id}

    def _after_response(self, response: httpx.Response) -> None:
        if self.bus is not None and response.headers.get(NOTIFICATION_HEADER, "").lower() == "true":
            self.bus.emit(NOTIFICATION_CREATED)

    async def _send(self, method: str, path: str, headers: Dict[str, str], **kwargs) -> httpx.Response:
        response = await self._client.request(method, path, headers=headers, **kwargs)
        self._after_response(response)
        return response

    async def request(self, method: str, path: str, authenticated: bool = True, **kwargs) -> Any:
        """Send a request and return the decoded JSON body."""
        headers = dict(kwargs.pop("headers", None) or {})
        if authenticated:
            headers.update(self._identity())

        response = await self._send(method, path, headers, **kwargs)

        if response.status_code == 403 and authenticated:
            if self.refresh_callback is None:
                raise PermissionDeniedError(_error_message(response))
            logger.info("403 on %s %s, refreshing permissions before one retry", method, path)
            await self.refresh_callback()
            headers.update(self._identity())
            response = await self._send(method, path, headers, **kwargs)
            if response.status_code == 403:
                raise PermissionDeniedError(_error_message(response))

        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        if not response.content:
            return None
        return response.json()

    async def fetch_me(self, user_id: str) -> Session:
        response = await self._client.get("/api/auth/me", headers={USER_HEADER: user_id})
        self._after_response(response)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        session = _session_from(response.json())
        if session.id != user_id:
            raise ApiError(502, f"Expected user {user_id}, got {session.id}")
        return session

    async def login(self, email: str, password: str) -> Session:
        body = await self.request(
            "POST", "/api/auth/login", authenticated=False,
            json={"email": email, "password": password},
        )
        return _session_from(body)

    async def logout(self) -> None:
        headers = {}
        session = self.session_provider()
        if session is not None:
            headers[USER_HEADER] = session.id
        await self.request("POST", "/api/auth/logout", authenticated=False, headers=headers)

    async def unread_count(self) -> int:
        body = await self.request(
            "GET", "/api/notifications",
            params={"page": 1, "limit": 1, "unreadOnly": "true"},
        )
        return int(body["data"]["pagination"]["total"])


def _session_from(body: Any) -> Session:
    user = body.get("user") if isinstance(body, dict) else None
    if not isinstance(user, dict) or not user.get("role"):
        raise ApiError(502, "Malformed user payload")
    try:
        return Session.model_validate(user)
    except PydanticValidationError as e:
        raise ApiError(502, f"Malformed user payload: {e.error_count()} errors")
