import httpx
import pytest

from client_support import make_session
from monquest_cms.client.errors import ApiError, NotAuthenticatedError, PermissionDeniedError
from monquest_cms.client.events import NOTIFICATION_CREATED, EventBus
from monquest_cms.client.http import AdminApiClient


def build(handler, session=None, bus=None):
    current = {"session": session if session is not None else make_session()}
    api = AdminApiClient(
        "http://cms.test", lambda: current["session"], bus=bus,
        transport=httpx.MockTransport(handler),
    )
    return api, current


async def test_requests_carry_user_header():
    seen = []

    def handler(request):
        seen.append(request.headers.get("x-user-id"))
        return httpx.Response(200, json={"ok": True})

    api, _ = build(handler)
    assert await api.request("GET", "/api/content") == {"ok": True}
    assert seen == ["user-1"]


async def test_request_without_session_fails_fast():
    api, current = build(lambda r: httpx.Response(200, json={}))
    current["session"] = None
    with pytest.raises(NotAuthenticatedError):
        await api.request("GET", "/api/content")


async def test_notification_header_emits_on_bus():
    bus = EventBus()
    fired = []
    bus.subscribe(NOTIFICATION_CREATED, lambda: fired.append(True))
    api, _ = build(
        lambda r: httpx.Response(200, json={}, headers={"X-Notification-Created": "true"}),
        bus=bus,
    )
    await api.request("PUT", "/api/content/hero", json={"data": {"title": "x"}})
    assert fired == [True]


async def test_forbidden_refreshes_once_then_retries():
    statuses = iter([403, 200])
    refreshes = []

    def handler(request):
        return httpx.Response(next(statuses), json={"success": True})

    api, current = build(handler)

    async def refresh():
        refreshes.append(True)
        current["session"] = make_session(["panel.access", "content.edit"])

    api.refresh_callback = refresh
    assert await api.request("PUT", "/api/content/hero") == {"success": True}
    assert refreshes == [True]


async def test_second_forbidden_raises_permission_denied():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(403, json={"success": False, "error": "Forbidden"})

    api, _ = build(handler)
    refreshes = []

    async def refresh():
        refreshes.append(True)

    api.refresh_callback = refresh
    with pytest.raises(PermissionDeniedError) as exc:
        await api.request("DELETE", "/api/roles/r1")
    assert exc.value.status == 403
    assert len(calls) == 2
    assert refreshes == [True]


async def test_error_message_comes_from_body():
    api, _ = build(lambda r: httpx.Response(409, json={"success": False, "error": "Email already exists"}))
    with pytest.raises(ApiError) as exc:
        await api.request("POST", "/api/users", json={})
    assert exc.value.status == 409
    assert exc.value.message == "Email already exists"


async def test_unread_count_reads_pagination_total():
    def handler(request):
        assert request.url.params["unreadOnly"] == "true"
        assert request.url.params["limit"] == "1"
        return httpx.Response(200, json={"data": {"pagination": {"total": 7}}})

    api, _ = build(handler)
    assert await api.unread_count() == 7


async def test_fetch_me_parses_session_and_surfaces_status():
    payload = make_session(["panel.access"]).model_dump(by_alias=True)
    api, _ = build(lambda r: httpx.Response(200, json={"success": True, "user": payload}))
    me = await api.fetch_me("user-1")
    assert me.role.permissions == ["panel.access"]

    missing, _ = build(lambda r: httpx.Response(404, json={"success": False, "error": "User not found"}))
    with pytest.raises(ApiError) as exc:
        await missing.fetch_me("user-1")
    assert exc.value.status == 404


async def test_fetch_me_rejects_record_of_another_user():
    payload = make_session(user_id="user-2").model_dump(by_alias=True)
    api, _ = build(lambda r: httpx.Response(200, json={"success": True, "user": payload}))
    with pytest.raises(ApiError) as exc:
        await api.fetch_me("user-1")
    assert exc.value.status == 502
