import asyncio

import httpx
import pytest

from client_support import FakeApi, make_session
from monquest_cms.client.auth import AuthContext
from monquest_cms.client.errors import ApiError
from monquest_cms.client.events import PERMISSIONS_UPDATED, EventBus
from monquest_cms.client.session_store import SessionStore
from monquest_cms.client.sync import AuthSynchronizer, SyncOutcome, permissions_changed


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def auth(tmp_path, bus):
    ctx = AuthContext(SessionStore(str(tmp_path / "admin_user.json")), bus=bus)
    ctx.replace_session(make_session(["panel.access", "content.view"]))
    ctx.initialize()
    return ctx


def recorder(bus):
    events = []
    bus.subscribe(PERMISSIONS_UPDATED, lambda: events.append(PERMISSIONS_UPDATED))
    return events


def test_permissions_changed_ignores_order():
    a = make_session(["content.view", "panel.access"])
    b = make_session(["panel.access", "content.view"])
    assert not permissions_changed(a, b)
    assert permissions_changed(a, make_session(["panel.access"]))
    assert permissions_changed(a, make_session(["content.view", "panel.access"], role_id="other"))


async def test_unchanged_sync_is_silent(auth, bus):
    events, toasts = recorder(bus), []
    before = auth.session
    api = FakeApi(make_session(["content.view", "panel.access"]))
    sync = AuthSynchronizer(auth, api, on_toast=toasts.append)

    assert await sync.sync() == SyncOutcome.UNCHANGED
    assert await sync.sync() == SyncOutcome.UNCHANGED
    assert events == [] and toasts == []
    assert auth.session is before


async def test_changed_permissions_replace_session_and_broadcast_once(auth, bus):
    events, toasts = recorder(bus), []
    api = FakeApi(make_session(["panel.access", "content.view", "content.edit"]))
    sync = AuthSynchronizer(auth, api, on_toast=toasts.append)

    assert await sync.sync() == SyncOutcome.UPDATED
    assert await sync.sync() == SyncOutcome.UNCHANGED
    assert events == [PERMISSIONS_UPDATED]
    assert toasts == ["Permissions updated"]
    assert auth.has_permission("content.edit")
    assert auth.store.load().role.permissions == ["panel.access", "content.view", "content.edit"]


async def test_role_swap_is_a_change(auth, bus):
    events = recorder(bus)
    api = FakeApi(make_session(["panel.access", "content.view"], role_id="role_viewer", slug="viewer"))
    assert await AuthSynchronizer(auth, api).sync() == SyncOutcome.UPDATED
    assert auth.session.role.slug == "viewer"
    assert events == [PERMISSIONS_UPDATED]


@pytest.mark.parametrize("status", [401, 404])
async def test_rejected_session_logs_out(auth, status):
    api = FakeApi(ApiError(status, "User not found"))
    assert await AuthSynchronizer(auth, api).sync() == SyncOutcome.INVALIDATED
    assert not auth.is_authenticated
    assert auth.store.load() is None


@pytest.mark.parametrize("error", [ApiError(500, "boom"), httpx.ConnectError("refused")])
async def test_transient_failure_keeps_cached_session(auth, error):
    before = auth.session
    assert await AuthSynchronizer(auth, FakeApi(error)).sync() == SyncOutcome.FAILED
    assert auth.session is before
    assert auth.store.load() == before


async def test_deactivated_account_logs_out(auth):
    api = FakeApi(make_session(["panel.access", "content.view"], status="INACTIVE"))
    assert await AuthSynchronizer(auth, api).sync() == SyncOutcome.INVALIDATED
    assert not auth.is_authenticated


async def test_sync_without_session_is_skipped(auth):
    await auth.logout()
    api = FakeApi(make_session())
    assert await AuthSynchronizer(auth, api).sync() == SyncOutcome.SKIPPED
    assert api.calls == 0


async def test_out_of_order_response_is_dropped(auth, bus):
    events = recorder(bus)
    release_first = asyncio.Event()
    replies = [make_session(["panel.access"]), make_session(["panel.access", "users.view"])]

    class SlowFirstApi(FakeApi):
        async def fetch_me(self, user_id):
            self.calls += 1
            if self.calls == 1:
                await release_first.wait()
                return replies[0]
            return replies[1]

    sync = AuthSynchronizer(auth, SlowFirstApi())
    first = asyncio.create_task(sync.sync())
    await asyncio.sleep(0)
    assert await sync.sync() == SyncOutcome.UPDATED
    release_first.set()
    assert await first == SyncOutcome.STALE

    assert auth.has_permission("users.view")
    assert events == [PERMISSIONS_UPDATED]


async def test_polling_runs_only_inside_protected_area(auth):
    api = FakeApi(make_session(["panel.access", "content.view"]))
    sync = AuthSynchronizer(auth, api, interval=0.01)

    async with sync.protected_area():
        assert sync.running
        await asyncio.sleep(0.05)
    assert not sync.running

    polled = api.calls
    assert polled >= 2
    await asyncio.sleep(0.03)
    assert api.calls == polled


async def test_start_requires_authenticated_session(auth):
    await auth.logout()
    sync = AuthSynchronizer(auth, FakeApi(make_session()), interval=0.01)
    assert sync.start() is False
    assert not sync.running


async def test_polling_stops_after_logout(auth):
    api = FakeApi(ApiError(401, "gone"))
    sync = AuthSynchronizer(auth, api, interval=0.01)
    sync.start()
    await asyncio.sleep(0.05)
    assert not sync.running
    assert api.calls == 1


def test_synchronizer_wires_forced_refresh_into_api(auth):
    api = FakeApi(make_session())
    sync = AuthSynchronizer(auth, api)
    assert api.refresh_callback == sync.force_refresh


def slow_api(reply):
    """fetch_me blocks until the returned event is set, then yields ``reply``."""
    gate = asyncio.Event()

    class SlowApi(FakeApi):
        async def fetch_me(self, user_id):
            self.calls += 1
            await gate.wait()
            if isinstance(reply, Exception):
                raise reply
            return reply

    return SlowApi(), gate


async def test_reply_for_previous_user_is_dropped_after_relogin(auth, bus):
    events = recorder(bus)
    api, release = slow_api(make_session(["panel.access", "users.view"], user_id="user-1"))
    sync = AuthSynchronizer(auth, api)

    pending = asyncio.create_task(sync.sync())
    await asyncio.sleep(0)
    await auth.logout()
    auth.replace_session(make_session(["panel.access"], role_id="role_viewer",
                                      slug="viewer", user_id="user-2"))
    release.set()

    assert await pending == SyncOutcome.STALE
    assert auth.session.id == "user-2"
    assert not auth.has_permission("users.view")
    assert auth.store.load().id == "user-2"
    assert events == []


async def test_rejection_for_previous_user_keeps_new_session(auth):
    api, release = slow_api(ApiError(401, "User not found"))
    sync = AuthSynchronizer(auth, api)

    pending = asyncio.create_task(sync.sync())
    await asyncio.sleep(0)
    auth.replace_session(make_session(user_id="user-2"))
    release.set()

    assert await pending == SyncOutcome.STALE
    assert auth.is_authenticated
    assert auth.session.id == "user-2"


async def test_reply_for_another_user_id_is_ignored(auth):
    api = FakeApi(make_session(["panel.access", "users.view"], user_id="someone-else"))
    assert await AuthSynchronizer(auth, api).sync() == SyncOutcome.STALE
    assert auth.session.id == "user-1"
    assert not auth.has_permission("users.view")
