"""Synchronizer and API client against the real app over ASGI."""

import httpx
import pytest

from conftest import TestingSessionLocal, make_user, role
from monquest_cms.client.auth import AuthContext
from monquest_cms.client.events import NOTIFICATION_CREATED, PERMISSIONS_UPDATED
from monquest_cms.client.http import AdminApiClient
from monquest_cms.client.session_store import SessionStore
from monquest_cms.client.sync import AuthSynchronizer, SyncOutcome
from monquest_cms.db.session import get_db
from monquest_cms.main import app


@pytest.fixture()
def asgi_db(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield db
    app.dependency_overrides.clear()


def client_for(tmp_path, name):
    auth = AuthContext(SessionStore(str(tmp_path / f"{name}.json")))
    api = AdminApiClient(
        "http://cms.test", lambda: auth.session, bus=auth.bus,
        transport=httpx.ASGITransport(app=app),
    )
    auth.api = api
    return auth, api


async def test_role_edit_reaches_signed_in_editor(asgi_db, tmp_path):
    root = make_user(asgi_db, "super_admin", "root@monquest.com")
    editor = make_user(asgi_db, "editor", "editor@monquest.com")
    editor_role_id = role(asgi_db, "editor").id

    admin_auth, admin_api = client_for(tmp_path, "root")
    editor_auth, editor_api = client_for(tmp_path, "editor")
    assert (await admin_auth.login(root.email, "password123")).success
    assert (await editor_auth.login(editor.email, "password123")).success
    assert not editor_auth.has_permission("users.view")

    toasts, updates = [], []
    editor_auth.bus.subscribe(PERMISSIONS_UPDATED, lambda: updates.append(True))
    sync = AuthSynchronizer(editor_auth, editor_api, on_toast=toasts.append)
    assert await sync.sync() == SyncOutcome.UNCHANGED

    created = []
    admin_auth.bus.subscribe(NOTIFICATION_CREATED, lambda: created.append(True))
    await admin_api.request(
        "PUT", f"/api/roles/{editor_role_id}",
        json={"permissions": editor_auth.session.role.permissions + ["users.view"]},
    )
    assert created == [True]

    assert await sync.sync() == SyncOutcome.UPDATED
    assert editor_auth.has_permission("users.view")
    assert updates == [True] and toasts == ["Permissions updated"]

    assert await editor_api.unread_count() >= 1
    await admin_api.aclose()
    await editor_api.aclose()


async def test_forbidden_request_refreshes_then_surfaces_denial(asgi_db, tmp_path):
    from monquest_cms.client.errors import PermissionDeniedError

    editor = make_user(asgi_db, "editor", "editor@monquest.com")
    auth, api = client_for(tmp_path, "editor")
    await auth.login(editor.email, "password123")
    AuthSynchronizer(auth, api)

    with pytest.raises(PermissionDeniedError):
        await api.request("GET", "/api/users")
    assert auth.is_authenticated
    await api.aclose()


async def test_deleted_account_is_logged_out(asgi_db, tmp_path):
    editor = make_user(asgi_db, "editor", "editor@monquest.com")
    auth, api = client_for(tmp_path, "editor")
    await auth.login(editor.email, "password123")

    asgi_db.delete(editor)
    asgi_db.commit()

    assert await AuthSynchronizer(auth, api).sync() == SyncOutcome.INVALIDATED
    assert auth.store.load() is None
    await api.aclose()


@pytest.fixture()
def file_db(tmp_path):
    """File-backed SQLite so the poller and the test can hold separate connections."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    from monquest_cms.db.base import Base
    from monquest_cms.db.seeds.seed_roles import seed_roles

    engine = create_engine(f"sqlite:///{tmp_path / 'live.db'}",
                           connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = factory()
        try:
            yield session
        finally:
            session.close()

    session = factory()
    seed_roles(session)
    app.dependency_overrides[get_db] = override_get_db
    yield session
    app.dependency_overrides.clear()
    session.close()
    engine.dispose()


async def test_revoked_permission_closes_page_within_one_poll(file_db, tmp_path):
    import asyncio

    from monquest_cms.client.gate import GateState, PermissionGate
    from monquest_cms.services.role_service import role_service

    editor = make_user(file_db, "editor", "editor@monquest.com")
    editor_role = role(file_db, "editor")
    auth, api = client_for(tmp_path, "editor")
    await auth.login(editor.email, "password123")

    visits = []
    gate = PermissionGate(auth, auth.bus, permissions=["content.edit"], navigate=visits.append)
    assert gate.mount() == GateState.GRANTED

    sync = AuthSynchronizer(auth, api, interval=0.05)
    async with sync.protected_area():
        await asyncio.sleep(0.1)
        remaining = [p for p in editor_role.permissions if p != "content.edit"]
        role_service.update_role(file_db, editor_role.id, permissions=remaining)

        for _ in range(40):
            if gate.state == GateState.REDIRECT_FORBIDDEN:
                break
            await asyncio.sleep(0.05)

    assert gate.state == GateState.REDIRECT_FORBIDDEN
    assert visits == ["/admin/forbidden"]
    assert not auth.has_permission("content.edit")
    gate.unmount()
    await api.aclose()
