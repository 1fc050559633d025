import pytest

from client_support import make_session
from monquest_cms.client.auth import AuthContext
from monquest_cms.client.events import PERMISSIONS_UPDATED, EventBus
from monquest_cms.client.gate import GateState, PermissionGate
from monquest_cms.client.session_store import SessionStore


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def auth(tmp_path, bus):
    return AuthContext(SessionStore(str(tmp_path / "admin_user.json")), bus=bus)


def gate_for(auth, bus, visits, **kwargs):
    return PermissionGate(auth, bus, navigate=visits.append, **kwargs)


def test_pending_while_loading(auth, bus):
    visits = []
    gate = gate_for(auth, bus, visits, permissions=["content.view"])
    assert gate.evaluate() == GateState.PENDING
    assert gate.render("page") is None
    assert visits == []


def test_unauthenticated_redirects_to_login_once(auth, bus):
    auth.initialize()
    visits = []
    gate = gate_for(auth, bus, visits)
    assert gate.evaluate() == GateState.REDIRECT_LOGIN
    gate.evaluate()
    assert visits == ["/admin/login"]


def test_missing_panel_access_is_unauthorized(auth, bus):
    auth.replace_session(make_session([]))
    auth.initialize()
    visits = []
    assert gate_for(auth, bus, visits).evaluate() == GateState.REDIRECT_UNAUTHORIZED
    assert visits == ["/admin/unauthorized"]


def test_any_versus_all(auth, bus):
    auth.replace_session(make_session(["panel.access", "content.view"]))
    auth.initialize()
    visits = []
    anyof = gate_for(auth, bus, visits, permissions=["content.view", "content.edit"])
    assert anyof.evaluate() == GateState.GRANTED
    assert anyof.render("page") == "page"

    allof = gate_for(auth, bus, visits, permissions=["content.view", "content.edit"],
                     require_all=True, fallback_url="/admin/content")
    assert allof.evaluate() == GateState.REDIRECT_FORBIDDEN
    assert visits == ["/admin/content"]


def test_broadcast_resets_latch_and_reevaluates(auth, bus):
    auth.replace_session(make_session(["panel.access"]))
    auth.initialize()
    visits = []
    gate = gate_for(auth, bus, visits, permissions=["users.view"])
    assert gate.mount() == GateState.REDIRECT_FORBIDDEN

    bus.emit(PERMISSIONS_UPDATED)
    assert visits == ["/admin/forbidden", "/admin/forbidden"]

    auth.replace_session(make_session(["panel.access", "users.view"]))
    bus.emit(PERMISSIONS_UPDATED)
    assert gate.state == GateState.GRANTED
    assert len(visits) == 2


def test_revoked_permission_redirects_after_broadcast(auth, bus):
    auth.replace_session(make_session(["panel.access", "users.view"]))
    auth.initialize()
    visits = []
    gate = gate_for(auth, bus, visits, permissions=["users.view"])
    assert gate.mount() == GateState.GRANTED

    auth.replace_session(make_session(["panel.access"]))
    bus.emit(PERMISSIONS_UPDATED)
    assert gate.state == GateState.REDIRECT_FORBIDDEN
    assert visits == ["/admin/forbidden"]


def test_unmount_stops_listening(auth, bus):
    auth.initialize()
    gate = gate_for(auth, bus, [])
    gate.mount()
    assert bus.subscriber_count(PERMISSIONS_UPDATED) == 1
    gate.unmount()
    assert bus.subscriber_count(PERMISSIONS_UPDATED) == 0


def test_remount_redirects_again(auth, bus):
    auth.replace_session(make_session(["panel.access"]))
    auth.initialize()
    visits = []
    gate = gate_for(auth, bus, visits, permissions=["users.view"])
    assert gate.mount() == GateState.REDIRECT_FORBIDDEN
    gate.evaluate()
    gate.unmount()

    assert gate.mount() == GateState.REDIRECT_FORBIDDEN
    assert visits == ["/admin/forbidden", "/admin/forbidden"]


def test_panel_access_is_checked_before_page_permissions(auth, bus):
    auth.replace_session(make_session(["content.view"]))
    auth.initialize()
    visits = []
    gate = gate_for(auth, bus, visits, permissions=["content.edit"])
    assert gate.evaluate() == GateState.REDIRECT_UNAUTHORIZED
    assert visits == ["/admin/unauthorized"]
