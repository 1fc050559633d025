from conftest import PASSWORD, auth, role


def test_list_users_paginates_and_filters(client, db, super_admin, editor, member):
    res = client.get("/api/users", headers=auth(super_admin),
                     params={"role": role(db, "editor").id})
    data = res.json()["data"]
    assert data["total"] == 1
    assert data["users"][0]["email"] == editor.email


def test_create_user_validates_input(client, db, super_admin):
    res = client.post("/api/users", headers=auth(super_admin), json={
        "email": "not-an-email", "password": PASSWORD, "name": "Someone",
        "roleId": role(db, "viewer").id,
    })
    assert res.status_code == 400

    ok = client.post("/api/users", headers=auth(super_admin), json={
        "email": "viewer@monquest.com", "password": PASSWORD, "name": "Viewer",
        "roleId": role(db, "viewer").id,
    })
    assert ok.status_code == 201
    assert ok.json()["data"]["role"]["slug"] == "viewer"


def test_admin_cannot_change_roles_without_role_permissions(client, db, admin, editor):
    res = client.put(f"/api/users/{editor.id}", headers=auth(admin),
                     json={"roleId": role(db, "viewer").id})
    assert res.status_code == 403


def test_only_super_admin_grants_super_admin(client, db, super_admin, editor):
    res = client.put(f"/api/users/{editor.id}", headers=auth(super_admin),
                     json={"roleId": role(db, "super_admin").id})
    assert res.status_code == 200
    assert res.json()["data"]["role"]["slug"] == "super_admin"


def test_admin_cannot_edit_super_admin(client, admin, super_admin):
    res = client.put(f"/api/users/{super_admin.id}", headers=auth(admin), json={"name": "Hijacked"})
    assert res.status_code == 403


def test_cannot_deactivate_self(client, super_admin):
    res = client.put(f"/api/users/{super_admin.id}", headers=auth(super_admin),
                     json={"status": "INACTIVE"})
    assert res.status_code == 400


def test_deactivated_user_loses_access(client, super_admin, editor):
    client.put(f"/api/users/{editor.id}", headers=auth(super_admin), json={"status": "INACTIVE"})
    assert client.get("/api/content", headers=auth(editor)).status_code == 403


def test_delete_user(client, super_admin, member):
    res = client.delete(f"/api/users/{member.id}", headers=auth(super_admin))
    assert res.status_code == 200
    assert client.get(f"/api/users/{member.id}", headers=auth(super_admin)).status_code == 404


def test_cannot_delete_self(client, super_admin):
    res = client.delete(f"/api/users/{super_admin.id}", headers=auth(super_admin))
    assert res.status_code == 400


def test_reset_password_allows_new_login(client, super_admin, editor):
    client.post(f"/api/users/{editor.id}/reset-password", headers=auth(super_admin),
                json={"password": "brand-new-pass"})
    res = client.post("/api/auth/login", json={"email": editor.email, "password": "brand-new-pass"})
    assert res.status_code == 200


def test_stats_counts_by_role(client, super_admin, editor, member):
    data = client.get("/api/users/stats", headers=auth(super_admin)).json()["data"]
    assert data["total"] == 3
    assert data["byRole"]["editor"] == 1
