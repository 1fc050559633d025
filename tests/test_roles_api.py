from conftest import auth, make_user, role


def test_permission_catalogue_is_grouped(client, editor):
    res = client.get("/api/roles/permissions", headers=auth(editor))
    assert res.status_code == 200
    categories = {group["category"] for group in res.json()}
    assert {"Users", "Roles", "Content"} <= categories


def test_list_roles_includes_user_counts(client, super_admin, editor):
    res = client.get("/api/roles", headers=auth(super_admin))
    assert res.status_code == 200
    roles = {r["slug"]: r for r in res.json()["data"]["roles"]}
    assert roles["editor"]["userCount"] == 1
    assert roles["super_admin"]["isSystem"] is True


def test_create_role_sets_notification_header(client, super_admin):
    res = client.post("/api/roles", headers=auth(super_admin), json={
        "name": "Moderator", "slug": "moderator",
        "permissions": ["panel.access", "content.view"],
    })
    assert res.status_code == 201
    assert res.headers["X-Notification-Created"] == "true"
    assert res.json()["slug"] == "moderator"


def test_create_role_rejects_bad_slug_and_unknown_permissions(client, super_admin):
    bad_slug = client.post("/api/roles", headers=auth(super_admin), json={
        "name": "Bad Slug", "slug": "Bad Slug", "permissions": [],
    })
    assert bad_slug.status_code == 400
    unknown = client.post("/api/roles", headers=auth(super_admin), json={
        "name": "Unknown", "slug": "unknown", "permissions": ["rockets.launch"],
    })
    assert unknown.status_code == 400


def test_duplicate_slug_conflicts(client, super_admin):
    res = client.post("/api/roles", headers=auth(super_admin), json={
        "name": "Editor Two", "slug": "editor", "permissions": [],
    })
    assert res.status_code == 409


def test_system_role_allows_permission_change_only(client, db, super_admin):
    admin_role = role(db, "admin")
    renamed = client.put(f"/api/roles/{admin_role.id}", headers=auth(super_admin),
                         json={"name": "Boss"})
    assert renamed.status_code == 403

    res = client.put(f"/api/roles/{admin_role.id}", headers=auth(super_admin),
                     json={"permissions": ["panel.access", "content.view"]})
    assert res.status_code == 200
    assert sorted(res.json()["permissions"]) == ["content.view", "panel.access"]


def test_admin_cannot_edit_system_role(client, db, admin):
    admin_role = role(db, "admin")
    res = client.put(f"/api/roles/{admin_role.id}", headers=auth(admin),
                     json={"permissions": ["panel.access"]})
    assert res.status_code == 403


def test_system_role_cannot_be_deleted(client, db, super_admin):
    res = client.delete(f"/api/roles/{role(db, 'admin').id}", headers=auth(super_admin))
    assert res.status_code == 403


def test_delete_role_with_users_requires_target(client, db, super_admin, editor):
    editor_role = role(db, "editor")
    res = client.delete(f"/api/roles/{editor_role.id}", headers=auth(super_admin))
    assert res.status_code == 400
    assert res.json()["userCount"] == 1


def test_delete_role_reassigns_users(client, db, super_admin, editor):
    editor_role_id = role(db, "editor").id
    viewer_role_id = role(db, "viewer").id
    res = client.request(
        "DELETE", f"/api/roles/{editor_role_id}", headers=auth(super_admin),
        json={"targetRoleId": viewer_role_id},
    )
    assert res.status_code == 200
    assert res.json()["reassignedUsers"] == 1

    me = client.get("/api/auth/me", headers=auth(editor)).json()["user"]
    assert me["role"]["slug"] == "viewer"


def test_delete_role_with_missing_target_is_404(client, db, super_admin, editor):
    res = client.request(
        "DELETE", f"/api/roles/{role(db, 'editor').id}", headers=auth(super_admin),
        json={"targetRoleId": "nope"},
    )
    assert res.status_code == 404


def test_permission_change_is_visible_through_me(client, db, super_admin):
    moderator = client.post("/api/roles", headers=auth(super_admin), json={
        "name": "Moderator", "slug": "moderator", "permissions": ["panel.access"],
    }).json()
    user = make_user(db, "moderator", "mod@monquest.com")
    client.put(f"/api/roles/{moderator['id']}", headers=auth(super_admin),
               json={"permissions": ["panel.access", "content.edit"]})

    me = client.get("/api/auth/me", headers=auth(user)).json()["user"]
    assert "content.edit" in me["role"]["permissions"]
