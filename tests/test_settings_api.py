from conftest import auth
from monquest_cms.db.seeds.seed_sample_data import seed_sample_data
from monquest_cms.models.site_config import Setting

COLORS = {"primary": "#112233", "secondary": "#445566", "accent": "#778899",
          "dark": "#000000", "darker": "#000001", "light": "#FFFFFF"}


def test_seed_installs_system_presets_and_active_theme(client, db, super_admin):
    seed_sample_data(db)
    res = client.get("/api/theme-presets", headers=auth(super_admin)).json()
    slugs = [p["slug"] for p in res["data"]]
    assert set(slugs) == {"default", "cyberpunk", "ocean", "sunset"}
    assert res["activePresetSlug"] == "default"

    active = client.get("/api/theme-presets/active").json()["data"]
    assert active["colors"]["primary"] == "#4ADE80"


def test_seed_is_idempotent(db, super_admin):
    seed_sample_data(db)
    seed_sample_data(db)
    assert db.query(Setting).filter(Setting.key == "active_theme_preset").count() == 1


def test_bare_string_active_theme_is_understood(client, db, super_admin):
    seed_sample_data(db)
    setting = db.query(Setting).filter(Setting.key == "active_theme_preset").one()
    setting.value = "ocean"
    db.commit()
    assert client.get("/api/theme-presets/active").json()["data"]["slug"] == "ocean"


def test_custom_preset_lifecycle(client, db, super_admin):
    seed_sample_data(db)
    created = client.post("/api/theme-presets", headers=auth(super_admin),
                          json={"name": "Night Owl", "colors": COLORS})
    assert created.status_code == 201
    assert created.json()["data"]["slug"] == "night-owl"

    applied = client.post("/api/theme-presets/night-owl/apply", headers=auth(super_admin))
    assert applied.json()["data"]["activePresetSlug"] == "night-owl"

    blocked = client.delete("/api/theme-presets/night-owl", headers=auth(super_admin))
    assert blocked.status_code == 400

    client.post("/api/theme-presets/default/apply", headers=auth(super_admin))
    assert client.delete("/api/theme-presets/night-owl", headers=auth(super_admin)).status_code == 200


def test_system_presets_are_read_only(client, db, super_admin):
    seed_sample_data(db)
    res = client.put("/api/theme-presets/ocean", headers=auth(super_admin), json={"name": "Sea"})
    assert res.status_code == 403
    assert client.delete("/api/theme-presets/ocean", headers=auth(super_admin)).status_code == 403


def test_invalid_colors_rejected(client, super_admin):
    res = client.post("/api/theme-presets", headers=auth(super_admin),
                      json={"name": "Broken", "colors": dict(COLORS, primary="red")})
    assert res.status_code == 400


def test_settings_crud(client, super_admin):
    created = client.post("/api/settings", headers=auth(super_admin), json={
        "key": "discord_url", "value": "https://discord.gg/x", "category": "social",
    })
    assert created.status_code == 201
    dup = client.post("/api/settings", headers=auth(super_admin), json={
        "key": "discord_url", "value": "y", "category": "social",
    })
    assert dup.status_code == 409

    client.put("/api/settings/discord_url", headers=auth(super_admin), json={"value": "https://d.gg"})
    got = client.get("/api/settings/discord_url", headers=auth(super_admin)).json()["data"]
    assert got["value"] == "https://d.gg"


def test_api_keys_cannot_be_reactivated(client, admin):
    key = client.post("/api/api-keys", headers=auth(admin),
                      json={"name": "CI", "environment": "DEVELOPMENT"}).json()["data"]
    assert key["key"].startswith("mk_dev_")
    client.patch(f"/api/api-keys/{key['id']}", headers=auth(admin), json={"status": "REVOKED"})
    res = client.patch(f"/api/api-keys/{key['id']}", headers=auth(admin), json={"status": "ACTIVE"})
    assert res.status_code == 400
