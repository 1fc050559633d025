"""Settings and theme presets router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import dump
from monquest_cms.core import permissions as perms
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import (
    MessageResponse, SettingCreate, SettingOut, SettingUpdate,
    ThemePresetCreate, ThemePresetOut, ThemePresetUpdate,
)
from monquest_cms.services.audit_service import audit_service
from monquest_cms.services.settings_service import settings_service, theme_service

router = APIRouter(tags=["settings"])


# ---- Settings ----
@router.get("/settings")
async def list_settings(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.view")),
):
    return {
        "success": True,
        "data": [dump(SettingOut.model_validate(s)) for s in settings_service.list_settings(db, category)],
    }


@router.post("/settings", status_code=201)
async def create_setting(
    body: SettingCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    setting = settings_service.create_setting(db, body.key, body.value, body.category, body.description)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="created", resource="settings",
        resource_id=setting.key,
    )
    return {"success": True, "data": dump(SettingOut.model_validate(setting))}


@router.get("/settings/{key}")
async def get_setting(
    key: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.view")),
):
    return {"success": True, "data": dump(SettingOut.model_validate(settings_service.get_setting(db, key)))}


@router.put("/settings/{key}")
async def update_setting(
    key: str,
    body: SettingUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    setting = settings_service.update_setting(db, key, body.value, body.description)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="settings",
        resource_id=key, details={"value": body.value},
    )
    return {"success": True, "data": dump(SettingOut.model_validate(setting))}


@router.delete("/settings/{key}", response_model=MessageResponse)
async def delete_setting(
    key: str,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    settings_service.delete_setting(db, key)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="deleted", resource="settings", resource_id=key,
    )
    return MessageResponse(message="Setting deleted successfully")


# ---- Theme presets ----
@router.get("/theme-presets")
async def list_theme_presets(
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission(perms.PANEL_ACCESS)),
):
    return {
        "success": True,
        "data": [dump(ThemePresetOut.model_validate(p)) for p in theme_service.list_presets(db)],
        "activePresetSlug": theme_service.active_slug(db),
    }


@router.get("/theme-presets/active")
async def active_theme_preset(db: Session = Depends(get_db)):
    """Active palette for the public site."""
    preset = theme_service.active_preset(db)
    return {"success": True, "data": dump(ThemePresetOut.model_validate(preset)) if preset else None}


@router.post("/theme-presets", status_code=201)
async def create_theme_preset(
    body: ThemePresetCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    preset = theme_service.create_preset(db, body.name, body.colors, body.description)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="created", resource="theme_preset",
        resource_id=preset.slug, details={"name": preset.name},
    )
    return {"success": True, "data": dump(ThemePresetOut.model_validate(preset))}


@router.get("/theme-presets/{slug}")
async def get_theme_preset(
    slug: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission(perms.PANEL_ACCESS)),
):
    return {"success": True, "data": dump(ThemePresetOut.model_validate(theme_service.get_preset(db, slug)))}


@router.put("/theme-presets/{slug}")
async def update_theme_preset(
    slug: str,
    body: ThemePresetUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    preset = theme_service.update_preset(db, slug, body.name, body.colors, body.description)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="theme_preset", resource_id=slug,
    )
    return {"success": True, "data": dump(ThemePresetOut.model_validate(preset))}


@router.delete("/theme-presets/{slug}", response_model=MessageResponse)
async def delete_theme_preset(
    slug: str,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    theme_service.delete_preset(db, slug)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="deleted", resource="theme_preset", resource_id=slug,
    )
    return MessageResponse(message="Theme preset deleted successfully")


@router.post("/theme-presets/{slug}/apply")
async def apply_theme_preset(
    slug: str,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("settings.edit")),
):
    preset = theme_service.apply_preset(db, slug)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="settings",
        resource_id="active_theme_preset",
        details={"action": "apply_preset", "slug": slug, "presetName": preset.name},
    )
    return {
        "success": True,
        "message": f'Theme preset "{preset.name}" applied successfully',
        "data": {"preset": dump(ThemePresetOut.model_validate(preset)), "activePresetSlug": slug},
    }
