"""Site settings and theme preset service."""

import re
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from monquest_cms.core.exceptions import (
    ResourceConflictError, ResourceNotFoundError, SystemRoleError, ValidationError,
)
from monquest_cms.models.site_config import Setting, ThemePreset

ACTIVE_THEME_KEY = "active_theme_preset"
THEME_COLOR_KEYS = ("primary", "secondary", "accent", "dark", "darker", "light")
HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def validate_colors(colors: Any) -> Dict[str, str]:
    if not isinstance(colors, dict) or not all(
        isinstance(colors.get(k), str) and HEX_RE.match(colors[k]) for k in THEME_COLOR_KEYS
    ):
        raise ValidationError(
            "Invalid colors format. Required: "
            + ", ".join(THEME_COLOR_KEYS)
            + " (all hex #RRGGBB)"
        )
    return {k: colors[k] for k in THEME_COLOR_KEYS}


class SettingsService:
    """Key-value settings."""

    @staticmethod
    def list_settings(db: Session, category: Optional[str] = None):
        query = db.query(Setting)
        if category:
            query = query.filter(Setting.category == category)
        return query.order_by(Setting.category.asc(), Setting.key.asc()).all()

    @staticmethod
    def get_setting(db: Session, key: str) -> Setting:
        setting = db.query(Setting).filter(Setting.key == key).first()
        if not setting:
            raise ResourceNotFoundError("Setting not found")
        return setting

    @staticmethod
    def create_setting(db: Session, key, value, category, description=None) -> Setting:
        if not key or value is None or not category:
            raise ValidationError("Missing required fields: key, value, category")
        if db.query(Setting).filter(Setting.key == key).first():
            raise ResourceConflictError("Setting with this key already exists")
        setting = Setting(key=key, value=value, category=category, description=description)
        db.add(setting)
        db.commit()
        db.refresh(setting)
        return setting

    @staticmethod
    def upsert_setting(db: Session, key: str, value: Any, category: str = "general",
                       description: Optional[str] = None) -> Setting:
        setting = db.query(Setting).filter(Setting.key == key).first()
        if setting:
            setting.value = value
            if description is not None:
                setting.description = description
        else:
            setting = Setting(key=key, value=value, category=category, description=description)
            db.add(setting)
        db.commit()
        db.refresh(setting)
        return setting

    @staticmethod
    def update_setting(db: Session, key: str, value: Any, description: Optional[str] = None) -> Setting:
        setting = SettingsService.get_setting(db, key)
        setting.value = value
        if description is not None:
            setting.description = description
        db.commit()
        db.refresh(setting)
        return setting

    @staticmethod
    def delete_setting(db: Session, key: str) -> None:
        setting = SettingsService.get_setting(db, key)
        db.delete(setting)
        db.commit()


class ThemeService:
    """Theme presets and the active preset setting."""

    @staticmethod
    def list_presets(db: Session):
        return (
            db.query(ThemePreset)
            .order_by(ThemePreset.is_system.desc(), ThemePreset.created_at.asc(), ThemePreset.slug.asc())
            .all()
        )

    @staticmethod
    def get_preset(db: Session, slug: str) -> ThemePreset:
        preset = db.query(ThemePreset).filter(ThemePreset.slug == slug).first()
        if not preset:
            raise ResourceNotFoundError("Theme preset not found")
        return preset

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        if not name or not name.strip():
            raise ValidationError("Missing required fields: name, colors")
        if len(name) > 50:
            raise ValidationError("Name must be 50 characters or less")
        return name.strip()

    @staticmethod
    def create_preset(db: Session, name: Optional[str], colors: Any,
                      description: Optional[str] = None) -> ThemePreset:
        if not name or not colors:
            raise ValidationError("Missing required fields: name, colors")
        name = ThemeService._validate_name(name)
        clean = validate_colors(colors)
        slug = slugify(name)
        if not slug:
            raise ValidationError("Name must contain letters or digits")
        if db.query(ThemePreset).filter(ThemePreset.slug == slug).first():
            raise ResourceConflictError("A preset with this name already exists")

        preset = ThemePreset(name=name, slug=slug, description=description, colors=clean, is_system=False)
        db.add(preset)
        db.commit()
        db.refresh(preset)
        return preset

    @staticmethod
    def update_preset(db: Session, slug: str, name: Optional[str] = None, colors: Any = None,
                      description: Optional[str] = None) -> ThemePreset:
        preset = ThemeService.get_preset(db, slug)
        if preset.is_system:
            raise SystemRoleError("System presets cannot be modified")
        if name is not None:
            preset.name = ThemeService._validate_name(name)
        if colors is not None:
            preset.colors = validate_colors(colors)
        if description is not None:
            preset.description = description or None
        db.commit()
        db.refresh(preset)
        return preset

    @staticmethod
    def delete_preset(db: Session, slug: str) -> None:
        preset = ThemeService.get_preset(db, slug)
        if preset.is_system:
            raise SystemRoleError("System presets cannot be deleted")
        if ThemeService.active_slug(db) == slug:
            raise ValidationError("Cannot delete the active theme preset")
        db.delete(preset)
        db.commit()

    @staticmethod
    def active_slug(db: Session) -> Optional[str]:
        setting = db.query(Setting).filter(Setting.key == ACTIVE_THEME_KEY).first()
        if setting is None:
            return None
        # early seeds stored the bare slug string
        if isinstance(setting.value, str):
            return setting.value
        if isinstance(setting.value, dict):
            return setting.value.get("slug")
        return None

    @staticmethod
    def apply_preset(db: Session, slug: str) -> ThemePreset:
        preset = ThemeService.get_preset(db, slug)
        SettingsService.upsert_setting(
            db, ACTIVE_THEME_KEY, {"slug": slug},
            category="appearance",
            description="Currently active theme preset slug",
        )
        return preset

    @staticmethod
    def active_preset(db: Session) -> Optional[ThemePreset]:
        slug = ThemeService.active_slug(db)
        if not slug:
            return None
        return db.query(ThemePreset).filter(ThemePreset.slug == slug).first()


settings_service = SettingsService()
theme_service = ThemeService()
