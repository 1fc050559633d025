"""Pydantic schemas for API request/response serialization.

Wire format is camelCase (``isSystem``, ``walletAddress``) to match the admin
front end; attributes stay snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime

from monquest_cms.models.user import AuthMethod, UserStatus
from monquest_cms.models.content import ContentType
from monquest_cms.models.notification import NotificationType
from monquest_cms.models.site_config import ApiEnvironment, ApiKeyStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---- Role ----
class RoleSummary(CamelModel):
    id: str
    name: str
    slug: str
    permissions: List[str] = []
    is_system: bool = False

class RoleOut(RoleSummary):
    description: Optional[str] = None
    user_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RoleCreate(CamelModel):
    name: str
    slug: str
    description: Optional[str] = None
    permissions: List[str] = []

class RoleUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: Optional[List[str]] = None

class RoleDelete(CamelModel):
    target_role_id: Optional[str] = None


# ---- Auth / User ----
class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None

class RegisterRequest(CamelModel):
    email: str
    password: str
    name: str

class WalletAuthRequest(CamelModel):
    wallet_address: str = Field(..., min_length=4)
    name: Optional[str] = None

class UserOut(CamelModel):
    id: str
    email: Optional[str] = None
    name: str
    role: Optional[RoleSummary] = None
    status: UserStatus
    wallet_address: Optional[str] = None
    auth_method: AuthMethod = AuthMethod.EMAIL
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

class AuthResponse(CamelModel):
    success: bool = True
    user: UserOut

class UserCreate(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role_id: Optional[str] = None

class UserUpdate(CamelModel):
    email: Optional[str] = None
    name: Optional[str] = None
    role_id: Optional[str] = None
    status: Optional[str] = None

class ResetPasswordRequest(CamelModel):
    password: str


# ---- Content ----
class ContentUpdate(CamelModel):
    data: Optional[Dict[str, Any]] = None

class ContentOut(CamelModel):
    id: str
    type: ContentType
    data: Dict[str, Any]
    updated_at: Optional[datetime] = None


# ---- API keys ----
class ApiKeyCreate(CamelModel):
    name: Optional[str] = None
    environment: Optional[str] = None

class ApiKeyUpdate(CamelModel):
    name: Optional[str] = None
    status: Optional[str] = None

class ApiKeyOwner(CamelModel):
    name: str
    email: Optional[str] = None

class ApiKeyOut(CamelModel):
    id: str
    name: str
    key: str
    environment: ApiEnvironment
    status: ApiKeyStatus
    last_used: Optional[datetime] = None
    user_id: str
    user: Optional[ApiKeyOwner] = None
    created_at: Optional[datetime] = None


# ---- Settings ----
class SettingCreate(CamelModel):
    key: Optional[str] = None
    value: Optional[Any] = None
    category: Optional[str] = None
    description: Optional[str] = None

class SettingUpdate(CamelModel):
    value: Any
    description: Optional[str] = None

class SettingOut(CamelModel):
    key: str
    value: Optional[Any] = None
    category: str
    description: Optional[str] = None
    updated_at: Optional[datetime] = None


# ---- Theme presets ----
class ThemePresetCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    colors: Optional[Dict[str, str]] = None

class ThemePresetUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    colors: Optional[Dict[str, str]] = None

class ThemePresetOut(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    colors: Dict[str, str]
    is_system: bool = False
    created_at: Optional[datetime] = None


# ---- Notifications ----
class NotificationCreate(CamelModel):
    user_id: Optional[str] = None
    type: str = "INFO"
    title: Optional[str] = None
    message: Optional[str] = None
    action_url: Optional[str] = None

class NotificationUpdate(CamelModel):
    read: bool = True

class NotificationOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    type: NotificationType
    title: str
    message: str
    action_url: Optional[str] = None
    read: bool = False
    created_at: Optional[datetime] = None


# ---- Generic ----
class MessageResponse(CamelModel):
    success: bool = True
    message: str
    detail: Optional[Any] = None

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit) if limit else 0)
