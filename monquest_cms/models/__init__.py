"""Models package — import all models so metadata sees every table."""

from monquest_cms.models.role import Role
from monquest_cms.models.user import User, AuthMethod, UserStatus
from monquest_cms.models.content import Content, ContentType
from monquest_cms.models.notification import Notification, NotificationType
from monquest_cms.models.audit_log import ActivityLog
from monquest_cms.models.site_config import (
    ApiKey, ApiEnvironment, ApiKeyStatus, Setting, ThemePreset
)

__all__ = [
    "Role", "User", "AuthMethod", "UserStatus",
    "Content", "ContentType", "Notification", "NotificationType",
    "ActivityLog", "ApiKey", "ApiEnvironment", "ApiKeyStatus",
    "Setting", "ThemePreset",
]
