"""API key service — issue, rename, revoke and delete keys."""

from typing import Optional

from sqlalchemy.orm import Session

from monquest_cms.core.exceptions import ResourceNotFoundError, ValidationError
from monquest_cms.core.security import generate_api_key
from monquest_cms.models.site_config import ApiKey, ApiEnvironment, ApiKeyStatus


class ApiKeyService:
    """Manages machine-to-machine API keys."""

    @staticmethod
    def list_keys(db: Session):
        return db.query(ApiKey).order_by(ApiKey.created_at.desc()).all()

    @staticmethod
    def get_key(db: Session, key_id: str) -> ApiKey:
        api_key = db.query(ApiKey).filter(ApiKey.id == key_id).first()
        if not api_key:
            raise ResourceNotFoundError("API key not found")
        return api_key

    @staticmethod
    def create_key(db: Session, user_id: str, name: Optional[str], environment: Optional[str]) -> ApiKey:
        if not name or not environment:
            raise ValidationError("Name and environment are required")
        try:
            env = ApiEnvironment(environment)
        except ValueError:
            raise ValidationError("Environment must be PRODUCTION, DEVELOPMENT or STAGING")

        api_key = ApiKey(
            name=name,
            key=generate_api_key(env.value),
            environment=env,
            status=ApiKeyStatus.ACTIVE,
            user_id=user_id,
        )
        db.add(api_key)
        db.commit()
        db.refresh(api_key)
        return api_key

    @staticmethod
    def update_key(db: Session, key_id: str, name: Optional[str] = None, status: Optional[str] = None) -> ApiKey:
        api_key = ApiKeyService.get_key(db, key_id)
        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty")
            api_key.name = name.strip()
        if status is not None:
            try:
                new_status = ApiKeyStatus(status)
            except ValueError:
                raise ValidationError("Status must be ACTIVE or REVOKED")
            if api_key.status == ApiKeyStatus.REVOKED and new_status == ApiKeyStatus.ACTIVE:
                raise ValidationError("A revoked key cannot be reactivated")
            api_key.status = new_status
        db.commit()
        db.refresh(api_key)
        return api_key

    @staticmethod
    def delete_key(db: Session, key_id: str) -> ApiKey:
        api_key = ApiKeyService.get_key(db, key_id)
        db.delete(api_key)
        db.commit()
        return api_key


api_key_service = ApiKeyService()
