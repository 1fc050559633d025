"""API keys router."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import dump
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import ApiKeyCreate, ApiKeyOut, ApiKeyUpdate, MessageResponse
from monquest_cms.services.api_key_service import api_key_service
from monquest_cms.services.audit_service import audit_service
from monquest_cms.services.notification_service import NOTIFICATION_HEADER, notification_service

router = APIRouter(prefix="/api-keys", tags=["api-keys"])


@router.get("")
async def list_api_keys(
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("apiKeys.view")),
):
    return {
        "success": True,
        "data": [dump(ApiKeyOut.model_validate(k)) for k in api_key_service.list_keys(db)],
    }


@router.post("", status_code=201)
async def create_api_key(
    body: ApiKeyCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("apiKeys.create")),
):
    api_key = api_key_service.create_key(db, actor.id, body.name, body.environment)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="created", resource="api_key",
        resource_id=api_key.id,
        details={"name": api_key.name, "environment": api_key.environment.value},
    )
    notification_service.broadcast(
        db, "API Key Created",
        f'New {api_key.environment.value} API key "{api_key.name}" has been created',
        type="SUCCESS", action_url="/admin/settings/api-keys",
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return {"success": True, "data": dump(ApiKeyOut.model_validate(api_key))}


@router.patch("/{key_id}")
async def update_api_key(
    key_id: str,
    body: ApiKeyUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("apiKeys.create")),
):
    """Rename or revoke a key."""
    api_key = api_key_service.update_key(db, key_id, name=body.name, status=body.status)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="api_key",
        resource_id=key_id, details=body.model_dump(exclude_none=True),
    )
    return {"success": True, "data": dump(ApiKeyOut.model_validate(api_key))}


@router.delete("/{key_id}", response_model=MessageResponse)
async def delete_api_key(
    key_id: str,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("apiKeys.delete")),
):
    api_key = api_key_service.get_key(db, key_id)
    name = api_key.name
    api_key_service.delete_key(db, key_id)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="deleted", resource="api_key",
        resource_id=key_id, details={"name": name},
    )
    notification_service.broadcast(
        db, "API Key Deleted", f'API key "{name}" has been deleted',
        type="WARNING", action_url="/admin/settings/api-keys",
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return MessageResponse(message="API key deleted successfully")
