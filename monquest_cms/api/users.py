"""Users API router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import user_out
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import (
    MessageResponse, ResetPasswordRequest, UserCreate, UserUpdate,
)
from monquest_cms.services.audit_service import audit_service
from monquest_cms.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    role: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.view")),
):
    result = user_service.list_users(db, page, limit, search, sort_by, sort_order, role, status)
    total = result["total"]
    return {
        "success": True,
        "data": {
            "users": [user_out(u) for u in result["users"]],
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": -(-total // limit),
        },
    }


@router.get("/stats")
async def user_stats(
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.view")),
):
    return {"success": True, "data": user_service.stats(db)}


@router.post("", status_code=201)
async def create_user(
    body: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.create")),
):
    user = user_service.create_user(db, body.email, body.password, body.name, body.role_id)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="created", resource="user",
        resource_id=user.id, details={"email": user.email},
    )
    return {"success": True, "data": user_out(user)}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.view")),
):
    return {"success": True, "data": user_out(user_service.get_user(db, user_id))}


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    body: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.edit")),
):
    user = user_service.update_user(
        db, actor, user_id,
        email=body.email, name=body.name, role_id=body.role_id, status=body.status,
    )
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="user",
        resource_id=user.id, details=body.model_dump(exclude_none=True),
    )
    return {"success": True, "data": user_out(user)}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.delete")),
):
    email = user_service.delete_user(db, actor, user_id)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="deleted", resource="user",
        resource_id=user_id, details={"email": email},
    )
    return MessageResponse(message="User deleted successfully")


@router.post("/{user_id}/reset-password", response_model=MessageResponse)
async def reset_password(
    user_id: str,
    body: ResetPasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("users.edit")),
):
    user_service.reset_password(db, actor, user_id, body.password)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="password_reset", resource="user",
        resource_id=user_id,
    )
    return MessageResponse(message="Password reset successfully")
