"""Roles API router — CRUD, reassignment on delete, permission catalogue."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import role_out
from monquest_cms.core import permissions as perms
from monquest_cms.core.exceptions import AuthorizationError
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import RoleCreate, RoleDelete, RoleUpdate
from monquest_cms.services.audit_service import audit_service
from monquest_cms.services.notification_service import NOTIFICATION_HEADER, notification_service
from monquest_cms.services.role_service import role_service

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("/permissions")
async def list_permissions(actor: User = Depends(require_permission(perms.PANEL_ACCESS))):
    """Catalogue of recognised permissions, grouped by category."""
    return perms.grouped_permissions()


@router.get("")
async def list_roles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    include_system: bool = Query(True, alias="includeSystem"),
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("roles.view")),
):
    result = role_service.list_roles(db, page, limit, search, include_system)
    counts = role_service.user_counts(db)
    total = result["total"]
    return {
        "success": True,
        "data": {
            "roles": [role_out(r, counts.get(r.id, 0)) for r in result["roles"]],
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": -(-total // limit),
        },
    }


@router.get("/{role_id}")
async def get_role(
    role_id: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("roles.view")),
):
    role = role_service.get_role(db, role_id)
    return role_out(role, role_service.user_counts(db).get(role.id, 0))


@router.post("", status_code=201)
async def create_role(
    body: RoleCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("roles.create")),
):
    role = role_service.create_role(db, body.name, body.slug, body.description, body.permissions)
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="created", resource="role",
        resource_id=role.id, details={"name": role.name, "slug": role.slug},
    )
    notification_service.broadcast(
        db, "New Role Created",
        f'Role "{role.name}" has been created with {len(role.permissions)} permissions',
        type="SUCCESS", action_url="/admin/roles",
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return role_out(role, 0)


@router.put("/{role_id}")
async def update_role(
    role_id: str,
    body: RoleUpdate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("roles.edit")),
):
    if not perms.can_manage_role(actor, role_service.get_role(db, role_id)):
        raise AuthorizationError("You cannot manage this role")
    role = role_service.update_role(
        db, role_id, name=body.name, description=body.description, permissions=body.permissions,
    )
    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="role",
        resource_id=role.id, details=body.model_dump(exclude_none=True),
    )
    notification_service.broadcast(
        db, "Role Updated", f'Role "{role.name}" has been updated',
        type="INFO", action_url="/admin/roles",
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return role_out(role, role_service.user_counts(db).get(role.id, 0))


@router.delete("/{role_id}")
async def delete_role(
    role_id: str,
    request: Request,
    response: Response,
    body: Optional[RoleDelete] = Body(None),
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("roles.delete")),
):
    role = role_service.get_role(db, role_id)
    name = role.name
    if not role.is_system and not perms.can_delete_role(actor, role):
        raise AuthorizationError("Only a super admin can delete roles")

    target_role_id = body.target_role_id if body else None
    reassigned = role_service.delete_role(db, role_id, target_role_id)

    audit_service.log_from_request(
        db, request, user_id=actor.id, action="deleted", resource="role",
        resource_id=role_id,
        details={"name": name, "userCount": reassigned, "reassignedTo": target_role_id},
    )
    message = (
        f'Role "{name}" has been deleted and {reassigned} users were reassigned'
        if reassigned else f'Role "{name}" has been deleted'
    )
    notification_service.broadcast(
        db, "Role Deleted", message, type="WARNING", action_url="/admin/roles",
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return {"message": "Role deleted successfully", "reassignedUsers": reassigned}
