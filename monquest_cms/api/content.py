"""Content API router — admin section editing and public landing content."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import dump
from monquest_cms.core.security import require_permission
from monquest_cms.db.session import get_db
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import ContentOut, ContentUpdate
from monquest_cms.services.audit_service import audit_service
from monquest_cms.services.content_service import content_service, parse_type
from monquest_cms.services.notification_service import NOTIFICATION_HEADER, notification_service

router = APIRouter(tags=["content"])


@router.get("/content")
async def list_content(
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("content.view")),
):
    return {
        "success": True,
        "data": [dump(ContentOut.model_validate(c)) for c in content_service.list_content(db)],
    }


@router.get("/content/{content_type}")
async def get_content(
    content_type: str,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("content.view")),
):
    content = content_service.get_content(db, parse_type(content_type))
    return {"success": True, "data": dump(ContentOut.model_validate(content))}


@router.put("/content/{content_type}")
async def update_content(
    content_type: str,
    body: ContentUpdate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    actor: User = Depends(require_permission("content.edit")),
):
    """Replace a section's document (created on first write)."""
    kind = parse_type(content_type)
    content = content_service.upsert_content(db, kind, body.data)

    audit_service.log_from_request(
        db, request, user_id=actor.id, action="updated", resource="content",
        resource_id=content.id, details={"type": kind.value},
    )
    section = " ".join(w.capitalize() for w in kind.slug.split("-"))
    notification_service.broadcast(
        db, "Content Updated", f"{section} section has been successfully updated",
        type="SUCCESS", action_url=f"/admin/content/{kind.slug}",
    )
    response.headers[NOTIFICATION_HEADER] = "true"
    return {"success": True, "data": dump(ContentOut.model_validate(content))}


@router.get("/public/content")
async def public_content(db: Session = Depends(get_db)):
    """Unauthenticated landing page content."""
    return {"success": True, "data": content_service.public_content(db)}
