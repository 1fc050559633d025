"""Auth API router — login, register, wallet, logout, me."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from monquest_cms.api.serializers import user_out
from monquest_cms.db.session import get_db
from monquest_cms.schemas.schemas import (
    LoginRequest, RegisterRequest, WalletAuthRequest, MessageResponse,
)
from monquest_cms.services.auth_service import auth_service
from monquest_cms.services.audit_service import audit_service
from monquest_cms.core.security import get_current_user_id

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate with email and password."""
    user = auth_service.authenticate(db, body.email, body.password)
    audit_service.log_from_request(
        db, request,
        user_id=user.id,
        action="login",
        resource="auth",
        details={"email": user.email},
    )
    return {"success": True, "user": user_out(user)}


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Register a site user (no admin panel access)."""
    user = auth_service.register(db, body.email, body.password, body.name)
    return {"success": True, "user": user_out(user)}


@router.post("/wallet")
async def wallet_sign_in(body: WalletAuthRequest, request: Request, db: Session = Depends(get_db)):
    """Sign in, or sign up, with a wallet address."""
    user = auth_service.wallet_sign_in(db, body.wallet_address, body.name)
    audit_service.log_from_request(
        db, request,
        user_id=user.id,
        action="login",
        resource="auth",
        details={"walletAddress": user.wallet_address},
    )
    return {"success": True, "user": user_out(user)}


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, db: Session = Depends(get_db)):
    """Record the logout. The client drops its cached session."""
    user_id = request.headers.get("x-user-id")
    if user_id:
        audit_service.log_from_request(
            db, request, user_id=None, action="logout", resource="auth",
            details={"userId": user_id},
        )
    return MessageResponse(message="Logged out successfully")


@router.get("/me")
async def get_me(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Fresh user and role record for session synchronization."""
    user = auth_service.get_user(db, user_id)
    return {"success": True, "user": user_out(user)}
