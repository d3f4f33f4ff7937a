# smartpark/routers/auth.py
"""Login, registration and the bearer-token dependencies used by every other router."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from smartpark.config import settings
from smartpark.database import get_db
from smartpark.errors import AuthError, PermissionDeniedError
from smartpark.models.user import User, UserRole
from smartpark.schemas.user import LoginRequest, RegisterRequest, TokenOut, UserOut
from smartpark.services import auth_service

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """FastAPI dependency: resolves the bearer token or raises AuthError (401)."""
    return auth_service.user_from_token(db, credentials.credentials if credentials else None)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if not credentials:
        return None
    try:
        return auth_service.user_from_token(db, credentials.credentials)
    except AuthError:
        return None


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise PermissionDeniedError("Admin access required")
    return current_user


@router.post("/auth/login", response_model=TokenOut, summary="Log in and get a bearer token")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate_user(db, body.username, body.password)
    return {"token": auth_service.create_access_token(user), "user": user}


@router.get("/auth/me", summary="Current user")
def get_me(current_user: User = Depends(get_current_user)):
    return {"user": UserOut.model_validate(current_user)}


@router.post("/auth/register", status_code=status.HTTP_201_CREATED, summary="Register a staff account")
def register(
    body: RegisterRequest,
    db: Session = Depends(get_db),
    caller: Optional[User] = Depends(get_optional_user),
):
    """
    Managers may self-register while ALLOW_SELF_REGISTRATION is on.
    Creating an admin always requires an authenticated admin.
    """
    if body.role == UserRole.ADMIN.value and (caller is None or caller.role != UserRole.ADMIN):
        raise PermissionDeniedError("Only an admin can create admin accounts")
    if not settings.ALLOW_SELF_REGISTRATION and caller is None:
        raise PermissionDeniedError("Self-registration is disabled")

    user = auth_service.create_user(db, body.username, body.password, body.role)
    return {
        "message": "User registered successfully",
        "token": auth_service.create_access_token(user),
        "user": UserOut.model_validate(user),
    }
