# smartpark/services/auth_service.py
"""
Password hashing (bcrypt) and access tokens (JWT via python-jose).
Used by the auth router, the get_current_user dependency and the CLI.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from smartpark.config import settings
from smartpark.errors import AuthError, ConflictError, ValidationError
from smartpark.models.user import User, UserRole
from smartpark.utils.logger import get_logger

logger = get_logger(__name__)

BCRYPT_MAX_BYTES = 72


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": user.username,
        "user_id": user.id,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def user_from_token(db: Session, token: Optional[str]) -> User:
    """Resolve a bearer token to an active user, or raise AuthError."""
    if not token:
        raise AuthError("No token, authorization denied")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthError("Token is not valid")
    username = payload.get("sub")
    if not username:
        raise AuthError("Token is not valid")
    user = db.query(User).filter(User.username == username).first()
    if user is None or not user.is_active:
        raise AuthError("Token is not valid")
    return user


def authenticate_user(db: Session, username: Optional[str], password: Optional[str]) -> User:
    if not username or not password:
        raise ValidationError("Please provide username and password")
    user = db.query(User).filter(User.username == username, User.is_active == True).first()  # noqa: E712
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"[Auth] Failed login for '{username}'")
        raise AuthError("Invalid credentials")
    return user


def validate_password(password: str):
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long"
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")


def create_user(db: Session, username: str, password: str, role: str = "manager") -> User:
    """Create an account. Raises ValidationError / ConflictError, commits on success."""
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Please provide username and password")
    try:
        role_enum = UserRole(role)
    except ValueError:
        raise ValidationError("Invalid role. Must be admin or manager")
    validate_password(password)
    if db.query(User).filter(User.username == username).first():
        raise ConflictError("Username already exists")

    user = User(username=username, hashed_password=get_password_hash(password),
                role=role_enum, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[Auth] Created {role_enum.value} account '{username}'")
    return user
