# smartpark/schemas/user.py
from pydantic import BaseModel
from typing import Optional

from smartpark.models.user import UserRole


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: str = "manager"        # admin | manager


class UserOut(BaseModel):
    id: int
    username: str
    role: UserRole

    class Config:
        from_attributes = True


class TokenOut(BaseModel):
    token: str
    user: UserOut
