"""
Auth-related Pydantic schemas for request/response validation.
"""
import re
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"


class UserRegister(BaseModel):
    """Schema for user registration request."""
    email: EmailStr
    password: str
    name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one number")
        if not re.search(r"[^A-Za-z0-9]", v):
            raise ValueError("Password must contain at least one special character")
        return v


class UserLogin(BaseModel):
    """Schema for user login request."""
    email: EmailStr
    password: str = Field(min_length=1)


class Token(BaseModel):
    """Schema for token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Schema for token refresh request."""
    refresh_token: str = Field(min_length=1)


class UserResponse(BaseModel):
    """Schema for user response (without password)."""
    id: UUID
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Registration response: the new account plus its tokens."""
    user: UserResponse
    tokens: Token


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)


class RoleUpdate(BaseModel):
    role: Literal["USER", "ADMIN", "SUPER_ADMIN"]
