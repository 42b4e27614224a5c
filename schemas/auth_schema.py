"""Schemas for registration, login and profile management."""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class RegisterRequest(BaseModel):
    """Request payload for creating a dietitian account."""

    name: str = Field(..., min_length=2, examples=["Ayşe Yılmaz"], description="Full name")
    email: EmailStr = Field(..., examples=["ayse@diyetim.com.tr"])
    password: str = Field(..., min_length=6, examples=["gizli123"], description="At least 6 characters")
    bio: Optional[str] = Field(None, examples=["Uzman diyetisyen, sporcu beslenmesi"])
    phone: Optional[str] = Field(None, examples=["0532 123 45 67"])
    profile_picture: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., examples=["ayse@diyetim.com.tr"])
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    bio: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    """A dietitian as returned by the API. Never carries the password hash."""

    id: int
    email: str
    name: str
    bio: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    telegram_configured: bool = False
    created_at: Optional[str] = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
