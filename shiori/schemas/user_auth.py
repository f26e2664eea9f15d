# schemas/user_auth.py
from typing import Optional

from pydantic import BaseModel

from .common import CamelModel, UtcDatetime


# =====================================================================
# 1. READ SCHEMAS
# =====================================================================

class UserOut(CamelModel):
    """Public view of a user. Never carries the password hash."""
    id: int
    username: str
    email: str
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
    last_login: Optional[UtcDatetime] = None


class UserCreate(BaseModel):
    """Internal creation payload; password is hashed in CRUD."""
    username: str
    email: str
    password: str


# =====================================================================
# 2. AUTH REQUEST SCHEMAS
# =====================================================================

# Fields are optional so that missing values reach the domain validators
# and come back as one list of messages.

class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenValidateRequest(BaseModel):
    token: Optional[str] = None


class UsernameCheckRequest(BaseModel):
    username: Optional[str] = None


class EmailCheckRequest(BaseModel):
    email: Optional[str] = None


# =====================================================================
# 3. AUTH RESPONSE SCHEMAS
# =====================================================================

class AuthResponse(CamelModel):
    """Registration / login response."""
    message: str
    user: UserOut
    token: str


class CurrentUserResponse(CamelModel):
    user: UserOut


class TokenValidateResponse(CamelModel):
    valid: bool
    user: Optional[UserOut] = None
    expires_at: Optional[UtcDatetime] = None
    error: Optional[str] = None


class AvailabilityResponse(CamelModel):
    available: bool
    message: str
