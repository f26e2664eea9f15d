# shiori/schemas/__init__.py

from .common import CamelModel, SuccessResponse
from .user_auth import (
    UserOut,
    UserCreate,
    RegisterRequest,
    LoginRequest,
    TokenValidateRequest,
    UsernameCheckRequest,
    EmailCheckRequest,
    AuthResponse,
    CurrentUserResponse,
    TokenValidateResponse,
    AvailabilityResponse,
)
from .diary import (
    EntryOut,
    CreateEntryRequest,
    DaySummary,
    DayOut,
    TodayOut,
    StatisticsOut,
    ExportUser,
    ExportOut,
)


__all__ = [
    "CamelModel", "SuccessResponse",

    # Auth
    "UserOut", "UserCreate", "RegisterRequest", "LoginRequest",
    "TokenValidateRequest", "UsernameCheckRequest", "EmailCheckRequest",
    "AuthResponse", "CurrentUserResponse", "TokenValidateResponse", "AvailabilityResponse",

    # Diary
    "EntryOut", "CreateEntryRequest", "DaySummary", "DayOut", "TodayOut",
    "StatisticsOut", "ExportUser", "ExportOut",
]
