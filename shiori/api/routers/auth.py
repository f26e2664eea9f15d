# shiori/api/routers/auth.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shiori.core.config import get_db
from shiori.core.exceptions import ValidationError
from shiori.core.security import (
    create_access_token,
    get_current_user,
    validate_token,
)
from shiori.services.user_auth import user_auth_service
from shiori.models.user import User
from shiori.schemas.common import SuccessResponse
from shiori.schemas.user_auth import (
    # Request schemas
    RegisterRequest,
    LoginRequest,
    TokenValidateRequest,
    UsernameCheckRequest,
    EmailCheckRequest,

    # Response schemas
    AuthResponse,
    AvailabilityResponse,
    CurrentUserResponse,
    TokenValidateResponse,
    UserOut,
)

router = APIRouter(prefix="/auth", tags=["User Authentication"])


# =====================================================================
# PUBLIC ENDPOINTS - No authentication required
# =====================================================================

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user account"
)
def register(
    user_data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account and log them in.

    - **username**: 3-20 letters, digits or underscores
    - **email**: Valid email address
    - **password**: At least 6 characters, letters and digits

    Returns the created user (without the password hash) and a bearer token.
    """
    user = user_auth_service.register_user(
        db=db,
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
    )
    return AuthResponse(
        message="User registered successfully",
        user=UserOut.model_validate(user),
        token=create_access_token(user.id),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login to get access token"
)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate with email and password and receive a bearer token.

    Unknown email gives 404, wrong password gives 401.
    """
    user = user_auth_service.authenticate_user(db, login_data.email, login_data.password)
    return AuthResponse(
        message="Logged in successfully",
        user=UserOut.model_validate(user),
        token=create_access_token(user.id),
    )


@router.post(
    "/validate",
    response_model=TokenValidateResponse,
    response_model_exclude_none=True,
    summary="Check whether a token is still valid"
)
def validate(
    token_data: TokenValidateRequest,
    db: Session = Depends(get_db)
):
    """Answers 200 with the token's user and expiry, or 401 with `valid: false`."""
    if not token_data.token:
        raise ValidationError("Token is required")

    result = validate_token(db, token_data.token)
    if not result["valid"]:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"valid": False, "error": result["error"]},
        )
    return TokenValidateResponse(
        valid=True,
        user=UserOut.model_validate(result["user"]),
        expires_at=result["expires_at"],
    )


@router.post(
    "/check-username",
    response_model=AvailabilityResponse,
    summary="Check if a username is free"
)
def check_username(
    request: UsernameCheckRequest,
    db: Session = Depends(get_db)
):
    return user_auth_service.check_username_available(db, request.username)


@router.post(
    "/check-email",
    response_model=AvailabilityResponse,
    summary="Check if an email is free"
)
def check_email(
    request: EmailCheckRequest,
    db: Session = Depends(get_db)
):
    return user_auth_service.check_email_available(db, request.email)


# =====================================================================
# USER ENDPOINTS - Authentication required
# =====================================================================

@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user profile"
)
def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """
    Get the authenticated user's profile information.

    Requires valid access token in Authorization header.
    """
    return CurrentUserResponse(user=UserOut.model_validate(current_user))


@router.post(
    "/logout",
    response_model=SuccessResponse,
    response_model_exclude_none=True,
    summary="Log out"
)
def logout(
    current_user: User = Depends(get_current_user)
):
    """
    Tokens are stateless, so nothing is revoked server-side; the client
    discards its stored token.
    """
    return SuccessResponse(
        message="Logged out successfully",
        instructions="Remove the token from local storage",
    )
