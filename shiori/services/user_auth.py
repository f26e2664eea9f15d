# services/user_auth.py
import logging
from typing import Optional, Dict, Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiori.core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialError,
    UserNotFoundError,
    ValidationError,
)
from shiori.crud.user_auth import crud_user_auth
from shiori.models.user import User
from shiori.schemas.user_auth import UserCreate
from shiori.services import validation

logger = logging.getLogger(__name__)


# =====================================================================
# SERVICE CLASS
# =====================================================================


class UserAuthService:
    """Service layer for registration, authentication and user lookups."""

    def __init__(self):
        self.crud = crud_user_auth

    # =====================================================================
    # USER REGISTRATION
    # =====================================================================

    def register_user(
        self,
        db: Session,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> User:
        """
        Public user registration.

        Args:
            db: Database session
            username: 3-20 letters, digits or underscores
            email: User email
            password: At least 6 characters with letters and digits

        Returns:
            Created User instance

        Raises:
            ValidationError: If any field breaks the format rules
            DuplicateEmailError: If the email is already registered
            DuplicateUsernameError: If the username is already taken
        """
        validation.ensure_valid_registration(username, email, password)

        if self.crud.email_exists(db, email=email):
            raise DuplicateEmailError()
        if self.crud.username_exists(db, username=username):
            raise DuplicateUsernameError()

        try:
            user = self.crud.create(
                db, obj_in=UserCreate(username=username, email=email, password=password)
            )
        except IntegrityError:
            # Lost a race with a concurrent registration; report which key collided
            if self.crud.email_exists(db, email=email):
                raise DuplicateEmailError()
            raise DuplicateUsernameError()

        logger.info(f"Registered user id={user.id} username={user.username}")
        return user

    # =====================================================================
    # AUTHENTICATION & LOGIN
    # =====================================================================

    def authenticate_user(
        self, db: Session, email: Optional[str], password: Optional[str]
    ) -> User:
        """
        Authenticate user with email and password.

        Raises:
            ValidationError: If email or password is missing, or email is malformed
            UserNotFoundError: If no user has this email
            InvalidCredentialError: If the password does not match
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        if not validation.is_valid_email(email):
            raise ValidationError("Invalid email format")

        user = self.crud.get_by_email(db, email=email)
        if not user:
            logger.warning("Login attempt for unknown email")
            raise UserNotFoundError()

        if not self.crud.verify_password(password, user.password_hash):
            logger.warning(f"Failed login for user id={user.id}")
            raise InvalidCredentialError()

        user = self.crud.update_last_login(db, db_obj=user)
        logger.info(f"User id={user.id} logged in")
        return user

    # =====================================================================
    # USER RETRIEVAL
    # =====================================================================

    def get_user_by_id(self, db: Session, user_id: int) -> Optional[User]:
        return self.crud.get(db, id=user_id)

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        return self.crud.get_by_username(db, username=username)

    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        return self.crud.get_by_email(db, email=email)

    # =====================================================================
    # AVAILABILITY CHECKS
    # =====================================================================

    def check_username_available(self, db: Session, username: Optional[str]) -> Dict[str, Any]:
        if not username:
            raise ValidationError("Username is required")
        errors = validation.validate_username(username)
        if errors:
            raise ValidationError(errors[0], errors=errors)

        taken = self.crud.username_exists(db, username=username)
        return {
            "available": not taken,
            "message": "Username is already taken" if taken else "Username is available",
        }

    def check_email_available(self, db: Session, email: Optional[str]) -> Dict[str, Any]:
        if not email:
            raise ValidationError("Email is required")
        if not validation.is_valid_email(email):
            raise ValidationError("Invalid email format")

        taken = self.crud.email_exists(db, email=email)
        return {
            "available": not taken,
            "message": "Email is already in use" if taken else "Email is available",
        }


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

user_auth_service = UserAuthService()
