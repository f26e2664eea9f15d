# crud/user_auth.py
from typing import Optional
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from passlib.context import CryptContext

from shiori.core.config import settings
from shiori.models.user import User
from shiori.schemas.user_auth import UserCreate

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)


class UserAuthCRUD:
    """CRUD operations for the User model."""

    # =====================================================================
    # HELPER METHODS
    # =====================================================================

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password."""
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return pwd_context.verify(plain_password, hashed_password)

    # =====================================================================
    # CREATE OPERATIONS
    # =====================================================================

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        """
        Create a new user.

        Args:
            db: Database session
            obj_in: UserCreate schema with the plain password

        Returns:
            Created User instance

        Raises:
            sqlalchemy.exc.IntegrityError: If username or email is taken
        """
        db_obj = User(
            username=obj_in.username,
            email=obj_in.email,
            password_hash=self.hash_password(obj_in.password),
        )

        db.add(db_obj)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(db_obj)
        return db_obj

    # =====================================================================
    # UPDATE OPERATIONS
    # =====================================================================

    def update_last_login(self, db: Session, *, db_obj: User) -> User:
        """Stamp the last successful login."""
        db_obj.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get(self, db: Session, id: int) -> Optional[User]:
        return db.query(User).filter(User.id == id).first()

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def email_exists(self, db: Session, email: str) -> bool:
        return db.query(User.id).filter(User.email == email).first() is not None

    def username_exists(self, db: Session, username: str) -> bool:
        return db.query(User.id).filter(User.username == username).first() is not None

    def count(self, db: Session) -> int:
        return db.query(User).count()


# Create singleton instance
crud_user_auth = UserAuthCRUD()
