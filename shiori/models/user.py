# models/user.py

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from shiori.core.config import Base


class User(Base):
    __tablename__ = "users"

    # ---- Base fields ----
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    # ---- Login tracking ----
    last_login = Column(DateTime(timezone=True), nullable=True)

    # ---- Relationships ----
    days = relationship("Day", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
