# models/diary.py

from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, ForeignKeyConstraint, Index
)
from sqlalchemy.orm import relationship
from shiori.core.config import Base


class Day(Base):
    __tablename__ = "days"

    date = Column(String(10), primary_key=True)  # YYYY-MM-DD
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    display_date = Column(String(64), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    user = relationship("User", back_populates="days")
    entries = relationship(
        "Entry",
        back_populates="day",
        order_by="Entry.time",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Entry(Base):
    __tablename__ = "entries"
    __table_args__ = (
        ForeignKeyConstraint(
            ["date", "user_id"], ["days.date", "days.user_id"], ondelete="CASCADE"
        ),
        Index("idx_entries_user_date", "user_id", "date"),
        Index("idx_entries_time", "date", "time"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM
    text = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    day = relationship("Day", back_populates="entries")
