import logging
import math
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from shiori.core.config import settings
from shiori.core.exceptions import EmptyTextError, TextTooLongError, ValidationError
from shiori.crud.diary import crud_diary
from shiori.models.diary import Entry
from shiori.schemas.diary import (
    DayOut,
    DaySummary,
    EntryOut,
    StatisticsOut,
    TodayOut,
)
from shiori.services import diary_dates
from shiori.services.validation import is_valid_time_string

logger = logging.getLogger(__name__)


def average_per_day(total_entries: int, total_days: int) -> float:
    """Entries per day rounded half-up to one decimal; 0 when there are no days."""
    if not total_days:
        return 0
    return math.floor(total_entries / total_days * 10 + 0.5) / 10


def clean_entry_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Trim entry text and enforce the non-empty / length rules."""
    if max_length is None:
        max_length = settings.MAX_ENTRY_LENGTH
    if not isinstance(text, str) or not text.strip():
        raise EmptyTextError()
    text = text.strip()
    if len(text) > max_length:
        raise TextTooLongError(max_length)
    return text


class DiaryService:
    """
    Diary operations for a single user.

    Past days are read-only: the only write path is create_today_entry,
    which always targets the server's current date.
    """

    def _entry_out(self, entry: Entry) -> EntryOut:
        return EntryOut.model_validate(entry)

    # ====================================================
    # DAYS
    # ====================================================

    def ensure_today(self, db: Session, *, user_id: int) -> str:
        """Create today's day row if missing and return today's date."""
        today = diary_dates.get_current_date()
        created = crud_diary.ensure_day(
            db,
            user_id=user_id,
            day=today,
            display_date=diary_dates.format_display_date(today),
        )
        if created:
            logger.info(f"Created day {today} for user id={user_id}")
        return today

    def list_days(self, db: Session, *, user_id: int) -> List[DaySummary]:
        rows = crud_diary.get_days_with_counts(db, user_id=user_id)

        return [
            DaySummary(
                date=day,
                display_date=diary_dates.format_display_date(day),
                entries_count=entries_count,
                last_entry=self._entry_out(last_entry) if last_entry is not None else None,
            )
            for day, entries_count, last_entry in rows
        ]

    def get_day(self, db: Session, *, user_id: int, day: str) -> DayOut:
        """Entries of one day by time; an unknown day is simply empty."""
        entries = crud_diary.get_day_entries(db, user_id=user_id, day=day)
        return DayOut(
            date=day,
            display_date=diary_dates.format_display_date(day),
            entries=[self._entry_out(entry) for entry in entries],
        )

    def get_today(self, db: Session, *, user_id: int) -> TodayOut:
        today = self.ensure_today(db, user_id=user_id)
        day = self.get_day(db, user_id=user_id, day=today)
        return TodayOut(
            date=day.date,
            display_date=diary_dates.TODAY_LABEL,
            entries=day.entries,
            current_time=diary_dates.get_current_time(),
        )

    # ====================================================
    # ENTRIES
    # ====================================================

    def create_today_entry(
        self, db: Session, *, user_id: int, text: Optional[str], time: Optional[str] = None
    ) -> EntryOut:
        """
        Append an entry to today's page.

        Raises:
            EmptyTextError: If text is blank after trimming
            TextTooLongError: If trimmed text exceeds MAX_ENTRY_LENGTH
            ValidationError: If time is given but is not HH:MM
        """
        text = clean_entry_text(text)
        if time is not None and not is_valid_time_string(time):
            raise ValidationError("Time must be in HH:MM format")

        today = self.ensure_today(db, user_id=user_id)
        entry = crud_diary.create_entry(
            db,
            user_id=user_id,
            day=today,
            time=time or diary_dates.get_current_time(),
            text=text,
        )
        logger.info(f"User id={user_id} added entry id={entry.id} on {today}")
        return self._entry_out(entry)

    # ====================================================
    # STATISTICS & EXPORT
    # ====================================================

    def get_statistics(self, db: Session, *, user_id: int) -> StatisticsOut:
        stats = crud_diary.get_entry_stats(db, user_id=user_id)
        total_days = stats.total_days or 0
        total_entries = stats.total_entries or 0
        return StatisticsOut(
            total_days=total_days,
            total_entries=total_entries,
            first_day=stats.first_day,
            last_day=stats.last_day,
            average_entries_per_day=average_per_day(total_entries, total_days),
        )

    def export_all(self, db: Session, *, user_id: int) -> Dict[str, List[EntryOut]]:
        """Every day of the user mapped to its entries in time order."""
        data = {}
        for day in crud_diary.list_day_dates(db, user_id=user_id):
            entries = crud_diary.get_day_entries(db, user_id=user_id, day=day)
            data[day] = [self._entry_out(entry) for entry in entries]
        return data


user_diary_service = DiaryService()
