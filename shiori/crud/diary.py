from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, aliased

from shiori.core.exceptions import ServiceError
from shiori.models.diary import Day, Entry


class CRUDDiary:
    """Queries over days and entries. Every method is scoped by user_id."""

    # ====================================================
    # DAYS
    # ====================================================

    def ensure_day(
        self, db: Session, *, user_id: int, day: str, display_date: str
    ) -> bool:
        """Insert the (day, user_id) row unless it already exists.

        A single INSERT ... ON CONFLICT DO NOTHING, so two concurrent callers
        end up with one row and neither fails. Returns True when this call
        created the row.
        """
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            insert = postgresql.insert
        elif dialect == "sqlite":
            insert = sqlite.insert
        else:
            raise ServiceError(f"Day upsert is not supported on {dialect}")

        stmt = (
            insert(Day)
            .values(date=day, user_id=user_id, display_date=display_date)
            .on_conflict_do_nothing(index_elements=[Day.date, Day.user_id])
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def get_day(self, db: Session, *, user_id: int, day: str) -> Optional[Day]:
        return (
            db.query(Day)
            .filter(Day.user_id == user_id, Day.date == day)
            .first()
        )

    def count_days(self, db: Session, *, user_id: int) -> int:
        return db.query(Day).filter(Day.user_id == user_id).count()

    def get_days_with_counts(
        self, db: Session, *, user_id: int
    ) -> List[Tuple[str, int, Optional[Entry]]]:
        """(date, entries_count, last_entry), newest day first.

        The last entry is the most recently added one (highest id), loaded in
        the same query.
        """
        per_day = (
            db.query(
                Entry.date.label("date"),
                func.count(Entry.id).label("entries_count"),
                func.max(Entry.id).label("last_entry_id"),
            )
            .filter(Entry.user_id == user_id)
            .group_by(Entry.date)
            .subquery()
        )
        last_entry = aliased(Entry)
        return (
            db.query(
                Day.date,
                func.coalesce(per_day.c.entries_count, 0),
                last_entry,
            )
            .outerjoin(per_day, Day.date == per_day.c.date)
            .outerjoin(last_entry, last_entry.id == per_day.c.last_entry_id)
            .filter(Day.user_id == user_id)
            .order_by(Day.date.desc())
            .all()
        )

    def list_day_dates(self, db: Session, *, user_id: int) -> List[str]:
        rows = (
            db.query(Day.date)
            .filter(Day.user_id == user_id)
            .order_by(Day.date.desc())
            .all()
        )
        return [row.date for row in rows]

    # ====================================================
    # ENTRIES
    # ====================================================

    def create_entry(
        self, db: Session, *, user_id: int, day: str, time: str, text: str
    ) -> Entry:
        entry = Entry(date=day, user_id=user_id, time=time, text=text)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    def get_day_entries(self, db: Session, *, user_id: int, day: str) -> List[Entry]:
        return (
            db.query(Entry)
            .filter(Entry.date == day, Entry.user_id == user_id)
            .order_by(Entry.time.asc(), Entry.id.asc())
            .all()
        )

    # ====================================================
    # STATISTICS
    # ====================================================

    def get_entry_stats(self, db: Session, *, user_id: int):
        """Row with total_days, total_entries, first_day, last_day."""
        return (
            db.query(
                func.count(func.distinct(Entry.date)).label("total_days"),
                func.count(Entry.id).label("total_entries"),
                func.min(Entry.date).label("first_day"),
                func.max(Entry.date).label("last_day"),
            )
            .filter(Entry.user_id == user_id)
            .one()
        )


crud_diary = CRUDDiary()
