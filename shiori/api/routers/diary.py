from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shiori.core.config import get_db
from shiori.core.exceptions import ValidationError
from shiori.core.security import get_current_user
from shiori.services.diary import user_diary_service
from shiori.services import diary_dates
from shiori.services.validation import is_valid_date_string
from shiori.models.user import User
from shiori.schemas.diary import (
    CreateEntryRequest,
    DayOut,
    DaySummary,
    EntryOut,
    ExportOut,
    ExportUser,
    StatisticsOut,
    TodayOut,
)


# ====================================================
# ROUTER
# ====================================================

router = APIRouter(tags=["Diary"])


# ====================================================
# DAY ENDPOINTS
# ====================================================


@router.get("/days", response_model=List[DaySummary])
def list_days(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """All of the user's days, newest first, with entry count and last entry."""
    return user_diary_service.list_days(db, user_id=current_user.id)


@router.get("/days/{day}", response_model=DayOut)
def get_day(
    day: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Entries of one day ordered by time. A day without entries is empty, not 404."""
    if not is_valid_date_string(day):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    return user_diary_service.get_day(db, user_id=current_user.id, day=day)


@router.get("/today", response_model=TodayOut)
def get_today(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get or create today's page, with the server's current time."""
    return user_diary_service.get_today(db, user_id=current_user.id)


# ====================================================
# ENTRY ENDPOINTS
# ====================================================


@router.post(
    "/today/entries",
    response_model=EntryOut,
    status_code=status.HTTP_201_CREATED,
)
def create_today_entry(
    request: CreateEntryRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an entry to today. Entries cannot be edited or deleted afterwards."""
    return user_diary_service.create_today_entry(
        db, user_id=current_user.id, text=request.text
    )


# ====================================================
# STATISTICS & EXPORT
# ====================================================


@router.get("/statistics", response_model=StatisticsOut)
def get_statistics(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return user_diary_service.get_statistics(db, user_id=current_user.id)


@router.get("/export", response_model=ExportOut)
def export_diary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Download the whole diary as a JSON attachment."""
    export = ExportOut(
        export_date=datetime.now(timezone.utc),
        user=ExportUser(id=current_user.id, username=current_user.username),
        data=user_diary_service.export_all(db, user_id=current_user.id),
    )
    filename = f"shiori-diary-export-{current_user.username}-{diary_dates.get_current_date()}.json"
    return JSONResponse(
        content=jsonable_encoder(export, by_alias=True),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
