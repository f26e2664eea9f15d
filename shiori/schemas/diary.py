# schemas/diary.py
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .common import CamelModel, UtcDatetime


# ----------------------
# Entry Schemas
# ----------------------

class EntryOut(CamelModel):
    id: int
    date: str
    time: str
    text: str
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class CreateEntryRequest(BaseModel):
    """Body of POST /today/entries. The target date is always today."""
    text: Optional[str] = Field(default=None, description="Entry body, at most 10000 characters")


# ----------------------
# Day Schemas
# ----------------------

class DaySummary(CamelModel):
    date: str
    display_date: str
    entries_count: int
    last_entry: Optional[EntryOut] = None


class DayOut(CamelModel):
    date: str
    display_date: str
    entries: List[EntryOut] = Field(default_factory=list)


class TodayOut(DayOut):
    current_time: str


# ----------------------
# Statistics / Export
# ----------------------

class StatisticsOut(CamelModel):
    total_days: int = 0
    total_entries: int = 0
    first_day: Optional[str] = None
    last_day: Optional[str] = None
    average_entries_per_day: float = 0


class ExportUser(CamelModel):
    id: int
    username: str


class ExportOut(CamelModel):
    export_date: UtcDatetime
    user: ExportUser
    data: Dict[str, List[EntryOut]]
