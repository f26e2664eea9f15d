# shiori/models/__init__.py

from shiori.core.config import Base

# Import all models here so create_all and app-wide imports see every table
from .user import User
from .diary import Day, Entry

__all__ = [
    "Base",
    "User",
    "Day",
    "Entry",
]
