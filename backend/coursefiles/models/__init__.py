"""SQLAlchemy ORM models for Course Files."""

from coursefiles.models.base import Base
from coursefiles.models.context import Context
from coursefiles.models.user import User
from coursefiles.models.file import FileRecord
from coursefiles.models.course import CourseModule, BookChapter
from coursefiles.models.log_event import LogEvent

__all__ = [
    "Base",
    "Context",
    "User",
    "FileRecord",
    "CourseModule",
    "BookChapter",
    "LogEvent",
]
