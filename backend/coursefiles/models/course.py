"""Course structure — course modules and book chapters."""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from coursefiles.models.base import Base


class CourseModule(Base):
    """An activity or resource placed in a course (cmid)."""
    __tablename__ = "course_modules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    modname: Mapped[str] = mapped_column(String(50), nullable=False)  # "folder", "book", ...
    instance: Mapped[int] = mapped_column(Integer, nullable=False)


class BookChapter(Base):
    """Chapter of a book module; files are embedded in its content."""
    __tablename__ = "book_chapters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bookid: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
