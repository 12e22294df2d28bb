"""File metadata rows — content is owned by the LMS file storage."""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from coursefiles.models.base import Base


class FileRecord(Base):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contenthash: Mapped[str] = mapped_column(String(40), nullable=False, default="")
    contextid: Mapped[int] = mapped_column(
        Integer, ForeignKey("contexts.id"), nullable=False, index=True
    )
    component: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    filearea: Mapped[str] = mapped_column(String(50), nullable=False)
    itemid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    filepath: Mapped[str] = mapped_column(Text, nullable=False, default="/")
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    userid: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    filesize: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mimetype: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    author: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    license: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timecreated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    timemodified: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<FileRecord(id={self.id}, component='{self.component}', filename='{self.filename}')>"
