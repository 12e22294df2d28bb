"""Log store — one row per triggered event."""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from coursefiles.models.base import Base


class LogEvent(Base):
    __tablename__ = "logstore_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    eventname: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    component: Mapped[str] = mapped_column(String(100), nullable=False)
    contextid: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    objecttable: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    objectid: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    other: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON
    userid: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    timecreated: Mapped[int] = mapped_column(Integer, nullable=False)
