"""Context tree — hierarchical scopes (system, course, module, ...)."""

from sqlalchemy import Integer, String, Index
from sqlalchemy.orm import Mapped, mapped_column

from coursefiles.models.base import Base

CONTEXT_SYSTEM = 10
CONTEXT_COURSE = 50
CONTEXT_MODULE = 70
CONTEXT_BLOCK = 80


class Context(Base):
    __tablename__ = "contexts"
    __table_args__ = (
        Index("ix_contexts_level_instance", "contextlevel", "instanceid"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contextlevel: Mapped[int] = mapped_column(Integer, nullable=False)
    instanceid: Mapped[int] = mapped_column(Integer, nullable=False)
    path: Mapped[str] = mapped_column(String(255), nullable=False, index=True)  # "/1/2/3"
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Context(id={self.id}, path='{self.path}')>"
