"""User model — only the name fields shown next to uploaded files."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from coursefiles.models.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    firstname: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    lastname: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    @property
    def fullname(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
