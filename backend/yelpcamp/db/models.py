from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column

from yelpcamp.db.base import Base


@dataclass(frozen=True)
class Author:
    """Owner snapshot copied onto a record when it is created."""
    id: int | None
    username: str | None


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    image: Mapped[str | None] = mapped_column(String(1024))
    image_id: Mapped[str | None] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(Text)
    reset_password_token: Mapped[str | None] = mapped_column(String(64), index=True)
    reset_password_expires: Mapped[datetime | None] = mapped_column(DateTime)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Campground(Base):
    __tablename__ = "campgrounds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[str | None] = mapped_column(String(32))
    location: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(1024))
    image_id: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # no foreign keys: author is a snapshot, comments an ordered id list
    author_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    author_username: Mapped[str] = mapped_column(String(64), nullable=False)
    comment_ids: Mapped[list[int]] = mapped_column(MutableList.as_mutable(JSON), default=list)

    @property
    def author(self) -> Author:
        return Author(self.author_id, self.author_username)


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # stamped after the row exists
    author_id: Mapped[int | None] = mapped_column(Integer, index=True)
    author_username: Mapped[str | None] = mapped_column(String(64))

    @property
    def author(self) -> Author:
        return Author(self.author_id, self.author_username)
