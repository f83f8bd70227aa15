"""User profile model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from chunav.database import Base
from chunav.models.base import TimestampMixin


class User(Base, TimestampMixin):
    """Public profile of a user.

    Identity and credentials live in the upstream auth service; this table only
    mirrors the fields shown next to leaderboard entries and public predictions.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', username='{self.username}')>"
