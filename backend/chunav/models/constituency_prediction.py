"""Constituency prediction model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chunav.database import Base
from chunav.models.base import TimestampMixin, utcnow


class ConstituencyPrediction(Base, TimestampMixin):
    """One predicted winner for one constituency, embedded in a prediction set."""

    __tablename__ = "constituency_predictions"
    __table_args__ = (
        UniqueConstraint("prediction_set_id", "constituency", name="uq_prediction_set_constituency"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prediction_set_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("prediction_sets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    constituency: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    area: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    predicted_party: Mapped[str] = mapped_column(String(10), nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Relationships
    prediction_set = relationship("PredictionSet", back_populates="predictions")

    def __repr__(self) -> str:
        return (
            f"<ConstituencyPrediction(constituency='{self.constituency}', "
            f"party='{self.predicted_party}', locked={self.is_locked})>"
        )
