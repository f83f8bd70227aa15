"""Prediction set model.

A prediction set holds every constituency prediction a user made for one
election in one state, together with summary fields derived from them.
Mutation methods only touch the records; the summary is rebuilt by
``recompute_summary`` right before the repository flushes the set.
"""

import enum
import math
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chunav.database import Base
from chunav.errors import (
    AlreadyLockedError,
    AlreadySubmittedError,
    InsufficientRecordsError,
    LockedRecordError,
    NoOpError,
    NotFoundError,
    ValidationError,
)
from chunav.models.base import TimestampMixin, utcnow
from chunav.models.constituency_prediction import ConstituencyPrediction

# Order matters: seat ties go to the party listed first.
POLITICAL_PARTIES: tuple[str, ...] = (
    "BJP",  # Bharatiya Janata Party
    "JDU",  # Janata Dal (United)
    "RJD",  # Rashtriya Janata Dal
    "INC",  # Indian National Congress
    "LJP",  # Lok Janshakti Party
)

BIHAR_AREAS: tuple[str, ...] = (
    "Valmiki Nagar", "Paschim Champaran", "Purvi Champaran", "Sheohar",
    "Sitamarhi", "Madhubani", "Jhanjharpur", "Supaul", "Araria",
    "Kishanganj", "Katihar", "Purnia", "Madhepura", "Darbhanga",
    "Muzaffarpur", "Vaishali", "Gopalganj (SC)", "Siwan", "Maharajganj",
    "Saran", "Hajipur (SC)", "Ujiarpur", "Samastipur (SC)", "Begusarai",
    "Khagaria", "Bhagalpur", "Banka", "Munger", "Nalanda", "Patna Sahib",
    "Pataliputra", "Arrah", "Buxar", "Sasaram (SC)", "Karakat",
    "Jehanabad", "Aurangabad", "Gaya (SC)", "Nawada", "Jamui (SC)",
)

DEFAULT_CONFIDENCE = 50


class ElectionType(str, enum.Enum):
    """Election type enum."""

    ASSEMBLY = "assembly"
    LOK_SABHA = "lok_sabha"
    BY_ELECTION = "by_election"


class PredictionStatus(str, enum.Enum):
    """Workflow status, only moves forward."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    VERIFIED = "verified"


def empty_seat_tally() -> dict[str, int]:
    return {party: 0 for party in POLITICAL_PARTIES}


def percentage(part: int, whole: int) -> int:
    """Percentage rounded half up, 0 for an empty whole."""
    if whole <= 0:
        return 0
    return math.floor(part / whole * 100 + 0.5)


class PredictionSet(Base, TimestampMixin):
    """Prediction set table model."""

    __tablename__ = "prediction_sets"
    __table_args__ = (
        UniqueConstraint("user_id", "election_year", "state", name="uq_prediction_set_owner"),
    )

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    election_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ElectionType.ASSEMBLY.value
    )
    election_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(50), nullable=False, default="Bihar", index=True)
    total_constituencies: Mapped[int] = mapped_column(Integer, nullable=False, default=243)

    # Derived summary
    overall_winner: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # Winner picked at submission, wins over the seat tally on every recompute
    winner_override: Mapped[str | None] = mapped_column(String(10), nullable=True)
    party_wise_seats: Mapped[dict] = mapped_column(JSON, nullable=False, default=empty_seat_tally)
    total_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Gamification
    total_coins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prediction_accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Status and metadata
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PredictionStatus.DRAFT.value, index=True
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_public: Mapped[bool] = mapped_column(nullable=False, default=False, index=True)
    time_spent_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    device_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Relationships
    predictions: Mapped[list[ConstituencyPrediction]] = relationship(
        "ConstituencyPrediction",
        back_populates="prediction_set",
        cascade="all, delete-orphan",
        order_by="ConstituencyPrediction.id",
        lazy="selectin",
    )
    owner = relationship(
        "User",
        primaryjoin="foreign(PredictionSet.user_id) == User.id",
        viewonly=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<PredictionSet(id='{self.id}', user_id='{self.user_id}', "
            f"election_year={self.election_year}, state='{self.state}')>"
        )

    @property
    def completion_percentage(self) -> int:
        return percentage(self.total_predictions or 0, self.total_constituencies or 0)

    @property
    def locked_count(self) -> int:
        return sum(1 for p in self.predictions if p.is_locked)

    def get_prediction(self, constituency: str) -> ConstituencyPrediction | None:
        """Find the prediction for a constituency."""
        constituency = constituency.strip()
        for prediction in self.predictions:
            if prediction.constituency == constituency:
                return prediction
        return None

    def predictions_by_area(self, area: str) -> list[ConstituencyPrediction]:
        return [p for p in self.predictions if p.area == area]

    def calculate_progress(self) -> dict[str, int]:
        return {
            "total": self.total_constituencies,
            "completed": self.total_predictions,
            "locked": self.locked_predictions,
            "percentage": self.completion_percentage,
        }

    def add_prediction(
        self,
        constituency: str,
        area: str,
        predicted_party: str,
        confidence: int | float | str = DEFAULT_CONFIDENCE,
    ) -> str:
        """Add a constituency prediction or update an unlocked one.

        Returns ``"created"`` or ``"updated"``. An update only changes the
        party and confidence; the area of an existing record is kept.
        """
        constituency, confidence = validate_prediction_input(
            constituency, area, predicted_party, confidence
        )

        existing = self.get_prediction(constituency)
        now = utcnow()

        if existing is not None:
            if existing.is_locked:
                raise LockedRecordError(f"Prediction for {constituency} is locked")
            existing.predicted_party = predicted_party
            existing.confidence = confidence
            existing.last_modified = now
            return "updated"

        self.predictions.append(
            ConstituencyPrediction(
                constituency=constituency,
                area=area,
                predicted_party=predicted_party,
                confidence=confidence,
                is_locked=False,
                last_modified=now,
            )
        )
        return "created"

    def lock_prediction(self, constituency: str) -> ConstituencyPrediction:
        """Freeze a prediction. Locking is one-way."""
        prediction = self.get_prediction(constituency)
        if prediction is None:
            raise NotFoundError("Constituency prediction not found")
        if prediction.is_locked:
            raise AlreadyLockedError()

        prediction.is_locked = True
        prediction.locked_at = utcnow()
        return prediction

    def delete_prediction(self, constituency: str) -> None:
        prediction = self.get_prediction(constituency)
        if prediction is None:
            raise NotFoundError("Constituency prediction not found")
        if prediction.is_locked:
            raise LockedRecordError("Cannot delete locked prediction")

        self.predictions.remove(prediction)

    def reset_unlocked(self, coins_per_locked: int = 15) -> int:
        """Drop every unlocked prediction and rebuild coins from the locked ones.

        Coins are recomputed from scratch, not adjusted: whatever else was
        earned is discarded. Returns the number of removed predictions.
        """
        locked = [p for p in self.predictions if p.is_locked]
        removed = len(self.predictions) - len(locked)
        if removed == 0:
            raise NoOpError()

        self.predictions = locked
        self.total_coins = len(locked) * coins_per_locked
        return removed

    def submit(
        self,
        overall_winner: str | None = None,
        min_predictions: int = 50,
        bonus: int = 50,
    ) -> None:
        """Move a draft set to submitted and grant the submission bonus."""
        if self.status in (PredictionStatus.SUBMITTED.value, PredictionStatus.COMPLETED.value):
            raise AlreadySubmittedError()

        count = len(self.predictions)
        if count < min_predictions:
            raise InsufficientRecordsError(
                f"Minimum {min_predictions} constituency predictions required to submit"
            )
        if overall_winner is not None and overall_winner not in POLITICAL_PARTIES:
            raise ValidationError(f"Invalid party: {overall_winner}")

        self.status = PredictionStatus.SUBMITTED.value
        self.submitted_at = utcnow()
        self.winner_override = overall_winner
        self.total_coins = (self.total_coins or 0) + bonus


def validate_prediction_input(
    constituency: str | None,
    area: str | None,
    predicted_party: str | None,
    confidence: int | float | str | None,
) -> tuple[str, int]:
    """Check one prediction's fields.

    Returns the trimmed constituency name and the confidence as an int.
    Numeric strings and whole floats such as ``"80"`` or ``80.0`` are accepted.
    """
    constituency = (constituency or "").strip()
    if not constituency or not area or not predicted_party:
        raise ValidationError("Constituency, area, and predicted party are required")
    if area not in BIHAR_AREAS:
        raise ValidationError(f"Invalid area: {area}")
    if predicted_party not in POLITICAL_PARTIES:
        raise ValidationError(f"Invalid party: {predicted_party}")
    if confidence is None or isinstance(confidence, bool):
        raise ValidationError("Confidence must be between 0 and 100")
    try:
        value = float(confidence)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid confidence: {confidence}")
    if not value.is_integer():
        raise ValidationError(f"Confidence must be a whole number: {confidence}")
    if not 0 <= value <= 100:
        raise ValidationError("Confidence must be between 0 and 100")
    return constituency, int(value)


def recompute_summary(prediction_set: PredictionSet) -> PredictionSet:
    """Rebuild every derived field of a prediction set from its predictions.

    The seat tally is rebuilt from zero in ``POLITICAL_PARTIES`` order, so the
    winner on a tie is the first listed party with the top count. With no
    predictions there is no winner. A winner chosen at submission is kept
    in ``winner_override`` and replaces the derived one on every recompute.
    """
    predictions = prediction_set.predictions

    prediction_set.total_predictions = len(predictions)
    prediction_set.locked_predictions = sum(1 for p in predictions if p.is_locked)

    seats = empty_seat_tally()
    for prediction in predictions:
        if prediction.predicted_party in seats:
            seats[prediction.predicted_party] += 1
    prediction_set.party_wise_seats = seats

    max_seats = max(seats.values())
    prediction_set.overall_winner = None
    if max_seats > 0:
        prediction_set.overall_winner = next(
            party for party in POLITICAL_PARTIES if seats[party] == max_seats
        )

    if prediction_set.winner_override:
        prediction_set.overall_winner = prediction_set.winner_override

    prediction_set.last_updated = utcnow()
    return prediction_set
