"""Prediction set schemas."""

from datetime import datetime

from pydantic import Field

from chunav.schemas.common import (
    BaseSchema,
    ElectionTypeEnum,
    PartyEnum,
    PredictionStatusEnum,
    TimestampSchema,
)


class UserPublic(BaseSchema):
    """Public profile fields of a prediction set owner."""

    id: str
    username: str
    full_name: str
    avatar: str | None = None
    points: int = 0


class DeviceInfo(BaseSchema):
    platform: str | None = None
    version: str | None = None
    user_agent: str | None = None


class ConstituencyPredictionInput(BaseSchema):
    """One constituency prediction as sent by a client.

    Fields are loose on purpose so that bulk requests can report bad items
    one by one instead of rejecting the whole batch.
    """

    constituency: str | None = Field(None, description="Constituency name")
    confidence: int | float | str | None = Field(50, description="Confidence 0-100")
    predicted_party: str | None = Field(None, description="Predicted winning party")
    area: str | None = Field(None, description="Area name")


class ConstituencyPredictionResponse(TimestampSchema):
    """Constituency prediction response."""

    id: int
    constituency: str
    area: str
    predicted_party: str
    confidence: int
    is_locked: bool
    locked_at: datetime | None = None
    last_modified: datetime


class PredictionSetCreate(BaseSchema):
    """Schema for creating a prediction set."""

    election_type: ElectionTypeEnum = ElectionTypeEnum.ASSEMBLY
    election_year: int = Field(..., ge=1950, le=2100)
    state: str | None = Field(None, min_length=1, max_length=50)


class PredictionSetUpdate(BaseSchema):
    """Owner-editable metadata. Summary fields are not accepted."""

    status: PredictionStatusEnum | None = None
    is_public: bool | None = None
    time_spent_minutes: int | None = Field(None, ge=0)
    device_info: DeviceInfo | None = None


class PredictionSetResponse(TimestampSchema):
    """Prediction set response schema."""

    id: str
    user_id: str
    election_type: str
    election_year: int
    state: str
    total_constituencies: int
    predictions: list[ConstituencyPredictionResponse] = Field(default_factory=list)
    overall_winner: str | None = None
    party_wise_seats: dict[str, int]
    total_coins: int
    total_predictions: int
    locked_predictions: int
    completion_percentage: int
    prediction_accuracy: float | None = None
    status: str
    submitted_at: datetime | None = None
    last_updated: datetime
    is_public: bool
    time_spent_minutes: int = 0
    device_info: DeviceInfo | None = None
    owner: UserPublic | None = None


class PredictionSetListResponse(BaseSchema):
    """Paginated prediction set list."""

    items: list[PredictionSetResponse]
    total: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_prev_page: bool


class AddPredictionResponse(BaseSchema):
    prediction: PredictionSetResponse
    coins_earned: int
    action: str


class LockPredictionResponse(BaseSchema):
    prediction: PredictionSetResponse
    coins_earned: int


class DeletePredictionResponse(BaseSchema):
    prediction: PredictionSetResponse
    coins_deducted: int


class BulkPredictionRequest(BaseSchema):
    predictions: list[ConstituencyPredictionInput] = Field(default_factory=list)


class BulkSummary(BaseSchema):
    added: int = 0
    updated: int = 0
    errors: int = 0
    total_coins_earned: int = 0


class BulkPredictionResponse(BaseSchema):
    """Bulk add result. Failed items are listed in ``errors``."""

    prediction: PredictionSetResponse
    summary: BulkSummary
    errors: list[str] | None = None


class ResetResponse(BaseSchema):
    prediction: PredictionSetResponse
    reset_count: int
    locked_count: int


class SubmitRequest(BaseSchema):
    overall_winner: PartyEnum | None = None


class AreaPredictionsResponse(BaseSchema):
    area: str
    predictions: list[ConstituencyPredictionResponse]
    count: int
