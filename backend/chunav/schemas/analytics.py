"""Leaderboard and analytics schemas."""

from datetime import datetime

from pydantic import Field

from chunav.schemas.common import BaseSchema
from chunav.schemas.prediction_set import PredictionSetResponse, UserPublic


class LeaderboardEntry(BaseSchema):
    """One ranked prediction set."""

    rank: int = Field(..., ge=1)
    prediction_set_id: str
    user: UserPublic
    total_predictions: int
    locked_predictions: int
    total_coins: int
    completion_percentage: int
    score: float
    submitted_at: datetime | None = None


class LeaderboardResponse(BaseSchema):
    items: list[LeaderboardEntry]
    total_count: int
    current_page: int
    total_pages: int


class PartyBreakdown(BaseSchema):
    party: str
    count: int
    avg_confidence: float


class ConstituencyAnalytics(BaseSchema):
    """Party breakdown for one constituency."""

    constituency: str
    party_predictions: list[PartyBreakdown]
    total_predictions: int


class PartySummary(BaseSchema):
    party: str
    count: int
    avg_confidence: float
    locked_count: int


class AreaAnalyticsResponse(BaseSchema):
    area: str
    election_year: int
    constituency_analytics: list[ConstituencyAnalytics]
    party_summary: list[PartySummary]


class GeneralStats(BaseSchema):
    total_users: int = 0
    total_predictions: int = 0
    total_locked_predictions: int = 0
    total_coins_earned: int = 0
    avg_progress: float = 0.0
    completed_predictions: int = 0
    submitted_predictions: int = 0


class StatsResponse(BaseSchema):
    election_year: int
    general: GeneralStats
    party_distribution: list[PartySummary]


class ProgressDetail(BaseSchema):
    total: int
    completed: int
    locked: int
    percentage: int


class ProgressResponse(BaseSchema):
    """Progress of a user's prediction set.

    ``status`` is ``not_started`` when the user has no set yet.
    """

    progress: ProgressDetail
    coins: int
    status: str
    last_updated: datetime | None = None


class PublicPredictionsResponse(BaseSchema):
    items: list[PredictionSetResponse]
    total_count: int
    current_page: int
    total_pages: int
