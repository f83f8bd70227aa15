"""Pydantic schemas."""

from chunav.schemas.analytics import (
    AreaAnalyticsResponse,
    ConstituencyAnalytics,
    GeneralStats,
    LeaderboardEntry,
    LeaderboardResponse,
    PartyBreakdown,
    PartySummary,
    ProgressDetail,
    ProgressResponse,
    PublicPredictionsResponse,
    StatsResponse,
)
from chunav.schemas.common import (
    BaseSchema,
    ElectionTypeEnum,
    PartyEnum,
    PredictionStatusEnum,
    SortOrderEnum,
    TimestampSchema,
)
from chunav.schemas.prediction_set import (
    AddPredictionResponse,
    AreaPredictionsResponse,
    BulkPredictionRequest,
    BulkPredictionResponse,
    BulkSummary,
    ConstituencyPredictionInput,
    ConstituencyPredictionResponse,
    DeletePredictionResponse,
    DeviceInfo,
    LockPredictionResponse,
    PredictionSetCreate,
    PredictionSetListResponse,
    PredictionSetResponse,
    PredictionSetUpdate,
    ResetResponse,
    SubmitRequest,
    UserPublic,
)

__all__ = [
    # Common
    "BaseSchema",
    "TimestampSchema",
    "PartyEnum",
    "ElectionTypeEnum",
    "PredictionStatusEnum",
    "SortOrderEnum",
    # Prediction set
    "UserPublic",
    "DeviceInfo",
    "ConstituencyPredictionInput",
    "ConstituencyPredictionResponse",
    "PredictionSetCreate",
    "PredictionSetUpdate",
    "PredictionSetResponse",
    "PredictionSetListResponse",
    "AddPredictionResponse",
    "LockPredictionResponse",
    "DeletePredictionResponse",
    "BulkPredictionRequest",
    "BulkSummary",
    "BulkPredictionResponse",
    "ResetResponse",
    "SubmitRequest",
    "AreaPredictionsResponse",
    # Analytics
    "LeaderboardEntry",
    "LeaderboardResponse",
    "PartyBreakdown",
    "ConstituencyAnalytics",
    "PartySummary",
    "AreaAnalyticsResponse",
    "GeneralStats",
    "StatsResponse",
    "ProgressDetail",
    "ProgressResponse",
    "PublicPredictionsResponse",
]
