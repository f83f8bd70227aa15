"""SQLAlchemy models."""

from chunav.models.constituency_prediction import ConstituencyPrediction
from chunav.models.prediction_set import (
    BIHAR_AREAS,
    POLITICAL_PARTIES,
    ElectionType,
    PredictionSet,
    PredictionStatus,
    recompute_summary,
)
from chunav.models.user import User

__all__ = [
    "PredictionSet",
    "ConstituencyPrediction",
    "User",
    "ElectionType",
    "PredictionStatus",
    "POLITICAL_PARTIES",
    "BIHAR_AREAS",
    "recompute_summary",
]
