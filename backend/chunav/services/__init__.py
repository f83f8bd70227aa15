"""Business logic services."""

from chunav.services.analytics_service import AnalyticsService
from chunav.services.prediction_set_service import PredictionSetService

__all__ = [
    "PredictionSetService",
    "AnalyticsService",
]
