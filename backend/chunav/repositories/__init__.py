"""Data access repositories."""

from chunav.repositories.base import BaseRepository
from chunav.repositories.prediction_set_repository import PredictionSetRepository

__all__ = [
    "BaseRepository",
    "PredictionSetRepository",
]
