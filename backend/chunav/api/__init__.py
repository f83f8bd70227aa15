"""API routers."""

from chunav.api.predictions import router as predictions_router

__all__ = [
    "predictions_router",
]
