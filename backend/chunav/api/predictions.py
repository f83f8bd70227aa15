"""Prediction set API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from chunav.api.deps import get_current_user_id
from chunav.database import get_db
from chunav.schemas import (
    AddPredictionResponse,
    AreaAnalyticsResponse,
    AreaPredictionsResponse,
    BulkPredictionRequest,
    BulkPredictionResponse,
    ConstituencyPredictionInput,
    ConstituencyPredictionResponse,
    DeletePredictionResponse,
    LeaderboardResponse,
    LockPredictionResponse,
    PredictionSetCreate,
    PredictionSetListResponse,
    PredictionSetResponse,
    PredictionSetUpdate,
    PredictionStatusEnum,
    ProgressResponse,
    PublicPredictionsResponse,
    ResetResponse,
    SortOrderEnum,
    StatsResponse,
    SubmitRequest,
)
from chunav.services import AnalyticsService, PredictionSetService

router = APIRouter(prefix="/predictions", tags=["predictions"])


# Public routes


@router.get("/public", response_model=PublicPredictionsResponse)
async def get_public_predictions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    election_year: int | None = None,
    area: str | None = None,
    constituency: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Get public submitted prediction sets."""
    service = AnalyticsService(db)
    return await service.get_public_predictions(
        page=page, limit=limit, election_year=election_year, area=area, constituency=constituency
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    election_year: int | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Get the prediction leaderboard."""
    service = AnalyticsService(db)
    return await service.get_leaderboard(election_year=election_year, page=page, limit=limit)


@router.get("/stats", response_model=StatsResponse)
async def get_prediction_stats(
    election_year: int | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Get prediction totals and party distribution."""
    service = AnalyticsService(db)
    return await service.get_stats(election_year)


@router.get("/area/{area}/analytics", response_model=AreaAnalyticsResponse)
@router.get("/area/{area}/analytics/{election_year}", response_model=AreaAnalyticsResponse)
async def get_area_analytics(
    area: str,
    election_year: int | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Get constituency and party breakdown for an area."""
    service = AnalyticsService(db)
    return await service.get_area_analytics(area, election_year)


# Authenticated routes


@router.post("/create", response_model=PredictionSetResponse, status_code=201)
async def create_prediction_set(
    data: PredictionSetCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a prediction set for an election."""
    service = PredictionSetService(db)
    return await service.create_prediction_set(user_id, data)


@router.get("/my-prediction", response_model=PredictionSetResponse)
async def get_my_prediction_set(
    election_year: int | None = None,
    state: str | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's prediction set."""
    service = PredictionSetService(db)
    return await service.get_user_prediction_set(user_id, election_year, state)


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(
    election_year: int | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's prediction progress."""
    service = AnalyticsService(db)
    return await service.get_progress(user_id, election_year)


@router.get(
    "/all",
    response_model=PredictionSetListResponse,
    dependencies=[Depends(get_current_user_id)],
)
async def get_all_prediction_sets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    election_year: int | None = None,
    state: str | None = None,
    status: PredictionStatusEnum | None = None,
    is_public: bool | None = None,
    owner_id: str | None = None,
    sort_by: str = "created_at",
    sort_order: SortOrderEnum = SortOrderEnum.DESC,
    db: AsyncSession = Depends(get_db),
):
    """Get prediction sets with filters and pagination."""
    service = PredictionSetService(db)
    return await service.list_prediction_sets(
        page=page,
        limit=limit,
        election_year=election_year,
        state=state,
        status=status.value if status else None,
        is_public=is_public,
        user_id=owner_id,
        sort_by=sort_by,
        sort_order=sort_order.value,
    )


@router.get("/{prediction_set_id}", response_model=PredictionSetResponse)
async def get_prediction_set(
    prediction_set_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a prediction set by ID."""
    service = PredictionSetService(db)
    return await service.get_prediction_set(prediction_set_id, user_id)


@router.patch("/{prediction_set_id}", response_model=PredictionSetResponse)
async def update_prediction_set(
    prediction_set_id: str,
    data: PredictionSetUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update prediction set metadata."""
    service = PredictionSetService(db)
    return await service.update_metadata(prediction_set_id, user_id, data)


@router.delete("/{prediction_set_id}")
async def delete_prediction_set(
    prediction_set_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete a prediction set."""
    service = PredictionSetService(db)
    await service.delete_prediction_set(prediction_set_id, user_id)
    return {"message": "Prediction deleted successfully"}


@router.post("/{prediction_set_id}/constituency", response_model=AddPredictionResponse)
async def add_constituency_prediction(
    prediction_set_id: str,
    data: ConstituencyPredictionInput,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Add or update a constituency prediction."""
    service = PredictionSetService(db)
    return await service.add_prediction(prediction_set_id, user_id, data)


@router.get(
    "/{prediction_set_id}/constituency/{constituency}",
    response_model=ConstituencyPredictionResponse,
)
async def get_constituency_prediction(
    prediction_set_id: str,
    constituency: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get one constituency prediction."""
    service = PredictionSetService(db)
    return await service.get_constituency_prediction(prediction_set_id, user_id, constituency)


@router.delete(
    "/{prediction_set_id}/constituency/{constituency}",
    response_model=DeletePredictionResponse,
)
async def delete_constituency_prediction(
    prediction_set_id: str,
    constituency: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete an unlocked constituency prediction."""
    service = PredictionSetService(db)
    return await service.delete_prediction(prediction_set_id, user_id, constituency)


@router.patch(
    "/{prediction_set_id}/constituency/{constituency}/lock",
    response_model=LockPredictionResponse,
)
async def lock_constituency_prediction(
    prediction_set_id: str,
    constituency: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Lock a constituency prediction."""
    service = PredictionSetService(db)
    return await service.lock_prediction(prediction_set_id, user_id, constituency)


@router.post("/{prediction_set_id}/bulk", response_model=BulkPredictionResponse)
async def bulk_add_predictions(
    prediction_set_id: str,
    data: BulkPredictionRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Add or update many constituency predictions."""
    service = PredictionSetService(db)
    return await service.bulk_add_predictions(prediction_set_id, user_id, data.predictions)


@router.patch("/{prediction_set_id}/reset-unlocked", response_model=ResetResponse)
async def reset_unlocked_predictions(
    prediction_set_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Remove every unlocked constituency prediction."""
    service = PredictionSetService(db)
    return await service.reset_unlocked(prediction_set_id, user_id)


@router.get("/{prediction_set_id}/area/{area}", response_model=AreaPredictionsResponse)
async def get_predictions_by_area(
    prediction_set_id: str,
    area: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's predictions in one area."""
    service = PredictionSetService(db)
    return await service.get_predictions_by_area(prediction_set_id, user_id, area)


@router.patch("/{prediction_set_id}/submit", response_model=PredictionSetResponse)
async def submit_prediction_set(
    prediction_set_id: str,
    data: SubmitRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Submit a prediction set."""
    service = PredictionSetService(db)
    overall_winner = data.overall_winner.value if data and data.overall_winner else None
    return await service.submit(prediction_set_id, user_id, overall_winner)
