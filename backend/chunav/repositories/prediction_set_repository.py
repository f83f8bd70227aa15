"""Prediction set repository."""

import logging
from typing import Any

from sqlalchemy import and_, case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chunav.errors import ConflictError
from chunav.models import (
    ConstituencyPrediction,
    PredictionSet,
    PredictionStatus,
    User,
    recompute_summary,
)
from chunav.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

FINISHED_STATUSES = (PredictionStatus.SUBMITTED.value, PredictionStatus.COMPLETED.value)

SORTABLE_FIELDS = {
    "created_at": PredictionSet.created_at,
    "updated_at": PredictionSet.updated_at,
    "last_updated": PredictionSet.last_updated,
    "submitted_at": PredictionSet.submitted_at,
    "election_year": PredictionSet.election_year,
    "total_predictions": PredictionSet.total_predictions,
    "locked_predictions": PredictionSet.locked_predictions,
    "total_coins": PredictionSet.total_coins,
}


def leaderboard_points():
    """Leaderboard score times ten: total*2 + locked*5 + coins*0.1.

    Kept integral so equal scores compare equal.
    """
    return (
        PredictionSet.total_predictions * 20
        + PredictionSet.locked_predictions * 50
        + PredictionSet.total_coins
    )


class PredictionSetRepository(BaseRepository[PredictionSet]):
    """Repository for PredictionSet model."""

    def __init__(self, session: AsyncSession):
        super().__init__(PredictionSet, session)

    async def get_for_user(
        self, user_id: str, election_year: int, state: str
    ) -> PredictionSet | None:
        """Get the prediction set a user owns for one election and state."""
        result = await self.session.execute(
            select(PredictionSet).where(
                PredictionSet.user_id == user_id,
                PredictionSet.election_year == election_year,
                PredictionSet.state == state,
            )
        )
        return result.scalar_one_or_none()

    async def create_for_user(
        self,
        user_id: str,
        election_year: int,
        state: str,
        election_type: str,
        total_constituencies: int,
    ) -> PredictionSet:
        """Create an empty prediction set.

        Raises ConflictError if the user already has one for the election and state.
        """
        if await self.get_for_user(user_id, election_year, state) is not None:
            raise ConflictError()

        prediction_set = PredictionSet(
            user_id=user_id,
            election_type=election_type,
            election_year=election_year,
            state=state,
            total_constituencies=total_constituencies,
            total_coins=0,
            status=PredictionStatus.DRAFT.value,
            is_public=False,
            time_spent_minutes=0,
            predictions=[],
        )
        recompute_summary(prediction_set)
        self.session.add(prediction_set)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent create for the same key
            raise ConflictError() from e
        await self.session.refresh(prediction_set)
        return prediction_set

    async def save(self, prediction_set: PredictionSet) -> PredictionSet:
        """Persist a prediction set with its predictions as one unit.

        Derived fields are rebuilt here so they always match what is written.
        """
        recompute_summary(prediction_set)
        self.session.add(prediction_set)
        await self.session.flush()
        logger.debug(
            "Saved prediction set %s (%d predictions, %d locked)",
            prediction_set.id,
            prediction_set.total_predictions,
            prediction_set.locked_predictions,
        )
        return prediction_set

    async def delete_owned(self, id: str, user_id: str) -> bool:
        """Delete a prediction set if it belongs to the user."""
        prediction_set = await self.get(id)
        if prediction_set is None or prediction_set.user_id != user_id:
            return False

        await self.session.delete(prediction_set)
        await self.session.flush()
        return True

    async def get_page(
        self,
        filters: dict[str, Any] | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[PredictionSet], int]:
        """Get one page of prediction sets and the total number matching."""
        column = SORTABLE_FIELDS.get(sort_by, PredictionSet.created_at)
        order = column.desc() if sort_order == "desc" else column.asc()

        query = self._apply_filters(select(PredictionSet), filters)
        query = query.order_by(order, PredictionSet.id).offset((page - 1) * limit).limit(limit)
        result = await self.session.execute(query)

        total = await self.count(filters)
        return list(result.scalars().all()), total

    async def get_leaderboard(
        self,
        election_year: int,
        state: str,
        skip: int = 0,
        limit: int = 10,
    ) -> list[tuple[PredictionSet, float]]:
        """Get public finished prediction sets ranked by score.

        Sets whose owner has no user profile are left out.
        """
        points = leaderboard_points().label("points")
        result = await self.session.execute(
            select(PredictionSet, points)
            .join(User, User.id == PredictionSet.user_id)
            .where(*self._finished_public(election_year, state))
            .order_by(
                points.desc(),
                PredictionSet.total_predictions.desc(),
                PredictionSet.locked_predictions.desc(),
                PredictionSet.id,
            )
            .offset(skip)
            .limit(limit)
        )
        return [(row[0], row[1] / 10) for row in result.all()]

    async def count_leaderboard(self, election_year: int, state: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(PredictionSet)
            .join(User, User.id == PredictionSet.user_id)
            .where(*self._finished_public(election_year, state))
        )
        return result.scalar_one()

    async def get_public_page(
        self,
        election_year: int,
        state: str,
        area: str | None = None,
        constituency: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[PredictionSet], int]:
        """Get public finished prediction sets.

        With an area or constituency only sets holding a matching prediction
        are returned.
        """
        conditions = list(self._finished_public(election_year, state))
        record_conditions = []
        if area:
            record_conditions.append(ConstituencyPrediction.area == area)
        if constituency:
            record_conditions.append(ConstituencyPrediction.constituency == constituency)
        if record_conditions:
            conditions.append(PredictionSet.predictions.any(and_(*record_conditions)))

        result = await self.session.execute(
            select(PredictionSet)
            .where(*conditions)
            .order_by(
                PredictionSet.submitted_at.desc(),
                PredictionSet.total_predictions.desc(),
                PredictionSet.id,
            )
            .offset(skip)
            .limit(limit)
        )
        count_result = await self.session.execute(
            select(func.count()).select_from(PredictionSet).where(*conditions)
        )
        return list(result.scalars().all()), count_result.scalar_one()

    async def get_constituency_breakdown(
        self, area: str, election_year: int, state: str
    ) -> list[dict[str, Any]]:
        """Count predictions per (constituency, party) within an area."""
        result = await self.session.execute(
            select(
                ConstituencyPrediction.constituency,
                ConstituencyPrediction.predicted_party,
                func.count().label("count"),
                func.avg(ConstituencyPrediction.confidence).label("avg_confidence"),
            )
            .join(PredictionSet, ConstituencyPrediction.prediction_set_id == PredictionSet.id)
            .where(
                PredictionSet.election_year == election_year,
                PredictionSet.state == state,
                ConstituencyPrediction.area == area,
            )
            .group_by(ConstituencyPrediction.constituency, ConstituencyPrediction.predicted_party)
            .order_by(ConstituencyPrediction.constituency, ConstituencyPrediction.predicted_party)
        )
        return [
            {
                "constituency": row.constituency,
                "party": row.predicted_party,
                "count": row.count,
                "avg_confidence": float(row.avg_confidence or 0),
            }
            for row in result.all()
        ]

    async def get_party_distribution(
        self, election_year: int, state: str, area: str | None = None
    ) -> list[dict[str, Any]]:
        """Count predictions per party, optionally within one area."""
        count = func.count().label("count")
        query = (
            select(
                ConstituencyPrediction.predicted_party,
                count,
                func.avg(ConstituencyPrediction.confidence).label("avg_confidence"),
                func.sum(case((ConstituencyPrediction.is_locked, 1), else_=0)).label("locked_count"),
            )
            .join(PredictionSet, ConstituencyPrediction.prediction_set_id == PredictionSet.id)
            .where(PredictionSet.election_year == election_year, PredictionSet.state == state)
        )
        if area:
            query = query.where(ConstituencyPrediction.area == area)
        query = query.group_by(ConstituencyPrediction.predicted_party).order_by(
            count.desc(), ConstituencyPrediction.predicted_party
        )

        result = await self.session.execute(query)
        return [
            {
                "party": row.predicted_party,
                "count": row.count,
                "avg_confidence": float(row.avg_confidence or 0),
                "locked_count": int(row.locked_count or 0),
            }
            for row in result.all()
        ]

    async def get_general_stats(self, election_year: int, state: str) -> dict[str, Any]:
        """Totals across every prediction set for an election and state."""
        progress = PredictionSet.total_predictions * 100.0 / func.nullif(
            PredictionSet.total_constituencies, 0
        )
        result = await self.session.execute(
            select(
                func.count(PredictionSet.id).label("total_users"),
                func.coalesce(func.sum(PredictionSet.total_predictions), 0).label("total_predictions"),
                func.coalesce(func.sum(PredictionSet.locked_predictions), 0).label("total_locked_predictions"),
                func.coalesce(func.sum(PredictionSet.total_coins), 0).label("total_coins_earned"),
                func.avg(progress).label("avg_progress"),
                func.coalesce(
                    func.sum(case((PredictionSet.status == PredictionStatus.COMPLETED.value, 1), else_=0)), 0
                ).label("completed_predictions"),
                func.coalesce(
                    func.sum(case((PredictionSet.status == PredictionStatus.SUBMITTED.value, 1), else_=0)), 0
                ).label("submitted_predictions"),
            ).where(PredictionSet.election_year == election_year, PredictionSet.state == state)
        )
        row = result.one()
        return {
            "total_users": row.total_users,
            "total_predictions": int(row.total_predictions),
            "total_locked_predictions": int(row.total_locked_predictions),
            "total_coins_earned": int(row.total_coins_earned),
            "avg_progress": float(row.avg_progress) if row.avg_progress is not None else 0.0,
            "completed_predictions": int(row.completed_predictions),
            "submitted_predictions": int(row.submitted_predictions),
        }

    def _finished_public(self, election_year: int, state: str) -> tuple:
        return (
            PredictionSet.election_year == election_year,
            PredictionSet.state == state,
            PredictionSet.status.in_(FINISHED_STATUSES),
            PredictionSet.is_public.is_(True),
        )
