"""Prediction set service.

Every mutating operation follows the same shape: load the set, check the
caller owns it, apply one aggregate operation, apply the coin policy and save.
A business rule failure raises before ``save`` so nothing is written.
"""

import logging
import math
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from chunav.config import Settings, get_settings
from chunav.errors import LockedRecordError, NotFoundError, PredictionError, UnauthorizedError, ValidationError
from chunav.models import PredictionSet, PredictionStatus
from chunav.models.prediction_set import DEFAULT_CONFIDENCE
from chunav.repositories import PredictionSetRepository
from chunav.schemas import (
    AddPredictionResponse,
    AreaPredictionsResponse,
    BulkPredictionResponse,
    BulkSummary,
    ConstituencyPredictionInput,
    ConstituencyPredictionResponse,
    DeletePredictionResponse,
    LockPredictionResponse,
    PredictionSetCreate,
    PredictionSetListResponse,
    PredictionSetResponse,
    PredictionSetUpdate,
    ResetResponse,
)

logger = logging.getLogger(__name__)

STATUS_ORDER = [status.value for status in PredictionStatus]


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class PredictionSetService:
    """Service for prediction set operations."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.prediction_set_repo = PredictionSetRepository(session)

    async def create_prediction_set(
        self, user_id: str, data: PredictionSetCreate
    ) -> PredictionSetResponse:
        """Create an empty prediction set for an election."""
        prediction_set = await self.prediction_set_repo.create_for_user(
            user_id=user_id,
            election_year=data.election_year,
            state=data.state or self.settings.default_state,
            election_type=data.election_type.value,
            total_constituencies=self.settings.default_total_constituencies,
        )
        logger.info(
            "Created prediction set %s for user %s (%s, %d)",
            prediction_set.id, user_id, prediction_set.state, prediction_set.election_year,
        )
        return self._to_response(prediction_set)

    async def get_user_prediction_set(
        self,
        user_id: str,
        election_year: int | None = None,
        state: str | None = None,
    ) -> PredictionSetResponse:
        prediction_set = await self.prediction_set_repo.get_for_user(
            user_id,
            election_year or date.today().year,
            state or self.settings.default_state,
        )
        if prediction_set is None:
            raise NotFoundError("Prediction not found for this election")
        return self._to_response(prediction_set)

    async def get_prediction_set(self, prediction_set_id: str, user_id: str) -> PredictionSetResponse:
        """Get a prediction set owned by the user or made public."""
        prediction_set = await self.prediction_set_repo.get(prediction_set_id)
        if prediction_set is None:
            raise NotFoundError()
        if not prediction_set.is_public and prediction_set.user_id != user_id:
            raise UnauthorizedError()
        return self._to_response(prediction_set)

    async def list_prediction_sets(
        self,
        page: int = 1,
        limit: int = 10,
        election_year: int | None = None,
        state: str | None = None,
        status: str | None = None,
        is_public: bool | None = None,
        user_id: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> PredictionSetListResponse:
        filters = {
            "election_year": election_year,
            "state": state or self.settings.default_state,
            "status": status,
            "is_public": is_public,
            "user_id": user_id,
        }
        items, total = await self.prediction_set_repo.get_page(
            filters=filters, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit
        )
        pages = total_pages(total, limit)
        return PredictionSetListResponse(
            items=[self._to_response(p) for p in items],
            total=total,
            total_pages=pages,
            current_page=page,
            has_next_page=page < pages,
            has_prev_page=page > 1,
        )

    async def add_prediction(
        self, prediction_set_id: str, user_id: str, data: ConstituencyPredictionInput
    ) -> AddPredictionResponse:
        """Add or update one constituency prediction and award coins."""
        prediction_set = await self._get_owned(prediction_set_id, user_id)

        action = prediction_set.add_prediction(
            data.constituency,
            data.area,
            data.predicted_party,
            DEFAULT_CONFIDENCE if data.confidence is None else data.confidence,
        )
        coins_earned = self._coins_for(action)
        prediction_set.total_coins += coins_earned

        await self.prediction_set_repo.save(prediction_set)
        return AddPredictionResponse(
            prediction=self._to_response(prediction_set),
            coins_earned=coins_earned,
            action=action,
        )

    async def bulk_add_predictions(
        self, prediction_set_id: str, user_id: str, items: list[ConstituencyPredictionInput]
    ) -> BulkPredictionResponse:
        """Apply many predictions, one at a time.

        A failing item is reported and skipped; the others are kept. Items for
        the same constituency apply in order, so later ones win.
        """
        if not items:
            raise ValidationError("Array of predictions is required")

        prediction_set = await self._get_owned(prediction_set_id, user_id)

        summary = BulkSummary()
        errors: list[str] = []
        for item in items:
            try:
                action = prediction_set.add_prediction(
                    item.constituency,
                    item.area,
                    item.predicted_party,
                    DEFAULT_CONFIDENCE if item.confidence is None else item.confidence,
                )
            except PredictionError as e:
                errors.append(f"{item.constituency or 'unknown'}: {e.message}")
                summary.errors += 1
                continue

            summary.total_coins_earned += self._coins_for(action)
            if action == "created":
                summary.added += 1
            else:
                summary.updated += 1

        prediction_set.total_coins += summary.total_coins_earned
        await self.prediction_set_repo.save(prediction_set)

        logger.info(
            "Bulk update on %s: %d added, %d updated, %d failed",
            prediction_set.id, summary.added, summary.updated, summary.errors,
        )
        return BulkPredictionResponse(
            prediction=self._to_response(prediction_set),
            summary=summary,
            errors=errors or None,
        )

    async def lock_prediction(
        self, prediction_set_id: str, user_id: str, constituency: str
    ) -> LockPredictionResponse:
        prediction_set = await self._get_owned(prediction_set_id, user_id)

        prediction_set.lock_prediction(constituency)
        coins_earned = self.settings.coins_per_lock
        prediction_set.total_coins += coins_earned

        await self.prediction_set_repo.save(prediction_set)
        logger.info("Locked %s in prediction set %s", constituency, prediction_set.id)
        return LockPredictionResponse(
            prediction=self._to_response(prediction_set),
            coins_earned=coins_earned,
        )

    async def delete_prediction(
        self, prediction_set_id: str, user_id: str, constituency: str
    ) -> DeletePredictionResponse:
        prediction_set = await self._get_owned(prediction_set_id, user_id)

        prediction_set.delete_prediction(constituency)
        coins_deducted = self.settings.coins_per_delete
        prediction_set.total_coins = max(0, prediction_set.total_coins - coins_deducted)

        await self.prediction_set_repo.save(prediction_set)
        return DeletePredictionResponse(
            prediction=self._to_response(prediction_set),
            coins_deducted=coins_deducted,
        )

    async def get_constituency_prediction(
        self, prediction_set_id: str, user_id: str, constituency: str
    ) -> ConstituencyPredictionResponse:
        prediction_set = await self._get_owned(prediction_set_id, user_id)
        prediction = prediction_set.get_prediction(constituency)
        if prediction is None:
            raise NotFoundError("Constituency prediction not found")
        return ConstituencyPredictionResponse.model_validate(prediction)

    async def get_predictions_by_area(
        self, prediction_set_id: str, user_id: str, area: str
    ) -> AreaPredictionsResponse:
        prediction_set = await self._get_owned(prediction_set_id, user_id)
        predictions = prediction_set.predictions_by_area(area)
        return AreaPredictionsResponse(
            area=area,
            predictions=[ConstituencyPredictionResponse.model_validate(p) for p in predictions],
            count=len(predictions),
        )

    async def reset_unlocked(self, prediction_set_id: str, user_id: str) -> ResetResponse:
        """Discard unlocked predictions; coins are rebuilt from the locked ones."""
        prediction_set = await self._get_owned(prediction_set_id, user_id)

        reset_count = prediction_set.reset_unlocked(self.settings.coins_per_locked_on_reset)

        await self.prediction_set_repo.save(prediction_set)
        logger.info("Reset %d unlocked predictions in %s", reset_count, prediction_set.id)
        return ResetResponse(
            prediction=self._to_response(prediction_set),
            reset_count=reset_count,
            locked_count=prediction_set.locked_predictions,
        )

    async def submit(
        self, prediction_set_id: str, user_id: str, overall_winner: str | None = None
    ) -> PredictionSetResponse:
        prediction_set = await self._get_owned(prediction_set_id, user_id)

        try:
            prediction_set.submit(
                overall_winner=overall_winner,
                min_predictions=self.settings.min_predictions_to_submit,
                bonus=self.settings.submission_bonus,
            )
        except PredictionError as e:
            logger.warning("Submit rejected for %s: %s", prediction_set.id, e.message)
            raise

        await self.prediction_set_repo.save(prediction_set)
        logger.info("Submitted prediction set %s", prediction_set.id)
        return self._to_response(prediction_set)

    async def update_metadata(
        self, prediction_set_id: str, user_id: str, data: PredictionSetUpdate
    ) -> PredictionSetResponse:
        """Update visibility, status and client metadata.

        Status only moves forward. Submission has to go through ``submit``,
        an owner may only mark a submitted set completed, and ``verified`` is
        never set from here.
        """
        prediction_set = await self._get_owned(prediction_set_id, user_id)
        changes = data.model_dump(exclude_unset=True)

        status = changes.pop("status", None)
        if status is not None:
            status = PredictionStatus(status).value
            current = prediction_set.status
            if STATUS_ORDER.index(status) < STATUS_ORDER.index(current):
                raise ValidationError(f"Cannot change status from {current} to {status}")
            if status != current:
                if status == PredictionStatus.SUBMITTED.value:
                    raise ValidationError("Use submit to submit a prediction")
                if status == PredictionStatus.VERIFIED.value:
                    raise ValidationError("Predictions are verified against results, not by owners")
                if current != PredictionStatus.SUBMITTED.value:
                    raise ValidationError("Only a submitted prediction can be completed")
            prediction_set.status = status

        for key, value in changes.items():
            if value is not None:
                setattr(prediction_set, key, value)

        await self.prediction_set_repo.save(prediction_set)
        return self._to_response(prediction_set)

    async def delete_prediction_set(self, prediction_set_id: str, user_id: str) -> None:
        """Delete a whole prediction set. Refused while any prediction is locked."""
        prediction_set = await self._get_owned(prediction_set_id, user_id)

        locked = prediction_set.locked_count
        if locked > 0:
            raise LockedRecordError(
                f"Cannot delete prediction set with {locked} locked predictions"
            )

        await self.prediction_set_repo.delete_owned(prediction_set.id, user_id)
        logger.info("Deleted prediction set %s", prediction_set_id)

    async def _get_owned(self, prediction_set_id: str, user_id: str) -> PredictionSet:
        prediction_set = await self.prediction_set_repo.get(prediction_set_id)
        if prediction_set is None:
            raise NotFoundError()
        if prediction_set.user_id != user_id:
            logger.warning(
                "User %s tried to modify prediction set %s owned by %s",
                user_id, prediction_set_id, prediction_set.user_id,
            )
            raise UnauthorizedError("Prediction belongs to another user")
        return prediction_set

    def _coins_for(self, action: str) -> int:
        if action == "created":
            return self.settings.coins_per_create
        return self.settings.coins_per_update

    def _to_response(self, prediction_set: PredictionSet) -> PredictionSetResponse:
        return PredictionSetResponse.model_validate(prediction_set)
