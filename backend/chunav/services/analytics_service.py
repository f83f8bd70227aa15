"""Leaderboard and analytics over all prediction sets."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from chunav.config import Settings, get_settings
from chunav.repositories import PredictionSetRepository
from chunav.schemas import (
    AreaAnalyticsResponse,
    ConstituencyAnalytics,
    GeneralStats,
    LeaderboardEntry,
    LeaderboardResponse,
    PartyBreakdown,
    PartySummary,
    PredictionSetResponse,
    ProgressDetail,
    ProgressResponse,
    PublicPredictionsResponse,
    StatsResponse,
    UserPublic,
)
from chunav.services.prediction_set_service import total_pages


class AnalyticsService:
    """Read-only projections across prediction sets."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.prediction_set_repo = PredictionSetRepository(session)

    async def get_leaderboard(
        self,
        election_year: int | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> LeaderboardResponse:
        """Rank public, submitted prediction sets.

        score = total_predictions * 2 + locked_predictions * 5 + total_coins * 0.1,
        ties broken by total then locked predictions.
        """
        election_year = election_year or date.today().year
        state = self.settings.default_state
        skip = (page - 1) * limit

        rows = await self.prediction_set_repo.get_leaderboard(
            election_year, state, skip=skip, limit=limit
        )
        total_count = await self.prediction_set_repo.count_leaderboard(election_year, state)

        items = []
        for rank, (prediction_set, score) in enumerate(rows, start=skip + 1):
            items.append(
                LeaderboardEntry(
                    rank=rank,
                    prediction_set_id=prediction_set.id,
                    user=UserPublic.model_validate(prediction_set.owner),
                    total_predictions=prediction_set.total_predictions,
                    locked_predictions=prediction_set.locked_predictions,
                    total_coins=prediction_set.total_coins,
                    completion_percentage=prediction_set.completion_percentage,
                    score=score,
                    submitted_at=prediction_set.submitted_at,
                )
            )

        return LeaderboardResponse(
            items=items,
            total_count=total_count,
            current_page=page,
            total_pages=total_pages(total_count, limit),
        )

    async def get_area_analytics(
        self, area: str, election_year: int | None = None
    ) -> AreaAnalyticsResponse:
        """Per-constituency and per-party breakdown of predictions in an area."""
        election_year = election_year or date.today().year
        state = self.settings.default_state

        rows = await self.prediction_set_repo.get_constituency_breakdown(area, election_year, state)

        # Rows arrive sorted by constituency
        by_constituency: dict[str, ConstituencyAnalytics] = {}
        for row in rows:
            entry = by_constituency.setdefault(
                row["constituency"],
                ConstituencyAnalytics(
                    constituency=row["constituency"], party_predictions=[], total_predictions=0
                ),
            )
            entry.party_predictions.append(
                PartyBreakdown(
                    party=row["party"],
                    count=row["count"],
                    avg_confidence=row["avg_confidence"],
                )
            )
            entry.total_predictions += row["count"]

        summary = await self.prediction_set_repo.get_party_distribution(
            election_year, state, area=area
        )

        return AreaAnalyticsResponse(
            area=area,
            election_year=election_year,
            constituency_analytics=list(by_constituency.values()),
            party_summary=[PartySummary(**s) for s in summary],
        )

    async def get_stats(self, election_year: int | None = None) -> StatsResponse:
        election_year = election_year or date.today().year
        state = self.settings.default_state

        general = await self.prediction_set_repo.get_general_stats(election_year, state)
        distribution = await self.prediction_set_repo.get_party_distribution(election_year, state)

        return StatsResponse(
            election_year=election_year,
            general=GeneralStats(**general),
            party_distribution=[PartySummary(**d) for d in distribution],
        )

    async def get_progress(
        self, user_id: str, election_year: int | None = None
    ) -> ProgressResponse:
        """Progress of a user's set, or a zeroed ``not_started`` record."""
        election_year = election_year or date.today().year
        prediction_set = await self.prediction_set_repo.get_for_user(
            user_id, election_year, self.settings.default_state
        )

        if prediction_set is None:
            return ProgressResponse(
                progress=ProgressDetail(
                    total=self.settings.default_total_constituencies,
                    completed=0,
                    locked=0,
                    percentage=0,
                ),
                coins=0,
                status="not_started",
            )

        return ProgressResponse(
            progress=ProgressDetail(**prediction_set.calculate_progress()),
            coins=prediction_set.total_coins,
            status=prediction_set.status,
            last_updated=prediction_set.last_updated,
        )

    async def get_public_predictions(
        self,
        page: int = 1,
        limit: int = 10,
        election_year: int | None = None,
        area: str | None = None,
        constituency: str | None = None,
    ) -> PublicPredictionsResponse:
        """Public submitted sets; area/constituency also narrow the embedded predictions."""
        election_year = election_year or date.today().year
        skip = (page - 1) * limit

        prediction_sets, total_count = await self.prediction_set_repo.get_public_page(
            election_year,
            self.settings.default_state,
            area=area,
            constituency=constituency,
            skip=skip,
            limit=limit,
        )

        items = []
        for prediction_set in prediction_sets:
            response = PredictionSetResponse.model_validate(prediction_set)
            if area or constituency:
                response.predictions = [
                    p
                    for p in response.predictions
                    if (not area or p.area == area)
                    and (not constituency or p.constituency == constituency)
                ]
            items.append(response)

        return PublicPredictionsResponse(
            items=items,
            total_count=total_count,
            current_page=page,
            total_pages=total_pages(total_count, limit),
        )
