"""Tests for prediction set aggregate rules."""

import pytest

from chunav.errors import (
    AlreadyLockedError,
    AlreadySubmittedError,
    InsufficientRecordsError,
    LockedRecordError,
    NoOpError,
    NotFoundError,
    ValidationError,
)
from chunav.models import POLITICAL_PARTIES, recompute_summary
from chunav.models.prediction_set import percentage

from tests.fixtures.factories import create_prediction_set, fill_predictions


class TestAddPrediction:
    """Tests for PredictionSet.add_prediction."""

    def test_creates_new_prediction(self, empty_prediction_set):
        """A new constituency is appended unlocked."""
        action = empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP", 70)

        assert action == "created"
        assert len(empty_prediction_set.predictions) == 1
        prediction = empty_prediction_set.predictions[0]
        assert prediction.constituency == "Patna Sahib"
        assert prediction.area == "Pataliputra"
        assert prediction.predicted_party == "BJP"
        assert prediction.confidence == 70
        assert prediction.is_locked is False
        assert prediction.locked_at is None
        assert prediction.last_modified is not None

    def test_updates_existing_prediction(self, empty_prediction_set):
        """Same constituency overwrites party and confidence."""
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP", 70)

        action = empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "RJD", 40)

        assert action == "updated"
        assert len(empty_prediction_set.predictions) == 1
        assert empty_prediction_set.predictions[0].predicted_party == "RJD"
        assert empty_prediction_set.predictions[0].confidence == 40

    def test_constituency_is_trimmed(self, empty_prediction_set):
        empty_prediction_set.add_prediction("  Patna Sahib ", "Pataliputra", "BJP")

        assert empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "JDU") == "updated"

    def test_default_confidence(self, empty_prediction_set):
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP")

        assert empty_prediction_set.predictions[0].confidence == 50

    @pytest.mark.parametrize("confidence", ["80", 80.0, " 80 "])
    def test_confidence_coerced_to_int(self, empty_prediction_set, confidence):
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP", confidence)

        assert empty_prediction_set.predictions[0].confidence == 80

    def test_distinct_constituencies_count(self, empty_prediction_set):
        """N adds on distinct constituencies give N predictions."""
        fill_predictions(empty_prediction_set, 37)
        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.total_predictions == 37

    def test_locked_prediction_cannot_be_updated(self, empty_prediction_set):
        """Updating a locked prediction fails and changes nothing."""
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP", 70)
        empty_prediction_set.lock_prediction("Patna Sahib")

        with pytest.raises(LockedRecordError):
            empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "RJD", 10)

        prediction = empty_prediction_set.predictions[0]
        assert prediction.predicted_party == "BJP"
        assert prediction.confidence == 70

    @pytest.mark.parametrize(
        "constituency,area,party,confidence",
        [
            ("", "Pataliputra", "BJP", 50),
            ("   ", "Pataliputra", "BJP", 50),
            ("Patna Sahib", None, "BJP", 50),
            ("Patna Sahib", "Pataliputra", None, 50),
            ("Patna Sahib", "Atlantis", "BJP", 50),
            ("Patna Sahib", "Pataliputra", "XYZ", 50),
            ("Patna Sahib", "Pataliputra", "BJP", 101),
            ("Patna Sahib", "Pataliputra", "BJP", -1),
            ("Patna Sahib", "Pataliputra", "BJP", 70.5),
            ("Patna Sahib", "Pataliputra", "BJP", "high"),
            ("Patna Sahib", "Pataliputra", "BJP", True),
        ],
    )
    def test_invalid_input(self, empty_prediction_set, constituency, area, party, confidence):
        """Invalid input raises ValidationError without adding anything."""
        with pytest.raises(ValidationError):
            empty_prediction_set.add_prediction(constituency, area, party, confidence)

        assert empty_prediction_set.predictions == []


class TestLockAndDelete:
    """Tests for locking and deleting predictions."""

    def test_lock_prediction(self, empty_prediction_set):
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP")

        prediction = empty_prediction_set.lock_prediction("Patna Sahib")

        assert prediction.is_locked is True
        assert prediction.locked_at is not None

    def test_lock_missing_prediction(self, empty_prediction_set):
        with pytest.raises(NotFoundError):
            empty_prediction_set.lock_prediction("Nowhere")

    def test_lock_twice(self, empty_prediction_set):
        """Second lock fails and keeps the first lock time."""
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP")
        first = empty_prediction_set.lock_prediction("Patna Sahib")
        locked_at = first.locked_at

        with pytest.raises(AlreadyLockedError):
            empty_prediction_set.lock_prediction("Patna Sahib")

        assert first.locked_at == locked_at

    def test_delete_prediction(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 3)

        empty_prediction_set.delete_prediction("Constituency 002")

        assert [p.constituency for p in empty_prediction_set.predictions] == [
            "Constituency 001",
            "Constituency 003",
        ]

    def test_delete_missing_prediction(self, empty_prediction_set):
        with pytest.raises(NotFoundError):
            empty_prediction_set.delete_prediction("Nowhere")

    def test_delete_locked_prediction(self, empty_prediction_set):
        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "BJP")
        empty_prediction_set.lock_prediction("Patna Sahib")

        with pytest.raises(LockedRecordError):
            empty_prediction_set.delete_prediction("Patna Sahib")

        assert len(empty_prediction_set.predictions) == 1


class TestResetUnlocked:
    """Tests for PredictionSet.reset_unlocked."""

    def test_keeps_only_locked(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 5)
        empty_prediction_set.lock_prediction("Constituency 001")
        empty_prediction_set.lock_prediction("Constituency 004")
        empty_prediction_set.total_coins = 999

        removed = empty_prediction_set.reset_unlocked(coins_per_locked=15)

        assert removed == 3
        assert [p.constituency for p in empty_prediction_set.predictions] == [
            "Constituency 001",
            "Constituency 004",
        ]
        # Coins are rebuilt, not adjusted
        assert empty_prediction_set.total_coins == 30

    def test_fully_locked_set_is_noop(self, empty_prediction_set):
        """Reset on a set with nothing unlocked fails every time."""
        fill_predictions(empty_prediction_set, 2)
        empty_prediction_set.lock_prediction("Constituency 001")
        empty_prediction_set.lock_prediction("Constituency 002")
        empty_prediction_set.total_coins = 40

        with pytest.raises(NoOpError):
            empty_prediction_set.reset_unlocked()
        with pytest.raises(NoOpError):
            empty_prediction_set.reset_unlocked()

        assert len(empty_prediction_set.predictions) == 2
        assert empty_prediction_set.total_coins == 40

    def test_second_reset_is_noop(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 3)
        empty_prediction_set.lock_prediction("Constituency 002")

        assert empty_prediction_set.reset_unlocked() == 2
        with pytest.raises(NoOpError):
            empty_prediction_set.reset_unlocked()

    def test_empty_set_is_noop(self, empty_prediction_set):
        with pytest.raises(NoOpError):
            empty_prediction_set.reset_unlocked()


class TestSubmit:
    """Tests for PredictionSet.submit."""

    def test_49_predictions_is_not_enough(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 49)

        with pytest.raises(InsufficientRecordsError):
            empty_prediction_set.submit()

        assert empty_prediction_set.status == "draft"
        assert empty_prediction_set.total_coins == 0

    def test_50_predictions_is_enough(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 50)

        empty_prediction_set.submit(bonus=50)

        assert empty_prediction_set.status == "submitted"
        assert empty_prediction_set.submitted_at is not None
        assert empty_prediction_set.total_coins == 50

    @pytest.mark.parametrize("status", ["submitted", "completed"])
    def test_already_submitted(self, status):
        prediction_set = create_prediction_set(status=status)
        fill_predictions(prediction_set, 50)

        with pytest.raises(AlreadySubmittedError):
            prediction_set.submit()

    def test_override_winner(self, empty_prediction_set):
        """Chosen winner replaces the derived one."""
        fill_predictions(empty_prediction_set, 50, party="BJP")

        empty_prediction_set.submit(overall_winner="RJD")
        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.overall_winner == "RJD"
        assert empty_prediction_set.party_wise_seats["BJP"] == 50

    def test_override_winner_kept_across_recomputes(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 50, party="BJP")
        empty_prediction_set.submit(overall_winner="INC")
        recompute_summary(empty_prediction_set)

        empty_prediction_set.add_prediction("Patna Sahib", "Pataliputra", "JDU")
        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.winner_override == "INC"
        assert empty_prediction_set.overall_winner == "INC"

    def test_invalid_override_winner(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 50)

        with pytest.raises(ValidationError):
            empty_prediction_set.submit(overall_winner="XYZ")

        assert empty_prediction_set.status == "draft"


class TestRecomputeSummary:
    """Tests for recompute_summary."""

    def test_counts(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 10)
        empty_prediction_set.lock_prediction("Constituency 003")
        empty_prediction_set.lock_prediction("Constituency 007")

        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.total_predictions == 10
        assert empty_prediction_set.locked_predictions == 2
        assert empty_prediction_set.last_updated is not None

    def test_seats_sum_to_total(self, empty_prediction_set):
        """Every prediction is counted for exactly one party."""
        fill_predictions(empty_prediction_set, 23)

        recompute_summary(empty_prediction_set)

        seats = empty_prediction_set.party_wise_seats
        assert set(seats) == set(POLITICAL_PARTIES)
        assert sum(seats.values()) == empty_prediction_set.total_predictions

    def test_seats_are_rebuilt(self, empty_prediction_set):
        """Tally follows deletions instead of accumulating."""
        fill_predictions(empty_prediction_set, 4, party="INC")
        recompute_summary(empty_prediction_set)
        empty_prediction_set.delete_prediction("Constituency 001")

        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.party_wise_seats["INC"] == 3

    def test_winner_has_most_seats(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 2, party="JDU")
        fill_predictions(empty_prediction_set, 3, party="LJP", start=10)

        recompute_summary(empty_prediction_set)

        seats = empty_prediction_set.party_wise_seats
        assert empty_prediction_set.overall_winner == "LJP"
        assert seats[empty_prediction_set.overall_winner] == max(seats.values())

    def test_tie_goes_to_first_listed_party(self, empty_prediction_set):
        """RJD and JDU tie; JDU is listed first."""
        fill_predictions(empty_prediction_set, 2, party="RJD")
        fill_predictions(empty_prediction_set, 2, party="JDU", start=10)

        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.overall_winner == "JDU"

    def test_no_predictions_no_winner(self, empty_prediction_set):
        recompute_summary(empty_prediction_set)

        assert empty_prediction_set.overall_winner is None
        assert empty_prediction_set.total_predictions == 0
        assert all(count == 0 for count in empty_prediction_set.party_wise_seats.values())

    def test_completion_percentage(self, empty_prediction_set):
        fill_predictions(empty_prediction_set, 50)

        recompute_summary(empty_prediction_set)

        # 50 / 243 = 20.58%
        assert empty_prediction_set.completion_percentage == 21
        assert empty_prediction_set.calculate_progress() == {
            "total": 243,
            "completed": 50,
            "locked": 0,
            "percentage": 21,
        }


class TestPercentage:
    @pytest.mark.parametrize(
        "part,whole,expected",
        [(0, 243, 0), (243, 243, 100), (1, 8, 13), (3, 8, 38), (5, 0, 0)],
    )
    def test_rounds_half_up(self, part, whole, expected):
        assert percentage(part, whole) == expected
