"""
Tests for ratio lookup and single-observation prediction.
"""

import pytest

from app.features.ratios import (
    Predicted,
    Unavailable,
    predict_time,
    resolve_ratio,
)
from app.shared.constants import DataSourceMode, UnavailableReason
from app.shared.formatters import format_time


# =============================================================================
# Test Resolver
# =============================================================================

class TestResolveRatio:
    """Tests for resolve_ratio."""

    def test_exact_pair(self, snapshot):
        record = resolve_ratio(snapshot, "RaceA", "RaceB")
        assert record.ratio_avg == pytest.approx(1.1)

    def test_no_inversion_of_reverse_pair(self, snapshot):
        """RaceD → RaceA is absent even though RaceA → RaceD exists."""
        assert resolve_ratio(snapshot, "RaceD", "RaceA") is None

    def test_no_indirect_path(self, snapshot):
        """RaceB → RaceA → RaceD is not chained."""
        assert resolve_ratio(snapshot, "RaceB", "RaceD") is None

    def test_mode_selects_table(self, snapshot):
        assert resolve_ratio(snapshot, "UTMB", "Lavaredo") is None
        assert resolve_ratio(
            snapshot, "UTMB", "Lavaredo", DataSourceMode.EU_WINNER
        ) is not None


# =============================================================================
# Test Predictor
# =============================================================================

class TestPredictTime:
    """Tests for predict_time."""

    def test_division_direction(self, snapshot):
        """7200 / 1.1 = 6545.45 → 01:49:05 (not 7200 * 1.1)."""
        result = predict_time(snapshot, "02:00:00", "RaceA", "RaceB")

        assert result.avg == Predicted(6545)
        assert format_time(result.avg.seconds) == "01:49:05"

    def test_all_default_variants(self, snapshot):
        result = predict_time(snapshot, "02:00:00", "RaceA", "RaceB")

        assert result.median == Predicted(int(7200 / 1.05))
        assert result.winner == Predicted(int(7200 / 1.2))

    def test_identity_case(self, snapshot):
        """Same race returns the input time for every variant, no data needed."""
        result = predict_time(snapshot, "1:5:3", "Unknown", "Unknown")

        for outcome in (result.avg, result.median, result.winner):
            assert outcome == Predicted(3903)

    def test_identity_case_eu_mode(self, snapshot):
        """EU mode only produces winner, even for the same race."""
        result = predict_time(snapshot, "45:00", "X", "X", DataSourceMode.EU_WINNER)

        assert result.winner == Predicted(2700)
        assert result.avg == Unavailable(UnavailableReason.NOT_IN_MODE)
        assert result.median == Unavailable(UnavailableReason.NOT_IN_MODE)

    def test_missing_pair(self, snapshot):
        result = predict_time(snapshot, "02:00:00", "RaceC", "RaceB")

        for outcome in (result.avg, result.median, result.winner):
            assert outcome == Unavailable(UnavailableReason.NO_DATA)
        assert not result.has_prediction

    def test_missing_pair_eu_mode(self, snapshot):
        result = predict_time(snapshot, "02:00:00", "RaceA", "RaceB", DataSourceMode.EU_WINNER)
        assert isinstance(result.winner, Unavailable)
        assert result.winner.message == "No data available"

    def test_missing_avg_means_no_common_runners(self, snapshot):
        """Record exists but has no avg → distinct message from missing record."""
        result = predict_time(snapshot, "01:00:00", "RaceA", "RaceD")

        assert result.avg == Unavailable(UnavailableReason.NO_COMMON_RUNNERS)
        assert result.avg.message == "No runners in common"
        assert result.median == Predicted(int(3600 / 0.8))
        assert result.winner == Predicted(4800)

    def test_missing_median_and_winner(self, snapshot):
        result = predict_time(snapshot, "01:00:00", "RaceB", "RaceA")

        assert result.avg == Predicted(int(3600 / 0.9))
        assert result.median == Unavailable(UnavailableReason.NO_MEDIAN)
        assert result.winner == Unavailable(UnavailableReason.NO_WINNER)

    def test_zero_time_short_circuits(self, snapshot):
        result = predict_time(snapshot, "00:00:00", "RaceA", "RaceB")

        for outcome in (result.avg, result.median, result.winner):
            assert outcome == Predicted(0)

    def test_garbage_time_is_zero(self, snapshot):
        result = predict_time(snapshot, "abc", "RaceA", "RaceB")
        assert result.avg == Predicted(0)

    def test_zero_time_eu_mode(self, snapshot):
        result = predict_time(
            snapshot, "00:00:00", "Lavaredo", "UTMB", DataSourceMode.EU_WINNER
        )
        assert result.winner == Predicted(0)
        assert result.avg == Unavailable(UnavailableReason.NOT_IN_MODE)

    def test_eu_mode_winner_only(self, snapshot):
        result = predict_time(
            snapshot, "10:00:00", "Lavaredo", "UTMB", DataSourceMode.EU_WINNER
        )
        utmb = 19 * 3600 + 37 * 60 + 43

        # 36000 / (43200 / utmb) = 36000 * utmb / 43200
        assert result.winner.seconds == int(36000 / (43200 / utmb))
        assert result.avg == Unavailable(UnavailableReason.NOT_IN_MODE)
        assert result.median == Unavailable(UnavailableReason.NOT_IN_MODE)
