"""
Tests for ratio feed parsers.

Tests header resolution, value cleaning, EU ratio derivation and snapshot
construction.
"""

import logging

import pytest

from app.features.ratios import Observation, Unavailable, aggregate_predictions, predict_time
from app.features.ratios.parser import (
    build_snapshot,
    parse_eu_winner_csv,
    parse_ratio,
    parse_ratio_csv,
)
from app.shared.constants import DataSourceMode, UnavailableReason
from app.shared.formatters import format_time


# =============================================================================
# Test parse_ratio
# =============================================================================

class TestParseRatio:
    """Tests for ratio cell cleaning."""

    def test_positive_float(self):
        assert parse_ratio("1.1") == pytest.approx(1.1)
        assert parse_ratio(" 0.95 ") == pytest.approx(0.95)

    @pytest.mark.parametrize("value", [None, "", "  ", "0", "-1.2", "abc", "nan", "inf"])
    def test_absent_values(self, value):
        """Non-positive or non-numeric values are absent, not zero."""
        assert parse_ratio(value) is None


# =============================================================================
# Test default feed
# =============================================================================

class TestParseRatioCsvLong:
    """Tests for the long source,target,... layout."""

    def test_columns_resolved_by_name(self, long_csv):
        table = parse_ratio_csv(long_csv)
        record = table.get("RaceA", "RaceB")

        assert record is not None
        assert record.ratio_avg == pytest.approx(1.1)
        assert record.ratio_median == pytest.approx(1.05)
        assert record.ratio_winner == pytest.approx(1.2)

    def test_pairs_are_ordered(self, long_csv):
        """Reverse pair is its own entry, not an inverse."""
        table = parse_ratio_csv(long_csv)

        assert table.get("RaceB", "RaceA").ratio_avg == pytest.approx(0.9)
        assert table.get("RaceB", "RaceA").ratio_median is None

    def test_partial_record_kept(self, long_csv):
        record = parse_ratio_csv(long_csv).get("RaceA", "RaceD")

        assert record.ratio_avg is None
        assert record.ratio_median == pytest.approx(0.8)
        assert record.ratio_winner == pytest.approx(0.75)

    def test_row_without_usable_ratio_dropped(self, long_csv):
        table = parse_ratio_csv(long_csv)

        assert table.get("RaceA", "RaceC") is None
        assert len(table) == 3

    def test_optional_ratio_columns(self):
        """Only source/target are required."""
        table = parse_ratio_csv("source,target,ratio_winner\nX,Y,1.5\n")
        assert table.get("X", "Y").ratio_winner == pytest.approx(1.5)
        assert table.get("X", "Y").ratio_avg is None

    def test_quoted_names_and_bom(self):
        text = '\ufeffsource,target,ratio_avg\n"Race, North",RaceB,1.2\n'
        table = parse_ratio_csv(text)
        assert table.get("Race, North", "RaceB").ratio_avg == pytest.approx(1.2)

    def test_missing_required_column_is_soft(self, caplog):
        with caplog.at_level(logging.WARNING):
            table = parse_ratio_csv("from,to,ratio_avg\nA,B,1.1\n")

        assert len(table) == 0
        assert "missing" in caplog.text

    def test_empty_payload(self):
        assert len(parse_ratio_csv("")) == 0


class TestParseRatioCsvWide:
    """Tests for the wide matrix layout."""

    def test_matrix_cells_are_inverted(self):
        """A cell multiplies the row's time; the record stores its inverse."""
        text = ",RaceA,RaceB,RaceC\nRaceA,,1.1,\nRaceB,0.9,,1.3\n"
        table = parse_ratio_csv(text)

        assert table.get("RaceA", "RaceB").ratio_avg == pytest.approx(1 / 1.1)
        assert table.get("RaceB", "RaceA").ratio_avg == pytest.approx(1 / 0.9)
        assert table.get("RaceB", "RaceC").ratio_avg == pytest.approx(1 / 1.3)
        assert table.get("RaceA", "RaceC") is None
        assert len(table) == 3

    def test_prediction_direction(self):
        """Row RaceA, column RaceB at 1.1: 2h on RaceA predicts 2h12 on RaceB."""
        snapshot = build_snapshot(",RaceA,RaceB\nRaceA,,1.1\n", None)
        result = predict_time(snapshot, "02:00:00", "RaceA", "RaceB")

        assert format_time(result.avg.seconds) == "02:12:00"
        assert result.median == Unavailable(UnavailableReason.NO_MEDIAN)

    def test_aggregate_over_wide_feed(self):
        snapshot = build_snapshot(
            ",RaceA,RaceB,RaceC\nRaceA,,1.1,\nRaceC,,0.5,\n", None
        )
        result = aggregate_predictions(
            snapshot,
            [Observation("RaceA", "02:00:00"), Observation("RaceC", "06:00:00")],
            "RaceB",
        )

        assert result.avg.used == 2
        assert format_time(result.avg.min_s) == "02:12:00"
        assert format_time(result.avg.max_s) == "03:00:00"
        assert result.avg.time_s == (result.avg.min_s + result.avg.max_s) // 2


# =============================================================================
# Test EU winner feed
# =============================================================================

class TestParseEuWinnerCsv:
    """Tests for EU winner derivation."""

    def test_ratio_is_duration_quotient(self, eu_csv):
        table, _ = parse_eu_winner_csv(eu_csv)
        utmb = 19 * 3600 + 37 * 60 + 43

        assert table.get("UTMB", "Lavaredo").ratio_winner == pytest.approx(utmb / 43200)
        assert table.get("Lavaredo", "UTMB").ratio_winner == pytest.approx(43200 / utmb)

    def test_only_winner_variant(self, eu_csv):
        table, _ = parse_eu_winner_csv(eu_csv)
        record = table.get("UTMB", "Lavaredo")

        assert record.ratio_avg is None
        assert record.ratio_median is None

    def test_latest_year_wins(self, eu_csv):
        _, details = parse_eu_winner_csv(eu_csv)

        assert details["UTMB"].year == 2023
        assert details["UTMB"].finishers == 1700
        assert details["UTMB"].duration == "19:37:43"

    def test_event_without_duration_has_no_pairs(self, eu_csv):
        table, details = parse_eu_winner_csv(eu_csv)

        assert "Transgrancanaria" in details
        assert details["Transgrancanaria"].duration_s == 0
        assert table.get("UTMB", "Transgrancanaria") is None
        assert len(table) == 2

    def test_detail_fields(self, eu_csv):
        _, details = parse_eu_winner_csv(eu_csv)
        lavaredo = details["Lavaredo"]

        assert lavaredo.country == "ITA"
        assert lavaredo.name == "Lavaredo Ultra Trail"
        assert lavaredo.distance_km == pytest.approx(120.0)

    def test_missing_duration_column_is_soft(self):
        table, details = parse_eu_winner_csv("country,event,name\nFRA,UTMB,UTMB\n")

        assert len(table) == 0
        assert details == {}


# =============================================================================
# Test snapshot
# =============================================================================

class TestBuildSnapshot:
    """Tests for build_snapshot."""

    def test_names_sorted_and_deduplicated(self, snapshot):
        assert list(snapshot.race_names) == [
            "Lavaredo", "RaceA", "RaceB", "RaceD", "UTMB",
        ]

    def test_tables_independent(self, snapshot):
        assert snapshot.table(DataSourceMode.EU_WINNER).get("RaceA", "RaceB") is None
        assert snapshot.table(DataSourceMode.DEFAULT).get("UTMB", "Lavaredo") is None

    def test_unconfigured_eu_feed(self, long_csv):
        snapshot = build_snapshot(long_csv, None)

        assert len(snapshot.table(DataSourceMode.EU_WINNER)) == 0
        assert snapshot.eu_details == {}
        assert not snapshot.is_empty
        assert snapshot.loaded_at is not None
