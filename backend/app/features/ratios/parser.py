"""CSV parsers for race ratio feeds.

Supported layouts:
    long    source,target,ratio_avg,ratio_median,ratio_winner
    wide    ,RaceA,RaceB,...  (one row per source race, cells are target/source
            multipliers, stored inverted as ratio_avg)
    EU      country,event,name,dist_km,year,finishers,duration

Parsing is soft: a payload with missing required columns yields an empty
table and a logged diagnostic, never an exception.
"""

from __future__ import annotations

import csv
import io
import logging
import math
from datetime import datetime, timezone

from app.shared.constants import (
    DataSourceMode,
    EU_DURATION_COLUMN,
    EU_EVENT_COLUMN,
    LEGACY_RATIO_COLUMNS,
    LEGACY_SOURCE_COLUMN,
    LEGACY_TARGET_COLUMN,
    Variant,
)
from app.shared.formatters import parse_time

from .models import EuRaceDetail, RatioRecord, RatioSnapshot, RatioTable

logger = logging.getLogger(__name__)


def parse_ratio(value: str | None) -> float | None:
    """Parse a ratio cell. Non-numeric, non-finite or non-positive → None.

    "1.1"   → 1.1
    ""      → None
    "0"     → None
    "nan"   → None
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        ratio = float(value)
    except ValueError:
        return None
    if not math.isfinite(ratio) or ratio <= 0:
        return None
    return ratio


def _read_rows(text: str) -> list[list[str]]:
    """Split CSV text into rows, dropping blank lines."""
    text = text.lstrip("\ufeff")
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader if any(cell.strip() for cell in row)]


def _column_index(header: list[str]) -> dict[str, int]:
    """Map lowercased column names to their index (first occurrence wins)."""
    index: dict[str, int] = {}
    for i, name in enumerate(header):
        key = name.strip().lower()
        if key and key not in index:
            index[key] = i
    return index


def _cell(row: list[str], idx: int | None) -> str:
    if idx is None or idx >= len(row):
        return ""
    return row[idx].strip()


# =============================================================================
# Default table (long / wide)
# =============================================================================

def parse_ratio_csv(text: str) -> RatioTable:
    """Parse the default ratio feed (long or wide layout)."""
    rows = _read_rows(text or "")
    if not rows:
        logger.warning("Ratio feed is empty")
        return RatioTable(mode=DataSourceMode.DEFAULT)

    header = rows[0]
    columns = _column_index(header)

    if LEGACY_SOURCE_COLUMN in columns and LEGACY_TARGET_COLUMN in columns:
        return _parse_long(rows[1:], columns)
    if header and not header[0].strip():
        return _parse_wide(header, rows[1:])

    logger.warning(
        f"Ratio feed header missing '{LEGACY_SOURCE_COLUMN}'/'{LEGACY_TARGET_COLUMN}' "
        f"columns: {header!r}"
    )
    return RatioTable(mode=DataSourceMode.DEFAULT)


def _parse_long(rows: list[list[str]], columns: dict[str, int]) -> RatioTable:
    src_idx = columns[LEGACY_SOURCE_COLUMN]
    tgt_idx = columns[LEGACY_TARGET_COLUMN]
    ratio_idx = {v: columns.get(col) for v, col in LEGACY_RATIO_COLUMNS.items()}

    records: dict[tuple[str, str], RatioRecord] = {}
    skipped = 0
    for row in rows:
        source = _cell(row, src_idx)
        target = _cell(row, tgt_idx)
        if not source or not target or source == target:
            skipped += 1
            continue

        record = RatioRecord(
            source=source,
            target=target,
            ratio_avg=parse_ratio(_cell(row, ratio_idx[Variant.AVG])),
            ratio_median=parse_ratio(_cell(row, ratio_idx[Variant.MEDIAN])),
            ratio_winner=parse_ratio(_cell(row, ratio_idx[Variant.WINNER])),
        )
        if not record.has_any_ratio:
            skipped += 1
            continue
        records[(source, target)] = record

    if skipped:
        logger.debug(f"Ratio feed: skipped {skipped} rows without usable ratios")
    return RatioTable(mode=DataSourceMode.DEFAULT, records=records)


def _parse_wide(header: list[str], rows: list[list[str]]) -> RatioTable:
    targets = [name.strip() for name in header[1:]]

    records: dict[tuple[str, str], RatioRecord] = {}
    for row in rows:
        source = _cell(row, 0)
        if not source:
            continue
        for j, target in enumerate(targets, start=1):
            if not target or target == source:
                continue
            ratio = parse_ratio(_cell(row, j))
            if ratio is None:
                continue
            # matrix cells multiply the source time; records divide it
            records[(source, target)] = RatioRecord(
                source=source, target=target, ratio_avg=1 / ratio
            )

    return RatioTable(mode=DataSourceMode.DEFAULT, records=records)


# =============================================================================
# EU winner table
# =============================================================================

def _parse_int(value: str) -> int | None:
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


def _parse_float(value: str) -> float | None:
    try:
        result = float(value)
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def parse_eu_winner_csv(text: str) -> tuple[RatioTable, dict[str, EuRaceDetail]]:
    """Parse the EU winner feed and derive winner-to-winner ratios.

    Two passes: first pick one winning duration per event (the most recent
    year; ties keep the later row), then derive every ordered pair
    ratio_winner(A, B) = duration(A) / duration(B).

    Returns:
        (table, {event: EuRaceDetail})
    """
    empty = RatioTable(mode=DataSourceMode.EU_WINNER)
    rows = _read_rows(text or "")
    if not rows:
        logger.warning("EU winner feed is empty")
        return empty, {}

    columns = _column_index(rows[0])
    missing = [c for c in (EU_EVENT_COLUMN, EU_DURATION_COLUMN) if c not in columns]
    if missing:
        logger.warning(f"EU winner feed header missing columns {missing}: {rows[0]!r}")
        return empty, {}

    details: dict[str, EuRaceDetail] = {}
    for row in rows[1:]:
        detail = _parse_eu_row(row, columns)
        if detail is None:
            continue
        current = details.get(detail.event)
        if current is None or (detail.year or 0) >= (current.year or 0):
            details[detail.event] = detail

    timed = sorted(e for e, d in details.items() if d.duration_s > 0)
    records: dict[tuple[str, str], RatioRecord] = {}
    for source in timed:
        for target in timed:
            if source == target:
                continue
            records[(source, target)] = RatioRecord(
                source=source,
                target=target,
                ratio_winner=details[source].duration_s / details[target].duration_s,
            )

    untimed = len(details) - len(timed)
    if untimed:
        logger.debug(f"EU winner feed: {untimed} events without a usable duration")
    return RatioTable(mode=DataSourceMode.EU_WINNER, records=records), details


def _parse_eu_row(row: list[str], columns: dict[str, int]) -> EuRaceDetail | None:
    event = _cell(row, columns[EU_EVENT_COLUMN])
    if not event:
        return None

    duration = _cell(row, columns[EU_DURATION_COLUMN])
    return EuRaceDetail(
        event=event,
        name=_cell(row, columns.get("name")) or None,
        country=_cell(row, columns.get("country")) or None,
        distance_km=_parse_float(_cell(row, columns.get("dist_km"))),
        year=_parse_int(_cell(row, columns.get("year"))),
        finishers=_parse_int(_cell(row, columns.get("finishers"))),
        duration=duration or None,
        duration_s=parse_time(duration),
    )


# =============================================================================
# Snapshot
# =============================================================================

def build_snapshot(default_text: str | None, eu_text: str | None) -> RatioSnapshot:
    """Build a full snapshot from raw feed texts (None = source not configured)."""
    default_table = (
        parse_ratio_csv(default_text)
        if default_text is not None
        else RatioTable(mode=DataSourceMode.DEFAULT)
    )
    if eu_text is not None:
        eu_table, eu_details = parse_eu_winner_csv(eu_text)
    else:
        eu_table, eu_details = RatioTable(mode=DataSourceMode.EU_WINNER), {}

    names = default_table.race_names() | eu_table.race_names()
    return RatioSnapshot(
        tables={
            DataSourceMode.DEFAULT: default_table,
            DataSourceMode.EU_WINNER: eu_table,
        },
        race_names=tuple(sorted(n for n in names if n.strip())),
        eu_details=eu_details,
        loaded_at=datetime.now(timezone.utc),
    )
