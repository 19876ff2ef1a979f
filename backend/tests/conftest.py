"""
Shared fixtures: small ratio feeds and snapshots built from them.
"""

import pytest

from app.features.ratios import build_snapshot


# Long layout, columns deliberately out of order
LONG_CSV = """target,source,ratio_avg,ratio_median,ratio_winner
RaceB,RaceA,1.1,1.05,1.2
RaceA,RaceB,0.9,,
RaceD,RaceA,,0.8,0.75
RaceC,RaceA,0,-1,abc
"""

# Two EU events in two countries, UTMB listed twice (latest year wins)
EU_CSV = """country,event,name,dist_km,year,finishers,duration
FRA,UTMB,Ultra-Trail du Mont-Blanc,171,2022,1500,20:00:00
FRA,UTMB,Ultra-Trail du Mont-Blanc,171,2023,1700,19:37:43
ITA,Lavaredo,Lavaredo Ultra Trail,120,2023,1200,12:00:00
ESP,Transgrancanaria,Transgrancanaria,126,2023,600,
"""


@pytest.fixture
def long_csv():
    return LONG_CSV


@pytest.fixture
def eu_csv():
    return EU_CSV


@pytest.fixture
def snapshot():
    """Snapshot with both tables loaded."""
    return build_snapshot(LONG_CSV, EU_CSV)
