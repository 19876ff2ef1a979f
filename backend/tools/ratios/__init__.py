"""
Command-line tools for the ratio predictor.

Usage:
    python -m tools.ratios.cli races --ratios ratios.csv
    python -m tools.ratios.cli predict --ratios ratios.csv --obs "RaceA=2:00:00" --target RaceB
"""
