"""
CLI interface for ratio predictions.

Usage:
    python -m tools.ratios.cli races --ratios ratios.csv
    python -m tools.ratios.cli races --eu eu_winners.csv --mode euWinner --country FRA
    python -m tools.ratios.cli countries --eu eu_winners.csv
    python -m tools.ratios.cli predict --ratios ratios.csv \
        --obs "Race A=2:05:00" --obs "Race C=58:30" --target "Race B"

--ratios / --eu accept a local file path or an http(s) URL.
Without either, the configured feed URLs are fetched.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from app.features.ratios import (
    InvalidObservationError,
    Observation,
    RatioDataError,
    RatioDataLoader,
    RatioPredictionService,
    RatioSnapshot,
)
from app.features.ratios.loader import snapshot_from_text
from app.features.ratios.schemas import AggregatedVariantSchema
from app.shared.constants import ALL_VARIANTS, DataSourceMode

MODE_CHOICE = click.Choice([m.value for m in DataSourceMode])


def _read_source(location: str, loader: RatioDataLoader) -> str:
    """Read a feed from a local path or URL."""
    if location.startswith(("http://", "https://")):
        async def _fetch() -> str:
            async with httpx.AsyncClient(
                timeout=loader.timeout, follow_redirects=True
            ) as client:
                return await loader.fetch_text(client, location)
        return asyncio.run(_fetch())
    return Path(location).read_text(encoding="utf-8-sig")


def _load_snapshot(ratios: Optional[str], eu: Optional[str]) -> RatioSnapshot:
    loader = RatioDataLoader()
    try:
        if ratios is None and eu is None:
            return asyncio.run(loader.load())
        default_text = _read_source(ratios, loader) if ratios else None
        eu_text = _read_source(eu, loader) if eu else None
        return snapshot_from_text(default_text, eu_text)
    except (RatioDataError, OSError) as e:
        raise click.ClickException(f"Failed to load race data: {e}")


def _source_options(f):
    f = click.option("--eu", default=None, help="EU winner feed (path or URL)")(f)
    f = click.option("--ratios", default=None, help="Default ratio feed (path or URL)")(f)
    return f


@click.group()
def cli():
    """Race time prediction from race-to-race ratios."""
    pass


@cli.command()
@_source_options
@click.option("--mode", default=None, type=MODE_CHOICE, help="Only races of this data source")
@click.option("--country", default=None, help="EU country filter (euWinner mode)")
def races(ratios, eu, mode, country):
    """List known race names."""
    service = RatioPredictionService(_load_snapshot(ratios, eu))
    names = service.list_race_names(
        mode=DataSourceMode(mode) if mode else None, country=country
    )
    for name in names:
        click.echo(name)


@cli.command()
@_source_options
def countries(ratios, eu):
    """List countries of the EU winner feed."""
    service = RatioPredictionService(_load_snapshot(ratios, eu))
    for country in service.list_countries():
        click.echo(country)


@cli.command()
@_source_options
@click.option(
    "--obs", "observations", multiple=True, required=True,
    help='Known result as "RACE=TIME" (repeatable)'
)
@click.option("--target", required=True, help="Race to predict")
@click.option("--mode", default=DataSourceMode.DEFAULT.value, type=MODE_CHOICE)
def predict(ratios, eu, observations, target, mode):
    """
    Predict a finish time on TARGET.

    Each --obs is predicted independently; with several observations the
    mean is shown with the min/max band.
    """
    parsed = []
    for item in observations:
        race, sep, time = item.rpartition("=")
        if not sep:
            raise click.BadParameter(f"expected RACE=TIME, got {item!r}", param_hint="--obs")
        parsed.append(Observation(race=race, time=time))

    service = RatioPredictionService(_load_snapshot(ratios, eu))
    try:
        result = service.predict_aggregate(parsed, target, DataSourceMode(mode))
    except InvalidObservationError as e:
        raise click.ClickException(str(e))

    if result is None:
        raise click.ClickException("No valid predictions available")

    click.echo(f"Target: {result.target} ({result.mode.value})")
    for variant in ALL_VARIANTS:
        schema = AggregatedVariantSchema.from_outcome(result.get(variant))
        if schema is None:
            continue
        if not schema.available:
            click.echo(f"  {variant.value:<7} {schema.message}")
        elif schema.used > 1:
            click.echo(
                f"  {variant.value:<7} {schema.time}  (min {schema.min}, max {schema.max})"
            )
        else:
            click.echo(f"  {variant.value:<7} {schema.time}")
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)


if __name__ == "__main__":
    cli()
