"""CLI entry point for the analytics engine.

Reads a JSON array of trade records (as exported by the data store) and
prints the computed views as strict JSON.  Non-finite numbers, such as the
profit factor of a record set without losses, are written as ``null``; the
metrics carry ``profit_factor_infinite`` to tell that case apart.  Formatting
for humans is left to the consumer.
"""

from __future__ import annotations

import json
import math
from datetime import date
from typing import Any

import click

from .core.config import load_settings
from .core.errors import ConfigError


def _load_records(path: str) -> list:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(data, dict):
        data = data.get("records", data.get("operations", []))
    if not isinstance(data, list):
        raise click.ClickException(f"{path} must hold a JSON array of records")
    return data


def _strict_json(value: Any) -> Any:
    """Replace non-finite floats with None so the output parses as standard JSON."""
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: _strict_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_strict_json(v) for v in value]
    return value


def _engine(config: str | None):
    from .journal.engine import AnalyticsEngine
    from .observability.logger import setup_logging

    try:
        settings = load_settings(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return AnalyticsEngine(settings)


def _parse_as_of(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}") from exc


@click.group()
def main() -> None:
    """Trading Journal Analytics."""


@main.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False), help="JSON records file")
@click.option("--config", default=None, help="Config file path")
@click.option("--as-of", default=None, help="Alert window end date (YYYY-MM-DD)")
@click.option("--indent", default=2, type=int, help="JSON indent")
def report(input_path: str, config: str | None, as_of: str | None, indent: int) -> None:
    """Compute every dashboard view.

    An infinite profit factor is printed as null with
    ``profit_factor_infinite`` set to true.
    """
    engine = _engine(config)
    result = engine.dashboard(_load_records(input_path), as_of=_parse_as_of(as_of))
    click.echo(json.dumps(
        _strict_json(result.to_dict()), indent=indent, default=str, allow_nan=False
    ))


@main.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False), help="JSON records file")
@click.option("--config", default=None, help="Config file path")
@click.option("--as-of", default=None, help="Alert window end date (YYYY-MM-DD)")
def alerts(input_path: str, config: str | None, as_of: str | None) -> None:
    """Evaluate risk alerts only."""
    engine = _engine(config)
    raised = engine.alerts(_load_records(input_path), as_of=_parse_as_of(as_of))
    click.echo(json.dumps(_strict_json([a.to_dict() for a in raised]), indent=2, allow_nan=False))


if __name__ == "__main__":
    main()
