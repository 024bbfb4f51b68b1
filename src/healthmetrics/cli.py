"""CLI for the healthmetrics analytics engine."""

import json
import logging
from datetime import date
from typing import Any

import click
from pydantic import ValidationError

from healthmetrics.config import AnalyticsConfig


def _load(file: str) -> dict[str, list[Any]]:
    from healthmetrics.loader import load_series

    try:
        return load_series(file)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="FILE") from e


def _parse_date(ctx: click.Context, param: click.Parameter, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter(f"{value!r} is not an ISO date (YYYY-MM-DD)") from e


@click.group()
@click.option("--config", "-c", "config_path", default=None, type=click.Path(exists=True),
              help="JSON file with threshold/window/alpha overrides.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """healthmetrics: anomaly, correlation, forecast and risk analytics for daily health metrics."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = AnalyticsConfig()
    if config_path is not None:
        try:
            config = AnalyticsConfig.from_file(config_path)
        except ValidationError as e:
            raise click.BadParameter(str(e), param_hint="--config") from e
    ctx.obj = config


@main.command("analyze")
@click.argument("file", type=click.Path(exists=True))
@click.option("--output", "-o", default=None, help="Write report JSON to file.")
@click.option("--date", "day", default=None, callback=_parse_date,
              help="Report date (ISO, default today).")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON.")
@click.pass_obj
def analyze_cmd(config: AnalyticsConfig, file: str, output: str | None,
                day: date | None, as_json: bool) -> None:
    """Run the full analytics engine on a series file."""
    from healthmetrics.analytics.report import build_report

    report = build_report(_load(file), config=config, day=day)

    if as_json:
        click.echo(report.to_json())
    else:
        click.echo(f"\n{'=' * 60}")
        click.echo(f"  Health Report: {report.date}")
        click.echo(f"{'=' * 60}")
        click.echo(f"  Health score: {report.overall_health_score}/100")
        click.echo(f"  Anomalies:  {report.total_anomalies} across "
                   f"{len(report.anomalies)} metric(s)")
        for name, result in report.anomalies.items():
            click.echo(f"    {name:<12} z={len(result.z_anomalies)} "
                       f"rolling={len(result.rolling_anomalies)}")
        for name, forecast in report.forecasts.items():
            click.echo(f"  Forecast:   {name:<12} {forecast.trend_direction.value} "
                       f"(confidence {forecast.confidence:.2f})")
        for name, risk in report.risks.items():
            click.echo(f"  Risk:       {name:<12} {risk.level.value} "
                       f"(p={risk.probability:.2f})")
        for relation in report.relations:
            click.echo(f"  {relation.pair}: {relation.value:+.2f}  {relation.insight}")
        for rec in report.recommendations:
            click.echo(f"  [{rec.priority.value}] {rec.message}")
        click.echo(f"{'=' * 60}")

    if output:
        with open(output, "w") as f:
            f.write(report.to_json())
        click.echo(f"\nReport written to {output}")


@main.command("anomalies")
@click.argument("file", type=click.Path(exists=True))
@click.pass_obj
def anomalies_cmd(config: AnalyticsConfig, file: str) -> None:
    """Detect global and rolling z-score anomalies per metric."""
    from healthmetrics.analytics.anomaly import detect_all

    report = detect_all(_load(file), config)
    click.echo(json.dumps({k: v.to_dict() for k, v in report.items()}, indent=2))


@main.command("correlate")
@click.argument("file", type=click.Path(exists=True))
def correlate_cmd(file: str) -> None:
    """Print the correlation matrix and pairwise insights."""
    from healthmetrics.analytics.correlation import build_matrix, relation_pairs

    series = _load(file)
    names = list(series)
    matrix = build_matrix([series[n] for n in names], names)

    width = max([len(n) for n in names] + [6])
    click.echo(" " * width + "".join(f"{n:>{width + 2}}" for n in names))
    for name, row in zip(matrix.metrics, matrix.matrix):
        click.echo(f"{name:<{width}}" + "".join(f"{v:>{width + 2}.2f}" for v in row))

    click.echo("")
    for relation in relation_pairs(series):
        click.echo(f"  {relation.insight}")


@main.command("forecast")
@click.argument("file", type=click.Path(exists=True))
@click.option("--metric", "-m", required=True, help="Metric to forecast.")
@click.option("--confidence", default=None, type=float,
              help="Confidence constant (default: per-metric value).")
@click.pass_obj
def forecast_cmd(config: AnalyticsConfig, file: str, metric: str,
                 confidence: float | None) -> None:
    """Forecast a single metric's short-term trend."""
    from healthmetrics.analytics.forecast import predict, predict_metric

    series = _load(file)
    if metric not in series:
        raise click.BadParameter(
            f"{metric!r} not in {file} (have: {', '.join(series) or 'none'})",
            param_hint="--metric",
        )

    if confidence is None:
        try:
            result = predict_metric(metric, series[metric], config.ma_window, config.alpha)
        except ValueError as e:
            raise click.UsageError(f"{e}; pass --confidence explicitly") from e
    else:
        result = predict(series[metric], confidence, config.ma_window, config.alpha)

    click.echo(json.dumps(result.to_dict(), indent=2))


@main.command("risk")
@click.argument("file", type=click.Path(exists=True))
def risk_cmd(file: str) -> None:
    """Classify stress, fatigue and dehydration risk."""
    from healthmetrics.analytics.report import assess_risks

    risks = assess_risks(_load(file))
    if not risks:
        click.echo("No stress, sleep+steps or hydration series found.")
        return
    for name, risk in risks.items():
        click.echo(f"{name:<12} {risk.level.value:<7} p={risk.probability:.2f}")


if __name__ == "__main__":
    main()
