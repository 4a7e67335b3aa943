"""
Sentiment Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute the pipeline stage.
  5. Report result to stdout.

Install and run::

    pip install -e .
    sentiment-advisor --help
    sentiment-advisor validate-config
    sentiment-advisor sentiment --symbol AAPL --symbol TSLA
    sentiment-advisor recommend --portfolio demo
    sentiment-advisor recommend --portfolio demo --sentiment-file data/outputs/recommendations/sentiment_*.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

app = typer.Typer(
    name="sentiment-advisor",
    help="Sentiment-driven BUY/SELL/HOLD recommendations for investment portfolios.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from sentiment_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from sentiment_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_source(config, snapshot_path: Optional[str]):
    from sentiment_advisor.ingestion.snapshot_source import SnapshotDataSource
    return SnapshotDataSource(snapshot_path or config.data.snapshot_path)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Snapshot path:     {config.data.snapshot_path}")
    typer.echo(f"  Output dir:        {config.data.output_dir}")
    typer.echo(f"  Sentiment window:  {config.sentiment.window_size} records")
    typer.echo(f"  Jitter enabled:    {config.sentiment.jitter_enabled}")
    typer.echo(
        f"  Strong / moderate: {config.recommendation.strong_sentiment} / "
        f"{config.recommendation.moderate_sentiment}"
    )
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config is valid.")


@app.command("sentiment")
def sentiment(
    symbols: Optional[list[str]] = typer.Option(
        None,
        "--symbol",
        "-s",
        help="Ticker to aggregate (repeatable).",
    ),
    portfolio: Optional[str] = typer.Option(
        None,
        "--portfolio",
        help="Aggregate every symbol held in this portfolio.",
    ),
    snapshot_path: Optional[str] = typer.Option(
        None,
        "--snapshot",
        help="Input snapshot JSON (default: data.snapshot_path from config).",
    ),
    no_write: bool = typer.Option(
        False,
        "--no-write",
        help="Print only; do not write the sentiment JSON file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Aggregate recent sentiment records per symbol.

    The written JSON can be passed back to ``recommend --sentiment-file`` so
    recommendations use exactly the aggregates shown here.
    """
    from sentiment_advisor.ingestion.base import DataSourceError
    from sentiment_advisor.pipeline.sentiment import SentimentStage
    from sentiment_advisor.reporting.formatters import format_sentiment_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if not symbols and not portfolio:
        typer.echo("[ERROR] Pass at least one --symbol or a --portfolio.", err=True)
        raise typer.Exit(code=1)

    stage = SentimentStage(config=config, source=_build_source(config, snapshot_path))
    try:
        run = stage.run(symbols=symbols, portfolio_ref=portfolio, write_reports=not no_write)
    except (DataSourceError, ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_sentiment_table(stage.snapshot.values()))
    typer.echo("")
    if run.degraded_symbols:
        typer.echo(f"  [WARN] Lookup failed for: {', '.join(run.degraded_symbols)}")
    for path in run.output_paths:
        typer.echo(f"  Written: {path}")
    typer.echo(f"[OK] {run.rows_processed} symbol(s) aggregated | run_slug={run.run_slug}")


@app.command("recommend")
def recommend(
    portfolio: str = typer.Option(
        "demo",
        "--portfolio",
        "-p",
        help="Portfolio reference in the snapshot file.",
    ),
    sentiment_file: Optional[str] = typer.Option(
        None,
        "--sentiment-file",
        help="Use these aggregates verbatim instead of recomputing sentiment.",
    ),
    snapshot_path: Optional[str] = typer.Option(
        None,
        "--snapshot",
        help="Input snapshot JSON (default: data.snapshot_path from config).",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the camelCase payload instead of the table.",
    ),
    no_write: bool = typer.Option(
        False,
        "--no-write",
        help="Print only; do not write JSON/CSV report files.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Produce ranked BUY/SELL/HOLD recommendations for a portfolio."""
    from sentiment_advisor.ingestion.base import DataSourceError
    from sentiment_advisor.pipeline.recommend import RecommendStage
    from sentiment_advisor.pipeline.sentiment import load_sentiment_file
    from sentiment_advisor.recommendations.advisor import build_payload
    from sentiment_advisor.reporting.formatters import format_recommendation_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    sentiments = None
    if sentiment_file:
        try:
            sentiments = load_sentiment_file(sentiment_file)
        except FileNotFoundError:
            typer.echo(f"[ERROR] Sentiment file not found: {sentiment_file}", err=True)
            raise typer.Exit(code=1)
        except (json.JSONDecodeError, ValidationError) as exc:
            typer.echo(f"[ERROR] Invalid sentiment file: {exc}", err=True)
            raise typer.Exit(code=1)

    stage = RecommendStage(config=config, source=_build_source(config, snapshot_path))
    try:
        run = stage.run(
            portfolio_ref=portfolio,
            sentiments=sentiments,
            write_reports=not no_write,
        )
    except (DataSourceError, ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    payload = build_payload(stage.report)
    if as_json:
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(format_recommendation_table(payload))
    typer.echo("")
    if run.degraded_symbols:
        typer.echo(
            f"  [WARN] Defaults used for: {', '.join(run.degraded_symbols)}"
        )
    for path in run.output_paths:
        typer.echo(f"  Written: {path}")
    typer.echo(
        f"[OK] {run.rows_processed} recommendation(s) | run_slug={run.run_slug}"
    )


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
