"""
ASCII terminal formatters for CLI commands.

All formatters accept payload dicts / model lists and return plain
multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Recommendation table
--------------------
``format_recommendation_table()`` takes the camelCase payload produced by
``build_payload()`` so it renders exactly what was written to JSON::

  Rank  Symbol  Action  Conf  Priority   Weight      P/L  Rule
  ----------------------------------------------------------------------
     1  TSLA      SELL  85.0  HIGH        24.2%   +11.5%  lock_in_gains
          - Strong negative sentiment (78.0%)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sentiment_advisor.models.sentiment import SentimentAggregate


def _pct(value: Any, signed: bool = False) -> str:
    if not isinstance(value, (int, float)):
        return str(value)
    return f"{value:+.1f}%" if signed else f"{value:.1f}%"


# ── Recommendations ───────────────────────────────────────────────────────────


def format_portfolio_summary(metrics: dict[str, Any]) -> str:
    """Format the ``portfolioMetrics`` block of a payload."""
    avg = metrics.get("avgSentiment", {})
    lines = [
        "  Portfolio",
        f"    Holdings:           {metrics.get('holdingCount', 0)}",
        f"    Total value:        {metrics.get('totalValue', 0.0):,.2f}",
        f"    Total cost:         {metrics.get('totalCost', 0.0):,.2f}",
        f"    Profit/loss:        {metrics.get('totalProfitLoss', 0.0):+,.2f} "
        f"({_pct(metrics.get('totalProfitLossPercent', 0.0), signed=True)})",
        f"    Concentration risk: {_pct(metrics.get('concentrationRisk', 0.0) * 100)}",
        f"    Overall sentiment:  {metrics.get('overallSentiment', 'neutral')} "
        f"(+{_pct(avg.get('positive', 0.0) * 100)} / -{_pct(avg.get('negative', 0.0) * 100)})",
    ]
    return "\n".join(lines)


def format_recommendation_table(
    payload: dict[str, Any],
    show_reasoning: bool = True,
) -> str:
    """Format an advisory payload as an ASCII table.

    Args:
        payload:        Output of ``build_payload()``.
        show_reasoning: Print each recommendation's reasoning lines beneath it.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Portfolio Recommendations ===")
    lines.append(f"  Generated at: {payload.get('timestamp', '?')}")
    lines.append("")
    lines.append(format_portfolio_summary(payload.get("portfolioMetrics", {})))

    recs = payload.get("recommendations", [])
    lines.append("")
    if not recs:
        lines.append("  (no holdings, nothing to recommend)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Symbol':<6}  {'Action':>6}  {'Conf':>5}  "
        f"{'Priority':<8}  {'Weight':>7}  {'P/L':>8}  Rule"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) + 16))
    for rank, rec in enumerate(recs, start=1):
        lines.append(
            f"  {rank:>4}  {rec.get('symbol', ''):<6}  {rec.get('action', ''):>6}  "
            f"{rec.get('confidence', 0.0):>5.1f}  {rec.get('priority', ''):<8}  "
            f"{_pct(rec.get('portfolioWeight', 0.0)):>7}  "
            f"{_pct(rec.get('profitLossPercent', 0.0), signed=True):>8}  "
            f"{rec.get('rule', '')}"
        )
        if show_reasoning:
            for reason in rec.get("reasoning", []):
                lines.append(f"          - {reason}")

    return "\n".join(lines)


# ── Sentiment ─────────────────────────────────────────────────────────────────


def format_sentiment_table(aggregates: Iterable[SentimentAggregate]) -> str:
    """Format per-symbol aggregates as an ASCII table.

    Symbols with no records (``sample_size == 0``) are flagged so the
    neutral default is not mistaken for a measured signal.
    """
    aggs = list(aggregates)
    lines: list[str] = []
    lines.append("")
    lines.append("=== Sentiment by Symbol ===")
    if not aggs:
        lines.append("  (no symbols)")
        return "\n".join(lines)

    header = (
        f"  {'Symbol':<6}  {'Pos':>6}  {'Neg':>6}  {'Neu':>6}  "
        f"{'Label':<8}  {'Trend':<9}  {'N':>4}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for agg in aggs:
        note = "  (no data, neutral default)" if agg.sample_size == 0 else ""
        lines.append(
            f"  {agg.symbol:<6}  {_pct(agg.positive * 100):>6}  "
            f"{_pct(agg.negative * 100):>6}  {_pct(agg.neutral * 100):>6}  "
            f"{agg.label.value:<8}  {agg.trend.value:<9}  {agg.sample_size:>4}{note}"
        )
    return "\n".join(lines)
