"""
Recommendation report writer: JSON and CSV output for an ``AdvisoryReport``.

All functions are pure I/O.  They consume an in-memory report and write
machine-readable (JSON) and spreadsheet-friendly (CSV) files.

Output files (written by RecommendStage)
-----------------------------------------
  data/outputs/recommendations/
    recommendations_{portfolio}_{stamp}.json  -- full camelCase payload + provenance
    recommendations_{portfolio}_{stamp}.csv   -- one row per recommendation, ranked
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

from sentiment_advisor.models.recommendation import AdvisoryReport
from sentiment_advisor.recommendations.advisor import build_payload
from sentiment_advisor.utils.time_utils import file_stamp

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v0.3.0"


def _report_path(output_dir: Path, portfolio_ref: str, report: AdvisoryReport, suffix: str) -> Path:
    safe_ref = "".join(c if c.isalnum() or c in "-_" else "_" for c in portfolio_ref)
    return output_dir / f"recommendations_{safe_ref}_{file_stamp(report.timestamp)}.{suffix}"


def write_recommendation_json(
    report: AdvisoryReport,
    output_dir: Path,
    portfolio_ref: str,
    run_slug: str = "",
) -> Path:
    """Write the report payload to a structured JSON file.

    The ``report`` key holds exactly what ``build_payload`` returns, so
    downstream consumers can read either source interchangeably.

    Args:
        report:        Report to serialise.
        output_dir:    Target directory (created if missing).
        portfolio_ref: Portfolio identifier (used in filename + metadata).
        run_slug:      Pipeline run UUID for provenance.

    Returns:
        Path to the written JSON file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = _report_path(output_dir, portfolio_ref, report, "json")

    payload = {
        "schema_version": SCHEMA_VERSION,
        "portfolio_ref":  portfolio_ref,
        "run_slug":       run_slug,
        "report":         build_payload(report),
    }

    json_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path


def write_recommendation_csv(
    report: AdvisoryReport,
    output_dir: Path,
    portfolio_ref: str,
) -> Path:
    """Write ranked recommendations to a CSV file.

    Columns: rank, symbol, action, confidence, priority, rule,
             portfolio_weight, profit_loss_pct, current_price,
             purchase_price, quantity, reasoning.

    ``reasoning`` lines are joined with ``" | "``.

    Returns:
        Path to the written CSV file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = _report_path(output_dir, portfolio_ref, report, "csv")

    fieldnames = [
        "rank", "symbol", "action", "confidence", "priority", "rule",
        "portfolio_weight", "profit_loss_pct", "current_price",
        "purchase_price", "quantity", "reasoning",
    ]

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for rank, rec in enumerate(report.recommendations, start=1):
            writer.writerow(
                {
                    "rank":             rank,
                    "symbol":           rec.symbol,
                    "action":           rec.action.value,
                    "confidence":       rec.confidence,
                    "priority":         rec.priority.value,
                    "rule":             rec.rule,
                    "portfolio_weight": rec.portfolio_weight,
                    "profit_loss_pct":  f"{rec.profit_loss_percent:+.2f}",
                    "current_price":    rec.current_price,
                    "purchase_price":   rec.purchase_price,
                    "quantity":         rec.quantity,
                    "reasoning":        " | ".join(rec.reasoning),
                }
            )

    logger.info(
        "Recommendation CSV written: %s (%d rows)", csv_path, len(report.recommendations)
    )
    return csv_path
