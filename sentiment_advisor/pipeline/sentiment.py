"""
SentimentStage — compute per-symbol sentiment aggregates on demand.

Symbols come from ``symbols=`` directly or from the holdings of
``portfolio_ref``.  The resulting snapshot can be written to JSON and later
handed back to ``RecommendStage(sentiments=...)`` so recommendations are
computed from exactly the aggregates that were shown.

Output file
-----------
  data/outputs/recommendations/
    sentiment_{stamp}.json  -- {"computed_at": ..., "aggregates": [...]}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from sentiment_advisor.ingestion.collector import collect_sentiment
from sentiment_advisor.models.meta import RunMetadata
from sentiment_advisor.models.sentiment import SentimentAggregate
from sentiment_advisor.pipeline.base import PipelineStage
from sentiment_advisor.sentiment.perturbation import SentimentJitter
from sentiment_advisor.sentiment.snapshot import SentimentSnapshot
from sentiment_advisor.utils.time_utils import file_stamp, isoformat_z

logger = logging.getLogger(__name__)


class SentimentStage(PipelineStage):
    """Aggregate recent sentiment records for a set of symbols."""

    stage_name = "sentiment"

    snapshot: Optional[SentimentSnapshot] = None

    def _execute(
        self,
        run: RunMetadata,
        symbols: Optional[Sequence[str]] = None,
        portfolio_ref: Optional[str] = None,
        write_reports: bool = True,
        **kwargs,
    ) -> int:
        """Compute one aggregate per symbol.

        Args:
            run:           In-progress RunMetadata (mutable).
            symbols:       Tickers to aggregate.
            portfolio_ref: Used for symbols when ``symbols`` is empty.
            write_reports: Write the snapshot JSON to the output directory.

        Returns:
            Number of aggregates produced.

        Raises:
            ValueError: If neither ``symbols`` nor ``portfolio_ref`` is given.
        """
        if not symbols:
            if portfolio_ref is None:
                raise ValueError("SentimentStage needs symbols or a portfolio_ref.")
            run.portfolio_ref = portfolio_ref
            symbols = [h.symbol for h in self.source.get_holdings(portfolio_ref)]

        snapshot, failed = collect_sentiment(
            self.source,
            symbols,
            config=self.config.sentiment,
            jitter=SentimentJitter.from_config(self.config.sentiment),
        )
        run.degraded_symbols = failed
        self.snapshot = snapshot

        if write_reports:
            run.output_paths = [str(write_sentiment_json(snapshot, self.output_dir))]

        return len(snapshot)


def write_sentiment_json(snapshot: SentimentSnapshot, output_dir: Path) -> Path:
    """Write aggregates in the shape ``load_sentiment_file`` reads back."""
    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"sentiment_{file_stamp(snapshot.computed_at)}.json"

    payload = {
        "computed_at": isoformat_z(snapshot.computed_at),
        "aggregates":  [agg.model_dump(mode="json") for agg in snapshot.values()],
    }
    json_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Sentiment JSON written: %s (%d symbols)", json_path, len(snapshot))
    return json_path


def load_sentiment_file(path: str | Path) -> SentimentSnapshot:
    """Read aggregates written by ``write_sentiment_json`` (or by a caller).

    Accepts either ``{"aggregates": [...]}`` or a bare list of aggregates.
    The result is a ``"supplied"`` snapshot: values are used verbatim.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    rows = raw.get("aggregates", []) if isinstance(raw, dict) else raw
    return SentimentSnapshot.from_aggregates(
        SentimentAggregate.model_validate(row) for row in rows
    )
