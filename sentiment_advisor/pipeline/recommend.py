"""
RecommendStage — ranked BUY/SELL/HOLD actions for one portfolio.

Recommendation flow
-------------------
  1. Fetch holdings and prices from the data source.
  2. Resolve the request's sentiment view:
       - caller-supplied aggregates are used verbatim (authoritative), or
       - recent records are fetched and aggregated once per symbol.
  3. advise(): portfolio metrics + rule cascade over the same snapshot.
  4. Write JSON + CSV report files to ``config.data.output_dir``
     (skipped with ``write_reports=False``).

Returns the number of recommendations produced (one per holding).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from sentiment_advisor.ingestion.collector import PortfolioInputs, collect_inputs
from sentiment_advisor.models.meta import RunMetadata
from sentiment_advisor.models.recommendation import AdvisoryReport
from sentiment_advisor.models.sentiment import SentimentAggregate
from sentiment_advisor.pipeline.base import PipelineStage
from sentiment_advisor.recommendations.advisor import advise
from sentiment_advisor.recommendations.reporter import (
    write_recommendation_csv,
    write_recommendation_json,
)
from sentiment_advisor.sentiment.perturbation import SentimentJitter

logger = logging.getLogger(__name__)


class RecommendStage(PipelineStage):
    """Turn one portfolio's holdings, prices and sentiment into an advisory report.

    After a successful run, ``report`` and ``inputs`` hold what was produced
    and what it was produced from.
    """

    stage_name = "recommend"

    report: Optional[AdvisoryReport] = None
    inputs: Optional[PortfolioInputs] = None

    def _execute(
        self,
        run: RunMetadata,
        portfolio_ref: str = "demo",
        sentiments: Optional[Mapping[str, SentimentAggregate]] = None,
        write_reports: bool = True,
        **kwargs,
    ) -> int:
        """Generate the advisory report for ``portfolio_ref``.

        Args:
            run:           In-progress RunMetadata (mutable).
            portfolio_ref: Portfolio to advise on.
            sentiments:    Aggregates the caller already displayed; when
                           given, no sentiment is recomputed.
            write_reports: Write JSON/CSV files to the output directory.

        Returns:
            Number of recommendations produced.
        """
        run.portfolio_ref = portfolio_ref

        inputs = collect_inputs(
            self.source,
            portfolio_ref,
            config=self.config.sentiment,
            jitter=SentimentJitter.from_config(self.config.sentiment),
            sentiments=sentiments,
        )
        run.degraded_symbols = list(inputs.degraded_symbols)

        logger.info(
            "Advising portfolio=%s: %d holding(s), %d quote(s), sentiment=%s",
            portfolio_ref, len(inputs.holdings), len(inputs.prices), inputs.snapshot.source,
        )

        report = advise(
            inputs.holdings,
            inputs.prices,
            inputs.snapshot,
            config=self.config.recommendation,
        )
        self.inputs = inputs
        self.report = report

        if write_reports:
            json_path = write_recommendation_json(
                report, self.output_dir, portfolio_ref, run_slug=run.run_slug
            )
            csv_path = write_recommendation_csv(report, self.output_dir, portfolio_ref)
            run.output_paths = [str(json_path), str(csv_path)]

        return len(report.recommendations)
