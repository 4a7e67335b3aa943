"""
Abstract base class for all pipeline stages.

Every stage follows the same contract:
  1. Receive ``AppConfig`` (and optionally a ``MarketDataSource``) at construction.
  2. ``run(**kwargs)`` is the sole public API.
  3. ``run()`` creates a ``RunMetadata`` record, calls ``_execute()``,
     and finalizes the record with the outcome.
  4. ``_execute()`` is the stage-specific implementation (overridden by subclasses).

Stages never swallow exceptions: a failing ``_execute()`` leaves the run
record at ``status='failed'`` (available as ``stage.last_run``) and the
exception propagates to the caller.

Usage::

    class MyStage(PipelineStage):
        stage_name = "recommend"

        def _execute(self, run: RunMetadata, **kwargs) -> int:
            # Do work, return row count
            return 3

    stage = MyStage(config=app_config)
    run = stage.run(portfolio_ref="demo")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from uuid import uuid4

from sentiment_advisor.config import AppConfig
from sentiment_advisor.ingestion.base import MarketDataSource
from sentiment_advisor.ingestion.snapshot_source import SnapshotDataSource
from sentiment_advisor.models.meta import RunMetadata
from sentiment_advisor.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class PipelineStage(ABC):
    """Abstract base for all pipeline stages.

    Subclasses must:
      1. Set ``stage_name`` class variable.
      2. Implement ``_execute(run, **kwargs) -> int``.

    Attributes:
        stage_name: String identifier matching a valid ``RunMetadata.pipeline_stage``.
        config: The application configuration for this run.
        source: Data collaborator; a ``SnapshotDataSource`` over
            ``config.data.snapshot_path`` when not supplied.
        last_run: The most recent run record, including failed ones.
    """

    stage_name: str  # Override in subclass

    def __init__(
        self,
        config: AppConfig,
        source: Optional[MarketDataSource] = None,
    ) -> None:
        self.config = config
        self.source = source or SnapshotDataSource(config.data.snapshot_path)
        self.last_run: Optional[RunMetadata] = None

    @property
    def output_dir(self) -> Path:
        return Path(self.config.data.output_dir)

    def run(self, **kwargs) -> RunMetadata:
        """Execute this pipeline stage.

        Args:
            **kwargs: Stage-specific keyword arguments passed to ``_execute()``.

        Returns:
            ``RunMetadata`` with final ``status``, ``rows_processed``,
            and ``finished_at`` set.

        Raises:
            Exception: Re-raises any exception from ``_execute()`` after
                recording ``status='failed'`` in the run record.
        """
        run = RunMetadata(
            run_slug=str(uuid4()),
            pipeline_stage=self.stage_name,
            config_snapshot=self.config.model_dump(),
            started_at=utcnow(),
        )
        self.last_run = run
        log_fields = {"stage": self.stage_name, "run_slug": run.run_slug}
        logger.info(
            "Stage [%s] starting | run_slug=%s", self.stage_name, run.run_slug,
            extra=log_fields,
        )

        try:
            rows = self._execute(run=run, **kwargs)
        except Exception as exc:
            run.status = "failed"
            run.error_message = str(exc)
            run.finished_at = utcnow()
            logger.error(
                "Stage [%s] FAILED: %s | run_slug=%s",
                self.stage_name, exc, run.run_slug,
                extra=log_fields,
            )
            raise

        run.status = "success"
        run.rows_processed = rows
        run.finished_at = utcnow()
        if run.degraded_symbols:
            logger.warning(
                "Stage [%s] completed with degraded symbols %s | run_slug=%s",
                self.stage_name, run.degraded_symbols, run.run_slug,
                extra=log_fields,
            )
        logger.info(
            "Stage [%s] completed | rows=%d | run_slug=%s",
            self.stage_name, rows, run.run_slug,
            extra=log_fields,
        )
        return run

    @abstractmethod
    def _execute(self, run: RunMetadata, **kwargs) -> int:
        """Stage-specific implementation.

        Args:
            run: The in-progress ``RunMetadata`` record (mutable).
            **kwargs: Stage-specific parameters.

        Returns:
            Integer count of records produced.
        """
        ...
