"""Ingest pipeline: fetch postings, resolve salaries, store jobs."""

import threading
import time
from datetime import datetime
from typing import Callable, List, Optional
from uuid import uuid4

from ..adapters.base import BaseAdapter
from ..adapters.exceptions import AdapterError
from ..adapters.factory import get_adapter
from ..config.models import AdvancedConfig, AppConfig, SourceConfig
from ..logging import get_logger, log_context
from ..normalization.service import JobNormalizer
from ..persistence.database import get_session
from ..persistence.repositories import JobRepository, SourceRepository
from ..salary import SalaryTables
from ..utils.timestamps import utc_now
from .models import IngestRunResult, SourceRunStats

logger = get_logger(__name__, component="pipeline")

AdapterFactory = Callable[[SourceConfig, AdvancedConfig], BaseAdapter]


class IngestPipeline:
    """
    Runs one ingest pass over all enabled sources.

    For each source: adapter fetch, then per job extraction, normalization
    (resolve, gate, classify, validate) and upsert, then the source status
    update. Each source gets its own session, so a failing source never
    rolls back another one.
    """

    def __init__(
        self,
        app_config: AppConfig,
        tables: Optional[SalaryTables] = None,
        adapter_factory: AdapterFactory = get_adapter,
    ):
        self.app_config = app_config
        self.tables = tables or app_config.salary.build_tables()
        self.adapter_factory = adapter_factory
        self._lock = threading.Lock()

    def run_once(self) -> IngestRunResult:
        """
        Ingest every enabled source once.

        Source-level failures are captured in the result, never raised. A call
        made while another run is in progress returns a skipped result.
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Ingest run skipped: previous run still in progress",
                    extra={"event": "ingest.run.skipped", "reason": "lock_held"},
                )
            return IngestRunResult(run_started_at=run_started_at, run_finished_at=utc_now(), skipped=True)

        try:
            with log_context(run_id=run_id):
                enabled_sources = self.app_config.get_enabled_sources()
                logger.info(
                    f"Ingest run started with {len(enabled_sources)} sources",
                    extra={
                        "event": "ingest.run.started",
                        "enabled_source_count": len(enabled_sources),
                        "disabled_source_count": len(self.app_config.sources) - len(enabled_sources),
                    },
                )

                source_stats: List[SourceRunStats] = [
                    self._process_source(source_config, run_started_at) for source_config in enabled_sources
                ]

                result = IngestRunResult(
                    run_started_at=run_started_at,
                    run_finished_at=utc_now(),
                    source_stats=source_stats,
                )
                logger.info(
                    "Ingest run completed",
                    extra={
                        "event": "ingest.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "total_fetched": result.total_fetched,
                        "total_upserted": result.total_upserted,
                        "total_with_salary": result.total_with_salary,
                        "total_high_salary": result.total_high_salary,
                        "total_errors": result.total_errors,
                    },
                )
                return result
        finally:
            self._lock.release()

    def _process_source(self, source_config: SourceConfig, scan_timestamp: datetime) -> SourceRunStats:
        source_start = time.monotonic()
        stats = SourceRunStats(source_id=source_config.identifier)

        with log_context(source_id=source_config.identifier, ats_type=source_config.type):
            try:
                adapter = self.adapter_factory(source_config, self.app_config.advanced)
                raw_jobs = adapter.fetch_jobs(source_config)
                stats.fetched_count = len(raw_jobs)
            except AdapterError as e:
                stats.had_errors = True
                stats.error_count += 1
                stats.error_message = str(e)
                logger.error(
                    f"Adapter error for {source_config.name}: {e}",
                    extra={"event": "ingest.source.failed", "error_type": type(e).__name__},
                )
                self._record_source_error(source_config, scan_timestamp, str(e))
                stats.duration_seconds = time.monotonic() - source_start
                return stats

            try:
                with get_session() as session:
                    job_repo = JobRepository(session)
                    normalizer = JobNormalizer(job_repo, tables=self.tables, scan_timestamp=scan_timestamp)

                    for raw_job in raw_jobs:
                        try:
                            result = normalizer.normalize(raw_job, source_config)
                            stats.normalized_count += 1
                            if result.should_upsert:
                                job_repo.upsert(result.job)
                                stats.upserted_count += 1
                            else:
                                job_repo.update_last_seen(result.job.job_key, scan_timestamp)
                                stats.unchanged_count += 1
                        except Exception as e:
                            stats.error_count += 1
                            logger.error(
                                f"Error processing job {raw_job.external_id} from {source_config.name}: {e}",
                                extra={"event": "ingest.job.failed", "job_id": raw_job.external_id},
                                exc_info=True,
                            )
                            continue

                        if result.salary.has_annual:
                            stats.with_salary_count += 1
                        if result.job.is_high_salary and result.job.salary_validated:
                            stats.high_salary_count += 1

                    SourceRepository(session).update_success(
                        source_config.identifier, source_config.name, source_config.type, scan_timestamp
                    )
            except Exception as e:
                stats.had_errors = True
                stats.error_count += 1
                stats.error_message = str(e)
                logger.error(
                    f"Unexpected error processing {source_config.name}: {e}",
                    extra={"event": "ingest.source.failed", "error_type": type(e).__name__},
                    exc_info=True,
                )

            stats.duration_seconds = time.monotonic() - source_start
            logger.info(
                f"Source processed: {source_config.name}",
                extra={
                    "event": "ingest.source.completed",
                    "fetched": stats.fetched_count,
                    "upserted": stats.upserted_count,
                    "unchanged": stats.unchanged_count,
                    "with_salary": stats.with_salary_count,
                    "high_salary": stats.high_salary_count,
                    "errors": stats.error_count,
                },
            )
        return stats

    def _record_source_error(self, source_config: SourceConfig, timestamp: datetime, message: str) -> None:
        try:
            with get_session() as session:
                SourceRepository(session).update_error(
                    source_config.identifier, source_config.name, source_config.type, timestamp, message
                )
        except Exception as e:
            logger.error(
                f"Failed to record source error for {source_config.name}: {e}",
                extra={"event": "ingest.source.status_failed"},
            )
