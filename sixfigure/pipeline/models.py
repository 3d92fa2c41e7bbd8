"""Data models for ingest run tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class SourceRunStats:
    """
    Statistics for one source within an ingest run.

    Attributes:
        source_id: Source identifier (board token / company handle)
        fetched_count: Jobs returned by the adapter
        normalized_count: Jobs normalized successfully
        upserted_count: Jobs inserted or rewritten
        unchanged_count: Jobs whose only change was last_seen_at
        with_salary_count: Jobs that ended up with an annual salary
        high_salary_count: Jobs flagged high-salary and validated
        error_count: Errors encountered (fetch or per-job)
        duration_seconds: Time spent on this source
        had_errors: Whether the source fetch failed
        error_message: Error message if the source fetch failed
    """

    source_id: str
    fetched_count: int = 0
    normalized_count: int = 0
    upserted_count: int = 0
    unchanged_count: int = 0
    with_salary_count: int = 0
    high_salary_count: int = 0
    error_count: int = 0
    duration_seconds: float = 0.0
    had_errors: bool = False
    error_message: Optional[str] = None


@dataclass
class IngestRunResult:
    """Aggregate results of one ingest run; totals are summed from source_stats."""

    run_started_at: datetime
    run_finished_at: datetime
    source_stats: List[SourceRunStats] = field(default_factory=list)
    skipped: bool = False

    @property
    def total_duration_seconds(self) -> float:
        return (self.run_finished_at - self.run_started_at).total_seconds()

    @property
    def total_fetched(self) -> int:
        return sum(s.fetched_count for s in self.source_stats)

    @property
    def total_normalized(self) -> int:
        return sum(s.normalized_count for s in self.source_stats)

    @property
    def total_upserted(self) -> int:
        return sum(s.upserted_count for s in self.source_stats)

    @property
    def total_with_salary(self) -> int:
        return sum(s.with_salary_count for s in self.source_stats)

    @property
    def total_high_salary(self) -> int:
        return sum(s.high_salary_count for s in self.source_stats)

    @property
    def total_errors(self) -> int:
        return sum(s.error_count for s in self.source_stats)

    @property
    def had_errors(self) -> bool:
        return any(s.had_errors or s.error_count for s in self.source_stats)
