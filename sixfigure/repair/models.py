"""Data models for the salary repair pipeline.

This module defines:
- RepairPolicy: thresholds and switches for one repair run
- SalaryRecord: the salary-relevant columns of one stored job
- SalaryRepairStore: storage interface the pipeline runs against
- RepairAction / RepairReport: per-row outcome and run summary
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator, model_validator

from ..salary.tables import ANNUAL_SALARY_CEILING, ANNUAL_SALARY_FLOOR
from ..utils.timestamps import format_timestamp


class RepairPolicy(BaseModel):
    """Configuration for one repair run.

    Attributes:
        name: Policy name used on the command line (repair --policy NAME)
        min_threshold: Annual values below this are treated as corrupt
        max_threshold: Annual values above this are treated as corrupt
        source_filter: Only repair jobs from this ATS provider (None = all)
        rescale_cents: Divide values above max_threshold by 100 when that
            lands them inside the band (cents stored as whole units)
        redetect_currency: Re-run currency detection over salary_raw and
            re-derive annual values when the detected currency differs
        limit: Maximum number of rows to process (None = no limit)
    """

    name: str = Field("default", min_length=1)
    min_threshold: int = Field(ANNUAL_SALARY_FLOOR, gt=0)
    max_threshold: int = Field(ANNUAL_SALARY_CEILING, gt=0)
    source_filter: Optional[str] = None
    rescale_cents: bool = True
    redetect_currency: bool = True
    limit: Optional[int] = Field(None, gt=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Policy name cannot be empty")
        return stripped

    @field_validator("source_filter")
    @classmethod
    def lower_source(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().lower()

    @model_validator(mode="after")
    def check_thresholds(self):
        if self.min_threshold >= self.max_threshold:
            raise ValueError(
                f"min_threshold ({self.min_threshold}) must be below max_threshold ({self.max_threshold})"
            )
        return self

    def in_band(self, value: Optional[float]) -> bool:
        return value is not None and self.min_threshold <= value <= self.max_threshold


@dataclass(frozen=True)
class SalaryRecord:
    """Salary columns of one stored job, as read by the repair pipeline."""

    job_key: str
    source_type: Optional[str] = None
    title: Optional[str] = None
    country_code: Optional[str] = None
    salary_raw: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    salary_period: Optional[str] = None
    min_annual: Optional[int] = None
    max_annual: Optional[int] = None
    currency: Optional[str] = None
    is_high_salary: bool = False
    is_hundred_k_local: bool = False
    salary_band: Optional[str] = None
    salary_source: Optional[str] = None
    salary_validated: bool = False


def needs_repair(record: SalaryRecord, policy: RepairPolicy) -> bool:
    """Whether a record is a repair candidate under a policy.

    Candidates have an annual value outside the policy band, raw salary data
    but no annual values, a missing currency that could be filled in, or
    (with redetect_currency) salary text to re-check.
    """
    if policy.source_filter and (record.source_type or "").lower() != policy.source_filter:
        return False

    annual = (record.min_annual, record.max_annual)
    if any(value is not None and not policy.in_band(value) for value in annual):
        return True

    has_raw = record.salary_min is not None or record.salary_max is not None or bool(record.salary_raw)
    if all(value is None for value in annual) and has_raw:
        return True

    if record.currency is None and (record.salary_currency or record.salary_raw):
        return True

    return policy.redetect_currency and bool(record.salary_raw)


@runtime_checkable
class SalaryRepairStore(Protocol):
    """Storage the repair pipeline reads from and writes to."""

    def find_jobs_needing_repair(self, policy: RepairPolicy) -> Iterable[SalaryRecord]:
        ...

    def update_job_salary(self, job_key: str, fields: Dict[str, Any]) -> None:
        ...


@dataclass
class RepairAction:
    """Changes computed for one job (empty changes = already consistent)."""

    job_key: str
    changes: Dict[str, Any] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


@dataclass
class RepairReport:
    """Summary of one repair run."""

    policy: str
    dry_run: bool
    started_at: datetime
    finished_at: Optional[datetime] = None
    scanned: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0
    actions: List[RepairAction] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def summary(self) -> Dict[str, Any]:
        return {
            "policy": self.policy,
            "dry_run": self.dry_run,
            "scanned": self.scanned,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "failed": self.failed,
            "started_at": format_timestamp(self.started_at),
            "finished_at": format_timestamp(self.finished_at),
            "duration_seconds": round(self.duration_seconds, 3),
        }
