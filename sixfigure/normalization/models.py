"""Data models for the normalization layer."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..domain.models import Job, RawJob


@dataclass(frozen=True)
class SalaryResolution:
    """Salary fields computed for one job, named as on Job.

    Raw fields echo what the extractor found; resolved fields have been
    annualized and passed through the validity gate.
    """

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
    salary_validated: bool = False
    salary_confidence: Optional[int] = None
    salary_source: Optional[str] = None
    salary_parse_reason: Optional[str] = None

    def as_job_fields(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def has_annual(self) -> bool:
        return self.min_annual is not None or self.max_annual is not None


@dataclass
class NormalizationResult:
    """Output of normalizing one RawJob.

    Attributes:
        job: The normalized Job (salary fields filled in)
        existing_job: Previously stored version, if any
        is_new: True if the job was not stored before
        content_changed: True if new or the content hash differs
        salary: Salary fields that were written onto job
        raw_job: The adapter output this came from
    """

    job: Job
    existing_job: Optional[Job]
    is_new: bool
    content_changed: bool
    salary: SalaryResolution
    raw_job: RawJob

    @property
    def salary_changed(self) -> bool:
        if self.existing_job is None:
            return True
        return any(
            getattr(self.existing_job, name) != value for name, value in self.salary.as_job_fields().items()
        )

    @property
    def should_upsert(self) -> bool:
        """False when only last_seen_at needs to move."""
        return self.content_changed or self.salary_changed
