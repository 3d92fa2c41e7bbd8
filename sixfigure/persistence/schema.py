"""Database schema definition and ORM models.

Timestamps are stored as ISO 8601 strings with a Z suffix, so they sort
lexically in chronological order. Annual salary columns are integers in the
job's native currency and are indexed for the salary listings.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, Column, Float, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from ..domain.models import Job, SourceStatus
from ..logging import get_logger
from ..repair.models import SalaryRecord

logger = get_logger(__name__, component="database")

Base = declarative_base()

# Job columns that hold salary data; update_job_salary() only writes these.
SALARY_COLUMNS = (
    "salary_raw",
    "salary_min",
    "salary_max",
    "salary_currency",
    "salary_period",
    "min_annual",
    "max_annual",
    "currency",
    "is_high_salary",
    "is_hundred_k_local",
    "salary_band",
    "salary_validated",
    "salary_confidence",
    "salary_source",
    "salary_parse_reason",
)


class JobModel(Base):
    """ORM model for the jobs table."""

    __tablename__ = "jobs"

    job_key = Column(String(64), primary_key=True, nullable=False)

    source_type = Column(String(50), nullable=False)
    source_identifier = Column(String(255), nullable=False)
    external_id = Column(String(255), nullable=False)

    title = Column(Text, nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    country_code = Column(String(2), nullable=True)
    description = Column(Text, nullable=False)
    url = Column(Text, nullable=False)

    posted_at = Column(String(50), nullable=True)
    updated_at = Column(String(50), nullable=True)
    first_seen_at = Column(String(50), nullable=False)
    last_seen_at = Column(String(50), nullable=False)

    content_hash = Column(String(64), nullable=False)

    # Raw salary as published
    salary_raw = Column(Text, nullable=True)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    salary_currency = Column(String(3), nullable=True)
    salary_period = Column(String(10), nullable=True)

    # Resolved annual salary (native currency)
    min_annual = Column(Integer, nullable=True)
    max_annual = Column(Integer, nullable=True)
    currency = Column(String(3), nullable=True)

    is_high_salary = Column(Boolean, nullable=False, default=False)
    is_hundred_k_local = Column(Boolean, nullable=False, default=False)
    salary_band = Column(String(20), nullable=True)
    salary_validated = Column(Boolean, nullable=False, default=False)
    salary_confidence = Column(Integer, nullable=True)
    salary_source = Column(String(32), nullable=True)
    salary_parse_reason = Column(String(128), nullable=True)

    __table_args__ = (
        Index("idx_jobs_source", "source_type", "source_identifier"),
        Index("idx_jobs_last_seen", "last_seen_at"),
        Index("idx_jobs_min_annual", "min_annual"),
        Index("idx_jobs_max_annual", "max_annual"),
        Index("idx_jobs_high_salary", "is_high_salary", "country_code"),
    )

    def to_domain(self) -> Job:
        return Job(
            job_key=self.job_key,
            source_type=self.source_type,
            source_identifier=self.source_identifier,
            external_id=self.external_id,
            title=self.title,
            company=self.company,
            location=self.location,
            country_code=self.country_code,
            description=self.description,
            url=self.url,
            posted_at=_parse_datetime(self.posted_at),
            updated_at=_parse_datetime(self.updated_at),
            first_seen_at=_parse_datetime(self.first_seen_at),
            last_seen_at=_parse_datetime(self.last_seen_at),
            content_hash=self.content_hash,
            **self.salary_values(),
        )

    def to_salary_record(self) -> SalaryRecord:
        return SalaryRecord(
            job_key=self.job_key,
            source_type=self.source_type,
            title=self.title,
            country_code=self.country_code,
            salary_raw=self.salary_raw,
            salary_min=self.salary_min,
            salary_max=self.salary_max,
            salary_currency=self.salary_currency,
            salary_period=self.salary_period,
            min_annual=self.min_annual,
            max_annual=self.max_annual,
            currency=self.currency,
            is_high_salary=bool(self.is_high_salary),
            is_hundred_k_local=bool(self.is_hundred_k_local),
            salary_band=self.salary_band,
            salary_source=self.salary_source,
            salary_validated=bool(self.salary_validated),
        )

    def salary_values(self) -> Dict[str, Any]:
        values = {name: getattr(self, name) for name in SALARY_COLUMNS}
        for flag in ("is_high_salary", "is_hundred_k_local", "salary_validated"):
            values[flag] = bool(values[flag])
        return values

    @classmethod
    def from_domain(cls, job: Job) -> "JobModel":
        model = cls(
            job_key=job.job_key,
            source_type=job.source_type,
            source_identifier=job.source_identifier,
            external_id=job.external_id,
        )
        model.apply(job)
        return model

    def apply(self, job: Job) -> None:
        """Copy every mutable field from a domain Job onto this row."""
        self.title = job.title
        self.company = job.company
        self.location = job.location
        self.country_code = job.country_code
        self.description = job.description
        self.url = job.url
        self.posted_at = _format_datetime(job.posted_at)
        self.updated_at = _format_datetime(job.updated_at)
        self.first_seen_at = _format_datetime(job.first_seen_at)
        self.last_seen_at = _format_datetime(job.last_seen_at)
        self.content_hash = job.content_hash
        for name in SALARY_COLUMNS:
            setattr(self, name, getattr(job, name))


class SourceStatusModel(Base):
    """ORM model for the sources table (source health)."""

    __tablename__ = "sources"

    source_identifier = Column(String(255), primary_key=True, nullable=False)

    name = Column(String(255), nullable=False)
    source_type = Column(String(50), nullable=False)

    last_success_at = Column(String(50), nullable=True)
    last_error_at = Column(String(50), nullable=True)
    error_message = Column(Text, nullable=True)

    def to_domain(self) -> SourceStatus:
        return SourceStatus(
            source_identifier=self.source_identifier,
            name=self.name,
            source_type=self.source_type,
            last_success_at=_parse_datetime(self.last_success_at),
            last_error_at=_parse_datetime(self.last_error_at),
            error_message=self.error_message,
        )

    @classmethod
    def from_domain(cls, source_status: SourceStatus) -> "SourceStatusModel":
        return cls(
            source_identifier=source_status.source_identifier,
            name=source_status.name,
            source_type=source_status.source_type,
            last_success_at=_format_datetime(source_status.last_success_at),
            last_error_at=_format_datetime(source_status.last_error_at),
            error_message=source_status.error_message,
        )


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """ISO 8601 with microseconds and a Z suffix, in UTC."""
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    if not dt_str:
        return None

    dt_str = dt_str.rstrip("Z")
    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    Base.metadata.create_all(engine, checkfirst=True)
    tables = inspect(engine).get_table_names()
    logger.info(
        f"Database schema ready. Tables: {', '.join(tables)}",
        extra={"event": "database.schema.ready", "tables": ",".join(tables)},
    )
