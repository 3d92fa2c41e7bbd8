"""Data access layer (repositories) for persistence operations.

Repositories wrap a session and return domain models (or SalaryRecord rows
for the repair pipeline) rather than ORM models. JobRepository satisfies the
SalaryRepairStore protocol.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Mapping, Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain.models import Job, SourceStatus
from ..logging import get_logger
from ..repair.models import RepairPolicy, SalaryRecord
from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import SALARY_COLUMNS, JobModel, SourceStatusModel, _format_datetime

logger = get_logger(__name__, component="database")

JobSort = Literal["salary", "date"]


def _has_text(column):
    return and_(column.isnot(None), column != "")


def _out_of_band(floor: int, ceiling: int):
    return or_(
        JobModel.min_annual < floor,
        JobModel.min_annual > ceiling,
        JobModel.max_annual < floor,
        JobModel.max_annual > ceiling,
    )


class JobRepository:
    """Repository for job-related database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_key(self, job_key: str) -> Optional[Job]:
        """Retrieve job by primary key (None if absent).

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            job_model = self.session.get(JobModel, job_key)
            return job_model.to_domain() if job_model else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job by key {job_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job: {e}") from e

    def upsert(self, job: Job) -> Job:
        """Insert a new job or overwrite the stored one.

        Raises:
            DataIntegrityError: On constraint violations
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(JobModel, job.job_key)
            if existing:
                existing.apply(job)
                self.session.flush()
                return existing.to_domain()

            job_model = JobModel.from_domain(job)
            self.session.add(job_model)
            self.session.flush()
            return job_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting job {job.job_key}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to upsert job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting job {job.job_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert job: {e}") from e

    def update_last_seen(self, job_key: str, timestamp: datetime) -> None:
        """Update only last_seen_at.

        Raises:
            RecordNotFoundError: If job_key doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(JobModel)
                .where(JobModel.job_key == job_key)
                .values(last_seen_at=_format_datetime(timestamp))
            )
            result = self.session.execute(stmt)
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error updating last_seen for job {job_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update last_seen: {e}") from e

        if result.rowcount == 0:
            raise RecordNotFoundError(f"Job with key {job_key} not found")

    def find_jobs_needing_repair(self, policy: RepairPolicy) -> List[SalaryRecord]:
        """Rows the repair pipeline should look at under a policy.

        Mirrors repair.models.needs_repair(): annual values outside the policy
        band, raw salary data without annual values, a missing currency that
        could be filled, and (with redetect_currency) any row with salary text.
        """
        conditions = [
            _out_of_band(policy.min_threshold, policy.max_threshold),
            and_(
                JobModel.min_annual.is_(None),
                JobModel.max_annual.is_(None),
                or_(
                    JobModel.salary_min.isnot(None),
                    JobModel.salary_max.isnot(None),
                    _has_text(JobModel.salary_raw),
                ),
            ),
            and_(
                JobModel.currency.is_(None),
                or_(_has_text(JobModel.salary_currency), _has_text(JobModel.salary_raw)),
            ),
        ]
        if policy.redetect_currency:
            conditions.append(_has_text(JobModel.salary_raw))

        stmt = select(JobModel).where(or_(*conditions)).order_by(JobModel.job_key)
        if policy.source_filter:
            stmt = stmt.where(JobModel.source_type == policy.source_filter)
        if policy.limit:
            stmt = stmt.limit(policy.limit)

        try:
            return [row.to_salary_record() for row in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error selecting repair candidates: {e}", exc_info=True)
            raise PersistenceError(f"Failed to select repair candidates: {e}") from e

    def update_job_salary(self, job_key: str, fields: Mapping[str, Any]) -> None:
        """Write salary columns for one job.

        Raises:
            ValueError: If fields names a non-salary column
            RecordNotFoundError: If job_key doesn't exist
            PersistenceError: If database error occurs
        """
        unknown = set(fields) - set(SALARY_COLUMNS)
        if unknown:
            raise ValueError(f"Not salary columns: {', '.join(sorted(unknown))}")
        if not fields:
            return

        try:
            result = self.session.execute(
                update(JobModel).where(JobModel.job_key == job_key).values(**dict(fields))
            )
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error updating salary for job {job_key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update job salary: {e}") from e

        if result.rowcount == 0:
            raise RecordNotFoundError(f"Job with key {job_key} not found")

    def count_annual_out_of_band(self, floor: int, ceiling: int) -> int:
        """Number of jobs with an annual bound outside [floor, ceiling]."""
        try:
            stmt = select(func.count()).select_from(JobModel).where(_out_of_band(floor, ceiling))
            return int(self.session.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error counting out-of-band salaries: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count out-of-band salaries: {e}") from e

    def list_jobs(
        self,
        min_salary: Optional[int] = None,
        high_salary_only: bool = False,
        country_code: Optional[str] = None,
        sort: JobSort = "salary",
        limit: int = 50,
    ) -> List[Job]:
        """List jobs for display.

        Args:
            min_salary: Keep jobs whose min or max annual value reaches this
            high_salary_only: Keep only validated high-salary jobs
            country_code: Keep only jobs in this country
            sort: "salary" (highest first, unknown last) or "date" (newest first)
            limit: Maximum number of jobs

        Raises:
            ValueError: If sort is not "salary" or "date"
            PersistenceError: If database error occurs
        """
        if sort not in ("salary", "date"):
            raise ValueError(f"sort must be 'salary' or 'date', got: {sort}")

        stmt = select(JobModel)
        if min_salary is not None:
            stmt = stmt.where(or_(JobModel.min_annual >= min_salary, JobModel.max_annual >= min_salary))
        if high_salary_only:
            stmt = stmt.where(JobModel.is_high_salary.is_(True), JobModel.salary_validated.is_(True))
        if country_code:
            stmt = stmt.where(JobModel.country_code == country_code.upper())

        if sort == "salary":
            representative = func.coalesce(JobModel.max_annual, JobModel.min_annual)
            stmt = stmt.order_by(
                representative.is_(None),
                representative.desc(),
                JobModel.first_seen_at.desc(),
            )
        else:
            stmt = stmt.order_by(
                func.coalesce(JobModel.posted_at, JobModel.first_seen_at).desc(),
                JobModel.job_key,
            )

        try:
            return [row.to_domain() for row in self.session.execute(stmt.limit(limit)).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error listing jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list jobs: {e}") from e


class SourceRepository:
    """Repository for source status and health tracking operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_identifier(self, source_identifier: str) -> Optional[SourceStatus]:
        try:
            source_model = self.session.get(SourceStatusModel, source_identifier)
            return source_model.to_domain() if source_model else None
        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving source by identifier {source_identifier}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to retrieve source: {e}") from e

    def get_all(self) -> List[SourceStatus]:
        """All source status records, ordered by name."""
        try:
            stmt = select(SourceStatusModel).order_by(SourceStatusModel.name)
            return [row.to_domain() for row in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving all sources: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve sources: {e}") from e

    def upsert(self, source_status: SourceStatus) -> SourceStatus:
        try:
            existing = self.session.get(SourceStatusModel, source_status.source_identifier)
            if existing:
                existing.name = source_status.name
                existing.source_type = source_status.source_type
                existing.last_success_at = _format_datetime(source_status.last_success_at)
                existing.last_error_at = _format_datetime(source_status.last_error_at)
                existing.error_message = source_status.error_message
                self.session.flush()
                return existing.to_domain()

            source_model = SourceStatusModel.from_domain(source_status)
            self.session.add(source_model)
            self.session.flush()
            return source_model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error upserting source {source_status.source_identifier}: {e}",
                exc_info=True,
            )
            raise DataIntegrityError(
                f"Failed to upsert source due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(
                f"Error upserting source {source_status.source_identifier}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to upsert source: {e}") from e

    def update_success(self, source_identifier: str, name: str, source_type: str, timestamp: datetime) -> None:
        """Record a successful fetch; clears the last error."""
        current = self.get_by_identifier(source_identifier)
        self.upsert(
            SourceStatus(
                source_identifier=source_identifier,
                name=name,
                source_type=source_type,
                last_success_at=timestamp,
                last_error_at=None,
                error_message=None,
            )
            if current is None
            else current.model_copy(
                update={"name": name, "last_success_at": timestamp, "last_error_at": None, "error_message": None}
            )
        )

    def update_error(
        self,
        source_identifier: str,
        name: str,
        source_type: str,
        timestamp: datetime,
        error_message: str,
    ) -> None:
        """Record a failed fetch; last_success_at is kept."""
        current = self.get_by_identifier(source_identifier)
        self.upsert(
            SourceStatus(
                source_identifier=source_identifier,
                name=name,
                source_type=source_type,
                last_error_at=timestamp,
                error_message=error_message,
            )
            if current is None
            else current.model_copy(
                update={"name": name, "last_error_at": timestamp, "error_message": error_message}
            )
        )
