"""Job normalization service for converting RawJob to Job domain model.

This module implements the normalization logic that:
1. Computes deterministic job_key and content_hash
2. Tracks timestamps (first_seen_at, last_seen_at)
3. Runs the provider's salary extractor over the raw payload
4. Resolves annual figures, applies the validity gate and classifies them
5. Runs the high-salary eligibility checks
"""

import logging
import re
from datetime import datetime
from typing import Iterable, Optional

from ..config.models import SourceConfig
from ..domain.models import Job, RawJob
from ..extractors import ExtractedSalary, extract_salary
from ..logging import get_logger
from ..persistence.repositories import JobRepository
from ..salary import (
    SalaryTables,
    apply_validity_gate,
    resolve_annual_salary,
    salary_flags,
)
from ..salary.tables import DEFAULT_TABLES
from ..utils.hashing import compute_content_hash, compute_job_key
from ..utils.timestamps import ensure_utc, utc_now
from .models import NormalizationResult, SalaryResolution

logger = get_logger(__name__, component="normalization")


class JobNormalizer:
    """Normalizes RawJob instances into Job models with resolved salaries.

    Responsibilities:
    - Compute deterministic job_key from source info + external_id
    - Compute content_hash for change detection
    - Handle timestamps (first_seen_at inherited, last_seen_at set to scan time)
    - Extract, resolve, gate, classify and validate the salary
    """

    def __init__(
        self,
        job_repo: JobRepository,
        tables: Optional[SalaryTables] = None,
        scan_timestamp: Optional[datetime] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize JobNormalizer.

        Args:
            job_repo: Repository used to look up previously stored jobs
            tables: Salary lookup tables (defaults to the built-in ones)
            scan_timestamp: Timestamp for this run (UTC). Defaults to utc_now()
            logger_instance: Logger instance (defaults to module logger)
        """
        self.job_repo = job_repo
        self.tables = tables or DEFAULT_TABLES
        self.scan_timestamp = ensure_utc(scan_timestamp or utc_now())
        self.logger = logger_instance or logger

    def normalize(self, raw_job: RawJob, source_config: SourceConfig) -> NormalizationResult:
        """Normalize a single RawJob into a Job.

        Raises:
            Any exceptions from the job_repo lookup are propagated
        """
        job_key = compute_job_key(source_config.type, source_config.identifier, raw_job.external_id)
        existing_job = self.job_repo.get_by_key(job_key)

        title = self._sanitize_text(raw_job.title)
        description = self._sanitize_text(raw_job.description)
        location = self._sanitize_text(raw_job.location) or None

        content_hash = compute_content_hash(title, description, location, raw_job.salary_raw)
        is_new = existing_job is None
        content_changed = is_new or content_hash != existing_job.content_hash

        salary = self.resolve_salary(raw_job, source_config.type, job_key=job_key)

        job = Job(
            job_key=job_key,
            source_type=source_config.type,
            source_identifier=source_config.identifier,
            external_id=raw_job.external_id,
            title=title,
            company=raw_job.company,
            location=location,
            country_code=raw_job.country_code,
            description=description,
            url=raw_job.url,
            posted_at=raw_job.posted_at,
            updated_at=raw_job.updated_at,
            first_seen_at=existing_job.first_seen_at if existing_job else self.scan_timestamp,
            last_seen_at=self.scan_timestamp,
            content_hash=content_hash,
            **salary.as_job_fields(),
        )

        self.logger.info(
            "Normalized job",
            extra={
                "event": "normalization.job.normalized",
                "job_key": job_key,
                "company": job.company,
                "title": job.title,
                "is_new": is_new,
                "content_changed": content_changed,
                "min_annual": job.min_annual,
                "max_annual": job.max_annual,
                "currency": job.currency,
                "is_high_salary": job.is_high_salary,
            },
        )

        return NormalizationResult(
            job=job,
            existing_job=existing_job,
            is_new=is_new,
            content_changed=content_changed,
            salary=salary,
            raw_job=raw_job,
        )

    def resolve_salary(
        self,
        raw_job: RawJob,
        source_type: Optional[str],
        job_key: Optional[str] = None,
    ) -> SalaryResolution:
        """Run extraction and the salary core over one raw job."""
        payload = {
            **raw_job.salary_payload,
            "salary_raw": raw_job.salary_raw,
            "description": raw_job.description,
            "location": raw_job.location,
            "country_code": raw_job.country_code,
        }
        extracted = extract_salary(source_type, payload, self.logger)
        if extracted is None:
            self.logger.debug(
                "No salary found",
                extra={"event": "salary.job.missing", "job_key": job_key, "provider": source_type},
            )
            return SalaryResolution(salary_raw=raw_job.salary_raw)

        return self._resolve_extracted(extracted, raw_job, job_key)

    def _resolve_extracted(
        self,
        extracted: ExtractedSalary,
        raw_job: RawJob,
        job_key: Optional[str],
    ) -> SalaryResolution:
        country_code = raw_job.country_code
        currency = extracted.currency or self.tables.currency_for_country(country_code)

        annual = resolve_annual_salary(extracted.to_salary_input(country_code))
        gated = apply_validity_gate(annual, self.tables.validity_floor, self.tables.validity_ceiling)

        if annual is not None and gated != annual:
            self.logger.info(
                "Annual salary outside validity band",
                extra={
                    "event": "salary.job.out_of_band",
                    "job_key": job_key,
                    "min_annual": annual.min_annual,
                    "max_annual": annual.max_annual,
                    "currency": currency,
                    "source": extracted.source,
                },
            )

        flags = salary_flags(
            gated,
            currency,
            country_code,
            extracted.source,
            title=raw_job.title,
            currency_ambiguous=extracted.currency_ambiguous,
            now=self.scan_timestamp,
            tables=self.tables,
        )

        return SalaryResolution(
            salary_raw=raw_job.salary_raw or extracted.raw,
            salary_min=extracted.min,
            salary_max=extracted.max,
            salary_currency=extracted.currency,
            salary_period=extracted.period,
            min_annual=gated.min_annual if gated else None,
            max_annual=gated.max_annual if gated else None,
            currency=currency,
            salary_source=extracted.source,
            **flags,
        )

    def process_batch(
        self, job_configs: Iterable[tuple[RawJob, SourceConfig]]
    ) -> Iterable[NormalizationResult]:
        """Normalize (RawJob, SourceConfig) pairs, logging and skipping failures."""
        for raw_job, source_config in job_configs:
            try:
                yield self.normalize(raw_job, source_config)
            except Exception as e:
                self.logger.error(
                    f"Error normalizing job {raw_job.external_id} from {source_config.name}: {e}",
                    exc_info=True,
                    extra={"event": "normalization.job.failed", "source": source_config.identifier},
                )

    @staticmethod
    def _sanitize_text(text: Optional[str]) -> str:
        """Trim and collapse whitespace, keeping line breaks."""
        if not text:
            return ""
        lines = (re.sub(r"[ \t]+", " ", line).strip() for line in text.strip().splitlines())
        return "\n".join(line for line in lines if line)
