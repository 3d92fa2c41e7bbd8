"""Core domain models for jobs and sources.

This module defines the data structures used throughout the application:
- RawJob: job posting as returned by an ATS adapter, with its raw salary payload
- Job: normalized job posting with resolved annual salary and high-salary flags
- SourceStatus: tracking source health and errors
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..utils.timestamps import ensure_utc

VALID_SOURCE_TYPES = {"greenhouse", "lever", "ashby"}


def _validate_source_type(v: str) -> str:
    if v.lower() not in VALID_SOURCE_TYPES:
        raise ValueError(f"source_type must be one of {sorted(VALID_SOURCE_TYPES)}, got: {v}")
    return v.lower()


class RawJob(BaseModel):
    """Raw job data from an ATS adapter before normalization.

    salary_payload holds the provider-specific compensation data (Lever's
    salaryRange, Ashby's compensation block, Greenhouse content HTML). It is
    handed untouched to the salary extractor registered for the provider.
    """

    external_id: str = Field(..., description="Job ID from the ATS")
    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    location: Optional[str] = Field(None, description="Job location")
    country_code: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 country code, if known")
    description: str = Field(..., description="Full job description text")
    url: str = Field(..., description="Direct link to the job posting")
    posted_at: Optional[datetime] = Field(None, description="When job was posted (UTC)")
    updated_at: Optional[datetime] = Field(None, description="When job was last updated (UTC)")
    salary_raw: Optional[str] = Field(None, description="Free-text salary string, if the ATS exposes one")
    salary_payload: Dict[str, Any] = Field(default_factory=dict, description="Provider compensation data")

    @field_validator("external_id", "title", "company", "description", "url")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from required string fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("location", "salary_raw")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    @field_validator("country_code")
    @classmethod
    def upper_country(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().upper()

    @field_validator("posted_at", "updated_at")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    model_config = {"json_schema_extra": {"example": {
        "external_id": "12345",
        "title": "Staff Software Engineer",
        "company": "Example Corp",
        "location": "London, UK",
        "country_code": "GB",
        "description": "We are looking for a staff engineer...",
        "url": "https://boards.greenhouse.io/examplecorp/jobs/12345",
        "posted_at": "2025-11-01T12:00:00Z",
        "salary_raw": "£120,000 - £150,000 per year",
        "salary_payload": {},
    }}}


class Job(BaseModel):
    """Normalized job posting with resolved salary data.

    Raw salary fields (salary_min, salary_max, salary_currency,
    salary_period, salary_raw) keep what the source said. Resolved fields
    (min_annual, max_annual, currency) hold annual figures in the job's
    native currency and are either inside [50_000, 5_000_000] or None.
    """

    job_key: str = Field(..., description="Unique job identifier (hash of source + external_id)")
    source_type: str = Field(..., description="ATS type (greenhouse, lever, ashby)")
    source_identifier: str = Field(..., description="Company identifier in the ATS")
    external_id: str = Field(..., description="Job ID from the ATS")
    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name")
    location: Optional[str] = Field(None, description="Job location")
    country_code: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 country code")
    description: str = Field(..., description="Full job description text")
    url: str = Field(..., description="Direct link to the job posting")
    posted_at: Optional[datetime] = Field(None, description="When job was posted (UTC)")
    updated_at: Optional[datetime] = Field(None, description="When job was last updated (UTC)")
    first_seen_at: datetime = Field(..., description="When we first saw this job (UTC)")
    last_seen_at: datetime = Field(..., description="When we last saw this job (UTC)")
    content_hash: str = Field(..., description="Hash of title + description + location")

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

    @field_validator("source_type")
    @classmethod
    def validate_source_type(cls, v: str) -> str:
        return _validate_source_type(v)

    @field_validator("posted_at", "updated_at", "first_seen_at", "last_seen_at")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def salary_fields(self) -> Dict[str, Any]:
        """Raw and resolved salary values keyed the way the salary core accepts them."""
        return {
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
            "min_annual": self.min_annual,
            "max_annual": self.max_annual,
            "currency": self.currency or self.salary_currency,
            "country_code": self.country_code,
            "salary_period": self.salary_period,
            "salary_raw": self.salary_raw,
        }


class SourceStatus(BaseModel):
    """Health and status tracking for a job source."""

    source_identifier: str = Field(..., description="Company identifier in the ATS")
    name: str = Field(..., description="Human-readable source name")
    source_type: str = Field(..., description="ATS type (greenhouse, lever, ashby)")
    last_success_at: Optional[datetime] = Field(None, description="Last successful fetch (UTC)")
    last_error_at: Optional[datetime] = Field(None, description="Last error timestamp (UTC)")
    error_message: Optional[str] = Field(None, description="Most recent error message")

    @field_validator("source_type")
    @classmethod
    def validate_source_type(cls, v: str) -> str:
        return _validate_source_type(v)

    @field_validator("last_success_at", "last_error_at")
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)
