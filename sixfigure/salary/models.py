"""Data models for salary normalization and classification.

This module defines:
- SalaryInput: raw, partially-populated compensation data for one job
- AnnualSalary: a resolved annual range in the job's native currency
- SalaryBand: one tier of a per-country band table
- SalaryClassification: high-salary flags computed for a resolved range
- ParsedSalary: structured result of parsing free salary text
- SalaryValidation: outcome of the high-salary eligibility gate
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SalaryPeriod = Literal["year", "month", "week", "day", "hour"]
BandId = Literal["100-199", "200-299", "300-399", "400-500"]
SalarySource = Literal["ats", "salaryRaw", "descriptionText", "none"]


def coerce_amount(value: Any) -> Optional[float]:
    """Coerce a loosely typed amount to a positive finite number.

    Accepts ints, floats, and numeric strings (commas allowed). Anything else,
    including zero, negatives, NaN and infinity, becomes None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None

    if not math.isfinite(number) or number <= 0:
        return None

    return number


def coerce_code(value: Any) -> Optional[str]:
    """Strip and upper-case a currency or country code; blank becomes None."""
    if value is None or not isinstance(value, str):
        return None
    stripped = value.strip().upper()
    return stripped or None


class SalaryInput(BaseModel):
    """Raw compensation data for a single job posting.

    Every field is optional. Values may come from an ATS feed, a scraped
    salary string, or a previously persisted record. Construction never fails
    on malformed values: unusable amounts and codes are coerced to None so
    that downstream code only has to deal with "present" or "absent".

    Both snake_case and the camelCase names used by the job store
    (salaryMin, minAnnual, countryCode, ...) are accepted.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    salary_min: Optional[float] = Field(None, alias="salaryMin")
    salary_max: Optional[float] = Field(None, alias="salaryMax")
    min_annual: Optional[float] = Field(None, alias="minAnnual")
    max_annual: Optional[float] = Field(None, alias="maxAnnual")
    currency: Optional[str] = None
    country_code: Optional[str] = Field(None, alias="countryCode")
    salary_period: Optional[str] = Field(None, alias="salaryPeriod")
    salary_raw: Optional[str] = Field(None, alias="salaryRaw")

    @model_validator(mode="before")
    @classmethod
    def accept_any_mapping(cls, data: Any) -> Any:
        """Treat non-mapping input as an empty record instead of failing."""
        if isinstance(data, dict):
            return data
        if isinstance(data, BaseModel):
            return data.model_dump()
        return {}

    @field_validator("salary_min", "salary_max", "min_annual", "max_annual", mode="before")
    @classmethod
    def clean_amount(cls, v: Any) -> Optional[float]:
        return coerce_amount(v)

    @field_validator("currency", "country_code", mode="before")
    @classmethod
    def clean_code(cls, v: Any) -> Optional[str]:
        return coerce_code(v)

    @field_validator("salary_period", "salary_raw", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        if v is None or not isinstance(v, str):
            return None
        stripped = v.strip()
        return stripped or None

    @property
    def has_annual(self) -> bool:
        """Whether authoritative annual figures are present."""
        return self.min_annual is not None or self.max_annual is not None

    @property
    def has_raw_amounts(self) -> bool:
        """Whether un-annualized salaryMin/salaryMax figures are present."""
        return self.salary_min is not None or self.salary_max is not None


@dataclass(frozen=True)
class AnnualSalary:
    """A salary range resolved to annual figures in native currency.

    Attributes:
        min_annual: Lower bound (None when only an upper bound is known)
        max_annual: Upper bound (None when only a lower bound is known)
        currency: Currency code the figures are expressed in, if known
        period: Period the figures were annualized from (None if unknown)
        origin: "annual" when taken from authoritative fields, "derived"
            when computed from raw amounts and a period multiplier
    """

    min_annual: Optional[int]
    max_annual: Optional[int]
    currency: Optional[str] = None
    period: Optional[SalaryPeriod] = None
    origin: Literal["annual", "derived"] = "annual"

    @property
    def is_empty(self) -> bool:
        return self.min_annual is None and self.max_annual is None

    @property
    def representative(self) -> Optional[int]:
        """Upper bound if known, otherwise lower bound."""
        return self.max_annual if self.max_annual is not None else self.min_annual


class SalaryBand(BaseModel):
    """One tier of a salary band table, in local currency.

    Both bounds are inclusive; a None upper bound means "no upper bound".
    """

    model_config = ConfigDict(frozen=True)

    id: BandId
    label: str
    min: int = Field(..., gt=0)
    max: Optional[int] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.max is not None and self.max < self.min:
            raise ValueError(f"Band {self.id}: max ({self.max}) is below min ({self.min})")
        return self

    def contains(self, amount: float) -> bool:
        if amount < self.min:
            return False
        return self.max is None or amount <= self.max


@dataclass(frozen=True)
class SalaryClassification:
    """High-salary facts recorded on a job.

    The two flags answer different questions and are allowed to disagree:
    is_hundred_k_local asks "is this well paid locally" using the country's
    band table, is_high_salary asks "is this at least $100k in USD terms".
    """

    is_high_salary: bool = False
    is_hundred_k_local: bool = False
    band_id: Optional[BandId] = None
    tier: Optional[str] = None


@dataclass(frozen=True)
class ParsedSalary:
    """Structured salary extracted from free text."""

    min: Optional[float]
    max: Optional[float]
    currency: Optional[str]
    period: SalaryPeriod
    raw: str


@dataclass(frozen=True)
class SalaryValidation:
    """Result of the high-salary eligibility gate."""

    validated: bool
    confidence: int
    source: SalarySource
    reason: str
    normalized_at: datetime
    rejected_reason: Optional[str] = None
