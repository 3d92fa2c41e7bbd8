"""Configuration schema models using Pydantic."""

import re
from enum import Enum
from typing import Dict, List, Optional, Pattern

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from ..repair.models import RepairPolicy
from ..salary.models import SalaryBand
from ..salary.parser import DEFAULT_CURRENCY_PATTERNS, CurrencyPattern
from ..salary.tables import (
    ANNUAL_SALARY_CEILING,
    ANNUAL_SALARY_FLOOR,
    DEFAULT_DISPLAY_CEILING,
    SalaryTables,
)


class ATSType(str, Enum):
    """Supported ATS (Applicant Tracking System) types."""

    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    ASHBY = "ashby"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _upper_keys(values: Dict[str, object]) -> Dict[str, object]:
    normalized = {}
    for key, value in values.items():
        stripped = str(key).strip().upper()
        if not stripped:
            raise ValueError("Country and currency codes cannot be empty")
        normalized[stripped] = value
    return normalized


class SourceConfig(BaseModel):
    """Configuration for a single job board."""

    name: str = Field(..., min_length=1, description="Human-readable name for the source")
    type: ATSType = Field(..., description="ATS type (greenhouse, lever, ashby)")
    identifier: str = Field(
        ..., min_length=1, description="Company identifier used in API endpoint"
    )
    enabled: bool = Field(True, description="Whether to ingest this source")
    country_code: Optional[str] = Field(
        None,
        description="Default ISO country code for postings whose location names no country",
    )

    @field_validator("name", "identifier")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("country_code")
    @classmethod
    def normalize_country(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        code = v.strip().upper()
        if len(code) != 2 or not code.isalpha():
            raise ValueError(f"country_code must be a two-letter ISO code, got '{v}'")
        return code

    model_config = {"use_enum_values": True}


class SalaryConfig(BaseModel):
    """Overrides for the built-in salary tables.

    Every mapping is merged over the defaults, so a config only lists the
    countries or currencies it adds or changes.
    """

    validity_floor: int = Field(ANNUAL_SALARY_FLOOR, gt=0, description="Lowest plausible annual value")
    validity_ceiling: int = Field(ANNUAL_SALARY_CEILING, gt=0, description="Highest plausible annual value")
    display_ceiling: int = Field(
        DEFAULT_DISPLAY_CEILING, gt=0, description="Above this, display text becomes 'High salary role'"
    )
    display_ceilings: Dict[str, int] = Field(default_factory=dict, description="Per-currency display ceilings")
    market_floors: Dict[str, int] = Field(default_factory=dict, description="Per-currency display floors")
    country_currency: Dict[str, str] = Field(default_factory=dict, description="Country code to currency")
    country_bands: Dict[str, List[SalaryBand]] = Field(
        default_factory=dict, description="Country code to band table"
    )
    local_thresholds: Dict[str, int] = Field(
        default_factory=dict, description="Country code to local high-salary threshold"
    )

    @field_validator("display_ceilings", "market_floors", "country_bands", "local_thresholds")
    @classmethod
    def normalize_keys(cls, v: Dict) -> Dict:
        return _upper_keys(v)

    @field_validator("country_currency")
    @classmethod
    def normalize_currency_map(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {key: str(value).strip().upper() for key, value in _upper_keys(v).items()}

    @field_validator("country_bands")
    @classmethod
    def check_band_order(cls, v: Dict[str, List[SalaryBand]]) -> Dict[str, List[SalaryBand]]:
        for country, bands in v.items():
            if not bands:
                raise ValueError(f"Band table for {country} is empty")
            mins = [band.min for band in bands]
            if mins != sorted(mins):
                raise ValueError(f"Bands for {country} must be listed in ascending order of min")
        return v

    @model_validator(mode="after")
    def check_validity_band(self):
        if self.validity_floor >= self.validity_ceiling:
            raise ValueError(
                f"validity_floor ({self.validity_floor}) must be below validity_ceiling ({self.validity_ceiling})"
            )
        return self

    def build_tables(self, base: Optional[SalaryTables] = None) -> SalaryTables:
        """Merge these overrides over the built-in tables."""
        return (base or SalaryTables.default()).with_overrides(
            country_bands=self.country_bands,
            country_currency=self.country_currency,
            local_thresholds=self.local_thresholds,
            market_floors=self.market_floors,
            display_ceilings=self.display_ceilings,
            validity_floor=self.validity_floor,
            validity_ceiling=self.validity_ceiling,
            display_ceiling=self.display_ceiling,
        )


class CurrencyPatternConfig(BaseModel):
    """A regex that marks text as being in a given currency."""

    pattern: str = Field(..., min_length=1)
    currency: str = Field(..., min_length=3, max_length=3)

    _compiled: Optional[Pattern[str]] = PrivateAttr(default=None)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def compile_pattern(self):
        try:
            self._compiled = re.compile(self.pattern, re.IGNORECASE)
        except re.error as e:
            raise ValueError(f"Invalid currency pattern '{self.pattern}': {e}") from e
        return self

    def compiled(self) -> CurrencyPattern:
        return CurrencyPattern(pattern=self._compiled, currency=self.currency)


class RepairConfig(BaseModel):
    """Named repair policies and extra currency-detection patterns."""

    policies: List[RepairPolicy] = Field(
        default_factory=lambda: [RepairPolicy()],
        description="Repair policies selectable with repair --policy NAME",
    )
    currency_patterns: List[CurrencyPatternConfig] = Field(
        default_factory=list,
        description="Patterns checked before the built-in ones when re-detecting currency",
    )

    @model_validator(mode="after")
    def check_policy_names(self):
        seen = set()
        for policy in self.policies:
            if policy.name in seen:
                raise ValueError(f"Duplicate repair policy: {policy.name}")
            seen.add(policy.name)
        return self

    def get_policy(self, name: str) -> Optional[RepairPolicy]:
        for policy in self.policies:
            if policy.name == name:
                return policy
        if name == "default":
            return RepairPolicy()
        return None

    def patterns(self) -> List[CurrencyPattern]:
        """Configured patterns followed by the built-in table."""
        return [p.compiled() for p in self.currency_patterns] + list(DEFAULT_CURRENCY_PATTERNS)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for ATS API calls (seconds)"
    )
    user_agent: str = Field(
        "SixFigureJobs/1.0 (+job-board-scraper)",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )
    max_jobs_per_source: int = Field(
        1000, ge=0, description="Maximum jobs to process per source (0 = unlimited)"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for Six Figure Jobs."""

    sources: List[SourceConfig] = Field(
        default_factory=list, description="Job boards to ingest"
    )
    salary: SalaryConfig = Field(default_factory=SalaryConfig, description="Salary table overrides")
    repair: RepairConfig = Field(default_factory=RepairConfig, description="Repair policies")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )

    @model_validator(mode="after")
    def validate_sources(self):
        """Reject duplicate sources (same type + identifier)."""
        seen_sources = set()
        for source in self.sources:
            source_key = (source.type, source.identifier)
            if source_key in seen_sources:
                raise ValueError(
                    f"Duplicate source: {source.type}/{source.identifier} appears multiple times"
                )
            seen_sources.add(source_key)
        return self

    def get_enabled_sources(self) -> List[SourceConfig]:
        """Get list of enabled sources."""
        return [source for source in self.sources if source.enabled]

    def get_source_by_identifier(self, identifier: str) -> Optional[SourceConfig]:
        """Get a source by its identifier."""
        for source in self.sources:
            if source.identifier == identifier:
                return source
        return None
