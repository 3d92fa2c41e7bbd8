"""Salary normalization and classification core.

This package provides:
- resolve_annual_salary / apply_validity_gate: annual figures in native currency
- classify_salary: local ($100k-equivalent) and global (USD) high-salary flags
- build_salary_text: short display string for a job's salary
- parse_salary_from_text / detect_currency: free-text salary parsing
- validate_high_salary_eligibility: gate for listing a job as high-paying
- SalaryTables: injectable lookup tables (bands, currencies, thresholds)
"""

from .classifier import (
    CurrencyLocationCheck,
    band_for_amount,
    check_currency_location_mismatch,
    classify_salary,
    currency_for_country,
    estimate_usd_annual,
    get_bands_for_country,
    resolve_band_range,
    salary_tier,
)
from .eligibility import is_banned_title, salary_flags, validate_high_salary_eligibility
from .formatter import build_salary_text, format_band_label, get_currency_symbol
from .models import (
    AnnualSalary,
    ParsedSalary,
    SalaryBand,
    SalaryClassification,
    SalaryInput,
    SalaryValidation,
)
from .parser import CurrencyPattern, DEFAULT_CURRENCY_PATTERNS, detect_currency, parse_salary_from_text
from .resolver import (
    annualize,
    apply_validity_gate,
    is_within_validity_band,
    normalize_period,
    resolve_annual_salary,
    resolve_valid_annual_salary,
)
from .tables import ANNUAL_SALARY_CEILING, ANNUAL_SALARY_FLOOR, DEFAULT_TABLES, SalaryTables

__all__ = [
    # Models
    "SalaryInput",
    "AnnualSalary",
    "SalaryBand",
    "SalaryClassification",
    "ParsedSalary",
    "SalaryValidation",
    "CurrencyLocationCheck",
    "CurrencyPattern",
    # Tables
    "SalaryTables",
    "DEFAULT_TABLES",
    "ANNUAL_SALARY_FLOOR",
    "ANNUAL_SALARY_CEILING",
    # Resolver
    "normalize_period",
    "annualize",
    "resolve_annual_salary",
    "apply_validity_gate",
    "resolve_valid_annual_salary",
    "is_within_validity_band",
    # Classifier
    "get_bands_for_country",
    "resolve_band_range",
    "band_for_amount",
    "classify_salary",
    "currency_for_country",
    "estimate_usd_annual",
    "check_currency_location_mismatch",
    "salary_tier",
    # Formatter
    "build_salary_text",
    "format_band_label",
    "get_currency_symbol",
    # Parser
    "DEFAULT_CURRENCY_PATTERNS",
    "detect_currency",
    "parse_salary_from_text",
    # Eligibility
    "is_banned_title",
    "validate_high_salary_eligibility",
    "salary_flags",
]
