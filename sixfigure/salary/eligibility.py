"""Deterministic gate deciding whether a job may be listed as high-paying.

Checks run in a fixed order and the first failing check decides the
outcome. Every outcome carries a short machine-readable reason
(ok, below_threshold, unknown_currency, bad_range, ambiguous, too_high,
capped_description).
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils.timestamps import utc_now
from .classifier import classify_salary, estimate_usd_annual
from .models import AnnualSalary, SalarySource, SalaryValidation
from .tables import DEFAULT_TABLES, SalaryTables

SOURCE_CONFIDENCE = {
    "ats": 95,
    "salaryRaw": 90,
    "descriptionText": 80,
}

MIN_CONFIDENCE = 80
MAX_RANGE_RATIO = 3
DESCRIPTION_USD_CAP = 600_000

_BANNED_TITLE_PATTERNS = [
    re.compile(r"\b(intern|internship|co[-\s]?op)\b"),
    re.compile(r"\b(junior|jr)\b"),
    re.compile(r"\b(entry[-\s]?level|entry)\b"),
    re.compile(r"\b(apprentice|apprenticeship)\b"),
]


def confidence_for_source(source: str) -> int:
    return SOURCE_CONFIDENCE.get(source, 0)


def is_banned_title(title: Optional[str]) -> bool:
    """Intern, co-op, junior, entry-level and apprentice roles are never six-figure listings."""
    text = (title or "").lower().strip()
    if not text:
        return False
    return any(pattern.search(text) for pattern in _BANNED_TITLE_PATTERNS)


def validate_high_salary_eligibility(
    annual: Optional[AnnualSalary],
    currency: Optional[str],
    source: SalarySource,
    title: Optional[str] = None,
    currency_ambiguous: bool = False,
    now: Optional[datetime] = None,
    tables: Optional[SalaryTables] = None,
) -> SalaryValidation:
    """Run the eligibility checks for one job.

    Args:
        annual: Resolved annual range in local currency
        currency: Currency code of the range
        source: Where the salary came from (ats, salaryRaw, descriptionText)
        title: Job title, checked against the banned-title list
        currency_ambiguous: True when the currency could not be pinned down
        now: Timestamp recorded on the result (defaults to utc_now())
        tables: Lookup tables (defaults to the built-in ones)

    Returns:
        SalaryValidation; rejected_reason is set for every rejection
    """
    tables = tables or DEFAULT_TABLES
    stamp = now or utc_now()
    confidence = confidence_for_source(source)
    code = (currency or "").strip().upper() or None

    def reject(reason: str, detail: str) -> SalaryValidation:
        return SalaryValidation(
            validated=False,
            confidence=confidence,
            source=source,
            reason=reason,
            normalized_at=stamp,
            rejected_reason=detail,
        )

    if is_banned_title(title):
        return reject("below_threshold", "banned-title:intern-junior-entry")

    if currency_ambiguous:
        return reject("ambiguous", "ambiguous-currency")

    threshold = tables.high_salary_thresholds.get(code) if code else None
    if threshold is None:
        return reject("unknown_currency", "unknown-or-unsupported-currency")

    lo = annual.min_annual if annual else None
    hi = annual.max_annual if annual else None

    if lo is None and hi is None:
        return reject("bad_range", "missing-annual-salary")

    if lo is not None and hi is not None:
        if lo > hi:
            return reject("bad_range", "min-greater-than-max")
        if lo > 0 and hi / lo > MAX_RANGE_RATIO:
            return reject("bad_range", "range-ratio-too-wide")

    cap = tables.display_ceiling_for(code)
    if any(value is not None and value > cap for value in (lo, hi)):
        return reject("too_high", f"annual-salary-over-cap:{cap}")

    if source == "descriptionText":
        usd = estimate_usd_annual(hi if hi is not None else lo, code, tables)
        if usd is not None and usd > DESCRIPTION_USD_CAP:
            return reject("capped_description", f"description-salary-over-usd-cap:{DESCRIPTION_USD_CAP}")

    if confidence < MIN_CONFIDENCE:
        return reject("ambiguous", "confidence-below-80")

    if not any(value is not None and value >= threshold for value in (lo, hi)):
        return reject("below_threshold", f"below-threshold:{threshold}")

    return SalaryValidation(
        validated=True,
        confidence=confidence,
        source=source,
        reason="ok",
        normalized_at=stamp,
    )


def salary_flags(
    annual: Optional[AnnualSalary],
    currency: Optional[str],
    country_code: Optional[str],
    source: Optional[str],
    title: Optional[str] = None,
    currency_ambiguous: bool = False,
    now: Optional[datetime] = None,
    tables: Optional[SalaryTables] = None,
) -> Dict[str, Any]:
    """Classification plus eligibility for an already-gated annual range.

    Returns the job fields is_high_salary, is_hundred_k_local, salary_band,
    salary_validated, salary_confidence and salary_parse_reason. Without a
    known salary source the eligibility checks are skipped and the job is
    reported as not validated.
    """
    tables = tables or DEFAULT_TABLES
    classification = classify_salary(annual, currency, country_code, tables)
    fields: Dict[str, Any] = {
        "is_high_salary": classification.is_high_salary,
        "is_hundred_k_local": classification.is_hundred_k_local,
        "salary_band": classification.band_id,
        "salary_validated": False,
        "salary_confidence": None,
        "salary_parse_reason": None,
    }

    if source:
        validation = validate_high_salary_eligibility(
            annual,
            currency,
            source,
            title=title,
            currency_ambiguous=currency_ambiguous,
            now=now,
            tables=tables,
        )
        fields.update(
            salary_validated=validation.validated,
            salary_confidence=validation.confidence,
            salary_parse_reason=validation.rejected_reason or validation.reason,
        )
    return fields
