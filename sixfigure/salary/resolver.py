"""Annual salary resolution and the persisted-value validity gate.

Resolution order:
1. Authoritative annual figures (min_annual / max_annual) are trusted as-is.
2. Otherwise raw salary_min / salary_max are annualized by the period
   multiplier. A missing or unrecognized period is treated as already annual.
3. Otherwise there is no usable salary and None is returned.

The validity gate is a separate step that rejects any range with a value
outside [50_000, 5_000_000] in the stated currency. It is a corruption filter for
monthly figures stored as annual and cents stored as dollars, not a
range validator.

Nothing in this module raises for malformed input.
"""

import re
from typing import Any, Optional

from .models import AnnualSalary, SalaryInput, SalaryPeriod
from .tables import ANNUAL_SALARY_CEILING, ANNUAL_SALARY_FLOOR, PERIOD_MULTIPLIERS

_PERIOD_ALIASES = {
    "year": "year",
    "years": "year",
    "yearly": "year",
    "annual": "year",
    "annually": "year",
    "annum": "year",
    "pa": "year",
    "yr": "year",
    "month": "month",
    "months": "month",
    "monthly": "month",
    "pm": "month",
    "mo": "month",
    "week": "week",
    "weeks": "week",
    "weekly": "week",
    "pw": "week",
    "wk": "week",
    "day": "day",
    "days": "day",
    "daily": "day",
    "hour": "hour",
    "hours": "hour",
    "hourly": "hour",
    "ph": "hour",
    "hr": "hour",
}


def normalize_period(period: Optional[str]) -> Optional[SalaryPeriod]:
    """Map free-text period indicators ("per year", "Monthly", "hr") to a canonical period.

    Returns None when the period is missing or not recognized.
    """
    if not period or not isinstance(period, str):
        return None

    cleaned = re.sub(r"[^a-z]+", " ", period.lower().replace(".", "")).strip()
    if not cleaned:
        return None

    # "per year", "a month", "/hour"
    for token in cleaned.split():
        if token in ("per", "a", "an", "each"):
            continue
        return _PERIOD_ALIASES.get(token)
    return None


def annualize(amount: float, period: Optional[str]) -> float:
    """Multiply an amount by the multiplier for its period (x1 when unknown)."""
    canonical = normalize_period(period)
    multiplier = PERIOD_MULTIPLIERS.get(canonical, 1) if canonical else 1
    return amount * multiplier


def _as_input(salary_input: Any) -> SalaryInput:
    if isinstance(salary_input, SalaryInput):
        return salary_input
    return SalaryInput.model_validate(salary_input)


def _to_int(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return int(round(value))


def resolve_annual_salary(salary_input: Any) -> Optional[AnnualSalary]:
    """Resolve a best-effort annual range in native currency.

    Args:
        salary_input: SalaryInput, or any mapping accepted by SalaryInput

    Returns:
        AnnualSalary, or None when there is no usable salary

    Example:
        >>> resolve_annual_salary({"salaryMin": 50, "salaryPeriod": "hour"}).min_annual
        104000
    """
    data = _as_input(salary_input)

    if data.has_annual:
        return AnnualSalary(
            min_annual=_to_int(data.min_annual),
            max_annual=_to_int(data.max_annual),
            currency=data.currency,
            period="year",
            origin="annual",
        )

    if data.has_raw_amounts:
        period = normalize_period(data.salary_period)
        lo = annualize(data.salary_min, period) if data.salary_min is not None else None
        hi = annualize(data.salary_max, period) if data.salary_max is not None else None
        return AnnualSalary(
            min_annual=_to_int(lo),
            max_annual=_to_int(hi),
            currency=data.currency,
            period=period,
            origin="derived",
        )

    return None


def is_within_validity_band(
    value: Optional[float],
    floor: int = ANNUAL_SALARY_FLOOR,
    ceiling: int = ANNUAL_SALARY_CEILING,
) -> bool:
    """Whether an annual value is inside the inclusive [floor, ceiling] band."""
    if value is None:
        return False
    return floor <= value <= ceiling


def apply_validity_gate(
    annual: Optional[AnnualSalary],
    floor: int = ANNUAL_SALARY_FLOOR,
    ceiling: int = ANNUAL_SALARY_CEILING,
) -> Optional[AnnualSalary]:
    """Reject the whole range when any present bound falls outside [floor, ceiling].

    An out-of-band range is treated exactly like an unresolvable one.
    """
    if annual is None:
        return None

    bounds = [value for value in (annual.min_annual, annual.max_annual) if value is not None]
    if not bounds:
        return None
    if any(not is_within_validity_band(value, floor, ceiling) for value in bounds):
        return None
    return annual


def resolve_valid_annual_salary(
    salary_input: Any,
    floor: int = ANNUAL_SALARY_FLOOR,
    ceiling: int = ANNUAL_SALARY_CEILING,
) -> Optional[AnnualSalary]:
    """resolve_annual_salary() followed by apply_validity_gate()."""
    return apply_validity_gate(resolve_annual_salary(salary_input), floor, ceiling)
