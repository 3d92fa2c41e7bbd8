"""High-salary and local-threshold classification.

Two independent facts are computed for a resolved annual range:

- is_hundred_k_local: the range reaches the lowest band of the country's
  band table (GBP bands for GB, EUR bands for IE/DE/NL, ...). Countries
  without a table fall back to the USD bands verbatim, with no FX.
- is_high_salary: the range is worth at least $100k USD using the
  approximate FX table. Currencies without a rate never qualify.

The flags may disagree: £80k is well paid in the UK but below $100k.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import AnnualSalary, BandId, SalaryBand, SalaryClassification
from .tables import DEFAULT_TABLES, USD_HIGH_SALARY_THRESHOLD, SalaryTables

# (multiple of the local threshold, tier name), highest first
TIER_MULTIPLIERS: List[Tuple[float, str]] = [
    (3.0, "top-1"),
    (2.0, "elite"),
    (1.5, "very-high"),
    (1.0, "high"),
]

DEFAULT_LOCAL_THRESHOLD = 100_000


@dataclass(frozen=True)
class CurrencyLocationCheck:
    """Whether a job's currency is the one expected for its country."""

    country_code: Optional[str]
    currency: Optional[str]
    expected_currency: Optional[str]
    has_currency: bool
    currency_matches: bool
    is_mismatch: bool


def get_bands_for_country(country_code: Optional[str], tables: Optional[SalaryTables] = None) -> List[SalaryBand]:
    """Band table for a country. Never empty: unmapped countries get USD bands."""
    return (tables or DEFAULT_TABLES).bands_for_country(country_code)


def resolve_band_range(
    band_id: str,
    country_code: Optional[str],
    tables: Optional[SalaryTables] = None,
) -> Optional[Tuple[int, Optional[int]]]:
    """Local (min, max) for a band id in a country's table, or None for an unknown id."""
    for band in get_bands_for_country(country_code, tables):
        if band.id == band_id:
            return band.min, band.max
    return None


def band_for_amount(
    amount: Optional[float],
    country_code: Optional[str],
    tables: Optional[SalaryTables] = None,
) -> Optional[SalaryBand]:
    """Highest band whose minimum the amount reaches.

    Amounts above the top band map to the top band, and amounts falling in a
    gap between two bands map to the lower one. Below the first band: None.
    """
    if amount is None:
        return None
    match = None
    for band in sorted(get_bands_for_country(country_code, tables), key=lambda b: b.min):
        if amount >= band.min:
            match = band
    return match


def currency_for_country(country_code: Optional[str], tables: Optional[SalaryTables] = None) -> Optional[str]:
    return (tables or DEFAULT_TABLES).currency_for_country(country_code)


def estimate_usd_annual(
    amount: Optional[float],
    currency: Optional[str],
    tables: Optional[SalaryTables] = None,
) -> Optional[float]:
    """Approximate USD value of a local annual amount.

    Returns None when the amount is missing or the currency has no FX rate.
    Only meant for guardrails and the global flag.
    """
    if amount is None or amount <= 0 or not currency:
        return None
    rate = (tables or DEFAULT_TABLES).fx_units_per_usd.get(currency.strip().upper())
    if not rate or rate <= 0:
        return None
    return amount / rate


def check_currency_location_mismatch(
    country_code: Optional[str],
    currency: Optional[str],
    tables: Optional[SalaryTables] = None,
) -> CurrencyLocationCheck:
    """Compare a job's currency with the expected currency for its country.

    A mismatch is only reported when both an expected currency and an
    actual currency are known and they differ.
    """
    expected = currency_for_country(country_code, tables)
    actual = currency.strip().upper() if currency and currency.strip() else None
    matches = expected is not None and actual == expected
    return CurrencyLocationCheck(
        country_code=country_code,
        currency=currency,
        expected_currency=expected,
        has_currency=actual is not None,
        currency_matches=matches,
        is_mismatch=expected is not None and actual is not None and not matches,
    )


def salary_tier(
    amount: Optional[float],
    country_code: Optional[str],
    tables: Optional[SalaryTables] = None,
) -> Optional[str]:
    """Tier name (high, very-high, elite, top-1) relative to the local threshold."""
    if amount is None:
        return None
    tables = tables or DEFAULT_TABLES
    code = (country_code or "").strip().upper()
    threshold = tables.local_thresholds.get(code, DEFAULT_LOCAL_THRESHOLD)
    for multiple, tier in TIER_MULTIPLIERS:
        if amount >= threshold * multiple:
            return tier
    return None


def classify_salary(
    annual: Optional[AnnualSalary],
    currency: Optional[str] = None,
    country_code: Optional[str] = None,
    tables: Optional[SalaryTables] = None,
) -> SalaryClassification:
    """Compute the high-salary flags, band and tier for a resolved range.

    Args:
        annual: Resolved annual range (None or empty yields all-false flags)
        currency: Currency code; defaults to annual.currency, then to the
            country's currency
        country_code: ISO 3166-1 alpha-2 code selecting the band table
        tables: Lookup tables (defaults to the built-in ones)

    Returns:
        SalaryClassification
    """
    if annual is None or annual.is_empty:
        return SalaryClassification()

    tables = tables or DEFAULT_TABLES
    bands = get_bands_for_country(country_code, tables)
    lowest = min(band.min for band in bands)

    is_local = any(value is not None and value >= lowest for value in (annual.min_annual, annual.max_annual))

    code = currency or annual.currency or currency_for_country(country_code, tables)
    usd = estimate_usd_annual(annual.representative, code, tables)
    is_high = usd is not None and usd >= USD_HIGH_SALARY_THRESHOLD

    floor_amount = annual.min_annual if annual.min_annual is not None else annual.max_annual
    band = band_for_amount(floor_amount, country_code, tables)
    band_id: Optional[BandId] = band.id if band else None

    return SalaryClassification(
        is_high_salary=is_high,
        is_hundred_k_local=is_local,
        band_id=band_id,
        tier=salary_tier(annual.representative, country_code, tables),
    )
