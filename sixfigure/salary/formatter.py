"""Display text for job salary badges.

    >>> build_salary_text({"minAnnual": 120000, "currency": "USD", "countryCode": "US"})
    '$120K+'
    >>> build_salary_text({"minAnnual": 120000, "maxAnnual": 160000, "currency": "USD"})
    '$120K - $160K'
    >>> build_salary_text({"minAnnual": 9000000, "currency": "USD"})
    '$High salary role'

Amounts are truncated to whole thousands, never rounded.
"""

from typing import Any, Optional

from .models import SalaryInput
from .resolver import resolve_annual_salary
from .tables import DEFAULT_TABLES, SalaryTables

HIGH_SALARY_LABEL = "High salary role"


def get_currency_symbol(currency: Optional[str], tables: Optional[SalaryTables] = None) -> str:
    """Display prefix for a currency code.

    Unknown codes are used as-is followed by a space ("SEK "). No code at
    all falls back to "$".
    """
    if not currency or not currency.strip():
        return "$"
    code = currency.strip().upper()
    symbols = (tables or DEFAULT_TABLES).currency_symbols
    return symbols.get(code, f"{code} ")


def _thousands(value: int) -> str:
    return f"{int(value) // 1000}K"


def build_salary_text(salary_input: Any, tables: Optional[SalaryTables] = None) -> Optional[str]:
    """Render a salary into a short UI string, or None when nothing should be shown.

    Args:
        salary_input: SalaryInput, or any mapping accepted by SalaryInput
        tables: Lookup tables (defaults to the built-in ones)

    Returns:
        "$120K+", "$120K - $160K", "Up to $160K", "$High salary role" or None
    """
    tables = tables or DEFAULT_TABLES
    data = salary_input if isinstance(salary_input, SalaryInput) else SalaryInput.model_validate(salary_input)

    annual = resolve_annual_salary(data)
    if annual is None:
        return None

    currency = data.currency or tables.currency_for_country(data.country_code)
    symbol = get_currency_symbol(currency, tables)

    # Monthly or local-unit figures stored as annual fall under the market floor.
    floor = tables.market_floor(currency)
    bounds = [value if value is not None and value >= floor else None for value in (annual.min_annual, annual.max_annual)]
    lo, hi = bounds
    if lo is None and hi is None:
        return None

    ceiling = tables.display_ceiling_for(currency)
    if any(value is not None and value > ceiling for value in (lo, hi)):
        return f"{symbol}{HIGH_SALARY_LABEL}"

    if lo is not None and hi is not None and lo > hi:
        lo, hi = hi, lo

    if lo is not None and (hi is None or lo == hi):
        return f"{symbol}{_thousands(lo)}+"
    if lo is not None:
        return f"{symbol}{_thousands(lo)} - {symbol}{_thousands(hi)}"
    return f"Up to {symbol}{_thousands(hi)}"


def format_band_label(
    min_annual: Optional[float],
    country_code: Optional[str] = None,
    currency: Optional[str] = None,
    tables: Optional[SalaryTables] = None,
) -> Optional[str]:
    """Compact "£75k+" style label for a threshold in local currency."""
    if min_annual is None or min_annual <= 0:
        return None
    tables = tables or DEFAULT_TABLES
    code = currency or tables.currency_for_country(country_code)
    symbol = get_currency_symbol(code, tables)
    return f"{symbol}{int(min_annual) // 1000}k+"
