"""Static salary lookup tables.

The numbers in this module are configuration data, not logic. They are
bundled into a SalaryTables instance that every salary function accepts as
an optional argument, so deployments can add countries, currencies or bands
through config.yaml without touching code (see SalaryTables.with_overrides).

Local band tables are roughly PPP-adjusted rather than naive FX conversions
of the USD bands: £75k is treated as the UK equivalent of $100k.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Sequence

from .models import SalaryBand

# Inclusive bounds applied to persisted annual figures, in any currency.
ANNUAL_SALARY_FLOOR = 50_000
ANNUAL_SALARY_CEILING = 5_000_000

# Values above this are shown as "High salary role" instead of a number.
DEFAULT_DISPLAY_CEILING = 1_500_000

# Threshold for the global (USD-equivalent) high-salary flag.
USD_HIGH_SALARY_THRESHOLD = 100_000

PERIOD_MULTIPLIERS: Dict[str, int] = {
    "year": 1,
    "month": 12,
    "week": 52,
    "day": 260,
    "hour": 2080,
}


def _bands(rows: Sequence[tuple]) -> List[SalaryBand]:
    return [SalaryBand(id=band_id, label=label, min=lo, max=hi) for band_id, label, lo, hi in rows]


USD_BANDS = _bands(
    [
        ("100-199", "$100k–$199k", 100_000, 199_999),
        ("200-299", "$200k–$299k", 200_000, 299_999),
        ("300-399", "$300k–$399k", 300_000, 399_999),
        ("400-500", "$400k–$500k", 400_000, 500_000),
    ]
)

GBP_BANDS = _bands(
    [
        ("100-199", "£75k–£149k", 75_000, 149_999),
        ("200-299", "£150k–£224k", 150_000, 224_999),
        ("300-399", "£225k–£299k", 225_000, 299_999),
        ("400-500", "£300k–£375k", 300_000, 375_000),
    ]
)

EUR_BANDS = _bands(
    [
        ("100-199", "€90k–€179k", 90_000, 179_999),
        ("200-299", "€180k–€269k", 180_000, 269_999),
        ("300-399", "€270k–€359k", 270_000, 359_999),
        ("400-500", "€360k–€449k", 360_000, 449_999),
    ]
)

AUD_BANDS = _bands(
    [
        ("100-199", "A$150k–A$299k", 150_000, 299_999),
        ("200-299", "A$300k–A$449k", 300_000, 449_999),
        ("300-399", "A$480k–A$649k", 480_000, 649_999),
        ("400-500", "A$650k–A$800k", 650_000, 800_000),
    ]
)

NZD_BANDS = _bands(
    [
        ("100-199", "NZ$150k–NZ$349k", 150_000, 349_999),
        ("200-299", "NZ$360k–NZ$499k", 360_000, 499_999),
        ("300-399", "NZ$500k–NZ$649k", 500_000, 649_999),
        ("400-500", "NZ$650k–NZ$800k", 650_000, 800_000),
    ]
)

COUNTRY_TO_BANDS: Dict[str, List[SalaryBand]] = {
    "US": USD_BANDS,
    "GB": GBP_BANDS,
    "IE": EUR_BANDS,
    "DE": EUR_BANDS,
    "NL": EUR_BANDS,
    "AU": AUD_BANDS,
    "NZ": NZD_BANDS,
}

COUNTRY_TO_CURRENCY: Dict[str, str] = {
    "US": "USD",
    "CA": "CAD",
    "AU": "AUD",
    "NZ": "NZD",
    "SG": "SGD",
    "GB": "GBP",
    "UK": "GBP",
    "DE": "EUR",
    "FR": "EUR",
    "NL": "EUR",
    "ES": "EUR",
    "PT": "EUR",
    "IE": "EUR",
    "IT": "EUR",
    "AT": "EUR",
    "BE": "EUR",
    "FI": "EUR",
    "LU": "EUR",
    "CH": "CHF",
    "SE": "SEK",
    "NO": "NOK",
    "DK": "DKK",
    "PL": "PLN",
    "IN": "INR",
    "JP": "JPY",
    "KR": "KRW",
    "AE": "AED",
    "BR": "BRL",
    "MX": "MXN",
}

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AUD": "A$",
    "CAD": "C$",
    "SGD": "S$",
    "NZD": "NZ$",
    "JPY": "¥",
    "INR": "₹",
    "KRW": "₩",
    "BRL": "R$",
    "MXN": "MX$",
    "PLN": "zł",
    "CHF": "CHF ",
}

# Minimum annual salary that counts as "high" locally, per country.
LOCAL_THRESHOLDS: Dict[str, int] = {
    "US": 100_000,
    "CA": 100_000,
    "GB": 75_000,
    "IE": 85_000,
    "DE": 80_000,
    "NL": 85_000,
    "CH": 110_000,
    "FR": 75_000,
    "ES": 65_000,
    "PT": 60_000,
    "PL": 250_000,
    "AU": 140_000,
    "NZ": 120_000,
    "SG": 120_000,
    "IN": 3_500_000,
    "JP": 10_000_000,
    "KR": 80_000_000,
    "AE": 300_000,
    "BR": 250_000,
    "MX": 800_000,
}

# Per-currency high-salary thresholds used by the eligibility gate.
HIGH_SALARY_THRESHOLDS: Dict[str, int] = {
    "USD": 100_000,
    "EUR": 80_000,
    "GBP": 70_000,
    "CAD": 120_000,
    "AUD": 140_000,
    "NZD": 150_000,
    "SGD": 120_000,
    "CHF": 110_000,
    "NOK": 1_000_000,
    "SEK": 1_000_000,
    "DKK": 700_000,
}

# Currency units per 1 USD. Approximate; used for guardrails and the global
# high-salary flag only, never for display.
FX_UNITS_PER_USD: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "CAD": 1.36,
    "AUD": 1.52,
    "CHF": 0.90,
    "SEK": 10.4,
    "NOK": 10.4,
    "DKK": 6.8,
    "SGD": 1.35,
    "INR": 83.0,
    "NZD": 1.65,
}

# Lowest annual figure worth displaying in markets where monthly or
# local-unit figures are routinely mislabeled as annual.
MARKET_FLOORS: Dict[str, int] = {
    "SEK": 300_000,
    "NOK": 300_000,
    "DKK": 250_000,
    "INR": 1_000_000,
    "JPY": 3_000_000,
    "KRW": 30_000_000,
    "PLN": 100_000,
    "MXN": 200_000,
    "BRL": 100_000,
}

# Per-currency display ceilings for currencies with large nominal salaries.
DISPLAY_CEILINGS: Dict[str, int] = {
    "SEK": 20_000_000,
    "NOK": 20_000_000,
    "DKK": 20_000_000,
    "INR": 50_000_000,
    "JPY": 100_000_000,
    "KRW": 1_000_000_000,
}


@dataclass(frozen=True)
class SalaryTables:
    """Bundle of lookup tables used by the resolver, classifier and formatter.

    Instances are immutable; use with_overrides() to derive a variant.
    """

    country_bands: Mapping[str, List[SalaryBand]] = field(default_factory=lambda: dict(COUNTRY_TO_BANDS))
    default_bands: List[SalaryBand] = field(default_factory=lambda: list(USD_BANDS))
    country_currency: Mapping[str, str] = field(default_factory=lambda: dict(COUNTRY_TO_CURRENCY))
    currency_symbols: Mapping[str, str] = field(default_factory=lambda: dict(CURRENCY_SYMBOLS))
    local_thresholds: Mapping[str, int] = field(default_factory=lambda: dict(LOCAL_THRESHOLDS))
    high_salary_thresholds: Mapping[str, int] = field(default_factory=lambda: dict(HIGH_SALARY_THRESHOLDS))
    fx_units_per_usd: Mapping[str, float] = field(default_factory=lambda: dict(FX_UNITS_PER_USD))
    market_floors: Mapping[str, int] = field(default_factory=lambda: dict(MARKET_FLOORS))
    display_ceilings: Mapping[str, int] = field(default_factory=lambda: dict(DISPLAY_CEILINGS))
    validity_floor: int = ANNUAL_SALARY_FLOOR
    validity_ceiling: int = ANNUAL_SALARY_CEILING
    display_ceiling: int = DEFAULT_DISPLAY_CEILING

    @classmethod
    def default(cls) -> "SalaryTables":
        return DEFAULT_TABLES

    def with_overrides(
        self,
        country_bands: Optional[Mapping[str, List[SalaryBand]]] = None,
        country_currency: Optional[Mapping[str, str]] = None,
        currency_symbols: Optional[Mapping[str, str]] = None,
        local_thresholds: Optional[Mapping[str, int]] = None,
        market_floors: Optional[Mapping[str, int]] = None,
        display_ceilings: Optional[Mapping[str, int]] = None,
        validity_floor: Optional[int] = None,
        validity_ceiling: Optional[int] = None,
        display_ceiling: Optional[int] = None,
    ) -> "SalaryTables":
        """Return a copy with the given entries merged over this instance.

        Mapping overrides are merged key by key (keys upper-cased), so a
        config file only needs to list the countries it adds or changes.
        """

        def merged(base: Mapping, extra: Optional[Mapping]) -> Mapping:
            if not extra:
                return base
            result = dict(base)
            result.update({str(k).upper(): v for k, v in extra.items()})
            return result

        return replace(
            self,
            country_bands=merged(self.country_bands, country_bands),
            country_currency=merged(self.country_currency, country_currency),
            currency_symbols=merged(self.currency_symbols, currency_symbols),
            local_thresholds=merged(self.local_thresholds, local_thresholds),
            market_floors=merged(self.market_floors, market_floors),
            display_ceilings=merged(self.display_ceilings, display_ceilings),
            validity_floor=validity_floor if validity_floor is not None else self.validity_floor,
            validity_ceiling=validity_ceiling if validity_ceiling is not None else self.validity_ceiling,
            display_ceiling=display_ceiling if display_ceiling is not None else self.display_ceiling,
        )

    def bands_for_country(self, country_code: Optional[str]) -> List[SalaryBand]:
        """Band table for a country; USD bands when there is no mapping."""
        if not country_code:
            return self.default_bands
        return self.country_bands.get(country_code.strip().upper()) or self.default_bands

    def currency_for_country(self, country_code: Optional[str]) -> Optional[str]:
        if not country_code:
            return None
        return self.country_currency.get(country_code.strip().upper())

    def market_floor(self, currency: Optional[str]) -> int:
        """Lowest displayable annual figure for a currency (never below the validity floor)."""
        local = self.market_floors.get((currency or "").upper(), 0)
        return max(self.validity_floor, local)

    def display_ceiling_for(self, currency: Optional[str]) -> int:
        return self.display_ceilings.get((currency or "").upper(), self.display_ceiling)


DEFAULT_TABLES = SalaryTables()
