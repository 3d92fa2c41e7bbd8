"""Base class and shared helpers for provider salary extractors.

An extractor turns one provider's compensation payload into an
ExtractedSalary (min, max, currency, period, source) or None. Extractors
never raise on malformed payloads.

Payload keys every extractor may rely on (filled in by the normalizer):
    salary_raw, description, location, country_code
plus whatever provider-specific keys the adapter stored on RawJob.salary_payload.
"""

import html
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..salary.models import SalaryInput, SalaryPeriod, SalarySource
from ..salary.parser import parse_salary_from_text
from ..salary.tables import DEFAULT_TABLES
from ..utils.location import infer_country_code

DOLLAR_CURRENCIES = {"USD", "CAD", "AUD", "NZD", "SGD"}

_SALARY_LINE_RE = re.compile(
    r"\b(salary|compensation|pay|base|ote|wage|remuneration|earn)\b", re.IGNORECASE
)
_MONEY_HINT_RE = re.compile(r"(?:[$€£₹]\s*\d|\d\s*(?:k|K)\b|\b(?:USD|EUR|GBP|CAD|AUD|INR)\b)")


@dataclass(frozen=True)
class ExtractedSalary:
    """Structured salary pulled from a provider payload.

    Amounts are in the unit given by period (not yet annualized).
    """

    min: Optional[float]
    max: Optional[float]
    currency: Optional[str]
    period: Optional[SalaryPeriod]
    source: SalarySource
    raw: Optional[str] = None
    currency_ambiguous: bool = False

    def to_salary_input(self, country_code: Optional[str] = None) -> SalaryInput:
        return SalaryInput(
            salary_min=self.min,
            salary_max=self.max,
            currency=self.currency,
            salary_period=self.period,
            salary_raw=self.raw,
            country_code=country_code,
        )


class SalaryExtractor(ABC):
    """Base class for all salary extractors."""

    provider: str = "base"

    @abstractmethod
    def extract(self, payload: Mapping[str, Any]) -> Optional[ExtractedSalary]:
        """Return the salary found in the payload, or None."""


def unescape_markup(markup: str) -> str:
    """Decode HTML entities, twice for double-escaped ATS content."""
    text = html.unescape(markup)
    if "&lt;" in text or "&gt;" in text:
        text = html.unescape(text)
    return text


def html_to_text(markup: Optional[str]) -> str:
    """Decode entities and strip tags, keeping line breaks."""
    if not markup:
        return ""

    text = unescape_markup(markup)

    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</(p|div|li|h\d)>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    text = re.sub(r"[ \t\xa0]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n", text)
    return text.strip()


def find_salary_snippet(text: Optional[str]) -> Optional[str]:
    """First line that reads like a salary statement.

    Lines with a compensation keyword and a digit win; otherwise the first
    line with a currency-marked amount. None if neither exists.
    """
    if not text:
        return None

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines:
        if _SALARY_LINE_RE.search(line) and re.search(r"\d", line):
            return line
    for line in lines:
        if _MONEY_HINT_RE.search(line):
            return line
    return None


def resolve_currency(
    detected: Optional[str],
    text: str,
    country_code: Optional[str],
    location: Optional[str] = None,
) -> Tuple[Optional[str], bool]:
    """Pick a currency for parsed salary text.

    Returns (currency, ambiguous). An explicit marker always wins. A bare
    "$" takes the dollar currency of the job's country, USD when the
    country is unknown, and is flagged ambiguous when the country does not
    use dollars. Text with no marker at all takes the country's currency.
    """
    if detected:
        return detected, False

    country = country_code or infer_country_code(location)
    expected = DEFAULT_TABLES.currency_for_country(country)

    if "$" in (text or ""):
        if expected in DOLLAR_CURRENCIES:
            return expected, False
        if expected is None:
            return "USD", False
        return "USD", True

    return expected, False


def parse_text_salary(
    text: Optional[str],
    source: SalarySource,
    country_code: Optional[str] = None,
    location: Optional[str] = None,
) -> Optional[ExtractedSalary]:
    """Run the free-text parser and settle the currency against the job's country."""
    parsed = parse_salary_from_text(text)
    if parsed is None:
        return None

    currency, ambiguous = resolve_currency(parsed.currency, parsed.raw, country_code, location)
    return ExtractedSalary(
        min=parsed.min,
        max=parsed.max,
        currency=currency,
        period=parsed.period,
        source=source,
        raw=parsed.raw.strip(),
        currency_ambiguous=ambiguous,
    )
