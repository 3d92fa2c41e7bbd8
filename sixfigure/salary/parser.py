"""Free-text salary parser.

Turns strings such as "$124k - $187k annually", "Pay: $150 per hour" or
"12-18 LPA" into a ParsedSalary (min, max, currency, period). Used by the
text extractor, the Greenhouse extractor and the repair pipeline.

Currency detection walks an ordered pattern table. Strong markers come first
(INR/lakh, then A$ / C$ / NZ$ / S$ before any plain dollar sign), and a bare
"$" is never taken to mean USD.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence

from .models import ParsedSalary, SalaryPeriod


@dataclass(frozen=True)
class CurrencyPattern:
    """A compiled currency-detection rule."""

    pattern: Pattern[str]
    currency: str


def _p(expression: str, currency: str) -> CurrencyPattern:
    return CurrencyPattern(pattern=re.compile(expression, re.IGNORECASE), currency=currency)


# "kr" is shared by SEK/NOK/DKK, so only explicit codes are accepted.
DEFAULT_CURRENCY_PATTERNS: List[CurrencyPattern] = [
    _p(r"₹|\bINR\b|\blakhs?\b|\blpa\b", "INR"),
    _p(r"(?<![A-Z])A\$|\bAU\$|\bAUD\b", "AUD"),
    _p(r"(?<![A-Z])C\$|\bCA\$|\bCAD\b", "CAD"),
    _p(r"\bNZ\$|\bNZD\b", "NZD"),
    _p(r"(?<![A-Z])S\$|\bSG\$|\bSGD\b", "SGD"),
    _p(r"\bCHF\b|\bFr\.", "CHF"),
    _p(r"\bSEK\b", "SEK"),
    _p(r"\bNOK\b", "NOK"),
    _p(r"\bDKK\b", "DKK"),
    _p(r"€|\bEUR\b", "EUR"),
    _p(r"£|\bGBP\b", "GBP"),
    _p(r"US\$|\bUSD\b", "USD"),
]

_CODES = "USD|EUR|GBP|AUD|CAD|SGD|INR|CHF|SEK|NOK|DKK|NZD"

_NUMBER_RE = re.compile(
    r"(\d{1,3}(?:,\d{3})+(?:\.\d+)?"
    r"|\d{1,3}(?:\.\d{3})+(?![\d.,]|\s*[kKmM](?![a-zA-Z]))"
    r"|\d{1,3}(?:[ \u00a0\u202f]\d{3})+(?![\d.,])"
    r"|\d+(?:\.\d+)?)"
    r"(?:\s*([kKmM])(?![a-zA-Z]))?"
)
# European "85.000" and spaced "700 000" thousands grouping.
_DOT_GROUPED_RE = re.compile(r"\d{1,3}(?:\.\d{3})+")
_SPACE_GROUPED_RE = re.compile(r"\d{1,3}(?:[ \u00a0\u202f]\d{3})+")
_LAKH_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lakhs?|lacs?|lpa|l\b)", re.IGNORECASE)
_PREFIX_MARKER_RE = re.compile(r"(?:US\$|A\$|C\$|NZ\$|S\$|₹|€|£|\$)\s*$", re.IGNORECASE)
_SUFFIX_MARKER_RE = re.compile(rf"^\s*(?:{_CODES})\b", re.IGNORECASE)
_MONEY_TOKEN_RE = re.compile(
    rf"(?:US\$|A\$|C\$|NZ\$|S\$|{_CODES}|₹|€|£|\$)\s*\d[\d,.\s]*[kKmM]?"
    rf"|\d[\d,.\s]*[kKmM]?\s*(?:{_CODES})\b"
)

# Checked in order; the first period whose keywords appear near a money token wins.
_PERIOD_KEYWORDS = [
    ("hour", re.compile(r"per\s*hour|/\s*h(?:ou)?r|hourly|\bph\b")),
    ("day", re.compile(r"per\s*day|/\s*day|daily")),
    ("week", re.compile(r"per\s*week|/\s*week|weekly|\bpw\b")),
    ("month", re.compile(r"per\s*month|/\s*month|monthly|\bpm\b|/mo\b")),
    ("year", re.compile(r"per\s*(?:year|annum)|/\s*y(?:ea)?r|annual|yearly|\bpa\b|\blpa\b")),
]

PERIOD_WINDOW = 30
YEAR_RANGE = (1900, 2100)
MIN_AMOUNT = 1_000
MAX_AMOUNT = 50_000_000
MIN_RATE = 10


def detect_currency(text: Optional[str], patterns: Optional[Sequence[CurrencyPattern]] = None) -> Optional[str]:
    """Return the first currency whose pattern matches the text, or None."""
    if not text:
        return None
    for rule in patterns or DEFAULT_CURRENCY_PATTERNS:
        if rule.pattern.search(text):
            return rule.currency
    return None


def _extract_lakhs(text: str) -> List[float]:
    return [float(match.group(1)) * 100_000 for match in _LAKH_RE.finditer(text)]


def parse_grouped_number(value: str) -> Optional[float]:
    """Parse "155,000", "155.000", "155 000" or "155000.50"; None when not a number."""
    value = value.strip()
    if _DOT_GROUPED_RE.fullmatch(value):
        return float(value.replace(".", ""))
    if _SPACE_GROUPED_RE.fullmatch(value):
        return float(re.sub(r"\D", "", value))
    plain = value.replace(",", "")
    if not re.fullmatch(r"\d+(?:\.\d+)?", plain):
        return None
    return float(plain)


def extract_amounts(text: str, currency: Optional[str] = None) -> List[float]:
    """Pull plausible salary amounts out of text.

    k/M suffixes are expanded. Numbers that look like years are dropped.
    Sub-1000 figures (hourly or daily rates) are kept only when a currency
    marker sits next to them or the text carries a currency.
    """
    if currency == "INR":
        lakhs = _extract_lakhs(text)
        if lakhs:
            return lakhs

    amounts: List[float] = []
    for match in _NUMBER_RE.finditer(text):
        number = parse_grouped_number(match.group(1))
        suffix = (match.group(2) or "").lower()
        if suffix == "k":
            number *= 1_000
        elif suffix == "m":
            number *= 1_000_000

        start, end = match.start(), match.end()
        near_currency = (
            currency is not None
            or bool(_PREFIX_MARKER_RE.search(text[max(0, start - 6):start]))
            or bool(_SUFFIX_MARKER_RE.match(text[end:end + 6]))
        )

        if MIN_AMOUNT <= number <= MAX_AMOUNT:
            if not (YEAR_RANGE[0] <= number <= YEAR_RANGE[1]):
                amounts.append(number)
        elif MIN_RATE <= number < MIN_AMOUNT and near_currency:
            amounts.append(number)

    return amounts


def detect_period(text: str) -> SalaryPeriod:
    """Detect the pay period from keywords close to a money token.

    Keywords far from any amount ("manages hourly employees") are ignored.
    Text without money tokens defaults to "year".
    """
    lower = text.lower()
    for match in _MONEY_TOKEN_RE.finditer(text):
        near = lower[max(0, match.start() - PERIOD_WINDOW):match.end() + PERIOD_WINDOW]
        for period, keywords in _PERIOD_KEYWORDS:
            if keywords.search(near):
                return period
    return "year"


def parse_salary_from_text(
    text: Optional[str],
    patterns: Optional[Sequence[CurrencyPattern]] = None,
) -> Optional[ParsedSalary]:
    """Parse a salary range out of free text.

    Args:
        text: Salary string or description snippet
        patterns: Currency detection table (defaults to DEFAULT_CURRENCY_PATTERNS)

    Returns:
        ParsedSalary, or None when no plausible amount is present

    Example:
        >>> parsed = parse_salary_from_text("$124k - $187k annually")
        >>> (parsed.min, parsed.max, parsed.period)
        (124000.0, 187000.0, 'year')
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = text.strip()
    if not cleaned:
        return None

    currency = detect_currency(cleaned, patterns)
    amounts = extract_amounts(cleaned, currency)
    if not amounts:
        return None

    return ParsedSalary(
        min=min(amounts),
        max=max(amounts),
        currency=currency,
        period=detect_period(cleaned),
        raw=text,
    )
