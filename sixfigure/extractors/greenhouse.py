"""Salary extraction from Greenhouse job content.

Greenhouse returns the posting body as entity-escaped HTML in "content".
Two layouts are handled:

- the pay-range widget:
    <div class="pay-range"><span>$230,000</span><span>$300,000 USD</span></div>
- salary sentences inside the description:
    "Pay range: $22.00 - $25.00/hour", "Base salary range: $124k - $187k annually"

A bare "$" is read as CAD for Canadian locations and USD otherwise.
"""

import re
from typing import Any, Mapping, Optional

from ..salary.parser import parse_grouped_number
from .base import (
    ExtractedSalary,
    SalaryExtractor,
    find_salary_snippet,
    html_to_text,
    parse_text_salary,
    resolve_currency,
    unescape_markup,
)

_PAY_RANGE_RE = re.compile(
    r"pay-range[\s\S]*?<span>\s*([£$€])([\d.,]+)\s*</span>"
    r"[\s\S]*?<span>\s*([£$€])?([\d.,]+)\s*(USD|EUR|GBP|AUD|CAD)?\s*</span>"
)
_SYMBOL_CURRENCY = {"£": "GBP", "€": "EUR"}

# Widget values outside this range are not salaries.
PAY_RANGE_MIN = 30_000
PAY_RANGE_MAX = 2_000_000


def parse_pay_range_number(value: str) -> Optional[int]:
    """Parse "155,000" or European "155.000"."""
    number = parse_grouped_number(value)
    return int(number) if number is not None else None


class GreenhouseSalaryExtractor(SalaryExtractor):
    provider = "greenhouse"

    def extract(self, payload: Mapping[str, Any]) -> Optional[ExtractedSalary]:
        content = payload.get("content") or payload.get("description")
        if not isinstance(content, str) or not content.strip():
            return None

        widget = self._extract_pay_range(unescape_markup(content), payload.get("location"), payload.get("country_code"))
        if widget:
            return widget

        snippet = find_salary_snippet(html_to_text(content))
        return parse_text_salary(
            snippet,
            "descriptionText",
            country_code=payload.get("country_code"),
            location=payload.get("location"),
        )

    def _extract_pay_range(
        self,
        markup: str,
        location: Optional[str],
        country_code: Optional[str],
    ) -> Optional[ExtractedSalary]:
        match = _PAY_RANGE_RE.search(markup)
        if not match:
            return None

        symbol, min_text, _, max_text, code = match.groups()
        low = parse_pay_range_number(min_text)
        high = parse_pay_range_number(max_text)
        if low is None or high is None:
            return None
        if low < PAY_RANGE_MIN or high > PAY_RANGE_MAX or low > high:
            return None

        currency = code or _SYMBOL_CURRENCY.get(symbol)
        ambiguous = False
        if currency is None:
            currency, ambiguous = resolve_currency(None, symbol, country_code, location)

        return ExtractedSalary(
            min=float(low),
            max=float(high),
            currency=currency,
            period="year",
            source="ats",
            raw=f"{symbol}{min_text} - {symbol}{max_text}",
            currency_ambiguous=ambiguous,
        )
