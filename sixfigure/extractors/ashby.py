"""Salary extraction from Ashby job postings.

The public posting API (includeCompensation=true) returns:
    "compensation": {
        "scrapeableCompensationSalarySummary": "$150K - $200K",
        "summaryComponents": [
            {"compensationType": "Salary", "interval": "1 YEAR",
             "currencyCode": "USD", "minValue": 150000, "maxValue": 200000},
            {"compensationType": "EquityPercentage", ...}
        ]
    }
Only the Salary component is used. Equity, bonus and commission are ignored.
"""

from typing import Any, Mapping, Optional

from ..salary.models import coerce_amount, coerce_code
from ..salary.resolver import normalize_period
from .base import ExtractedSalary, SalaryExtractor, parse_text_salary
from .text import TextSalaryExtractor


class AshbySalaryExtractor(SalaryExtractor):
    provider = "ashby"

    def __init__(self, fallback: Optional[SalaryExtractor] = None):
        self.fallback = fallback or TextSalaryExtractor()

    def extract(self, payload: Mapping[str, Any]) -> Optional[ExtractedSalary]:
        compensation = payload.get("compensation")
        if isinstance(compensation, Mapping):
            found = self._from_components(compensation.get("summaryComponents"))
            if found:
                return found

            summary = compensation.get("scrapeableCompensationSalarySummary") or compensation.get(
                "compensationTierSummary"
            )
            if isinstance(summary, str) and summary.strip():
                found = parse_text_salary(
                    summary, "ats", country_code=payload.get("country_code"), location=payload.get("location")
                )
                if found:
                    return found

        return self.fallback.extract(payload)

    @staticmethod
    def _from_components(components: Any) -> Optional[ExtractedSalary]:
        if not isinstance(components, list):
            return None

        for component in components:
            if not isinstance(component, Mapping):
                continue
            if str(component.get("compensationType", "")).lower() != "salary":
                continue

            low = coerce_amount(component.get("minValue"))
            high = coerce_amount(component.get("maxValue"))
            if low is None and high is None:
                continue

            return ExtractedSalary(
                min=low,
                max=high,
                currency=coerce_code(component.get("currencyCode")),
                period=normalize_period(component.get("interval")),
                source="ats",
            )
        return None
