"""Salary extraction from Lever postings.

Lever exposes structured pay as:
    "salaryRange": {"min": 150000, "max": 190000, "currency": "USD", "interval": "per-year-salary"}
Postings without it sometimes carry a "Compensation" section in "lists".
"""

import re
from typing import Any, Mapping, Optional

from ..salary.models import coerce_amount, coerce_code
from ..salary.resolver import normalize_period
from .base import ExtractedSalary, SalaryExtractor, html_to_text, parse_text_salary
from .text import TextSalaryExtractor

_COMPENSATION_HEADING_RE = re.compile(r"compensation|salary|pay", re.IGNORECASE)


class LeverSalaryExtractor(SalaryExtractor):
    provider = "lever"

    def __init__(self, fallback: Optional[SalaryExtractor] = None):
        self.fallback = fallback or TextSalaryExtractor()

    def extract(self, payload: Mapping[str, Any]) -> Optional[ExtractedSalary]:
        structured = self._from_salary_range(payload.get("salaryRange"))
        if structured:
            return structured

        section = self._compensation_section(payload.get("lists"))
        if section:
            found = parse_text_salary(
                section, "ats", country_code=payload.get("country_code"), location=payload.get("location")
            )
            if found:
                return found

        return self.fallback.extract(payload)

    @staticmethod
    def _from_salary_range(salary_range: Any) -> Optional[ExtractedSalary]:
        if not isinstance(salary_range, Mapping):
            return None

        low = coerce_amount(salary_range.get("min"))
        high = coerce_amount(salary_range.get("max"))
        if low is None and high is None:
            return None

        currency = coerce_code(salary_range.get("currency"))
        return ExtractedSalary(
            min=low,
            max=high,
            currency=currency,
            period=normalize_period(salary_range.get("interval")),
            source="ats",
            raw=None,
            currency_ambiguous=False,
        )

    @staticmethod
    def _compensation_section(lists: Any) -> Optional[str]:
        if not isinstance(lists, list):
            return None
        for section in lists:
            if not isinstance(section, Mapping):
                continue
            heading = section.get("text") or ""
            content = section.get("content")
            if _COMPENSATION_HEADING_RE.search(str(heading)) and isinstance(content, str):
                text = html_to_text(content)
                if text:
                    return text
        return None
