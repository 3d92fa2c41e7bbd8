"""Fallback extractor for providers without structured compensation data."""

from typing import Any, Mapping, Optional

from .base import ExtractedSalary, SalaryExtractor, find_salary_snippet, html_to_text, parse_text_salary


class TextSalaryExtractor(SalaryExtractor):
    """Parses salary_raw first, then a salary-looking line of the description."""

    provider = "text"

    def extract(self, payload: Mapping[str, Any]) -> Optional[ExtractedSalary]:
        country_code = payload.get("country_code")
        location = payload.get("location")

        salary_raw = payload.get("salary_raw")
        if isinstance(salary_raw, str) and salary_raw.strip():
            found = parse_text_salary(html_to_text(salary_raw), "salaryRaw", country_code, location)
            if found:
                return found

        description = payload.get("description")
        if not isinstance(description, str):
            return None
        snippet = find_salary_snippet(html_to_text(description))
        return parse_text_salary(snippet, "descriptionText", country_code, location)
