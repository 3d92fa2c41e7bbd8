"""Pluggable salary extractors keyed by ATS provider.

    from sixfigure.extractors import extract_salary
    found = extract_salary("lever", {"salaryRange": {...}, "location": "Remote"})

Register a new provider:
    from sixfigure.extractors import register_extractor
    register_extractor("workday", WorkdaySalaryExtractor())
"""

from .ashby import AshbySalaryExtractor
from .base import ExtractedSalary, SalaryExtractor, find_salary_snippet, html_to_text
from .greenhouse import GreenhouseSalaryExtractor
from .lever import LeverSalaryExtractor
from .registry import extract_salary, get_extractor, register_extractor, registered_providers, reset_registry
from .text import TextSalaryExtractor

__all__ = [
    "ExtractedSalary",
    "SalaryExtractor",
    "TextSalaryExtractor",
    "GreenhouseSalaryExtractor",
    "LeverSalaryExtractor",
    "AshbySalaryExtractor",
    "register_extractor",
    "get_extractor",
    "extract_salary",
    "registered_providers",
    "reset_registry",
    "find_salary_snippet",
    "html_to_text",
]
