"""Normalization layer: RawJob to Job, including salary resolution.

This module provides:
- JobNormalizer: converts RawJob to Job with computed keys and salary fields
- SalaryResolution: the salary fields computed for one job
- NormalizationResult: output of a normalization operation with change tracking
"""

from .models import NormalizationResult, SalaryResolution
from .service import JobNormalizer

__all__ = [
    "JobNormalizer",
    "NormalizationResult",
    "SalaryResolution",
]
