"""Provider → salary extractor registry.

New providers plug in with register_extractor(); nothing in the
normalizer needs to change. Unknown providers get the text extractor.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from ..logging import get_logger
from .ashby import AshbySalaryExtractor
from .base import ExtractedSalary, SalaryExtractor
from .greenhouse import GreenhouseSalaryExtractor
from .lever import LeverSalaryExtractor
from .text import TextSalaryExtractor

logger = get_logger(__name__, component="extractors")

DEFAULT_PROVIDER = "text"

_registry: Dict[str, SalaryExtractor] = {}


def register_extractor(provider: str, extractor: SalaryExtractor) -> None:
    """Register (or replace) the extractor for a provider."""
    key = provider.strip().lower()
    if not key:
        raise ValueError("provider cannot be empty")
    _registry[key] = extractor


def get_extractor(provider: Optional[str]) -> SalaryExtractor:
    key = (provider or "").strip().lower()
    return _registry.get(key) or _registry[DEFAULT_PROVIDER]


def registered_providers() -> list[str]:
    return sorted(_registry)


def extract_salary(
    provider: Optional[str],
    payload: Mapping[str, Any],
    logger_instance: Optional[logging.Logger] = None,
) -> Optional[ExtractedSalary]:
    """Run the provider's extractor, treating any extractor failure as "no salary"."""
    log = logger_instance or logger
    extractor = get_extractor(provider)
    try:
        return extractor.extract(payload)
    except Exception as e:
        log.warning(
            f"Salary extractor {type(extractor).__name__} failed: {e}",
            extra={
                "event": "extractor.failed",
                "provider": provider,
                "error_type": type(e).__name__,
            },
        )
        return None


def reset_registry() -> None:
    """Restore the built-in extractors."""
    _registry.clear()
    register_extractor("text", TextSalaryExtractor())
    register_extractor("greenhouse", GreenhouseSalaryExtractor())
    register_extractor("lever", LeverSalaryExtractor())
    register_extractor("ashby", AshbySalaryExtractor())


reset_registry()
