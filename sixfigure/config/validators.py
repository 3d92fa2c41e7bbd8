"""Non-fatal configuration checks, reported as UserWarnings."""

import warnings
from typing import Any, Dict, List

from ..salary.tables import FX_UNITS_PER_USD


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check raw configuration for suspicious but valid settings.

    Args:
        config_dict: Raw configuration dictionary (before model validation)

    Returns:
        List of warning messages
    """
    warning_messages = []

    sources = config_dict.get("sources") or []
    if not sources:
        warning_messages.append("No sources configured; the ingest command will have nothing to fetch")
    for source in sources:
        if isinstance(source, dict) and not source.get("enabled", True):
            name = source.get("name", "Unknown")
            warning_messages.append(f"Source '{name}' is disabled and will be skipped")

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        max_jobs = advanced.get("max_jobs_per_source", 1000)
        if isinstance(max_jobs, int) and max_jobs > 5000:
            warning_messages.append(
                f"Large max_jobs_per_source ({max_jobs}) may cause performance issues"
            )

    repair = config_dict.get("repair") or {}
    if isinstance(repair, dict):
        for entry in repair.get("currency_patterns") or []:
            if not isinstance(entry, dict):
                continue
            currency = str(entry.get("currency", "")).strip().upper()
            if currency and currency not in FX_UNITS_PER_USD:
                warning_messages.append(
                    f"Currency pattern for {currency} has no USD conversion rate; "
                    "matching jobs will never be flagged as high-salary"
                )

    salary = config_dict.get("salary") or {}
    if isinstance(salary, dict):
        floor = salary.get("validity_floor")
        display = salary.get("display_ceiling")
        if isinstance(floor, int) and isinstance(display, int) and display <= floor:
            warning_messages.append(
                f"display_ceiling ({display}) is not above validity_floor ({floor}); "
                "every valid salary will render as 'High salary role'"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
