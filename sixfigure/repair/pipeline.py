"""Salary repair pipeline.

Brings stored jobs back in line with the annual-salary invariant: every
min_annual / max_annual value is either inside the policy band or None, and
the high-salary flags agree with the stored values. Rows are processed one
at a time; a failing row is logged and counted, never fatal. Running the
pipeline twice with the same policy changes nothing the second time.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..logging import get_logger, log_context
from ..salary import (
    AnnualSalary,
    CurrencyPattern,
    SalaryInput,
    SalaryTables,
    parse_salary_from_text,
    resolve_annual_salary,
    salary_flags,
)
from ..salary.tables import DEFAULT_TABLES
from ..utils.timestamps import utc_now
from .models import RepairAction, RepairPolicy, RepairReport, SalaryRecord, SalaryRepairStore

logger = get_logger(__name__, component="repair")

_Range = Tuple[Optional[int], Optional[int]]


def rescale_cents(value: Optional[int], policy: RepairPolicy) -> Optional[int]:
    """value // 100 when value is above the band and the result lands inside it."""
    if value is None or value <= policy.max_threshold:
        return value
    scaled = value // 100
    return scaled if policy.in_band(scaled) else value


class SalaryRepairPipeline:
    """Repairs stored salary rows through a SalaryRepairStore.

    Args:
        store: Where candidate rows come from and updates go
        tables: Salary tables used to recompute flags
        patterns: Currency patterns for re-detection (None = built-in table)
        logger_instance: Logger instance (defaults to module logger)
    """

    def __init__(
        self,
        store: SalaryRepairStore,
        tables: Optional[SalaryTables] = None,
        patterns: Optional[Sequence[CurrencyPattern]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.tables = tables or DEFAULT_TABLES
        self.patterns = list(patterns) if patterns else None
        self.logger = logger_instance or logger

    def run(self, policy: Optional[RepairPolicy] = None, dry_run: bool = False) -> RepairReport:
        """Repair every candidate row the store returns for the policy.

        With dry_run the changes are computed and reported but not written.
        """
        policy = policy or RepairPolicy()
        report = RepairReport(policy=policy.name, dry_run=dry_run, started_at=utc_now())

        with log_context(run_id=uuid.uuid4().hex[:12], policy=policy.name, dry_run=dry_run):
            self.logger.info(
                "Salary repair started",
                extra={
                    "event": "repair.run.started",
                    "min_threshold": policy.min_threshold,
                    "max_threshold": policy.max_threshold,
                    "source_filter": policy.source_filter,
                },
            )

            for record in self.store.find_jobs_needing_repair(policy):
                report.scanned += 1
                try:
                    action = self.repair_record(record, policy, now=report.started_at)
                    if not action.changed:
                        report.unchanged += 1
                        continue
                    if not dry_run:
                        self.store.update_job_salary(record.job_key, action.changes)
                    report.updated += 1
                    report.actions.append(action)
                    self.logger.info(
                        "Salary repaired" if not dry_run else "Salary repair planned",
                        extra={
                            "event": "repair.job.updated" if not dry_run else "repair.job.planned",
                            "job_key": record.job_key,
                            "fields": ",".join(sorted(action.changes)),
                            "notes": ",".join(action.notes),
                        },
                    )
                except Exception as e:
                    report.failed += 1
                    report.errors.append(f"{record.job_key}: {e}")
                    self.logger.error(
                        f"Failed to repair job {record.job_key}: {e}",
                        exc_info=True,
                        extra={"event": "repair.job.failed", "job_key": record.job_key},
                    )

            report.finished_at = utc_now()
            self.logger.info(
                "Salary repair finished",
                extra={"event": "repair.run.completed", **report.summary()},
            )

        return report

    def repair_record(
        self,
        record: SalaryRecord,
        policy: RepairPolicy,
        now: Optional[datetime] = None,
    ) -> RepairAction:
        """Compute the corrected salary fields for one row.

        Steps: re-detect the currency from salary_raw, fall back to the
        published currency, derive annual values when missing, rescale
        cents-as-units values, drop a range that is still out of band (and
        derive from the raw amounts instead), then recompute the flags. Only
        fields whose value changes end up in the action.
        """
        notes = []
        currency = record.currency
        annual: _Range = (record.min_annual, record.max_annual)

        if policy.redetect_currency and record.salary_raw:
            parsed = parse_salary_from_text(record.salary_raw, self.patterns)
            if parsed is not None and parsed.currency and parsed.currency != currency:
                notes.append(f"currency-redetected:{currency or 'none'}->{parsed.currency}")
                currency = parsed.currency
                derived = resolve_annual_salary(
                    SalaryInput(salary_min=parsed.min, salary_max=parsed.max, salary_period=parsed.period)
                )
                if derived is not None:
                    annual = (derived.min_annual, derived.max_annual)

        if currency is None and record.salary_currency:
            currency = record.salary_currency
            notes.append("currency-copied")

        derived_tried = annual == (None, None)
        if derived_tried:
            annual = self._derive_annual(record)
            if annual != (None, None):
                notes.append("annual-derived")

        annual = self._settle(annual, policy, notes)

        # Nulled values fall back to the raw amounts, as a rerun would.
        if annual == (None, None) and not derived_tried:
            fallback = self._settle(self._derive_annual(record), policy, [])
            if fallback != (None, None):
                notes.append("annual-derived")
                annual = fallback

        min_annual, max_annual = annual

        if currency is None:
            currency = self.tables.currency_for_country(record.country_code)

        gated = None
        if min_annual is not None or max_annual is not None:
            gated = AnnualSalary(min_annual=min_annual, max_annual=max_annual, currency=currency)

        target: Dict[str, Any] = {
            "min_annual": min_annual,
            "max_annual": max_annual,
            "currency": currency,
        }
        flags = salary_flags(
            gated,
            currency,
            record.country_code,
            record.salary_source,
            title=record.title,
            now=now,
            tables=self.tables,
        )
        target.update(
            is_high_salary=flags["is_high_salary"],
            is_hundred_k_local=flags["is_hundred_k_local"],
            salary_band=flags["salary_band"],
        )
        if record.salary_source:
            target["salary_validated"] = flags["salary_validated"]

        changes = {key: value for key, value in target.items() if getattr(record, key) != value}
        return RepairAction(job_key=record.job_key, changes=changes, notes=notes if changes else [])

    @staticmethod
    def _settle(annual: _Range, policy: RepairPolicy, notes: List[str]) -> _Range:
        """Rescale cents when enabled, then drop the range if any bound is still out of band."""
        if policy.rescale_cents:
            rescaled = (rescale_cents(annual[0], policy), rescale_cents(annual[1], policy))
            if rescaled != annual:
                notes.append("cents-rescaled")
                annual = rescaled

        if any(value is not None and not policy.in_band(value) for value in annual):
            notes.append("out-of-band-nulled")
            return (None, None)
        return annual

    def _derive_annual(self, record: SalaryRecord) -> _Range:
        derived = resolve_annual_salary(
            SalaryInput(
                salary_min=record.salary_min,
                salary_max=record.salary_max,
                salary_period=record.salary_period,
            )
        )
        if derived is None and record.salary_raw:
            parsed = parse_salary_from_text(record.salary_raw, self.patterns)
            if parsed is not None:
                derived = resolve_annual_salary(
                    SalaryInput(salary_min=parsed.min, salary_max=parsed.max, salary_period=parsed.period)
                )
        if derived is None:
            return (None, None)
        return (derived.min_annual, derived.max_annual)
