"""Salary repair: re-derive stored salary fields so every job satisfies the annual-salary invariant.

Usage:
    from sixfigure.repair import SalaryRepairPipeline, RepairPolicy
    report = SalaryRepairPipeline(job_repository).run(RepairPolicy(), dry_run=True)
"""

from .models import (
    RepairAction,
    RepairPolicy,
    RepairReport,
    SalaryRecord,
    SalaryRepairStore,
    needs_repair,
)
from .pipeline import SalaryRepairPipeline, rescale_cents

__all__ = [
    "SalaryRepairPipeline",
    "SalaryRepairStore",
    "SalaryRecord",
    "RepairPolicy",
    "RepairAction",
    "RepairReport",
    "needs_repair",
    "rescale_cents",
]
