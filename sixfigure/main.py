"""Main entry point for the Six Figure Jobs salary tooling."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, Sequence, Tuple

from sixfigure.config.environment import EnvironmentConfig
from sixfigure.config.exceptions import ConfigurationError
from sixfigure.config.loader import load_config
from sixfigure.config.models import AppConfig
from sixfigure.logging import get_logger
from sixfigure.logging.config import configure_logging
from sixfigure.persistence.database import close_database, get_session, init_database
from sixfigure.persistence.repositories import JobRepository
from sixfigure.pipeline import IngestPipeline
from sixfigure.repair import SalaryRepairPipeline
from sixfigure.salary import SalaryInput, SalaryTables, build_salary_text

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path, require_file=config_path is not None)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sixfigure",
        description="Six Figure Jobs - salary ingestion, normalization and repair",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("ingest", help="Fetch all enabled sources once and store their jobs")

    repair = subparsers.add_parser("repair", help="Re-derive stored salary fields")
    repair.add_argument("--policy", default="default", help="Repair policy name from config (default: default)")
    repair.add_argument("--dry-run", action="store_true", help="Report planned changes without writing them")

    subparsers.add_parser("audit", help="Count stored annual salaries outside the validity band")

    fmt = subparsers.add_parser("format", help="Print the display text for a salary")
    fmt.add_argument("--min-annual", type=float, default=None)
    fmt.add_argument("--max-annual", type=float, default=None)
    fmt.add_argument("--salary-min", type=float, default=None)
    fmt.add_argument("--salary-max", type=float, default=None)
    fmt.add_argument("--period", default=None, help="year, month, week, day or hour")
    fmt.add_argument("--currency", default=None, help="ISO currency code, e.g. GBP")
    fmt.add_argument("--country", default=None, help="ISO country code, e.g. GB")

    return parser


def run_ingest(app_config: AppConfig, tables: SalaryTables) -> int:
    result = IngestPipeline(app_config, tables=tables).run_once()
    print(
        f"Ingest completed: {result.total_fetched} fetched, "
        f"{result.total_upserted} stored, "
        f"{result.total_with_salary} with salary, "
        f"{result.total_high_salary} high-salary, "
        f"{result.total_errors} errors"
    )
    return 1 if result.had_errors else 0


def run_repair(app_config: AppConfig, tables: SalaryTables, policy_name: str, dry_run: bool) -> int:
    policy = app_config.repair.get_policy(policy_name)
    if policy is None:
        known = ", ".join(p.name for p in app_config.repair.policies)
        print(f"Unknown repair policy: {policy_name} (configured: {known})", file=sys.stderr)
        return 1

    with get_session() as session:
        pipeline = SalaryRepairPipeline(
            JobRepository(session),
            tables=tables,
            patterns=app_config.repair.patterns(),
        )
        report = pipeline.run(policy, dry_run=dry_run)

    mode = "planned" if dry_run else "updated"
    print(
        f"Repair '{report.policy}': {report.scanned} scanned, {report.updated} {mode}, "
        f"{report.unchanged} unchanged, {report.failed} failed"
    )
    for action in report.actions:
        print(f"  {action.job_key}: {', '.join(sorted(action.changes))} [{', '.join(action.notes)}]")
    return 1 if report.failed else 0


def run_audit(tables: SalaryTables) -> int:
    with get_session() as session:
        count = JobRepository(session).count_annual_out_of_band(tables.validity_floor, tables.validity_ceiling)

    logger.info(
        f"Audit found {count} jobs with out-of-band annual salary",
        extra={
            "event": "audit.completed",
            "out_of_band_count": count,
            "floor": tables.validity_floor,
            "ceiling": tables.validity_ceiling,
        },
    )
    print(f"{count} jobs with annual salary outside [{tables.validity_floor}, {tables.validity_ceiling}]")
    return 1 if count else 0


def run_format(args: argparse.Namespace, tables: SalaryTables) -> int:
    salary_input = SalaryInput(
        min_annual=args.min_annual,
        max_annual=args.max_annual,
        salary_min=args.salary_min,
        salary_max=args.salary_max,
        salary_period=args.period,
        currency=args.currency,
        country_code=args.country,
    )
    text = build_salary_text(salary_input, tables)
    print(text if text is not None else "")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure or invariant violations).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )
        tables = app_config.salary.build_tables()

        if args.command == "format":
            return run_format(args, tables)

        logger.info(
            "Six Figure Jobs starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "log_level": env_config.log_level,
            },
        )
        init_database(env_config.database_url)

        try:
            if args.command == "ingest":
                return run_ingest(app_config, tables)
            if args.command == "repair":
                return run_repair(app_config, tables, args.policy, args.dry_run)
            return run_audit(tables)
        finally:
            close_database()
            logger.info(
                "Six Figure Jobs stopped",
                extra={
                    "event": "service.stopping",
                    "command": args.command,
                    "uptime_seconds": round(time.time() - start_time, 2),
                },
            )

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
