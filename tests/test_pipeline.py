"""Unit tests for the ingest pipeline runner.

Tests the IngestPipeline orchestration including:
- Source processing with fixture adapters
- Error handling and isolation (one source failure doesn't stop others)
- Lock behavior (prevents concurrent runs)
- Salary statistics collection and aggregation
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest

from sixfigure.adapters import AdapterHTTPError, get_adapter
from sixfigure.config.models import AppConfig, SalaryConfig, SourceConfig
from sixfigure.normalization import JobNormalizer
from sixfigure.persistence import JobRepository, SourceRepository, close_database, get_session, init_database
from sixfigure.pipeline import IngestPipeline, IngestRunResult, SourceRunStats
from tests.helpers import FixtureAdapter

PAY_RANGE = '<div class="pay-range"><span>$230,000</span><span>$300,000 USD</span></div>'

FIXTURE_DATA = {
    "test1": [
        {
            "external_id": "gh-1",
            "title": "Staff Engineer",
            "location": "New York, NY",
            "description": "Build the platform.",
            "salary_payload": {"content": PAY_RANGE},
        },
        {
            "external_id": "gh-2",
            "title": "Product Designer",
            "location": "Remote",
            "description": "Design things.",
        },
    ],
    "test2": [
        {
            "external_id": "lv-1",
            "title": "Senior Engineer",
            "location": "Austin, TX",
            "description": "Ship features.",
            "salary_payload": {
                "salaryRange": {"min": 150000, "max": 190000, "currency": "USD", "interval": "per-year-salary"}
            },
        }
    ],
}


@pytest.fixture
def temp_database():
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def app_config():
    return AppConfig(
        sources=[
            SourceConfig(name="Test Source 1", type="greenhouse", identifier="test1"),
            SourceConfig(name="Test Source 2", type="lever", identifier="test2"),
            SourceConfig(name="Disabled Source", type="ashby", identifier="off", enabled=False),
        ]
    )


def fixture_factory(source_config, advanced_config):
    return FixtureAdapter(FIXTURE_DATA)


class TestIngestPipeline:
    """Tests for IngestPipeline.run_once()."""

    @pytest.fixture(autouse=True)
    def setup_database(self, temp_database):
        yield

    def test_run_stores_jobs_and_counts_salaries(self, app_config):
        result = IngestPipeline(app_config, adapter_factory=fixture_factory).run_once()

        assert isinstance(result, IngestRunResult)
        assert not result.skipped
        assert [s.source_id for s in result.source_stats] == ["test1", "test2"]
        first, second = result.source_stats
        assert (first.fetched_count, first.upserted_count, first.with_salary_count, first.high_salary_count) == (
            2,
            2,
            1,
            1,
        )
        assert second.high_salary_count == 1
        assert result.total_fetched == 3
        assert result.total_upserted == 3
        assert result.total_with_salary == 2
        assert result.total_high_salary == 2
        assert not result.had_errors

        with get_session() as session:
            jobs = JobRepository(session).list_jobs()
            statuses = SourceRepository(session).get_all()

        assert [job.external_id for job in jobs] == ["gh-1", "lv-1", "gh-2"]
        assert jobs[0].min_annual == 230000
        assert jobs[2].min_annual is None
        assert {status.source_identifier for status in statuses} == {"test1", "test2"}
        assert all(status.last_success_at == result.run_started_at for status in statuses)

    def test_second_run_only_touches_last_seen(self, app_config):
        pipeline = IngestPipeline(app_config, adapter_factory=fixture_factory)
        first = pipeline.run_once()
        second = pipeline.run_once()

        assert second.total_upserted == 0
        assert sum(s.unchanged_count for s in second.source_stats) == 3
        assert second.total_high_salary == first.total_high_salary

        with get_session() as session:
            job = JobRepository(session).list_jobs(limit=1)[0]
        assert job.first_seen_at == first.run_started_at
        assert job.last_seen_at == second.run_started_at

    def test_adapter_error_is_isolated(self, app_config):
        failing = Mock()
        failing.fetch_jobs.side_effect = AdapterHTTPError("HTTP 403: Forbidden", status_code=403, url="https://x")

        def factory(source_config, advanced_config):
            return failing if source_config.identifier == "test1" else FixtureAdapter(FIXTURE_DATA)

        result = IngestPipeline(app_config, adapter_factory=factory).run_once()

        failed, succeeded = result.source_stats
        assert failed.had_errors
        assert failed.error_message == "HTTP 403: Forbidden"
        assert failed.fetched_count == 0
        assert not succeeded.had_errors
        assert succeeded.upserted_count == 1
        assert result.had_errors

        with get_session() as session:
            status = SourceRepository(session).get_by_identifier("test1")
        assert status.error_message == "HTTP 403: Forbidden"
        assert status.last_success_at is None

    def test_job_error_is_counted_and_others_continue(self, app_config):
        original = JobNormalizer.normalize

        def flaky(self, raw_job, source_config):
            if raw_job.external_id == "gh-2":
                raise RuntimeError("boom")
            return original(self, raw_job, source_config)

        with patch.object(JobNormalizer, "normalize", flaky):
            result = IngestPipeline(app_config, adapter_factory=fixture_factory).run_once()

        first = result.source_stats[0]
        assert first.error_count == 1
        assert first.upserted_count == 1
        assert not first.had_errors
        assert result.had_errors

    def test_disabled_sources_are_skipped(self, app_config):
        factory = Mock(side_effect=fixture_factory)
        IngestPipeline(app_config, adapter_factory=factory).run_once()

        identifiers = [call.args[0].identifier for call in factory.call_args_list]
        assert identifiers == ["test1", "test2"]

    def test_run_skipped_while_locked(self, app_config):
        pipeline = IngestPipeline(app_config, adapter_factory=fixture_factory)
        pipeline._lock.acquire()
        try:
            result = pipeline.run_once()
        finally:
            pipeline._lock.release()

        assert result.skipped
        assert result.source_stats == []

    def test_lock_released_after_run(self, app_config):
        pipeline = IngestPipeline(app_config, adapter_factory=fixture_factory)
        pipeline.run_once()
        assert pipeline._lock.acquire(blocking=False)
        pipeline._lock.release()


class TestPipelineSetup:
    def test_tables_come_from_salary_config(self):
        config = AppConfig(salary=SalaryConfig(validity_floor=250_000))
        assert IngestPipeline(config).tables.validity_floor == 250_000

    def test_default_adapter_factory(self):
        assert IngestPipeline(AppConfig()).adapter_factory is get_adapter


class TestRunModels:
    def test_totals(self):
        started = datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc)
        result = IngestRunResult(
            run_started_at=started,
            run_finished_at=started + timedelta(seconds=3),
            source_stats=[
                SourceRunStats(source_id="a", fetched_count=5, upserted_count=2, high_salary_count=1),
                SourceRunStats(source_id="b", fetched_count=1, error_count=1),
            ],
        )

        assert result.total_duration_seconds == 3.0
        assert result.total_fetched == 6
        assert result.total_upserted == 2
        assert result.total_high_salary == 1
        assert result.total_errors == 1
        assert result.had_errors

    def test_empty_run_has_no_errors(self):
        now = datetime(2025, 11, 4, tzinfo=timezone.utc)
        assert not IngestRunResult(run_started_at=now, run_finished_at=now).had_errors
