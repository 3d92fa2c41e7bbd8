"""Unit tests for domain models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from sixfigure.domain.models import Job, RawJob, SourceStatus


def raw_job(**overrides):
    values = dict(
        external_id="12345",
        title="Staff Software Engineer",
        company="Example Corp",
        location="London, UK",
        description="We are looking for a staff engineer.",
        url="https://boards.greenhouse.io/examplecorp/jobs/12345",
    )
    values.update(overrides)
    return RawJob(**values)


def job(**overrides):
    now = datetime(2025, 11, 3, 10, 0, 0, tzinfo=timezone.utc)
    values = dict(
        job_key="abc123",
        source_type="greenhouse",
        source_identifier="examplecorp",
        external_id="12345",
        title="Staff Software Engineer",
        company="Example Corp",
        description="We are looking for a staff engineer.",
        url="https://boards.greenhouse.io/examplecorp/jobs/12345",
        first_seen_at=now,
        last_seen_at=now,
        content_hash="a" * 64,
    )
    values.update(overrides)
    return Job(**values)


class TestRawJob:
    """Tests for RawJob model."""

    def test_valid_raw_job(self):
        posted = datetime(2025, 11, 1, 12, 0, 0, tzinfo=timezone.utc)
        raw = raw_job(posted_at=posted, salary_raw="£120,000 - £150,000", country_code="gb")

        assert raw.external_id == "12345"
        assert raw.posted_at == posted
        assert raw.salary_raw == "£120,000 - £150,000"
        assert raw.country_code == "GB"
        assert raw.salary_payload == {}

    def test_required_fields_are_stripped(self):
        raw = raw_job(title="  Staff Engineer  ", url=" https://example.com/jobs/1 ")
        assert raw.title == "Staff Engineer"
        assert raw.url == "https://example.com/jobs/1"

    @pytest.mark.parametrize("field", ["external_id", "title", "company", "description", "url"])
    def test_blank_required_field_rejected(self, field):
        with pytest.raises(ValidationError, match="cannot be empty"):
            raw_job(**{field: "   "})

    def test_blank_optional_fields_become_none(self):
        raw = raw_job(location="  ", salary_raw="", country_code=" ")
        assert raw.location is None
        assert raw.salary_raw is None
        assert raw.country_code is None

    def test_naive_timestamps_are_taken_as_utc(self):
        raw = raw_job(updated_at=datetime(2025, 11, 2, 14, 30))
        assert raw.updated_at == datetime(2025, 11, 2, 14, 30, tzinfo=timezone.utc)

    def test_offset_timestamps_are_converted(self):
        plus_two = timezone(timedelta(hours=2))
        raw = raw_job(posted_at=datetime(2025, 11, 2, 14, 30, tzinfo=plus_two))
        assert raw.posted_at == datetime(2025, 11, 2, 12, 30, tzinfo=timezone.utc)
        assert raw.posted_at.tzinfo == timezone.utc


class TestJob:
    """Tests for Job model."""

    def test_salary_defaults(self):
        record = job()

        assert record.min_annual is None
        assert record.currency is None
        assert not record.is_high_salary
        assert not record.is_hundred_k_local
        assert not record.salary_validated
        assert record.salary_band is None

    def test_source_type_is_lowercased(self):
        assert job(source_type="Lever").source_type == "lever"

    def test_unknown_source_type_rejected(self):
        with pytest.raises(ValidationError, match="source_type must be one of"):
            job(source_type="workday")

    def test_salary_fields(self):
        record = job(
            country_code="GB",
            salary_min=60.0,
            salary_max=80.0,
            salary_currency="GBP",
            salary_period="hour",
            salary_raw="£60 - £80 per hour",
        )

        assert record.salary_fields == {
            "salary_min": 60.0,
            "salary_max": 80.0,
            "min_annual": None,
            "max_annual": None,
            "currency": "GBP",
            "country_code": "GB",
            "salary_period": "hour",
            "salary_raw": "£60 - £80 per hour",
        }

    def test_salary_fields_prefer_resolved_currency(self):
        record = job(salary_currency="USD", currency="GBP", min_annual=90_000)
        assert record.salary_fields["currency"] == "GBP"
        assert record.salary_fields["min_annual"] == 90_000


class TestSourceStatus:
    """Tests for SourceStatus model."""

    def test_valid_status(self):
        status = SourceStatus(
            source_identifier="examplecorp",
            name="Example Corp",
            source_type="ASHBY",
            last_error_at=datetime(2025, 11, 3, 10, 0),
            error_message="HTTP 403: Forbidden",
        )

        assert status.source_type == "ashby"
        assert status.last_success_at is None
        assert status.last_error_at.tzinfo == timezone.utc

    def test_unknown_source_type_rejected(self):
        with pytest.raises(ValidationError):
            SourceStatus(source_identifier="x", name="X", source_type="smartrecruiters")
