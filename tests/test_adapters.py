"""Unit tests for ATS adapters."""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
import requests

from sixfigure.adapters import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
    AshbyAdapter,
    GreenhouseAdapter,
    LeverAdapter,
    get_adapter,
)
from sixfigure.adapters.base import BaseAdapter
from sixfigure.config.models import AdvancedConfig, SourceConfig


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def greenhouse_config():
    return SourceConfig(name="Example Corp", type="greenhouse", identifier="examplecorp")


@pytest.fixture
def lever_config():
    return SourceConfig(name="Example Corp", type="lever", identifier="examplecorp", country_code="US")


@pytest.fixture
def ashby_config():
    return SourceConfig(name="Example Corp", type="ashby", identifier="example-org")


def greenhouse_job(job_id=1, **overrides):
    job = {
        "id": job_id,
        "title": "Staff Engineer",
        "location": {"name": "San Francisco, CA"},
        "content": "&lt;p&gt;Build things.&lt;/p&gt;",
        "absolute_url": f"https://boards.greenhouse.io/examplecorp/jobs/{job_id}",
        "first_published": "2025-11-01T12:00:00Z",
        "updated_at": "2025-11-02T08:30:00-04:00",
        "metadata": [],
    }
    job.update(overrides)
    return job


def http_response(status_code=200, body=None, reason="OK"):
    response = Mock(status_code=status_code, reason=reason)
    response.json.return_value = body
    return response


# ============================================================================
# Base Adapter Tests
# ============================================================================


class TestBaseAdapter:
    """Tests for the shared request and fetch behavior."""

    def test_cannot_instantiate_abstract_class(self):
        with pytest.raises(TypeError):
            BaseAdapter()

    @pytest.mark.parametrize("timeout", [1, 301])
    def test_init_with_invalid_timeout(self, timeout):
        with pytest.raises(AdapterConfigurationError, match="Timeout"):
            GreenhouseAdapter(timeout=timeout)

    def test_init_with_empty_user_agent(self):
        with pytest.raises(AdapterConfigurationError, match="user_agent"):
            GreenhouseAdapter(user_agent="   ")

    def test_session_carries_user_agent(self):
        adapter = GreenhouseAdapter(user_agent="  TestAgent/1.0 ")
        assert adapter._session.headers["User-Agent"] == "TestAgent/1.0"

    def test_make_request_returns_json(self):
        adapter = GreenhouseAdapter(timeout=10)
        with patch.object(adapter._session, "request", return_value=http_response(body={"jobs": []})) as request:
            assert adapter._make_request("https://example.test/jobs", params={"content": "true"}) == {"jobs": []}

        assert request.call_args.kwargs["timeout"] == 10
        assert request.call_args.kwargs["params"] == {"content": "true"}

    def test_make_request_timeout(self):
        adapter = GreenhouseAdapter()
        with patch.object(adapter._session, "request", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(AdapterTimeoutError) as exc_info:
                adapter._make_request("https://example.test/jobs")

        assert exc_info.value.url == "https://example.test/jobs"
        assert exc_info.value.is_retryable

    def test_make_request_connection_error_has_status_zero(self):
        adapter = GreenhouseAdapter()
        with patch.object(adapter._session, "request", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter._make_request("https://example.test/jobs")

        assert exc_info.value.status_code == 0
        assert exc_info.value.is_retryable

    def test_make_request_http_error(self):
        adapter = GreenhouseAdapter()
        with patch.object(adapter._session, "request", return_value=http_response(403, reason="Forbidden")):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter._make_request("https://example.test/jobs")

        assert exc_info.value.status_code == 403
        assert not exc_info.value.is_retryable

    def test_make_request_invalid_json(self):
        adapter = GreenhouseAdapter()
        response = http_response()
        response.json.side_effect = ValueError("Expecting value")
        with patch.object(adapter._session, "request", return_value=response):
            with pytest.raises(AdapterResponseError):
                adapter._make_request("https://example.test/jobs")

    def test_parse_timestamp(self):
        adapter = GreenhouseAdapter()
        assert adapter._parse_timestamp("2025-11-04T12:00:00Z") == datetime(2025, 11, 4, 12, tzinfo=timezone.utc)
        assert adapter._parse_timestamp("not-a-date") is None
        assert adapter._parse_timestamp(None) is None

    def test_truncate_jobs(self):
        adapter = GreenhouseAdapter(max_jobs=2)
        assert adapter._truncate_jobs([1, 2, 3], "examplecorp") == [1, 2]
        assert GreenhouseAdapter(max_jobs=0)._truncate_jobs([1, 2, 3], "examplecorp") == [1, 2, 3]


# ============================================================================
# Greenhouse Adapter Tests
# ============================================================================


class TestGreenhouseAdapter:
    """Tests for GreenhouseAdapter."""

    def test_fetch_jobs_success(self, greenhouse_config):
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [greenhouse_job()]}) as request:
            jobs = adapter.fetch_jobs(greenhouse_config)

        request.assert_called_once_with(
            "https://boards-api.greenhouse.io/v1/boards/examplecorp/jobs", params={"content": "true"}
        )
        assert len(jobs) == 1
        job = jobs[0]
        assert job.external_id == "1"
        assert job.company == "Example Corp"
        assert job.country_code == "US"
        assert job.description == "Build things."
        assert job.posted_at == datetime(2025, 11, 1, 12, tzinfo=timezone.utc)
        assert job.updated_at == datetime(2025, 11, 2, 12, 30, tzinfo=timezone.utc)
        assert job.salary_payload == {"content": "&lt;p&gt;Build things.&lt;/p&gt;"}

    def test_metadata_location_and_compensation(self, greenhouse_config):
        job = greenhouse_job(
            location={"name": "London"},
            metadata=[
                {"name": "Job Posting Location", "value": ["London, UK"]},
                {"name": "Salary Range", "value": "£120,000 - £150,000"},
                {"name": "Internal Code", "value": "X1"},
            ],
        )
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [job]}):
            raw = adapter.fetch_jobs(greenhouse_config)[0]

        assert raw.location == "London (London, UK)"
        assert raw.country_code == "GB"
        assert raw.description.endswith("Compensation: £120,000 - £150,000")
        assert "Internal Code" not in raw.description

    def test_missing_location_uses_source_country(self):
        config = SourceConfig(name="Example Corp", type="greenhouse", identifier="examplecorp", country_code="DE")
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [greenhouse_job(location=None)]}):
            raw = adapter.fetch_jobs(config)[0]

        assert raw.location is None
        assert raw.country_code == "DE"

    def test_empty_content_falls_back_to_title(self, greenhouse_config):
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [greenhouse_job(content=None)]}):
            assert adapter.fetch_jobs(greenhouse_config)[0].description == "Staff Engineer"

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_not_found_and_server_errors_return_empty_list(self, greenhouse_config, status_code):
        adapter = GreenhouseAdapter()
        error = AdapterHTTPError("boom", status_code=status_code, url="https://example.test")
        with patch.object(adapter, "_make_request", side_effect=error):
            assert adapter.fetch_jobs(greenhouse_config) == []

    def test_other_http_error_raises(self, greenhouse_config):
        adapter = GreenhouseAdapter()
        error = AdapterHTTPError("Forbidden", status_code=403, url="https://example.test")
        with patch.object(adapter, "_make_request", side_effect=error):
            with pytest.raises(AdapterHTTPError):
                adapter.fetch_jobs(greenhouse_config)

    def test_malformed_response_raises(self, greenhouse_config):
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value="invalid"):
            with pytest.raises(AdapterResponseError):
                adapter.fetch_jobs(greenhouse_config)

    def test_jobs_field_must_be_list(self, greenhouse_config):
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": {"id": 1}}):
            with pytest.raises(AdapterResponseError):
                adapter.fetch_jobs(greenhouse_config)

    def test_truncates_to_max_jobs(self, greenhouse_config):
        adapter = GreenhouseAdapter(max_jobs=2)
        response = {"jobs": [greenhouse_job(i) for i in range(1, 6)]}
        with patch.object(adapter, "_make_request", return_value=response):
            assert [job.external_id for job in adapter.fetch_jobs(greenhouse_config)] == ["1", "2"]

    def test_skips_invalid_jobs(self, greenhouse_config):
        broken = greenhouse_job(2)
        del broken["title"]
        adapter = GreenhouseAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [greenhouse_job(1), broken, greenhouse_job(3)]}):
            assert [job.external_id for job in adapter.fetch_jobs(greenhouse_config)] == ["1", "3"]


# ============================================================================
# Lever Adapter Tests
# ============================================================================


class TestLeverAdapter:
    """Tests for LeverAdapter."""

    @pytest.fixture
    def posting(self):
        return {
            "id": "abc-123",
            "text": "Senior Backend Engineer",
            "categories": {"location": "Toronto, Canada", "team": "Platform"},
            "country": "CA",
            "descriptionPlain": "Own the platform.",
            "additionalPlain": "Benefits included.",
            "hostedUrl": "https://jobs.lever.co/examplecorp/abc-123",
            "createdAt": 1730721600000,
            "updatedAt": 1730808000000,
            "salaryDescriptionPlain": "CA$150,000 - CA$180,000",
            "salaryRange": {"min": 150000, "max": 180000, "currency": "CAD", "interval": "per-year-salary"},
            "lists": [{"text": "Compensation", "content": "<li>CA$150,000 - CA$180,000</li>"}],
        }

    def test_fetch_jobs_success(self, lever_config, posting):
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value=[posting]) as request:
            jobs = adapter.fetch_jobs(lever_config)

        request.assert_called_once_with("https://api.lever.co/v0/postings/examplecorp", params={"mode": "json"})
        job = jobs[0]
        assert job.external_id == "abc-123"
        assert job.title == "Senior Backend Engineer"
        assert job.country_code == "CA"
        assert job.description == "Own the platform.\n\nBenefits included."
        assert job.salary_raw == "CA$150,000 - CA$180,000"
        assert job.salary_payload["salaryRange"]["currency"] == "CAD"
        assert job.salary_payload["lists"][0]["text"] == "Compensation"

    def test_epoch_millisecond_timestamps(self, lever_config, posting):
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value=[posting]):
            job = adapter.fetch_jobs(lever_config)[0]

        assert job.posted_at == datetime(2024, 11, 4, 12, tzinfo=timezone.utc)
        assert job.updated_at == datetime(2024, 11, 5, 12, tzinfo=timezone.utc)

    def test_country_falls_back_to_location_then_source(self, lever_config, posting):
        posting.pop("country")
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value=[posting]):
            assert adapter.fetch_jobs(lever_config)[0].country_code == "CA"

        posting["categories"] = {"location": "Remote"}
        with patch.object(adapter, "_make_request", return_value=[posting]):
            assert adapter.fetch_jobs(lever_config)[0].country_code == "US"

    def test_html_description_fallback(self, lever_config, posting):
        posting.pop("descriptionPlain")
        posting.pop("additionalPlain")
        posting["description"] = "<p>Own <b>the</b> platform.</p>"
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value=[posting]):
            assert adapter.fetch_jobs(lever_config)[0].description == "Own the platform."

    def test_wrapped_postings_response(self, lever_config, posting):
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value={"postings": [posting]}):
            assert len(adapter.fetch_jobs(lever_config)) == 1

    def test_unexpected_response_raises(self, lever_config):
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value="nope"):
            with pytest.raises(AdapterResponseError):
                adapter.fetch_jobs(lever_config)

    def test_empty_array(self, lever_config):
        adapter = LeverAdapter()
        with patch.object(adapter, "_make_request", return_value=[]):
            assert adapter.fetch_jobs(lever_config) == []


# ============================================================================
# Ashby Adapter Tests
# ============================================================================


class TestAshbyAdapter:
    """Tests for AshbyAdapter."""

    @pytest.fixture
    def posting(self):
        return {
            "id": "ashby-1",
            "title": "Principal Engineer",
            "location": "London",
            "address": {"postalAddress": {"addressCountry": "United Kingdom"}},
            "descriptionPlain": "Lead the platform.",
            "jobUrl": "https://jobs.ashbyhq.com/example-org/ashby-1",
            "publishedAt": "2025-10-01T09:00:00.000+00:00",
            "isListed": True,
            "compensation": {
                "scrapeableCompensationSalarySummary": "£120K – £150K",
                "summaryComponents": [
                    {
                        "compensationType": "Salary",
                        "interval": "1 YEAR",
                        "currencyCode": "GBP",
                        "minValue": 120000,
                        "maxValue": 150000,
                    }
                ],
            },
        }

    def test_fetch_jobs_success(self, ashby_config, posting):
        adapter = AshbyAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [posting]}) as request:
            jobs = adapter.fetch_jobs(ashby_config)

        request.assert_called_once_with(
            "https://api.ashbyhq.com/posting-api/job-board/example-org", params={"includeCompensation": "true"}
        )
        job = jobs[0]
        assert job.country_code == "GB"
        assert job.salary_raw == "£120K – £150K"
        assert job.salary_payload["compensation"]["summaryComponents"][0]["currencyCode"] == "GBP"
        assert job.posted_at == datetime(2025, 10, 1, 9, tzinfo=timezone.utc)

    def test_unlisted_jobs_are_dropped(self, ashby_config, posting):
        hidden = dict(posting, id="ashby-2", isListed=False)
        adapter = AshbyAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [posting, hidden]}):
            assert [job.external_id for job in adapter.fetch_jobs(ashby_config)] == ["ashby-1"]

    def test_missing_compensation(self, ashby_config, posting):
        posting["compensation"] = None
        posting["descriptionPlain"] = ""
        posting["descriptionHtml"] = "<p>Lead.</p>"
        adapter = AshbyAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [posting]}):
            job = adapter.fetch_jobs(ashby_config)[0]

        assert job.salary_raw is None
        assert job.salary_payload == {"compensation": {}}
        assert job.description == "Lead."

    def test_apply_url_fallback(self, ashby_config, posting):
        posting.pop("jobUrl")
        posting["applyUrl"] = "https://jobs.ashbyhq.com/example-org/ashby-1/application"
        adapter = AshbyAdapter()
        with patch.object(adapter, "_make_request", return_value={"jobs": [posting]}):
            assert adapter.fetch_jobs(ashby_config)[0].url.endswith("/application")

    def test_missing_jobs_field(self, ashby_config):
        adapter = AshbyAdapter()
        with patch.object(adapter, "_make_request", return_value={}):
            assert adapter.fetch_jobs(ashby_config) == []

    def test_non_object_response_raises(self, ashby_config):
        adapter = AshbyAdapter()
        with patch.object(adapter, "_make_request", return_value=[]):
            with pytest.raises(AdapterResponseError):
                adapter.fetch_jobs(ashby_config)


# ============================================================================
# Factory Tests
# ============================================================================


class TestAdapterFactory:
    """Tests for get_adapter()."""

    @pytest.mark.parametrize(
        "ats_type,adapter_class",
        [("greenhouse", GreenhouseAdapter), ("lever", LeverAdapter), ("ashby", AshbyAdapter)],
    )
    def test_creates_adapter(self, ats_type, adapter_class):
        source = SourceConfig(name="Example", type=ats_type, identifier="example")
        assert isinstance(get_adapter(source, AdvancedConfig()), adapter_class)

    def test_passes_advanced_config(self, greenhouse_config):
        advanced = AdvancedConfig(http_request_timeout=10, user_agent="TestAgent/2.0", max_jobs_per_source=5)
        adapter = get_adapter(greenhouse_config, advanced)

        assert adapter.timeout == 10
        assert adapter.user_agent == "TestAgent/2.0"
        assert adapter.max_jobs == 5

    def test_unknown_type_raises(self):
        source = SourceConfig.model_construct(name="Example", type="workday", identifier="example")
        with pytest.raises(AdapterConfigurationError, match="Unknown ATS type"):
            get_adapter(source, AdvancedConfig())


class TestAdapterExceptions:
    def test_exception_hierarchy(self):
        for exc_class in (AdapterHTTPError, AdapterTimeoutError, AdapterResponseError, AdapterConfigurationError):
            assert issubclass(exc_class, AdapterError)

    def test_http_error_attributes(self):
        error = AdapterHTTPError("Server error", status_code=502, url="https://example.test")
        assert error.status_code == 502
        assert error.url == "https://example.test"
        assert error.is_retryable
