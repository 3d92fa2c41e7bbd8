"""Greenhouse ATS adapter implementation."""

from __future__ import annotations

from ..config.models import SourceConfig
from ..domain.models import RawJob
from .base import BaseAdapter
from .exceptions import AdapterResponseError


class GreenhouseAdapter(BaseAdapter):
    """Adapter for the Greenhouse public job board API.

    API Details:
        Endpoint: https://boards-api.greenhouse.io/v1/boards/{identifier}/jobs?content=true
        Method: GET
        Authentication: None (public)
        Response: JSON object with 'jobs' array

    Greenhouse has no structured salary field. Pay ranges live in the
    posting HTML (the pay-transparency widget or free text), so the raw
    content is passed on as the salary payload.
    """

    ADAPTER_NAME = "greenhouse"
    API_BASE_URL = "https://boards-api.greenhouse.io/v1/boards"

    # Metadata fields worth appending to the description.
    METADATA_FIELDS = {
        "Career Site Department": "Department",
        "Department": "Department",
        "Employment Type": "Employment Type",
        "Compensation": "Compensation",
        "Salary Range": "Compensation",
    }

    def _fetch_postings(self, source_config: SourceConfig) -> list[dict]:
        url = f"{self.API_BASE_URL}/{source_config.identifier}/jobs"
        response = self._make_request(url, params={"content": "true"})

        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(response).__name__}"
            )

        jobs_data = response.get("jobs", [])
        if not isinstance(jobs_data, list):
            raise AdapterResponseError(
                f"Expected 'jobs' field to be array, got {type(jobs_data).__name__}"
            )
        return jobs_data

    def _metadata_text(self, metadata: list[dict] | None) -> str:
        lines = []
        for item in metadata or []:
            label = self.METADATA_FIELDS.get(item.get("name"))
            value = item.get("value")
            if not label or not value:
                continue
            value_str = ", ".join(filter(None, map(str, value))) if isinstance(value, list) else str(value)
            if value_str:
                lines.append(f"{label}: {value_str}")
        return "\n".join(lines)

    def _location(self, job: dict) -> str | None:
        top_level = (job.get("location") or {}).get("name")

        from_metadata = None
        for item in job.get("metadata") or []:
            if item.get("name") == "Job Posting Location" and item.get("value"):
                value = item["value"]
                from_metadata = ", ".join(filter(None, value)) if isinstance(value, list) else str(value)
                break

        if top_level and from_metadata and top_level.lower() != from_metadata.lower():
            return f"{top_level} ({from_metadata})"
        return top_level or from_metadata

    def _transform_job(self, job: dict, source_config: SourceConfig) -> RawJob:
        """Map a Greenhouse job object to a RawJob.

        Field mapping:
            id → external_id
            title → title
            location.name (+ "Job Posting Location" metadata) → location
            content + selected metadata → description (HTML cleaned)
            content (raw HTML) → salary_payload["content"]
            absolute_url → url
            first_published / updated_at → posted_at / updated_at
        """
        location = self._location(job)
        content = job.get("content") or ""
        metadata_text = self._metadata_text(job.get("metadata"))

        description = self._clean_html(content)
        if metadata_text:
            description = f"{description}\n\n{metadata_text}".strip()

        return RawJob(
            external_id=str(job["id"]),
            title=job["title"],
            company=source_config.name,
            location=location,
            country_code=self._country_code(location, source_config),
            description=description or job["title"],
            url=job["absolute_url"],
            posted_at=self._parse_timestamp(job.get("first_published")),
            updated_at=self._parse_timestamp(job.get("updated_at")),
            salary_payload={"content": content},
        )
