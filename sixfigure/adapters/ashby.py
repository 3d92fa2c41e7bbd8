"""Ashby ATS adapter implementation."""

from typing import Optional

from ..config.models import SourceConfig
from ..domain.models import RawJob
from ..utils.location import infer_country_code
from .base import BaseAdapter
from .exceptions import AdapterResponseError


class AshbyAdapter(BaseAdapter):
    """Adapter for the Ashby public posting API.

    API Details:
        Endpoint: https://api.ashbyhq.com/posting-api/job-board/{identifier}?includeCompensation=true
        Method: GET
        Authentication: None (public job boards)
        Response: JSON object with 'jobs' array; each job carries a
            'compensation' block when includeCompensation is set
    """

    ADAPTER_NAME = "ashby"
    API_BASE_URL = "https://api.ashbyhq.com/posting-api/job-board"

    def _fetch_postings(self, source_config: SourceConfig) -> list[dict]:
        url = f"{self.API_BASE_URL}/{source_config.identifier}"
        response = self._make_request(url, params={"includeCompensation": "true"})

        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(response).__name__}"
            )

        jobs_data = response.get("jobs", [])
        if not isinstance(jobs_data, list):
            raise AdapterResponseError(
                f"Expected 'jobs' field to be array, got {type(jobs_data).__name__}"
            )
        return [job for job in jobs_data if job.get("isListed", True)]

    def _country(self, job: dict, location: Optional[str], source_config: SourceConfig) -> Optional[str]:
        address = ((job.get("address") or {}).get("postalAddress") or {})
        return infer_country_code(address.get("addressCountry")) or self._country_code(location, source_config)

    def _transform_job(self, job: dict, source_config: SourceConfig) -> RawJob:
        """Map an Ashby job posting to a RawJob.

        Field mapping:
            id → external_id
            title → title
            location → location
            address.postalAddress.addressCountry → country_code (then location)
            descriptionPlain / descriptionHtml → description
            compensation → salary_payload["compensation"]
            compensation.scrapeableCompensationSalarySummary → salary_raw
            jobUrl → url
            publishedAt / updatedAt → posted_at / updated_at
        """
        location = job.get("location")
        if isinstance(location, dict):
            location = location.get("name")

        description = (job.get("descriptionPlain") or "").strip() or self._clean_html(job.get("descriptionHtml"))
        compensation = job.get("compensation") or {}

        return RawJob(
            external_id=job["id"],
            title=job["title"],
            company=source_config.name,
            location=location,
            country_code=self._country(job, location, source_config),
            description=description or job["title"],
            url=job.get("jobUrl") or job["applyUrl"],
            posted_at=self._parse_timestamp(job.get("publishedAt")),
            updated_at=self._parse_timestamp(job.get("updatedAt")),
            salary_raw=compensation.get("scrapeableCompensationSalarySummary") or None,
            salary_payload={"compensation": compensation},
        )
