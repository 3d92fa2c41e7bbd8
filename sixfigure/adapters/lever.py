"""Lever ATS adapter implementation."""

from ..config.models import SourceConfig
from ..domain.models import RawJob
from ..utils.timestamps import from_unix_millis
from .base import BaseAdapter
from .exceptions import AdapterResponseError


class LeverAdapter(BaseAdapter):
    """Adapter for the Lever postings API.

    API Details:
        Endpoint: https://api.lever.co/v0/postings/{identifier}?mode=json
        Method: GET
        Authentication: None (public)
        Response: JSON array of posting objects (not wrapped in object)

    Salary data comes from the structured salaryRange object, the
    salaryDescriptionPlain text and any compensation section in lists.
    """

    ADAPTER_NAME = "lever"
    API_BASE_URL = "https://api.lever.co/v0/postings"

    def _fetch_postings(self, source_config: SourceConfig) -> list[dict]:
        url = f"{self.API_BASE_URL}/{source_config.identifier}"
        response = self._make_request(url, params={"mode": "json"})

        if isinstance(response, list):
            return response
        if isinstance(response, dict):
            postings = response.get("postings", [])
            if isinstance(postings, list):
                return postings
        raise AdapterResponseError(
            f"Expected JSON array of postings, got {type(response).__name__}"
        )

    def _transform_job(self, job: dict, source_config: SourceConfig) -> RawJob:
        """Map a Lever posting to a RawJob.

        Field mapping:
            id → external_id
            text → title
            categories.location → location
            country (ISO code) → country_code, falling back to the location
            descriptionPlain + additionalPlain → description
            salaryDescriptionPlain → salary_raw
            salaryRange, lists → salary_payload
            hostedUrl → url
            createdAt / updatedAt (epoch ms) → posted_at / updated_at
        """
        categories = job.get("categories") if isinstance(job.get("categories"), dict) else {}
        location = categories.get("location")

        country_code = job.get("country")
        if not (isinstance(country_code, str) and len(country_code.strip()) == 2):
            country_code = self._country_code(location, source_config)

        return RawJob(
            external_id=job["id"],
            title=job["text"],
            company=source_config.name,
            location=location,
            country_code=country_code,
            description=self._get_description(job) or job["text"],
            url=job["hostedUrl"],
            posted_at=from_unix_millis(job.get("createdAt")),
            updated_at=from_unix_millis(job.get("updatedAt")),
            salary_raw=job.get("salaryDescriptionPlain") or None,
            salary_payload={
                "salaryRange": job.get("salaryRange"),
                "lists": job.get("lists") or [],
            },
        )

    def _get_description(self, job: dict) -> str:
        """Plain-text description, falling back to cleaned HTML."""
        plain = [(job.get(key) or "").strip() for key in ("descriptionPlain", "additionalPlain")]
        if any(plain):
            return "\n\n".join(part for part in plain if part)

        markup = [(job.get(key) or "").strip() for key in ("description", "additional")]
        if any(markup):
            return self._clean_html("\n\n".join(part for part in markup if part))

        return ""
