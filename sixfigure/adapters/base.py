"""Base adapter class with shared functionality for all ATS adapters.

BaseAdapter.fetch_jobs() is a template: subclasses supply
_fetch_postings() (one API call, returning the raw posting dicts) and
_transform_job() (one posting to a RawJob). Shared here are the HTTP
session, status-code policy, truncation and the per-posting error handling.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from ..config.models import SourceConfig
from ..domain.models import RawJob
from ..extractors.base import html_to_text
from ..logging import get_logger
from ..utils.location import infer_country_code
from ..utils.timestamps import parse_iso_datetime
from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")

DEFAULT_USER_AGENT = "SixFigureJobs/1.0 (+job-board-scraper)"


class BaseAdapter(ABC):
    """Base class for all ATS adapters.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        max_jobs: Maximum jobs to return per source (0 = unlimited)
    """

    ADAPTER_NAME = "base"

    def __init__(self, timeout: int = 30, user_agent: str = DEFAULT_USER_AGENT, max_jobs: int = 1000) -> None:
        """Initialize adapter with configuration.

        Raises:
            AdapterConfigurationError: If timeout is outside 5-300 seconds or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_jobs = max_jobs

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent, "Accept": "application/json"})

    def fetch_jobs(self, source_config: SourceConfig) -> list[RawJob]:
        """Fetch and transform all postings for one source.

        A missing board (404) and server errors (5xx) yield an empty list so
        the next run retries; other failures propagate.

        Returns:
            List of RawJob objects

        Raises:
            AdapterError: On fatal errors (4xx other than 404, malformed responses)
        """
        logger.info(
            f"Fetching jobs from {self.ADAPTER_NAME}",
            extra={
                "event": "adapter.fetch.started",
                "adapter": self.ADAPTER_NAME,
                "source": source_config.identifier,
            },
        )

        try:
            postings = self._fetch_postings(source_config)
        except AdapterHTTPError as e:
            if e.status_code == 404:
                logger.warning(
                    f"{self.ADAPTER_NAME} board not found",
                    extra={
                        "event": "adapter.fetch.not_found",
                        "adapter": self.ADAPTER_NAME,
                        "source": source_config.identifier,
                        "url": e.url,
                    },
                )
                return []
            if e.status_code >= 500:
                logger.warning(
                    f"{self.ADAPTER_NAME} API error (transient)",
                    extra={
                        "event": "adapter.fetch.transient_error",
                        "adapter": self.ADAPTER_NAME,
                        "source": source_config.identifier,
                        "status_code": e.status_code,
                    },
                )
                return []
            raise

        postings = self._truncate_jobs(postings, source_config.identifier)

        raw_jobs = []
        for posting in postings:
            try:
                raw_jobs.append(self._transform_job(posting, source_config))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(
                    f"Failed to transform {self.ADAPTER_NAME} posting",
                    extra={
                        "event": "adapter.transform.failed",
                        "adapter": self.ADAPTER_NAME,
                        "source": source_config.identifier,
                        "job_id": posting.get("id") if isinstance(posting, dict) else None,
                        "error": str(e),
                    },
                )

        logger.info(
            f"Fetched {len(raw_jobs)} jobs from {self.ADAPTER_NAME}",
            extra={
                "event": "adapter.fetch.completed",
                "adapter": self.ADAPTER_NAME,
                "source": source_config.identifier,
                "count": len(raw_jobs),
            },
        )
        return raw_jobs

    @abstractmethod
    def _fetch_postings(self, source_config: SourceConfig) -> list[dict]:
        """Call the ATS API and return the raw posting objects.

        Raises:
            AdapterHTTPError, AdapterTimeoutError, AdapterResponseError
        """

    @abstractmethod
    def _transform_job(self, job: dict, source_config: SourceConfig) -> RawJob:
        """Map one posting to a RawJob, including its salary payload.

        Raises:
            KeyError / ValueError / TypeError: If the posting is malformed
        """

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body.

        Raises:
            AdapterHTTPError: On 4xx or 5xx status, or a connection failure (status_code 0)
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On a body that is not JSON
        """
        request_headers = self._session.headers.copy()
        if headers:
            request_headers.update(headers)

        logger.debug(
            f"HTTP {method} request to {url}",
            extra={
                "event": "adapter.fetch.request",
                "method": method,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise AdapterHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if response.status_code >= 400:
            is_retryable = response.status_code >= 500
            logger.log(
                logging.WARNING if is_retryable else logging.ERROR,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.retryable_error" if is_retryable else "adapter.fetch.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "error_type": "JSONDecodeError",
                    "url": url,
                },
            )
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e

    def _clean_html(self, html_text: Optional[str]) -> str:
        return html_to_text(html_text)

    def _parse_timestamp(self, timestamp_str: Optional[str]) -> Optional[datetime]:
        parsed = parse_iso_datetime(timestamp_str)
        if timestamp_str and parsed is None:
            logger.warning(
                "Failed to parse timestamp",
                extra={"event": "adapter.timestamp.invalid", "timestamp": timestamp_str},
            )
        return parsed

    def _country_code(self, location: Optional[str], source_config: SourceConfig) -> Optional[str]:
        """Country inferred from the location, else the source's configured default."""
        return infer_country_code(location) or source_config.country_code

    def _truncate_jobs(self, jobs: list, source_identifier: str) -> list:
        if self.max_jobs > 0 and len(jobs) > self.max_jobs:
            logger.warning(
                "Truncating jobs to max_jobs limit",
                extra={
                    "event": "adapter.fetch.truncated",
                    "adapter": self.ADAPTER_NAME,
                    "source": source_identifier,
                    "total": len(jobs),
                    "max": self.max_jobs,
                },
            )
            return jobs[: self.max_jobs]

        return jobs
