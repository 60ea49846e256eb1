"""
Client-side controller for the job list.

Holds the fetched jobs together with loading, error and filter state, and
re-fetches whenever the filters change or a new job has been created.
Refreshes are numbered; a response that is not from the most recent refresh
is dropped so it cannot overwrite newer state.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class JobSubmissionError(Exception):
    """Raised when a job could not be created; carries a generic message only."""


@dataclass(frozen=True)
class JobFilters:
    """Filter set sent as query parameters with every refresh"""
    search_term: str = ""
    location: str = ""
    job_type: str = ""
    salary_range: str = ""

    def to_params(self) -> Dict[str, str]:
        return {
            "searchTerm": self.search_term,
            "location": self.location,
            "jobType": self.job_type,
            "salaryRange": self.salary_range,
        }


class JobListController:
    """
    State holder for a job listing view.

    Args:
        http_client: httpx client used for every request
        base_url: API root, e.g. "http://localhost:5000/api"
        on_change: Called with the controller after each state change
    """

    def __init__(
        self,
        http_client: httpx.Client,
        base_url: str = "/api",
        on_change: Optional[Callable[["JobListController"], None]] = None,
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.on_change = on_change

        self.jobs: List[Dict[str, Any]] = []
        self.is_loading = True
        self.is_error = False
        self.filters = JobFilters()

        self._lock = threading.Lock()
        self._latest_request = 0

    @property
    def jobs_url(self) -> str:
        return f"{self.base_url}/jobs"

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def refresh(self) -> None:
        """Fetch the job list with the current filters."""
        with self._lock:
            self._latest_request += 1
            request_id = self._latest_request
            filters = self.filters
            self.is_loading = True
            self.is_error = False
        self._notify()

        jobs: Optional[List[Dict[str, Any]]] = None
        failed = False
        try:
            response = self.http_client.get(self.jobs_url, params=filters.to_params())
            response.raise_for_status()
            jobs = response.json() if response.content else None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching job listings: {e}")
            failed = True

        # Latest-check and state writes happen under one lock
        with self._lock:
            stale = request_id != self._latest_request
            if not stale:
                if failed:
                    self.is_error = True
                else:
                    self.jobs = jobs or []
                self.is_loading = False

        if stale:
            logger.debug(f"Discarding stale job list response #{request_id}")
            return
        self._notify()

    def set_filters(self, filters: JobFilters) -> None:
        """Apply a new filter set, refreshing when it differs from the current one."""
        if filters == self.filters:
            return
        self.filters = filters
        self.refresh()

    def update_filters(self, **changes: str) -> None:
        self.set_filters(replace(self.filters, **changes))

    def handle_new_job(self) -> None:
        """Refresh after a job has been created elsewhere."""
        self.refresh()

    def submit_job(
        self,
        fields: Dict[str, str],
        photo: Optional[Tuple[str, BinaryIO, str]] = None,
    ) -> Dict[str, Any]:
        """
        Create a job through the API, then refresh the list.

        Args:
            fields: Form fields keyed by their API names (title, companyName, ...)
            photo: Optional (filename, stream, content type) for companyProfilePhoto

        Returns:
            The created job

        Raises:
            JobSubmissionError: If the job could not be created
        """
        files = {"companyProfilePhoto": photo} if photo is not None else None
        try:
            response = self.http_client.post(self.jobs_url, data=fields, files=files)
        except httpx.HTTPError as e:
            logger.error(f"Error submitting job: {e}")
            raise JobSubmissionError("Failed to create job. Please try again.") from e

        if response.status_code != 201:
            logger.error(f"Job submission rejected with status {response.status_code}: {response.text}")
            raise JobSubmissionError("Failed to create job. Please try again.")

        created = response.json()
        self.handle_new_job()
        return created
