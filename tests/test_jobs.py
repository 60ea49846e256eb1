"""
Test suite for the job endpoints.

Tests cover:
- Job creation and validation
- Company photo uploads
- Job listing order and filters
- Error handling
"""

import os
from datetime import datetime

import pytest
from sqlalchemy import insert
from sqlalchemy.exc import OperationalError

from jobboard.models.job import Job

REQUIRED_FIELDS = ["title", "companyName", "location", "jobType", "description"]
FIELD_TO_KEY = {
    "title": "title",
    "companyName": "company_name",
    "location": "location",
    "jobType": "job_type",
    "experience": "experience",
    "salaryRange": "salary_range",
    "description": "description",
    "requirements": "requirements",
    "responsibilities": "responsibilities",
}


def stored_files(storage):
    return sorted(os.listdir(storage.base_dir))


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, sample_job_data):
        response = client.post("/api/jobs", data=sample_job_data)

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["created_at"]
        for field, key in FIELD_TO_KEY.items():
            assert data[key] == sample_job_data[field]
        assert data["application_deadline"].startswith("2030-01-31T00:00:00")
        assert data["company_profile_photo"] is None

    def test_optional_fields_default_to_null(self, client, minimal_job_data):
        response = client.post("/api/jobs", data=minimal_job_data)

        assert response.status_code == 201
        data = response.json()
        for key in ("experience", "salary_range", "requirements", "responsibilities",
                    "application_deadline", "company_profile_photo"):
            assert data[key] is None

    def test_empty_optional_fields_are_null_not_empty_strings(self, client, minimal_job_data):
        form = dict(minimal_job_data, experience="", salaryRange="", applicationDeadline="")
        response = client.post("/api/jobs", data=form)

        assert response.status_code == 201
        data = response.json()
        assert data["experience"] is None
        assert data["salary_range"] is None
        assert data["application_deadline"] is None

    def test_date_only_deadline_accepted(self, client, minimal_job_data):
        form = dict(minimal_job_data, applicationDeadline="2030-06-15")
        response = client.post("/api/jobs", data=form)

        assert response.status_code == 201
        assert response.json()["application_deadline"].startswith("2030-06-15T00:00:00")

    def test_client_cannot_set_photo_url(self, client, minimal_job_data):
        form = dict(minimal_job_data, company_profile_photo="http://evil.example/x.png")
        response = client.post("/api/jobs", data=form)

        assert response.status_code == 201
        assert response.json()["company_profile_photo"] is None


class TestJobValidation:
    """Tests for required field validation"""

    @pytest.mark.parametrize("missing_field", REQUIRED_FIELDS)
    def test_missing_required_field(self, client, sample_job_data, missing_field):
        form = dict(sample_job_data)
        del form[missing_field]

        response = client.post("/api/jobs", data=form)

        assert response.status_code == 400
        assert missing_field in response.json()["error"]
        assert client.get("/api/jobs").json() == []

    @pytest.mark.parametrize("blank_field", REQUIRED_FIELDS)
    def test_blank_required_field(self, client, sample_job_data, blank_field):
        form = dict(sample_job_data, **{blank_field: "   "})

        response = client.post("/api/jobs", data=form)

        assert response.status_code == 400
        assert client.get("/api/jobs").json() == []

    def test_error_lists_every_missing_field(self, client):
        response = client.post("/api/jobs", data={"title": "Only a title"})

        assert response.status_code == 400
        error = response.json()["error"]
        for field in ("companyName", "location", "jobType", "description"):
            assert field in error
        assert "title" not in error.split(":")[1]

    def test_invalid_deadline(self, client, minimal_job_data):
        form = dict(minimal_job_data, applicationDeadline="next tuesday")

        response = client.post("/api/jobs", data=form)

        assert response.status_code == 400
        assert "applicationDeadline" in response.json()["error"]
        assert client.get("/api/jobs").json() == []


class TestPhotoUpload:
    """Tests for company photo uploads"""

    def test_upload_builds_photo_url(self, client, storage, minimal_job_data):
        response = client.post(
            "/api/jobs",
            data=minimal_job_data,
            files={"companyProfilePhoto": ("logo.png", b"\x89PNG fake image", "image/png")},
        )

        assert response.status_code == 201
        photo_url = response.json()["company_profile_photo"]
        assert photo_url.startswith("http://testserver/uploads/companyProfilePhoto-")
        assert photo_url.endswith(".png")

        filename = photo_url.rsplit("/", 1)[1]
        assert stored_files(storage) == [filename]

        served = client.get(f"/uploads/{filename}")
        assert served.status_code == 200
        assert served.content == b"\x89PNG fake image"

    def test_upload_at_size_limit_succeeds(self, client, storage, minimal_job_data):
        response = client.post(
            "/api/jobs",
            data=minimal_job_data,
            files={"companyProfilePhoto": ("logo.jpg", b"x" * storage.max_bytes, "image/jpeg")},
        )

        assert response.status_code == 201
        assert len(stored_files(storage)) == 1

    def test_upload_over_size_limit_rejected(self, client, storage, minimal_job_data):
        response = client.post(
            "/api/jobs",
            data=minimal_job_data,
            files={"companyProfilePhoto": ("logo.jpg", b"x" * (storage.max_bytes + 1), "image/jpeg")},
        )

        assert response.status_code == 413
        assert "error" in response.json()
        assert stored_files(storage) == []
        assert client.get("/api/jobs").json() == []

    def test_same_filename_produces_distinct_files(self, client, storage, minimal_job_data):
        urls = []
        for content in (b"first", b"second"):
            response = client.post(
                "/api/jobs",
                data=minimal_job_data,
                files={"companyProfilePhoto": ("logo.png", content, "image/png")},
            )
            assert response.status_code == 201
            urls.append(response.json()["company_profile_photo"])

        assert urls[0] != urls[1]
        assert len(stored_files(storage)) == 2

    def test_missing_file_is_not_an_error(self, client, minimal_job_data):
        response = client.post("/api/jobs", data=minimal_job_data)

        assert response.status_code == 201
        assert response.json()["company_profile_photo"] is None


class TestJobListing:
    """Tests for the listing endpoint"""

    def test_list_empty(self, client):
        response = client.get("/api/jobs")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_returns_newest_first(self, client, database, minimal_job_data):
        database.execute(
            insert(Job.__table__).values(
                title="Old posting",
                company_name="Tesla",
                location="Austin",
                job_type="Full-time",
                description="Posted a long time ago",
                created_at=datetime(2020, 1, 1),
            )
        )

        created_ids = []
        for i in range(3):
            form = dict(minimal_job_data, title=f"Job {i}")
            created_ids.append(client.post("/api/jobs", data=form).json()["id"])

        response = client.get("/api/jobs")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 4
        assert [job["id"] for job in data[:3]] == list(reversed(created_ids))
        assert data[-1]["title"] == "Old posting"

        timestamps = [job["created_at"] for job in data]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_blank_filters_return_everything(self, client, minimal_job_data):
        for i in range(3):
            client.post("/api/jobs", data=dict(minimal_job_data, title=f"Job {i}"))

        response = client.get(
            "/api/jobs",
            params={"searchTerm": "", "location": "", "jobType": "", "salaryRange": ""},
        )

        assert response.status_code == 200
        assert len(response.json()) == 3


class TestJobFilters:
    """Tests for server-side filtering"""

    @pytest.fixture
    def seeded(self, client, minimal_job_data):
        postings = [
            dict(minimal_job_data, title="Backend Engineer", companyName="Google",
                 location="Berlin", jobType="Full-time", salaryRange="$100k"),
            dict(minimal_job_data, title="Data Analyst", companyName="Netflix",
                 location="Remote", jobType="Part-time", salaryRange="$50k"),
            dict(minimal_job_data, title="Frontend Engineer", companyName="Spotify",
                 location="Berlin, DE", jobType="Contract", description="React and 100% TypeScript"),
        ]
        for form in postings:
            assert client.post("/api/jobs", data=form).status_code == 201
        return client

    def titles(self, response):
        return sorted(job["title"] for job in response.json())

    def test_search_term_matches_title(self, seeded):
        response = seeded.get("/api/jobs", params={"searchTerm": "engineer"})
        assert self.titles(response) == ["Backend Engineer", "Frontend Engineer"]

    def test_search_term_matches_company(self, seeded):
        response = seeded.get("/api/jobs", params={"searchTerm": "netflix"})
        assert self.titles(response) == ["Data Analyst"]

    def test_search_term_escapes_wildcards(self, seeded):
        response = seeded.get("/api/jobs", params={"searchTerm": "100%"})
        assert self.titles(response) == ["Frontend Engineer"]

    def test_location_filter(self, seeded):
        response = seeded.get("/api/jobs", params={"location": "berlin"})
        assert self.titles(response) == ["Backend Engineer", "Frontend Engineer"]

    def test_job_type_filter(self, seeded):
        response = seeded.get("/api/jobs", params={"jobType": "part-time"})
        assert self.titles(response) == ["Data Analyst"]

    def test_salary_filter(self, seeded):
        response = seeded.get("/api/jobs", params={"salaryRange": "$100k"})
        assert self.titles(response) == ["Backend Engineer"]

    def test_combined_filters(self, seeded):
        response = seeded.get("/api/jobs", params={"searchTerm": "engineer", "jobType": "Contract"})
        assert self.titles(response) == ["Frontend Engineer"]


class TestPersistenceErrors:
    """Tests for database failures at the request boundary"""

    def test_create_failure_returns_generic_error(self, client, storage, minimal_job_data, monkeypatch):
        def failing_create(*args, **kwargs):
            raise OperationalError("INSERT INTO jobs", {}, Exception("secret connection detail"))

        monkeypatch.setattr("jobboard.crud.job.create", failing_create)

        response = client.post(
            "/api/jobs",
            data=minimal_job_data,
            files={"companyProfilePhoto": ("logo.png", b"image", "image/png")},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "An error occurred while creating the job."}
        assert "secret" not in response.text
        assert stored_files(storage) == []

    def test_disk_failure_while_storing_photo_returns_generic_error(
        self, client, storage, minimal_job_data, monkeypatch
    ):
        def failing_store(*args, **kwargs):
            raise OSError("No space left on device")

        monkeypatch.setattr(storage, "store", failing_store)

        response = client.post(
            "/api/jobs",
            data=minimal_job_data,
            files={"companyProfilePhoto": ("logo.png", b"image", "image/png")},
        )

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"error": "An error occurred while creating the job."}
        assert "No space" not in response.text
        assert client.get("/api/jobs").json() == []

    def test_list_failure_returns_generic_error(self, client, monkeypatch):
        def failing_get_multi(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("secret connection detail"))

        monkeypatch.setattr("jobboard.crud.job.get_multi", failing_get_multi)

        response = client.get("/api/jobs")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch jobs."}

    def test_not_null_violation_is_server_fault(self, client, database, minimal_job_data, monkeypatch):
        from jobboard.crud import job as job_crud

        original_create = job_crud.create

        def create_without_title(db, job_data, photo_url=None):
            job_data = job_data.model_copy(update={"title": None})
            return original_create(db, job_data, photo_url)

        monkeypatch.setattr("jobboard.crud.job.create", create_without_title)

        response = client.post("/api/jobs", data=minimal_job_data)

        assert response.status_code == 500
        assert response.json()["error"] == "An error occurred while creating the job."
        monkeypatch.undo()
        assert client.get("/api/jobs").json() == []
