import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from jobboard.core.database import Database, DatabaseNotConnectedError, get_database
from jobboard.core.storage import LocalStorage, UploadTooLargeError, get_storage
from jobboard.crud import job as job_crud
from jobboard.schemas.job import (
    ErrorResponse,
    FORM_FIELDS,
    JobCreateRequest,
    JobFilters,
    JobResponse,
    REQUIRED_FORM_FIELDS,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)

PHOTO_FIELD = "companyProfilePhoto"
COLUMN_TO_FORM_FIELD = {column: field for field, column in FORM_FIELDS.items()}


def build_photo_url(request: Request, filename: str) -> str:
    """Public URL of a stored upload, served from the /uploads mount"""
    host = request.headers.get("host", request.url.netloc)
    return f"{request.url.scheme}://{host}/uploads/{filename}"


def _log_persistence_error(message: str, error: Exception) -> None:
    logger.exception(f"{message}: {error}")
    original = getattr(error, "orig", None)
    if original is not None:
        pgcode = getattr(original, "pgcode", None)
        if pgcode:
            logger.error(f"PostgreSQL error code: {pgcode}")
        diag = getattr(original, "diag", None)
        if diag is not None:
            if getattr(diag, "message_detail", None):
                logger.error(f"PostgreSQL error detail: {diag.message_detail}")
            if getattr(diag, "constraint_name", None):
                logger.error(f"PostgreSQL constraint violated: {diag.constraint_name}")


@router.get(
    "",
    response_model=List[JobResponse],
    responses={500: {"model": ErrorResponse}},
)
def list_jobs(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    location: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None, alias="jobType"),
    salary_range: Optional[str] = Query(None, alias="salaryRange"),
    db: Database = Depends(get_database),
):
    """
    List every job posting, newest first.

    Blank filters are ignored, so a request without filters returns the whole
    table. There is no pagination.
    """
    filters = JobFilters(
        search_term=search_term,
        location=location,
        job_type=job_type,
        salary_range=salary_range,
    )

    try:
        return job_crud.get_multi(db, filters)
    except (SQLAlchemyError, DatabaseNotConnectedError) as e:
        _log_persistence_error("Error fetching jobs", e)
        raise HTTPException(status_code=500, detail="Failed to fetch jobs.")


@router.post(
    "",
    status_code=201,
    response_model=JobResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def create_job(
    request: Request,
    title: Optional[str] = Form(None),
    company_name: Optional[str] = Form(None, alias="companyName"),
    location: Optional[str] = Form(None),
    job_type: Optional[str] = Form(None, alias="jobType"),
    experience: Optional[str] = Form(None),
    salary_range: Optional[str] = Form(None, alias="salaryRange"),
    description: Optional[str] = Form(None),
    requirements: Optional[str] = Form(None),
    responsibilities: Optional[str] = Form(None),
    application_deadline: Optional[str] = Form(None, alias="applicationDeadline"),
    company_profile_photo: Optional[UploadFile] = File(None, alias=PHOTO_FIELD),
    db: Database = Depends(get_database),
    storage: LocalStorage = Depends(get_storage),
):
    """
    Create a job posting from a multipart form.

    Flow:
    1. Reject the request if a required field is missing or blank
    2. Store the optional company photo under a generated filename
    3. Insert the row with a single parameterized statement
    4. Return the inserted row, including id and created_at
    """
    form = {
        "title": title,
        "companyName": company_name,
        "location": location,
        "jobType": job_type,
        "experience": experience,
        "salaryRange": salary_range,
        "description": description,
        "requirements": requirements,
        "responsibilities": responsibilities,
        "applicationDeadline": application_deadline,
    }
    has_photo = company_profile_photo is not None and bool(company_profile_photo.filename)
    logger.info(
        "Received job creation request",
        extra={"form": form, "photo": company_profile_photo.filename if has_photo else None},
    )

    missing = [name for name in REQUIRED_FORM_FIELDS if not (form[name] or "").strip()]
    if missing:
        logger.warning(f"Validation error: missing required fields {missing}")
        raise HTTPException(
            status_code=400,
            detail=f"Missing required job fields: {', '.join(missing)}."
        )

    try:
        job_data = JobCreateRequest(**{FORM_FIELDS[name]: value for name, value in form.items()})
    except ValidationError as e:
        invalid = sorted({COLUMN_TO_FORM_FIELD.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors()})
        logger.warning(f"Validation error: invalid fields {invalid}")
        raise HTTPException(
            status_code=400,
            detail=f"Invalid job fields: {', '.join(invalid)}."
        )

    stored_path = None
    if has_photo:
        try:
            stored_path = storage.store(
                company_profile_photo.file,
                company_profile_photo.filename,
                field_name=PHOTO_FIELD,
            )
        except UploadTooLargeError as e:
            raise HTTPException(status_code=413, detail=str(e))
        except OSError:
            logger.exception(f"Error storing upload '{company_profile_photo.filename}'")
            raise HTTPException(status_code=500, detail="An error occurred while creating the job.")

    photo_url = build_photo_url(request, storage.public_name(stored_path)) if stored_path else None
    logger.info(f"Constructed photo URL: {photo_url}")

    try:
        new_job = job_crud.create(db, job_data, photo_url)
    except (SQLAlchemyError, DatabaseNotConnectedError) as e:
        _log_persistence_error("Error creating job", e)
        if stored_path:
            storage.delete_file(stored_path)
        raise HTTPException(status_code=500, detail="An error occurred while creating the job.")

    logger.info(
        f"Created job {new_job['id']}: {new_job['title']} at {new_job['company_name']}",
        extra={"job_id": new_job["id"]},
    )
    return new_job
