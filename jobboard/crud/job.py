"""
Statements for the jobs table.

Every function issues exactly one parameterized statement through the
Database gateway; the API layer never builds SQL itself.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import func, insert, or_, select

from jobboard.core.database import Database
from jobboard.models.job import Job
from jobboard.schemas.job import JobCreateRequest, JobFilters

jobs_table = Job.__table__


def _contains(column, value: str):
    return func.lower(column).contains(value.lower(), autoescape=True)


def _equals(column, value: str):
    return func.lower(column) == value.lower()


def get_multi(db: Database, filters: Optional[JobFilters] = None) -> List[Dict[str, Any]]:
    """
    Retrieve all jobs, newest first.

    Args:
        db: Database gateway
        filters: Optional filters; blank fields are ignored

    Returns:
        Job rows ordered by created_at descending (id breaks ties)
    """
    query = select(jobs_table)

    if filters is not None:
        if filters.search_term:
            query = query.where(or_(
                _contains(jobs_table.c.title, filters.search_term),
                _contains(jobs_table.c.company_name, filters.search_term),
                _contains(jobs_table.c.description, filters.search_term),
            ))
        if filters.location:
            query = query.where(_contains(jobs_table.c.location, filters.location))
        if filters.job_type:
            query = query.where(_equals(jobs_table.c.job_type, filters.job_type))
        if filters.salary_range:
            query = query.where(_equals(jobs_table.c.salary_range, filters.salary_range))

    query = query.order_by(jobs_table.c.created_at.desc(), jobs_table.c.id.desc())
    return db.execute(query)


def create(db: Database, job_data: JobCreateRequest, photo_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Insert a new job and return the stored row.

    Args:
        db: Database gateway
        job_data: Validated job fields
        photo_url: Public URL of the stored company photo, if any

    Returns:
        Inserted row including id and created_at
    """
    statement = (
        insert(jobs_table)
        .values(**job_data.model_dump(), company_profile_photo=photo_url)
        .returning(*jobs_table.c)
    )
    rows = db.execute(statement)
    return rows[0]
