from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime


# Form field name -> column name, in the order the form lists them
FORM_FIELDS: Dict[str, str] = {
    "title": "title",
    "companyName": "company_name",
    "location": "location",
    "jobType": "job_type",
    "experience": "experience",
    "salaryRange": "salary_range",
    "description": "description",
    "requirements": "requirements",
    "responsibilities": "responsibilities",
    "applicationDeadline": "application_deadline",
}

REQUIRED_FORM_FIELDS: List[str] = ["title", "companyName", "location", "jobType", "description"]


class JobCreateRequest(BaseModel):
    """Validated fields for a new job posting"""
    title: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    job_type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    experience: Optional[str] = None
    salary_range: Optional[str] = None
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    application_deadline: Optional[datetime] = None

    @field_validator(
        "experience", "salary_range", "requirements", "responsibilities", mode="before"
    )
    @classmethod
    def empty_to_none(cls, v):
        """Optional fields sent as empty strings are stored as NULL"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("application_deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v):
        if isinstance(v, str):
            value = v.strip()
            if not value:
                return None
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return datetime.fromisoformat(value)
        return v


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    company_name: str
    location: str
    job_type: str
    experience: Optional[str] = None
    salary_range: Optional[str] = None
    description: str
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    application_deadline: Optional[datetime] = None
    company_profile_photo: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class JobFilters(BaseModel):
    """Filters accepted by the listing endpoint; blank values do not filter"""
    search_term: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    salary_range: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ErrorResponse(BaseModel):
    """Body returned for every handled error"""
    error: str
