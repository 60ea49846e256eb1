"""
Display mapping for job listing cards.

Pure functions: a job record in, display values out. No I/O.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

# Company logos mapping
COMPANY_LOGOS: Dict[str, str] = {
    "Amazon": "https://www.pngmart.com/files/23/Amazon-Logo-White-PNG-File.png",
    "Tesla": "https://th.bing.com/th/id/OIP.QZRUtEA8SeOZrUtbE7XCegHaHa?rs=1&pid=ImgDetMain",
    "Microsoft": "https://upload.wikimedia.org/wikipedia/commons/4/44/Microsoft_logo.svg",
    "Google": "https://static.vecteezy.com/system/resources/previews/011/598/471/non_2x/google-logo-icon-illustration-free-vector.jpg",
    "Apple": "https://th.bing.com/th/id/OIP.9g4dkKVAUyciOuDI9_vEYQHaHa?rs=1&pid=ImgDetMain",
    "Facebook": "https://upload.wikimedia.org/wikipedia/commons/5/51/Facebook_f_logo_%282019%29.svg",
    "Spotify": "https://upload.wikimedia.org/wikipedia/commons/1/19/Spotify_logo_without_text.svg",
    "Netflix": "https://upload.wikimedia.org/wikipedia/commons/0/08/Netflix_2015_logo.svg",
}

DEFAULT_LOGO = "/default-company.png"

DEFAULT_COMPANY = "Unknown Company"
DEFAULT_EXPERIENCE = "1–3 yr Exp"
DEFAULT_LOCATION = "Onsite"
DEFAULT_SALARY = "N/A"
DEFAULT_JOB_TYPE = "Full-time"


@dataclass(frozen=True)
class JobCard:
    """Display values for one job listing"""
    id: Any
    title: str
    company: str
    logo: str
    logo_fallback: str
    posted: str
    experience: str
    location: str
    salary: str
    job_type: str
    description: str


def resolve_logo(company_name: Optional[str]) -> str:
    """Exact-name logo lookup, falling back to the default image."""
    if not company_name:
        return DEFAULT_LOGO
    return COMPANY_LOGOS.get(company_name, DEFAULT_LOGO)


def _parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _local_date(moment: datetime) -> date:
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def display_time(created_at: Union[str, datetime, None], now: Optional[datetime] = None) -> str:
    """
    Relative age label at calendar-day granularity.

    Args:
        created_at: Creation timestamp (datetime or ISO 8601 string)
        now: Reference time, defaults to the current local time

    Returns:
        "Today", "Yesterday" or "N days ago"; missing or unparseable
        timestamps count as today
    """
    created = _parse_timestamp(created_at)
    if created is None:
        return "Today"

    reference = now if now is not None else datetime.now()
    diff_days = (_local_date(reference) - _local_date(created)).days

    if diff_days <= 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    return f"{diff_days} days ago"


def render_job_card(job: Dict[str, Any], now: Optional[datetime] = None) -> JobCard:
    company_name = job.get("company_name")
    return JobCard(
        id=job.get("id"),
        title=job.get("title") or "",
        company=company_name or DEFAULT_COMPANY,
        logo=resolve_logo(company_name),
        logo_fallback=DEFAULT_LOGO,
        posted=display_time(job.get("created_at"), now=now),
        experience=job.get("experience") or DEFAULT_EXPERIENCE,
        location=job.get("location") or DEFAULT_LOCATION,
        salary=job.get("salary_range") or DEFAULT_SALARY,
        job_type=job.get("job_type") or DEFAULT_JOB_TYPE,
        description=job.get("description") or "",
    )


def render_job_listings(jobs: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[JobCard]:
    """Cards for every job, in the order given."""
    return [render_job_card(job, now=now) for job in jobs]
