from sqlalchemy import Column, Integer, String, Text, DateTime, func
from jobboard.core.database import Base


class Job(Base):
    """
    Job posting shown on the board.
    Rows are append-only: the API never updates or deletes them.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    company_name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    job_type = Column(String, nullable=False)
    experience = Column(String, nullable=True)
    salary_range = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    responsibilities = Column(Text, nullable=True)
    application_deadline = Column(DateTime(timezone=True), nullable=True)

    # Built by the server from the stored upload's filename
    company_profile_photo = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company='{self.company_name}')>"
