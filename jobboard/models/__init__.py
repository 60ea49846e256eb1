"""
Database models package.
"""

from jobboard.models.job import Job

__all__ = ["Job"]
