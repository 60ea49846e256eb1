"""
Database operations for the jobs table.

This layer keeps SQL construction out of the API routes.
"""

from jobboard.crud import job

__all__ = ["job"]
