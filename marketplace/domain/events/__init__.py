"""
Domain events package.
"""

from .job_claimed import JobClaimed

__all__ = ["JobClaimed"]
