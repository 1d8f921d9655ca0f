"""
Job claim domain exceptions.
"""


class ClaimError(Exception):
    """Base exception for job claim errors."""

    pass


class JobAlreadyClaimedError(ClaimError):
    """Raised when another contractor already holds the job."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} was already claimed by another contractor")


class SlotConflictError(ClaimError):
    """Raised when the chosen slot was booked between search and insert."""

    def __init__(self, contractor_id: str, scheduled_date: str):
        self.contractor_id = contractor_id
        self.scheduled_date = scheduled_date
        super().__init__(
            f"Slot {scheduled_date} for contractor {contractor_id} is no longer free"
        )


class ClaimRetryExceededError(ClaimError):
    """Raised when slot conflicts persist after every claim attempt."""

    def __init__(self, job_id: str, max_attempts: int):
        self.job_id = job_id
        self.max_attempts = max_attempts
        super().__init__(
            f"Claim of job {job_id} kept conflicting after {max_attempts} attempts"
        )
