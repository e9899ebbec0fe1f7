"""
Error taxonomy for the candidate funnel.

Every failure is reported to the immediate caller; nothing here is retried
automatically. The CLI maps each class to an exit code.
"""

from typing import List, Optional


class FunnelError(Exception):
    """Base class for all funnel errors."""
    exit_code = 1


class ValidationError(FunnelError):
    """Raised when a submission is missing required fields or is malformed.

    Always raised before any store call is made.
    """
    exit_code = 2

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "Invalid input")


class NotFoundError(FunnelError):
    """Raised when a lookup by id or e-mail finds nothing."""
    exit_code = 3

    def __init__(self, message: str = "No record found", key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class PersistenceError(FunnelError):
    """Raised when the store (or resume storage) call fails."""
    exit_code = 4


class ConflictError(PersistenceError):
    """Raised when a conditional write finds the revision has moved."""

    def __init__(self, candidate_id: str, expected: int, actual: int):
        self.candidate_id = candidate_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Candidate {candidate_id} was modified concurrently "
            f"(expected revision {expected}, found {actual})"
        )


class DuplicateRiskError(FunnelError):
    """Two or more records share one normalized e-mail.

    Not raised by the resolver; only reported by the audit path.
    """

    def __init__(self, email: str, candidate_ids: List[str]):
        self.email = email
        self.candidate_ids = list(candidate_ids)
        super().__init__(f"{len(self.candidate_ids)} records share {email}: {', '.join(self.candidate_ids)}")


class AssessmentAlreadyCompletedError(FunnelError):
    """Raised when a flow tries to re-enter a finished assessment."""
    exit_code = 2

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__(f"Candidate {candidate_id} has already completed the assessment")
