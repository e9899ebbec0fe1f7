"""
Recruiter-side edits to a candidate's admin metadata.

Every edit is a pure `AdminData -> AdminData` function applied through
`AdminService.apply_admin_update`, which writes the whole record back with a
single upsert.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional

from .errors import FunnelError, ValidationError
from .logger import StructuredLogger, get_logger
from .models import AdminData, AdminNote, Candidate, EmailLogEntry, PipelineStage, utc_now_iso
from .normalize import clean_str
from .questions import SUGGESTED_TAGS
from .resolver import RecordResolver
from .storage import CandidateStore

AdminUpdater = Callable[[AdminData], AdminData]

RATING_MIN = 1
RATING_MAX = 5


@dataclass
class BulkResult:
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


# Pure updaters

def add_note(text: str, author_email: Optional[str] = None) -> AdminUpdater:
    body = clean_str(text)
    if not body:
        raise ValidationError(["Note text must not be empty"])

    def update(admin: AdminData) -> AdminData:
        note = AdminNote(
            id=str(uuid.uuid4()),
            created_at=utc_now_iso(),
            text=body,
            author_email=clean_str(author_email) or None,
        )
        return replace(admin, notes=admin.notes + [note])
    return update


def set_pipeline_stage(stage: str) -> AdminUpdater:
    if stage not in PipelineStage.ALL:
        raise ValidationError([f"Unknown pipeline stage '{stage}'. Choose one of: {', '.join(PipelineStage.ALL)}"])
    return lambda admin: replace(admin, pipeline_stage=stage)


def toggle_rating(rating: int) -> AdminUpdater:
    """Clicking the current rating again clears it."""
    if not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationError([f"Rating must be from {RATING_MIN} to {RATING_MAX}"])
    return lambda admin: replace(admin, rating=None if admin.rating == rating else rating)


def set_interview_scheduled_at(value: Optional[str]) -> AdminUpdater:
    scheduled = clean_str(value) or None
    return lambda admin: replace(admin, interview_scheduled_at=scheduled)


def set_next_step(text: Optional[str]) -> AdminUpdater:
    step = clean_str(text)
    return lambda admin: replace(admin, next_step=step)


def add_tag(tag: str) -> AdminUpdater:
    name = clean_str(tag)
    if not name:
        raise ValidationError(["Tag must not be empty"])

    def update(admin: AdminData) -> AdminData:
        if name in admin.tags:
            return admin
        return replace(admin, tags=admin.tags + [name])
    return update


def suggested_tags(admin: AdminData) -> List[str]:
    """Quick-pick tags not yet on the candidate."""
    return [t for t in SUGGESTED_TAGS if t not in admin.tags]


def remove_tag(tag: str) -> AdminUpdater:
    name = clean_str(tag)
    return lambda admin: replace(admin, tags=[t for t in admin.tags if t != name])


def mark_resume_reviewed() -> AdminUpdater:
    def update(admin: AdminData) -> AdminData:
        if admin.resume_reviewed_at:
            return admin
        return replace(admin, resume_reviewed_at=utc_now_iso())
    return update


def log_email(subject: str, type: str = "manual") -> AdminUpdater:
    """Record that an e-mail went out. Nothing is actually sent."""
    text = clean_str(subject)
    if not text:
        raise ValidationError(["E-mail subject must not be empty"])

    def update(admin: AdminData) -> AdminData:
        entry = EmailLogEntry(sent_at=utc_now_iso(), subject=text, type=type)
        return replace(admin, emails_sent=admin.emails_sent + [entry])
    return update


def clear_disqualification() -> AdminUpdater:
    return lambda admin: replace(admin, questionnaire_disqualified=None)


class AdminService:
    """Applies admin updaters to stored candidates."""

    def __init__(
        self,
        store: CandidateStore,
        logger: Optional[StructuredLogger] = None,
        optimistic_locking: bool = False,
    ):
        self.store = store
        self.logger = logger or get_logger()
        self.optimistic_locking = optimistic_locking

    def _load(self, candidate_id: str) -> Candidate:
        return RecordResolver(self.store, logger=self.logger).get(candidate_id)

    def apply_admin_update(self, candidate: Candidate, updater: AdminUpdater, action: str = "update") -> Candidate:
        """
        Apply an updater to the candidate's admin data and persist the record.

        Args:
            candidate: Record as last read by the caller
            updater: Pure function over AdminData
            action: Short label for the log line

        Returns:
            The stored candidate with its new revision
        """
        updated = candidate.evolve(admin_data=updater(candidate.admin_data))
        expected = candidate.revision if self.optimistic_locking else None
        saved = self.store.upsert(updated, expected_revision=expected)
        self.logger.record_admin_update()
        self.logger.info("Admin update saved", candidate_id=saved.id, action=action)
        return saved

    def update(self, candidate_id: str, updater: AdminUpdater, action: str = "update") -> Candidate:
        return self.apply_admin_update(self._load(candidate_id), updater, action)

    def add_note(self, candidate_id: str, text: str, author_email: Optional[str] = None) -> Candidate:
        return self.update(candidate_id, add_note(text, author_email), "add_note")

    def set_pipeline_stage(self, candidate_id: str, stage: str) -> Candidate:
        return self.update(candidate_id, set_pipeline_stage(stage), "set_pipeline_stage")

    def toggle_rating(self, candidate_id: str, rating: int) -> Candidate:
        return self.update(candidate_id, toggle_rating(rating), "toggle_rating")

    def set_interview_scheduled_at(self, candidate_id: str, value: Optional[str]) -> Candidate:
        return self.update(candidate_id, set_interview_scheduled_at(value), "set_interview_scheduled_at")

    def set_next_step(self, candidate_id: str, text: Optional[str]) -> Candidate:
        return self.update(candidate_id, set_next_step(text), "set_next_step")

    def add_tag(self, candidate_id: str, tag: str) -> Candidate:
        return self.update(candidate_id, add_tag(tag), "add_tag")

    def remove_tag(self, candidate_id: str, tag: str) -> Candidate:
        return self.update(candidate_id, remove_tag(tag), "remove_tag")

    def mark_resume_reviewed(self, candidate_id: str) -> Candidate:
        return self.update(candidate_id, mark_resume_reviewed(), "mark_resume_reviewed")

    def log_email(self, candidate_id: str, subject: str, type: str = "manual") -> Candidate:
        return self.update(candidate_id, log_email(subject, type), "log_email")

    def clear_disqualification(self, candidate_id: str) -> Candidate:
        return self.update(candidate_id, clear_disqualification(), "clear_disqualification")

    def bulk_set_pipeline_stage(self, candidate_ids: List[str], stage: str) -> BulkResult:
        """
        Move several candidates to one stage, one at a time.

        Failures are collected per id; successful writes are not rolled back.
        """
        updater = set_pipeline_stage(stage)
        result = BulkResult()
        for candidate_id in candidate_ids:
            try:
                saved = self.update(candidate_id, updater, "bulk_set_pipeline_stage")
                result.succeeded.append(saved.id)
            except FunnelError as e:
                self.logger.record_failure(type(e).__name__)
                self.logger.warning("Bulk stage update failed", candidate_id=candidate_id, error=str(e))
                result.failed[candidate_id] = str(e)

        self.logger.info(
            "Bulk stage update finished",
            stage=stage,
            succeeded=len(result.succeeded),
            failed=len(result.failed),
        )
        return result

    def delete_candidate(self, candidate_id: str, confirm: bool = False) -> None:
        """Permanently delete a candidate. Requires confirm=True."""
        if not confirm:
            raise ValidationError(["Deletion must be confirmed"])
        self.store.delete(clean_str(candidate_id).upper())
        self.logger.record_deleted()
        self.logger.info("Candidate deleted", candidate_id=candidate_id)
