"""
Record resolution: find a candidate by id or normalized e-mail, decide
create-vs-update, and merge resubmissions into the stored record.

The resolver is the only de-duplication gate; the store does not enforce
e-mail uniqueness, so two concurrent creates for one e-mail both succeed.
"""

import uuid
from dataclasses import fields, replace
from typing import Any, Dict, List, Optional, Tuple

from .errors import NotFoundError
from .logger import StructuredLogger, get_logger
from .models import QUESTIONNAIRE_KIND_KEY, Candidate, Questionnaire, utc_now_iso
from .normalize import clean_str, normalize_email, normalize_phone
from .storage import CandidateStore

ID_LENGTH = 8
_MAX_ID_ATTEMPTS = 5


def generate_candidate_id() -> str:
    """Short uppercase hex id (first block of a UUID4)."""
    return uuid.uuid4().hex[:ID_LENGTH].upper()


def _supplied(value: Any) -> bool:
    return value is not None and value != "" and value != []


def merge_urls(existing: List[str], incoming: List[str]) -> List[str]:
    """Append incoming URLs after the existing ones; existing order is kept."""
    return list(existing) + [u for u in incoming if u not in existing]


def merge_questionnaire(existing: Optional[Questionnaire], incoming: Optional[Questionnaire]) -> Optional[Questionnaire]:
    """
    Merge a resubmitted questionnaire into the stored one.

    Same variant: stored fields survive unless the new submission supplies a
    value. Different variant: the new one wins and the old answers are kept
    as legacy fields. Resume URLs are always concatenated.
    """
    if incoming is None:
        return existing
    if existing is None:
        return incoming

    urls = merge_urls(existing.resume_urls, incoming.resume_urls)

    if type(existing) is not type(incoming):
        legacy = {
            k: v for k, v in existing.to_dict().items()
            if k not in ("resumeUrls", QUESTIONNAIRE_KIND_KEY) and _supplied(v)
        }
        legacy.update(incoming.extra)
        return replace(incoming, resume_urls=urls, extra=legacy)

    changes: Dict[str, Any] = {}
    for f in fields(incoming):
        if f.name in ("resume_urls", "extra"):
            continue
        new_value = getattr(incoming, f.name)
        changes[f.name] = new_value if _supplied(new_value) else getattr(existing, f.name)
    extra = dict(existing.extra)
    extra.update(incoming.extra)
    return replace(existing, resume_urls=urls, extra=extra, **changes)


def merge_on_write(
    existing: Candidate,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    city: Optional[str] = None,
    questionnaire: Optional[Questionnaire] = None,
) -> Candidate:
    """Apply a partial resubmission to a stored candidate without losing data."""
    identity = {
        "first_name": clean_str(first_name),
        "last_name": clean_str(last_name),
        "email": normalize_email(email),
        "phone": normalize_phone(phone),
        "city": clean_str(city),
    }
    changes = {k: v for k, v in identity.items() if _supplied(v)}
    merged_q = merge_questionnaire(existing.applicant_questionnaire, questionnaire)
    return existing.evolve(applicant_questionnaire=merged_q, **changes)


class RecordResolver:
    """Finds or creates the candidate record behind a submission."""

    def __init__(self, store: CandidateStore, logger: Optional[StructuredLogger] = None):
        self.store = store
        self.logger = logger or get_logger()

    def find(self, email: str) -> Optional[Candidate]:
        return self.store.get_by_email(normalize_email(email))

    def lookup(self, email: str) -> Candidate:
        """Like find(), but a miss raises NotFoundError."""
        normalized = normalize_email(email)
        candidate = self.store.get_by_email(normalized) if normalized else None
        if candidate is None:
            raise NotFoundError("No record found for this email.", key=normalized)
        return candidate

    def get(self, candidate_id: str) -> Candidate:
        candidate = self.store.get_by_id(clean_str(candidate_id).upper())
        if candidate is None:
            raise NotFoundError(f"No record found for id {candidate_id}.", key=candidate_id)
        return candidate

    def _new_id(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate_id = generate_candidate_id()
            if self.store.get_by_id(candidate_id) is None:
                return candidate_id
            self.logger.warning("Candidate id collision, regenerating", candidate_id=candidate_id)
        return generate_candidate_id()

    def build(
        self,
        first_name: str = "",
        last_name: str = "",
        email: str = "",
        phone: str = "",
        city: str = "",
        questionnaire: Optional[Questionnaire] = None,
    ) -> Candidate:
        """Build an unsaved record with a fresh id and creation time."""
        return Candidate(
            id=self._new_id(),
            first_name=clean_str(first_name),
            last_name=clean_str(last_name),
            email=normalize_email(email),
            phone=normalize_phone(phone),
            city=clean_str(city),
            timestamp=utc_now_iso(),
            applicant_questionnaire=questionnaire,
        )

    def create(self, **identity: Any) -> Candidate:
        candidate = self.store.upsert(self.build(**identity))
        self.logger.record_created()
        self.logger.info("Candidate created", candidate_id=candidate.id, email=candidate.email)
        return candidate

    def resolve(self, email: str, **identity: Any) -> Tuple[Candidate, bool]:
        """
        Return the existing record for an e-mail, or create one.

        Returns:
            (candidate, created) where created is True for a new record
        """
        existing = self.find(email)
        if existing is not None:
            return existing, False
        return self.create(email=email, **identity), True


def find_duplicates(candidates: List[Candidate]) -> Dict[str, List[str]]:
    """Normalized e-mails held by more than one record, newest id first."""
    by_email: Dict[str, List[str]] = {}
    for c in sorted(candidates, key=lambda c: c.timestamp, reverse=True):
        email = normalize_email(c.email)
        if email:
            by_email.setdefault(email, []).append(c.id)
    return {email: ids for email, ids in by_email.items() if len(ids) > 1}
