"""
Candidate store backed by the SQLite database.

Whole-row writes only; no multi-row transactions. Every store failure is
logged and surfaced as PersistenceError, never retried here.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from .database import CandidateRecord, get_session_factory, init_database
from .errors import ConflictError, NotFoundError, PersistenceError
from .logger import StructuredLogger, get_logger
from .models import Candidate
from .normalize import normalize_email


def to_row(candidate: Candidate) -> Dict[str, Any]:
    d = candidate.to_dict()
    return {
        "id": d["id"],
        "first_name": d["firstName"],
        "last_name": d["lastName"],
        "email": d["email"],
        "phone": d["phone"],
        "city": d["city"] or "",
        "timestamp": d["timestamp"],
        "status": d["status"],
        "admin_data": d["adminData"],
        "applicant_questionnaire": d["applicantQuestionnaire"],
        "post_interview": d["postInterview"],
        "assessment": d["assessment"],
        "score": d["score"],
        "fit_category": d["fitCategory"],
    }


def from_row(row: CandidateRecord) -> Candidate:
    return Candidate.from_dict({
        "id": row.id,
        "firstName": row.first_name,
        "lastName": row.last_name,
        "email": row.email,
        "phone": row.phone,
        "city": row.city,
        "timestamp": row.timestamp,
        "status": row.status,
        "adminData": row.admin_data,
        "applicantQuestionnaire": row.applicant_questionnaire,
        "postInterview": row.post_interview,
        "assessment": row.assessment,
        "score": row.score,
        "fitCategory": row.fit_category,
        "revision": row.revision,
    })


class CandidateStore:
    """Durable persistence keyed by candidate id."""

    def __init__(self, db_path: Path, logger: Optional[StructuredLogger] = None):
        self.db_path = db_path
        self.logger = logger or get_logger()
        init_database(db_path)
        self._Session = get_session_factory(db_path)

    def _fail(self, op: str, exc: Exception, **context) -> PersistenceError:
        self.logger.record_failure(type(exc).__name__, persistence=True)
        self.logger.error(f"Store {op} failed", error=str(exc), **context)
        return PersistenceError(f"Could not {op} candidate: {exc}")

    def list(self) -> List[Candidate]:
        """All candidates, newest first."""
        session = self._Session()
        try:
            rows = session.query(CandidateRecord).order_by(CandidateRecord.timestamp.desc()).all()
            return [from_row(r) for r in rows]
        except SQLAlchemyError as e:
            raise self._fail("list", e) from e
        finally:
            session.close()

    def get_by_id(self, candidate_id: str) -> Optional[Candidate]:
        session = self._Session()
        try:
            row = session.get(CandidateRecord, candidate_id)
            return from_row(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._fail("load", e, candidate_id=candidate_id) from e
        finally:
            session.close()

    def get_by_email(self, email: str) -> Optional[Candidate]:
        """Most recent candidate whose e-mail matches case-insensitively."""
        normalized = normalize_email(email)
        if not normalized:
            return None
        session = self._Session()
        try:
            row = (
                session.query(CandidateRecord)
                .filter(func.lower(func.trim(CandidateRecord.email)) == normalized)
                .order_by(CandidateRecord.timestamp.desc())
                .first()
            )
            return from_row(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._fail("load", e, email=normalized) from e
        finally:
            session.close()

    def upsert(self, candidate: Candidate, expected_revision: Optional[int] = None) -> Candidate:
        """
        Insert or fully overwrite a candidate row.

        Args:
            candidate: Record to persist
            expected_revision: When given, the write only succeeds if the stored
                revision still equals it (ConflictError otherwise)

        Returns:
            The candidate carrying its new revision number
        """
        session = self._Session()
        try:
            values = to_row(candidate)
            row = session.get(CandidateRecord, candidate.id)
            if row is None:
                revision = 1
                session.add(CandidateRecord(revision=revision, **values))
            else:
                if expected_revision is not None and row.revision != expected_revision:
                    raise ConflictError(candidate.id, expected_revision, row.revision)
                revision = row.revision + 1
                for key, value in values.items():
                    setattr(row, key, value)
                row.revision = revision
            session.commit()
            self.logger.debug("Candidate saved", candidate_id=candidate.id, revision=revision)
            return candidate.evolve(revision=revision)
        except SQLAlchemyError as e:
            session.rollback()
            raise self._fail("save", e, candidate_id=candidate.id) from e
        finally:
            session.close()

    def delete(self, candidate_id: str) -> None:
        """Delete a candidate. Raises NotFoundError when the id is unknown."""
        session = self._Session()
        try:
            row = session.get(CandidateRecord, candidate_id)
            if row is None:
                raise NotFoundError(f"No candidate with id {candidate_id}", key=candidate_id)
            session.delete(row)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise self._fail("delete", e, candidate_id=candidate_id) from e
        finally:
            session.close()
