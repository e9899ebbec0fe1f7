"""
Resume file storage.

Files are written under `<root>/<candidate_id>/<epoch_ms>-<safe_name>`; the
returned URL is what gets appended to the questionnaire's resume list.
"""

import re
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .errors import PersistenceError, ValidationError
from .logger import StructuredLogger, get_logger
from .models import Candidate, IntakeQuestionnaire
from .resolver import merge_urls
from .storage import CandidateStore

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def safe_filename(filename: str) -> str:
    name = _UNSAFE_CHARS.sub("_", Path(filename).name)
    return name or "resume"


class ResumeStorage:
    """Interface: store bytes for a candidate and return a retrievable URL."""

    def store(self, candidate_id: str, filename: str, data: bytes) -> str:
        raise NotImplementedError


class LocalResumeStorage(ResumeStorage):
    def __init__(self, root: Path, base_url: str, logger: Optional[StructuredLogger] = None):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.logger = logger or get_logger()

    def store(self, candidate_id: str, filename: str, data: bytes) -> str:
        if not data:
            raise ValidationError([f"Resume file '{filename}' is empty"])
        name = f"{int(time.time() * 1000)}-{safe_filename(filename)}"
        target = self.root / candidate_id / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            self.logger.record_failure(type(e).__name__, persistence=True)
            self.logger.error("Resume write failed", candidate_id=candidate_id, path=str(target), error=str(e))
            raise PersistenceError(f"Could not store resume {filename}: {e}") from e

        self.logger.debug("Resume stored", candidate_id=candidate_id, path=str(target), bytes=len(data))
        return f"{self.base_url}/{candidate_id}/{name}"


def attach_resumes(store: CandidateStore, candidate: Candidate, urls: List[str]) -> Candidate:
    """
    Append resume URLs to the candidate's questionnaire.

    A candidate without a questionnaire gets an empty intake one to hold the
    URLs. Existing URLs are never removed.
    """
    questionnaire = candidate.applicant_questionnaire or IntakeQuestionnaire()
    merged = merge_urls(questionnaire.resume_urls, urls)
    updated = candidate.evolve(applicant_questionnaire=replace(questionnaire, resume_urls=merged))
    return store.upsert(updated)
