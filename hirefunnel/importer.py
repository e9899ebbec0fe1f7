"""
Bulk import of candidate records in the persisted JSON shape.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ValidationError
from .logger import StructuredLogger, get_logger
from .models import Candidate
from .normalize import normalize_email
from .storage import CandidateStore


@dataclass
class ImportReport:
    imported: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.imported) + len(self.skipped) + len(self.errors)


def load_records(json_path: Path) -> List[Dict[str, Any]]:
    """Read a JSON array of records (or an object with a 'candidates' array)."""
    try:
        with json_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError([f"{json_path} is not valid JSON: {e}"]) from e
    if isinstance(data, dict):
        data = data.get("candidates", [])
    if not isinstance(data, list):
        raise ValidationError(["Import file must contain a JSON array of candidate records"])
    return data


def import_records(
    store: CandidateStore,
    records: List[Dict[str, Any]],
    dry_run: bool = False,
    logger: Optional[StructuredLogger] = None,
) -> ImportReport:
    """
    Insert records whose id is not already stored.

    Existing ids are skipped, never overwritten. Malformed records are
    reported per index and do not stop the import.
    """
    logger = logger or get_logger()
    report = ImportReport()

    for index, raw in enumerate(records):
        key = str(raw.get("id") or f"#{index}") if isinstance(raw, dict) else f"#{index}"
        try:
            if not isinstance(raw, dict) or not raw.get("id"):
                raise ValueError("record has no id")
            candidate = Candidate.from_dict(raw)
            candidate = candidate.evolve(id=candidate.id.upper(), email=normalize_email(candidate.email))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed record", record=key, error=str(e))
            report.errors[key] = str(e)
            continue

        if store.get_by_id(candidate.id) is not None:
            logger.debug("Record already stored, skipping", candidate_id=candidate.id)
            report.skipped.append(candidate.id)
            continue

        if not dry_run:
            store.upsert(candidate)
            logger.record_created()
        report.imported.append(candidate.id)

    logger.info(
        "Import finished",
        dry_run=dry_run,
        imported=len(report.imported),
        skipped=len(report.skipped),
        errors=len(report.errors),
    )
    return report
