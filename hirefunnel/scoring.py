"""
Assessment scoring.

Q1-2 (1-10 scales) count raw, Q3-20 (Likert 0-3) count raw, Q21-30
(true-scale 0-3, risk traits) are reverse-scored. The fit category compares
the unrounded percentage against the band floors.
"""

from dataclasses import dataclass
from typing import List

from .errors import ValidationError
from .models import AssessmentData, FitCategory
from .questions import ANSWER_MAX, LIKERT_IDS, SCALE_MAX, TRUE_SCALE_IDS

HIGH_FIT_THRESHOLD = 80.0
REVIEW_THRESHOLD = 50.0

MAX_SCORE = 2 * SCALE_MAX + ANSWER_MAX * (len(LIKERT_IDS) + len(TRUE_SCALE_IDS))  # 104


@dataclass(frozen=True)
class ScoreResult:
    score: int
    max_score: int
    percentage: float
    fit_category: str


def reverse_score(value: int) -> int:
    """Contribution of a true-scale answer: 'Always True' (3) scores 0."""
    return ANSWER_MAX - value


def fit_category_for(percentage: float) -> str:
    if percentage >= HIGH_FIT_THRESHOLD:
        return FitCategory.HIGH_FIT
    if percentage >= REVIEW_THRESHOLD:
        return FitCategory.REVIEW
    return FitCategory.NOT_ALIGNED


def missing_answers(assessment: AssessmentData) -> List[int]:
    """Question ids from the fixed bank that have no answer."""
    missing = [qid for qid in LIKERT_IDS if assessment.likert_responses.get(qid) is None]
    missing += [qid for qid in TRUE_SCALE_IDS if assessment.true_scale_responses.get(qid) is None]
    return missing


def score_assessment(assessment: AssessmentData, strict: bool = True) -> ScoreResult:
    """
    Score an assessment.

    Args:
        assessment: The submitted answers
        strict: Require the full answer set (raises ValidationError otherwise).
            With strict=False only answered items count towards score and max.

    Returns:
        ScoreResult with score, max_score, raw percentage and fit category
    """
    if strict:
        missing = missing_answers(assessment)
        if missing:
            raise ValidationError([f"Missing answer for Q{qid}" for qid in missing])

    score = assessment.competitiveness + assessment.money_motivation
    max_score = 2 * SCALE_MAX

    for qid in LIKERT_IDS:
        value = assessment.likert_responses.get(qid)
        if value is None:
            continue
        score += value
        max_score += ANSWER_MAX

    for qid in TRUE_SCALE_IDS:
        value = assessment.true_scale_responses.get(qid)
        if value is None:
            continue
        score += reverse_score(value)
        max_score += ANSWER_MAX

    percentage = 100 * score / max_score
    return ScoreResult(
        score=score,
        max_score=max_score,
        percentage=percentage,
        fit_category=fit_category_for(percentage),
    )
