"""
CSV export and plain-text assessment transcripts.
"""

import csv
import io
from typing import Any, Iterable, List, Optional, TextIO

from .models import Candidate, ExitQuestionnaire, IntakeQuestionnaire
from .questions import (
    COMPETITIVENESS_QUESTION,
    LIKERT_QUESTIONS,
    MONEY_MOTIVATION_QUESTION,
    TRUE_SCALE_QUESTIONS,
    likert_label,
    true_scale_label,
)

BASE_HEADERS = [
    "ID",
    "Name",
    "Email",
    "Phone",
    "City",
    "PipelineStage",
    "Rating",
    "DisqualifiedAtQuestionnaire",
    "DisqualifiedReason",
    "InterviewScheduledAt",
    "NextStep",
    "Tags",
    "NotesCount",
    "ResumeReviewedAt",
    "Occupation",
    "CurrentRole",
    "BackgroundAreas",
    "SalesExperience",
    "SomethingAboutYourself",
    "LegallyEntitledCanada",
    "WhatStoodOut",
    "WhyGoodFit",
    "FinancialInvestmentLicense",
    "LegallyEntitledCanadaFullTime",
    "ComfortableVirtual",
    "ExcitedOffSiteSocial",
    "PositionInterest",
    "QuestionsAboutOpportunity",
    "ContactPermission",
    "ResumeUrls",
    "Score",
    "Fit",
    "Interviewed",
    "CEO Invite",
    "Q1_Competitiveness",
    "Q2_MoneyMotivation",
]

TRANSCRIPT_TITLE = "Candidate assessment - Q&A"
TRANSCRIPT_PROMPT = (
    "Analyze the above assessment answers and provide a concise psychological summary of this "
    "candidate for a sales/leadership role. Include: competitive drive, fit for performance-based "
    "pay, leadership potential, and any concerns."
)


def csv_headers() -> List[str]:
    return (
        BASE_HEADERS
        + [f"Q{qid}" for qid, _ in LIKERT_QUESTIONS]
        + [f"Q{qid}" for qid, _ in TRUE_SCALE_QUESTIONS]
    )


def _blank(value: Any) -> Any:
    return "" if value is None else value


def _questionnaire_columns(q) -> List[Any]:
    """Questionnaire columns; fields the variant (or its legacy extras) lacks stay blank."""
    if q is None:
        return [""] * 16

    values = dict(q.extra)
    values.update(q.to_dict())
    if isinstance(q, IntakeQuestionnaire):
        entitled = q.legally_entitled_canada
    elif isinstance(q, ExitQuestionnaire):
        entitled = values.get("legallyEntitledCanada") or q.legally_entitled_canada_full_time
    else:
        entitled = ""

    return [
        values.get("occupation", ""),
        values.get("currentRole", ""),
        "; ".join(values.get("backgroundAreas") or []),
        values.get("salesExperience", ""),
        values.get("somethingAboutYourself", ""),
        entitled,
        values.get("whatStoodOut", ""),
        values.get("whyGoodFit", ""),
        values.get("financialInvestmentLicense", ""),
        values.get("legallyEntitledCanadaFullTime", ""),
        values.get("comfortableVirtualEnvironment", ""),
        values.get("excitedOffSiteSocial", ""),
        values.get("positionInterest", ""),
        values.get("questionsAboutOpportunity", ""),
        values.get("contactPermission", ""),
        "; ".join(q.resume_urls),
    ]


def candidate_row(c: Candidate) -> List[Any]:
    ad = c.admin_data
    a = c.assessment
    disq = ad.questionnaire_disqualified
    row = [
        c.id,
        c.full_name,
        c.email,
        c.phone,
        c.city,
        ad.pipeline_stage,
        _blank(ad.rating),
        "Yes" if disq else "",
        disq.reason if disq else "",
        _blank(ad.interview_scheduled_at),
        ad.next_step,
        "; ".join(ad.tags),
        len(ad.notes),
        _blank(ad.resume_reviewed_at),
    ]
    row += _questionnaire_columns(c.applicant_questionnaire)
    row += [
        _blank(c.score),
        c.fit_category or "N/A",
        "Yes" if c.post_interview and c.post_interview.interview_completed else "No",
        (c.post_interview.ceo_invite if c.post_interview else "") or "N/A",
        a.competitiveness if a else "",
        a.money_motivation if a else "",
    ]
    row += [likert_label(a.likert_responses.get(qid)) if a else "" for qid, _ in LIKERT_QUESTIONS]
    row += [true_scale_label(a.true_scale_responses.get(qid)) if a else "" for qid, _ in TRUE_SCALE_QUESTIONS]
    return row


def export_csv(candidates: Iterable[Candidate], out: Optional[TextIO] = None) -> str:
    """
    Write one CSV row per candidate.

    Cells are quoted only when they contain a comma, quote or newline;
    embedded quotes are doubled.

    Args:
        candidates: Records to export, in output order
        out: Optional stream to write to as well

    Returns:
        The CSV text
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(csv_headers())
    for c in candidates:
        writer.writerow(candidate_row(c))
    text = buf.getvalue()
    if out is not None:
        out.write(text)
    return text


def assessment_transcript(candidate: Candidate, include_prompt: bool = True) -> str:
    """Plain-text Q&A of a candidate's assessment, or '' when there is none."""
    a = candidate.assessment
    if a is None:
        return ""

    lines = [TRANSCRIPT_TITLE, ""]
    lines += [f"Q1. {COMPETITIVENESS_QUESTION}", f"Answer: {a.competitiveness}/10", ""]
    lines += [f"Q2. {MONEY_MOTIVATION_QUESTION}", f"Answer: {a.money_motivation}/10", ""]
    for qid, text in LIKERT_QUESTIONS:
        lines += [f"Q{qid}. {text}", f"Answer: {likert_label(a.likert_responses.get(qid)) or '-'}", ""]
    for qid, text in TRUE_SCALE_QUESTIONS:
        lines += [f"Q{qid}. {text}", f"Answer: {true_scale_label(a.true_scale_responses.get(qid)) or '-'}", ""]
    if include_prompt:
        lines += ["---", "", TRANSCRIPT_PROMPT]
    return "\n".join(lines)
