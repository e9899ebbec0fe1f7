"""
Domain types for the candidate record.

`to_dict()` / `from_dict()` speak the persisted camelCase record shape; the
Python attributes use snake_case. `AdminData` is always fully populated, so
read sites never merge defaults themselves.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional, Union


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CandidateStatus:
    NEW = "new"
    INTERVIEW_COMPLETE = "interview_complete"
    ASSESSMENT_STARTED = "assessment_started"
    ASSESSMENT_COMPLETE = "assessment_complete"

    ORDER = (NEW, INTERVIEW_COMPLETE, ASSESSMENT_STARTED, ASSESSMENT_COMPLETE)


class PipelineStage:
    APPLIED = "Applied"
    SCREENING = "Screening"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    INTERVIEWED = "Interviewed"
    OFFER = "Offer"
    HIRED = "Hired"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"

    ALL = (APPLIED, SCREENING, INTERVIEW_SCHEDULED, INTERVIEWED, OFFER, HIRED, REJECTED, WITHDRAWN)
    TERMINAL = (HIRED, REJECTED, WITHDRAWN)


class FitCategory:
    HIGH_FIT = "High Fit"
    REVIEW = "Review"
    NOT_ALIGNED = "Not Aligned"

    ALL = (HIGH_FIT, REVIEW, NOT_ALIGNED)


# Persisted questionnaire variant tag; rows written before it existed lack it.
QUESTIONNAIRE_KIND_KEY = "questionnaireKind"


def _require_dict(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _responses_to_dict(responses: Dict[int, int]) -> Dict[str, int]:
    return {str(k): v for k, v in sorted(responses.items())}


def _responses_from_dict(raw: Optional[Dict[Any, Any]]) -> Dict[int, int]:
    if not raw:
        return {}
    raw = _require_dict(raw, "responses")
    return {int(k): int(v) for k, v in raw.items() if v is not None}


@dataclass(frozen=True)
class AdminNote:
    id: str
    created_at: str
    text: str
    author_email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {"id": self.id, "createdAt": self.created_at, "text": self.text}
        if self.author_email:
            d["authorEmail"] = self.author_email
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AdminNote":
        return cls(
            id=d.get("id", ""),
            created_at=d.get("createdAt", ""),
            text=d.get("text", ""),
            author_email=d.get("authorEmail"),
        )


@dataclass(frozen=True)
class EmailLogEntry:
    sent_at: str
    subject: str
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {"sentAt": self.sent_at, "subject": self.subject}
        if self.type:
            d["type"] = self.type
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EmailLogEntry":
        return cls(sent_at=d.get("sentAt", ""), subject=d.get("subject", ""), type=d.get("type"))


@dataclass(frozen=True)
class QuestionnaireDisqualified:
    at: str
    reason: str
    question_key: str

    def to_dict(self) -> Dict[str, Any]:
        return {"at": self.at, "reason": self.reason, "questionKey": self.question_key}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "QuestionnaireDisqualified":
        return cls(at=d.get("at", ""), reason=d.get("reason", ""), question_key=d.get("questionKey", ""))


@dataclass(frozen=True)
class AdminData:
    notes: List[AdminNote] = field(default_factory=list)
    pipeline_stage: str = PipelineStage.APPLIED
    rating: Optional[int] = None
    interview_scheduled_at: Optional[str] = None
    next_step: str = ""
    tags: List[str] = field(default_factory=list)
    emails_sent: List[EmailLogEntry] = field(default_factory=list)
    resume_reviewed_at: Optional[str] = None
    questionnaire_disqualified: Optional[QuestionnaireDisqualified] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notes": [n.to_dict() for n in self.notes],
            "pipelineStage": self.pipeline_stage,
            "rating": self.rating,
            "interviewScheduledAt": self.interview_scheduled_at,
            "nextStep": self.next_step,
            "tags": list(self.tags),
            "emailsSent": [e.to_dict() for e in self.emails_sent],
            "resumeReviewedAt": self.resume_reviewed_at,
            "questionnaireDisqualified": (
                self.questionnaire_disqualified.to_dict() if self.questionnaire_disqualified else None
            ),
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "AdminData":
        """Build a fully populated AdminData; missing keys take their defaults."""
        if not d:
            return default_admin_data()
        d = _require_dict(d, "adminData")
        disq = d.get("questionnaireDisqualified")
        disqualified = (
            QuestionnaireDisqualified.from_dict(_require_dict(disq, "questionnaireDisqualified")) if disq else None
        )
        tags: List[str] = []
        for t in d.get("tags") or []:
            if t not in tags:
                tags.append(t)
        return cls(
            notes=[AdminNote.from_dict(_require_dict(n, "adminData.notes[]")) for n in d.get("notes") or []],
            pipeline_stage=d.get("pipelineStage") or PipelineStage.APPLIED,
            rating=d.get("rating"),
            interview_scheduled_at=d.get("interviewScheduledAt"),
            next_step=d.get("nextStep") or "",
            tags=tags,
            emails_sent=[
                EmailLogEntry.from_dict(_require_dict(e, "adminData.emailsSent[]")) for e in d.get("emailsSent") or []
            ],
            resume_reviewed_at=d.get("resumeReviewedAt"),
            questionnaire_disqualified=disqualified,
        )


def default_admin_data() -> AdminData:
    return AdminData()


@dataclass(frozen=True)
class IntakeQuestionnaire:
    """Pre-interview applicant questionnaire."""

    kind: ClassVar[str] = "intake-v1"

    occupation: str = ""
    current_role: str = ""
    background_areas: List[str] = field(default_factory=list)
    background_other: Optional[str] = None
    sales_experience: str = ""
    something_about_yourself: str = ""
    legally_entitled_canada: str = ""
    resume_urls: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d.update({
            "occupation": self.occupation,
            "currentRole": self.current_role,
            "backgroundAreas": list(self.background_areas),
            "salesExperience": self.sales_experience,
            "somethingAboutYourself": self.something_about_yourself,
            "legallyEntitledCanada": self.legally_entitled_canada,
            "resumeUrls": list(self.resume_urls),
        })
        if self.background_other:
            d["backgroundOther"] = self.background_other
        d[QUESTIONNAIRE_KIND_KEY] = self.kind
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "IntakeQuestionnaire":
        return cls(
            occupation=d.get("occupation") or "",
            current_role=d.get("currentRole") or "",
            background_areas=list(d.get("backgroundAreas") or []),
            background_other=d.get("backgroundOther") or None,
            sales_experience=d.get("salesExperience") or "",
            something_about_yourself=d.get("somethingAboutYourself") or "",
            legally_entitled_canada=d.get("legallyEntitledCanada") or "",
            resume_urls=list(d.get("resumeUrls") or []),
            extra={k: v for k, v in d.items() if k not in _INTAKE_KEYS},
        )


@dataclass(frozen=True)
class ExitQuestionnaire:
    """Post live career overview exit questionnaire."""

    kind: ClassVar[str] = "exit-v1"

    what_stood_out: str = ""
    why_good_fit: str = ""
    financial_investment_license: str = ""
    legally_entitled_canada_full_time: str = ""
    comfortable_virtual_environment: str = ""
    excited_off_site_social: str = ""
    position_interest: str = ""
    questions_about_opportunity: str = ""
    contact_permission: str = ""
    submitted_at: Optional[str] = None
    resume_urls: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d.update({
            "whatStoodOut": self.what_stood_out,
            "whyGoodFit": self.why_good_fit,
            "financialInvestmentLicense": self.financial_investment_license,
            "legallyEntitledCanadaFullTime": self.legally_entitled_canada_full_time,
            "comfortableVirtualEnvironment": self.comfortable_virtual_environment,
            "excitedOffSiteSocial": self.excited_off_site_social,
            "positionInterest": self.position_interest,
            "questionsAboutOpportunity": self.questions_about_opportunity,
            "contactPermission": self.contact_permission,
            "resumeUrls": list(self.resume_urls),
        })
        if self.submitted_at:
            d["submittedAt"] = self.submitted_at
        d[QUESTIONNAIRE_KIND_KEY] = self.kind
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ExitQuestionnaire":
        return cls(
            what_stood_out=d.get("whatStoodOut") or "",
            why_good_fit=d.get("whyGoodFit") or "",
            financial_investment_license=d.get("financialInvestmentLicense") or "",
            legally_entitled_canada_full_time=d.get("legallyEntitledCanadaFullTime") or "",
            comfortable_virtual_environment=d.get("comfortableVirtualEnvironment") or "",
            excited_off_site_social=d.get("excitedOffSiteSocial") or "",
            position_interest=d.get("positionInterest") or "",
            questions_about_opportunity=d.get("questionsAboutOpportunity") or "",
            contact_permission=d.get("contactPermission") or "",
            submitted_at=d.get("submittedAt"),
            resume_urls=list(d.get("resumeUrls") or []),
            extra={k: v for k, v in d.items() if k not in _EXIT_KEYS},
        )


Questionnaire = Union[IntakeQuestionnaire, ExitQuestionnaire]

_INTAKE_KEYS = {
    "occupation", "currentRole", "backgroundAreas", "backgroundOther", "salesExperience",
    "somethingAboutYourself", "legallyEntitledCanada", "resumeUrls", QUESTIONNAIRE_KIND_KEY,
}
_EXIT_KEYS = {
    "whatStoodOut", "whyGoodFit", "financialInvestmentLicense", "legallyEntitledCanadaFullTime",
    "comfortableVirtualEnvironment", "excitedOffSiteSocial", "positionInterest",
    "questionsAboutOpportunity", "contactPermission", "submittedAt", "resumeUrls",
    QUESTIONNAIRE_KIND_KEY,
}


def questionnaire_from_dict(d: Optional[Dict[str, Any]]) -> Optional[Questionnaire]:
    """
    Rebuild the stored questionnaire variant.

    The persisted kind tag decides; untagged legacy rows fall back to the
    keys they carry.
    """
    if not d:
        return None
    d = _require_dict(d, "applicantQuestionnaire")
    kind = d.get(QUESTIONNAIRE_KIND_KEY)
    if kind == ExitQuestionnaire.kind:
        return ExitQuestionnaire.from_dict(d)
    if kind == IntakeQuestionnaire.kind:
        return IntakeQuestionnaire.from_dict(d)
    if d.get("occupation") or "legallyEntitledCanada" in d:
        return IntakeQuestionnaire.from_dict(d)
    if "whatStoodOut" in d or "legallyEntitledCanadaFullTime" in d:
        return ExitQuestionnaire.from_dict(d)
    return IntakeQuestionnaire.from_dict(d)


@dataclass(frozen=True)
class PostInterview:
    interview_completed: bool
    consent: bool
    ceo_invite: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interviewCompleted": self.interview_completed,
            "consent": self.consent,
            "ceoInvite": self.ceo_invite,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PostInterview":
        return cls(
            interview_completed=bool(d.get("interviewCompleted")),
            consent=bool(d.get("consent")),
            ceo_invite=d.get("ceoInvite") or "no",
        )


@dataclass(frozen=True)
class AssessmentData:
    competitiveness: int
    money_motivation: int
    likert_responses: Dict[int, int] = field(default_factory=dict)
    true_scale_responses: Dict[int, int] = field(default_factory=dict)
    occupation: str = ""
    current_role: str = ""
    background_areas: List[str] = field(default_factory=list)
    sales_experience: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "occupation": self.occupation,
            "currentRole": self.current_role,
            "backgroundAreas": list(self.background_areas),
            "salesExperience": self.sales_experience,
            "competitiveness": self.competitiveness,
            "moneyMotivation": self.money_motivation,
            "likertResponses": _responses_to_dict(self.likert_responses),
            "trueScaleResponses": _responses_to_dict(self.true_scale_responses),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AssessmentData":
        return cls(
            occupation=d.get("occupation") or "",
            current_role=d.get("currentRole") or "",
            background_areas=list(d.get("backgroundAreas") or []),
            sales_experience=d.get("salesExperience") or "",
            competitiveness=int(d.get("competitiveness", 0)),
            money_motivation=int(d.get("moneyMotivation", 0)),
            likert_responses=_responses_from_dict(d.get("likertResponses")),
            true_scale_responses=_responses_from_dict(d.get("trueScaleResponses")),
        )


@dataclass(frozen=True)
class Candidate:
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    city: str
    timestamp: str
    status: str = CandidateStatus.NEW
    admin_data: AdminData = field(default_factory=default_admin_data)
    applicant_questionnaire: Optional[Questionnaire] = None
    post_interview: Optional[PostInterview] = None
    assessment: Optional[AssessmentData] = None
    score: Optional[int] = None
    fit_category: Optional[str] = None
    revision: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def evolve(self, **changes: Any) -> "Candidate":
        """Return a copy with the given attributes replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "city": self.city,
            "timestamp": self.timestamp,
            "status": self.status,
            "adminData": self.admin_data.to_dict(),
            "applicantQuestionnaire": (
                self.applicant_questionnaire.to_dict() if self.applicant_questionnaire else None
            ),
            "postInterview": self.post_interview.to_dict() if self.post_interview else None,
            "assessment": self.assessment.to_dict() if self.assessment else None,
            "score": self.score,
            "fitCategory": self.fit_category,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Candidate":
        post = d.get("postInterview")
        assessment = d.get("assessment")
        return cls(
            id=d["id"],
            first_name=d.get("firstName") or "",
            last_name=d.get("lastName") or "",
            email=d.get("email") or "",
            phone=d.get("phone") or "",
            city=d.get("city") or "",
            timestamp=d.get("timestamp") or utc_now_iso(),
            status=d.get("status") or CandidateStatus.NEW,
            admin_data=AdminData.from_dict(d.get("adminData")),
            applicant_questionnaire=questionnaire_from_dict(d.get("applicantQuestionnaire")),
            post_interview=PostInterview.from_dict(_require_dict(post, "postInterview")) if post else None,
            assessment=AssessmentData.from_dict(_require_dict(assessment, "assessment")) if assessment else None,
            score=d.get("score"),
            fit_category=d.get("fitCategory"),
            revision=int(d.get("revision") or 0),
        )


