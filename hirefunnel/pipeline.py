"""
Candidate lifecycle.

Two independent state tracks live on a candidate:

* `status` - system-driven and forward-only:
  new -> interview_complete -> assessment_started -> assessment_complete
* `admin_data.pipeline_stage` - recruiter-driven funnel position, set only by
  admin actions (see admin.py)

Disqualification is a third, terminal marker that never touches `status`.
The tracks are never reconciled automatically; `audit_candidate` reports
where they disagree.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from .errors import AssessmentAlreadyCompletedError, DuplicateRiskError
from .logger import StructuredLogger, get_logger
from .models import (
    AssessmentData,
    Candidate,
    CandidateStatus,
    ExitQuestionnaire,
    IntakeQuestionnaire,
    PipelineStage,
    PostInterview,
    QuestionnaireDisqualified,
    utc_now_iso,
)
from .normalize import clean_str
from .questions import stage_status
from .resolver import RecordResolver, find_duplicates, merge_on_write
from .schema import (
    require_valid,
    validate_assessment,
    validate_exit_questionnaire,
    validate_intake,
    validate_post_interview,
)
from .scoring import score_assessment
from .storage import CandidateStore

INTAKE_DISQUALIFICATION_REASON = "Not legally entitled to work in Canada full-time."
INTAKE_DISQUALIFICATION_KEY = "legallyEntitledCanada"
EXIT_DISQUALIFICATION_KEY = "legallyEntitledCanadaFullTime"
NOT_ELIGIBLE_MESSAGE = "Our roles require full-time work authorization in Canada."

ROUTE_ASSESSMENT_INVITE = "assessment_invite"
ROUTE_THANK_YOU = "thank_you"
ROUTE_NOT_ELIGIBLE = "not_eligible"

# Funnel position reached once the candidate has been interviewed.
_STAGES_AFTER_INTERVIEW = (
    PipelineStage.INTERVIEWED,
    PipelineStage.OFFER,
    PipelineStage.HIRED,
)


def has_completed_assessment(candidate: Candidate) -> bool:
    """The one guard every assessment entry point must check."""
    return candidate.status == CandidateStatus.ASSESSMENT_COMPLETE or candidate.assessment is not None


def can_advance_status(current: str, target: str) -> bool:
    """Status only moves forward (or stays put)."""
    order = CandidateStatus.ORDER
    return order.index(target) >= order.index(current)


def advance_status(current: str, target: str) -> str:
    return target if can_advance_status(current, target) else current


def is_terminal_stage(stage: str) -> bool:
    return stage in PipelineStage.TERMINAL


def is_disqualified(candidate: Candidate) -> bool:
    return candidate.admin_data.questionnaire_disqualified is not None


def disqualify(candidate: Candidate, reason: str, question_key: str) -> Candidate:
    """Set the disqualification marker; an existing marker is kept as-is."""
    if is_disqualified(candidate):
        return candidate
    marker = QuestionnaireDisqualified(at=utc_now_iso(), reason=reason, question_key=question_key)
    return candidate.evolve(admin_data=replace(candidate.admin_data, questionnaire_disqualified=marker))


def audit_candidate(candidate: Candidate) -> List[str]:
    """Human-readable findings where derived fields or the two state tracks disagree."""
    findings: List[str] = []
    stage = candidate.admin_data.pipeline_stage
    status = candidate.status

    if candidate.assessment is not None and (candidate.score is None or candidate.fit_category is None):
        findings.append("Assessment present but score/fit category missing")
    if candidate.assessment is None and (candidate.score is not None or candidate.fit_category is not None):
        findings.append("Score/fit category present without an assessment")
    if candidate.assessment is not None and status != CandidateStatus.ASSESSMENT_COMPLETE:
        findings.append(f"Assessment present but status is '{status}'")
    if status == CandidateStatus.ASSESSMENT_COMPLETE and candidate.assessment is None:
        findings.append("Status is assessment_complete but no assessment is stored")
    if stage in _STAGES_AFTER_INTERVIEW and status == CandidateStatus.NEW:
        findings.append(f"Pipeline stage '{stage}' but interview confirmation not recorded")
    if is_disqualified(candidate) and not is_terminal_stage(stage):
        findings.append(f"Disqualified at questionnaire but pipeline stage is '{stage}'")
    if stage not in PipelineStage.ALL:
        findings.append(f"Unknown pipeline stage '{stage}'")
    if status not in CandidateStatus.ORDER:
        findings.append(f"Unknown status '{status}'")
    return findings


def audit_store(candidates: List[Candidate]) -> Dict[str, List[str]]:
    """Findings per candidate id, including e-mails shared by several records."""
    report: Dict[str, List[str]] = {}
    for c in candidates:
        findings = audit_candidate(c)
        if findings:
            report[c.id] = findings
    for email, ids in find_duplicates(candidates).items():
        risk = DuplicateRiskError(email, ids)
        for cid in ids:
            report.setdefault(cid, []).append(str(risk))
    return report


@dataclass(frozen=True)
class SubmissionOutcome:
    candidate: Candidate
    created: bool
    route: str
    message: Optional[str] = None


def _intake_from_payload(data: Dict[str, Any]) -> IntakeQuestionnaire:
    return IntakeQuestionnaire(
        occupation=clean_str(data.get("occupation")),
        current_role=clean_str(data.get("currentRole")),
        background_areas=list(data.get("backgroundAreas") or []),
        background_other=clean_str(data.get("backgroundOther")) or None,
        sales_experience=clean_str(data.get("salesExperience")),
        something_about_yourself=clean_str(data.get("somethingAboutYourself")),
        legally_entitled_canada=data.get("legallyEntitledCanada", ""),
        resume_urls=list(data.get("resumeUrls") or []),
    )


def _exit_from_payload(data: Dict[str, Any]) -> ExitQuestionnaire:
    return ExitQuestionnaire(
        what_stood_out=clean_str(data.get("whatStoodOut")),
        why_good_fit=clean_str(data.get("whyGoodFit")),
        financial_investment_license=data.get("financialInvestmentLicense", ""),
        legally_entitled_canada_full_time=data.get("legallyEntitledCanadaFullTime", ""),
        comfortable_virtual_environment=data.get("comfortableVirtualEnvironment", ""),
        excited_off_site_social=data.get("excitedOffSiteSocial", ""),
        position_interest=clean_str(data.get("positionInterest")),
        questions_about_opportunity=clean_str(data.get("questionsAboutOpportunity")),
        contact_permission=data.get("contactPermission", ""),
        resume_urls=list(data.get("resumeUrls") or []),
        submitted_at=utc_now_iso(),
    )


class FunnelService:
    """Applies candidate-facing submissions and the status transitions they imply."""

    def __init__(
        self,
        store: CandidateStore,
        resolver: Optional[RecordResolver] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.store = store
        self.logger = logger or get_logger()
        self.resolver = resolver or RecordResolver(store, logger=self.logger)

    def _save(self, candidate: Candidate, created: bool) -> Candidate:
        saved = self.store.upsert(candidate)
        if created:
            self.logger.record_created()
        else:
            self.logger.record_updated()
        return saved

    def _load_for_assessment(self, candidate_id: str) -> Candidate:
        candidate = self.resolver.get(candidate_id)
        if has_completed_assessment(candidate):
            self.logger.info("Assessment already completed", candidate_id=candidate.id)
            raise AssessmentAlreadyCompletedError(candidate.id)
        return candidate

    def _questionnaire_submission(
        self,
        data: Dict[str, Any],
        questionnaire,
        disqualify_key: str,
        candidate_id: Optional[str],
    ) -> SubmissionOutcome:
        identity = {
            "first_name": data.get("firstName"),
            "last_name": data.get("lastName"),
            "email": data.get("email"),
            "phone": data.get("phone"),
            "city": data.get("city"),
        }
        if candidate_id:
            existing = self.resolver.get(candidate_id)
        else:
            existing = self.resolver.find(data.get("email", ""))

        if existing is not None:
            candidate = merge_on_write(existing, questionnaire=questionnaire, **identity)
            created = False
        else:
            candidate = self.resolver.build(questionnaire=questionnaire, **identity)
            created = True

        if data.get(disqualify_key) == "no":
            candidate = disqualify(candidate, INTAKE_DISQUALIFICATION_REASON, disqualify_key)
            saved = self._save(candidate, created)
            self.logger.info(
                "Candidate disqualified at questionnaire",
                candidate_id=saved.id,
                question_key=disqualify_key,
            )
            return SubmissionOutcome(saved, created, ROUTE_NOT_ELIGIBLE, NOT_ELIGIBLE_MESSAGE)

        saved = self._save(candidate, created)
        self.logger.info("Questionnaire saved", candidate_id=saved.id, kind=questionnaire.kind, created=created)
        return SubmissionOutcome(saved, created, ROUTE_THANK_YOU)

    def submit_intake(self, data: Dict[str, Any], candidate_id: Optional[str] = None) -> SubmissionOutcome:
        """
        Save the pre-interview questionnaire.

        A 'no' to legal entitlement sets the disqualification marker and leaves
        status at 'new'. Otherwise status is left unchanged.

        Args:
            data: Form payload (camelCase keys)
            candidate_id: Resume a stored record instead of resolving by e-mail
        """
        require_valid(validate_intake(data))
        return self._questionnaire_submission(
            data, _intake_from_payload(data), INTAKE_DISQUALIFICATION_KEY, candidate_id
        )

    def submit_exit_questionnaire(self, data: Dict[str, Any]) -> SubmissionOutcome:
        require_valid(validate_exit_questionnaire(data))
        return self._questionnaire_submission(
            data, _exit_from_payload(data), EXIT_DISQUALIFICATION_KEY, None
        )

    def submit_post_interview(self, candidate_id: str, data: Dict[str, Any]) -> SubmissionOutcome:
        """
        Record the interview confirmation and move status to interview_complete.

        The route is the assessment invitation only when ceoInvite is 'yes'.
        """
        require_valid(validate_post_interview(data))
        candidate = self._load_for_assessment(candidate_id)
        post = PostInterview(
            interview_completed=data["interviewCompleted"],
            consent=data["consent"],
            ceo_invite=data["ceoInvite"],
        )
        candidate = candidate.evolve(
            status=advance_status(candidate.status, CandidateStatus.INTERVIEW_COMPLETE),
            post_interview=post,
        )
        saved = self._save(candidate, created=False)
        route = ROUTE_ASSESSMENT_INVITE if post.ceo_invite == "yes" else ROUTE_THANK_YOU
        self.logger.info("Post-interview saved", candidate_id=saved.id, ceo_invite=post.ceo_invite)
        return SubmissionOutcome(saved, False, route)

    def start_assessment(self, candidate_id: str) -> Candidate:
        candidate = self._load_for_assessment(candidate_id)
        if candidate.status == CandidateStatus.ASSESSMENT_STARTED:
            return candidate
        candidate = candidate.evolve(status=advance_status(candidate.status, CandidateStatus.ASSESSMENT_STARTED))
        return self._save(candidate, created=False)

    def submit_assessment(
        self,
        candidate_id: str,
        data: Dict[str, Any],
        identity: Optional[Dict[str, str]] = None,
    ) -> Candidate:
        """
        Store a completed assessment with its score snapshot.

        Status, assessment, score and fit category are written together in a
        single upsert. Non-blank identity overrides (firstName, lastName,
        email, phone, city) replace the stored contact details.
        """
        require_valid(validate_assessment(data))
        candidate = self._load_for_assessment(candidate_id)
        assessment = AssessmentData.from_dict(data)
        result = score_assessment(assessment)

        identity = identity or {}
        candidate = merge_on_write(
            candidate,
            first_name=identity.get("firstName"),
            last_name=identity.get("lastName"),
            email=identity.get("email"),
            phone=identity.get("phone"),
            city=identity.get("city"),
        )
        candidate = candidate.evolve(
            status=CandidateStatus.ASSESSMENT_COMPLETE,
            assessment=assessment,
            score=result.score,
            fit_category=result.fit_category,
        )
        saved = self._save(candidate, created=False)
        self.logger.record_assessment_scored(result.fit_category)
        self.logger.info(
            "Assessment scored",
            candidate_id=saved.id,
            score=result.score,
            percentage=round(result.percentage, 2),
            fit_category=result.fit_category,
        )
        return saved

    def check_status(self, email: str) -> Tuple[Candidate, str, str]:
        """Candidate-facing status lookup: (candidate, label, message)."""
        candidate = self.resolver.lookup(email)
        label, message = stage_status(candidate.admin_data.pipeline_stage)
        return candidate, label, message
