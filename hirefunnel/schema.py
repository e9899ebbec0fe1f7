import re
from typing import Any, Dict, List

from .errors import ValidationError
from .questions import (
    ANSWER_MAX,
    ANSWER_MIN,
    ASSESSMENT_BACKGROUND_AREAS,
    INTAKE_BACKGROUND_AREAS,
    LIKERT_IDS,
    OCCUPATION_OPTIONS,
    POSITION_OPTIONS,
    SCALE_MAX,
    SCALE_MIN,
    TRUE_SCALE_IDS,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

IDENTITY_FIELDS = ["firstName", "lastName", "email", "phone"]
INTAKE_REQUIRED_STR_FIELDS = IDENTITY_FIELDS + ["city", "occupation", "salesExperience", "somethingAboutYourself"]
EXIT_REQUIRED_STR_FIELDS = IDENTITY_FIELDS + ["whatStoodOut", "whyGoodFit", "positionInterest"]
EXIT_CHOICE_FIELDS = {
    "financialInvestmentLicense": ("yes", "no"),
    "legallyEntitledCanadaFullTime": ("yes", "no"),
    "comfortableVirtualEnvironment": ("yes", "no"),
    "excitedOffSiteSocial": ("yes", "no", "maybe"),
    "contactPermission": ("yes", "no"),
}
CEO_INVITE_CHOICES = ("yes", "no", "declined")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _check_required(data: Dict[str, Any], names: List[str], errors: List[str]) -> None:
    for f in names:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")


def _check_email(data: Dict[str, Any], errors: List[str]) -> None:
    email = data.get("email")
    if _is_non_empty_str(email) and not EMAIL_RE.match(email.strip()):
        errors.append("Field 'email' must be a valid e-mail address")


def _check_areas(areas: List[Any], allowed: List[str], errors: List[str]) -> None:
    unknown = [a for a in areas if a not in allowed]
    if unknown:
        errors.append(f"Unknown background area(s): {', '.join(map(str, unknown))}")


def validate_intake(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for an intake submission.
    Empty list means valid.
    """
    errors: List[str] = []
    _check_required(data, INTAKE_REQUIRED_STR_FIELDS, errors)
    _check_email(data, errors)

    areas = data.get("backgroundAreas")
    if not isinstance(areas, list) or not areas:
        errors.append("Field 'backgroundAreas' must list at least one area")
    else:
        _check_areas(areas, INTAKE_BACKGROUND_AREAS, errors)

    occupation = data.get("occupation")
    if _is_non_empty_str(occupation) and occupation not in OCCUPATION_OPTIONS:
        errors.append(f"Field 'occupation' must be one of: {', '.join(OCCUPATION_OPTIONS)}")

    if data.get("legallyEntitledCanada") not in ("yes", "no"):
        errors.append("Field 'legallyEntitledCanada' must be 'yes' or 'no'")

    # Optional strings: if present, must be strings
    for f in ("currentRole", "backgroundOther"):
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    return errors


def validate_exit_questionnaire(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    _check_required(data, EXIT_REQUIRED_STR_FIELDS, errors)
    _check_email(data, errors)

    position = data.get("positionInterest")
    if _is_non_empty_str(position) and position not in POSITION_OPTIONS:
        errors.append(f"Field 'positionInterest' must be one of: {', '.join(POSITION_OPTIONS)}")

    verify = data.get("verifyEmail")
    if verify is not None and verify != data.get("email"):
        errors.append("Email addresses must match")

    for f, choices in EXIT_CHOICE_FIELDS.items():
        if data.get(f) not in choices:
            errors.append(f"Field '{f}' must be one of: {', '.join(choices)}")

    return errors


def validate_post_interview(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for f in ("interviewCompleted", "consent"):
        if not isinstance(data.get(f), bool):
            errors.append(f"Field '{f}' must be true or false")
    if data.get("ceoInvite") not in CEO_INVITE_CHOICES:
        errors.append(f"Field 'ceoInvite' must be one of: {', '.join(CEO_INVITE_CHOICES)}")
    return errors


def validate_assessment(data: Dict[str, Any]) -> List[str]:
    """
    Validate a full assessment answer set.

    Q1-2 must be integers in 1-10; every Likert (Q3-20) and true-scale
    (Q21-30) question must have an integer answer in 0-3.
    """
    errors: List[str] = []

    for f in ("competitiveness", "moneyMotivation"):
        v = data.get(f)
        if not _is_int(v) or not SCALE_MIN <= v <= SCALE_MAX:
            errors.append(f"Field '{f}' must be an integer from {SCALE_MIN} to {SCALE_MAX}")

    for group, ids in (("likertResponses", LIKERT_IDS), ("trueScaleResponses", TRUE_SCALE_IDS)):
        raw = data.get(group)
        if not isinstance(raw, dict):
            errors.append(f"Field '{group}' must be an object of question id to answer")
            continue
        answers = {str(k): v for k, v in raw.items()}
        for qid in ids:
            v = answers.get(str(qid))
            if v is None:
                errors.append(f"Missing answer for Q{qid}")
            elif not _is_int(v) or not ANSWER_MIN <= v <= ANSWER_MAX:
                errors.append(f"Answer for Q{qid} must be an integer from {ANSWER_MIN} to {ANSWER_MAX}")
        unknown = sorted(set(answers) - {str(q) for q in ids})
        if unknown:
            errors.append(f"Unknown question ids in '{group}': {', '.join(unknown)}")

    areas = data.get("backgroundAreas")
    if areas is not None:
        if not isinstance(areas, list):
            errors.append("Field 'backgroundAreas' must be a list if provided")
        else:
            _check_areas(areas, ASSESSMENT_BACKGROUND_AREAS, errors)

    return errors


def require_valid(errors: List[str]) -> None:
    """Raise ValidationError when a validator reported problems."""
    if errors:
        raise ValidationError(errors)
