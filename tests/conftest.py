"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any

from hirefunnel.logger import get_logger, reset_logger
from hirefunnel.models import AssessmentData, Candidate
from hirefunnel.questions import LIKERT_IDS, TRUE_SCALE_IDS
from hirefunnel.storage import CandidateStore


@pytest.fixture(autouse=True)
def quiet_logger():
    """Process-wide logger with no console or file output."""
    reset_logger()
    logger = get_logger(enable_console=False, enable_file=False)
    yield logger
    reset_logger()


@pytest.fixture
def store(tmp_path) -> CandidateStore:
    """Candidate store on a temporary SQLite file."""
    return CandidateStore(tmp_path / "candidates.db")


def assessment_payload(competitiveness: int, money: int, likert: int, true_scale: int) -> Dict[str, Any]:
    """Assessment form payload with every Likert / true-scale item set to one value."""
    return {
        "occupation": "Full-time employee",
        "currentRole": "Account manager",
        "backgroundAreas": ["Sales"],
        "salesExperience": "3 years",
        "competitiveness": competitiveness,
        "moneyMotivation": money,
        "likertResponses": {str(q): likert for q in LIKERT_IDS},
        "trueScaleResponses": {str(q): true_scale for q in TRUE_SCALE_IDS},
    }


def assessment_with_score(total: int) -> AssessmentData:
    """Build a complete assessment whose raw score is exactly `total` (2..104)."""
    competitiveness, money = 1, 1
    likert = {q: 0 for q in LIKERT_IDS}
    true_scale = {q: 3 for q in TRUE_SCALE_IDS}
    remaining = total - 2

    step = min(remaining, 9)
    competitiveness += step
    remaining -= step
    step = min(remaining, 9)
    money += step
    remaining -= step
    for q in LIKERT_IDS:
        step = min(remaining, 3)
        likert[q] += step
        remaining -= step
    for q in TRUE_SCALE_IDS:
        step = min(remaining, 3)
        true_scale[q] -= step
        remaining -= step

    return AssessmentData(
        competitiveness=competitiveness,
        money_motivation=money,
        likert_responses=likert,
        true_scale_responses=true_scale,
    )


@pytest.fixture
def best_payload() -> Dict[str, Any]:
    return assessment_payload(10, 10, 3, 0)


@pytest.fixture
def worst_payload() -> Dict[str, Any]:
    return assessment_payload(1, 1, 0, 3)


@pytest.fixture
def complete_payload() -> Dict[str, Any]:
    """A middling, fully answered assessment."""
    return assessment_payload(6, 7, 2, 1)


@pytest.fixture
def best_assessment(best_payload) -> AssessmentData:
    return AssessmentData.from_dict(best_payload)


@pytest.fixture
def worst_assessment(worst_payload) -> AssessmentData:
    return AssessmentData.from_dict(worst_payload)


@pytest.fixture
def intake_payload() -> Dict[str, Any]:
    """Valid pre-interview questionnaire."""
    return {
        "firstName": "Dana",
        "lastName": "Reyes",
        "email": "Dana.Reyes@Example.com",
        "phone": "(416) 555-0199",
        "city": "Toronto",
        "occupation": "full-time",
        "currentRole": "Retail supervisor",
        "backgroundAreas": ["Sales", "Customer Service"],
        "salesExperience": "2 years in retail sales",
        "somethingAboutYourself": "I coach a youth soccer team.",
        "legallyEntitledCanada": "yes",
    }


@pytest.fixture
def exit_payload() -> Dict[str, Any]:
    """Valid post career-overview questionnaire."""
    return {
        "firstName": "Sam",
        "lastName": "Okafor",
        "email": "sam.okafor@example.com",
        "verifyEmail": "sam.okafor@example.com",
        "phone": "647-555-0101",
        "whatStoodOut": "The mentorship model.",
        "whyGoodFit": "I like building client relationships.",
        "financialInvestmentLicense": "no",
        "legallyEntitledCanadaFullTime": "yes",
        "comfortableVirtualEnvironment": "yes",
        "excitedOffSiteSocial": "maybe",
        "positionInterest": "Agent Career Track",
        "questionsAboutOpportunity": "",
        "contactPermission": "yes",
    }


def make_candidate(candidate_id: str = "ABC12345", email: str = "pat@example.com", **changes) -> Candidate:
    """Unsaved candidate with sensible defaults."""
    base = Candidate(
        id=candidate_id,
        first_name="Pat",
        last_name="Lee",
        email=email,
        phone="4165550000",
        city="Ottawa",
        timestamp="2025-01-10T12:00:00.000Z",
    )
    return base.evolve(**changes) if changes else base


@pytest.fixture
def saved_candidate(store) -> Candidate:
    return store.upsert(make_candidate())


@pytest.fixture
def build_assessment():
    """Factory: complete assessment with a given raw score."""
    return assessment_with_score


@pytest.fixture
def candidate_factory():
    return make_candidate
