"""
Fixed question bank for the leadership/EQ assessment, answer labels and the
candidate-facing pipeline status texts.
"""

from typing import Dict, List, Optional, Tuple

COMPETITIVENESS_QUESTION = "On a scale of 1–10, how competitive are you?"
MONEY_MOTIVATION_QUESTION = "On a scale of 1–10, how motivated are you by income growth?"

SCALE_MIN = 1
SCALE_MAX = 10
ANSWER_MIN = 0
ANSWER_MAX = 3

# Q3-20, positive traits; 3 = Strongly Agree
LIKERT_QUESTIONS: List[Tuple[int, str]] = [
    (3, "I believe income should directly reflect performance."),
    (4, "I enjoy public recognition for achievement."),
    (5, "One of my long-term goals is financial independence."),
    (6, "I prefer to lead rather than follow."),
    (7, "I am comfortable making decisions under pressure."),
    (8, "I naturally take ownership when things go wrong."),
    (9, "I actively seek feedback to improve."),
    (10, "I believe discipline is more important than motivation."),
    (11, "I handle rejection well."),
    (12, "I perform well without supervision."),
    (13, "I am comfortable speaking with strangers."),
    (14, "I enjoy persuading others when I believe in something."),
    (15, "I stay consistent even when results are delayed."),
    (16, "I prefer measurable goals."),
    (17, "I thrive in competitive environments."),
    (18, "I track my own performance metrics."),
    (19, "I would rather earn based on results than tenure."),
    (20, "I see myself building a team in the future."),
]

# Q21-30, risk traits; 3 = Always True, reverse-scored
TRUE_SCALE_QUESTIONS: List[Tuple[int, str]] = [
    (21, "I need to know exactly what I’m going to make next year and the year after that."),
    (22, "When I’m working on something, I hate having my thought process interrupted."),
    (23, "I hate adrenaline and high-pressure competitive situations."),
    (24, "It is very gratifying knowing my paycheck is automatically deposited with safety and regularity."),
    (25, "I hope to work with the same people forever and don’t want them to move on."),
    (26, "I like my duties clearly spelled out with no ambiguity or spontaneity."),
    (27, "If it’s not in my job description, I don’t do it."),
    (28, "Sleep is incredibly important; I struggle if I don’t get eight hours."),
    (29, "Work/life balance and “me time” are extremely important to me."),
    (30, "Living a life of extremes and high intensity sounds stressful to me."),
]

LIKERT_IDS = [qid for qid, _ in LIKERT_QUESTIONS]
TRUE_SCALE_IDS = [qid for qid, _ in TRUE_SCALE_QUESTIONS]

LIKERT_LABELS: Dict[int, str] = {
    3: "Strongly Agree",
    2: "Agree",
    1: "Disagree",
    0: "Strongly Disagree",
}

TRUE_SCALE_LABELS: Dict[int, str] = {
    3: "Always True",
    2: "Quite True",
    1: "Rarely True",
    0: "Never True",
}

INTAKE_BACKGROUND_AREAS = [
    "Sales",
    "Customer Service",
    "Management / Leadership",
    "Entrepreneurial / Business Owner",
    "Trades / Skilled Labour",
    "Administrative / Office Support",
    "Basic Digital Skills / (CRM, Zoom, Google Workspace, etc.)",
    "Social Media / Marketing",
    "IT Advanced Skills (Advanced AI, Development, Data Intelligence and Infrastructure and Security)",
    "Web Developer",
    "Hospitality and Retail",
    "Health Care and Medical Field",
    "Other",
]

ASSESSMENT_BACKGROUND_AREAS = [
    "Sales",
    "Customer Service",
    "Management / Leadership",
    "Entrepreneurial / Business Owner",
    "Corporate / Professional",
    "Trades / Skilled Labour",
    "Administrative / Office Support",
    "Technical / Digital Skills (CRM, Zoom, Google Workspace, etc.)",
    "Social Media / Marketing",
    "Other",
]

OCCUPATION_OPTIONS = {
    "full-time": "Employed full-time",
    "part-time": "Employed part-time",
    "self-employed": "Self-employed",
    "student": "Student",
    "unemployed": "Not currently employed",
}

POSITION_OPTIONS = ["Leadership Career Track", "Agent Career Track"]

SUGGESTED_TAGS = [
    "Strong fit",
    "Follow up",
    "Licensing needed",
    "High potential",
    "Second interview",
    "Offer extended",
]

STAGE_STATUS: Dict[str, Tuple[str, str]] = {
    "Applied": (
        "Application Received",
        "Thank you for your application. We have received your information and it is currently under review.",
    ),
    "Screening": (
        "Under Review",
        "Your application is being reviewed by our team. We will contact you soon with next steps.",
    ),
    "Interview Scheduled": (
        "Interview Scheduled",
        "Great news! An interview has been scheduled for you. Please check your email for details.",
    ),
    "Interviewed": (
        "Interview Completed",
        "Thank you for completing your interview. Our team is evaluating candidates and will be in touch soon.",
    ),
    "Offer": (
        "Offer Extended",
        "Congratulations! We have extended an offer to you. Please check your email for details and next steps.",
    ),
    "Hired": (
        "Hired",
        "Congratulations! You have been hired. Welcome to the team! Please check your email for onboarding information.",
    ),
    "Rejected": (
        "Not Selected",
        "Thank you for your interest. Unfortunately, we have decided to move forward with other candidates at this time.",
    ),
    "Withdrawn": (
        "Application Withdrawn",
        "Your application has been withdrawn. If you would like to reapply, please contact us.",
    ),
}


def likert_label(value: Optional[int]) -> str:
    return LIKERT_LABELS.get(value, "") if value is not None else ""


def true_scale_label(value: Optional[int]) -> str:
    return TRUE_SCALE_LABELS.get(value, "") if value is not None else ""


def stage_status(stage: str) -> Tuple[str, str]:
    """Return the (label, message) pair shown to a candidate for a pipeline stage."""
    return STAGE_STATUS.get(stage, STAGE_STATUS["Applied"])
