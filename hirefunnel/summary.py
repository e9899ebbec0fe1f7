"""
Deterministic narrative summary of an assessment.

No AI call: every answer domain is finite, so each paragraph is a table
lookup keyed by a band, and the phrase index comes from a fixed weighted hash
of the numeric answers. Same answers, same summary.
"""

import math
from typing import Dict, List

from .models import AssessmentData, FitCategory
from .questions import LIKERT_IDS, TRUE_SCALE_IDS
from .scoring import reverse_score, score_assessment

LOW = "low"
MODERATE = "moderate"
HIGH = "high"

# competitiveness, money motivation, likert, true-scale, closing
PHRASE_OFFSETS = (0.0, 0.33, 0.66, 0.5, 0.25)
SEED_WEIGHTS = (7, 11, 13, 17)

COMPETITIVENESS_PHRASES: Dict[str, List[str]] = {
    LOW: [
        "This candidate reports a lower competitive drive and may prefer collaborative or stable environments over head-to-head competition.",
        "Competitiveness is self-rated on the lower end; they may respond better to team-based or clearly structured goals rather than open competition.",
        "Lower self-reported competitiveness suggests they might need clear targets and a supportive environment to maintain momentum.",
    ],
    MODERATE: [
        "This candidate shows a balanced competitive drive—willing to compete when needed without requiring constant rivalry.",
        "Moderate competitiveness indicates they can thrive in both collaborative and goal-driven settings.",
        "They report a middle-ground competitive drive, which can suit environments that mix teamwork with individual accountability.",
    ],
    HIGH: [
        "This candidate reports a strong competitive drive and is likely to thrive in target-based and high-stakes environments.",
        "High self-reported competitiveness suggests they are motivated by rankings, wins, and outperforming benchmarks.",
        "They indicate a strong desire to compete and excel, which aligns well with commission and performance-based roles.",
    ],
}

MONEY_MOTIVATION_PHRASES: Dict[str, List[str]] = {
    LOW: [
        "Income growth is self-rated as a weaker driver; they may be more motivated by stability, purpose, or work-life balance.",
        "Lower money motivation suggests compensation may need to be framed alongside non-financial rewards and meaning.",
        "They report that earnings potential is less central to their motivation; consider discussing total value proposition beyond pay.",
    ],
    MODERATE: [
        "Money motivation is in the moderate range—they value income as one factor among others such as growth and culture.",
        "They indicate a balanced interest in earnings potential alongside other job factors.",
        "Moderate money motivation fits roles where pay is important but not the sole driver.",
    ],
    HIGH: [
        "This candidate is highly motivated by income growth and is likely to respond well to commission and performance-based pay.",
        "Strong money motivation suggests they are driven by earnings potential and tangible results.",
        "They report high motivation by income growth, which aligns with results-based compensation and upside opportunity.",
    ],
}

LIKERT_ALIGNMENT_PHRASES: Dict[str, List[str]] = {
    LOW: [
        "Their responses on leadership and performance attitudes show lower alignment with performance-based culture; they may prefer more predictable or supportive structures.",
        "Agreement with performance-driven and leadership statements is on the lower side; fit may depend on role design and onboarding.",
        "They tend to disagree or only partly agree with many performance/leadership items—worth exploring in interview how they view targets and feedback.",
    ],
    MODERATE: [
        "They show mixed alignment with performance and leadership statements—some strong agreement, some hesitation. Interview can clarify areas of fit.",
        "Moderate agreement across leadership and performance items suggests they can grow into a high-accountability environment with the right support.",
        "Their responses indicate a middle ground on performance culture; they may need clarity on expectations and development path.",
    ],
    HIGH: [
        "Strong agreement with performance-based and leadership statements suggests good alignment with a results-oriented, high-accountability culture.",
        "They consistently agree with items on ownership, feedback, competition, and measurable goals—positive indicators for a sales/leadership track.",
        "High alignment with the leadership and performance statements indicates they are likely comfortable with targets, rejection, and self-direction.",
    ],
}

TRUE_SCALE_FIT_PHRASES: Dict[str, List[str]] = {
    LOW: [
        "Their answers to the 'fit risk' items (preference for predictability, fixed pay, clear job description, etc.) suggest they may find a highly variable, high-intensity role stressful. Worth probing in interview.",
        "They tend to endorse statements that favour stability, fixed schedules, and clear boundaries—potential mismatch with uncapped commission and flexible intensity.",
        "Lower scores on reversed fit items indicate possible concerns around pressure, variable income, and work-life flexibility; discuss expectations openly.",
    ],
    MODERATE: [
        "They show a mixed picture on stability vs. variable pay and intensity—some comfort with ambiguity and results-based work, some preference for structure. Interview can clarify.",
        "Moderate responses on the fit-risk items suggest they could adapt to a performance culture with clear communication and support.",
        "They are neither strongly averse nor strongly comfortable with high variability; onboarding and expectation-setting will be important.",
    ],
    HIGH: [
        "They largely reject statements that favour fixed pay, rigid job descriptions, and low pressure—positive signals for a commission-based, high-autonomy role.",
        "High scores on the reversed fit items suggest they are comfortable with variable income, ambiguity, and high-intensity environments.",
        "Their answers indicate low need for predictability and high tolerance for results-driven, flexible work—good fit indicators for sales/leadership.",
    ],
}

FIT_CATEGORY_CLOSING: Dict[str, List[str]] = {
    FitCategory.HIGH_FIT: [
        "Overall assessment profile suggests high fit for a performance-based, leadership-oriented role. Recommend moving forward with next steps.",
        "Combined scores and response pattern indicate strong alignment. Consider prioritising for interview or offer.",
        "Profile is consistent with high fit; competitiveness, money motivation, and attitude items support a positive evaluation.",
    ],
    FitCategory.REVIEW: [
        "Overall profile suggests a review candidate—some strong signals, some areas to probe in interview before deciding.",
        "Mixed indicators; recommend a structured interview to clarify fit and motivation before advancing.",
        "Worth a closer look: some alignment with the role, with a few areas to validate in conversation.",
    ],
    FitCategory.NOT_ALIGNED: [
        "Overall profile suggests lower alignment with a high-performance, variable-pay environment. Consider other roles or a candid conversation about expectations.",
        "Scores and response patterns indicate potential mismatch; discuss their goals and the role demands before proceeding.",
        "Assessment points to possible misalignment; recommend clarifying their motivation and the role structure before next steps.",
    ],
}


def band_scale(value: int) -> str:
    """Band a 1-10 self-rating."""
    if value <= 3:
        return LOW
    if value <= 6:
        return MODERATE
    return HIGH


def band_likert(mean: float) -> str:
    if mean < 1.5:
        return LOW
    if mean < 2.2:
        return MODERATE
    return HIGH


def band_true_scale(reversed_mean: float) -> str:
    if reversed_mean < 1.2:
        return LOW
    if reversed_mean < 2.0:
        return MODERATE
    return HIGH


def likert_mean(assessment: AssessmentData) -> float:
    values = [assessment.likert_responses[q] for q in LIKERT_IDS if assessment.likert_responses.get(q) is not None]
    if not values:
        return 0.0
    return sum(values) / len(values)


def true_scale_reversed_mean(assessment: AssessmentData) -> float:
    values = [
        reverse_score(assessment.true_scale_responses[q])
        for q in TRUE_SCALE_IDS
        if assessment.true_scale_responses.get(q) is not None
    ]
    if not values:
        return 0.0
    return sum(values) / len(values)


def summary_seed(assessment: AssessmentData) -> float:
    """Weighted hash of the numeric answers, reduced into [0, 1)."""
    wc, wm, wl, wt = SEED_WEIGHTS
    total = (
        assessment.competitiveness * wc
        + assessment.money_motivation * wm
        + likert_mean(assessment) * wl
        + true_scale_reversed_mean(assessment) * wt
    )
    return math.fmod(total, 1)


def pick_phrase(phrases: List[str], seed: float) -> str:
    idx = min(max(math.floor(seed * len(phrases)), 0), len(phrases) - 1)
    return phrases[idx]


def summarize(assessment: AssessmentData) -> List[str]:
    """
    Build the five-paragraph admin summary for an assessment.

    Paragraph order is fixed: competitiveness, money motivation, Likert
    alignment, true-scale fit, closing by fit category.
    """
    comp_band = band_scale(assessment.competitiveness)
    money_band = band_scale(assessment.money_motivation)
    lik_band = band_likert(likert_mean(assessment))
    true_band = band_true_scale(true_scale_reversed_mean(assessment))

    # Partial answer sets still get a summary, so score leniently here.
    fit_category = score_assessment(assessment, strict=False).fit_category
    closing = FIT_CATEGORY_CLOSING.get(fit_category, FIT_CATEGORY_CLOSING[FitCategory.REVIEW])

    seed = summary_seed(assessment)
    tables = (
        COMPETITIVENESS_PHRASES[comp_band],
        MONEY_MOTIVATION_PHRASES[money_band],
        LIKERT_ALIGNMENT_PHRASES[lik_band],
        TRUE_SCALE_FIT_PHRASES[true_band],
        closing,
    )
    return [
        pick_phrase(phrases, math.fmod(seed + offset, 1))
        for phrases, offset in zip(tables, PHRASE_OFFSETS)
    ]
