"""
Question-Bank Assessment Evaluator.

Server-side counterpart of the placement scoring engine. It evaluates
answers drawn from the lesson quiz bank, where each answer carries its own
grade label and subject, and produces a richer result: a confidence level,
the reason for the recommendation, per-subject strengths and weaknesses and
a set of guidance cards.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from gradepath.utils.formatting import COMMON_ENTRANCE_LABEL, grade_label

logger = logging.getLogger(__name__)

GRADE_LABELS = [grade_label(level) for level in range(1, 7)] + [COMMON_ENTRANCE_LABEL]
SCHOOL_GRADES = GRADE_LABELS[:6]

MASTERY_PERCENT = 75
COMFORT_PERCENT = 60
COMMON_ENTRANCE_READY_PERCENT = 70
ADVANCE_OVERALL_PERCENT = 85
NEXT_GRADE_MIN_PERCENT = 50
FOUNDATION_OVERALL_PERCENT = 50
WEAK_SUBJECT_PERCENT = 50
STRONG_SUBJECT_PERCENT = 75

SUBJECT_TIPS = {
    "Mathematics": "Practice daily with different problem types, focus on understanding concepts not just memorizing formulas",
    "English": "Read diverse materials daily, practice writing regularly, build vocabulary through context",
    "Science": "Conduct simple experiments, relate concepts to real-world examples, use diagrams and visual aids",
    "ICT/Computing Skills": "Practice hands-on with computers, learn through projects, explore coding basics",
    "Social Studies": "Connect historical events to current affairs, use maps and timelines, discuss topics with family",
    "Geography": "Study maps regularly, learn about different cultures, relate geography to current events",
    "Civic Education": "Understand rights and responsibilities, discuss civic issues, participate in community activities",
}
DEFAULT_SUBJECT_TIP = "Review lessons regularly, practice consistently, and seek help when needed"


@dataclass(frozen=True)
class BankAnswer:
    question_index: int
    selected_answer: Optional[int]
    correct_answer: int
    grade: str
    subject: str

    @property
    def is_correct(self) -> bool:
        return self.selected_answer == self.correct_answer


@dataclass
class Tally:
    correct: int = 0
    total: int = 0

    def add(self, is_correct: bool) -> None:
        self.total += 1
        if is_correct:
            self.correct += 1

    @property
    def percentage(self) -> float:
        return (self.correct / self.total) * 100 if self.total else 0.0


@dataclass
class GradePerformance:
    grade: str
    tally: Tally = field(default_factory=Tally)
    subjects: Dict[str, Tally] = field(default_factory=dict)


@dataclass
class GuidanceCard:
    type: str
    icon: str
    title: str
    message: str


@dataclass
class EvaluationResult:
    recommended_grade: str
    confidence: str
    reason: str
    overall: Tally
    grade_performance: List[GradePerformance]
    subject_breakdown: Dict[str, Tally]
    weak_subjects: List[str]
    strong_subjects: List[str]
    recommendations: List[GuidanceCard]


def _recommend(
    percentages: Dict[str, float],
    overall_percentage: float
) -> tuple:
    """Returns (recommended grade label, confidence, reason)."""
    mastery_grade = SCHOOL_GRADES[0]
    comfort_grade = SCHOOL_GRADES[0]

    for grade in SCHOOL_GRADES:
        if percentages[grade] >= MASTERY_PERCENT:
            mastery_grade = grade
        if percentages[grade] >= COMFORT_PERCENT:
            comfort_grade = grade

    if (percentages[COMMON_ENTRANCE_LABEL] >= COMMON_ENTRANCE_READY_PERCENT
            and percentages[SCHOOL_GRADES[-1]] >= MASTERY_PERCENT):
        return COMMON_ENTRANCE_LABEL, "high", "exceptional_performance"

    recommended, confidence, reason = mastery_grade, "medium", "mastery_based"

    if overall_percentage >= ADVANCE_OVERALL_PERCENT and mastery_grade != SCHOOL_GRADES[0]:
        next_index = GRADE_LABELS.index(mastery_grade) + 1
        if next_index < len(GRADE_LABELS):
            next_grade = GRADE_LABELS[next_index]
            if percentages[next_grade] >= NEXT_GRADE_MIN_PERCENT:
                recommended, confidence, reason = next_grade, "high", "ready_to_advance"

    if overall_percentage < FOUNDATION_OVERALL_PERCENT:
        recommended, confidence, reason = comfort_grade, "high", "foundation_building"

    return recommended, confidence, reason


def evaluate(answers: Sequence[BankAnswer]) -> EvaluationResult:
    """
    Evaluate a question-bank assessment.

    Answers tagged with an unknown grade label still count toward the overall
    score and subject breakdown but not toward any grade.

    Raises:
        ValueError: if answers is empty
    """
    if not answers:
        raise ValueError("No answers submitted")

    performance = {grade: GradePerformance(grade) for grade in GRADE_LABELS}
    subjects: Dict[str, Tally] = {}
    overall = Tally()

    for answer in answers:
        correct = answer.is_correct
        overall.add(correct)
        subjects.setdefault(answer.subject, Tally()).add(correct)

        grade_perf = performance.get(answer.grade)
        if grade_perf is None:
            logger.debug("Ignoring unknown grade label %r in evaluation", answer.grade)
            continue
        grade_perf.tally.add(correct)
        grade_perf.subjects.setdefault(answer.subject, Tally()).add(correct)

    percentages = {grade: perf.tally.percentage for grade, perf in performance.items()}
    recommended, confidence, reason = _recommend(percentages, overall.percentage)

    weak = [s for s, t in subjects.items() if t.percentage < WEAK_SUBJECT_PERCENT]
    strong = [s for s, t in subjects.items() if t.percentage >= STRONG_SUBJECT_PERCENT]

    logger.info(
        "Evaluated assessment: %d/%d correct, recommended %s (%s)",
        overall.correct, overall.total, recommended, reason
    )

    return EvaluationResult(
        recommended_grade=recommended,
        confidence=confidence,
        reason=reason,
        overall=overall,
        grade_performance=list(performance.values()),
        subject_breakdown=subjects,
        weak_subjects=weak,
        strong_subjects=strong,
        recommendations=build_guidance(recommended, reason, weak, strong),
    )


# ============================================================================
# GUIDANCE CARDS
# ============================================================================

_PRIMARY_CARDS = {
    "exceptional_performance": (
        GuidanceCard(
            "primary", "trophy", "Outstanding Performance!",
            "Excellent work! You've demonstrated exceptional mastery across all grade levels "
            "and are ready for Common Entrance preparation. This advanced level will challenge "
            "you and prepare you for entrance examinations to top secondary schools.",
        ),
        GuidanceCard(
            "action", "target", "Recommended Action Plan",
            "1. Enroll in Common Entrance courses to access advanced materials\n"
            "2. Focus on exam techniques and time management\n"
            "3. Practice with past entrance examination papers\n"
            "4. Join study groups for collaborative learning",
        ),
    ),
    "ready_to_advance": (
        GuidanceCard(
            "primary", "trending-up", "Ready to Level Up!",
            "Great job! Your strong performance indicates you're ready for {grade}. This level "
            "will build on your solid foundation and introduce new concepts at an appropriate pace.",
        ),
        GuidanceCard(
            "action", "book", "Your Learning Path",
            "1. Start with {grade} foundational lessons\n"
            "2. Review any challenging topics from previous grades\n"
            "3. Set weekly learning goals for each subject\n"
            "4. Track your progress with regular quizzes",
        ),
    ),
    "mastery_based": (
        GuidanceCard(
            "primary", "check-circle", "Perfect Match Found!",
            "Based on your performance, {grade} is the ideal starting point. You've shown good "
            "understanding at this level, which will help you learn confidently and effectively.",
        ),
        GuidanceCard(
            "action", "clipboard", "Study Strategy",
            "1. Begin with subjects where you showed strong performance\n"
            "2. Allocate more time to areas needing improvement\n"
            "3. Complete lessons in sequence for better understanding\n"
            "4. Take advantage of video tutorials and interactive content",
        ),
    ),
    "foundation_building": (
        GuidanceCard(
            "primary", "building", "Building Strong Foundations",
            "Starting with {grade} will help you build a strong foundation. This level ensures "
            "you master essential concepts before progressing to more advanced material.",
        ),
        GuidanceCard(
            "action", "layers", "Foundation Strategy",
            "1. Take your time with each lesson - understanding beats speed\n"
            "2. Complete all practice exercises and quizzes\n"
            "3. Don't hesitate to revisit lessons if needed\n"
            "4. Ask questions and seek help when concepts are unclear",
        ),
    ),
}


def _resource_suggestions(grade: str, weak: List[str], strong: List[str]) -> str:
    lines = [
        f"For {grade}:",
        "• Complete all video lessons in sequence",
        "• Take all chapter quizzes for self-assessment",
        "• Download and review lesson notes",
    ]
    if weak:
        lines += [
            f"\nPriority Subjects ({', '.join(weak)}):",
            "• Watch video tutorials multiple times",
            "• Complete all practice exercises",
            "• Use flashcards for key concepts",
            "• Join study groups or get a study buddy",
        ]
    if strong:
        lines += [
            f"\nEnrichment ({', '.join(strong)}):",
            "• Explore advanced topics in these subjects",
            "• Help peers who struggle with these subjects",
            "• Take on challenge exercises",
        ]
    return "\n".join(lines)


def build_guidance(grade: str, reason: str, weak: List[str], strong: List[str]) -> List[GuidanceCard]:
    cards = [
        GuidanceCard(card.type, card.icon, card.title, card.message.format(grade=grade))
        for card in _PRIMARY_CARDS.get(reason, ())
    ]

    if weak:
        tips = "\n".join(f"{s}: {SUBJECT_TIPS.get(s, DEFAULT_SUBJECT_TIP)}" for s in weak)
        cards.append(GuidanceCard(
            "improvement", "alert-circle", "Areas for Improvement",
            f"Focus on these subjects:\n\n{tips}\n\n"
            "Tip: Spend 60% of your study time on these subjects initially.",
        ))
        cards.append(GuidanceCard(
            "study_tip", "lightbulb", "Improvement Techniques",
            "1. Break down complex topics into smaller chunks\n"
            "2. Use multiple learning resources (videos, readings, practice)\n"
            "3. Study in focused 25-minute sessions (Pomodoro technique)\n"
            "4. Review and revise regularly, not just before tests",
        ))

    if strong:
        cards.append(GuidanceCard(
            "strength", "star", "Your Strengths",
            f"You excel in: {', '.join(strong)}. Keep up the excellent work!\n\n"
            "Leverage these strengths: Use your strong subjects to build confidence, "
            "then apply the same study techniques to other areas.",
        ))

    focus = f"focus on {', '.join(weak)}" if weak else "Mathematics, English, Science"
    cards.append(GuidanceCard(
        "schedule", "clock", "Recommended Study Schedule",
        f"Weekly Plan for {grade}:\n"
        f"• Monday-Wednesday: Core subjects ({focus})\n"
        "• Thursday-Friday: Practice & Review\n"
        "• Weekend: Catch-up and enrichment activities\n\n"
        "Aim for: 1-2 hours daily for younger students, 2-3 hours for older students",
    ))
    cards.append(GuidanceCard(
        "resources", "book-open", "Recommended Learning Resources",
        _resource_suggestions(grade, weak, strong),
    ))
    cards.append(GuidanceCard(
        "tracking", "chart", "Track Your Progress",
        "Set these goals:\n1. Complete at least 3 lessons per week\n"
        "2. Achieve 70%+ on all quizzes\n"
        "3. Retake the assessment in 4-6 weeks to measure improvement\n"
        "4. Maintain a study journal to track challenges and breakthroughs",
    ))
    cards.append(GuidanceCard(
        "motivation", "heart", "Remember",
        "Learning is a journey, not a race. Everyone progresses at their own pace. Celebrate "
        "small wins, stay curious, and never stop asking questions. Your dedication to taking "
        "this assessment shows you're committed to your education - that's already a huge "
        "step forward!",
    ))

    return cards
