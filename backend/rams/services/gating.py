"""Competency questionnaire and fixed legal text.

The questionnaire is a self-declaration gate: three questions, three
points for the best answer and one for any other. A total of 7 or more
marks the preparer as competent.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BEST_ANSWER_POINTS = 3
OTHER_ANSWER_POINTS = 1
PASS_MARK = 7

LEGAL_DISCLAIMER = (
    "This RAMS document is generated to assist with health and safety planning. "
    "It does not replace a site-specific risk assessment carried out by a "
    "competent person. The duty holder remains responsible for ensuring the "
    "work complies with CDM 2015, the Health and Safety at Work etc. Act 1974 "
    "and all other applicable UK legislation. Review and adapt the content "
    "before work starts."
)

AI_DISCLAIMER = (
    "This RAMS was AI-generated and must be reviewed by a competent person before use"
)


@dataclass(frozen=True)
class CompetencyQuestion:
    id: str
    question: str
    options: tuple[str, ...]
    best_answer: str


QUESTIONS = (
    CompetencyQuestion(
        id="cdm_knowledge",
        question="Are you familiar with CDM Regulations 2015 and your duties under them?",
        options=(
            "Yes - I understand my legal duties",
            "Somewhat familiar",
            "No - I need training",
        ),
        best_answer="Yes - I understand my legal duties",
    ),
    CompetencyQuestion(
        id="rams_experience",
        question="How many years of experience do you have creating/reviewing RAMS?",
        options=(
            "5+ years professional experience",
            "2-5 years experience",
            "Less than 2 years",
            "No formal experience",
        ),
        best_answer="5+ years professional experience",
    ),
    CompetencyQuestion(
        id="qualifications",
        question="What safety qualifications do you hold?",
        options=(
            "NEBOSH/IOSH + construction experience",
            "Basic safety qualifications",
            "No formal qualifications",
        ),
        best_answer="NEBOSH/IOSH + construction experience",
    ),
)

QUESTIONS_BY_ID = {q.id: q for q in QUESTIONS}


class CompetencyError(ValueError):
    """Answers are missing or not among the offered options."""


@dataclass
class CompetencyResult:
    score: int
    max_score: int
    verified: bool


def score_competency(answers: dict[str, str]) -> CompetencyResult:
    """Score questionnaire answers.

    Raises:
        CompetencyError: An answer is missing, names an unknown question,
            or is not one of the question's options.
    """
    unknown = set(answers) - set(QUESTIONS_BY_ID)
    if unknown:
        raise CompetencyError(f"Unknown questions: {', '.join(sorted(unknown))}")

    score = 0
    for question in QUESTIONS:
        answer = answers.get(question.id)
        if not answer:
            raise CompetencyError(f"Missing answer: {question.id}")
        if answer not in question.options:
            raise CompetencyError(f"Invalid answer for {question.id}: {answer}")
        score += BEST_ANSWER_POINTS if answer == question.best_answer else OTHER_ANSWER_POINTS

    verified = score >= PASS_MARK
    logger.info("Competency check scored %d (verified=%s)", score, verified)
    return CompetencyResult(
        score=score,
        max_score=BEST_ANSWER_POINTS * len(QUESTIONS),
        verified=verified,
    )


def question_to_dict(q: CompetencyQuestion) -> dict:
    return {
        "id": q.id,
        "question": q.question,
        "options": list(q.options),
    }


def competency_to_dict(result: CompetencyResult) -> dict:
    return {
        "score": result.score,
        "maxScore": result.max_score,
        "verified": result.verified,
        "passMark": PASS_MARK,
    }
