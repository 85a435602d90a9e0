"""Simple stub implementation of StudyAssistant for testing and development."""

import logging

from ..domain.entities.study_material import (
    AnswerRecord,
    GenerationResult,
    GradedAnswer,
    Question,
    QuestionKind,
)

logger = logging.getLogger(__name__)

SUMMARY_WORD_LIMIT = 30


class SimpleStudyAssistant:
    """
    A simple stub implementation of the StudyAssistant interface.

    No model is called. The recap is the opening of the text and the
    questions are built from its words, so every run over the same text
    produces the same quiz. Grading accepts any answer except "Don't know"
    or a blank one.
    """

    def __init__(self, question_count: int = 3):
        self.question_count = question_count
        self.generate_calls = 0
        self.grade_calls = 0

    async def generate(self, text: str) -> GenerationResult:
        self.generate_calls += 1
        words = text.split()
        logger.debug(f"SimpleStudyAssistant generating material for {len(words)} words")

        summary = " ".join(words[:SUMMARY_WORD_LIMIT])
        if len(words) > SUMMARY_WORD_LIMIT:
            summary += " ..."

        keyword = max(words, key=len) if words else ""
        candidates = [
            Question(text=f'Does the text mention "{keyword}"?', kind=QuestionKind.YES_NO),
            Question(text="What is the main idea of the text?", kind=QuestionKind.FREE_TEXT),
            Question(
                text=f"Does the text have more than {SUMMARY_WORD_LIMIT} words?",
                kind=QuestionKind.YES_NO,
            ),
        ]
        questions = candidates[: self.question_count] if keyword else []

        return GenerationResult(summary=summary, questions=questions)

    async def grade(self, answers: list[AnswerRecord], original_text: str) -> list[GradedAnswer]:
        self.grade_calls += 1
        logger.debug(f"SimpleStudyAssistant grading {len(answers)} answers")

        return [
            GradedAnswer(
                question=record.question,
                answer=record.answer,
                correct=bool(record.answer.strip()) and not record.is_dont_know,
            )
            for record in answers
        ]
