"""OpenAI implementation of StudyAssistant using chat completions."""

import asyncio
import logging
from typing import Optional

from openai import AsyncOpenAI

from ..domain.entities.study_material import AnswerRecord, GenerationResult, GradedAnswer
from .llm_output import parse_graded_answers, parse_questions
from .prompts import QUESTION_COUNT, grading_prompt, questions_prompt, summary_prompt

logger = logging.getLogger(__name__)


class OpenAIStudyAssistant:
    """StudyAssistant that prompts an OpenAI chat model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-3.5-turbo",
        question_count: int = QUESTION_COUNT,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.question_count = question_count
        self.client = client or AsyncOpenAI(api_key=api_key)

    async def _complete(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def generate(self, text: str) -> GenerationResult:
        logger.info(f"Requesting recap and questions from OpenAI model {self.model}")
        summary, raw_questions = await asyncio.gather(
            self._complete(summary_prompt(text)),
            self._complete(questions_prompt(text, self.question_count)),
        )
        return GenerationResult(summary=summary.strip(), questions=parse_questions(raw_questions))

    async def grade(self, answers: list[AnswerRecord], original_text: str) -> list[GradedAnswer]:
        logger.info(f"Requesting grades for {len(answers)} answers from OpenAI model {self.model}")
        raw = await self._complete(grading_prompt(answers, original_text))
        return parse_graded_answers(raw)
