"""Amazon Bedrock implementation of StudyAssistant using the Converse API."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aioboto3

from ..domain.entities.study_material import AnswerRecord, GenerationResult, GradedAnswer
from .llm_output import parse_graded_answers, parse_questions
from .prompts import QUESTION_COUNT, grading_prompt, questions_prompt, summary_prompt

logger = logging.getLogger(__name__)


@dataclass
class BedrockConfig:
    """Configuration for the Bedrock study assistant."""
    region: str = 'us-east-1'
    model_id: str = 'amazon.nova-lite-v1:0'
    max_tokens: int = 1024
    temperature: float = 0.7
    top_p: float = 0.9
    question_count: int = QUESTION_COUNT
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None


class BedrockStudyAssistant:
    """StudyAssistant that prompts a Bedrock text model."""

    def __init__(self, config: Optional[BedrockConfig] = None):
        self.config = config or BedrockConfig()
        self._session = aioboto3.Session(
            aws_access_key_id=self.config.aws_access_key_id,
            aws_secret_access_key=self.config.aws_secret_access_key,
            aws_session_token=self.config.aws_session_token,
            region_name=self.config.region,
        )

    async def _complete(self, client, prompt: str) -> str:
        response = await client.converse(
            modelId=self.config.model_id,
            messages=[{"role": "user", "content": [{"text": prompt}]}],
            inferenceConfig={
                "maxTokens": self.config.max_tokens,
                "temperature": self.config.temperature,
                "topP": self.config.top_p,
            },
        )
        content = response.get("output", {}).get("message", {}).get("content", [])
        return "".join(block.get("text", "") for block in content)

    async def generate(self, text: str) -> GenerationResult:
        logger.info(f"Requesting recap and questions from Bedrock model {self.config.model_id}")
        async with self._session.client("bedrock-runtime", region_name=self.config.region) as client:
            summary, raw_questions = await asyncio.gather(
                self._complete(client, summary_prompt(text)),
                self._complete(client, questions_prompt(text, self.config.question_count)),
            )

        return GenerationResult(summary=summary.strip(), questions=parse_questions(raw_questions))

    async def grade(self, answers: list[AnswerRecord], original_text: str) -> list[GradedAnswer]:
        logger.info(f"Requesting grades for {len(answers)} answers from Bedrock model {self.config.model_id}")
        async with self._session.client("bedrock-runtime", region_name=self.config.region) as client:
            raw = await self._complete(client, grading_prompt(answers, original_text))

        return parse_graded_answers(raw)
