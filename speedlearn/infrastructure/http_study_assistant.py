"""HTTP implementation of StudyAssistant.

Talks to a remote service exposing ``POST /generate`` and ``POST /grade``
with the same request and response shapes this application serves.
"""

import logging
from typing import Optional

import httpx

from ..domain.entities.study_material import AnswerRecord, GenerationResult, GradedAnswer
from .llm_output import graded_answers_from_data, questions_from_data

logger = logging.getLogger(__name__)


class HttpStudyAssistant:
    """StudyAssistant backed by a remote generate/grade HTTP service."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the HTTP study assistant.

        Args:
            base_url: Root URL of the remote service.
            timeout_seconds: Per-request timeout.
            transport: Optional transport, mainly for tests.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self._transport,
        )

    async def generate(self, text: str) -> GenerationResult:
        logger.info(f"Requesting recap and questions from {self.base_url}/generate")
        async with self._client() as client:
            response = await client.post("/generate", json={"text": text})
            response.raise_for_status()
            data = response.json()

        return GenerationResult(
            summary=data.get("summary") or "",
            questions=questions_from_data(data.get("questions", [])),
        )

    async def grade(self, answers: list[AnswerRecord], original_text: str) -> list[GradedAnswer]:
        logger.info(f"Requesting grades for {len(answers)} answers from {self.base_url}/grade")
        payload = {
            "questions": [record.model_dump(by_alias=True, exclude={"correct"}) for record in answers],
            "originalText": original_text,
        }
        async with self._client() as client:
            response = await client.post("/grade", json=payload)
            response.raise_for_status()
            data = response.json()

        return graded_answers_from_data(data.get("gradedAnswers", []))
