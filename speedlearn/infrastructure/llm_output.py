"""Lenient parsing of JSON produced by language models.

Malformed output never raises: it degrades to an empty list and a warning.
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from ..domain.entities.study_material import GradedAnswer, Question

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class MalformedOutputError(ValueError):
    """Raised when model output holds no decodable JSON."""


def decode_json(raw: str) -> Any:
    """Decode ``raw`` as JSON, falling back to the first markdown code fence.

    Raises:
        MalformedOutputError: If neither form decodes.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass
    fenced = _CODE_FENCE.search(raw)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except json.JSONDecodeError:
            pass
    raise MalformedOutputError("Model output is not valid JSON")


def questions_from_data(data: Any) -> list[Question]:
    """Validate decoded question data, dropping invalid items."""
    if not isinstance(data, list):
        logger.warning(f"Expected a list of questions, got {type(data).__name__}")
        return []

    questions = []
    for item in data:
        try:
            questions.append(Question.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping malformed question {item!r}: {e.error_count()} errors")
    return questions


def parse_questions(raw: str) -> list[Question]:
    try:
        data = decode_json(raw)
    except MalformedOutputError:
        logger.warning(f"Failed to parse flashcard questions: {raw[:200]!r}")
        return []
    return questions_from_data(data)


def graded_answers_from_data(data: Any) -> list[GradedAnswer]:
    """Validate decoded grading data, dropping invalid items."""
    if not isinstance(data, list):
        logger.warning(f"Expected a list of graded answers, got {type(data).__name__}")
        return []

    graded = []
    for item in data:
        try:
            graded.append(GradedAnswer.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping malformed graded answer {item!r}: {e.error_count()} errors")
    return graded


def parse_graded_answers(raw: str) -> list[GradedAnswer]:
    try:
        data = decode_json(raw)
    except MalformedOutputError:
        logger.warning(f"Failed to parse grading result: {raw[:200]!r}")
        return []
    return graded_answers_from_data(data)
