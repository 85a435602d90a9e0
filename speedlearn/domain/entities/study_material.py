"""Study material entities: questions, answers and grading results."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DONT_KNOW_ANSWER = "Don't know"


class QuestionKind(str, Enum):
    """How a question is answered."""

    YES_NO = "yesno"
    FREE_TEXT = "text"


class Question(BaseModel):
    """A single quiz question as produced by the study assistant.

    The wire format uses ``question`` and ``type`` as keys; both the wire
    names and the attribute names are accepted on input.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(alias="question", min_length=1)
    kind: QuestionKind = Field(alias="type")


class AnswerRecord(BaseModel):
    """One user response to one quiz question.

    ``correct`` stays ``None`` until grading, except for "Don't know"
    answers which are marked incorrect up front.
    """

    model_config = ConfigDict(populate_by_name=True)

    question: str
    answer: str = Field(alias="userAnswer")
    correct: Optional[bool] = None

    @property
    def is_dont_know(self) -> bool:
        return self.answer == DONT_KNOW_ANSWER


class GradedAnswer(BaseModel):
    """A graded answer returned by the study assistant."""

    question: str
    answer: str = ""
    correct: bool


class GenerationResult(BaseModel):
    """Recap and quiz generated for a text."""

    summary: str = ""
    questions: list[Question] = Field(default_factory=list)
