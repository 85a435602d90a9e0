"""HTTP request/response models for the study assistant endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from .study_material import AnswerRecord, GradedAnswer, Question


class GenerateRequest(BaseModel):
    """Body of ``POST /generate``."""

    text: str


class GenerateResponse(BaseModel):
    """Response of ``POST /generate``."""

    summary: str = ""
    questions: list[Question] = Field(default_factory=list)


class GradeRequest(BaseModel):
    """Body of ``POST /grade``."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "questions": [{"question": "Is the fox brown?", "userAnswer": "Yes"}],
                "originalText": "The quick brown fox jumps",
            }
        },
    )

    questions: list[AnswerRecord] = Field(default_factory=list)
    original_text: str = Field(alias="originalText")


class GradeResponse(BaseModel):
    """Response of ``POST /grade``."""

    model_config = ConfigDict(populate_by_name=True)

    graded_answers: list[GradedAnswer] = Field(default_factory=list, alias="gradedAnswers")
