"""Session entities for the speed learning application."""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .study_material import Question


MIN_WORD_DELAY_MS = 100
MAX_WORD_DELAY_MS = 1000
DEFAULT_WORD_DELAY_MS = 400


class Phase(str, Enum):
    """Top-level phases of a speed learning session."""
    INPUT = "input"
    CONFIRM = "confirm"
    COUNTDOWN = "countdown"
    GO = "go"
    READING = "reading"
    RECAP = "recap"
    QUIZ = "quiz"


class SpeedSession(BaseModel):
    """Session entity holding the text, the current phase and the study material.

    Only the phase controller mutates a session. The two ``has_requested_*``
    flags are one-shot guards: each is set the first time the matching
    request is issued and cleared only when a new reading round starts.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "example": {
                "id": "12345678-1234-5678-1234-567812345678",
                "raw_text": "The quick brown fox jumps",
                "phase": "reading",
                "countdown": None,
                "recap": "",
                "quiz": [],
                "per_word_delay_ms": 400,
            }
        },
    )

    id: UUID = Field(default_factory=uuid.uuid4)
    raw_text: str = ""
    phase: Phase = Phase.INPUT
    countdown: Optional[int] = Field(default=None, ge=0)
    recap: str = ""
    quiz: list[Question] = Field(default_factory=list)
    per_word_delay_ms: int = Field(
        default=DEFAULT_WORD_DELAY_MS, ge=MIN_WORD_DELAY_MS, le=MAX_WORD_DELAY_MS
    )
    has_requested_generation: bool = False
    has_requested_grading: bool = False
    reading_round: int = Field(default=0, ge=0)
    started_at: datetime = Field(default_factory=datetime.utcnow)
    last_activity_at: datetime = Field(default_factory=datetime.utcnow)

    def touch(self) -> None:
        self.last_activity_at = datetime.utcnow()
