"""WebSocket message models for the speed learning application."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from .session import Phase
from .study_material import GradedAnswer, QuestionKind


# ===== Client → Server Messages =====


class TextSubmit(BaseModel):
    """Text submitted from the input phase."""

    type: Literal["text.submit"] = "text.submit"
    text: str


class SessionConfirm(BaseModel):
    """User confirmed they are ready."""

    type: Literal["session.confirm"] = "session.confirm"


class ReadingToggle(BaseModel):
    """Pause or resume the word presentation."""

    type: Literal["reading.toggle"] = "reading.toggle"


class ReadingSpeed(BaseModel):
    """New base delay per word from the speed slider.

    The range is checked by the session, which answers with ``INVALID_SPEED``.
    """

    type: Literal["reading.speed"] = "reading.speed"
    word_delay_ms: int


class RecapContinue(BaseModel):
    """Leave the recap and start the quiz."""

    type: Literal["recap.continue"] = "recap.continue"


class QuizAnswer(BaseModel):
    """Answer to the current question ("Yes", "No" or free text)."""

    type: Literal["quiz.answer"] = "quiz.answer"
    answer: str


class QuizDontKnow(BaseModel):
    """The "Don't know" button."""

    type: Literal["quiz.dont_know"] = "quiz.dont_know"


class QuizSwipe(BaseModel):
    """Horizontal drag on the question card, in pixels."""

    type: Literal["quiz.swipe"] = "quiz.swipe"
    start_x: float
    end_x: float


class QuizPrevious(BaseModel):
    """Review the previous question."""

    type: Literal["quiz.previous"] = "quiz.previous"


class QuizNext(BaseModel):
    """Move forward while reviewing."""

    type: Literal["quiz.next"] = "quiz.next"


class QuizFinish(BaseModel):
    """Dismiss the graded report."""

    type: Literal["quiz.finish"] = "quiz.finish"


# Union type for all client messages
ClientMessage = Annotated[
    Union[
        TextSubmit,
        SessionConfirm,
        ReadingToggle,
        ReadingSpeed,
        RecapContinue,
        QuizAnswer,
        QuizDontKnow,
        QuizSwipe,
        QuizPrevious,
        QuizNext,
        QuizFinish,
    ],
    Field(discriminator="type"),
]

client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


# ===== Server → Client Messages =====


class SessionCreated(BaseModel):
    """Session created confirmation from server."""

    type: Literal["session.created"] = "session.created"
    session_id: str


class SessionReady(BaseModel):
    """Session is ready to accept events."""

    type: Literal["session.ready"] = "session.ready"
    session_id: str
    phase: Phase


class PhaseChanged(BaseModel):
    """The session entered a new phase.

    ``text`` carries the session text in the input and confirm phases, so
    the client can pre-fill it after a finished quiz.
    """

    type: Literal["phase.changed"] = "phase.changed"
    phase: Phase
    text: Optional[str] = None


class CountdownTick(BaseModel):
    """Countdown number to display."""

    type: Literal["countdown.tick"] = "countdown.tick"
    value: int = Field(ge=1)


class AudioCueKind(str, Enum):
    """Sounds the client should play."""

    BEEP = "beep"
    GO = "go"


class AudioCue(BaseModel):
    """Instruction to play a sound."""

    type: Literal["audio.cue"] = "audio.cue"
    cue: AudioCueKind


class WordShown(BaseModel):
    """Word to display, with its position in the text."""

    type: Literal["reading.word"] = "reading.word"
    word: str
    index: int = Field(ge=0)
    total: int = Field(ge=0)


class TimeRemaining(BaseModel):
    """Seconds left in the reading time budget."""

    type: Literal["reading.time"] = "reading.time"
    seconds: int = Field(ge=0)
    budget_seconds: int = Field(ge=1)


class PlaybackState(BaseModel):
    """Current play/pause state and speed."""

    type: Literal["reading.playback"] = "reading.playback"
    playing: bool
    word_delay_ms: int


class Loading(BaseModel):
    """Loading indicator while the study assistant works."""

    type: Literal["loading"] = "loading"
    active: bool


class RecapReady(BaseModel):
    """Summary to show in the recap phase."""

    type: Literal["recap.ready"] = "recap.ready"
    summary: str


class QuestionShown(BaseModel):
    """Question card to display."""

    type: Literal["quiz.question"] = "quiz.question"
    index: int = Field(ge=0)
    total: int = Field(ge=1)
    question: str
    kind: QuestionKind
    recorded_answer: Optional[str] = Field(
        default=None, description="Set when reviewing an answered question"
    )
    read_only: bool = False


class CardFlip(BaseModel):
    """Card flip transition started or ended."""

    type: Literal["quiz.flip"] = "quiz.flip"
    flipping: bool


class QuizEmpty(BaseModel):
    """Terminal message when there is nothing to ask."""

    type: Literal["quiz.empty"] = "quiz.empty"
    message: str = "No questions found"


class QuizGrading(BaseModel):
    """Answers were sent for grading."""

    type: Literal["quiz.grading"] = "quiz.grading"
    answered: int = Field(ge=0)


class QuizReport(BaseModel):
    """Graded report."""

    type: Literal["quiz.report"] = "quiz.report"
    graded_answers: list[GradedAnswer] = Field(default_factory=list)
    correct: int = Field(ge=0)
    total: int = Field(ge=0)


class ServerNotice(BaseModel):
    """Server notice message."""

    type: Literal["server_notice"] = "server_notice"
    message: str


class ErrorCode(str, Enum):
    """Error codes for WebSocket errors."""

    INVALID_MESSAGE = "INVALID_MESSAGE"
    INVALID_SPEED = "INVALID_SPEED"
    GENERATION_FAILED = "GENERATION_FAILED"
    GRADING_FAILED = "GRADING_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorMessage(BaseModel):
    """Error message from server."""

    type: Literal["error"] = "error"
    code: ErrorCode
    message: str
