"""Domain entities for the speed learning application."""

from .api_messages import GenerateRequest, GenerateResponse, GradeRequest, GradeResponse
from .events import (
    AnswerEvent,
    CloseEvent,
    ConfirmEvent,
    ContinueToQuizEvent,
    DontKnowEvent,
    FinishQuizEvent,
    InboundEvent,
    NextQuestionEvent,
    PreviousQuestionEvent,
    SetWordDelayEvent,
    SubmitTextEvent,
    SwipeEvent,
    TogglePlaybackEvent,
)
from .messages import (
    AudioCueMessage,
    CardFlipMessage,
    CountdownMessage,
    ErrorOutMessage,
    GradingMessage,
    LoadingMessage,
    NoticeMessage,
    OutboundMessage,
    PhaseMessage,
    PlaybackMessage,
    QuestionMessage,
    QuizEmptyMessage,
    RecapMessage,
    ReportMessage,
    SessionReadyMessage,
    TimeRemainingMessage,
    WordMessage,
)
from .pacing import READING_TIME_BUDGET_SECONDS, PacingState
from .session import (
    DEFAULT_WORD_DELAY_MS,
    MAX_WORD_DELAY_MS,
    MIN_WORD_DELAY_MS,
    Phase,
    SpeedSession,
)
from .study_material import (
    DONT_KNOW_ANSWER,
    AnswerRecord,
    GenerationResult,
    GradedAnswer,
    Question,
    QuestionKind,
)
from .websocket_messages import (
    AudioCueKind,
    ClientMessage,
    ErrorCode,
    SessionCreated,
    client_message_adapter,
)

__all__ = [
    # Session entities
    "SpeedSession",
    "Phase",
    "DEFAULT_WORD_DELAY_MS",
    "MIN_WORD_DELAY_MS",
    "MAX_WORD_DELAY_MS",
    # Pacing entities
    "PacingState",
    "READING_TIME_BUDGET_SECONDS",
    # Study material entities
    "Question",
    "QuestionKind",
    "AnswerRecord",
    "GradedAnswer",
    "GenerationResult",
    "DONT_KNOW_ANSWER",
    # HTTP message entities
    "GenerateRequest",
    "GenerateResponse",
    "GradeRequest",
    "GradeResponse",
    # Event entities
    "InboundEvent",
    "SubmitTextEvent",
    "ConfirmEvent",
    "TogglePlaybackEvent",
    "SetWordDelayEvent",
    "ContinueToQuizEvent",
    "AnswerEvent",
    "DontKnowEvent",
    "SwipeEvent",
    "PreviousQuestionEvent",
    "NextQuestionEvent",
    "FinishQuizEvent",
    "CloseEvent",
    # Message entities
    "OutboundMessage",
    "SessionReadyMessage",
    "PhaseMessage",
    "CountdownMessage",
    "AudioCueMessage",
    "WordMessage",
    "TimeRemainingMessage",
    "PlaybackMessage",
    "LoadingMessage",
    "RecapMessage",
    "QuestionMessage",
    "CardFlipMessage",
    "QuizEmptyMessage",
    "GradingMessage",
    "ReportMessage",
    "NoticeMessage",
    "ErrorOutMessage",
    # WebSocket message entities
    "ClientMessage",
    "SessionCreated",
    "AudioCueKind",
    "ErrorCode",
    "client_message_adapter",
]
