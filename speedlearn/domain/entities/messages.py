"""Outbound message entities.

Services put these on their outbound queue; each one carries the pydantic
``payload`` that the WebSocket layer serializes.
"""

from dataclasses import dataclass, field
from typing import Optional

from .session import Phase
from .study_material import GradedAnswer, QuestionKind
from .websocket_messages import (
    AudioCue,
    AudioCueKind,
    CardFlip,
    CountdownTick,
    ErrorCode,
    ErrorMessage,
    Loading,
    PhaseChanged,
    PlaybackState,
    QuestionShown,
    QuizEmpty,
    QuizGrading,
    QuizReport,
    RecapReady,
    ServerNotice,
    SessionReady,
    TimeRemaining,
    WordShown,
)


class OutboundMessage:
    """Base class for outbound messages."""

    pass


@dataclass
class SessionReadyMessage(OutboundMessage):
    """Message indicating session is ready to accept events."""

    session_id: str
    phase: Phase
    payload: SessionReady = field(init=False)

    def __post_init__(self):
        self.payload = SessionReady(session_id=self.session_id, phase=self.phase)


@dataclass
class PhaseMessage(OutboundMessage):
    """Message announcing a phase change."""

    phase: Phase
    text: Optional[str] = None
    payload: PhaseChanged = field(init=False)

    def __post_init__(self):
        self.payload = PhaseChanged(phase=self.phase, text=self.text)


@dataclass
class CountdownMessage(OutboundMessage):
    """Message containing a countdown number."""

    value: int
    payload: CountdownTick = field(init=False)

    def __post_init__(self):
        self.payload = CountdownTick(value=self.value)


@dataclass
class AudioCueMessage(OutboundMessage):
    """Message asking the client to play a sound."""

    cue: AudioCueKind
    payload: AudioCue = field(init=False)

    def __post_init__(self):
        self.payload = AudioCue(cue=self.cue)


@dataclass
class WordMessage(OutboundMessage):
    """Message containing the word to display."""

    word: str
    index: int
    total: int
    payload: WordShown = field(init=False)

    def __post_init__(self):
        self.payload = WordShown(word=self.word, index=self.index, total=self.total)


@dataclass
class TimeRemainingMessage(OutboundMessage):
    """Message containing the remaining reading time."""

    seconds: int
    budget_seconds: int
    payload: TimeRemaining = field(init=False)

    def __post_init__(self):
        self.payload = TimeRemaining(seconds=self.seconds, budget_seconds=self.budget_seconds)


@dataclass
class PlaybackMessage(OutboundMessage):
    """Message containing the play/pause state."""

    playing: bool
    word_delay_ms: int
    payload: PlaybackState = field(init=False)

    def __post_init__(self):
        self.payload = PlaybackState(playing=self.playing, word_delay_ms=self.word_delay_ms)


@dataclass
class LoadingMessage(OutboundMessage):
    """Message toggling the loading indicator."""

    active: bool
    payload: Loading = field(init=False)

    def __post_init__(self):
        self.payload = Loading(active=self.active)


@dataclass
class RecapMessage(OutboundMessage):
    """Message containing the recap summary."""

    summary: str
    payload: RecapReady = field(init=False)

    def __post_init__(self):
        self.payload = RecapReady(summary=self.summary)


@dataclass
class QuestionMessage(OutboundMessage):
    """Message containing the question card to display."""

    index: int
    total: int
    question: str
    kind: QuestionKind
    recorded_answer: Optional[str] = None
    read_only: bool = False
    payload: QuestionShown = field(init=False)

    def __post_init__(self):
        self.payload = QuestionShown(
            index=self.index,
            total=self.total,
            question=self.question,
            kind=self.kind,
            recorded_answer=self.recorded_answer,
            read_only=self.read_only,
        )


@dataclass
class CardFlipMessage(OutboundMessage):
    """Message marking the start or end of a card flip."""

    flipping: bool
    payload: CardFlip = field(init=False)

    def __post_init__(self):
        self.payload = CardFlip(flipping=self.flipping)


@dataclass
class QuizEmptyMessage(OutboundMessage):
    """Message shown when the quiz has no questions."""

    message: str = "No questions found"
    payload: QuizEmpty = field(init=False)

    def __post_init__(self):
        self.payload = QuizEmpty(message=self.message)


@dataclass
class GradingMessage(OutboundMessage):
    """Message indicating the answers are being graded."""

    answered: int
    payload: QuizGrading = field(init=False)

    def __post_init__(self):
        self.payload = QuizGrading(answered=self.answered)


@dataclass
class ReportMessage(OutboundMessage):
    """Message containing the graded report."""

    graded_answers: list[GradedAnswer]
    payload: QuizReport = field(init=False)

    def __post_init__(self):
        self.payload = QuizReport(
            graded_answers=self.graded_answers,
            correct=sum(1 for graded in self.graded_answers if graded.correct),
            total=len(self.graded_answers),
        )


@dataclass
class NoticeMessage(OutboundMessage):
    """Message containing a notice."""

    message: str
    payload: ServerNotice = field(init=False)

    def __post_init__(self):
        self.payload = ServerNotice(message=self.message)


@dataclass
class ErrorOutMessage(OutboundMessage):
    """Message containing an error."""

    code: ErrorCode
    message: str
    payload: ErrorMessage = field(init=False)

    def __post_init__(self):
        self.payload = ErrorMessage(code=self.code, message=self.message)
