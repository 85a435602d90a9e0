"""Event entities for speed learning sessions."""

from dataclasses import dataclass


class InboundEvent:
    """Base class for inbound events."""

    pass


@dataclass
class SubmitTextEvent(InboundEvent):
    """Event carrying the text the user wants to read."""

    text: str


@dataclass
class ConfirmEvent(InboundEvent):
    """Event confirming the user is ready to start the countdown."""

    pass


@dataclass
class TogglePlaybackEvent(InboundEvent):
    """Event to pause or resume the word presentation."""

    pass


@dataclass
class SetWordDelayEvent(InboundEvent):
    """Event to change the base delay per word."""

    delay_ms: int


@dataclass
class ContinueToQuizEvent(InboundEvent):
    """Event to leave the recap and start the quiz."""

    pass


@dataclass
class AnswerEvent(InboundEvent):
    """Event carrying an answer to the current question."""

    answer: str


@dataclass
class DontKnowEvent(InboundEvent):
    """Event marking the current question as "Don't know"."""

    pass


@dataclass
class SwipeEvent(InboundEvent):
    """Event describing a horizontal drag on the question card."""

    start_x: float
    end_x: float


@dataclass
class PreviousQuestionEvent(InboundEvent):
    """Event to review the previous question."""

    pass


@dataclass
class NextQuestionEvent(InboundEvent):
    """Event to move forward while reviewing questions."""

    pass


@dataclass
class FinishQuizEvent(InboundEvent):
    """Event dismissing the graded report."""

    pass


@dataclass
class CloseEvent(InboundEvent):
    """Event to close the session."""

    pass
