"""Domain services for the speed learning application."""

from .pacing_engine import WordPacingEngine, effective_delay_ms, tokenize
from .phase_controller import SessionPhaseController
from .quiz_runner import QuizRunner, QuizStatus

__all__ = [
    "SessionPhaseController",
    "WordPacingEngine",
    "QuizRunner",
    "QuizStatus",
    "tokenize",
    "effective_delay_ms",
]
