"""Domain interfaces for the speed learning application."""

from .clock import Clock
from .session_repository import SessionRepository
from .study_assistant import StudyAssistant

__all__ = ["Clock", "SessionRepository", "StudyAssistant"]
