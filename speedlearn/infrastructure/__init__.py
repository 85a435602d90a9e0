"""Infrastructure layer components."""

from .bedrock_study_assistant import BedrockConfig, BedrockStudyAssistant
from .http_study_assistant import HttpStudyAssistant
from .local_session_repository import LocalSessionRepository
from .openai_study_assistant import OpenAIStudyAssistant
from .simple_study_assistant import SimpleStudyAssistant
from .system_clock import SystemClock

__all__ = [
    "BedrockConfig",
    "BedrockStudyAssistant",
    "HttpStudyAssistant",
    "LocalSessionRepository",
    "OpenAIStudyAssistant",
    "SimpleStudyAssistant",
    "SystemClock",
]
