"""Speed Learning Controller for handling business logic and coordination."""

import logging
from typing import Dict, Optional

from fastapi import WebSocket

from ..domain.entities import SpeedSession
from ..domain.entities.api_messages import GenerateResponse, GradeRequest, GradeResponse
from ..domain.entities.websocket_messages import SessionCreated
from ..domain.interfaces.clock import Clock
from ..domain.interfaces.session_repository import SessionRepository
from ..domain.interfaces.study_assistant import StudyAssistant
from ..domain.services import SessionPhaseController
from ..infrastructure.system_clock import SystemClock
from .config import Settings
from .websocket_handler import WebSocketHandler

logger = logging.getLogger(__name__)


class SpeedLearningController:
    """
    Controller for coordinating speed learning operations.

    This controller is injected with all necessary collaborators and handles
    the business logic for each endpoint, keeping the API layer thin.
    """

    def __init__(
        self,
        study_assistant: StudyAssistant,
        session_repository: SessionRepository,
        settings: Settings,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            study_assistant: Generates recaps and quizzes and grades answers
            session_repository: Repository holding sessions for the process lifetime
            settings: Pacing, countdown and quiz timings
            clock: Time source for session timers (defaults to the system clock)
        """
        self.study_assistant = study_assistant
        self.session_repository = session_repository
        self.settings = settings
        self.clock = clock or SystemClock()
        self._live: Dict[str, SessionPhaseController] = {}

        logger.info("SpeedLearningController initialized with providers")

    def create_phase_controller(self, session: SpeedSession) -> SessionPhaseController:
        return SessionPhaseController(
            session,
            self.study_assistant,
            self.clock,
            time_budget_seconds=self.settings.reading_time_budget_seconds,
            countdown_from=self.settings.countdown_from,
            go_hold_seconds=self.settings.go_hold_seconds,
            card_flip_seconds=self.settings.card_flip_seconds,
            swipe_threshold_px=self.settings.swipe_threshold_px,
        )

    async def handle_websocket_connection(self, websocket: WebSocket) -> None:
        logger.info(f"Handling new WebSocket connection from {websocket.client}")

        session = SpeedSession(per_word_delay_ms=self.settings.default_word_delay_ms)
        await self.session_repository.save_session(session)
        logger.info(f"Created new session {session.id}")

        await websocket.send_text(SessionCreated(session_id=str(session.id)).model_dump_json())

        phase_controller = self.create_phase_controller(session)
        handler = WebSocketHandler(phase_controller=phase_controller)
        self._live[str(session.id)] = phase_controller

        await phase_controller.start()
        try:
            await handler.handle_websocket(websocket)
        finally:
            # A session lives as long as its browser tab
            self._live.pop(str(session.id), None)
            await self.session_repository.delete_session(str(session.id))
            logger.info(f"Session {session.id} removed after disconnect")

    async def generate(self, text: str) -> GenerateResponse:
        """Produce a recap and quiz for ``text``."""
        logger.info(f"Generating study material for {len(text.split())} words")
        result = await self.study_assistant.generate(text)
        return GenerateResponse(summary=result.summary, questions=result.questions)

    async def grade(self, request: GradeRequest) -> GradeResponse:
        """Grade the user's answers against the original text."""
        logger.info(f"Grading {len(request.questions)} answers")
        graded = await self.study_assistant.grade(request.questions, request.original_text)
        return GradeResponse(graded_answers=graded)

    async def get_session_state(self, session_id: str) -> dict:
        """
        Get a snapshot of a session.

        Raises:
            ValueError: If the session is not found.
        """
        live = self._live.get(session_id)
        if live is not None:
            return {**live.get_session_state(), "connected": True}

        session = await self.session_repository.get_session(session_id)
        return {
            "session_id": str(session.id),
            "phase": session.phase.value,
            "word_delay_ms": session.per_word_delay_ms,
            "reading_round": session.reading_round,
            "recap": session.recap,
            "question_count": len(session.quiz),
            "last_activity": session.last_activity_at.isoformat(),
            "connected": False,
        }

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "active_sessions": len(self._live),
            "providers": {
                "study_assistant": type(self.study_assistant).__name__,
                "session_repository": type(self.session_repository).__name__,
                "clock": type(self.clock).__name__,
            },
        }
