"""FastAPI application entry point."""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from ..domain.entities.api_messages import GenerateRequest, GenerateResponse, GradeRequest, GradeResponse
from ..domain.interfaces.clock import Clock
from ..domain.interfaces.study_assistant import StudyAssistant
from ..infrastructure.bedrock_study_assistant import BedrockConfig, BedrockStudyAssistant
from ..infrastructure.http_study_assistant import HttpStudyAssistant
from ..infrastructure.local_session_repository import LocalSessionRepository
from ..infrastructure.openai_study_assistant import OpenAIStudyAssistant
from ..infrastructure.simple_study_assistant import SimpleStudyAssistant
from .config import Settings, settings
from .controller import SpeedLearningController

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_study_assistant(settings: Settings) -> StudyAssistant:
    """Create the study assistant selected by ``study_assistant_type``.

    Raises:
        ValueError: If the type is not one of simple, http, bedrock or openai.
    """
    assistant_type = settings.study_assistant_type.lower()

    if assistant_type == "simple":
        return SimpleStudyAssistant(question_count=settings.quiz_question_count)
    if assistant_type == "http":
        return HttpStudyAssistant(
            base_url=settings.study_assistant_base_url,
            timeout_seconds=settings.study_assistant_timeout_seconds,
        )
    if assistant_type == "bedrock":
        return BedrockStudyAssistant(
            BedrockConfig(
                region=settings.aws_region,
                model_id=settings.bedrock_model_id,
                max_tokens=settings.bedrock_max_tokens,
                temperature=settings.bedrock_temperature,
                top_p=settings.bedrock_top_p,
                question_count=settings.quiz_question_count,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                aws_session_token=settings.aws_session_token,
            )
        )
    if assistant_type == "openai":
        return OpenAIStudyAssistant(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            question_count=settings.quiz_question_count,
        )
    raise ValueError(f"Unknown study assistant type: {settings.study_assistant_type}")


def create_app(
    app_settings: Settings = settings,
    study_assistant: Optional[StudyAssistant] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Build the FastAPI app with its controller and routes."""
    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        debug=app_settings.debug,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    assistant = study_assistant or build_study_assistant(app_settings)
    controller = SpeedLearningController(
        study_assistant=assistant,
        session_repository=LocalSessionRepository(),
        settings=app_settings,
        clock=clock,
    )
    app.state.controller = controller
    logger.info(f"Using study assistant {type(assistant).__name__}")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return controller.get_health_status()

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(request: GenerateRequest):
        """Summarize the text and create flashcard questions from it."""
        try:
            return await controller.generate(request.text)
        except Exception as e:
            logger.error(f"Error generating study material: {e}", exc_info=True)
            raise HTTPException(status_code=502, detail="Study assistant request failed")

    @app.post("/grade", response_model=GradeResponse)
    async def grade(request: GradeRequest):
        """Grade the user's answers against the original text."""
        try:
            return await controller.grade(request)
        except Exception as e:
            logger.error(f"Error grading answers: {e}", exc_info=True)
            raise HTTPException(status_code=502, detail="Study assistant request failed")

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: str):
        """Snapshot of a session's phase, pacing and quiz progress."""
        try:
            return await controller.get_session_state(session_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket endpoint for speed learning sessions.

        Connection lifecycle:
        1. Client connects
        2. Server responds with session.created and session.ready
        3. Client drives the phases with JSON messages (text.submit,
           session.confirm, reading.toggle, quiz.answer, ...)
        4. Server streams display messages (phase.changed, reading.word,
           quiz.question, quiz.report, ...)
        5. On disconnect, server stops all timers and pending requests
        """
        await websocket.accept()

        try:
            await controller.handle_websocket_connection(websocket)
        except Exception as e:
            logger.error(f"Error handling websocket connection: {e}", exc_info=True)

    return app


app = create_app()
