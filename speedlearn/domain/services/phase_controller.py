"""Session phase controller for managing a speed learning session."""

import asyncio
import logging
from typing import Optional

from ..entities.events import (
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
from ..entities.messages import (
    AudioCueMessage,
    CountdownMessage,
    ErrorOutMessage,
    NoticeMessage,
    OutboundMessage,
    PhaseMessage,
    RecapMessage,
    SessionReadyMessage,
)
from ..entities.pacing import READING_TIME_BUDGET_SECONDS
from ..entities.session import MAX_WORD_DELAY_MS, MIN_WORD_DELAY_MS, Phase, SpeedSession
from ..entities.study_material import GenerationResult
from ..entities.websocket_messages import AudioCueKind, ErrorCode
from ..interfaces.clock import Clock
from ..interfaces.study_assistant import StudyAssistant
from .pacing_engine import WordPacingEngine
from .quiz_runner import CARD_FLIP_SECONDS, SWIPE_THRESHOLD_PX, QuizRunner
from .tasks import cancel_task

logger = logging.getLogger(__name__)

COUNTDOWN_FROM = 3
COUNTDOWN_STEP_SECONDS = 1.0
GO_HOLD_SECONDS = 1.0


class SessionPhaseController:
    """
    Per-session service that sequences the phases of a speed learning session.

    input -> confirm -> countdown -> go -> reading -> recap -> quiz -> input

    The controller owns:
    - The session (text, recap, quiz, one-shot guards)
    - The countdown and go timers
    - One WordPacingEngine per reading round and one QuizRunner per quiz
    - The inbound event queue and the outbound display message queue

    Events that do not belong to the current phase are ignored with a
    server notice. The service is unit-testable without sockets.
    """

    def __init__(
        self,
        session: SpeedSession,
        assistant: StudyAssistant,
        clock: Clock,
        *,
        time_budget_seconds: int = READING_TIME_BUDGET_SECONDS,
        countdown_from: int = COUNTDOWN_FROM,
        go_hold_seconds: float = GO_HOLD_SECONDS,
        card_flip_seconds: float = CARD_FLIP_SECONDS,
        swipe_threshold_px: float = SWIPE_THRESHOLD_PX,
    ):
        self.session = session
        self.assistant = assistant
        self.clock = clock

        self.time_budget_seconds = time_budget_seconds
        self.countdown_from = countdown_from
        self.go_hold_seconds = go_hold_seconds
        self.card_flip_seconds = card_flip_seconds
        self.swipe_threshold_px = swipe_threshold_px

        self.inbound_queue: asyncio.Queue[InboundEvent] = asyncio.Queue()
        self.outbound_queue: asyncio.Queue[OutboundMessage] = asyncio.Queue()

        self.engine: Optional[WordPacingEngine] = None
        self.quiz: Optional[QuizRunner] = None

        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._countdown_task: Optional[asyncio.Task] = None

        logger.info(f"SessionPhaseController created for session {session.id}")

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the event loop and emit the session ready message."""
        if self._running:
            logger.warning(f"Controller {self.session.id} already running")
            return

        self._running = True
        self.session.touch()
        self._task = asyncio.create_task(self._process_inbound_events())

        await self.outbound_queue.put(
            SessionReadyMessage(session_id=str(self.session.id), phase=self.session.phase)
        )
        logger.info(f"SessionPhaseController {self.session.id} started")

    async def stop(self):
        """Stop the event loop and cancel every timer and pending request."""
        self._running = False
        await cancel_task(self._countdown_task)
        if self.engine:
            await self.engine.close()
        if self.quiz:
            await self.quiz.stop()
        await cancel_task(self._task)

        logger.info(f"SessionPhaseController {self.session.id} stopped")

    async def _process_inbound_events(self):
        """Main event processing loop."""
        logger.info(f"Event processing started for session {self.session.id}")

        try:
            while self._running:
                try:
                    event = await asyncio.wait_for(self.inbound_queue.get(), timeout=1.0)
                    await self.handle_event(event)
                except asyncio.TimeoutError:
                    continue
                except Exception as e:
                    logger.error(f"Error processing event: {e}", exc_info=True)
                    await self._emit_error(ErrorCode.INTERNAL_ERROR, f"Internal processing error: {str(e)}")
        finally:
            logger.info(f"Event processing ended for session {self.session.id}")

    async def handle_event(self, event: InboundEvent):
        """Route an event to its handler."""
        if isinstance(event, SubmitTextEvent):
            await self._handle_submit_text(event)
        elif isinstance(event, ConfirmEvent):
            await self._handle_confirm()
        elif isinstance(event, TogglePlaybackEvent):
            await self._handle_toggle_playback()
        elif isinstance(event, SetWordDelayEvent):
            await self._handle_set_word_delay(event)
        elif isinstance(event, ContinueToQuizEvent):
            await self._handle_continue_to_quiz()
        elif isinstance(event, (AnswerEvent, DontKnowEvent, SwipeEvent)):
            await self._handle_quiz_answer(event)
        elif isinstance(event, (PreviousQuestionEvent, NextQuestionEvent)):
            await self._handle_quiz_navigation(event)
        elif isinstance(event, FinishQuizEvent):
            await self._handle_finish_quiz()
        elif isinstance(event, CloseEvent):
            await self._handle_close()
        else:
            logger.warning(f"Unknown event type: {type(event)}")

    # ===== Event Handlers =====

    async def _handle_submit_text(self, event: SubmitTextEvent):
        if not await self._expect_phase(Phase.INPUT, "submit text"):
            return
        if not event.text.strip():
            logger.info(f"Ignoring empty text for session {self.session.id}")
            await self._emit_notice("Please enter some text to read")
            return

        self.session.raw_text = event.text
        await self._transition(Phase.CONFIRM)

    async def _handle_confirm(self):
        if not await self._expect_phase(Phase.CONFIRM, "confirm"):
            return
        await self._transition(Phase.COUNTDOWN)

    async def _handle_toggle_playback(self):
        if not await self._expect_phase(Phase.READING, "pause or resume") or self.engine is None:
            return
        await self.engine.toggle_playback()

    async def _handle_set_word_delay(self, event: SetWordDelayEvent):
        delay_ms = event.delay_ms
        if not MIN_WORD_DELAY_MS <= delay_ms <= MAX_WORD_DELAY_MS:
            logger.warning(f"Rejecting word delay {delay_ms} ms for session {self.session.id}")
            await self._emit_error(
                ErrorCode.INVALID_SPEED,
                f"Word delay must be between {MIN_WORD_DELAY_MS} and {MAX_WORD_DELAY_MS} ms",
            )
            return

        if self.session.phase == Phase.READING and self.engine is not None:
            await self.engine.set_word_delay(delay_ms)
        else:
            self.session.per_word_delay_ms = delay_ms
        logger.info(f"Word delay set to {delay_ms} ms for session {self.session.id}")

    async def _handle_continue_to_quiz(self):
        if not await self._expect_phase(Phase.RECAP, "start the quiz"):
            return
        await self._transition(Phase.QUIZ)

    async def _handle_quiz_answer(self, event: InboundEvent):
        if not await self._expect_phase(Phase.QUIZ, "answer") or self.quiz is None:
            return
        if isinstance(event, AnswerEvent):
            await self.quiz.answer(event.answer)
        elif isinstance(event, SwipeEvent):
            await self.quiz.swipe(event.start_x, event.end_x)
        else:
            await self.quiz.dont_know()

    async def _handle_quiz_navigation(self, event: InboundEvent):
        if not await self._expect_phase(Phase.QUIZ, "navigate questions") or self.quiz is None:
            return
        if isinstance(event, PreviousQuestionEvent):
            await self.quiz.previous()
        else:
            await self.quiz.next()

    async def _handle_finish_quiz(self):
        if not await self._expect_phase(Phase.QUIZ, "finish the quiz") or self.quiz is None:
            return
        await self.quiz.finish()

    async def _handle_close(self):
        logger.info(f"Closing session {self.session.id}")
        await self._emit_notice("Session closed")
        await self.stop()

    # ===== Phase machinery =====

    async def _expect_phase(self, phase: Phase, action: str) -> bool:
        if self.session.phase == phase:
            return True
        logger.warning(
            f"Session {self.session.id}: cannot {action} in phase {self.session.phase.value}"
        )
        await self._emit_notice(f"Cannot {action} right now")
        return False

    async def _transition(self, phase: Phase):
        previous = self.session.phase
        await self._exit_phase(previous)

        self.session.phase = phase
        self.session.touch()
        logger.info(f"Session {self.session.id}: {previous.value} -> {phase.value}")

        text = None
        if phase in (Phase.INPUT, Phase.CONFIRM) and self.session.raw_text:
            text = self.session.raw_text
        await self.outbound_queue.put(PhaseMessage(phase=phase, text=text))
        await self._enter_phase(phase)

    async def _exit_phase(self, phase: Phase):
        if phase == Phase.COUNTDOWN:
            self.session.countdown = None
        elif phase == Phase.READING and self.engine is not None:
            await self.engine.stop()
        elif phase == Phase.QUIZ and self.quiz is not None:
            await self.quiz.stop()
            self.quiz = None

    async def _enter_phase(self, phase: Phase):
        if phase == Phase.COUNTDOWN:
            self._countdown_task = asyncio.create_task(self._run_countdown())
        elif phase == Phase.READING:
            await self._start_reading()
        elif phase == Phase.RECAP:
            await self.outbound_queue.put(RecapMessage(summary=self.session.recap))
        elif phase == Phase.QUIZ:
            await self._start_quiz()

    async def _run_countdown(self):
        for value in range(self.countdown_from, 0, -1):
            self.session.countdown = value
            await self.outbound_queue.put(CountdownMessage(value=value))
            await self.outbound_queue.put(AudioCueMessage(cue=AudioCueKind.BEEP))
            await self.clock.sleep(COUNTDOWN_STEP_SECONDS)

        await self._transition(Phase.GO)
        await self.outbound_queue.put(AudioCueMessage(cue=AudioCueKind.GO))
        await self.clock.sleep(self.go_hold_seconds)

        if self.session.phase == Phase.GO:
            await self._transition(Phase.READING)

    async def _start_reading(self):
        # A new round invalidates any generation response still in flight
        self.session.reading_round += 1
        self.session.has_requested_generation = False
        self.session.has_requested_grading = False

        if self.engine is not None:
            await self.engine.close()

        self.engine = WordPacingEngine(
            self.session,
            self.assistant,
            self.clock,
            self.outbound_queue,
            self._on_generation_complete,
            budget_seconds=self.time_budget_seconds,
        )
        await self.engine.start()

    async def _start_quiz(self):
        self.quiz = QuizRunner(
            self.session,
            self.assistant,
            self.clock,
            self.outbound_queue,
            self._on_quiz_done,
            flip_seconds=self.card_flip_seconds,
            swipe_threshold_px=self.swipe_threshold_px,
        )
        await self.quiz.start()

    async def _on_generation_complete(self, result: GenerationResult, reading_round: int):
        if reading_round != self.session.reading_round or self.session.phase != Phase.READING:
            logger.warning(
                f"Discarding stale generation result for session {self.session.id} "
                f"(round {reading_round}, current round {self.session.reading_round}, "
                f"phase {self.session.phase.value})"
            )
            return

        self.session.recap = result.summary
        self.session.quiz = list(result.questions)
        await self._transition(Phase.RECAP)

    async def _on_quiz_done(self):
        await self._transition(Phase.INPUT)

    # ===== Public API methods (called by WebSocket handler) =====

    async def submit_text(self, text: str):
        await self.inbound_queue.put(SubmitTextEvent(text))

    async def confirm(self):
        await self.inbound_queue.put(ConfirmEvent())

    async def toggle_playback(self):
        await self.inbound_queue.put(TogglePlaybackEvent())

    async def set_word_delay(self, delay_ms: int):
        await self.inbound_queue.put(SetWordDelayEvent(delay_ms))

    async def continue_to_quiz(self):
        await self.inbound_queue.put(ContinueToQuizEvent())

    async def answer(self, answer: str):
        await self.inbound_queue.put(AnswerEvent(answer))

    async def dont_know(self):
        await self.inbound_queue.put(DontKnowEvent())

    async def swipe(self, start_x: float, end_x: float):
        await self.inbound_queue.put(SwipeEvent(start_x, end_x))

    async def previous_question(self):
        await self.inbound_queue.put(PreviousQuestionEvent())

    async def next_question(self):
        await self.inbound_queue.put(NextQuestionEvent())

    async def finish_quiz(self):
        await self.inbound_queue.put(FinishQuizEvent())

    async def close(self):
        """Close the session."""
        await self.inbound_queue.put(CloseEvent())

    # ===== Outbound message helpers =====

    async def _emit_notice(self, text: str):
        await self.outbound_queue.put(NoticeMessage(text))

    async def _emit_error(self, code: ErrorCode, text: str):
        await self.outbound_queue.put(ErrorOutMessage(code, text))

    def get_session_state(self) -> dict:
        """Get the current session state as a dictionary.

        Returns:
            Dictionary representation of session state
        """
        state = {
            "session_id": str(self.session.id),
            "phase": self.session.phase.value,
            "countdown": self.session.countdown,
            "word_delay_ms": self.session.per_word_delay_ms,
            "reading_round": self.session.reading_round,
            "word_count": len(self.session.raw_text.split()),
            "recap": self.session.recap,
            "question_count": len(self.session.quiz),
            "has_requested_generation": self.session.has_requested_generation,
            "has_requested_grading": self.session.has_requested_grading,
            "last_activity": self.session.last_activity_at.isoformat(),
        }
        if self.engine is not None and self.session.phase == Phase.READING:
            state["current_word_index"] = self.engine.state.current_index
            state["playing"] = self.engine.state.playing
        if self.quiz is not None:
            state["quiz_index"] = self.quiz.index
            state["quiz_status"] = self.quiz.status.value
            state["answers"] = len(self.quiz.answers)
        return state
