"""Quiz runner for the flashcard quiz phase."""

import asyncio
import logging
from collections import defaultdict, deque
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..entities.messages import (
    CardFlipMessage,
    ErrorOutMessage,
    GradingMessage,
    NoticeMessage,
    OutboundMessage,
    QuestionMessage,
    QuizEmptyMessage,
    ReportMessage,
)
from ..entities.session import SpeedSession
from ..entities.study_material import (
    DONT_KNOW_ANSWER,
    AnswerRecord,
    GradedAnswer,
    Question,
    QuestionKind,
)
from ..entities.websocket_messages import ErrorCode
from ..interfaces.clock import Clock
from ..interfaces.study_assistant import StudyAssistant
from .tasks import cancel_task

logger = logging.getLogger(__name__)

CARD_FLIP_SECONDS = 0.3
SWIPE_THRESHOLD_PX = 75
YES_NO_ANSWERS = ("Yes", "No")


class QuizStatus(str, Enum):
    """Quiz runner status."""

    ANSWERING = "answering"
    GRADING = "grading"
    REPORT = "report"
    EMPTY = "empty"


class QuizRunner:
    """
    Steps the user through the session's questions in order.

    Every answer action appends exactly one AnswerRecord and moves to the
    next question after the card flip. Once every question has a record the
    answers are sent for grading exactly once (guarded by the session's
    ``has_requested_grading`` flag) and the graded report is emitted.

    Earlier questions can be reviewed with ``previous``/``next`` but their
    answers are read-only. ``finish`` fires ``on_done`` once the report (or
    the "No questions found" message) has been shown.
    """

    def __init__(
        self,
        session: SpeedSession,
        assistant: StudyAssistant,
        clock: Clock,
        outbound_queue: "asyncio.Queue[OutboundMessage]",
        on_done: Callable[[], Awaitable[None]],
        *,
        flip_seconds: float = CARD_FLIP_SECONDS,
        swipe_threshold_px: float = SWIPE_THRESHOLD_PX,
    ):
        self.session = session
        self.assistant = assistant
        self.clock = clock
        self.outbound_queue = outbound_queue
        self._on_done = on_done
        self.flip_seconds = flip_seconds
        self.swipe_threshold_px = swipe_threshold_px

        self.questions: list[Question] = list(session.quiz)
        self.original_text = session.raw_text
        self.index = 0
        self.answers: list[AnswerRecord] = []
        self.graded_answers: list[GradedAnswer] = []
        self.status = QuizStatus.ANSWERING
        self.flipping = False

        self._active = False
        self._done = False
        self._flip_task: Optional[asyncio.Task] = None
        self._grading_task: Optional[asyncio.Task] = None

    @property
    def current_question(self) -> Optional[Question]:
        if self.index < len(self.questions):
            return self.questions[self.index]
        return None

    @property
    def grading_task(self) -> Optional[asyncio.Task]:
        return self._grading_task

    async def start(self):
        self._active = True
        if not self.questions:
            self.status = QuizStatus.EMPTY
            logger.warning(f"No questions to ask for session {self.session.id}")
            await self.outbound_queue.put(QuizEmptyMessage())
            return

        logger.info(f"Quiz started for session {self.session.id} with {len(self.questions)} questions")
        await self._emit_question()

    async def stop(self):
        self._active = False
        await cancel_task(self._flip_task)
        await cancel_task(self._grading_task)

    # ===== Answer actions =====

    async def answer(self, answer: str) -> bool:
        """Record an answer to the current question.

        Yes/No questions accept only "Yes" or "No"; free-text answers must
        not be blank. "Don't know" goes through ``dont_know``.
        """
        question = await self._answerable_question()
        if question is None:
            return False

        answer = answer.strip()
        if question.kind == QuestionKind.YES_NO and answer not in YES_NO_ANSWERS:
            await self._emit_notice("Answer Yes, No or Don't know")
            return False
        if question.kind == QuestionKind.FREE_TEXT and not answer:
            await self._emit_notice("Type an answer or choose Don't know")
            return False

        await self._record(AnswerRecord(question=question.text, answer=answer))
        return True

    async def dont_know(self) -> bool:
        question = await self._answerable_question()
        if question is None:
            return False

        await self._record(AnswerRecord(question=question.text, answer=DONT_KNOW_ANSWER, correct=False))
        return True

    async def swipe(self, start_x: float, end_x: float) -> bool:
        """Treat a leftward drag longer than the threshold as "Don't know"."""
        distance = start_x - end_x
        if distance > self.swipe_threshold_px:
            return await self.dont_know()
        logger.debug(f"Ignoring swipe of {distance}px on session {self.session.id}")
        return False

    # ===== Navigation =====

    async def previous(self) -> bool:
        if self.status != QuizStatus.ANSWERING or self.flipping or self.index == 0:
            return False
        self.index -= 1
        await self._emit_question()
        return True

    async def next(self) -> bool:
        # Forward navigation stops at the first unanswered question.
        if self.status != QuizStatus.ANSWERING or self.flipping or self.index >= len(self.answers):
            return False
        self.index += 1
        await self._emit_question()
        return True

    async def finish(self) -> bool:
        """Fire the done callback once the quiz has reached a terminal state."""
        if self._done:
            return False
        if self.status not in (QuizStatus.REPORT, QuizStatus.EMPTY):
            await self._emit_notice("The quiz is not finished yet")
            return False

        self._done = True
        logger.info(f"Quiz finished for session {self.session.id}")
        await self._on_done()
        return True

    # ===== Completion =====

    async def evaluate_completion(self) -> bool:
        """Send the answers for grading once every question has a record.

        Returns:
            True only for the call that issued the request.
        """
        if self.session.has_requested_grading:
            return False
        if not self.questions or len(self.answers) != len(self.questions):
            return False

        self.session.has_requested_grading = True
        self.status = QuizStatus.GRADING
        logger.info(f"Grading {len(self.answers)} answers for session {self.session.id}")

        await self.outbound_queue.put(GradingMessage(answered=len(self.answers)))
        self._grading_task = asyncio.create_task(self._request_grading())
        return True

    async def _request_grading(self):
        # Copies, so the records sent out are not mutated by the grades applied below
        answers = [record.model_copy() for record in self.answers]
        try:
            graded = await self.assistant.grade(answers, self.original_text)
        except Exception as e:
            logger.error(f"Grading request failed for session {self.session.id}: {e}", exc_info=True)
            await self.outbound_queue.put(
                ErrorOutMessage(ErrorCode.GRADING_FAILED, "Could not grade the answers")
            )
            graded = []

        if not self._active:
            logger.warning(f"Discarding grading result for closed quiz on session {self.session.id}")
            return

        self._apply_grades(graded)
        self.graded_answers = self._report_entries()
        self.status = QuizStatus.REPORT
        logger.info(
            f"Session {self.session.id} scored "
            f"{sum(1 for entry in self.graded_answers if entry.correct)}/{len(self.graded_answers)}"
        )
        await self.outbound_queue.put(ReportMessage(graded_answers=self.graded_answers))

    def _apply_grades(self, graded: list[GradedAnswer]):
        # Repeated question texts are matched to their grades in order
        by_question: dict[str, deque[GradedAnswer]] = defaultdict(deque)
        for graded_answer in graded:
            by_question[graded_answer.question].append(graded_answer)

        for record in self.answers:
            pending = by_question.get(record.question)
            graded_answer = pending.popleft() if pending else None
            if record.is_dont_know:
                continue
            if graded_answer is not None:
                record.correct = graded_answer.correct
            else:
                logger.warning(f"No grade returned for '{record.question}' on session {self.session.id}")

    def _report_entries(self) -> list[GradedAnswer]:
        """One entry per question in quiz order; ungraded answers count as incorrect."""
        return [
            GradedAnswer(question=record.question, answer=record.answer, correct=bool(record.correct))
            for record in self.answers
        ]

    # ===== Internal helpers =====

    async def _answerable_question(self) -> Optional[Question]:
        if not self._active or self.status != QuizStatus.ANSWERING:
            await self._emit_notice("No question is waiting for an answer")
            return None
        if self.flipping:
            logger.debug(f"Ignoring answer during card flip on session {self.session.id}")
            return None
        if self.index < len(self.answers):
            await self._emit_notice("This question was already answered")
            return None
        return self.questions[self.index]

    async def _record(self, record: AnswerRecord):
        self.answers.append(record)
        logger.info(
            f"Session {self.session.id}: answer {len(self.answers)}/{len(self.questions)} recorded"
        )
        self.flipping = True
        await self.outbound_queue.put(CardFlipMessage(flipping=True))
        self._flip_task = asyncio.create_task(self._finish_flip())

    async def _finish_flip(self):
        await self.clock.sleep(self.flip_seconds)
        self.flipping = False
        self.index += 1
        await self.outbound_queue.put(CardFlipMessage(flipping=False))

        if await self.evaluate_completion():
            return
        await self._emit_question()

    async def _emit_question(self):
        question = self.current_question
        if question is None:
            return
        recorded = self.answers[self.index] if self.index < len(self.answers) else None
        await self.outbound_queue.put(
            QuestionMessage(
                index=self.index,
                total=len(self.questions),
                question=question.text,
                kind=question.kind,
                recorded_answer=recorded.answer if recorded else None,
                read_only=recorded is not None,
            )
        )

    async def _emit_notice(self, text: str):
        await self.outbound_queue.put(NoticeMessage(text))
