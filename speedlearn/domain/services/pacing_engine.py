"""Word pacing engine for the timed reading phase."""

import asyncio
import logging
import math
from typing import Awaitable, Callable, Optional

from ..entities.messages import (
    ErrorOutMessage,
    LoadingMessage,
    OutboundMessage,
    PlaybackMessage,
    TimeRemainingMessage,
    WordMessage,
)
from ..entities.pacing import READING_TIME_BUDGET_SECONDS, PacingState
from ..entities.session import MAX_WORD_DELAY_MS, MIN_WORD_DELAY_MS, SpeedSession
from ..entities.study_material import GenerationResult
from ..entities.websocket_messages import ErrorCode
from ..interfaces.clock import Clock
from ..interfaces.study_assistant import StudyAssistant
from .tasks import cancel_task

logger = logging.getLogger(__name__)

SHORT_WORD_LENGTH = 4
SHORT_WORD_DELAY_FACTOR = 0.5
TIME_TICK_SECONDS = 1.0

GenerationCallback = Callable[[GenerationResult, int], Awaitable[None]]


def tokenize(text: str) -> list[str]:
    """Split ``text`` on runs of whitespace, dropping empty tokens."""
    return text.split()


def effective_delay_ms(word: str, base_delay_ms: float) -> float:
    """Return how long ``word`` stays on screen.

    Words shorter than four characters are shown at double speed, but never
    faster than the minimum delay.
    """
    if len(word) < SHORT_WORD_LENGTH:
        return max(MIN_WORD_DELAY_MS, base_delay_ms * SHORT_WORD_DELAY_FACTOR)
    return base_delay_ms


class WordPacingEngine:
    """
    Reveals the words of the session text one at a time.

    The engine owns two independent timers:
    - the advance timer, which shows the next word after the current word's
      delay and only runs while playing
    - the time ticker, which reports the remaining budget once per second

    Both timers re-check the completion condition (budget spent OR no words
    left). The first time it holds, playback stops, the session's
    ``has_requested_generation`` guard is set and a single generation
    request is sent to the study assistant. Its result is handed to
    ``on_complete`` together with the reading round it belongs to.

    The budget is wall-clock time from ``start()``; pausing does not extend it.
    """

    def __init__(
        self,
        session: SpeedSession,
        assistant: StudyAssistant,
        clock: Clock,
        outbound_queue: "asyncio.Queue[OutboundMessage]",
        on_complete: GenerationCallback,
        *,
        budget_seconds: int = READING_TIME_BUDGET_SECONDS,
    ):
        self.session = session
        self.assistant = assistant
        self.clock = clock
        self.outbound_queue = outbound_queue
        self._on_complete = on_complete

        self.state = PacingState(
            words=tokenize(session.raw_text),
            per_word_delay_ms=session.per_word_delay_ms,
            budget_seconds=budget_seconds,
        )
        self._reading_round = session.reading_round

        self._running = False
        self._advance_task: Optional[asyncio.Task] = None
        self._ticker_task: Optional[asyncio.Task] = None
        self._generation_task: Optional[asyncio.Task] = None

    @property
    def generation_task(self) -> Optional[asyncio.Task]:
        return self._generation_task

    def elapsed_ms(self) -> float:
        return (self.clock.now() - self.state.start_timestamp) * 1000

    def remaining_seconds(self) -> int:
        elapsed_seconds = math.floor(self.elapsed_ms() / 1000)
        return max(0, self.state.budget_seconds - elapsed_seconds)

    def is_complete(self) -> bool:
        return (
            self.elapsed_ms() >= self.state.budget_seconds * 1000
            or self.state.words_exhausted
        )

    async def start(self):
        """Start the timers and show the first word."""
        if self._running:
            logger.warning(f"Pacing engine for session {self.session.id} already running")
            return

        self._running = True
        self.state.start_timestamp = self.clock.now()
        self.state.playing = True

        logger.info(
            f"Reading round {self._reading_round} started for session {self.session.id}: "
            f"{self.state.total_words} words at {self.state.per_word_delay_ms} ms"
        )

        await self._emit_playback()
        await self._emit_time_remaining()
        await self._emit_word()

        self._ticker_task = asyncio.create_task(self._run_time_ticker())
        if not await self.evaluate_completion():
            self._schedule_advance()

    async def stop(self):
        """Stop both timers. A pending generation request keeps running."""
        self._running = False
        self.state.playing = False
        await cancel_task(self._advance_task)
        await cancel_task(self._ticker_task)
        self._advance_task = None
        self._ticker_task = None

    async def close(self):
        """Stop the timers and abandon any pending generation request."""
        await self.stop()
        await cancel_task(self._generation_task)

    # ===== Playback controls =====

    async def pause(self):
        if not self.state.playing:
            return
        self.state.playing = False
        await cancel_task(self._advance_task)
        self._advance_task = None
        logger.info(f"Reading paused at word {self.state.current_index} for session {self.session.id}")
        await self._emit_playback()

    async def resume(self):
        if self.state.playing or not self._running or self.session.has_requested_generation:
            return
        self.state.playing = True
        logger.info(f"Reading resumed at word {self.state.current_index} for session {self.session.id}")
        await self._emit_playback()
        self._schedule_advance()

    async def toggle_playback(self) -> bool:
        """Pause when playing, resume when paused. Returns the new state."""
        if self.state.playing:
            await self.pause()
        else:
            await self.resume()
        return self.state.playing

    async def set_word_delay(self, delay_ms: int):
        """Change the base delay; a pending advance is rescheduled with it.

        Raises:
            ValueError: If ``delay_ms`` is outside [100, 1000].
        """
        if not MIN_WORD_DELAY_MS <= delay_ms <= MAX_WORD_DELAY_MS:
            raise ValueError(
                f"Word delay must be between {MIN_WORD_DELAY_MS} and {MAX_WORD_DELAY_MS} ms, got {delay_ms}"
            )
        self.state.per_word_delay_ms = delay_ms
        self.session.per_word_delay_ms = delay_ms

        if self.state.playing:
            await cancel_task(self._advance_task)
            self._advance_task = None
            self._schedule_advance()

        await self._emit_playback()

    # ===== Completion =====

    async def evaluate_completion(self) -> bool:
        """Trigger the generation request if reading is over.

        Returns:
            True only for the call that issued the request.
        """
        if self.session.has_requested_generation or not self.is_complete():
            return False

        self.session.has_requested_generation = True
        self.state.playing = False
        await cancel_task(self._advance_task)

        reason = "all words shown" if self.state.words_exhausted else "time budget spent"
        logger.info(
            f"Reading round {self._reading_round} complete for session {self.session.id} "
            f"({reason}, {self.state.current_index}/{self.state.total_words} words)"
        )

        await self._emit_playback()
        await self.outbound_queue.put(LoadingMessage(active=True))
        self._generation_task = asyncio.create_task(self._request_generation())
        return True

    async def _request_generation(self):
        try:
            result = await self.assistant.generate(self.session.raw_text)
        except Exception as e:
            logger.error(f"Generation request failed for session {self.session.id}: {e}", exc_info=True)
            await self.outbound_queue.put(
                ErrorOutMessage(ErrorCode.GENERATION_FAILED, "Could not prepare the recap and quiz")
            )
            result = GenerationResult()
        finally:
            await self.outbound_queue.put(LoadingMessage(active=False))

        logger.info(
            f"Received recap and {len(result.questions)} questions for session {self.session.id}"
        )
        await self._on_complete(result, self._reading_round)

    # ===== Timers =====

    def _schedule_advance(self):
        if not self.state.playing or self.session.has_requested_generation:
            return
        if self.state.words_exhausted or self.remaining_seconds() <= 0:
            return

        delay_ms = effective_delay_ms(self.state.current_word, self.state.per_word_delay_ms)
        self._advance_task = asyncio.create_task(self._advance_after(delay_ms / 1000))

    async def _advance_after(self, delay_seconds: float):
        await self.clock.sleep(delay_seconds)

        self.state.current_index += 1
        logger.debug(f"Session {self.session.id}: word {self.state.current_index}/{self.state.total_words}")

        await self._emit_word()
        if not await self.evaluate_completion():
            self._schedule_advance()

    async def _run_time_ticker(self):
        while self._running:
            await self.clock.sleep(TIME_TICK_SECONDS)
            await self._emit_time_remaining()
            if self.session.has_requested_generation:
                break
            if await self.evaluate_completion():
                break

    # ===== Outbound message helpers =====

    async def _emit_word(self):
        if self.state.words_exhausted:
            return
        await self.outbound_queue.put(
            WordMessage(
                word=self.state.current_word,
                index=self.state.current_index,
                total=self.state.total_words,
            )
        )

    async def _emit_time_remaining(self):
        await self.outbound_queue.put(
            TimeRemainingMessage(
                seconds=self.remaining_seconds(),
                budget_seconds=self.state.budget_seconds,
            )
        )

    async def _emit_playback(self):
        await self.outbound_queue.put(
            PlaybackMessage(playing=self.state.playing, word_delay_ms=self.state.per_word_delay_ms)
        )
