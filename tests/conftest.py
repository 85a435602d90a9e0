"""Shared fixtures for the speed learning tests."""

import asyncio
import heapq
from unittest.mock import AsyncMock

import pytest

from speedlearn.domain.entities import GenerationResult, GradedAnswer, Question, QuestionKind


async def settle(rounds: int = 50) -> None:
    """Let every ready task run until the loop goes quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    """Clock whose time only moves when a test advances it.

    ``sleep`` parks the caller until ``advance`` moves time past its
    deadline. Sleepers wake in deadline order, and time is set to each
    deadline before the sleeper resumes, so timer chains behave exactly as
    they would in real time.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._sleepers: list = []
        self._seq = 0

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        deadline = round(self._now + seconds, 6)
        heapq.heappush(self._sleepers, (deadline, self._seq, future))
        self._seq += 1
        await future

    @property
    def pending_sleepers(self) -> int:
        return sum(1 for _, _, future in self._sleepers if not future.done())

    async def advance(self, seconds: float) -> None:
        target = round(self._now + seconds, 6)
        await settle()
        while self._sleepers:
            deadline, _, future = self._sleepers[0]
            if future.done():
                heapq.heappop(self._sleepers)
                continue
            if deadline > target:
                break
            heapq.heappop(self._sleepers)
            self._now = max(self._now, deadline)
            future.set_result(None)
            await settle()
        self._now = target
        await settle()


def drain(queue: asyncio.Queue) -> list:
    """Remove and return everything currently in ``queue``."""
    items = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fox_questions():
    return [Question(question="Is the fox brown?", type="yesno")]


@pytest.fixture
def mock_assistant(fox_questions):
    """Study assistant mock that answers the quick brown fox text."""
    assistant = AsyncMock()
    assistant.generate.return_value = GenerationResult(
        summary="A quick brown fox jumps.",
        questions=fox_questions,
    )
    assistant.grade.return_value = [
        GradedAnswer(question="Is the fox brown?", answer="Yes", correct=True),
    ]
    return assistant


@pytest.fixture
def two_questions():
    return [
        Question(text="Is the fox brown?", kind=QuestionKind.YES_NO),
        Question(text="What does the fox do?", kind=QuestionKind.FREE_TEXT),
    ]
