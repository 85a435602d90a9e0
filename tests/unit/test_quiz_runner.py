"""Tests for the flashcard quiz runner."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import drain
from speedlearn.domain.entities import DONT_KNOW_ANSWER, GradedAnswer, Question, SpeedSession
from speedlearn.domain.entities.messages import (
    CardFlipMessage,
    ErrorOutMessage,
    GradingMessage,
    NoticeMessage,
    QuestionMessage,
    QuizEmptyMessage,
    ReportMessage,
)
from speedlearn.domain.entities.websocket_messages import ErrorCode
from speedlearn.domain.services.quiz_runner import QuizRunner, QuizStatus


@pytest.fixture
def session(two_questions):
    return SpeedSession(raw_text="The quick brown fox jumps over the dog", quiz=two_questions)


@pytest.fixture
def outbound():
    return asyncio.Queue()


@pytest.fixture
def on_done():
    return AsyncMock()


@pytest.fixture
def runner(session, mock_assistant, clock, outbound, on_done):
    mock_assistant.grade.return_value = [
        GradedAnswer(question="Is the fox brown?", answer="Yes", correct=True),
        GradedAnswer(question="What does the fox do?", answer="It jumps", correct=True),
    ]
    return QuizRunner(session, mock_assistant, clock, outbound, on_done)


async def answer_all(runner, clock, answers):
    for answer in answers:
        if answer == DONT_KNOW_ANSWER:
            assert await runner.dont_know() is True
        else:
            assert await runner.answer(answer) is True
        await clock.advance(0.3)


class TestAnswering:
    """Tests for recording answers."""

    @pytest.mark.asyncio
    async def test_start_shows_first_question(self, runner, outbound):
        await runner.start()
        message = drain(outbound)[-1]
        assert isinstance(message, QuestionMessage)
        assert (message.index, message.total, message.question) == (0, 2, "Is the fox brown?")
        assert message.read_only is False

    @pytest.mark.asyncio
    async def test_answer_advances_after_flip(self, runner, clock, outbound):
        await runner.start()
        drain(outbound)

        assert await runner.answer("Yes") is True
        assert runner.index == 0
        await clock.advance(0.29)
        assert runner.index == 0
        await clock.advance(0.01)
        assert runner.index == 1

        messages = drain(outbound)
        assert [m.flipping for m in messages if isinstance(m, CardFlipMessage)] == [True, False]
        assert messages[-1].question == "What does the fox do?"

    @pytest.mark.asyncio
    async def test_answers_during_flip_are_ignored(self, runner, clock):
        await runner.start()
        assert await runner.answer("Yes") is True
        assert await runner.answer("No") is False
        assert await runner.dont_know() is False
        await clock.advance(0.3)
        assert len(runner.answers) == 1

    @pytest.mark.asyncio
    async def test_yes_no_rejects_other_answers(self, runner, outbound):
        await runner.start()
        drain(outbound)
        assert await runner.answer("Maybe") is False
        assert runner.answers == []
        assert isinstance(drain(outbound)[-1], NoticeMessage)

    @pytest.mark.asyncio
    async def test_free_text_requires_non_blank_answer(self, runner, clock, outbound):
        await runner.start()
        await answer_all(runner, clock, ["Yes"])
        drain(outbound)

        assert await runner.answer("   ") is False
        assert len(runner.answers) == 1
        assert isinstance(drain(outbound)[-1], NoticeMessage)

        assert await runner.answer("  It jumps ") is True
        assert runner.answers[-1].answer == "It jumps"

    @pytest.mark.asyncio
    async def test_dont_know_presets_incorrect(self, runner):
        await runner.start()
        await runner.dont_know()
        record = runner.answers[0]
        assert record.answer == DONT_KNOW_ANSWER
        assert record.correct is False


class TestSwipe:
    """Tests for the swipe gesture."""

    @pytest.mark.asyncio
    async def test_swipe_left_equals_dont_know(self, session, mock_assistant, clock, on_done):
        by_button = QuizRunner(session.model_copy(), mock_assistant, clock, asyncio.Queue(), on_done)
        by_swipe = QuizRunner(session.model_copy(), mock_assistant, clock, asyncio.Queue(), on_done)
        await by_button.start()
        await by_swipe.start()

        assert await by_button.dont_know() is True
        assert await by_swipe.swipe(300, 200) is True

        assert by_swipe.answers == by_button.answers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start_x,end_x", [(300, 225), (300, 260), (100, 300), (0, 0)])
    async def test_short_or_rightward_swipe_is_ignored(self, runner, start_x, end_x):
        await runner.start()
        assert await runner.swipe(start_x, end_x) is False
        assert runner.answers == []

    @pytest.mark.asyncio
    async def test_threshold_is_configurable(self, session, mock_assistant, clock, outbound, on_done):
        runner = QuizRunner(session, mock_assistant, clock, outbound, on_done, swipe_threshold_px=20)
        await runner.start()
        assert await runner.swipe(100, 75) is True


class TestNavigation:
    """Tests for reviewing earlier questions."""

    @pytest.mark.asyncio
    async def test_previous_shows_recorded_answer_read_only(self, runner, clock, outbound):
        await runner.start()
        await answer_all(runner, clock, ["Yes"])
        drain(outbound)

        assert await runner.previous() is True
        message = drain(outbound)[-1]
        assert message.index == 0
        assert message.recorded_answer == "Yes"
        assert message.read_only is True

    @pytest.mark.asyncio
    async def test_answering_while_reviewing_is_rejected(self, runner, clock, outbound):
        await runner.start()
        await answer_all(runner, clock, ["Yes"])
        await runner.previous()
        drain(outbound)

        assert await runner.answer("No") is False
        assert runner.answers[0].answer == "Yes"
        assert isinstance(drain(outbound)[-1], NoticeMessage)

    @pytest.mark.asyncio
    async def test_next_stops_at_first_unanswered(self, runner, clock):
        await runner.start()
        await answer_all(runner, clock, ["Yes"])
        await runner.previous()

        assert await runner.next() is True
        assert runner.index == 1
        assert await runner.next() is False
        assert runner.index == 1

    @pytest.mark.asyncio
    async def test_previous_at_first_question(self, runner):
        await runner.start()
        assert await runner.previous() is False


class TestGrading:
    """Tests for the one-shot grading request and the report."""

    @pytest.mark.asyncio
    async def test_grading_fires_once_with_records_in_order(self, runner, mock_assistant, clock, outbound):
        await runner.start()
        await answer_all(runner, clock, ["Yes", "It jumps"])

        mock_assistant.grade.assert_awaited_once()
        answers, original_text = mock_assistant.grade.await_args.args
        assert [(a.question, a.answer) for a in answers] == [
            ("Is the fox brown?", "Yes"),
            ("What does the fox do?", "It jumps"),
        ]
        assert original_text == "The quick brown fox jumps over the dog"

        assert await runner.evaluate_completion() is False
        await clock.advance(1)
        mock_assistant.grade.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_report_merges_grades(self, runner, clock, outbound):
        await runner.start()
        await answer_all(runner, clock, ["Yes", "It jumps"])

        messages = drain(outbound)
        assert any(isinstance(m, GradingMessage) for m in messages)
        report = messages[-1]
        assert isinstance(report, ReportMessage)
        assert report.payload.correct == 2
        assert report.payload.total == 2
        assert runner.status == QuizStatus.REPORT
        assert [a.correct for a in runner.answers] == [True, True]

    @pytest.mark.asyncio
    async def test_dont_know_is_never_regraded(self, runner, mock_assistant, clock):
        mock_assistant.grade.return_value = [
            GradedAnswer(question="Is the fox brown?", answer=DONT_KNOW_ANSWER, correct=True),
            GradedAnswer(question="What does the fox do?", answer="It jumps", correct=False),
        ]
        await runner.start()
        await answer_all(runner, clock, [DONT_KNOW_ANSWER, "It jumps"])
        assert [a.correct for a in runner.answers] == [False, False]

    @pytest.mark.asyncio
    async def test_grading_receives_copies(self, runner, mock_assistant, clock):
        await runner.start()
        await answer_all(runner, clock, ["Yes", "It jumps"])
        answers, _ = mock_assistant.grade.await_args.args
        assert all(a.correct is None for a in answers)

    @pytest.mark.asyncio
    async def test_grading_failure_marks_answers_incorrect(self, runner, mock_assistant, clock, outbound):
        mock_assistant.grade.side_effect = RuntimeError("timeout")
        await runner.start()
        await answer_all(runner, clock, ["No", "It jumps"])

        messages = drain(outbound)
        errors = [m for m in messages if isinstance(m, ErrorOutMessage)]
        assert [e.code for e in errors] == [ErrorCode.GRADING_FAILED]
        report = messages[-1]
        assert isinstance(report, ReportMessage)
        assert [(a.question, a.answer, a.correct) for a in report.graded_answers] == [
            ("Is the fox brown?", "No", False),
            ("What does the fox do?", "It jumps", False),
        ]
        assert (report.payload.correct, report.payload.total) == (0, 2)
        assert runner.status == QuizStatus.REPORT

    @pytest.mark.asyncio
    async def test_report_keeps_questions_missing_from_grades(self, runner, mock_assistant, clock, outbound):
        mock_assistant.grade.return_value = [
            GradedAnswer(question="Is the fox brown?", answer="Yes", correct=True),
        ]
        await runner.start()
        await answer_all(runner, clock, ["Yes", DONT_KNOW_ANSWER])

        report = drain(outbound)[-1]
        assert isinstance(report, ReportMessage)
        assert [(a.question, a.answer, a.correct) for a in report.graded_answers] == [
            ("Is the fox brown?", "Yes", True),
            ("What does the fox do?", DONT_KNOW_ANSWER, False),
        ]
        assert (report.payload.correct, report.payload.total) == (1, 2)

    @pytest.mark.asyncio
    async def test_repeated_questions_graded_in_order(self, mock_assistant, clock, outbound, on_done):
        session = SpeedSession(
            raw_text="The fox jumps",
            quiz=[
                Question(question="Does the fox jump?", type="yesno"),
                Question(question="Does the fox jump?", type="yesno"),
            ],
        )
        mock_assistant.grade.return_value = [
            GradedAnswer(question="Does the fox jump?", answer="Yes", correct=True),
            GradedAnswer(question="Does the fox jump?", answer="No", correct=False),
        ]
        runner = QuizRunner(session, mock_assistant, clock, outbound, on_done)
        await runner.start()
        await answer_all(runner, clock, ["Yes", "No"])

        assert [a.correct for a in runner.answers] == [True, False]
        report = drain(outbound)[-1]
        assert (report.payload.correct, report.payload.total) == (1, 2)

    @pytest.mark.asyncio
    async def test_no_answers_after_grading_started(self, runner, clock, outbound):
        await runner.start()
        await answer_all(runner, clock, ["Yes", "It jumps"])
        drain(outbound)
        assert await runner.dont_know() is False
        assert len(runner.answers) == 2


class TestFinish:
    """Tests for leaving the quiz."""

    @pytest.mark.asyncio
    async def test_finish_fires_done_once(self, runner, clock, on_done):
        await runner.start()
        await answer_all(runner, clock, ["Yes", "It jumps"])

        assert await runner.finish() is True
        assert await runner.finish() is False
        on_done.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_finish_before_report_is_rejected(self, runner, on_done, outbound):
        await runner.start()
        drain(outbound)
        assert await runner.finish() is False
        on_done.assert_not_awaited()
        assert isinstance(drain(outbound)[-1], NoticeMessage)

    @pytest.mark.asyncio
    async def test_empty_quiz(self, mock_assistant, clock, outbound, on_done):
        session = SpeedSession(raw_text="text", quiz=[])
        runner = QuizRunner(session, mock_assistant, clock, outbound, on_done)
        await runner.start()

        messages = drain(outbound)
        assert len(messages) == 1
        assert isinstance(messages[0], QuizEmptyMessage)
        assert messages[0].payload.message == "No questions found"
        assert runner.status == QuizStatus.EMPTY

        assert await runner.answer("Yes") is False
        assert await runner.evaluate_completion() is False
        mock_assistant.grade.assert_not_awaited()

        assert await runner.finish() is True
        on_done.assert_awaited_once()
