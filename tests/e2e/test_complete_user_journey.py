"""
End-to-end tests for the speed learning user journey.

These tests run the FastAPI app in-process and cover:
1. The health, generate, grade and session snapshot endpoints
2. A WebSocket session through every phase: input, confirm, countdown,
   go, reading, recap, quiz and back to input
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from speedlearn.application.api import create_app
from speedlearn.application.config import Settings
from speedlearn.infrastructure.simple_study_assistant import SimpleStudyAssistant

FOX_TEXT = "The quick brown fox jumps"


@pytest.fixture
def fast_settings():
    """Settings with short timers so a full session runs in about two seconds."""
    return Settings(
        _env_file=None,
        countdown_from=1,
        go_hold_seconds=0.1,
        card_flip_seconds=0.05,
        default_word_delay_ms=100,
        quiz_question_count=1,
    )


@pytest.fixture
def assistant():
    return SimpleStudyAssistant(question_count=1)


@pytest.fixture
def client(fast_settings, assistant):
    with TestClient(create_app(fast_settings, study_assistant=assistant)) as test_client:
        yield test_client


def receive_until(websocket, message_type, limit=200):
    """Collect messages up to and including the first one of ``message_type``."""
    received = []
    for _ in range(limit):
        message = websocket.receive_json()
        received.append(message)
        if message["type"] == message_type:
            return received
    raise AssertionError(f"No {message_type} message within {limit} messages")


def close_and_wait(websocket, limit=200):
    """Disconnect and wait until the server has torn the session down and closed."""
    websocket.close()
    for _ in range(limit):
        if websocket.receive()["type"] == "websocket.close":
            return
    raise AssertionError(f"Server did not close within {limit} messages")


class TestHttpEndpoints:
    """Tests for the stateless HTTP endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["providers"]["study_assistant"] == "SimpleStudyAssistant"

    def test_generate(self, client):
        response = client.post("/generate", json={"text": FOX_TEXT})
        assert response.status_code == 200
        data = response.json()
        assert data["summary"] == FOX_TEXT
        assert data["questions"] == [{"question": 'Does the text mention "quick"?', "type": "yesno"}]

    def test_generate_requires_text(self, client):
        response = client.post("/generate", json={})
        assert response.status_code == 422

    def test_grade(self, client):
        response = client.post(
            "/grade",
            json={
                "questions": [
                    {"question": "Is the fox brown?", "userAnswer": "Yes"},
                    {"question": "What does the fox do?", "userAnswer": "Don't know"},
                ],
                "originalText": FOX_TEXT,
            },
        )
        assert response.status_code == 200
        assert response.json() == {
            "gradedAnswers": [
                {"question": "Is the fox brown?", "answer": "Yes", "correct": True},
                {"question": "What does the fox do?", "answer": "Don't know", "correct": False},
            ]
        }

    def test_assistant_failure_is_bad_gateway(self, fast_settings):
        failing = AsyncMock()
        failing.generate.side_effect = RuntimeError("upstream down")
        failing.grade.side_effect = RuntimeError("upstream down")

        with TestClient(create_app(fast_settings, study_assistant=failing)) as client:
            assert client.post("/generate", json={"text": FOX_TEXT}).status_code == 502
            response = client.post("/grade", json={"questions": [], "originalText": FOX_TEXT})
            assert response.status_code == 502

    def test_unknown_session(self, client):
        response = client.get("/sessions/does-not-exist")
        assert response.status_code == 404


class TestWebSocketJourney:
    """A full session over the WebSocket."""

    def test_complete_user_journey(self, client, assistant):
        with client.websocket_connect("/ws") as websocket:
            created = websocket.receive_json()
            assert created["type"] == "session.created"
            session_id = created["session_id"]

            ready = websocket.receive_json()
            assert ready == {"type": "session.ready", "session_id": session_id, "phase": "input"}

            # Input: blank text is refused
            websocket.send_json({"type": "text.submit", "text": "   "})
            assert websocket.receive_json()["type"] == "server_notice"

            # Input -> Confirm
            websocket.send_json({"type": "text.submit", "text": FOX_TEXT})
            confirm = websocket.receive_json()
            assert confirm == {"type": "phase.changed", "phase": "confirm", "text": FOX_TEXT}

            # Confirm -> Countdown -> Go -> Reading
            websocket.send_json({"type": "session.confirm"})
            messages = receive_until(websocket, "recap.ready")

            phases = [m["phase"] for m in messages if m["type"] == "phase.changed"]
            assert phases == ["countdown", "go", "reading", "recap"]
            assert [m["value"] for m in messages if m["type"] == "countdown.tick"] == [1]
            assert [m["cue"] for m in messages if m["type"] == "audio.cue"] == ["beep", "go"]

            words = [m for m in messages if m["type"] == "reading.word"]
            assert [w["word"] for w in words] == FOX_TEXT.split()
            assert {w["total"] for w in words} == {5}

            assert [m["active"] for m in messages if m["type"] == "loading"] == [True, False]
            assert messages[-1]["summary"] == FOX_TEXT
            assert assistant.generate_calls == 1

            snapshot = client.get(f"/sessions/{session_id}").json()
            assert snapshot["phase"] == "recap"
            assert snapshot["connected"] is True

            # Recap -> Quiz
            websocket.send_json({"type": "recap.continue"})
            messages = receive_until(websocket, "quiz.question")
            question = messages[-1]
            assert question["index"] == 0
            assert question["total"] == 1
            assert question["kind"] == "yesno"

            # Answer "Yes" -> grading -> report
            websocket.send_json({"type": "quiz.answer", "answer": "Yes"})
            messages = receive_until(websocket, "quiz.report")
            assert [m["flipping"] for m in messages if m["type"] == "quiz.flip"] == [True, False]
            assert any(m["type"] == "quiz.grading" for m in messages)
            report = messages[-1]
            assert report["correct"] == 1
            assert report["total"] == 1
            assert assistant.grade_calls == 1

            # Finish -> Input, with the previous text offered again
            websocket.send_json({"type": "quiz.finish"})
            back = receive_until(websocket, "phase.changed")[-1]
            assert back == {"type": "phase.changed", "phase": "input", "text": FOX_TEXT}

            snapshot = client.get(f"/sessions/{session_id}").json()
            assert snapshot["phase"] == "input"

            close_and_wait(websocket)

        assert assistant.generate_calls == 1
        assert assistant.grade_calls == 1
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_invalid_messages_are_reported(self, client):
        with client.websocket_connect("/ws") as websocket:
            receive_until(websocket, "session.ready")

            websocket.send_text("not json")
            error = websocket.receive_json()
            assert error["type"] == "error"
            assert error["code"] == "INVALID_MESSAGE"

            websocket.send_json({"type": "does.not.exist"})
            assert websocket.receive_json()["code"] == "INVALID_MESSAGE"

            websocket.send_json({"type": "reading.speed", "word_delay_ms": 5000})
            assert websocket.receive_json()["code"] == "INVALID_SPEED"

            # Still usable afterwards
            websocket.send_json({"type": "text.submit", "text": FOX_TEXT})
            assert websocket.receive_json()["phase"] == "confirm"

            close_and_wait(websocket)

    def test_events_out_of_phase_get_a_notice(self, client):
        with client.websocket_connect("/ws") as websocket:
            receive_until(websocket, "session.ready")

            websocket.send_json({"type": "quiz.answer", "answer": "Yes"})
            notice = websocket.receive_json()
            assert notice["type"] == "server_notice"

            close_and_wait(websocket)
