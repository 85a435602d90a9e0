import asyncio
import json
import logging

from pydantic import ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from ..domain.entities import OutboundMessage
from ..domain.entities.messages import (
    ErrorOutMessage,
    TimeRemainingMessage,
    WordMessage,
)
from ..domain.entities.websocket_messages import (
    ErrorCode,
    QuizAnswer,
    QuizDontKnow,
    QuizFinish,
    QuizNext,
    QuizPrevious,
    QuizSwipe,
    ReadingSpeed,
    ReadingToggle,
    RecapContinue,
    SessionConfirm,
    TextSubmit,
    client_message_adapter,
)
from ..domain.services import SessionPhaseController
from ..domain.services.tasks import cancel_task

logger = logging.getLogger(__name__)


class WebSocketHandler:

    def __init__(self, phase_controller: SessionPhaseController):
        self._phase_controller = phase_controller

    async def handle_websocket(self, websocket: WebSocket) -> None:
        # Note: websocket.accept() is called by the API endpoint before this
        send_task = asyncio.create_task(self._send_loop(websocket))
        receive_task = asyncio.create_task(self._receive_loop(websocket))
        tasks = (send_task, receive_task)
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                exc = task.exception()
                if exc:
                    raise exc
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected: {websocket.client}")
        except Exception as e:
            logger.error(f"WebSocket error: {e}", exc_info=True)
        finally:
            # Both loops are cancelled before any await so neither outlives the connection
            for task in tasks:
                task.cancel()
            try:
                for task in tasks:
                    await cancel_task(task)
            finally:
                await self._phase_controller.stop()

            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Error closing WebSocket: {e}")
            logger.info(f"WebSocket connection closed: {websocket.client}")

    async def _send_loop(self, websocket: WebSocket) -> None:
        while self._phase_controller.is_running:
            item: OutboundMessage = await self._phase_controller.outbound_queue.get()

            match item:
                case WordMessage() | TimeRemainingMessage():
                    logger.debug(f"_send_loop sending {item.payload.type}")

                case ErrorOutMessage():
                    logger.warning(f"_send_loop sending error {item.code.value}: {item.message}")

                case OutboundMessage():
                    logger.info(f"_send_loop sending {item.payload.type}")

                case _:
                    # Unknown message type
                    raise ValueError(f"Unknown OutboundMessage type: {type(item)}")

            await websocket.send_text(item.payload.model_dump_json())

    async def _receive_loop(self, websocket: WebSocket) -> None:
        """Receive messages from client and forward to the phase controller."""
        while True:
            data = await websocket.receive()

            if data.get("type") == "websocket.disconnect":
                logger.info(f"Client disconnected - received disconnect message: {data}")
                await self._phase_controller.close()
                break

            if data.get("type") == "websocket.receive" and data.get("text") is not None:
                await self._handle_text_frame(data["text"])
            else:
                logger.warning(f"Ignoring non-text WebSocket frame: {list(data.keys())}")

    async def _handle_text_frame(self, text: str) -> None:
        try:
            message = client_message_adapter.validate_python(json.loads(text))
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON message: {e}")
            await self._reject(f"Invalid JSON: {e.msg}")
            return
        except ValidationError as e:
            logger.warning(f"Invalid client message: {e.error_count()} errors")
            await self._reject("Unknown or malformed message")
            return

        await self._handle_control_message(message)

    async def _handle_control_message(self, message) -> None:
        """Forward a parsed client message to the phase controller."""
        controller = self._phase_controller

        match message:
            case TextSubmit():
                await controller.submit_text(message.text)
            case SessionConfirm():
                await controller.confirm()
            case ReadingToggle():
                await controller.toggle_playback()
            case ReadingSpeed():
                await controller.set_word_delay(message.word_delay_ms)
            case RecapContinue():
                await controller.continue_to_quiz()
            case QuizAnswer():
                await controller.answer(message.answer)
            case QuizDontKnow():
                await controller.dont_know()
            case QuizSwipe():
                await controller.swipe(message.start_x, message.end_x)
            case QuizPrevious():
                await controller.previous_question()
            case QuizNext():
                await controller.next_question()
            case QuizFinish():
                await controller.finish_quiz()
            case _:
                logger.warning(f"Unknown control message type: {type(message)}")

    async def _reject(self, text: str) -> None:
        await self._phase_controller.outbound_queue.put(ErrorOutMessage(ErrorCode.INVALID_MESSAGE, text))
