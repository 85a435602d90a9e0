"""Application layer: FastAPI app, controller and WebSocket handler."""
