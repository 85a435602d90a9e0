"""Local in-memory implementation of Session Repository."""

from typing import Dict

from ..domain.entities.session import SpeedSession
from ..domain.interfaces.session_repository import SessionRepository


class LocalSessionRepository(SessionRepository):
    """In-memory session store.

    Sessions are kept while their connection is open; nothing is written to disk.
    """

    def __init__(self):
        self._sessions: Dict[str, SpeedSession] = {}

    async def save_session(self, session: SpeedSession) -> None:
        self._sessions[str(session.id)] = session

    async def get_session(self, session_id: str) -> SpeedSession:
        """Retrieve a session by ID.

        Raises:
            ValueError: If the session is not found.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Session with id {session_id} not found")

        return self._sessions[session_id]

    async def update_session(self, session: SpeedSession) -> None:
        """Replace a stored session.

        Raises:
            ValueError: If the session is not found.
        """
        if str(session.id) not in self._sessions:
            raise ValueError(f"Session with id {session.id} not found")

        self._sessions[str(session.id)] = session

    async def delete_session(self, session_id: str) -> None:
        """Remove a session.

        Raises:
            ValueError: If the session is not found.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Session with id {session_id} not found")

        del self._sessions[session_id]

    async def list_sessions(self) -> list[SpeedSession]:
        return list(self._sessions.values())

    def clear(self) -> None:
        self._sessions.clear()
