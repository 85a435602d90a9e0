"""Session Repository interface."""

from typing import Protocol

from ..entities.session import SpeedSession


class SessionRepository(Protocol):
    """Protocol defining the interface for session repositories.

    Sessions only live for the lifetime of the process, so the only
    implementation keeps them in memory.
    """

    async def save_session(self, session: SpeedSession) -> None:
        """Save a session to the repository.

        Args:
            session: The session entity to save.
        """
        ...

    async def get_session(self, session_id: str) -> SpeedSession:
        """Retrieve a session by ID from the repository.

        Args:
            session_id: The unique identifier of the session.

        Returns:
            SpeedSession: The session entity.

        Raises:
            ValueError: If the session is not found.
        """
        ...

    async def update_session(self, session: SpeedSession) -> None:
        """Update an existing session in the repository.

        Args:
            session: The session entity to update.

        Raises:
            ValueError: If the session is not found.
        """
        ...

    async def delete_session(self, session_id: str) -> None:
        """Delete a session from the repository.

        Args:
            session_id: The unique identifier of the session to delete.

        Raises:
            ValueError: If the session is not found.
        """
        ...
