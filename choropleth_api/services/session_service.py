"""Session service for managing binding sessions in memory."""

import logging
import re
from typing import List, Optional

from choropleth.binding.session import BindingSession
from choropleth.config import get_config
from choropleth.utils.lru_cache import LRUCache
from choropleth_api.exceptions import InvalidSessionIdError, SessionNotFoundError

logger = logging.getLogger(__name__)

_SESSION_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


class SessionService:
    """Manages binding sessions in a bounded, least-recently-used store.

    Sessions are never persisted; evicted or deleted sessions are gone.
    """

    def __init__(self, max_sessions: Optional[int] = None):
        """
        Initialize session service.

        Args:
            max_sessions: Maximum number of live sessions (default: configured limit)
        """
        if max_sessions is None:
            max_sessions = get_config().max_sessions
        self._sessions: LRUCache[BindingSession] = LRUCache(max_size=max_sessions)

    def _validate_session_id(self, session_id: str) -> None:
        """
        Validate session ID format.

        Raises:
            InvalidSessionIdError: If session_id contains invalid characters
        """
        if not _SESSION_ID_PATTERN.match(session_id or ""):
            raise InvalidSessionIdError(
                f"Invalid session_id: {session_id}. Only alphanumeric, underscore and hyphen are allowed."
            )

    def create_session(self, title: str = "") -> BindingSession:
        """
        Create and register a new session.

        Args:
            title: Map title

        Returns:
            The new session
        """
        session = BindingSession(title=title)
        evicted = self._sessions.set(session.session_id, session)
        if evicted:
            logger.info(f"Evicted least recently used session {evicted}")
        logger.info(f"Created session {session.session_id}")
        return session

    def get_session(self, session_id: str) -> BindingSession:
        """
        Get a session by ID.

        Raises:
            InvalidSessionIdError: If session_id is malformed
            SessionNotFoundError: If no live session has this ID
        """
        self._validate_session_id(session_id)
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        return session

    def delete_session(self, session_id: str) -> None:
        """
        Delete a session.

        Raises:
            InvalidSessionIdError: If session_id is malformed
            SessionNotFoundError: If no live session has this ID
        """
        self._validate_session_id(session_id)
        if self._sessions.pop(session_id) is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        logger.info(f"Deleted session {session_id}")

    def list_sessions(self) -> List[BindingSession]:
        """Live sessions, most recently used first."""
        return list(reversed(self._sessions.values()))
