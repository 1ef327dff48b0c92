"""
Session Manager
Registry of live chat sessions, held in memory only
"""
import asyncio
import logging
from typing import Dict, List, Optional

from app.domain.models.conversation import ChatSession
from app.domain.services.conversation_engine import ConversationEngine

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session id is unknown"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionManager:
    """
    Creates, looks up and ends chat sessions.

    Sessions are discarded when ended; nothing is persisted across
    sessions.
    """

    def __init__(self, engine: ConversationEngine):
        self.engine = engine
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(self, standing_instructions: Optional[str] = None) -> ChatSession:
        """Start a new session through the engine and register it"""
        session = await self.engine.start_session(standing_instructions=standing_instructions)
        async with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"Created session: {session.session_id}")
        return session

    def get_session(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def end_session(self, session_id: str) -> None:
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"Ended session: {session_id} after {session.turn_count} turns")

    def list_sessions(self) -> List[str]:
        return list(self._sessions.keys())

    async def shutdown(self) -> None:
        """Drop all sessions"""
        async with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
        logger.info(f"SessionManager shutdown: discarded {count} sessions")
