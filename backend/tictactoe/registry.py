"""Реестр партий (in-memory): id -> GameSession."""
import logging
import threading
import uuid

from .errors import SessionNotFound
from .session import GameSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self):
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create(self, reserved_for: tuple[str, ...] = ()) -> str:
        """reserved_for: только эти игроки могут сесть (пара из очереди)."""
        with self._lock:
            session_id = str(uuid.uuid4())
            while session_id in self._sessions:
                session_id = str(uuid.uuid4())
            self._sessions[session_id] = GameSession(id=session_id, reserved_for=reserved_for)
        logger.info("Registry: created session %s", session_id)
        return session_id

    def get(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound()
        return session

    def find(self, session_id: str | None) -> GameSession | None:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Registry: removed session %s", session_id)
        return removed

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
