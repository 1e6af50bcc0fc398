"""
Очередь пейринга (in-memory, FIFO).
Когда ждущих двое, два самых ранних снимаются атомарно и получают новую партию.
"""
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .errors import AlreadyInGame, AlreadyQueued, NotQueued
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass
class QueueEntry:
    player_id: str
    name: str
    enqueued_at: float = field(default_factory=time.monotonic)


@dataclass
class Match:
    session_id: str
    first: QueueEntry
    second: QueueEntry


@dataclass
class QueueChange:
    """Результат enqueue/dequeue: пара (если собрана) и кому какую длину очереди сообщить."""
    match: Match | None
    depth: int
    waiting: list[str]


class MatchmakingQueue:
    def __init__(self, registry: SessionRegistry, is_in_game: Callable[[str], bool] = lambda _id: False):
        self._registry = registry
        self._is_in_game = is_in_game
        self._entries: list[QueueEntry] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, player_id: str) -> bool:
        return any(e.player_id == player_id for e in self._entries)

    def enqueue(self, player_id: str, name: str) -> QueueChange:
        """
        Добавить в очередь. Проверка, добавление и снятие пары идут одним шагом под замком,
        поэтому два одновременных enqueue не соберут одну и ту же пару дважды.
        """
        with self._lock:
            if any(e.player_id == player_id for e in self._entries):
                raise AlreadyQueued()
            if self._is_in_game(player_id):
                raise AlreadyInGame()
            self._entries.append(QueueEntry(player_id=player_id, name=name))
            logger.info("Queue: %s joined, depth=%d", player_id, len(self._entries))
            match = None
            if len(self._entries) >= 2:
                self._entries.sort(key=lambda e: e.enqueued_at)
                first, second = self._entries.pop(0), self._entries.pop(0)
                session_id = self._registry.create(reserved_for=(first.player_id, second.player_id))
                match = Match(session_id=session_id, first=first, second=second)
                logger.info("Queue: paired %s and %s into %s", first.player_id, second.player_id, session_id)
            return self._change(match)

    def dequeue(self, player_id: str) -> QueueChange:
        with self._lock:
            for i, e in enumerate(self._entries):
                if e.player_id == player_id:
                    self._entries.pop(i)
                    logger.info("Queue: %s left, depth=%d", player_id, len(self._entries))
                    return self._change(None)
        raise NotQueued()

    def discard(self, player_id: str) -> QueueChange | None:
        """Как dequeue, но без ошибки, для отключений."""
        try:
            return self.dequeue(player_id)
        except NotQueued:
            return None

    def _change(self, match: Match | None) -> QueueChange:
        return QueueChange(
            match=match,
            depth=len(self._entries),
            waiting=[e.player_id for e in self._entries],
        )
