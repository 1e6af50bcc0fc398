"""
Граница игрового ядра: по одному методу на входящее событие.
Ошибки GameError превращаются в событие error только для запросившего подключения.
"""
import asyncio
import functools
import logging
from typing import Any, Protocol

from .bindings import ConnectionBindings
from .constants import DEFAULT_MAX_NAME_LENGTH
from .errors import AlreadyInGame, AlreadyQueued, GameError, InvalidPosition, ValidationError
from .pairing import MatchmakingQueue, QueueChange
from .registry import SessionRegistry
from .session import Player

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def send_to_connection(self, connection_id: str, payload: dict[str, Any]) -> bool: ...


def reports_errors(handler):
    """Ловит ошибки обработчика и отправляет error только автору запроса."""

    @functools.wraps(handler)
    async def wrapper(self: "GameHub", connection_id: str, *args, **kwargs):
        try:
            return await handler(self, connection_id, *args, **kwargs)
        except GameError as e:
            logger.info("Rejected %s from %s: %s", handler.__name__, connection_id, e.code)
            await self.send_error(connection_id, e.message, e.code)
        except Exception:
            logger.exception("Unexpected error in %s from %s", handler.__name__, connection_id)
            await self.send_error(connection_id, "Internal server error", "INTERNAL_ERROR")
        return None

    return wrapper


class GameHub:
    def __init__(self, transport: Transport, max_name_length: int = DEFAULT_MAX_NAME_LENGTH):
        self._transport = transport
        self._max_name_length = max_name_length
        self.registry = SessionRegistry()
        self.bindings = ConnectionBindings()
        self.queue = MatchmakingQueue(self.registry, is_in_game=self.is_in_game)
        self._queue_lock = asyncio.Lock()
        self._session_locks: dict[str, asyncio.Lock] = {}

    def is_in_game(self, connection_id: str) -> bool:
        session = self.registry.find(self.bindings.session_of(connection_id))
        return session is not None and session.status != "finished"

    def stats(self) -> dict[str, int]:
        return {"sessions": len(self.registry), "queued": len(self.queue)}

    async def connect(self, connection_id: str) -> None:
        self.bindings.bind(connection_id)
        logger.info("Hub: connected %s", connection_id)
        await self._send(connection_id, {"type": "connected", "id": connection_id})

    async def disconnect(self, connection_id: str) -> None:
        async with self._queue_lock:
            change = self.queue.discard(connection_id)
            if change:
                await self._notify_waiters(change)
        binding = self.bindings.unbind(connection_id)
        logger.info("Hub: disconnected %s", connection_id)
        if not binding or not binding.session_id:
            return
        session = self.registry.find(binding.session_id)
        if session:
            async with self._session_lock(session.id):
                snapshot = session.abandon(connection_id)
                if snapshot:
                    await self._broadcast(session.id, {"type": "gameUpdate", "game": snapshot})
        self._release(binding.session_id)

    @reports_errors
    async def create_game(self, connection_id: str, name: Any) -> None:
        name = self._clean_name(name)
        self._ensure_free(connection_id)
        session = self.registry.get(self.registry.create())
        async with self._session_lock(session.id):
            snapshot = session.join(Player(id=connection_id, name=name))
            self.bindings.set_name(connection_id, name)
            self._attach(connection_id, session.id)
            await self._send(connection_id, {"type": "gameCreated", "game": snapshot})
            await self._broadcast(session.id, {"type": "gameUpdate", "game": snapshot})

    @reports_errors
    async def join_game(self, connection_id: str, game_id: Any, name: Any = None) -> None:
        if not game_id or not isinstance(game_id, str):
            raise ValidationError("Missing game id")
        session = self.registry.get(game_id)
        if name is None:
            binding = self.bindings.get(connection_id)
            name = binding.name if binding else ""
        name = self._clean_name(name)
        if connection_id in self.queue:
            raise AlreadyQueued()
        if self.bindings.session_of(connection_id) != game_id and self.is_in_game(connection_id):
            raise AlreadyInGame()
        async with self._session_lock(session.id):
            snapshot = session.join(Player(id=connection_id, name=name))
            self.bindings.set_name(connection_id, name)
            self._attach(connection_id, session.id)
            await self._broadcast(session.id, {"type": "gameUpdate", "game": snapshot})

    @reports_errors
    async def join_queue(self, connection_id: str, name: Any) -> None:
        name = self._clean_name(name)
        async with self._queue_lock:
            change = self.queue.enqueue(connection_id, name)
            self.bindings.set_name(connection_id, name)
            if change.match:
                match = change.match
                for entry in (match.first, match.second):
                    self._attach(entry.player_id, match.session_id)
                    await self._send(entry.player_id, {"type": "gameFound", "gameId": match.session_id})
            else:
                # Ждущий больше не держит прошлую (законченную) партию
                previous = self.bindings.detach(connection_id)
                if previous:
                    self._release(previous)
            await self._notify_waiters(change)

    @reports_errors
    async def leave_queue(self, connection_id: str) -> None:
        async with self._queue_lock:
            change = self.queue.dequeue(connection_id)
            await self._notify_waiters(change)

    @reports_errors
    async def make_move(self, connection_id: str, game_id: Any, position: Any) -> None:
        if not game_id or not isinstance(game_id, str):
            raise ValidationError("Missing game id")
        if isinstance(position, bool) or not isinstance(position, int):
            raise InvalidPosition()
        session = self.registry.get(game_id)
        async with self._session_lock(session.id):
            snapshot = session.apply_move(connection_id, position)
            await self._broadcast(session.id, {"type": "gameUpdate", "game": snapshot})

    async def send_error(self, connection_id: str, message: str, code: str) -> None:
        await self._send(connection_id, {"type": "error", "message": message, "code": code})

    def _clean_name(self, name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Please enter your name")
        name = name.strip()
        if len(name) > self._max_name_length:
            raise ValidationError(f"Name must be at most {self._max_name_length} characters")
        return name

    def _ensure_free(self, connection_id: str) -> None:
        if connection_id in self.queue:
            raise AlreadyQueued()
        if self.is_in_game(connection_id):
            raise AlreadyInGame()

    def _attach(self, connection_id: str, session_id: str) -> None:
        previous = self.bindings.attach(connection_id, session_id)
        if previous:
            self._release(previous)

    def _release(self, session_id: str) -> None:
        # Партию больше никто не держит: удаляем сразу, без grace period
        if self.bindings.connections_in(session_id):
            return
        self.registry.remove(session_id)
        self._session_locks.pop(session_id, None)

    def _session_lock(self, session_id: str) -> asyncio.Lock:
        return self._session_locks.setdefault(session_id, asyncio.Lock())

    async def _notify_waiters(self, change: QueueChange) -> None:
        for player_id in change.waiting:
            await self._send(player_id, {"type": "queueSize", "size": change.depth})

    async def _broadcast(self, session_id: str, payload: dict[str, Any]) -> None:
        for connection_id in self.bindings.connections_in(session_id):
            await self._send(connection_id, payload)

    async def _send(self, connection_id: str, payload: dict[str, Any]) -> None:
        await self._transport.send_to_connection(connection_id, payload)
