"""
Партия крестики-нолики: игроки, поле, очередь хода, статус.
Все проверки и запись под замком сессии, снапшот собирается там же.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Literal

from .board import evaluate
from .constants import BOARD_CELLS, SYMBOLS, Cell, Symbol
from .errors import (
    CellOccupied,
    GameNotActive,
    InvalidPosition,
    NotYourTurn,
    SessionFull,
    StateError,
)

logger = logging.getLogger(__name__)

Status = Literal["waiting", "playing", "finished"]


@dataclass(frozen=True)
class Player:
    """Игрок до посадки за стол, символа ещё нет."""
    id: str
    name: str


@dataclass(frozen=True)
class SeatedPlayer:
    id: str
    name: str
    symbol: Symbol

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "symbol": self.symbol}


@dataclass
class GameSession:
    id: str
    board: list[Cell] = field(default_factory=lambda: [None] * BOARD_CELLS)
    players: list[SeatedPlayer] = field(default_factory=list)
    current_turn: str | None = None
    status: Status = "waiting"
    winner: str | None = None
    reserved_for: tuple[str, ...] = ()
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def player(self, player_id: str) -> SeatedPlayer | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def opponent_of(self, player_id: str) -> SeatedPlayer | None:
        for p in self.players:
            if p.id != player_id:
                return p
        return None

    def join(self, player: Player) -> dict[str, Any]:
        """
        Посадить игрока. Первый получает X, второй O; со вторым партия стартует.
        Возвращает снапшот после изменения.
        """
        with self._lock:
            if self.player(player.id) is not None:
                raise StateError("You have already joined this game")
            if len(self.players) >= 2:
                raise SessionFull()
            if self.reserved_for and player.id not in self.reserved_for:
                raise SessionFull()
            if self.status != "waiting":
                raise GameNotActive()
            symbol = SYMBOLS[len(self.players)]
            self.players.append(SeatedPlayer(id=player.id, name=player.name, symbol=symbol))
            logger.info("Session %s: %s joined as %s", self.id, player.id, symbol)
            if len(self.players) == 2:
                self.status = "playing"
                self.current_turn = self.players[0].id
                logger.info("Session %s: started, %s moves first", self.id, self.current_turn)
            return self._snapshot()

    def apply_move(self, player_id: str, position: int) -> dict[str, Any]:
        """Сделать ход. Любое нарушение: исключение, состояние не меняется."""
        with self._lock:
            if self.status != "playing":
                raise GameNotActive()
            if player_id != self.current_turn:
                raise NotYourTurn()
            if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < BOARD_CELLS:
                raise InvalidPosition()
            if self.board[position] is not None:
                raise CellOccupied()
            mover = self.player(player_id)
            self.board[position] = mover.symbol
            outcome = evaluate(self.board)
            if outcome.is_terminal:
                self._finish(winner=player_id if outcome.state == "won" else None)
                logger.info("Session %s: finished, %s on line %s", self.id, outcome.state, outcome.line)
            else:
                self.current_turn = self.opponent_of(player_id).id
            return self._snapshot()

    def abandon(self, player_id: str) -> dict[str, Any] | None:
        """
        Игрок отключился. В playing победа оставшемуся, в waiting партия закрывается,
        даже если ушедший ещё не сел (пара из очереди). Иначе возвращает None.
        """
        with self._lock:
            if self.status == "finished":
                return None
            if self.status == "playing":
                if self.player(player_id) is None:
                    return None
                self._finish(winner=self.opponent_of(player_id).id)
                logger.info("Session %s: %s left, forfeit to %s", self.id, player_id, self.winner)
            else:
                self._finish(winner=None)
                logger.info("Session %s: closed before start", self.id)
            return self._snapshot()

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return self._snapshot()

    def _finish(self, winner: str | None) -> None:
        self.status = "finished"
        self.winner = winner
        self.current_turn = None

    def _snapshot(self) -> dict[str, Any]:
        # Новые списки/словари: снапшот не связан с живым состоянием
        return {
            "id": self.id,
            "board": list(self.board),
            "players": [p.to_dict() for p in self.players],
            "currentTurn": self.current_turn,
            "status": self.status,
            "winner": self.winner,
        }
