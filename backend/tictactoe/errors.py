"""
Ошибки игрового ядра.
Ядро только бросает их; GameHub ловит на границе и шлёт событие error запросившему.
"""


class GameError(Exception):
    code = "GAME_ERROR"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GameError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class StateError(GameError):
    code = "STATE_ERROR"
    default_message = "Action not allowed right now"


class NotFoundError(GameError, LookupError):
    code = "NOT_FOUND"
    default_message = "Not found"


class ConflictError(GameError):
    code = "CONFLICT"
    default_message = "Conflicting request"


class GameNotActive(StateError):
    code = "GAME_NOT_ACTIVE"
    default_message = "Game is not active"


class SessionFull(StateError):
    code = "SESSION_FULL"
    default_message = "Game is full"


class NotYourTurn(StateError):
    code = "NOT_YOUR_TURN"
    default_message = "Not your turn"


class CellOccupied(StateError):
    code = "CELL_OCCUPIED"
    default_message = "Cell is already occupied"


class InvalidPosition(StateError):
    code = "INVALID_POSITION"
    default_message = "Position must be between 0 and 8"


class SessionNotFound(NotFoundError):
    code = "SESSION_NOT_FOUND"
    default_message = "Game not found"


class NotQueued(NotFoundError):
    code = "NOT_QUEUED"
    default_message = "You are not in the queue"


class AlreadyQueued(ConflictError):
    code = "ALREADY_QUEUED"
    default_message = "You are already in the queue"


class AlreadyInGame(ConflictError):
    code = "ALREADY_IN_GAME"
    default_message = "You are already in a game"
