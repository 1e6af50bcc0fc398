"""Таблица подключений: connection id -> имя игрока и партия, к которой он привязан."""
from dataclasses import dataclass


@dataclass
class Binding:
    connection_id: str
    name: str = ""
    session_id: str | None = None


class ConnectionBindings:
    def __init__(self):
        self._by_connection: dict[str, Binding] = {}

    def bind(self, connection_id: str) -> Binding:
        binding = Binding(connection_id=connection_id)
        self._by_connection[connection_id] = binding
        return binding

    def unbind(self, connection_id: str) -> Binding | None:
        return self._by_connection.pop(connection_id, None)

    def get(self, connection_id: str) -> Binding | None:
        return self._by_connection.get(connection_id)

    def set_name(self, connection_id: str, name: str) -> None:
        binding = self._by_connection.get(connection_id)
        if binding:
            binding.name = name

    def attach(self, connection_id: str, session_id: str) -> str | None:
        """Привязать к партии. Возвращает id прежней партии, если она была другой."""
        binding = self._by_connection.get(connection_id)
        if not binding:
            return None
        previous = binding.session_id
        binding.session_id = session_id
        return previous if previous != session_id else None

    def detach(self, connection_id: str) -> str | None:
        binding = self._by_connection.get(connection_id)
        if not binding:
            return None
        previous, binding.session_id = binding.session_id, None
        return previous

    def session_of(self, connection_id: str) -> str | None:
        binding = self._by_connection.get(connection_id)
        return binding.session_id if binding else None

    def connections_in(self, session_id: str) -> list[str]:
        return [b.connection_id for b in self._by_connection.values() if b.session_id == session_id]

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._by_connection

    def __len__(self) -> int:
        return len(self._by_connection)
