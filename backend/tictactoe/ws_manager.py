"""
Менеджер WebSocket: подключения по connection id и отправка событий.
"""
import logging
import uuid
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket, connection_id: str):
        self.ws = ws
        self.connection_id = connection_id


class WSManager:
    def __init__(self):
        self._by_id: dict[str, Connection] = {}

    def connect(self, ws: WebSocket) -> str:
        connection_id = uuid.uuid4().hex
        self._by_id[connection_id] = Connection(ws, connection_id)
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        self._by_id.pop(connection_id, None)

    def __len__(self) -> int:
        return len(self._by_id)

    async def send_to_connection(self, connection_id: str, payload: dict[str, Any]) -> bool:
        conn = self._by_id.get(connection_id)
        if not conn:
            return False
        try:
            await conn.ws.send_json(payload)
            return True
        except Exception as e:
            logger.warning("send_to_connection %s: %s", connection_id, e)
            return False


manager = WSManager()
