from collections import defaultdict
from typing import Any

import pytest

from tictactoe.hub import GameHub


class MockTransport:
    """Transport double: records every payload sent to each connection."""

    def __init__(self):
        self.sent: dict[str, list[dict[str, Any]]] = defaultdict(list)

    async def send_to_connection(self, connection_id: str, payload: dict[str, Any]) -> bool:
        self.sent[connection_id].append(payload)
        return True

    def of_type(self, connection_id: str, message_type: str) -> list[dict[str, Any]]:
        return [m for m in self.sent[connection_id] if m["type"] == message_type]

    def last(self, connection_id: str, message_type: str) -> dict[str, Any]:
        return self.of_type(connection_id, message_type)[-1]

    def error_codes(self, connection_id: str) -> list[str]:
        return [m["code"] for m in self.of_type(connection_id, "error")]


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def hub(transport):
    return GameHub(transport)
