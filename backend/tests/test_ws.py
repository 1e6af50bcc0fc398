"""End-to-end checks of the /ws endpoint through starlette's TestClient."""
import pytest
from starlette.testclient import TestClient

from tictactoe import ws_handlers
from tictactoe.hub import GameHub
from tictactoe.main import app
from tictactoe.ws_manager import manager


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(ws_handlers, "hub", GameHub(manager))
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "sessions": 0, "queued": 0}


def test_bad_frames_keep_connection_open(client):
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json()["type"] == "connected"
        ws.send_text("not json")
        assert ws.receive_json()["code"] == "BAD_MESSAGE"
        ws.send_json(["joinQueue"])
        assert ws.receive_json()["code"] == "BAD_MESSAGE"
        ws.send_json({"type": "dance"})
        assert ws.receive_json()["message"] == "Unknown message type: dance"
        ws.send_json({"type": "joinQueue", "name": "Alice"})
        assert ws.receive_json() == {"type": "queueSize", "size": 1}


def test_quick_match_full_game(client):
    with client.websocket_connect("/ws") as ws1, client.websocket_connect("/ws") as ws2:
        id1 = ws1.receive_json()["id"]
        id2 = ws2.receive_json()["id"]
        assert id1 != id2

        ws1.send_json({"type": "joinQueue", "name": "Alice"})
        assert ws1.receive_json() == {"type": "queueSize", "size": 1}
        ws2.send_json({"type": "joinQueue", "name": "Bob"})
        game_id = ws2.receive_json()["gameId"]
        assert ws1.receive_json() == {"type": "gameFound", "gameId": game_id}

        ws1.send_json({"type": "joinGame", "gameId": game_id})
        for ws in (ws1, ws2):
            assert ws.receive_json()["game"]["status"] == "waiting"
        ws2.send_json({"type": "joinGame", "gameId": game_id})
        for ws in (ws1, ws2):
            game = ws.receive_json()["game"]
            assert game["status"] == "playing"
            assert game["currentTurn"] == id1

        ws2.send_json({"type": "makeMove", "gameId": game_id, "position": 0})
        assert ws2.receive_json()["code"] == "NOT_YOUR_TURN"

        moves = [(ws1, 0), (ws2, 4), (ws1, 1), (ws2, 3), (ws1, 2)]
        for mover, position in moves:
            mover.send_json({"type": "makeMove", "gameId": game_id, "position": position})
            update1 = ws1.receive_json()
            update2 = ws2.receive_json()
            assert update1 == update2
        final = update1["game"]
        assert final["status"] == "finished"
        assert final["winner"] == id1
        assert final["board"][:3] == ["X", "X", "X"]


def test_disconnect_forfeit(client):
    with client.websocket_connect("/ws") as ws1:
        id1 = ws1.receive_json()["id"]
        ws1.send_json({"type": "createGame", "name": "Alice"})
        game_id = ws1.receive_json()["game"]["id"]
        ws1.receive_json()  # gameUpdate
        with client.websocket_connect("/ws") as ws2:
            ws2.receive_json()
            ws2.send_json({"type": "joinGame", "gameId": game_id, "name": "Bob"})
            assert ws1.receive_json()["game"]["status"] == "playing"
            ws2.receive_json()
        final = ws1.receive_json()["game"]
        assert final["status"] == "finished"
        assert final["winner"] == id1
