"""
Обработка сообщений WebSocket: createGame, joinGame, joinQueue, leaveQueue, makeMove.
Вся игровая логика в GameHub, здесь только разбор JSON и диспетчеризация.
"""
import json
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .config import get_config
from .hub import GameHub
from .ws_manager import manager

logger = logging.getLogger(__name__)

hub = GameHub(manager, max_name_length=get_config().max_name_length)


async def handle_ws_message(raw: str, connection_id: str, game_hub: GameHub | None = None) -> bool:
    """
    Обрабатывает одно сообщение клиента.
    Возвращает False если соединение нужно закрыть.
    """
    game_hub = game_hub or hub
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("WS: invalid JSON from %s: %s", connection_id, e)
        await game_hub.send_error(connection_id, "Invalid message", "BAD_MESSAGE")
        return True
    if not isinstance(data, dict):
        await game_hub.send_error(connection_id, "Invalid message", "BAD_MESSAGE")
        return True
    t = data.get("type")
    logger.info("WS: msg from %s type=%s", connection_id, t)
    if t == "createGame":
        await game_hub.create_game(connection_id, data.get("name"))
        return True
    if t == "joinGame":
        await game_hub.join_game(connection_id, data.get("gameId"), data.get("name"))
        return True
    if t == "joinQueue":
        await game_hub.join_queue(connection_id, data.get("name"))
        return True
    if t == "leaveQueue":
        await game_hub.leave_queue(connection_id)
        return True
    if t == "makeMove":
        await game_hub.make_move(connection_id, data.get("gameId"), data.get("position"))
        return True
    await game_hub.send_error(connection_id, f"Unknown message type: {t}", "BAD_MESSAGE")
    return True


async def ws_accept_and_loop(ws: WebSocket, game_hub: GameHub | None = None) -> None:
    """
    Принимает соединение, выдаёт ему id и крутит цикл приёма сообщений.
    """
    game_hub = game_hub or hub
    connection_id = None
    try:
        await ws.accept()
        connection_id = manager.connect(ws)
        await game_hub.connect(connection_id)
        logger.info("WS: accepted connection_id=%s", connection_id)
        while True:
            msg = await ws.receive_text()
            if not await handle_ws_message(msg, connection_id, game_hub):
                break
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s reason=%s connection_id=%s", e.code, e.reason or "", connection_id)
    except Exception as e:
        logger.exception("WS: error connection_id=%s: %s", connection_id, e)
    finally:
        if connection_id:
            manager.disconnect(connection_id)
            await game_hub.disconnect(connection_id)
            logger.info("WS: disconnected connection_id=%s", connection_id)
