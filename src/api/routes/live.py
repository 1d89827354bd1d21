"""
Realtime voice route
WebSocket bridge between one browser and one Gemini Live session.
"""
import asyncio
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from loguru import logger

from flows.errors import FeatureUnavailableError
from services.live_sessions import (
    end_user_turn, forward_audio, is_user_turn_end, live_sessions, open_live_session,
    pump_server_messages
)

router = APIRouter(prefix="/api", tags=["Live"])


async def relay_model_output(session, websocket: WebSocket) -> None:
    try:
        await pump_server_messages(session, websocket.send_json)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Gemini Live stream error: {e}")
        await websocket.send_json({"type": "error", "message": "Gemini API error."})


@router.websocket("/live")
async def live_endpoint(websocket: WebSocket):
    """
    Client frames: binary audio chunks, or {"type": "userTurnEnd"}.
    Server frames: botText, botAudio, turnComplete, error.
    """
    await websocket.accept()
    connection_id = str(uuid.uuid4())

    try:
        async with open_live_session() as session:
            live_sessions.register(connection_id, session)
            pump = asyncio.create_task(relay_model_output(session, websocket))
            try:
                while True:
                    message = await websocket.receive()
                    if message["type"] == "websocket.disconnect":
                        break
                    if message.get("bytes"):
                        await forward_audio(session, message["bytes"])
                    elif message.get("text") and is_user_turn_end(message["text"]):
                        await end_user_turn(session)
            finally:
                pump.cancel()
                await asyncio.gather(pump, return_exceptions=True)
                live_sessions.remove(connection_id)
    except FeatureUnavailableError as e:
        logger.warning(f"Live session refused: {e.message}")
        await websocket.send_json({"type": "error", "message": e.message})
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
    except WebSocketDisconnect:
        logger.info(f"Live client disconnected: {connection_id}")
    except Exception as e:
        logger.error(f"Live session {connection_id} failed: {e}")
        await websocket.send_json({"type": "error", "message": "Gemini API error."})
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
