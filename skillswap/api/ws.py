"""WebSocket hint channel: tells a connected client to re-poll its notifications."""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from skillswap.auth.jwt import decode_token
from skillswap.services.ws_updates import updates_hub

router = APIRouter(tags=["ws"])


@router.websocket("/ws/updates")
async def updates_ws(websocket: WebSocket):
    """Connect with ?token=JWT. Server pushes { type: 'notifications' } when a new notification is stored."""
    await websocket.accept()
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=4000)
        return
    payload = decode_token(token)
    try:
        user_id = int(payload["sub"]) if payload else None
    except (KeyError, TypeError, ValueError):
        user_id = None
    if user_id is None:
        await websocket.close(code=4001)
        return
    updates_hub.connect(user_id, websocket)
    try:
        while True:
            # client messages are ignored; receiving keeps the disconnect detectable
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        updates_hub.disconnect(user_id, websocket)
