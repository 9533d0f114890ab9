"""Registry of open /ws/updates sockets per user, used to hint clients that new notifications exist.

Hints are best-effort: clients still poll /api/notifications, so a lost hint only
delays visibility until the next poll.
"""
import asyncio
import json
import logging
from collections import defaultdict

from fastapi import WebSocket

logger = logging.getLogger(__name__)

DEFERRED_KEY = "deferred_update_hints"


class UpdatesHub:
    """Maps user_id -> open WebSockets for that user (a user may have several tabs)."""

    def __init__(self) -> None:
        self._sockets: defaultdict[int, set[WebSocket]] = defaultdict(set)

    def connect(self, user_id: int, websocket: WebSocket) -> None:
        self._sockets[user_id].add(websocket)

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        sockets = self._sockets.get(user_id)
        if sockets is None:
            return
        sockets.discard(websocket)
        if not sockets:
            del self._sockets[user_id]

    def connected_users(self) -> set[int]:
        return set(self._sockets)

    async def push(self, user_id: int, kind: str) -> None:
        sockets = list(self._sockets.get(user_id, ()))
        if not sockets:
            return
        text = json.dumps({"type": kind})
        for ws in sockets:
            try:
                await ws.send_text(text)
            except Exception:
                logger.debug("dropping closed socket for user %s", user_id)
                self.disconnect(user_id, ws)

    async def push_many(self, user_ids: list[int], kind: str) -> None:
        await asyncio.gather(*[self.push(uid, kind) for uid in set(user_ids)])

    def defer(self, db, user_id: int, kind: str = "notifications") -> None:
        """Queue a hint on the database session; it is sent by flush_deferred once the session commits."""
        db.info.setdefault(DEFERRED_KEY, {}).setdefault(kind, set()).add(user_id)

    async def flush_deferred(self, db) -> None:
        for kind, user_ids in db.info.pop(DEFERRED_KEY, {}).items():
            await self.push_many(list(user_ids), kind)

    def discard_deferred(self, db) -> None:
        db.info.pop(DEFERRED_KEY, None)


updates_hub = UpdatesHub()
