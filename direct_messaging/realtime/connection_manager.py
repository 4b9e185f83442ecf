import asyncio
import logging
from typing import Any, Dict, List

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks websocket subscribers per channel.

    Multiple sockets may share a channel (both participants, several tabs).
    """

    def __init__(self) -> None:
        # channel -> List[WebSocket]
        self.channels: Dict[str, List[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, channel: str, websocket: WebSocket) -> None:
        """Accept the socket and bind it to a channel."""
        await websocket.accept()
        async with self._lock:
            self.channels.setdefault(channel, []).append(websocket)
            count = len(self.channels[channel])
        logger.info("Subscriber joined %s (%d connected)", channel, count)

    async def disconnect(self, channel: str, websocket: WebSocket) -> None:
        async with self._lock:
            sockets = self.channels.get(channel)
            if sockets and websocket in sockets:
                sockets.remove(websocket)
            if sockets is not None and not sockets:
                del self.channels[channel]
        logger.info("Subscriber left %s", channel)

    def subscriber_count(self, channel: str) -> int:
        return len(self.channels.get(channel, []))

    async def broadcast(self, channel: str, payload: Dict[str, Any]) -> int:
        """Send a JSON payload to every socket on the channel.

        Returns the number of sockets that accepted the frame. Sockets that
        fail are dropped from the channel.
        """
        async with self._lock:
            sockets = list(self.channels.get(channel, []))

        if not sockets:
            return 0

        results = await asyncio.gather(
            *(self._safe_send(websocket, payload) for websocket in sockets)
        )

        dead = [ws for ws, ok in zip(sockets, results) if not ok]
        for websocket in dead:
            await self.disconnect(channel, websocket)

        return sum(1 for ok in results if ok)

    async def _safe_send(self, websocket: WebSocket, payload: Dict[str, Any]) -> bool:
        try:
            await websocket.send_json(payload)
            return True
        except Exception as e:
            logger.warning("Dropping subscriber after failed send: %s", e)
            return False
