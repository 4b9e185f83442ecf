"""Best-effort fan-out of created messages to conversation subscribers.

Publishing is fire-and-forget: the send path schedules a task and returns.
Nothing is acknowledged, retried or replayed; a client that missed frames
re-syncs by listing the latest messages.
"""

import asyncio
import logging
from typing import Any, Dict, Set

from direct_messaging.models.api.messages import MessageResponse
from direct_messaging.realtime.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)


def channel_for(conversation_id: int) -> str:
    return f"conversations.{conversation_id}"


class RealtimeNotifier:
    def __init__(self, manager: ConnectionManager):
        self.manager = manager
        self._pending: Set["asyncio.Task[None]"] = set()

    def publish(self, conversation_id: int, message: MessageResponse) -> None:
        """Schedule a broadcast of the created message. Never raises."""
        channel = channel_for(conversation_id)
        try:
            payload = message.model_dump(mode="json")
            task = asyncio.get_running_loop().create_task(
                self._deliver(channel, payload)
            )
        except Exception:
            logger.exception("Could not schedule realtime publish on %s", channel)
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, channel: str, payload: Dict[str, Any]) -> None:
        try:
            delivered = await self.manager.broadcast(channel, payload)
            logger.debug(
                "Published message %s to %d subscriber(s) on %s",
                payload.get("id"),
                delivered,
                channel,
            )
        except Exception:
            logger.exception("Realtime publish on %s failed", channel)

    async def drain(self) -> None:
        """Wait for in-flight publishes (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


# Process-wide instances shared by the send service and the websocket route
manager = ConnectionManager()
notifier = RealtimeNotifier(manager)
