import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from direct_messaging.database import get_session_factory
from direct_messaging.dependencies import get_subscriber_id
from direct_messaging.errors import ForbiddenError
from direct_messaging.realtime.notifier import channel_for, manager
from direct_messaging.services.membership_service import MembershipService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/conversations/{conversation_id}")
async def conversation_channel(
    websocket: WebSocket,
    conversation_id: int,
    participant_id: int = Depends(get_subscriber_id),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> None:
    """
    Subscribe to created-message pushes of one conversation.

    Only members may subscribe. Frames are hints: on reconnect the client
    reloads the latest messages over HTTP.
    """
    # Short-lived session: the socket may stay open for hours
    async with session_factory() as session:
        try:
            await MembershipService(session).ensure_member(
                participant_id, conversation_id
            )
        except ForbiddenError:
            logger.info(
                "Rejected subscription of %s to conversation %s",
                participant_id,
                conversation_id,
            )
            # 1008: policy violation
            await websocket.close(code=1008)
            return

    channel = channel_for(conversation_id)
    await manager.connect(channel, websocket)
    try:
        while True:
            # Inbound frames are ignored; the loop only detects disconnects
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(channel, websocket)
