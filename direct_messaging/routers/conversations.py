import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging import config
from direct_messaging.clients.base_directory_client import BaseDirectoryClient
from direct_messaging.database import get_db
from direct_messaging.dependencies import (
    get_caller_id,
    get_directory_client,
    get_notifier,
)
from direct_messaging.errors import MessagingError
from direct_messaging.models.api.conversations import (
    ConversationListItem,
    DirectConversationResponse,
)
from direct_messaging.models.api.messages import MessageResponse
from direct_messaging.realtime.notifier import RealtimeNotifier
from direct_messaging.routers.http_errors import to_http_exception
from direct_messaging.services.attachment_validator import read_upload
from direct_messaging.services.get_conversation_messages_service import (
    GetConversationMessagesService,
)
from direct_messaging.services.get_or_create_direct_service import (
    GetOrCreateDirectService,
)
from direct_messaging.services.hide_conversation_service import (
    HideConversationService,
)
from direct_messaging.services.list_conversations_service import (
    ListConversationsService,
)
from direct_messaging.services.send_message_service import SendMessageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/direct/{other_id}", response_model=DirectConversationResponse)
async def get_or_create_direct(
    other_id: int,
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
) -> DirectConversationResponse:
    """
    Return the caller's direct conversation with another participant,
    creating it on first contact and restoring it if the caller had hidden it.
    """
    try:
        service = GetOrCreateDirectService(db)
        conversation = await service.get_or_create_direct(caller_id, other_id)
        return DirectConversationResponse(conversation_id=conversation.id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error in get_or_create_direct")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=List[ConversationListItem])
async def list_conversations(
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
    directory_client: BaseDirectoryClient = Depends(get_directory_client),
) -> List[ConversationListItem]:
    """List the caller's visible conversations, most recently active first."""
    try:
        service = ListConversationsService(db, directory_client)
        return await service.list_conversations(caller_id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error in list_conversations")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
async def get_conversation_messages(
    conversation_id: int,
    limit: Optional[int] = Query(
        config.MESSAGES_DEFAULT_LIMIT,
        description="Number of latest messages to return (clamped to 1..50)",
    ),
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
) -> List[MessageResponse]:
    """
    Get the latest messages of a conversation, newest first.

    Query parameters:
    - limit: Number of messages (default: 30, clamped to 1..50)
    """
    try:
        service = GetConversationMessagesService(db)
        return await service.get_conversation_messages(
            participant_id=caller_id, conversation_id=conversation_id, limit=limit
        )
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error in get_conversation_messages")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{conversation_id}/messages", response_model=MessageResponse)
async def send_message(
    conversation_id: int,
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
    realtime_notifier: RealtimeNotifier = Depends(get_notifier),
) -> MessageResponse:
    """
    Send a message (multipart form).

    Form fields:
    - content: Message text, optional when a file is attached
    - file: Optional PDF attachment, at most 10 MiB
    """
    try:
        upload = await read_upload(file)
        service = SendMessageService(db, realtime_notifier)
        return await service.send_message(
            sender_id=caller_id,
            conversation_id=conversation_id,
            content=content,
            upload=upload,
        )
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error in send_message")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{conversation_id}", status_code=204)
async def hide_conversation(
    conversation_id: int,
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Hide the conversation from the caller's inbox only."""
    try:
        service = HideConversationService(db)
        await service.hide_conversation(caller_id, conversation_id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error in hide_conversation")
        raise HTTPException(status_code=500, detail="Internal server error")
