"""FastAPI dependencies shared by the routers.

Authentication happens upstream; by the time a request reaches this service
the platform gateway has resolved the caller to a stable participant id and
forwards it in the ``X-Participant-Id`` header. Browsers cannot set headers
on websocket handshakes, so subscriptions pass the same id as the
``participant_id`` query parameter.
"""

from fastapi import Header, HTTPException, Query, WebSocketException, status

from direct_messaging import config
from direct_messaging.clients.base_directory_client import BaseDirectoryClient
from direct_messaging.clients.http_directory_client import HttpDirectoryClient
from direct_messaging.clients.static_directory_client import StaticDirectoryClient
from direct_messaging.realtime.notifier import RealtimeNotifier, notifier

INVALID_PARTICIPANT_ID = "Invalid participant id"


def is_valid_participant_id(participant_id: int) -> bool:
    return participant_id > 0


async def get_caller_id(
    x_participant_id: int = Header(..., alias="X-Participant-Id"),
) -> int:
    """Resolve the authenticated participant id."""
    if not is_valid_participant_id(x_participant_id):
        raise HTTPException(status_code=401, detail=INVALID_PARTICIPANT_ID)
    return x_participant_id


async def get_subscriber_id(participant_id: int = Query(...)) -> int:
    """Resolve the participant id of a websocket subscription."""
    if not is_valid_participant_id(participant_id):
        raise WebSocketException(
            code=status.WS_1008_POLICY_VIOLATION, reason=INVALID_PARTICIPANT_ID
        )
    return participant_id


def get_directory_client() -> BaseDirectoryClient:
    """Pick the participant directory client from configuration."""
    if config.DIRECTORY_URL:
        return HttpDirectoryClient(
            base_url=config.DIRECTORY_URL,
            api_key=config.DIRECTORY_API_KEY,
            timeout=config.DIRECTORY_TIMEOUT_SECONDS,
        )
    return StaticDirectoryClient()


def get_notifier() -> RealtimeNotifier:
    return notifier
