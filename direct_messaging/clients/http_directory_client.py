import logging
from typing import Any, Dict, Optional

import httpx

from direct_messaging.clients.base_directory_client import BaseDirectoryClient
from direct_messaging.models.api.participants import ParticipantProfile

logger = logging.getLogger(__name__)


class HttpDirectoryClient(BaseDirectoryClient):
    """Participant directory client using httpx."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def get_profile(self, participant_id: int) -> Optional[ParticipantProfile]:
        """Fetch a profile. Directory outages degrade to None instead of failing."""
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.base_url}/participants/{participant_id}", headers=headers
                )
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                data: Dict[str, Any] = response.json()
        except httpx.HTTPError as e:
            logger.warning(
                "Directory lookup for participant %s failed: %s", participant_id, e
            )
            return None

        return self.parse_profile(participant_id, data)

    def parse_profile(
        self, participant_id: int, data: Dict[str, Any]
    ) -> ParticipantProfile:
        """Map the directory's JSON onto ParticipantProfile."""
        return ParticipantProfile(
            id=int(data.get("id", participant_id)),
            display_name=data.get("display_name"),
            role=data.get("role"),
            avatar_url=data.get("avatar_url"),
        )
