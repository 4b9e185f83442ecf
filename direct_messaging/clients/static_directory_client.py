from typing import Dict, Iterable, Optional

from direct_messaging.clients.base_directory_client import BaseDirectoryClient
from direct_messaging.models.api.participants import ParticipantProfile


class StaticDirectoryClient(BaseDirectoryClient):
    """In-memory directory used when no DIRECTORY_URL is configured."""

    def __init__(self, profiles: Optional[Iterable[ParticipantProfile]] = None):
        self.profiles: Dict[int, ParticipantProfile] = {
            profile.id: profile for profile in profiles or []
        }

    async def get_profile(self, participant_id: int) -> Optional[ParticipantProfile]:
        return self.profiles.get(participant_id)
