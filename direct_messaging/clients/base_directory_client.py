from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from direct_messaging.models.api.participants import ParticipantProfile


class BaseDirectoryClient(ABC):
    """Abstract base class for participant directory lookups.

    The directory belongs to the wider platform (profiles, roles, avatars);
    the messaging core only reads from it to decorate conversation listings.
    """

    @abstractmethod
    async def get_profile(self, participant_id: int) -> Optional[ParticipantProfile]:
        """Return the participant's profile, or None if the directory has none."""

    async def get_profiles(
        self, participant_ids: Iterable[int]
    ) -> Dict[int, ParticipantProfile]:
        """Resolve several participants; unknown ids are left out of the result."""
        profiles: Dict[int, ParticipantProfile] = {}
        for participant_id in dict.fromkeys(participant_ids):
            profile = await self.get_profile(participant_id)
            if profile is not None:
                profiles[participant_id] = profile
        return profiles
