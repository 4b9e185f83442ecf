from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.errors import NotFoundError
from direct_messaging.models.api.messages import AttachmentPayload
from direct_messaging.repositories.attachment_repository import AttachmentRepository
from direct_messaging.services.membership_service import MembershipService


class DownloadAttachmentService:
    """Serves stored attachments to members of the owning conversation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.attachment_repo = AttachmentRepository(db)
        self.membership_service = MembershipService(db)

    async def download_attachment(
        self, participant_id: int, attachment_id: int
    ) -> AttachmentPayload:
        found = await self.attachment_repo.get_with_conversation(attachment_id)
        if found is None:
            raise NotFoundError("Attachment not found")

        payload, conversation_id = found
        await self.membership_service.ensure_member(participant_id, conversation_id)
        return payload
