"""Validation of uploaded message attachments.

Only PDFs up to ATTACHMENT_MAX_BYTES are accepted. A file counts as a PDF
when its declared media type is application/pdf or its name ends in .pdf;
the payload itself is not inspected.
"""

import logging
from typing import Optional

from fastapi import UploadFile

from direct_messaging import config
from direct_messaging.errors import InvalidRequestError, UpstreamIOError
from direct_messaging.models.api.messages import AttachmentUpload

logger = logging.getLogger(__name__)


async def read_upload(
    file: Optional[UploadFile], max_bytes: int = config.ATTACHMENT_MAX_BYTES
) -> Optional[AttachmentUpload]:
    """Read an uploaded file, never buffering more than max_bytes + 1."""
    if file is None:
        return None

    try:
        data = await file.read(max_bytes + 1)
    except Exception as e:
        logger.error("Failed to read upload %r: %s", file.filename, e)
        raise UpstreamIOError("failed to read attachment") from e

    return AttachmentUpload(
        data=data,
        declared_media_type=file.content_type,
        original_name=file.filename,
    )


def looks_like_pdf(
    declared_media_type: Optional[str], original_name: Optional[str]
) -> bool:
    if (declared_media_type or "").lower() == config.PDF_MEDIA_TYPE:
        return True
    return (original_name or "").lower().endswith(".pdf")


def validate_attachment(
    upload: AttachmentUpload, max_bytes: int = config.ATTACHMENT_MAX_BYTES
) -> None:
    """Raise InvalidRequestError naming the first rule the upload breaks."""
    reason = None
    if not upload.data:
        reason = "attachment is empty"
    elif not looks_like_pdf(upload.declared_media_type, upload.original_name):
        reason = "only PDF attachments are allowed"
    elif len(upload.data) > max_bytes:
        reason = f"attachment too large (max {max_bytes // (1024 * 1024)} MiB)"

    if reason:
        logger.info("Rejected attachment %r: %s", upload.original_name, reason)
        raise InvalidRequestError(reason)


def attachment_name(original_name: Optional[str]) -> str:
    """Keep the client's filename, or fall back to a generic one."""
    if original_name and original_name.strip():
        return original_name.strip()
    return config.DEFAULT_ATTACHMENT_NAME
