import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.database import get_db
from direct_messaging.dependencies import get_caller_id
from direct_messaging.errors import MessagingError
from direct_messaging.routers.http_errors import to_http_exception
from direct_messaging.services.download_attachment_service import (
    DownloadAttachmentService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Build an attachment Content-Disposition that survives non-ASCII names."""
    cleaned = filename.replace('"', "")
    ascii_name = cleaned.encode("ascii", "ignore").decode("ascii") or "attachment.pdf"
    if ascii_name == cleaned:
        return f'attachment; filename="{cleaned}"'
    return (
        f'attachment; filename="{ascii_name}"; '
        f"filename*=UTF-8''{quote(cleaned)}"
    )


@router.get("/{attachment_id}")
async def download_attachment(
    attachment_id: int,
    caller_id: int = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Download an attachment; only members of its conversation may do so."""
    try:
        service = DownloadAttachmentService(db)
        payload = await service.download_attachment(caller_id, attachment_id)
    except MessagingError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("Unexpected error in download_attachment")
        raise HTTPException(status_code=500, detail="Internal server error")

    return Response(
        content=payload.data,
        media_type=payload.media_type,
        headers={"Content-Disposition": content_disposition(payload.name)},
    )
