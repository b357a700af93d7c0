import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from pagewiki.dependencies import get_repository
from pagewiki.errors import NotFoundError
from pagewiki.services.repository import PageRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/attachment", summary="Download an attachment")
def download_attachment(
    file_id: str = Query(alias="fileId"),
    repository: PageRepository = Depends(get_repository),
) -> Response:
    """Return the stored bytes with the MIME type the uploader declared.

    The declared type is not verified, so the file is always served as a
    download and browsers are told not to sniff it.
    """
    stored = repository.get_file(file_id)
    if stored is None:
        raise NotFoundError("attachment", file_id)

    info, data = stored
    logger.info("Attachment %s - %s", info.file_id, info.file_name)
    return Response(
        content=data,
        media_type=info.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(info.file_name, safe='')}",
            "X-Content-Type-Options": "nosniff",
        },
    )
