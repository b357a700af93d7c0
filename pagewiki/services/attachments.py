"""Blob store for page attachments, keyed by a generated id.

Filename and MIME type are stored as supplied by the uploading client; the
content itself is never inspected.
"""

import logging
import mimetypes
from typing import BinaryIO, Optional, Tuple, Union

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pagewiki.errors import StorageError
from pagewiki.models.page import FileInfo
from pagewiki.models.records import FileRecord, as_utc, utcnow
from pagewiki.services.database import Database

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(file_name: str) -> str:
    """Return the MIME type implied by *file_name*'s extension."""
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or DEFAULT_MIME_TYPE


def _to_info(record: FileRecord) -> FileInfo:
    return FileInfo(
        file_id=record.id,
        file_name=record.file_name,
        mime_type=record.mime_type,
        length=record.length,
        uploaded_utc=as_utc(record.uploaded_utc),
    )


class AttachmentStore:
    """Upload, download and delete attachment blobs.

    Every method accepts an optional *session*: when given, the work joins the
    caller's transaction (the page repository uses this to write a page row and
    its blob atomically); otherwise the store opens its own session.
    """

    def __init__(self, database: Database):
        self._db = database

    def upload(
        self,
        file_id: str,
        file_name: str,
        stream: Union[BinaryIO, bytes],
        mime_type: Optional[str] = None,
        session: Optional[Session] = None,
    ) -> FileInfo:
        data = stream if isinstance(stream, bytes) else stream.read()
        record = FileRecord(
            id=file_id,
            file_name=file_name,
            mime_type=mime_type or guess_mime_type(file_name),
            length=len(data),
            uploaded_utc=utcnow(),
            data=data,
        )
        if session is None:
            with self._db.session("upload file", file_id, write=True) as own:
                own.add(record)
        else:
            session.add(record)
            session.flush()
        logger.info("Stored attachment %s (%s, %d bytes)", file_id, file_name, len(data))
        return _to_info(record)

    def download(self, file_id: str) -> Optional[Tuple[FileInfo, bytes]]:
        """Return ``(metadata, bytes)`` for *file_id*, or None when it does not exist."""
        with self._db.session("download file", file_id) as session:
            record = session.get(FileRecord, file_id)
            if record is None:
                return None
            return _to_info(record), record.data

    def delete(self, file_id: str, session: Optional[Session] = None) -> bool:
        """Delete the blob; False when it was absent or the store refused.

        Inside a caller's session the delete runs in a savepoint, so a failure
        here leaves the rest of the caller's transaction intact.
        """
        if session is None:
            try:
                with self._db.session("delete file", file_id, write=True) as own:
                    return self._delete(own, file_id)
            except StorageError:
                return False

        try:
            with session.begin_nested():
                return self._delete(session, file_id)
        except SQLAlchemyError as exc:
            logger.error("Could not delete attachment %s: %s", file_id, exc)
            return False

    @staticmethod
    def _delete(session: Session, file_id: str) -> bool:
        result = session.execute(delete(FileRecord).where(FileRecord.id == file_id))
        return result.rowcount > 0
