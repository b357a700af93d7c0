"""Page repository: CRUD over pages and their attachments in the embedded store.

Each call opens its own session (see :mod:`pagewiki.services.database`).
A page row and the blob uploaded with it are written in the same
transaction, so a failed save leaves neither behind.  The full listing is
served from an injected :class:`ListingCache` that every mutation clears.

Page names are not unique at this layer: saves are keyed by id, and when two
pages share a name :meth:`PageRepository.get` returns the older one.
"""

import logging
import uuid
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy import select

from pagewiki.config import HOME_PAGE_NAME, Settings
from pagewiki.errors import NotFoundError, ProtectedPageError, ValidationError
from pagewiki.models.page import Attachment, FileInfo, Page
from pagewiki.models.page_input import PageInput
from pagewiki.models.records import AttachmentRecord, PageRecord, as_utc, utcnow
from pagewiki.services.attachments import AttachmentStore
from pagewiki.services.cache import ListingCache
from pagewiki.services.database import Database
from pagewiki.services.normalizer import normalize_page_name
from pagewiki.services.validator import home_name_message, validate_page_input

logger = logging.getLogger(__name__)


def _to_page(record: PageRecord) -> Page:
    return Page(
        id=record.id,
        name=record.name,
        content=record.content,
        last_modified_utc=as_utc(record.last_modified_utc),
        attachments=[
            Attachment(
                file_id=a.file_id,
                file_name=a.file_name,
                mime_type=a.mime_type,
                last_modified_utc=as_utc(a.last_modified_utc),
            )
            for a in record.attachments
        ],
    )


class PageRepository:
    def __init__(
        self,
        database: Database,
        attachments: Optional[AttachmentStore] = None,
        cache: Optional[ListingCache] = None,
        home_page_name: str = HOME_PAGE_NAME,
    ):
        self._db = database
        self._attachments = attachments or AttachmentStore(database)
        self._cache = cache or ListingCache()
        self.home_page_name = home_page_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "PageRepository":
        """Open (creating if needed) the database under the configured content root."""
        database = Database(settings.database_path, busy_timeout=settings.busy_timeout_seconds)
        database.create_schema()
        return cls(
            database,
            AttachmentStore(database),
            ListingCache(ttl=timedelta(minutes=settings.listing_cache_minutes)),
            home_page_name=settings.home_page_name,
        )

    @property
    def database(self) -> Database:
        return self._db

    def _is_home(self, name: str, home_page_name: Optional[str] = None) -> bool:
        return name.lower() == (home_page_name or self.home_page_name).lower()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self) -> List[Page]:
        """Every page ordered by name, served from the listing cache when fresh."""
        pages = self._cache.get()
        if pages is not None:
            return pages

        with self._db.session("list pages") as session:
            records = session.scalars(select(PageRecord).order_by(PageRecord.name, PageRecord.id))
            pages = [_to_page(r) for r in records]

        self._cache.set(pages)
        return pages

    def get(self, name: str) -> Optional[Page]:
        """Case-insensitive lookup by name, straight from the store."""
        with self._db.session("get page", name) as session:
            record = session.scalars(
                select(PageRecord).where(PageRecord.name == name).order_by(PageRecord.id).limit(1)
            ).first()
            return _to_page(record) if record is not None else None

    def get_file(self, file_id: str) -> Optional[Tuple[FileInfo, bytes]]:
        return self._attachments.download(file_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, page_input: PageInput, route_name: Optional[str] = None) -> Page:
        """Insert or update a page and store its uploaded attachment, if any.

        A page is updated in place when ``page_input.id`` matches a stored
        page, otherwise a new page is inserted.  Raises
        :class:`ValidationError` for empty fields or an attempt to rename the
        home page, and :class:`StorageError` when the store fails.
        """
        validate_page_input(page_input, self.home_page_name, route_name)

        proper_name = normalize_page_name(page_input.name)
        if not proper_name:
            raise ValidationError({"name": ["Name is required"]})

        upload = page_input.attachment
        if upload is not None and not (upload.file_name or "").strip():
            upload = None

        now = utcnow()
        with self._db.session("save page", proper_name, write=True) as session:
            record = session.get(PageRecord, page_input.id) if page_input.id is not None else None

            if record is None:
                record = PageRecord(name=proper_name, content=page_input.content, last_modified_utc=now)
                session.add(record)
            else:
                if self._is_home(record.name) and not self._is_home(proper_name):
                    raise ValidationError({"name": [home_name_message(self.home_page_name)]})
                record.name = proper_name
                record.content = page_input.content
                record.last_modified_utc = now

            if upload is not None:
                file_id = str(uuid.uuid4())
                info = self._attachments.upload(
                    file_id, upload.file_name, upload.stream, mime_type=upload.mime_type, session=session,
                )
                record.attachments.append(
                    AttachmentRecord(
                        file_id=file_id,
                        file_name=info.file_name,
                        mime_type=info.mime_type,
                        last_modified_utc=now,
                    )
                )

            session.flush()
            page = _to_page(record)

        self._cache.invalidate()
        logger.info("Saved page %s (id %s)", page.name, page.id, extra={"page_id": page.id})
        return page

    def delete_page(self, page_id: int, home_page_name: Optional[str] = None) -> None:
        """Delete a page and, best effort, every blob it owns.

        A blob that cannot be deleted is logged and left behind; the page row
        is deleted regardless.  The home page can never be deleted.
        """
        with self._db.session("delete page", page_id, write=True) as session:
            record = session.get(PageRecord, page_id)
            if record is None:
                logger.warning("Delete failed because page id %s cannot be found", page_id)
                raise NotFoundError("page", page_id)

            if self._is_home(record.name, home_page_name):
                logger.warning("Page id %s is the home page and cannot be deleted", page_id)
                raise ProtectedPageError(record.name)

            for attachment in record.attachments:
                if not self._attachments.delete(attachment.file_id, session=session):
                    logger.warning(
                        "Could not delete attachment %s of page id %s; leaving it behind",
                        attachment.file_id, page_id,
                    )

            name = record.name
            session.delete(record)

        self._cache.invalidate()
        logger.info("Deleted page %s (id %s)", name, page_id, extra={"page_id": page_id})

    def delete_attachment(self, page_id: int, attachment_id: str) -> Page:
        """Remove one attachment from a page and delete its blob; return the updated page.

        The blob delete and the page update commit together.
        """
        with self._db.session("delete attachment", attachment_id, write=True) as session:
            record = session.get(PageRecord, page_id)
            if record is None:
                logger.warning(
                    "Delete attachment failed because page id %s cannot be found", page_id,
                )
                raise NotFoundError("page", page_id)

            target = next(
                (a for a in record.attachments if a.file_id.lower() == attachment_id.lower()),
                None,
            )
            if target is None:
                logger.warning("Attachment %s is not on page id %s", attachment_id, page_id)
                raise NotFoundError("attachment", attachment_id, page=_to_page(record))

            if not self._attachments.delete(target.file_id, session=session):
                logger.warning("Could not delete attachment %s of page id %s", attachment_id, page_id)
                raise NotFoundError("attachment", attachment_id, page=_to_page(record))

            record.attachments.remove(target)
            record.attachments.reorder()
            session.flush()
            page = _to_page(record)

        self._cache.invalidate()
        logger.info("Deleted attachment %s from page id %s", attachment_id, page_id)
        return page
