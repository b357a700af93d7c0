"""SQLAlchemy tables of the embedded wiki database.

``pages`` owns its ``attachments`` rows (cascade delete); ``files`` is the blob
store, keyed by the generated attachment id.
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite drops the offset on the way in; put UTC back on the way out."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class Base(DeclarativeBase):
    pass


class PageRecord(Base):
    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # NOCASE makes equality lookups case-insensitive and lets them use the index.
    name: Mapped[str] = mapped_column(String(collation="NOCASE"), index=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_modified_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    attachments: Mapped[List["AttachmentRecord"]] = relationship(
        back_populates="page",
        order_by="AttachmentRecord.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class AttachmentRecord(Base):
    __tablename__ = "attachments"

    file_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    page_id: Mapped[int] = mapped_column(
        ForeignKey("pages.id", ondelete="CASCADE"), index=True, nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    mime_type: Mapped[str] = mapped_column(String, nullable=False)
    last_modified_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    page: Mapped[PageRecord] = relationship(back_populates="attachments")


class FileRecord(Base):
    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    mime_type: Mapped[str] = mapped_column(String, nullable=False)
    length: Mapped[int] = mapped_column(Integer, nullable=False)
    uploaded_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
