from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    """A file uploaded alongside a page; the bytes live in the file store under ``file_id``."""

    file_id: str
    file_name: str
    mime_type: str
    last_modified_utc: datetime


class Page(BaseModel):
    """Unified internal model representing one wiki page."""

    id: int
    name: str  # canonical slug, never raw user input
    content: str  # raw Markdown as written by the author
    last_modified_utc: datetime
    attachments: List[Attachment] = Field(default_factory=list)


class FileInfo(BaseModel):
    """Metadata kept next to a stored blob."""

    file_id: str
    file_name: str
    mime_type: str
    length: int
    uploaded_utc: datetime
