from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class AttachmentResponse(BaseModel):
    file_id: str
    file_name: str
    mime_type: str
    last_modified_utc: datetime
    url: str
    markdown_link: str
    """Markdown snippet linking to the download, for pasting into page content."""


class PageSummary(BaseModel):
    id: int
    name: str
    title: str
    url: str
    markdown_link: str
    last_modified_utc: datetime


class PageListResponse(BaseModel):
    pages: List[PageSummary]
    total: int


class PageResponse(BaseModel):
    id: Optional[int]
    name: str
    title: str
    content: str
    html: str
    """Sanitized HTML rendered from ``content``."""
    exists: bool = True
    """False for the empty draft returned for a page that has not been saved yet."""
    last_modified_utc: Optional[datetime]
    attachments: List[AttachmentResponse]
