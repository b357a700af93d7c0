"""Page routes: listing, display, save (multipart form) and delete.

Write routes answer with 303 redirects to the page to show next, as a form
post would; errors are turned into JSON by the handlers in ``main``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import RedirectResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from pagewiki.config import get_settings
from pagewiki.dependencies import get_repository
from pagewiki.models.page import Page
from pagewiki.models.page_input import PageInput, UploadedFile
from pagewiki.models.response import (
    AttachmentResponse,
    PageListResponse,
    PageResponse,
    PageSummary,
)
from pagewiki.services.normalizer import kebab_to_title, normalize_slug
from pagewiki.services.renderer import (
    attachment_markdown_link,
    attachment_url,
    page_markdown_link,
    page_url,
    render_markdown,
)
from pagewiki.services.repository import PageRepository

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

_WRITE_LIMIT = get_settings().write_rate_limit


@router.get("/", summary="Home page")
def home(repository: PageRepository = Depends(get_repository)) -> RedirectResponse:
    return RedirectResponse(page_url(repository.home_page_name), status_code=307)


@router.get("/new-page", summary="Go to the page for a freshly typed title")
def new_page(page_name: str = Query(default="", alias="pageName")) -> RedirectResponse:
    """Normalise a typed title (``"My First Page"``) to its slug and redirect there."""
    slug = normalize_slug(page_name)
    if not slug:
        logger.warning("Invalid empty page name to add: %r", page_name)
        return RedirectResponse("/", status_code=303)
    return RedirectResponse(page_url(slug), status_code=303)


@router.get("/pages", response_model=PageListResponse, summary="List all pages")
def list_pages(repository: PageRepository = Depends(get_repository)) -> PageListResponse:
    pages = [
        PageSummary(
            id=p.id,
            name=p.name,
            title=kebab_to_title(p.name),
            url=page_url(p.name),
            markdown_link=page_markdown_link(p.name),
            last_modified_utc=p.last_modified_utc,
        )
        for p in repository.list_all()
    ]
    return PageListResponse(pages=pages, total=len(pages))


@router.get("/pages/{page_name}", response_model=PageResponse, summary="Show one page")
def show_page(page_name: str, repository: PageRepository = Depends(get_repository)) -> PageResponse:
    """Return the stored page, or an empty draft to edit when it does not exist yet.

    A draft has ``exists`` set to false and no id; posting its form back to
    the same route creates the page.
    """
    page = _find_page(repository, page_name)
    if page is None:
        logger.info("Page %s does not exist yet; returning an empty draft", page_name)
        return _draft_response(page_name)
    return _page_response(page)


@router.post("/pages/{page_name}", summary="Create or update a page")
@limiter.limit(_WRITE_LIMIT)
def save_page(
    request: Request,
    page_name: str,
    name: str = Form(default=""),
    content: str = Form(default=""),
    page_id: Optional[int] = Form(default=None, alias="id"),
    attachment: Optional[UploadFile] = File(default=None),
    repository: PageRepository = Depends(get_repository),
) -> RedirectResponse:
    """Save the submitted form and redirect to the saved page.

    ``id`` selects the page to update; without it (or for an unknown id) a
    new page is created.  An optional ``attachment`` file is stored with it.
    """
    upload = None
    if attachment is not None and attachment.filename:
        upload = UploadedFile(attachment.filename, attachment.content_type, attachment.file)

    page = repository.save(
        PageInput(name=name, content=content, id=page_id, attachment=upload),
        route_name=page_name,
    )
    return RedirectResponse(page_url(page.name), status_code=303)


@router.post("/delete-page", summary="Delete a page and its attachments")
@limiter.limit(_WRITE_LIMIT)
def delete_page(
    request: Request,
    page_id: Optional[int] = Form(default=None, alias="id"),
    repository: PageRepository = Depends(get_repository),
) -> RedirectResponse:
    if page_id is None:
        logger.warning("Unable to delete page because form id is missing")
        return RedirectResponse("/", status_code=303)

    repository.delete_page(page_id)
    return RedirectResponse("/", status_code=303)


@router.post("/delete-attachment", summary="Delete one attachment of a page")
@limiter.limit(_WRITE_LIMIT)
def delete_attachment(
    request: Request,
    attachment_id: Optional[str] = Form(default=None, alias="id"),
    page_id: Optional[int] = Form(default=None),
    repository: PageRepository = Depends(get_repository),
) -> RedirectResponse:
    if not attachment_id:
        logger.warning("Unable to delete attachment because form id is missing")
        return RedirectResponse("/", status_code=303)
    if page_id is None:
        logger.warning("Unable to delete attachment because form page_id is missing")
        return RedirectResponse("/", status_code=303)

    page = repository.delete_attachment(page_id, attachment_id)
    return RedirectResponse(page_url(page.name), status_code=303)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _find_page(repository: PageRepository, page_name: str) -> Optional[Page]:
    """Look the raw route segment up first, then its slug form.

    Names saved through the form keep punctuation the slug drops, so the raw
    segment must win to keep existing links working.
    """
    page = repository.get(page_name)
    if page is None:
        slug = normalize_slug(page_name)
        if slug and slug != page_name:
            page = repository.get(slug)
    return page


def _draft_response(page_name: str) -> PageResponse:
    return PageResponse(
        id=None,
        name=page_name,
        title=kebab_to_title(page_name),
        content="",
        html="",
        exists=False,
        last_modified_utc=None,
        attachments=[],
    )


def _page_response(page: Page) -> PageResponse:
    return PageResponse(
        id=page.id,
        name=page.name,
        title=kebab_to_title(page.name),
        content=page.content,
        html=render_markdown(page.content),
        last_modified_utc=page.last_modified_utc,
        attachments=[
            AttachmentResponse(
                file_id=a.file_id,
                file_name=a.file_name,
                mime_type=a.mime_type,
                last_modified_utc=a.last_modified_utc,
                url=attachment_url(a.file_id),
                markdown_link=attachment_markdown_link(a),
            )
            for a in page.attachments
        ],
    )
