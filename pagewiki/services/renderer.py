"""Markdown to safe HTML, plus the Markdown link snippets offered to editors."""

from urllib.parse import quote

import markdown

from pagewiki.models.page import Attachment
from pagewiki.services.normalizer import kebab_to_title
from pagewiki.services.sanitizer import sanitize_html

# "Advanced" set: tables, footnotes, fenced code, abbreviations, definition
# lists, attribute lists (all in "extra"), auto-links and ~~strikethrough~~.
# nl2br renders soft line breaks as hard ones.
_EXTENSIONS = [
    "extra",
    "sane_lists",
    "nl2br",
    "pymdownx.magiclink",
    "pymdownx.tilde",
]


def render_markdown(text: str) -> str:
    """Convert author Markdown to sanitized HTML ready for display."""
    if not text:
        return ""
    # markdown.markdown builds a fresh converter per call, so this is thread-safe.
    html = markdown.markdown(text, extensions=_EXTENSIONS)
    return sanitize_html(html)


def page_url(name: str) -> str:
    return f"/pages/{quote(name, safe='')}"


def attachment_url(file_id: str) -> str:
    return f"/attachment?fileId={quote(file_id, safe='')}"


def page_markdown_link(name: str) -> str:
    """``[My Page](/pages/my-page)``, ready to paste into another page."""
    return f"[{kebab_to_title(name)}]({page_url(name)})"


def attachment_markdown_link(attachment: Attachment) -> str:
    return f"[{attachment.file_name}]({attachment_url(attachment.file_id)})"
